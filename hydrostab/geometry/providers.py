"""
geometry/providers.py - Geometry and loadcase lookup contracts

The calculators never own storage. Vessels and loadcases are fetched by
identifier through these protocols; the in-memory implementations back
the service in tests, the CLI and the HTTP API.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Protocol, runtime_checkable
import logging
import threading

from hydrostab.errors import NotFoundError
from hydrostab.geometry.models import HullGeometry, Loadcase

logger = logging.getLogger("geometry.providers")


@runtime_checkable
class GeometryProvider(Protocol):
    """Looks up hull geometry by vessel identifier."""

    def get_geometry(self, vessel_id: str) -> HullGeometry:
        """Return the geometry or raise NotFoundError."""
        ...


@runtime_checkable
class LoadcaseProvider(Protocol):
    """Looks up loadcases by identifier."""

    def get_loadcase(self, loadcase_id: str) -> Loadcase:
        """Return the loadcase or raise NotFoundError."""
        ...


class InMemoryGeometryProvider:
    """Thread-safe dictionary-backed geometry store."""

    def __init__(self, geometries: Optional[Dict[str, HullGeometry]] = None):
        self._lock = threading.Lock()
        self._geometries: Dict[str, HullGeometry] = dict(geometries or {})

    def add(self, vessel_id: str, geometry: HullGeometry) -> None:
        with self._lock:
            self._geometries[vessel_id] = geometry
        logger.debug(f"Registered geometry {vessel_id} ({len(geometry.stations)} stations)")

    def remove(self, vessel_id: str) -> bool:
        with self._lock:
            return self._geometries.pop(vessel_id, None) is not None

    def get_geometry(self, vessel_id: str) -> HullGeometry:
        with self._lock:
            geometry = self._geometries.get(vessel_id)
        if geometry is None:
            raise NotFoundError("vessel", vessel_id)
        return geometry

    def list_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._geometries)

    def __contains__(self, vessel_id: str) -> bool:
        with self._lock:
            return vessel_id in self._geometries

    def __len__(self) -> int:
        with self._lock:
            return len(self._geometries)


class InMemoryLoadcaseProvider:
    """Thread-safe dictionary-backed loadcase store."""

    def __init__(self, loadcases: Optional[Dict[str, Loadcase]] = None):
        self._lock = threading.Lock()
        self._loadcases: Dict[str, Loadcase] = dict(loadcases or {})

    def add(self, loadcase_id: str, loadcase: Loadcase) -> None:
        with self._lock:
            self._loadcases[loadcase_id] = loadcase

    def remove(self, loadcase_id: str) -> bool:
        with self._lock:
            return self._loadcases.pop(loadcase_id, None) is not None

    def get_loadcase(self, loadcase_id: str) -> Loadcase:
        with self._lock:
            loadcase = self._loadcases.get(loadcase_id)
        if loadcase is None:
            raise NotFoundError("loadcase", loadcase_id)
        return loadcase

    def list_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._loadcases)
