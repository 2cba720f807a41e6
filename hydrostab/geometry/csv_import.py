"""
geometry/csv_import.py - Offsets table CSV import

Reads the combined offsets format, one row per grid cell:

    station_index,station_x,waterline_index,waterline_z,half_breadth
    0,0.0,0,0.0,4.5
    ...

The header row is required. Blank lines are ignored. Station and waterline
positions may repeat across rows but must agree for the same index.
"""

from __future__ import annotations
from typing import Dict, IO, List, Tuple, Union
import csv
import io
import logging

from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry, Offset, Station, Waterline

logger = logging.getLogger(__name__)

COLUMNS = ("station_index", "station_x", "waterline_index", "waterline_z", "half_breadth")


def parse_offsets_csv(source: Union[str, IO[str]], name: str = "", **particulars) -> HullGeometry:
    """
    Parse a combined offsets CSV into HullGeometry.

    Args:
        source: CSV text or an open text stream
        name: Vessel name for the resulting geometry
        **particulars: Optional lpp, beam, design_draft, depth

    Raises:
        InvalidArgumentError: Missing columns, unparsable values or
            conflicting station/waterline positions (message names the line)
    """
    stream = io.StringIO(source) if isinstance(source, str) else source
    reader = csv.DictReader(stream, skipinitialspace=True)

    header = [h.strip().lower() for h in (reader.fieldnames or [])]
    missing = [c for c in COLUMNS if c not in header]
    if missing:
        raise InvalidArgumentError(
            f"CSV header is missing columns: {', '.join(missing)}",
            param="csv",
            expected=list(COLUMNS),
        )
    reader.fieldnames = header

    station_x: Dict[int, float] = {}
    waterline_z: Dict[int, float] = {}
    offsets: List[Offset] = []

    for row in reader:
        line = reader.line_num
        if all(not (v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        try:
            s_idx = int(row["station_index"])
            x = float(row["station_x"])
            w_idx = int(row["waterline_index"])
            z = float(row["waterline_z"])
            y = float(row["half_breadth"])
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Line {line}: could not parse values ({e})", param="csv", line=line) from e

        _record_position(station_x, s_idx, x, "station", line)
        _record_position(waterline_z, w_idx, z, "waterline", line)
        offsets.append(Offset(station_index=s_idx, waterline_index=w_idx, half_breadth=y))

    if not offsets:
        raise InvalidArgumentError("CSV contains no offset rows", param="csv")

    stations = tuple(Station(index=i, x=x) for i, x in station_x.items())
    waterlines = tuple(Waterline(index=j, z=z) for j, z in waterline_z.items())
    logger.info(f"Imported {len(offsets)} offsets ({len(stations)} stations x {len(waterlines)} waterlines)")

    return HullGeometry(
        stations=stations,
        waterlines=waterlines,
        offsets=tuple(offsets),
        name=name,
        **particulars,
    )


def _record_position(positions: Dict[int, float], index: int, value: float, kind: str, line: int) -> None:
    known = positions.setdefault(index, value)
    if known != value:
        raise InvalidArgumentError(
            f"Line {line}: {kind} {index} given at {value} but earlier at {known}",
            param="csv",
            line=line,
        )


def offsets_to_csv(geometry: HullGeometry) -> str:
    """Write geometry back out in the combined offsets format."""
    xs: Dict[int, float] = {s.index: s.x for s in geometry.stations}
    zs: Dict[int, float] = {w.index: w.z for w in geometry.waterlines}
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(COLUMNS)
    rows: List[Tuple] = sorted(
        (o.station_index, xs.get(o.station_index), o.waterline_index, zs.get(o.waterline_index), o.half_breadth)
        for o in geometry.offsets
    )
    writer.writerows(rows)
    return buffer.getvalue()
