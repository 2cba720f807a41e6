"""
core/cancellation.py - Cooperative cancellation

Long-running grid computations (curves, GZ angle sweeps, tables) check a
token between iterations. A cancelled computation raises and discards its
partial results.
"""

from __future__ import annotations
from typing import Optional
import threading

from hydrostab.errors import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation flag shared between a caller and a computation."""

    def __init__(self):
        self._event = threading.Event()
        self._reason = ""

    def cancel(self, reason: str = "") -> None:
        self._reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def raise_if_cancelled(self, operation: str = "") -> None:
        if self._event.is_set():
            raise OperationCancelledError(operation=operation, reason=self._reason)


def check_cancelled(token: Optional[CancellationToken], operation: str = "") -> None:
    """Raise OperationCancelledError if the (optional) token has been cancelled."""
    if token is not None:
        token.raise_if_cancelled(operation)
