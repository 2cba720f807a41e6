"""
core/executor.py - Deterministic grid executor

Evaluates an independent function over a grid of samples (drafts, heel
angles), sequentially or on a thread pool. Results always come back in grid
order, so parallel and sequential runs return identical values.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TypeVar
import logging

from hydrostab.core.cancellation import CancellationToken, check_cancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class GridExecutor:
    """Maps a per-sample computation over a grid with cancellation checks."""

    def __init__(self, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def map(
        self,
        func: Callable[[T], R],
        samples: Sequence[T],
        cancel_token: Optional[CancellationToken] = None,
        operation: str = "",
    ) -> List[R]:
        """
        Apply func to every sample, preserving order.

        The token is checked before each sample. On cancellation any
        partial results are discarded and OperationCancelledError raised.
        """
        if self._max_workers == 1 or len(samples) < 2:
            return self._map_sequential(func, samples, cancel_token, operation)
        return self._map_parallel(func, samples, cancel_token, operation)

    def _map_sequential(self, func, samples, cancel_token, operation):
        results = []
        for sample in samples:
            check_cancelled(cancel_token, operation)
            results.append(func(sample))
        return results

    def _map_parallel(self, func, samples, cancel_token, operation):
        def guarded(sample):
            check_cancelled(cancel_token, operation)
            return func(sample)

        logger.debug(
            "Evaluating %d samples for %s on %d workers",
            len(samples), operation or "grid", self._max_workers,
        )
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [executor.submit(guarded, s) for s in samples]
            try:
                results = [f.result() for f in futures]
            finally:
                for f in futures:
                    f.cancel()
        check_cancelled(cancel_token, operation)
        return results
