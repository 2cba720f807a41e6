"""
Unit tests for hydrostab/core: precision boundary, cancellation and grid executor
"""

import threading

import pytest

from hydrostab.core.cancellation import CancellationToken, check_cancelled
from hydrostab.core.executor import GridExecutor
from hydrostab.core.precision import round_mapping, to_fixed
from hydrostab.errors import OperationCancelledError


class TestToFixed:

    def test_rounds_to_six_places(self):
        assert to_fixed(1.23456789) == 1.234568
        assert to_fixed(2.0 / 3.0) == 0.666667

    def test_bankers_rounding(self):
        assert to_fixed(0.5, 0) == 0.0
        assert to_fixed(1.5, 0) == 2.0
        assert to_fixed(2.5, 0) == 2.0

    def test_binary_noise_removed(self):
        assert to_fixed(0.1 + 0.2) == 0.3

    def test_negative_zero_normalized(self):
        value = to_fixed(-1e-12)
        assert value == 0.0
        assert str(value) == "0.0"

    def test_passthrough(self):
        assert to_fixed(None) is None
        assert to_fixed(True) is True
        assert to_fixed("abc") == "abc"
        assert to_fixed(float("inf")) == float("inf")

    @pytest.mark.parametrize("value", [8.89e32, -8.89e32, 1.2345678901234568e23, 1e300, -1.7976931348623157e308])
    def test_large_finite_values(self, value):
        assert to_fixed(value) == value

    def test_large_values_in_mapping(self):
        assert round_mapping({"gz": [0.1234567, 8.89e32]}) == {"gz": [0.123457, 8.89e32]}

    def test_round_mapping_recurses(self):
        data = {"a": 1.00000049, "b": [0.1234567, {"c": 2.0000001}], "d": "x", "e": 3}
        assert round_mapping(data) == {"a": 1.0, "b": [0.123457, {"c": 2.0}], "d": "x", "e": 3}


class TestCancellation:

    def test_token_state(self):
        token = CancellationToken()
        assert not token.is_cancelled
        token.cancel("stop")
        assert token.is_cancelled
        assert token.reason == "stop"

    def test_check_cancelled(self):
        check_cancelled(None)
        check_cancelled(CancellationToken())
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError) as exc:
            check_cancelled(token, "gz sweep")
        assert exc.value.message == "Computation cancelled during gz sweep"
        assert exc.value.http_status == 499


class TestGridExecutor:

    def test_sequential_order(self):
        assert GridExecutor().map(lambda x: x * x, [3, 1, 2]) == [9, 1, 4]

    def test_parallel_order(self):
        executor = GridExecutor(max_workers=4)
        samples = list(range(50))
        assert executor.map(lambda x: x * 2, samples) == [x * 2 for x in samples]

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            GridExecutor(0)

    def test_cancel_mid_grid_discards_results(self):
        token = CancellationToken()
        seen = []

        def work(x):
            seen.append(x)
            if x == 2:
                token.cancel("enough")
            return x

        with pytest.raises(OperationCancelledError):
            GridExecutor().map(work, [0, 1, 2, 3, 4], cancel_token=token)
        assert seen == [0, 1, 2]

    def test_parallel_cancel_raises(self):
        token = CancellationToken()
        gate = threading.Event()

        def work(x):
            if x == 0:
                token.cancel()
                gate.set()
            gate.wait(timeout=1.0)
            return x

        with pytest.raises(OperationCancelledError):
            GridExecutor(max_workers=2).map(work, list(range(20)), cancel_token=token)

    def test_exception_propagates(self):
        def work(x):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            GridExecutor(max_workers=2).map(work, [1, 2, 3])
