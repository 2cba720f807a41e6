"""
Unit tests for hydrostab/physics/curves.py
"""

import pytest

from hydrostab.core.cancellation import CancellationToken
from hydrostab.errors import InvalidArgumentError, OperationCancelledError
from hydrostab.geometry.models import Loadcase
from hydrostab.physics.curves import CurvesGenerator, draft_grid
from hydrostab.physics.results import CurveType


class TestDraftGrid:

    def test_endpoints_exact(self):
        grid = draft_grid(0.5, 5.0, 4)
        assert grid == pytest.approx([0.5, 2.0, 3.5, 5.0])
        assert grid[-1] == 5.0

    @pytest.mark.parametrize("lo, hi, n", [(1.0, 1.0, 5), (2.0, 1.0, 5), (0.0, 1.0, 1), (-1.0, 1.0, 5)])
    def test_invalid_ranges(self, lo, hi, n):
        with pytest.raises(InvalidArgumentError):
            draft_grid(lo, hi, n)


class TestCurvesGenerator:

    def setup_method(self):
        self.generator = CurvesGenerator()

    def test_displacement_curve_is_linear_for_barge(self, barge):
        curve = self.generator.generate_curve(barge, CurveType.DISPLACEMENT, 1.0, 5.0, 5)
        assert curve.xs == pytest.approx([1.0, 2.0, 3.0, 4.0, 5.0])
        assert curve.ys == pytest.approx([2000.0 * d * 1025.0 for d in curve.xs])
        assert curve.y_label == "Displacement (kg)"
        assert curve.x_label == "Draft (m)"

    def test_curve_type_accepts_string(self, barge):
        curve = self.generator.generate_curve(barge, "KB", 1.0, 5.0, 3)
        assert curve.curve_type is CurveType.KB
        assert curve.ys == pytest.approx([0.5, 1.5, 2.5])

    def test_several_curves_from_one_pass(self, barge):
        curves = self.generator.generate_curves(barge, ["volume", "bmt", "volume"], 1.0, 5.0, 3)
        assert set(curves) == {CurveType.VOLUME, CurveType.BMT}
        assert curves[CurveType.BMT].ys == pytest.approx([400.0 / (12.0 * d) for d in (1.0, 3.0, 5.0)])

    def test_gm_curve_requires_kg(self, barge):
        with pytest.raises(InvalidArgumentError) as exc:
            self.generator.generate_curve(barge, CurveType.GMT, 1.0, 5.0, 3, Loadcase())
        assert exc.value.param == "loadcase_id"

    def test_gm_curve_skips_dry_draft(self, barge):
        curve = self.generator.generate_curve(barge, CurveType.GMT, 0.0, 4.0, 5, Loadcase(kg=3.0))
        # GM is undefined at zero draft
        assert curve.xs == pytest.approx([1.0, 2.0, 3.0, 4.0])

    def test_unknown_curve_type(self, barge):
        with pytest.raises(InvalidArgumentError) as exc:
            self.generator.generate_curve(barge, "sheer", 1.0, 5.0, 3)
        assert exc.value.param == "curve_type"

    def test_bonjean_not_a_draft_curve(self, barge):
        with pytest.raises(InvalidArgumentError):
            self.generator.generate_curve(barge, CurveType.BONJEAN, 1.0, 5.0, 3)

    def test_empty_curve_list(self, barge):
        with pytest.raises(InvalidArgumentError):
            self.generator.generate_curves(barge, [], 1.0, 5.0, 3)

    def test_cancelled(self, barge):
        token = CancellationToken()
        token.cancel("user abort")
        with pytest.raises(OperationCancelledError) as exc:
            self.generator.generate_curve(barge, CurveType.VOLUME, 1.0, 5.0, 10, cancel_token=token)
        assert "user abort" in exc.value.message

    def test_to_dict(self, barge):
        data = self.generator.generate_curve(barge, CurveType.CB, 1.0, 2.0, 2).to_dict()
        assert data["type"] == "cb"
        assert len(data["points"]) == 2
        assert "station_index" not in data


class TestBonjeanCurves:

    def setup_method(self):
        self.generator = CurvesGenerator()

    def test_one_curve_per_station(self, triangle):
        curves = self.generator.generate_bonjean_curves(triangle)
        assert len(curves) == len(triangle.stations)
        assert [c.station_index for c in curves] == [s.index for s in triangle.stations]
        assert curves[2].station_x == triangle.stations[2].x

    def test_zero_area_at_keel(self, triangle):
        for curve in self.generator.generate_bonjean_curves(triangle):
            assert curve.points[0].x == 0.0
            assert curve.points[0].y == 0.0

    def test_monotone_non_decreasing(self, triangle, wigley):
        for geometry in (triangle, wigley):
            for curve in self.generator.generate_bonjean_curves(geometry):
                ys = curve.ys
                assert all(b >= a for a, b in zip(ys, ys[1:]))

    def test_triangle_areas(self, triangle):
        curve = self.generator.generate_bonjean_curves(triangle)[0]
        # Area of the V up to z: 0.75 z²
        assert curve.ys == pytest.approx([0.75 * z * z for z in curve.xs])
