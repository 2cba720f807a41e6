"""
Integration tests: barge stability from offsets to criteria.

A box barge is wall-sided until the deck edge immerses or the bilge
emerges, so both righting-arm methods must reproduce the closed form
there.
"""

import math

import pytest

from hydrostab.geometry.models import Loadcase
from hydrostab.geometry.templates import rectangular_barge
from hydrostab.stability.calculator import StabilityCalculator
from hydrostab.stability.criteria import StabilityCriteriaChecker
from hydrostab.stability.results import StabilityMethod, StabilityRequest


def closed_form_gz(angle, gm, bm):
    phi = math.radians(angle)
    return math.sin(phi) * (gm + 0.5 * bm * math.tan(phi) ** 2)


class TestBargeStability:
    """Barge 100 x 20 x 5 m, depth 10 m, KG 8 m: GMt = 1.1667 m."""

    def setup_method(self):
        self.geometry = rectangular_barge(length=100.0, beam=20.0, draft=5.0)
        self.calculator = StabilityCalculator()
        self.loadcase = Loadcase(kg=8.0)
        self.bm = 400.0 / 60.0
        self.gm = 2.5 + self.bm - 8.0

    def _curve(self, method, max_angle=90.0, increment=1.0):
        request = StabilityRequest(max_angle=max_angle, angle_increment=increment, method=method)
        return self.calculator.compute_gz_curve(self.geometry, self.loadcase, request)

    @pytest.mark.parametrize("method", list(StabilityMethod))
    def test_small_angles_match_closed_form(self, method):
        curve = self._curve(method, max_angle=5.0)
        for point in curve.points[1:]:
            expected = closed_form_gz(point.heel_angle, self.gm, self.bm)
            assert point.gz == pytest.approx(expected, rel=0.01)

    def test_box_sin_cos_form_only_at_small_angles(self):
        # KG = KB makes GMt = BMt = B² / 12T
        request = StabilityRequest(max_angle=45.0, angle_increment=5.0, method="WallSided")
        curve = self.calculator.compute_gz_curve(self.geometry, Loadcase(kg=2.5), request)
        assert curve.initial_gmt == pytest.approx(self.bm)
        for point in curve.points[1:]:
            phi = math.radians(point.heel_angle)
            sin_cos = self.bm * math.sin(phi) * math.cos(phi)
            ratio = (1.0 + 0.5 * math.tan(phi) ** 2) / math.cos(phi)
            assert point.gz == pytest.approx(sin_cos * ratio, rel=1e-9)
            if point.heel_angle <= 5.0:
                assert point.gz == pytest.approx(sin_cos, rel=0.01)
            else:
                assert point.gz > 1.01 * sin_cos

    def test_box_sin_cos_divergence_values(self):
        request = StabilityRequest(max_angle=45.0, angle_increment=15.0, method="WallSided")
        curve = self.calculator.compute_gz_curve(self.geometry, Loadcase(kg=2.5), request)
        gz = {p.heel_angle: p.gz for p in curve.points}
        assert gz[15.0] == pytest.approx(1.787, abs=1e-3)
        assert gz[30.0] == pytest.approx(3.889, abs=1e-3)
        assert gz[45.0] == pytest.approx(7.071, abs=1e-3)

    def test_initial_slope_is_gm(self):
        curve = self._curve(StabilityMethod.FULL_IMMERSION, max_angle=1.0, increment=0.25)
        slope = curve.points[1].gz / math.radians(0.25)
        assert slope == pytest.approx(self.gm, rel=0.01)
        assert curve.initial_gmt == pytest.approx(self.gm)

    def test_methods_diverge_after_deck_edge(self):
        wall = self._curve(StabilityMethod.WALL_SIDED, max_angle=50.0, increment=10.0)
        full = self._curve(StabilityMethod.FULL_IMMERSION, max_angle=50.0, increment=10.0)
        # Identical to 20°, deck edge immerses at 26.6°
        for w, f in zip(wall.points[:3], full.points[:3]):
            assert f.gz == pytest.approx(w.gz, abs=1e-4)
        assert full.points[-1].gz < wall.points[-1].gz

    def test_full_range_curve(self):
        curve = self._curve(StabilityMethod.FULL_IMMERSION, max_angle=180.0, increment=5.0)
        assert curve.points[0].gz == pytest.approx(0.0, abs=1e-9)
        assert 0.0 < curve.angle_at_max_gz < 90.0
        assert curve.angle_of_vanishing_stability is not None
        assert curve.angle_at_max_gz < curve.angle_of_vanishing_stability < 180.0
        assert curve.warnings == []

    def test_criteria_on_full_immersion_curve(self):
        curve = self._curve(StabilityMethod.FULL_IMMERSION, max_angle=60.0, increment=1.0)
        result = StabilityCriteriaChecker().check_criteria(curve)
        by_name = {c.name: c for c in result.criteria}
        assert by_name["Initial metacentric height (GMt)"].passed
        assert by_name["Area under GZ curve (0° to 30°)"].passed
        assert result.all_criteria_passed == all(c.passed for c in result.criteria)

    def test_unstable_loading(self):
        request = StabilityRequest(max_angle=30.0, angle_increment=5.0, method="FullImmersion")
        curve = self.calculator.compute_gz_curve(self.geometry, Loadcase(kg=12.0), request)
        assert curve.initial_gmt < 0
        assert curve.points[1].gz < 0
        result = StabilityCriteriaChecker().check_criteria(curve)
        assert not result.all_criteria_passed
