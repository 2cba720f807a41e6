"""
Unit tests for hydrostab/stability/criteria.py
"""

import math

import pytest

from hydrostab.stability.constants import IMO_INTACT, IMOIntactCriteria
from hydrostab.stability.criteria import (
    StabilityCriteriaChecker,
    angle_of_vanishing_stability,
    calculate_area_under_curve,
    find_max_gz,
    interpolate_gz,
)
from hydrostab.stability.results import StabilityCurve, StabilityMethod, StabilityPoint


def linear_curve(slope=0.5, max_angle=60, gm=0.5):
    """GZ = slope * φ (radians), sampled every degree."""
    points = [
        StabilityPoint(heel_angle=float(a), gz=slope * math.radians(a), kn=0.0)
        for a in range(0, max_angle + 1)
    ]
    return StabilityCurve(
        method=StabilityMethod.WALL_SIDED,
        draft=5.0,
        kg=1.0,
        displacement=1.0,
        initial_gmt=gm,
        points=points,
    )


def pts(*pairs):
    return [StabilityPoint(heel_angle=a, gz=gz, kn=0.0) for a, gz in pairs]


class TestCurveHelpers:

    def test_interpolate(self):
        points = pts((0.0, 0.0), (10.0, 1.0), (20.0, 0.0))
        assert interpolate_gz(points, 5.0) == pytest.approx(0.5)
        assert interpolate_gz(points, 15.0) == pytest.approx(0.5)
        assert interpolate_gz(points, 10.0) == 1.0

    def test_interpolate_clamps_to_ends(self):
        points = pts((10.0, 0.2), (20.0, 0.4))
        assert interpolate_gz(points, 0.0) == 0.2
        assert interpolate_gz(points, 90.0) == 0.4
        assert interpolate_gz([], 30.0) == 0.0

    def test_interpolate_unsorted_input(self):
        points = pts((20.0, 0.4), (0.0, 0.0), (10.0, 0.2))
        assert interpolate_gz(points, 15.0) == pytest.approx(0.3)

    def test_find_max_gz_first_occurrence(self):
        assert find_max_gz(pts((0.0, 0.0), (10.0, 1.0), (20.0, 1.0))) == (1.0, 10.0)
        assert find_max_gz([]) == (0.0, 0.0)

    def test_area_of_linear_curve(self):
        points = linear_curve().points
        # ∫ 0.5 φ dφ = φ² / 4
        assert calculate_area_under_curve(points, 0.0, 30.0) == pytest.approx(0.068539, abs=1e-6)
        assert calculate_area_under_curve(points, 0.0, 40.0) == pytest.approx(0.121847, abs=1e-6)
        assert calculate_area_under_curve(points, 30.0, 40.0) == pytest.approx(0.053308, abs=1e-6)

    def test_area_with_interpolated_ends(self):
        points = pts(*[(float(a), 0.5 * math.radians(a)) for a in range(0, 41, 10)])
        expected = 0.25 * (math.radians(35.0) ** 2 - math.radians(5.0) ** 2)
        assert calculate_area_under_curve(points, 5.0, 35.0) == pytest.approx(expected)

    def test_area_limited_to_sampled_range(self):
        points = pts((0.0, 1.0), (20.0, 1.0))
        assert calculate_area_under_curve(points, 0.0, 40.0) == pytest.approx(math.radians(20.0))
        assert calculate_area_under_curve(points, 30.0, 40.0) == 0.0

    def test_area_degenerate(self):
        assert calculate_area_under_curve(pts((0.0, 1.0)), 0.0, 30.0) == 0.0
        assert calculate_area_under_curve(linear_curve().points, 30.0, 30.0) == 0.0

    def test_angle_of_vanishing_stability(self):
        points = pts((0.0, 0.0), (30.0, 1.0), (60.0, 0.5), (90.0, -0.5))
        assert angle_of_vanishing_stability(points) == pytest.approx(75.0)

    def test_no_vanishing_angle(self):
        assert angle_of_vanishing_stability(linear_curve().points) is None
        assert angle_of_vanishing_stability(pts((0.0, 0.0), (10.0, -0.1), (20.0, -0.2))) is None


class TestStabilityCriteriaChecker:
    """Six-criterion check."""

    def setup_method(self):
        self.checker = StabilityCriteriaChecker()

    def test_linear_curve_passes_everything(self):
        result = self.checker.check_criteria(linear_curve())
        assert result.all_criteria_passed
        assert result.passed_count == 6
        assert result.standard == "IMO A.749(18)"
        assert result.summary.startswith("All 6")

    def test_criterion_values(self):
        criteria = {c.name: c for c in self.checker.check_criteria(linear_curve()).criteria}
        assert criteria["Area under GZ curve (0° to 30°)"].actual_value == pytest.approx(0.068539, abs=1e-6)
        assert criteria["Area under GZ curve (0° to 30°)"].required_value == 0.055
        assert criteria["Angle at maximum GZ"].actual_value == 60.0
        assert criteria["Righting arm at 30° heel"].actual_value == pytest.approx(0.2618, abs=1e-4)
        assert criteria["Initial metacentric height (GMt)"].actual_value == 0.5

    def test_low_gm_fails_only_gm(self):
        result = self.checker.check_criteria(linear_curve(gm=0.1))
        assert not result.all_criteria_passed
        failed = [c.name for c in result.criteria if not c.passed]
        assert failed == ["Initial metacentric height (GMt)"]
        assert "1 of 6" in result.summary

    def test_early_peak_fails_angle_criterion(self):
        result = self.checker.check_criteria(linear_curve(max_angle=20))
        failed = {c.name for c in result.criteria if not c.passed}
        assert "Angle at maximum GZ" in failed
        # Nothing sampled beyond 20°
        assert "Area under GZ curve (30° to 40°)" in failed

    def test_thresholds_are_inclusive(self):
        criteria = IMOIntactCriteria(gm_min_m=0.5)
        result = StabilityCriteriaChecker(criteria=criteria).check_criteria(linear_curve(gm=0.5))
        assert result.all_criteria_passed

    def test_to_dict(self):
        data = self.checker.check_criteria(linear_curve()).to_dict()
        assert len(data["criteria"]) == 6
        assert data["all_criteria_passed"] is True

    def test_default_constants(self):
        assert IMO_INTACT.to_dict() == {
            "area_0_30_min_m_rad": 0.055,
            "area_0_40_min_m_rad": 0.090,
            "area_30_40_min_m_rad": 0.030,
            "gz_30_min_m": 0.20,
            "angle_gz_max_min_deg": 25.0,
            "gm_min_m": 0.15,
        }


class TestReportingPrecision:

    def setup_method(self):
        self.checker = StabilityCriteriaChecker()

    def test_unrounded_comparison_by_default(self):
        result = self.checker.check_criteria(linear_curve(gm=0.1499999996))
        gm = next(c for c in result.criteria if c.unit == "m" and "GMt" in c.name)
        assert gm.actual_value == 0.1499999996
        assert not gm.passed
        assert not result.all_criteria_passed

    def test_rounded_values_decide_pass(self):
        result = self.checker.check_criteria(linear_curve(gm=0.1499999996), places=6)
        gm = next(c for c in result.criteria if "GMt" in c.name)
        assert gm.actual_value == 0.15
        assert gm.passed
        assert result.all_criteria_passed

    def test_rounding_can_fail_a_marginal_value(self):
        result = self.checker.check_criteria(linear_curve(gm=0.1499994), places=6)
        gm = next(c for c in result.criteria if "GMt" in c.name)
        assert gm.actual_value == 0.149999
        assert not gm.passed
