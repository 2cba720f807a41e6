"""
Unit tests for hydrostab/service.py
"""

import math

import pytest

from hydrostab.bootstrap.config import ComputeConfig
from hydrostab.errors import IncompleteGeometryError, InvalidArgumentError, NotFoundError
from hydrostab.geometry.models import HullGeometry, Station
from hydrostab.physics.results import CurveType
from hydrostab.service import HydrostaticsService
from hydrostab.stability.results import StabilityCurve, StabilityMethod, StabilityPoint, StabilityRequest


class TestServiceHydrostatics:

    def test_values_rounded_to_six_places(self, service):
        result = service.compute_at_draft("barge", 5.0, "barge_kg8")
        # 6.6666... m
        assert result.bmt == 6.666667
        assert result.gmt == 1.166667
        assert result.displacement_t == 10250.0

    def test_default_loadcase_is_seawater(self, service):
        result = service.compute_at_draft("barge", 5.0)
        assert result.displacement_t == 10250.0
        assert result.gmt is None

    def test_loadcase_density(self, service):
        assert service.compute_at_draft("barge", 5.0, "fresh").displacement_t == 10000.0

    def test_unknown_vessel(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.compute_at_draft("ark", 5.0)
        assert exc.value.message == "Vessel ark not found"

    def test_unknown_loadcase(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.compute_at_draft("barge", 5.0, "lightship")
        assert exc.value.details["kind"] == "loadcase"

    def test_incomplete_geometry(self, service, geometry_provider):
        geometry_provider.add("bare", HullGeometry(stations=(Station(0, 0.0),)))
        with pytest.raises(IncompleteGeometryError):
            service.compute_at_draft("bare", 1.0)

    def test_table(self, service):
        results = service.compute_table("triangle", [1.0, 2.0, 4.0])
        assert [r.draft for r in results] == [1.0, 2.0, 4.0]
        assert results[-1].volume == 720.0

    def test_repeatable(self, service):
        first = service.compute_at_draft("wigley", 3.3, "wigley_kg4")
        second = service.compute_at_draft("wigley", 3.3, "wigley_kg4")
        assert first.to_dict() == second.to_dict()

    def test_parallel_service_matches_sequential(self, geometry_provider, loadcase_provider, service):
        parallel = HydrostaticsService(geometry_provider, loadcase_provider, ComputeConfig(max_workers=4))
        drafts = [0.5, 1.5, 2.5, 3.5, 4.5]
        assert parallel.compute_table("wigley", drafts) == service.compute_table("wigley", drafts)


class TestServiceCurves:

    def test_default_point_count(self, service):
        curve = service.generate_curve("barge", "volume", 1.0, 5.0)
        assert len(curve.points) == 50

    def test_gm_curve_requires_loadcase(self, service):
        with pytest.raises(InvalidArgumentError) as exc:
            service.generate_curve("barge", CurveType.GMT, 1.0, 5.0, 5)
        assert exc.value.param == "loadcase_id"

    def test_gm_curve_requires_kg(self, service):
        with pytest.raises(InvalidArgumentError, match="must define KG"):
            service.generate_curve("barge", CurveType.GMT, 1.0, 5.0, 5, "seawater")

    def test_gm_curve(self, service):
        curve = service.generate_curve("barge", "gmt", 1.0, 5.0, 5, "barge_kg8")
        assert curve.ys[-1] == 1.166667

    def test_bonjean(self, service):
        curves = service.generate_bonjean_curves("triangle")
        assert curves[0].station_index == 0
        assert curves[0].ys[-1] == 48.0

    def test_try_bonjean_unknown_vessel(self, service, caplog):
        assert service.try_generate_bonjean_curves("ark") is None
        assert "Bonjean curves unavailable for vessel ark" in caplog.text

    def test_try_bonjean_known_vessel(self, service):
        assert len(service.try_generate_bonjean_curves("barge")) == 11


class TestServiceStability:

    def test_gz_curve_rounded(self, service):
        request = StabilityRequest(loadcase_id="barge_kg8", max_angle=20.0, angle_increment=10.0)
        curve = service.compute_gz_curve("barge", request)
        assert curve.initial_gmt == 1.166667
        assert curve.points[-1].gz == pytest.approx(0.55006, abs=1e-4)
        assert curve.points[-1].gz == round(curve.points[-1].gz, 6)

    def test_gz_without_loadcase(self, service):
        with pytest.raises(InvalidArgumentError) as exc:
            service.compute_gz_curve("barge", StabilityRequest())
        assert exc.value.param == "loadcase_id"

    def test_gz_loadcase_without_kg(self, service):
        with pytest.raises(InvalidArgumentError):
            service.compute_gz_curve("barge", StabilityRequest(loadcase_id="seawater"))

    def test_kn_curve_needs_no_kg(self, service):
        curve = service.compute_kn_curve("barge", StabilityRequest(max_angle=10.0, angle_increment=5.0))
        assert [p.heel_angle for p in curve.points] == [0.0, 5.0, 10.0]
        assert curve.points[0].kn == 0.0

    def test_criteria(self, service):
        request = StabilityRequest(
            loadcase_id="barge_kg8", max_angle=60.0, angle_increment=2.0, method="FullImmersion"
        )
        result = service.check_criteria(service.compute_gz_curve("barge", request))
        assert len(result.criteria) == 6
        for criterion in result.criteria:
            assert criterion.actual_value == round(criterion.actual_value, 6)

    def test_criteria_flags_follow_reported_values(self, service):
        points = [
            StabilityPoint(heel_angle=float(a), gz=0.5 * math.radians(a), kn=0.0)
            for a in range(0, 61)
        ]
        curve = StabilityCurve(
            method=StabilityMethod.WALL_SIDED, draft=5.0, kg=1.0, displacement=1.0,
            initial_gmt=0.1499999996, points=points,
        )
        result = service.check_criteria(curve)
        gm = next(c for c in result.criteria if "GMt" in c.name)
        assert gm.actual_value == 0.15
        assert gm.passed
        assert result.all_criteria_passed

    def test_default_request_through_90(self, service):
        curve = service.compute_gz_curve("barge", StabilityRequest(loadcase_id="barge_kg8"))
        assert curve.points[-1].heel_angle == 89.0
        assert len(curve.points) == 90
        assert all(math.isfinite(p.gz) for p in curve.points)
        assert any("omitted" in w for w in curve.warnings)

    def test_wall_sided_full_range_skips_past_90(self, service):
        request = StabilityRequest(loadcase_id="barge_kg8", max_angle=180.0, angle_increment=10.0)
        curve = service.compute_gz_curve("barge", request)
        assert [p.heel_angle for p in curve.points][-1] == 80.0
        assert curve.gz_at_30 is not None
        assert "10 angles omitted" in curve.warnings[-1]

    def test_wall_sided_beyond_90_only_is_rejected(self, service):
        request = StabilityRequest(loadcase_id="barge_kg8", min_angle=90.0, max_angle=180.0, angle_increment=10.0)
        with pytest.raises(InvalidArgumentError) as exc:
            service.compute_gz_curve("barge", request)
        assert exc.value.param == "max_angle"

    def test_full_immersion_full_range_rounds(self, service):
        request = StabilityRequest(
            loadcase_id="barge_kg8", max_angle=180.0, angle_increment=10.0, method="FullImmersion"
        )
        curve = service.compute_gz_curve("barge", request)
        assert len(curve.points) == 19
        assert curve.points[-1].gz == pytest.approx(0.0, abs=1e-6)

    def test_methods(self, service):
        ids = [m.id for m in service.available_methods()]
        assert ids == [StabilityMethod.WALL_SIDED.value, StabilityMethod.FULL_IMMERSION.value]


class TestServiceTrimAndValidation:

    def test_solve_trim(self, service):
        solution = service.solve_trim("barge", 5125.0)
        assert solution.converged
        assert solution.mean_draft == pytest.approx(2.5, abs=1e-4)

    def test_achievable(self, service):
        assert service.is_displacement_achievable("barge", 10000.0)
        assert not service.is_displacement_achievable("barge", 20000.0)
        assert not service.is_displacement_achievable("ark", 10.0)

    def test_validate_incomplete_geometry_reports_problems(self, service, geometry_provider):
        geometry_provider.add("bare", HullGeometry(stations=(Station(0, 0.0),)))
        report = service.validate_geometry("bare")
        assert not report.is_valid

    def test_validate_template(self, service):
        assert service.validate_geometry("wigley").is_valid
