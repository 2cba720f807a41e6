"""
Unit tests for hydrostab/geometry/templates.py
"""

import pytest

from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.templates import (
    TEMPLATES,
    barge_analytical,
    barge_wetted_surface,
    build_template,
    rectangular_barge,
    triangular_analytical,
    triangular_hull,
    wigley_analytical,
    wigley_half_breadth,
    wigley_hull,
)


class TestRectangularBarge:

    def test_grid_layout(self):
        geometry = rectangular_barge(length=100.0, beam=20.0, draft=5.0)
        grid = geometry.grid
        assert grid.station_count == 11
        assert list(grid.zs) == pytest.approx([float(z) for z in range(11)])
        assert all(y == 10.0 for row in grid.half_breadths for y in row)
        assert geometry.design_draft == 5.0
        assert geometry.depth == 10.0

    def test_invalid_dimensions(self):
        with pytest.raises(InvalidArgumentError) as exc:
            rectangular_barge(beam=0.0)
        assert exc.value.param == "beam"

    def test_analytical_values(self):
        ref = barge_analytical(100.0, 20.0, 5.0)
        assert ref.volume == 10000.0
        assert ref.kb == 2.5
        assert ref.bmt == pytest.approx(400.0 / 60.0)
        assert ref.displacement() == pytest.approx(10250.0)
        assert barge_wetted_surface(100.0, 20.0, 5.0) == 3000.0


class TestTriangularHull:

    def test_half_breadth_linear_in_height(self):
        grid = triangular_hull(beam=12.0, depth=8.0).grid
        assert grid.section(0)[0] == 0.0
        assert grid.section(0)[-1] == 6.0
        assert grid.half_breadth_at(3, 4.0) == pytest.approx(3.0)

    def test_design_draft_defaults_to_half_depth(self):
        assert triangular_hull(depth=8.0).design_draft == 4.0

    def test_analytical_values(self):
        ref = triangular_analytical(60.0, 12.0, 8.0, 4.0)
        assert ref.volume == pytest.approx(720.0)
        assert ref.kb == pytest.approx(8.0 / 3.0)
        assert ref.bmt == pytest.approx(1.5)


class TestWigleyHull:

    def test_ordinates(self):
        # Full half-breadth at midship on the design waterline, zero at the keel and ends
        assert wigley_half_breadth(50.0, 6.25, 100.0, 10.0, 6.25) == pytest.approx(5.0)
        assert wigley_half_breadth(50.0, 0.0, 100.0, 10.0, 6.25) == 0.0
        assert wigley_half_breadth(0.0, 6.25, 100.0, 10.0, 6.25) == 0.0

    def test_vertical_topsides(self):
        above = wigley_half_breadth(25.0, 9.0, 100.0, 10.0, 6.25)
        at_waterline = wigley_half_breadth(25.0, 6.25, 100.0, 10.0, 6.25)
        assert above == at_waterline

    def test_grid_reaches_design_waterline_exactly(self):
        geometry = wigley_hull()
        assert 6.25 in geometry.grid.zs
        assert geometry.grid.z_max == pytest.approx(9.375)
        assert geometry.grid.station_count == 21

    def test_analytical_coefficients(self):
        ref = wigley_analytical(100.0, 10.0, 6.25)
        assert ref.cb == pytest.approx(4.0 / 9.0)
        assert ref.cwp == pytest.approx(2.0 / 3.0)
        assert ref.volume == pytest.approx(4.0 / 9.0 * 100.0 * 10.0 * 6.25)
        assert ref.kb == pytest.approx(5.0 * 6.25 / 8.0)


class TestBuildTemplate:

    @pytest.mark.parametrize("kind", sorted(TEMPLATES))
    def test_builds_complete_geometry(self, kind):
        assert build_template(kind).is_complete

    def test_parameters_forwarded(self):
        assert build_template("barge", length=50.0).lpp == 50.0

    def test_unknown_template(self):
        with pytest.raises(InvalidArgumentError) as exc:
            build_template("catamaran")
        assert exc.value.param == "template"
