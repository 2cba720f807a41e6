"""
hydrostab Test Configuration and Fixtures

Synthetic in-memory hulls with closed-form hydrostatics, the providers
that serve them and a service wired to both.
"""

import pytest

from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.geometry.providers import InMemoryGeometryProvider, InMemoryLoadcaseProvider
from hydrostab.geometry.templates import rectangular_barge, triangular_hull, wigley_hull
from hydrostab.physics.hydrostatics import HydrostaticsCalculator
from hydrostab.service import HydrostaticsService


# Barge: L=100, B=20, T=5, D=10
BARGE_L = 100.0
BARGE_B = 20.0
BARGE_T = 5.0

# Wigley: L=100, B=10, T=6.25
WIGLEY_L = 100.0
WIGLEY_B = 10.0
WIGLEY_T = 6.25


@pytest.fixture
def barge():
    """Rectangular barge 100 x 20 x 5 m, depth 10 m."""
    return rectangular_barge(length=BARGE_L, beam=BARGE_B, draft=BARGE_T)


@pytest.fixture
def triangle():
    """V-section prism 60 m long, 12 m beam at 8 m depth."""
    return triangular_hull()


@pytest.fixture
def wigley():
    """Wigley hull 100 x 10 x 6.25 m."""
    return wigley_hull(length=WIGLEY_L, beam=WIGLEY_B, draft=WIGLEY_T)


@pytest.fixture
def hard_chine():
    """Flat-sided section with a hard chine 0.1 m above the keel, uneven waterlines."""
    return HullGeometry.from_table(
        xs=[0.0, 10.0, 20.0],
        zs=[0.0, 0.1, 2.0, 3.0],
        half_breadths=[[0.0, 5.0, 5.0, 5.0]] * 3,
        name="Hard chine",
        design_draft=2.0,
        depth=3.0,
    )


@pytest.fixture
def calculator():
    return HydrostaticsCalculator()


@pytest.fixture
def geometry_provider(barge, triangle, wigley):
    return InMemoryGeometryProvider({
        "barge": barge,
        "triangle": triangle,
        "wigley": wigley,
    })


@pytest.fixture
def loadcase_provider():
    return InMemoryLoadcaseProvider({
        "seawater": Loadcase(name="Seawater, no KG"),
        "barge_kg8": Loadcase(kg=8.0, name="Barge KG 8 m"),
        "barge_unstable": Loadcase(kg=12.0, name="Barge KG 12 m"),
        "wigley_kg4": Loadcase(kg=4.0, name="Wigley KG 4 m"),
        "fresh": Loadcase(rho=1000.0, kg=2.5, name="Fresh water"),
    })


@pytest.fixture
def service(geometry_provider, loadcase_provider):
    return HydrostaticsService(geometry_provider, loadcase_provider)
