"""Shared pytest fixtures for wellbore_geometry tests.

All fixtures use explicit oilfield values with documented rationale.

UNITS:
    Depths and lengths in feet, diameters in inches, volumes in barrels.
    Capacity of a 1 in bore over 1 ft: (pi/4) / 1029.4 bbl.
"""

import pytest

from wellbore_geometry.coordinator import CascadeCoordinator, WellContext
from wellbore_geometry.coordinator.state_machine import CascadeContext, CascadeStateMachine
from wellbore_geometry.model.drill_string import ComponentType, DrillStringComponent
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.model.wellbore_section import SectionType, WellboreSection

# =============================================================================
# WELLBORE SECTIONS
# =============================================================================


@pytest.fixture
def surface_casing() -> WellboreSection:
    """13 3/8" surface casing, 0-1500 ft, 12.415" drift bore."""
    return WellboreSection(
        id=1,
        name="Surface",
        section_type=SectionType.CASING,
        top_md=0.0,
        bottom_md=1500.0,
        od=13.375,
        id_=12.415,
    )


@pytest.fixture
def intermediate_casing() -> WellboreSection:
    """9 5/8" intermediate casing, 1500-6000 ft. OD 9.625 fits inside 12.415."""
    return WellboreSection(
        id=2,
        name="Intermediate",
        section_type=SectionType.CASING,
        top_md=1500.0,
        bottom_md=6000.0,
        od=9.625,
        id_=8.835,
    )


@pytest.fixture
def production_open_hole() -> WellboreSection:
    """8 1/2" open hole, 6000-10000 ft, 10% washout."""
    return WellboreSection(
        id=3,
        name="Production Hole",
        section_type=SectionType.OPEN_HOLE,
        top_md=6000.0,
        bottom_md=10000.0,
        od=8.5,
        washout_pct=10.0,
    )


@pytest.fixture
def valid_well(
    surface_casing: WellboreSection,
    intermediate_casing: WellboreSection,
    production_open_hole: WellboreSection,
) -> list[WellboreSection]:
    """Three telescoping sections, continuous from surface to 10000 ft TD."""
    return [surface_casing, intermediate_casing, production_open_hole]


@pytest.fixture
def override_pair() -> list[WellboreSection]:
    """Open hole followed by casing over the same interval.

    OpenHole 0-1000 ft, 12.25" with 10% washout, then 9 5/8" casing 0-1000 ft.
    Same top, same bottom: read as an override extension, not an overlap.
    """
    return [
        WellboreSection(
            id=1,
            section_type=SectionType.OPEN_HOLE,
            top_md=0.0,
            bottom_md=1000.0,
            od=12.25,
            washout_pct=10.0,
        ),
        WellboreSection(
            id=2,
            section_type=SectionType.CASING,
            top_md=0.0,
            bottom_md=1000.0,
            od=9.625,
            id_=8.835,
        ),
    ]


# =============================================================================
# DRILL STRING
# =============================================================================


@pytest.fixture
def simple_string() -> list[DrillStringComponent]:
    """Tapered pipe over a slim bit: 6000 + 3900 + 1 ft = 9901 ft, OD never grows downhole."""
    return [
        DrillStringComponent(
            id=1,
            component_type=ComponentType.DRILL_PIPE,
            name="Drill Pipe 1",
            length=6000.0,
            od=5.5,
            id_=4.67,
        ),
        DrillStringComponent(
            id=2,
            component_type=ComponentType.DRILL_PIPE,
            name="Drill Pipe 2",
            length=3900.0,
            od=5.0,
            id_=4.276,
        ),
        DrillStringComponent(
            id=3,
            component_type=ComponentType.BIT,
            name="Bit",
            length=1.0,
            od=4.75,
            id_=2.0,
        ),
    ]


# =============================================================================
# SURVEY
# =============================================================================


@pytest.fixture
def build_survey() -> list[SurveyPoint]:
    """Tie-in at surface, vertical to 1000 ft, then building 3°/100 ft due east."""
    return [
        SurveyPoint(md=0.0, hole_angle=0.0, azimuth=0.0),
        SurveyPoint(md=1000.0, hole_angle=0.0, azimuth=90.0),
        SurveyPoint(md=1100.0, hole_angle=3.0, azimuth=90.0),
        SurveyPoint(md=1200.0, hole_angle=6.0, azimuth=90.0),
        SurveyPoint(md=1300.0, hole_angle=9.0, azimuth=90.0),
    ]


# =============================================================================
# COORDINATOR
# =============================================================================


@pytest.fixture
def coordinator(valid_well: list[WellboreSection]) -> CascadeCoordinator:
    """Coordinator loaded with the three-section valid well, TD 10000 ft."""
    coord = CascadeCoordinator(context=WellContext(well_name="Test-1", total_md=10000.0))
    coord.load_sections(valid_well)
    return coord


@pytest.fixture
def sm_and_ctx() -> tuple[CascadeStateMachine, CascadeContext]:
    """Fresh cascade state machine without the log listener."""
    return CascadeStateMachine.create(add_log_listener=False)
