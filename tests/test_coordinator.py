"""Tests for CascadeCoordinator: edit cascade, list operations, drill string,
survey, bulk loads, totals and serialization."""

import math

import pytest

from wellbore_geometry.coordinator import (
    CascadeCoordinator,
    CasingMerged,
    DepthStatus,
    SectionsRenumbered,
    TopLinked,
    VolumeRecomputed,
    WellContext,
)
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.importers import import_drill_string
from wellbore_geometry.model.diagnostic import (
    DuplicateUniqueComponentError,
    InvalidComponentNameError,
    StringOverrunError,
    SurveyAngleRangeError,
)
from wellbore_geometry.model.drill_string import ComponentType, DrillStringComponent, MudMotorDetails
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.model.wellbore_section import SectionType, WellboreSection

# =============================================================================
# EDIT CASCADE
# =============================================================================


class TestApplyEdit:
    """Field edits and their propagation to the next section."""

    def test_bottom_change_links_next_top(self, coordinator: CascadeCoordinator) -> None:
        findings = coordinator.apply_edit(section_id=1, field="bottom_md", value=2000.0)
        assert findings == []
        assert coordinator.get_section(2).top_md == 2000.0
        linked = [e for e in coordinator.last_cascade if isinstance(e, TopLinked)]
        assert linked == [TopLinked(section_id=2, old_top_md=1500.0, new_top_md=2000.0)]

    def test_bottom_change_recomputes_next_volume(self, coordinator: CascadeCoordinator) -> None:
        """Open hole below gets longer: 8.5² / 1029.4 * 3000 * 1.1."""
        coordinator.apply_edit(section_id=2, field="bottom_md", value=7000.0)
        open_hole = coordinator.get_section(3)
        assert open_hole.top_md == 7000.0
        assert open_hole.volume == pytest.approx(8.5**2 / 1029.4 * 3000.0 * 1.10)

    def test_bore_change_recomputes_next_volume(self, coordinator: CascadeCoordinator) -> None:
        before = coordinator.get_section(2).volume
        coordinator.apply_edit(section_id=1, field="id_", value=12.615)
        after = coordinator.get_section(2).volume
        assert after > before
        recomputed = {e.section_id for e in coordinator.last_cascade if isinstance(e, VolumeRecomputed)}
        assert recomputed == {1, 2}

    def test_name_edit_touches_only_own_volume(self, coordinator: CascadeCoordinator) -> None:
        coordinator.apply_edit(section_id=2, field="name", value="9 5/8 Intermediate")
        assert coordinator.get_section(2).name == "9 5/8 Intermediate"
        assert coordinator.last_cascade == []

    def test_open_hole_forces_zero_id(self, coordinator: CascadeCoordinator) -> None:
        coordinator.apply_edit(section_id=3, field="id_", value=5.0)
        assert coordinator.get_section(3).id_ == 0.0

    def test_type_change_to_open_hole(self, coordinator: CascadeCoordinator) -> None:
        coordinator.apply_edit(section_id=2, field="section_type", value="Open Hole")
        section = coordinator.get_section(2)
        assert section.section_type is SectionType.OPEN_HOLE
        assert section.id_ == 0.0

    def test_reorders_by_top(self, coordinator: CascadeCoordinator) -> None:
        coordinator.apply_edit(section_id=3, field="top_md", value=-10.0)
        assert coordinator.sections[0].section_type is SectionType.OPEN_HOLE

    def test_returns_to_idle(self, coordinator: CascadeCoordinator) -> None:
        coordinator.apply_edit(section_id=1, field="bottom_md", value=1600.0)
        assert coordinator.state_machine.is_idle
        assert coordinator.state_machine.context.section_id is None

    def test_unknown_section(self, coordinator: CascadeCoordinator) -> None:
        with pytest.raises(KeyError):
            coordinator.apply_edit(section_id=99, field="od", value=7.0)

    def test_unknown_field(self, coordinator: CascadeCoordinator) -> None:
        with pytest.raises(ValueError, match="Unknown section field"):
            coordinator.apply_edit(section_id=1, field="colour", value="red")


def _assert_volumes_settled(coordinator: CascadeCoordinator) -> None:
    """Every stored volume matches a fresh computation against its sorted predecessor."""
    for index, section in enumerate(coordinator.sections):
        previous = coordinator.sections[index - 1] if index > 0 else None
        expected = VolumeCalculator.section_volume(section=section, previous=previous)
        assert section.volume == pytest.approx(expected), f"section {section.id}"


class TestReorderingEdits:
    """Edits that change the depth order resolve neighbors by the new order."""

    @pytest.fixture
    def three_strings(self) -> CascadeCoordinator:
        """Surface casing, intermediate casing and a 7 in liner, 1000 ft each."""
        coord = CascadeCoordinator(context=WellContext(total_md=3000.0))
        coord.load_sections(
            [
                WellboreSection(
                    id=1, section_type=SectionType.CASING, top_md=0.0, bottom_md=1000.0, od=13.375, id_=12.415
                ),
                WellboreSection(
                    id=2, section_type=SectionType.CASING, top_md=1000.0, bottom_md=2000.0, od=9.625, id_=8.835
                ),
                WellboreSection(
                    id=3, section_type=SectionType.LINER, top_md=2000.0, bottom_md=3000.0, od=7.0, id_=6.184
                ),
            ]
        )
        return coord

    def test_top_edit_moving_section_down(self, three_strings: CascadeCoordinator) -> None:
        """Liner ends up directly below the 13 3/8 casing: annulus against 12.415 in."""
        three_strings.apply_edit(section_id=2, field="top_md", value=2500.0)

        assert [s.id for s in three_strings.sections] == [1, 3, 2]
        liner = three_strings.get_section(3)
        assert liner.volume == pytest.approx(math.pi / 4 * (12.415**2 - 7.0**2) * 1000.0 / 1029.4)
        assert liner.volume == pytest.approx(80.2124, abs=1e-3)
        _assert_volumes_settled(three_strings)

        totals = three_strings.compute_totals()
        assert totals.wellbore_volume_bbl == pytest.approx(sum(s.volume for s in three_strings.sections))

    def test_unchanged_order_keeps_local_cascade(self, three_strings: CascadeCoordinator) -> None:
        three_strings.apply_edit(section_id=1, field="od", value=13.5)
        recomputed = {e.section_id for e in three_strings.last_cascade if isinstance(e, VolumeRecomputed)}
        assert 3 not in recomputed

    def test_linked_top_pushed_past_later_section(self) -> None:
        """Deepening the surface casing to 2500 ft pushes the 5 1/2 string below the liner top."""
        coord = CascadeCoordinator(context=WellContext(total_md=5000.0))
        coord.load_sections(
            [
                WellboreSection(
                    id=1, section_type=SectionType.CASING, top_md=0.0, bottom_md=1000.0, od=13.375, id_=12.415
                ),
                WellboreSection(
                    id=2, section_type=SectionType.CASING, top_md=1000.0, bottom_md=5000.0, od=5.5, id_=4.892
                ),
                WellboreSection(
                    id=3, section_type=SectionType.LINER, top_md=2000.0, bottom_md=3000.0, od=9.625, id_=8.835
                ),
            ]
        )
        coord.apply_edit(section_id=1, field="bottom_md", value=2500.0)

        assert [s.id for s in coord.sections] == [1, 3, 2]
        production, liner = coord.get_section(2), coord.get_section(3)
        assert production.top_md == 2500.0
        assert production.volume == pytest.approx(
            math.pi / 4 * (8.835**2 - 5.5**2) * 2500.0 / 1029.4
        )
        assert production.volume == pytest.approx(VolumeCalculator.section_volume(section=production, previous=liner))
        _assert_volumes_settled(coord)
        assert coord.state_machine.is_idle


class TestReentrancy:
    """A mutation arriving while another is running is refused."""

    def test_edit_refused_while_cascading(self, coordinator: CascadeCoordinator) -> None:
        coordinator.state_machine.send("begin_edit", section_id=1, field_name="od")
        findings = coordinator.apply_edit(section_id=2, field="od", value=7.0)
        assert findings == []
        assert coordinator.get_section(2).od == 9.625
        assert coordinator.state_machine.context.refused_count == 1
        assert coordinator.state_machine.is_cascading

    def test_bulk_load_refused_while_cascading(self, coordinator: CascadeCoordinator) -> None:
        coordinator.state_machine.send("begin_edit")
        assert coordinator.load_sections([]) == []
        assert len(coordinator.sections) == 3


class TestCasingOverrideMerge:
    """Same-top, same-OD, deeper casing folds into the section above."""

    @pytest.fixture
    def two_casings(self) -> CascadeCoordinator:
        coord = CascadeCoordinator(context=WellContext(total_md=2000.0))
        coord.add_section(section_type=SectionType.CASING, bottom_md=1000.0, od=9.625, id_=8.835, name="Csg A")
        coord.add_section(section_type=SectionType.CASING, bottom_md=2000.0, od=7.0, id_=6.184, name="Csg B")
        return coord

    def test_merge_on_matching_edit(self, two_casings: CascadeCoordinator) -> None:
        two_casings.apply_edit(section_id=2, field="top_md", value=0.0)
        assert len(two_casings.sections) == 2

        two_casings.apply_edit(section_id=2, field="od", value=9.625)
        assert len(two_casings.sections) == 1
        kept = two_casings.sections[0]
        assert kept.id == 1
        assert kept.bottom_md == 2000.0
        assert kept.name == "Csg A"
        assert kept.volume == pytest.approx(8.835**2 / 1029.4 * 2000.0)

        merged = [e for e in two_casings.last_cascade if isinstance(e, CasingMerged)]
        assert merged == [CasingMerged(kept_id=1, removed_id=2, bottom_md=2000.0)]
        assert two_casings.state_machine.is_idle

    def test_no_merge_for_different_types(self, two_casings: CascadeCoordinator) -> None:
        two_casings.apply_edit(section_id=2, field="section_type", value=SectionType.LINER)
        two_casings.apply_edit(section_id=2, field="top_md", value=0.0)
        two_casings.apply_edit(section_id=2, field="od", value=9.625)
        assert len(two_casings.sections) == 2


# =============================================================================
# SECTION LIST OPERATIONS
# =============================================================================


class TestSectionListOperations:
    """Add, delete and renumber."""

    def test_add_links_tops(self) -> None:
        coord = CascadeCoordinator(context=WellContext(total_md=3000.0))
        first = coord.add_section(section_type=SectionType.CASING, bottom_md=1500.0, od=13.375, id_=12.415)
        second = coord.add_section(section_type=SectionType.OPEN_HOLE, bottom_md=3000.0, od=8.5, washout_pct=10.0)
        assert first.top_md == 0.0
        assert second.top_md == 1500.0
        assert second.id == 2
        assert second.volume == pytest.approx(8.5**2 / 1029.4 * 1500.0 * 1.10)
        assert coord.validate().is_valid

    def test_delete_relinks_and_renumbers(self, coordinator: CascadeCoordinator) -> None:
        findings = coordinator.delete_section(section_id=2)
        assert findings == []
        assert [s.id for s in coordinator.sections] == [1, 2]
        open_hole = coordinator.get_section(2)
        assert open_hole.section_type is SectionType.OPEN_HOLE
        assert open_hole.top_md == 1500.0
        assert coordinator.state_machine.is_idle

    def test_delete_first_moves_next_to_surface(self, coordinator: CascadeCoordinator) -> None:
        coordinator.delete_section(section_id=1)
        assert coordinator.sections[0].top_md == 0.0
        assert coordinator.sections[0].id == 1

    def test_renumber_records_changes(self, coordinator: CascadeCoordinator) -> None:
        coordinator.sections[0].id = 7
        coordinator.renumber()
        assert [s.id for s in coordinator.sections] == [1, 2, 3]
        assert SectionsRenumbered(id_changes=((7, 1),)) in coordinator.last_cascade

    def test_load_orders_and_assigns_ids(self, valid_well: list[WellboreSection]) -> None:
        coord = CascadeCoordinator(context=WellContext(total_md=10000.0))
        findings = coord.load_sections(list(reversed(valid_well)))
        assert findings == []
        assert [s.name for s in coord.sections] == ["Surface", "Intermediate", "Production Hole"]
        assert all(s.volume > 0 for s in coord.sections)

    def test_target_md_defaults_to_deepest_bottom(self, valid_well: list[WellboreSection]) -> None:
        coord = CascadeCoordinator()
        coord.load_sections(valid_well)
        assert coord.target_total_md == 10000.0

    def test_continuity(self, coordinator: CascadeCoordinator) -> None:
        assert coordinator.check_continuity() == []


# =============================================================================
# DRILL STRING
# =============================================================================


class TestDrillStringOperations:
    """Components, naming and force-to-bottom."""

    def test_auto_naming(self, coordinator: CascadeCoordinator) -> None:
        first = coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=5000.0, od=5.0, id_=4.276)
        second = coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=4000.0, od=5.0, id_=4.276)
        bit = coordinator.add_component(component_type=ComponentType.BIT, length=1.0, od=4.75, id_=2.0)
        assert [first.name, second.name, bit.name] == ["Drill Pipe 1", "Drill Pipe 2", "Bit"]
        assert [c.id for c in coordinator.drill_string] == [1, 2, 3]

    def test_unique_kind_twice_rejected(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.MWD, length=30.0, od=4.75, id_=2.25)
        with pytest.raises(ValueError, match="Only one MWD"):
            coordinator.add_component(component_type=ComponentType.MWD, length=30.0, od=4.75, id_=2.25)

    def test_delete_renumbers_and_renames(self, coordinator: CascadeCoordinator) -> None:
        for _ in range(3):
            coordinator.add_component(component_type=ComponentType.HWDP, length=90.0, od=5.0, id_=3.0)
        coordinator.delete_component(component_id=1)
        assert [c.id for c in coordinator.drill_string] == [1, 2]
        assert [c.name for c in coordinator.drill_string] == ["HWDP 1", "HWDP 2"]

    def test_duplicate_name_not_applied(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=90.0, od=5.0, id_=4.276)
        coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=90.0, od=5.0, id_=4.276)
        findings = coordinator.edit_component(component_id=2, field="name", value="drill pipe 1")
        assert len(findings) == 1
        assert isinstance(findings[0], InvalidComponentNameError)
        assert coordinator.get_component(2).name == "Drill Pipe 2"

    def test_type_change_drops_foreign_details(self, coordinator: CascadeCoordinator) -> None:
        motor = coordinator.add_component(
            component_type=ComponentType.MOTOR,
            length=30.0,
            od=6.75,
            id_=3.0,
            details=MudMotorDetails(stall_pressure_psi=900.0, best_flow_rate_gpm=500.0),
        )
        coordinator.edit_component(component_id=motor.id, field="component_type", value="Drill Collar")
        assert motor.component_type is ComponentType.DC
        assert motor.details is None

    def test_force_to_bottom_extends_last(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=9000.0, od=5.0, id_=4.276)
        coordinator.add_component(component_type=ComponentType.BIT, length=1.0, od=4.75, id_=2.0)
        findings = coordinator.force_to_bottom()
        assert findings == []
        assert coordinator.drill_string[-1].length == pytest.approx(1000.0)

        totals = coordinator.compute_totals()
        assert totals.depth_status is DepthStatus.ON_BOTTOM
        assert totals.is_on_bottom
        assert totals.feet_missing == 0.0

    def test_force_to_bottom_reports_overrun(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=10500.0, od=5.0, id_=4.276)
        findings = coordinator.force_to_bottom()
        assert len(findings) == 1
        assert isinstance(findings[0], StringOverrunError)
        assert coordinator.has_string_overrun()
        assert coordinator.drill_string[-1].length == 10500.0

    def test_force_to_bottom_without_string(self, coordinator: CascadeCoordinator) -> None:
        assert coordinator.force_to_bottom() == []

    def test_unknown_component_field(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=90.0, od=5.0, id_=4.276)
        with pytest.raises(ValueError):
            coordinator.edit_component(component_id=1, field="colour", value="red")

    def test_type_change_to_present_unique_kind_rejected(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.BIT, length=1.0, od=8.5, id_=2.0)
        pipe = coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=90.0, od=5.0, id_=4.276)
        with pytest.raises(ValueError, match="Only one Bit"):
            coordinator.edit_component(component_id=pipe.id, field="component_type", value=ComponentType.BIT)
        assert pipe.component_type is ComponentType.DRILL_PIPE
        assert [c.component_type for c in coordinator.drill_string].count(ComponentType.BIT) == 1

    def test_type_change_regenerates_name(self, coordinator: CascadeCoordinator) -> None:
        coordinator.add_component(component_type=ComponentType.HWDP, length=90.0, od=5.0, id_=3.0)
        pipe = coordinator.add_component(component_type=ComponentType.DRILL_PIPE, length=90.0, od=5.0, id_=4.276)
        coordinator.edit_component(component_id=pipe.id, field="component_type", value=ComponentType.HWDP)
        assert pipe.name == "HWDP 2"
        coordinator.edit_component(component_id=pipe.id, field="component_type", value=ComponentType.MWD)
        assert pipe.name == "MWD"

    def test_same_unique_kind_kept_on_retype(self, coordinator: CascadeCoordinator) -> None:
        bit = coordinator.add_component(component_type=ComponentType.BIT, length=1.0, od=8.5, id_=2.0)
        coordinator.edit_component(component_id=bit.id, field="component_type", value="Bit")
        assert bit.name == "Bit"

    def test_load_names_imported_components(self, coordinator: CascadeCoordinator) -> None:
        result = import_drill_string(
            [
                {"Type": "Drill Pipe", "Length": "5000", "ID": "4.276", "OD": "5"},
                {"Type": "Drill Pipe", "Length": "4000", "ID": "4.276", "OD": "5"},
                {"Type": "Bit", "Length": "1", "ID": "2", "OD": "4.75"},
            ]
        )
        coordinator.load_drill_string(result.items)
        assert [c.name for c in coordinator.drill_string] == ["Drill Pipe 1", "Drill Pipe 2", "Bit"]
        assert [c.id for c in coordinator.drill_string] == [1, 2, 3]

    def test_load_keeps_set_names(self, coordinator: CascadeCoordinator) -> None:
        components = [
            DrillStringComponent(id=0, component_type=ComponentType.DRILL_PIPE, name="Top DP", length=90.0),
            DrillStringComponent(id=0, component_type=ComponentType.DRILL_PIPE, length=90.0),
        ]
        coordinator.load_drill_string(components)
        assert [c.name for c in coordinator.drill_string] == ["Top DP", "Drill Pipe 2"]

    def test_load_reports_repeated_unique_kind(self, coordinator: CascadeCoordinator) -> None:
        bits = [
            DrillStringComponent(id=0, component_type=ComponentType.BIT, length=1.0, od=4.75, id_=2.0),
            DrillStringComponent(id=0, component_type=ComponentType.BIT, length=1.0, od=4.75, id_=2.0),
        ]
        findings = coordinator.load_drill_string(bits)
        assert [type(f) for f in findings] == [DuplicateUniqueComponentError]
        assert findings[0].section_id == "2"


# =============================================================================
# SURVEY
# =============================================================================


class TestSurveyOperations:
    """Station insert, edit and delete keep the trajectory current."""

    def test_insert_in_md_order(self, coordinator: CascadeCoordinator, build_survey: list[SurveyPoint]) -> None:
        coordinator.load_survey(build_survey)
        index = coordinator.add_survey_point(SurveyPoint(md=1150.0, hole_angle=4.5, azimuth=90.0))
        assert index == 3
        assert [p.md for p in coordinator.survey] == [0.0, 1000.0, 1100.0, 1150.0, 1200.0, 1300.0]
        assert coordinator.survey[3].build_rate == pytest.approx(3.0)

    def test_edit_angle_recomputes_below(self, coordinator: CascadeCoordinator, build_survey: list[SurveyPoint]) -> None:
        coordinator.load_survey(build_survey)
        tvd_before = coordinator.survey[4].tvd
        findings = coordinator.edit_survey_point(index=2, field="hole_angle", value=10.0)
        assert findings == []
        assert coordinator.survey[4].tvd < tvd_before

    def test_edit_reports_angle_range(self, coordinator: CascadeCoordinator, build_survey: list[SurveyPoint]) -> None:
        coordinator.load_survey(build_survey)
        findings = coordinator.edit_survey_point(index=4, field="hole_angle", value=95.0)
        assert [type(f) for f in findings] == [SurveyAngleRangeError]

    def test_edit_md_resorts(self, coordinator: CascadeCoordinator, build_survey: list[SurveyPoint]) -> None:
        coordinator.load_survey(build_survey)
        coordinator.edit_survey_point(index=1, field="md", value=1250.0)
        assert [p.md for p in coordinator.survey] == [0.0, 1100.0, 1200.0, 1250.0, 1300.0]

    def test_delete_recomputes(self, coordinator: CascadeCoordinator, build_survey: list[SurveyPoint]) -> None:
        coordinator.load_survey(build_survey)
        coordinator.delete_survey_point(index=2)
        assert coordinator.survey[2].md == 1200.0
        assert coordinator.survey[2].build_rate == pytest.approx(3.0)


# =============================================================================
# TOTALS AND SERIALIZATION
# =============================================================================


class TestTotals:
    """Well-level volume bookkeeping."""

    def test_circulation_split(self, coordinator: CascadeCoordinator, simple_string: list[DrillStringComponent]) -> None:
        coordinator.load_drill_string(simple_string)
        totals = coordinator.compute_totals()
        assert totals.circulation_volume_bbl == pytest.approx(
            totals.annular_volume_bbl + totals.string_internal_volume_bbl
        )
        assert totals.annular_pct + totals.string_pct == pytest.approx(100.0)
        assert totals.shoe_depth_md == 6000.0
        assert totals.depth_status is DepthStatus.SHORT
        assert totals.feet_missing == pytest.approx(99.0)
        assert totals.bit_to_bottom_ft == pytest.approx(-99.0)

    def test_empty_well(self) -> None:
        totals = CascadeCoordinator().compute_totals()
        assert totals.circulation_volume_bbl == 0.0
        assert totals.annular_pct == 0.0
        assert totals.shoe_depth_md is None
        assert totals.bit_to_bottom_ft is None


class TestSerialization:
    """Round trip through plain dictionaries."""

    def test_round_trip(
        self,
        coordinator: CascadeCoordinator,
        simple_string: list[DrillStringComponent],
        build_survey: list[SurveyPoint],
    ) -> None:
        coordinator.load_drill_string(simple_string)
        coordinator.load_survey(build_survey)
        restored = CascadeCoordinator.from_dict(coordinator.to_dict())

        assert restored.context.well_name == "Test-1"
        assert [s.to_dict() for s in restored.sections] == [s.to_dict() for s in coordinator.sections]
        assert [c.to_dict() for c in restored.drill_string] == [c.to_dict() for c in coordinator.drill_string]
        assert restored.survey[-1].tvd == pytest.approx(coordinator.survey[-1].tvd)

    def test_repr(self, coordinator: CascadeCoordinator) -> None:
        assert "sections=3" in repr(coordinator)
        assert "Idle" in repr(coordinator)
