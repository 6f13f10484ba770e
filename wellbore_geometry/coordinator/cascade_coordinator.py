"""CascadeCoordinator - Owner of the well geometry and its edit cascade.

Owns the ordered wellbore sections, the drill string and the survey, and
keeps every derived value consistent after each mutation:

Section edit (apply_edit):
1. Re-order the sections by top MD at every step of the pass
2. Recompute the edited section's volume against the section above it
3. BottomMD changed: link the next section's top to it and recompute that section
4. OD/ID/type changed: recompute the next section's volume (its annulus depends on this bore)
5. Order changed: recompute every volume against its new neighbor
6. Casing override: fold a same-top, same-OD, deeper duplicate into the previous section
7. Validate the whole list and return the findings

Neighbors are always resolved by sort position at calculation time. A mutation
requested while another is still propagating is refused by the state machine.

Reference: wellbore_geometry.coordinator.state_machine for the guard states
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from wellbore_geometry.constants import DepthConfig
from wellbore_geometry.core.naming import (
    auto_rename_sequence,
    generate_component_name,
    name_unnamed_components,
)
from wellbore_geometry.core.override_detector import CasingOverrideDetector
from wellbore_geometry.core.survey_calculator import SurveyCalculator
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.coordinator.state_machine import CascadeStateMachine
from wellbore_geometry.coordinator.totals import (
    WellTotals,
    compute_well_totals,
    total_wellbore_md,
)
from wellbore_geometry.model.diagnostic import (
    ContinuityBreakError,
    Diagnostic,
    ValidationReport,
)
from wellbore_geometry.model.drill_string import (
    ComponentDetails,
    ComponentType,
    DrillStringComponent,
)
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.model.wellbore_section import SectionType, WellboreSection
from wellbore_geometry.validation.drill_string_validator import DrillStringValidator
from wellbore_geometry.validation.geometry_validator import GeometryValidator, order_sections
from wellbore_geometry.validation.validators import validate_component_name, validate_survey

logger = logging.getLogger(__name__)

SECTION_FIELDS = frozenset({"name", "section_type", "top_md", "bottom_md", "od", "id_", "washout_pct"})
COMPONENT_FIELDS = frozenset({"name", "component_type", "length", "od", "id_", "weight_per_ft", "details"})
SURVEY_FIELDS = frozenset({"md", "hole_angle", "azimuth"})

# Edits that change the bore the next section is measured against
_BORE_FIELDS = frozenset({"od", "id_", "section_type"})


# =============================================================================
# Cascade Effects
# =============================================================================


@dataclass(frozen=True)
class VolumeRecomputed:
    """A section volume was recomputed."""

    section_id: int
    old_volume: float
    new_volume: float


@dataclass(frozen=True)
class TopLinked:
    """A section's top was auto-linked to the bottom above it."""

    section_id: int
    old_top_md: Optional[float]
    new_top_md: Optional[float]


@dataclass(frozen=True)
class CasingMerged:
    """An override duplicate was folded into the section above it."""

    kept_id: int
    removed_id: int
    bottom_md: float


@dataclass(frozen=True)
class SectionsRenumbered:
    """Section ids were rewritten; pairs of (old id, new id)."""

    id_changes: tuple[tuple[int, int], ...]


CascadeEffect = VolumeRecomputed | TopLinked | CasingMerged | SectionsRenumbered


@dataclass
class WellContext:
    """Per-well settings passed to the coordinator.

    Attributes:
        well_name: Display name of the well
        total_md: Target total measured depth (ft); the deepest section bottom when None
    """

    well_name: str = ""
    total_md: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {"well_name": self.well_name, "total_md": self.total_md}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WellContext":
        return cls(well_name=data.get("well_name", ""), total_md=data.get("total_md"))


class CascadeCoordinator:
    """Owns the well geometry collections and propagates edits.

    Example:
        coordinator = CascadeCoordinator(context=WellContext(well_name="A-1", total_md=1000.0))
        coordinator.add_section(section_type=SectionType.CASING, bottom_md=1000.0, od=9.625, id_=8.835)
        diagnostics = coordinator.apply_edit(section_id=1, field="bottom_md", value=1200.0)
    """

    def __init__(self, context: Optional[WellContext] = None) -> None:
        self.context = context or WellContext()
        self.sections: list[WellboreSection] = []
        self.drill_string: list[DrillStringComponent] = []
        self.survey: list[SurveyPoint] = []
        self.last_cascade: list[CascadeEffect] = []
        self.state_machine, _ = CascadeStateMachine.create()

    @property
    def target_total_md(self) -> float:
        """Total MD used for validation."""
        if self.context.total_md is not None:
            return self.context.total_md
        return total_wellbore_md(self.sections)

    @property
    def total_wellbore_md(self) -> float:
        return total_wellbore_md(self.sections)

    def get_section(self, section_id: int) -> WellboreSection:
        """Raises KeyError if no section has this id."""
        for section in self.sections:
            if section.id == section_id:
                return section
        raise KeyError(f"Wellbore section {section_id} not found")

    def get_component(self, component_id: int) -> DrillStringComponent:
        """Raises KeyError if no component has this id."""
        for component in self.drill_string:
            if component.id == component_id:
                return component
        raise KeyError(f"Drill-string component {component_id} not found")

    # =========================================================================
    # Section edit cascade
    # =========================================================================

    def apply_edit(self, section_id: int, field: str, value: Any) -> list[Diagnostic]:
        """Change one field of one section and propagate the consequences.

        Args:
            section_id: Id of the section to edit
            field: One of SECTION_FIELDS
            value: New value; section_type accepts a SectionType or its label

        Returns:
            Diagnostics of the full validation after the cascade, or [] if the
            edit was refused because another mutation is still in progress.

        Raises:
            KeyError: Unknown section id
            ValueError: Unknown field name
        """
        if field not in SECTION_FIELDS:
            raise ValueError(f"Unknown section field: {field!r}")
        section = self.get_section(section_id)

        if not self.state_machine.try_transition("begin_edit", section_id=section_id, field_name=field):
            logger.warning(f"Edit of section {section_id}.{field} refused: a cascade is already running")
            return []

        self.last_cascade = []
        order_before = order_sections(self.sections)
        try:
            self._set_section_field(section=section, field=field, value=value)
            self._cascade(section=section, field=field)
            if any(now is not before for now, before in zip(self.sections, order_before)):
                # Sections moved: every volume may now sit under a different bore
                self._recompute_all_volumes()
            self._merge_override(section=section)
        finally:
            self.state_machine.try_transition("finish_edit")

        return self.validate().items

    def _set_section_field(self, section: WellboreSection, field: str, value: Any) -> None:
        if field == "section_type":
            section_type = value if isinstance(value, SectionType) else SectionType.from_label(value)
            section.set_section_type(section_type)
        elif field == "id_":
            section.set_inner_diameter(value)
        else:
            setattr(section, field, value)
        logger.debug(f"Section {section.id}: {field} = {value!r}")

    def _cascade(self, section: WellboreSection, field: str) -> None:
        self.sections = order_sections(self.sections)
        index = self.sections.index(section)
        previous = self.sections[index - 1] if index > 0 else None
        following = self.sections[index + 1] if index + 1 < len(self.sections) else None

        self._recompute_volume(section=section, previous=previous)

        if following is None:
            return
        if field == "bottom_md":
            old_top = following.top_md
            following.link_to_previous_bottom(previous_bottom_md=section.bottom_md, is_first_row=False)
            if following.top_md != old_top:
                self.last_cascade.append(
                    TopLinked(section_id=following.id, old_top_md=old_top, new_top_md=following.top_md)
                )
                self._cascade(section=following, field="top_md")
            else:
                self._recompute_volume(section=following, previous=section)
        elif field in _BORE_FIELDS:
            self._recompute_volume(section=following, previous=section)

    def _recompute_volume(self, section: WellboreSection, previous: Optional[WellboreSection]) -> None:
        old_volume = section.volume
        section.volume = VolumeCalculator.section_volume(section=section, previous=previous)
        if section.volume != old_volume:
            self.last_cascade.append(
                VolumeRecomputed(section_id=section.id, old_volume=old_volume, new_volume=section.volume)
            )
        logger.debug(f"Section {section.id} volume {old_volume:.3f} -> {section.volume:.3f} bbl")

    def _merge_override(self, section: WellboreSection) -> None:
        """Fold an override duplicate into the section above it. Terminal for the pass."""
        if section not in self.sections:
            return
        index = self.sections.index(section)
        if index == 0:
            return
        previous = self.sections[index - 1]
        if not CasingOverrideDetector.should_merge(section, previous):
            return

        previous.bottom_md = section.bottom_md
        self.sections.remove(section)
        self.last_cascade.append(
            CasingMerged(kept_id=previous.id, removed_id=section.id, bottom_md=previous.bottom_md)
        )
        logger.info(f"Casing overwritten/extended: {previous.name} now to {previous.bottom_md:.2f} ft")

        self.renumber()
        self._recompute_all_volumes()

    def _recompute_all_volumes(self) -> None:
        for index, section in enumerate(self.sections):
            previous = self.sections[index - 1] if index > 0 else None
            self._recompute_volume(section=section, previous=previous)

    # =========================================================================
    # Section list operations
    # =========================================================================

    def add_section(
        self,
        section_type: SectionType = SectionType.CASING,
        bottom_md: Optional[float] = None,
        od: Optional[float] = None,
        id_: Optional[float] = None,
        washout_pct: Optional[float] = None,
        name: str = "",
    ) -> WellboreSection:
        """Append a section. The first one starts at surface, later ones at the deepest bottom.

        Returns:
            The new section, with its volume computed.
        """
        ordered = order_sections(self.sections)
        section = WellboreSection(
            id=len(self.sections) + 1,
            name=name,
            section_type=section_type,
            bottom_md=bottom_md,
            od=od,
            id_=id_,
            washout_pct=washout_pct,
        )
        if not self.sections:
            section.link_to_previous_bottom(previous_bottom_md=None, is_first_row=True)
        else:
            deepest = max((s.bottom_md for s in ordered if s.bottom_md is not None), default=None)
            section.link_to_previous_bottom(previous_bottom_md=deepest, is_first_row=False)

        self.sections.append(section)
        self.sections = order_sections(self.sections)
        index = self.sections.index(section)
        previous = self.sections[index - 1] if index > 0 else None
        section.volume = VolumeCalculator.section_volume(section=section, previous=previous)
        logger.info(f"Added section {section.id} ({section.section_type.value}) at top {section.top_md}")
        return section

    def delete_section(self, section_id: int) -> list[Diagnostic]:
        """Remove a section, renumber, re-link the section that moved up and validate.

        Raises:
            KeyError: Unknown section id
        """
        section = self.get_section(section_id)
        ordered = order_sections(self.sections)
        index = ordered.index(section)
        previous = ordered[index - 1] if index > 0 else None

        self.sections.remove(section)
        logger.info(f"Deleted section {section_id} ({section.section_type.value})")

        self.sections = order_sections(self.sections)
        if index < len(self.sections):
            following = self.sections[index]
            following.link_to_previous_bottom(
                previous_bottom_md=previous.bottom_md if previous is not None else None,
                is_first_row=index == 0,
            )
        self.renumber()
        self._recompute_all_volumes()
        return self.validate().items

    def renumber(self) -> None:
        """Rewrite section ids to 1..N in depth order.

        Allowed when idle and from inside a cascade; refused while renumbering.
        """
        if not self.state_machine.try_transition("begin_renumber"):
            return
        try:
            self._renumber_ids()
        finally:
            self.state_machine.try_transition("finish_renumber")

    def _renumber_ids(self) -> None:
        self.sections = order_sections(self.sections)
        changes = []
        for index, section in enumerate(self.sections):
            new_id = index + 1
            if section.id != new_id:
                changes.append((section.id, new_id))
                section.id = new_id
        if changes:
            self.last_cascade.append(SectionsRenumbered(id_changes=tuple(changes)))
            logger.info(f"Renumbered {len(changes)} wellbore sections")

    # =========================================================================
    # Drill string
    # =========================================================================

    def add_component(
        self,
        component_type: ComponentType,
        length: Optional[float] = None,
        od: Optional[float] = None,
        id_: Optional[float] = None,
        weight_per_ft: Optional[float] = None,
        details: Optional[ComponentDetails] = None,
        name: Optional[str] = None,
    ) -> DrillStringComponent:
        """Append a component at the bottom of the string.

        Raises:
            ValueError: A unique kind (Bit, Motor, MWD, ...) is already in the string
        """
        self._check_unique_kind(component_type=component_type, others=self.drill_string)

        component = DrillStringComponent(
            id=len(self.drill_string) + 1,
            component_type=component_type,
            name=name or generate_component_name(component_type=component_type, existing=self.drill_string),
            length=length,
            od=od,
            id_=id_,
            weight_per_ft=weight_per_ft,
            details=details,
        )
        self.drill_string.append(component)
        logger.info(f"Added drill-string component {component.name!r}")
        return component

    def delete_component(self, component_id: int) -> None:
        """Remove a component, then renumber and rename the rest by position."""
        component = self.get_component(component_id)
        self.drill_string.remove(component)
        self._renumber_components()
        auto_rename_sequence(self.drill_string)
        logger.info(f"Deleted drill-string component {component.name!r}")

    def edit_component(self, component_id: int, field: str, value: Any) -> list[Diagnostic]:
        """Change one component field and validate the string.

        A rejected name is not applied; its finding is returned alone.
        A kind change regenerates the component's default name.

        Raises:
            KeyError: Unknown component id
            ValueError: Unknown field name, or a kind change to a unique kind
                already present elsewhere in the string
        """
        if field not in COMPONENT_FIELDS:
            raise ValueError(f"Unknown component field: {field!r}")
        component = self.get_component(component_id)

        if field == "name":
            error = validate_component_name(name=value, component_id=component_id, others=self.drill_string)
            if error is not None:
                return [error]
            component.name = value.strip()
        elif field == "component_type":
            component_type = value if isinstance(value, ComponentType) else ComponentType.from_label(value)
            others = [c for c in self.drill_string if c is not component]
            self._check_unique_kind(component_type=component_type, others=others)
            component.set_component_type(component_type)
            component.name = generate_component_name(component_type=component_type, existing=others)
        elif field == "details":
            component.set_details(value)
        else:
            setattr(component, field, value)
        logger.debug(f"Component {component_id}: {field} = {value!r}")
        return self.validate_drill_string().items

    @staticmethod
    def _check_unique_kind(component_type: ComponentType, others: list[DrillStringComponent]) -> None:
        if component_type.is_unique and any(c.component_type is component_type for c in others):
            raise ValueError(f"Only one {component_type.label} is allowed per drill string")

    def _renumber_components(self) -> None:
        for index, component in enumerate(self.drill_string):
            component.id = index + 1

    def force_to_bottom(self) -> list[Diagnostic]:
        """Extend the last component so the string reaches total wellbore MD.

        Returns:
            [StringOverrunError] if the string already exceeds the well, else
            the drill-string validation after the adjustment.
        """
        well_md = self.total_wellbore_md
        overrun = DrillStringValidator.check_string_length(components=self.drill_string, well_md=well_md)
        if overrun is not None:
            logger.warning(overrun.message)
            return [overrun]
        if well_md <= 0 or not self.drill_string:
            return []

        last = self.drill_string[-1]
        delta = well_md - VolumeCalculator.total_string_length(self.drill_string)
        if delta > DepthConfig.STRING_DEPTH_TOLERANCE_FT:
            old_length = last.length or 0.0
            last.length = old_length + delta
            logger.info(
                f"Drill string forced to bottom. {last.name} length adjusted from "
                f"{old_length:.2f} ft to {last.length:.2f} ft (+{delta:.2f} ft)"
            )
        return self.validate_drill_string().items

    # =========================================================================
    # Survey
    # =========================================================================

    def add_survey_point(self, point: SurveyPoint) -> int:
        """Insert a station in MD order and recompute from it downward.

        Returns:
            Index of the new station.
        """
        index = next((i for i, p in enumerate(self.survey) if p.md > point.md), len(self.survey))
        self.survey.insert(index, point)
        SurveyCalculator.recalculate_from(points=self.survey, start_index=index)
        logger.debug(f"Added survey station at MD {point.md:.2f} (index {index})")
        return index

    def edit_survey_point(self, index: int, field: str, value: float) -> list[Diagnostic]:
        """Change MD, hole angle or azimuth of one station and recompute from there.

        Raises:
            IndexError: No station at this index
            ValueError: Unknown field name
        """
        if field not in SURVEY_FIELDS:
            raise ValueError(f"Unknown survey field: {field!r}")
        point = self.survey[index]
        setattr(point, field, value)

        start = index
        if field == "md":
            self.survey.sort(key=lambda p: p.md)
            start = min(index, self.survey.index(point))
        SurveyCalculator.recalculate_from(points=self.survey, start_index=start)
        return self.validate_survey().items

    def delete_survey_point(self, index: int) -> None:
        del self.survey[index]
        SurveyCalculator.recalculate_from(points=self.survey, start_index=index)

    # =========================================================================
    # Bulk loads
    # =========================================================================

    def load_sections(self, sections: list[WellboreSection]) -> list[Diagnostic]:
        """Replace all sections, then recompute and validate once."""
        if not self.state_machine.try_transition("begin_bulk"):
            return []
        try:
            self.sections = order_sections(sections)
            for index, section in enumerate(self.sections):
                section.id = index + 1
            self.last_cascade = []
            self._recompute_all_volumes()
        finally:
            self.state_machine.try_transition("finish_bulk")
        logger.info(f"Loaded {len(self.sections)} wellbore sections")
        return self.validate().items

    def load_drill_string(self, components: list[DrillStringComponent]) -> list[Diagnostic]:
        """Replace the drill string, renumber and name by position, and validate once."""
        if not self.state_machine.try_transition("begin_bulk"):
            return []
        try:
            self.drill_string = list(components)
            self._renumber_components()
            name_unnamed_components(self.drill_string)
        finally:
            self.state_machine.try_transition("finish_bulk")
        logger.info(f"Loaded {len(self.drill_string)} drill-string components")
        return self.validate_drill_string().items

    def load_survey(self, points: list[SurveyPoint]) -> list[Diagnostic]:
        """Replace the survey, sort by MD and recompute every station once."""
        if not self.state_machine.try_transition("begin_bulk"):
            return []
        try:
            self.survey = list(points)
            SurveyCalculator.recalculate_all(self.survey)
        finally:
            self.state_machine.try_transition("finish_bulk")
        logger.info(f"Loaded {len(self.survey)} survey stations")
        return self.validate_survey().items

    # =========================================================================
    # Validation and totals
    # =========================================================================

    def validate(self) -> ValidationReport:
        return GeometryValidator.validate(sections=self.sections, total_md=self.target_total_md)

    def check_continuity(self) -> list[ContinuityBreakError]:
        return GeometryValidator.check_continuity(self.sections)

    def validate_drill_string(self) -> ValidationReport:
        return DrillStringValidator.validate(components=self.drill_string, well_md=self.total_wellbore_md)

    def validate_survey(self) -> ValidationReport:
        return ValidationReport(items=validate_survey(points=self.survey))

    def compute_totals(self) -> WellTotals:
        return compute_well_totals(sections=self.sections, components=self.drill_string)

    def has_string_overrun(self) -> bool:
        overrun = DrillStringValidator.check_string_length(components=self.drill_string, well_md=self.total_wellbore_md)
        return overrun is not None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return {
            "context": self.context.to_dict(),
            "sections": [s.to_dict() for s in self.sections],
            "drill_string": [c.to_dict() for c in self.drill_string],
            "survey": [p.to_dict() for p in self.survey],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CascadeCoordinator":
        """Restore a coordinator. Derived values are recomputed, not trusted."""
        coordinator = cls(context=WellContext.from_dict(data.get("context", {})))
        coordinator.load_sections([WellboreSection.from_dict(data=s) for s in data.get("sections", [])])
        coordinator.load_drill_string([DrillStringComponent.from_dict(data=c) for c in data.get("drill_string", [])])
        coordinator.load_survey([SurveyPoint.from_dict(data=p) for p in data.get("survey", [])])
        return coordinator

    def __repr__(self) -> str:
        return (
            f"CascadeCoordinator(well={self.context.well_name!r}, sections={len(self.sections)}, "
            f"components={len(self.drill_string)}, stations={len(self.survey)}, "
            f"state={self.state_machine.get_state_name()})"
        )
