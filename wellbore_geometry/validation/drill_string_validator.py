"""DrillStringValidator - Diagnostic sweep over drill-string components.

Components are checked in id order:
- E001: duplicate ids (one finding per offending component)
- E002: a one-per-string kind (Bit, Motor, MWD, LWD, PWD, PWO) appears more than once
- D001 / D002 / D003: OD > 0, ID > 0, OD > ID (first failure per component only)
- L001: length > 0
- C001: a component is thinner than the one below it
- Kind-specific details (motor, bit, tool joint) via the detail validators
- DS1: whole string longer than the well
"""

from collections import Counter
from typing import Iterable, Optional

from wellbore_geometry.constants import DepthConfig
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.model.diagnostic import (
    ComponentDiameterOrderError,
    ComponentInnerDiameterError,
    ComponentLengthError,
    ComponentOuterDiameterError,
    Diagnostic,
    DuplicateComponentIdError,
    DuplicateUniqueComponentError,
    StringOverrunError,
    ThickerComponentBelowError,
    ValidationReport,
)
from wellbore_geometry.model.drill_string import DrillStringComponent
from wellbore_geometry.validation.validators import validate_component_details


class DrillStringValidator:
    """Rule engine for the drill string."""

    @staticmethod
    def validate(
        components: Iterable[DrillStringComponent],
        well_md: Optional[float] = None,
    ) -> ValidationReport:
        """Run every drill-string rule.

        Args:
            components: Components in any order
            well_md: Total well depth (ft); the overrun check is skipped when None or <= 0

        Returns:
            ValidationReport, empty for an empty string.
        """
        ordered = sorted(components, key=lambda c: c.id)
        report = ValidationReport()
        if not ordered:
            return report

        report.items.extend(DrillStringValidator._check_unique_ids(ordered))
        report.items.extend(DrillStringValidator._check_unique_kinds(ordered))
        for component in ordered:
            report.items.extend(DrillStringValidator._check_dimensions(component))
            report.items.extend(validate_component_details(component=component))
        report.items.extend(DrillStringValidator._check_taper(ordered))

        overrun = DrillStringValidator.check_string_length(components=ordered, well_md=well_md)
        if overrun is not None:
            report.items.append(overrun)
        return report

    @staticmethod
    def has_critical_errors(component: DrillStringComponent) -> bool:
        """Quick check used before accepting a single row."""
        return any(d.is_error for d in DrillStringValidator._check_dimensions(component))

    @staticmethod
    def check_string_length(
        components: Iterable[DrillStringComponent],
        well_md: Optional[float],
    ) -> StringOverrunError | None:
        """Returns StringOverrunError if the string is longer than the well."""
        if well_md is None or well_md <= 0:
            return None
        length = VolumeCalculator.total_string_length(components)
        if well_md - length < -DepthConfig.STRING_DEPTH_TOLERANCE_FT:
            return StringOverrunError(string_length_ft=length, well_md_ft=well_md)
        return None

    @staticmethod
    def _check_unique_ids(ordered: list[DrillStringComponent]) -> list[Diagnostic]:
        counts = Counter(c.id for c in ordered)
        return [
            DuplicateComponentIdError(
                section_id=str(c.id),
                component_name=c.component_type.value,
                duplicate_id=c.id,
            )
            for c in ordered
            if counts[c.id] > 1
        ]

    @staticmethod
    def _check_unique_kinds(ordered: list[DrillStringComponent]) -> list[Diagnostic]:
        """One finding per repeated unique kind, placed on its second occurrence."""
        counts = Counter(c.component_type for c in ordered if c.is_unique_kind)
        found: list[Diagnostic] = []
        seen, reported = set(), set()
        for component in ordered:
            kind = component.component_type
            if counts[kind] < 2:
                continue
            if kind in seen and kind not in reported:
                reported.add(kind)
                found.append(
                    DuplicateUniqueComponentError(
                        section_id=str(component.id),
                        component_name=component.name or kind.value,
                        label=kind.label,
                        count=counts[kind],
                    )
                )
            seen.add(kind)
        return found

    @staticmethod
    def _check_dimensions(component: DrillStringComponent) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        sid, name = str(component.id), component.name or component.component_type.value

        if component.od is None or component.od <= 0:
            found.append(ComponentOuterDiameterError(section_id=sid, component_name=name))
        elif component.id_ is None or component.id_ <= 0:
            found.append(ComponentInnerDiameterError(section_id=sid, component_name=name))
        elif component.od <= component.id_:
            found.append(
                ComponentDiameterOrderError(section_id=sid, component_name=name, od=component.od, id_=component.id_)
            )

        if component.length is None or component.length <= 0:
            found.append(ComponentLengthError(section_id=sid, component_name=name))
        return found

    @staticmethod
    def _check_taper(ordered: list[DrillStringComponent]) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        for current, following in zip(ordered, ordered[1:]):
            if current.od is None or following.od is None:
                continue
            if current.od < following.od:
                found.append(
                    ThickerComponentBelowError(
                        section_id=str(current.id),
                        component_name=f"{current.component_type.value} → {following.component_type.value}",
                        od=current.od,
                        next_id=following.id,
                        next_od=following.od,
                    )
                )
        return found
