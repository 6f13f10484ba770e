"""Casing-override detection.

When a Casing/Liner is entered with the same top and OD as the Casing/Liner
directly above it and reaches deeper, the user is re-running that string to a
new depth rather than nesting a second one. The validator reports this as an
advisory; the coordinator folds the duplicate into the previous section.

Matching tolerances live in OverrideConfig.
"""

from typing import TYPE_CHECKING

from wellbore_geometry.constants import OverrideConfig

if TYPE_CHECKING:
    from wellbore_geometry.model.wellbore_section import WellboreSection


class CasingOverrideDetector:
    """Static predicates over a section and the section above it."""

    @staticmethod
    def shares_top(section: "WellboreSection", previous: "WellboreSection") -> bool:
        if section.top_md is None or previous.top_md is None:
            return False
        return abs(section.top_md - previous.top_md) < OverrideConfig.TOP_TOLERANCE_FT

    @staticmethod
    def matches_od(section: "WellboreSection", previous: "WellboreSection") -> bool:
        return abs((section.od or 0.0) - (previous.od or 0.0)) < OverrideConfig.OD_TOLERANCE_IN

    @staticmethod
    def reaches_as_deep(section: "WellboreSection", previous: "WellboreSection") -> bool:
        if section.bottom_md is None or previous.bottom_md is None:
            return False
        return section.bottom_md >= previous.bottom_md

    @staticmethod
    def is_override_extension(section: "WellboreSection", previous: "WellboreSection") -> bool:
        """Same top, at least as deep: any section type."""
        return CasingOverrideDetector.shares_top(section, previous) and CasingOverrideDetector.reaches_as_deep(
            section, previous
        )

    @staticmethod
    def is_casing_override(section: "WellboreSection", previous: "WellboreSection") -> bool:
        """Casing/Liner over Casing/Liner with the same top and OD, at least as deep."""
        return (
            section.is_tubular
            and previous.is_tubular
            and CasingOverrideDetector.is_override_extension(section, previous)
            and CasingOverrideDetector.matches_od(section, previous)
        )

    @staticmethod
    def should_merge(section: "WellboreSection", previous: "WellboreSection") -> bool:
        """Casing override of the same type that strictly extends the previous bottom."""
        return (
            CasingOverrideDetector.is_casing_override(section, previous)
            and section.section_type is previous.section_type
            and section.bottom_md > previous.bottom_md
        )
