"""Volumetric formulas for wellbore sections and drill-string components.

Provides the capacity helpers used everywhere a volume is needed:
- Internal capacity of a tubular
- Steel displacement of a tubular
- Open hole volume with washout
- Annular volume between a section and the bore above it
- Context-aware volume of a wellbore section

Units: diameters in inches, lengths in feet, volumes in barrels.
bbl = (pi/4) * d^2 * L / 1029.4 for circular areas.

All functions are pure. Missing (None) or non-positive inputs give 0 rather
than raising, and no result is ever negative.
"""

from math import pi
from typing import TYPE_CHECKING, Iterable, Optional

from wellbore_geometry.constants import VolumeConfig

if TYPE_CHECKING:
    from wellbore_geometry.model.drill_string import DrillStringComponent
    from wellbore_geometry.model.wellbore_section import WellboreSection

BBL_DIVISOR = VolumeConfig.BBL_DIVISOR


def _all_positive(*values: Optional[float]) -> bool:
    return all(v is not None and v > 0 for v in values)


class VolumeCalculator:
    """Static methods for capacity and displacement volumes."""

    BBL_DIVISOR = BBL_DIVISOR

    @staticmethod
    def internal_volume(id_: Optional[float], length: Optional[float]) -> float:
        """Fluid capacity inside a tubular.

        Args:
            id_: Inner diameter (in)
            length: Length (ft)

        Returns:
            (pi/4) * id^2 * length / 1029.4 in bbl, or 0 if any input is missing or <= 0.
        """
        if not _all_positive(id_, length):
            return 0.0
        return (pi / 4.0) * id_**2 * length / BBL_DIVISOR

    @staticmethod
    def displacement_volume(od: Optional[float], id_: Optional[float], length: Optional[float]) -> float:
        """Steel volume of a tubular wall.

        Args:
            od: Outer diameter (in)
            id_: Inner diameter (in)
            length: Length (ft)

        Returns:
            (pi/4) * (od^2 - id^2) * length / 1029.4 in bbl, 0 if od <= id or
            any input is missing or <= 0.
        """
        if not _all_positive(od, id_, length):
            return 0.0
        if od <= id_:
            return 0.0
        return (pi / 4.0) * (od**2 - id_**2) * length / BBL_DIVISOR

    @staticmethod
    def closed_end_volume(od: Optional[float], length: Optional[float]) -> float:
        """Volume a plugged tubular occupies (wall plus bore)."""
        if not _all_positive(od, length):
            return 0.0
        return (pi / 4.0) * od**2 * length / BBL_DIVISOR

    @staticmethod
    def open_hole_volume(
        hole_diameter: Optional[float],
        length: Optional[float],
        washout_pct: Optional[float],
    ) -> float:
        """Open hole volume enlarged by washout.

        Args:
            hole_diameter: Nominal hole diameter (in)
            length: Interval length (ft)
            washout_pct: Enlargement over nominal (%)

        Returns:
            (d^2 / 1029.4) * length * (1 + washout/100) in bbl. 0 while washout
            is unset, so a missing entry never passes for a gauge hole.
        """
        if not _all_positive(hole_diameter, length) or washout_pct is None:
            return 0.0
        volume = (hole_diameter**2 / BBL_DIVISOR) * length * (1.0 + washout_pct / 100.0)
        return max(0.0, volume)

    @staticmethod
    def annular_volume(
        previous_id: Optional[float],
        current_od: Optional[float],
        length: Optional[float],
        current_id: Optional[float] = None,
    ) -> float:
        """Annulus between this section's OD and the bore of the section above.

        Falls back to the internal capacity of the current section,
        id^2 / 1029.4 * length, when there is no usable previous bore.

        Args:
            previous_id: Inner diameter of the section above (in), None if there is none
            current_od: Outer diameter of this section (in)
            length: Interval length (ft)
            current_id: Inner diameter of this section (in), used by the fallback

        Returns:
            Volume in bbl, clamped to >= 0.
        """
        if not _all_positive(length):
            return 0.0
        if _all_positive(previous_id, current_od):
            volume = (pi / 4.0) * (previous_id**2 - current_od**2) * length / BBL_DIVISOR
        elif _all_positive(current_id):
            volume = current_id**2 / BBL_DIVISOR * length
        else:
            volume = 0.0
        return max(0.0, volume)

    @staticmethod
    def section_volume(
        section: "WellboreSection",
        previous: Optional["WellboreSection"],
    ) -> float:
        """Volume of a wellbore section given the section above it.

        OpenHole uses the washout-enlarged hole volume; Casing and Liner use the
        annulus against the previous bore.
        """
        if section.is_open_hole:
            return VolumeCalculator.open_hole_volume(
                hole_diameter=section.od,
                length=section.length,
                washout_pct=section.washout_pct,
            )
        return VolumeCalculator.annular_volume(
            previous_id=previous.id_ if previous is not None else None,
            current_od=section.od,
            length=section.length,
            current_id=section.id_,
        )

    # =========================================================================
    # Totals
    # =========================================================================

    @staticmethod
    def total_section_volume(sections: Iterable["WellboreSection"]) -> float:
        return sum(s.volume for s in sections)

    @staticmethod
    def total_string_internal_volume(components: Iterable["DrillStringComponent"]) -> float:
        return sum(c.internal_volume for c in components)

    @staticmethod
    def total_string_displacement_volume(components: Iterable["DrillStringComponent"]) -> float:
        return sum(c.displacement_volume for c in components)

    @staticmethod
    def total_string_closed_end_volume(components: Iterable["DrillStringComponent"]) -> float:
        return sum(VolumeCalculator.closed_end_volume(od=c.od, length=c.length) for c in components)

    @staticmethod
    def total_string_length(components: Iterable["DrillStringComponent"]) -> float:
        return sum(c.length or 0.0 for c in components)
