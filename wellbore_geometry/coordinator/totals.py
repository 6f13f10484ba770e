"""Well totals - Volumes and depth bookkeeping across sections and drill string.

Annular volume is the wellbore volume minus the closed-end volume of the
string (pipe full of fluid counts as occupied), clamped to >= 0. Circulation
volume is annulus plus the string's internal capacity.

Depth differential = total wellbore MD - total string length:
    > tolerance  -> Short (string does not reach bottom)
    |d| <= tol   -> OnBottom
    < -tolerance -> Overrun (string is longer than the well)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from wellbore_geometry.constants import DepthConfig
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.model.drill_string import ComponentType, DrillStringComponent
from wellbore_geometry.model.wellbore_section import WellboreSection


class DepthStatus(Enum):
    SHORT = "Short"
    ON_BOTTOM = "OnBottom"
    OVERRUN = "Overrun"


def depth_status(differential_ft: float) -> DepthStatus:
    if abs(differential_ft) < DepthConfig.STRING_DEPTH_TOLERANCE_FT:
        return DepthStatus.ON_BOTTOM
    if differential_ft > 0:
        return DepthStatus.SHORT
    return DepthStatus.OVERRUN


def total_wellbore_md(sections: Iterable[WellboreSection]) -> float:
    """Deepest section bottom, 0 when no bottom is set."""
    return max((s.bottom_md for s in sections if s.bottom_md is not None), default=0.0)


def shoe_depth(sections: Iterable[WellboreSection]) -> Optional[float]:
    """Deepest Casing/Liner bottom, None without cased sections."""
    return max((s.bottom_md for s in sections if s.is_tubular and s.bottom_md is not None), default=None)


@dataclass(frozen=True)
class WellTotals:
    """Summary numbers for one well.

    Attributes:
        wellbore_volume_bbl: Sum of stored section volumes
        string_internal_volume_bbl: Fluid inside the drill string
        string_displacement_volume_bbl: Steel volume of the drill string
        annular_volume_bbl: Wellbore volume not occupied by the closed-end string
        circulation_volume_bbl: Annulus plus string capacity
        annular_pct: Annulus share of the circulation volume
        string_pct: String capacity share of the circulation volume
        total_wellbore_md: Deepest section bottom (ft)
        shoe_depth_md: Deepest casing/liner bottom (ft)
        string_length_ft: Sum of component lengths
        depth_differential_ft: total_wellbore_md - string_length_ft
        depth_status: Short / OnBottom / Overrun
        bit_to_bottom_ft: string_length_ft - total_wellbore_md when the last component is a Bit
    """

    wellbore_volume_bbl: float
    string_internal_volume_bbl: float
    string_displacement_volume_bbl: float
    annular_volume_bbl: float
    circulation_volume_bbl: float
    annular_pct: float
    string_pct: float
    total_wellbore_md: float
    shoe_depth_md: Optional[float]
    string_length_ft: float
    depth_differential_ft: float
    depth_status: DepthStatus
    bit_to_bottom_ft: Optional[float]

    @property
    def is_on_bottom(self) -> bool:
        """Bit within the on-bottom tolerance of total depth."""
        return self.bit_to_bottom_ft is not None and abs(self.bit_to_bottom_ft) < DepthConfig.ON_BOTTOM_TOLERANCE_FT

    @property
    def feet_missing(self) -> float:
        """Length the string needs to reach bottom, 0 when it already does."""
        if self.total_wellbore_md <= 0:
            return 0.0
        return max(0.0, self.depth_differential_ft)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wellbore_volume_bbl": round(self.wellbore_volume_bbl, 2),
            "string_internal_volume_bbl": round(self.string_internal_volume_bbl, 2),
            "string_displacement_volume_bbl": round(self.string_displacement_volume_bbl, 2),
            "annular_volume_bbl": round(self.annular_volume_bbl, 2),
            "circulation_volume_bbl": round(self.circulation_volume_bbl, 2),
            "annular_pct": round(self.annular_pct, 1),
            "string_pct": round(self.string_pct, 1),
            "total_wellbore_md": self.total_wellbore_md,
            "shoe_depth_md": self.shoe_depth_md,
            "string_length_ft": self.string_length_ft,
            "depth_differential_ft": round(self.depth_differential_ft, 2),
            "depth_status": self.depth_status.value,
            "bit_to_bottom_ft": self.bit_to_bottom_ft,
        }


def compute_well_totals(
    sections: list[WellboreSection],
    components: list[DrillStringComponent],
) -> WellTotals:
    """Aggregate volumes and depth status for the current geometry."""
    wellbore_volume = VolumeCalculator.total_section_volume(sections)
    internal = VolumeCalculator.total_string_internal_volume(components)
    displacement = VolumeCalculator.total_string_displacement_volume(components)
    closed_end = VolumeCalculator.total_string_closed_end_volume(components)

    annular = max(0.0, wellbore_volume - closed_end)
    circulation = annular + internal
    annular_pct = annular / circulation * 100.0 if circulation > 0 else 0.0
    string_pct = internal / circulation * 100.0 if circulation > 0 else 0.0

    well_md = total_wellbore_md(sections)
    string_length = VolumeCalculator.total_string_length(components)
    differential = well_md - string_length

    bit_to_bottom = None
    if components and components[-1].component_type is ComponentType.BIT:
        bit_to_bottom = string_length - well_md

    return WellTotals(
        wellbore_volume_bbl=wellbore_volume,
        string_internal_volume_bbl=internal,
        string_displacement_volume_bbl=displacement,
        annular_volume_bbl=annular,
        circulation_volume_bbl=circulation,
        annular_pct=annular_pct,
        string_pct=string_pct,
        total_wellbore_md=well_md,
        shoe_depth_md=shoe_depth(sections),
        string_length_ft=string_length,
        depth_differential_ft=differential,
        depth_status=depth_status(differential),
        bit_to_bottom_ft=bit_to_bottom,
    )
