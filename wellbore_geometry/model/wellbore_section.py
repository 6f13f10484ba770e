"""WellboreSection - One interval of the wellbore (open hole, casing or liner).

A section covers [top_md, bottom_md] and has an outer diameter (the hole
diameter for OpenHole) and an inner diameter (always 0 for OpenHole).
Its volume is stored, not computed on access, because it depends on the
section above it; the coordinator keeps it current.

Sections never hold references to their neighbors. Adjacency is resolved
by depth order whenever a calculation needs it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from wellbore_geometry.constants import RoughnessConfig


class SectionType(Enum):
    """Kind of wellbore interval."""

    OPEN_HOLE = "OpenHole"
    CASING = "Casing"
    LINER = "Liner"

    @property
    def is_tubular(self) -> bool:
        """Casing and Liner are pipe; OpenHole is bare formation."""
        return self is not SectionType.OPEN_HOLE

    @classmethod
    def from_label(cls, label: str) -> "SectionType":
        """Parse "OpenHole", "Open Hole", "casing", ... into a SectionType.

        Raises:
            ValueError: If the label names no known section type.
        """
        key = label.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown section type: {label!r}")


@dataclass
class WellboreSection:
    """A wellbore interval.

    Attributes:
        id: Display id, dense 1..N in depth order after renumbering
        name: Free-text name
        section_type: OpenHole, Casing or Liner
        top_md: Top measured depth (ft), None until entered
        bottom_md: Bottom measured depth (ft), None until entered
        od: Outer diameter, or hole diameter for OpenHole (in)
        id_: Inner diameter (in), exactly 0 for OpenHole
        washout_pct: Open hole enlargement over nominal (%), OpenHole only
        volume: Derived volume (bbl), maintained by the coordinator

    Example:
        section = WellboreSection(id=1, name="Surface", section_type=SectionType.CASING,
                                  top_md=0.0, bottom_md=1500.0, od=13.375, id_=12.415)
    """

    id: int
    name: str = ""
    section_type: SectionType = SectionType.CASING
    top_md: Optional[float] = None
    bottom_md: Optional[float] = None
    od: Optional[float] = None
    id_: Optional[float] = None
    washout_pct: Optional[float] = None
    volume: float = 0.0

    def __post_init__(self) -> None:
        """Enforce the OpenHole bore rule on construction."""
        if self.section_type is SectionType.OPEN_HOLE:
            self.id_ = 0.0

    @property
    def is_open_hole(self) -> bool:
        return self.section_type is SectionType.OPEN_HOLE

    @property
    def is_tubular(self) -> bool:
        return self.section_type.is_tubular

    @property
    def length(self) -> Optional[float]:
        """Interval length (ft), None while a depth is unset."""
        if self.top_md is None or self.bottom_md is None:
            return None
        return self.bottom_md - self.top_md

    @property
    def hydraulic_roughness_in(self) -> float:
        if self.is_open_hole:
            return RoughnessConfig.OPEN_HOLE_IN
        return RoughnessConfig.CASED_HOLE_IN

    def set_section_type(self, section_type: SectionType) -> None:
        """Change type. OpenHole forces ID to 0; leaving OpenHole clears washout."""
        was_open_hole = self.is_open_hole
        self.section_type = section_type
        if section_type is SectionType.OPEN_HOLE:
            self.id_ = 0.0
        elif was_open_hole:
            self.washout_pct = None

    def set_inner_diameter(self, id_: Optional[float]) -> None:
        """Set ID. OpenHole ignores the value and stays at 0."""
        self.id_ = 0.0 if self.is_open_hole else id_

    def link_to_previous_bottom(self, previous_bottom_md: Optional[float], is_first_row: bool) -> None:
        """Auto-link top to the section above. The first row always stays at surface."""
        if is_first_row:
            self.top_md = 0.0
        elif previous_bottom_md is not None:
            self.top_md = previous_bottom_md

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "section_type": self.section_type.value,
            "top_md": self.top_md,
            "bottom_md": self.bottom_md,
            "od": self.od,
            "id_": self.id_,
            "washout_pct": self.washout_pct,
            "volume": self.volume,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WellboreSection":
        """Create WellboreSection from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            section_type=SectionType(data["section_type"]),
            top_md=data.get("top_md"),
            bottom_md=data.get("bottom_md"),
            od=data.get("od"),
            id_=data.get("id_"),
            washout_pct=data.get("washout_pct"),
            volume=data.get("volume", 0.0),
        )

    def __repr__(self) -> str:
        return (
            f"WellboreSection({self.id}, {self.section_type.value}, "
            f"{self.top_md}-{self.bottom_md} ft, od={self.od}, id={self.id_})"
        )
