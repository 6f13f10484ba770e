"""SurveyPoint - One directional survey station.

Raw inputs are measured depth, hole angle (inclination) and azimuth. Position
and rate values are derived by the minimum curvature calculator and stored on
the point, because each station's position depends on every station above it.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass
class SurveyPoint:
    """A survey station.

    Attributes:
        md: Measured depth (ft)
        hole_angle: Inclination from vertical (deg)
        azimuth: Direction clockwise from north (deg)
        tvd: True vertical depth (ft), derived
        northing: Cumulative north offset (ft), derived
        easting: Cumulative east offset (ft), derived
        vertical_section: Horizontal displacement from the tie-in (ft), derived
        dogleg_severity: Curvature (deg/100 ft), derived
        build_rate: Inclination change (deg/100 ft), derived
        turn_rate: Azimuth change (deg/100 ft), derived
        measured_tvd: TVD reported by the survey provider, if any (import only)

    Example:
        point = SurveyPoint(md=1000.0, hole_angle=12.5, azimuth=45.0)
    """

    md: float
    hole_angle: float = 0.0
    azimuth: float = 0.0
    tvd: float = 0.0
    northing: float = 0.0
    easting: float = 0.0
    vertical_section: float = 0.0
    dogleg_severity: float = 0.0
    build_rate: float = 0.0
    turn_rate: float = 0.0
    measured_tvd: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.md) or np.isnan(self.hole_angle) or np.isnan(self.azimuth):
            raise ValueError(f"SurveyPoint cannot have NaN inputs at MD {self.md}")

    def set_calculated_values(
        self,
        tvd: float,
        northing: float,
        easting: float,
        vertical_section: float,
        dogleg_severity: float,
        build_rate: float,
        turn_rate: float,
    ) -> None:
        self.tvd = tvd
        self.northing = northing
        self.easting = easting
        self.vertical_section = vertical_section
        self.dogleg_severity = dogleg_severity
        self.build_rate = build_rate
        self.turn_rate = turn_rate

    def to_dict(self) -> dict[str, Any]:
        return {
            "md": self.md,
            "hole_angle": self.hole_angle,
            "azimuth": self.azimuth,
            "measured_tvd": self.measured_tvd,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SurveyPoint":
        """Create SurveyPoint from raw inputs. Derived values need a recalculation."""
        return cls(
            md=data["md"],
            hole_angle=data.get("hole_angle", 0.0),
            azimuth=data.get("azimuth", 0.0),
            measured_tvd=data.get("measured_tvd"),
        )

    def __repr__(self) -> str:
        return (
            f"SurveyPoint(md={self.md:.2f}, inc={self.hole_angle:.2f}, az={self.azimuth:.2f}, "
            f"tvd={self.tvd:.2f})"
        )
