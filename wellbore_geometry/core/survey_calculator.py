"""Minimum curvature trajectory calculation.

Each pair of consecutive survey stations is joined by a circular arc. The
ratio factor RF = (2 / DL) * tan(DL / 2) scales the average-angle tangents
onto that arc, where DL is the dogleg angle between the two stations:

    cos(DL) = cos(I2 - I1) - sin(I1) * sin(I2) * (1 - cos(A2 - A1))
    dN   = dMD / 2 * (sin I1 cos A1 + sin I2 cos A2) * RF
    dE   = dMD / 2 * (sin I1 sin A1 + sin I2 sin A2) * RF
    dTVD = dMD / 2 * (cos I1 + cos I2) * RF

For a numerically straight segment (DL below SurveyConfig.STRAIGHT_HOLE_EPSILON_RAD)
RF is taken as 1, which is its limit, so no 0/0 occurs.

Positions are cumulative, so changing one station invalidates every station
below it. The forward pass is strictly sequential.
"""

import logging
from typing import Optional

import numpy as np

from wellbore_geometry.constants import SurveyConfig
from wellbore_geometry.model.survey_point import SurveyPoint

logger = logging.getLogger(__name__)


class SurveyCalculator:
    """Static methods for minimum curvature trajectory integration."""

    @staticmethod
    def dogleg_angle_rad(
        inc1_deg: float,
        azi1_deg: float,
        inc2_deg: float,
        azi2_deg: float,
    ) -> float:
        """3D angle between two station directions.

        Args:
            inc1_deg, azi1_deg: Inclination and azimuth at the upper station
            inc2_deg, azi2_deg: Inclination and azimuth at the lower station

        Returns:
            Dogleg angle in radians (0..pi).
        """
        inc1, azi1, inc2, azi2 = np.radians([inc1_deg, azi1_deg, inc2_deg, azi2_deg])
        cos_dogleg = np.cos(inc2 - inc1) - np.sin(inc1) * np.sin(inc2) * (1.0 - np.cos(azi2 - azi1))
        return float(np.arccos(np.clip(cos_dogleg, -1.0, 1.0)))

    @staticmethod
    def ratio_factor(dogleg_rad: float) -> float:
        """Minimum curvature ratio factor, 1 for a straight segment."""
        if abs(dogleg_rad) < SurveyConfig.STRAIGHT_HOLE_EPSILON_RAD:
            return 1.0
        return float((2.0 / dogleg_rad) * np.tan(dogleg_rad / 2.0))

    @staticmethod
    def wrap_azimuth_change(delta_deg: float) -> float:
        """Normalize an azimuth difference into (-180, 180]."""
        if delta_deg > 180.0:
            delta_deg -= 360.0
        if delta_deg <= -180.0:
            delta_deg += 360.0
        return delta_deg

    @staticmethod
    def calculate_point(current: SurveyPoint, previous: Optional[SurveyPoint]) -> None:
        """Derive position and rates of one station from the station above it.

        The tie-in (no previous station) gets all derived values 0. A station
        whose MD does not advance copies the previous position and gets zero
        rates instead of dividing by a non-positive interval.
        """
        if previous is None:
            current.set_calculated_values(
                tvd=0.0,
                northing=0.0,
                easting=0.0,
                vertical_section=0.0,
                dogleg_severity=0.0,
                build_rate=0.0,
                turn_rate=0.0,
            )
            return

        delta_md = current.md - previous.md
        if delta_md <= 0:
            logger.debug(f"Station at MD {current.md:.2f} does not advance past {previous.md:.2f}")
            current.set_calculated_values(
                tvd=previous.tvd,
                northing=previous.northing,
                easting=previous.easting,
                vertical_section=previous.vertical_section,
                dogleg_severity=0.0,
                build_rate=0.0,
                turn_rate=0.0,
            )
            return

        dogleg = SurveyCalculator.dogleg_angle_rad(
            inc1_deg=previous.hole_angle,
            azi1_deg=previous.azimuth,
            inc2_deg=current.hole_angle,
            azi2_deg=current.azimuth,
        )
        rf = SurveyCalculator.ratio_factor(dogleg_rad=dogleg)

        inc1, azi1, inc2, azi2 = np.radians([previous.hole_angle, previous.azimuth, current.hole_angle, current.azimuth])
        half_md = delta_md / 2.0
        delta_north = half_md * (np.sin(inc1) * np.cos(azi1) + np.sin(inc2) * np.cos(azi2)) * rf
        delta_east = half_md * (np.sin(inc1) * np.sin(azi1) + np.sin(inc2) * np.sin(azi2)) * rf
        delta_tvd = half_md * (np.cos(inc1) + np.cos(inc2)) * rf

        northing = previous.northing + float(delta_north)
        easting = previous.easting + float(delta_east)
        azimuth_change = SurveyCalculator.wrap_azimuth_change(current.azimuth - previous.azimuth)

        current.set_calculated_values(
            tvd=previous.tvd + float(delta_tvd),
            northing=northing,
            easting=easting,
            vertical_section=float(np.hypot(northing, easting)),
            dogleg_severity=float(np.degrees(dogleg)) / delta_md * SurveyConfig.RATE_PER_FT,
            build_rate=(current.hole_angle - previous.hole_angle) / delta_md * SurveyConfig.RATE_PER_FT,
            turn_rate=azimuth_change / delta_md * SurveyConfig.RATE_PER_FT,
        )

    @staticmethod
    def recalculate_from(points: list[SurveyPoint], start_index: int) -> None:
        """Recompute stations start_index..end of an MD-ordered list, in order."""
        for index in range(max(0, start_index), len(points)):
            previous = points[index - 1] if index > 0 else None
            SurveyCalculator.calculate_point(current=points[index], previous=previous)

    @staticmethod
    def recalculate_all(points: list[SurveyPoint]) -> None:
        """Sort stations by MD in place and recompute every one of them."""
        if not points:
            return
        points.sort(key=lambda p: p.md)
        SurveyCalculator.recalculate_from(points=points, start_index=0)
        logger.debug(f"Recalculated {len(points)} survey stations")

    @staticmethod
    def is_physically_valid(point: SurveyPoint) -> bool:
        """TVD may never exceed MD (beyond a small tolerance)."""
        return point.tvd <= point.md + SurveyConfig.TVD_TOLERANCE_FT

    @staticmethod
    def template_point(md: float) -> SurveyPoint:
        """Vertical station at the given depth, ready for user input."""
        return SurveyPoint(md=md, hole_angle=0.0, azimuth=0.0)
