"""Tests for SurveyCalculator (minimum curvature) and survey validation."""

from math import cos, radians, sin, tan

import pytest
from hypothesis import given, settings, strategies as st

from wellbore_geometry.core.survey_calculator import SurveyCalculator
from wellbore_geometry.model.diagnostic import NonIncreasingMdError, SurveyAngleRangeError, TvdExceedsMdError
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.validation import validate_survey


class TestTieIn:
    """First station of a survey."""

    def test_all_derived_values_zero(self) -> None:
        point = SurveyPoint(md=500.0, hole_angle=12.0, azimuth=45.0, tvd=99.0, northing=5.0)
        SurveyCalculator.calculate_point(current=point, previous=None)
        assert point.tvd == 0.0
        assert point.northing == 0.0
        assert point.easting == 0.0
        assert point.vertical_section == 0.0
        assert point.dogleg_severity == 0.0
        assert point.build_rate == 0.0
        assert point.turn_rate == 0.0


class TestStraightSegment:
    """Zero dogleg: ratio factor 1, straight projection."""

    def test_vertical(self) -> None:
        previous = SurveyPoint(md=0.0)
        current = SurveyPoint(md=1000.0)
        SurveyCalculator.calculate_point(current=current, previous=previous)
        assert current.tvd == pytest.approx(1000.0)
        assert current.northing == pytest.approx(0.0)
        assert current.easting == pytest.approx(0.0)
        assert current.dogleg_severity == 0.0

    def test_inclined_tangent(self) -> None:
        """30° due north-east over 100 ft."""
        previous = SurveyPoint(md=1000.0, hole_angle=30.0, azimuth=45.0)
        current = SurveyPoint(md=1100.0, hole_angle=30.0, azimuth=45.0)
        SurveyCalculator.calculate_point(current=current, previous=previous)
        assert current.dogleg_severity == pytest.approx(0.0, abs=1e-6)
        assert current.tvd == pytest.approx(100.0 * cos(radians(30.0)))
        horizontal = 100.0 * sin(radians(30.0))
        assert current.northing == pytest.approx(horizontal * cos(radians(45.0)))
        assert current.easting == pytest.approx(horizontal * sin(radians(45.0)))
        assert current.vertical_section == pytest.approx(horizontal)

    def test_ratio_factor_limit(self) -> None:
        assert SurveyCalculator.ratio_factor(dogleg_rad=0.0) == 1.0
        assert SurveyCalculator.ratio_factor(dogleg_rad=1e-10) == 1.0


class TestBuildSection:
    """Curved segments."""

    def test_build_rate_and_dogleg(self, build_survey: list[SurveyPoint]) -> None:
        SurveyCalculator.recalculate_all(build_survey)
        station = build_survey[2]
        assert station.build_rate == pytest.approx(3.0)
        assert station.dogleg_severity == pytest.approx(3.0)
        assert station.turn_rate == pytest.approx(0.0)

    def test_tvd_matches_minimum_curvature(self, build_survey: list[SurveyPoint]) -> None:
        SurveyCalculator.recalculate_all(build_survey)
        dogleg = radians(3.0)
        rf = (2.0 / dogleg) * tan(dogleg / 2.0)
        expected_tvd = 1000.0 + 50.0 * (1.0 + cos(dogleg)) * rf
        expected_east = 50.0 * sin(dogleg) * rf
        assert build_survey[2].tvd == pytest.approx(expected_tvd)
        assert build_survey[2].easting == pytest.approx(expected_east)
        assert build_survey[2].northing == pytest.approx(0.0, abs=1e-9)

    def test_tvd_never_exceeds_md(self, build_survey: list[SurveyPoint]) -> None:
        SurveyCalculator.recalculate_all(build_survey)
        assert all(SurveyCalculator.is_physically_valid(p) for p in build_survey)


class TestTurnRate:
    """Azimuth change wraps through north."""

    def test_350_to_10_is_right_turn(self) -> None:
        previous = SurveyPoint(md=2000.0, hole_angle=10.0, azimuth=350.0)
        current = SurveyPoint(md=2100.0, hole_angle=10.0, azimuth=10.0)
        SurveyCalculator.calculate_point(current=current, previous=previous)
        assert current.turn_rate == pytest.approx(20.0)

    def test_10_to_350_is_left_turn(self) -> None:
        previous = SurveyPoint(md=2000.0, hole_angle=10.0, azimuth=10.0)
        current = SurveyPoint(md=2100.0, hole_angle=10.0, azimuth=350.0)
        SurveyCalculator.calculate_point(current=current, previous=previous)
        assert current.turn_rate == pytest.approx(-20.0)

    @given(delta=st.floats(min_value=-359.0, max_value=359.0, allow_nan=False))
    @settings(max_examples=50)
    def test_wrap_range(self, delta: float) -> None:
        wrapped = SurveyCalculator.wrap_azimuth_change(delta)
        assert -180.0 < wrapped <= 180.0


class TestNonAdvancingStation:
    """Stations whose MD does not increase."""

    def test_copies_position_with_zero_rates(self) -> None:
        previous = SurveyPoint(md=1000.0, hole_angle=20.0, azimuth=90.0)
        previous.set_calculated_values(
            tvd=950.0, northing=1.0, easting=150.0, vertical_section=150.0,
            dogleg_severity=2.0, build_rate=2.0, turn_rate=0.0,
        )
        current = SurveyPoint(md=1000.0, hole_angle=25.0, azimuth=95.0)
        SurveyCalculator.calculate_point(current=current, previous=previous)
        assert current.tvd == 950.0
        assert current.easting == 150.0
        assert current.dogleg_severity == 0.0
        assert current.build_rate == 0.0


class TestRecalculation:
    """Forward passes over a station list."""

    def test_recalculate_all_sorts_by_md(self) -> None:
        points = [SurveyPoint(md=200.0), SurveyPoint(md=0.0), SurveyPoint(md=100.0)]
        SurveyCalculator.recalculate_all(points)
        assert [p.md for p in points] == [0.0, 100.0, 200.0]
        assert points[2].tvd == pytest.approx(200.0)

    def test_recalculate_from_leaves_upper_stations(self, build_survey: list[SurveyPoint]) -> None:
        """Stations above start_index are not touched."""
        SurveyCalculator.recalculate_all(build_survey)
        build_survey[1].tvd = -1.0
        build_survey[3].hole_angle = 0.0
        SurveyCalculator.recalculate_from(points=build_survey, start_index=3)
        assert build_survey[1].tvd == -1.0
        assert build_survey[3].build_rate == pytest.approx(-3.0)

    def test_empty_list(self) -> None:
        points: list[SurveyPoint] = []
        SurveyCalculator.recalculate_all(points)
        assert points == []


class TestSurveyPointModel:
    """SurveyPoint construction and serialization."""

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError, match="NaN"):
            SurveyPoint(md=float("nan"))

    def test_round_trip_keeps_inputs_only(self) -> None:
        point = SurveyPoint(md=1200.0, hole_angle=6.0, azimuth=90.0, tvd=1199.0, measured_tvd=1198.5)
        restored = SurveyPoint.from_dict(point.to_dict())
        assert restored.md == 1200.0
        assert restored.measured_tvd == 1198.5
        assert restored.tvd == 0.0

    def test_template_point_is_vertical(self) -> None:
        point = SurveyCalculator.template_point(md=3000.0)
        assert point.hole_angle == 0.0
        assert point.azimuth == 0.0


class TestSurveyValidation:
    """Station-level diagnostics."""

    def test_valid_survey(self, build_survey: list[SurveyPoint]) -> None:
        SurveyCalculator.recalculate_all(build_survey)
        assert validate_survey(build_survey) == []

    def test_angle_out_of_range(self) -> None:
        points = [SurveyPoint(md=0.0), SurveyPoint(md=100.0, hole_angle=95.0, azimuth=400.0)]
        found = validate_survey(points)
        assert len([d for d in found if isinstance(d, SurveyAngleRangeError)]) == 2

    def test_md_not_increasing(self) -> None:
        points = [SurveyPoint(md=100.0), SurveyPoint(md=100.0)]
        found = validate_survey(points)
        assert [type(d) for d in found] == [NonIncreasingMdError]

    def test_tvd_exceeds_md(self) -> None:
        point = SurveyPoint(md=100.0, tvd=100.5)
        found = validate_survey([point])
        assert [type(d) for d in found] == [TvdExceedsMdError]
