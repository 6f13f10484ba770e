"""GeometryValidator - Full diagnostic sweep over the wellbore sections.

Sections are evaluated in depth order (top MD ascending, unset tops last,
ties keep their input order). Every category runs for every section, so one
call reports every problem at once:

    A - diameters: OD/ID present, in range, ID < OD, telescoping OD[n] < ID[n-1]
    B - depths: bottom > top, bottom <= total MD, no overlap, gaps are warnings
    C - section semantics: casing depth progression and override, open hole washout
    D - volume sanity: > 0, warning above 10,000 bbl, error above 100,000 bbl

plus list-level checks (at least one section, unique and sequential ids,
surface start, last bottom at total MD).

Volumes are recomputed from the ordered list for the D checks, so a report
never depends on a stale stored value. The validator never raises and never
mutates its input.
"""

from collections import Counter
from typing import Iterable, Optional

from wellbore_geometry.constants import (
    DepthConfig,
    DiameterConfig,
    VolumeSanityConfig,
    WashoutConfig,
)
from wellbore_geometry.core.override_detector import CasingOverrideDetector
from wellbore_geometry.core.volume_calculator import VolumeCalculator
from wellbore_geometry.model.diagnostic import (
    GENERAL_ID,
    GENERAL_NAME,
    BeyondTotalDepthError,
    BottomAboveTopError,
    CasingDepthRegressionError,
    CasingOverrideWarning,
    ContinuityBreakError,
    Diagnostic,
    DuplicateIdError,
    ExcessiveVolumeError,
    ExcessiveWashoutWarning,
    FirstSectionOffsetWarning,
    GapWarning,
    HighVolumeWarning,
    HighWashoutWarning,
    InnerDiameterRangeError,
    InnerNotLessThanOuterError,
    MissingInnerDiameterError,
    MissingOuterDiameterError,
    MissingWashoutError,
    NonPositiveVolumeError,
    NonSequentialIdsWarning,
    NoSectionsError,
    OpenHoleInnerDiameterError,
    OuterDiameterRangeError,
    OverlapError,
    OverrideExtensionWarning,
    TelescopingError,
    TotalDepthMismatchWarning,
    ValidationReport,
    WashoutRangeError,
)
from wellbore_geometry.model.wellbore_section import WellboreSection

EPS = DiameterConfig.ZERO_EPSILON_IN


def order_sections(sections: Iterable[WellboreSection]) -> list[WellboreSection]:
    """Sections by top MD ascending, unset tops last, stable on ties."""
    return sorted(sections, key=lambda s: (s.top_md is None, s.top_md if s.top_md is not None else 0.0))


class GeometryValidator:
    """Rule engine producing categorized diagnostics for a section list.

    Example:
        report = GeometryValidator.validate(sections=sections, total_md=12500.0)
        if report.has_errors:
            ...
    """

    @staticmethod
    def validate(sections: Iterable[WellboreSection], total_md: float) -> ValidationReport:
        """Run every rule over the sections.

        Args:
            sections: Wellbore sections in any order
            total_md: Target total measured depth of the well (ft)

        Returns:
            ValidationReport with findings in a deterministic order.
        """
        ordered = order_sections(sections)
        report = ValidationReport()

        if not ordered:
            report.items.append(NoSectionsError())
            return report

        report.items.extend(GeometryValidator._check_ids(ordered))
        report.items.extend(GeometryValidator._check_ends(ordered, total_md))

        for index, section in enumerate(ordered):
            previous = ordered[index - 1] if index > 0 else None
            report.items.extend(GeometryValidator._check_diameters(section, previous))
            report.items.extend(GeometryValidator._check_depths(section, previous, total_md))
            report.items.extend(GeometryValidator._check_section_type(section, previous))
            report.items.extend(GeometryValidator._check_volume(section, previous))

        return report

    @staticmethod
    def check_continuity(sections: Iterable[WellboreSection]) -> list[ContinuityBreakError]:
        """Adjacent pairs whose bottom and next top differ by more than the tolerance."""
        ordered = order_sections(sections)
        breaks = []
        for current, following in zip(ordered, ordered[1:]):
            if current.bottom_md is None or following.top_md is None:
                continue
            if abs(current.bottom_md - following.top_md) > DepthConfig.CONTINUITY_TOLERANCE_FT:
                breaks.append(
                    ContinuityBreakError(
                        section_id=str(current.id),
                        component_name=current.name,
                        next_name=following.name,
                        bottom_md=current.bottom_md,
                        next_top_md=following.top_md,
                    )
                )
        return breaks

    # =========================================================================
    # List-level checks
    # =========================================================================

    @staticmethod
    def _check_ids(ordered: list[WellboreSection]) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        counts = Counter(s.id for s in ordered)
        for section_id, count in counts.items():
            if count > 1:
                found.append(DuplicateIdError(section_id=GENERAL_ID, component_name=GENERAL_NAME, duplicate_id=section_id))

        if [s.id for s in ordered] != list(range(1, len(ordered) + 1)):
            found.append(NonSequentialIdsWarning())
        return found

    @staticmethod
    def _check_ends(ordered: list[WellboreSection], total_md: float) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        first, last = ordered[0], ordered[-1]
        if first.top_md is not None and first.top_md != 0:
            found.append(
                FirstSectionOffsetWarning(section_id=str(first.id), component_name=first.name, top_md=first.top_md)
            )
        if last.bottom_md is not None and abs(last.bottom_md - total_md) > DepthConfig.TOTAL_MD_TOLERANCE_FT:
            found.append(
                TotalDepthMismatchWarning(
                    section_id=str(last.id),
                    component_name=last.name,
                    bottom_md=last.bottom_md,
                    total_md=total_md,
                )
            )
        return found

    # =========================================================================
    # Category A - diameters
    # =========================================================================

    @staticmethod
    def _check_diameters(section: WellboreSection, previous: Optional[WellboreSection]) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        sid, name = str(section.id), section.name
        od = section.od or 0.0
        id_ = section.id_ or 0.0

        if od <= EPS:
            found.append(MissingOuterDiameterError(section_id=sid, component_name=name, is_open_hole=section.is_open_hole))
        elif od < DiameterConfig.OD_MIN_IN or od > DiameterConfig.OD_MAX_IN:
            found.append(OuterDiameterRangeError(section_id=sid, component_name=name, od=od))

        if section.is_tubular and id_ <= EPS:
            found.append(MissingInnerDiameterError(section_id=sid, component_name=name))
        if section.is_open_hole and id_ > EPS:
            found.append(OpenHoleInnerDiameterError(section_id=sid, component_name=name, id_=id_))

        if id_ > EPS and (id_ < DiameterConfig.ID_MIN_IN or id_ > DiameterConfig.ID_MAX_IN):
            found.append(InnerDiameterRangeError(section_id=sid, component_name=name, id_=id_))

        if section.is_tubular and od > EPS and id_ >= od:
            found.append(InnerNotLessThanOuterError(section_id=sid, component_name=name, id_=id_, od=od))

        if previous is not None and not CasingOverrideDetector.is_casing_override(section, previous):
            previous_id = previous.id_ or 0.0
            if previous_id > EPS and od >= previous_id:
                found.append(TelescopingError(section_id=sid, component_name=name, od=od, previous_id=previous_id))
        return found

    # =========================================================================
    # Category B - depths
    # =========================================================================

    @staticmethod
    def _check_depths(
        section: WellboreSection,
        previous: Optional[WellboreSection],
        total_md: float,
    ) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        sid, name = str(section.id), section.name
        top, bottom = section.top_md, section.bottom_md

        if top is not None and bottom is not None and bottom <= top:
            found.append(BottomAboveTopError(section_id=sid, component_name=name, top_md=top, bottom_md=bottom))

        if bottom is not None and bottom > total_md + DepthConfig.TOTAL_MD_TOLERANCE_FT:
            found.append(BeyondTotalDepthError(section_id=sid, component_name=name, bottom_md=bottom, total_md=total_md))

        if previous is None or top is None or previous.bottom_md is None:
            return found

        if top < previous.bottom_md:
            if CasingOverrideDetector.is_casing_override(section, previous):
                pass  # Reported once, under category C
            elif CasingOverrideDetector.is_override_extension(section, previous):
                found.append(
                    OverrideExtensionWarning(
                        section_id=sid,
                        component_name=name,
                        top_md=top,
                        bottom_md=bottom,
                        previous_bottom_md=previous.bottom_md,
                    )
                )
            else:
                found.append(
                    OverlapError(
                        section_id=sid,
                        component_name=name,
                        top_md=top,
                        previous_bottom_md=previous.bottom_md,
                    )
                )
        elif top > previous.bottom_md + DepthConfig.GAP_TOLERANCE_FT:
            found.append(GapWarning(section_id=sid, component_name=name, gap_ft=top - previous.bottom_md))
        return found

    # =========================================================================
    # Category C - section semantics
    # =========================================================================

    @staticmethod
    def _check_section_type(section: WellboreSection, previous: Optional[WellboreSection]) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        sid, name = str(section.id), section.name

        if previous is not None and section.is_tubular and previous.is_tubular:
            if CasingOverrideDetector.is_casing_override(section, previous):
                found.append(
                    CasingOverrideWarning(
                        section_id=sid,
                        component_name=name,
                        previous_name=previous.name,
                        bottom_md=section.bottom_md,
                    )
                )
            elif (
                section.bottom_md is not None
                and previous.bottom_md is not None
                and section.bottom_md < previous.bottom_md
            ):
                found.append(
                    CasingDepthRegressionError(
                        section_id=sid,
                        component_name=name,
                        bottom_md=section.bottom_md,
                        previous_bottom_md=previous.bottom_md,
                    )
                )

        if section.is_open_hole:
            washout = section.washout_pct
            if washout is None:
                found.append(MissingWashoutError(section_id=sid, component_name=name))
            elif washout < WashoutConfig.MIN_PCT or washout > WashoutConfig.MAX_PCT:
                found.append(WashoutRangeError(section_id=sid, component_name=name, washout_pct=washout))
            elif washout > WashoutConfig.EXCESSIVE_PCT:
                found.append(
                    ExcessiveWashoutWarning(
                        section_id=sid,
                        component_name=name,
                        washout_pct=washout,
                        threshold_pct=WashoutConfig.EXCESSIVE_PCT,
                    )
                )
            elif washout > WashoutConfig.HIGH_PCT:
                found.append(
                    HighWashoutWarning(
                        section_id=sid,
                        component_name=name,
                        washout_pct=washout,
                        threshold_pct=WashoutConfig.HIGH_PCT,
                    )
                )
        return found

    # =========================================================================
    # Category D - volume
    # =========================================================================

    @staticmethod
    def _check_volume(section: WellboreSection, previous: Optional[WellboreSection]) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        sid, name = str(section.id), section.name
        volume = VolumeCalculator.section_volume(section=section, previous=previous)

        if volume <= 0:
            found.append(NonPositiveVolumeError(section_id=sid, component_name=name, volume_bbl=volume))
        if volume > VolumeSanityConfig.ERROR_BBL:
            found.append(ExcessiveVolumeError(section_id=sid, component_name=name, volume_bbl=volume))
        elif volume > VolumeSanityConfig.WARNING_BBL:
            found.append(HighVolumeWarning(section_id=sid, component_name=name, volume_bbl=volume))
        return found
