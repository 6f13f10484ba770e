"""Validators - Field-level checks for jets, survey stations and components.

Validators return Diagnostic | None (or a list for multi-field checks):
- None / [] if valid
- A Diagnostic describing the problem otherwise

No exceptions for expected validation failures; the caller decides how to
present the finding.
"""

from typing import Iterable, Optional

from wellbore_geometry.constants import (
    BitConfig,
    DrillStringConfig,
    JetConfig,
    SurveyConfig,
    ToolJointConfig,
)
from wellbore_geometry.core.jet_calculator import JetCalculator
from wellbore_geometry.model.diagnostic import (
    ComponentDetailError,
    ComponentDetailWarning,
    Diagnostic,
    InvalidComponentNameError,
    JetSetError,
    NonIncreasingMdError,
    SurveyAngleRangeError,
    TfaOutOfRangeWarning,
    TvdExceedsMdError,
)
from wellbore_geometry.model.drill_string import (
    DrillStringComponent,
    MudMotorDetails,
    PdcBitDetails,
    ToolJointDetails,
)
from wellbore_geometry.model.jet_set import JetSet, JetSetCollection
from wellbore_geometry.model.survey_point import SurveyPoint

# =============================================================================
# JETS
# =============================================================================


def validate_jet_set(jet_set: JetSet) -> JetSetError | None:
    """Validate nozzle count and diameter of one jet set.

    Returns:
        None if valid, JetSetError naming the first failing field.
    """
    sid, name = str(jet_set.id), f"Jet Set {jet_set.id}"
    count, diameter = jet_set.number_of_jets, jet_set.jet_diameter_32nds

    if count is None:
        return JetSetError(section_id=sid, component_name=name, detail="Number of jets is required")
    if count <= 0:
        return JetSetError(section_id=sid, component_name=name, detail="Number of jets must be greater than 0")
    if count > JetConfig.MAX_JETS:
        return JetSetError(
            section_id=sid,
            component_name=name,
            detail=f"Number of jets cannot exceed {JetConfig.MAX_JETS}",
        )
    if diameter is None:
        return JetSetError(section_id=sid, component_name=name, detail="Jet diameter is required")
    if diameter <= 0:
        return JetSetError(section_id=sid, component_name=name, detail="Jet diameter must be greater than 0")
    if diameter > JetConfig.MAX_DIAMETER_32NDS:
        return JetSetError(
            section_id=sid,
            component_name=name,
            detail=f"Jet diameter cannot exceed {JetConfig.MAX_DIAMETER_32NDS}/32\"",
        )
    return None


def validate_standard_jet_size(jet_set: JetSet) -> ComponentDetailWarning | None:
    """Warn when the nozzle diameter is not a standard size."""
    diameter = jet_set.jet_diameter_32nds
    if diameter is None or diameter in JetConfig.STANDARD_SIZES_32NDS:
        return None
    return ComponentDetailWarning(
        section_id=str(jet_set.id),
        component_name=f"Jet Set {jet_set.id}",
        detail=f"{diameter}/32\" is not a standard nozzle size",
    )


def validate_jet_sets(jets: JetSetCollection) -> list[Diagnostic]:
    """Validate every jet set of a bit, errors first per set."""
    found: list[Diagnostic] = []
    for jet_set in jets.jet_sets:
        error = validate_jet_set(jet_set=jet_set)
        if error is not None:
            found.append(error)
            continue
        warning = validate_standard_jet_size(jet_set=jet_set)
        if warning is not None:
            found.append(warning)
    return found


def validate_tfa_for_bit_size(total_tfa: float, bit_size_in: float) -> TfaOutOfRangeWarning | None:
    """Compare a total flow area with the recommended range for the bit size.

    Returns:
        None if inside the range (or no TFA yet), TfaOutOfRangeWarning otherwise.
    """
    if total_tfa <= 0 or bit_size_in <= 0:
        return None
    low, high = JetCalculator.recommended_tfa_range(bit_size_in=bit_size_in)
    if total_tfa < low:
        return TfaOutOfRangeWarning(tfa_in2=total_tfa, limit_in2=low, bit_size_in=bit_size_in, below=True)
    if total_tfa > high:
        return TfaOutOfRangeWarning(tfa_in2=total_tfa, limit_in2=high, bit_size_in=bit_size_in, below=False)
    return None


# =============================================================================
# SURVEY
# =============================================================================


def validate_survey_angles(point: SurveyPoint) -> list[Diagnostic]:
    """Hole angle within 0-93 deg, azimuth within 0-360 deg."""
    found: list[Diagnostic] = []
    sid, name = f"{point.md:.2f}", f"Station @ {point.md:.2f} ft"
    if not SurveyConfig.MIN_HOLE_ANGLE_DEG <= point.hole_angle <= SurveyConfig.MAX_HOLE_ANGLE_DEG:
        found.append(
            SurveyAngleRangeError(
                section_id=sid,
                component_name=name,
                label="Hole angle",
                value_deg=point.hole_angle,
                min_deg=SurveyConfig.MIN_HOLE_ANGLE_DEG,
                max_deg=SurveyConfig.MAX_HOLE_ANGLE_DEG,
            )
        )
    if not SurveyConfig.MIN_AZIMUTH_DEG <= point.azimuth <= SurveyConfig.MAX_AZIMUTH_DEG:
        found.append(
            SurveyAngleRangeError(
                section_id=sid,
                component_name=name,
                label="Azimuth",
                value_deg=point.azimuth,
                min_deg=SurveyConfig.MIN_AZIMUTH_DEG,
                max_deg=SurveyConfig.MAX_AZIMUTH_DEG,
            )
        )
    return found


def validate_tvd_within_md(point: SurveyPoint) -> TvdExceedsMdError | None:
    """TVD may exceed MD only by the rounding tolerance."""
    if point.tvd > point.md + SurveyConfig.TVD_TOLERANCE_FT:
        return TvdExceedsMdError(
            section_id=f"{point.md:.2f}",
            component_name=f"Station @ {point.md:.2f} ft",
            md=point.md,
            tvd=point.tvd,
        )
    return None


def validate_md_increasing(point: SurveyPoint, previous: Optional[SurveyPoint]) -> NonIncreasingMdError | None:
    if previous is None or point.md > previous.md:
        return None
    return NonIncreasingMdError(
        section_id=f"{point.md:.2f}",
        component_name=f"Station @ {point.md:.2f} ft",
        md=point.md,
        previous_md=previous.md,
    )


def validate_survey(points: list[SurveyPoint]) -> list[Diagnostic]:
    """Every station check over a list in stored order."""
    found: list[Diagnostic] = []
    for index, point in enumerate(points):
        previous = points[index - 1] if index > 0 else None
        found.extend(validate_survey_angles(point=point))
        md_error = validate_md_increasing(point=point, previous=previous)
        if md_error is not None:
            found.append(md_error)
        tvd_error = validate_tvd_within_md(point=point)
        if tvd_error is not None:
            found.append(tvd_error)
    return found


# =============================================================================
# DRILL STRING COMPONENTS
# =============================================================================


def validate_component_name(
    name: str,
    component_id: int,
    others: Iterable[DrillStringComponent],
) -> InvalidComponentNameError | None:
    """Name must be non-empty, short enough and unique (case-insensitive).

    Args:
        name: Proposed name
        component_id: Id of the component being named, excluded from the duplicate check
        others: All components of the string
    """
    sid = str(component_id)
    stripped = name.strip()
    if not stripped:
        return InvalidComponentNameError(section_id=sid, component_name=name, reason="Component name cannot be empty")
    if len(stripped) > DrillStringConfig.MAX_NAME_LENGTH:
        return InvalidComponentNameError(
            section_id=sid,
            component_name=stripped[:20],
            reason=f"Component name cannot exceed {DrillStringConfig.MAX_NAME_LENGTH} characters",
        )
    taken = {c.name.strip().lower() for c in others if c.id != component_id}
    if stripped.lower() in taken:
        return InvalidComponentNameError(
            section_id=sid,
            component_name=stripped,
            reason=f"A component named '{stripped}' already exists",
        )
    return None


def validate_mud_motor(details: MudMotorDetails, sid: str, name: str) -> list[Diagnostic]:
    found: list[Diagnostic] = []
    if details.best_flow_rate_gpm <= 0:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Best flow rate must be greater than 0"))
    if details.stall_pressure_psi <= 0:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Stall pressure must be greater than 0"))
    if details.max_torque_ft_lbs < 0:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Max torque cannot be negative"))
    return found


def validate_pdc_bit(details: PdcBitDetails, sid: str, name: str) -> list[Diagnostic]:
    """Bit design fields, installed jets and TFA against the gauge size."""
    found: list[Diagnostic] = []
    if not details.bit_type.strip():
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Bit type is required"))
    if details.gauge_in <= 0:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Gauge must be greater than 0"))
    if details.nozzle_count < 0:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail="Nozzle count cannot be negative"))
    if not BitConfig.MIN_AGGRESSIVENESS <= details.aggressiveness <= BitConfig.MAX_AGGRESSIVENESS:
        found.append(
            ComponentDetailError(
                section_id=sid,
                component_name=name,
                detail=(
                    f"Aggressiveness must be between {BitConfig.MIN_AGGRESSIVENESS} "
                    f"and {BitConfig.MAX_AGGRESSIVENESS}"
                ),
            )
        )

    if details.nozzle_count > 0 and len(details.jets) == 0:
        found.append(
            ComponentDetailWarning(
                section_id=sid,
                component_name=name,
                detail=f"Bit has {details.nozzle_count} nozzles but no jet sets are configured",
            )
        )

    found.extend(validate_jet_sets(jets=details.jets))
    tfa_warning = validate_tfa_for_bit_size(total_tfa=details.jets.total_tfa, bit_size_in=details.gauge_in)
    if tfa_warning is not None:
        found.append(tfa_warning)
    return found


def validate_tool_joint(
    details: ToolJointDetails,
    sid: str,
    name: str,
    pipe_od: Optional[float] = None,
    pipe_id: Optional[float] = None,
) -> list[Diagnostic]:
    """Tool joint dimensions. Unset values are skipped.

    When the pipe body dimensions are given, the joint must be at least as wide
    as the body and its bore no larger than the body's.
    """
    found: list[Diagnostic] = []

    def error(detail: str) -> None:
        found.append(ComponentDetailError(section_id=sid, component_name=name, detail=detail))

    if details.od is not None and details.od <= 0:
        error("Tool joint OD must be greater than 0")
    if details.id_ is not None and details.id_ <= 0:
        error("Tool joint ID must be greater than 0")
    if details.od is not None and details.id_ is not None and details.id_ >= details.od:
        error("Tool joint ID must be less than OD")
    if details.length is not None and details.length <= 0:
        error("Tool joint length must be greater than 0")
    if details.joint_length is not None and details.joint_length <= 0:
        error("Joint length must be greater than 0")
    if details.grade not in ToolJointConfig.STANDARD_GRADES:
        error(f"Unknown tool joint grade '{details.grade}'")

    if pipe_od is not None and details.od is not None and details.od < pipe_od:
        error(f"Tool joint OD ({details.od:.3f}\") is smaller than the pipe OD ({pipe_od:.3f}\")")
    if pipe_id is not None and details.id_ is not None and details.id_ > pipe_id:
        error(f"Tool joint ID ({details.id_:.3f}\") is larger than the pipe ID ({pipe_id:.3f}\")")

    if details.is_partially_configured:
        found.append(
            ComponentDetailWarning(section_id=sid, component_name=name, detail="Tool joint is only partially configured")
        )
    return found


def validate_component_details(component: DrillStringComponent) -> list[Diagnostic]:
    """Dispatch to the validator for the component's details, if any."""
    details = component.details
    sid, name = str(component.id), component.name or component.component_type.value
    if details is None:
        return []
    if isinstance(details, MudMotorDetails):
        return validate_mud_motor(details=details, sid=sid, name=name)
    if isinstance(details, PdcBitDetails):
        return validate_pdc_bit(details=details, sid=sid, name=name)
    if isinstance(details, ToolJointDetails):
        return validate_tool_joint(details=details, sid=sid, name=name, pipe_od=component.od, pipe_id=component.id_)
    raise TypeError(f"Unsupported component details: {type(details).__name__}")
