"""Diagnostic - Validation findings for wellbore, drill string and survey data.

Every rule a validator checks has its own frozen dataclass here. Subclasses store
the offending values and compute their message as a property, so a report can be
inspected with isinstance() and rendered without re-running the rule.

Severity:
- ERROR blocks a save until resolved
- WARNING never blocks, but the caller should ask for confirmation

Category:
- STRUCTURAL: a required dimension is missing, zero or physically absurd
- CONSISTENCY: the row disagrees with its neighbors (telescoping, overlap, regression)
- ADVISORY: unusual but possible (gaps, heavy washout, large volumes, overrides)

Physical quantities are formatted with fixed 2 or 3 decimals.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wellbore_geometry.constants import DiameterConfig

GENERAL_ID = "-"
GENERAL_NAME = "General"


class Severity(Enum):
    """Whether a finding blocks a save."""

    ERROR = "Error"
    WARNING = "Warning"


class DiagnosticCategory(Enum):
    """Error taxonomy for findings."""

    STRUCTURAL = "StructuralError"
    CONSISTENCY = "ConsistencyError"
    ADVISORY = "AdvisoryWarning"


@dataclass(frozen=True)
class Diagnostic(ABC):
    """Abstract base class for validation findings.

    Attributes:
        section_id: Id of the offending row (section, component or survey station),
            GENERAL_ID for list-level findings
        component_name: Display name of the offending row, GENERAL_NAME for list-level findings
    """

    section_id: str
    component_name: str

    @property
    @abstractmethod
    def code(self) -> str:
        """Short rule code, e.g. "A2"."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable description of the finding."""

    @property
    @abstractmethod
    def severity(self) -> Severity:
        """ERROR or WARNING."""

    @property
    @abstractmethod
    def category(self) -> DiagnosticCategory:
        """Taxonomy bucket."""

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Serialize as a report row."""
        return {
            "section_id": self.section_id,
            "component_name": self.component_name,
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
        }

    def __str__(self) -> str:
        return f"[{self.severity.value} {self.code}] {self.component_name}: {self.message}"


def _unit_slip_hint(value: float) -> str:
    """Suffix suggesting the value was typed in thousandths of an inch."""
    if value > DiameterConfig.UNIT_SLIP_THRESHOLD:
        return f" Did you mean {value / DiameterConfig.UNIT_SLIP_DIVISOR:.3f} in?"
    return ""


class _Error:
    severity = Severity.ERROR


class _Warning:
    severity = Severity.WARNING


# =============================================================================
# LIST-LEVEL FINDINGS
# =============================================================================


@dataclass(frozen=True)
class NoSectionsError(_Error, Diagnostic):
    """The wellbore has no sections at all."""

    section_id: str = GENERAL_ID
    component_name: str = GENERAL_NAME
    code = "F3"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "At least one section must be added to the wellbore."


@dataclass(frozen=True)
class DuplicateIdError(_Error, Diagnostic):
    """Two or more rows share an id."""

    duplicate_id: int = 0
    code = "F1"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"ID {self.duplicate_id} already exists. IDs must be unique."


@dataclass(frozen=True)
class NonSequentialIdsWarning(_Warning, Diagnostic):
    """Ids are not 1..N in depth order."""

    section_id: str = GENERAL_ID
    component_name: str = GENERAL_NAME
    code = "F2"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return "IDs are not sequential. Keeping them in depth order is recommended."


@dataclass(frozen=True)
class FirstSectionOffsetWarning(_Warning, Diagnostic):
    """The shallowest section does not start at surface."""

    top_md: float = 0.0
    code = "B5"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return f"The first section should start at 0.00 ft but starts at {self.top_md:.2f} ft."


@dataclass(frozen=True)
class TotalDepthMismatchWarning(_Warning, Diagnostic):
    """The deepest section does not end at total MD."""

    bottom_md: float = 0.0
    total_md: float = 0.0
    code = "B6"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"The last section ends at {self.bottom_md:.2f} ft but the total wellbore MD is "
            f"{self.total_md:.2f} ft. Is this correct?"
        )


@dataclass(frozen=True)
class ContinuityBreakError(_Error, Diagnostic):
    """A section does not start where the one above ends."""

    next_name: str = ""
    bottom_md: float = 0.0
    next_top_md: float = 0.0
    code = "BR2"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Continuity Error: '{self.component_name}' ends at {self.bottom_md:.2f} ft, "
            f"but '{self.next_name}' starts at {self.next_top_md:.2f} ft."
        )


# =============================================================================
# CATEGORY A - DIAMETERS
# =============================================================================


@dataclass(frozen=True)
class MissingOuterDiameterError(_Error, Diagnostic):
    """OD is empty or zero."""

    is_open_hole: bool = False
    code = "A5"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        if self.is_open_hole:
            return "OD cannot be 0.000 (or empty). For OpenHole, enter the hole diameter (in)."
        return "OD cannot be 0.000 (or empty). Enter the outer diameter of the pipe."


@dataclass(frozen=True)
class OuterDiameterRangeError(_Error, Diagnostic):
    """OD outside the reasonable physical range."""

    od: float = 0.0
    code = "A3"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return (
            f"OD ({self.od:.3f} in) is outside the reasonable range "
            f"({DiameterConfig.OD_MIN_IN:.1f} - {DiameterConfig.OD_MAX_IN:.1f} in)."
            f"{_unit_slip_hint(self.od)}"
        )


@dataclass(frozen=True)
class MissingInnerDiameterError(_Error, Diagnostic):
    """Pipe section without an ID."""

    code = "A6"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "ID cannot be 0.000. Pipe sections must have a valid ID."


@dataclass(frozen=True)
class OpenHoleInnerDiameterError(_Error, Diagnostic):
    """OpenHole with a non-zero ID."""

    id_: float = 0.0
    code = "A7"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"OpenHole must have ID = 0.000 (there is no inner pipe). Current value: {self.id_:.3f} in"


@dataclass(frozen=True)
class InnerDiameterRangeError(_Error, Diagnostic):
    """ID outside the reasonable physical range."""

    id_: float = 0.0
    code = "A4"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return (
            f"ID ({self.id_:.3f} in) is outside the reasonable range "
            f"({DiameterConfig.ID_MIN_IN:.1f} - {DiameterConfig.ID_MAX_IN:.1f} in)."
            f"{_unit_slip_hint(self.id_)}"
        )


@dataclass(frozen=True)
class InnerNotLessThanOuterError(_Error, Diagnostic):
    """ID is not smaller than OD."""

    id_: float = 0.0
    od: float = 0.0
    code = "A1"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"ID ({self.id_:.3f} in) must always be smaller than OD ({self.od:.3f} in)."


@dataclass(frozen=True)
class TelescopingError(_Error, Diagnostic):
    """Section body does not fit through the previous bore."""

    od: float = 0.0
    previous_id: float = 0.0
    code = "A2"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Telescopic progression violated. OD ({self.od:.3f}) >= previous ID "
            f"({self.previous_id:.3f})"
        )


# =============================================================================
# CATEGORY B - DEPTHS
# =============================================================================


@dataclass(frozen=True)
class BottomAboveTopError(_Error, Diagnostic):
    """Bottom MD not deeper than Top MD."""

    top_md: float = 0.0
    bottom_md: float = 0.0
    code = "B1"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"Bottom MD ({self.bottom_md:.2f} ft) must be greater than Top MD ({self.top_md:.2f} ft)"


@dataclass(frozen=True)
class BeyondTotalDepthError(_Error, Diagnostic):
    """Bottom MD deeper than the well."""

    bottom_md: float = 0.0
    total_md: float = 0.0
    code = "B4"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Bottom MD ({self.bottom_md:.2f} ft) exceeds the total well depth "
            f"({self.total_md:.2f} ft)"
        )


@dataclass(frozen=True)
class OverlapError(_Error, Diagnostic):
    """Section starts above the previous section's bottom."""

    top_md: float = 0.0
    previous_bottom_md: float = 0.0
    code = "B3"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Sections overlap. Section {self.section_id} starts at {self.top_md:.2f} ft "
            f"but the previous section ends at {self.previous_bottom_md:.2f} ft"
        )


@dataclass(frozen=True)
class OverrideExtensionWarning(_Warning, Diagnostic):
    """Section shares the previous section's top and reaches at least as deep."""

    top_md: float = 0.0
    bottom_md: float = 0.0
    previous_bottom_md: float = 0.0
    code = "B3"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"Section starts at {self.top_md:.2f} ft together with the previous section and "
            f"covers it down to {self.bottom_md:.2f} ft (previous bottom {self.previous_bottom_md:.2f} ft). "
            f"Treated as an override."
        )


@dataclass(frozen=True)
class GapWarning(_Warning, Diagnostic):
    """Uncovered interval between previous bottom and this top."""

    gap_ft: float = 0.0
    code = "B2"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"Gap of {self.gap_ft:.2f} ft detected between sections. "
            f"Top MD should equal previous Bottom MD."
        )


# =============================================================================
# CATEGORY C - SECTION SEMANTICS
# =============================================================================


@dataclass(frozen=True)
class CasingOverrideWarning(_Warning, Diagnostic):
    """Casing/Liner re-run from the previous casing's top to a deeper bottom."""

    previous_name: str = ""
    bottom_md: float = 0.0
    code = "C1"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"Casing Override detected: '{self.previous_name}' is replaced down to "
            f"{self.bottom_md:.2f} ft."
        )


@dataclass(frozen=True)
class CasingDepthRegressionError(_Error, Diagnostic):
    """Nested casing ends shallower than the casing above it."""

    bottom_md: float = 0.0
    previous_bottom_md: float = 0.0
    code = "C1"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Bottom MD of a nested casing ({self.bottom_md:.2f} ft) cannot be less than the "
            f"Bottom MD of the casing above it ({self.previous_bottom_md:.2f} ft)."
        )


@dataclass(frozen=True)
class MissingWashoutError(_Error, Diagnostic):
    """OpenHole without washout."""

    code = "C4"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "Washout is required for Open Hole."


@dataclass(frozen=True)
class WashoutRangeError(_Error, Diagnostic):
    """Washout outside 0-100 %."""

    washout_pct: float = 0.0
    code = "C3"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"Washout ({self.washout_pct:.2f}%) must be between 0% and 100%."


@dataclass(frozen=True)
class ExcessiveWashoutWarning(_Warning, Diagnostic):
    """Washout above the verification threshold."""

    washout_pct: float = 0.0
    threshold_pct: float = 0.0
    code = "C3"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"Excessive washout ({self.washout_pct:.2f}% > {self.threshold_pct:.0f}%) detected - "
            f"verify measurement."
        )


@dataclass(frozen=True)
class HighWashoutWarning(_Warning, Diagnostic):
    """Washout high enough to matter for cementing."""

    washout_pct: float = 0.0
    threshold_pct: float = 0.0
    code = "C3"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return (
            f"High washout ({self.washout_pct:.2f}% > {self.threshold_pct:.0f}%) "
            f"may affect cementing operations."
        )


# =============================================================================
# CATEGORY D - VOLUME
# =============================================================================


@dataclass(frozen=True)
class NonPositiveVolumeError(_Error, Diagnostic):
    """Computed volume is zero."""

    volume_bbl: float = 0.0
    code = "D1"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"Calculated volume ({self.volume_bbl:.2f} bbl) must be greater than 0 bbl"


@dataclass(frozen=True)
class ExcessiveVolumeError(_Error, Diagnostic):
    """Volume so large the diameters must be wrong."""

    volume_bbl: float = 0.0
    code = "D4"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"Volume of {self.volume_bbl:.2f} bbl indicates serious diameter errors. Check OD and ID"


@dataclass(frozen=True)
class HighVolumeWarning(_Warning, Diagnostic):
    """Volume suspiciously large."""

    volume_bbl: float = 0.0
    code = "D2"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return f"Volume of {self.volume_bbl:.2f} bbl looks excessive. Verify the entered diameters"


# =============================================================================
# DRILL STRING
# =============================================================================


@dataclass(frozen=True)
class ComponentOuterDiameterError(_Error, Diagnostic):
    """Component OD missing or not positive."""

    code = "D001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "OD must be greater than 0"


@dataclass(frozen=True)
class ComponentInnerDiameterError(_Error, Diagnostic):
    """Component ID missing or not positive."""

    code = "D002"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "ID must be greater than 0"


@dataclass(frozen=True)
class ComponentDiameterOrderError(_Error, Diagnostic):
    """Component OD not larger than its ID."""

    od: float = 0.0
    id_: float = 0.0
    code = "D003"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"OD ({self.od:.3f} in) must be greater than ID ({self.id_:.3f} in)"


@dataclass(frozen=True)
class ComponentLengthError(_Error, Diagnostic):
    """Component length missing or not positive."""

    code = "L001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return "Length must be greater than 0"


@dataclass(frozen=True)
class DuplicateComponentIdError(_Error, Diagnostic):
    """Two components share an id."""

    duplicate_id: int = 0
    code = "E001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return f"Duplicate ID {self.duplicate_id} found"


@dataclass(frozen=True)
class DuplicateUniqueComponentError(_Error, Diagnostic):
    """A one-per-string kind (Bit, Motor, MWD, ...) appears more than once."""

    label: str = ""
    count: int = 0
    code = "E002"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"Only one {self.label} is allowed per drill string, found {self.count}"


@dataclass(frozen=True)
class ThickerComponentBelowError(_Error, Diagnostic):
    """Next component down the string is thicker than this one."""

    od: float = 0.0
    next_id: int = 0
    next_od: float = 0.0
    code = "C001"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Component {self.next_id} is thicker ({self.next_od:.3f} in) than component "
            f"{self.section_id} ({self.od:.3f} in)"
        )


@dataclass(frozen=True)
class StringOverrunError(_Error, Diagnostic):
    """Drill string is longer than the well."""

    section_id: str = GENERAL_ID
    component_name: str = GENERAL_NAME
    string_length_ft: float = 0.0
    well_md_ft: float = 0.0
    code = "DS1"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return (
            f"Drill string length ({self.string_length_ft:.2f} ft) exceeds the total well depth "
            f"({self.well_md_ft:.2f} ft). Adjust the length or the depth of the last tool."
        )


@dataclass(frozen=True)
class InvalidComponentNameError(_Error, Diagnostic):
    """Component name empty, too long or already taken."""

    reason: str = ""
    code = "N001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class ComponentDetailError(_Error, Diagnostic):
    """Variant-specific field (motor, bit, tool joint) is invalid."""

    detail: str = ""
    code = "V001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True)
class ComponentDetailWarning(_Warning, Diagnostic):
    """Variant-specific configuration is inconsistent but usable."""

    detail: str = ""
    code = "V002"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        return self.detail


# =============================================================================
# JETS
# =============================================================================


@dataclass(frozen=True)
class JetSetError(_Error, Diagnostic):
    """Jet count or diameter is missing or out of range."""

    detail: str = ""
    code = "J001"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True)
class TfaOutOfRangeWarning(_Warning, Diagnostic):
    """Total flow area outside the recommendation for the bit size."""

    section_id: str = GENERAL_ID
    component_name: str = GENERAL_NAME
    tfa_in2: float = 0.0
    limit_in2: float = 0.0
    bit_size_in: float = 0.0
    below: bool = True
    code = "J002"
    category = DiagnosticCategory.ADVISORY

    @property
    def message(self) -> str:
        if self.below:
            return (
                f"TFA ({self.tfa_in2:.3f} in²) is below the recommended minimum "
                f"({self.limit_in2:.2f} in²) for a {self.bit_size_in:.3f}\" bit"
            )
        return (
            f"TFA ({self.tfa_in2:.3f} in²) exceeds the recommended maximum "
            f"({self.limit_in2:.2f} in²) for a {self.bit_size_in:.3f}\" bit"
        )


# =============================================================================
# SURVEY
# =============================================================================


@dataclass(frozen=True)
class TvdExceedsMdError(_Error, Diagnostic):
    """Station is deeper vertically than along hole, which is impossible."""

    md: float = 0.0
    tvd: float = 0.0
    code = "S2"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"TVD ({self.tvd:.2f} ft) cannot exceed MD ({self.md:.2f} ft)"


@dataclass(frozen=True)
class NonIncreasingMdError(_Error, Diagnostic):
    """Station MD not deeper than the station above."""

    md: float = 0.0
    previous_md: float = 0.0
    code = "S1"
    category = DiagnosticCategory.CONSISTENCY

    @property
    def message(self) -> str:
        return f"MD ({self.md:.2f} ft) must be greater than the previous station MD ({self.previous_md:.2f} ft)"


@dataclass(frozen=True)
class SurveyAngleRangeError(_Error, Diagnostic):
    """Hole angle or azimuth outside its valid range."""

    label: str = ""
    value_deg: float = 0.0
    min_deg: float = 0.0
    max_deg: float = 0.0
    code = "S3"
    category = DiagnosticCategory.STRUCTURAL

    @property
    def message(self) -> str:
        return (
            f"{self.label} ({self.value_deg:.2f}°) must be between {self.min_deg:.0f}° "
            f"and {self.max_deg:.0f}°"
        )


# =============================================================================
# REPORT
# =============================================================================


@dataclass
class ValidationReport:
    """Ordered findings of one validation sweep.

    Errors block a save; warnings only require confirmation.
    """

    items: list[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if not d.is_error]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(not d.is_error for d in self.items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def to_dicts(self) -> list[dict[str, Any]]:
        return [d.to_dict() for d in self.items]

    def __len__(self) -> int:
        return len(self.items)
