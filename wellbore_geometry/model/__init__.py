"""Data model for wellbore geometry.

- WellboreSection: Open hole, casing or liner interval with a stored volume
- DrillStringComponent: Tubular or tool in the string, with kind-specific details
- SurveyPoint: Directional survey station with derived position and rates
- JetSet / JetSetCollection: Bit nozzle groups and their total flow area
- Diagnostic: Validation findings, one class per rule, gathered in a ValidationReport
"""

from wellbore_geometry.model.diagnostic import (
    Diagnostic,
    DiagnosticCategory,
    Severity,
    ValidationReport,
)
from wellbore_geometry.model.drill_string import (
    ComponentDetails,
    ComponentType,
    DrillStringComponent,
    MudMotorDetails,
    PdcBitDetails,
    ToolJointDetails,
)
from wellbore_geometry.model.jet_set import JetSet, JetSetCollection
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.model.wellbore_section import SectionType, WellboreSection

__all__ = [
    "Diagnostic",
    "DiagnosticCategory",
    "Severity",
    "ValidationReport",
    "SectionType",
    "WellboreSection",
    "ComponentType",
    "ComponentDetails",
    "DrillStringComponent",
    "MudMotorDetails",
    "PdcBitDetails",
    "ToolJointDetails",
    "JetSet",
    "JetSetCollection",
    "SurveyPoint",
]
