"""Core calculators for wellbore geometry.

Pure, deterministic math with no I/O:
- VolumeCalculator: Capacities, displacements, open hole and annular volumes
- SurveyCalculator: Minimum curvature trajectory integration
- JetCalculator: Nozzle total flow area and configuration suggestions
- CasingOverrideDetector: Same-top, same-OD re-entry of a casing string
- naming: Default and sequential drill-string component names
  (import directly: from wellbore_geometry.core.naming import generate_component_name)
"""

from wellbore_geometry.core.jet_calculator import EquivalentNozzles, JetCalculator, JetSuggestion
from wellbore_geometry.core.override_detector import CasingOverrideDetector
from wellbore_geometry.core.survey_calculator import SurveyCalculator
from wellbore_geometry.core.volume_calculator import VolumeCalculator

# naming depends on model.drill_string, which depends on this package
# Import directly: from wellbore_geometry.core.naming import auto_rename_sequence

__all__ = [
    # Volumes
    "VolumeCalculator",
    # Sections
    "CasingOverrideDetector",
    # Survey
    "SurveyCalculator",
    # Jets
    "JetCalculator",
    "JetSuggestion",
    "EquivalentNozzles",
]
