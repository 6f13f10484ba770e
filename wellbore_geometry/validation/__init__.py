"""Validation rule engines.

- GeometryValidator: Categorized checks (A diameters, B depths, C semantics, D volume)
  over the wellbore section list
- DrillStringValidator: Dimension, taper, uniqueness and detail checks over the string
- validators: Field-level checks for jets, survey stations and component details

Validators never raise for bad data and never mutate their input.
"""

from wellbore_geometry.validation.drill_string_validator import DrillStringValidator
from wellbore_geometry.validation.geometry_validator import GeometryValidator, order_sections
from wellbore_geometry.validation.validators import (
    validate_component_details,
    validate_component_name,
    validate_jet_set,
    validate_jet_sets,
    validate_survey,
    validate_tfa_for_bit_size,
)

__all__ = [
    "GeometryValidator",
    "DrillStringValidator",
    "order_sections",
    "validate_component_details",
    "validate_component_name",
    "validate_jet_set",
    "validate_jet_sets",
    "validate_survey",
    "validate_tfa_for_bit_size",
]
