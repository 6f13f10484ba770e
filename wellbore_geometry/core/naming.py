"""Drill-string component naming.

Unique kinds (Bit, Motor, MWD, LWD, PWD, PWO) are named by their bare label.
Repeatable kinds get a running number per kind: "Drill Pipe 1", "Drill Pipe 2", ...
"""

import logging
from collections import defaultdict
from typing import Iterable

from wellbore_geometry.model.drill_string import ComponentType, DrillStringComponent

logger = logging.getLogger(__name__)


def generate_component_name(
    component_type: ComponentType,
    existing: Iterable[DrillStringComponent],
) -> str:
    """Default name for a new component appended after the existing ones."""
    if component_type.is_unique:
        return component_type.label
    same_kind = sum(1 for c in existing if c.component_type is component_type)
    return f"{component_type.label} {same_kind + 1}"


def auto_rename_sequence(components: list[DrillStringComponent]) -> None:
    """Renumber names per kind in string order, e.g. after a delete."""
    counters: dict[ComponentType, int] = defaultdict(int)
    for component in components:
        if component.is_unique_kind:
            component.name = component.component_type.label
            continue
        counters[component.component_type] += 1
        component.name = f"{component.component_type.label} {counters[component.component_type]}"
    logger.debug(f"Renamed {len(components)} drill-string components")


def name_unnamed_components(components: list[DrillStringComponent]) -> None:
    """Give blank-named components their positional default name; set names are kept.

    Numbering counts every component of the kind above, so an unnamed third
    Drill Pipe becomes "Drill Pipe 3" even if the first two carry custom names.
    """
    counters: dict[ComponentType, int] = defaultdict(int)
    named = 0
    for component in components:
        counters[component.component_type] += 1
        if component.name.strip():
            continue
        if component.is_unique_kind:
            component.name = component.component_type.label
        else:
            component.name = f"{component.component_type.label} {counters[component.component_type]}"
        named += 1
    if named:
        logger.debug(f"Named {named} drill-string components")
