"""Edit orchestration for wellbore geometry.

- CascadeCoordinator: Owns sections, drill string and survey; propagates edits
- CascadeStateMachine: Refuses mutations while another one is propagating
- WellTotals: Volume and depth summary of the current geometry
"""

from wellbore_geometry.coordinator.cascade_coordinator import (
    CascadeCoordinator,
    CascadeEffect,
    CasingMerged,
    SectionsRenumbered,
    TopLinked,
    VolumeRecomputed,
    WellContext,
)
from wellbore_geometry.coordinator.state_machine import CascadeContext, CascadeStateMachine
from wellbore_geometry.coordinator.totals import DepthStatus, WellTotals, compute_well_totals

__all__ = [
    # Coordinator
    "CascadeCoordinator",
    "WellContext",
    # Cascade effects
    "CascadeEffect",
    "VolumeRecomputed",
    "TopLinked",
    "CasingMerged",
    "SectionsRenumbered",
    # State machine
    "CascadeStateMachine",
    "CascadeContext",
    # Totals
    "WellTotals",
    "DepthStatus",
    "compute_well_totals",
]
