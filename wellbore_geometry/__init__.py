"""Wellbore Geometry - Well sections, drill string and survey with consistent volumes.

A self-consistent geometric model of a well featuring:
- Section, annular, capacity and displacement volumes in oilfield units
- Categorized validation of the section chain (diameters, depths, semantics, volume)
- Minimum curvature survey trajectory with dogleg, build and turn rates
- An edit cascade that keeps depths linked, volumes current and casing overrides merged

Modules:
    core: Pure calculators (volumes, minimum curvature, jets, casing override, naming)
    model: Entities (WellboreSection, DrillStringComponent, SurveyPoint, JetSet) and diagnostics
    validation: Rule engines for sections, drill string, jets and survey
    coordinator: CascadeCoordinator owning the collections, guarded by a state machine
    importers: Per-row import of CSV records

Example:
    from wellbore_geometry.coordinator import CascadeCoordinator, WellContext
    from wellbore_geometry.model import SectionType

    coordinator = CascadeCoordinator(context=WellContext(total_md=1000.0))
    coordinator.add_section(section_type=SectionType.OPEN_HOLE, bottom_md=1000.0, od=12.25, washout_pct=10.0)
    report = coordinator.validate()
"""
