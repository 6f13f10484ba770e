"""Command-line report for a well geometry.

Usage:
    python -m wellbore_geometry sections.csv [--drill-string string.csv] [--survey survey.csv] [--total-md 12500]

Imports the CSV files, runs every validator and prints the findings and the
volume totals. Exit code 1 if any error-severity finding remains.
"""

import argparse
import logging
import sys
from typing import Optional

from wellbore_geometry.coordinator import CascadeCoordinator, WellContext
from wellbore_geometry.importers import ImportResult, import_csv, import_drill_string, import_survey, import_wellbore
from wellbore_geometry.model.diagnostic import Diagnostic

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wellbore_geometry", description=__doc__.splitlines()[0])
    parser.add_argument("sections", help="Wellbore sections CSV (Type, Top, Bottom, OD, ID, Washout, Name)")
    parser.add_argument("--drill-string", help="Drill string CSV (Type, Length, ID, OD, Weight)")
    parser.add_argument("--survey", help="Survey CSV (MD, HoleAngle, Azimuth, TVD)")
    parser.add_argument("--total-md", type=float, default=None, help="Target total MD (ft)")
    parser.add_argument("--well-name", default="", help="Well name for the report header")
    return parser


def _report_import(label: str, result: ImportResult) -> None:
    print(f"{label}: {result.imported_count} imported, {result.error_count} rejected")
    for line in result.detailed_errors:
        print(f"  {line}")
    if result.error_message:
        print(f"  {result.error_message}")


def _print_findings(title: str, findings: list[Diagnostic]) -> None:
    print(f"\n{title}: {len(findings)} finding(s)")
    for finding in findings:
        print(f"  {finding}")


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    coordinator = CascadeCoordinator(context=WellContext(well_name=args.well_name, total_md=args.total_md))

    sections = import_csv(args.sections, importer=import_wellbore)
    _report_import("Wellbore sections", sections)
    findings = coordinator.load_sections(sections.items)

    string_findings: list[Diagnostic] = []
    if args.drill_string:
        components = import_csv(args.drill_string, importer=import_drill_string)
        _report_import("Drill string", components)
        string_findings = coordinator.load_drill_string(components.items)

    survey_findings: list[Diagnostic] = []
    if args.survey:
        points = import_csv(args.survey, importer=import_survey)
        _report_import("Survey", points)
        survey_findings = coordinator.load_survey(points.items)

    _print_findings("Wellbore", findings)
    _print_findings("Continuity", coordinator.check_continuity())
    if args.drill_string:
        _print_findings("Drill string", string_findings)
    if args.survey:
        _print_findings("Survey", survey_findings)

    print("\nTotals:")
    for key, value in coordinator.compute_totals().to_dict().items():
        print(f"  {key}: {value}")

    has_errors = any(d.is_error for d in findings + string_findings + survey_findings)
    return 1 if has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
