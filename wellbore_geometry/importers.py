"""Importers - Row-by-row import of drill-string, survey and wellbore records.

Rows are dictionaries keyed by column header (as produced by read_csv_rows).
Headers are matched loosely: case, spaces, underscores and a trailing unit in
parentheses are ignored, so "Length (ft)", "length" and "LENGTH" all match.

A malformed row is skipped and recorded in ImportResult.detailed_errors; the
batch succeeds if at least one row imported. Nothing here touches a
coordinator; callers hand the imported items to a bulk load.

Record layouts:
    Drill string: Type, Length, ID, OD, [Weight]
    Survey:       MD, [HoleAngle], [Azimuth], [TVD]
    Wellbore:     Type, Top, Bottom, OD, [ID], [Washout], [Name]
"""

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from wellbore_geometry.constants import SurveyConfig
from wellbore_geometry.core.survey_calculator import SurveyCalculator
from wellbore_geometry.model.drill_string import ComponentType, DrillStringComponent
from wellbore_geometry.model.survey_point import SurveyPoint
from wellbore_geometry.model.wellbore_section import SectionType, WellboreSection

logger = logging.getLogger(__name__)

Row = dict[str, str]

# Header row is row 1 in a spreadsheet
FIRST_DATA_ROW = 2


@dataclass
class ImportResult:
    """Outcome of one import batch.

    Attributes:
        items: Successfully parsed entities, in file order
        imported_count: Number of rows imported
        error_count: Number of rows rejected
        detailed_errors: One "Row N: reason" entry per rejected row
        error_message: Batch-level failure description, empty on success
    """

    items: list[Any] = field(default_factory=list)
    imported_count: int = 0
    error_count: int = 0
    detailed_errors: list[str] = field(default_factory=list)
    error_message: str = ""

    @property
    def success(self) -> bool:
        return self.imported_count > 0

    def add_error(self, row_number: int, reason: str) -> None:
        self.error_count += 1
        self.detailed_errors.append(f"Row {row_number}: {reason}")


# =============================================================================
# Cell parsing
# =============================================================================


def normalize_header(header: str) -> str:
    """'Length (ft)' -> 'length', 'Hole_Angle' -> 'holeangle'."""
    without_unit = re.sub(r"\(.*?\)", "", header)
    return re.sub(r"[^a-z0-9]", "", without_unit.lower())


def _cell(row: Row, *names: str) -> Optional[str]:
    """First non-empty cell under any of the given (normalized) names."""
    for name in names:
        value = row.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _number(row: Row, label: str, *names: str, required: bool = True) -> Optional[float]:
    raw = _cell(row, *names)
    if raw is None:
        if required:
            raise ValueError(f"{label} is required")
        return None
    try:
        return float(raw.replace(",", "."))
    except ValueError:
        raise ValueError(f"Invalid number for {label}: {raw!r}") from None


def _normalize_row(row: dict[str, Any]) -> Row:
    return {normalize_header(k): (v or "") for k, v in row.items() if k is not None}


# =============================================================================
# Row parsers
# =============================================================================


def parse_drill_string_row(row: Row) -> DrillStringComponent:
    """Parse a drill-string record. Ids and names are assigned by the coordinator.

    Raises:
        ValueError: Unknown type, missing or non-numeric dimension
    """
    type_label = _cell(row, "type", "componenttype")
    if type_label is None:
        raise ValueError("Component type is required")
    return DrillStringComponent(
        id=0,
        component_type=ComponentType.from_label(type_label),
        length=_number(row, "Length", "length"),
        id_=_number(row, "ID", "id", "innerdiameter"),
        od=_number(row, "OD", "od", "outerdiameter"),
        weight_per_ft=_number(row, "Weight", "weight", "weightperft", "weightperfoot", required=False),
    )


def parse_survey_row(row: Row) -> SurveyPoint:
    """Parse a survey record. Missing angles default to a vertical station.

    Raises:
        ValueError: Missing MD, angle out of range or TVD deeper than MD
    """
    md = _number(row, "MD", "md", "measureddepth")
    hole_angle = _number(row, "Hole Angle", "holeangle", "inclination", "inc", required=False) or 0.0
    azimuth = _number(row, "Azimuth", "azimuth", "azi", required=False) or 0.0
    tvd = _number(row, "TVD", "tvd", required=False)

    if not SurveyConfig.MIN_HOLE_ANGLE_DEG <= hole_angle <= SurveyConfig.MAX_HOLE_ANGLE_DEG:
        raise ValueError(
            f"Hole Angle ({hole_angle:.2f}°) must be between {SurveyConfig.MIN_HOLE_ANGLE_DEG:.0f}° "
            f"and {SurveyConfig.MAX_HOLE_ANGLE_DEG:.0f}°"
        )
    if not SurveyConfig.MIN_AZIMUTH_DEG <= azimuth <= SurveyConfig.MAX_AZIMUTH_DEG:
        raise ValueError(
            f"Azimuth ({azimuth:.2f}°) must be between {SurveyConfig.MIN_AZIMUTH_DEG:.0f}° "
            f"and {SurveyConfig.MAX_AZIMUTH_DEG:.0f}°"
        )
    if tvd is not None and tvd > md:
        raise ValueError(f"TVD ({tvd:.2f} ft) cannot exceed MD ({md:.2f} ft)")

    return SurveyPoint(md=md, hole_angle=hole_angle, azimuth=azimuth, measured_tvd=tvd)


def parse_wellbore_row(row: Row) -> WellboreSection:
    """Parse a wellbore section record. Ids are assigned by the bulk load.

    Raises:
        ValueError: Unknown section type, missing or non-numeric depth or OD
    """
    type_label = _cell(row, "type", "sectiontype")
    if type_label is None:
        raise ValueError("Section type is required")
    return WellboreSection(
        id=0,
        name=_cell(row, "name") or "",
        section_type=SectionType.from_label(type_label),
        top_md=_number(row, "Top MD", "top", "topmd"),
        bottom_md=_number(row, "Bottom MD", "bottom", "bottommd"),
        od=_number(row, "OD", "od"),
        id_=_number(row, "ID", "id", required=False),
        washout_pct=_number(row, "Washout", "washout", "washoutpct", "washoutpercent", required=False),
    )


# =============================================================================
# Batch import
# =============================================================================


def import_rows(rows: Iterable[dict[str, Any]], parser: Callable[[Row], Any], kind: str) -> ImportResult:
    """Apply a row parser to every row, collecting per-row failures.

    Args:
        rows: Raw rows keyed by header
        parser: One of the parse_*_row functions
        kind: Plural entity name for the batch-level message
    """
    result = ImportResult()
    for offset, raw in enumerate(rows):
        row_number = offset + FIRST_DATA_ROW
        row = _normalize_row(raw)
        if not any(v.strip() for v in row.values()):
            continue
        try:
            item = parser(row)
        except ValueError as e:
            result.add_error(row_number=row_number, reason=str(e))
            logger.warning(f"Rejected {kind} row {row_number}: {e}")
            continue
        result.items.append(item)
        result.imported_count += 1

    if not result.success and result.error_count > 0:
        result.error_message = f"Failed to import any valid {kind}. {result.error_count} errors encountered."
    logger.info(f"Imported {result.imported_count} {kind}, rejected {result.error_count}")
    return result


def import_drill_string(rows: Iterable[dict[str, Any]]) -> ImportResult:
    return import_rows(rows=rows, parser=parse_drill_string_row, kind="drill string components")


def import_survey(rows: Iterable[dict[str, Any]]) -> ImportResult:
    """Import survey stations, sorted by MD with derived values computed."""
    result = import_rows(rows=rows, parser=parse_survey_row, kind="survey points")
    SurveyCalculator.recalculate_all(result.items)
    return result


def import_wellbore(rows: Iterable[dict[str, Any]]) -> ImportResult:
    return import_rows(rows=rows, parser=parse_wellbore_row, kind="wellbore sections")


# =============================================================================
# CSV files
# =============================================================================


def read_csv_rows(filepath: str | Path) -> list[dict[str, str]]:
    """Read a CSV file with a header row. Delimiter ';' or ',' is detected from the header.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(filepath)
    with path.open(mode="r", encoding="utf-8-sig", newline="") as f:
        header = f.readline()
        delimiter = ";" if ";" in header else ","
        f.seek(0)
        rows = list(csv.DictReader(f, delimiter=delimiter))
    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def import_csv(filepath: str | Path, importer: Callable[[Iterable[dict[str, Any]]], ImportResult]) -> ImportResult:
    """Read a CSV file and run an importer over it. File problems become the batch error."""
    try:
        rows = read_csv_rows(filepath)
    except FileNotFoundError:
        return ImportResult(error_message="File not found.")
    except (OSError, csv.Error) as e:
        logger.error(f"CSV import failed: {e}")
        return ImportResult(error_message=str(e))
    if not rows:
        return ImportResult(error_message="File is empty.")
    return importer(rows)
