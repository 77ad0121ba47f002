import csv
import io
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Sequence

from childrisk.config import DEFAULT_DATE_FORMAT
from childrisk.models.risk_assessment import RiskAssessment

CSV_HEADERS = [
    "ID",
    "Child Age",
    "Region",
    "Risk Category",
    "Probability",
    "Confidence",
    "Date",
    "Household Income",
    "Food Insecurity",
    "Water Access",
    "Sanitation Access",
    "Education Level",
]

CSV_MEDIA_TYPE = "text/csv"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"


class NoDataToExportError(ValueError):
    def __init__(self):
        super().__init__("No data to export")


class UnsupportedExportFormatError(ValueError):
    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(
            f"{fmt.upper()} export functionality would require a "
            f"{fmt.upper()} generation library"
        )


@dataclass(frozen=True)
class ExportRow:
    """One parsed CSV row, values coerced back to their record types."""
    id: str
    child_age: float
    region: str
    risk_category: str
    probability: float
    confidence: float
    date: datetime
    household_income: float
    food_insecurity: float
    water_access: float
    sanitation_access: float
    education_level: str


def format_number(value) -> str:
    """Plain decimal text, never exponent form: 24.0 -> "24", 5e-05 -> "0.00005"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _row(record: RiskAssessment, tz: Optional[tzinfo], date_format: str) -> List[str]:
    survey = record.input
    return [
        record.id,
        format_number(record.child_age_months),
        record.region.value,
        record.risk_category.value,
        format_number(record.probability_percent),
        format_number(record.confidence_percent),
        record.created_at.astimezone(tz).strftime(date_format),
        format_number(survey.household_income_score),
        format_number(survey.food_insecurity_score),
        format_number(survey.water_access_score),
        format_number(survey.sanitation_access_score),
        survey.education_level.value,
    ]


def build_csv(
    records: Sequence[RiskAssessment],
    tz: Optional[tzinfo] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Render records as CSV in store order. An empty sequence yields
    the header row only.

    Dates are rendered with `date_format` in `tz`; with the default
    format the sub-second part of `created_at` is dropped.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow(_row(record, tz, date_format))
    return buffer.getvalue()


def parse_csv(
    text: str,
    tz: Optional[tzinfo] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> List[ExportRow]:
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header != CSV_HEADERS:
        raise ValueError(f"Unexpected CSV header: {header}")

    rows = []
    for values in reader:
        if not values:
            continue
        parsed_date = datetime.strptime(values[6], date_format)
        if tz is not None:
            parsed_date = parsed_date.replace(tzinfo=tz)

        rows.append(ExportRow(
            id=values[0],
            child_age=float(values[1]),
            region=values[2],
            risk_category=values[3],
            probability=float(values[4]),
            confidence=float(values[5]),
            date=parsed_date,
            household_income=float(values[7]),
            food_insecurity=float(values[8]),
            water_access=float(values[9]),
            sanitation_access=float(values[10]),
            education_level=values[11],
        ))
    return rows


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now().astimezone()
    return f"health-predictions-{int(now.timestamp() * 1000)}.csv"


def export_records(
    records: Sequence[RiskAssessment],
    fmt: ExportFormat = ExportFormat.CSV,
    tz: Optional[tzinfo] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Export entry point used by the dashboard. Unlike build_csv, an
    empty record set is refused with NoDataToExportError.
    """
    if not records:
        raise NoDataToExportError()

    fmt = ExportFormat(fmt)
    if fmt is not ExportFormat.CSV:
        raise UnsupportedExportFormatError(fmt.value)

    return build_csv(records, tz=tz, date_format=date_format)
