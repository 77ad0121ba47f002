import csv
import io
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from childrisk.export.csv_export import (
    CSV_HEADERS,
    ExportFormat,
    NoDataToExportError,
    UnsupportedExportFormatError,
    build_csv,
    export_filename,
    export_records,
    format_number,
    parse_csv,
)
from childrisk.models.risk_assessment import RiskCategory
from childrisk.models.survey_input import EducationLevel, Region
from childrisk.scoring.scorer import RiskScorer
from tests.fixtures.surveys import (
    FIXED_TIME,
    LOW_RISK_SURVEY,
    MEDIUM_RISK_SURVEY,
    FixedRandom,
    SequentialIds,
    make_assessment,
)


@pytest.fixture
def records():
    return [
        make_assessment("1736937000500", RiskCategory.HIGH, Region.SOUTH, probability=88.4,
                        confidence=91.2, created_at=FIXED_TIME, education=EducationLevel.NONE),
        make_assessment("1736937000100", RiskCategory.LOW, Region.NORTH, probability=12.0,
                        confidence=86.7, created_at=FIXED_TIME - timedelta(days=1)),
        make_assessment("1736937000900", RiskCategory.MEDIUM, Region.EAST, probability=47.5,
                        confidence=80.0, created_at=FIXED_TIME + timedelta(hours=5)),
    ]


def test_header_row_is_exact():
    document = build_csv([])

    assert document.splitlines()[0] == (
        "ID,Child Age,Region,Risk Category,Probability,Confidence,Date,"
        "Household Income,Food Insecurity,Water Access,Sanitation Access,Education Level"
    )
    assert len(document.splitlines()) == 1


def test_rows_follow_store_order_not_date_order(records):
    document = build_csv(records, tz=timezone.utc)

    ids = [row[0] for row in csv.reader(io.StringIO(document))][1:]
    assert ids == ["1736937000500", "1736937000100", "1736937000900"]


def test_row_values_are_plain_text(records):
    document = build_csv(records[:1], tz=timezone.utc)

    row = list(csv.reader(io.StringIO(document)))[1]
    assert row == [
        "1736937000500", "24", "South", "High", "88.4", "91.2",
        "01/15/2025, 10:30:00 AM", "40", "35", "70", "60", "None",
    ]
    # The date contains a comma, so the writer quotes it
    assert '"01/15/2025, 10:30:00 AM"' in document


def test_round_trip_preserves_count_order_and_values(records):
    document = build_csv(records, tz=timezone.utc)

    rows = parse_csv(document, tz=timezone.utc)

    assert len(rows) == len(records)
    for row, record in zip(rows, records):
        assert row.id == record.id
        assert row.child_age == record.child_age_months
        assert row.region == record.region.value
        assert row.risk_category == record.risk_category.value
        assert row.probability == record.probability_percent
        assert row.confidence == record.confidence_percent
        assert row.date == record.created_at
        assert row.household_income == record.input.household_income_score
        assert row.food_insecurity == record.input.food_insecurity_score
        assert row.water_access == record.input.water_access_score
        assert row.sanitation_access == record.input.sanitation_access_score
        assert row.education_level == record.input.education_level.value


def test_parse_rejects_foreign_header():
    with pytest.raises(ValueError):
        parse_csv("a,b,c\n1,2,3\n")


def test_format_number_drops_trailing_zero_only_for_integral_floats():
    assert format_number(24.0) == "24"
    assert format_number(61.5) == "61.5"
    assert format_number(7) == "7"


def test_export_refuses_empty_record_set():
    with pytest.raises(NoDataToExportError) as exc:
        export_records([])

    assert str(exc.value) == "No data to export"


def test_pdf_export_is_not_supported(records):
    with pytest.raises(UnsupportedExportFormatError):
        export_records(records, ExportFormat.PDF)


def test_export_records_returns_csv(records):
    document = export_records(records, "csv", tz=timezone.utc)

    assert document.startswith(",".join(CSV_HEADERS))
    assert document.count("\n") == len(records) + 1


def test_export_filename_uses_epoch_milliseconds():
    now = datetime(2025, 1, 15, 10, 30, 0, tzinfo=timezone.utc)

    assert export_filename(now) == "health-predictions-1736937000000.csv"


def test_small_and_large_values_are_written_without_exponent(records):
    record = replace(records[0], input=replace(records[0].input, water_access_score=0.00005))

    document = build_csv([record], tz=timezone.utc)

    row = list(csv.reader(io.StringIO(document)))[1]
    assert row[9] == "0.00005"
    assert "e-05" not in document
    assert format_number(1e-7) == "0.0000001"
    assert format_number(1.5e16) == "15000000000000000"
    assert format_number(123456789012.25) == "123456789012.25"


def test_scored_records_round_trip_to_the_second():
    scorer = RiskScorer(
        rng=FixedRandom(0.5),
        id_factory=SequentialIds("pred"),
        clock=lambda: datetime(2025, 1, 15, 10, 30, 0, 987654, tzinfo=timezone.utc),
    )
    scored = [scorer.evaluate(LOW_RISK_SURVEY), scorer.evaluate(MEDIUM_RISK_SURVEY)]

    rows = parse_csv(build_csv(scored, tz=timezone.utc), tz=timezone.utc)

    assert [row.id for row in rows] == ["pred-1", "pred-2"]
    for row, record in zip(rows, scored):
        # Sub-second precision is not part of the exported date
        assert row.date == record.created_at.replace(microsecond=0)
        assert row.probability == record.probability_percent
