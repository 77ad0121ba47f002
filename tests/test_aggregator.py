from datetime import date, datetime, timedelta, timezone

from childrisk.models.risk_assessment import RiskCategory
from childrisk.models.survey_input import EducationLevel, Region
from childrisk.scoring.aggregator import (
    average_probability,
    category_distribution,
    education_breakdown,
    most_affected_region,
    most_common_category,
    region_breakdown,
    summarize,
    time_series,
)
from tests.fixtures.surveys import FIXED_TIME, make_assessment

HIGH = RiskCategory.HIGH
MEDIUM = RiskCategory.MEDIUM
LOW = RiskCategory.LOW


def test_empty_record_set_yields_empty_view():
    view = summarize([])

    assert view.category_distribution == []
    assert view.region_breakdown == []
    assert view.education_breakdown == []
    assert view.time_series == []
    assert view.most_common_category == "N/A"
    assert view.average_probability == 0
    assert view.most_affected_region == "N/A"
    assert view.total_records == 0
    assert view.category_totals == {"High": 0, "Medium": 0, "Low": 0}
    assert view.is_empty


def test_distribution_omits_zero_categories_but_totals_keep_them():
    records = [
        make_assessment("1", HIGH),
        make_assessment("2", LOW),
        make_assessment("3", HIGH),
    ]

    distribution = category_distribution(records)
    view = summarize(records)

    assert [(c.name, c.value) for c in distribution] == [("High", 2), ("Low", 1)]
    assert view.category_totals == {"High": 2, "Medium": 0, "Low": 1}
    assert view.total_records == 3


def test_region_breakdown_keeps_first_seen_order_and_sums_counts():
    records = [
        make_assessment("1", HIGH, Region.SOUTH),
        make_assessment("2", LOW, Region.NORTH),
        make_assessment("3", MEDIUM, Region.SOUTH),
    ]

    breakdown = region_breakdown(records)

    assert [g.name for g in breakdown] == ["South", "North"]
    south = breakdown[0]
    assert (south.high, south.medium, south.low) == (1, 1, 0)
    assert south.total == 2
    north = breakdown[1]
    assert (north.high, north.medium, north.low) == (0, 0, 1)


def test_education_breakdown_groups_by_survey_education_level():
    records = [
        make_assessment("1", HIGH, education=EducationLevel.NONE),
        make_assessment("2", HIGH, education=EducationLevel.HIGHER),
        make_assessment("3", LOW, education=EducationLevel.NONE),
    ]

    breakdown = education_breakdown(records)

    assert [g.name for g in breakdown] == ["None", "Higher"]
    assert breakdown[0].to_dict() == {"name": "None", "High": 1, "Medium": 0, "Low": 1}


def test_time_series_groups_by_day_without_reordering_caller_records():
    day_one = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
    day_two = day_one + timedelta(days=1)
    records = [
        make_assessment("late", created_at=day_two + timedelta(hours=3)),
        make_assessment("early", created_at=day_one),
        make_assessment("mid", created_at=day_two),
    ]
    original_order = [r.id for r in records]

    series = time_series(records, tz=timezone.utc)

    assert [(p.date, p.predictions) for p in series] == [
        (date(2025, 1, 10), 1),
        (date(2025, 1, 11), 2),
    ]
    assert [r.id for r in records] == original_order


def test_time_series_uses_display_timezone_for_day_boundaries():
    # 23:30 UTC is already the next day at UTC+2
    late_evening = datetime(2025, 1, 10, 23, 30, tzinfo=timezone.utc)
    records = [make_assessment("1", created_at=late_evening)]

    utc_series = time_series(records, tz=timezone.utc)
    shifted_series = time_series(records, tz=timezone(timedelta(hours=2)))

    assert utc_series[0].date == date(2025, 1, 10)
    assert shifted_series[0].date == date(2025, 1, 11)


def test_most_common_category_tie_prefers_enumeration_order():
    high_and_medium = [make_assessment("1", MEDIUM), make_assessment("2", HIGH)]
    medium_and_low = [make_assessment("1", LOW), make_assessment("2", MEDIUM)]

    assert most_common_category(category_distribution(high_and_medium)) == "High"
    assert most_common_category(category_distribution(medium_and_low)) == "Medium"


def test_most_common_category_picks_highest_count():
    records = [
        make_assessment("1", HIGH),
        make_assessment("2", LOW),
        make_assessment("3", LOW),
    ]

    assert summarize(records).most_common_category == "Low"


def test_most_affected_region_tie_prefers_first_seen():
    records = [
        make_assessment("1", LOW, Region.WEST),
        make_assessment("2", HIGH, Region.EAST),
    ]

    assert most_affected_region(region_breakdown(records)) == "West"


def test_most_affected_region_uses_total_count():
    records = [
        make_assessment("1", HIGH, Region.WEST),
        make_assessment("2", LOW, Region.EAST),
        make_assessment("3", MEDIUM, Region.EAST),
    ]

    assert summarize(records).most_affected_region == "East"


def test_average_probability_rounds_to_one_decimal():
    records = [
        make_assessment("1", probability=33.3),
        make_assessment("2", probability=33.3),
        make_assessment("3", probability=33.4),
    ]

    assert average_probability(records) == 33.3
    assert average_probability([make_assessment("1", probability=40.0),
                                make_assessment("2", probability=41.0)]) == 40.5
    assert average_probability([]) == 0


def test_summarize_is_idempotent():
    records = [
        make_assessment("1", HIGH, Region.SOUTH, created_at=FIXED_TIME),
        make_assessment("2", LOW, Region.NORTH, created_at=FIXED_TIME - timedelta(days=2)),
        make_assessment("3", MEDIUM, Region.SOUTH, created_at=FIXED_TIME + timedelta(days=1)),
    ]

    first = summarize(records, tz=timezone.utc)
    second = summarize(records, tz=timezone.utc)

    assert first == second
    assert first.to_dict() == second.to_dict()
    assert [r.id for r in records] == ["1", "2", "3"]


def test_view_serializes_for_charts():
    records = [make_assessment("1", HIGH, Region.SOUTH)]

    payload = summarize(records, tz=timezone.utc).to_dict()

    assert payload["category_distribution"] == [{"name": "High", "value": 1}]
    assert payload["region_breakdown"] == [{"name": "South", "High": 1, "Medium": 0, "Low": 0}]
    assert payload["time_series"] == [{"date": "2025-01-15", "predictions": 1}]
    assert payload["most_common_category"] == "High"
