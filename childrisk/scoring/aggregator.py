# childrisk/scoring/aggregator.py

from datetime import date, tzinfo
from typing import Callable, Dict, List, Optional, Sequence

from childrisk.models.aggregate_view import (
    AggregateView,
    CategoryCount,
    GroupBreakdown,
    TimeSeriesPoint,
)
from childrisk.models.risk_assessment import CATEGORY_ORDER, RiskAssessment, RiskCategory
from childrisk.scoring.scorer import round_one_decimal

NOT_AVAILABLE = "N/A"


def category_totals(records: Sequence[RiskAssessment]) -> Dict[str, int]:
    """Counts for every category, zeros included."""
    totals = {category.value: 0 for category in CATEGORY_ORDER}
    for r in records:
        totals[r.risk_category.value] += 1
    return totals


def category_distribution(records: Sequence[RiskAssessment]) -> List[CategoryCount]:
    """Chart-facing counts: High, Medium, Low order with empty categories dropped."""
    totals = category_totals(records)
    return [
        CategoryCount(name=category.value, value=totals[category.value])
        for category in CATEGORY_ORDER
        if totals[category.value] > 0
    ]


def _group_breakdown(
    records: Sequence[RiskAssessment],
    key: Callable[[RiskAssessment], str],
) -> List[GroupBreakdown]:
    # dicts keep insertion order, so groups come out in first-seen order
    counts: Dict[str, Dict[RiskCategory, int]] = {}

    for r in records:
        name = key(r)
        bucket = counts.setdefault(name, {category: 0 for category in CATEGORY_ORDER})
        bucket[r.risk_category] += 1

    return [
        GroupBreakdown(
            name=name,
            high=bucket[RiskCategory.HIGH],
            medium=bucket[RiskCategory.MEDIUM],
            low=bucket[RiskCategory.LOW],
        )
        for name, bucket in counts.items()
    ]


def region_breakdown(records: Sequence[RiskAssessment]) -> List[GroupBreakdown]:
    return _group_breakdown(records, lambda r: r.region.value)


def education_breakdown(records: Sequence[RiskAssessment]) -> List[GroupBreakdown]:
    return _group_breakdown(records, lambda r: r.input.education_level.value)


def time_series(
    records: Sequence[RiskAssessment],
    tz: Optional[tzinfo] = None,
) -> List[TimeSeriesPoint]:
    """
    Predictions per calendar day, oldest day first.

    Days are taken in `tz` (local time when None). The caller's
    sequence is never reordered; sorting happens on a copy.
    """
    ordered = sorted(records, key=lambda r: r.created_at)

    per_day: Dict[date, int] = {}
    for r in ordered:
        day = r.created_at.astimezone(tz).date()
        per_day[day] = per_day.get(day, 0) + 1

    return [TimeSeriesPoint(date=day, predictions=n) for day, n in per_day.items()]


def most_common_category(distribution: Sequence[CategoryCount]) -> str:
    # sorted() is stable: ties keep the High, Medium, Low input order
    ranked = sorted(distribution, key=lambda c: c.value, reverse=True)
    return ranked[0].name if ranked else NOT_AVAILABLE


def average_probability(records: Sequence[RiskAssessment]) -> float:
    if not records:
        return 0
    total = sum(r.probability_percent for r in records)
    return round_one_decimal(total / len(records))


def most_affected_region(breakdown: Sequence[GroupBreakdown]) -> str:
    # Stable sort: first-seen region wins ties
    ranked = sorted(breakdown, key=lambda g: g.total, reverse=True)
    return ranked[0].name if ranked else NOT_AVAILABLE


def summarize(
    records: Sequence[RiskAssessment],
    tz: Optional[tzinfo] = None,
) -> AggregateView:
    """
    Build the full AggregateView for the current record set.
    Pure and total: an empty sequence yields empty/zero results.
    """
    snapshot = list(records)

    distribution = category_distribution(snapshot)
    regions = region_breakdown(snapshot)

    return AggregateView(
        category_distribution=distribution,
        category_totals=category_totals(snapshot),
        total_records=len(snapshot),
        region_breakdown=regions,
        education_breakdown=education_breakdown(snapshot),
        time_series=time_series(snapshot, tz),
        most_common_category=most_common_category(distribution),
        average_probability=average_probability(snapshot),
        most_affected_region=most_affected_region(regions),
    )
