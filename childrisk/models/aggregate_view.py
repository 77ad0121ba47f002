from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List


@dataclass(frozen=True)
class CategoryCount:
    name: str
    value: int


@dataclass(frozen=True)
class GroupBreakdown:
    """Per-group risk counts, one bar in the region/education charts."""
    name: str
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "High": self.high,
            "Medium": self.medium,
            "Low": self.low,
        }


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: date
    predictions: int


@dataclass(frozen=True)
class AggregateView:
    """
    Derived summary of the current record set.
    Rebuilt from scratch on every call to summarize(); holds no identity.
    """
    category_distribution: List[CategoryCount] = field(default_factory=list)
    category_totals: Dict[str, int] = field(default_factory=dict)
    total_records: int = 0
    region_breakdown: List[GroupBreakdown] = field(default_factory=list)
    education_breakdown: List[GroupBreakdown] = field(default_factory=list)
    time_series: List[TimeSeriesPoint] = field(default_factory=list)
    most_common_category: str = "N/A"
    average_probability: float = 0
    most_affected_region: str = "N/A"

    @property
    def is_empty(self) -> bool:
        return self.total_records == 0

    def to_dict(self) -> dict:
        return {
            "category_distribution": [
                {"name": c.name, "value": c.value}
                for c in self.category_distribution
            ],
            "category_totals": dict(self.category_totals),
            "total_records": self.total_records,
            "region_breakdown": [g.to_dict() for g in self.region_breakdown],
            "education_breakdown": [g.to_dict() for g in self.education_breakdown],
            "time_series": [
                {"date": p.date.isoformat(), "predictions": p.predictions}
                for p in self.time_series
            ],
            "most_common_category": self.most_common_category,
            "average_probability": self.average_probability,
            "most_affected_region": self.most_affected_region,
        }
