from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from .survey_input import Region, SurveyInput


class RiskCategory(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Enumeration order used wherever categories are listed or tie-broken.
CATEGORY_ORDER = (RiskCategory.HIGH, RiskCategory.MEDIUM, RiskCategory.LOW)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp, accepting the trailing 'Z' form
    written by to_dict().
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def truncate_to_milliseconds(value: datetime) -> datetime:
    # Stored timestamps carry millisecond resolution
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


@dataclass(frozen=True)
class RiskAssessment:
    """
    Scored outcome for a single SurveyInput.
    Created once by RiskScorer.evaluate and never mutated afterwards.
    """
    id: str
    child_age_months: float
    region: Region
    risk_category: RiskCategory
    probability_percent: float   # 5.0 - 95.0
    confidence_percent: float    # 75.0 - 98.0
    advisory_note: str
    created_at: datetime
    input: SurveyInput

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "childAge": self.child_age_months,
            "region": self.region.value,
            "riskCategory": self.risk_category.value,
            "probability": self.probability_percent,
            "confidence": self.confidence_percent,
            "notes": self.advisory_note,
            "date": format_timestamp(self.created_at),
            "input": self.input.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskAssessment":
        return cls(
            id=str(data["id"]),
            child_age_months=data["childAge"],
            region=Region(data["region"]),
            risk_category=RiskCategory(data["riskCategory"]),
            probability_percent=float(data["probability"]),
            confidence_percent=float(data["confidence"]),
            advisory_note=data["notes"],
            created_at=parse_timestamp(data["date"]),
            input=SurveyInput.from_dict(data["input"]),
        )
