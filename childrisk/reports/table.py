from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence

from childrisk.models.risk_assessment import RiskAssessment


class SortField(str, Enum):
    ID = "id"
    CHILD_AGE = "childAge"
    REGION = "region"
    RISK_CATEGORY = "riskCategory"
    PROBABILITY = "probability"
    CONFIDENCE = "confidence"
    DATE = "date"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


SORT_KEYS: Dict[SortField, Callable[[RiskAssessment], Any]] = {
    SortField.ID: lambda r: r.id,
    SortField.CHILD_AGE: lambda r: r.child_age_months,
    SortField.REGION: lambda r: r.region.value,
    SortField.RISK_CATEGORY: lambda r: r.risk_category.value,
    SortField.PROBABILITY: lambda r: r.probability_percent,
    SortField.CONFIDENCE: lambda r: r.confidence_percent,
    SortField.DATE: lambda r: r.created_at,
}


@dataclass(frozen=True)
class SortState:
    field: SortField = SortField.DATE
    order: SortOrder = SortOrder.DESC

    def toggle(self, field: SortField) -> "SortState":
        """
        Clicking the active column flips its order; clicking another
        column sorts by it ascending.
        """
        field = SortField(field)
        if field == self.field:
            flipped = SortOrder.ASC if self.order == SortOrder.DESC else SortOrder.DESC
            return replace(self, order=flipped)
        return SortState(field=field, order=SortOrder.ASC)


def sort_records(
    records: Sequence[RiskAssessment],
    state: SortState = SortState(),
) -> List[RiskAssessment]:
    """Returns a new list; equal keys keep their store order."""
    return sorted(
        records,
        key=SORT_KEYS[state.field],
        reverse=state.order == SortOrder.DESC,
    )


def short_id(assessment_id: str) -> str:
    return assessment_id[-6:]
