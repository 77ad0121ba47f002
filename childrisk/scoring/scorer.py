import logging
import math
import random
import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from childrisk.models.risk_assessment import RiskAssessment, RiskCategory, truncate_to_milliseconds
from childrisk.models.survey_input import SurveyInput
from childrisk.scoring.thresholds import (
    CONFIDENCE_BASE,
    CONFIDENCE_CEILING,
    CONFIDENCE_FLOOR,
    HIGH_RISK_MIN,
    JITTER_SPAN,
    LOW_RISK_MAX,
    PROBABILITY_CEILING,
    PROBABILITY_FLOOR,
)
from childrisk.scoring.weights import (
    CHILD_AGE_WEIGHT,
    FOOD_INSECURITY_WEIGHT,
    HOUSEHOLD_INCOME_WEIGHT,
    SANITATION_ACCESS_WEIGHT,
    SCORE_CEILING,
    WATER_ACCESS_WEIGHT,
)

logger = logging.getLogger("childrisk.scoring")

ADVISORY_NOTES = {
    RiskCategory.LOW: (
        "Child shows low risk indicators. "
        "Continue monitoring basic health metrics."
    ),
    RiskCategory.MEDIUM: (
        "Moderate risk detected. "
        "Consider intervention programs and regular follow-ups."
    ),
    RiskCategory.HIGH: (
        "High risk indicators detected. Immediate intervention recommended. "
        "Prioritize nutrition and healthcare access."
    ),
}


def compute_risk_score(survey: SurveyInput) -> float:
    """
    Weighted linear risk score. Unbounded: out-of-range inputs
    are scored as given.
    """
    return (
        survey.child_age_months * CHILD_AGE_WEIGHT
        + (SCORE_CEILING - survey.household_income_score) * HOUSEHOLD_INCOME_WEIGHT
        + survey.food_insecurity_score * FOOD_INSECURITY_WEIGHT
        + (SCORE_CEILING - survey.water_access_score) * WATER_ACCESS_WEIGHT
        + (SCORE_CEILING - survey.sanitation_access_score) * SANITATION_ACCESS_WEIGHT
    )


def classify_risk(risk_score: float) -> Tuple[RiskCategory, str]:
    if risk_score < LOW_RISK_MAX:
        category = RiskCategory.LOW
    elif risk_score < HIGH_RISK_MIN:
        category = RiskCategory.MEDIUM
    else:
        category = RiskCategory.HIGH

    return category, ADVISORY_NOTES[category]


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_one_decimal(value: float) -> float:
    # Half-up, so 12.25 -> 12.3 rather than banker's 12.2
    return math.floor(value * 10 + 0.5) / 10


class MillisecondIdFactory:
    """
    Epoch-millisecond ids. Bumps forward when two ids would collide
    within the same millisecond, so ids stay unique per process.
    """

    def __init__(self, clock: Callable[[], float] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc).timestamp())
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


class RiskScorer:
    """
    Converts a SurveyInput into a RiskAssessment.

    The category is deterministic. Probability and confidence carry
    uniform jitter drawn from `rng`, which tests can pin.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rng = rng or random.Random()
        self.id_factory = id_factory or MillisecondIdFactory()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def _jitter(self) -> float:
        return self.rng.random() * JITTER_SPAN

    def evaluate(self, survey: SurveyInput, assessment_id: Optional[str] = None) -> RiskAssessment:
        risk_score = compute_risk_score(survey)
        category, note = classify_risk(risk_score)

        probability = clamp(
            risk_score + self._jitter(), PROBABILITY_FLOOR, PROBABILITY_CEILING
        )
        confidence = clamp(
            CONFIDENCE_BASE + self._jitter(), CONFIDENCE_FLOOR, CONFIDENCE_CEILING
        )

        assessment = RiskAssessment(
            id=assessment_id or self.id_factory(),
            child_age_months=survey.child_age_months,
            region=survey.region,
            risk_category=category,
            probability_percent=round_one_decimal(probability),
            confidence_percent=round_one_decimal(confidence),
            advisory_note=note,
            created_at=truncate_to_milliseconds(self.clock()),
            input=survey,
        )

        logger.debug(
            "Assessment %s scored %s (probability=%s)",
            assessment.id,
            category.value,
            assessment.probability_percent,
        )
        return assessment
