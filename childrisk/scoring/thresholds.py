# Deterministic category thresholds on the raw risk score.
# Half-open intervals: a score equal to a bound belongs to the higher band.

LOW_RISK_MAX = 30.0    # score < 30        -> Low
HIGH_RISK_MIN = 60.0   # 30 <= score < 60  -> Medium, score >= 60 -> High

# Probability / confidence presentation bounds.
PROBABILITY_FLOOR = 5.0
PROBABILITY_CEILING = 95.0
CONFIDENCE_BASE = 85.0
CONFIDENCE_FLOOR = 75.0
CONFIDENCE_CEILING = 98.0

# Width of the uniform jitter added to probability and confidence.
JITTER_SPAN = 10.0
