import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from childrisk.models.risk_assessment import RiskAssessment, format_timestamp

logger = logging.getLogger("childrisk.integration")


def build_alert_payload(assessment: RiskAssessment) -> dict:
    # Only the classification summary leaves the process, never household inputs
    return {
        "timestamp": format_timestamp(datetime.now(timezone.utc)),
        "alert_level": "HIGH_RISK",
        "assessment_id": assessment.id,
        "region": assessment.region.value,
        "risk_category": assessment.risk_category.value,
        "probability": assessment.probability_percent,
        "advisory_note": assessment.advisory_note,
    }


def trigger_high_risk_alert(
    assessment: RiskAssessment,
    webhook_url: Optional[str] = None,
) -> bool:
    """
    Posts a high-risk notification to the configured webhook.
    Returns True when the webhook accepted it. Failures are logged, not raised.
    """
    if not webhook_url:
        logger.warning(
            "High risk alert for %s not sent: RISK_ALERT_WEBHOOK_URL is not set.",
            assessment.id,
        )
        return False

    try:
        response = requests.post(
            webhook_url,
            json=build_alert_payload(assessment),
            timeout=2.0,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        logger.info(f"High risk alert sent for {assessment.id}. Status: {response.status_code}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to send high risk alert: {e}")
        return False
