from datetime import datetime
from typing import List, Optional, Sequence

from childrisk.config import DEFAULT_DATE_FORMAT
from childrisk.models.activity_log import ActivityLog, ActivityType
from childrisk.models.risk_assessment import RiskAssessment
from childrisk.scoring.scorer import MillisecondIdFactory

_next_id = MillisecondIdFactory()


def _entry(
    action: str,
    kind: ActivityType,
    now: Optional[datetime],
    date_format: str,
) -> ActivityLog:
    now = now or datetime.now().astimezone()
    return ActivityLog(
        id=_next_id(),
        action=action,
        timestamp=now.strftime(date_format),
        type=kind,
    )


def system_initialized_entry(
    now: Optional[datetime] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> ActivityLog:
    return _entry("System initialized", ActivityType.SYSTEM, now, date_format)


def prediction_entry(
    assessment: RiskAssessment,
    now: Optional[datetime] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> ActivityLog:
    action = (
        f"New {assessment.risk_category.value.lower()} risk prediction "
        f"created for {assessment.region.value} region"
    )
    return _entry(action, ActivityType.PREDICTION, now, date_format)


def export_entry(
    record_count: int,
    fmt: str,
    now: Optional[datetime] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> ActivityLog:
    action = f"Exported {record_count} predictions to {fmt.upper()}"
    return _entry(action, ActivityType.EXPORT, now, date_format)


def recent(logs: Sequence[ActivityLog], limit: int = 10) -> List[ActivityLog]:
    """Logs are kept newest first, so the head is the most recent."""
    return list(logs[:limit])
