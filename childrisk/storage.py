import json
import logging
import pathlib
from typing import Dict, List, Optional

from childrisk.activity import system_initialized_entry
from childrisk.config import DEFAULT_DATE_FORMAT
from childrisk.models.activity_log import ActivityLog
from childrisk.models.risk_assessment import RiskAssessment

logger = logging.getLogger("childrisk.storage")

PREDICTIONS_KEY = "predictions"
ACTIVITY_LOGS_KEY = "activityLogs"


class StoreCorruptedError(ValueError):
    pass


class RecordStore:
    """
    File-backed key-value store holding serialized text entries.

    Keys:
        "predictions"  -> RiskAssessments in append order
        "activityLogs" -> ActivityLogs, newest first

    Every write rewrites the affected key in full.
    """

    def __init__(self, path: str, date_format: str = DEFAULT_DATE_FORMAT):
        self.path = pathlib.Path(path)
        self.date_format = date_format

    # --- raw key-value layer ---

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"Record store {self.path} is not valid JSON") from e

        if not isinstance(data, dict):
            raise StoreCorruptedError(f"Record store {self.path} must hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _load_list(self, key: str) -> Optional[list]:
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"Entry '{key}' is not valid JSON") from e
        if not isinstance(items, list):
            raise StoreCorruptedError(f"Entry '{key}' must be a JSON list")
        return items

    # --- predictions ---

    def load_predictions(self) -> List[RiskAssessment]:
        items = self._load_list(PREDICTIONS_KEY) or []
        try:
            return [RiskAssessment.from_dict(item) for item in items]
        except (KeyError, ValueError, TypeError) as e:
            raise StoreCorruptedError(f"Malformed prediction record: {e}") from e

    def save_predictions(self, predictions: List[RiskAssessment]) -> None:
        self.set_item(
            PREDICTIONS_KEY,
            json.dumps([p.to_dict() for p in predictions]),
        )

    def append_prediction(self, assessment: RiskAssessment) -> List[RiskAssessment]:
        predictions = self.load_predictions()
        predictions.append(assessment)
        self.save_predictions(predictions)
        logger.info("Stored prediction %s (%d total)", assessment.id, len(predictions))
        return predictions

    # --- activity logs ---

    def load_activity_logs(self) -> List[ActivityLog]:
        items = self._load_list(ACTIVITY_LOGS_KEY)

        if items is None:
            seeded = [system_initialized_entry(date_format=self.date_format)]
            self.save_activity_logs(seeded)
            logger.info("Activity log initialized at %s", self.path)
            return seeded

        try:
            return [ActivityLog.from_dict(item) for item in items]
        except (KeyError, ValueError, TypeError) as e:
            raise StoreCorruptedError(f"Malformed activity log entry: {e}") from e

    def save_activity_logs(self, logs: List[ActivityLog]) -> None:
        self.set_item(
            ACTIVITY_LOGS_KEY,
            json.dumps([entry.to_dict() for entry in logs]),
        )

    def prepend_activity(self, entry: ActivityLog) -> List[ActivityLog]:
        logs = [entry] + self.load_activity_logs()
        self.save_activity_logs(logs)
        return logs

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Record store %s cleared", self.path)
