import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from childrisk.activity import export_entry, prediction_entry, recent
from childrisk.app_state import AppState
from childrisk.config import Settings
from childrisk.export.csv_export import ExportFormat, export_records
from childrisk.integration.alerts import trigger_high_risk_alert
from childrisk.models.activity_log import ActivityLog
from childrisk.models.aggregate_view import AggregateView
from childrisk.models.risk_assessment import RiskAssessment, RiskCategory
from childrisk.models.survey_input import SurveyInput
from childrisk.reports.table import SortState, sort_records
from childrisk.scoring.aggregator import summarize
from childrisk.scoring.scorer import RiskScorer
from childrisk.storage import RecordStore
from childrisk.telemetry import emit_assessment_telemetry, emit_export_telemetry

logger = logging.getLogger("childrisk.orchestrator")


@dataclass(frozen=True)
class Overview:
    """Admin monitoring figures."""
    total_predictions: int
    high_risk_cases: int
    medium_risk_cases: int
    low_risk_cases: int
    recent_activity: List[ActivityLog] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_predictions": self.total_predictions,
            "high_risk_cases": self.high_risk_cases,
            "medium_risk_cases": self.medium_risk_cases,
            "low_risk_cases": self.low_risk_cases,
            "recent_activity": [entry.to_dict() for entry in self.recent_activity],
        }


class DashboardService:
    """
    Application boundary around the scoring core.

    Owns the side effects (storage, activity log, alerting, telemetry,
    simulated inference latency) so RiskScorer and summarize() stay pure.
    """

    def __init__(
        self,
        store: RecordStore,
        scorer: Optional[RiskScorer] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.scorer = scorer or RiskScorer()
        self.settings = settings or Settings()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "DashboardService":
        store = RecordStore(settings.store_path, date_format=settings.date_format)
        return cls(store=store, settings=settings)

    def predict(self, survey: SurveyInput) -> RiskAssessment:
        start_time = time.perf_counter()

        if self.settings.inference_delay_seconds > 0:
            self._sleep(self.settings.inference_delay_seconds)

        assessment = self.scorer.evaluate(survey)
        self.store.append_prediction(assessment)
        self.store.prepend_activity(
            prediction_entry(assessment, date_format=self.settings.date_format)
        )

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        emit_assessment_telemetry(
            latency_ms=latency_ms,
            risk_category=assessment.risk_category.value,
            probability=float(assessment.probability_percent),
        )

        if assessment.risk_category == RiskCategory.HIGH:
            trigger_high_risk_alert(assessment, self.settings.alert_webhook_url)

        logger.info(
            "Prediction %s: %s risk in %s",
            assessment.id,
            assessment.risk_category.value,
            assessment.region.value,
        )
        return assessment

    def records(self) -> List[RiskAssessment]:
        return self.store.load_predictions()

    def analysis(self) -> AggregateView:
        return summarize(self.records(), tz=self.settings.display_tz)

    def overview(self, activity_limit: int = 10) -> Overview:
        view = self.analysis()
        totals = view.category_totals
        return Overview(
            total_predictions=view.total_records,
            high_risk_cases=totals[RiskCategory.HIGH.value],
            medium_risk_cases=totals[RiskCategory.MEDIUM.value],
            low_risk_cases=totals[RiskCategory.LOW.value],
            recent_activity=self.activity(activity_limit),
        )

    def report(self, sort_state: SortState = SortState()) -> List[RiskAssessment]:
        return sort_records(self.records(), sort_state)

    def export(self, fmt: ExportFormat = ExportFormat.CSV, log_activity: bool = True) -> str:
        """
        Raises NoDataToExportError for an empty store and
        UnsupportedExportFormatError for non-CSV formats.

        With log_activity=False the document is only built; the caller
        records the export later through record_export().
        """
        fmt = ExportFormat(fmt)
        predictions = self.records()

        document = export_records(
            predictions,
            fmt,
            tz=self.settings.display_tz,
            date_format=self.settings.date_format,
        )

        if log_activity:
            self.record_export(len(predictions), fmt)
        return document

    def record_export(self, count: int, fmt: ExportFormat = ExportFormat.CSV) -> ActivityLog:
        fmt = ExportFormat(fmt)
        entry = export_entry(count, fmt.value, date_format=self.settings.date_format)
        self.store.prepend_activity(entry)
        emit_export_telemetry(count, fmt.value)
        logger.info("Exported %d predictions to %s", count, fmt.value.upper())
        return entry

    def activity(self, limit: int = 10) -> List[ActivityLog]:
        return recent(self.store.load_activity_logs(), limit)

    def state(self) -> AppState:
        return AppState(
            predictions=tuple(self.records()),
            activity_logs=tuple(self.store.load_activity_logs()),
        )
