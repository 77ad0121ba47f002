from dataclasses import dataclass, replace
from typing import Optional, Tuple

from childrisk.activity import export_entry, prediction_entry
from childrisk.models.activity_log import ActivityLog
from childrisk.models.risk_assessment import RiskAssessment

SECTIONS = ("admin", "prediction", "reports", "analysis")


@dataclass(frozen=True)
class AppState:
    """
    Explicit dashboard state. Transitions return a new AppState;
    nothing here touches storage.
    """
    predictions: Tuple[RiskAssessment, ...] = ()
    activity_logs: Tuple[ActivityLog, ...] = ()
    active_section: str = "admin"
    sidebar_open: bool = False


def with_assessment(
    state: AppState,
    assessment: RiskAssessment,
    log_entry: Optional[ActivityLog] = None,
) -> AppState:
    entry = log_entry or prediction_entry(assessment)
    return replace(
        state,
        predictions=state.predictions + (assessment,),
        activity_logs=(entry,) + state.activity_logs,
    )


def with_export(
    state: AppState,
    fmt: str,
    log_entry: Optional[ActivityLog] = None,
) -> AppState:
    entry = log_entry or export_entry(len(state.predictions), fmt)
    return replace(state, activity_logs=(entry,) + state.activity_logs)


def navigate(state: AppState, section: str) -> AppState:
    if section not in SECTIONS:
        raise ValueError(f"Unknown section: {section}")
    # Picking a section also closes the mobile sidebar
    return replace(state, active_section=section, sidebar_open=False)


def toggle_sidebar(state: AppState) -> AppState:
    return replace(state, sidebar_open=not state.sidebar_open)
