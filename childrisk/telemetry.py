"""
Assessment telemetry.

Span events only. No survey payloads, no household values, no ids.
"""
import os
import logging
from typing import Literal

from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry.trace import get_current_span

logger = logging.getLogger("childrisk.telemetry")

_CATEGORIES = ("Low", "Medium", "High")


def init_telemetry():
    """
    Initialize Azure Application Insights via OpenTelemetry.
    Disabled when no connection string is configured (local / tests).
    """
    connection_string = os.getenv("AZURE_APPINSIGHTS_CONNECTION_STRING")

    if not connection_string:
        logger.debug("Telemetry disabled: no connection string")
        return

    configure_azure_monitor(
        connection_string=connection_string
    )


def emit_assessment_telemetry(
    latency_ms: int,
    risk_category: Literal["Low", "Medium", "High"],
    probability: float,
):
    """
    Emit a single event per new assessment.
    Safely no-ops outside an active span.
    """
    assert isinstance(latency_ms, int), "latency_ms must be int"
    assert risk_category in _CATEGORIES, f"risk_category must be one of {_CATEGORIES}, got {risk_category}"
    assert isinstance(probability, float), "probability must be float"

    span = get_current_span()
    if not span:
        return

    span.add_event(
        name="childrisk.assessment",
        attributes={
            "latency_ms": latency_ms,
            "risk_category": risk_category,
            "probability": probability,
        }
    )


def emit_export_telemetry(record_count: int, fmt: Literal["csv", "pdf"]):
    assert isinstance(record_count, int), "record_count must be int"
    assert fmt in ("csv", "pdf"), f"fmt must be 'csv' or 'pdf', got {fmt}"

    span = get_current_span()
    if not span:
        return

    span.add_event(
        name="childrisk.export",
        attributes={
            "record_count": record_count,
            "format": fmt,
        }
    )
