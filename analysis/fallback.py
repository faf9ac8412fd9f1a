"""Offline summary used when the token budget denies the remote analysis."""

from __future__ import annotations

import logging
from typing import List

from analysis.summary import DailySummary
from utils.telemetry import TelemetryRecord


logger = logging.getLogger(__name__)

OFFLINE_EMOTION = "Neutral (Offline Mode)"
OFFLINE_TAGS = ("#offline", "#auto-generated")
MAX_TOP_ACTIVITIES = 5


def distinct_titles(record: TelemetryRecord) -> List[str]:
    """Return non-empty event titles without repeats, in first-seen order."""
    return list(dict.fromkeys(event.title for event in record.events if event.title))


def build_offline_summary(record: TelemetryRecord, day: str = "") -> DailySummary:
    """Summarize the day from local telemetry alone.

    The flow score is the collector's own estimate truncated toward zero.
    No remote call is made and nothing is charged to the budget.

    Args:
        record: Parsed telemetry for the day
        day: Date to stamp on the summary (defaults to the telemetry's date)

    Returns:
        DailySummary: Deterministic template-based summary
    """
    logger.info("Offline mode: generating template-based summary (no API call).")

    titles = distinct_titles(record)
    metrics = record.metrics
    summary_text = (
        f"Token budget exhausted. Recorded {len(record.events)} events, "
        f"{metrics.total_keystrokes} keystrokes across {len(titles)} applications. "
        f"Flow score was {metrics.flow_score_estimate:.1f}."
    )

    return DailySummary(
        date=day or record.date,
        flow_score=int(metrics.flow_score_estimate),
        dominant_emotion=OFFLINE_EMOTION,
        tags=list(OFFLINE_TAGS),
        summary_text=summary_text,
        top_activities=titles[:MAX_TOP_ACTIVITIES],
    )
