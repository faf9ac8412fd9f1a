"""Input telemetry records produced by the desktop collector."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple


class TelemetryError(RuntimeError):
    """Raised when the day's telemetry file cannot be read or decoded."""


@dataclass(frozen=True)
class TelemetryEvent:
    """A single discrete event, e.g. a window focus change."""

    title: str = ""
    type: str = ""
    ts: str = ""


@dataclass(frozen=True)
class TelemetryMetrics:
    """Aggregate metrics precomputed by the collector.

    Attributes:
        total_keystrokes: Keys pressed during the day
        total_mouse_dist_pixels: Cumulative mouse travel
        flow_score_estimate: Collector's own flow estimate (0-100)
        top_window: Window with the most focus time
    """

    total_keystrokes: int = 0
    total_mouse_dist_pixels: float = 0.0
    flow_score_estimate: float = 0.0
    top_window: str = ""


@dataclass(frozen=True)
class TelemetryRecord:
    date: str = ""
    metrics: TelemetryMetrics = field(default_factory=TelemetryMetrics)
    events: Tuple[TelemetryEvent, ...] = ()


def _section(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def parse_telemetry(raw: bytes) -> TelemetryRecord:
    """Decode a raw telemetry document.

    Missing sections and fields fall back to zero values so a sparse file
    from an older collector still parses.

    Args:
        raw: File contents as read from disk

    Returns:
        TelemetryRecord: Typed view over the document

    Raises:
        TelemetryError: If the bytes are not a JSON object
    """
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise TelemetryError(f"Telemetry is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise TelemetryError("Telemetry must be a JSON object")

    metrics = _section(payload, "metrics")
    try:
        parsed_metrics = TelemetryMetrics(
            total_keystrokes=int(metrics.get("total_keystrokes") or 0),
            total_mouse_dist_pixels=float(metrics.get("total_mouse_dist_pixels") or 0.0),
            flow_score_estimate=float(metrics.get("flow_score_estimate") or 0.0),
            top_window=str(metrics.get("top_window") or ""),
        )
    except (TypeError, ValueError, OverflowError) as exc:
        raise TelemetryError(f"Telemetry metrics are malformed: {exc}") from exc

    raw_events = payload.get("events") or []
    if not isinstance(raw_events, list):
        raise TelemetryError("Telemetry events must be a list")

    events: List[TelemetryEvent] = []
    for item in raw_events:
        if not isinstance(item, dict):
            continue
        events.append(
            TelemetryEvent(
                title=str(item.get("title") or ""),
                type=str(item.get("type") or ""),
                ts=str(item.get("ts") or ""),
            )
        )

    return TelemetryRecord(
        date=str(_section(payload, "meta").get("date") or ""),
        metrics=parsed_metrics,
        events=tuple(events),
    )


def read_telemetry(path: Path) -> bytes:
    """Return the raw bytes of a telemetry file.

    Raises:
        TelemetryError: If the file is missing or unreadable
    """
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise TelemetryError(f"Could not read telemetry {path}: {exc}") from exc

