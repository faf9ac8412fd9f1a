"""Builders shared by the narrator tests."""

from datetime import date

import groq
import httpx
from langchain_core.runnables import RunnableLambda


DAY = date(2026, 10, 19)


def sample_telemetry(**metrics) -> dict:
    """Collector-shaped telemetry with three events."""
    payload = {
        "meta": {"date": DAY.isoformat()},
        "metrics": {
            "total_keystrokes": 500,
            "total_mouse_dist_pixels": 12345.6,
            "flow_score_estimate": 72.5,
            "top_window": "Editor",
        },
        "events": [
            {"ts": "2026-10-19T09:00:00Z", "type": "focus_change", "title": "Editor"},
            {"ts": "2026-10-19T09:30:00Z", "type": "focus_change", "title": "Editor"},
            {"ts": "2026-10-19T10:00:00Z", "type": "focus_change", "title": "Browser"},
        ],
    }
    payload["metrics"].update(metrics)
    return payload


def connection_error() -> groq.APIConnectionError:
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    return groq.APIConnectionError(request=request)


def failing_model() -> RunnableLambda:
    """Chat runnable that fails like an unreachable provider."""

    def _raise(_input):
        raise connection_error()

    return RunnableLambda(_raise)
