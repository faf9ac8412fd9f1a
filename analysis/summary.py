"""Structured daily summary and parsing of the model's JSON reply."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


FENCE = "```"


class SummaryParseError(ValueError):
    """Raised when the model's reply is not a usable summary object.

    The message carries the raw reply so a bad response can be diagnosed.
    """


@dataclass
class DailySummary:
    """One day's analyzed activity.

    Attributes:
        date: Day the summary describes (YYYY-MM-DD)
        flow_score: Focus score from 0 to 100
        dominant_emotion: e.g. "Focus", "Frustration", "Exploration"
        tags: Short labels such as "#coding"
        summary_text: Short narrative paragraph
        top_activities: Most significant windows or applications
        visual_context: Screenshot analysis, empty when no vision pass ran
    """

    date: str = ""
    flow_score: int = 0
    dominant_emotion: str = ""
    tags: List[str] = field(default_factory=list)
    summary_text: str = ""
    top_activities: List[str] = field(default_factory=list)
    visual_context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON artifact shape; ``visual_context`` only when present."""
        payload: Dict[str, Any] = {
            "date": self.date,
            "flow_score": self.flow_score,
            "dominant_emotion": self.dominant_emotion,
            "tags": list(self.tags),
            "summary_text": self.summary_text,
            "top_activities": list(self.top_activities),
        }
        if self.visual_context:
            payload["visual_context"] = self.visual_context
        return payload


def clamp_flow_score(value: float) -> int:
    """Truncate toward zero and keep the score within 0-100."""
    return max(0, min(100, int(value)))


def clean_llm_response(response: str) -> str:
    """Strip markdown code fences the model may wrap around its JSON.

    Drops an opening fence line (with or without a language tag such as
    ``json``) and a trailing fence.
    """
    text = response.strip()
    if text.startswith(FENCE):
        newline = text.find("\n")
        text = text[newline + 1 :] if newline != -1 else text[len(FENCE) :]
    if text.endswith(FENCE):
        text = text[: -len(FENCE)]
    return text.strip()


def _string_list(value: Any, key: str, response: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SummaryParseError(f"'{key}' must be a list. Response was: {response}")
    return [str(item) for item in value]


def parse_summary_response(response: str, day: str = "") -> DailySummary:
    """Decode the model's reply into a ``DailySummary``.

    Args:
        response: Raw completion text
        day: Date to stamp on the summary

    Returns:
        DailySummary: Parsed summary without visual context

    Raises:
        SummaryParseError: If the reply is not a JSON object of the expected shape
    """
    cleaned = clean_llm_response(response)
    try:
        payload = json.loads(cleaned)
    except ValueError as exc:
        raise SummaryParseError(
            f"Failed to parse LLM response: {exc}. Response was: {response}"
        ) from exc
    if not isinstance(payload, dict):
        raise SummaryParseError(f"Expected a JSON object. Response was: {response}")

    try:
        flow_score = clamp_flow_score(float(payload.get("flow_score") or 0))
    except (TypeError, ValueError, OverflowError) as exc:
        raise SummaryParseError(
            f"'flow_score' must be a number. Response was: {response}"
        ) from exc

    return DailySummary(
        date=day,
        flow_score=flow_score,
        dominant_emotion=str(payload.get("dominant_emotion") or ""),
        tags=_string_list(payload.get("tags"), "tags", response),
        summary_text=str(payload.get("summary_text") or ""),
        top_activities=_string_list(payload.get("top_activities"), "top_activities", response),
    )
