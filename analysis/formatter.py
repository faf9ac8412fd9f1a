"""Render a daily summary as a markdown report and write both artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from analysis.summary import DailySummary
from utils.storage import atomic_write_json, atomic_write_text


FOOTER = "*Generated by Telemetry Narrator*"


def _bullets(items: Sequence[str]) -> str:
    if not items:
        return "_None recorded._"
    return "\n".join(f"- {item}" for item in items)


def render_markdown(summary: DailySummary) -> str:
    """Format ``summary`` as the daily markdown report.

    The Visual Context section only appears when a vision pass produced text.
    """
    lines: List[str] = [
        f"# Daily Report: {summary.date}",
        "",
        "## Flow State",
        f"**Score:** {summary.flow_score}/100",
        f"**Emotion:** {summary.dominant_emotion}",
        "",
        "## Narrative",
        summary.summary_text,
        "",
        "## Tags",
        " ".join(summary.tags) if summary.tags else "_None._",
        "",
        "## Top Activities",
        _bullets(summary.top_activities),
        "",
    ]

    if summary.visual_context:
        lines.extend(["## Visual Context", summary.visual_context.strip(), ""])

    lines.extend(["---", FOOTER, ""])
    return "\n".join(lines)


def save_results(
    markdown: str,
    summary: DailySummary,
    markdown_path: Path,
    json_path: Path,
) -> None:
    """Write the markdown report and the pretty-printed JSON summary.

    Args:
        markdown: Rendered report text
        summary: Summary to serialize
        markdown_path: Destination of the report
        json_path: Destination of the structured JSON

    Raises:
        OSError: If either file cannot be written
    """
    atomic_write_text(markdown_path, markdown)
    atomic_write_json(json_path, summary.to_dict())
