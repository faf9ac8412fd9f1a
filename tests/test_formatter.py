"""Tests for the markdown report and artifact writer."""

import json

from analysis.formatter import render_markdown, save_results
from analysis.summary import DailySummary


def make_summary(**overrides) -> DailySummary:
    fields = dict(
        date="2026-10-19",
        flow_score=81,
        dominant_emotion="Focus",
        tags=["#coding", "#research"],
        summary_text="Deep work all morning.",
        top_activities=["Editor", "Terminal"],
    )
    fields.update(overrides)
    return DailySummary(**fields)


def test_report_contains_every_field() -> None:
    report = render_markdown(make_summary())

    assert report.startswith("# Daily Report: 2026-10-19\n")
    assert "**Score:** 81/100" in report
    assert "**Emotion:** Focus" in report
    assert "Deep work all morning." in report
    assert "#coding #research" in report
    assert "- Editor\n- Terminal" in report
    assert "## Visual Context" not in report


def test_visual_context_section_only_when_present() -> None:
    report = render_markdown(make_summary(visual_context="Reviewing a pull request."))

    assert "## Visual Context\nReviewing a pull request." in report
    assert render_markdown(make_summary(visual_context="")).count("Visual Context") == 0


def test_rendering_is_deterministic() -> None:
    assert render_markdown(make_summary()) == render_markdown(make_summary())


def test_save_results_writes_both_artifacts(tmp_path) -> None:
    summary = make_summary()
    markdown_path = tmp_path / "day" / "daily_summary.md"
    json_path = tmp_path / "day" / "daily_structured.json"

    save_results("# report\n", summary, markdown_path, json_path)

    assert markdown_path.read_text(encoding="utf-8") == "# report\n"
    raw = json_path.read_text(encoding="utf-8")
    assert raw.startswith('{\n  "date"')
    assert json.loads(raw) == summary.to_dict()
