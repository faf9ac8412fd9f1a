"""Daily analysis run: telemetry in, narrative report and JSON summary out.

The primary text pass is required. If the budget denies it the run falls back
to the offline summary; if the provider call itself fails, the error is
raised to the caller. The vision pass is optional and any failure in it just
leaves the summary without visual context.
"""

from __future__ import annotations

import base64
import logging
from datetime import date
from typing import List, Optional, Tuple

from analysis.client import (
    ANALYSIS_PROMPT_PATH,
    VISION_PROMPT_PATH,
    RemoteAnalysisClient,
    RemoteAnalysisError,
    TextAnalysisRequest,
    VisionAnalysisRequest,
    build_text_prompt,
    build_vision_prompt,
    load_system_prompt,
)
from analysis.fallback import build_offline_summary
from analysis.formatter import render_markdown, save_results
from analysis.gate import RequestGate, estimate_text_tokens, estimate_vision_tokens
from analysis.summary import DailySummary, parse_summary_response
from utils.budget import BudgetExceededError
from utils.paths import DayPaths, recent_screenshots
from utils.telemetry import parse_telemetry, read_telemetry


logger = logging.getLogger(__name__)


class DailyProcessor:
    """Runs one day's analysis through the budget gate.

    Args:
        day: Day being analyzed
        paths: Input and output locations for that day
        client: Remote analysis client
        gate: Budget gate shared by every remote call in the run
        analysis_prompt: System prompt for the text pass (loaded from disk if None)
        vision_prompt: System prompt for the vision pass (loaded from disk if None)
    """

    def __init__(
        self,
        day: date,
        paths: DayPaths,
        client: RemoteAnalysisClient,
        gate: RequestGate,
        analysis_prompt: Optional[str] = None,
        vision_prompt: Optional[str] = None,
    ) -> None:
        self.day = day
        self.paths = paths
        self.client = client
        self.gate = gate
        self.analysis_prompt = analysis_prompt or load_system_prompt(ANALYSIS_PROMPT_PATH)
        self.vision_prompt = vision_prompt or load_system_prompt(VISION_PROMPT_PATH)

    @property
    def day_label(self) -> str:
        return self.day.isoformat()

    def analyze_day(self) -> Tuple[str, DailySummary]:
        """Produce the report and summary without writing them.

        Returns:
            tuple[str, DailySummary]: (markdown_report, summary)

        Raises:
            TelemetryError: If the telemetry file cannot be read
            RemoteAnalysisError: If the primary remote call fails
            SummaryParseError: If the primary reply is not valid summary JSON
        """
        raw = read_telemetry(self.paths.telemetry)

        estimate = estimate_text_tokens(len(raw))
        try:
            self.gate.authorize(estimate)
        except BudgetExceededError as exc:
            logger.warning("%s. Falling back to offline mode.", exc)
            summary = build_offline_summary(parse_telemetry(raw), self.day_label)
            return render_markdown(summary), summary

        request = TextAnalysisRequest(
            system_prompt=self.analysis_prompt,
            user_prompt=build_text_prompt(self.day_label, raw.decode("utf-8", errors="replace")),
        )
        # Already authorized above; spend only once the call returns
        response = self.gate.record(estimate, lambda: self.client.analyze_text(request))
        summary = parse_summary_response(response.content, self.day_label)

        visual_context = self.analyze_screenshots()
        if visual_context:
            summary.visual_context = visual_context

        return render_markdown(summary), summary

    def analyze_screenshots(self) -> Optional[str]:
        """Describe the day's newest screenshots, if the budget allows.

        Returns:
            str or None: Vision model description, or None when skipped or failed
        """
        images = self._encode_screenshots()
        if not images:
            return None

        estimate = estimate_vision_tokens(len(images))
        request = VisionAnalysisRequest(
            system_prompt=self.vision_prompt,
            user_prompt=build_vision_prompt(self.day_label, len(images)),
            images_base64=tuple(images),
        )

        try:
            self.gate.authorize(estimate)
        except BudgetExceededError:
            logger.info("Skipping vision analysis (budget exhausted)")
            return None

        logger.info("Analyzing %d screenshot(s)...", len(images))
        try:
            response = self.gate.record(estimate, lambda: self.client.analyze_vision(request))
        except RemoteAnalysisError as exc:
            logger.warning("Vision analysis failed, continuing text-only: %s", exc)
            return None

        logger.info("Vision analysis complete")
        return response.content.strip() or None

    def _encode_screenshots(self) -> List[str]:
        encoded: List[str] = []
        for image_path in recent_screenshots(self.paths.screenshots):
            try:
                data = image_path.read_bytes()
            except OSError as exc:
                logger.warning("Could not read screenshot %s: %s", image_path.name, exc)
                continue
            encoded.append(base64.b64encode(data).decode("ascii"))
        return encoded

    def run(self) -> DailySummary:
        """Analyze the day and write both artifacts.

        Returns:
            DailySummary: The summary that was written
        """
        markdown, summary = self.analyze_day()
        save_results(markdown, summary, self.paths.markdown, self.paths.structured)
        return summary
