"""Per-day directory layout under the narrator data root.

Each day lives at ``<root>/<YYYY>/Q<n>/<Month>/Week_<iso week>/<YYYY-MM-DD>/``
and holds the collector's telemetry, its screenshots, and our reports.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional


DEFAULT_DATA_DIR = Path.home() / "Narrator_Data"
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}
MAX_SCREENSHOTS = 3


def resolve_data_root(override: Optional[Path] = None) -> Path:
    """Pick the data root from an explicit path, NARRATOR_DATA_DIR, or the default."""
    if override is not None:
        return Path(override).expanduser()
    env_value = os.getenv("NARRATOR_DATA_DIR")
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_DATA_DIR


def quarter_of(day: date) -> int:
    """Return the calendar quarter (1-4) containing ``day``."""
    return (day.month - 1) // 3 + 1


@dataclass(frozen=True)
class DayPaths:
    """Files belonging to a single day.

    Attributes:
        day_dir: Directory for the day
        telemetry: Raw telemetry written by the collector
        markdown: Narrative report we produce
        structured: JSON summary we produce
        screenshots: Directory of captured screenshots
    """

    day_dir: Path
    telemetry: Path
    markdown: Path
    structured: Path
    screenshots: Path

    @classmethod
    def for_date(cls, root: Path, day: date) -> "DayPaths":
        _, week, _ = day.isocalendar()
        day_dir = (
            Path(root)
            / str(day.year)
            / f"Q{quarter_of(day)}"
            / day.strftime("%B")
            / f"Week_{week}"
            / day.isoformat()
        )
        return cls(
            day_dir=day_dir,
            telemetry=day_dir / "raw_telemetry.json",
            markdown=day_dir / "daily_summary.md",
            structured=day_dir / "daily_structured.json",
            screenshots=day_dir / "visual_snaps",
        )


def recent_screenshots(directory: Path, limit: int = MAX_SCREENSHOTS) -> List[Path]:
    """Return the newest screenshots in ``directory``, newest first.

    Screenshot names carry their capture timestamp, so a descending name sort
    puts the most recent first.

    Args:
        directory: Screenshot directory (may not exist)
        limit: Maximum number of files to return

    Returns:
        list[Path]: Up to ``limit`` image files
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    images = [
        item
        for item in directory.iterdir()
        if item.is_file() and item.suffix.lower() in IMAGE_EXTENSIONS
    ]
    images.sort(key=lambda item: item.name, reverse=True)
    return images[:limit]
