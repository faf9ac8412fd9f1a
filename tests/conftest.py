"""Shared fixtures for the narrator test suite."""

import json

import pytest

from helpers import DAY, sample_telemetry
from utils.budget import TokenLedger
from utils.paths import DayPaths


@pytest.fixture
def day_paths(tmp_path) -> DayPaths:
    paths = DayPaths.for_date(tmp_path / "data", DAY)
    paths.day_dir.mkdir(parents=True)
    paths.telemetry.write_text(json.dumps(sample_telemetry()), encoding="utf-8")
    return paths


@pytest.fixture
def ledger(tmp_path) -> TokenLedger:
    return TokenLedger(tmp_path / "data" / "token_budget.json", today=lambda: DAY)
