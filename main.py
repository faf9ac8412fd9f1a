"""Command-line entry point that weaves a day's telemetry into a narrative.

Usage:
    python main.py                    # analyze today
    python main.py --date 2026-10-18  # analyze a specific day
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

from analysis.client import RemoteAnalysisError
from analysis.factory import ConfigurationError, build_client, resolve_model_configuration
from analysis.gate import RequestGate
from analysis.processor import DailyProcessor
from analysis.summary import SummaryParseError
from utils.budget import LEDGER_FILENAME, TokenLedger
from utils.paths import DayPaths, resolve_data_root
from utils.telemetry import TelemetryError


BANNER = "=" * 47


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (typically sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed arguments with date, data_dir, verbose
    """
    parser = argparse.ArgumentParser(description="Turn a day's telemetry into a narrative report.")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to analyze as YYYY-MM-DD (defaults to today).",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Root of the telemetry data directory (overrides NARRATOR_DATA_DIR).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args(list(argv))


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Analyze one day and write its report.

    Steps:
    1. Load .env configuration and validate the API credential
    2. Load the token ledger from the data directory
    3. Run the text pass (or offline fallback) and optional vision pass
    4. Write the markdown report and structured JSON

    Returns:
        int: Exit code (0 for success, 1 for fatal errors)
    """
    # Load environment variables from .env file
    load_dotenv()
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)

    # Default to today when no --date is given
    target = args.date or date.today()

    print(BANNER)
    print("       TELEMETRY NARRATOR")
    print(BANNER)
    print(f"Analyzing date: {target.isoformat()}")

    # A missing API key stops the run before any work begins
    try:
        config = resolve_model_configuration()
    except ConfigurationError as exc:
        print(f"FATAL: Initialization failed: {exc}", file=sys.stderr)
        return 1

    # Locate the day directory and load the shared token ledger
    root = resolve_data_root(args.data_dir)
    paths = DayPaths.for_date(root, target)
    ledger = TokenLedger(root / LEDGER_FILENAME)
    print(f"Token budget: {ledger.status()}")
    if ledger.is_exhausted():
        print("Token budget exhausted. The report will be generated offline.")

    # Wire the gate and remote client into the daily run
    processor = DailyProcessor(target, paths, build_client(config), RequestGate(ledger))

    print("Reading telemetry data...")
    try:
        # Budget denial falls back offline inside run(); these errors are fatal
        processor.run()
    except (TelemetryError, RemoteAnalysisError, SummaryParseError, OSError) as exc:
        print(f"FATAL: Analysis failed: {exc}", file=sys.stderr)
        return 1

    # Report output locations and remaining budget
    print("\nSUCCESS: Daily narrative woven.")
    print(f"   Story: {paths.markdown}")
    print(f"   Data:  {paths.structured}")
    print(f"Token budget: {ledger.status()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
