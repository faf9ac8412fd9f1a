"""Token budget ledger.

Tracks how many LLM tokens were spent today and this month against fixed
limits, persisted to a JSON file so consecutive runs share the same counters.
Counters reset lazily: every public operation first checks whether the
calendar day or month has rolled over since the last reset.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict

from utils.storage import atomic_write_json, read_json


logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 100_000
DEFAULT_MONTHLY_LIMIT = 2_000_000
LEDGER_FILENAME = "token_budget.json"


class BudgetExceededError(RuntimeError):
    """Raised when a requested spend does not fit in the remaining budget.

    Callers treat this as a routing signal (use the offline path or skip the
    optional step), not as a failure of the run.
    """


class TokenLedger:
    """Daily and monthly token counters backed by a JSON file.

    Limits passed here are defaults; limits stored in an existing ledger file
    take precedence. Usage counters are only changed through ``spend`` and
    the reset pass.

    Args:
        path: Location of the persisted ledger file
        daily_limit: Tokens allowed per calendar day
        monthly_limit: Tokens allowed per calendar month
        today: Clock returning the current local date
    """

    def __init__(
        self,
        path: Path,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        monthly_limit: int = DEFAULT_MONTHLY_LIMIT,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.path = Path(path)
        self._today = today
        self._lock = threading.Lock()
        self._daily_limit = daily_limit
        self._monthly_limit = monthly_limit
        self._daily_used = 0
        self._monthly_used = 0
        self._last_reset_day = ""
        self._last_reset_month = ""

        if daily_limit <= 0 or monthly_limit <= 0:
            raise ValueError("token limits must be greater than zero")

        self._load()

        with self._lock:
            self._reset_if_needed()

    @property
    def daily_limit(self) -> int:
        return self._daily_limit

    @property
    def monthly_limit(self) -> int:
        return self._monthly_limit

    @property
    def daily_used(self) -> int:
        """Tokens recorded for the current day."""
        return self._daily_used

    @property
    def monthly_used(self) -> int:
        """Tokens recorded for the current month."""
        return self._monthly_used

    @property
    def last_reset_day(self) -> str:
        return self._last_reset_day

    @property
    def last_reset_month(self) -> str:
        return self._last_reset_month

    def can_spend(self, estimated_tokens: int) -> bool:
        """Return whether ``estimated_tokens`` fits in both windows.

        Does not change the usage counters.

        Args:
            estimated_tokens: Expected cost of the upcoming call

        Returns:
            bool: True if neither the daily nor the monthly limit would be passed
        """
        with self._lock:
            self._reset_if_needed()
            return (
                self._daily_used + estimated_tokens <= self._daily_limit
                and self._monthly_used + estimated_tokens <= self._monthly_limit
            )

    def spend(self, tokens: int) -> None:
        """Record ``tokens`` against both windows and persist.

        The limits are not checked here; gate the call with ``can_spend``
        first. Usage can end up above a limit when callers skip the check.

        Args:
            tokens: Tokens consumed by a completed call
        """
        with self._lock:
            self._reset_if_needed()
            self._daily_used += tokens
            self._monthly_used += tokens
            self._save()
            logger.info(
                "Spent %d tokens. Daily remaining: %d, Monthly remaining: %d",
                tokens,
                self._daily_limit - self._daily_used,
                self._monthly_limit - self._monthly_used,
            )

    def is_exhausted(self) -> bool:
        """Return whether either window has reached its limit."""
        with self._lock:
            self._reset_if_needed()
            return (
                self._daily_used >= self._daily_limit
                or self._monthly_used >= self._monthly_limit
            )

    def status(self) -> str:
        """Human-readable usage summary, e.g. ``Daily: 10/100 | Monthly: 10/2000``."""
        with self._lock:
            self._reset_if_needed()
            return (
                f"Daily: {self._daily_used}/{self._daily_limit} | "
                f"Monthly: {self._monthly_used}/{self._monthly_limit}"
            )

    def reset_if_needed(self) -> None:
        """Zero the counters whose calendar window has ended."""
        with self._lock:
            self._reset_if_needed()

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted representation of the ledger."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "daily_limit": self._daily_limit,
            "monthly_limit": self._monthly_limit,
            "daily_used": self._daily_used,
            "monthly_used": self._monthly_used,
            "last_reset_day": self._last_reset_day,
            "last_reset_month": self._last_reset_month,
        }

    def _reset_if_needed(self) -> None:
        # Caller holds the lock.
        now = self._today()
        day = now.isoformat()
        month = now.strftime("%Y-%m")

        if self._last_reset_day != day:
            self._daily_used = 0
            self._last_reset_day = day
            logger.info("Daily token counter reset.")

        if self._last_reset_month != month:
            self._monthly_used = 0
            self._last_reset_month = month
            logger.info("Monthly token counter reset.")

    def _load(self) -> None:
        """Read prior state from disk, keeping defaults when unavailable."""
        if not self.path.exists():
            return
        try:
            data = read_json(self.path)
            state = {
                "daily_limit": int(data.get("daily_limit", self._daily_limit)),
                "monthly_limit": int(data.get("monthly_limit", self._monthly_limit)),
                "daily_used": int(data.get("daily_used", 0)),
                "monthly_used": int(data.get("monthly_used", 0)),
                "last_reset_day": str(data.get("last_reset_day", "")),
                "last_reset_month": str(data.get("last_reset_month", "")),
            }
        except (OSError, ValueError, TypeError, OverflowError) as exc:
            logger.warning("Could not parse %s, using defaults: %s", self.path, exc)
            return
        if state["daily_limit"] <= 0 or state["monthly_limit"] <= 0:
            logger.warning("Non-positive limits in %s, using defaults", self.path)
            return

        self._daily_limit = state["daily_limit"]
        self._monthly_limit = state["monthly_limit"]
        self._daily_used = state["daily_used"]
        self._monthly_used = state["monthly_used"]
        self._last_reset_day = state["last_reset_day"]
        self._last_reset_month = state["last_reset_month"]

    def _save(self) -> None:
        # Caller holds the lock. In-memory counters stay authoritative if this fails.
        try:
            atomic_write_json(self.path, self._snapshot())
        except OSError as exc:
            logger.warning("Could not write token budget to %s: %s", self.path, exc)
