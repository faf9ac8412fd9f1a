"""Budget gate wrapped around remote LLM calls."""

from __future__ import annotations

import logging
import math
from typing import Callable, TypeVar

from utils.budget import BudgetExceededError, TokenLedger


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Roughly four characters per token, plus room for the model's reply.
CHARS_PER_TOKEN = 4
RESPONSE_OVERHEAD_TOKENS = 500
TOKENS_PER_IMAGE = 10_000


def estimate_text_tokens(raw_size_bytes: int) -> int:
    """Approximate the cost of sending ``raw_size_bytes`` of telemetry as text."""
    return math.ceil(raw_size_bytes / CHARS_PER_TOKEN) + RESPONSE_OVERHEAD_TOKENS


def estimate_vision_tokens(image_count: int) -> int:
    """Flat per-image estimate for a vision request."""
    return image_count * TOKENS_PER_IMAGE


class RequestGate:
    """Decides whether an expensive call may go ahead and records its cost.

    The gate spends the estimate, never the provider's figure, and only once
    the wrapped call has returned. A call that raises costs nothing.

    Args:
        ledger: Shared ledger that holds the daily and monthly counters
    """

    def __init__(self, ledger: TokenLedger) -> None:
        self.ledger = ledger

    def authorize(self, estimate: int) -> None:
        """Check that ``estimate`` tokens are available.

        Raises:
            BudgetExceededError: If the daily or monthly window cannot cover it
        """
        if not self.ledger.can_spend(estimate):
            raise BudgetExceededError(
                f"Token budget cannot cover {estimate} tokens ({self.ledger.status()})"
            )

    def run(self, estimate: int, call: Callable[[], T]) -> T:
        """Run ``call`` behind the budget check and record the spend on success.

        Args:
            estimate: Expected token cost of ``call``
            call: Zero-argument callable performing the remote request

        Returns:
            Whatever ``call`` returns

        Raises:
            BudgetExceededError: If the budget denies the call (``call`` not invoked)
        """
        self.authorize(estimate)
        return self.record(estimate, call)

    def record(self, estimate: int, call: Callable[[], T]) -> T:
        """Run an already authorized ``call`` and spend ``estimate`` if it returns.

        Use after ``authorize`` when the caller needs to act between the
        budget decision and the remote call.
        """
        result = call()
        self.ledger.spend(estimate)
        return result
