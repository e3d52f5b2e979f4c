"""RetryPolicy — exponential backoff for redelivery visibility timeouts."""

from __future__ import annotations

import random


class RetryPolicy:
    """Exponential backoff with optional jitter.

    The queue consumer uses the delay as the visibility timeout of a message
    whose processing failed, so the broker holds it back before redelivery.
    """

    def __init__(
        self,
        *,
        base_delay: float = 5.0,
        max_delay: float = 900.0,
        jitter: bool = True,
    ) -> None:
        """Configure backoff.

        Args:
            base_delay: Delay in seconds after the first failed delivery.
            max_delay: Cap on delay in seconds (SQS allows at most 12 hours).
            jitter: If True, spread delays to avoid synchronized redelivery.
        """
        if base_delay < 0 or max_delay < 0:
            raise ValueError("base_delay and max_delay must be >= 0")
        if base_delay > max_delay:
            raise ValueError("base_delay must be <= max_delay")
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter

    def delay_for_attempt(self, attempt: int) -> float:
        """Return delay in seconds after the given 1-based delivery attempt.

        Uses base_delay * 2^(attempt-1), capped by max_delay. With jitter the
        result is multiplied by a random factor in [0.5, 1.0].
        """
        if attempt < 1:
            return 0.0
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random() / 2)  # noqa: S311
        return float(max(0.0, delay))

    def visibility_timeout(self, attempt: int) -> int:
        """Delay as whole seconds, the unit SQS visibility timeouts use."""
        return int(round(self.delay_for_attempt(attempt)))
