"""Per-request wall-clock budget passed down to every external call."""

from __future__ import annotations

import logging
import time

from knowledge_rag.errors import RequestTimeoutError

logger = logging.getLogger(__name__)


class Deadline:
    """A monotonic-clock budget that components check between external calls.

    Parameters
    ----------
    seconds:
        Total budget for the request.  ``None`` means unbounded.
    """

    def __init__(self, seconds: float | None) -> None:
        self.seconds = seconds
        self._expires_at = None if seconds is None else time.monotonic() + seconds

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(None)

    def remaining(self) -> float | None:
        """Seconds left, clamped at zero; ``None`` when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def check(self, stage: str = "") -> None:
        """Raise :class:`RequestTimeoutError` once the budget is spent."""
        if self.expired:
            logger.warning("Deadline of %.1fs exceeded before %s", self.seconds, stage or "next step")
            details = f"budget of {self.seconds}s exceeded before {stage}" if stage else None
            raise RequestTimeoutError(details=details)

    def timeout_for(self, ceiling: float) -> float:
        """Return the per-call timeout: *ceiling* bounded by what is left."""
        remaining = self.remaining()
        if remaining is None:
            return ceiling
        return min(ceiling, remaining)
