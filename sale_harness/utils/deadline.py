"""
Per-test wait budget shared by RPC calls and receipt waits.
"""
import time
from typing import Optional

from .errors import DeadlineExceeded


class Deadline:
    """
    Bounded wait budget for a single test case

    A deadline starts counting when created. Calls that block on the
    network ask for ``remaining()`` and use it as their timeout; once the
    budget is spent or the deadline is cancelled those calls fail with
    ``DeadlineExceeded`` instead of being issued.
    """

    def __init__(self, seconds: float, clock=time.monotonic):
        if seconds <= 0:
            raise ValueError(f"Deadline must be positive, got {seconds}")
        self.seconds = seconds
        self._clock = clock
        self._expires_at = clock() + seconds
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def cancel(self) -> None:
        """Cancel pending work tied to this deadline"""
        self._cancelled = True

    def remaining(self) -> float:
        """Seconds left in the budget; raises once nothing is left"""
        if self._cancelled:
            raise DeadlineExceeded("deadline cancelled")
        left = self._expires_at - self._clock()
        if left <= 0:
            raise DeadlineExceeded(f"deadline of {self.seconds:.1f}s exceeded")
        return left

    def timeout_for(self, default: Optional[float]) -> Optional[float]:
        """Smaller of the remaining budget and ``default``"""
        left = self.remaining()
        if default is None:
            return left
        return min(left, default)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else f"{self._expires_at - self._clock():.2f}s left"
        return f"Deadline({self.seconds}s, {state})"
