"""
Bounded waits
=============

Exponential backoff used while waiting on the remote service.

"""
import logging
import threading
import time

from remopt.core.utils.exceptions import SuggestionCancelled, SuggestionTimeout

log = logging.getLogger(__name__)


class Backoff:
    """Sequence of waits growing exponentially up to a cap, within a time budget.

    Parameters
    ----------
    interval: float
        First wait, in seconds.
    factor: float, optional
        Multiplier applied to the wait after each attempt. Default: 1.5
    max_interval: float, optional
        Upper bound of a single wait. Default: 30 seconds.
    timeout: float, optional
        Total time budget in seconds. ``None`` or a value <= 0 means no bound.
    cancel_event: `threading.Event`, optional
        When set by another thread, the current wait is interrupted.

    """

    def __init__(
        self, interval, factor=1.5, max_interval=30.0, timeout=None, cancel_event=None
    ):
        if interval < 0:
            raise ValueError(f"Wait interval must be positive, got {interval}")
        if factor < 1:
            raise ValueError(f"Backoff factor must be >= 1, got {factor}")

        self.interval = interval
        self.factor = factor
        self.max_interval = max(max_interval, interval)
        self.timeout = timeout if timeout is not None and timeout > 0 else None
        self.cancel_event = cancel_event or threading.Event()
        self.attempts = 0
        self._start = time.monotonic()

    @property
    def elapsed(self):
        """Time in seconds since the backoff started"""
        return time.monotonic() - self._start

    def next_interval(self):
        """Return the wait of the next attempt, truncated to the remaining budget"""
        wait = min(self.interval * self.factor**self.attempts, self.max_interval)
        if self.timeout is not None:
            wait = min(wait, max(self.timeout - self.elapsed, 0.0))
        return wait

    def wait(self):
        """Block until the next attempt is due.

        Raises
        ------
        SuggestionCancelled
            If the cancellation event is set before or during the wait.
        SuggestionTimeout
            If the time budget is exhausted.

        """
        if self.cancel_event.is_set():
            raise SuggestionCancelled(f"Cancelled after {self.attempts} attempts")

        if self.timeout is not None and self.elapsed >= self.timeout:
            raise SuggestionTimeout(
                f"Gave up after {self.attempts} attempts ({self.elapsed:.1f} s)"
            )

        wait = self.next_interval()
        log.debug("Attempt %d, waiting %.2f s", self.attempts + 1, wait)
        self.attempts += 1

        if self.cancel_event.wait(wait):
            raise SuggestionCancelled(f"Cancelled after {self.attempts} attempts")
