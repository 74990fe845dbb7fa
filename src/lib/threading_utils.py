"""Thread-safety utilities for concurrent message processing.

Provides the primitives the consumer pipeline uses to account for the
messages of one receive batch while they are processed on worker threads.
"""

import threading
from dataclasses import dataclass


class ThreadSafeCounter:
    """Thread-safe counter for tracking outcomes across threads.

    Usage:
        counter = ThreadSafeCounter()

        # In worker threads:
        counter.increment()

        # After workers complete:
        total = counter.value
    """

    def __init__(self, initial: int = 0) -> None:
        """Initialize counter.

        Args:
            initial: Initial counter value
        """
        self._value = initial
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Increment counter and return new value.

        Args:
            amount: Amount to increment by

        Returns:
            New counter value after increment
        """
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        """Get current counter value."""
        with self._lock:
            return self._value


@dataclass(frozen=True)
class BatchSummary:
    """Outcome counts for one received batch.

    Attributes:
        received: Messages returned by the receive call
        processed: Messages handled and acknowledged
        failed: Messages that ended in an error without acknowledgement
    """

    received: int
    processed: int
    failed: int


class BatchTracker:
    """Counts terminal per-message outcomes of a single batch.

    Worker threads call ``succeeded()`` or ``failed()`` exactly once per
    message. ``complete`` becomes true when every message has reported,
    and ``summary()`` is only valid from then on.

    Usage:
        tracker = BatchTracker(total=len(messages))

        # In worker threads:
        tracker.succeeded()  # or tracker.failed()

        # On the owning thread:
        tracker.wait()
        summary = tracker.summary()
    """

    def __init__(self, total: int) -> None:
        self._total = total
        self._processed = ThreadSafeCounter()
        self._failed = ThreadSafeCounter()
        self._done = threading.Event()
        if total == 0:
            self._done.set()

    @property
    def total(self) -> int:
        return self._total

    def succeeded(self) -> None:
        """Record a message that was handled and acknowledged."""
        self._processed.increment()
        self._check_done()

    def failed(self) -> None:
        """Record a message that ended without acknowledgement."""
        self._failed.increment()
        self._check_done()

    def fail_outstanding(self) -> int:
        """Record every message that has not reported yet as failed.

        Called by the owner once all workers have exited, so a worker that
        died without reporting cannot leave the batch incomplete.

        Returns:
            Number of messages marked failed
        """
        outstanding = self._total - self._processed.value - self._failed.value
        if outstanding > 0:
            self._failed.increment(outstanding)
        self._check_done()
        return max(outstanding, 0)

    @property
    def complete(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every message reported. Returns False on timeout."""
        return self._done.wait(timeout)

    def summary(self) -> BatchSummary:
        return BatchSummary(
            received=self._total,
            processed=self._processed.value,
            failed=self._failed.value,
        )

    def _check_done(self) -> None:
        if self._processed.value + self._failed.value >= self._total:
            self._done.set()
