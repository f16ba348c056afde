"""Cooperative cancellation for time-bounded check execution.

Python threads cannot be killed, so a check that outlives its timeout budget
is abandoned instead: the executor cancels the token, discards the unit's
result and never records it. Check logic observes the token in three ways:

- ``raise_if_cancelled()`` between steps of long-running work
- ``wait(seconds)`` as a cancellable replacement for ``time.sleep``
- ``commit()`` around externally visible side effects

``commit()`` shares a lock with ``cancel()``. Once ``cancel()`` returns, no new
side effect can commit, and the executor can tell from ``committed`` whether a
side effect started before the deadline and finished after it.

Typical Usage:
    def _execute(self, document, token):
        token.wait(0.3)
        with token.commit():
            registry.claim(document.identifier)
        return self.success("registered")
"""

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager

from doc_validator.exceptions import CheckCancelledError


class CancellationToken:
    """Cancellation signal shared between the executor and one check invocation."""

    def __init__(self, timeout_seconds: float | None = None):
        """Initialize the token.

        Args:
            timeout_seconds: Budget after which ``commit()`` refuses new side
                effects even if ``cancel()`` has not been called yet. None
                disables the deadline.
        """
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        self._committed = False

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def remaining(self) -> float | None:
        """Seconds left before the deadline, never negative. None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def committed(self) -> bool:
        """True once a ``commit()`` block has completed."""
        return self._committed

    def cancel(self) -> None:
        """Signal cancellation, waiting for any in-flight commit block to finish."""
        with self._lock:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CheckCancelledError("Check execution was cancelled")

    def wait(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless cancelled first.

        Raises:
            CheckCancelledError: If the token is cancelled while waiting
        """
        if self._event.wait(seconds):
            raise CheckCancelledError("Check execution was cancelled")

    @contextmanager
    def commit(self) -> Iterator[None]:
        """Guard a side effect so it never starts after cancellation or the deadline.

        Raises:
            CheckCancelledError: If the token is cancelled or past its deadline
        """
        with self._lock:
            if self._event.is_set() or self.expired:
                raise CheckCancelledError("Side effect refused: check execution was cancelled")
            yield
            self._committed = True
