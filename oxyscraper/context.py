import time
from threading import Event
from typing import Optional

from .errors import DeadlineExceeded


class ExecutionContext:
    """
    Cancellable, deadline-bearing context handed to every client operation.

    ``timeout`` is expressed in seconds and turned into an absolute deadline on
    the monotonic clock at construction time. ``None`` means no deadline, the
    context then only ends through ``cancel()``.

    ``cancel()`` is thread safe: a scrape blocked in a poll interval or waiting
    on an in-flight request observes it without waiting for the next tick.
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional['ExecutionContext'] = None):
        if timeout is not None and timeout < 0:
            raise ValueError('timeout must be positive, got %s' % timeout)

        self._cancelled = Event()
        self._parent = parent
        self.deadline: Optional[float] = None

        if timeout is not None:
            self.deadline = time.monotonic() + timeout

        if parent is not None and parent.deadline is not None:
            if self.deadline is None or parent.deadline < self.deadline:
                self.deadline = parent.deadline

    def child(self, timeout: Optional[float] = None) -> 'ExecutionContext':
        return ExecutionContext(timeout=timeout, parent=self)

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True

        return self._parent is not None and self._parent.cancelled

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None

        return max(self.deadline - time.monotonic(), 0.0)

    def raise_if_done(self):
        if self.cancelled:
            raise DeadlineExceeded('context cancelled')

        if self.expired:
            raise DeadlineExceeded()

    def wait(self, seconds: float) -> bool:
        """
        Sleep up to ``seconds``, waking early when the context ends.
        Returns True when the full interval elapsed with the context still live.
        """
        remaining = self.remaining()

        if remaining is not None and remaining < seconds:
            self._sleep(remaining)
            return False

        self._sleep(seconds)

        return not self.done

    def _sleep(self, seconds: float):
        if self._parent is None:
            self._cancelled.wait(seconds)
            return

        # a parent cancel has to be observed too, so sleep in short slices
        end = time.monotonic() + seconds

        while not self.cancelled:
            left = end - time.monotonic()

            if left <= 0:
                return

            self._cancelled.wait(min(left, 0.05))

    def __enter__(self) -> 'ExecutionContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cancel()

    def __repr__(self) -> str:
        return '<ExecutionContext remaining=%s cancelled=%s>' % (self.remaining(), self.cancelled)
