"""Cancellation, per-resource locking and bounded waits."""

import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from ec2_bridge.utils.exceptions import OperationCancelled


class CancellationToken:
    """A cancellable sleep shared between a waiting worker and its canceller."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if cancelled meanwhile."""
        if seconds <= 0:
            return self._event.is_set()
        return self._event.wait(seconds)

    def raise_if_cancelled(self, what: str = "operation") -> None:
        if self.cancelled:
            raise OperationCancelled(f"{what} cancelled")


class ResourceLocks:
    """One re-entrant lock per resource key.

    Mutating operations hold the locks of every id they touch, so two
    callers cannot, for example, delete the same instance at once. A key's
    lock exists only while some caller holds or waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}
        self._holders: Dict[str, int] = {}

    def active_keys(self) -> List[str]:
        """Keys currently held or waited on."""
        with self._guard:
            return sorted(self._locks)

    def _checkout(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            self._holders[key] = self._holders.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Acquire the locks for ``keys`` in sorted order."""
        ordered = sorted(set(k for k in keys if k))
        locks = [self._checkout(key) for key in ordered]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._checkin(key)


def wait_for(
    probe: Callable[[], Optional[str]],
    done: Callable[[Optional[str]], bool],
    interval: float,
    timeout: float,
    token: Optional[CancellationToken] = None,
    what: str = "wait",
    clock: Callable[[], float] = time.monotonic,
) -> Optional[str]:
    """Call ``probe`` every ``interval`` seconds until ``done`` accepts its value.

    Returns the accepted value. Raises ``TimeoutError`` carrying the last
    observed value once ``timeout`` seconds have passed, and
    ``OperationCancelled`` as soon as ``token`` is cancelled.
    """
    token = token or CancellationToken()
    deadline = clock() + timeout
    last = None
    while True:
        token.raise_if_cancelled(what)
        last = probe()
        if done(last):
            return last
        remaining = deadline - clock()
        if remaining <= 0:
            raise TimeoutError(last)
        if token.wait(min(interval, remaining)):
            raise OperationCancelled(f"{what} cancelled")
