"""Reader/writer lock guarding the in-memory store."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class LockError(Exception):
    """Raised when the lock cannot be acquired."""
    pass


class ReadWriteLock:
    """Shared/exclusive lock with scoped acquisition.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writes are not starved.

    If an exception escapes a write scope the lock becomes poisoned: the
    protected data may be half-updated, so every later acquisition raises
    ``LockError`` instead of exposing it.

    Args:
        timeout: Seconds to wait for the lock. ``None`` waits forever.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def _check_poisoned(self) -> None:
        if self._poisoned:
            raise LockError("Lock poisoned by a failed writer")

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block.

        Raises:
            LockError: If the lock is poisoned or the wait timed out.
        """
        with self._cond:
            self._check_poisoned()
            acquired = self._cond.wait_for(
                lambda: self._poisoned or not (self._writer or self._waiting_writers),
                timeout=self._timeout,
            )
            self._check_poisoned()
            if not acquired:
                raise LockError(f"Timed out after {self._timeout}s waiting for read lock")
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock exclusively for the duration of the block.

        Raises:
            LockError: If the lock is poisoned or the wait timed out.
        """
        with self._cond:
            self._check_poisoned()
            self._waiting_writers += 1
            try:
                acquired = self._cond.wait_for(
                    lambda: self._poisoned or not (self._writer or self._readers),
                    timeout=self._timeout,
                )
            finally:
                self._waiting_writers -= 1
            if not acquired or self._poisoned:
                # Readers held back by this writer may proceed now
                self._cond.notify_all()
                self._check_poisoned()
                raise LockError(f"Timed out after {self._timeout}s waiting for write lock")
            self._writer = True
        try:
            yield
        except BaseException:
            with self._cond:
                self._poisoned = True
            logger.error("Write scope failed, lock is now poisoned")
            raise
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
