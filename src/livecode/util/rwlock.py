"""Thread-safe read/write lock."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """Read/write lock for structures that are read far more than written.

    Multiple readers may hold the lock at once. A writer gets exclusive
    access and waits for active readers to drain. Waiting writers block new
    readers so a steady stream of lookups cannot starve registration.

    Example:
        lock = RWLock()

        with lock.read():
            value = shared[key]

        with lock.write():
            shared[key] = value
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        """Acquire the lock for shared reading."""

        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Acquire the lock for exclusive writing."""

        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers > 0:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()

    @property
    def readers(self) -> int:
        """Current number of active readers."""

        return self._readers

    @property
    def writing(self) -> bool:
        """Whether a writer currently holds the lock."""

        return self._writer
