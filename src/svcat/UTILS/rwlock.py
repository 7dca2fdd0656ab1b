"""
A reader/writer lock: many concurrent readers or one exclusive writer.
"""
import threading
from collections import deque
from contextlib import contextmanager
from typing import Deque, Iterator


class ReadWriteLock:
    """
    Writer-preferring reader/writer lock built on ``threading.Condition``.

    While a writer is waiting, new readers block, so a steady stream of reads
    cannot starve a registration. Writers are served in arrival order. The lock
    is not re-entrant: a thread holding it must not acquire it again.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writer_queue: Deque[object] = deque()

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer_active or self._writer_queue:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        ticket = object()
        with self._cond:
            self._writer_queue.append(ticket)
            try:
                while self._writer_queue[0] is not ticket or self._readers or self._writer_active:
                    self._cond.wait()
            finally:
                self._writer_queue.remove(ticket)
            self._writer_active = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer_active:
                raise RuntimeError("release_write called without a matching acquire_write")
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        """Context manager holding a shared lock."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Context manager holding the exclusive lock."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer_active
