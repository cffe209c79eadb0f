'''Various utility functions and classes for other modules of Chairvote.

There should normally be no need to use these directly.
'''

import contextlib
import threading
from typing import Iterator


class ReadWriteLock:
    '''A lock with a shared (read) side and an exclusive (write) side.

    Any number of readers may hold the lock together; a writer holds it
    alone. Once a writer is waiting, new readers wait too, so a steady stream
    of queries cannot starve the mutations. Not reentrant.
    '''
    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._n_readers = 0
        self._n_writers_waiting = 0
        self._writing = False

    def acquire_read(self) -> None:
        with self._cond:
            while self._writing or self._n_writers_waiting:
                self._cond.wait()
            self._n_readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._n_readers -= 1
            if self._n_readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._n_writers_waiting += 1
            try:
                while self._writing or self._n_readers:
                    self._cond.wait()
            finally:
                self._n_writers_waiting -= 1
            self._writing = True

    def release_write(self) -> None:
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    @contextlib.contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextlib.contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
