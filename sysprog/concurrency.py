"""Thread-safe counters, a leaky bucket, a unique list and an id generator."""

from __future__ import annotations

import itertools
import struct
import threading
from typing import Iterator, Protocol


class _Cancel(Protocol):
    def is_set(self) -> bool: ...


class Bucket:
    """A token bucket that is refilled to capacity at a fixed rate."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._status = capacity
        self._lock = threading.Lock()

    @property
    def status(self) -> int:
        with self._lock:
            return self._status

    def add(self, n: int) -> int:
        """Take up to ``n`` tokens; return how many were taken."""
        with self._lock:
            taken = min(n, self._status)
            self._status -= taken
            return taken

    def refill(self) -> None:
        with self._lock:
            self._status = self.capacity

    def run(self, rate: float, stop: threading.Event) -> None:
        """Refill every ``rate`` seconds until ``stop`` is set."""
        while not stop.wait(rate):
            self.refill()


def _bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


class AtomicFloat:
    """A float that can be read and changed safely from many threads."""

    def __init__(self, value: float = 0.0) -> None:
        self._value = float(value)
        self._lock = threading.Lock()

    def load(self) -> float:
        with self._lock:
            return self._value

    def store(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def add(self, delta: float) -> float:
        """Add ``delta`` and return the new value."""
        while True:
            old = self.load()
            new = old + delta
            if self.compare_and_swap(old, new):
                return new

    def compare_and_swap(self, old: float, new: float) -> bool:
        """Set ``new`` if the value is bitwise equal to ``old``."""
        with self._lock:
            if _bits(self._value) != _bits(old):
                return False
            self._value = float(new)
            return True


class Clicker:
    """A click counter."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def click(self) -> int:
        """Count one click and return the new total."""
        with self._lock:
            self._count += 1
            return self._count

    def reset(self) -> None:
        with self._lock:
            self._count = 0

    def value(self) -> int:
        with self._lock:
            return self._count


class UniqueList:
    """A list of strings without duplicates."""

    def __init__(self) -> None:
        self._values: list[str] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, value: object) -> bool:
        with self._lock:
            return value in self._values

    def add(self, value: str) -> bool:
        """Append ``value`` unless present; return whether it was added."""
        with self._lock:
            if value in self._values:
                return False
            self._values.append(value)
            return True


class Counter:
    """An integer that can be incremented and decremented from many threads."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def incr(self) -> None:
        with self._lock:
            self._value += 1

    def decr(self) -> None:
        with self._lock:
            self._value -= 1

    def value(self) -> int:
        with self._lock:
            return self._value


class IdGenerator:
    """Yields 0, 1, 2, ... to any number of threads until cancelled."""

    def __init__(self, cancel: _Cancel | None = None) -> None:
        self._counter = itertools.count()
        self._cancel = cancel
        self._lock = threading.Lock()

    def __next__(self) -> int:
        with self._lock:
            if self._cancel is not None and self._cancel.is_set():
                raise StopIteration
            return next(self._counter)

    def __iter__(self) -> Iterator[int]:
        return self