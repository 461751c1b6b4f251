"""
chainflow/positions.py
----------------------
Thread-safe ``recipient → node`` map.

A single reader/writer lock guards the whole map. Lookups take the shared
side, upserts and removals the exclusive side. Nothing slow ever runs while
the lock is held: no transport calls, no endpoints.

A stored ``None`` means "the flow ended for this recipient", which is not
the same as a missing key ("never started").
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

if TYPE_CHECKING:
    from .node import Node


class RWLock:
    """Writer-preferring reader/writer lock."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
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
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class PositionStore:
    def __init__(self):
        self._lock = RWLock()
        self._positions: Dict[str, Optional["Node"]] = {}

    def get(self, key: str) -> Tuple[Optional["Node"], bool]:
        with self._lock.read():
            if key in self._positions:
                return self._positions[key], True
        return None, False

    def set(self, key: str, node: Optional["Node"]) -> None:
        with self._lock.write():
            self._positions[key] = node

    def delete(self, key: str) -> None:
        with self._lock.write():
            self._positions.pop(key, None)

    def clear(self) -> None:
        with self._lock.write():
            self._positions.clear()

    def snapshot(self) -> Dict[str, Optional["Node"]]:
        with self._lock.read():
            return dict(self._positions)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._positions

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._positions)
