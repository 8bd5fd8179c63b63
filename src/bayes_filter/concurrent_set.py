"""Thread-safe set of strings with set algebra.

Each ``ConcurrentSet`` guards its storage with its own reader/writer lock.
Algebra across several sets never holds two sets' locks at the same time:
the receiver is first snapshotted into a private copy, the other operands
are locked one at a time and merged into that copy, and the copy is then
committed back under the receiver's write lock. Two threads running
``a.union_update(b)`` and ``b.union_update(a)`` therefore cannot deadlock.

A set that is never shared between threads can be used exactly the same
way; the locks are simply uncontended.

Example::

    seen = ConcurrentSet(["love", "my"])
    seen.add("dalmation", "my")
    seen.to_sorted_list()  # ["dalmation", "love", "my"]

    common = intersection(seen, ConcurrentSet(["my", "stupid"]))
    common.to_list()  # ["my"]
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator


class ReadWriteLock:
    """Shared-reader / exclusive-writer lock.

    Waiting writers block new readers so that a steady stream of readers
    cannot starve a writer. Not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ConcurrentSet:
    """Mutable, thread-safe collection of unique strings.

    Args:
        tokens: Initial members.
    """

    __slots__ = ("_lock", "_items")

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._lock = ReadWriteLock()
        self._items: dict[str, bool] = {}
        self.add(*tokens)

    # ------------------------------------------------------------------
    # Basic operations
    # ------------------------------------------------------------------

    def duplicate(self) -> "ConcurrentSet":
        """Return an independent copy taken under this set's read lock."""
        r = ConcurrentSet()
        r._items = self._snapshot()
        return r

    def add(self, *tokens: str) -> None:
        with self._lock.write_locked():
            for token in tokens:
                self._items[token] = True

    def remove(self, *tokens: str) -> None:
        """Remove tokens; absent tokens are ignored."""
        with self._lock.write_locked():
            for token in tokens:
                self._items.pop(token, None)

    def has(self, *tokens: str) -> bool:
        """True only if every given token is a member."""
        with self._lock.read_locked():
            return all(token in self._items for token in tokens)

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._items)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._items = {}

    def is_empty(self) -> bool:
        with self._lock.read_locked():
            return not self._items

    def to_list(self) -> list[str]:
        """Members in no particular order."""
        with self._lock.read_locked():
            return list(self._items)

    def to_sorted_list(self) -> list[str]:
        """Members in lexicographic order."""
        with self._lock.read_locked():
            return sorted(self._items)

    # ------------------------------------------------------------------
    # In-place algebra
    # ------------------------------------------------------------------

    def union_update(self, *others: "ConcurrentSet") -> None:
        """Add every member of ``others`` to this set."""
        r = self._snapshot()
        for other in others:
            with other._lock.read_locked():
                for token in other._items:
                    r[token] = True
        self._commit(r)

    def difference_update(self, *others: "ConcurrentSet") -> None:
        """Remove every member of ``others`` from this set."""
        r = self._snapshot()
        for other in others:
            with other._lock.read_locked():
                for token in other._items:
                    r.pop(token, None)
        self._commit(r)

    def intersection_update(self, *others: "ConcurrentSet") -> None:
        """Keep only members present in every one of ``others``."""
        r = self._snapshot()
        for other in others:
            with other._lock.read_locked():
                r = {token: True for token in r if token in other._items}
        self._commit(r)

    def complement_update(self, full: "ConcurrentSet") -> None:
        """Replace this set with the members of ``full`` it does not hold."""
        r = full._snapshot()
        with self._lock.write_locked():
            for token in self._items:
                r.pop(token, None)
            self._items = r

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, token: object) -> bool:
        with self._lock.read_locked():
            return token in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConcurrentSet):
            return NotImplemented
        if other is self:
            return True
        return self._snapshot().keys() == other._snapshot().keys()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConcurrentSet({self.to_sorted_list()!r})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _snapshot(self) -> dict[str, bool]:
        with self._lock.read_locked():
            return dict(self._items)

    def _commit(self, items: dict[str, bool]) -> None:
        with self._lock.write_locked():
            self._items = items


# ---------------------------------------------------------------------------
# Free-function algebra
# ---------------------------------------------------------------------------

def union(*sets: ConcurrentSet) -> ConcurrentSet:
    """Return a new set holding the members of all ``sets``."""
    if not sets:
        return ConcurrentSet()
    r = sets[0].duplicate()
    r.union_update(*sets[1:])
    return r


def difference(*sets: ConcurrentSet) -> ConcurrentSet:
    """Return the members of the first set that are in none of the rest."""
    if not sets:
        return ConcurrentSet()
    r = sets[0].duplicate()
    r.difference_update(*sets[1:])
    return r


def intersection(*sets: ConcurrentSet) -> ConcurrentSet:
    """Return the members common to all ``sets``."""
    if not sets:
        return ConcurrentSet()
    r = sets[0].duplicate()
    r.intersection_update(*sets[1:])
    return r


def complement(sub: ConcurrentSet, full: ConcurrentSet) -> ConcurrentSet:
    """Return the members of ``full`` that are not in ``sub``."""
    r = full.duplicate()
    r.difference_update(sub)
    return r
