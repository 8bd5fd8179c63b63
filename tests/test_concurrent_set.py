"""Tests for ConcurrentSet, its algebra, and the reader/writer lock."""

from __future__ import annotations

import threading
import time

import pytest

from bayes_filter.concurrent_set import (
    ConcurrentSet,
    ReadWriteLock,
    complement,
    difference,
    intersection,
    union,
)


# ---------------------------------------------------------------------------
# Basic operations
# ---------------------------------------------------------------------------

class TestConcurrentSetBasics:
    """Membership, counting and listing."""

    def test_create_with_initial_tokens(self) -> None:
        s = ConcurrentSet(["b", "a", "b"])
        assert s.count() == 2
        assert s.has("a", "b")

    def test_create_empty(self) -> None:
        s = ConcurrentSet()
        assert s.is_empty()
        assert s.count() == 0
        assert s.to_list() == []

    def test_add_and_remove(self) -> None:
        s = ConcurrentSet()
        s.add("x", "y", "z")
        s.remove("y", "missing")
        assert s.to_sorted_list() == ["x", "z"]

    def test_has_requires_all_tokens(self) -> None:
        s = ConcurrentSet(["a", "b"])
        assert s.has("a")
        assert not s.has("a", "c")
        assert s.has()

    def test_clear(self) -> None:
        s = ConcurrentSet(["a", "b"])
        s.clear()
        assert s.is_empty()

    def test_to_sorted_list_is_lexicographic(self) -> None:
        s = ConcurrentSet(["stupid", "dalmation", "love", "Zebra"])
        assert s.to_sorted_list() == ["Zebra", "dalmation", "love", "stupid"]

    def test_to_list_has_every_member(self) -> None:
        s = ConcurrentSet(["a", "b", "c"])
        assert sorted(s.to_list()) == ["a", "b", "c"]

    def test_duplicate_breaks_aliasing(self) -> None:
        s = ConcurrentSet(["a"])
        copy = s.duplicate()
        copy.add("b")
        s.add("c")
        assert s.to_sorted_list() == ["a", "c"]
        assert copy.to_sorted_list() == ["a", "b"]

    def test_python_protocol(self) -> None:
        s = ConcurrentSet(["a", "b"])
        assert len(s) == 2
        assert "a" in s
        assert "z" not in s
        assert sorted(s) == ["a", "b"]
        assert s == ConcurrentSet(["b", "a"])
        assert s != ConcurrentSet(["a"])
        assert repr(s) == "ConcurrentSet(['a', 'b'])"

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(ConcurrentSet())


# ---------------------------------------------------------------------------
# In-place algebra
# ---------------------------------------------------------------------------

class TestInPlaceAlgebra:

    def test_union_update(self):
        s = ConcurrentSet(["a"])
        s.union_update(ConcurrentSet(["b"]), ConcurrentSet(["c", "a"]))
        assert s.to_sorted_list() == ["a", "b", "c"]

    def test_difference_update(self):
        s = ConcurrentSet(["a", "b", "c"])
        s.difference_update(ConcurrentSet(["b"]), ConcurrentSet(["c", "z"]))
        assert s.to_sorted_list() == ["a"]

    def test_intersection_update(self):
        s = ConcurrentSet(["a", "b", "c"])
        s.intersection_update(ConcurrentSet(["a", "b"]), ConcurrentSet(["b", "c"]))
        assert s.to_sorted_list() == ["b"]

    def test_complement_update(self):
        s = ConcurrentSet(["a"])
        s.complement_update(ConcurrentSet(["a", "b", "c"]))
        assert s.to_sorted_list() == ["b", "c"]

    def test_operands_are_not_modified(self):
        other = ConcurrentSet(["x"])
        s = ConcurrentSet(["a"])
        s.union_update(other)
        assert other.to_sorted_list() == ["x"]

    def test_self_as_operand(self):
        s = ConcurrentSet(["a", "b"])
        s.union_update(s)
        assert s.to_sorted_list() == ["a", "b"]
        s.difference_update(s)
        assert s.is_empty()

    def test_no_operands_leaves_set_unchanged(self):
        s = ConcurrentSet(["a"])
        s.union_update()
        s.intersection_update()
        assert s.to_sorted_list() == ["a"]


# ---------------------------------------------------------------------------
# Free-function algebra
# ---------------------------------------------------------------------------

class TestFreeAlgebra:

    @pytest.fixture
    def sets(self):
        return (
            ConcurrentSet(["a", "b", "c"]),
            ConcurrentSet(["b", "c", "d"]),
            ConcurrentSet(["c", "d", "e"]),
        )

    @pytest.mark.parametrize("op", [union, difference, intersection])
    def test_zero_arguments_returns_empty(self, op):
        assert op().is_empty()

    @pytest.mark.parametrize("op", [union, difference, intersection])
    def test_single_argument_returns_copy(self, op):
        s = ConcurrentSet(["a", "b"])
        r = op(s)
        assert r == s
        assert r is not s
        r.add("c")
        assert not s.has("c")

    def test_union(self, sets):
        assert union(*sets).to_sorted_list() == ["a", "b", "c", "d", "e"]

    def test_difference(self, sets):
        a, b, c = sets
        assert difference(a, b).to_sorted_list() == ["a"]
        assert difference(c, a, b).to_sorted_list() == ["e"]

    def test_intersection(self, sets):
        assert intersection(*sets).to_sorted_list() == ["c"]

    def test_complement(self):
        full = ConcurrentSet(["a", "b", "c"])
        sub = ConcurrentSet(["b"])
        assert complement(sub, full).to_sorted_list() == ["a", "c"]

    def test_inputs_untouched(self, sets):
        a, b, c = sets
        union(a, b, c)
        intersection(a, b, c)
        difference(a, b, c)
        assert a.to_sorted_list() == ["a", "b", "c"]
        assert b.to_sorted_list() == ["b", "c", "d"]

    def test_union_and_intersection_commutative(self, sets):
        a, b, _ = sets
        assert union(a, b) == union(b, a)
        assert intersection(a, b) == intersection(b, a)

    def test_union_and_intersection_associative(self, sets):
        a, b, c = sets
        assert union(union(a, b), c) == union(a, union(b, c))
        assert intersection(intersection(a, b), c) == intersection(a, intersection(b, c))

    def test_double_complement(self):
        full = ConcurrentSet(["a", "b", "c", "d"])
        s = ConcurrentSet(["b", "d"])
        assert complement(complement(s, full), full) == s

    def test_difference_with_self_is_empty(self, sets):
        a, _, _ = sets
        assert difference(a, a).is_empty()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class TestConcurrency:
    """Concurrent writers and cross-set algebra."""

    def test_parallel_adds_are_not_lost(self):
        s = ConcurrentSet()

        def worker(n: int) -> None:
            for i in range(200):
                s.add(f"{n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        assert s.count() == 8 * 200

    def test_opposite_order_algebra_does_not_deadlock(self):
        a = ConcurrentSet([f"a{i}" for i in range(100)])
        b = ConcurrentSet([f"b{i}" for i in range(100)])

        def forward() -> None:
            for _ in range(300):
                a.union_update(b)
                a.intersection_update(b, a)

        def backward() -> None:
            for _ in range(300):
                b.union_update(a)
                b.difference_update(ConcurrentSet(["nothing"]), a)

        threads = [threading.Thread(target=forward), threading.Thread(target=backward)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)
        assert not any(t.is_alive() for t in threads)


class TestReadWriteLock:

    def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        inside = threading.Barrier(2, timeout=5)

        def reader() -> None:
            with lock.read_locked():
                # Both readers must be inside together to pass the barrier
                inside.wait()

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        assert not inside.broken

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events: list[str] = []
        lock.acquire_write()

        def reader() -> None:
            with lock.read_locked():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)
        assert events == ["write-done", "read"]
