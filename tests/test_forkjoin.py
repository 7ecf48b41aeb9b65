"""Tests for adaptive_mandelbrot/forkjoin.py: fork-join task execution."""

import threading

import pytest

from adaptive_mandelbrot import ForkJoinPool


def count_leaves(pool, depth):
    if depth == 0:
        return 1
    return sum(pool.invoke_all([(count_leaves, (pool, depth - 1))] * 4))


def fail(message):
    raise RuntimeError(message)


class TestInvokeAll:
    """Test result ordering, nesting and error propagation."""

    def test_results_in_submission_order(self):
        with ForkJoinPool(3) as pool:
            assert pool.invoke_all([(pow, (2, 3)), (pow, (3, 2)), (abs, (-4,))]) == [8, 9, 4]

    def test_empty(self):
        with ForkJoinPool(2) as pool:
            assert pool.invoke_all([]) == []

    def test_first_task_runs_on_caller(self):
        with ForkJoinPool(2) as pool:
            assert pool.invoke_all([(threading.get_ident, ())]) == [threading.get_ident()]

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_nested_joins_complete(self, workers):
        """Nested joins finish even when the tree is far wider than the pool."""
        with ForkJoinPool(workers) as pool:
            assert count_leaves(pool, 4) == 256

    def test_child_error_propagates(self):
        with ForkJoinPool(2) as pool:
            with pytest.raises(RuntimeError, match="child failed"):
                pool.invoke_all([(abs, (-1,)), (fail, ("child failed",)), (abs, (-2,))])

    def test_inline_error_propagates(self):
        with ForkJoinPool(2) as pool:
            with pytest.raises(RuntimeError, match="first failed"):
                pool.invoke_all([(fail, ("first failed",)), (abs, (-2,))])


class TestPoolConfiguration:
    """Test pool sizing."""

    def test_default_size_is_positive(self):
        with ForkJoinPool() as pool:
            assert pool.workers >= 1

    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            ForkJoinPool(0)
