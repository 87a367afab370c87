"""Tests for simulation paths."""

import pytest

from seqsim.data.domain import CartesianGrid, PointSet
from seqsim.engine.path import LinearPath, RandomPath, ShiftedPath, check_path, get_path


def test_linear_path_follows_index_order():
    """Linear path visits locations in index order."""
    domain = CartesianGrid((3, 2))
    assert list(LinearPath().traverse(domain)) == [0, 1, 2, 3, 4, 5]


def test_random_path_is_restartable_permutation():
    """Random path covers every location and repeats for the same seed."""
    domain = PointSet(range(50))
    path = RandomPath(seed=4)

    first = list(path.traverse(domain))
    second = list(path.traverse(domain))

    assert first == second
    assert sorted(first) == list(range(50))
    assert first != list(range(50))
    assert first != list(RandomPath(seed=5).traverse(domain))


def test_shifted_path_wraps_around():
    """Shifted path starts at the offset."""
    domain = PointSet(range(5))
    assert list(ShiftedPath(3).traverse(domain)) == [3, 4, 0, 1, 2]
    assert list(ShiftedPath(-1).traverse(domain)) == [4, 0, 1, 2, 3]


def test_check_path_detects_inconsistent_paths():
    """Paths that do not match the domain size are rejected."""
    domain = PointSet(range(4))

    class ShortPath:
        def traverse(self, domain):
            return iter([0, 1, 2])

    class RepeatingPath:
        def traverse(self, domain):
            return iter([0, 1, 1, 3])

    class OutsidePath:
        def traverse(self, domain):
            return iter([0, 1, 2, 4])

    check_path(LinearPath(), domain)
    with pytest.raises(ValueError, match="misses 1 of 4"):
        check_path(ShortPath(), domain)
    with pytest.raises(ValueError, match="twice"):
        check_path(RepeatingPath(), domain)
    with pytest.raises(ValueError, match="outside domain"):
        check_path(OutsidePath(), domain)


def test_get_path_unknown_raises():
    """Unknown path names raise ValueError."""
    assert isinstance(get_path("random", seed=2), RandomPath)
    with pytest.raises(ValueError, match="Unknown path 'spiral'"):
        get_path("spiral")
