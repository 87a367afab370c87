"""Simulation paths: the order in which locations are visited.

A path is a policy object; ``traverse`` derives a fresh lazy sequence each
time it is called, so the same path instance can be reused across variables
and realizations and always yields the same order.
"""

from typing import Iterator, Protocol

import numpy as np


class Path(Protocol):
    def traverse(self, domain) -> Iterator[int]:
        """Yield every location index of the domain exactly once."""
        ...


class LinearPath:
    """Visit locations in index order (row-major for grids)."""

    def __repr__(self) -> str:
        return "LinearPath()"

    def traverse(self, domain) -> Iterator[int]:
        return iter(range(len(domain)))


class ShiftedPath:
    """Linear order starting at ``offset`` and wrapping around."""

    def __init__(self, offset: int = 0):
        self.offset = offset

    def __repr__(self) -> str:
        return f"ShiftedPath(offset={self.offset})"

    def traverse(self, domain) -> Iterator[int]:
        n = len(domain)
        start = self.offset % n if n else 0
        for i in range(n):
            yield (start + i) % n


class RandomPath:
    """Random permutation of locations, fixed by the path's own seed."""

    def __init__(self, seed: int = 0):
        self.seed = seed

    def __repr__(self) -> str:
        return f"RandomPath(seed={self.seed})"

    def traverse(self, domain) -> Iterator[int]:
        order = np.random.default_rng(self.seed).permutation(len(domain))
        return iter(order.tolist())


PATH_REGISTRY: dict[str, type] = {
    "linear": LinearPath,
    "shifted": ShiftedPath,
    "random": RandomPath,
}


def get_path(name: str, **params):
    """Instantiate a path by name.

    Raises:
        ValueError: If the name is not in the registry
    """
    if name not in PATH_REGISTRY:
        available = ", ".join(PATH_REGISTRY.keys())
        raise ValueError(f"Unknown path '{name}'. Available paths: {available}")
    return PATH_REGISTRY[name](**params)


def check_path(path, domain) -> None:
    """Verify that a path visits every location of the domain exactly once.

    Raises:
        ValueError: If the path leaves the domain, repeats or misses locations
    """
    n = len(domain)
    seen = np.zeros(n, dtype=bool)
    for location in path.traverse(domain):
        if not 0 <= location < n:
            raise ValueError(
                f"{path!r} visits location {location} outside domain of size {n}"
            )
        if seen[location]:
            raise ValueError(f"{path!r} visits location {location} twice")
        seen[location] = True

    missing = n - int(seen.sum())
    if missing:
        raise ValueError(f"{path!r} misses {missing} of {n} locations")
