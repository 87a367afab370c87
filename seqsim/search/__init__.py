"""Distances and masked bounded-neighbor searchers."""

from seqsim.search.distances import Distance
from seqsim.search.searchers import (
    BallNeighborhood,
    KBallSearch,
    KNearestSearch,
    build_searcher,
)

__all__ = [
    "Distance",
    "BallNeighborhood",
    "KBallSearch",
    "KNearestSearch",
    "build_searcher",
]
