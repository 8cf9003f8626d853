"""
k-th nearest node lookups shared by the attraction and kill phases.

Two evaluation modes exist:

- global: every node is ranked by distance, so a node outside the
  lookup radius can still be the k-th neighbour. This is the reference
  behaviour.
- local: only nodes within the radius are ranked; when k exceeds the
  number of in-radius nodes the farthest in-radius node is returned.

Ties on distance always resolve to the smaller node index.
"""

from typing import NamedTuple, Optional
import numpy as np
from scipy.spatial import cKDTree

from .vector import Vector2D
from .profiling import profile


class Neighbor(NamedTuple):
    index: int
    distance_squared: float


def squared_distances(positions: np.ndarray, query: Vector2D) -> np.ndarray:
    dx = positions[:, 0] - query.x
    dy = positions[:, 1] - query.y
    return dx * dx + dy * dy


def _rank(candidates: np.ndarray, d2: np.ndarray, k: int) -> Neighbor:
    """Pick the k-th closest of ``candidates`` (clamped to the farthest)."""
    if k == 1:
        # argmin returns the first minimum, i.e. the smallest index
        best = int(np.argmin(d2))
        return Neighbor(int(candidates[best]), float(d2[best]))

    order = np.lexsort((candidates, d2))
    pick = order[min(k, len(order)) - 1]
    return Neighbor(int(candidates[pick]), float(d2[pick]))


def kth_nearest(
    positions: np.ndarray,
    query: Vector2D,
    k: int,
    radius: Optional[float] = None
) -> Optional[Neighbor]:
    """
    Brute-force k-th nearest node (k=1 is the nearest).

    Args:
        positions: (n, 2) array of node positions, row i is node i
        query: point to measure from
        k: rank to return, clamped to the farthest candidate when too large
        radius: if given, only nodes with distance <= radius are ranked

    Returns None when there is no candidate node.
    """
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")

    n = len(positions)
    if n == 0:
        return None

    d2 = squared_distances(positions, query)
    candidates = np.arange(n)

    if radius is not None:
        inside = d2 <= radius * radius
        if not inside.any():
            return None
        candidates = candidates[inside]
        d2 = d2[inside]

    return _rank(candidates, d2, k)


class NodeSpatialIndex:
    """KD-Tree over node positions, used for local (in-radius) lookups."""

    def __init__(self, positions: np.ndarray):
        self._positions = positions
        self._tree: Optional[cKDTree] = cKDTree(positions) if len(positions) else None

    @profile
    def kth_nearest_within(self, query: Vector2D, k: int, radius: float) -> Optional[Neighbor]:
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if self._tree is None:
            return None

        # Pad the ball so boundary points are decided by the exact check below
        found = self._tree.query_ball_point([query.x, query.y], radius * (1.0 + 1e-9) + 1e-12)
        if not found:
            return None

        candidates = np.array(sorted(found), dtype=np.int64)
        d2 = squared_distances(self._positions[candidates], query)
        inside = d2 <= radius * radius
        if not inside.any():
            return None

        return _rank(candidates[inside], d2[inside], k)

    def __len__(self) -> int:
        return len(self._positions)
