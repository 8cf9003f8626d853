"""
Per-node accumulator of attractor pull for the current phase cycle.

Slot ``i`` belongs to node ``i``: it holds the summed unit directions
toward the attractors that chose node ``i`` and how many did so.
"""

from typing import List
import numpy as np

from .vector import Vector2D


class InfluenceBuffer:
    __slots__ = ('_dir', '_count')

    def __init__(self, length: int = 0):
        self._dir = np.zeros((length, 2), dtype=np.float64)
        self._count = np.zeros(length, dtype=np.int64)

    def __len__(self) -> int:
        return len(self._count)

    def ensure_len(self, length: int):
        """Resize to ``length`` slots and zero every slot."""
        if len(self._count) != length:
            self._dir = np.zeros((length, 2), dtype=np.float64)
            self._count = np.zeros(length, dtype=np.int64)
        else:
            self.clear()

    def clear(self):
        self._dir.fill(0.0)
        self._count.fill(0)

    def add(self, index: int, direction: Vector2D):
        self._dir[index, 0] += direction.x
        self._dir[index, 1] += direction.y
        self._count[index] += 1

    def count(self, index: int) -> int:
        return int(self._count[index])

    def direction_sum(self, index: int) -> Vector2D:
        return Vector2D(self._dir[index, 0], self._dir[index, 1])

    def avg_dir(self, index: int) -> Vector2D:
        """Mean of the accumulated directions, zero when nothing contributed."""
        c = self._count[index]
        if c == 0:
            return Vector2D(0, 0)
        return Vector2D(self._dir[index, 0] / c, self._dir[index, 1] / c)

    def is_influenced(self, index: int) -> bool:
        return bool(self._count[index] > 0)

    def influenced_indices(self) -> List[int]:
        return np.flatnonzero(self._count > 0).tolist()

    def merge_from(self, other: 'InfluenceBuffer'):
        """Add another buffer's contributions slot by slot."""
        if len(other) != len(self):
            raise ValueError(
                f"Cannot merge influence buffers of length {len(other)} into {len(self)}"
            )
        self._dir += other._dir
        self._count += other._count
