"""
Attractors - growth hormone sources that pull the structure toward them.

Dead attractors are tombstoned, never removed, so an attractor's index
stays valid for the lifetime of the set.
"""

from typing import Iterable, Iterator, List, Optional
import numpy as np

from .vector import Vector2D


class Attractor:
    __slots__ = ('position', 'alive', 'owner')

    def __init__(self, position: Vector2D):
        self.position = position
        self.alive = True
        self.owner: Optional[int] = None  # node index, recomputed every attraction phase

    def kill(self):
        self.alive = False
        self.owner = None

    def __repr__(self) -> str:
        status = "alive" if self.alive else "dead"
        return f"Attractor({self.position}, {status}, owner={self.owner})"


class AttractorSet:
    """Insertion-ordered attractor storage."""

    def __init__(self, attractors: Optional[Iterable[Attractor]] = None):
        self._points: List[Attractor] = list(attractors) if attractors is not None else []

    @classmethod
    def from_positions(cls, positions: Iterable) -> 'AttractorSet':
        return cls(Attractor(Vector2D.coerce(p)) for p in positions)

    def append(self, position) -> int:
        self._points.append(Attractor(Vector2D.coerce(position)))
        return len(self._points) - 1

    def extend(self, positions: Iterable) -> List[int]:
        return [self.append(p) for p in positions]

    def move(self, index: int, position):
        """Overwrite a position between ticks (external drag interaction)."""
        self._points[index].position = Vector2D.coerce(position)

    def clear(self):
        self._points.clear()

    def any_alive(self) -> bool:
        return any(a.alive for a in self._points)

    def alive_count(self) -> int:
        return sum(1 for a in self._points if a.alive)

    def living(self) -> Iterator[tuple]:
        """Yield (index, attractor) for every live attractor."""
        for index, attractor in enumerate(self._points):
            if attractor.alive:
                yield index, attractor

    def positions_array(self) -> np.ndarray:
        if not self._points:
            return np.empty((0, 2))
        return np.array([[a.position.x, a.position.y] for a in self._points])

    def __getitem__(self, index: int) -> Attractor:
        return self._points[index]

    def __iter__(self) -> Iterator[Attractor]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return f"AttractorSet({len(self._points)} attractors, {self.alive_count()} alive)"
