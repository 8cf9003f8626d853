"""
Vector2D - planar point/direction shared by nodes, attractors and pulls.

Instances are treated as values: the engine never mutates one in place,
so a node's position can be handed out without copying.
"""

from typing import Sequence, Union
import numpy as np

# Pulls and growth directions shorter than this have no direction
EPSILON = 1e-10

VectorLike = Union['Vector2D', Sequence[float], np.ndarray]


class Vector2D:
    __slots__ = ('x', 'y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> 'Vector2D':
        return cls(t[0], t[1])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> 'Vector2D':
        return cls(arr[0], arr[1])

    @classmethod
    def coerce(cls, value: VectorLike) -> 'Vector2D':
        """Fresh vector from a Vector2D, a pair or a length-2 array."""
        if isinstance(value, Vector2D):
            return value.copy()
        return cls.from_tuple(value)

    def copy(self) -> 'Vector2D':
        return Vector2D(self.x, self.y)

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Vector2D':
        return Vector2D(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        # tolerant so positions reached by repeated stepping compare equal
        if not isinstance(other, Vector2D):
            return NotImplemented
        return bool(np.isclose(self.x, other.x) and np.isclose(self.y, other.y))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.2f}, {self.y:.2f})"

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def magnitude(self) -> float:
        return float(np.hypot(self.x, self.y))

    @property
    def is_zero(self) -> bool:
        return self.magnitude < EPSILON

    def normalize(self) -> 'Vector2D':
        """Unit vector along self; the zero vector when there is no direction."""
        mag = self.magnitude
        if mag < EPSILON:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / mag, self.y / mag)

    def distance_squared_to(self, other: 'Vector2D') -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def to_tuple(self) -> tuple:
        return (self.x, self.y)
