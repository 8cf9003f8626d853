"""
Node class - a single point of the growing structure.
"""

from typing import List, Optional
from .vector import Vector2D


class Node:
    __slots__ = ('index', 'position', 'radius', 'parent', 'children')

    def __init__(self, index: int, position: Vector2D, radius: float, parent: Optional[int] = None):
        self.index = index
        self.position = position
        self.radius = radius
        self.parent = parent
        self.children: List[int] = []

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_tip(self) -> bool:
        return len(self.children) == 0

    def __repr__(self) -> str:
        return f"Node({self.index}, {self.position}, parent={self.parent})"
