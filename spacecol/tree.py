"""
Tree class - flat arena of structure nodes.

Nodes are addressed by their index in the arena. Indices are handed out
in creation order and never reused, and a child is always created after
its parent, so index order is a valid topological order of the forest.
Several roots may coexist.
"""

from typing import Iterator, List, Optional, Tuple
import numpy as np

from .vector import Vector2D
from .node import Node
from .influence import InfluenceBuffer
from .spatial import Neighbor, NodeSpatialIndex, kth_nearest


class Tree:
    _INITIAL_CAPACITY = 64

    def __init__(self):
        self.nodes: List[Node] = []
        self.influence = InfluenceBuffer()
        self._positions = np.zeros((self._INITIAL_CAPACITY, 2), dtype=np.float64)

    def _append(self, node: Node) -> int:
        n = len(self.nodes)
        if n == len(self._positions):
            grown = np.zeros((2 * n, 2), dtype=np.float64)
            grown[:n] = self._positions
            self._positions = grown
        self._positions[n, 0] = node.position.x
        self._positions[n, 1] = node.position.y
        self.nodes.append(node)
        return node.index

    def add_root(self, position, radius: float = 1.0) -> int:
        return self._append(Node(len(self.nodes), Vector2D.coerce(position), radius))

    def add_child(self, parent: int, position, radius: Optional[float] = None) -> int:
        """Append a node linked under ``parent``; radius defaults to the parent's."""
        if not 0 <= parent < len(self.nodes):
            raise IndexError(f"Parent node {parent} does not exist")
        parent_node = self.nodes[parent]
        if radius is None:
            radius = parent_node.radius

        index = self._append(Node(len(self.nodes), Vector2D.coerce(position), radius, parent=parent))
        parent_node.children.append(index)
        return index

    def has_child_near(self, parent: int, position: Vector2D, threshold: float) -> bool:
        """True if any existing child of ``parent`` lies closer than ``threshold`` to ``position``."""
        threshold_sq = threshold * threshold
        for child in self.nodes[parent].children:
            if self.nodes[child].position.distance_squared_to(position) < threshold_sq:
                return True
        return False

    def kth_nearest(self, position: Vector2D, k: int, radius: Optional[float] = None) -> Optional[Neighbor]:
        return kth_nearest(self.positions, position, k, radius=radius)

    def nearest(self, position: Vector2D) -> Optional[Neighbor]:
        return self.kth_nearest(position, 1)

    def spatial_index(self) -> NodeSpatialIndex:
        return NodeSpatialIndex(self.positions)

    def clear(self):
        self.nodes = []
        self.influence = InfluenceBuffer()
        self._positions = np.zeros((self._INITIAL_CAPACITY, 2), dtype=np.float64)

    @property
    def positions(self) -> np.ndarray:
        """(n, 2) view of node positions, row i is node i."""
        return self._positions[:len(self.nodes)]

    @property
    def roots(self) -> List[int]:
        return [n.index for n in self.nodes if n.is_root]

    @property
    def tips(self) -> List[int]:
        return [n.index for n in self.nodes if n.is_tip]

    def edges(self) -> List[Tuple[int, int]]:
        """All (parent, child) links in index order."""
        return [(n.parent, n.index) for n in self.nodes if n.parent is not None]

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
