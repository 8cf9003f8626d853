"""
Space Colonization engine for 2D branching structures.

Based on: "Modeling Trees with a Space Colonization Algorithm"
by Runions, Lane, and Prusinkiewicz (2007), with k-th nearest
neighbour lookups for controllable variety.
"""

from .vector import Vector2D
from .attractor import Attractor, AttractorSet
from .node import Node
from .influence import InfluenceBuffer
from .tree import Tree
from .spatial import Neighbor, NodeSpatialIndex, kth_nearest
from .shapes import SpawnRequest, sample_positions
from .phases import attraction_phase, growth_phase, kill_phase
from .driver import Simulation, TickSummary, TerminalCondition, Snapshot

__all__ = [
    'Vector2D',
    'Attractor',
    'AttractorSet',
    'Node',
    'InfluenceBuffer',
    'Tree',
    'Neighbor',
    'NodeSpatialIndex',
    'kth_nearest',
    'SpawnRequest',
    'sample_positions',
    'attraction_phase',
    'growth_phase',
    'kill_phase',
    'Simulation',
    'TickSummary',
    'TerminalCondition',
    'Snapshot'
]
