"""
The three phases of one space colonization cycle.

1. attraction_phase - every live attractor picks its k-th nearest node and,
   if that node is within the influence radius, pulls it toward itself.
2. growth_phase - every pulled node grows one child along its mean pull
   plus tropism.
3. kill_phase - attractors reached by the structure die.

Growth must run before kill inside a cycle so nodes grown this cycle can
consume the attractors they reach.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from config import SCAConfig
from .vector import Vector2D
from .attractor import AttractorSet
from .tree import Tree
from .profiling import profile


@dataclass
class AttractionReport:
    owned: int = 0
    influenced_nodes: List[int] = field(default_factory=list)


@dataclass
class GrowthReport:
    new_ids: List[int] = field(default_factory=list)
    degenerate: int = 0  # nodes whose pull cancelled out
    duplicates: int = 0  # candidates too close to an existing child


@dataclass
class KillReport:
    killed: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.killed)


@profile
def attraction_phase(tree: Tree, attractors: AttractorSet, config: SCAConfig) -> AttractionReport:
    """Accumulate attractor pull into the tree's influence buffer and set owners."""
    report = AttractionReport()
    influence = tree.influence
    influence.ensure_len(len(tree))

    k = config.attract_from_kn
    r2 = config.influence_radius_sq
    index = tree.spatial_index() if config.local_neighbors else None

    for _, attractor in attractors.living():
        if index is not None:
            hit = index.kth_nearest_within(attractor.position, k, config.influence_radius)
        else:
            hit = tree.kth_nearest(attractor.position, k)

        if hit is None or hit.distance_squared > r2:
            attractor.owner = None
            continue

        attractor.owner = hit.index
        report.owned += 1

        # An attractor sitting exactly on its node has no direction to offer
        offset = attractor.position - tree.nodes[hit.index].position
        if offset.is_zero:
            continue
        influence.add(hit.index, offset.normalize())

    report.influenced_nodes = influence.influenced_indices()
    return report


def growth_direction(avg_dir: Vector2D, tropism: Vector2D) -> Vector2D:
    """Mean pull plus tropism, normalized; zero when degenerate."""
    return (avg_dir + tropism).normalize()


@profile
def growth_phase(tree: Tree, config: SCAConfig) -> GrowthReport:
    """Grow one child per influenced node and return the new indices."""
    report = GrowthReport()
    influence = tree.influence
    tropism = Vector2D.from_tuple(config.tropism)

    candidates: List[Tuple[int, Vector2D]] = []
    for parent in influence.influenced_indices():
        direction = growth_direction(influence.avg_dir(parent), tropism)
        if direction.is_zero:
            report.degenerate += 1
            continue

        new_pos = tree.nodes[parent].position + direction * config.step_len
        if tree.has_child_near(parent, new_pos, config.min_child_spacing):
            report.duplicates += 1
            continue

        candidates.append((parent, new_pos))

    # Commit in parent order so index assignment does not depend on buffer iteration
    candidates.sort(key=lambda c: c[0])
    for parent, new_pos in candidates:
        report.new_ids.append(tree.add_child(parent, new_pos))

    return report


@profile
def kill_phase(tree: Tree, attractors: AttractorSet, config: SCAConfig) -> KillReport:
    """Kill every live attractor whose k-th nearest node is within the kill radius."""
    report = KillReport()
    k = config.kill_from_kn
    r2 = config.kill_radius_sq

    for i, attractor in attractors.living():
        hit = tree.kth_nearest(attractor.position, k)
        if hit is not None and hit.distance_squared <= r2:
            attractor.kill()
            report.killed.append(i)

    return report
