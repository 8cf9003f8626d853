"""
Tests for the node arena, attractor storage and influence buffer.
"""

import numpy as np
import pytest

from spacecol import Tree, AttractorSet, InfluenceBuffer, Vector2D


@pytest.fixture
def tree() -> Tree:
    t = Tree()
    t.add_root((0, 0), radius=1.5)
    return t


class TestTreeArena:
    """Tests for node creation and links."""

    def test_root_has_no_parent(self, tree: Tree) -> None:
        """A root starts the forest with index 0."""
        assert len(tree) == 1
        assert tree[0].parent is None
        assert tree[0].children == []
        assert tree.roots == [0]

    def test_add_child_links_both_ways(self, tree: Tree) -> None:
        """Children record the parent and the parent records the child."""
        child = tree.add_child(0, (1, 0))
        assert child == 1
        assert tree[child].parent == 0
        assert tree[0].children == [child]
        assert tree.edges() == [(0, 1)]

    def test_child_inherits_radius(self, tree: Tree) -> None:
        """Radius defaults to the parent's radius."""
        child = tree.add_child(0, (1, 0))
        assert tree[child].radius == 1.5

    def test_indices_are_monotonic_and_topological(self, tree: Tree) -> None:
        """Every index exceeds its parent's and indices grow by one."""
        tree.add_root((10, 10))
        a = tree.add_child(0, (1, 0))
        b = tree.add_child(1, (11, 10))
        c = tree.add_child(a, (2, 0))
        assert [a, b, c] == [2, 3, 4]
        for node in tree:
            if node.parent is not None:
                assert node.index > node.parent

    def test_unknown_parent_raises(self, tree: Tree) -> None:
        """Linking under a missing node is rejected."""
        with pytest.raises(IndexError):
            tree.add_child(5, (1, 0))

    def test_positions_track_nodes_past_initial_capacity(self) -> None:
        """The position array grows with the arena."""
        t = Tree()
        t.add_root((0, 0))
        for i in range(1, 200):
            t.add_child(i - 1, (float(i), 0.0))
        assert t.positions.shape == (200, 2)
        assert t.positions[199, 0] == 199.0
        assert t.nearest(Vector2D(150.2, 0)).index == 150

    def test_has_child_near(self, tree: Tree) -> None:
        """Only children strictly within the threshold count."""
        tree.add_child(0, (2, 0))
        assert tree.has_child_near(0, Vector2D(2.05, 0), 0.1)
        assert not tree.has_child_near(0, Vector2D(2.5, 0), 0.1)

    def test_tips(self, tree: Tree) -> None:
        """Tips are nodes without children."""
        a = tree.add_child(0, (1, 0))
        b = tree.add_child(0, (0, 1))
        tree.add_child(a, (2, 0))
        assert tree.tips == [b, 3]

    def test_clear(self, tree: Tree) -> None:
        """Clearing leaves an empty arena."""
        tree.add_child(0, (1, 0))
        tree.clear()
        assert len(tree) == 0
        assert tree.positions.shape == (0, 2)
        assert tree.nearest(Vector2D(0, 0)) is None


class TestAttractorSet:
    """Tests for attractor storage."""

    def test_from_positions(self) -> None:
        """Positions become live, unowned attractors."""
        attractors = AttractorSet.from_positions([(1, 2), (3, 4)])
        assert len(attractors) == 2
        assert attractors[1].position == Vector2D(3, 4)
        assert all(a.alive and a.owner is None for a in attractors)

    def test_dead_attractors_are_kept(self) -> None:
        """Killing tombstones the attractor instead of removing it."""
        attractors = AttractorSet.from_positions([(0, 0), (1, 1)])
        attractors[0].kill()
        assert len(attractors) == 2
        assert attractors.alive_count() == 1
        assert [i for i, _ in attractors.living()] == [1]

    def test_any_alive(self) -> None:
        """any_alive turns false once every attractor is dead."""
        attractors = AttractorSet.from_positions([(0, 0)])
        assert attractors.any_alive()
        attractors[0].kill()
        assert not attractors.any_alive()
        assert not AttractorSet().any_alive()

    def test_append_returns_index(self) -> None:
        """Appended attractors get the next index."""
        attractors = AttractorSet.from_positions([(0, 0)])
        assert attractors.append((5, 5)) == 1
        assert attractors.extend([(1, 1), (2, 2)]) == [2, 3]

    def test_move(self) -> None:
        """Moving only rewrites the position."""
        attractors = AttractorSet.from_positions([(0, 0)])
        attractors.move(0, (7, 8))
        assert attractors[0].position == Vector2D(7, 8)
        assert attractors[0].alive

    def test_positions_array(self) -> None:
        """Positions export as an (n, 2) array."""
        attractors = AttractorSet.from_positions([(1, 2), (3, 4)])
        np.testing.assert_allclose(attractors.positions_array(), [[1, 2], [3, 4]])
        assert AttractorSet().positions_array().shape == (0, 2)


class TestInfluenceBuffer:
    """Tests for the per-node pull accumulator."""

    def test_starts_zeroed(self) -> None:
        """A fresh buffer has no influence anywhere."""
        buf = InfluenceBuffer(3)
        assert len(buf) == 3
        assert buf.influenced_indices() == []
        assert buf.avg_dir(1) == Vector2D(0, 0)

    def test_add_and_average(self) -> None:
        """avg_dir divides the sum by the contributor count."""
        buf = InfluenceBuffer(2)
        buf.add(1, Vector2D(1, 0))
        buf.add(1, Vector2D(3, 0))
        assert buf.is_influenced(1)
        assert not buf.is_influenced(0)
        assert buf.count(1) == 2
        assert buf.avg_dir(1) == Vector2D(2, 0)

    def test_ensure_len_clears_when_same_length(self) -> None:
        """Keeping the length still wipes previous contributions."""
        buf = InfluenceBuffer(3)
        buf.add(1, Vector2D(1, 2))
        buf.ensure_len(3)
        assert len(buf) == 3
        assert not buf.is_influenced(1)

    def test_ensure_len_resizes(self) -> None:
        """Changing the length yields a zeroed buffer of the new size."""
        buf = InfluenceBuffer(2)
        buf.add(0, Vector2D(1, 0))
        buf.ensure_len(4)
        assert len(buf) == 4
        assert buf.influenced_indices() == []

    def test_influenced_indices(self) -> None:
        """Only slots with contributions are listed, in index order."""
        buf = InfluenceBuffer(4)
        buf.add(2, Vector2D(0, 1))
        buf.add(0, Vector2D(1, 0))
        assert buf.influenced_indices() == [0, 2]
        buf.clear()
        assert buf.influenced_indices() == []

    def test_merge_from(self) -> None:
        """Merging sums directions and counts slot by slot."""
        a = InfluenceBuffer(3)
        b = InfluenceBuffer(3)
        a.add(0, Vector2D(1, 0))
        a.add(1, Vector2D(0, 1))
        b.add(0, Vector2D(2, 0))
        b.add(2, Vector2D(0, 3))

        a.merge_from(b)

        assert a.direction_sum(0) == Vector2D(3, 0)
        assert a.count(0) == 2
        assert a.count(1) == 1
        assert a.direction_sum(2) == Vector2D(0, 3)

    def test_merge_mismatched_lengths(self) -> None:
        """Buffers of different length cannot be merged."""
        with pytest.raises(ValueError):
            InfluenceBuffer(2).merge_from(InfluenceBuffer(3))
