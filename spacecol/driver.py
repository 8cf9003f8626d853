"""
Simulation - owns one tree and one attractor cloud and advances them tick by tick.

A tick runs ``cycles_per_tick`` phase cycles (attract -> grow -> kill) and
then checks, in this order, whether the run is over:

    EXHAUSTED       no attractor is alive
    MAX_ITERATIONS  the phase-cycle budget is spent
    STOPPED         request_stop() was called
    STALLED         no attractor died for ``stall_window`` consecutive cycles

A fired condition is latched: later ticks do no work and report it again
until the caller resets, clears or resumes the simulation.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Tuple
import numpy as np

from config import SCAConfig
from .attractor import AttractorSet
from .tree import Tree
from .shapes import SpawnRequest, SpawnShape, sample_positions
from .phases import attraction_phase, growth_phase, kill_phase
from .profiling import profile_block, profiling


DEFAULT_SEEDS = ((0.0, 0.0),)


class TerminalCondition(Enum):
    EXHAUSTED = 'exhausted'
    MAX_ITERATIONS = 'max_iterations'
    STOPPED = 'stopped'
    STALLED = 'stalled'


@dataclass(frozen=True)
class TickSummary:
    tick: int
    cycles: int
    nodes_added: Tuple[int, ...]
    attractors_killed_count: int
    terminal_condition: Optional[TerminalCondition] = None


class NodeView(NamedTuple):
    index: int
    position: Tuple[float, float]
    radius: float
    parent: Optional[int]
    children: Tuple[int, ...]


class AttractorView(NamedTuple):
    index: int
    position: Tuple[float, float]
    alive: bool
    owner: Optional[int]


@dataclass(frozen=True)
class Snapshot:
    nodes: Tuple[NodeView, ...]
    edges: Tuple[Tuple[int, int], ...]
    attractors: Tuple[AttractorView, ...]
    tick: int
    iteration: int
    last_new_ids: Tuple[int, ...]
    terminal: Optional[TerminalCondition]

    @property
    def alive_attractors(self) -> int:
        return sum(1 for a in self.attractors if a.alive)

    def segments(self) -> List[tuple]:
        """All links as ((x1, y1), (x2, y2)) tuples for drawing."""
        return [
            (self.nodes[parent].position, self.nodes[child].position)
            for parent, child in self.edges
        ]


class Simulation:
    def __init__(self, config: Optional[SCAConfig] = None):
        config = SCAConfig() if config is None else config
        self.config = replace(config.validate())

        self.rng = np.random.default_rng(self.config.random_seed)
        self.tree = Tree()
        self.attractors = AttractorSet()
        self._reset_counters()

    def _reset_counters(self):
        self._tick = 0
        self._iteration = 0
        self._stall_counter = 0
        self._stop_requested = False
        self._terminal: Optional[TerminalCondition] = None
        self._last_new_ids: Tuple[int, ...] = ()
        self.kill_history: List[int] = []

    # ------------------------------------------------------------------ setup

    def configure(self, config: SCAConfig):
        """Validate and install a new parameter set; the old one stays on failure."""
        self.config = replace(config.validate())

    def reset(self, seed_positions=None, spawn_request: Optional[SpawnRequest] = None):
        """
        Discard the current state and rebuild it.

        Args:
            seed_positions: root positions, defaults to a single root at the origin
            spawn_request: attractor cloud to spawn, defaults to an oval above the origin
        """
        self.rng = np.random.default_rng(self.config.random_seed)
        self.tree = Tree()
        self.attractors = AttractorSet()
        self._reset_counters()

        for position in (DEFAULT_SEEDS if seed_positions is None else seed_positions):
            self.spawn_root(position)

        if spawn_request is None:
            spawn_request = SpawnRequest.from_config(self.config)
        self.spawn_request(spawn_request)

    def clear(self):
        self.tree.clear()
        self.attractors.clear()
        self._reset_counters()

    def spawn_root(self, position) -> int:
        return self.tree.add_root(position, self.config.root_radius)

    def spawn_attractors(self, shape: SpawnShape = 'oval', center=(0.0, 120.0),
                         count: Optional[int] = None, **params) -> List[int]:
        """Spawn a cloud; shape extents not given in ``params`` come from the config."""
        request = SpawnRequest.from_config(self.config, shape=shape, center=center, count=count)
        if params:
            request = replace(request, **params)
        return self.spawn_request(request)

    def spawn_request(self, request: SpawnRequest) -> List[int]:
        indices = self.attractors.extend(sample_positions(request, self.rng))
        if indices and self._terminal is TerminalCondition.EXHAUSTED:
            self._terminal = None
        return indices

    def add_attractor(self, position) -> int:
        index = self.attractors.append(position)
        if self._terminal is TerminalCondition.EXHAUSTED:
            self._terminal = None
        return index

    def move_attractor(self, index: int, position):
        self.attractors.move(index, position)

    # --------------------------------------------------------------- control

    def request_stop(self):
        """Ask the run to stop; honoured at the end of the next tick."""
        self._stop_requested = True

    def resume(self):
        """Forget a fired condition so the caller can keep going regardless."""
        self._terminal = None
        self._stop_requested = False
        self._stall_counter = 0

    def _cycle_budget(self) -> int:
        if self.config.max_iterations is None:
            return self.config.cycles_per_tick
        return max(0, min(self.config.cycles_per_tick, self.config.max_iterations - self._iteration))

    def _check_terminal(self) -> Optional[TerminalCondition]:
        cfg = self.config
        if not self.attractors.any_alive():
            return TerminalCondition.EXHAUSTED
        if cfg.max_iterations is not None and self._iteration >= cfg.max_iterations:
            return TerminalCondition.MAX_ITERATIONS
        if self._stop_requested:
            return TerminalCondition.STOPPED
        if cfg.stall_window is not None and self._stall_counter >= cfg.stall_window:
            return TerminalCondition.STALLED
        return None

    def run_tick(self) -> TickSummary:
        """Run one tick of phase cycles and report what changed."""
        if self._terminal is not None:
            return TickSummary(self._tick, 0, (), 0, self._terminal)

        new_ids: List[int] = []
        killed = 0
        cycles = 0

        for _ in range(self._cycle_budget()):
            if not self.attractors.any_alive():
                break

            with profiling(self.config.profile), profile_block('phase_cycle'):
                attraction_phase(self.tree, self.attractors, self.config)
                growth = growth_phase(self.tree, self.config)
                kills = kill_phase(self.tree, self.attractors, self.config)

            cycles += 1
            self._iteration += 1
            new_ids.extend(growth.new_ids)
            killed += kills.count
            self.kill_history.append(kills.count)

            if kills.count:
                self._stall_counter = 0
            else:
                self._stall_counter += 1

        self._tick += 1
        self._last_new_ids = tuple(new_ids)
        self._terminal = self._check_terminal()

        return TickSummary(self._tick, cycles, self._last_new_ids, killed, self._terminal)

    def run(self, callback: Optional[Callable[['Simulation', TickSummary], None]] = None) -> TerminalCondition:
        """
        Tick until a terminal condition fires.
        Optional callback is called after each tick with (simulation, summary).
        Returns the condition that ended the run.
        """
        print(f"Starting growth with {len(self.tree)} nodes and "
              f"{self.attractors.alive_count()} attractors...")

        log_interval = self.config.log_interval
        while True:
            summary = self.run_tick()

            if callback:
                callback(self, summary)

            if log_interval and summary.cycles and summary.tick % log_interval == 0:
                print(f"  Tick {summary.tick}: {len(self.tree)} nodes, "
                      f"{self.attractors.alive_count()} attractors remaining")

            if summary.terminal_condition is not None:
                break

        if summary.terminal_condition is TerminalCondition.STALLED:
            print(f"Growth stopped due to stall (no attractors died for "
                  f"{self.config.stall_window} cycles)")
        print(f"Growth finished ({summary.terminal_condition.value}) after {self._iteration} cycles "
              f"in {self._tick} ticks")
        print(f"  Final nodes: {len(self.tree)}")
        print(f"  Remaining attractors: {self.attractors.alive_count()}")

        return summary.terminal_condition

    # ----------------------------------------------------------------- views

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def stall_counter(self) -> int:
        return self._stall_counter

    @property
    def terminal(self) -> Optional[TerminalCondition]:
        return self._terminal

    @property
    def last_new_ids(self) -> Tuple[int, ...]:
        return self._last_new_ids

    @property
    def node_count(self) -> int:
        return len(self.tree)

    @property
    def alive_attractors(self) -> int:
        return self.attractors.alive_count()

    def snapshot(self) -> Snapshot:
        nodes = tuple(
            NodeView(n.index, n.position.to_tuple(), n.radius, n.parent, tuple(n.children))
            for n in self.tree
        )
        attractors = tuple(
            AttractorView(i, a.position.to_tuple(), a.alive, a.owner)
            for i, a in enumerate(self.attractors)
        )
        return Snapshot(
            nodes=nodes,
            edges=tuple(self.tree.edges()),
            attractors=attractors,
            tick=self._tick,
            iteration=self._iteration,
            last_new_ids=self._last_new_ids,
            terminal=self._terminal,
        )
