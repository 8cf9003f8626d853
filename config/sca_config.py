"""
Configuration for the Space Colonization simulation engine.
"""

from dataclasses import dataclass, asdict, fields
from typing import Tuple, Optional, Literal
from pathlib import Path
import json
import math

NeighborMode = Literal['global', 'local']

NEIGHBOR_MODES = ('global', 'local')


class InvalidConfig(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass
class SCAConfig:
    # k-th nearest lookups (1 = nearest)
    attract_from_kn: int = 1
    kill_from_kn: int = 1

    influence_radius: float = 60.0
    kill_radius: float = 5.0
    step_len: float = 2.0
    tropism: Tuple[float, float] = (0.0, 0.0)

    # Candidates closer than this to an existing child of the same parent are dropped
    min_child_spacing: float = 0.1

    # 'global' ranks every node, 'local' only nodes inside the lookup radius
    neighbor_mode: NeighborMode = 'global'

    root_radius: float = 1.0

    # Spawn shapes, only read by the spawn collaborator
    spawn_attractors: int = 1000
    spawn_rect_half_extents: Tuple[float, float] = (50.0, 50.0)
    spawn_oval_radii: Tuple[float, float] = (100.0, 100.0)
    spawn_annulus_radii: Tuple[float, float] = (60.0, 100.0)

    # Tick driver
    cycles_per_tick: int = 1
    max_iterations: Optional[int] = 800
    stall_window: Optional[int] = 100  # Stop if no attractors die for this many cycles

    log_interval: int = 50
    profile: bool = False
    random_seed: Optional[int] = None

    def __post_init__(self):
        # JSON hands back lists
        for name in ('tropism', 'spawn_rect_half_extents', 'spawn_oval_radii', 'spawn_annulus_radii'):
            value = getattr(self, name)
            if isinstance(value, list):
                setattr(self, name, tuple(value))

    def validate(self) -> 'SCAConfig':
        """Check every value; raise InvalidConfig naming the first bad field."""
        for name in ('attract_from_kn', 'kill_from_kn', 'cycles_per_tick'):
            _require_positive_int(name, getattr(self, name))

        for name in ('max_iterations', 'stall_window'):
            value = getattr(self, name)
            if value is not None:
                _require_positive_int(name, value)

        for name in ('influence_radius', 'kill_radius', 'step_len',
                     'min_child_spacing', 'root_radius'):
            _require_positive_float(name, getattr(self, name))

        _require_vector('tropism', self.tropism)

        for name in ('spawn_rect_half_extents', 'spawn_oval_radii', 'spawn_annulus_radii'):
            value = getattr(self, name)
            _require_vector(name, value)
            if value[0] < 0 or value[1] < 0:
                raise InvalidConfig(f"{name} must be non-negative, got {value}")

        inner, outer = self.spawn_annulus_radii
        if inner > outer:
            raise InvalidConfig(
                f"spawn_annulus_radii inner radius {inner} exceeds outer radius {outer}"
            )

        if isinstance(self.spawn_attractors, bool) or not isinstance(self.spawn_attractors, int) \
                or self.spawn_attractors < 0:
            raise InvalidConfig(f"spawn_attractors must be a non-negative integer, got {self.spawn_attractors!r}")

        if isinstance(self.log_interval, bool) or not isinstance(self.log_interval, int) \
                or self.log_interval < 0:
            raise InvalidConfig(f"log_interval must be a non-negative integer, got {self.log_interval!r}")

        if self.neighbor_mode not in NEIGHBOR_MODES:
            raise InvalidConfig(
                f"neighbor_mode must be one of {NEIGHBOR_MODES}, got {self.neighbor_mode!r}"
            )

        return self

    @property
    def influence_radius_sq(self) -> float:
        return self.influence_radius * self.influence_radius

    @property
    def kill_radius_sq(self) -> float:
        return self.kill_radius * self.kill_radius

    @property
    def local_neighbors(self) -> bool:
        return self.neighbor_mode == 'local'


def _require_positive_int(name: str, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfig(f"{name} must be a positive integer, got {value!r}")


def _require_positive_float(name: str, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfig(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfig(f"{name} must be positive, got {value!r}")


def _require_vector(name: str, value):
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise InvalidConfig(f"{name} must have two components, got {value!r}")
    for component in value:
        if isinstance(component, bool) or not isinstance(component, (int, float)) \
                or not math.isfinite(component):
            raise InvalidConfig(f"{name} must hold finite numbers, got {value!r}")


def load_config(path: str = 'config/sca.json') -> SCAConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        return SCAConfig()

    with open(config_path, 'r') as f:
        data = json.load(f)

    known = {f.name for f in fields(SCAConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfig(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    return SCAConfig(**data)


def save_config(config: SCAConfig, path: str = 'config/sca.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = asdict(config)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = list(value)

    with open(config_path, 'w') as f:
        json.dump(data, f, indent=2)

    print(f"Saved config to {config_path}")
