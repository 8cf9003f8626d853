"""
Attractor spawn shapes.

Provides three placement regions, each sampled uniformly by area:
- rectangle: axis-aligned box given by half extents
- oval: ellipse given by its two radii ('circle' is an oval with equal radii)
- annulus: ring between an inner and an outer radius
"""

from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple
import numpy as np

from .vector import Vector2D


SpawnShape = Literal['rectangle', 'oval', 'circle', 'annulus']

SPAWN_SHAPES = ('rectangle', 'oval', 'circle', 'annulus')


@dataclass
class SpawnRequest:
    shape: SpawnShape = 'oval'
    center: Tuple[float, float] = (0.0, 120.0)
    count: int = 1000
    half_extents: Tuple[float, float] = (50.0, 50.0)
    radii: Tuple[float, float] = (100.0, 100.0)
    inner_radius: float = 60.0
    outer_radius: float = 100.0

    @classmethod
    def from_config(cls, config, shape: SpawnShape = 'oval',
                    center: Tuple[float, float] = (0.0, 120.0),
                    count: Optional[int] = None) -> 'SpawnRequest':
        """Build a request whose extents come from an SCAConfig."""
        inner, outer = config.spawn_annulus_radii
        return cls(
            shape=shape,
            center=tuple(center),
            count=config.spawn_attractors if count is None else count,
            half_extents=config.spawn_rect_half_extents,
            radii=config.spawn_oval_radii,
            inner_radius=inner,
            outer_radius=outer,
        )


def sample_rectangle(rng: np.random.Generator, center, half_extents, count: int) -> np.ndarray:
    cx, cy = center
    hx, hy = half_extents
    xs = rng.uniform(cx - hx, cx + hx, size=count)
    ys = rng.uniform(cy - hy, cy + hy, size=count)
    return np.column_stack([xs, ys])


def sample_oval(rng: np.random.Generator, center, radii, count: int) -> np.ndarray:
    """Uniform points inside an ellipse (sqrt keeps the density flat)."""
    cx, cy = center
    rx, ry = radii
    theta = rng.uniform(0.0, 2.0 * np.pi, size=count)
    r = np.sqrt(rng.uniform(0.0, 1.0, size=count))
    return np.column_stack([cx + rx * r * np.cos(theta), cy + ry * r * np.sin(theta)])


def sample_annulus(rng: np.random.Generator, center, inner_radius: float,
                   outer_radius: float, count: int) -> np.ndarray:
    """Uniform points in the ring inner_radius <= r <= outer_radius."""
    if inner_radius > outer_radius:
        raise ValueError(f"inner_radius {inner_radius} exceeds outer_radius {outer_radius}")
    cx, cy = center
    theta = rng.uniform(0.0, 2.0 * np.pi, size=count)
    r = np.sqrt(rng.uniform(inner_radius ** 2, outer_radius ** 2, size=count))
    return np.column_stack([cx + r * np.cos(theta), cy + r * np.sin(theta)])


def sample_positions(request: SpawnRequest, rng: np.random.Generator) -> List[Vector2D]:
    """
    Sample attractor positions for a spawn request.

    Args:
        request: shape, center, count and shape extents
        rng: numpy random generator, owned by the caller for reproducibility
    """
    if request.count < 0:
        raise ValueError(f"count must be non-negative, got {request.count}")
    if request.shape not in SPAWN_SHAPES:
        raise ValueError(f"Unknown spawn shape {request.shape!r}, expected one of {SPAWN_SHAPES}")
    if request.count == 0:
        return []

    if request.shape == 'rectangle':
        points = sample_rectangle(rng, request.center, request.half_extents, request.count)
    elif request.shape == 'annulus':
        points = sample_annulus(rng, request.center, request.inner_radius,
                                request.outer_radius, request.count)
    else:
        radii = request.radii
        if request.shape == 'circle':
            radii = (radii[0], radii[0])
        points = sample_oval(rng, request.center, radii, request.count)

    return [Vector2D(x, y) for x, y in points]
