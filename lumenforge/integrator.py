"""
Path tracing entry point.

``trace`` follows one path: find the nearest hit, add what the material
emits, and recurse along the scattered ray until the depth budget runs out
or the material absorbs the path. Camera rays, sample loops and image
accumulation belong to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging
import math

import numpy as np

from .vec3 import Color
from .ray import Ray
from .sampling import make_rng
from .shapes import Hittable

logger = logging.getLogger(__name__)


@dataclass
class TraceSettings:
    """Configuration for the tracer."""
    max_depth: int = 50
    t_min: float = 0.001
    t_max: float = math.inf
    background: Color = None
    seed: Optional[int] = None

    def __post_init__(self):
        if self.background is None:
            self.background = Color(0.0, 0.0, 0.0)
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if not (0.0 <= self.t_min < self.t_max):
            raise ValueError(f"need 0 <= t_min < t_max, got t_min={self.t_min}, t_max={self.t_max}")


def trace(
    ray: Ray,
    scene: Hittable,
    depth: int,
    rng: np.random.Generator,
    background: Optional[Color] = None,
    t_min: float = 0.001,
    t_max: float = math.inf
) -> Color:
    """Compute the radiance carried back along ``ray``.

    Args:
        ray: The ray to trace
        scene: Anything hittable, usually a HittableList or Scene
        depth: Number of further bounces allowed
        rng: Random generator threaded into every scatter call
        background: Radiance for rays that escape the scene (black if None)
        t_min: Lower bound on hit distance, keeps scattered rays off their origin
        t_max: Upper bound on hit distance

    Returns:
        The radiance along the path
    """
    hit = scene.hit(ray, t_min, t_max)
    if hit is None:
        return background if background is not None else Color(0, 0, 0)

    material = hit.material
    if material is None:
        return Color(0, 0, 0)

    emitted = material.emitted(hit.u, hit.v, hit.point)
    if depth <= 0:
        return emitted

    result = material.scatter(ray, hit, rng)
    if result is None:
        return emitted

    return emitted + result.attenuation * trace(
        result.scattered_ray, scene, depth - 1, rng, background, t_min, t_max
    )


class Tracer:
    """Path tracer bound to a configuration and its own random stream."""

    def __init__(self, settings: TraceSettings = None):
        """Create a tracer.

        Args:
            settings: Trace configuration (uses defaults if None)
        """
        self.settings = settings if settings else TraceSettings()
        self.rng = make_rng(self.settings.seed)
        logger.debug("Tracer: max_depth=%d seed=%s", self.settings.max_depth, self.settings.seed)

    def trace(self, ray: Ray, scene: Hittable, depth: Optional[int] = None) -> Color:
        """Trace ``ray`` with the configured depth, bounds and background."""
        s = self.settings
        return trace(
            ray,
            scene,
            s.max_depth if depth is None else depth,
            self.rng,
            background=s.background,
            t_min=s.t_min,
            t_max=s.t_max
        )
