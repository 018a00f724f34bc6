"""
Volumetric effects for the tracer.

Implements constant density participating media (fog, smoke) bounded by
any closed Hittable. Scattering inside the medium uses the Isotropic
material.
"""

from __future__ import annotations
from typing import Optional, Union
import logging
import math

import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .errors import GeometryError
from .materials import Isotropic
from .sampling import make_rng
from .shapes import AABB, HitRecord, Hittable
from .textures import Texture

logger = logging.getLogger(__name__)


class ConstantMedium(Hittable):
    """A constant density participating medium.

    A ray that enters the boundary travels an exponentially distributed
    free-flight distance before scattering; if that distance exceeds the
    chord through the boundary the ray passes through untouched.

    ``hit`` has no generator argument, so the medium owns the stream it
    draws free-flight distances from. Give each worker its own medium
    generator when tracing in parallel.
    """

    def __init__(
        self,
        boundary: Hittable,
        density: float,
        albedo: Union[Color, Texture],
        rng: Optional[np.random.Generator] = None
    ):
        """Create a constant density medium.

        Args:
            boundary: Closed shape that defines the medium's extent
            density: Density of the medium (higher = more opaque), must be > 0
            albedo: Color or texture of the medium
            rng: Random generator for free-flight sampling
        """
        if density <= 0:
            raise GeometryError(f"medium density must be positive, got {density}")

        self.boundary = boundary
        self.density = density
        self.neg_inv_density = -1.0 / density
        self.phase_material = Isotropic(albedo)
        self.rng = rng if rng is not None else make_rng()
        logger.debug("ConstantMedium: density=%g boundary=%r", density, boundary)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Sample a scattering event inside the medium."""
        # Entry and exit points along the full line
        hit1 = self.boundary.hit(ray, -math.inf, math.inf)
        if hit1 is None:
            return None

        hit2 = self.boundary.hit(ray, hit1.t + 0.0001, math.inf)
        if hit2 is None:
            return None

        t_enter = max(hit1.t, t_min)
        t_exit = min(hit2.t, t_max)
        if t_enter >= t_exit:
            return None
        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - U lies in (0, 1], keeping the log finite
        hit_distance = self.neg_inv_density * math.log(1.0 - float(self.rng.random()))

        if hit_distance > distance_inside_boundary:
            return None

        t = t_enter + hit_distance / ray_length
        return HitRecord(
            point=ray.point_at(t),
            normal=Vec3(1, 0, 0),  # Arbitrary, not used for volumes
            t=t,
            front_face=True,
            material=self.phase_material
        )

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        return self.boundary.bounding_box(time0, time1)
