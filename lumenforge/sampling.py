"""
Random sampling utilities for Monte Carlo light transport.

Every sampler takes an explicit ``numpy.random.Generator`` instead of
reaching for a global source, so a caller that seeds its generator gets
reproducible paths and each worker can own an independent stream.
"""

from __future__ import annotations
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random generator, seeded when ``seed`` is given."""
    return np.random.default_rng(seed)


def random_double(rng: np.random.Generator, lo: float = 0.0, hi: float = 1.0) -> float:
    """Uniform scalar in [lo, hi)."""
    return lo + (hi - lo) * float(rng.random())


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Uniform point on the unit sphere surface.

    Uses the z = 2u - 1, phi = 2*pi*v parameterization, so it needs exactly
    two draws and never rejects.
    """
    a = 2.0 * math.pi * float(rng.random())
    z = 2.0 * float(rng.random()) - 1.0
    r = math.sqrt(max(0.0, 1.0 - z * z))
    return Vec3(r * math.cos(a), r * math.sin(a), z)


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Uniform point strictly inside the unit ball (rejection sampling)."""
    while True:
        p = Vec3.from_array(rng.uniform(-1.0, 1.0, 3))
        if p.length_squared() < 1.0:
            return p


def random_in_hemisphere(normal: Vec3, rng: np.random.Generator) -> Vec3:
    """Point in the unit ball on the same side as ``normal``."""
    in_unit_sphere = random_in_unit_sphere(rng)
    if in_unit_sphere.dot(normal) > 0.0:
        return in_unit_sphere
    return -in_unit_sphere


def random_to_sphere(radius: float, distance_squared: float, rng: np.random.Generator) -> Vec3:
    """Sample a direction inside the cone subtended by a sphere.

    The result is expressed in a local frame whose +z axis points at the
    sphere's centre; combine with :class:`ONB` to move it to world space.
    A sampling point on or inside the sphere gets the whole +z hemisphere.

    Args:
        radius: Sphere radius
        distance_squared: Squared distance from the sampling point to the centre
        rng: Random generator
    """
    r1 = float(rng.random())
    r2 = float(rng.random())
    if distance_squared <= radius * radius:
        cos_theta_max = 0.0
    else:
        cos_theta_max = math.sqrt(1.0 - radius * radius / distance_squared)
    z = 1.0 + r2 * (cos_theta_max - 1.0)

    phi = 2.0 * math.pi * r1
    sin_theta = math.sqrt(max(0.0, 1.0 - z * z))
    return Vec3(math.cos(phi) * sin_theta, math.sin(phi) * sin_theta, z)


class ONB:
    """Orthonormal basis built around a single axis (the local +z)."""

    __slots__ = ('u', 'v', 'w')

    def __init__(self, w: Vec3):
        self.w = w.normalize()
        a = Vec3(0, 1, 0) if abs(self.w.x) > 0.9 else Vec3(1, 0, 0)
        self.v = self.w.cross(a).normalize()
        self.u = self.w.cross(self.v)

    def local(self, a: float, b: float, c: float) -> Vec3:
        return self.u * a + self.v * b + self.w * c

    def local_vec(self, vec: Vec3) -> Vec3:
        """Transform a local-frame vector to world space."""
        return self.local(vec.x, vec.y, vec.z)
