"""
Materials: how a surface scatters or emits light.

Implements:
- Lambertian diffuse
- Metal (mirror reflection with fuzz)
- Dielectric (glass, water - Fresnel-weighted reflection/refraction)
- Diffuse light (emissive, never scatters)
- Isotropic (uniform scattering inside participating media)

Materials are immutable and shared by reference between primitives. All
randomness comes from the generator passed to ``scatter``.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Color, Point3
from .ray import Ray
from .sampling import random_in_unit_sphere, random_unit_vector
from .textures import Texture, as_texture

if TYPE_CHECKING:
    from .shapes import HitRecord


def reflect(v: Vec3, n: Vec3) -> Vec3:
    """Mirror ``v`` about the normal ``n``."""
    return v - n * (2.0 * v.dot(n))


def refract(uv: Vec3, n: Vec3, eta_ratio: float) -> Optional[Vec3]:
    """Refract a unit direction through a surface (Snell's law).

    Args:
        uv: Unit incident direction
        n: Unit normal on the incident side (dot(uv, n) <= 0)
        eta_ratio: Ratio of refractive indices (n_incident / n_transmitted)

    Returns:
        The refracted direction, or None on total internal reflection.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * eta_ratio
    perp_len_sq = r_out_perp.length_squared()
    if perp_len_sq > 1.0:
        return None
    return r_out_perp - n * math.sqrt(1.0 - perp_len_sq)


def schlick(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation of Fresnel reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color
    is_specular: bool = False


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The surface interaction being shaded
            rng: Random generator for any stochastic choice

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        """Return emitted light color. Default is no emission."""
        return Color(0, 0, 0)


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Union[Color, Texture]):
        """Create a Lambertian material.

        Args:
            albedo: Base color, or a texture sampled at the hit point
        """
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + random_unit_vector(rng)

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction, ray_in.time),
            attenuation=self.albedo.value(hit.u, hit.v, hit.point),
            is_specular=False
        )


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Perturbation radius, clamped to [0, 1] (0 = mirror)
        """
        self.albedo = albedo
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        reflected = reflect(ray_in.direction.normalize(), hit.normal)
        if self.fuzz > 0:
            reflected = reflected + random_in_unit_sphere(rng) * self.fuzz

        # A ray perturbed into the surface is absorbed
        if reflected.dot(hit.normal) <= 0:
            return None

        return ScatterResult(
            scattered_ray=Ray(hit.point, reflected, ray_in.time),
            attenuation=self.albedo,
            is_specular=True
        )


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ref_idx: float = 1.5):
        """Create a dielectric material.

        Args:
            ref_idx: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ref_idx = ref_idx

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        unit_direction = ray_in.direction.normalize()

        # Work with the normal on the incident side; primitives that do not
        # flip their normals report it on either side.
        normal = hit.normal if unit_direction.dot(hit.normal) < 0 else -hit.normal
        refraction_ratio = 1.0 / self.ref_idx if hit.front_face else self.ref_idx

        cos_theta = min(-unit_direction.dot(normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        direction = None
        cannot_refract = refraction_ratio * sin_theta > 1.0
        if not cannot_refract and float(rng.random()) >= schlick(cos_theta, self.ref_idx):
            direction = refract(unit_direction, normal, refraction_ratio)
        if direction is None:
            # Mirror the incoming direction as given, keeping its length
            direction = reflect(ray_in.direction, normal)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction, ray_in.time),
            attenuation=Color(1.0, 1.0, 1.0),
            is_specular=True
        )


class DiffuseLight(Material):
    """Light-emitting material. Absorbs everything it is hit by."""

    def __init__(self, emit: Union[Color, Texture]):
        """Create an emissive material.

        Args:
            emit: Emitted radiance, as a color or a texture
        """
        self.emit = as_texture(emit)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        return None

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        return self.emit.value(u, v, point)


class Isotropic(Material):
    """Scatters uniformly in all directions; the phase material of fog and smoke."""

    def __init__(self, albedo: Union[Color, Texture]):
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, hit: HitRecord, rng: np.random.Generator) -> Optional[ScatterResult]:
        return ScatterResult(
            scattered_ray=Ray(hit.point, random_in_unit_sphere(rng), ray_in.time),
            attenuation=self.albedo.value(hit.u, hit.v, hit.point),
            is_specular=False
        )
