"""
Geometric shapes for the tracer.

Each shape implements the Hittable contract: ``hit``, ``bounding_box``,
``pdf_value`` and ``random``. ``HittableList`` implements the same contract
by delegating to its members, so aggregates nest inside aggregates.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .errors import EmptySceneError
from .sampling import ONB, random_to_sphere, random_unit_vector

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The surface normal reported by the primitive
        t: The ray parameter at intersection
        front_face: True if the ray arrived against the outward normal.
            Required: materials read it to tell entering from leaving, and
            the reported normal alone cannot say which.
        material: The material at the hit point
        u, v: Texture coordinates at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Optional[Material] = None
    u: float = 0.0
    v: float = 0.0

    @staticmethod
    def face_normal(ray: Ray, outward_normal: Vec3) -> tuple[bool, Vec3]:
        """Orient a geometric normal against the ray.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface

        Returns:
            (front_face, normal) with the normal facing the ray's origin
        """
        front_face = ray.direction.dot(outward_normal) < 0
        return front_face, outward_normal if front_face else -outward_normal


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures."""

    def __init__(self, minimum: Point3, maximum: Point3):
        """Create an AABB from corner points.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values
        """
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Test if ray intersects this AABB using slab method."""
        for i in range(3):
            d = ray.direction[i]
            if d == 0:
                if ray.origin[i] < self.minimum[i] or ray.origin[i] > self.maximum[i]:
                    return False
                continue

            inv_d = 1.0 / d
            t0 = (self.minimum[i] - ray.origin[i]) * inv_d
            t1 = (self.maximum[i] - ray.origin[i]) * inv_d

            if inv_d < 0:
                t0, t1 = t1, t0

            t_min = max(t0, t_min)
            t_max = min(t1, t_max)

            if t_max <= t_min:
                return False

        return True

    @staticmethod
    def surrounding_box(box0: AABB, box1: AABB) -> AABB:
        """Return the AABB that contains both input boxes."""
        small = Vec3.from_array(np.minimum(box0.minimum.to_array(), box1.minimum.to_array()))
        big = Vec3.from_array(np.maximum(box0.maximum.to_array(), box1.maximum.to_array()))
        return AABB(small, big)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __repr__(self) -> str:
        return f"AABB(min={self.minimum}, max={self.maximum})"


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Exclusive lower bound on t (avoids self-intersection)
            t_max: Exclusive upper bound on t

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass

    @abstractmethod
    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Get the axis-aligned bounding box over the time interval.

        Returns:
            AABB if the object is bounded, None otherwise
        """
        pass

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        """Density of sampling ``direction`` from ``origin`` towards this object."""
        return 0.0

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        """Sample a direction from ``origin`` towards this object."""
        return Vec3(1, 0, 0)


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (can be negative for inward normals)
            material: Material for shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.point_at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-half_b - sqrtd) / a
        if root <= t_min or root >= t_max:
            root = (-half_b + sqrtd) / a
            if root <= t_min or root >= t_max:
                return None

        point = ray.point_at(root)
        outward_normal = (point - self.center) / self.radius
        u, v = self._get_sphere_uv(outward_normal)

        front_face, normal = HitRecord.face_normal(ray, outward_normal)

        return HitRecord(
            point=point,
            normal=normal,
            t=root,
            front_face=front_face,
            material=self.material,
            u=u,
            v=v
        )

    @staticmethod
    def _get_sphere_uv(point: Vec3) -> tuple[float, float]:
        """Get spherical UV coordinates for a point on the unit sphere.

        u: returned value [0,1] of angle around the Y axis from X=-1
        v: returned value [0,1] of angle from Y=-1 to Y=+1
        """
        theta = math.acos(max(-1.0, min(1.0, -point.y)))
        phi = math.atan2(-point.z, point.x) + math.pi

        u = phi / (2 * math.pi)
        v = theta / math.pi
        return u, v

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Return the AABB containing this sphere."""
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        return AABB(self.center - r_vec, self.center + r_vec)

    def _contains(self, origin: Point3) -> bool:
        return (self.center - origin).length_squared() <= self.radius * self.radius

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        """Uniform density over the solid angle the sphere subtends.

        From inside the sphere every direction hits it, so the density is
        uniform over the whole sphere of directions.
        """
        if self.hit(Ray(origin, direction), 0.001, math.inf) is None:
            return 0.0
        if self._contains(origin):
            return 1.0 / (4.0 * math.pi)

        distance_squared = (self.center - origin).length_squared()
        cos_theta_max = math.sqrt(1.0 - self.radius * self.radius / distance_squared)
        solid_angle = 2.0 * math.pi * (1.0 - cos_theta_max)
        if solid_angle <= 0.0:
            return 0.0
        return 1.0 / solid_angle

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        if self._contains(origin):
            return random_unit_vector(rng)

        direction = self.center - origin
        uvw = ONB(direction)
        return uvw.local_vec(random_to_sphere(self.radius, direction.length_squared(), rng))

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class HittableList(Hittable):
    """A collection of hittable objects, itself hittable.

    Members keep their insertion order. Intersection is a linear scan that
    shrinks the search window to the closest hit found so far.
    """

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Return the AABB containing all objects.

        None if the list is empty or any member is unbounded.
        """
        output_box: Optional[AABB] = None

        for obj in self.objects:
            box = obj.bounding_box(time0, time1)
            if box is None:
                return None
            output_box = box if output_box is None else AABB.surrounding_box(output_box, box)

        return output_box

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        """Average of the member densities (uniform member selection)."""
        if not self.objects:
            return 0.0

        weight = 1.0 / len(self.objects)
        return sum(weight * obj.pdf_value(origin, direction) for obj in self.objects)

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        """Pick a member uniformly and sample towards it.

        Must stay in step with ``pdf_value``, which assumes each member is
        chosen with probability 1/n.
        """
        if not self.objects:
            raise EmptySceneError("cannot sample a direction from an empty aggregate")

        index = int(rng.integers(0, len(self.objects)))
        return self.objects[index].random(origin, rng)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
