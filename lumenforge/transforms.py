"""
Instancing wrappers.

Each wrapper holds another Hittable and is a Hittable itself, so wrappers,
aggregates and primitives compose freely. The wrapped object's normal
convention is preserved: a wrapper moves or rotates the reported normal,
it never re-orients it towards the ray.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .shapes import AABB, HitRecord, Hittable


class FlipFace(Hittable):
    """Reports the wrapped object's hits with the normal reversed."""

    def __init__(self, obj: Hittable):
        self.obj = obj

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        rec = self.obj.hit(ray, t_min, t_max)
        if rec is None:
            return None
        return replace(rec, normal=-rec.normal, front_face=not rec.front_face)

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        return self.obj.bounding_box(time0, time1)

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        return self.obj.pdf_value(origin, direction)

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        return self.obj.random(origin, rng)


class Translate(Hittable):
    """The wrapped object moved by a fixed offset."""

    def __init__(self, obj: Hittable, offset: Vec3):
        self.obj = obj
        self.offset = offset

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        rec = self.obj.hit(moved, t_min, t_max)
        if rec is None:
            return None
        return replace(rec, point=rec.point + self.offset)

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        box = self.obj.bounding_box(time0, time1)
        if box is None:
            return None
        return AABB(box.minimum + self.offset, box.maximum + self.offset)

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        return self.obj.pdf_value(origin - self.offset, direction)

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        return self.obj.random(origin - self.offset, rng)


class RotateY(Hittable):
    """The wrapped object rotated about the y axis.

    The bounding box is computed once, from the eight rotated corners of the
    wrapped object's box.
    """

    def __init__(self, obj: Hittable, angle: float):
        """Create a rotated instance.

        Args:
            obj: The object to rotate
            angle: Rotation angle in degrees (counter-clockwise seen from +y)
        """
        self.obj = obj
        self.angle = angle
        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)
        self.bbox = self._rotated_box(obj.bounding_box(0.0, 1.0))

    def _rotated_box(self, box: Optional[AABB]) -> Optional[AABB]:
        if box is None:
            return None

        lo = np.full(3, math.inf)
        hi = np.full(3, -math.inf)
        for x in (box.minimum.x, box.maximum.x):
            for y in (box.minimum.y, box.maximum.y):
                for z in (box.minimum.z, box.maximum.z):
                    corner = self._to_world(Vec3(x, y, z)).to_array()
                    lo = np.minimum(lo, corner)
                    hi = np.maximum(hi, corner)

        return AABB(Vec3.from_array(lo), Vec3.from_array(hi))

    def _to_object(self, v: Vec3) -> Vec3:
        return Vec3(
            self.cos_theta * v.x - self.sin_theta * v.z,
            v.y,
            self.sin_theta * v.x + self.cos_theta * v.z
        )

    def _to_world(self, v: Vec3) -> Vec3:
        return Vec3(
            self.cos_theta * v.x + self.sin_theta * v.z,
            v.y,
            -self.sin_theta * v.x + self.cos_theta * v.z
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        rotated = Ray(self._to_object(ray.origin), self._to_object(ray.direction), ray.time)
        rec = self.obj.hit(rotated, t_min, t_max)
        if rec is None:
            return None
        return replace(rec, point=self._to_world(rec.point), normal=self._to_world(rec.normal))

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        return self.bbox

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        # Rotation preserves solid angle, so the density carries over as is
        return self.obj.pdf_value(self._to_object(origin), self._to_object(direction))

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        return self._to_world(self.obj.random(self._to_object(origin), rng))
