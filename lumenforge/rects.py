"""
Axis-aligned rectangles and boxes.

A rectangle lies in the plane ``axis == k`` and spans ``[a0, a1] x [b0, b1]``
on the other two axes. Its normal is the fixed +axis unit vector and is
not flipped towards the incoming ray; ``front_face`` still records which
side was struck.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .errors import GeometryError
from .shapes import AABB, HitRecord, Hittable, HittableList
from .transforms import FlipFace

if TYPE_CHECKING:
    from .materials import Material

# Half thickness given to the degenerate axis of a rectangle's bounding box
PAD = 1e-4


class AxisAlignedRect(Hittable):
    """Common intersection logic for the three rectangle orientations.

    Subclasses set ``_k_axis`` (the constant axis) and ``_a_axis``/``_b_axis``
    (the in-plane axes that map to u and v).
    """

    _k_axis = 2
    _a_axis = 0
    _b_axis = 1

    def __init__(
        self,
        a0: float,
        a1: float,
        b0: float,
        b1: float,
        k: float,
        material: Optional[Material] = None
    ):
        if a0 >= a1 or b0 >= b1:
            raise GeometryError(
                f"{type(self).__name__} extents must satisfy lo < hi, "
                f"got [{a0}, {a1}] x [{b0}, {b1}]"
            )
        self.a0 = float(a0)
        self.a1 = float(a1)
        self.b0 = float(b0)
        self.b1 = float(b1)
        self.k = float(k)
        self.material = material

        normal = np.zeros(3)
        normal[self._k_axis] = 1.0
        self.normal = Vec3.from_array(normal)

    @property
    def area(self) -> float:
        return (self.a1 - self.a0) * (self.b1 - self.b0)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Intersect the rectangle's plane, then test the in-plane extents."""
        d = ray.direction[self._k_axis]
        if d == 0.0:
            # Parallel to the plane: t would be +/-inf (or nan on the plane)
            return None

        t = (self.k - ray.origin[self._k_axis]) / d
        if not (t_min < t < t_max):
            return None

        a = ray.origin[self._a_axis] + t * ray.direction[self._a_axis]
        b = ray.origin[self._b_axis] + t * ray.direction[self._b_axis]
        if a < self.a0 or a > self.a1 or b < self.b0 or b > self.b1:
            return None

        return HitRecord(
            point=ray.point_at(t),
            normal=self.normal,
            t=t,
            front_face=d < 0,
            material=self.material,
            u=(a - self.a0) / (self.a1 - self.a0),
            v=(b - self.b0) / (self.b1 - self.b0)
        )

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        """Rectangle extents, padded on the constant axis so no side is zero."""
        lo = np.empty(3)
        hi = np.empty(3)
        lo[self._a_axis], hi[self._a_axis] = self.a0, self.a1
        lo[self._b_axis], hi[self._b_axis] = self.b0, self.b1
        lo[self._k_axis], hi[self._k_axis] = self.k - PAD, self.k + PAD
        return AABB(Vec3.from_array(lo), Vec3.from_array(hi))

    def pdf_value(self, origin: Point3, direction: Vec3) -> float:
        """Solid-angle density of uniformly sampling a point on the rectangle."""
        rec = self.hit(Ray(origin, direction), 0.001, math.inf)
        if rec is None:
            return 0.0

        distance_squared = rec.t * rec.t * direction.length_squared()
        cosine = abs(direction.dot(rec.normal) / direction.length())
        if cosine == 0.0:
            return 0.0
        return distance_squared / (cosine * self.area)

    def random(self, origin: Point3, rng: np.random.Generator) -> Vec3:
        p = np.empty(3)
        p[self._a_axis] = self.a0 + float(rng.random()) * (self.a1 - self.a0)
        p[self._b_axis] = self.b0 + float(rng.random()) * (self.b1 - self.b0)
        p[self._k_axis] = self.k
        return Vec3.from_array(p) - origin


class XYRect(AxisAlignedRect):
    """Rectangle in the plane z = k with normal +z."""

    _k_axis, _a_axis, _b_axis = 2, 0, 1

    def __init__(self, x0: float, x1: float, y0: float, y1: float, k: float,
                 material: Optional[Material] = None):
        super().__init__(x0, x1, y0, y1, k, material)

    def __repr__(self) -> str:
        return f"XYRect(x=[{self.a0}, {self.a1}], y=[{self.b0}, {self.b1}], z={self.k})"


class XZRect(AxisAlignedRect):
    """Rectangle in the plane y = k with normal +y."""

    _k_axis, _a_axis, _b_axis = 1, 0, 2

    def __init__(self, x0: float, x1: float, z0: float, z1: float, k: float,
                 material: Optional[Material] = None):
        super().__init__(x0, x1, z0, z1, k, material)

    def __repr__(self) -> str:
        return f"XZRect(x=[{self.a0}, {self.a1}], z=[{self.b0}, {self.b1}], y={self.k})"


class YZRect(AxisAlignedRect):
    """Rectangle in the plane x = k with normal +x."""

    _k_axis, _a_axis, _b_axis = 0, 1, 2

    def __init__(self, y0: float, y1: float, z0: float, z1: float, k: float,
                 material: Optional[Material] = None):
        super().__init__(y0, y1, z0, z1, k, material)

    def __repr__(self) -> str:
        return f"YZRect(y=[{self.a0}, {self.a1}], z=[{self.b0}, {self.b1}], x={self.k})"


class Box(Hittable):
    """An axis-aligned box assembled from six rectangles.

    The faces on the minimum side of each axis are wrapped in ``FlipFace``
    so every face reports an outward normal.
    """

    def __init__(self, p0: Point3, p1: Point3, material: Optional[Material] = None):
        """Create a box from two opposite corners.

        Args:
            p0: One corner of the box
            p1: Opposite corner of the box
            material: Material for shading
        """
        self.box_min = Vec3.from_array(np.minimum(p0.to_array(), p1.to_array()))
        self.box_max = Vec3.from_array(np.maximum(p0.to_array(), p1.to_array()))
        self.material = material

        lo, hi = self.box_min, self.box_max
        self.sides = HittableList([
            XYRect(lo.x, hi.x, lo.y, hi.y, hi.z, material),
            FlipFace(XYRect(lo.x, hi.x, lo.y, hi.y, lo.z, material)),
            XZRect(lo.x, hi.x, lo.z, hi.z, hi.y, material),
            FlipFace(XZRect(lo.x, hi.x, lo.z, hi.z, lo.y, material)),
            YZRect(lo.y, hi.y, lo.z, hi.z, hi.x, material),
            FlipFace(YZRect(lo.y, hi.y, lo.z, hi.z, lo.x, material)),
        ])

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return self.sides.hit(ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 1.0) -> Optional[AABB]:
        return AABB(self.box_min, self.box_max)

    def __repr__(self) -> str:
        return f"Box(min={self.box_min}, max={self.box_max})"
