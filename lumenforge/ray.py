"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point, a direction vector and a time stamp.
P(t) = origin + t * direction
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """An immutable ray with origin, direction and time.

    The parametric form is: P(t) = origin + t * direction.
    The direction is not normalized or validated; callers must not build
    rays with a zero-length direction.
    """

    __slots__ = ('_origin', '_direction', '_time')

    def __init__(self, origin: Point3, direction: Vec3, time: float = 0.0):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector (need not be normalized)
            time: Time value for moving geometry (default 0)
        """
        self._origin = origin
        self._direction = direction
        self._time = float(time)

    @property
    def origin(self) -> Point3:
        return self._origin

    @property
    def direction(self) -> Vec3:
        return self._direction

    @property
    def time(self) -> float:
        return self._time

    def point_at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self._origin + self._direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self._origin}, direction={self._direction}, time={self._time})"
