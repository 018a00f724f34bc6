"""
Scene aggregate that pairs each primitive with a material.

``HittableList`` relies on every primitive carrying its own material.
``Scene`` instead stores (primitive, material) pairs and stamps the pair's
material onto the hit record, so bare geometry can be reused with
different materials. Everything else is inherited from ``HittableList``.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional
import logging

from .ray import Ray
from .materials import Material
from .shapes import HitRecord, Hittable, HittableList

logger = logging.getLogger(__name__)


class Scene(HittableList):
    """Owning collection of primitive/material pairs.

    Append-only once tracing starts. A material may be shared by many
    primitives; a primitive added without a material keeps its own.
    """

    def __init__(self):
        super().__init__()
        self.materials: list[Optional[Material]] = []

    def add(self, obj: Hittable, material: Optional[Material] = None) -> None:
        """Add a primitive, optionally overriding its material."""
        self.objects.append(obj)
        self.materials.append(material)
        logger.debug("Scene: added %r with %s", obj, type(material).__name__ if material else "own material")

    def clear(self) -> None:
        super().clear()
        self.materials.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Closest hit, carrying the material of the pair that owns it."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj, material in zip(self.objects, self.materials):
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                if material is not None:
                    hit_record = replace(hit_record, material=material)
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit
