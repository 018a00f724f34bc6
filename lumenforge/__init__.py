"""
LumenForge - light transport core for a Python path tracer

Provides:
- Ray / scene intersection (spheres, axis-aligned rectangles, boxes)
- Scene aggregates that nest like any other primitive
- Instancing (translate, rotate, flipped faces)
- Materials: Lambertian, metal, dielectric, diffuse light, isotropic
- Constant density participating media
- Light importance sampling hooks (pdf_value / random)
"""

__version__ = "0.1.0"
__author__ = "LumenForge Team"

import logging

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .errors import LumenForgeError, GeometryError, EmptySceneError
from .sampling import (
    make_rng, random_double, random_unit_vector, random_in_unit_sphere,
    random_in_hemisphere, random_to_sphere, ONB
)
from .shapes import HitRecord, AABB, Hittable, Sphere, HittableList
from .transforms import FlipFace, Translate, RotateY
from .rects import AxisAlignedRect, XYRect, XZRect, YZRect, Box
from .textures import Texture, SolidColor, ImageTexture, CheckerTexture, as_texture
from .materials import (
    Material, ScatterResult, Lambertian, Metal, Dielectric, DiffuseLight, Isotropic,
    reflect, refract, schlick
)
from .scene import Scene
from .volumes import ConstantMedium
from .integrator import TraceSettings, Tracer, trace
from .logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
