"""Tests for spheres, AABBs and the HittableList aggregate."""

import math
import pytest

from lumenforge.vec3 import Vec3, Point3, Color
from lumenforge.ray import Ray
from lumenforge.errors import EmptySceneError
from lumenforge.shapes import AABB, HitRecord, Hittable, HittableList, Sphere
from lumenforge.rects import XYRect
from lumenforge.materials import Lambertian


class Unbounded(Hittable):
    """Never hit, never boxed."""

    def hit(self, ray, t_min, t_max):
        return None

    def bounding_box(self, time0=0.0, time1=1.0):
        return None


class FixedDensity(Hittable):
    """Reports a constant pdf and a fixed sample direction."""

    def __init__(self, density, direction):
        self.density = density
        self.direction = direction

    def hit(self, ray, t_min, t_max):
        return None

    def bounding_box(self, time0=0.0, time1=1.0):
        return None

    def pdf_value(self, origin, direction):
        return self.density

    def random(self, origin, rng):
        return self.direction


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-6  # Hits at z=-1
        assert abs(hit.point.z - (-1.0)) < 1e-6

    def test_hit_front_face(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit.front_face is True
        # Normal should point outward (against ray)
        assert hit.normal.z < 0

    def test_hit_from_inside_flips_normal(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # Ray passes above sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))  # Ray points away from sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_t_range(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        # Hit is at t=4, exclude it with t_min
        hit = sphere.hit(ray, 4.5, float('inf'))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-6  # Back of sphere

    def test_t_bounds_are_exclusive(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, 4.0) is None

    def test_uv_coordinates(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert 0 <= hit.u <= 1
        assert 0 <= hit.v <= 1

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert hit.material is material

    def test_bounding_box(self):
        bbox = Sphere(Point3(1, 0, 0), 1.0).bounding_box()
        assert bbox == AABB(Point3(0, -1, -1), Point3(2, 1, 1))

    def test_pdf_value_inside_cone(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        origin = Point3(0, 0, -4)
        pdf = sphere.pdf_value(origin, Vec3(0, 0, 1))

        cos_theta_max = math.sqrt(1 - 1 / 16)
        assert abs(pdf - 1 / (2 * math.pi * (1 - cos_theta_max))) < 1e-9

    def test_pdf_value_miss_is_zero(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        assert sphere.pdf_value(Point3(0, 0, -4), Vec3(0, 1, 0)) == 0.0

    def test_random_points_at_sphere(self, rng):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        origin = Point3(0, 0, -4)
        for _ in range(200):
            direction = sphere.random(origin, rng)
            assert sphere.hit(Ray(origin, direction), 0.001, float('inf')) is not None
            assert sphere.pdf_value(origin, direction) > 0

    @pytest.mark.parametrize("origin", [Point3(0, 0, 0), Point3(0.3, -0.2, 0.5)])
    def test_pdf_value_from_inside(self, origin):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        for direction in (Vec3(0, 0, 1), Vec3(0, 0, -1), Vec3(1, 2, -3)):
            assert sphere.pdf_value(origin, direction) == pytest.approx(1 / (4 * math.pi))

    @pytest.mark.parametrize("origin", [Point3(0, 0, 0), Point3(0.3, -0.2, 0.5)])
    def test_random_from_inside(self, rng, origin):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        backward = 0
        for _ in range(400):
            direction = sphere.random(origin, rng)
            assert abs(direction.length() - 1.0) < 1e-9
            assert sphere.hit(Ray(origin, direction), 0.001, float('inf')) is not None
            backward += direction.z < 0
        # Every direction reaches the sphere, so samples cover all of them
        assert 140 < backward < 260


class TestAABB:
    """Test AABB class."""

    def test_hit_through(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        assert box.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

    def test_miss(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        assert not box.hit(Ray(Point3(0, 5, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

    def test_axis_parallel_ray(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        assert box.hit(Ray(Point3(0.5, 0.5, -5), Vec3(0, 0, 1)), 0.001, float('inf'))
        assert not box.hit(Ray(Point3(2, 0.5, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

    def test_ray_inside(self):
        box = AABB(Point3(-1, -1, -1), Point3(1, 1, 1))
        assert box.hit(Ray(Point3(0, 0, 0), Vec3(1, 1, 1)), 0.001, float('inf'))

    def test_surrounding_box(self):
        box1 = AABB(Point3(0, 0, 0), Point3(1, 1, 1))
        box2 = AABB(Point3(-1, 2, 0.5), Point3(0.5, 3, 4))
        combined = AABB.surrounding_box(box1, box2)
        assert combined.minimum == Point3(-1, 0, 0)
        assert combined.maximum == Point3(1, 3, 4)


class TestHittableList:
    """Test HittableList aggregate."""

    def test_empty_list(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)), 0.001, float('inf')) is None
        assert world.bounding_box() is None

    def test_hit_closest(self):
        far = Sphere(Point3(0, 0, -10), 1.0)
        near = Sphere(Point3(0, 0, -3), 1.0)
        world = HittableList([far, near])

        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert abs(hit.t - 2.0) < 1e-6

    def test_hit_respects_t_max(self):
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, 5.0) is None

    def test_add_and_clear(self):
        world = HittableList()
        world.add(Sphere(Point3(0, 0, 0), 1.0))
        world.add(Sphere(Point3(1, 0, 0), 1.0))
        assert len(world) == 2

        world.clear()
        assert len(world) == 0

    def test_iteration_keeps_insertion_order(self):
        spheres = [Sphere(Point3(i, 0, 0), 0.5) for i in range(5)]
        world = HittableList()
        for s in spheres:
            world.add(s)
        assert list(world) == spheres

    def test_bounding_box_union(self):
        world = HittableList([
            Sphere(Point3(0, 0, 0), 1.0),
            Sphere(Point3(5, 0, 0), 1.0),
        ])
        bbox = world.bounding_box()
        assert bbox.minimum == Point3(-1, -1, -1)
        assert bbox.maximum == Point3(6, 1, 1)

    def test_bounding_box_unbounded_member(self):
        world = HittableList([Sphere(Point3(0, 0, 0), 1.0), Unbounded()])
        assert world.bounding_box() is None

    def test_bounding_box_of_rects(self):
        rects = [
            XYRect(0, 1, 0, 1, 0),
            XYRect(-2, -1, 3, 4, 5),
            XYRect(0.5, 3, -1, 0.5, -2),
        ]
        bbox = HittableList(rects).bounding_box()
        assert bbox.minimum == Point3(-2, -1, -2 - 1e-4)
        assert bbox.maximum == Point3(3, 4, 5 + 1e-4)

    def test_nested_lists(self):
        inner = HittableList([Sphere(Point3(0, 0, -3), 1.0)])
        outer = HittableList([inner, Sphere(Point3(0, 0, -10), 1.0)])

        hit = outer.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert abs(hit.t - 2.0) < 1e-6
        assert outer.bounding_box().minimum.z == -11

    def test_pdf_value_is_average(self):
        world = HittableList([
            FixedDensity(1.0, Vec3(1, 0, 0)),
            FixedDensity(3.0, Vec3(0, 1, 0)),
            FixedDensity(0.0, Vec3(0, 0, 1)),
            FixedDensity(4.0, Vec3(1, 1, 0)),
        ])
        assert world.pdf_value(Point3(0, 0, 0), Vec3(0, 0, 1)) == pytest.approx(2.0)

    def test_pdf_value_empty(self):
        assert HittableList().pdf_value(Point3(0, 0, 0), Vec3(0, 0, 1)) == 0.0

    def test_random_selects_members_uniformly(self, rng):
        directions = [Vec3(1, 0, 0), Vec3(0, 1, 0), Vec3(0, 0, 1)]
        world = HittableList([FixedDensity(1.0, d) for d in directions])

        counts = [0, 0, 0]
        n = 3000
        for _ in range(n):
            sample = world.random(Point3(0, 0, 0), rng)
            counts[directions.index(sample)] += 1

        for c in counts:
            assert abs(c / n - 1 / 3) < 0.04

    def test_random_empty_raises(self, rng):
        with pytest.raises(EmptySceneError):
            HittableList().random(Point3(0, 0, 0), rng)


class TestHitRecord:
    """Test HitRecord helpers."""

    def test_face_normal_front(self):
        front_face, normal = HitRecord.face_normal(Ray(Point3(0, 0, 1), Vec3(0, 0, -1)), Vec3(0, 0, 1))
        assert front_face is True
        assert normal == Vec3(0, 0, 1)

    def test_face_normal_back(self):
        front_face, normal = HitRecord.face_normal(Ray(Point3(0, 0, -1), Vec3(0, 0, 1)), Vec3(0, 0, 1))
        assert front_face is False
        assert normal == Vec3(0, 0, -1)

    def test_front_face_is_required(self):
        with pytest.raises(TypeError):
            HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 0, 1), t=1.0)
