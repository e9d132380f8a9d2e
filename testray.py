import io
import unittest
import numpy as np
from ray import *
from geometry import intersect_ray_sphere, no_intersection
from utils import normalize, vec, DegenerateVectorError
from ExampleSceneDef import ReferenceSceneExample, ThreeSpheresExample

def assert_direction_matches(v, w):
    np.testing.assert_almost_equal(normalize(v), normalize(w))


WHITE = vec([255, 255, 255])
UP = vec([0, 1, 0])
ORIGIN = vec([0, 0, 0])


class TestSphereIntersect(unittest.TestCase):

    def confirm_hit(self, sphere, origin, direction):
        # make sure both roots lie on the surface, then return them
        t1, t2 = intersect_ray_sphere(vec(origin), vec(direction), sphere)
        self.assertLess(t1, np.inf)
        self.assertLessEqual(t1, t2)
        for t in (t1, t2):
            point = vec(origin) + t * vec(direction)
            self.assertAlmostEqual(np.linalg.norm(point - sphere.center), sphere.radius)
        return t1, t2

    def test_unitsphere_hits(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, vec([255,0,0]))
        # dead center hit
        t1, t2 = self.confirm_hit(unit_sphere, [2.0,0.0,0.0], [-1.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1.0)
        self.assertAlmostEqual(t2, 3.0)
        # dead center with non-unit direction
        t1, t2 = self.confirm_hit(unit_sphere, [3.0,0.0,0.0], [-2.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1.0)
        self.assertAlmostEqual(t2, 2.0)
        # off center hit
        t1, _ = self.confirm_hit(unit_sphere, [1.0,0.5,0.0], [-1.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1 - np.sin(np.pi/3))
        # center hit from off axis
        t1, _ = self.confirm_hit(unit_sphere, [2.0,3.0,4.0], [-2.0,-3.0,-4.0])
        self.assertAlmostEqual(t1, 1 - 1 / np.sqrt(29))

    def test_origin_inside_sphere(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, vec([255,0,0]))
        t1, t2 = self.confirm_hit(unit_sphere, [0.0,0.0,0.0], [0.0,0.0,1.0])
        self.assertAlmostEqual(t1, -1.0)
        self.assertAlmostEqual(t2, 1.0)

    def test_unitsphere_misses(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, vec([255,0,0]))
        # on axis miss
        roots = intersect_ray_sphere(vec([2.0,3.0,0.0]), vec([-1.0,0.0,0.0]), unit_sphere)
        self.assertEqual(roots, no_intersection)
        self.assertEqual(roots, (np.inf, np.inf))

    def test_nonunit_hits(self):
        # all the same as the first case, but scaled by 3 and shifted by (-1, -5, -7)
        sphere = Sphere(vec([-1,-5,-7]), 3.0, vec([0,0,255]))
        t1, _ = self.confirm_hit(sphere, [5.0,-5.0,-7.0], [-3.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1.0)
        t1, _ = self.confirm_hit(sphere, [8.0,-5.0,-7.0], [-6.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1.0)
        t1, _ = self.confirm_hit(sphere, [2.0,-3.5,-7.0], [-3.0,0.0,0.0])
        self.assertAlmostEqual(t1, 1 - np.sin(np.pi/3))

    def test_zero_direction_is_rejected(self):
        unit_sphere = Sphere(vec([0,0,0]), 1.0, vec([255,0,0]))
        with self.assertRaises(DegenerateVectorError):
            intersect_ray_sphere(vec([2.0,0.0,0.0]), vec([0.0,0.0,0.0]), unit_sphere)

    def test_invalid_spheres(self):
        with self.assertRaises(ValueError):
            Sphere(vec([0,0,0]), 0.0, vec([255,0,0]))
        with self.assertRaises(ValueError):
            Sphere(vec([0,0,0]), -1.0, vec([255,0,0]))
        with self.assertRaises(ValueError):
            Sphere(vec([0,0,0]), 1.0, vec([255,0,0]), specular=-1)
        with self.assertRaises(ValueError):
            Sphere(vec([np.nan,0,0]), 1.0, vec([255,0,0]))


class TestCamera(unittest.TestCase):

    def test_default_camera(self):
        # A camera located at the origin facing the +z direction
        cam = Camera()
        # Center ray is straight down the axis
        ray = cam.generate_ray(2, 2, 4, 4)
        np.testing.assert_almost_equal(ray.origin, vec([0,0,0]))
        np.testing.assert_almost_equal(ray.direction, vec([0,0,1]))
        self.assertEqual(ray.start, 1.)
        self.assertEqual(ray.end, np.inf)
        # row 0 is the top of the image, column 0 the left
        ray = cam.generate_ray(0, 0, 4, 4)
        assert_direction_matches(ray.direction, vec([-0.5, 0.5, 1]))
        ray = cam.generate_ray(3, 3, 4, 4)
        assert_direction_matches(ray.direction, vec([0.25, -0.25, 1]))

    def test_directions_are_unit_length(self):
        cam = Camera()
        for x in range(5):
            for y in range(3):
                ray = cam.generate_ray(x, y, 5, 3)
                self.assertAlmostEqual(np.linalg.norm(ray.direction), 1.0)

    def test_viewport_shape(self):
        # A wider viewport spreads the rays further in x only
        cam = Camera(viewport_width=2.0, viewport_distance=2.0)
        ray = cam.generate_ray(0, 0, 4, 4)
        assert_direction_matches(ray.direction, vec([-1.0, 0.5, 2.0]))

    def test_moved_eye(self):
        # Translating the camera moves the ray origin, not the direction
        cam = Camera(eye=vec([1,2,3]), target=vec([1,2,4]))
        ray = cam.generate_ray(0, 0, 4, 4)
        np.testing.assert_almost_equal(ray.origin, vec([1,2,3]))
        assert_direction_matches(ray.direction, vec([-0.5, 0.5, 1]))

    def test_arbitrary_frame(self):
        # A camera that lines up with nothing in particular
        eye = vec([3,4,5])
        target = vec([6,7,8])
        up = vec([1,2,3])
        cam = Camera(eye=eye, target=target, up=up)
        # Center ray points towards target
        ray = cam.generate_ray(8, 6, 16, 12)
        np.testing.assert_almost_equal(ray.origin, eye)
        assert_direction_matches(ray.direction, target - eye)

    def test_invalid_viewport(self):
        with self.assertRaises(ValueError):
            Camera(viewport_width=0)
        with self.assertRaises(DegenerateVectorError):
            Camera(up=vec([0,0,1]))


class TestScene(unittest.TestCase):

    def test_empty_scene(self):
        scene = Scene()
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 1, np.inf), (None, np.inf))
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 1, 7.0), (None, 7.0))

    def test_nearest_sphere_wins(self):
        far = Sphere(vec([0,0,10]), 1.0, vec([0,255,0]))
        near = Sphere(vec([0,0,5]), 1.0, vec([255,0,0]))
        scene = Scene([far, near])
        sphere, t = scene.closest_intersection(ORIGIN, vec([0,0,1]), 1, np.inf)
        self.assertIs(sphere, near)
        self.assertAlmostEqual(t, 4.0)

    def test_tie_goes_to_earlier_sphere(self):
        # both front surfaces pass through (0, 0, 4)
        a = Sphere(vec([0,0,5]), 1.0, vec([255,0,0]))
        b = Sphere(vec([0,0,6]), 2.0, vec([0,0,255]))
        sphere, t = Scene([a, b]).closest_intersection(ORIGIN, vec([0,0,1]), 1, np.inf)
        self.assertIs(sphere, a)
        self.assertEqual(t, 4.0)
        sphere, t = Scene([b, a]).closest_intersection(ORIGIN, vec([0,0,1]), 1, np.inf)
        self.assertIs(sphere, b)
        self.assertEqual(t, 4.0)

    def test_range_limits(self):
        sphere = Sphere(vec([0,0,5]), 1.0, vec([255,0,0]))
        scene = Scene([sphere])
        # t_min is inclusive
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 4.0, np.inf), (sphere, 4.0))
        # the near root is skipped, the far one still counts
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 4.5, np.inf), (sphere, 6.0))
        # both roots out of range
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 1.0, 3.0), (None, 3.0))
        self.assertEqual(scene.closest_intersection(ORIGIN, vec([0,0,1]), 6.5, np.inf), (None, np.inf))

    def test_origin_inside_sphere(self):
        sphere = Sphere(vec([0,0,0]), 1.0, vec([255,0,0]))
        found, t = Scene([sphere]).closest_intersection(ORIGIN, vec([0,0,1]), 0, np.inf)
        self.assertIs(found, sphere)
        self.assertAlmostEqual(t, 1.0)

    def test_capacity(self):
        spheres = [Sphere(vec([0,0,5 * i]), 1.0, vec([255,0,0])) for i in range(1, 4)]
        scene = Scene(spheres[:2], max_spheres=2, max_lights=1)
        self.assertEqual(len(scene.spheres), 2)
        with self.assertRaises(SceneCapacityError):
            scene.add_sphere(spheres[2])
        self.assertEqual(len(scene.spheres), 2)

        scene.add_light(AmbientLight(0.1))
        with self.assertRaises(SceneCapacityError):
            scene.add_light(AmbientLight(0.1))
        self.assertEqual(len(scene.lights), 1)

        with self.assertRaises(SceneCapacityError):
            Scene(spheres, max_spheres=2)

    def test_default_capacity(self):
        scene = Scene()
        for i in range(MAX_SPHERES):
            scene.add_sphere(Sphere(vec([0,0,5 + 3 * i]), 1.0, vec([255,0,0])))
        with self.assertRaises(SceneCapacityError):
            scene.add_sphere(Sphere(vec([0,0,100]), 1.0, vec([255,0,0])))
        # only the lights that were added take part
        self.assertEqual(scene.lights, [])


class TestLighting(unittest.TestCase):

    def lighting(self, lights, spheres=(), normal=UP, view=UP, specular=0):
        scene = Scene(spheres, lights)
        return compute_lighting(scene, ORIGIN, normal, view, specular)

    def test_ambient(self):
        self.assertAlmostEqual(self.lighting([AmbientLight(0.2)]), 0.2)
        self.assertAlmostEqual(self.lighting([AmbientLight(0.2), AmbientLight(0.3)]), 0.5)
        self.assertEqual(self.lighting([]), 0.)

    def test_diffuse(self):
        # light directly overhead
        self.assertAlmostEqual(self.lighting([PointLight(vec([0,10,0]), 0.6)]), 0.6)
        self.assertAlmostEqual(self.lighting([DirectionalLight(vec([0,1,0]), 0.6)]), 0.6)
        # light at 60 degrees
        self.assertAlmostEqual(self.lighting([DirectionalLight(vec([0,1,np.sqrt(3)]), 1.0)]), 0.5)
        # a non-unit normal is renormalized
        self.assertAlmostEqual(self.lighting([PointLight(vec([0,10,0]), 0.6)], normal=vec([0,2,0])), 0.6)

    def test_light_below_surface(self):
        self.assertEqual(self.lighting([DirectionalLight(vec([0,-1,0]), 0.6)], specular=10), 0.)
        self.assertEqual(self.lighting([PointLight(vec([0,-3,0]), 0.6)], specular=10), 0.)

    def test_specular(self):
        light = DirectionalLight(vec([0,1,0]), 0.3)
        # mirror direction straight at the viewer
        self.assertAlmostEqual(self.lighting([light], view=UP, specular=10), 0.6)
        # viewer perpendicular to the mirror direction
        self.assertAlmostEqual(self.lighting([light], view=vec([1,0,0]), specular=10), 0.3)
        # viewer at 45 degrees, view vector not unit length
        self.assertAlmostEqual(self.lighting([light], view=vec([2,2,0]), specular=2), 0.3 + 0.3 * 0.5)
        # specular 0 disables highlights
        self.assertAlmostEqual(self.lighting([light], view=UP, specular=0), 0.3)

    def test_clamped_to_one(self):
        lights = [AmbientLight(0.8), PointLight(vec([0,10,0]), 0.6)]
        self.assertEqual(self.lighting(lights), 1.0)

    def test_point_light_shadow(self):
        lights = [AmbientLight(0.2), PointLight(vec([0,10,0]), 0.6)]
        self.assertAlmostEqual(self.lighting(lights), 0.8)
        # occluder between the point and the light
        blocker = Sphere(vec([0,5,0]), 1.0, vec([255,255,255]))
        self.assertAlmostEqual(self.lighting(lights, [blocker], specular=100), 0.2)
        # spheres beyond the light or behind the point cast no shadow
        beyond = Sphere(vec([0,20,0]), 1.0, vec([255,255,255]))
        behind = Sphere(vec([0,-5,0]), 1.0, vec([255,255,255]))
        self.assertAlmostEqual(self.lighting(lights, [beyond, behind]), 0.8)

    def test_directional_light_shadow(self):
        lights = [AmbientLight(0.2), DirectionalLight(vec([0,1,0]), 0.6)]
        far = Sphere(vec([0,1000,0]), 1.0, vec([255,255,255]))
        self.assertAlmostEqual(self.lighting(lights, [far]), 0.2)

    def test_no_self_shadowing(self):
        # the point sits on the surface of the sphere it belongs to
        ground = Sphere(vec([0,-1,0]), 1.0, vec([255,255,0]))
        self.assertAlmostEqual(self.lighting([PointLight(vec([0,10,0]), 0.6)], [ground]), 0.6)

    def test_intensity_range(self):
        rng = np.random.default_rng(7)
        lights = [AmbientLight(0.2), PointLight(vec([2,1,0]), 0.6), DirectionalLight(vec([1,4,4]), 0.2)]
        scene = Scene([], lights)
        for _ in range(50):
            normal = normalize(rng.normal(size=3))
            view = rng.normal(size=3)
            point = rng.normal(size=3) * 3
            i = compute_lighting(scene, point, normal, view, 500)
            self.assertGreaterEqual(i, 0.)
            self.assertLessEqual(i, 1.)

    def test_invalid_lights(self):
        with self.assertRaises(ValueError):
            AmbientLight(-0.1)
        with self.assertRaises(DegenerateVectorError):
            DirectionalLight(vec([0,0,0]), 0.2)
        with self.assertRaises(DegenerateVectorError):
            # the light sits exactly on the surface point
            self.lighting([PointLight(ORIGIN, 0.6)])


class TestTraceRay(unittest.TestCase):

    def test_miss_returns_background(self):
        scene = Scene([Sphere(vec([0,0,5]), 1.0, vec([255,0,0]))], [AmbientLight(1.0)])
        np.testing.assert_array_equal(trace_ray(scene, ORIGIN, vec([0,0,-1]), 1, np.inf), WHITE)
        np.testing.assert_array_equal(trace_ray(Scene(), ORIGIN, vec([0,0,1]), 1, np.inf), WHITE)
        custom = Scene(background_color=vec([0,0,0]))
        np.testing.assert_array_equal(trace_ray(custom, ORIGIN, vec([0,0,1]), 1, np.inf), vec([0,0,0]))

    def test_background_is_not_shared(self):
        scene = Scene()
        color = trace_ray(scene, ORIGIN, vec([0,0,1]), 1, np.inf)
        color[:] = 0
        np.testing.assert_array_equal(scene.background_color, WHITE)

    def test_ambient_only(self):
        sphere = Sphere(vec([0,0,5]), 1.0, vec([10,20,30]))
        scene = Scene([sphere], [AmbientLight(0.5)])
        np.testing.assert_allclose(trace_ray(scene, ORIGIN, vec([0,0,1]), 1, np.inf), vec([5,10,15]))
        scene = Scene([sphere], [AmbientLight(1.5)])
        np.testing.assert_allclose(trace_ray(scene, ORIGIN, vec([0,0,1]), 1, np.inf), vec([10,20,30]))

    def test_lit_from_the_camera(self):
        # hit point (0,0,4), normal (0,0,-1), light at the eye
        sphere = Sphere(vec([0,0,5]), 1.0, vec([200,100,50]))
        scene = Scene([sphere], [PointLight(ORIGIN, 0.5)])
        np.testing.assert_allclose(trace_ray(scene, ORIGIN, vec([0,0,1]), 1, np.inf), vec([100,50,25]))
        # with a highlight aimed back along the ray
        shiny = Sphere(vec([0,0,5]), 1.0, vec([200,100,50]), specular=100)
        scene = Scene([shiny], [PointLight(ORIGIN, 0.4)])
        np.testing.assert_allclose(trace_ray(scene, ORIGIN, vec([0,0,2]), 1, np.inf), vec([160,80,40]))


class TestRenderImage(unittest.TestCase):

    def test_reference_scene(self):
        example = ReferenceSceneExample()
        pix = render_image(example.camera, example.scene, 4, 4)
        self.assertEqual(pix.shape, (4, 4, 3))
        self.assertTrue(np.all(np.isfinite(pix)))
        self.assertTrue(np.all(pix >= 0))
        self.assertTrue(np.all(pix <= 255))
        # the top half looks up into the sky
        np.testing.assert_array_equal(pix[:2], np.broadcast_to(WHITE, (2, 4, 3)))
        # below the center: the red sphere
        r, g, b = pix[3, 2]
        self.assertEqual((g, b), (0, 0))
        self.assertGreaterEqual(r, 0.2 * 255 - 1)
        # bottom left: the yellow ground
        r, g, b = pix[3, 0]
        self.assertEqual(r, g)
        self.assertEqual(b, 0)
        self.assertGreater(r, 0)

    # reference scene at 4x4, channels truncated as they are written to disk
    REFERENCE_4X4 = [
        [[255, 255, 255]] * 4,
        [[255, 255, 255]] * 4,
        [[255, 255, 255], [255, 255, 255], [127, 0, 0], [255, 255, 255]],
        [[86, 86, 0], [83, 0, 0], [171, 0, 0], [202, 0, 0]],
    ]

    def test_reference_scene_fixture(self):
        example = ReferenceSceneExample()
        pix = render_image(example.camera, example.scene, 4, 4)
        np.testing.assert_array_equal(np.trunc(pix).astype(int), np.array(self.REFERENCE_4X4))

    def test_reference_scene_ppm_text(self):
        example = ReferenceSceneExample()
        out = io.StringIO()
        example.render(output_shape=[4, 4]).writeToFile(out)
        expected = "P3\n4 4\n 255\n" + "".join(
            "{} {} {}\n".format(*rgb) for row in self.REFERENCE_4X4 for rgb in row)
        self.assertEqual(out.getvalue(), expected)

    def test_deterministic(self):
        example = ReferenceSceneExample()
        first = render_image(example.camera, example.scene, 4, 4)
        second = render_image(example.camera, example.scene, 4, 4)
        np.testing.assert_array_equal(first, second)

    def test_three_spheres(self):
        im = ThreeSpheresExample().render(output_shape=[6, 8])
        self.assertEqual((im.height, im.width), (6, 8))
        self.assertTrue(np.all(np.isfinite(im.pixels)))

    def test_invalid_size(self):
        example = ReferenceSceneExample()
        with self.assertRaises(ValueError):
            render_image(example.camera, example.scene, 0, 4)


if __name__ == '__main__':
    unittest.main()
