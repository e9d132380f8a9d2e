import logging

import numpy as np
from geometry import Sphere, intersect_ray_sphere
from utils import *

"""
Core implementation of the ray caster.  This module contains the classes (Camera, lights, Scene)
that define what is rendered, and the functions (closest intersection, lighting, trace_ray) used
in the rendering algorithm, with the main entry point `render_image`.

Vectors are NumPy arrays of shape (3,); the same type carries points, directions and RGB colors,
so callers keep track of what each one means.
"""

logger = logging.getLogger(__name__)

EPSILON = 1e-4  # for offsetting shadow rays off the surface they start on
PRIMARY_T_MIN = 1.  # camera rays start at the viewport plane
BACKGROUND_COLOR = vec([255, 255, 255])
MAX_SPHERES = 10
MAX_LIGHTS = 10


class SceneCapacityError(ValueError):
    """Raised when more spheres or lights are added than a Scene can hold."""


class Ray:

    def __init__(self, origin, direction, start=0., end=np.inf):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (3,) -- the start point of the ray, a 3D point
          direction : (3,) -- the direction of the ray, a 3D vector (not necessarily normalized)
          start, end : float -- the minimum and maximum t values for intersections
        """
        self.origin = np.array(origin, np.float64)
        self.direction = np.array(direction, np.float64)
        self.start = start
        self.end = end


class Camera:

    def __init__(self, eye=vec([0, 0, 0]), target=vec([0, 0, 1]), up=vec([0, 1, 0]),
                 viewport_width=1.0, viewport_height=1.0, viewport_distance=1.0):
        """Create a pinhole camera looking through a rectangular viewport.

        Parameters:
          eye : (3,) -- the camera's location (a 3D point)
          target : (3,) -- a 3D point that appears centered in the view
          up : (3,) -- a 3D vector that appears straight up in the view
          viewport_width, viewport_height : float -- size of the viewport in world units
          viewport_distance : float -- distance from the eye to the viewport plane
        """
        if viewport_width <= 0 or viewport_height <= 0 or viewport_distance <= 0:
            raise ValueError("viewport dimensions must be positive")
        self.eye = vec(eye)
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.viewport_distance = viewport_distance

        # left-handed frame: x right, y up, looking down +z by default
        self.w = normalize(vec(target) - self.eye)
        self.u = normalize(np.cross(vec(up), self.w))
        self.v = np.cross(self.w, self.u)

    def generate_ray(self, x, y, nx, ny):
        """Compute the camera ray through pixel (x, y) of an nx by ny image.

        Row y = 0 is the top of the image.
        """
        vx = (x - nx / 2) * (self.viewport_width / nx)
        vy = -(y - ny / 2) * (self.viewport_height / ny)
        direction = (vx * self.u) + (vy * self.v) + (self.viewport_distance * self.w)
        return Ray(self.eye, normalize(direction), start=PRIMARY_T_MIN)


class Light:

    def __init__(self, intensity):
        if not intensity >= 0:
            raise ValueError(f"light intensity must be >= 0, got {intensity!r}")
        self.intensity = float(intensity)

    def illuminate(self, scene, point, normal, view, specular):
        """Return the scalar intensity this light contributes at a surface point."""
        raise NotImplementedError

    def _shade(self, scene, point, normal, view, specular, light_vec, shadow_end):
        """Diffuse and specular contribution along the unit vector light_vec.

        Returns 0 when any sphere lies on [EPSILON, shadow_end] towards the light.
        """
        blocker, _ = scene.closest_intersection(point, light_vec, EPSILON, shadow_end)
        if blocker is not None:
            return 0.

        result = 0.
        n_dot_l = dot(normal, light_vec)
        if n_dot_l > 0:
            result += self.intensity * n_dot_l / (length(normal) * length(light_vec))

        if specular > 0:
            reflected = subtract(scale(normal, 2 * n_dot_l), light_vec)
            r_dot_v = dot(reflected, view)
            if r_dot_v > 0:
                result += self.intensity * (r_dot_v / (length(reflected) * length(view))) ** specular
        return result


class AmbientLight(Light):

    def __init__(self, intensity):
        """Create an ambient light of given intensity
        """
        super().__init__(intensity)

    def illuminate(self, scene, point, normal, view, specular):
        return self.intensity


class PointLight(Light):

    def __init__(self, position, intensity):
        """Create a point light at given position and with given intensity"""
        super().__init__(intensity)
        self.position = vec(position)

    def illuminate(self, scene, point, normal, view, specular):
        light_vec_full = subtract(self.position, point)
        # occluders count only between the point and the light
        return self._shade(scene, point, normal, view, specular,
                           normalize(light_vec_full), length(light_vec_full))


class DirectionalLight(Light):

    def __init__(self, direction, intensity):
        """Create a light shining from the given direction (pointing towards the light)."""
        super().__init__(intensity)
        self.direction = normalize(vec(direction))

    def illuminate(self, scene, point, normal, view, specular):
        return self._shade(scene, point, normal, view, specular, self.direction, np.inf)


class Scene:

    def __init__(self, spheres=(), lights=(), background_color=BACKGROUND_COLOR,
                 max_spheres=MAX_SPHERES, max_lights=MAX_LIGHTS):
        """Create a scene containing the given spheres and lights.

        The scene holds at most max_spheres spheres and max_lights lights; it is
        filled once before rendering and only read while rendering.
        """
        self.background_color = vec(background_color)
        self.max_spheres = max_spheres
        self.max_lights = max_lights
        self.spheres = []
        self.lights = []
        for sphere in spheres:
            self.add_sphere(sphere)
        for light in lights:
            self.add_light(light)

    def add_sphere(self, sphere):
        if len(self.spheres) >= self.max_spheres:
            raise SceneCapacityError(
                f"scene holds at most {self.max_spheres} spheres, cannot add {sphere!r}")
        self.spheres.append(sphere)
        return sphere

    def add_light(self, light):
        if len(self.lights) >= self.max_lights:
            raise SceneCapacityError(
                f"scene holds at most {self.max_lights} lights, cannot add {type(light).__name__}")
        self.lights.append(light)
        return light

    def closest_intersection(self, origin, direction, t_min, t_max):
        """Computes the first (smallest t) intersection between a ray and the scene.

        Both roots of every sphere are tested against [t_min, t_max]; a later
        sphere only wins on a strictly smaller t, so ties go to the earlier one.

        Return:
          (Sphere or None, float) -- the closest sphere and its t, or (None, t_max)
        """
        closest_sphere = None
        closest_t = t_max
        for sphere in self.spheres:
            for t in intersect_ray_sphere(origin, direction, sphere):
                if t_min <= t <= t_max and t < closest_t:
                    closest_t = t
                    closest_sphere = sphere
        return closest_sphere, closest_t


def compute_lighting(scene, point, normal, view, specular):
    """Total light intensity at a surface point, clamped to at most 1.

    Parameters:
      scene : Scene -- supplies the lights and the occluders for shadow rays
      point : (3,) -- the surface point
      normal : (3,) -- the outward surface normal at point
      view : (3,) -- vector from the point back towards the viewer
      specular : float -- specular exponent of the surface, 0 for none
    """
    intensity = 0.
    for light in scene.lights:
        intensity += light.illuminate(scene, point, normal, view, specular)
    return min(intensity, 1.)


def trace_ray(scene, origin, direction, t_min, t_max):
    """Return the color seen along a ray, or the background color on a miss."""
    sphere, t = scene.closest_intersection(origin, direction, t_min, t_max)
    if sphere is None:
        return scene.background_color.copy()

    point = add(origin, scale(direction, t))
    normal = normalize(subtract(point, sphere.center))
    return scale(sphere.color, compute_lighting(scene, point, normal, negate(direction), sphere.specular))


def render_image(camera, scene, nx, ny):
    """
    render a ray cast image: an (ny, nx, 3) array of colors, row 0 at the top.
    """
    if nx <= 0 or ny <= 0:
        raise ValueError(f"image size must be positive, got {nx}x{ny}")

    output_image = np.zeros((ny, nx, 3), np.float64)
    for i in range(ny):
        logger.debug("rendering row %d/%d", i + 1, ny)
        for j in range(nx):
            ray = camera.generate_ray(j, i, nx, ny)
            output_image[i, j] = trace_ray(scene, ray.origin, ray.direction, ray.start, ray.end)

    logger.info("rendered %dx%d image of %d spheres and %d lights",
                nx, ny, len(scene.spheres), len(scene.lights))
    return output_image
