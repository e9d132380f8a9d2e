import numpy as np
from utils import vec, dot, subtract, DegenerateVectorError

# Value to represent absence of an intersection: fails every [t_min, t_max] test
no_intersection = (np.inf, np.inf)


class Sphere:

    def __init__(self, center, radius, color, specular=0.):
        """Create a sphere with the given center and radius.

        Parameters:
          center : (3,) -- a 3D point specifying the sphere's center
          radius : float -- the sphere's radius, must be positive
          color : (3,) -- the RGB color of the surface, channels in 0-255
          specular : float -- the specular exponent; 0 disables highlights
        """
        self.center = vec(center)
        self.radius = float(radius)
        self.color = vec(color)
        self.specular = float(specular)
        if not np.all(np.isfinite(self.center)):
            raise ValueError(f"sphere center must be finite, got {center!r}")
        if not self.radius > 0:
            raise ValueError(f"sphere radius must be positive, got {radius!r}")
        if not self.specular >= 0:
            raise ValueError(f"sphere specular must be >= 0, got {specular!r}")

    def __repr__(self):
        return "Sphere(center={}, radius={}, color={}, specular={})".format(
            self.center.tolist(), self.radius, self.color.tolist(), self.specular)


def intersect_ray_sphere(origin, direction, sphere):
    """Computes both parameters t at which a ray meets the surface of a sphere.

    Parameters:
      origin : (3,) -- the start point of the ray
      direction : (3,) -- the direction of the ray, not necessarily normalized
      sphere : Sphere -- the sphere to intersect with
    Return:
      (t1, t2) -- the two roots with t1 <= t2, or no_intersection if the ray
      misses the sphere
    """
    sphere_vec = subtract(origin, sphere.center)
    a = dot(direction, direction)
    if a == 0:
        raise DegenerateVectorError("ray direction must be non-zero")
    b = 2 * dot(direction, sphere_vec)
    c = dot(sphere_vec, sphere_vec) - sphere.radius * sphere.radius
    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return no_intersection
    disc_sqrt = float(np.sqrt(discriminant))
    t1 = (-b - disc_sqrt) / (2 * a)
    t2 = (-b + disc_sqrt) / (2 * a)
    return t1, t2
