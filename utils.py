import numpy as np


class DegenerateVectorError(ValueError):
    """Raised when a vector operation needs a non-zero, finite vector."""


def vec(list):
    """Handy shorthand to make a double-precision float array."""
    return np.array(list, dtype=np.float64)


def add(a, b):
    return a + b


def subtract(a, b):
    return a - b


def scale(v, s):
    """Return v multiplied componentwise by the scalar s."""
    return v * s


def dot(a, b):
    """Sum of componentwise products; dot(v, v) is the squared length of v."""
    return float(np.dot(a, b))


def length(v):
    return float(np.sqrt(dot(v, v)))


def normalize(v):
    """Return a unit vector in the direction of the vector v.

    Raises DegenerateVectorError for the zero vector or a vector with
    non-finite components, rather than letting NaN reach the image.
    """
    n = length(v)
    if n == 0 or not np.isfinite(n):
        raise DegenerateVectorError(f"cannot normalize vector {v!r}")
    return scale(v, 1.0 / n)


def negate(v):
    return scale(v, -1.0)
