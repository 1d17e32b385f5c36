from jaxtyping import Float

import numpy as np
from numpy import ndarray

Vec2 = Float[ndarray, "2"]

def vec2(x: float, y: float) -> Vec2:
    return np.array([x, y], dtype=float)

def length(v: Vec2) -> float:
    return float(np.hypot(v[0], v[1]))

def distance(a: Vec2, b: Vec2) -> float:
    return length(b - a)

def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return a + (b - a) * t

def normalize(v: Vec2) -> Vec2:
    """unit vector in the direction of `v`, or the zero vector if `v` has no length"""
    l = length(v)
    if l == 0:
        return np.zeros(2)
    return v / l

def cross(a: Vec2, b: Vec2) -> float:
    """z-component of the cross product (wedge product)"""
    return float(a[0] * b[1] - a[1] * b[0])

def point_to_segment_distance(p: Vec2, a: Vec2, b: Vec2) -> float:
    """distance from `p` to the closest point on segment `ab`"""
    ab = b - a
    len_sq = float(ab.dot(ab))
    if len_sq == 0:
        return distance(a, p)
    t = min(1., max(0., float((p - a).dot(ab)) / len_sq))
    return distance(a + t * ab, p)
