"""
curve flatteners: each turns a list of control points into a dense polyline
"""

from jaxtyping import Float

import math

import numpy as np
from numpy import ndarray

from .bezier import BezierCurve
from .vector import Vec2, length, normalize, cross

Points = Float[ndarray, "_ 2"]

# max distance (osu!pixels) between a bezier curve and its polyline
BEZIER_TOLERANCE = .08

# max step (osu!pixels) along a linear slider
LINEAR_STEP = 8.

# max distance (osu!pixels) between a circular arc and its polyline
PERFECT_MAX_ERROR = .1
PERFECT_MAX_SEGMENTS = 1000

# below this, three points are considered collinear
COLLINEAR_EPS = 1e-3

# catmull-rom segments are sampled at least this many times, and at least every 3 osu!pixels
CATMULL_MIN_SEGMENTS = 8
CATMULL_STEP = 3.


def flatten_linear(start: Vec2, end: Vec2, distance: float) -> Points:
    """
    straight line from `start` towards `end`, ending `distance` away from `start`
    (at `end` if `distance` is not positive)
    """
    direction = end - start
    if length(direction) == 0:
        return start[None].copy()

    if distance > 0:
        end = start + normalize(direction) * distance

    steps = max(1, math.ceil(length(end - start) / LINEAR_STEP))
    t = np.linspace(0, 1, steps + 1)[:,None]
    path = (1 - t) * start + t * end
    # endpoints are exact
    path[0], path[-1] = start, end
    return path


def flatten_bezier(points: Points, tolerance: float = BEZIER_TOLERANCE) -> Points:
    """single bezier curve of degree `len(points)-1`"""
    if len(points) < 2:
        return np.array(points, dtype=float).reshape(-1, 2)
    return BezierCurve(np.asarray(points, dtype=float).T).flatten(tolerance)


def flatten_multibezier(points: Points) -> Points:
    """
    piecewise bezier curve. a point equal to its predecessor ends one segment
    and starts the next
    """
    segments: list[Points] = []
    current = [points[0]]
    for prev, cur in zip(points[:-1], points[1:]):
        if (prev == cur).all():
            if len(current) > 1:
                segments.append(np.array(current))
            current = [cur]
        else:
            current.append(cur)
    if len(current) > 1:
        segments.append(np.array(current))

    if len(segments) == 0:
        return np.array(points[:1], dtype=float).reshape(-1, 2)
    return np.concatenate([ flatten_bezier(seg) for seg in segments ], axis=0)


def circle_center(a: Vec2, b: Vec2, c: Vec2):
    """center of the circle through `a`, `b`, `c`, or `None` if they are collinear"""
    d = 2 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if abs(d) < COLLINEAR_EPS:
        return None

    aa, bb, cc = a.dot(a), b.dot(b), c.dot(c)
    ux = (aa * (b[1] - c[1]) + bb * (c[1] - a[1]) + cc * (a[1] - b[1])) / d
    uy = (aa * (c[0] - b[0]) + bb * (a[0] - c[0]) + cc * (b[0] - a[0])) / d
    return np.array([ux, uy])


def flatten_perfect(points: Points) -> Points:
    """
    circular arc from `points[0]` through `points[1]` to `points[2]`.
    falls back to a bezier curve when there are not exactly three points
    or when they are collinear
    """
    if len(points) != 3:
        return flatten_multibezier(points)

    A, B, C = np.asarray(points, dtype=float)
    P = circle_center(A, B, C)
    if P is None:
        return flatten_bezier(np.array([A, B, C]))

    R = length(A - P)
    start_angle = math.atan2(A[1] - P[1], A[0] - P[0])
    end_angle = math.atan2(C[1] - P[1], C[0] - P[0])

    arc_angle = end_angle - start_angle
    if cross(B - A, C - A) > 0:  # counter-clockwise
        if arc_angle < 0:
            arc_angle += 2 * math.pi
    else:  # clockwise
        if arc_angle > 0:
            arc_angle -= 2 * math.pi

    num_segments = 2
    if 2 * R > PERFECT_MAX_ERROR:
        step = 2 * math.acos(1 - PERFECT_MAX_ERROR / R)
        num_segments = min(PERFECT_MAX_SEGMENTS, max(2, math.ceil(abs(arc_angle) / step)))

    angles = start_angle + arc_angle * np.linspace(0, 1, num_segments + 1)
    return P + R * np.stack([np.cos(angles), np.sin(angles)], axis=1)


def catmull_point(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: Float[ndarray, "T"]) -> Points:
    t = t[:,None]
    t2 = t * t
    t3 = t2 * t
    return .5 * (
        2 * p1
        + (-p0 + p2) * t
        + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
        + (-p0 + 3 * p1 - 3 * p2 + p3) * t3
    )


def flatten_catmull(points: Points) -> Points:
    """uniform catmull-rom spline through every point"""
    points = np.asarray(points, dtype=float)
    if len(points) < 2:
        return points.reshape(-1, 2)

    pieces = []
    last = len(points) - 1
    for i in range(last):
        p0 = points[max(0, i - 1)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(last, i + 2)]

        segments = max(CATMULL_MIN_SEGMENTS, math.ceil(length(p2 - p1) / CATMULL_STEP))
        pieces.append(catmull_point(p0, p1, p2, p3, np.linspace(0, 1, segments + 1)))

    return np.concatenate(pieces, axis=0)
