from collections.abc import Callable

import numpy as np

from .hit_objects import SliderData, PathType, Polyline, Position
from .vector import lerp
from .curves import (
    Points,
    flatten_linear,
    flatten_perfect,
    flatten_catmull,
    flatten_multibezier,
)

def _linear(slider: SliderData, points: Points) -> Points:
    A, B = points[:2]
    return flatten_linear(A, B, slider.distance)

def _perfect(_: SliderData, points: Points) -> Points:
    return flatten_perfect(points)

def _catmull(_: SliderData, points: Points) -> Points:
    return flatten_catmull(points)

def _bezier(_: SliderData, points: Points) -> Points:
    return flatten_multibezier(points)

FLATTENERS: dict[PathType, Callable[[SliderData, Points], Points]] = {
    PathType.LINEAR: _linear,
    PathType.PERFECT: _perfect,
    PathType.CATMULL: _catmull,
}

def control_points(slider: SliderData) -> Points:
    """all control points of the slider, including its start position"""
    return np.array([slider.pos, *slider.control_points], dtype=float)

def compute_path(slider: SliderData) -> Polyline:
    """
    flatten the slider's curve into a polyline whose length is exactly `slider.distance`
    """
    points = control_points(slider)
    if len(points) < 2:
        return points

    flatten = FLATTENERS.get(slider.path_type, _bezier)
    return clamp_path_to_distance(flatten(slider, points), slider.distance)

def clamp_path_to_distance(path: Polyline, distance: float) -> Polyline:
    """
    truncate `path` to exactly `distance` along its length.
    if `path` is shorter than `distance`, extend it in a straight line along its final direction
    """
    if len(path) < 2:
        return path

    distance = max(0., float(distance))
    seg_vecs = path[1:] - path[:-1]
    seg_lens = np.linalg.norm(seg_vecs, axis=1)

    result = [path[0]]
    travelled = 0.
    last_dir = None
    for p, v, l in zip(path[1:], seg_vecs, seg_lens):
        if l == 0:
            continue
        last_dir = v / l

        if travelled + l >= distance:
            result.append(lerp(result[-1], p, (distance - travelled) / l))
            return np.array(result)

        travelled += l
        result.append(p)

    if last_dir is not None and travelled < distance:
        result.append(result[-1] + last_dir * (distance - travelled))
    return np.array(result)

def path_length(path: Polyline) -> float:
    if len(path) < 2:
        return 0.
    return float(np.linalg.norm(path[1:] - path[:-1], axis=1).sum())

def cache_path(slider: SliderData) -> Polyline:
    """compute the slider's path once and store it on the slider"""
    if slider.computed_path is None:
        slider.computed_path = compute_path(slider)
    return slider.computed_path

def slider_end_position(slider: SliderData) -> Position:
    """
    where the slider ends: back at its start after an even number of slides,
    otherwise at the end of its path
    """
    x, y = slider.pos
    if slider.repetitions % 2 == 0:
        return (float(x), float(y))

    path = slider.computed_path if slider.computed_path is not None else compute_path(slider)
    if len(path):
        x, y = path[-1]
    return (float(x), float(y))
