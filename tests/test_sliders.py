"""Tests for curve flattening and slider path construction."""

import math

import numpy as np
import pytest

import bezier

from osu_beatmap.beatmap import parse
from osu_beatmap.bezier import BezierCurve
from osu_beatmap.curves import (
    BEZIER_TOLERANCE,
    PERFECT_MAX_ERROR,
    flatten_linear,
    flatten_bezier,
    flatten_multibezier,
    flatten_perfect,
    flatten_catmull,
    circle_center,
)
from osu_beatmap.hit_objects import SliderData, PathType
from osu_beatmap.sliders import (
    compute_path,
    clamp_path_to_distance,
    path_length,
    slider_end_position,
    cache_path,
)
from osu_beatmap.vector import vec2, length, lerp, normalize, cross, point_to_segment_distance


def slider(path_type, points, distance, repetitions=1):
    return SliderData(
        pos=points[0],
        path_type=path_type,
        control_points=list(points[1:]),
        repetitions=repetitions,
        distance=float(distance),
    )

def arr(*points):
    return np.array(points, dtype=float)


class TestVector:
    def test_primitives(self):
        a, b = vec2(0, 0), vec2(3, 4)
        assert length(b - a) == 5.
        np.testing.assert_allclose(lerp(a, b, .5), [1.5, 2.])
        np.testing.assert_allclose(normalize(b), [.6, .8])
        np.testing.assert_allclose(normalize(a), [0., 0.])
        assert cross(vec2(1, 0), vec2(0, 1)) == 1.

    def test_point_to_segment_distance(self):
        a, b = vec2(0, 0), vec2(10, 0)
        assert point_to_segment_distance(vec2(5, 3), a, b) == 3.
        assert point_to_segment_distance(vec2(-4, 3), a, b) == 5.
        assert point_to_segment_distance(vec2(1, 1), a, a) == pytest.approx(math.sqrt(2))


class TestBezier:
    def test_split_at_orders_both_halves(self):
        curve = BezierCurve(arr((0, 0), (100, 200), (200, 0)).T)
        left, right = curve.split_at(.5)
        np.testing.assert_allclose(left.p[:, 0], [0, 0])
        np.testing.assert_allclose(left.p[:, -1], [100, 100])
        np.testing.assert_allclose(right.p[:, 0], [100, 100])
        np.testing.assert_allclose(right.p[:, -1], [200, 0])

    def test_flatten_lies_on_curve(self):
        nodes = arr((0, 0), (50, 250), (150, -100), (200, 100))
        path = flatten_bezier(nodes)

        np.testing.assert_allclose(path[0], nodes[0])
        np.testing.assert_allclose(path[-1], nodes[-1])

        reference = bezier.Curve.from_nodes(nodes.T).evaluate_multi(np.linspace(0, 1, 4001)).T
        dists = np.linalg.norm(path[:, None] - reference[None], axis=-1).min(axis=1)
        assert dists.max() < .5

        # flattened length approaches the true arc length from below
        assert path_length(path) == pytest.approx(bezier.Curve.from_nodes(nodes.T).length, rel=5e-3)

    def test_flatten_straight(self):
        np.testing.assert_allclose(flatten_bezier(arr((0, 0), (50, 0), (100, 0))), arr((0, 0), (100, 0)))

    def test_flatten_degenerate(self):
        assert flatten_bezier(arr((5, 5))).shape == (1, 2)
        path = flatten_bezier(arr((5, 5), (5, 5), (5, 5)))
        assert np.isfinite(path).all()

    def test_multibezier_splits_at_duplicates(self):
        path = flatten_multibezier(arr((0, 0), (100, 0), (100, 0), (100, 100)))
        np.testing.assert_allclose(path, arr((0, 0), (100, 0), (100, 0), (100, 100)))

    def test_multibezier_drops_single_point_segments(self):
        path = flatten_multibezier(arr((0, 0), (0, 0), (100, 0), (100, 0), (100, 0)))
        np.testing.assert_allclose(path, arr((0, 0), (100, 0)))


class TestLinear:
    def test_exact_endpoints(self):
        path = flatten_linear(vec2(200, 200), vec2(300, 300), 100.)
        np.testing.assert_allclose(path[0], [200, 200])
        np.testing.assert_allclose(path[-1], [200 + 50 * 2**.5, 200 + 50 * 2**.5])
        assert len(path) > 2
        assert path_length(path) == pytest.approx(100.)

    def test_no_distance_goes_to_end(self):
        path = flatten_linear(vec2(0, 0), vec2(30, 40), 0.)
        np.testing.assert_allclose(path[-1], [30, 40])

    def test_zero_length(self):
        assert flatten_linear(vec2(1, 1), vec2(1, 1), 50.).shape == (1, 2)


class TestPerfect:
    def test_circle_center(self):
        np.testing.assert_allclose(circle_center(vec2(0, 0), vec2(50, 50), vec2(100, 0)), [50, 0])
        assert circle_center(vec2(0, 0), vec2(50, 0), vec2(100, 0)) is None

    def test_arc(self):
        path = flatten_perfect(arr((0, 0), (50, 50), (100, 0)))
        np.testing.assert_allclose(path[0], [0, 0], atol=1e-9)
        np.testing.assert_allclose(path[-1], [100, 0], atol=1e-9)

        radii = np.linalg.norm(path - [50, 0], axis=1)
        np.testing.assert_allclose(radii, 50.)
        # bulges through the middle control point
        assert path[:, 1].max() == pytest.approx(50., abs=.2)
        # within max error of the semicircle
        assert path_length(path) == pytest.approx(50 * math.pi, abs=PERFECT_MAX_ERROR * len(path))

    def test_arc_direction(self):
        # same endpoints, control point on the other side
        path = flatten_perfect(arr((0, 0), (50, -50), (100, 0)))
        assert (path[:, 1] <= 1e-9).all()

    def test_collinear_falls_back_to_bezier(self):
        path = flatten_perfect(arr((0, 0), (50, 0), (100, 0)))
        np.testing.assert_allclose(path, arr((0, 0), (100, 0)))

    def test_wrong_point_count_falls_back_to_bezier(self):
        points = arr((0, 0), (50, 50), (100, 0), (150, 50))
        np.testing.assert_allclose(flatten_perfect(points), flatten_bezier(points))


class TestCatmull:
    def test_passes_through_points(self):
        points = arr((0, 0), (100, 50), (200, 0), (300, 50))
        path = flatten_catmull(points)
        for p in points:
            assert np.linalg.norm(path - p, axis=1).min() < 1e-9
        np.testing.assert_allclose(path[0], points[0])
        np.testing.assert_allclose(path[-1], points[-1])

    def test_minimum_sampling(self):
        assert len(flatten_catmull(arr((0, 0), (1, 0)))) == 9

    def test_single_point(self):
        assert flatten_catmull(arr((3, 4))).shape == (1, 2)


class TestClamp:
    PATH = arr((0, 0), (10, 0), (10, 10))

    def test_truncate(self):
        np.testing.assert_allclose(clamp_path_to_distance(self.PATH, 15.), arr((0, 0), (10, 0), (10, 5)))

    def test_extend(self):
        np.testing.assert_allclose(clamp_path_to_distance(self.PATH, 30.), arr((0, 0), (10, 0), (10, 10), (10, 20)))

    def test_exact(self):
        assert path_length(clamp_path_to_distance(self.PATH, 20.)) == pytest.approx(20.)

    def test_zero_and_negative(self):
        for d in [0., -5.]:
            path = clamp_path_to_distance(self.PATH, d)
            assert path_length(path) == 0.
            np.testing.assert_allclose(path[0], [0, 0])

    def test_skips_zero_length_segments(self):
        path = clamp_path_to_distance(arr((0, 0), (0, 0), (5, 0), (5, 0)), 8.)
        np.testing.assert_allclose(path, arr((0, 0), (5, 0), (8, 0)))

    def test_short_paths_unchanged(self):
        assert clamp_path_to_distance(arr((1, 2)), 10.).shape == (1, 2)
        assert clamp_path_to_distance(np.zeros((0, 2)), 10.).shape == (0, 2)

    def test_all_zero_length(self):
        np.testing.assert_allclose(clamp_path_to_distance(arr((1, 1), (1, 1)), 10.), arr((1, 1)))


class TestComputePath:
    @pytest.mark.parametrize("path_type,points", [
        (PathType.LINEAR, [(0, 0), (100, 100)]),
        (PathType.BEZIER, [(0, 0), (100, 200), (200, 0)]),
        (PathType.BEZIER, [(0, 0), (100, 0), (100, 0), (100, 100), (0, 100)]),
        (PathType.PERFECT, [(0, 0), (50, 50), (100, 0)]),
        (PathType.PERFECT, [(0, 0), (50, 0), (100, 0)]),
        (PathType.CATMULL, [(0, 0), (60, 20), (110, 40), (160, 20)]),
    ])
    @pytest.mark.parametrize("distance", [20., 100., 137.5, 400.])
    def test_length_matches_distance(self, path_type, points, distance):
        path = compute_path(slider(path_type, points, distance))
        np.testing.assert_allclose(path[0], points[0], atol=1e-9)
        assert np.isfinite(path).all()
        assert path_length(path) == pytest.approx(distance, abs=1e-6)

    def test_collinear_perfect(self):
        path = compute_path(slider(PathType.PERFECT, [(0, 0), (50, 0), (100, 0)], 150.))
        assert len(path) >= 2
        np.testing.assert_allclose(path[-1], [150, 0])
        assert path_length(path) == pytest.approx(150.)

    def test_pure(self):
        s = slider(PathType.BEZIER, [(0, 0), (100, 200), (200, 0)], 100.)
        before = SliderData(**{ **s.__dict__ })
        np.testing.assert_allclose(compute_path(s), compute_path(s))
        assert s == before
        assert s.computed_path is None

    def test_no_control_points(self):
        path = compute_path(SliderData(pos=(5, 5), path_type=PathType.LINEAR, control_points=[], distance=10.))
        np.testing.assert_allclose(path, arr((5, 5)))

    def test_parsed_sliders(self, full_map):
        for ho in parse(full_map).objects:
            if isinstance(ho.data, SliderData):
                assert path_length(compute_path(ho.data)) == pytest.approx(ho.data.distance, abs=1e-6)


class TestEndPosition:
    def test_odd_repetitions_end_of_path(self):
        s = slider(PathType.LINEAR, [(0, 0), (100, 0)], 60., repetitions=3)
        assert slider_end_position(s) == pytest.approx((60., 0.))

    def test_even_repetitions_back_at_start(self):
        s = slider(PathType.LINEAR, [(7, 9), (100, 0)], 60., repetitions=2)
        assert slider_end_position(s) == (7., 9.)

    def test_uses_cached_path(self):
        s = slider(PathType.LINEAR, [(0, 0), (100, 0)], 60.)
        path = cache_path(s)
        assert s.computed_path is path
        assert cache_path(s) is path
        s.computed_path = arr((0, 0), (1, 2))
        assert slider_end_position(s) == (1., 2.)
