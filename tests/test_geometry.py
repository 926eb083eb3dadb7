"""Tests for the ray-casting, centroid and bounds primitives."""

import numpy as np
import pytest
from shapely.geometry import LineString, MultiPolygon, Point, Polygon, box

from geography.geometry import (
    centroid,
    feature_bounds,
    is_point_in_feature,
    point_in_polygon,
    points_in_feature,
    points_in_polygon,
)
from geography.models import BoundaryFeature

SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]

# U shape: the vertex average (5, 5.5) sits in the notch, outside the shape
U_SHAPE = [(0, 0), (10, 0), (10, 10), (8, 10), (8, 2), (2, 2), (2, 10), (0, 10), (0, 0)]

PROBES = [(5, 1), (1, 5), (9, 9), (5, 5), (5, 5.5), (12, 5), (-1, 1), (5, 11), (3, 2.5)]


def _rotations(ring):
    """Every cyclic rotation of a closed ring, re-closed."""
    open_ring = ring[:-1]
    for k in range(len(open_ring)):
        rotated = open_ring[k:] + open_ring[:k]
        yield rotated + [rotated[0]]


def test_point_in_square():
    assert point_in_polygon((5, 5), SQUARE)
    assert point_in_polygon((0.5, 9.5), SQUARE)
    assert not point_in_polygon((15, 5), SQUARE)
    assert not point_in_polygon((5, -0.1), SQUARE)


def test_point_in_concave_ring():
    assert point_in_polygon((5, 1), U_SHAPE)
    assert point_in_polygon((1, 5), U_SHAPE)
    assert point_in_polygon((9, 9), U_SHAPE)
    assert not point_in_polygon((5, 5), U_SHAPE)


@pytest.mark.parametrize("ring", [SQUARE, U_SHAPE])
def test_ray_casting_invariant_under_rotation(ring):
    expected = [point_in_polygon(p, ring) for p in PROBES]
    for rotated in _rotations(ring):
        assert [point_in_polygon(p, rotated) for p in PROBES] == expected


def test_vectorised_test_matches_scalar_test():
    xs, ys = np.meshgrid(np.linspace(-1, 11, 49), np.linspace(-1, 11, 49))
    points = np.column_stack([xs.ravel(), ys.ravel()])

    mask = points_in_polygon(points, U_SHAPE)

    assert mask.tolist() == [point_in_polygon(p, U_SHAPE) for p in points.tolist()]


def test_square_centroid():
    feature = BoundaryFeature("square", "1", Polygon(SQUARE))

    assert centroid(feature) == pytest.approx((5.0, 5.0))


def test_centroid_is_vertex_average_not_area_centroid():
    # Extra vertices along the bottom edge pull the average down
    ring = [(0, 0), (2, 0), (4, 0), (6, 0), (8, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
    feature = BoundaryFeature("skewed", "2", Polygon(ring))

    x, y = centroid(feature)

    assert x == pytest.approx(5.0)
    assert y == pytest.approx(2.5)


def test_concave_centroid_falls_outside_its_own_polygon():
    feature = BoundaryFeature("u", "3", Polygon(U_SHAPE))

    point = centroid(feature)

    assert point == pytest.approx((5.0, 5.5))
    assert is_point_in_feature(point, feature) is False


def test_multipolygon_centroid_uses_first_part_only():
    feature = BoundaryFeature("islands", "4", MultiPolygon([box(0, 0, 2, 2), box(10, 10, 20, 20)]))

    assert centroid(feature) == pytest.approx((1.0, 1.0))


def test_point_centroid_is_its_coordinate():
    assert centroid(BoundaryFeature("p", "5", Point(3.5, -2.0))) == (3.5, -2.0)


@pytest.mark.parametrize(
    "geometry",
    [None, LineString([(0, 0), (1, 1)]), Polygon()],
)
def test_centroid_has_no_result_for_unsupported_or_empty_geometry(geometry):
    assert centroid(BoundaryFeature("x", "6", geometry)) is None


def test_holes_are_ignored():
    with_hole = Polygon(SQUARE, holes=[[(4, 4), (6, 4), (6, 6), (4, 6), (4, 4)]])
    feature = BoundaryFeature("donut", "7", with_hole)

    assert is_point_in_feature((5, 5), feature)


def test_multipolygon_membership_checks_every_part():
    feature = BoundaryFeature("islands", "8", MultiPolygon([box(0, 0, 2, 2), box(10, 10, 20, 20)]))

    assert is_point_in_feature((1, 1), feature)
    assert is_point_in_feature((15, 15), feature)
    assert not is_point_in_feature((5, 5), feature)


@pytest.mark.parametrize("geometry", [None, Point(1, 1), LineString([(0, 0), (2, 2)])])
def test_unsupported_geometry_contains_nothing(geometry):
    feature = BoundaryFeature("x", "9", geometry)

    assert is_point_in_feature((1, 1), feature) is False
    assert points_in_feature(np.array([[1.0, 1.0]]), feature).tolist() == [False]


def test_feature_bounds():
    feature = BoundaryFeature("islands", "10", MultiPolygon([box(0, 0, 2, 2), box(10, 10, 20, 20)]))

    bounds = feature_bounds(feature)

    assert (bounds.min_lon, bounds.min_lat, bounds.max_lon, bounds.max_lat) == (0, 0, 20, 20)


def test_point_bounds_are_degenerate():
    bounds = feature_bounds(BoundaryFeature("p", "11", Point(3, 4)))

    assert (bounds.min_lon, bounds.min_lat, bounds.max_lon, bounds.max_lat) == (3, 4, 3, 4)
    assert feature_bounds(BoundaryFeature("none", "12", None)) is None
