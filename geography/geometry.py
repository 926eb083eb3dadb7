"""
Geometry primitives for boundary containment.

Containment in this library is decided by a plain even-odd ray cast against
the exterior ring of a polygon, and a feature is represented by the vertex
average of its exterior ring. Both are approximations that the hierarchy
lookups depend on, so they are implemented here explicitly instead of
delegating to shapely predicates:

- holes are ignored, a point inside a hole counts as contained
- a MultiPolygon is represented by its first part only
- the vertex average of a concave ring can fall outside the ring
"""

from typing import List, Optional, Sequence

import numpy as np
from shapely.geometry import MultiPolygon, Point, Polygon

from .models import BoundaryFeature, Bounds, Coordinate


def _ring(polygon: Polygon) -> List[Coordinate]:
    """Exterior ring of a polygon as (x, y) pairs, closing vertex included."""
    return [(float(c[0]), float(c[1])) for c in polygon.exterior.coords]


def point_in_polygon(point: Sequence[float], ring: Sequence[Sequence[float]]) -> bool:
    """
    Even-odd ray casting test of a point against one closed ring.

    A horizontal ray is cast from the point towards +x and every edge it
    crosses toggles the result. Points lying exactly on an edge may land on
    either side.

    Args:
        point: (x, y) coordinate
        ring: Closed ring of (x, y) vertices (first vertex == last vertex)

    Returns:
        True if the point is inside the ring
    """
    x, y = point[0], point[1]
    inside = False

    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]

        intersect = ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi)
        if intersect:
            inside = not inside
        j = i

    return inside


def points_in_polygon(points: np.ndarray, ring: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Vectorised `point_in_polygon` over an (n, 2) array of points.

    Uses the same edge order and arithmetic as the scalar test so both agree
    point for point.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    x = pts[:, 0]
    y = pts[:, 1]
    inside = np.zeros(len(pts), dtype=bool)

    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = float(ring[i][0]), float(ring[i][1])
        xj, yj = float(ring[j][0]), float(ring[j][1])
        j = i

        # Horizontal edges never straddle the ray
        if yi == yj:
            continue

        straddles = (yi > y) != (yj > y)
        crossing = straddles & (x < (xj - xi) * (y - yi) / (yj - yi) + xi)
        inside ^= crossing

    return inside


def _vertex_average(ring: List[Coordinate]) -> Optional[Coordinate]:
    count = len(ring) - 1  # Exclude the closing point
    if count <= 0:
        return None

    sum_x = 0.0
    sum_y = 0.0
    for i in range(count):
        sum_x += ring[i][0]
        sum_y += ring[i][1]

    return (sum_x / count, sum_y / count)


def centroid(feature: BoundaryFeature) -> Optional[Coordinate]:
    """
    Representative point of a feature.

    Polygon: vertex average of the exterior ring (not area weighted).
    MultiPolygon: vertex average of the first part's exterior ring.
    Point: its own coordinate.

    Returns:
        (x, y) tuple, or None for unsupported, missing or empty geometries
    """
    geometry = feature.geometry
    if geometry is None or geometry.is_empty:
        return None

    if isinstance(geometry, Polygon):
        return _vertex_average(_ring(geometry))

    if isinstance(geometry, MultiPolygon):
        return _vertex_average(_ring(geometry.geoms[0]))

    if isinstance(geometry, Point):
        return (float(geometry.x), float(geometry.y))

    return None


def _exterior_rings(feature: BoundaryFeature) -> List[List[Coordinate]]:
    geometry = feature.geometry
    if geometry is None or geometry.is_empty:
        return []

    if isinstance(geometry, Polygon):
        return [_ring(geometry)]

    if isinstance(geometry, MultiPolygon):
        return [_ring(polygon) for polygon in geometry.geoms if not polygon.is_empty]

    return []


def is_point_in_feature(point: Sequence[float], feature: BoundaryFeature) -> bool:
    """
    Check if a point lies inside a feature's exterior ring(s).

    Holes are not tested. For a MultiPolygon the point may fall in any part.
    Unsupported geometry kinds contain nothing.
    """
    return any(point_in_polygon(point, ring) for ring in _exterior_rings(feature))


def points_in_feature(points: np.ndarray, feature: BoundaryFeature) -> np.ndarray:
    """Vectorised `is_point_in_feature` returning a boolean mask."""
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    mask = np.zeros(len(pts), dtype=bool)
    for ring in _exterior_rings(feature):
        mask |= points_in_polygon(pts, ring)
    return mask


def feature_bounds(feature: BoundaryFeature) -> Optional[Bounds]:
    """Bounding box over every coordinate of the feature, or None if it has none."""
    geometry = feature.geometry
    if geometry is None or geometry.is_empty:
        return None

    min_lon, min_lat, max_lon, max_lat = geometry.bounds
    return Bounds(
        min_lon=float(min_lon),
        min_lat=float(min_lat),
        max_lon=float(max_lon),
        max_lat=float(max_lat),
    )
