"""
Geography package for Election Geography

Boundary records, containment geometry and hierarchy lookups for the
region → department → arrondissement tiers.
"""

from .containment import (
    PartitionReport,
    children_of,
    features_within_parent,
    parent_of,
    partition_report,
)
from .features import (
    boundary_collection_from_geodataframe,
    boundary_collection_from_geojson,
    child_options,
    count_units,
    option_names,
    validate_geojson,
)
from .geometry import centroid, feature_bounds, is_point_in_feature, point_in_polygon
from .models import BoundaryCollection, BoundaryFeature, Bounds, Option
from .selection import Selection
from .spatial_index import HierarchyIndex, SpatialIndex

__all__ = [
    "BoundaryCollection",
    "BoundaryFeature",
    "Bounds",
    "Option",
    "point_in_polygon",
    "centroid",
    "is_point_in_feature",
    "feature_bounds",
    "features_within_parent",
    "children_of",
    "parent_of",
    "partition_report",
    "PartitionReport",
    "SpatialIndex",
    "HierarchyIndex",
    "Selection",
    "validate_geojson",
    "boundary_collection_from_geojson",
    "boundary_collection_from_geodataframe",
    "option_names",
    "child_options",
    "count_units",
]
