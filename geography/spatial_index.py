"""
Precomputed containment index for a fixed pair of tiers.

The functions in `geography.containment` scan every child against every
parent on each call. When the same pair of collections is queried many
times (a selection panel re-rendering on every change), `SpatialIndex`
builds shapely STR-trees once:

- parent bounding boxes, queried with a child centroid
- child centroids, queried with a parent bounding box

Tree hits are only candidates. Each one is confirmed with the same ray
casting test used by the naive functions, and candidates are visited in
collection order, so results are identical to `children_of` / `parent_of`.

Example:
    index = HierarchyIndex(regions, departments, arrondissements)
    index.departments_in_region("Centre")
    index.lineage_of_arrondissement("Yaoundé I")
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from loguru import logger
from shapely import STRtree
from shapely.geometry import MultiPolygon, Point, Polygon

from ops import Config

from .features import boundary_collection_from_geojson
from .geometry import centroid, is_point_in_feature, points_in_feature
from .models import BoundaryCollection, BoundaryFeature


class SpatialIndex:
    """Containment lookups between one child tier and one parent tier."""

    def __init__(
        self,
        children: Optional[BoundaryCollection],
        parents: Optional[BoundaryCollection],
    ):
        self.children = children if children is not None else BoundaryCollection("children")
        self.parents = parents if parents is not None else BoundaryCollection("parents")

        # Positions in collection order of the parents that can contain anything
        self._parent_positions: List[int] = [
            position
            for position, parent in enumerate(self.parents.features)
            if parent.name
            and isinstance(parent.geometry, (Polygon, MultiPolygon))
            and not parent.geometry.is_empty
        ]
        self._parent_tree = STRtree(
            [self.parents.features[position].geometry for position in self._parent_positions]
        )

        self._child_positions: List[int] = []
        child_points: List[Tuple[float, float]] = []
        for position, child in enumerate(self.children.features):
            if not child.name:
                continue
            point = centroid(child)
            if point is None:
                continue
            self._child_positions.append(position)
            child_points.append(point)
        self._child_points = np.array(child_points, dtype=float).reshape(-1, 2)
        self._child_tree = STRtree([Point(x, y) for x, y in child_points])

        self._children_cache: Dict[str, List[BoundaryFeature]] = {}
        self._parent_cache: Dict[str, Optional[str]] = {}

        logger.debug(
            f"🗂️ Indexed {len(self._child_positions)}/{len(self.children)} {self.children.tier} centroids "
            f"against {len(self._parent_positions)}/{len(self.parents)} {self.parents.tier} boundaries"
        )

    def features_within(self, parent: BoundaryFeature) -> List[BoundaryFeature]:
        """Children whose centroid lies in `parent`, in child collection order."""
        geometry = parent.geometry
        if not parent.name:
            return []
        if not isinstance(geometry, (Polygon, MultiPolygon)) or geometry.is_empty:
            return []
        if not self._child_positions:
            return []

        hits = np.sort(self._child_tree.query(geometry))
        if len(hits) == 0:
            return []

        mask = points_in_feature(self._child_points[hits], parent)
        return [self.children.features[self._child_positions[hit]] for hit in hits[mask]]

    def children_of(self, parent_name: Optional[str]) -> List[BoundaryFeature]:
        """Memoised equivalent of `containment.children_of`."""
        if not parent_name:
            return []
        if parent_name not in self._children_cache:
            parent = self.parents.find(parent_name)
            if parent is None:
                logger.debug(f"🔍 Parent '{parent_name}' not found in {self.parents.tier} tier")
                self._children_cache[parent_name] = []
            else:
                self._children_cache[parent_name] = self.features_within(parent)
        return list(self._children_cache[parent_name])

    def parent_of(self, child_name: Optional[str]) -> Optional[str]:
        """Memoised equivalent of `containment.parent_of`."""
        if not child_name:
            return None
        if child_name not in self._parent_cache:
            self._parent_cache[child_name] = self._lookup_parent(child_name)
        return self._parent_cache[child_name]

    def _lookup_parent(self, child_name: str) -> Optional[str]:
        child = self.children.find(child_name)
        if child is None:
            logger.debug(f"🔍 '{child_name}' not found in {self.children.tier} tier")
            return None

        point = centroid(child)
        if point is None or not self._parent_positions:
            return None

        # Lowest collection position first so the first containing parent wins
        for hit in np.sort(self._parent_tree.query(Point(*point))):
            parent = self.parents.features[self._parent_positions[hit]]
            if is_point_in_feature(point, parent):
                return parent.name

        return None


class HierarchyIndex:
    """Region → department → arrondissement lookups over three fixed tiers."""

    def __init__(
        self,
        regions: Optional[BoundaryCollection],
        departments: Optional[BoundaryCollection],
        arrondissements: Optional[BoundaryCollection],
    ):
        self.regions = regions if regions is not None else BoundaryCollection("region")
        self.departments = departments if departments is not None else BoundaryCollection("department")
        self.arrondissements = (
            arrondissements if arrondissements is not None else BoundaryCollection("arrondissement")
        )

        self.department_index = SpatialIndex(self.departments, self.regions)
        self.arrondissement_index = SpatialIndex(self.arrondissements, self.departments)

    @classmethod
    def from_geojson(
        cls,
        regions: Any,
        departments: Any,
        arrondissements: Any,
        config: Optional[Config] = None,
    ) -> "HierarchyIndex":
        """
        Build the index from three parsed GeoJSON FeatureCollections.

        Tier labels and name/id properties come from the configuration. A tier
        that is missing or malformed is left empty and its lookups return nothing.
        """
        config = config or Config.from_dict({})
        tiers = [
            boundary_collection_from_geojson(data, config.get_tier_name(key), config=config)
            for key, data in (
                ("region", regions),
                ("department", departments),
                ("arrondissement", arrondissements),
            )
        ]
        return cls(*tiers)

    def departments_in_region(self, region_name: Optional[str]) -> List[BoundaryFeature]:
        return self.department_index.children_of(region_name)

    def arrondissements_in_department(self, department_name: Optional[str]) -> List[BoundaryFeature]:
        return self.arrondissement_index.children_of(department_name)

    def arrondissements_in_region(self, region_name: Optional[str]) -> List[BoundaryFeature]:
        """
        Arrondissements of every department in the region.

        Resolved through the department tier, so an arrondissement belongs to
        the region of its own department. Arrondissement collection order.
        """
        selected = set()
        for department in self.departments_in_region(region_name):
            for arrondissement in self.arrondissements_in_department(department.name):
                selected.add(id(arrondissement))
        return [feature for feature in self.arrondissements if id(feature) in selected]

    def region_of_department(self, department_name: Optional[str]) -> Optional[str]:
        return self.department_index.parent_of(department_name)

    def department_of_arrondissement(self, arrondissement_name: Optional[str]) -> Optional[str]:
        return self.arrondissement_index.parent_of(arrondissement_name)

    def lineage_of_arrondissement(
        self, arrondissement_name: Optional[str]
    ) -> Tuple[Optional[str], Optional[str]]:
        """(region, department) names for an arrondissement; None where unresolved."""
        department = self.department_of_arrondissement(arrondissement_name)
        if department is None:
            return (None, None)
        return (self.region_of_department(department), department)
