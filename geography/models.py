"""
Boundary data structures for the administrative hierarchy.

A tier (region, department or arrondissement) is a BoundaryCollection of
BoundaryFeature records. Geometries are shapely objects with coordinates in
(longitude, latitude) order.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from shapely.geometry.base import BaseGeometry

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class BoundaryFeature:
    """One administrative unit's shape."""

    name: str
    id: str
    geometry: Optional[BaseGeometry] = None

    @property
    def geometry_type(self) -> Optional[str]:
        if self.geometry is None or self.geometry.is_empty:
            return None
        return self.geometry.geom_type


@dataclass(frozen=True)
class BoundaryCollection:
    """Ordered features of one tier. Names are expected to be unique within the tier."""

    tier: str
    features: Tuple[BoundaryFeature, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but store an immutable tuple
        object.__setattr__(self, "features", tuple(self.features))

    def __iter__(self) -> Iterator[BoundaryFeature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)

    def find(self, name: Optional[str]) -> Optional[BoundaryFeature]:
        """Return the first feature named `name` (first match wins on duplicates)."""
        if not name:
            return None
        for feature in self.features:
            if feature.name == name:
                return feature
        return None

    def names(self) -> List[str]:
        return [feature.name for feature in self.features]


@dataclass(frozen=True)
class Bounds:
    """Bounding box of a feature in degrees."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float


@dataclass(frozen=True)
class Option:
    """Pick-list entry built from a boundary feature."""

    value: str
    label: str
