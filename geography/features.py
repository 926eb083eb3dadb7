"""
Boundary ingestion and pick-list helpers.

Turns already-parsed GeoJSON (a dict, or a GeoDataFrame read by the caller)
into validated BoundaryCollection records. Features without a name are
flagged in the log and left out; they could never be looked up.

Usage:
    gdf = gpd.read_file("geoBoundaries-CMR-ADM2_simplified.geojson")
    departments = boundary_collection_from_geodataframe(gdf, tier="department")
    option_names(departments)
"""

from typing import Any, Dict, List, Optional

import geopandas as gpd
import pandas as pd
from loguru import logger
from shapely.errors import GeometryTypeError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from ops import Config

from .containment import children_of
from .models import BoundaryCollection, BoundaryFeature, Option


def _name_fields(config: Optional[Config], name_field: Optional[str], id_field: Optional[str]):
    config = config or Config.from_dict({})
    return (
        name_field or config.get_boundary_setting("name_field"),
        id_field or config.get_boundary_setting("id_field"),
    )


def _clean_property(value: Any) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def validate_geojson(geojson: Any, name_field: str = "shapeName") -> bool:
    """
    Validate GeoJSON structure.

    Args:
        geojson: Parsed GeoJSON object
        name_field: Property carrying the unit name

    Returns:
        True for a FeatureCollection where at least one feature carries a name
    """
    if not isinstance(geojson, dict):
        return False
    if geojson.get("type") != "FeatureCollection":
        return False
    features = geojson.get("features")
    if not isinstance(features, list):
        return False

    return any(
        isinstance(feature, dict)
        and isinstance(feature.get("properties"), dict)
        and (feature["properties"].get(name_field) or feature["properties"].get("name"))
        for feature in features
    )


def boundary_collection_from_geojson(
    geojson: Any,
    tier: str,
    name_field: Optional[str] = None,
    id_field: Optional[str] = None,
    config: Optional[Config] = None,
) -> BoundaryCollection:
    """
    Build a BoundaryCollection from a parsed GeoJSON FeatureCollection.

    Args:
        geojson: Parsed GeoJSON dictionary
        tier: Tier label (region, department, arrondissement)
        name_field: Property carrying the unit name (default from config)
        id_field: Property carrying the unit identifier (default from config)
        config: Configuration instance

    Returns:
        BoundaryCollection, empty when the input is not a FeatureCollection
    """
    name_field, id_field = _name_fields(config, name_field, id_field)

    if not isinstance(geojson, dict) or geojson.get("type") != "FeatureCollection":
        logger.warning(f"⚠️ {tier} boundaries are not a GeoJSON FeatureCollection - tier left empty")
        return BoundaryCollection(tier)

    raw_features = geojson.get("features")
    if not isinstance(raw_features, list):
        logger.warning(f"⚠️ {tier} FeatureCollection has no features list - tier left empty")
        return BoundaryCollection(tier)

    features: List[BoundaryFeature] = []
    unnamed = 0
    bad_geometry = 0

    for raw in raw_features:
        if not isinstance(raw, dict):
            unnamed += 1
            continue

        properties = raw.get("properties") or {}
        name = _clean_property(properties.get(name_field))
        if not name:
            unnamed += 1
            continue

        geometry = None
        if raw.get("geometry"):
            try:
                geometry = shape(raw["geometry"])
            except (GeometryTypeError, KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"  Unreadable geometry for '{name}': {e}")
                bad_geometry += 1

        features.append(
            BoundaryFeature(name=name, id=_clean_property(properties.get(id_field)), geometry=geometry)
        )

    _log_ingestion(tier, len(raw_features), len(features), unnamed, bad_geometry, name_field)
    return BoundaryCollection(tier, tuple(features))


def boundary_collection_from_geodataframe(
    gdf: gpd.GeoDataFrame,
    tier: str,
    name_field: Optional[str] = None,
    id_field: Optional[str] = None,
    config: Optional[Config] = None,
) -> BoundaryCollection:
    """
    Build a BoundaryCollection from a GeoDataFrame loaded by the caller.

    Geometries are reprojected to the configured geographic CRS when the frame
    declares another one, so rings are always (longitude, latitude).
    """
    config = config or Config.from_dict({})
    name_field, id_field = _name_fields(config, name_field, id_field)

    if gdf is None or name_field not in gdf.columns:
        logger.warning(f"⚠️ {tier} GeoDataFrame has no '{name_field}' column - tier left empty")
        return BoundaryCollection(tier)

    target_crs = config.get_boundary_setting("crs")
    if gdf.crs is not None and gdf.crs != target_crs:
        logger.info(f"  🔄 Reprojecting {tier} boundaries from {gdf.crs} to {target_crs}")
        gdf = gdf.to_crs(target_crs)

    features: List[BoundaryFeature] = []
    unnamed = 0

    for _, row in gdf.iterrows():
        name = _clean_property(row.get(name_field))
        if not name:
            unnamed += 1
            continue
        geometry = row.geometry
        if not isinstance(geometry, BaseGeometry):
            geometry = None
        features.append(
            BoundaryFeature(
                name=name,
                id=_clean_property(row.get(id_field)) if id_field in gdf.columns else "",
                geometry=geometry,
            )
        )

    _log_ingestion(tier, len(gdf), len(features), unnamed, 0, name_field)
    return BoundaryCollection(tier, tuple(features))


def _log_ingestion(
    tier: str, total: int, kept: int, unnamed: int, bad_geometry: int, name_field: str
) -> None:
    logger.info(f"🗺️ Loaded {kept:,} of {total:,} {tier} features")
    if unnamed:
        logger.warning(f"  ⚠️ {unnamed:,} {tier} features have no '{name_field}' and were excluded")
    if bad_geometry:
        logger.warning(f"  ⚠️ {bad_geometry:,} {tier} features have unreadable geometry")


def count_units(collection: Optional[BoundaryCollection]) -> int:
    """Count administrative units in a tier."""
    return len(collection) if collection is not None else 0


def option_names(collection: Optional[BoundaryCollection]) -> List[str]:
    """Sorted unique unit names of a tier, for pick-lists."""
    if collection is None:
        return []
    return sorted({feature.name for feature in collection if feature.name})


def child_options(
    children: Optional[BoundaryCollection],
    parent_name: Optional[str],
    parents: Optional[BoundaryCollection],
) -> List[Option]:
    """
    Pick-list of the children located inside a selected parent.

    Args:
        children: Child tier
        parent_name: Selected parent unit
        parents: Parent tier

    Returns:
        Options sorted by name; empty when nothing is selected or the parent is unknown
    """
    if children is None or not parent_name:
        return []

    if parents is None or parents.find(parent_name) is None:
        tier = parents.tier if parents is not None else "parent"
        logger.warning(f"⚠️ {tier.capitalize()} \"{parent_name}\" not found in boundaries")
        return []

    options = [
        Option(value=feature.name, label=f"{feature.name} (ID: {feature.id or 'N/A'})")
        for feature in children_of(children, parent_name, parents)
        if feature.name
    ]
    return sorted(options, key=lambda option: option.value)


def boundaries_summary(collection: Optional[BoundaryCollection]) -> Dict[str, int]:
    """Count features per geometry kind (unsupported and empty ones included)."""
    summary: Dict[str, int] = {}
    if collection is None:
        return summary
    for feature in collection:
        kind = feature.geometry_type or "Empty"
        summary[kind] = summary.get(kind, 0) + 1
    return summary
