"""
Parent/child relationships between two tiers of the hierarchy.

A child belongs to a parent when the child's centroid (see
`geography.geometry.centroid`) lies inside the parent's exterior ring(s).
Features with an empty name take part in no query, as parent or as child.
Every function here is a pure function of its inputs: missing collections
or unknown names yield empty results, never an exception.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from .geometry import centroid, is_point_in_feature, points_in_feature
from .models import BoundaryCollection, BoundaryFeature


def features_within_parent(
    children: Optional[BoundaryCollection], parent: Optional[BoundaryFeature]
) -> List[BoundaryFeature]:
    """
    Find all child features whose centroids are within a parent feature.

    Args:
        children: Child tier
        parent: Parent feature

    Returns:
        Matching children in input order
    """
    if children is None or parent is None or not parent.name:
        return []

    candidates: List[BoundaryFeature] = []
    points: List[Tuple[float, float]] = []
    for child in children:
        if not child.name:
            continue
        point = centroid(child)
        if point is None:
            continue
        candidates.append(child)
        points.append(point)

    if not candidates:
        return []

    mask = points_in_feature(np.array(points), parent)
    return [child for child, inside in zip(candidates, mask) if inside]


def children_of(
    tier_children: Optional[BoundaryCollection],
    parent_name: Optional[str],
    tier_parents: Optional[BoundaryCollection],
) -> List[BoundaryFeature]:
    """Children located inside the parent named `parent_name`."""
    if tier_parents is None:
        return []

    parent = tier_parents.find(parent_name)
    if parent is None:
        logger.debug(f"🔍 Parent '{parent_name}' not found in {tier_parents.tier} tier")
        return []

    return features_within_parent(tier_children, parent)


def parent_of(
    child_name: Optional[str],
    child_tier: Optional[BoundaryCollection],
    parent_tier: Optional[BoundaryCollection],
) -> Optional[str]:
    """
    Name of the first parent (in collection order) containing the child's centroid.

    Overlapping or mis-simplified parents are resolved by collection order,
    not by any spatial measure.
    """
    if child_tier is None or parent_tier is None:
        return None

    child = child_tier.find(child_name)
    if child is None:
        logger.debug(f"🔍 '{child_name}' not found in {child_tier.tier} tier")
        return None

    point = centroid(child)
    if point is None:
        return None

    for parent in parent_tier:
        if parent.name and is_point_in_feature(point, parent):
            return parent.name

    logger.debug(f"🔍 No {parent_tier.tier} contains the centroid of '{child_name}'")
    return None


@dataclass
class PartitionReport:
    """How the children of one tier distribute over the parents of the next tier."""

    total_children: int = 0
    assignments: Dict[str, List[str]] = field(default_factory=dict)
    unassigned: List[str] = field(default_factory=list)
    multiply_assigned: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def assigned_count(self) -> int:
        return self.total_children - len(self.unassigned)

    @property
    def is_partition(self) -> bool:
        return not self.unassigned and not self.multiply_assigned


def partition_report(
    children: Optional[BoundaryCollection], parents: Optional[BoundaryCollection]
) -> PartitionReport:
    """
    Apply `features_within_parent` for every parent and count the outcome.

    Well-formed nested data assigns every child to exactly one parent.
    Simplified real boundaries leave gaps and overlaps at shared borders;
    those are reported here rather than raised.
    """
    report = PartitionReport()
    if children is None or parents is None:
        return report

    named_children = [child for child in children if child.name]
    report.total_children = len(named_children)
    # Keyed by object identity so duplicated names are still counted per feature
    owners: Dict[int, List[str]] = {id(child): [] for child in named_children}

    for parent in parents:
        if not parent.name or parent.name in report.assignments:
            # A repeated parent name resolves to its first feature on lookup
            continue
        inside = features_within_parent(children, parent)
        report.assignments[parent.name] = [child.name for child in inside]
        for child in inside:
            owners[id(child)].append(parent.name)

    for child in named_children:
        child_owners = owners[id(child)]
        if not child_owners:
            report.unassigned.append(child.name)
        elif len(child_owners) > 1:
            report.multiply_assigned[child.name] = child_owners

    if report.is_partition:
        logger.debug(
            f"✅ {children.tier} → {parents.tier}: all {report.total_children} children assigned once"
        )
    else:
        logger.warning(
            f"⚠️ {children.tier} → {parents.tier}: {len(report.unassigned)} unassigned, "
            f"{len(report.multiply_assigned)} multiply assigned of {report.total_children}"
        )

    return report
