"""
Voting-center selection by hierarchy level and free-text search.

Centers are linked to the hierarchy only through `arrondissement_name`,
matched exactly (case-sensitive) against arrondissement boundary names.
"""

from typing import Iterable, List, Optional, Sequence

from loguru import logger

from geography.selection import Selection
from geography.spatial_index import HierarchyIndex
from ops import Config

from .models import VotingCenter


def centers_in_arrondissement(
    centers: Sequence[VotingCenter], arrondissement_name: Optional[str]
) -> List[VotingCenter]:
    """Filter voting centers by arrondissement (municipality)."""
    if not arrondissement_name:
        return []
    return [center for center in centers if center.arrondissement_name == arrondissement_name]


def centers_in_arrondissements(
    centers: Sequence[VotingCenter], arrondissement_names: Iterable[str]
) -> List[VotingCenter]:
    """Filter voting centers located in any of the given arrondissements."""
    names = set(arrondissement_names)
    if not names:
        return []
    return [center for center in centers if center.arrondissement_name in names]


def centers_for_selection(
    centers: Sequence[VotingCenter], selection: Selection, hierarchy: HierarchyIndex
) -> List[VotingCenter]:
    """
    Voting centers under the deepest selected tier.

    Args:
        centers: Every voting center
        selection: Current region/department/arrondissement selection
        hierarchy: Boundary index used to expand region and department selections

    Returns:
        Centers in input order; empty when nothing is selected
    """
    level = selection.level

    if level == "arrondissement":
        selected = centers_in_arrondissement(centers, selection.arrondissement)
    elif level == "department":
        arrondissements = hierarchy.arrondissements_in_department(selection.department)
        selected = centers_in_arrondissements(centers, (a.name for a in arrondissements))
    elif level == "region":
        arrondissements = hierarchy.arrondissements_in_region(selection.region)
        selected = centers_in_arrondissements(centers, (a.name for a in arrondissements))
    else:
        return []

    logger.debug(f"🗳️ {len(selected):,} voting centers in {level} selection")
    return selected


def search_centers(
    centers: Sequence[VotingCenter],
    term: str,
    limit: Optional[int] = None,
    config: Optional[Config] = None,
) -> List[VotingCenter]:
    """
    Case-insensitive search on center name, arrondissement or center id.

    Args:
        centers: Voting centers to search
        term: Search text; empty matches everything
        limit: Maximum number of results, 0 for all (default `search.limit`)
        config: Configuration instance

    Returns:
        Matching centers in input order
    """
    needle = (term or "").strip().lower()
    matches = [
        center
        for center in centers
        if not needle
        or needle in center.name.lower()
        or needle in center.arrondissement_name.lower()
        or needle in center.center_id.lower()
    ]
    if limit is None:
        limit = (config or Config.from_dict({})).get_search_limit()
    if limit > 0 and len(matches) > limit:
        logger.debug(f"🔍 Showing first {limit} of {len(matches)} results for '{term}'")
        return matches[:limit]
    return matches
