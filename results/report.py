"""
Tabular views of aggregated results.

Builds pandas DataFrames from AggregateStats and voting centers so results
can be exported or compared across the units of one tier.

Usage:
    stats = aggregate(centers)
    candidate_stats_frame(stats).to_csv("candidates.csv", index=False)

    groups = {d.name: [a.name for a in index.arrondissements_in_department(d.name)]
              for d in index.departments}
    rollup_by_unit(centers, groups)
"""

from typing import Dict, Iterable, Mapping, Optional, Sequence

import pandas as pd
from loguru import logger

from ops import Config

from .aggregation import aggregate, configured_tie_break, winner
from .filters import centers_in_arrondissements
from .models import AggregateStats, VotingCenter

CANDIDATE_COLUMNS = ["name", "party", "total_votes", "percentage", "centers_won"]
CENTER_COLUMNS = [
    "center_id",
    "name",
    "arrondissement",
    "total_votes",
    "winner",
    "winner_party",
    "winner_votes",
]
ROLLUP_COLUMNS = [
    "unit",
    "total_centers",
    "total_votes",
    "average_votes_per_center",
    "leader",
    "leader_votes",
    "leader_percentage",
]


def candidate_stats_frame(stats: AggregateStats) -> pd.DataFrame:
    """One row per candidate, in the order of `stats.candidate_stats`."""
    return pd.DataFrame(
        [
            {
                "name": c.name,
                "party": c.party,
                "total_votes": c.total_votes,
                "percentage": c.percentage,
                "centers_won": c.centers_won,
            }
            for c in stats.candidate_stats
        ],
        columns=CANDIDATE_COLUMNS,
    )


def centers_frame(
    centers: Sequence[VotingCenter],
    tie_break: Optional[str] = None,
    config: Optional[Config] = None,
) -> pd.DataFrame:
    """One row per voting center with its winner."""
    tie_break = tie_break or configured_tie_break(config)
    rows = []
    for center in centers:
        best = winner(center, tie_break)
        rows.append(
            {
                "center_id": center.center_id,
                "name": center.name,
                "arrondissement": center.arrondissement_name,
                "total_votes": center.stats.total_votes,
                "winner": best.name if best else None,
                "winner_party": best.party if best else None,
                "winner_votes": best.votes if best else 0,
            }
        )
    return pd.DataFrame(rows, columns=CENTER_COLUMNS)


def rollup_by_unit(
    centers: Sequence[VotingCenter],
    groups: Mapping[str, Iterable[str]],
    tie_break: Optional[str] = None,
    config: Optional[Config] = None,
) -> pd.DataFrame:
    """
    Aggregate voting centers per named unit.

    Args:
        centers: Every voting center
        groups: Unit name → arrondissement names belonging to that unit
                (an arrondissement maps to itself)
        tie_break: Policy used to pick each center's winner (default from config)
        config: Configuration instance

    Returns:
        One row per unit in mapping order, leader = most total votes
    """
    tie_break = tie_break or configured_tie_break(config)
    rows = []
    for unit, arrondissement_names in groups.items():
        stats = aggregate(centers_in_arrondissements(centers, arrondissement_names), tie_break)
        leader = stats.leader
        rows.append(
            {
                "unit": unit,
                "total_centers": stats.total_centers,
                "total_votes": stats.total_votes,
                "average_votes_per_center": stats.average_votes_per_center,
                "leader": leader.name if leader else None,
                "leader_votes": leader.total_votes if leader else 0,
                "leader_percentage": leader.percentage if leader else 0.0,
            }
        )

    frame = pd.DataFrame(rows, columns=ROLLUP_COLUMNS)
    empty_units = int((frame["total_centers"] == 0).sum()) if not frame.empty else 0
    if empty_units:
        logger.warning(f"⚠️ {empty_units} of {len(frame)} units have no voting centers")
    return frame


def unassigned_centers(
    centers: Sequence[VotingCenter], arrondissement_names: Iterable[str]
) -> Dict[str, int]:
    """Count centers per arrondissement name that matches no known arrondissement boundary."""
    known = set(arrondissement_names)
    counts: Dict[str, int] = {}
    for center in centers:
        if center.arrondissement_name not in known:
            counts[center.arrondissement_name] = counts.get(center.arrondissement_name, 0) + 1
    if counts:
        logger.warning(
            f"⚠️ {sum(counts.values()):,} voting centers reference {len(counts)} unknown arrondissements"
        )
    return counts
