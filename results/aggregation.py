"""
Vote aggregation over voting centers.

Rolls per-center candidate tallies up into level-wide statistics (a whole
arrondissement, department or region) and ranks centers for display.

Two different "leaders" come out of `aggregate` and they can disagree:
candidate_stats is ordered by total votes, while centers_won counts the
centers where each candidate had the most votes.
"""

from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from ops import Config

from .models import AggregateStats, CandidateAggregate, CandidateTally, VotingCenter

TIE_BREAKS = ("order", "name")

SORT_KEYS = {
    "name": "name",
    "total_votes": "total_votes",
    "totalVotes": "total_votes",
    "winner": "winner",
}


def configured_tie_break(config: Optional[Config] = None) -> str:
    """Tie-break policy from `aggregation.tie_break`, validated."""
    config = config or Config.from_dict({})
    tie_break = str(config.get_aggregation_setting("tie_break"))
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"Unknown tie-break policy in config: {tie_break}")
    return tie_break


def configured_sort_key(config: Optional[Config] = None) -> str:
    """Center ordering from `aggregation.default_sort`, validated."""
    config = config or Config.from_dict({})
    key = str(config.get_aggregation_setting("default_sort"))
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key in config: {key}")
    return key


def winner(
    center: VotingCenter, tie_break: Optional[str] = None, config: Optional[Config] = None
) -> Optional[CandidateTally]:
    """
    Get the winning candidate for a voting center.

    Args:
        center: Voting center
        tie_break: "order" keeps the first of the tied candidates in list order,
                   "name" keeps the lexicographically smallest name
                   (default from config)
        config: Configuration instance

    Returns:
        The tally with the most votes, or None if the center lists no candidates
    """
    tie_break = tie_break or configured_tie_break(config)
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"Unknown tie-break policy: {tie_break}")

    candidates = center.stats.candidates
    if not candidates:
        return None

    if tie_break == "name":
        top = max(candidate.votes for candidate in candidates)
        return min(
            (candidate for candidate in candidates if candidate.votes == top),
            key=lambda candidate: candidate.name,
        )

    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.votes > best.votes:
            best = candidate
    return best


def aggregate(
    centers: Sequence[VotingCenter],
    tie_break: Optional[str] = None,
    config: Optional[Config] = None,
) -> AggregateStats:
    """
    Calculate aggregate statistics for a list of voting centers.

    Candidates are identified by name alone; the party recorded is the one
    seen first. Percentages are shares of the summed center totals.

    Args:
        centers: Voting centers of the selected level
        tie_break: Policy used to pick each center's winner (see `winner`;
                   default from config)
        config: Configuration instance

    Returns:
        AggregateStats with candidates ordered by total votes, descending
    """
    if not centers:
        return AggregateStats()

    tie_break = tie_break or configured_tie_break(config)

    total_centers = len(centers)
    total_votes = sum(center.stats.total_votes for center in centers)
    average_votes = total_votes / total_centers if total_centers else 0.0

    tallies = pd.DataFrame(
        [
            {"name": tally.name, "party": tally.party, "votes": tally.votes}
            for center in centers
            for tally in center.stats.candidates
        ],
        columns=["name", "party", "votes"],
    )

    if tallies.empty:
        logger.debug(f"📊 {total_centers} centers carry no candidate tallies")
        return AggregateStats(
            total_centers=total_centers,
            total_votes=total_votes,
            average_votes_per_center=average_votes,
        )

    # sort=False keeps candidates in order of first appearance
    candidates = tallies.groupby("name", sort=False).agg(
        party=("party", "first"), total_votes=("votes", "sum")
    )

    winners = pd.Series(
        [w.name for w in (winner(center, tie_break) for center in centers) if w is not None],
        dtype=object,
    )
    candidates["centers_won"] = (
        winners.value_counts().reindex(candidates.index, fill_value=0).astype(int)
    )

    if total_votes > 0:
        candidates["percentage"] = candidates["total_votes"] / total_votes * 100
    else:
        candidates["percentage"] = 0.0

    # Stable so candidates tied on votes keep their encounter order
    candidates = candidates.sort_values("total_votes", ascending=False, kind="stable")

    candidate_stats = tuple(
        CandidateAggregate(
            name=str(name),
            party=str(row.party),
            total_votes=int(row.total_votes),
            percentage=float(row.percentage),
            centers_won=int(row.centers_won),
        )
        for name, row in candidates.iterrows()
    )

    logger.debug(
        f"📊 Aggregated {total_centers:,} centers, {total_votes:,} votes, "
        f"{len(candidate_stats)} candidates"
    )

    return AggregateStats(
        total_centers=total_centers,
        total_votes=total_votes,
        average_votes_per_center=average_votes,
        candidate_stats=candidate_stats,
    )


def sort_centers(
    centers: Sequence[VotingCenter],
    key: Optional[str] = None,
    tie_break: Optional[str] = None,
    config: Optional[Config] = None,
) -> List[VotingCenter]:
    """
    Sort voting centers by various criteria.

    The input is left untouched and the sort is stable: centers with equal
    keys keep their relative order.

    Args:
        centers: Voting centers to sort
        key: "name" (ascending), "total_votes" (descending) or "winner"
             (ascending by winner name; centers without candidates first);
             default from `aggregation.default_sort`
        tie_break: Policy used to pick each center's winner (default from config)
        config: Configuration instance

    Returns:
        New sorted list
    """
    key = key or configured_sort_key(config)
    sort_key = SORT_KEYS.get(key)
    if sort_key is None:
        raise ValueError(f"Unknown sort key: {key}")

    if sort_key == "name":
        return sorted(centers, key=lambda center: center.name)

    if sort_key == "total_votes":
        return sorted(centers, key=lambda center: -center.stats.total_votes)

    tie_break = tie_break or configured_tie_break(config)

    def winner_name(center: VotingCenter) -> str:
        best = winner(center, tie_break)
        return best.name if best is not None else ""

    return sorted(centers, key=winner_name)
