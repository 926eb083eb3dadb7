"""
Results package for Election Geography

Voting-center records, vote aggregation, filtering and tabular reports.
"""

from .aggregation import aggregate, sort_centers, winner
from .filters import (
    centers_for_selection,
    centers_in_arrondissement,
    centers_in_arrondissements,
    search_centers,
)
from .models import (
    AggregateStats,
    CandidateAggregate,
    CandidateTally,
    CenterStats,
    VotingCenter,
    voting_centers_from_records,
)
from .report import candidate_stats_frame, centers_frame, rollup_by_unit, unassigned_centers

__all__ = [
    "CandidateTally",
    "CenterStats",
    "VotingCenter",
    "CandidateAggregate",
    "AggregateStats",
    "voting_centers_from_records",
    "winner",
    "aggregate",
    "sort_centers",
    "centers_in_arrondissement",
    "centers_in_arrondissements",
    "centers_for_selection",
    "search_centers",
    "candidate_stats_frame",
    "centers_frame",
    "rollup_by_unit",
    "unassigned_centers",
]
