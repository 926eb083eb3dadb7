"""
Voting-center records and aggregate statistics.

Voting centers arrive as the upstream JSON records:

    {
        "centerId": "YDE1-001",
        "name": "Ecole Publique de Mvog-Ada",
        "arrondissementId": "Yaoundé I",
        "coords": [3.8667, 11.5167],
        "stats": {
            "totalVotes": 612,
            "candidates": [{"name": "...", "party": "...", "votes": 301, "percentage": 49.2}]
        }
    }

`arrondissementId` carries the arrondissement *name* and must match an
arrondissement boundary name exactly for filtering to find the center.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from loguru import logger


def _count(value: Any, label: str) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{label} must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{label} must be a whole number, got {value}")
    number = int(value)
    if number < 0:
        raise ValueError(f"{label} must be non-negative, got {number}")
    return number


@dataclass(frozen=True)
class CandidateTally:
    """One candidate's result in one voting center."""

    name: str
    party: str
    votes: int
    percentage: float = 0.0

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "CandidateTally":
        return cls(
            name=str(record["name"]),
            party=str(record.get("party", "")),
            votes=_count(record.get("votes"), "votes"),
            percentage=float(record.get("percentage", 0.0)),
        )


@dataclass(frozen=True)
class CenterStats:
    total_votes: int
    candidates: Tuple[CandidateTally, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidates", tuple(self.candidates))


@dataclass(frozen=True)
class VotingCenter:
    """A polling location and its per-candidate tallies."""

    center_id: str
    name: str
    arrondissement_name: str
    stats: CenterStats
    location: Optional[Tuple[float, float]] = None  # (lat, lon), display only

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "VotingCenter":
        """
        Parse one upstream voting-center record.

        Raises:
            ValueError: If a required field is missing or malformed
        """
        try:
            stats = record["stats"]
            candidates = tuple(CandidateTally.from_dict(c) for c in stats.get("candidates", []))
            coords = record.get("coords")
            location = (float(coords[0]), float(coords[1])) if coords else None

            return cls(
                center_id=str(record["centerId"]),
                name=str(record["name"]),
                arrondissement_name=str(record.get("arrondissementId", record.get("arrondissementName", ""))),
                stats=CenterStats(
                    total_votes=_count(stats.get("totalVotes"), "totalVotes"),
                    candidates=candidates,
                ),
                location=location,
            )
        except (KeyError, TypeError, IndexError, AttributeError) as e:
            raise ValueError(f"Malformed voting center record: {e}") from e


def voting_centers_from_records(records: Optional[Iterable[Mapping[str, Any]]]) -> List[VotingCenter]:
    """
    Parse voting-center records, skipping (and logging) the invalid ones.

    Args:
        records: Parsed JSON list of voting centers

    Returns:
        Valid VotingCenter records in input order
    """
    if records is None:
        return []

    centers: List[VotingCenter] = []
    rejected = 0
    for position, record in enumerate(records):
        try:
            centers.append(VotingCenter.from_dict(record))
        except ValueError as e:
            rejected += 1
            logger.debug(f"  Skipping voting center #{position}: {e}")

    logger.info(f"🗳️ Loaded {len(centers):,} voting centers")
    if rejected:
        logger.warning(f"  ⚠️ {rejected:,} voting center records were malformed and skipped")
    return centers


@dataclass(frozen=True)
class CandidateAggregate:
    """A candidate's results summed over a set of voting centers."""

    name: str
    party: str
    total_votes: int
    percentage: float
    centers_won: int


@dataclass(frozen=True)
class AggregateStats:
    """Level-wide statistics for a set of voting centers."""

    total_centers: int = 0
    total_votes: int = 0
    average_votes_per_center: float = 0.0
    candidate_stats: Tuple[CandidateAggregate, ...] = field(default_factory=tuple)

    @property
    def leader(self) -> Optional[CandidateAggregate]:
        """Candidate with the most votes overall (not the most centers won)."""
        return self.candidate_stats[0] if self.candidate_stats else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCenters": self.total_centers,
            "totalVotes": self.total_votes,
            "averageVotesPerCenter": self.average_votes_per_center,
            "candidateStats": [
                {
                    "name": c.name,
                    "party": c.party,
                    "totalVotes": c.total_votes,
                    "percentage": c.percentage,
                    "centersWon": c.centers_won,
                }
                for c in self.candidate_stats
            ],
        }
