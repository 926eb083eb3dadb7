"""
Shared fixtures: a small two-region hierarchy and voting-center builders.

    y=10 +---------+---------+-------------------+
         |  W1b    |         |       E1b         |
     y=5 +---------+   W2a   +-------------------+
         |  W1a    |         |       E1a         |
     y=0 +---------+---------+-------------------+
        x=0       x=5      x=10                x=20

Regions: West (0-10), East (10-20).
Departments: W1 (0-5), W2 (5-10), E1 (10-20, MultiPolygon of two halves).
"""

from typing import Dict

import pytest
from shapely.geometry import MultiPolygon, box

from geography.models import BoundaryCollection, BoundaryFeature
from results.models import CandidateTally, CenterStats, VotingCenter


@pytest.fixture
def regions() -> BoundaryCollection:
    return BoundaryCollection(
        "region",
        (
            BoundaryFeature("West", "R-W", box(0, 0, 10, 10)),
            BoundaryFeature("East", "R-E", box(10, 0, 20, 10)),
        ),
    )


@pytest.fixture
def departments() -> BoundaryCollection:
    return BoundaryCollection(
        "department",
        (
            BoundaryFeature("W1", "D-W1", box(0, 0, 5, 10)),
            BoundaryFeature("W2", "D-W2", box(5, 0, 10, 10)),
            BoundaryFeature("E1", "D-E1", MultiPolygon([box(10, 0, 20, 5), box(10, 5, 20, 10)])),
        ),
    )


@pytest.fixture
def arrondissements() -> BoundaryCollection:
    return BoundaryCollection(
        "arrondissement",
        (
            BoundaryFeature("W1a", "A-1", box(0, 0, 5, 5)),
            BoundaryFeature("E1a", "A-4", box(10, 0, 20, 5)),
            BoundaryFeature("W2a", "", box(5, 0, 10, 10)),
            BoundaryFeature("W1b", "A-2", box(0, 5, 5, 10)),
            BoundaryFeature("E1b", "A-5", box(10, 5, 20, 10)),
        ),
    )


def build_center(center_id: str, arrondissement: str, tallies: Dict[str, int], name: str = "") -> VotingCenter:
    """Voting center whose total is the sum of its tallies; party = "P-<candidate>"."""
    total = sum(tallies.values())
    candidates = tuple(
        CandidateTally(
            name=candidate,
            party=f"P-{candidate}",
            votes=votes,
            percentage=votes / total * 100 if total else 0.0,
        )
        for candidate, votes in tallies.items()
    )
    return VotingCenter(
        center_id=center_id,
        name=name or f"Center {center_id}",
        arrondissement_name=arrondissement,
        stats=CenterStats(total_votes=total, candidates=candidates),
        location=(0.0, 0.0),
    )


@pytest.fixture
def make_center():
    return build_center


@pytest.fixture
def scenario_centers():
    """Cand1 wins two centers, Cand2 wins one but leads on total votes."""
    return [
        build_center("A", "W1a", {"Cand1": 120, "Cand2": 80}),
        build_center("B", "W1b", {"Cand1": 50, "Cand2": 150}),
        build_center("C", "E1a", {"Cand1": 100, "Cand2": 100}),
    ]
