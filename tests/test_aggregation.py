"""Tests for winner selection, vote aggregation and center sorting."""

import pytest

from ops import Config
from results.aggregation import aggregate, configured_tie_break, sort_centers, winner
from results.models import AggregateStats, CandidateTally, CenterStats, VotingCenter


def test_vote_leader_differs_from_center_leader(scenario_centers):
    stats = aggregate(scenario_centers)

    assert stats.total_centers == 3
    assert stats.total_votes == 600
    assert stats.average_votes_per_center == pytest.approx(200.0)

    first, second = stats.candidate_stats
    assert (first.name, first.total_votes, first.centers_won) == ("Cand2", 330, 1)
    assert first.percentage == pytest.approx(55.0)
    assert (second.name, second.total_votes, second.centers_won) == ("Cand1", 270, 2)
    assert second.percentage == pytest.approx(45.0)
    assert stats.leader.name == "Cand2"


def test_aggregate_empty_input():
    stats = aggregate([])

    assert stats == AggregateStats()
    assert stats.to_dict() == {
        "totalCenters": 0,
        "totalVotes": 0,
        "averageVotesPerCenter": 0,
        "candidateStats": [],
    }
    assert stats.leader is None


def test_votes_and_wins_are_conserved(make_center):
    centers = [
        make_center("1", "W1a", {"A": 10, "B": 30, "C": 5}),
        make_center("2", "W1a", {"C": 40, "A": 1}),
        make_center("3", "W1b", {"B": 7, "D": 7}),
        make_center("4", "W1b", {"D": 0, "A": 0}),
    ]

    stats = aggregate(centers)

    assert sum(c.total_votes for c in stats.candidate_stats) == sum(c.stats.total_votes for c in centers)
    assert sum(c.centers_won for c in stats.candidate_stats) == stats.total_centers
    assert sum(c.percentage for c in stats.candidate_stats) == pytest.approx(100.0)


def test_candidates_tied_on_votes_keep_encounter_order(make_center):
    centers = [
        make_center("1", "W1a", {"Zed": 5, "Amy": 5, "Bob": 9}),
    ]

    stats = aggregate(centers)

    assert [c.name for c in stats.candidate_stats] == ["Bob", "Zed", "Amy"]


def test_party_of_first_occurrence_wins():
    def center(center_id, party):
        tally = CandidateTally("Same Name", party, 10, 100.0)
        return VotingCenter(center_id, center_id, "W1a", CenterStats(10, (tally,)))

    stats = aggregate([center("1", "Party A"), center("2", "Party B")])

    assert len(stats.candidate_stats) == 1
    assert stats.candidate_stats[0].party == "Party A"
    assert stats.candidate_stats[0].total_votes == 20


def test_zero_votes_do_not_divide_by_zero(make_center):
    stats = aggregate([make_center("1", "W1a", {"A": 0, "B": 0})])

    assert stats.total_votes == 0
    assert [c.percentage for c in stats.candidate_stats] == [0.0, 0.0]
    assert stats.candidate_stats[0].centers_won == 1


def test_centers_without_candidates(make_center):
    empty = VotingCenter("E", "Empty", "W1a", CenterStats(0, ()))

    assert winner(empty) is None

    stats = aggregate([empty, make_center("1", "W1a", {"A": 4})])
    assert stats.total_centers == 2
    assert stats.average_votes_per_center == pytest.approx(2.0)
    assert [(c.name, c.centers_won) for c in stats.candidate_stats] == [("A", 1)]

    only_empty = aggregate([empty])
    assert only_empty.total_centers == 1
    assert only_empty.candidate_stats == ()


def test_winner_ties_go_to_first_listed_candidate(make_center):
    center = make_center("1", "W1a", {"Zed": 50, "Amy": 50, "Bob": 10})

    assert winner(center).name == "Zed"
    assert winner(center, tie_break="name").name == "Amy"


def test_name_tie_break_changes_centers_won(make_center):
    centers = [make_center("1", "W1a", {"Zed": 50, "Amy": 50}), make_center("2", "W1a", {"Zed": 9, "Amy": 1})]

    by_order = aggregate(centers, tie_break="order")
    by_name = aggregate(centers, tie_break="name")

    assert {c.name: c.centers_won for c in by_order.candidate_stats} == {"Zed": 2, "Amy": 0}
    assert {c.name: c.centers_won for c in by_name.candidate_stats} == {"Zed": 1, "Amy": 1}


def test_unknown_tie_break_is_rejected(make_center):
    with pytest.raises(ValueError):
        winner(make_center("1", "W1a", {"A": 1}), tie_break="coin-flip")


def test_configured_tie_break():
    assert configured_tie_break(Config.from_dict({})) == "order"
    assert configured_tie_break(Config.from_dict({"aggregation": {"tie_break": "name"}})) == "name"
    with pytest.raises(ValueError):
        configured_tie_break(Config.from_dict({"aggregation": {"tie_break": "random"}}))


@pytest.fixture
def ranked_centers(make_center):
    return [
        make_center("1", "W1a", {"B": 10}, name="Delta"),
        make_center("2", "W1a", {"A": 30}, name="alpha"),
        make_center("3", "W1a", {"C": 30}, name="Bravo"),
        make_center("4", "W1a", {"A": 10}, name="Bravo"),
        make_center("5", "W1a", {"B": 50}, name="Charlie"),
    ]


def test_sort_by_total_votes_is_non_increasing_and_stable(ranked_centers):
    ordered = sort_centers(ranked_centers, "total_votes")

    votes = [c.stats.total_votes for c in ordered]
    assert votes == sorted(votes, reverse=True)
    assert [c.center_id for c in ordered] == ["5", "2", "3", "1", "4"]
    assert sort_centers(ranked_centers, "totalVotes") == ordered


def test_sort_by_name_is_non_decreasing_and_stable(ranked_centers):
    ordered = sort_centers(ranked_centers, "name")

    names = [c.name for c in ordered]
    assert names == sorted(names)
    assert [c.center_id for c in ordered] == ["3", "4", "5", "1", "2"]


def test_sort_by_winner(ranked_centers):
    ordered = sort_centers(ranked_centers, "winner")

    assert [c.center_id for c in ordered] == ["2", "4", "1", "5", "3"]


def test_sort_does_not_mutate_input(ranked_centers):
    before = list(ranked_centers)

    sort_centers(ranked_centers, "total_votes")

    assert ranked_centers == before


def test_sort_rejects_unknown_key(ranked_centers):
    with pytest.raises(ValueError):
        sort_centers(ranked_centers, "turnout")


def test_configured_tie_break_drives_winner_and_aggregate(make_center):
    by_name = Config.from_dict({"aggregation": {"tie_break": "name"}})
    centers = [make_center("1", "W1a", {"Zed": 50, "Amy": 50}), make_center("2", "W1a", {"Zed": 9, "Amy": 1})]

    assert winner(centers[0], config=by_name).name == "Amy"
    assert winner(centers[0], tie_break="order", config=by_name).name == "Zed"
    stats = aggregate(centers, config=by_name)
    assert {c.name: c.centers_won for c in stats.candidate_stats} == {"Zed": 1, "Amy": 1}


def test_configured_default_sort(ranked_centers):
    by_votes = Config.from_dict({"aggregation": {"default_sort": "total_votes"}})

    assert [c.center_id for c in sort_centers(ranked_centers)] == ["3", "4", "5", "1", "2"]
    assert [c.center_id for c in sort_centers(ranked_centers, config=by_votes)] == ["5", "2", "3", "1", "4"]
    assert sort_centers(ranked_centers, key="name", config=by_votes) == sort_centers(ranked_centers)
    with pytest.raises(ValueError):
        sort_centers(ranked_centers, config=Config.from_dict({"aggregation": {"default_sort": "turnout"}}))
