"""Tests for the instant-runoff tabulator."""

import logging

import pytest

from runoff.election import SENTINEL_NAME, create_election
from runoff.errors import NoWinnerError
from runoff.models import CandidateStatus
from runoff.tabulator import Tabulator
from tests.conftest import REFERENCE_BALLOTS, REFERENCE_CANDIDATES, eliminated_names, make_election


class TestReferenceElection:
    def test_winner(self, reference_election):
        result = reference_election.run_election()
        assert result.winner.name == "Gore"
        assert result.outcome == "winner"

    def test_elimination_order(self, reference_election):
        result = reference_election.run_election()
        assert eliminated_names(result) == ["Nader", "Browne"]
        assert len(result.rounds) == 3

    def test_first_round_standings(self, reference_election):
        result = reference_election.run_election()
        first = result.rounds[0]
        assert [(s.name, s.votes) for s in first.standings] == [
            ("Bush", 6), ("Gore", 6), ("Browne", 5), ("Nader", 2), (SENTINEL_NAME, 0),
        ]
        assert first.countable == 19
        assert first.winner is None

    def test_transfers(self, reference_election):
        result = reference_election.run_election()
        assert result.rounds[0].transfers == {"Nader": {"Gore": 2}}
        # Browne's second-choice Nader is already out, so those ballots go to Gore
        assert result.rounds[1].transfers == {"Browne": {"Bush": 3, "Gore": 2}}

    def test_final_round(self, reference_election):
        result = reference_election.run_election()
        final = result.rounds[-1]
        assert final.winner == "Gore"
        assert final.get_votes("Gore") == 10
        assert final.get_votes("Bush") == 9
        assert final.eliminated == []
        assert result.total_ballots == 19
        assert result.exhausted == 0

    def test_final_statuses(self, reference_election):
        reference_election.run_election()
        statuses = {c.name: c.status for c in reference_election.candidates}
        assert statuses == {
            "Bush": CandidateStatus.ACTIVE,
            "Gore": CandidateStatus.ACTIVE,
            "Nader": CandidateStatus.ELIMINATED,
            "Browne": CandidateStatus.ELIMINATED,
        }

    def test_deterministic(self):
        first = make_election("Reference", REFERENCE_CANDIDATES, REFERENCE_BALLOTS)
        second = make_election("Reference", REFERENCE_CANDIDATES, REFERENCE_BALLOTS)
        assert first.run_election().to_dict() == second.run_election().to_dict()


class TestStepwise:
    def test_no_winner_before_eliminations(self, reference_election):
        tabulator = Tabulator(reference_election)
        assert not tabulator.has_winner()
        assert tabulator.leader() is None

    def test_one_elimination_per_round(self, reference_election):
        tabulator = Tabulator(reference_election)
        eliminated, transfers = tabulator.eliminate_round()
        assert [c.name for c in eliminated] == ["Nader"]
        assert transfers == {"Nader": {"Gore": 2}}
        assert not tabulator.has_winner()

        eliminated, _ = tabulator.eliminate_round()
        assert [c.name for c in eliminated] == ["Browne"]
        assert tabulator.has_winner()
        assert tabulator.leader().name == "Gore"

    def test_never_eliminates_last_candidate(self, single_candidate):
        tabulator = Tabulator(single_candidate)
        eliminated, transfers = tabulator.eliminate_round()
        assert eliminated == []
        assert transfers == {}
        assert single_candidate.active_candidates[0].name == "A"


class TestMajority:
    def test_single_candidate_wins_round_one(self, single_candidate):
        result = single_candidate.run_election()
        assert result.winner.name == "A"
        assert len(result.rounds) == 1
        assert result.rounds[0].winner == "A"
        assert result.rounds[0].get_votes("A") == result.rounds[0].countable == 4

    def test_first_choice_majority_wins_immediately(self):
        election = make_election("Majority", ["A", "B", "C"], [
            (3, ["A", "B"]), (1, ["B"]), (1, ["C", "B"]),
        ])
        result = election.run_election()
        assert result.winner.name == "A"
        assert len(result.rounds) == 1
        assert eliminated_names(result) == []

    def test_exactly_half_is_enough(self):
        """After C's ballot exhausts, A holds 2 of 4 countable ballots."""
        election = make_election("Half", ["A", "B", "C"], [
            (2, ["A"]), (2, ["B"]), (1, ["C"]),
        ])
        result = election.run_election()
        assert result.winner.name == "A"
        assert result.rounds[0].transfers == {"C": {SENTINEL_NAME: 1}}
        assert result.rounds[1].countable == 4
        assert result.rounds[1].exhausted == 1
        assert result.exhausted == 1

    def test_exhausted_ballots_do_not_count_toward_majority(self):
        """A has 2 of 5 ballots cast, but 2 of 3 countable ones."""
        election = make_election("Exhausted", ["A", "B"], [
            (2, ["A"]), (1, ["B"]), (2, []),
        ])
        result = election.run_election()
        assert result.winner.name == "A"
        assert result.rounds[0].countable == 3
        assert result.rounds[0].exhausted == 2


class TestNoWinner:
    def test_all_exhausted(self, all_exhausted):
        with pytest.raises(NoWinnerError) as exc_info:
            all_exhausted.run_election()
        rounds = exc_info.value.rounds
        assert len(rounds) == 1
        assert rounds[0].countable == 0
        assert rounds[0].exhausted == 3
        assert rounds[0].eliminated == []

    def test_no_winner_is_remembered(self, all_exhausted):
        with pytest.raises(NoWinnerError) as first:
            all_exhausted.run_election()
        with pytest.raises(NoWinnerError) as second:
            all_exhausted.run_election()
        assert second.value is first.value

    def test_no_ballots(self):
        election = make_election("No Ballots", ["A", "B"], [])
        with pytest.raises(NoWinnerError):
            election.run_election()

    def test_empty_election(self):
        with pytest.raises(NoWinnerError):
            create_election("Empty").run_election()


class TestBatchZero:
    def test_zero_support_purged_in_one_round(self, zero_support):
        result = zero_support.run_election()
        assert result.rounds[0].eliminated == ["E", "D", "C"]
        assert result.rounds[0].transfers == {"E": {}, "D": {}, "C": {"A": 1}}
        assert len(result.rounds) == 2

    def test_stops_after_first_candidate_with_ballots(self, zero_support):
        result = zero_support.run_election()
        assert "B" not in eliminated_names(result)
        assert result.winner.name == "A"
        assert result.rounds[1].get_votes("A") == 3


class TestTiebreak:
    def test_id_eliminates_later_registration(self, tied_bottom):
        election = make_election("Tie", *tied_bottom, tiebreak="id")
        result = election.run_election()
        assert result.rounds[0].eliminated == ["D"]
        assert result.winner.name == "B"

    def test_reverse_id_eliminates_earlier_registration(self, tied_bottom):
        election = make_election("Tie", *tied_bottom, tiebreak="reverse-id")
        result = election.run_election()
        assert result.rounds[0].eliminated == ["C"]
        assert result.winner.name == "A"

    def test_name(self, tied_bottom):
        election = make_election("Tie", *tied_bottom, tiebreak="name")
        result = election.run_election()
        assert result.rounds[0].eliminated == ["D"]

    def test_tied_leaders_at_half(self):
        """Two candidates with 2 ballots each: the tie-break decides who leads."""
        groups = [(2, ["A"]), (2, ["B"])]
        assert make_election("Even", ["A", "B"], groups).run_election().winner.name == "A"
        assert make_election(
            "Even", ["A", "B"], groups, tiebreak="reverse-id"
        ).run_election().winner.name == "B"


class TestLogging:
    def test_logs_eliminations_and_winner(self, reference_election, caplog):
        caplog.set_level(logging.INFO, logger="runoff")
        reference_election.run_election()
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Eliminating Nader") for m in messages)
        assert any(m.startswith("Winner: Gore") for m in messages)

    def test_logs_assignments_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="runoff")
        make_election("Debug", ["A"], [(1, ["A"])])
        assert any("Assigned g1v1's ballot" in r.getMessage() for r in caplog.records)
