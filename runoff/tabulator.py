"""Instant-runoff tabulation over an election context."""

import logging
from fractions import Fraction

from runoff.errors import NoWinnerError, TabulationInvariantError
from runoff.models import Candidate, ElectionResult, RoundSnapshot

logger = logging.getLogger(__name__)

# Share of countable ballots the leader needs to win (inclusive)
MAJORITY = Fraction(1, 2)


class Tabulator:
    """Instant Runoff Voting over a populated ElectionContext.

    Each round:
    1. Rank active candidates by the ballots they currently hold
    2. If the leader holds at least half of the countable (non-exhausted)
       ballots, they win
    3. Otherwise eliminate the bottom-ranked candidate and move each of its
       ballots to that ballot's next preference still in the race, or to
       the exhausted pool if none is left
    4. If the eliminated candidate held no ballots at all, keep eliminating
       from the bottom until a candidate with ballots goes out

    Ties in the ranking are broken by the election's tie-break policy, so
    the same input always gives the same sequence of eliminations.

    If every ballot ends up exhausted before anyone reaches a majority the
    election has no winner and NoWinnerError is raised.
    """

    def __init__(self, election):
        self.election = election
        self.rounds: list[RoundSnapshot] = []

    def leader(self) -> Candidate | None:
        """Return the candidate holding a majority of countable ballots, if any."""
        countable = self.election.countable
        if countable == 0:
            return None
        ranking = self.election.ranked()
        if not ranking:
            return None
        top = ranking[0]
        if Fraction(top.votes, countable) >= MAJORITY:
            return top
        return None

    def has_winner(self) -> bool:
        return self.leader() is not None

    def eliminate_round(self) -> tuple[list[Candidate], dict[str, dict[str, int]]]:
        """Eliminate from the bottom until a candidate that held ballots is gone.

        Zero-ballot candidates are purged together without a majority check
        in between. The last active candidate is never eliminated.

        Returns (eliminated candidates in order, transfers per eliminated name).
        """
        eliminated: list[Candidate] = []
        transfers: dict[str, dict[str, int]] = {}

        while True:
            ranking = self.election.ranked()
            if len(ranking) <= 1:
                break
            bottom = ranking[-1]
            held = bottom.votes
            transfers[bottom.name] = self.election.eliminate(bottom.id)
            eliminated.append(bottom)
            if held != 0:
                break

        return eliminated, transfers

    def run(self) -> ElectionResult:
        """Run rounds until a winner is declared.

        Raises:
            NoWinnerError: If no countable ballots remain
        """
        election = self.election
        logger.info(
            f"Tabulating '{election.name}': {len(election.active_candidates)} candidates, "
            f"{election.total_ballots} ballots, tie-break '{election.tiebreak}'"
        )

        round_number = 0
        while True:
            round_number += 1
            snapshot = RoundSnapshot(
                round_number=round_number,
                standings=election.snapshot(),
                countable=election.countable,
                exhausted=election.exhausted,
            )
            self.rounds.append(snapshot)
            logger.info(f"Round {round_number}: {', '.join(str(c) for c in election.ranked())}")

            if election.countable == 0:
                logger.info(f"No winner: all {election.total_ballots} ballots are exhausted")
                raise NoWinnerError(
                    f"All {election.total_ballots} ballots were exhausted before any "
                    f"candidate reached a majority",
                    rounds=self.rounds,
                )

            winner = self.leader()
            if winner is not None:
                snapshot.winner = winner.name
                logger.info(
                    f"Winner: {winner.name} with {winner.votes} of {election.countable} "
                    f"countable ballots in round {round_number}"
                )
                return ElectionResult(
                    election_name=election.name,
                    winner=winner,
                    rounds=self.rounds,
                    total_ballots=election.total_ballots,
                    exhausted=election.exhausted,
                )

            eliminated, transfers = self.eliminate_round()
            if not eliminated:
                raise TabulationInvariantError(
                    f"Round {round_number} has no majority and nobody left to eliminate"
                )
            snapshot.eliminated = [c.name for c in eliminated]
            snapshot.transfers = transfers
