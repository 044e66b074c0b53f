"""Core data models for candidates, ballots and tabulation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CandidateStatus(Enum):
    """Where a candidate stands in the tabulation.

    EXHAUSTED is reserved for the sentinel that collects ballots with no
    remaining valid preference. It never competes and never wins.
    """
    ACTIVE = "active"
    ELIMINATED = "eliminated"
    EXHAUSTED = "exhausted"


class Exhausted(Enum):
    """Outcome tag for a reassignment that ran off the end of a ballot."""
    TOKEN = "exhausted"

    def __repr__(self) -> str:
        return "EXHAUSTED"


EXHAUSTED = Exhausted.TOKEN


@dataclass
class Candidate:
    """A candidate registered in an election.

    Attributes:
        id: Sequential id assigned by the election context
        name: Display name, whitespace-trimmed
        description: Free text (party, slogan, ...)
        status: Current CandidateStatus
        held: Ids of the ballots currently counted for this candidate
    """
    id: int
    name: str
    description: str = ""
    status: CandidateStatus = CandidateStatus.ACTIVE
    held: set[int] = field(default_factory=set)

    @property
    def votes(self) -> int:
        return len(self.held)

    @property
    def is_active(self) -> bool:
        return self.status is CandidateStatus.ACTIVE

    @property
    def is_eliminated(self) -> bool:
        return self.status is CandidateStatus.ELIMINATED

    def __str__(self) -> str:
        return f"{self.name}({self.votes} votes)"


@dataclass
class Ballot:
    """One voter's ranked preferences.

    Attributes:
        id: Sequential id assigned by the election context
        voter_name: Informational only; not deduplicated across ballots
        preferences: Candidate ids from first to last choice, no repeats
        position: Index into preferences of the choice currently counted.
            Never decreases. Past the end means the ballot is exhausted.
    """
    id: int
    voter_name: str
    preferences: tuple[int, ...]
    position: int = 0

    @property
    def is_exhausted(self) -> bool:
        return self.position >= len(self.preferences)

    @property
    def current(self) -> int | Exhausted:
        """Id of the candidate this ballot currently resolves to."""
        if self.is_exhausted:
            return EXHAUSTED
        return self.preferences[self.position]


@dataclass(frozen=True)
class Standing:
    """One row of a standings table."""
    name: str
    votes: int
    status: CandidateStatus

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "votes": self.votes, "status": self.status.value}


@dataclass
class RoundSnapshot:
    """State of one tabulation round.

    Attributes:
        round_number: 1-indexed round number
        standings: Ranked active candidates, then eliminated candidates in
            elimination order, then the exhausted-ballot pool
        countable: Ballots still counted for an active candidate
        exhausted: Ballots with no remaining valid preference
        eliminated: Names eliminated at the end of this round, in order
        transfers: {eliminated name -> {destination name -> ballot count}}
        winner: Name of the winner, set only on the deciding round
    """
    round_number: int
    standings: list[Standing]
    countable: int
    exhausted: int
    eliminated: list[str] = field(default_factory=list)
    transfers: dict[str, dict[str, int]] = field(default_factory=dict)
    winner: str | None = None

    def get_votes(self, name: str) -> int | None:
        """Get the vote count a candidate had in this round, or None if not listed."""
        for s in self.standings:
            if s.name == name:
                return s.votes
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round_number,
            "standings": [s.to_dict() for s in self.standings],
            "countable": self.countable,
            "exhausted": self.exhausted,
            "eliminated": list(self.eliminated),
            "transfers": {k: dict(v) for k, v in self.transfers.items()},
            "winner": self.winner,
        }


@dataclass
class ElectionResult:
    """Outcome of a complete tabulation.

    Attributes:
        election_name: Name of the election
        winner: Winning candidate, or None when every ballot was exhausted
            before anyone reached a majority
        rounds: Round-by-round snapshots
        total_ballots: Number of ballots cast
        exhausted: Exhausted ballots at the end of tabulation
    """
    election_name: str
    winner: Candidate | None
    rounds: list[RoundSnapshot]
    total_ballots: int
    exhausted: int

    @property
    def outcome(self) -> str:
        return "winner" if self.winner is not None else "no_winner"

    def to_dict(self) -> dict[str, Any]:
        return {
            "election_name": self.election_name,
            "outcome": self.outcome,
            "winner": self.winner.name if self.winner is not None else None,
            "total_ballots": self.total_ballots,
            "exhausted": self.exhausted,
            "rounds": [r.to_dict() for r in self.rounds],
        }
