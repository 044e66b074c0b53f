"""Election context: the candidate registry and the ballot store.

The context owns every Candidate and Ballot in id-keyed tables. Candidates
and ballots refer to each other only by id, and every mutation (assignment,
elimination, reassignment) goes through a context method so the held-ballot
sets stay consistent with each ballot's preference pointer.
"""

import logging
from typing import Iterable

from runoff.errors import (
    AlreadyExhaustedError,
    DuplicateCandidateError,
    DuplicatePreferenceError,
    ElectionClosedError,
    ElectionError,
    NoWinnerError,
    TabulationInvariantError,
    UnknownCandidateError,
)
from runoff.models import (
    EXHAUSTED,
    Ballot,
    Candidate,
    CandidateStatus,
    ElectionResult,
    Exhausted,
    Standing,
)
from runoff.ranking import DEFAULT_TIEBREAK, get_tiebreak, rank_candidates
from runoff.tabulator import Tabulator

logger = logging.getLogger(__name__)

SENTINEL_NAME = "_NONE"


def normalize_name(name: str) -> str:
    """Key used for case-insensitive, whitespace-insensitive name matching."""
    return name.strip().upper()


class ElectionContext:
    """A single ranked-choice election.

    Populate it with add_candidate() and add_ballot(), then call
    run_election(). Once tabulation starts (or any candidate is eliminated)
    the election is closed to new candidates and ballots.

    Example:
        >>> election = create_election("Board seat")
        >>> _ = election.add_candidate("Alice")
        >>> _ = election.add_candidate("Bob")
        >>> _ = election.add_ballot("v1", ["alice", "bob"])
        >>> election.run_election().winner.name
        'Alice'
    """

    def __init__(self, name: str, description: str = "", tiebreak: str = DEFAULT_TIEBREAK):
        get_tiebreak(tiebreak)  # reject unknown policies up front
        self.name = name
        self.description = description
        self.tiebreak = tiebreak

        self._next_id = 0
        self._candidates: dict[int, Candidate] = {}
        self._ballots: dict[int, Ballot] = {}
        self._by_name: dict[str, int] = {}
        self._active: list[int] = []
        self._eliminated: list[int] = []
        self._closed = False
        self._result: ElectionResult | None = None
        self._no_winner: NoWinnerError | None = None

        sentinel = Candidate(
            id=self._take_id(),
            name=SENTINEL_NAME,
            description="exhausted ballots",
            status=CandidateStatus.EXHAUSTED,
        )
        self._candidates[sentinel.id] = sentinel
        self._sentinel_id = sentinel.id

    def _take_id(self) -> int:
        next_id = self._next_id
        self._next_id += 1
        return next_id

    # --- read access ---

    @property
    def sentinel(self) -> Candidate:
        """The pool that holds exhausted ballots."""
        return self._candidates[self._sentinel_id]

    @property
    def candidates(self) -> list[Candidate]:
        """All real candidates in registration order (sentinel excluded)."""
        return [c for c in self._candidates.values() if c.id != self._sentinel_id]

    @property
    def active_candidates(self) -> list[Candidate]:
        return [self._candidates[cid] for cid in self._active]

    @property
    def eliminated_candidates(self) -> list[Candidate]:
        """Eliminated candidates in the order they were eliminated."""
        return [self._candidates[cid] for cid in self._eliminated]

    @property
    def ballots(self) -> list[Ballot]:
        return list(self._ballots.values())

    @property
    def total_ballots(self) -> int:
        return len(self._ballots)

    @property
    def exhausted(self) -> int:
        return self.sentinel.votes

    @property
    def countable(self) -> int:
        """Ballots still counted for some active candidate."""
        return self.total_ballots - self.exhausted

    @property
    def closed(self) -> bool:
        return self._closed

    def holder(self, ballot_id: int) -> Candidate:
        """The candidate (or the sentinel) currently holding a ballot."""
        current = self._ballots[ballot_id].current
        if current is EXHAUSTED:
            return self.sentinel
        return self._candidates[current]

    def ranked(self) -> list[Candidate]:
        """Active candidates ranked by held ballots under this election's tie-break."""
        return rank_candidates(self.active_candidates, self.tiebreak)

    def snapshot(self) -> list[Standing]:
        """Current standings: ranked active candidates, eliminated ones, then the exhausted pool."""
        rows = [Standing(c.name, c.votes, c.status) for c in self.ranked()]
        rows.extend(Standing(c.name, c.votes, c.status) for c in self.eliminated_candidates)
        sentinel = self.sentinel
        rows.append(Standing(sentinel.name, sentinel.votes, sentinel.status))
        return rows

    # --- registry ---

    def lookup(self, name: str) -> Candidate:
        """Find a registered candidate by name, ignoring case and surrounding whitespace."""
        candidate_id = self._by_name.get(normalize_name(name))
        if candidate_id is None:
            raise UnknownCandidateError(f"No candidate named '{name.strip()}'")
        return self._candidates[candidate_id]

    def add_candidate(self, name: str, description: str = "") -> Candidate:
        """Register a candidate and add it to the active roster.

        Raises:
            DuplicateCandidateError: If the name matches an existing
                candidate (or the reserved exhausted-ballot pool)
            ElectionClosedError: If tabulation has already started
        """
        self._check_open()
        display_name = name.strip()
        key = normalize_name(name)
        if not key:
            raise ElectionError("Candidate name must not be empty")
        if key in self._by_name or key == normalize_name(SENTINEL_NAME):
            raise DuplicateCandidateError(f"Candidate '{display_name}' is already registered")

        candidate = Candidate(id=self._take_id(), name=display_name, description=description)
        self._candidates[candidate.id] = candidate
        self._by_name[key] = candidate.id
        self._active.append(candidate.id)
        logger.info(f"Added candidate {candidate.name} (id {candidate.id})")
        return candidate

    # --- ballot store ---

    def add_ballot(self, voter_name: str, ordered_names: Iterable[str]) -> Ballot:
        """Register a ballot and count it for its first preference.

        Args:
            voter_name: Informational; several ballots may share a name
            ordered_names: Candidate names from first to last choice. An
                empty list produces a ballot that is exhausted from the start.

        Raises:
            UnknownCandidateError: If any name is not a registered candidate
            DuplicatePreferenceError: If a candidate appears more than once
            ElectionClosedError: If tabulation has already started
        """
        self._check_open()
        preferences = []
        for name in ordered_names:
            try:
                preferences.append(self.lookup(name).id)
            except UnknownCandidateError as e:
                raise UnknownCandidateError(f"{e} on ballot by {voter_name}") from None

        seen: set[int] = set()
        for cid in preferences:
            if cid in seen:
                raise DuplicatePreferenceError(
                    f"Ballot by {voter_name} ranks {self._candidates[cid].name} more than once"
                )
            seen.add(cid)

        ballot = Ballot(id=self._take_id(), voter_name=voter_name, preferences=tuple(preferences))
        logger.debug(f"Added ballot {ballot.id} by {voter_name}: {[self._candidates[c].name for c in preferences]}")
        self._ballots[ballot.id] = ballot
        self._assign(ballot)
        return ballot

    def _check_open(self) -> None:
        if self.closed:
            raise ElectionClosedError(
                f"Election '{self.name}' is already being tabulated; it cannot be changed"
            )

    def _assign(self, ballot: Ballot) -> Candidate:
        """Add a ballot to the held set of whatever its pointer resolves to."""
        target = self.holder(ballot.id)
        if target.is_eliminated:
            raise TabulationInvariantError(
                f"Attempted to assign ballot {ballot.id} to eliminated candidate {target.name}"
            )
        target.held.add(ballot.id)
        logger.debug(
            f"Assigned {ballot.voter_name}'s ballot {ballot.id} "
            f"to choice #{ballot.position + 1}, {target}"
        )
        return target

    # --- mutation primitives used by the tabulator ---

    def reassign(self, ballot_id: int) -> int | Exhausted:
        """Move a ballot to its next preference that has not been eliminated.

        The pointer advances one position at a time, skipping eliminated
        candidates, and stops at the first active candidate or past the end
        of the list.

        Returns:
            Id of the candidate now holding the ballot, or EXHAUSTED.

        Raises:
            AlreadyExhaustedError: If the ballot had no preferences left
        """
        ballot = self._ballots[ballot_id]
        if ballot.is_exhausted:
            raise AlreadyExhaustedError(
                f"Attempted to reassign already-exhausted ballot {ballot.id} by {ballot.voter_name}"
            )
        previous = self.holder(ballot_id)

        ballot.position += 1
        while not ballot.is_exhausted and self._candidates[ballot.current].is_eliminated:
            ballot.position += 1

        previous.held.discard(ballot_id)
        self._assign(ballot)
        return ballot.current

    def eliminate(self, candidate_id: int) -> dict[str, int]:
        """Eliminate an active candidate and cascade its ballots onward.

        The election is closed to new candidates and ballots from here on.

        Returns:
            {destination name -> ballots received}; exhausted ballots are
            counted under the sentinel's name.
        """
        candidate = self._candidates[candidate_id]
        if not candidate.is_active:
            raise TabulationInvariantError(f"Cannot eliminate {candidate.name}: it is not active")

        self._closed = True
        logger.info(f"Eliminating {candidate}")
        candidate.status = CandidateStatus.ELIMINATED
        self._active.remove(candidate_id)
        self._eliminated.append(candidate_id)

        transfers: dict[str, int] = {}
        for ballot_id in sorted(candidate.held):
            destination = self.reassign(ballot_id)
            if destination is EXHAUSTED:
                name = self.sentinel.name
            else:
                name = self._candidates[destination].name
            transfers[name] = transfers.get(name, 0) + 1
        candidate.held.clear()
        return transfers

    # --- tabulation ---

    def run_election(self) -> ElectionResult:
        """Tabulate the election to completion.

        The election is closed to further changes. Calling this again
        returns the same result (or raises the same NoWinnerError).

        Raises:
            NoWinnerError: If every ballot is exhausted before a majority
        """
        if self._result is not None:
            return self._result
        if self._no_winner is not None:
            raise self._no_winner

        self._closed = True
        try:
            self._result = Tabulator(self).run()
        except NoWinnerError as e:
            self._no_winner = e
            raise
        return self._result


def create_election(
    name: str, description: str = "", tiebreak: str = DEFAULT_TIEBREAK
) -> ElectionContext:
    """Create an empty election, ready for candidates and ballots."""
    return ElectionContext(name, description, tiebreak=tiebreak)
