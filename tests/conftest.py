"""Shared test helpers."""

from runoff.election import ElectionContext, create_election
from runoff.models import ElectionResult

# Four-way race with 19 ballots; rankings deliberately use mixed case
REFERENCE_CANDIDATES = ["Bush", "Gore", "Nader", "Browne"]
REFERENCE_BALLOTS = [
    (6, ["BUSH"]),
    (3, ["browne", "Bush"]),
    (6, ["gore"]),
    (2, ["browne", "nader", "gore"]),
    (2, ["nader", "gore"]),
]


def make_election(
    name: str,
    candidates: list[str],
    ballot_groups: list[tuple[int, list[str]]],
    tiebreak: str = "id",
) -> ElectionContext:
    """Build an election from a candidate list and groups of identical ballots.

    Args:
        name: Election name
        candidates: Candidate names in registration order
        ballot_groups: [(count, ranking)], e.g. [(6, ["Bush"]), (2, ["Nader", "Gore"])]
        tiebreak: Tie-break policy name

    Returns:
        ElectionContext with candidates and ballots added. Voters are named
        "g<group>v<n>".
    """
    election = create_election(name, tiebreak=tiebreak)
    for candidate in candidates:
        election.add_candidate(candidate)
    for group, (count, ranking) in enumerate(ballot_groups, start=1):
        for n in range(1, count + 1):
            election.add_ballot(f"g{group}v{n}", ranking)
    return election


def eliminated_names(result: ElectionResult) -> list[str]:
    """All eliminated candidate names across rounds, in elimination order."""
    return [name for r in result.rounds for name in r.eliminated]


def assert_conserved(election: ElectionContext) -> None:
    """Every ballot is held exactly once, by the candidate its pointer resolves to."""
    holders = election.candidates + [election.sentinel]
    assert sum(c.votes for c in holders) == election.total_ballots
    for candidate in holders:
        for ballot_id in candidate.held:
            assert election.holder(ballot_id) is candidate
