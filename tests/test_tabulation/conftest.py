"""Shared fixtures for tabulation tests."""

import pytest
from tests.conftest import REFERENCE_BALLOTS, REFERENCE_CANDIDATES, make_election


@pytest.fixture
def reference_election():
    """Four-way race, 19 ballots. Names deliberately use mixed case.

    Ballots:
        6  Bush
        3  Browne > Bush
        6  Gore
        2  Browne > Nader > Gore
        2  Nader > Gore

    Round 1: Bush 6, Gore 6, Browne 5, Nader 2. Eliminate Nader (2 -> Gore).
    Round 2: Gore 8, Bush 6, Browne 5. Eliminate Browne (3 -> Bush,
             2 -> Gore, skipping the eliminated Nader).
    Round 3: Gore 10 of 19 -> Gore wins.
    """
    return make_election("Reference", REFERENCE_CANDIDATES, REFERENCE_BALLOTS)


@pytest.fixture
def all_exhausted():
    """Two candidates, three empty ballots. Nobody can win."""
    return make_election("All Exhausted", ["A", "B"], [(3, [])])


@pytest.fixture
def single_candidate():
    """One candidate, four ballots for it."""
    return make_election("Single", ["A"], [(4, ["A"])])


@pytest.fixture
def tied_bottom():
    """C and D tie for last with one ballot each.

    Ballots:
        2  A
        2  B
        1  C > A
        1  D > B

    With id tie-break D (registered later) goes first, B reaches 3 of 6.
    With reverse-id C goes first, A reaches 3 of 6.
    """
    return [
        ["A", "B", "C", "D"],
        [(2, ["A"]), (2, ["B"]), (1, ["C", "A"]), (1, ["D", "B"])],
    ]


@pytest.fixture
def zero_support():
    """D and E hold no ballots and are purged together with C in round 1.

    Ballots:
        2  A
        2  B
        1  C > A
    """
    return make_election("Zero Support", ["A", "B", "C", "D", "E"], [
        (2, ["A"]),
        (2, ["B"]),
        (1, ["C", "A"]),
    ])
