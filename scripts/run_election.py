#!/usr/bin/env python3
"""Tabulate an instant-runoff election from a ballot file.

Prints the standings of every round, what was eliminated and where the
ballots went, and the winner.

Usage:
    python scripts/run_election.py ballots.txt
    python scripts/run_election.py ballots.json --tiebreak reverse-id
    python scripts/run_election.py ballots.txt --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add the project root to the path so we can import runoff modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from runoff.models import CandidateStatus, RoundSnapshot  # noqa: E402
from runoff.ranking import DEFAULT_TIEBREAK, get_tiebreak_names  # noqa: E402
from runoff.tally import TallyError, TallyResult, tally_ballot_file  # noqa: E402

logger = logging.getLogger(__name__)

STATUS_SYMBOLS = {
    CandidateStatus.ACTIVE: "  ",
    CandidateStatus.ELIMINATED: "- ",
    CandidateStatus.EXHAUSTED: "  ",
}


def format_round(snapshot: RoundSnapshot) -> list[str]:
    """Format one round as table lines."""
    lines = [f"Round {snapshot.round_number}:"]
    for standing in snapshot.standings:
        if standing.status is CandidateStatus.ELIMINATED and standing.votes == 0:
            continue
        if standing.status is CandidateStatus.EXHAUSTED:
            name = "Exhausted"
        else:
            name = standing.name
        symbol = STATUS_SYMBOLS[standing.status]
        share = ""
        if standing.status is CandidateStatus.ACTIVE and snapshot.countable:
            share = f" ({100 * standing.votes / snapshot.countable:5.1f}%)"
        lines.append(f"  {symbol}{name:25s}: {standing.votes:6d} votes{share}")

    for name in snapshot.eliminated:
        moved = snapshot.transfers.get(name, {})
        if moved:
            detail = ", ".join(f"{count} to {dest}" for dest, count in moved.items())
            lines.append(f"  Eliminated {name}: {detail}")
        else:
            lines.append(f"  Eliminated {name}: no ballots")

    if snapshot.winner:
        lines.append(f"  Majority reached by {snapshot.winner}")
    return lines


def print_tally(tally: TallyResult) -> None:
    result = tally.result
    print(f"=== {result.election_name} ===")
    if tally.election.description:
        print(tally.election.description)
    print()
    for snapshot in result.rounds:
        print("\n".join(format_round(snapshot)))
        print()

    if result.winner is not None:
        print(f"*** WINNER: {result.winner.name} ***")
    else:
        print("*** NO WINNER: every ballot was exhausted before a majority ***")
    print(f"{result.total_ballots} ballots total, {result.exhausted} exhausted.")


def main():
    parser = argparse.ArgumentParser(
        description="Tabulate an instant-runoff election from a ballot file")
    parser.add_argument("ballot_file", help="Path to a .txt or .json ballot file")
    parser.add_argument("--tiebreak", default=DEFAULT_TIEBREAK, choices=get_tiebreak_names(),
                        help=f"Tie-break policy for eliminations (default: {DEFAULT_TIEBREAK})")
    parser.add_argument("--json", action="store_true",
                        help="Print the result as JSON instead of tables")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every ballot assignment")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    path = Path(args.ballot_file)
    if not path.exists():
        logger.error(f"Ballot file not found: {path}")
        sys.exit(1)

    try:
        tally = tally_ballot_file(path.name, path.read_bytes(), tiebreak=args.tiebreak)
    except TallyError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.json:
        print(json.dumps(tally.to_dict(), indent=2))
    else:
        print_tally(tally)


if __name__ == "__main__":
    main()
