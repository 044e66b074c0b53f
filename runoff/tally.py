"""Orchestrator: parse a ballot file and run the election."""

from dataclasses import dataclass
from typing import Any

from runoff.election import ElectionContext
from runoff.errors import ElectionError, NoWinnerError
from runoff.models import ElectionResult
from runoff.parsers import detect_parser, detect_parser_by_content, get_supported_formats
from runoff.ranking import DEFAULT_TIEBREAK

# Import parsers to register them
from runoff.parsers import json_ballots  # noqa: F401,E402
from runoff.parsers import text  # noqa: F401,E402


@dataclass
class TallyResult:
    """Complete tally with the election and its outcome."""
    election: ElectionContext
    result: ElectionResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = self.result.to_dict()
        data.update({
            "description": self.election.description,
            "tiebreak": self.election.tiebreak,
            "candidates": [
                {"id": c.id, "name": c.name, "description": c.description}
                for c in self.election.candidates
            ],
        })
        return data


class TallyError(Exception):
    """Error while reading or tabulating a ballot file."""
    pass


def tally_ballot_file(
    source: str, content: bytes, tiebreak: str = DEFAULT_TIEBREAK
) -> TallyResult:
    """Parse a ballot file and tabulate it.

    An election in which every ballot ends up exhausted is a valid outcome:
    it is returned as a result with no winner rather than raised.

    Args:
        source: Filename or URL (used to detect the format)
        content: Raw bytes of the ballot file
        tiebreak: Name of the tie-break policy for eliminations

    Returns:
        TallyResult with the populated election and its result

    Raises:
        TallyError: If the format is unknown or the file is invalid
    """
    # Find appropriate parser: try filename first, then content detection
    parser = detect_parser(source)
    if parser is None:
        parser = detect_parser_by_content(content, source)
    if parser is None:
        raise TallyError(
            f"We couldn't determine the ballot file format.\n\n"
            f"{get_supported_formats()}"
        )

    try:
        election = parser.parse(source, content, tiebreak=tiebreak)
    except ValueError as e:
        # BallotFileError, or an unknown tie-break policy
        raise TallyError(f"Failed to read ballot file: {e}") from e
    except ElectionError as e:
        raise TallyError(f"Invalid ballot file: {e}") from e

    try:
        result = election.run_election()
    except NoWinnerError as e:
        result = ElectionResult(
            election_name=election.name,
            winner=None,
            rounds=e.rounds,
            total_ballots=election.total_ballots,
            exhausted=election.exhausted,
        )

    return TallyResult(election=election, result=result)
