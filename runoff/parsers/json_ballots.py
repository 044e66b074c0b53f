"""Parser for JSON ballot files."""

import json

from runoff.election import ElectionContext, create_election
from runoff.errors import ElectionError
from runoff.parsers import register_parser
from runoff.parsers.base import BallotFileError, BallotFileParser, default_election_name
from runoff.ranking import DEFAULT_TIEBREAK


@register_parser
class JsonBallotParser(BallotFileParser):
    """Parser for JSON ballot files.

    Expected structure:

        {
            "name": "Board seat",
            "description": "Annual general meeting 2024",
            "candidates": ["Alice", {"name": "Bob", "description": "Treasurer"}],
            "ballots": [
                {"voter": "jsmith", "ranking": ["Alice", "Bob"]},
                ["Bob"]
            ]
        }

    "name" and "description" are optional. A ballot is either an object
    with "voter" and "ranking", or a bare list of names (the voter is then
    named after its position).
    """

    FORMAT_NAME = "JSON ballot file"
    EXTENSIONS = (".json",)

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if this is a JSON object with candidates and ballots."""
        try:
            data = json.loads(content.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False
        return isinstance(data, dict) and "candidates" in data and "ballots" in data

    def parse(
        self, source: str, content: bytes, tiebreak: str = DEFAULT_TIEBREAK
    ) -> ElectionContext:
        """Parse a JSON ballot file into a populated ElectionContext."""
        try:
            data = json.loads(content.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BallotFileError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise BallotFileError("Ballot file must contain a JSON object")
        candidates = data.get("candidates")
        ballots = data.get("ballots")
        if not isinstance(candidates, list) or not isinstance(ballots, list):
            raise BallotFileError("Ballot file needs 'candidates' and 'ballots' lists")

        election = create_election(
            str(data.get("name") or default_election_name(source)),
            str(data.get("description") or ""),
            tiebreak=tiebreak,
        )

        for i, entry in enumerate(candidates):
            if isinstance(entry, str):
                name, description = entry, ""
            elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
                name, description = entry["name"], str(entry.get("description", ""))
            else:
                raise BallotFileError(f"Candidate #{i + 1}: expected a name or an object with 'name'")
            try:
                election.add_candidate(name, description)
            except ElectionError as e:
                raise BallotFileError(f"Candidate #{i + 1}: {e}") from e

        for i, entry in enumerate(ballots):
            voter, ranking = self._read_ballot(entry, i)
            try:
                election.add_ballot(voter, ranking)
            except ElectionError as e:
                raise BallotFileError(f"Ballot #{i + 1}: {e}") from e

        return election

    @staticmethod
    def _read_ballot(entry, index: int) -> tuple[str, list[str]]:
        if isinstance(entry, list):
            voter, ranking = f"ballot {index + 1}", entry
        elif isinstance(entry, dict):
            voter = str(entry.get("voter") or f"ballot {index + 1}")
            ranking = entry.get("ranking", [])
        else:
            raise BallotFileError(f"Ballot #{index + 1}: expected a list or an object")

        if not isinstance(ranking, list) or not all(isinstance(n, str) for n in ranking):
            raise BallotFileError(f"Ballot #{index + 1}: ranking must be a list of names")
        return voter, ranking
