"""Parser for line-oriented text ballot files."""

import re

from runoff.election import ElectionContext, create_election
from runoff.errors import ElectionError
from runoff.parsers import register_parser
from runoff.parsers.base import BallotFileError, BallotFileParser, default_election_name
from runoff.ranking import DEFAULT_TIEBREAK


@register_parser
class TextBallotParser(BallotFileParser):
    """Parser for plain-text ballot files.

    One directive per line, fields separated by colons (whitespace around
    the colons is ignored, directive keywords are case-insensitive):

        ELECTION: Board seat: Annual general meeting 2024
        CANDIDATE: Alice
        CANDIDATE: Bob: Treasurer since 2019
        VOTE: jsmith: Alice, Bob
        VOTE: anon:

    ELECTION is optional and must come before any other directive. A VOTE
    with nothing after the voter name is an empty ballot. Trailing commas
    after the last name are ignored. Blank lines and lines starting with
    '#' are ignored.
    """

    FORMAT_NAME = "Text ballot file"
    EXTENSIONS = (".txt", ".ballots")

    DIRECTIVE_PATTERN = re.compile(r"^\s*(ELECTION|CANDIDATE|VOTE)\s*:", re.IGNORECASE)
    FIELD_SEPARATOR = re.compile(r"\s*:\s*")

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if the first meaningful line is a known directive."""
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            return False
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            return bool(self.DIRECTIVE_PATTERN.match(line))
        return False

    def parse(
        self, source: str, content: bytes, tiebreak: str = DEFAULT_TIEBREAK
    ) -> ElectionContext:
        """Parse a text ballot file into a populated ElectionContext."""
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BallotFileError(f"Ballot file is not valid UTF-8: {e}") from e
        election = None

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            bits = self.FIELD_SEPARATOR.split(line, maxsplit=2)
            directive = bits[0].upper()

            try:
                if directive == "ELECTION":
                    if election is not None:
                        raise BallotFileError("ELECTION must come before any CANDIDATE or VOTE")
                    if len(bits) < 2 or not bits[1]:
                        raise BallotFileError("ELECTION needs a name")
                    description = bits[2] if len(bits) > 2 else ""
                    election = create_election(bits[1], description, tiebreak=tiebreak)
                    continue

                if election is None:
                    election = create_election(default_election_name(source), tiebreak=tiebreak)

                if directive == "CANDIDATE":
                    if len(bits) < 2 or not bits[1]:
                        raise BallotFileError("CANDIDATE needs a name")
                    description = bits[2] if len(bits) > 2 else ""
                    election.add_candidate(bits[1], description)
                elif directive == "VOTE":
                    if len(bits) < 2 or not bits[1]:
                        raise BallotFileError("VOTE needs a voter name")
                    election.add_ballot(bits[1], self._split_names(bits[2] if len(bits) > 2 else ""))
                else:
                    raise BallotFileError(f"Unrecognized line: {line}")
            except (BallotFileError, ElectionError) as e:
                raise BallotFileError(f"Line {line_number}: {e}") from e

        if election is None:
            raise BallotFileError("No candidates or votes found in ballot file")
        return election

    @staticmethod
    def _split_names(field: str) -> list[str]:
        if not field.strip():
            return []
        names = [name.strip() for name in field.split(",")]
        # Trailing commas are allowed
        while names and not names[-1]:
            names.pop()
        if not all(names):
            raise BallotFileError(f"Empty candidate name in ranking '{field}'")
        return names
