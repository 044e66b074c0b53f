"""Abstract base class for ballot file parsers."""

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from urllib.parse import urlparse

from runoff.election import ElectionContext
from runoff.ranking import DEFAULT_TIEBREAK


class BallotFileError(ValueError):
    """Raised when a ballot file is malformed or names invalid candidates."""
    pass


class BallotFileParser(ABC):
    """Abstract base class for parsing ballot files.

    Each parser handles one file format. It reads candidates and ballots
    from the file and feeds them to a fresh ElectionContext through
    add_candidate() and add_ballot(). Parsers are registered via the
    @register_parser decorator in runoff/parsers/__init__.py.
    """

    FORMAT_NAME = ""
    EXTENSIONS: tuple[str, ...] = ()

    def can_parse(self, source: str) -> bool:
        """Check if this parser can handle the given source.

        Args:
            source: URL or filename to check

        Returns:
            True if the source ends with one of this format's extensions
        """
        path = source.split("?", 1)[0].lower()
        return any(path.endswith(ext) for ext in self.EXTENSIONS)

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if this parser can handle the given file content.

        Used when the filename says nothing about the format. Subclasses
        should override this to inspect the content for tell-tale signs.
        """
        return False

    @abstractmethod
    def parse(
        self, source: str, content: bytes, tiebreak: str = DEFAULT_TIEBREAK
    ) -> ElectionContext:
        """Parse the content into a populated ElectionContext.

        Args:
            source: Original URL or filename (for context and default naming)
            content: Raw bytes of the ballot file
            tiebreak: Tie-break policy for the election

        Returns:
            ElectionContext with every candidate and ballot added

        Raises:
            BallotFileError: If the content cannot be parsed
        """
        pass


def default_election_name(source: str) -> str:
    """Derive an election name from a filename or URL, e.g. 'board-2024.txt' -> 'board-2024'."""
    path = urlparse(source).path or source
    return PurePosixPath(path).stem or "Election"
