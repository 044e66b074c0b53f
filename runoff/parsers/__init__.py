"""Ballot file parsers for the supported input formats."""

from .base import BallotFileParser

# Parser registry - import parsers here to register them
_parsers: list[type[BallotFileParser]] = []


def register_parser(parser_class: type[BallotFileParser]) -> type[BallotFileParser]:
    """Decorator to register a parser class."""
    _parsers.append(parser_class)
    return parser_class


def detect_parser(source: str) -> BallotFileParser | None:
    """Auto-detect and return an appropriate parser instance for the given filename or URL."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse(source):
            return parser
    return None


def detect_parser_by_content(content: bytes, filename: str) -> BallotFileParser | None:
    """Return a parser instance that recognizes the content itself, or None."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse_content(content, filename):
            return parser
    return None


def get_supported_formats() -> str:
    """Return a user-friendly description of supported ballot file formats."""
    lines = ["We currently support ballot files in these formats:"]
    for parser_class in _parsers:
        extensions = ", ".join(getattr(parser_class, "EXTENSIONS", ()))
        lines.append(f"  - {parser_class.FORMAT_NAME} ({extensions})")
    return "\n".join(lines)
