"""Errors raised while building and tabulating an election."""


class ElectionError(Exception):
    """Base class for errors caused by election input."""
    pass


class DuplicateCandidateError(ElectionError):
    """Raised when a candidate name is already registered (case-insensitive)."""
    pass


class UnknownCandidateError(ElectionError):
    """Raised when a name does not match any registered candidate."""
    pass


class DuplicatePreferenceError(ElectionError):
    """Raised when a ballot ranks the same candidate more than once."""
    pass


class ElectionClosedError(ElectionError):
    """Raised when candidates or ballots are added after tabulation started."""
    pass


class NoWinnerError(ElectionError):
    """Every ballot was exhausted before any candidate reached a majority.

    This is a legitimate election outcome, not a bug. The rounds tabulated
    up to that point are kept on the exception for display.
    """

    def __init__(self, message: str, rounds=None):
        super().__init__(message)
        self.rounds = list(rounds or [])


class TabulationInvariantError(RuntimeError):
    """Internal bookkeeping went wrong. Always a bug, never bad input."""
    pass


class AlreadyExhaustedError(TabulationInvariantError):
    """Raised when reassigning a ballot that has no preferences left."""
    pass
