"""Ordering candidates by the number of ballots they currently hold."""

from typing import Any, Callable, Iterable

from runoff.models import Candidate

DEFAULT_TIEBREAK = "id"

TiebreakKey = Callable[[Candidate], Any]

# Tie-break registry - policies register themselves with @register_tiebreak
_tiebreaks: dict[str, TiebreakKey] = {}


def register_tiebreak(name: str) -> Callable[[TiebreakKey], TiebreakKey]:
    """Decorator to register a tie-break sort key under a policy name."""
    def decorator(key: TiebreakKey) -> TiebreakKey:
        _tiebreaks[name] = key
        return key
    return decorator


def get_tiebreak_names() -> list[str]:
    """Return the names of all registered tie-break policies."""
    return list(_tiebreaks)


def get_tiebreak(name: str) -> TiebreakKey:
    try:
        return _tiebreaks[name]
    except KeyError:
        known = ", ".join(get_tiebreak_names())
        raise ValueError(f"Unknown tie-break policy '{name}' (known: {known})") from None


@register_tiebreak("id")
def _by_id(candidate: Candidate) -> int:
    # Earlier registration ranks higher, so the later one sits at the bottom
    return candidate.id


@register_tiebreak("reverse-id")
def _by_reverse_id(candidate: Candidate) -> int:
    return -candidate.id


@register_tiebreak("name")
def _by_name(candidate: Candidate) -> tuple[str, int]:
    return (candidate.name.upper(), candidate.id)


def rank_candidates(
    candidates: Iterable[Candidate], tiebreak: str = DEFAULT_TIEBREAK
) -> list[Candidate]:
    """Rank candidates from most to fewest held ballots.

    Candidates with equal counts are ordered by the named tie-break policy,
    so the result is a total order that does not depend on input order.

    Args:
        candidates: Candidates to rank (typically the active roster)
        tiebreak: Name of a registered tie-break policy

    Returns:
        A new list; the input is not modified.
    """
    key = get_tiebreak(tiebreak)
    return sorted(candidates, key=lambda c: (-c.votes, key(c)))
