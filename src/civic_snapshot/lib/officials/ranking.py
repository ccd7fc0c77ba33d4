"""Deterministic ordering of legislators: senators first, then by name."""

import unicodedata
from collections.abc import Iterable

from civic_snapshot.lib.officials.base import Legislator


def _collation_key(name: str) -> str:
    """Accent- and case-insensitive comparison key for a name."""
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def is_senator(legislator: Legislator) -> bool:
    return "senator" in legislator.title.lower()


def legislator_sort_key(legislator: Legislator) -> tuple[int, str, str]:
    """Sort key: chamber group (senators = 0), folded name, raw name."""
    return (0 if is_senator(legislator) else 1, _collation_key(legislator.name), legislator.name)


def rank_legislators(legislators: Iterable[Legislator]) -> list[Legislator]:
    """Return legislators with senators first, each group ordered by name."""
    return sorted(legislators, key=legislator_sort_key)
