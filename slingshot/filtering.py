"""Case-insensitive substring filtering with match-position ordering."""

from __future__ import annotations

from collections.abc import Sequence

from .catalog import Entry


def match_position(name: str, term: str) -> int:
    """Return the first index of ``term`` in ``name`` ignoring case, or ``-1``."""
    return name.lower().find(term.lower())


def filter_entries(entries: Sequence[Entry], term: str) -> list[Entry]:
    """Return entries whose name contains ``term``, earliest match first.

    Ties on match position fall back to the lower-cased name; remaining ties
    keep input order because ``sorted`` is stable. An empty term matches
    everything at position 0, so only the name key applies. The returned
    list holds the same ``Entry`` objects; ``entries`` is left untouched.
    """
    folded_term = term.lower()
    keyed: list[tuple[int, str, Entry]] = []
    for entry in entries:
        folded_name = entry.display_name.lower()
        position = folded_name.find(folded_term)
        if position < 0:
            continue
        keyed.append((position, folded_name, entry))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [entry for _position, _name, entry in keyed]


__all__ = ["match_position", "filter_entries"]
