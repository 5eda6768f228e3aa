"""Client-side ordering of fetched repositories."""

from __future__ import annotations

import unicodedata
from collections.abc import Callable
from datetime import datetime, timezone

from .models import Repository

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Missing values sort as the oldest possible instant; naive values are
    treated as UTC.
    """
    if not value:
        return _EPOCH
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def collation_key(text: str) -> tuple[str, str]:
    """Case- and accent-insensitive ordering key, raw text as tie-breaker.

    "école" sorts with the e's, not after "z".
    """
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return folded, text


def _sort_key(key: str) -> tuple[Callable[[Repository], object], bool]:
    """Return ``(key_fn, reverse)`` for a sort option."""
    if key == "created":
        return lambda r: parse_timestamp(r.created_at), True
    if key == "pushed":
        return lambda r: parse_timestamp(r.pushed_at), True
    if key == "stars":
        return lambda r: r.stars, True
    if key == "name":
        return lambda r: collation_key(r.name), False
    if key == "full_name":
        return lambda r: collation_key(r.full_name), False
    return lambda r: parse_timestamp(r.updated_at), True


def sort_repositories(repositories: list[Repository], key: str = "updated") -> list[Repository]:
    """Return a new, stably sorted list. Unknown keys fall back to ``updated``."""
    key_fn, reverse = _sort_key(key)
    return sorted(repositories, key=key_fn, reverse=reverse)
