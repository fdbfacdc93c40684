"""Substring matching of search terms against a record's tags."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any


def _search_tags(record: Any) -> Sequence[Any]:
    """Return the record's `search` tags. Empty if missing or not a collection."""
    if isinstance(record, Mapping):
        tags = record.get("search")
    else:
        tags = getattr(record, "search", None)
    if tags is None or isinstance(tags, str):
        # A bare string is a single tag, not a sequence of characters
        return (tags,) if tags else ()
    if not isinstance(tags, Iterable):
        return ()
    return tuple(tags)


def matches(term: str, record: Any, *, case_sensitive: bool = True) -> bool:
    """Check whether any of the record's search tags contains `term`.

    Records can be mappings (``record["search"]``) or objects
    (``record.search``). A record with no tags never matches.

    Args:
        term: Substring to look for.
        record: Record carrying a `search` sequence of strings.
        case_sensitive: Compare case-insensitively when False.
    """
    tags = _search_tags(record)
    if not case_sensitive:
        term = term.casefold()
        return any(term in str(tag).casefold() for tag in tags)
    return any(term in str(tag) for tag in tags)


def filter_records(term: str, records: Iterable[Any], *, case_sensitive: bool = True) -> list[Any]:
    """Return the records matching `term`, in their original order.

    An empty term returns every record.
    """
    if term == "":
        return list(records)
    return [r for r in records if matches(term, r, case_sensitive=case_sensitive)]
