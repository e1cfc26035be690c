"""Query engine — derives the filtered, newest-first view of the record collection.

Pure functions: safe to recompute on every keystroke.
"""

from collections.abc import Iterable

from app.domain.entities import ClientRecord


def matches(record: ClientRecord, query: str) -> bool:
    """Search predicate used by the client list.

    Name and email match case-insensitively; phone numbers have no case
    and are matched verbatim. An empty query matches everything.
    """
    if not query:
        return True

    needle = query.lower()
    if needle in record.name.lower():
        return True
    if query in record.phone:
        return True
    return bool(record.email) and needle in record.email.lower()


def view(records: Iterable[ClientRecord], query: str = "") -> list[ClientRecord]:
    """Return the records matching ``query``, sorted by ``created_at`` descending."""
    selected = [r for r in records if matches(r, query)]
    return sorted(selected, key=lambda r: r.created_at, reverse=True)
