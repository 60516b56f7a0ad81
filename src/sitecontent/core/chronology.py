"""Chronological index of dated entries.

Lists documents of a content root newest first for the "latest updates" feed.
Every entry must carry a parseable ``date``; documents that do not are
rejected rather than pushed to an arbitrary end of the list. Entries sharing a
date are ordered by key.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any, TypedDict

from dateutil import parser as date_parser

from sitecontent.core.store import ContentStore, DocumentSummary
from sitecontent.core.types import URLPath
from sitecontent.errors import InvalidDateError, MalformedMetadataError

logger = logging.getLogger(__name__)


class ChronologicalEntryDict(TypedDict):
    """Dictionary representation of a chronological entry."""

    key: str
    date: str
    title: str
    href: str


@dataclass(frozen=True)
class ChronologicalEntry:
    """Dated document listing entry."""

    key: str
    date: datetime
    title: str
    href: URLPath

    def sort_key(self) -> tuple[float, str]:
        """Key ordering entries by date descending, then key ascending."""
        return (-self.date.timestamp(), self.key)

    @property
    def year(self) -> int:
        """Calendar year of the entry in UTC."""
        return self.date.astimezone(UTC).year

    def to_dict(self) -> ChronologicalEntryDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "date": self.date.isoformat(),
            "title": self.title,
            "href": self.href,
        }


def parse_entry_date(logical_path: str, value: Any) -> datetime:
    """Parse a front matter date into an aware datetime.

    YAML may already have produced a ``date`` or ``datetime``; strings are
    parsed as ISO-8601 first, then with dateutil's general parser. Naive
    values are taken as UTC.

    Args:
        logical_path: Document path, for error reporting
        value: Raw ``date`` metadata value

    Returns:
        Timezone-aware datetime

    Raises:
        InvalidDateError: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            parsed = date_parser.isoparse(text)
        except ValueError:
            try:
                parsed = date_parser.parse(text)
            except (ValueError, OverflowError) as exc:
                raise InvalidDateError(logical_path, value) from exc
    else:
        raise InvalidDateError(logical_path, value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def sort_entries(entries: list[ChronologicalEntry]) -> list[ChronologicalEntry]:
    """Return entries ordered by date descending, ties broken by key."""
    return sorted(entries, key=ChronologicalEntry.sort_key)


class ChronologicalIndex:
    """Date-ordered views over a content root."""

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    def order_by_date(self, root_key: str) -> list[ChronologicalEntry]:
        """List every document under root_key, newest first.

        Args:
            root_key: Content root, e.g. "blog"

        Returns:
            Entries ordered by date descending, then key ascending

        Raises:
            InvalidDateError: If a document has a missing or unparseable date
            MalformedMetadataError: If a document has broken front matter or no title
        """
        entries = [_to_entry(summary) for summary in self._store.list_documents(root_key)]
        logger.debug("Ordered %d dated entries under %s", len(entries), root_key)
        return sort_entries(entries)

    def latest(self, root_key: str) -> ChronologicalEntry | None:
        """Newest entry under root_key, or None when the root is empty."""
        entries = self.order_by_date(root_key)
        return entries[0] if entries else None

    def group_by_year(self, root_key: str, limit: int) -> dict[int, list[ChronologicalEntry]]:
        """Bucket the newest entries by calendar year.

        Buckets appear newest year first and each bucket keeps date order.
        Years are taken in UTC so that buckets follow the absolute ordering.

        Args:
            root_key: Content root, e.g. "blog"
            limit: Maximum number of entries across all buckets

        Returns:
            Mapping of year to entries

        Raises:
            ValueError: If limit is negative
        """
        if limit < 0:
            raise ValueError("limit must be non-negative")

        groups: dict[int, list[ChronologicalEntry]] = {}
        for entry in self.order_by_date(root_key)[:limit]:
            groups.setdefault(entry.year, []).append(entry)
        return groups


def _to_entry(summary: DocumentSummary) -> ChronologicalEntry:
    logical_path = summary.logical_path
    title = summary.metadata.get("title")
    if not title:
        raise MalformedMetadataError(logical_path, "missing 'title'")

    return ChronologicalEntry(
        key=summary.key,
        date=parse_entry_date(logical_path, summary.metadata.get("date")),
        title=str(title),
        href=summary.href,
    )
