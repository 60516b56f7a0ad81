"""Tests for the chronological index."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from sitecontent.core.chronology import (
    ChronologicalEntry,
    ChronologicalIndex,
    parse_entry_date,
    sort_entries,
)
from sitecontent.core.store import ContentStore
from sitecontent.errors import InvalidDateError, MalformedMetadataError

from tests.conftest import WritePage


@pytest.fixture
def index(store: ContentStore) -> ChronologicalIndex:
    return ChronologicalIndex(store)


class TestParseEntryDate:
    """Tests for parse_entry_date()."""

    def test__yaml_date__midnight_utc(self) -> None:
        """Accept date values produced by YAML."""
        assert parse_entry_date("blog/a", date(2020, 12, 23)) == datetime(2020, 12, 23, tzinfo=UTC)

    def test__naive_datetime__taken_as_utc(self) -> None:
        """Attach UTC to naive datetimes."""
        parsed = parse_entry_date("blog/a", datetime(2020, 12, 23, 10, 30))

        assert parsed == datetime(2020, 12, 23, 10, 30, tzinfo=UTC)

    def test__aware_datetime__kept(self) -> None:
        """Keep timezone of aware datetimes."""
        tz = timezone(timedelta(hours=2))
        value = datetime(2020, 12, 23, 10, 30, tzinfo=tz)

        assert parse_entry_date("blog/a", value) == value

    def test__iso_string__parsed(self) -> None:
        """Parse ISO-8601 strings."""
        parsed = parse_entry_date("blog/a", "2020-12-23T10:00:00+00:00")

        assert parsed == datetime(2020, 12, 23, 10, tzinfo=UTC)

    def test__free_form_string__parsed(self) -> None:
        """Fall back to the general parser for other formats."""
        assert parse_entry_date("blog/a", "December 23, 2020") == datetime(
            2020, 12, 23, tzinfo=UTC
        )

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", 42, ["2020-01-01"]])
    def test__invalid_value__raises(self, value: object) -> None:
        """Reject missing or unparseable dates."""
        with pytest.raises(InvalidDateError) as exc_info:
            parse_entry_date("blog/a", value)

        assert exc_info.value.path == "blog/a"
        assert exc_info.value.value == value


class TestOrderByDate:
    """Tests for ChronologicalIndex.order_by_date()."""

    def test__newest_first(self, index: ChronologicalIndex, write_page: WritePage) -> None:
        """Order entries by date descending."""
        write_page("blog/middle", title="Middle", date="2020-06-01")
        write_page("blog/oldest", title="Oldest", date="2019-01-01")
        write_page("blog/newest", title="Newest", date="2021-03-04")

        entries = index.order_by_date("blog")

        assert [e.key for e in entries] == ["newest", "middle", "oldest"]
        assert entries[0] == ChronologicalEntry(
            key="newest",
            date=datetime(2021, 3, 4, tzinfo=UTC),
            title="Newest",
            href="/blog/newest",
        )

    def test__same_date__ordered_by_key(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Break ties on identical dates by key."""
        for key in ("charlie", "alpha", "bravo"):
            write_page(f"blog/{key}", title=key, date="2020-01-01")

        entries = index.order_by_date("blog")

        assert [e.key for e in entries] == ["alpha", "bravo", "charlie"]

    def test__mixed_date_types__ordered(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Compare YAML dates, timestamps and quoted strings together."""
        write_page("blog/a", title="A", date="2020-01-01")
        write_page("blog/b", title="B", date="2020-01-01 12:00:00")
        write_page("blog/c", title="C", date='"Jan 2, 2020"')

        entries = index.order_by_date("blog")

        assert [e.key for e in entries] == ["c", "b", "a"]

    def test__empty_root__returns_empty(self, index: ChronologicalIndex) -> None:
        """Return no entries for a missing root."""
        assert index.order_by_date("blog") == []

    def test__missing_date__raises(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Reject entries without a date."""
        write_page("blog/dated", title="Dated", date="2020-01-01")
        write_page("blog/undated", title="Undated")

        with pytest.raises(InvalidDateError) as exc_info:
            index.order_by_date("blog")

        assert exc_info.value.path == "blog/undated"

    def test__unparseable_date__raises(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Reject entries whose date cannot be parsed."""
        write_page("blog/bad", title="Bad", date="sometime soon")

        with pytest.raises(InvalidDateError):
            index.order_by_date("blog")

    def test__missing_title__raises(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Reject entries without a title."""
        write_page("blog/untitled", date="2020-01-01")

        with pytest.raises(MalformedMetadataError):
            index.order_by_date("blog")

    def test__result_non_increasing_and_resort_idempotent(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Keep dates non-increasing; sorting sorted output changes nothing."""
        for key, day in (("e", 5), ("a", 1), ("i", 9), ("f", 5), ("c", 3)):
            write_page(f"blog/post-{key}", title="Post", date=f"2020-01-0{day}")

        entries = index.order_by_date("blog")

        dates = [e.date for e in entries]
        assert all(a >= b for a, b in zip(dates, dates[1:], strict=False))
        assert sort_entries(entries) == entries


class TestLatest:
    """Tests for ChronologicalIndex.latest()."""

    def test__returns_newest(self, index: ChronologicalIndex, write_page: WritePage) -> None:
        """Return the newest entry."""
        write_page("blog/old", title="Old", date="2019-01-01")
        write_page("blog/new", title="New", date="2021-01-01")

        latest = index.latest("blog")

        assert latest is not None
        assert latest.key == "new"
        assert latest.href == "/blog/new"

    def test__empty_root__returns_none(self, index: ChronologicalIndex) -> None:
        """Return None when there are no entries."""
        assert index.latest("blog") is None


class TestGroupByYear:
    """Tests for ChronologicalIndex.group_by_year()."""

    def test__caps_and_groups_by_year(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Keep the newest entries up to the cap, bucketed by year."""
        # 25 entries over 2019, 2020 and 2021
        for i in range(25):
            year = 2019 + i % 3
            month = 1 + i // 3
            write_page(f"blog/post-{i:02d}", title=f"Post {i}", date=f"{year}-{month:02d}-15")

        groups = index.group_by_year("blog", 10)

        entries = [entry for bucket in groups.values() for entry in bucket]
        assert len(entries) == 10
        assert list(groups) == sorted(groups, reverse=True)
        for year, bucket in groups.items():
            assert all(entry.date.year == year for entry in bucket)
            dates = [entry.date for entry in bucket]
            assert dates == sorted(dates, reverse=True)
        assert entries == index.order_by_date("blog")[:10]

    def test__limit_larger_than_entries(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Return every entry when the cap exceeds the count."""
        write_page("blog/a", title="A", date="2020-01-01")
        write_page("blog/b", title="B", date="2021-01-01")

        groups = index.group_by_year("blog", 10)

        assert {year: [e.key for e in bucket] for year, bucket in groups.items()} == {
            2021: ["b"],
            2020: ["a"],
        }

    def test__zero_limit__returns_empty(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Return no buckets for a zero cap."""
        write_page("blog/a", title="A", date="2020-01-01")

        assert index.group_by_year("blog", 0) == {}

    def test__negative_limit__raises(self, index: ChronologicalIndex) -> None:
        """Reject negative caps."""
        with pytest.raises(ValueError, match="non-negative"):
            index.group_by_year("blog", -1)

    def test__mixed_offsets__bucketed_by_utc_year(
        self, index: ChronologicalIndex, write_page: WritePage
    ) -> None:
        """Bucket by UTC year so buckets stay newest first across offsets."""
        write_page("blog/a", title="A", date='"2023-12-31T23:00-05:00"')
        write_page("blog/b", title="B", date='"2024-01-01T01:00+00:00"')
        write_page("blog/c", title="C", date="2023-06-01")

        groups = index.group_by_year("blog", 10)

        assert list(groups) == [2024, 2023]
        assert {year: [e.key for e in bucket] for year, bucket in groups.items()} == {
            2024: ["a", "b"],
            2023: ["c"],
        }
