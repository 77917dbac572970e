"""
Tests for feed and outbox parsing.

Tests validate:
- Entry extraction in file order
- Truncation to the most recent entries before reversal
- Date-heading anchoring for outbox entries
- Best-effort timestamp parsing and newest-first sorting
"""

from datetime import datetime, timedelta, timezone

from constellation.core.parsing.feed import (
    parse_dated_feed,
    parse_feed,
    parse_timestamp,
    recent,
    sort_newest_first,
    within_window,
)
from constellation.core.parsing.models import FeedEntry


class TestParseFeed:
    """Test parse_feed."""

    def test_entries_in_file_order(self):
        text = "# Feed\n**[9:05]** First\nnot an entry\n\n**[14:30]** Second\n"
        entries = parse_feed(text)
        assert entries == [
            FeedEntry(time="9:05", text="First"),
            FeedEntry(time="14:30", text="Second"),
        ]

    def test_empty_input(self):
        assert parse_feed(None) == []
        assert parse_feed("") == []
        assert parse_feed("# Only a heading\n") == []


class TestRecent:
    """Test recent()."""

    def test_truncates_before_reversing(self):
        """The most recent entries survive the cap, newest first."""
        text = "\n".join(f"**[9:0{i}]** E{i}" for i in range(1, 6))
        entries = recent(parse_feed(text), 3)
        assert [e.text for e in entries] == ["E5", "E4", "E3"]

    def test_file_order_when_not_reversed(self):
        text = "**[9:01]** E1\n**[9:02]** E2\n**[9:03]** E3\n"
        entries = recent(parse_feed(text), 2, newest_first=False)
        assert [e.text for e in entries] == ["E2", "E3"]

    def test_no_limit(self):
        text = "**[9:01]** E1\n**[9:02]** E2\n"
        assert [e.text for e in recent(parse_feed(text))] == ["E2", "E1"]


class TestParseDatedFeed:
    """Test outbox parsing with date headings."""

    def test_bare_times_take_heading_date(self):
        text = "## 2026-01-22\n**[16:00]** Deployed v1\n## 2026-01-23\n**[09:30]** Fixed bug\n"
        entries = parse_dated_feed(text)
        assert [e.time for e in entries] == ["2026-01-22 16:00", "2026-01-23 09:30"]

    def test_dated_entries_keep_their_date(self):
        text = "## 2026-01-22\n**[2026-01-20 08:00]** Backfilled\n"
        assert parse_dated_feed(text)[0].time == "2026-01-20 08:00"

    def test_entries_before_any_heading_stay_bare(self):
        assert parse_dated_feed("**[8:00]** Early\n")[0].time == "8:00"


class TestParseTimestamp:
    """Test parse_timestamp."""

    def test_iso_with_z(self):
        assert parse_timestamp("2026-01-23T09:00:00Z") == datetime(
            2026, 1, 23, 9, 0, tzinfo=timezone.utc
        )

    def test_feed_style_is_utc(self):
        assert parse_timestamp("2026-01-23 14:30") == datetime(
            2026, 1, 23, 14, 30, tzinfo=timezone.utc
        )

    def test_bare_time_and_garbage(self):
        assert parse_timestamp("9:05") is None
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None


class TestSortNewestFirst:
    """Test sort_newest_first."""

    def test_undated_sink_in_input_order(self):
        entries = [
            FeedEntry(time="9:00", text="a"),
            FeedEntry(time="2026-01-20 08:00", text="old"),
            FeedEntry(time="10:00", text="b"),
            FeedEntry(time="2026-01-23 08:00", text="new"),
        ]
        result = sort_newest_first(entries, key=lambda e: e.time)
        assert [e.text for e in result] == ["new", "old", "a", "b"]

    def test_within_window(self):
        now = datetime(2026, 1, 23, 12, 0, tzinfo=timezone.utc)
        assert within_window("2026-01-23 11:00", timedelta(hours=1), now)
        assert not within_window("2026-01-23 10:59", timedelta(hours=1), now)
        assert within_window("9:05", timedelta(hours=1), now)
