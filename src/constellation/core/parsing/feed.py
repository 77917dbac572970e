"""
Feed and outbox parsing.

A feed is an append-only markdown log where each entry is a single line
with a bold bracketed time prefix:

    **[9:05]** Picked up the pricing page task
    **[14:30]** Shipped pricing page to staging

Lines that do not carry the prefix (headings, notes, blank lines) are
ignored. Entries come back in file order, which agents write
chronologically ascending.

Outboxes use the same line format but usually group entries under a
date heading, so `parse_dated_feed` anchors time-only entries to the
most recent `## YYYY-MM-DD` heading above them.
"""

import re
from datetime import datetime, timedelta, timezone

from constellation.core.parsing.models import FeedEntry
from constellation.core.parsing.tokens import TokenKind, iter_tokens

DATE_PATTERN = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def parse_feed(text: str | None) -> list[FeedEntry]:
    """
    Parse feed entries from raw text.

    Args:
        text: Feed file content (may be None or empty)

    Returns:
        Entries in file order
    """
    return [
        FeedEntry(time=token.time or "", text=token.text)
        for token in iter_tokens(text)
        if token.kind == TokenKind.FEED
    ]


def parse_dated_feed(text: str | None) -> list[FeedEntry]:
    """
    Parse outbox-style entries, qualifying bare times with their date heading.

    Entries that already carry a date keep it; entries before any date
    heading keep their bare time.
    """
    entries: list[FeedEntry] = []
    current_date: str | None = None

    for token in iter_tokens(text):
        if token.kind == TokenKind.HEADING:
            match = DATE_PATTERN.search(token.text)
            if match:
                current_date = match.group(1)
            continue
        if token.kind != TokenKind.FEED:
            continue

        time = token.time or ""
        if current_date and not DATE_PATTERN.match(time):
            time = f"{current_date} {time}"
        entries.append(FeedEntry(time=time, text=token.text))

    return entries


def recent(
    entries: list[FeedEntry], limit: int | None = None, newest_first: bool = True
) -> list[FeedEntry]:
    """
    Keep the last `limit` entries, then optionally reverse them.

    Truncation happens before reversal so that the most recent entries are
    the ones that survive.

    Example:
        >>> [e.text for e in recent(parse_feed(text), 3)]  # E1..E5 in file
        ['E5', 'E4', 'E3']
    """
    kept = list(entries)
    if limit is not None:
        kept = kept[-limit:] if limit > 0 else []
    if newest_first:
        kept.reverse()
    return kept


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Best-effort conversion of an entry or event time to an aware datetime.

    Accepts ISO-8601 (with or without offset, including a trailing "Z")
    and the "YYYY-MM-DD HH:MM" form agents write in feeds. Naive values
    are taken as UTC. Bare "HH:MM" times have no date and return None.

    Returns:
        Aware datetime, or None if the value cannot be placed in time
    """
    if not value or not isinstance(value, str):
        return None

    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        for fmt in TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_newest_first(entries: list, key) -> list:
    """
    Sort records by a best-effort timestamp, newest first.

    Records whose timestamp cannot be parsed go to the bottom, keeping
    their relative order.

    Args:
        entries: Records to sort
        key: Callable returning the raw time string of a record
    """
    dated = []
    undated = []
    for entry in entries:
        when = parse_timestamp(key(entry))
        if when is None:
            undated.append(entry)
        else:
            dated.append((when, entry))

    # sorted() is stable, so equal timestamps keep their input order
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in dated] + undated


def within_window(value: str | None, window: timedelta, now: datetime) -> bool:
    """
    True unless the value is a full timestamp older than `now - window`.

    Time-only values cannot be dated and are always kept.
    """
    when = parse_timestamp(value)
    if when is None:
        return True
    return when >= now - window
