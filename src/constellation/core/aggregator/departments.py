"""
Department views: the department list, one department's detail and the
pooled outbox feed.

Besides STATUS.md, some departments have sources of their own:
- content: the last entries of tweet-log.md (entries separated by ---)
- research: the most recent findings/*.md reports
"""

import re

from constellation.core.aggregator.agents import display_name, read_agent_feed, summarize_inbox
from constellation.core.aggregator.models import (
    DepartmentFeedEntry,
    DepartmentStatus,
    DepartmentSummary,
    Finding,
    ProjectSummary,
    Tweet,
)
from constellation.core.parsing.feed import parse_dated_feed, recent, sort_newest_first
from constellation.core.parsing.status import parse_status_document
from constellation.core.parsing.tokens import TokenKind, iter_tokens
from constellation.core.sources.reader import SourceReader

TWEET_SEPARATOR = re.compile(r"\n-{3,}\n")
REQUESTED_BY_PATTERN = re.compile(r"Requested by:\*?\*?\s*(\w+)", re.IGNORECASE)


def summarize_department(reader: SourceReader, name: str, feed_limit: int) -> DepartmentSummary:
    status = parse_status_document(reader.read_status(name))
    feed = read_agent_feed(reader, name, feed_limit)
    return DepartmentSummary(
        name=name,
        display_name=display_name(name),
        current_focus=status.current_focus,
        working=len(status.working_items),
        blocked=len(status.blocked_items),
        next=len(status.next_items),
        last_updated=status.last_updated,
        inbox_pending=summarize_inbox(reader, name).pending,
        last_activity=feed[-1] if feed else None,
    )


def parse_tweet_log(text: str | None, limit: int) -> list[Tweet]:
    """The last `limit` tweet-log entries, oldest first."""
    if not text:
        return []
    chunks = [chunk.strip() for chunk in TWEET_SEPARATOR.split(text) if chunk.strip()]
    return [
        Tweet(id=index, text=chunk.splitlines()[0], raw=chunk)
        for index, chunk in enumerate(chunks[-limit:])
    ]


def parse_finding(filename: str, text: str) -> Finding:
    title = next(
        (
            token.text
            for token in iter_tokens(text)
            if token.kind == TokenKind.HEADING and token.level == 1 and token.text
        ),
        filename.removesuffix(".md"),
    )
    requested_by = REQUESTED_BY_PATTERN.search(text)
    return Finding(
        file=filename,
        title=title,
        routed_to=requested_by.group(1).lower() if requested_by else "unknown",
        size=len(text),
    )


def build_department_detail(
    reader: SourceReader,
    name: str,
    projects: list[ProjectSummary],
    feed_limit: int,
    tweet_limit: int,
    findings_limit: int,
) -> DepartmentStatus:
    """
    Everything known about one department.

    Args:
        projects: Summaries of the projects assigned to this department
    """
    status = parse_status_document(reader.read_status(name))
    feed = read_agent_feed(reader, name, feed_limit)

    detail = DepartmentStatus(
        name=name,
        display_name=display_name(name),
        **status.model_dump(),
        feed=recent(feed),
        outbox=recent(parse_dated_feed(reader.read_outbox(name)), feed_limit),
        inbox=summarize_inbox(reader, name),
        projects=projects,
    )

    if name == "content":
        detail.tweets = parse_tweet_log(reader.read_tweet_log(name), tweet_limit)
    elif name == "research":
        findings = reader.read_findings(name)[-findings_limit:]
        detail.findings = [parse_finding(filename, text) for filename, text in findings]

    return detail


def department_feed(
    reader: SourceReader, departments: list[str], cap: int
) -> list[DepartmentFeedEntry]:
    """
    Outbox entries of every department, newest first.

    Entries whose time cannot be placed on a date sort last.
    """
    pooled = [
        DepartmentFeedEntry(department=name, time=entry.time, text=entry.text)
        for name in departments
        for entry in parse_dated_feed(reader.read_outbox(name))
    ]
    return sort_newest_first(pooled, key=lambda entry: entry.time)[:cap]
