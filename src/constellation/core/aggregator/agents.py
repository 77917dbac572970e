"""
Per-agent views: agent cards, the pooled changelog and the blocked list.
"""

import re
from datetime import datetime, timedelta

from constellation.core.aggregator.models import (
    AgentStatus,
    AgentSummary,
    BlockedItem,
    ChangelogEntry,
    InboxSummary,
)
from constellation.core.parsing.feed import parse_feed, recent, sort_newest_first, within_window
from constellation.core.parsing.inbox import parse_inbox_item
from constellation.core.parsing.models import FeedEntry, InboxPriority
from constellation.core.probes.models import ProcessInfo
from constellation.core.sources.reader import SourceReader

AGENT_COLORS: dict[str, str] = {
    "ceo": "#ffffff",
    "engineering": "#00d4ff",
    "content": "#ff6b9d",
    "research": "#a78bfa",
    "comms": "#34d399",
    "qa": "#f59e0b",
}

# Accepted values of the changelog `since` selector, in hours
CHANGELOG_WINDOWS: dict[str, int] = {
    "1h": 1,
    "4h": 4,
    "12h": 12,
    "1d": 24,
    "24h": 24,
    "7d": 168,
}
DEFAULT_CHANGELOG_WINDOW = "24h"

BLOCKER_PATTERN = re.compile(r"block|waiting|stuck|need.*input", re.IGNORECASE)


def display_name(name: str) -> str:
    """
    Human-readable agent or department name.

    Example:
        >>> display_name("ceo"), display_name("engineering")
        ('CEO', 'Engineering')
    """
    if name == "ceo":
        return "CEO"
    if name == "qa":
        return "QA"
    return name[:1].upper() + name[1:]


def summarize_inbox(reader: SourceReader, agent: str) -> InboxSummary:
    items = [parse_inbox_item(filename, text) for filename, text in reader.read_inbox(agent)]
    done = sum(1 for item in items if item.done)
    return InboxSummary(total=len(items), pending=len(items) - done, items=items)


def read_agent_feed(reader: SourceReader, agent: str, limit: int) -> list[FeedEntry]:
    """The last `limit` feed entries of an agent, in file order."""
    return recent(parse_feed(reader.read_feed(agent)), limit, newest_first=False)


def is_agent_running(agent: str, processes: list[ProcessInfo]) -> bool:
    """True if an online process name contains the agent name."""
    needle = agent.lower()
    return any(needle in process.name.lower() and process.is_online for process in processes)


def build_agent_summary(
    reader: SourceReader,
    agent: str,
    processes: list[ProcessInfo],
    feed_limit: int,
) -> AgentSummary:
    """
    Combine an agent's feed, inbox and process state.

    An agent is active if it has a live process or a non-empty feed.
    """
    feed = read_agent_feed(reader, agent, feed_limit)
    running = is_agent_running(agent, processes)

    return AgentSummary(
        name=agent,
        display_name=display_name(agent),
        color=AGENT_COLORS.get(agent),
        feed=recent(feed),
        inbox=summarize_inbox(reader, agent),
        last_activity=feed[-1] if feed else None,
        status=AgentStatus.ACTIVE if running or feed else AgentStatus.IDLE,
        is_running=running,
    )


def normalize_window(since: str | None) -> str:
    """Map a `since` selector to an accepted value, defaulting to 24h."""
    if since in CHANGELOG_WINDOWS:
        return since
    return DEFAULT_CHANGELOG_WINDOW


def build_changelog(
    reader: SourceReader,
    agents: list[str],
    since: str,
    now: datetime,
    feed_limit: int,
    cap: int,
) -> list[ChangelogEntry]:
    """
    Pool every agent's feed, newest first.

    Entries with a full date outside the window are dropped. Time-only
    entries cannot be placed in the window and are kept in reverse file
    order after the dated ones.
    """
    window = timedelta(hours=CHANGELOG_WINDOWS[normalize_window(since)])
    pooled: list[ChangelogEntry] = []

    for agent in agents:
        for entry in read_agent_feed(reader, agent, feed_limit):
            if not within_window(entry.time, window, now):
                continue
            pooled.append(
                ChangelogEntry(
                    agent=agent, color=AGENT_COLORS.get(agent), time=entry.time, text=entry.text
                )
            )

    pooled.reverse()
    return sort_newest_first(pooled, key=lambda entry: entry.time)[:cap]


def build_blocked_list(
    reader: SourceReader, agents: list[str], feed_limit: int
) -> list[BlockedItem]:
    """Urgent open inbox tickets, then blocker-like feed entries, per agent."""
    blocked: list[BlockedItem] = []

    for agent in agents:
        for item in summarize_inbox(reader, agent).items:
            if item.priority == InboxPriority.URGENT and not item.done:
                blocked.append(
                    BlockedItem(
                        agent=agent,
                        type="inbox",
                        title=item.title,
                        file=item.file,
                        priority=item.priority.value,
                        status=item.status,
                    )
                )
        for entry in read_agent_feed(reader, agent, feed_limit):
            if BLOCKER_PATTERN.search(entry.text):
                blocked.append(
                    BlockedItem(agent=agent, type="feed", time=entry.time, text=entry.text)
                )

    return blocked
