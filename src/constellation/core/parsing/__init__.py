"""
Text record parsers for agent-written markdown.

Each parser handles one record shape:
- parse_feed / parse_dated_feed: timestamped feed and outbox entries
- split_sections / sections_by_title: heading-delimited sections
- parse_checklist: checkbox items with title, description and tags
- parse_table: pipe tables under a heading
- parse_inbox_item: inbox tickets
- parse_status_document: department STATUS.md

All of them share the line token stream in tokens.py and none of them
raise on bad input: agents crash mid-write, and a truncated file must
never take the dashboard down.
"""

from constellation.core.parsing.checklist import count_checkboxes, parse_checklist
from constellation.core.parsing.feed import (
    parse_dated_feed,
    parse_feed,
    parse_timestamp,
    recent,
    sort_newest_first,
)
from constellation.core.parsing.inbox import parse_inbox_item
from constellation.core.parsing.models import (
    ChecklistItem,
    FeedEntry,
    InboxItem,
    InboxPriority,
    StatusDocument,
)
from constellation.core.parsing.sections import (
    Section,
    parse_table,
    sections_by_title,
    split_sections,
)
from constellation.core.parsing.status import parse_status_document

__all__ = [
    "ChecklistItem",
    "FeedEntry",
    "InboxItem",
    "InboxPriority",
    "Section",
    "StatusDocument",
    "count_checkboxes",
    "parse_checklist",
    "parse_dated_feed",
    "parse_feed",
    "parse_inbox_item",
    "parse_status_document",
    "parse_table",
    "parse_timestamp",
    "recent",
    "sections_by_title",
    "sort_newest_first",
    "split_sections",
]
