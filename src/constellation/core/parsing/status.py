"""
Department STATUS.md parsing.

A status document is a set of level-2 sections that departments keep up
to date by hand:

    # Engineering Status
    **Last Updated:** 2026-01-23 09:00
    **Current Focus:** Checkout rewrite

    ## Currently Working On
    - Payment form validation

    ## Blocked On
    - Nothing blocked

    ## Next Up
    - Receipt emails

    ## Recently Completed
    1. Cart persistence

Headings are matched loosely (case, emoji, punctuation and trailing
counts are ignored). Any other section holding a pipe table is kept
under its title in `tables`.
"""

import re

from constellation.core.parsing.models import StatusDocument
from constellation.core.parsing.sections import Section, sections_by_title

FOCUS_PATTERN = re.compile(r"^[\s*_>-]*current focus:?\**:?\s*(.+)", re.IGNORECASE)
UPDATED_PATTERN = re.compile(r"^[\s*_>-]*last updated:?\**:?\s*(.+)", re.IGNORECASE)
NON_WORD = re.compile(r"[^a-z ]+")
PARENTHETICAL = re.compile(r"\(.*?\)")
EMPHASIS = re.compile(r"[*_`~]+")
NOTHING_BLOCKED = re.compile(
    r"^(nothing(\s+(is|currently))?(\s+blocked)?|none|no\s+blockers?|n/?a)[.!]?$",
    re.IGNORECASE,
)

HEADING_FIELDS: dict[str, str] = {
    "current focus": "current_focus",
    "focus": "current_focus",
    "currently working on": "working_items",
    "working on": "working_items",
    "in progress": "working_items",
    "blocked on": "blocked_items",
    "blocked": "blocked_items",
    "blockers": "blocked_items",
    "next up": "next_items",
    "up next": "next_items",
    "next": "next_items",
    "completed": "completed",
    "recently completed": "completed",
    "done": "completed",
    "shipped": "completed",
}


def normalize_heading(title: str) -> str:
    """Lowercase, drop parentheticals, emoji and punctuation."""
    lowered = PARENTHETICAL.sub("", title.lower())
    return " ".join(NON_WORD.sub(" ", lowered).split())


def is_nothing_blocked(item: str) -> bool:
    return bool(NOTHING_BLOCKED.match(EMPHASIS.sub("", item).strip()))


def _inline_value(pattern: re.Pattern[str], text: str) -> str | None:
    for line in text.splitlines():
        match = pattern.match(line)
        if match:
            value = EMPHASIS.sub("", match.group(1)).strip()
            if value:
                return value
    return None


def parse_status_document(text: str | None) -> StatusDocument:
    """
    Parse a department status document.

    Returns:
        StatusDocument; every list is empty and every scalar None when
        the text is missing or has no recognized sections
    """
    if not text:
        return StatusDocument()

    fields: dict[str, object] = {}
    tables: dict[str, list[dict[str, str]]] = {}
    sections: dict[str, Section] = sections_by_title(text)

    for title, section in sections.items():
        field_name = HEADING_FIELDS.get(normalize_heading(title))
        if field_name is None:
            rows = section.table()
            if rows:
                tables[title] = rows
            continue
        if field_name in fields:
            continue
        if field_name == "current_focus":
            fields[field_name] = section.first_line()
        else:
            fields[field_name] = section.items(numbered=field_name == "completed")

    blocked = fields.get("blocked_items")
    if isinstance(blocked, list) and blocked and all(is_nothing_blocked(i) for i in blocked):
        fields["blocked_items"] = []

    if not fields.get("current_focus"):
        fields["current_focus"] = _inline_value(FOCUS_PATTERN, text)

    return StatusDocument(
        **fields,
        last_updated=_inline_value(UPDATED_PATTERN, text),
        tables=tables,
    )
