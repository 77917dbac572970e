"""
Checklist parsing for ideas and task documents.

Lines look like:

    - [ ] **Dark mode** — follow the OS setting #ui #project:dashboard
    - [x] **Ship it** — done #done:2026-01-02
    - [ ] Plain item without a bold title #blocked:waiting-on-design

Tags are `#name` or `#name:value` tokens (the value may be empty) and
may appear anywhere after the checkbox. They are removed from the description.
"""

import re

from constellation.core.parsing.models import ChecklistItem
from constellation.core.parsing.tokens import TokenKind, iter_tokens

TAG_PATTERN = re.compile(r"(?<![\w#])#([A-Za-z0-9][\w.-]*(?::[^\s#]*)?)")
TITLE_PATTERN = re.compile(r"^\*\*(.+?)\*\*(.*)$")
LEADING_SEPARATOR = re.compile(r"^[\s:—–-]+")
WHITESPACE = re.compile(r"\s+")


def extract_tags(text: str) -> list[str]:
    """Tags in order of first appearance, without the leading '#'."""
    tags: list[str] = []
    for match in TAG_PATTERN.finditer(text):
        tag = match.group(1)
        if tag not in tags:
            tags.append(tag)
    return tags


def strip_tags(text: str) -> str:
    return WHITESPACE.sub(" ", TAG_PATTERN.sub("", text)).strip()


def parse_checklist_line(text: str, checked: bool) -> ChecklistItem:
    """Split the text after a checkbox into title, description and tags."""
    tags = extract_tags(text)

    match = TITLE_PATTERN.match(text)
    if match:
        title = match.group(1).strip()
        description = strip_tags(match.group(2))
        description = LEADING_SEPARATOR.sub("", description).strip()
    else:
        title = strip_tags(text)
        description = ""

    return ChecklistItem(
        checked=checked,
        text=text,
        title=title,
        description=description,
        tags=tags,
    )


def parse_checklist(text: str | None) -> list[ChecklistItem]:
    """Parse every checkbox line of a document, in file order."""
    return [
        parse_checklist_line(token.text, token.checked)
        for token in iter_tokens(text)
        if token.kind == TokenKind.CHECKBOX
    ]


def count_checkboxes(text: str | None) -> tuple[int, int]:
    """
    Count checklist markers.

    Returns:
        Tuple of (done, total)
    """
    done = total = 0
    for token in iter_tokens(text):
        if token.kind != TokenKind.CHECKBOX:
            continue
        total += 1
        if token.checked:
            done += 1
    return done, total
