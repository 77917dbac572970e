"""
Inbox item parsing.

Each inbox file is a small markdown ticket written by another agent:

    # Draft launch thread
    **Priority:** urgent
    **Status:** in-progress

Fields may instead be given as YAML front matter (`title`, `priority`,
`status`). Front matter wins over the bold fields when both are present.
A ticket is done iff its text contains the literal marker `Status:** done`
or its front matter status is `done`.
"""

import logging
import re

import frontmatter

from constellation.core.parsing.models import InboxItem, InboxPriority
from constellation.core.parsing.tokens import TokenKind, iter_tokens

logger = logging.getLogger(__name__)

DONE_MARKER = "Status:** done"
PRIORITY_PATTERN = re.compile(r"Priority:\*\*\s*(\w+)")
STATUS_PATTERN = re.compile(r"Status:\*\*\s*([\w-]+)")


def _split_front_matter(text: str) -> tuple[dict, str]:
    if not text.startswith("---"):
        return {}, text
    try:
        post = frontmatter.loads(text)
    except Exception as e:
        # Half-written or hand-edited YAML: fall back to the body fields
        logger.debug(f"Ignoring unparseable front matter: {e}")
        return {}, text
    metadata = post.metadata if isinstance(post.metadata, dict) else {}
    return metadata, post.content


def normalize_priority(value: object) -> InboxPriority:
    try:
        return InboxPriority(str(value).strip().lower())
    except ValueError:
        return InboxPriority.UNKNOWN


def parse_inbox_item(filename: str, text: str | None) -> InboxItem:
    """
    Build an InboxItem from a file name and its content.

    Missing fields fall back to the file name (title) and "unknown".
    """
    text = text or ""
    metadata, body = _split_front_matter(text)

    title = str(metadata["title"]).strip() if metadata.get("title") else None
    if title is None:
        title = next(
            (
                token.text
                for token in iter_tokens(body)
                if token.kind == TokenKind.HEADING and token.level == 1 and token.text
            ),
            filename,
        )

    priority_match = PRIORITY_PATTERN.search(body)
    status_match = STATUS_PATTERN.search(body)

    raw_priority = metadata.get("priority") or (
        priority_match.group(1) if priority_match else None
    )
    status = str(
        metadata.get("status") or (status_match.group(1) if status_match else "unknown")
    )

    return InboxItem(
        file=filename,
        title=title,
        priority=normalize_priority(raw_priority) if raw_priority else InboxPriority.UNKNOWN,
        status=status,
        done=DONE_MARKER in text or status.lower() == "done",
    )
