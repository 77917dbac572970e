"""
Line tokenizer for agent-written markdown.

Every parser in this package consumes the same token stream instead of
running one large expression per field. Each line is classified by the
first matcher in MATCHERS that accepts it; anything else is TEXT (or
BLANK). Tokenizing never raises: None, empty input and arbitrary garbage
all produce a (possibly empty) list of tokens.

Recognized line shapes:
- Heading:          ## Blocked On
- Feed entry:       **[9:05]** Shipped the landing page
                    **[2026-01-23 14:30]** Deployed v2
- Checkbox:         - [x] **Title** — description #tag
- Numbered item:    1. Wrote the launch post
- Bullet:           - Waiting on API keys
- Table separator:  |---|:---:|
- Table row:        | Metric | Value |
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Classification of a single markdown line."""

    HEADING = "heading"
    FEED = "feed"
    CHECKBOX = "checkbox"
    NUMBERED = "numbered"
    BULLET = "bullet"
    TABLE_SEPARATOR = "table_separator"
    TABLE_ROW = "table_row"
    TEXT = "text"
    BLANK = "blank"


@dataclass(frozen=True)
class Token:
    """One classified line.

    Attributes:
        kind: Line classification
        line: The raw line, without its trailing newline
        text: Payload with the line marker stripped (heading title,
            feed text, item text, ...)
        level: Heading level (HEADING only)
        time: Bracketed time prefix (FEED only)
        checked: Checkbox state (CHECKBOX only)
        cells: Trimmed cell values (TABLE_ROW only)
    """

    kind: TokenKind
    line: str
    text: str = ""
    level: int = 0
    time: str | None = None
    checked: bool = False
    cells: tuple[str, ...] = ()


FEED_TIME = r"(?:\d{4}-\d{2}-\d{2}[ T])?\d{1,2}:\d{2}"

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
FEED_PATTERN = re.compile(rf"^\s*\*\*\[({FEED_TIME})\]\*\*\s*(.*)$")
CHECKBOX_PATTERN = re.compile(r"^\s*[-*+]\s+\[([ xX])\]\s*(.*)$")
NUMBERED_PATTERN = re.compile(r"^\s*\d+[.)]\s+(.*)$")
BULLET_PATTERN = re.compile(r"^\s*[-*+]\s+(.*)$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\s*\|?[\s:|-]*-[\s:|-]*\|?\s*$")
TABLE_ROW_PATTERN = re.compile(r"^\s*\|(.*)$")


def _heading(match: re.Match[str], line: str) -> Token:
    return Token(
        TokenKind.HEADING, line, text=match.group(2).strip(), level=len(match.group(1))
    )


def _feed(match: re.Match[str], line: str) -> Token:
    return Token(TokenKind.FEED, line, text=match.group(2).strip(), time=match.group(1))


def _checkbox(match: re.Match[str], line: str) -> Token:
    return Token(
        TokenKind.CHECKBOX,
        line,
        text=match.group(2).strip(),
        checked=match.group(1).lower() == "x",
    )


def _numbered(match: re.Match[str], line: str) -> Token:
    return Token(TokenKind.NUMBERED, line, text=match.group(1).strip())


def _bullet(match: re.Match[str], line: str) -> Token:
    return Token(TokenKind.BULLET, line, text=match.group(1).strip())


def _table_separator(match: re.Match[str], line: str) -> Token | None:
    # A bare "---" rule is not a table separator
    if "|" not in line:
        return None
    return Token(TokenKind.TABLE_SEPARATOR, line)


def _table_row(match: re.Match[str], line: str) -> Token:
    inner = match.group(1).rstrip()
    if inner.endswith("|"):
        inner = inner[:-1]
    cells = tuple(cell.strip() for cell in inner.split("|"))
    return Token(TokenKind.TABLE_ROW, line, text=inner.strip(), cells=cells)


Builder = Callable[[re.Match[str], str], Token | None]

# Order matters: the first matcher that returns a token wins
MATCHERS: list[tuple[re.Pattern[str], Builder]] = [
    (HEADING_PATTERN, _heading),
    (FEED_PATTERN, _feed),
    (CHECKBOX_PATTERN, _checkbox),
    (TABLE_SEPARATOR_PATTERN, _table_separator),
    (TABLE_ROW_PATTERN, _table_row),
    (NUMBERED_PATTERN, _numbered),
    (BULLET_PATTERN, _bullet),
]


def classify(line: str) -> Token:
    """Classify a single line."""
    if not line.strip():
        return Token(TokenKind.BLANK, line)

    for pattern, build in MATCHERS:
        match = pattern.match(line)
        if match is None:
            continue
        token = build(match, line)
        if token is not None:
            return token

    return Token(TokenKind.TEXT, line, text=line.strip())


def iter_tokens(text: str | None) -> Iterator[Token]:
    """Yield one token per line of text."""
    if not text:
        return
    for line in text.splitlines():
        yield classify(line)


def tokenize(text: str | None) -> list[Token]:
    """Tokenize a whole document."""
    return list(iter_tokens(text))
