"""
Heading-delimited sections and table rows.

A status document is split on level-2 headings into (title, body)
sections. Bodies keep their tokens so callers can pull bullet items or a
pipe table out of a section without re-reading the text.
"""

from dataclasses import dataclass, field

from constellation.core.parsing.tokens import Token, TokenKind, iter_tokens

ITEM_KINDS = (TokenKind.BULLET, TokenKind.CHECKBOX)


@dataclass
class Section:
    """A heading and the tokens under it, up to the next heading of the same level."""

    title: str
    tokens: list[Token] = field(default_factory=list)

    @property
    def body(self) -> str:
        return "\n".join(token.line for token in self.tokens).strip()

    def is_empty(self) -> bool:
        return all(token.kind == TokenKind.BLANK for token in self.tokens)

    def items(self, numbered: bool = False) -> list[str]:
        """
        Bullet items of the section, trimmed.

        Args:
            numbered: Also accept "1." style items (completed lists)
        """
        kinds = ITEM_KINDS + (TokenKind.NUMBERED,) if numbered else ITEM_KINDS
        return [token.text for token in self.tokens if token.kind in kinds and token.text]

    def first_line(self) -> str | None:
        """First non-blank, non-heading line with any list marker stripped."""
        for token in self.tokens:
            if token.kind in (TokenKind.BLANK, TokenKind.HEADING):
                continue
            return token.text or None
        return None

    def table(self) -> list[dict[str, str]]:
        return parse_table(self.tokens)


def split_sections(text: str | None, level: int = 2) -> list[Section]:
    """
    Split a document into sections on headings of exactly `level`.

    Text before the first such heading is not a section. Deeper headings
    stay inside the enclosing section's body.
    """
    sections: list[Section] = []
    current: Section | None = None

    for token in iter_tokens(text):
        if token.kind == TokenKind.HEADING and token.level == level:
            current = Section(title=token.text)
            sections.append(current)
        elif token.kind == TokenKind.HEADING and token.level < level:
            current = None
        elif current is not None:
            current.tokens.append(token)

    return sections


def sections_by_title(text: str | None, level: int = 2) -> dict[str, Section]:
    """
    Map section titles to sections.

    Sections with an empty body are omitted, so callers must not assume a
    heading's presence. When a title repeats, the first section wins.
    """
    result: dict[str, Section] = {}
    for section in split_sections(text, level):
        if section.is_empty() or section.title in result:
            continue
        result[section.title] = section
    return result


def parse_table(tokens: list[Token]) -> list[dict[str, str]]:
    """
    Map the first pipe table in `tokens` to row dicts keyed by header.

    The separator row is skipped. Cells beyond the header width are
    dropped and missing cells are empty strings. The table ends at the
    first non-table line after it starts.
    """
    header: tuple[str, ...] | None = None
    rows: list[dict[str, str]] = []

    for token in tokens:
        if token.kind == TokenKind.TABLE_SEPARATOR:
            continue
        if token.kind != TokenKind.TABLE_ROW:
            if header is not None:
                break
            continue
        if header is None:
            header = token.cells
            continue
        cells = token.cells + ("",) * (len(header) - len(token.cells))
        rows.append(dict(zip(header, cells)))

    return rows
