"""Recognition and reconstruction of list-line prefixes.

A list line is plain text that starts with optional indentation, a marker
(digits, a single letter or a bullet glyph), punctuation and spacing:

    "  3. Buy milk"   -> numbered, indent level 1
    "b) Second point" -> lettered
    "- Loose item"    -> bullet

Parsing is done by a small hand-written scanner so that every piece of the
prefix is captured verbatim and the line can be rebuilt exactly from the
parts. A line that does not match simply yields None.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import EditorConstants

INDENT_SPACES_PER_LEVEL = EditorConstants.INDENT_SPACES_PER_LEVEL
BULLET_CHARACTERS = EditorConstants.BULLET_CHARACTERS

_LINE_TERMINATORS = "\r\n"


class ListType(Enum):
    """Kinds of list marker."""
    NUMBERED = "numbered"
    LETTERED = "lettered"
    BULLET = "bullet"


@dataclass(frozen=True)
class ParsedListLine:
    """The pieces of a list line.

    indent_text + marker + punctuation + spacing + content + line_break
    always equals the parsed text.
    """
    indent_text: str
    marker: str
    punctuation: str
    spacing: str
    content: str
    line_break: str
    list_type: ListType
    is_uppercase_letter: bool
    indent_level: int

    @property
    def prefix(self) -> str:
        return build_prefix(self.indent_text, self.marker, self.punctuation, self.spacing)

    @property
    def prefix_length(self) -> int:
        return len(self.indent_text) + len(self.marker) + len(self.punctuation) + len(self.spacing)

    @property
    def bullet_symbol(self) -> Optional[str]:
        """The bullet glyph, or None for numbered and lettered lines."""
        return self.marker if self.list_type is ListType.BULLET else None


def normalize_line(text: str) -> str:
    """Strip trailing carriage returns and newlines only."""
    return text.rstrip(_LINE_TERMINATORS)


def _indent_width(indent_text: str) -> int:
    width = 0
    for ch in indent_text:
        # A tab is worth one whole level
        width += INDENT_SPACES_PER_LEVEL if ch == '\t' else 1
    return width


def indent_level_for(indent_text: str) -> int:
    """Nesting depth implied by a run of leading whitespace."""
    return _indent_width(indent_text) // INDENT_SPACES_PER_LEVEL


def parse_list_line(line_text: str) -> Optional[ParsedListLine]:
    """Parse a line into its list-prefix parts.

    Args:
        line_text: One line of text, optionally ending in a line terminator.

    Returns:
        ParsedListLine if the line starts with a list prefix, None otherwise.
    """
    body = normalize_line(line_text)
    line_break = line_text[len(body):]
    n = len(body)
    i = 0

    # Indentation
    while i < n and body[i] in " \t":
        i += 1
    indent_text = body[:i]
    if i >= n:
        return None

    # Marker
    marker_start = i
    ch = body[i]
    if '0' <= ch <= '9':
        list_type = ListType.NUMBERED
        while i < n and '0' <= body[i] <= '9':
            i += 1
    elif ch.isascii() and ch.isalpha():
        list_type = ListType.LETTERED
        i += 1
    elif ch in BULLET_CHARACTERS:
        list_type = ListType.BULLET
        i += 1
    else:
        return None
    marker = body[marker_start:i]

    # Punctuation is mandatory for sequenced markers, optional for bullets
    punctuation = ""
    if i < n and body[i] in EditorConstants.LIST_PUNCTUATION:
        punctuation = body[i]
        i += 1
    elif list_type is not ListType.BULLET:
        return None

    # At least one spacing character
    spacing_start = i
    while i < n and body[i] in EditorConstants.LIST_SPACING:
        i += 1
    if i == spacing_start:
        return None
    spacing = body[spacing_start:i]

    return ParsedListLine(
        indent_text=indent_text,
        marker=marker,
        punctuation=punctuation,
        spacing=spacing,
        content=body[i:],
        line_break=line_break,
        list_type=list_type,
        is_uppercase_letter=list_type is ListType.LETTERED and marker.isupper(),
        indent_level=indent_level_for(indent_text),
    )


def is_list_line(text: str) -> bool:
    return parse_list_line(text) is not None


def get_indent_level(text: str) -> int:
    """Indent level of a list line; 0 for anything else."""
    parsed = parse_list_line(text)
    return parsed.indent_level if parsed else 0


def set_indent_level(text: str, new_level: int) -> str:
    """Rewrite the leading whitespace of a list line to new_level levels.

    Marker, punctuation, spacing, content and line break are left as they
    are. Lines that are not list lines come back unchanged.
    """
    parsed = parse_list_line(text)
    if parsed is None:
        return text
    indentation = " " * (max(0, new_level) * INDENT_SPACES_PER_LEVEL)
    return indentation + text[len(parsed.indent_text):]


def build_prefix(indent_text: str, marker: str, punctuation: str, spacing: str) -> str:
    return indent_text + marker + punctuation + spacing


def build_letter_marker(index: int, uppercase: bool) -> str:
    """Letter for a zero-based position in a lettered list.

    Positions past the end of the alphabet stay on 'z' (or 'Z'); markers
    never roll over to two letters.
    """
    base = ord('A') if uppercase else ord('a')
    return chr(base + min(max(index, 0), 25))


def build_marker(list_type: ListType, index: int, uppercase: bool = False) -> str:
    """Marker text for the zero-based position in a sequenced list."""
    if list_type is ListType.NUMBERED:
        return str(index + 1)
    if list_type is ListType.LETTERED:
        return build_letter_marker(index, uppercase)
    raise ValueError(f"Bullet lists carry no sequence: {list_type}")
