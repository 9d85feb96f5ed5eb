"""Live renumbering of numbered and lettered list lines.

After every edit the whole document is scanned top to bottom and each
sequenced list block gets consecutive markers again. Only the prefix of a
line whose marker actually changes is rewritten, so styling on the
indentation and content is never disturbed. Caret and selection are
captured as (line, column) before the pass and put back afterwards.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .list_grammar import ListType, ParsedListLine, build_marker, build_prefix, parse_list_line, set_indent_level
from .model import CursorPosition, EditingSurface

logger = logging.getLogger(__name__)


@dataclass
class ListLevelState:
    """Numbering memory for one indent level during a pass."""
    list_type: ListType
    bullet_symbol: Optional[str]
    uppercase_letters: bool
    item_count: int


@dataclass(frozen=True)
class SelectionSnapshot:
    start: CursorPosition
    end: CursorPosition
    caret: CursorPosition
    is_empty: bool


def capture_selection(surface: EditingSurface) -> SelectionSnapshot:
    """Record selection and caret as (line, column) coordinates."""
    start, end, caret = surface.get_selection()
    return SelectionSnapshot(
        start=CursorPosition(*surface.position_of(start)),
        end=CursorPosition(*surface.position_of(end)),
        caret=CursorPosition(*surface.position_of(caret)),
        is_empty=start == end,
    )


def _resolve(surface: EditingSurface, position: CursorPosition) -> int:
    """Offset for a (line, column) pair against the current line table."""
    line_count = surface.line_count()
    if position.line_index >= line_count:
        # Past the last line: document end
        last = line_count - 1
        return surface.offset_of(last, len(surface.line_text(last)))
    line_length = len(surface.line_text(position.line_index))
    return surface.offset_of(position.line_index, min(position.column, line_length))


def restore_selection(surface: EditingSurface, snapshot: SelectionSnapshot) -> None:
    caret = _resolve(surface, snapshot.caret)
    if snapshot.is_empty:
        surface.set_selection(caret, caret, caret)
        return
    surface.set_selection(_resolve(surface, snapshot.start), _resolve(surface, snapshot.end), caret)


def _sequenced(text: str) -> Optional[ParsedListLine]:
    """Parse a line that carries a sequence; bullets and plain text give None."""
    parsed = parse_list_line(text)
    if parsed is None or parsed.list_type is ListType.BULLET:
        return None
    return parsed


def _same_block(first: ParsedListLine, other: ParsedListLine) -> bool:
    return (other.list_type is first.list_type
            and other.indent_level == first.indent_level
            and other.is_uppercase_letter == first.is_uppercase_letter)


class ListRenumberer:
    """Keeps list markers sequential as the document changes.

    A single renumberer is attached to one editing surface. Its own
    replacements raise the same change notification that invoked it; those
    nested calls are ignored while a pass is running.
    """

    def __init__(self):
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def on_text_changed(self, surface: EditingSurface) -> None:
        """Change-notification hook."""
        self.renumber(surface)

    def renumber(self, surface: EditingSurface) -> int:
        """Renumber every sequenced list block in the document.

        Returns:
            Number of lines whose prefix was rewritten.
        """
        if self._in_flight:
            return 0
        self._in_flight = True
        try:
            line_count = surface.line_count()
            if line_count == 0:
                return 0
            snapshot = capture_selection(surface)
            lines = [surface.line_text(i) for i in range(line_count)]
            changed = self._renumber_lines(surface, lines)
            restore_selection(surface, snapshot)
        finally:
            self._in_flight = False

        if changed:
            logger.debug(f"Renumbered {changed} list line(s)")
        return changed

    def _renumber_lines(self, surface: EditingSurface, lines: list[str]) -> int:
        levels: dict[int, ListLevelState] = {}
        changed = 0
        i = 0
        while i < len(lines):
            first = _sequenced(lines[i])
            if first is None:
                i += 1
                continue

            level = first.indent_level
            # Leaving a nested list forgets its numbering
            for deeper in [lvl for lvl in levels if lvl > level]:
                del levels[deeper]

            block = [first]
            j = i + 1
            while j < len(lines):
                nxt = _sequenced(lines[j])
                if nxt is None or not _same_block(first, nxt):
                    break
                block.append(nxt)
                j += 1

            uppercase = first.is_uppercase_letter
            state = levels.get(level)
            if state is not None and state.list_type is first.list_type and state.uppercase_letters == uppercase:
                start_index = state.item_count
            else:
                start_index = 0

            for offset, parsed in enumerate(block):
                marker = build_marker(parsed.list_type, start_index + offset, uppercase)
                new_prefix = build_prefix(parsed.indent_text, marker, parsed.punctuation, parsed.spacing)
                if new_prefix == parsed.prefix:
                    continue
                surface.replace(i + offset, 0, parsed.prefix_length, new_prefix)
                changed += 1

            levels[level] = ListLevelState(
                list_type=first.list_type,
                bullet_symbol=None,
                uppercase_letters=uppercase,
                item_count=start_index + len(block),
            )
            i = j
        return changed


def change_list_indent(surface: EditingSurface, line_index: int, delta: int,
                       renumberer: Optional[ListRenumberer] = None) -> bool:
    """Move a list line delta levels in or out, then renumber.

    Only the leading whitespace is replaced. Returns False when the line is
    not a list line or the level would not change.
    """
    text = surface.line_text(line_index)
    parsed = parse_list_line(text)
    if parsed is None:
        return False
    new_level = max(0, parsed.indent_level + delta)
    updated = set_indent_level(text, new_level)
    if updated == text:
        return False

    snapshot = capture_selection(surface)
    # Everything after the indentation is unchanged by set_indent_level
    tail_length = len(text) - len(parsed.indent_text)
    new_indent = updated[:len(updated) - tail_length]
    shift = len(new_indent) - len(parsed.indent_text)
    surface.replace(line_index, 0, len(parsed.indent_text), new_indent)

    # Keep positions on the edited line attached to the same characters
    def shifted(position: CursorPosition) -> CursorPosition:
        if position.line_index != line_index:
            return position
        return CursorPosition(line_index, max(0, position.column + shift))

    restore_selection(surface, SelectionSnapshot(
        start=shifted(snapshot.start),
        end=shifted(snapshot.end),
        caret=shifted(snapshot.caret),
        is_empty=snapshot.is_empty,
    ))
    (renumberer or ListRenumberer()).renumber(surface)
    return True
