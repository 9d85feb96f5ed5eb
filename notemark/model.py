"""Document model shared by the editor and the export pipelines.

StyledRun and Paragraph are the immutable snapshot handed to the exporters.
TextModel is an in-memory editing surface: paragraphs of plain text with a
parallel per-character style mask, a caret and a selection.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol

# Style mask bits, one int per character
STYLE_BOLD = 1
STYLE_UNDER = 2
STYLE_ITALIC = 4
STYLE_STRIKE = 8
STYLE_MONO = 16


@dataclass(frozen=True)
class StyledRun:
    """A stretch of text sharing one formatting state."""
    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    monospaced: bool = False
    font_size: Optional[float] = None

    @property
    def style_mask(self) -> int:
        mask = 0
        if self.bold:
            mask |= STYLE_BOLD
        if self.underline:
            mask |= STYLE_UNDER
        if self.italic:
            mask |= STYLE_ITALIC
        if self.strikethrough:
            mask |= STYLE_STRIKE
        if self.monospaced:
            mask |= STYLE_MONO
        return mask

    @classmethod
    def from_mask(cls, text: str, mask: int, font_size: Optional[float] = None) -> "StyledRun":
        return cls(
            text=text,
            bold=bool(mask & STYLE_BOLD),
            italic=bool(mask & STYLE_ITALIC),
            underline=bool(mask & STYLE_UNDER),
            strikethrough=bool(mask & STYLE_STRIKE),
            monospaced=bool(mask & STYLE_MONO),
            font_size=font_size,
        )

    def with_text(self, text: str) -> "StyledRun":
        return StyledRun(text, self.bold, self.italic, self.underline,
                         self.strikethrough, self.monospaced, self.font_size)


@dataclass(frozen=True)
class Paragraph:
    """An ordered sequence of styled runs."""
    runs: tuple[StyledRun, ...] = ()

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @classmethod
    def from_text(cls, text: str) -> "Paragraph":
        return cls((StyledRun(text),) if text else ())

    def split_at(self, offset: int) -> tuple["Paragraph", "Paragraph"]:
        """Split the runs at a character offset, keeping styling on both sides."""
        head: list[StyledRun] = []
        tail: list[StyledRun] = []
        pos = 0
        for run in self.runs:
            end = pos + len(run.text)
            if end <= offset:
                head.append(run)
            elif pos >= offset:
                tail.append(run)
            else:
                cut = offset - pos
                head.append(run.with_text(run.text[:cut]))
                tail.append(run.with_text(run.text[cut:]))
            pos = end
        return Paragraph(tuple(head)), Paragraph(tuple(r for r in tail if r.text))


def runs_from_mask(text: str, mask: list[int],
                   sizes: Optional[list[Optional[float]]] = None) -> tuple[StyledRun, ...]:
    """Group a style mask (and optional font sizes) into runs of identically styled characters."""
    sizes = sizes or [None] * len(text)
    runs: list[StyledRun] = []
    start = 0
    for i in range(1, len(text) + 1):
        if i == len(text) or mask[i] != mask[start] or sizes[i] != sizes[start]:
            runs.append(StyledRun.from_mask(text[start:i], mask[start], sizes[start]))
            start = i
    return tuple(runs)


@dataclass
class CursorPosition:
    line_index: int = 0
    column: int = 0

    def __lt__(self, other):
        if self.line_index != other.line_index:
            return self.line_index < other.line_index
        return self.column < other.column

    def __ge__(self, other):
        return not self < other


class EditingSurface(Protocol):
    """What the renumbering engine needs from an editor.

    Lines are addressed by index, characters within a line by column.
    Selection and caret are absolute character offsets from the document
    start, with one character counted for each line break.
    """

    def line_count(self) -> int: ...

    def line_text(self, index: int) -> str: ...

    def replace(self, line_index: int, start_column: int, end_column: int, text: str) -> None: ...

    def get_selection(self) -> tuple[int, int, int]: ...

    def set_selection(self, start: int, end: int, caret: int) -> None: ...

    def position_of(self, offset: int) -> tuple[int, int]: ...

    def offset_of(self, line_index: int, column: int) -> int: ...


ChangeListener = Callable[["TextModel"], None]


@dataclass
class TextModel:
    """In-memory editing surface.

    Caret and selection are plain offsets: replace() does not move them, so
    whoever edits text ahead of them is responsible for putting them back.
    Font sizes (None for the body size) are kept per character in sizes,
    parallel to the style masks.
    Listeners are called synchronously after every mutation.
    """
    paragraphs: list[str] = field(default_factory=lambda: [""])
    styles: list[list[int]] = field(default_factory=list)
    sizes: list[list[Optional[float]]] = field(default_factory=list)
    selection_start: int = 0
    selection_end: int = 0
    caret_offset: int = 0
    caret_style: int = 0
    caret_size: Optional[float] = None
    listeners: list[ChangeListener] = field(default_factory=list)

    def __post_init__(self):
        if not self.paragraphs:
            self.paragraphs = [""]
        self._sync_styles_length()

    @classmethod
    def from_text(cls, text: str) -> "TextModel":
        return cls(paragraphs=text.split("\n"))

    @classmethod
    def from_paragraphs(cls, paragraphs: Iterable[Paragraph]) -> "TextModel":
        texts: list[str] = []
        styles: list[list[int]] = []
        sizes: list[list[Optional[float]]] = []
        for para in paragraphs:
            texts.append(para.text)
            mask: list[int] = []
            line_sizes: list[Optional[float]] = []
            for run in para.runs:
                mask.extend([run.style_mask] * len(run.text))
                line_sizes.extend([run.font_size] * len(run.text))
            styles.append(mask)
            sizes.append(line_sizes)
        return cls(paragraphs=texts or [""], styles=styles, sizes=sizes)

    def _sync_styles_length(self):
        """Ensure styles list mirrors paragraphs lengths (internal safety)."""
        if len(self.styles) != len(self.paragraphs):
            self.styles = [[0] * len(p) for p in self.paragraphs]
        else:
            for i, p in enumerate(self.paragraphs):
                if len(self.styles[i]) != len(p):
                    self.styles[i] = (self.styles[i][:len(p)] + [0] * max(0, len(p) - len(self.styles[i])))
        if len(self.sizes) != len(self.paragraphs):
            self.sizes = [[None] * len(p) for p in self.paragraphs]
        else:
            for i, p in enumerate(self.paragraphs):
                if len(self.sizes[i]) != len(p):
                    self.sizes[i] = self.sizes[i][:len(p)] + [None] * max(0, len(p) - len(self.sizes[i]))

    def add_listener(self, listener: ChangeListener) -> None:
        self.listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self.listeners):
            listener(self)

    @property
    def text(self) -> str:
        return "\n".join(self.paragraphs)

    # --- EditingSurface ---

    def line_count(self) -> int:
        return len(self.paragraphs)

    def line_text(self, index: int) -> str:
        return self.paragraphs[index]

    def offset_of(self, line_index: int, column: int) -> int:
        if line_index >= len(self.paragraphs):
            return len(self.text)
        offset = sum(len(p) + 1 for p in self.paragraphs[:line_index])
        return offset + max(0, min(column, len(self.paragraphs[line_index])))

    def position_of(self, offset: int) -> tuple[int, int]:
        remaining = max(0, offset)
        for i, para in enumerate(self.paragraphs):
            if remaining <= len(para):
                return (i, remaining)
            remaining -= len(para) + 1
        last = len(self.paragraphs) - 1
        return (last, len(self.paragraphs[last]))

    def replace(self, line_index: int, start_column: int, end_column: int, text: str) -> None:
        """Replace columns [start_column, end_column) of one line.

        New characters take the style and size of the first replaced
        character, or of the character to their left when nothing is replaced.
        """
        para = self.paragraphs[line_index]
        st = self.styles[line_index]
        sz = self.sizes[line_index]
        if start_column < end_column and start_column < len(st):
            style, size = st[start_column], sz[start_column]
        elif start_column > 0:
            style, size = st[start_column - 1], sz[start_column - 1]
        else:
            style, size = 0, None
        self.paragraphs[line_index] = para[:start_column] + text + para[end_column:]
        self.styles[line_index] = st[:start_column] + [style] * len(text) + st[end_column:]
        self.sizes[line_index] = sz[:start_column] + [size] * len(text) + sz[end_column:]
        self._notify()

    def get_selection(self) -> tuple[int, int, int]:
        return (self.selection_start, self.selection_end, self.caret_offset)

    def set_selection(self, start: int, end: int, caret: int) -> None:
        self.selection_start = start
        self.selection_end = end
        self.caret_offset = caret

    # --- Editing ---

    def select(self, start: int, end: int) -> None:
        """Select [start, end) with the caret at end."""
        self.set_selection(start, end, end)

    def move_caret(self, offset: int) -> None:
        self.set_selection(offset, offset, offset)
        self._update_caret_style_from_position()

    def get_selected_text(self) -> str:
        start, end = sorted((self.selection_start, self.selection_end))
        return self.text[start:end]

    def _update_caret_style_from_position(self):
        """Update caret_style based on style at cursor position (inherit from left)."""
        pi, ci = self.position_of(self.caret_offset)
        line_styles = self.styles[pi]
        line_sizes = self.sizes[pi]
        if ci > 0 and ci - 1 < len(line_styles):
            self.caret_style, self.caret_size = line_styles[ci - 1], line_sizes[ci - 1]
        elif ci < len(line_styles):
            self.caret_style, self.caret_size = line_styles[ci], line_sizes[ci]
        else:
            self.caret_style, self.caret_size = 0, None

    def insert_text(self, text: str) -> None:
        """Insert text at the caret, replacing any selection."""
        start, end = sorted((self.selection_start, self.selection_end))
        if start == end:
            start = end = self.caret_offset
        start_line, start_col = self.position_of(start)
        end_line, end_col = self.position_of(end)

        before = self.paragraphs[start_line][:start_col]
        after = self.paragraphs[end_line][end_col:]
        before_styles = self.styles[start_line][:start_col]
        after_styles = self.styles[end_line][end_col:]
        before_sizes = self.sizes[start_line][:start_col]
        after_sizes = self.sizes[end_line][end_col:]

        parts = text.split("\n")
        parts_styles = [[self.caret_style] * len(part) for part in parts]
        parts_sizes = [[self.caret_size] * len(part) for part in parts]
        parts[0] = before + parts[0]
        parts_styles[0] = before_styles + parts_styles[0]
        parts_sizes[0] = before_sizes + parts_sizes[0]
        caret_line = start_line + len(parts) - 1
        caret_col = len(parts[-1])
        parts[-1] += after
        parts_styles[-1] += after_styles
        parts_sizes[-1] += after_sizes

        self.paragraphs[start_line:end_line + 1] = parts
        self.styles[start_line:end_line + 1] = parts_styles
        self.sizes[start_line:end_line + 1] = parts_sizes
        caret = self.offset_of(caret_line, caret_col)
        self.set_selection(caret, caret, caret)
        self._notify()

    def to_paragraphs(self) -> list[Paragraph]:
        """Snapshot the document as immutable styled paragraphs."""
        self._sync_styles_length()
        return [Paragraph(runs_from_mask(p, self.styles[i], self.sizes[i]))
                for i, p in enumerate(self.paragraphs)]
