"""Terminal editor built on Textual's TextArea, with live list renumbering."""

from pathlib import Path
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, TextArea
from textual.widgets.text_area import Selection

from .constants import EditorConstants
from .export import ExportError, export_odt, export_pdf
from .file_io import load_document, save_atomically
from .model import TextModel
from .pdf_generator import FontLoadError
from .renumber import ListRenumberer, change_list_indent
from .selection_math import sum_selection
from .settings_persistence import get_persistence


class TextAreaSurface:
    """EditingSurface over a TextArea; offsets come from its document."""

    def __init__(self, text_area: TextArea):
        self.text_area = text_area

    @property
    def document(self):
        return self.text_area.document

    def line_count(self) -> int:
        return self.document.line_count

    def line_text(self, index: int) -> str:
        return self.document.get_line(index)

    def replace(self, line_index: int, start_column: int, end_column: int, text: str) -> None:
        self.text_area.replace(text, (line_index, start_column), (line_index, end_column),
                               maintain_selection_offset=False)

    def get_selection(self) -> tuple[int, int, int]:
        selection = self.text_area.selection
        anchor = self.document.get_index_from_location(selection.start)
        caret = self.document.get_index_from_location(selection.end)
        start, end = sorted((anchor, caret))
        return (start, end, caret)

    def set_selection(self, start: int, end: int, caret: int) -> None:
        # Selection.end is where the cursor sits
        anchor = end if caret == start else start
        self.text_area.selection = Selection(self.document.get_location_from_index(anchor),
                                             self.document.get_location_from_index(caret))

    def position_of(self, offset: int) -> tuple[int, int]:
        return tuple(self.document.get_location_from_index(offset))

    def offset_of(self, line_index: int, column: int) -> int:
        return self.document.get_index_from_location((line_index, column))


class NotemarkApp(App):
    """Note editor that keeps numbered and lettered lists in sequence."""

    CSS = """
    TextArea {
        background: $surface;
        border: none;
        scrollbar-size: 1 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+p", "export_pdf", "PDF"),
        Binding("ctrl+o", "export_odt", "ODT"),
        Binding("ctrl+t", "sum_selection", "Sum"),
        Binding("tab", "indent", "Indent", show=False, priority=True),
        Binding("shift+tab", "outdent", "Outdent", show=False, priority=True),
    ]

    def __init__(self, filename: Optional[str] = None):
        super().__init__()
        self.filename = filename
        self.text_area: Optional[TextArea] = None
        self.surface: Optional[TextAreaSurface] = None
        self.renumberer = ListRenumberer()

    def compose(self) -> ComposeResult:
        yield Header()
        self.text_area = TextArea(show_line_numbers=False)
        self.surface = TextAreaSurface(self.text_area)
        yield self.text_area
        yield Footer()

    def on_mount(self) -> None:
        if self.filename and Path(self.filename).exists():
            try:
                paragraphs = load_document(self.filename)
            except OSError as e:
                self.notify(f"Error loading file: {e}", severity="error")
            else:
                self.text_area.load_text("\n".join(p.text for p in paragraphs))
                self.renumberer.renumber(self.surface)
        if self.filename:
            self.sub_title = f"Editing: {self.filename}"
        self.text_area.focus()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        # Changes queued by our own rewrites can arrive while the app shuts down
        if not self.text_area.is_mounted or not self.screen_stack:
            return
        self.renumberer.on_text_changed(self.surface)

    def _paragraphs(self):
        return TextModel.from_text(self.text_area.text).to_paragraphs()

    def _target(self, suffix: str) -> Path:
        """Path next to the open file (or in the working directory) with a new suffix."""
        return Path(self.filename or "untitled").with_suffix(suffix)

    def action_save(self) -> None:
        if not self.filename:
            self.notify("No filename set", severity="warning")
            return
        # RTF is import only; edits go to a plain text sibling
        target = Path(self.filename)
        if target.suffix.lower() == ".rtf":
            target = target.with_suffix(".txt")
        try:
            save_atomically(str(target), self.text_area.text)
        except OSError as e:
            self.notify(f"Error saving: {e}", severity="error")
            return
        self.notify(f"Saved to {target}")

    def action_export_pdf(self) -> None:
        target = self._target(".pdf")
        settings = get_persistence().page_settings_for(self.filename)
        try:
            warning = export_pdf(self._paragraphs(), str(target), settings, title=target.stem)
        except (ExportError, FontLoadError) as e:
            self.notify(str(e), severity="error")
            return
        self.notify(warning or f"Exported {target}", severity="warning" if warning else "information")

    def action_export_odt(self) -> None:
        target = self._target(".odt")
        try:
            written = export_odt(self._paragraphs(), str(target))
        except OSError as e:
            self.notify(f"Error exporting: {e}", severity="error")
            return
        if written:
            self.notify(f"Exported {target}")
        else:
            self.notify(f"Saved {target} as plain text", severity="warning")

    def action_sum_selection(self) -> None:
        total = sum_selection(self.text_area.selected_text)
        if total is None:
            self.notify(EditorConstants.NO_NUMBERS_MESSAGE, severity="warning")
        else:
            self.notify(EditorConstants.SUM_MESSAGE.format(total))

    def _change_indent(self, delta: int) -> bool:
        line_index = self.text_area.cursor_location[0]
        return change_list_indent(self.surface, line_index, delta, self.renumberer)

    def action_indent(self) -> None:
        if not self._change_indent(1):
            self.text_area.insert("\t")

    def action_outdent(self) -> None:
        self._change_indent(-1)


def main(filename: Optional[str] = None) -> None:
    """Run the Textual app."""
    NotemarkApp(filename=filename).run()
