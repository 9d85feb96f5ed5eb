"""Generate PDF directly in Python from laid-out pages.

This module draws the output of the layout engine (pages of positioned,
font-tagged spans) onto a reportlab canvas. Fonts are the standard PDF
families configured in font_config; underline and strikethrough are drawn
as rules under and through each span.
"""

import io
from typing import List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .font_config import PageSettings
from .layout import Page, PlacedLine


class FontLoadError(Exception):
    """Exception raised when a font cannot be loaded."""


class PDFGenerator:
    """Generate PDF files from laid-out pages."""

    def __init__(self, settings: Optional[PageSettings] = None, title: Optional[str] = None):
        """Initialize PDF generator.

        Args:
            settings: Page geometry the pages were laid out with.
            title: Optional document title stored in the PDF metadata.
        """
        self.settings = settings or PageSettings()
        self.title = title

        # Track unprintable characters for warning
        self.unprintable_chars = set()
        self.has_unprintable = False
        self._checked_fonts: set[str] = set()

    def _check_font(self, font_name: str) -> None:
        """Make sure reportlab knows the face before drawing with it.

        Raises:
            FontLoadError: If the face is neither built in nor registered.
        """
        if font_name in self._checked_fonts:
            return
        try:
            pdfmetrics.getFont(font_name)
        except Exception as e:
            raise FontLoadError(f"Could not load font {font_name}: {e}")
        self._checked_fonts.add(font_name)

    def generate_pdf(self, pages: List[Page]) -> bytes:
        """Generate PDF from laid-out pages.

        Args:
            pages: Pages produced by layout.paginate().

        Returns:
            Complete PDF document as bytes.

        Raises:
            FontLoadError: If a span uses a face reportlab cannot load.
        """
        # Reset unprintable tracking for this generation
        self.unprintable_chars = set()
        self.has_unprintable = False
        pdf_buffer = io.BytesIO()

        c = canvas.Canvas(pdf_buffer, pagesize=(self.settings.page_width, self.settings.page_height))
        if self.title:
            c.setTitle(self.title)

        for page in pages:
            for line in page.lines:
                self._draw_line(c, line)
            c.showPage()

        c.save()
        pdf_buffer.seek(0)
        return pdf_buffer.read()

    def _draw_line(self, c: canvas.Canvas, line: PlacedLine) -> None:
        if not line.spans:
            return
        # Text hangs from the top of the line box; PDF y grows upward
        tallest = max(span.font.size for span in line.spans)
        baseline = self.settings.page_height - line.top - tallest

        for span in line.spans:
            font = span.font
            self._check_font(font.name)
            c.setFont(font.name, font.size)
            safe_text = self._make_pdf_safe(span.text)
            c.drawString(span.x, baseline, safe_text)

            if font.underline or font.strikethrough:
                text_width = c.stringWidth(safe_text, font.name, font.size)
                c.setLineWidth(max(font.size / 20.0, 0.5))
                if font.underline:
                    c.line(span.x, baseline - 2, span.x + text_width, baseline - 2)
                if font.strikethrough:
                    strike_y = baseline + font.size * 0.3
                    c.line(span.x, strike_y, span.x + text_width, strike_y)

    def _make_pdf_safe(self, text: str) -> str:
        """Convert text to be safe for the standard PDF fonts.

        The built-in fonts support Windows-1252 encoding which
        includes Latin-1 plus additional characters in the 0x80-0x9F range.

        Characters not in Windows-1252 are replaced with '?' and tracked
        for warning messages.

        Args:
            text: Text to make safe.

        Returns:
            Text safe for PDF output.
        """
        result = []
        for char in text:
            try:
                # Test if character can be encoded in Windows-1252
                char.encode('cp1252')
                result.append(char)
            except UnicodeEncodeError:
                self.unprintable_chars.add(char)
                self.has_unprintable = True
                result.append('?')
        return ''.join(result)

    def get_unprintable_warning(self) -> str | None:
        """Get warning message about unprintable characters.

        Returns:
            Warning message if unprintable chars were found, None otherwise.
        """
        if not self.has_unprintable:
            return None

        char_list = sorted(self.unprintable_chars)

        # Format characters for display (show unicode code point for non-displayable)
        formatted_chars = []
        for char in char_list[:10]:  # Limit to first 10 for readability
            if ord(char) < 32 or ord(char) == 127:  # Control characters
                formatted_chars.append(f"U+{ord(char):04X}")
            else:
                formatted_chars.append(f"'{char}' (U+{ord(char):04X})")

        if len(char_list) > 10:
            formatted_chars.append(f"... and {len(char_list) - 10} more")

        return (f"Warning: {len(self.unprintable_chars)} unique unprintable character(s) "
                f"were replaced with '?' in the PDF output: {', '.join(formatted_chars)}")
