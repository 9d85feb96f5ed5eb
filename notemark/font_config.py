"""Font and page configuration for fixed-layout export.

This module defines the font families used when rendering styled runs to
PDF and the page geometry (size and margins) the layout engine works in.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .constants import EditorConstants


# Physical page constants
POINTS_PER_INCH = 72
LETTER_WIDTH_INCHES = 8.5
LETTER_HEIGHT_INCHES = 11.0
A4_WIDTH_POINTS = 595.2756  # 210 mm
A4_HEIGHT_POINTS = 841.8898  # 297 mm

# Families used for proportional body text and monospaced runs
BODY_FAMILY = "Helvetica"
MONO_FAMILY = "Courier"


@dataclass(frozen=True)
class FontConfig:
    """Configuration for a font family.

    Attributes:
        name: Display name of the family
        pdf_name: Regular face name used in PDF generation
        pdf_bold_name: Bold face
        pdf_italic_name: Italic (or oblique) face
        pdf_bold_italic_name: Bold italic face
        is_embedded: Whether font is embedded in PDF (vs referenced)
    """
    name: str
    pdf_name: str
    pdf_bold_name: str
    pdf_italic_name: str
    pdf_bold_italic_name: str
    is_embedded: bool = False

    def face(self, bold: bool, italic: bool) -> str:
        """PDF face name for a bold/italic combination."""
        if bold and italic:
            return self.pdf_bold_italic_name
        if bold:
            return self.pdf_bold_name
        if italic:
            return self.pdf_italic_name
        return self.pdf_name

    @classmethod
    def builtin(cls, name: str, italic_suffix: str = "Oblique") -> 'FontConfig':
        """Configuration for one of the standard 14 PDF families.

        Helvetica and Courier name their slanted faces "Oblique"; Times
        uses "Roman" for the upright face and "Italic" for the slanted one.
        """
        regular = "Times-Roman" if name == "Times" else name
        return cls(
            name=name,
            pdf_name=regular,
            pdf_bold_name=f"{name}-Bold",
            pdf_italic_name=f"{name}-{italic_suffix}",
            pdf_bold_italic_name=f"{name}-Bold{italic_suffix}",
            is_embedded=False  # Built-in PDF font, referenced not embedded
        )


# Pre-defined font configurations
FONT_CONFIGS: Dict[str, FontConfig] = {
    "Helvetica": FontConfig.builtin("Helvetica"),
    "Courier": FontConfig.builtin("Courier"),
    "Times": FontConfig.builtin("Times", italic_suffix="Italic"),
}


def get_font_config(font_name: str) -> Optional[FontConfig]:
    """Get font configuration by name.

    Args:
        font_name: Name of the font family

    Returns:
        FontConfig if found, None otherwise
    """
    return FONT_CONFIGS.get(font_name)


@dataclass(frozen=True)
class PageSettings:
    """Page geometry for the layout engine, in points."""
    page_width: float = LETTER_WIDTH_INCHES * POINTS_PER_INCH
    page_height: float = LETTER_HEIGHT_INCHES * POINTS_PER_INCH
    left_margin: float = EditorConstants.DEFAULT_MARGIN
    right_margin: float = EditorConstants.DEFAULT_MARGIN
    top_margin: float = EditorConstants.DEFAULT_MARGIN
    bottom_margin: float = EditorConstants.DEFAULT_MARGIN
    body_size: float = EditorConstants.DEFAULT_BODY_SIZE
    body_family: str = BODY_FAMILY
    mono_family: str = MONO_FAMILY

    @property
    def text_width(self) -> float:
        """Usable width between the side margins."""
        return self.page_width - self.left_margin - self.right_margin

    @property
    def printable_bottom(self) -> float:
        """Lowest point, measured from the top edge, a line may reach."""
        return self.page_height - self.bottom_margin

    @classmethod
    def letter(cls, margin: float = EditorConstants.DEFAULT_MARGIN, **kwargs) -> 'PageSettings':
        """US Letter (8.5" x 11") with equal margins."""
        return cls(left_margin=margin, right_margin=margin, top_margin=margin,
                   bottom_margin=margin, **kwargs)

    @classmethod
    def a4(cls, margin: float = EditorConstants.DEFAULT_MARGIN, **kwargs) -> 'PageSettings':
        """ISO A4 with equal margins."""
        return cls(page_width=A4_WIDTH_POINTS, page_height=A4_HEIGHT_POINTS,
                   left_margin=margin, right_margin=margin, top_margin=margin,
                   bottom_margin=margin, **kwargs)
