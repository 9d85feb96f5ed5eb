"""Line wrapping and pagination for fixed-layout export.

Styled runs are wrapped into lines no wider than the text area, measuring
real glyph widths, and the lines are stacked onto pages between the
margins. The output is plain data (pages of positioned spans) that
pdf_generator turns into drawing calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

from .constants import EditorConstants
from .font_config import FontConfig, PageSettings, get_font_config
from .model import Paragraph, StyledRun

logger = logging.getLogger(__name__)

# Floating point slack when comparing measured widths
_WIDTH_EPSILON = 1e-6


@dataclass(frozen=True)
class FontSpec:
    """A concrete face at a size, plus line decorations."""
    name: str
    size: float
    underline: bool = False
    strikethrough: bool = False

    @property
    def height(self) -> float:
        return self.size


@dataclass
class Span:
    text: str
    font: FontSpec


@dataclass
class PlacedSpan:
    x: float
    text: str
    font: FontSpec


@dataclass
class PlacedLine:
    """A wrapped line on a page; top is measured down from the page's top edge."""
    top: float
    height: float
    spans: List[PlacedSpan] = field(default_factory=list)


@dataclass
class Page:
    lines: List[PlacedLine] = field(default_factory=list)


class FontResolver:
    """Maps run styles to fonts and measures text in them."""

    def __init__(self, settings: Optional[PageSettings] = None,
                 measure: Optional[Callable[[str, str, float], float]] = None):
        self.settings = settings or PageSettings()
        self._measure = measure or stringWidth
        self.body = self._family(self.settings.body_family)
        self.mono = self._family(self.settings.mono_family)

    @staticmethod
    def _family(name: str) -> FontConfig:
        config = get_font_config(name)
        if config is None:
            raise ValueError(f"Unknown font family: {name}")
        return config

    @property
    def default_font(self) -> FontSpec:
        return FontSpec(self.body.pdf_name, self.settings.body_size)

    def resolve(self, run: StyledRun) -> FontSpec:
        family = self.mono if run.monospaced else self.body
        return FontSpec(
            name=family.face(run.bold, run.italic),
            size=run.font_size or self.settings.body_size,
            underline=run.underline,
            strikethrough=run.strikethrough,
        )

    def width(self, text: str, font: FontSpec) -> float:
        return self._measure(text, font.name, font.size)

    def fit(self, text: str, font: FontSpec, available: float) -> int:
        """Length of the longest prefix of text that fits in available width.

        Prefixes are measured whole rather than summed per character so
        kerning is respected.
        """
        if self.width(text, font) <= available + _WIDTH_EPSILON:
            return len(text)
        lo, hi = 0, len(text) - 1
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if self.width(text[:mid], font) <= available + _WIDTH_EPSILON:
                lo = mid
            else:
                hi = mid - 1
        return lo


def tokenize(segment: str) -> List[str]:
    """Split text into alternating whitespace and non-whitespace tokens."""
    tokens: List[str] = []
    start = 0
    for i in range(1, len(segment) + 1):
        if i == len(segment) or segment[i].isspace() != segment[start].isspace():
            tokens.append(segment[start:i])
            start = i
    return tokens


def wrap_paragraph(runs: Iterable[StyledRun], max_width: float,
                   resolver: FontResolver) -> List[List[Span]]:
    """Wrap a paragraph's runs into lines of spans.

    Hard line breaks inside runs always end a line, so blank source lines
    survive as empty lines. A token too wide for an empty line is split at
    the widest prefix that fits.
    """
    lines: List[List[Span]] = []
    current: List[Span] = []
    width = 0.0

    def flush():
        nonlocal current, width
        lines.append(current)
        current = []
        width = 0.0

    def append(text: str, font: FontSpec):
        nonlocal width
        if current and current[-1].font == font:
            current[-1].text += text
        else:
            current.append(Span(text, font))
        width += resolver.width(text, font)

    for run in runs:
        font = resolver.resolve(run)
        text = run.text.replace("\r\n", "\n").replace("\r", "\n")
        for index, segment in enumerate(text.split("\n")):
            if index > 0:
                flush()
            for token in tokenize(segment):
                while token:
                    fits = resolver.fit(token, font, max_width - width)
                    if fits == len(token):
                        append(token, font)
                        token = ""
                    elif current:
                        # Soft break; whitespace at the break is consumed
                        flush()
                        if token.isspace():
                            token = ""
                    else:
                        fits = max(fits, 1)
                        append(token[:fits], font)
                        token = token[fits:]
                        if token:
                            flush()
    flush()
    return lines


def line_height(line: List[Span], resolver: FontResolver) -> float:
    tallest = max((span.font.height for span in line), default=resolver.default_font.height)
    return tallest * EditorConstants.LINE_SPACING_FACTOR


def paginate(paragraph_lines: Iterable[List[List[Span]]], resolver: FontResolver,
             settings: Optional[PageSettings] = None) -> List[Page]:
    """Stack wrapped paragraphs onto pages.

    Args:
        paragraph_lines: For each paragraph, its wrapped lines.
        resolver: Font resolver used for measuring span widths.
        settings: Page geometry; defaults to the resolver's.

    Returns:
        Pages of positioned lines. There is always at least one page.
    """
    settings = settings or resolver.settings
    pages = [Page()]
    cursor = settings.top_margin
    for lines in paragraph_lines:
        last_height = 0.0
        for line in lines:
            height = line_height(line, resolver)
            if cursor + height > settings.printable_bottom and pages[-1].lines:
                pages.append(Page())
                cursor = settings.top_margin
            x = settings.left_margin
            placed = PlacedLine(top=cursor, height=height)
            for span in line:
                placed.spans.append(PlacedSpan(x, span.text, span.font))
                x += resolver.width(span.text, span.font)
            pages[-1].lines.append(placed)
            cursor += height
            last_height = height
        cursor += last_height * EditorConstants.PARAGRAPH_SPACING_FACTOR
    return pages


def layout_document(paragraphs: Iterable[Paragraph], settings: Optional[PageSettings] = None,
                    resolver: Optional[FontResolver] = None) -> List[Page]:
    """Wrap and paginate a whole document."""
    settings = settings or PageSettings()
    resolver = resolver or FontResolver(settings)
    wrapped = [wrap_paragraph(p.runs, settings.text_width, resolver) for p in paragraphs]
    pages = paginate(wrapped, resolver, settings)
    logger.debug(f"Laid out {len(wrapped)} paragraph(s) on {len(pages)} page(s)")
    return pages
