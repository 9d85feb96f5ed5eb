"""RTF parsing into styled paragraphs.

Supports the subset of RTF that editors emit for plain styled text: bold,
italic, underline, strikethrough, font size, monospaced fonts (from the
font table), paragraph and line breaks, tabs and escaped characters.
"""

import re
from dataclasses import dataclass, replace
from typing import List, Optional

from .model import Paragraph, StyledRun

# Maximum RTF size to parse (10MB) to prevent DoS attacks
MAX_RTF_SIZE = 10 * 1024 * 1024  # 10MB

# Groups whose content is never document text
_SKIPPED_DESTINATIONS = {
    "fonttbl", "colortbl", "stylesheet", "info", "pict", "header", "footer",
    "listtable", "listoverridetable", "rsidtbl", "generator", "expandedcolortbl",
}

_FONT_ENTRY = re.compile(r"\\f(\d+)((?:\\[a-z]+-?\d*)*)\s*([^;{}]*);")
_MONO_NAMES = ("courier", "mono", "consolas", "menlo", "monaco")


@dataclass(frozen=True)
class _CharState:
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    monospaced: bool = False
    font_size: Optional[float] = None


class _ParagraphBuilder:
    """Collects characters into runs and runs into paragraphs."""

    def __init__(self):
        self.paragraphs: List[Paragraph] = []
        self._runs: List[StyledRun] = []
        self._chars: List[str] = []
        self._state: Optional[_CharState] = None

    def add(self, text: str, state: _CharState) -> None:
        if state != self._state:
            self._flush_run()
            self._state = state
        self._chars.append(text)

    def _flush_run(self) -> None:
        if self._chars and self._state is not None:
            s = self._state
            self._runs.append(StyledRun("".join(self._chars), s.bold, s.italic, s.underline,
                                        s.strikethrough, s.monospaced, s.font_size))
        self._chars = []

    def end_paragraph(self) -> None:
        self._flush_run()
        self.paragraphs.append(Paragraph(tuple(self._runs)))
        self._runs = []

    def finish(self) -> List[Paragraph]:
        self._flush_run()
        if self._runs or not self.paragraphs:
            self.end_paragraph()
        return self.paragraphs


def _matching_brace(rtf_text: str, start: int) -> int:
    """Index just past the group that opens at start."""
    depth = 0
    i = start
    while i < len(rtf_text):
        ch = rtf_text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(rtf_text)


def _parse_font_table(group: str) -> set[int]:
    """Font numbers in a font table that are monospaced."""
    mono = set()
    for match in _FONT_ENTRY.finditer(group):
        number, controls, name = match.groups()
        if "\\fmodern" in controls or any(n in name.lower() for n in _MONO_NAMES):
            mono.add(int(number))
    return mono


def _plain_text_paragraphs(text: str) -> List[Paragraph]:
    return [Paragraph.from_text(line) for line in text.replace("\r\n", "\n").split("\n")]


def parse_rtf(rtf_text: str) -> List[Paragraph]:
    """Parse RTF into styled paragraphs.

    Args:
        rtf_text: RTF formatted text. Anything that is not RTF is treated
            as plain text, one paragraph per line.

    Returns:
        List of paragraphs; empty if the RTF exceeds the size limit.
    """
    if not rtf_text or not rtf_text.startswith('{\\rtf'):
        return _plain_text_paragraphs(rtf_text or "")

    # Check size limit to prevent DoS
    if len(rtf_text) > MAX_RTF_SIZE:
        return []

    builder = _ParagraphBuilder()
    mono_fonts: set[int] = set()
    state = _CharState()
    group_stack: List[_CharState] = []
    unicode_skip = 1
    i = 0
    n = len(rtf_text)

    while i < n:
        ch = rtf_text[i]

        if ch == '{':
            # Skip destinations that hold no document text
            m = re.match(r"\{\\(\*)?\\?([a-z]+)", rtf_text[i:i + 40])
            if m and (m.group(1) or m.group(2) in _SKIPPED_DESTINATIONS):
                end = _matching_brace(rtf_text, i)
                if m.group(2) == "fonttbl":
                    mono_fonts = _parse_font_table(rtf_text[i:end])
                i = end
                continue
            group_stack.append(state)
            i += 1

        elif ch == '}':
            if not group_stack:
                # End of document
                break
            state = group_stack.pop()
            i += 1

        elif ch == '\\':
            if i + 1 >= n:
                break
            nxt = rtf_text[i + 1]
            if nxt in '\\{}':
                builder.add(nxt, state)
                i += 2
            elif nxt == "'":
                # Hex escape sequence (e.g., \'f8 for ø)
                hex_chars = rtf_text[i + 2:i + 4]
                try:
                    builder.add(bytes([int(hex_chars, 16)]).decode('cp1252'), state)
                except (ValueError, UnicodeDecodeError):
                    builder.add(hex_chars, state)
                i += 4
            elif nxt == '~':
                builder.add('\xa0', state)
                i += 2
            elif nxt in '\r\n':
                # Equivalent to \par
                builder.end_paragraph()
                i += 2
            elif not nxt.isalpha():
                # Other control symbols (\- optional hyphen, \_ etc.)
                i += 2
            else:
                m = re.match(r"\\([a-zA-Z]+)(-?\d+)? ?", rtf_text[i:i + 64])
                word, param = m.group(1), m.group(2)
                i += m.end()
                value = int(param) if param is not None else None
                on = value != 0

                if word == 'b':
                    state = replace(state, bold=on)
                elif word == 'i':
                    state = replace(state, italic=on)
                elif word == 'ul':
                    state = replace(state, underline=on)
                elif word == 'ulnone':
                    state = replace(state, underline=False)
                elif word == 'strike':
                    state = replace(state, strikethrough=on)
                elif word == 'fs' and value:
                    state = replace(state, font_size=value / 2)
                elif word == 'f' and value is not None:
                    state = replace(state, monospaced=value in mono_fonts)
                elif word == 'plain':
                    state = _CharState()
                elif word == 'par':
                    builder.end_paragraph()
                elif word == 'line':
                    builder.add('\n', state)
                elif word == 'tab':
                    builder.add('\t', state)
                elif word == 'uc' and value is not None:
                    unicode_skip = value
                elif word == 'u' and value is not None:
                    # Handle negative values (two's complement for values > 32767)
                    code = value + 65536 if value < 0 else value
                    if 0 <= code <= 0x10FFFF:
                        builder.add(chr(code), state)
                    # Skip the replacement character (usually ?)
                    i += min(unicode_skip, n - i)
                # Unknown control words are ignored

        elif ch in '\r\n':
            # RTF source line breaks (not content)
            i += 1

        else:
            builder.add(ch, state)
            i += 1

    return builder.finish()
