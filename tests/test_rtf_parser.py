"""Tests for RTF import."""

import unittest

from notemark.model import StyledRun
from notemark.rtf_parser import MAX_RTF_SIZE, parse_rtf


class TestRTFParser(unittest.TestCase):

    def test_styles_and_paragraphs(self):
        rtf = (r"{\rtf1\ansi{\fonttbl\f0\fswiss Helvetica;\f1\fmodern Courier;}"
               r"\f0 Hello \b bold\b0\par \f1 code\par}")
        paragraphs = parse_rtf(rtf)
        self.assertEqual(len(paragraphs), 2)
        self.assertEqual(paragraphs[0].runs, (StyledRun("Hello "), StyledRun("bold", bold=True)))
        self.assertEqual(paragraphs[1].runs, (StyledRun("code", monospaced=True),))

    def test_italic_underline_strike(self):
        rtf = r"{\rtf1 \i a\i0 \ul b\ulnone \strike c\strike0 d}"
        (paragraph,) = parse_rtf(rtf)
        self.assertEqual(paragraph.runs, (
            StyledRun("a", italic=True),
            StyledRun("b", underline=True),
            StyledRun("c", strikethrough=True),
            StyledRun("d"),
        ))

    def test_groups_restore_state(self):
        (paragraph,) = parse_rtf(r"{\rtf1 {\b bold} plain}")
        self.assertEqual(paragraph.runs, (StyledRun("bold", bold=True), StyledRun(" plain")))

    def test_font_size(self):
        (paragraph,) = parse_rtf(r"{\rtf1 \fs36 big}")
        self.assertEqual(paragraph.runs[0].font_size, 18)

    def test_escapes_and_unicode(self):
        (paragraph,) = parse_rtf(r"{\rtf1 caf\'e9 \u8364? \{x\}\\}")
        self.assertEqual(paragraph.text, "café € {x}\\")

    def test_negative_unicode(self):
        (paragraph,) = parse_rtf(r"{\rtf1 \u-3913?}")
        self.assertEqual(paragraph.text, "\uf0b7")

    def test_line_and_tab(self):
        (paragraph,) = parse_rtf(r"{\rtf1 a\line b\tab c}")
        self.assertEqual(paragraph.text, "a\nb\tc")

    def test_skipped_destinations(self):
        rtf = r"{\rtf1{\colortbl;\red0\green0\blue0;}{\*\generator Foo;}{\info{\title T}}text}"
        (paragraph,) = parse_rtf(rtf)
        self.assertEqual(paragraph.text, "text")

    def test_list_lines_survive(self):
        paragraphs = parse_rtf(r"{\rtf1 1. one\par 2. two\par}")
        self.assertEqual([p.text for p in paragraphs], ["1. one", "2. two"])

    def test_plain_text_input(self):
        paragraphs = parse_rtf("a\nb")
        self.assertEqual([p.text for p in paragraphs], ["a", "b"])

    def test_empty_input(self):
        self.assertEqual([p.text for p in parse_rtf("")], [""])

    def test_size_limit(self):
        rtf = "{\\rtf1 " + "a" * MAX_RTF_SIZE + "}"
        self.assertEqual(parse_rtf(rtf), [])


if __name__ == '__main__':
    unittest.main()
