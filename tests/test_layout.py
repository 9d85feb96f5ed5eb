"""Tests for line wrapping and pagination.

Widths are measured with a fake metric of one point per character so
wrap boundaries can be stated exactly.
"""

import pytest

from notemark.font_config import PageSettings
from notemark.layout import FontResolver, layout_document, paginate, tokenize, wrap_paragraph
from notemark.model import Paragraph, StyledRun


def char_width(text, font_name, font_size):
    return float(len(text))


def narrow_resolver(width=10, **kwargs):
    settings = PageSettings(page_width=width + 20, left_margin=10, right_margin=10, **kwargs)
    return FontResolver(settings, measure=char_width)


def wrapped_texts(text, width=10):
    resolver = narrow_resolver(width)
    lines = wrap_paragraph([StyledRun(text)], resolver.settings.text_width, resolver)
    return ["".join(span.text for span in line) for line in lines]


def test_tokenize_alternates_whitespace():
    assert tokenize("ab  cd e") == ["ab", "  ", "cd", " ", "e"]
    assert tokenize("") == []
    assert tokenize("   ") == ["   "]


def test_exact_fit_stays_on_one_line():
    assert wrapped_texts("hello abcd") == ["hello abcd"]


def test_one_unit_wider_wraps():
    assert wrapped_texts("hello abcde") == ["hello ", "abcde"]


def test_whitespace_at_soft_break_is_consumed():
    assert wrapped_texts("aaaaaaaaaa bbb") == ["aaaaaaaaaa", "bbb"]


def test_unbreakable_token_is_split():
    # 25 units into lines of 10: three fragments
    assert wrapped_texts("abcdefghijklmnopqrstuvwxy") == ["abcdefghij", "klmnopqrst", "uvwxy"]


def test_split_always_makes_progress():
    assert wrapped_texts("abc", width=0.5) == ["a", "b", "c"]


def test_hard_breaks_keep_blank_lines():
    assert wrapped_texts("a\n\nb") == ["a", "", "b"]


def test_empty_paragraph_is_one_empty_line():
    assert wrapped_texts("") == [""]


def test_styled_runs_become_separate_spans():
    resolver = narrow_resolver(40)
    runs = [StyledRun("plain "), StyledRun("bold", bold=True), StyledRun(" more")]
    (line,) = wrap_paragraph(runs, 40, resolver)
    assert [(s.text, s.font.name) for s in line] == [
        ("plain ", "Helvetica"),
        ("bold", "Helvetica-Bold"),
        (" more", "Helvetica"),
    ]


def test_font_resolution():
    resolver = narrow_resolver()
    font = resolver.resolve(StyledRun("x", italic=True, monospaced=True, underline=True, font_size=18))
    assert font.name == "Courier-Oblique"
    assert font.size == 18
    assert font.underline
    assert resolver.resolve(StyledRun("x", bold=True, italic=True)).name == "Helvetica-BoldOblique"


def test_unknown_family_rejected():
    with pytest.raises(ValueError):
        FontResolver(PageSettings(body_family="Comic"))


def test_fit_uses_whole_prefix_width():
    resolver = narrow_resolver()
    font = resolver.default_font
    assert resolver.fit("abcdef", font, 3) == 3
    assert resolver.fit("abc", font, 3) == 3
    assert resolver.fit("abc", font, 0) == 0


def test_pagination():
    # 100pt page with 10pt margins: lines of 14pt plus 7pt paragraph gaps
    resolver = narrow_resolver(page_height=100, top_margin=10, bottom_margin=10, body_size=10)
    paragraphs = [[[]] for _ in range(5)]
    pages = paginate(paragraphs, resolver)
    assert [len(page.lines) for page in pages] == [4, 1]
    tops = [line.top for line in pages[0].lines]
    assert tops == pytest.approx([10, 31, 52, 73])
    assert pages[1].lines[0].top == pytest.approx(10)
    assert pages[0].lines[0].height == pytest.approx(14)


def test_oversized_line_does_not_loop():
    resolver = narrow_resolver(page_height=20, top_margin=10, bottom_margin=10, body_size=10)
    pages = paginate([[[]], [[]]], resolver)
    assert [len(page.lines) for page in pages] == [1, 1]


def test_line_height_follows_tallest_font():
    resolver = narrow_resolver(40, body_size=10)
    runs = [StyledRun("small"), StyledRun("BIG", font_size=20)]
    pages = layout_document([Paragraph(tuple(runs))], resolver.settings, resolver)
    assert pages[0].lines[0].height == pytest.approx(28)


def test_spans_are_positioned_left_to_right():
    resolver = narrow_resolver(40)
    runs = [StyledRun("abc "), StyledRun("de", bold=True)]
    pages = layout_document([Paragraph(tuple(runs))], resolver.settings, resolver)
    spans = pages[0].lines[0].spans
    assert [span.x for span in spans] == [10, 14]


def test_empty_document_has_one_page():
    pages = layout_document([])
    assert len(pages) == 1
    assert pages[0].lines == []


def test_real_metrics_wrap_long_paragraph():
    paragraph = Paragraph.from_text("word " * 200)
    pages = layout_document([paragraph])
    assert len(pages[0].lines) > 1
    settings = PageSettings()
    resolver = FontResolver(settings)
    for line in pages[0].lines:
        width = sum(resolver.width(span.text, span.font) for span in line.spans)
        assert width <= settings.text_width + 1e-6
