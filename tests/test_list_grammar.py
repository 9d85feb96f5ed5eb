"""Tests for list-line parsing and prefix reconstruction."""

import pytest

from notemark.list_grammar import (
    ListType,
    build_letter_marker,
    build_marker,
    get_indent_level,
    indent_level_for,
    is_list_line,
    normalize_line,
    parse_list_line,
    set_indent_level,
)


def test_numbered_line_parts():
    parsed = parse_list_line("  3. Buy milk")
    assert parsed is not None
    assert parsed.list_type is ListType.NUMBERED
    assert parsed.indent_text == "  "
    assert parsed.marker == "3"
    assert parsed.punctuation == "."
    assert parsed.spacing == " "
    assert parsed.content == "Buy milk"
    assert parsed.indent_level == 1
    assert parsed.prefix == "  3. "
    assert parsed.prefix_length == 5
    assert parsed.bullet_symbol is None


def test_lettered_line_case():
    lower = parse_list_line("b) Second point")
    upper = parse_list_line("C. Third")
    assert lower.list_type is ListType.LETTERED
    assert not lower.is_uppercase_letter
    assert upper.list_type is ListType.LETTERED
    assert upper.is_uppercase_letter


@pytest.mark.parametrize("text,symbol", [
    ("- loose", "-"),
    ("* star", "*"),
    ("+ plus", "+"),
    ("• dot", "•"),
    ("◦ ring", "◦"),
    ("▪ square", "▪"),
    ("‣ triangle", "‣"),
])
def test_bullet_symbols(text, symbol):
    parsed = parse_list_line(text)
    assert parsed.list_type is ListType.BULLET
    assert parsed.bullet_symbol == symbol
    assert parsed.punctuation == ""


def test_bullet_may_carry_punctuation():
    parsed = parse_list_line("-) odd but allowed")
    assert parsed.list_type is ListType.BULLET
    assert parsed.punctuation == ")"


@pytest.mark.parametrize("text", [
    "",
    "    ",
    "plain text",
    "A word",
    "3.14 is pi",
    "1.no space",
    "-dash",
    "12 apples",
    "é. accented letters are not markers",
])
def test_non_list_lines(text):
    assert parse_list_line(text) is None
    assert not is_list_line(text)


def test_round_trip_preserves_every_character():
    for text in ["1. a", "\t- tab", "   b)\xa0\tmixed spacing", "10.  two spaces", "Z. end\r\n"]:
        parsed = parse_list_line(text)
        assert parsed.prefix + parsed.content + parsed.line_break == text


def test_line_break_is_kept_separately():
    parsed = parse_list_line("1. a\r\n")
    assert parsed.content == "a"
    assert parsed.line_break == "\r\n"


def test_spacing_only_line_is_a_list_line():
    parsed = parse_list_line("1. ")
    assert parsed.content == ""


def test_indent_levels():
    assert indent_level_for("") == 0
    assert indent_level_for(" ") == 0
    assert indent_level_for("   ") == 1
    assert indent_level_for("\t") == 1
    assert indent_level_for("\t  ") == 2
    assert get_indent_level("    - deep") == 2
    assert get_indent_level("    not a list") == 0


def test_set_indent_level():
    assert set_indent_level("\t- x", 2) == "    - x"
    assert set_indent_level("  1. x", 0) == "1. x"
    assert set_indent_level("  - x", -1) == "- x"
    assert set_indent_level("plain", 3) == "plain"


def test_letter_markers_clamp():
    assert build_letter_marker(0, False) == "a"
    assert build_letter_marker(25, False) == "z"
    assert build_letter_marker(26, False) == "z"
    assert build_letter_marker(30, True) == "Z"


def test_build_marker():
    assert build_marker(ListType.NUMBERED, 0) == "1"
    assert build_marker(ListType.NUMBERED, 9) == "10"
    assert build_marker(ListType.LETTERED, 2, uppercase=True) == "C"
    with pytest.raises(ValueError):
        build_marker(ListType.BULLET, 0)


def test_normalize_line():
    assert normalize_line("a\r\n") == "a"
    assert normalize_line("a\n\n") == "a"
    assert normalize_line("a\rb") == "a\rb"
    assert normalize_line("a\rb\r") == "a\rb"
    assert normalize_line("  1. x ") == "  1. x "
