"""Tests for live list renumbering."""

import unittest

from notemark.model import CursorPosition, TextModel
from notemark.renumber import ListRenumberer, capture_selection, change_list_indent


def renumbered(text):
    model = TextModel.from_text(text)
    ListRenumberer().renumber(model)
    return model.text


class TestRenumbering(unittest.TestCase):

    def test_sequential_numbers(self):
        self.assertEqual(renumbered("1. a\n1. b\n1. c"), "1. a\n2. b\n3. c")

    def test_letters(self):
        self.assertEqual(renumbered("x) a\nq) b\nA. c\nA. d"), "a) a\nb) b\nA. c\nB. d")

    def test_letter_clamp(self):
        lines = renumbered("\n".join(["a. item"] * 28)).split("\n")
        self.assertEqual(lines[25], "z. item")
        self.assertEqual(lines[26], "z. item")
        self.assertEqual(lines[27], "z. item")

    def test_resume_after_nested_list(self):
        text = "1. a\n  1. x\n  7. y\n5. b"
        self.assertEqual(renumbered(text), "1. a\n  1. x\n  2. y\n2. b")

    def test_resume_pattern(self):
        # A sibling list at the same level continues its numbering
        text = "1. a\n  1. x\n1. b\n  1. y"
        self.assertEqual(renumbered(text), "1. a\n  1. x\n2. b\n  1. y")

    def test_type_change_restarts(self):
        self.assertEqual(renumbered("1. a\n2. b\nc. x\n4. c"), "1. a\n2. b\na. x\n1. c")

    def test_plain_lines_do_not_reset_numbering(self):
        self.assertEqual(renumbered("1. a\nsome text\n1. b"), "1. a\nsome text\n2. b")

    def test_bullets_are_left_alone(self):
        self.assertEqual(renumbered("- a\n- b\n1. c"), "- a\n- b\n1. c")

    def test_punctuation_and_spacing_preserved(self):
        self.assertEqual(renumbered("3)\tx\n9)  y"), "1)\tx\n2)  y")

    def test_idempotent(self):
        model = TextModel.from_text("4. a\n  b. x\n  z. y\n9. b\n- c\nA) d")
        renumberer = ListRenumberer()
        renumberer.renumber(model)
        first = model.text
        self.assertEqual(renumberer.renumber(model), 0)
        self.assertEqual(model.text, first)

    def test_returns_changed_count(self):
        model = TextModel.from_text("1. a\n1. b\n3. c")
        self.assertEqual(ListRenumberer().renumber(model), 1)

    def test_styles_on_content_survive(self):
        model = TextModel.from_text("1. a\n1. bold")
        model.styles[1] = [0, 0, 0, 1, 1, 1, 1]
        ListRenumberer().renumber(model)
        self.assertEqual(model.text, "1. a\n2. bold")
        self.assertEqual(model.styles[1], [0, 0, 0, 1, 1, 1, 1])


class TestSelectionPreservation(unittest.TestCase):

    def test_caret_kept_by_line_and_column(self):
        model = TextModel.from_text("\n".join(["1. x"] * 10))
        caret = model.offset_of(9, 4)
        model.move_caret(caret)
        ListRenumberer().renumber(model)
        self.assertEqual(model.line_text(9), "10. x")
        # Same (line, column) even though the line grew
        self.assertEqual(model.get_selection(), (49, 49, 49))

    def test_column_clamped_when_line_shrinks(self):
        model = TextModel.from_text("2. a\n10. b")
        model.move_caret(model.offset_of(1, 5))
        ListRenumberer().renumber(model)
        self.assertEqual(model.text, "1. a\n2. b")
        self.assertEqual(model.get_selection(), (9, 9, 9))

    def test_range_selection_restored(self):
        model = TextModel.from_text("5. abc\n5. def")
        model.set_selection(3, 10, 3)
        snapshot = capture_selection(model)
        self.assertEqual(snapshot.caret, CursorPosition(0, 3))
        ListRenumberer().renumber(model)
        self.assertEqual(model.get_selection(), (3, 10, 3))


class TestReentrancy(unittest.TestCase):

    def test_nested_notifications_are_ignored(self):
        model = TextModel.from_text("1. a")
        renumberer = ListRenumberer()
        seen = []
        model.add_listener(renumberer.on_text_changed)
        model.add_listener(lambda m: seen.append(renumberer.in_flight))

        model.move_caret(4)
        model.insert_text("\n1. b")

        self.assertEqual(model.text, "1. a\n2. b")
        # One nested notification from the rewrite, then the original one
        self.assertEqual(seen, [True, False])
        self.assertFalse(renumberer.in_flight)
        self.assertEqual(model.get_selection(), (9, 9, 9))

    def test_flag_cleared_after_error(self):
        class BrokenSurface:
            def line_count(self):
                raise RuntimeError("boom")

        renumberer = ListRenumberer()
        with self.assertRaises(RuntimeError):
            renumberer.renumber(BrokenSurface())
        self.assertFalse(renumberer.in_flight)


class TestChangeListIndent(unittest.TestCase):

    def test_indent_renumbers(self):
        model = TextModel.from_text("1. a\n2. b\n3. c")
        model.move_caret(model.offset_of(1, 4))
        self.assertTrue(change_list_indent(model, 1, 1))
        self.assertEqual(model.text, "1. a\n  1. b\n2. c")
        # Caret follows the text it was in
        self.assertEqual(model.get_selection()[2], model.offset_of(1, 6))

    def test_outdent(self):
        model = TextModel.from_text("1. a\n  1. b\n2. c")
        self.assertTrue(change_list_indent(model, 1, -1))
        self.assertEqual(model.text, "1. a\n2. b\n3. c")

    def test_outdent_at_top_level_is_noop(self):
        model = TextModel.from_text("1. a")
        self.assertFalse(change_list_indent(model, 0, -1))
        self.assertEqual(model.text, "1. a")

    def test_plain_line_is_noop(self):
        model = TextModel.from_text("hello")
        self.assertFalse(change_list_indent(model, 0, 1))
        self.assertEqual(model.text, "hello")

    def test_tab_indent_is_normalized(self):
        model = TextModel.from_text("\t- a")
        self.assertTrue(change_list_indent(model, 0, 1))
        self.assertEqual(model.text, "    - a")


if __name__ == '__main__':
    unittest.main()
