"""Tests for note line markup helpers."""

from timeblock.core.markup import (
    strip_highlight,
    strip_bullet,
    strip_checkbox,
    clean_task_text,
    checkbox_prefix,
)


class TestStripHighlight:
    def test_double_quoted(self):
        assert strip_highlight('<highlight color="blue">9am-10am Gym</highlight>') == ("9am-10am Gym", "blue")

    def test_single_quoted_and_uppercase_tag(self):
        content, color = strip_highlight("<HIGHLIGHT color='#ff0000'>Lunch</HIGHLIGHT>")
        assert content == "Lunch"
        assert color == "#ff0000"

    def test_inner_with_angle_brackets_and_newline(self):
        content, color = strip_highlight('<highlight color="red">a < b\nand more</highlight>')
        assert content == "a < b\nand more"
        assert color == "red"

    def test_no_wrapper_returns_input(self):
        assert strip_highlight("  9-10 Standup ") == ("  9-10 Standup ", None)

    def test_keeps_text_around_wrapper(self):
        content, color = strip_highlight('- <highlight color="green">9-10 Run</highlight>')
        assert content == "- 9-10 Run"
        assert color == "green"


class TestStripBullet:
    def test_each_bullet_glyph(self):
        for bullet in ["-", "•", "*", "+"]:
            assert strip_bullet(f"{bullet} Item") == "Item"

    def test_only_once(self):
        assert strip_bullet("- - Item") == "- Item"

    def test_requires_whitespace(self):
        assert strip_bullet("-Item") == "-Item"

    def test_no_bullet(self):
        assert strip_bullet("9-10 Gym") == "9-10 Gym"


class TestStripCheckbox:
    def test_dash_checkbox(self):
        assert strip_checkbox("- [ ] Buy milk") == "Buy milk"

    def test_checked_uppercase(self):
        assert strip_checkbox("[X] Done thing") == "Done thing"

    def test_empty_box(self):
        assert strip_checkbox("[] Thing") == "Thing"

    def test_no_checkbox_unchanged(self):
        assert strip_checkbox("  Just prose ") == "  Just prose "


class TestCleanTaskText:
    def test_strips_checkbox_and_highlight(self):
        assert clean_task_text('- [ ] <highlight color="red">Call mom</highlight>') == "Call mom"

    def test_strips_zero_width_prefix(self):
        assert clean_task_text("\u200b[x] Pay rent") == "Pay rent"

    def test_plain_bullet(self):
        assert clean_task_text("• Read book") == "Read book"

    def test_en_dash_checkbox(self):
        assert clean_task_text("– [x] Ship it") == "Ship it"


class TestCheckboxPrefix:
    def test_existing_prefix(self):
        assert checkbox_prefix("- [x] Done") == "- [x] "

    def test_bare_prefix(self):
        assert checkbox_prefix("[ ] Todo") == "[ ] "

    def test_default_prefix(self):
        assert checkbox_prefix("Plain text") == "- [ ] "
