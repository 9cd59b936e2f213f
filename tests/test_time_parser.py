"""Tests for time-range recognition and formatting."""

import pytest

from timeblock.core.time_parser import (
    TimeExpression,
    parse_time,
    parse_clock,
    match_time_range,
    match_task_with_time_range,
    match_todo,
    extract_time_range,
    has_time_pattern,
    has_task_with_time_pattern,
    format_time_for_text,
    format_time_for_display,
    format_time_range,
    categorize,
)


class TestParseTime:
    def test_pm(self):
        assert parse_time("2", "30", "pm") == 14.5

    def test_noon(self):
        assert parse_time("12", None, "PM") == 12

    def test_midnight(self):
        assert parse_time("12", None, "am") == 0

    def test_no_meridiem_is_24_hour(self):
        assert parse_time("17", "15", None) == 17.25
        assert parse_time("9", None, None) == 9

    def test_no_range_checking(self):
        assert parse_time("99", "00", None) == 99


class TestMatchTimeRange:
    def test_shared_meridiem_from_end(self):
        expr = match_time_range("10-11 AM: Standup")
        assert (expr.start, expr.end, expr.title) == (10, 11, "Standup")

    def test_shared_pm(self):
        expr = match_time_range("2-3pm Review")
        assert (expr.start, expr.end) == (14, 15)

    def test_start_meridiem_not_copied_to_end(self):
        expr = match_time_range("10am-2 Lunch")
        assert expr.start == 10
        assert expr.end == 2

    def test_minutes_and_meridiem(self):
        expr = match_time_range("2:30pm-3pm Review")
        assert (expr.start, expr.end, expr.title) == (14.5, 15, "Review")

    def test_spaced_range(self):
        expr = match_time_range("10:00 AM - 11:00 AM Deep work")
        assert (expr.start, expr.end, expr.title) == (10, 11, "Deep work")

    def test_24_hour_with_colon_title(self):
        expr = match_time_range("7:30-8:30: Breakfast")
        assert (expr.start, expr.end, expr.title) == (7.5, 8.5, "Breakfast")

    @pytest.mark.parametrize("sep", ["-", "--", "–", "—", " to ", "->", " → "])
    def test_separators(self, sep):
        expr = match_time_range(f"9{sep}10 Focus")
        assert (expr.start, expr.end, expr.title) == (9, 10, "Focus")

    def test_backticks(self):
        expr = match_time_range("`8:45am-9:45am` Planning")
        assert (expr.start, expr.end, expr.title) == (8.75, 9.75, "Planning")

    def test_asymmetric_backtick(self):
        expr = match_time_range("`9-10 Planning")
        assert expr.title == "Planning"

    def test_title_dash_separator(self):
        expr = match_time_range("9-10 - Write report")
        assert expr.title == "Write report"

    def test_title_keeps_inner_whitespace(self):
        expr = match_time_range("9-10   Call   Bob  ")
        assert expr.title == "Call   Bob"

    def test_leading_bullet(self):
        expr = match_time_range("- 9-10 Gym")
        assert expr.title == "Gym"

    def test_inverted_range_not_normalized(self):
        expr = match_time_range("15-14 Odd")
        assert (expr.start, expr.end) == (15, 14)

    def test_prose_is_none(self):
        assert match_time_range("Remember to buy milk") is None

    def test_date_is_not_a_range(self):
        assert match_time_range("2024-06-10 notes") is None

    def test_missing_title_is_none(self):
        assert match_time_range("9-10") is None

    def test_not_a_task(self):
        expr = match_time_range("9-10 Gym")
        assert expr.is_task is False
        assert expr.checked is False


class TestMatchTaskWithTimeRange:
    def test_checked(self):
        expr = match_task_with_time_range("[x] 9-10am Gym")
        assert expr == TimeExpression(start=9, end=10, title="Gym", is_task=True, checked=True)

    def test_unchecked_with_dash(self):
        expr = match_task_with_time_range("- [ ] 1:00 PM - 2:00 PM Call Alice")
        assert (expr.start, expr.end, expr.title, expr.checked) == (13, 14, "Call Alice", False)

    def test_uppercase_x(self):
        assert match_task_with_time_range("[X] 9-10 Run").checked is True

    def test_no_checkbox(self):
        assert match_task_with_time_range("9-10am Gym") is None

    def test_checkbox_without_time(self):
        assert match_task_with_time_range("[ ] Buy milk") is None


class TestMatchTodo:
    def test_todo(self):
        assert match_todo("- [ ] Buy milk") == ("Buy milk", False)

    def test_done(self):
        assert match_todo("[x] Buy milk") == ("Buy milk", True)

    def test_prose(self):
        assert match_todo("Buy milk") is None


class TestExtractTimeRange:
    def test_strips_highlight_and_bullet(self):
        expr = extract_time_range('<highlight color="blue">- 9am-10am Gym</highlight>')
        assert (expr.start, expr.end, expr.title) == (9, 10, "Gym")

    def test_prefers_task_form(self):
        expr = extract_time_range("- [x] 9-10 Gym")
        assert expr.is_task is True
        assert expr.checked is True

    def test_has_patterns(self):
        assert has_time_pattern("• 9-10 Gym") is True
        assert has_time_pattern("[ ] 9-10 Gym") is False
        assert has_task_with_time_pattern("[ ] 9-10 Gym") is True
        assert has_task_with_time_pattern("Gym") is False


class TestParseClock:
    def test_tokens(self):
        assert parse_clock("9") == 9
        assert parse_clock("14:30") == 14.5
        assert parse_clock("2:30pm") == 14.5
        assert parse_clock("12am") == 0

    def test_decimal(self):
        assert parse_clock("9.75") == 9.75

    def test_invalid(self):
        assert parse_clock("soon") is None


class TestFormatting:
    def test_whole_hours(self):
        assert format_time_for_text(9) == "9am"
        assert format_time_for_text(0) == "12am"
        assert format_time_for_text(12) == "12pm"
        assert format_time_for_text(15) == "3pm"

    def test_fractional_hours(self):
        assert format_time_for_text(14.5) == "2:30pm"
        assert format_time_for_text(9.25) == "9:15am"
        assert format_time_for_text(0.75) == "12:45am"

    def test_rounding_carries_into_next_hour(self):
        assert format_time_for_text(9.9999) == "10am"

    def test_display(self):
        assert format_time_for_display(14.5) == "2:30 PM"
        assert format_time_for_display(9) == "9 AM"

    def test_range(self):
        assert format_time_range(9, 10.5) == "9am-10:30am"

    def test_quarter_hours_round_trip(self):
        for quarter in range(96):
            hour = quarter / 4
            text = f"{format_time_for_text(hour)}-{format_time_for_text(hour)} Block"
            assert match_time_range(text).start == hour


class TestCategorize:
    @pytest.mark.parametrize(
        "title,category",
        [
            ("Deep work on parser", "work"),
            ("Team standup", "meeting"),
            ("Gym", "health"),
            ("Lunch with Sam", "personal"),
            ("Taxes", "default"),
        ],
    )
    def test_categories(self, title, category):
        assert categorize(title) == category

    def test_first_group_wins(self):
        # "code" (work) and "call" (meeting) both match
        assert categorize("Code review call") == "work"

    def test_case_insensitive(self):
        assert categorize("YOGA") == "health"
