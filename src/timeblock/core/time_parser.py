"""
Time-range recognition and formatting for timeblock lines.

Pure functions - no I/O. All patterns share one time-range grammar:

    `10:00 AM - 11:00 AM` Task
    10 AM - 11 AM Task
    10-11 AM: Task          (end meridiem shared with start)
    7:30-8:30: Task
    9 to 10am -> Task
"""

import re
from dataclasses import dataclass

from .markup import strip_bullet, strip_highlight, is_checked_token

_TIME_RANGE = (
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?"
    r"\s*(?:[-–—]+|to|->|→)\s*"
    r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?"
)
_TITLE = r"\s*(?:[-–—:]|\s)\s*(.+)$"

# Groups: start h/m/period, end h/m/period, title
TIME_PATTERN = re.compile(
    r"^(?:[•\-*+]\s+)?`?" + _TIME_RANGE + r"`?" + _TITLE,
    re.IGNORECASE,
)

# Groups: checkbox, start h/m/period, end h/m/period, title
TASK_WITH_TIME_PATTERN = re.compile(
    r"^-?\s*\[([ x]?)\]\s*`?" + _TIME_RANGE + r"`?" + _TITLE,
    re.IGNORECASE,
)

# Groups: checkbox, text
TODO_PATTERN = re.compile(r"^-?\s*\[([ x]?)\]\s*(.+)$", re.IGNORECASE)

# Groups: prefix, opening backtick, start h/m/period, end h/m/period,
# closing backtick, separator before the title
TIME_RANGE_REPLACEMENT_PATTERN = re.compile(
    r"^(.*?)(`?)" + _TIME_RANGE + r"(`?)(\s*(?:[-–—:]|\s)\s*)",
    re.IGNORECASE,
)

CATEGORY_KEYWORDS: list[tuple[re.Pattern, str]] = [
    (re.compile(r"deep work|focus|code|write|develop|build"), "work"),
    (re.compile(r"call|meeting|sync|chat|standup|1:1|interview"), "meeting"),
    (re.compile(r"gym|exercise|workout|run|yoga|walk|health|meditat"), "health"),
    (re.compile(r"lunch|dinner|breakfast|break|personal|family|friend"), "personal"),
]
DEFAULT_CATEGORY = "default"


@dataclass(frozen=True)
class TimeExpression:
    """A decoded time range with its title. Hours are decimal (14.5 = 2:30 PM)."""

    start: float
    end: float
    title: str
    is_task: bool = False
    checked: bool = False


def parse_time(hours: str, minutes: str | None, period: str | None) -> float:
    """
    Convert hour/minute/meridiem tokens to a decimal hour.

    Without a meridiem the hour is taken as 24-hour already. No range
    checking is done.
    """
    h = int(hours)
    m = int(minutes or "0")

    if period:
        p = period.lower()
        if p == "pm" and h != 12:
            h += 12
        if p == "am" and h == 12:
            h = 0

    return h + m / 60


_CLOCK = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)?$", re.IGNORECASE)


def parse_clock(text: str) -> float | None:
    """Parse a single time token ("9", "14:30", "2:30pm") or a decimal hour ("14.5")."""
    text = text.strip()
    match = _CLOCK.match(text)
    if match:
        return parse_time(*match.groups())
    try:
        return float(text)
    except ValueError:
        return None


def _decode(groups: tuple, is_task: bool = False, checked: bool = False) -> TimeExpression | None:
    start_h, start_m, start_period, end_h, end_m, end_period, title = groups
    # "10-11 AM" - only the end meridiem is shared backwards
    if not start_period and end_period:
        start_period = end_period

    title = title.strip()
    if not title:
        return None

    return TimeExpression(
        start=parse_time(start_h, start_m, start_period),
        end=parse_time(end_h, end_m, end_period),
        title=title,
        is_task=is_task,
        checked=checked,
    )


def match_time_range(text: str) -> TimeExpression | None:
    """Match a bare time range line: "2:30pm-3pm Review"."""
    match = TIME_PATTERN.match(text)
    if not match:
        return None
    return _decode(match.groups())


def match_task_with_time_range(text: str) -> TimeExpression | None:
    """Match a checkbox line carrying a time range: "[x] 9-10am Gym"."""
    match = TASK_WITH_TIME_PATTERN.match(text)
    if not match:
        return None
    checkbox, *rest = match.groups()
    return _decode(tuple(rest), is_task=True, checked=is_checked_token(checkbox))


def match_todo(text: str) -> tuple[str, bool] | None:
    """Match a checkbox line without time. Returns (text, checked)."""
    match = TODO_PATTERN.match(text)
    if not match:
        return None
    return match.group(2).strip(), is_checked_token(match.group(1))


def _normalize(text: str) -> str:
    content, _ = strip_highlight(text)
    return strip_bullet(content).strip()


def has_time_pattern(text: str) -> bool:
    """Check if a line contains a bare time range after markup is stripped."""
    return TIME_PATTERN.match(_normalize(text)) is not None


def has_task_with_time_pattern(text: str) -> bool:
    """Check if a line is a checkbox task with a time range."""
    return TASK_WITH_TIME_PATTERN.match(_normalize(text)) is not None


def extract_time_range(text: str) -> TimeExpression | None:
    """
    Extract a time range from a raw line.

    Strips highlight and bullet, then tries the task form before the bare form.
    """
    stripped = _normalize(text)
    return match_task_with_time_range(stripped) or match_time_range(stripped)


def _split_hour(hour: float) -> tuple[int, int]:
    h = int(hour // 1)
    m = round((hour - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    return h, m


def _twelve_hour(h: int) -> int:
    if h == 0:
        return 12
    return h - 12 if h > 12 else h


def format_time_for_text(hour: float) -> str:
    """Format a decimal hour for note text: 14.5 -> "2:30pm", 9 -> "9am"."""
    h, m = _split_hour(hour)
    period = "pm" if h >= 12 else "am"
    if m == 0:
        return f"{_twelve_hour(h)}{period}"
    return f"{_twelve_hour(h)}:{m:02d}{period}"


def format_time_for_display(hour: float) -> str:
    """Format a decimal hour for display: 14.5 -> "2:30 PM"."""
    h, m = _split_hour(hour)
    period = "PM" if h >= 12 else "AM"
    if m == 0:
        return f"{_twelve_hour(h)} {period}"
    return f"{_twelve_hour(h)}:{m:02d} {period}"


def format_time_range(start: float, end: float) -> str:
    """Canonical range text: "9am-10:30am"."""
    return f"{format_time_for_text(start)}-{format_time_for_text(end)}"


def categorize(title: str) -> str:
    """Keyword category for a block title. First matching group wins."""
    lower = title.lower()
    for pattern, category in CATEGORY_KEYWORDS:
        if pattern.search(lower):
            return category
    return DEFAULT_CATEGORY
