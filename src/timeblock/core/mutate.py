"""Pure rewrites of note text for edited blocks and tasks - no I/O dependencies."""

import re
from typing import Callable

from .markup import HIGHLIGHT_PATTERN, checkbox_prefix
from .time_parser import TIME_RANGE_REPLACEMENT_PATTERN, format_time_range

_FALLBACK_BULLET = re.compile(r"^[•\-*+]\s*")

# Leading whitespace, optional bullet and the checkbox of a task line
_TASK_PREFIX = re.compile(r"^\s*(?:[•\-*+]\s*)?\[[ x]?\]\s*", re.IGNORECASE)


def _inside_highlight(original: str, rewrite: Callable[[str], str]) -> str:
    """Apply `rewrite` to the highlighted content, or to the whole text if unwrapped."""
    match = HIGHLIGHT_PATTERN.search(original)
    if not match:
        return rewrite(original)

    color, inner = match.group(1), match.group(2)
    prefix = original[: match.start()]
    suffix = original[match.end() :]
    return f'{prefix}<highlight color="{color}">{rewrite(inner)}</highlight>{suffix}'


def _replace_in_content(content: str, new_start: float, new_end: float) -> str:
    match = TIME_RANGE_REPLACEMENT_PATTERN.match(content)
    if not match:
        title = _FALLBACK_BULLET.sub("", content, count=1).strip()
        return f"{format_time_range(new_start, new_end)} {title}"

    prefix, open_tick = match.group(1), match.group(2)
    close_tick, separator = match.group(9), match.group(10)
    rest = content[match.end() :]
    return f"{prefix}{open_tick}{format_time_range(new_start, new_end)}{close_tick}{separator}{rest}"


def replace_time_range(original: str, new_start: float, new_end: float) -> str:
    """
    Rewrite the time range of a note line, keeping everything else intact.

    Only the first time-range substring changes. Prefix, backticks, the
    separator before the title and the rest of the line are kept as-is; a
    highlight wrapper is re-emitted around the rewritten content. A line with
    no time range gets one prepended after its bullet is dropped.

    Pure function - no I/O.
    """
    return _inside_highlight(original, lambda c: _replace_in_content(c, new_start, new_end))


replace_time_in_markdown = replace_time_range


def retitle_block(original: str, new_title: str) -> str:
    """Replace the title after a block's time range, keeping the range text as written."""

    def rewrite(content: str) -> str:
        match = TIME_RANGE_REPLACEMENT_PATTERN.match(content)
        if not match:
            return rewrite_task_text(content, new_title)
        return f"{match.group(0)}{new_title.strip()}"

    return _inside_highlight(original, rewrite)


def rewrite_task_text(markdown: str, new_text: str) -> str:
    """New task text behind the line's existing checkbox prefix."""
    return f"{checkbox_prefix(markdown)}{new_text.strip()}"


def new_block_text(start: float, end: float, title: str) -> str:
    """Note text for a freshly created block."""
    return f"{format_time_range(start, end)} {title.strip()}"


def schedule_task_text(original: str, new_start: float, new_end: float) -> str:
    """
    Give a checkbox line a time range directly after its checkbox.

    Bullet, checkbox and a highlight wrapper are kept, so the line still reads
    as a task: "• [ ] Buy milk" -> "• [ ] 9am-10am Buy milk". The task text has
    no range yet, so digits inside it are never taken for one.
    """
    time_range = format_time_range(new_start, new_end)

    def rewrite(content: str) -> str:
        match = _TASK_PREFIX.match(content)
        if not match:
            title = _FALLBACK_BULLET.sub("", content, count=1).strip()
            return f"{time_range} {title}"
        return f"{match.group(0)}{time_range} {content[match.end() :].strip()}"

    return _inside_highlight(original, rewrite)
