"""Pure agenda and board formatting - no I/O dependencies."""

from datetime import date

from .blocks import ParsedBlocks, ScheduledBlock, UnscheduledTask
from .kanban import Column
from .layout import ColumnInfo, assign_columns, block_keys, is_current, visible_blocks
from .time_parser import format_time_for_display


def format_date_title(day: date) -> str:
    """Short day heading: "Mon, 10 Jun"."""
    return f"{day.strftime('%a')}, {day.day} {day.strftime('%b')}"


def format_block_line(
    block: ScheduledBlock,
    info: ColumnInfo | None = None,
    now: float | None = None,
) -> str:
    """
    Format a single scheduled block.

    Pure function - no I/O.
    """
    checkbox = ""
    if block.is_task:
        checkbox = "[x] " if block.checked else "[ ] "

    times = f"{format_time_for_display(block.start)} - {format_time_for_display(block.end)}"
    lane = f" ({info.column + 1}/{info.total_columns})" if info and info.total_columns > 1 else ""
    marker = " <- now" if now is not None and is_current(block, now) else ""
    return f"- {times}{lane} {checkbox}{block.title} [{block.category}]{marker}"


def format_task_line(task: UnscheduledTask) -> str:
    """Format a single unscheduled task."""
    checkbox = "[x]" if task.checked else "[ ]"
    return f"- {checkbox} {task.text}"


def format_agenda(
    parsed: ParsedBlocks,
    day: date,
    start_hour: int = 0,
    end_hour: int = 24,
    now: float | None = None,
) -> str:
    """
    Format a day's blocks and tasks as markdown.

    Blocks outside [start_hour, end_hour) are left out of the timeline.
    """
    layout = assign_columns(parsed.scheduled)
    keys = block_keys(parsed.scheduled)
    shown = visible_blocks(parsed.scheduled, start_hour, end_hour)

    lines = []
    for index, block in enumerate(parsed.scheduled):
        if block not in shown:
            continue
        lines.append(format_block_line(block, layout.get(keys[index]), now))

    scheduled_md = "\n".join(lines) or "Nothing scheduled."
    unscheduled_md = "\n".join(format_task_line(t) for t in parsed.unscheduled) or "None"

    return f"""## {format_date_title(day)}

### Schedule
{scheduled_md}

### Unscheduled
{unscheduled_md}"""


def format_board(columns: list[Column]) -> str:
    """Format Kanban columns as markdown sections."""
    sections = []
    for column in columns:
        tasks_md = "\n".join(f"- {t.display_text}" for t in column.tasks) or "(empty)"
        sections.append(f"### {column.title} ({len(column.tasks)})\n{tasks_md}")
    return "\n\n".join(sections)
