"""Functional core - pure business logic with no I/O."""

from .markup import strip_highlight, strip_bullet, strip_checkbox, clean_task_text
from .time_parser import (
    TimeExpression,
    match_time_range,
    match_task_with_time_range,
    extract_time_range,
    format_time_for_text,
    format_time_for_display,
    categorize,
)
from .blocks import NoteNode, ScheduledBlock, UnscheduledTask, ParsedBlocks, classify, parse_blocks
from .mutate import (
    replace_time_range,
    replace_time_in_markdown,
    retitle_block,
    rewrite_task_text,
    schedule_task_text,
)
from .kanban import CraftTask, Column, DistributeOptions, distribute, can_drop, week_window
from .layout import ColumnInfo, assign_columns
from .agenda import format_agenda, format_board

__all__ = [
    # Markup
    "strip_highlight",
    "strip_bullet",
    "strip_checkbox",
    "clean_task_text",
    # Time parsing
    "TimeExpression",
    "match_time_range",
    "match_task_with_time_range",
    "extract_time_range",
    "format_time_for_text",
    "format_time_for_display",
    "categorize",
    # Blocks
    "NoteNode",
    "ScheduledBlock",
    "UnscheduledTask",
    "ParsedBlocks",
    "classify",
    "parse_blocks",
    # Mutations
    "replace_time_range",
    "replace_time_in_markdown",
    "retitle_block",
    "rewrite_task_text",
    "schedule_task_text",
    # Kanban
    "CraftTask",
    "Column",
    "DistributeOptions",
    "distribute",
    "can_drop",
    "week_window",
    # Layout
    "ColumnInfo",
    "assign_columns",
    # Formatting
    "format_agenda",
    "format_board",
]
