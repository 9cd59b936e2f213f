"""Shared workflow layer between CLI and Telegram.

Each function reads or writes through a port and hands the data to the pure
core. Edited values are returned as new objects for optimistic display.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date

from .config import Config
from .core.blocks import ParsedBlocks, ScheduledBlock, UnscheduledTask, classify, parse_blocks
from .core.kanban import (
    INBOX,
    Column,
    CraftTask,
    DistributeOptions,
    can_drop,
    distribute,
    is_column_id,
    target_date_for_column,
)
from .core.mutate import (
    new_block_text,
    replace_time_range,
    retitle_block,
    rewrite_task_text,
    schedule_task_text,
)
from .ports import NoteRepository, TaskRepository

logger = logging.getLogger(__name__)


class MoveNotAllowed(ValueError):
    """Raised when a task cannot be dropped into the requested column."""

    pass


def board_options(config: Config, week: bool | None = None) -> DistributeOptions:
    """Distribution options from config, optionally forcing week mode on or off."""
    mode = config.kanban_mode
    if week is not None:
        mode = "week" if week else "standard"
    return DistributeOptions(mode=mode, week_starts_on_monday=config.week_starts_on_monday)


def temporary_id() -> str:
    """Local id for a block the API has not confirmed yet."""
    return f"temp-{uuid.uuid4().hex[:12]}"


# ============== Timeline ==============


def load_schedule(repo: NoteRepository, target_date: date) -> ParsedBlocks:
    """Fetch a daily note and split it into scheduled blocks and tasks."""
    return parse_blocks(repo.fetch_blocks(target_date))


def find_block(parsed: ParsedBlocks, block_id: str) -> ScheduledBlock | UnscheduledTask | None:
    """Look up a scheduled block or unscheduled task by id."""
    for item in [*parsed.scheduled, *parsed.unscheduled]:
        if item.id == block_id:
            return item
    return None


def _persist_text(repo: NoteRepository, block_id: str | None, text: str, target_date: date) -> str:
    """Write a line back, inserting it when it has no id. Returns the id to use."""
    if block_id and not block_id.startswith("temp-"):
        repo.update_block(block_id, text)
        return block_id

    items = repo.insert_block(text, target_date)
    new_id = items[0].get("id") if items and isinstance(items[0], dict) else None
    if not new_id:
        logger.warning("Craft did not return an id for the new block")
        return temporary_id()
    return new_id


def _as_scheduled(text: str, block_id: str, highlight: str | None, fallback: ScheduledBlock) -> ScheduledBlock:
    parsed = classify(text, highlight, block_id)
    if isinstance(parsed, ScheduledBlock):
        return parsed
    return replace(fallback, id=block_id, original_text=text)


def move_block(
    repo: NoteRepository,
    block: ScheduledBlock,
    new_start: float,
    new_end: float,
    target_date: date,
) -> ScheduledBlock:
    """Give a block a new time range in its note text and persist it."""
    new_text = replace_time_range(block.original_text, new_start, new_end)
    block_id = _persist_text(repo, block.id, new_text, target_date)
    logger.info(f"Moved block {block_id} to {new_start}-{new_end}")
    fallback = replace(block, start=new_start, end=new_end)
    return _as_scheduled(new_text, block_id, block.highlight, fallback)


def retitle(
    repo: NoteRepository,
    block: ScheduledBlock,
    new_title: str,
    target_date: date,
) -> ScheduledBlock:
    """Change a block's title, keeping its time text and markup."""
    new_text = retitle_block(block.original_text, new_title)
    block_id = _persist_text(repo, block.id, new_text, target_date)
    fallback = replace(block, title=new_title.strip())
    return _as_scheduled(new_text, block_id, block.highlight, fallback)


def schedule_task(
    repo: NoteRepository,
    task: UnscheduledTask,
    start: float,
    end: float,
    target_date: date,
) -> ScheduledBlock:
    """Turn an unscheduled task into a timed task, keeping its checkbox."""
    new_text = schedule_task_text(task.original_text, start, end)

    block_id = _persist_text(repo, task.id, new_text, target_date)
    fallback = ScheduledBlock(
        id=block_id,
        start=start,
        end=end,
        title=task.text,
        category="default",
        highlight=None,
        original_text=new_text,
        is_task=True,
        checked=task.checked,
    )
    return _as_scheduled(new_text, block_id, None, fallback)


def create_block(
    repo: NoteRepository,
    start: float,
    end: float,
    title: str,
    target_date: date,
) -> ScheduledBlock:
    """Append a new timeblock line to a daily note."""
    text = new_block_text(start, end, title)
    block_id = _persist_text(repo, None, text, target_date)
    fallback = ScheduledBlock(
        id=block_id,
        start=start,
        end=end,
        title=title.strip(),
        category="default",
        highlight=None,
        original_text=text,
    )
    return _as_scheduled(text, block_id, None, fallback)


def toggle(
    repo: NoteRepository,
    item: ScheduledBlock | UnscheduledTask,
    done: bool,
) -> ScheduledBlock | UnscheduledTask:
    """Mark a task done or not done through the task state field."""
    if item.id:
        repo.toggle_task(item.id, done)
    return replace(item, checked=done)


def delete(repo: NoteRepository, item: ScheduledBlock | UnscheduledTask) -> None:
    """Remove a block or task line from its note."""
    if item.id:
        repo.delete_blocks([item.id])


# ============== Kanban ==============


def find_task(tasks: list[CraftTask], task_id: str) -> CraftTask | None:
    """Look up a task by id."""
    return next((t for t in tasks if t.id == task_id), None)


def load_board(
    repo: TaskRepository,
    today: date,
    options: DistributeOptions | None = None,
) -> list[Column]:
    """Fetch all tasks and distribute them into columns."""
    return distribute(repo.fetch_all_tasks(), today, options)


def move_task(
    repo: TaskRepository,
    task: CraftTask,
    column_id: str,
    today: date,
    options: DistributeOptions | None = None,
) -> CraftTask:
    """Move a task to a column by changing its schedule date or note."""
    if not is_column_id(column_id):
        raise MoveNotAllowed(f"Unknown column {column_id}")
    if not can_drop(task, column_id):
        raise MoveNotAllowed(f"Task {task.id} cannot be moved to {column_id}")

    target = target_date_for_column(column_id, today, options)

    if column_id == INBOX:
        # Only unscheduled inbox tasks reach here; nothing to change server-side
        return task

    if task.is_inbox:
        repo.update_task(task.id, {"taskInfo": {"scheduleDate": target.isoformat()}})
        return replace(task, schedule_date=target)

    if task.is_daily_note:
        repo.move_daily_note_task(task.id, target)
        return replace(task, location_date=target)

    raise MoveNotAllowed(f"Task {task.id} has no known location")


def create_task(
    repo: TaskRepository,
    title: str,
    column_id: str,
    today: date,
    options: DistributeOptions | None = None,
    daily_note: bool = False,
) -> CraftTask:
    """Create a task that lands in the given column."""
    if not is_column_id(column_id):
        raise MoveNotAllowed(f"Unknown column {column_id}")
    target = target_date_for_column(column_id, today, options)
    markdown = title.strip()

    if daily_note:
        location = {"type": "dailyNote", "date": (target or today).isoformat()}
        return repo.create_task(markdown, location)

    return repo.create_task(markdown, {"type": "inbox"}, schedule_date=target)


def edit_task(repo: TaskRepository, task: CraftTask, new_text: str) -> CraftTask:
    """Replace a task's text behind its existing checkbox prefix."""
    markdown = rewrite_task_text(task.markdown, new_text)
    if markdown == task.markdown:
        return task
    repo.update_task(task.id, {"markdown": markdown})
    return replace(task, markdown=markdown)


def complete_task(repo: TaskRepository, task: CraftTask, done: bool = True) -> CraftTask:
    """Set a Kanban task done or back to todo."""
    state = "done" if done else "todo"
    repo.update_task(task.id, {"taskInfo": {"state": state}})
    return replace(task, state=state)


def delete_task(repo: TaskRepository, task: CraftTask) -> None:
    """Remove a task from the inbox or its daily note."""
    repo.delete_tasks([task.id])
    logger.info(f"Deleted task {task.id}")
