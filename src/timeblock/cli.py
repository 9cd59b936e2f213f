"""timeblock CLI - Craft daily note timeline and task board."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path

import click

from .adapters.craft_api import CraftAdapter, CraftAPIError
from .config import load_config
from .core.agenda import format_agenda, format_board
from .core.blocks import ScheduledBlock, UnscheduledTask, parse_blocks
from .core.layout import assign_columns, block_keys, now_hour
from .core.kanban import INBOX, CraftTask, is_column_id
from .core.time_parser import parse_clock
from .workflows import (
    MoveNotAllowed,
    board_options,
    complete_task,
    create_block,
    create_task,
    delete,
    delete_task,
    edit_task,
    find_block,
    find_task,
    load_board,
    load_schedule,
    move_block,
    move_task,
    retitle,
    schedule_task,
    toggle,
)


def _target_date(value: str | None) -> date:
    return date.fromisoformat(value) if value else date.today()


def _hour(value: str) -> float:
    hour = parse_clock(value)
    if hour is None:
        raise click.BadParameter(f"Not a time: {value!r}")
    return hour


def _column(value: str) -> str:
    column_id = value.lower()
    if not is_column_id(column_id):
        raise click.BadParameter(
            f"{value!r} is not inbox, backlog, today, future or a YYYY-MM-DD date"
        )
    return column_id


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _dump(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _schedule_json(parsed) -> dict:
    layout = assign_columns(parsed.scheduled)
    keys = block_keys(parsed.scheduled)
    scheduled = []
    for index, block in enumerate(parsed.scheduled):
        info = layout[keys[index]]
        scheduled.append({**asdict(block), "column": info.column, "total_columns": info.total_columns})
    return {"scheduled": scheduled, "unscheduled": [asdict(t) for t in parsed.unscheduled]}


@click.group()
@click.version_option(package_name="timeblock")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """timeblock - timeblocks and tasks from Craft daily notes."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target_date: str | None, as_json: bool):
    """Show a day's timeline and unscheduled tasks."""
    config = load_config()
    target = _target_date(target_date)

    try:
        parsed = load_schedule(CraftAdapter(config), target)
    except CraftAPIError as e:
        _fail(str(e))

    if as_json:
        _dump(_schedule_json(parsed))
        return

    now = now_hour(datetime.now()) if target == date.today() else None
    click.echo(format_agenda(parsed, target, config.start_hour, config.end_hour, now))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse(path: Path, as_json: bool):
    """Parse a saved Craft blocks payload (JSON, or legacy tagged text)."""
    raw = path.read_text()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        payload = raw

    if not isinstance(payload, (str, list, dict)):
        _fail("Payload must be a JSON object, array, or text")

    parsed = parse_blocks(payload)
    if as_json:
        _dump(_schedule_json(parsed))
    else:
        click.echo(format_agenda(parsed, date.today()))


@main.command()
@click.option("--week/--standard", "week", default=None,
              help="Week view with one column per day (default from KANBAN_MODE)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def board(week: bool | None, as_json: bool):
    """Show open tasks as Kanban columns."""
    config = load_config()
    options = board_options(config, week)

    try:
        columns = load_board(CraftAdapter(config), date.today(), options)
    except CraftAPIError as e:
        _fail(str(e))

    if as_json:
        _dump([asdict(c) for c in columns])
    else:
        click.echo(format_board(columns))


@main.command()
@click.argument("block_id")
@click.argument("start")
@click.argument("end")
@click.option("--date", "-d", "target_date", default=None, help="Note date (YYYY-MM-DD)")
def move(block_id: str, start: str, end: str, target_date: str | None):
    """Move or resize a block: timeblock move ID 9:30am 11am."""
    config = load_config()
    target = _target_date(target_date)
    new_start, new_end = _hour(start), _hour(end)
    adapter = CraftAdapter(config)

    try:
        item = find_block(load_schedule(adapter, target), block_id)
        if item is None:
            _fail(f"No block with id {block_id} on {target}")
        if isinstance(item, UnscheduledTask):
            updated = schedule_task(adapter, item, new_start, new_end, target)
        else:
            updated = move_block(adapter, item, new_start, new_end, target)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(updated.original_text)


@main.command()
@click.argument("start")
@click.argument("end")
@click.argument("title", nargs=-1, required=True)
@click.option("--date", "-d", "target_date", default=None, help="Note date (YYYY-MM-DD)")
def add(start: str, end: str, title: tuple[str, ...], target_date: str | None):
    """Add a timeblock: timeblock add 2pm 3pm Deep work."""
    config = load_config()
    target = _target_date(target_date)

    try:
        block = create_block(CraftAdapter(config), _hour(start), _hour(end), " ".join(title), target)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(f"{block.original_text} [{block.category}]")


@main.command("toggle")
@click.argument("block_id")
@click.option("--undo", is_flag=True, help="Mark as not done")
@click.option("--date", "-d", "target_date", default=None, help="Note date (YYYY-MM-DD)")
def toggle_cmd(block_id: str, undo: bool, target_date: str | None):
    """Mark a task done (or not done with --undo)."""
    config = load_config()
    target = _target_date(target_date)
    adapter = CraftAdapter(config)

    try:
        item = find_block(load_schedule(adapter, target), block_id)
        if item is None:
            _fail(f"No block with id {block_id} on {target}")
        updated = toggle(adapter, item, not undo)
    except CraftAPIError as e:
        _fail(str(e))

    label = updated.title if isinstance(updated, ScheduledBlock) else updated.text
    click.echo(f"{'[x]' if updated.checked else '[ ]'} {label}")


@main.command("retitle")
@click.argument("block_id")
@click.argument("title", nargs=-1, required=True)
@click.option("--date", "-d", "target_date", default=None, help="Note date (YYYY-MM-DD)")
def retitle_cmd(block_id: str, title: tuple[str, ...], target_date: str | None):
    """Rename a timeblock, keeping its time: timeblock retitle ID Deep work."""
    config = load_config()
    target = _target_date(target_date)
    adapter = CraftAdapter(config)

    try:
        item = find_block(load_schedule(adapter, target), block_id)
        if not isinstance(item, ScheduledBlock):
            _fail(f"No timeblock with id {block_id} on {target}")
        updated = retitle(adapter, item, " ".join(title), target)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(updated.original_text)


@main.command("delete")
@click.argument("block_id")
@click.option("--date", "-d", "target_date", default=None, help="Note date (YYYY-MM-DD)")
def delete_cmd(block_id: str, target_date: str | None):
    """Remove a block or task line from a daily note."""
    config = load_config()
    target = _target_date(target_date)
    adapter = CraftAdapter(config)

    try:
        item = find_block(load_schedule(adapter, target), block_id)
        if item is None:
            _fail(f"No block with id {block_id} on {target}")
        delete(adapter, item)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(f"Deleted: {item.original_text}")


# ============== Task board ==============


@main.group()
def task():
    """Change tasks on the board."""


def _task_or_id(adapter: CraftAdapter, task_id: str, required: bool = True) -> CraftTask:
    """Find a task among the open ones; done tasks are addressed by id alone."""
    found = find_task(adapter.fetch_all_tasks(), task_id)
    if found is None:
        if required:
            _fail(f"No open task with id {task_id}")
        return CraftTask(id=task_id, markdown="")
    return found


def _label(task: CraftTask) -> str:
    return task.display_text or task.id


@task.command("move")
@click.argument("task_id")
@click.argument("column")
@click.option("--week/--standard", "week", default=None,
              help="Board mode that decides the date of the future column")
def task_move(task_id: str, column: str, week: bool | None):
    """Move a task to a column: inbox, backlog, today, future or YYYY-MM-DD."""
    config = load_config()
    column_id = _column(column)
    adapter = CraftAdapter(config)

    try:
        moved = move_task(
            adapter,
            _task_or_id(adapter, task_id),
            column_id,
            date.today(),
            board_options(config, week),
        )
    except (MoveNotAllowed, CraftAPIError) as e:
        _fail(str(e))

    click.echo(f"Moved: {_label(moved)} -> {column_id}")


@task.command("add")
@click.argument("title", nargs=-1, required=True)
@click.option("--column", "-c", default=INBOX, help="Column to add to (default inbox)")
@click.option("--note", "daily_note", is_flag=True,
              help="Add to the column's daily note instead of the inbox")
@click.option("--week/--standard", "week", default=None,
              help="Board mode that decides the date of the future column")
def task_add(title: tuple[str, ...], column: str, daily_note: bool, week: bool | None):
    """Create a task: timeblock task add --column today Call the bank."""
    config = load_config()
    column_id = _column(column)

    try:
        created = create_task(
            CraftAdapter(config),
            " ".join(title),
            column_id,
            date.today(),
            board_options(config, week),
            daily_note=daily_note,
        )
    except (MoveNotAllowed, CraftAPIError) as e:
        _fail(str(e))

    click.echo(f"Added: {_label(created)} ({created.id})")


@task.command("edit")
@click.argument("task_id")
@click.argument("text", nargs=-1, required=True)
def task_edit(task_id: str, text: tuple[str, ...]):
    """Change a task's text, keeping its checkbox."""
    adapter = CraftAdapter(load_config())

    try:
        edited = edit_task(adapter, _task_or_id(adapter, task_id), " ".join(text))
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(f"Updated: {_label(edited)}")


@task.command("done")
@click.argument("task_id")
@click.option("--undo", is_flag=True, help="Mark as not done")
def task_done(task_id: str, undo: bool):
    """Complete a task (or reopen it with --undo)."""
    adapter = CraftAdapter(load_config())

    try:
        updated = complete_task(adapter, _task_or_id(adapter, task_id, required=False), not undo)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(f"{'Reopened' if undo else 'Done'}: {_label(updated)}")


@task.command("delete")
@click.argument("task_id")
def task_delete(task_id: str):
    """Delete a task."""
    adapter = CraftAdapter(load_config())

    try:
        target = _task_or_id(adapter, task_id, required=False)
        delete_task(adapter, target)
    except CraftAPIError as e:
        _fail(str(e))

    click.echo(f"Deleted: {_label(target)}")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    try:
        from .telegram_bot import run_bot
        click.echo("Starting timeblock Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo("Error: Missing dependencies. Run 'pip install python-telegram-bot apscheduler'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
