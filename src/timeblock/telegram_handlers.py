"""Telegram command handlers."""

import logging
from datetime import date, datetime

from telegram import Update
from telegram.ext import ContextTypes

from .adapters.craft_api import CraftAdapter, CraftAPIError
from .config import load_config
from .core.agenda import format_agenda, format_board
from .core.blocks import ScheduledBlock
from .core.layout import now_hour
from .telegram_format import send_markdown
from .workflows import board_options, find_block, load_board, load_schedule, toggle

logger = logging.getLogger(__name__)

COMMANDS_HELP = (
    "/today [YYYY-MM-DD] - Timeline and unscheduled tasks\n"
    "/board - Task board (inbox, backlog, today, future)\n"
    "/week - Task board with a column per weekday\n"
    "/done ID - Mark a task done\n"
    "/undo ID - Mark a task not done\n"
    "/help - Show all commands"
)


def _date_arg(context: ContextTypes.DEFAULT_TYPE) -> date | None:
    """First command argument as a date, today if absent, None if invalid."""
    if not context.args:
        return date.today()
    try:
        return date.fromisoformat(context.args[0])
    except ValueError:
        return None


def agenda_text(target: date, config=None) -> str:
    """Fetch and format a day's agenda. Raises CraftAPIError."""
    config = config or load_config()
    parsed = load_schedule(CraftAdapter(config), target)
    now = now_hour(datetime.now()) if target == date.today() else None
    return format_agenda(parsed, target, config.start_hour, config.end_hour, now)


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hi! I show the timeblocks and tasks in your Craft daily notes.\n\n"
        "Commands:\n" + COMMANDS_HELP
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text("timeblock commands\n\n" + COMMANDS_HELP)


async def today_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /today command - show a day's timeline."""
    target = _date_arg(context)
    if target is None:
        await update.message.reply_text("Usage: /today [YYYY-MM-DD]")
        return

    try:
        text = agenda_text(target)
    except CraftAPIError as e:
        logger.error(f"Failed to load schedule for {target}: {e}")
        await update.message.reply_text(f"Failed to load schedule: {e}")
        return

    await send_markdown(update.message, text)


async def _reply_board(update: Update, week: bool):
    config = load_config()
    try:
        columns = load_board(CraftAdapter(config), date.today(), board_options(config, week))
    except CraftAPIError as e:
        logger.error(f"Failed to load tasks: {e}")
        await update.message.reply_text(f"Failed to load tasks: {e}")
        return

    await send_markdown(update.message, format_board(columns))


async def board_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /board command - standard Kanban columns."""
    await _reply_board(update, week=False)


async def week_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /week command - one column per weekday."""
    await _reply_board(update, week=True)


async def _set_done(update: Update, context: ContextTypes.DEFAULT_TYPE, done: bool):
    if not context.args:
        await update.message.reply_text("Usage: /done ID (ids are shown by `timeblock day --json`)")
        return

    block_id = context.args[0]
    adapter = CraftAdapter(load_config())
    try:
        item = find_block(load_schedule(adapter, date.today()), block_id)
        if item is None:
            await update.message.reply_text(f"No task with id {block_id} today.")
            return
        updated = toggle(adapter, item, done)
    except CraftAPIError as e:
        await update.message.reply_text(f"Failed to update task: {e}")
        return

    label = updated.title if isinstance(updated, ScheduledBlock) else updated.text
    await update.message.reply_text(f"{'Done' if done else 'Reopened'}: {label}")


async def done_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /done command."""
    await _set_done(update, context, True)


async def undo_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /undo command."""
    await _set_done(update, context, False)
