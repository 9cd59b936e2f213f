"""timeblock Telegram bot."""

import logging
from datetime import date

from telegram import Update, Bot
from telegram.ext import Application, CommandHandler, MessageHandler, filters
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.craft_api import CraftAPIError
from .config import Config, load_config
from .telegram_format import send_markdown
from .telegram_handlers import (
    agenda_text,
    board_handler,
    done_handler,
    help_handler,
    start_handler,
    today_handler,
    undo_handler,
    week_handler,
)

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    config = config or load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to timeblock.conf"
        )

    app = Application.builder().token(config.telegram_bot_token).build()
    auth_filter = AuthFilter(config.telegram_allowed_users)

    for command, handler in (
        ("start", start_handler),
        ("help", help_handler),
        ("today", today_handler),
        ("board", board_handler),
        ("week", week_handler),
        ("done", done_handler),
        ("undo", undo_handler),
    ):
        app.add_handler(CommandHandler(command, handler, filters=auth_filter))

    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in timeblock.conf"
        )

    if config.telegram_allowed_users:
        app.add_handler(MessageHandler(~auth_filter & filters.ALL, unauthorized_handler))

    return app


def parse_clock_time(value: str) -> tuple[int, int] | None:
    """Parse "HH:MM" into (hour, minute); None if malformed."""
    try:
        hour, minute = map(int, value.split(":"))
    except ValueError:
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return hour, minute


def setup_scheduler(app: Application, config: Config | None = None) -> AsyncIOScheduler:
    """Set up the daily agenda push."""
    config = config or load_config()
    scheduler = AsyncIOScheduler(timezone=config.timezone or "America/Toronto")

    if config.telegram_agenda_time and config.telegram_allowed_users:
        clock = parse_clock_time(config.telegram_agenda_time)
        if clock is None:
            logger.warning(f"Invalid agenda time format: {config.telegram_agenda_time}")
        else:
            hour, minute = clock
            scheduler.add_job(
                send_scheduled_agenda,
                CronTrigger(hour=hour, minute=minute),
                args=[app.bot, config.telegram_allowed_users, config],
                id="daily_agenda",
            )
            logger.info(f"Scheduled daily agenda at {hour:02d}:{minute:02d}")

    return scheduler


async def send_scheduled_agenda(bot: Bot, user_ids: list[int], config: Config):
    """Send today's agenda to all authorized users."""
    logger.info("Sending scheduled agenda")

    try:
        text = agenda_text(date.today(), config)
    except CraftAPIError as e:
        logger.error(f"Failed to load today's schedule: {e}")
        return

    for user_id in user_ids:
        try:
            await send_markdown(bot, text, chat_id=user_id)
        except Exception as e:
            logger.error(f"Failed to send agenda to user {user_id}: {e}")


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)
    scheduler = setup_scheduler(app, config)

    async def post_init(application: Application) -> None:
        """Start scheduler after event loop is running."""
        scheduler.start()
        logger.info("Scheduler started")

    app.post_init = post_init

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting timeblock Telegram bot...")
    app.run_polling(allowed_updates=Update.ALL_TYPES)
