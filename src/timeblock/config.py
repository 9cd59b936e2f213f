"""Configuration management for timeblock."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

TIMEBLOCK_HOME = Path(os.environ.get("TIMEBLOCK_HOME", Path.home() / "timeblock"))
CONFIG_FILE = TIMEBLOCK_HOME / "config" / "timeblock.conf"

THEMES = ("dark", "light")
KANBAN_MODES = ("standard", "week")


@dataclass
class Config:
    """timeblock configuration."""

    craft_api_url: str = ""
    theme: str = "dark"
    start_hour: int = 6
    end_hour: int = 22
    hour_height: int = 60
    week_starts_on_monday: bool = True
    kanban_mode: str = "standard"
    timezone: str = "America/Toronto"
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)
    telegram_agenda_time: str = "07:00"


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def _parse_hour(key: str, value: str) -> int | None:
    try:
        hour = int(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()}: {value!r}")
        return None
    if not 0 <= hour <= 24:
        logger.warning(f"{key.upper()} out of range (0-24): {hour}")
        return None
    return hour


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from timeblock.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "craft_api_url":
                    config.craft_api_url = value.rstrip("/")
                case "theme":
                    if value.lower() in THEMES:
                        config.theme = value.lower()
                    else:
                        logger.warning(f"Unknown THEME {value!r}, using {config.theme}")
                case "start_hour" | "end_hour":
                    hour = _parse_hour(key, value)
                    if hour is not None:
                        setattr(config, key, hour)
                case "hour_height":
                    try:
                        config.hour_height = int(value)
                    except ValueError:
                        logger.warning(f"Invalid HOUR_HEIGHT: {value!r}")
                case "week_starts_on_monday":
                    flag = _parse_bool(value)
                    if flag is None:
                        logger.warning(f"Invalid WEEK_STARTS_ON_MONDAY: {value!r}")
                    else:
                        config.week_starts_on_monday = flag
                case "kanban_mode":
                    if value.lower() in KANBAN_MODES:
                        config.kanban_mode = value.lower()
                    else:
                        logger.warning(f"Unknown KANBAN_MODE {value!r}, using {config.kanban_mode}")
                case "timezone":
                    config.timezone = value
                case "telegram_bot_token":
                    config.telegram_bot_token = value
                case "telegram_allowed_users":
                    try:
                        config.telegram_allowed_users = [
                            int(u.strip()) for u in value.split(",") if u.strip()
                        ]
                    except ValueError:
                        logger.warning(f"Invalid TELEGRAM_ALLOWED_USERS: {value!r}")
                case "telegram_agenda_time":
                    config.telegram_agenda_time = value

    if config.start_hour >= config.end_hour:
        logger.warning(
            f"START_HOUR ({config.start_hour}) must be before END_HOUR ({config.end_hour}), using defaults"
        )
        config.start_hour, config.end_hour = Config.start_hour, Config.end_hour

    env_url = os.environ.get("CRAFT_API_URL")
    if env_url:
        config.craft_api_url = env_url.rstrip("/")

    return config
