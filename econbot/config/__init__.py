from econbot.config.settings import (
    COMMAND_PREFIX,
    DB_PATH,
    DISPLAY_TIMEZONE,
    OWNER_IDS,
    START_BALANCE,
    TOKEN,
)

__all__ = [
    "COMMAND_PREFIX",
    "DB_PATH",
    "DISPLAY_TIMEZONE",
    "OWNER_IDS",
    "START_BALANCE",
    "TOKEN",
]
