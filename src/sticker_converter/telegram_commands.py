"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Welcome message")
    HELP = TelegramCommand("help", "Canvas sizes and placement options")
    SETPLACEMENT = TelegramCommand(
        "setplacement", "Place small stickers: centre or left"
    )


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
