"""Tests for Telegram command definitions."""

from sticker_converter.telegram_commands import BotCommand, telegram_commands


def test_telegram_commands_include_setplacement() -> None:
    commands = telegram_commands()

    assert [entry["command"] for entry in commands] == [
        "start",
        "help",
        "setplacement",
    ]
    assert len(commands) == len(list(BotCommand))
