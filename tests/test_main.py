"""
Tests for application assembly and the /start and /help commands.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from telegram.constants import ParseMode
from telegram.ext import CallbackQueryHandler, CommandHandler

from tarjama.core.config import settings
from tarjama.core.i18n import I18N
from tarjama.main import help_, make_app, start


@pytest.fixture
def bot_settings(monkeypatch):
    monkeypatch.setattr(settings, "BOT_TOKEN", "123456:TEST-TOKEN")
    monkeypatch.setattr(settings, "LOCALES_DIR", None)
    monkeypatch.setattr(settings, "DEFAULT_LOCALE", "en")
    monkeypatch.setattr(settings, "FALLBACK_LOCALE", None)
    monkeypatch.setattr(settings, "NO_FALLBACKS", False)
    monkeypatch.setattr(settings, "VERBOSE_LOCALIZATION", False)
    return settings


def make_update(language_code="en"):
    return SimpleNamespace(
        effective_chat=SimpleNamespace(id=7, type="private"),
        effective_user=SimpleNamespace(id=7, language_code=language_code, first_name="Sam"),
        effective_message=SimpleNamespace(reply_text=AsyncMock()),
    )


class TestMakeApp:
    """make_app() loads the locales and wires every command."""

    def test_registers_handlers(self, bot_settings):
        app = make_app()
        handlers = [h for group in app.handlers.values() for h in group]
        commands = set()
        for handler in handlers:
            if isinstance(handler, CommandHandler):
                commands |= set(handler.commands)
        assert commands == {"start", "help", "language", "t", "mf", "time"}
        assert any(isinstance(h, CallbackQueryHandler) for h in handlers)
        assert app.error_handlers

    def test_loads_packaged_locales(self, bot_settings):
        make_app()
        assert I18N.available_locales() == ["ar", "en"]
        assert I18N.default_locale() == "en"


class TestCommands:
    async def test_start_greets_in_users_language(self, packaged, bot_settings):
        update = make_update()
        await start(update, SimpleNamespace())
        update.effective_message.reply_text.assert_awaited_once_with(
            "Hello Sam! I show this bot's texts in your language. Use /language to change it.",
            parse_mode=ParseMode.HTML,
        )

    async def test_start_in_arabic(self, packaged, bot_settings):
        update = make_update(language_code="ar")
        await start(update, SimpleNamespace())
        text = update.effective_message.reply_text.await_args.args[0]
        assert text.startswith("مرحبًا Sam!")

    async def test_help_lists_commands(self, packaged, bot_settings):
        update = make_update()
        await help_(update, SimpleNamespace())
        text = update.effective_message.reply_text.await_args.args[0]
        assert text.startswith("Commands:\n/language")
