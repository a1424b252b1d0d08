from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes

from .core.config import settings
from .core.error_handler import setup_error_handlers
from .core.i18n import I18N, t
from .core.logging_config import get_logger, setup_logging
from .features.language import register as register_language
from .features.preview import register as register_preview
from .infra.db import init_engine, init_sessionmaker
from .infra.migrate import load_preferences, migrate

log = get_logger(__name__)


async def on_startup(app: Application) -> None:
    await migrate()
    await load_preferences()
    await set_bot_commands(app)


async def set_bot_commands(app: Application) -> None:
    cmds: List[BotCommand] = [
        BotCommand("start", "Start"),
        BotCommand("help", "Show help"),
        BotCommand("language", "Show or change the language"),
        BotCommand("t", "Preview a translation"),
        BotCommand("mf", "Preview a message format"),
        BotCommand("time", "Current time in a timezone"),
    ]
    await app.bot.set_my_commands(cmds)
    log.info("Bot commands registered")


def make_app() -> Application:
    I18N.configure(settings)
    I18N.load_locales(settings.LOCALES_DIR)

    app = (
        ApplicationBuilder()
        .token(settings.BOT_TOKEN)
        .concurrent_updates(True)
        .post_init(on_startup)
        .build()
    )

    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("help", help_))

    register_language(app)
    register_preview(app)

    setup_error_handlers(app)

    return app


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    user = update.effective_user
    text = t("start.welcome", locale=lang, first_name=(user.first_name if user else "") or "")
    await update.effective_message.reply_text(text, parse_mode=ParseMode.HTML)


async def help_(update: Update, _: ContextTypes.DEFAULT_TYPE) -> None:
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    await update.effective_message.reply_text(t("help.text", locale=lang))


def main() -> None:
    # Ensure data directory exists for SQLite path
    Path("data").mkdir(exist_ok=True)
    setup_logging(
        log_file=True,
        debug=settings.DEBUG,
        missing_translations=settings.LOG_MISSING_TRANSLATIONS,
    )

    if not settings.BOT_TOKEN:
        raise SystemExit("BOT_TOKEN is not set")

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    loop.run_until_complete(init_engine(settings.DATABASE_URL))
    init_sessionmaker()

    app = make_app()
    app.run_polling(
        allowed_updates=["message", "callback_query"],
        drop_pending_updates=True,
    )


if __name__ == "__main__":
    main()
