from __future__ import annotations

from telegram.ext import Application, CommandHandler

from .handlers import preview_message_format, preview_time, preview_translation


def register(app: Application) -> None:
    app.add_handler(CommandHandler("t", preview_translation))
    app.add_handler(CommandHandler("mf", preview_message_format))
    app.add_handler(CommandHandler("time", preview_time))
