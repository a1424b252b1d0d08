from __future__ import annotations

from telegram.ext import Application, CallbackQueryHandler, CommandHandler

from .handlers import language, on_language_button


def register(app: Application) -> None:
    app.add_handler(CommandHandler("language", language))
    app.add_handler(CallbackQueryHandler(on_language_button, pattern=r"^lang:set:"))
