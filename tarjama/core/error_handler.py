"""Error handling for the bot: log, skip known noise, apologise in the user's language."""

from __future__ import annotations

import asyncio
import html
import logging
import traceback
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from telegram import Update
from telegram.error import RetryAfter, TelegramError, TimedOut
from telegram.ext import Application, ContextTypes

from .config import settings
from .i18n import I18N, t

log = logging.getLogger(__name__)

# Error types that should not be reported to admins
IGNORE_ERRORS = (
    "Message is not modified",
    "Message to delete not found",
    "Query is too old",
    "Chat not found",
    "bot was blocked by the user",
)

T = TypeVar("T")


class ErrorHandler:
    """Centralized error handling with owner notifications."""

    @staticmethod
    async def handle_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        error = context.error
        if not error:
            return
        if any(ignore in str(error) for ignore in IGNORE_ERRORS):
            log.debug("Ignoring known error: %s", error)
            return

        log.error("Exception while handling an update:", exc_info=error)

        await ErrorHandler._notify_owners(context, ErrorHandler.format_report(error))

        if isinstance(update, Update) and update.effective_message:
            lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
            await ErrorHandler.send_with_retry(
                update.effective_message.reply_text,
                t("errors.generic", locale=lang),
                retry_label="reply_text",
            )

    @staticmethod
    def format_report(error: BaseException) -> str:
        tb_string = "".join(traceback.format_exception(None, error, error.__traceback__))
        if len(tb_string) > 3000:
            tb_string = tb_string[-3000:]
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        return "\n".join([
            "<b>Error report</b>",
            f"<b>Time:</b> {timestamp}",
            f"<b>Error:</b> <code>{html.escape(str(error))}</code>",
            "",
            f"<pre>{html.escape(tb_string)}</pre>",
        ])

    @staticmethod
    async def _notify_owners(context: ContextTypes.DEFAULT_TYPE, text: str) -> None:
        for owner_id in settings.OWNER_IDS:
            await ErrorHandler.send_with_retry(
                context.bot.send_message,
                chat_id=owner_id,
                text=text[:4000],
                parse_mode="HTML",
                retry_label=f"notify_owner_{owner_id}",
            )

    @staticmethod
    async def send_with_retry(
        func: Callable[..., Awaitable[T]],
        *args: Any,
        retry_label: str = "send_message",
        max_attempts: int = 3,
        **kwargs: Any,
    ) -> T | None:
        """Best-effort wrapper around Telegram API calls with backoff."""
        attempt = 0
        while attempt < max_attempts:
            try:
                return await func(*args, **kwargs)
            except RetryAfter as exc:
                attempt += 1
                retry_after = exc.retry_after
                if isinstance(retry_after, timedelta):
                    retry_after = retry_after.total_seconds()
                wait_time = int(retry_after) + 1
                log.warning(
                    "Flood control on %s, retrying in %ss (attempt %s/%s)",
                    retry_label, wait_time, attempt, max_attempts,
                )
                await asyncio.sleep(wait_time)
            except TimedOut:
                attempt += 1
                wait_time = 2 ** attempt
                log.warning(
                    "Timeout on %s, retrying in %ss (attempt %s/%s)",
                    retry_label, wait_time, attempt, max_attempts,
                )
                await asyncio.sleep(wait_time)
            except TelegramError as exc:
                log.error("Telegram error on %s: %s", retry_label, exc)
                break
        return None


def setup_error_handlers(application: Application) -> None:
    application.add_error_handler(ErrorHandler.handle_error)
    log.info("Error handlers configured")
