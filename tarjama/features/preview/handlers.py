from __future__ import annotations

from datetime import datetime

from telegram import Update
from telegram.ext import ContextTypes

from ...core import dates
from ...core.config import settings
from ...core.errors import UnknownTimezoneError
from ...core.i18n import I18N, t
from ...core.utils import parse_options

DEFAULT_ZONE = "Etc/UTC"


async def preview_translation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    msg = update.effective_message
    if not msg:
        return
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    if not context.args:
        await msg.reply_text(t("preview.usage", locale=lang))
        return
    scope, *rest = context.args
    options = parse_options(rest)
    # Locale and scope prefix are names, even when they look numeric
    options["locale"] = str(options.get("locale", lang))
    if "scope" in options:
        options["scope"] = str(options["scope"])
    await msg.reply_text(t(scope, **options))


async def preview_message_format(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    msg = update.effective_message
    if not msg:
        return
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    if not context.args:
        await msg.reply_text(t("preview.mf_usage", locale=lang))
        return
    key, *rest = context.args
    options = parse_options(rest)
    locale = options.pop("locale", lang)
    await msg.reply_text(I18N.message_format(key, locale=str(locale), args=options))


def describe_now(zone_name: str, lang: str, now: datetime | None = None) -> str:
    zone = dates.get_zone(zone_name)
    now = (now or datetime.now(zone)).astimezone(zone)
    return t(
        "preview.time",
        locale=lang,
        time=dates.format_datetime(now, "LLLL", lang),
        calendar=dates.calendar(now, now, lang),
        zone=dates.timezone_display_name(zone_name, lang),
    )


async def preview_time(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    msg = update.effective_message
    if not msg:
        return
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    zone_name = context.args[0] if context.args else DEFAULT_ZONE
    try:
        text = describe_now(zone_name, lang)
    except UnknownTimezoneError:
        text = t("preview.unknown_zone", locale=lang, zone=zone_name)
    await msg.reply_text(text)
