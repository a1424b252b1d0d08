from __future__ import annotations

import logging

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes

from ...core.config import settings
from ...core.i18n import I18N, t
from ...core.permissions import is_chat_admin
from ...core.utils import GROUP_TYPES
from ...infra import db
from ...infra.models import CHAT, USER
from ...infra.preferences_repo import PreferencesRepo

log = logging.getLogger(__name__)

RESET = "reset"


def locale_name(code: str, in_locale: str) -> str:
    return t(f"language.names.{code}", locale=in_locale, default_value=code)


def language_keyboard(lang: str) -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(locale_name(code, code), callback_data=f"lang:set:{code}")
        for code in I18N.available_locales()
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    rows.append([InlineKeyboardButton("↺", callback_data=f"lang:set:{RESET}")])
    return InlineKeyboardMarkup(rows)


async def apply_choice(update: Update, context: ContextTypes.DEFAULT_TYPE, code: str) -> str:
    """Store ``code`` for the chat (groups) or the user (private); returns the reply text."""
    chat = update.effective_chat
    user = update.effective_user
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    in_group = chat is not None and chat.type in GROUP_TYPES

    if in_group and not await is_chat_admin(context, chat.id, user.id):
        return t("language.admins_only", locale=lang)

    kind, subject_id = (CHAT, chat.id) if in_group else (USER, user.id)

    if code.lower() == RESET:
        if kind == CHAT:
            I18N.clear_chat_locale(subject_id)
        else:
            I18N.clear_user_locale(subject_id)
        async with db.SessionLocal() as s:  # type: ignore
            await PreferencesRepo(s).delete(kind, subject_id)
            await s.commit()
        new_lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
        return t("language.reset", locale=new_lang, name=locale_name(new_lang, new_lang))

    if not I18N.has_locale(code):
        return t(
            "language.unknown",
            locale=lang,
            code=code,
            available=", ".join(I18N.available_locales()),
        )

    if kind == CHAT:
        I18N.set_chat_locale(subject_id, code)
    else:
        I18N.set_user_locale(subject_id, code)
    async with db.SessionLocal() as s:  # type: ignore
        await PreferencesRepo(s).set(kind, subject_id, code)
        await s.commit()
    log.info("%s %s switched locale to %s", kind, subject_id, code)
    return t("language.changed", locale=code, name=locale_name(code, code))


async def language(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    msg = update.effective_message
    if not msg or not update.effective_user:
        return
    if context.args:
        await msg.reply_text(await apply_choice(update, context, context.args[0].strip()))
        return
    lang = I18N.pick_locale(update, fallback=settings.DEFAULT_LOCALE)
    text = t("language.current", locale=lang, name=locale_name(lang, lang)) + "\n" + t("language.choose", locale=lang)
    await msg.reply_text(text, reply_markup=language_keyboard(lang))


async def on_language_button(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    if not query or not query.data:
        return
    await query.answer()
    code = query.data.split(":", 2)[2]
    await query.edit_message_text(await apply_choice(update, context, code))
