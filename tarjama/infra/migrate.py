from __future__ import annotations

import logging

from ..core.i18n import I18N
from . import db
from .models import CHAT, USER, Base
from .preferences_repo import PreferencesRepo

log = logging.getLogger(__name__)


async def migrate() -> None:
    assert db.engine is not None, "Engine not initialized"
    async with db.engine.begin() as conn:  # type: ignore
        await conn.run_sync(Base.metadata.create_all)
    log.info("Database schema ready (%s)", db.engine.url.render_as_string(hide_password=True))


async def load_preferences() -> int:
    """Push stored chat/user locales into I18N; returns how many were applied."""
    applied = 0
    async with db.SessionLocal() as session:  # type: ignore
        rows = await PreferencesRepo(session).all()
    for row in rows:
        if row.kind == CHAT:
            ok = I18N.set_chat_locale(row.subject_id, row.locale)
        elif row.kind == USER:
            ok = I18N.set_user_locale(row.subject_id, row.locale)
        else:
            ok = False
        if ok:
            applied += 1
        else:
            log.warning(
                "Ignoring stored %s locale %r for %s: not available", row.kind, row.locale, row.subject_id
            )
    log.info("Loaded %s locale preference(s)", applied)
    return applied
