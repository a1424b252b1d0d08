from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import LocalePreference


class PreferencesRepo:
    def __init__(self, session: AsyncSession) -> None:
        self.s = session

    async def _row(self, kind: str, subject_id: int) -> Optional[LocalePreference]:
        q = select(LocalePreference).where(
            LocalePreference.kind == kind, LocalePreference.subject_id == subject_id
        )
        return (await self.s.execute(q)).scalars().first()

    async def get(self, kind: str, subject_id: int) -> Optional[str]:
        row = await self._row(kind, subject_id)
        return row.locale if row else None

    async def set(self, kind: str, subject_id: int, locale: str) -> None:
        row = await self._row(kind, subject_id)
        if row is None:
            self.s.add(LocalePreference(kind=kind, subject_id=subject_id, locale=locale))
        else:
            row.locale = locale
            row.updated_at = datetime.utcnow()

    async def delete(self, kind: str, subject_id: int) -> bool:
        row = await self._row(kind, subject_id)
        if row is None:
            return False
        await self.s.delete(row)
        return True

    async def all(self) -> list[LocalePreference]:
        q = select(LocalePreference).order_by(LocalePreference.kind, LocalePreference.subject_id)
        return list((await self.s.execute(q)).scalars().all())
