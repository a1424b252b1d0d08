from __future__ import annotations

import asyncio
import time
from typing import Optional

from telegram.constants import ChatMemberStatus
from telegram.ext import ContextTypes

from .config import settings


class TTLCache:
    def __init__(self, ttl: float = 15.0) -> None:
        self.ttl = ttl
        self._data: dict[tuple[int, int], tuple[float, bool]] = {}
        self._lock = asyncio.Lock()

    async def get(self, chat_id: int, user_id: int) -> Optional[bool]:
        async with self._lock:
            key = (chat_id, user_id)
            if key in self._data:
                ts, val = self._data[key]
                if time.monotonic() - ts < self.ttl:
                    return val
                self._data.pop(key, None)
        return None

    async def set(self, chat_id: int, user_id: int, val: bool) -> None:
        async with self._lock:
            self._data[(chat_id, user_id)] = (time.monotonic(), val)


_admin_cache = TTLCache(ttl=20)


def is_owner(user_id: Optional[int]) -> bool:
    return bool(user_id and user_id in settings.OWNER_IDS)


async def is_chat_admin(context: ContextTypes.DEFAULT_TYPE, chat_id: int, user_id: int) -> bool:
    if is_owner(user_id):
        return True
    cached = await _admin_cache.get(chat_id, user_id)
    if cached is not None:
        return cached
    member = await context.bot.get_chat_member(chat_id, user_id)
    is_admin = member.status in (
        ChatMemberStatus.ADMINISTRATOR,
        ChatMemberStatus.OWNER,
    )
    await _admin_cache.set(chat_id, user_id, is_admin)
    return is_admin
