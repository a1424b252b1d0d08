from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, List, Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file explicitly
ENV_FILE_NAME = ".env"
env_path = Path(__file__).parent.parent.parent / ENV_FILE_NAME
load_dotenv(env_path, override=False)


class Settings(BaseSettings):
    BOT_TOKEN: str = ""  # Only needed to run the bot
    OWNER_IDS: Annotated[List[int], NoDecode] = []
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/tarjama.db"
    DEFAULT_LOCALE: str = "en"
    FALLBACK_LOCALE: Optional[str] = None
    LOCALES_DIR: Optional[Path] = None  # Extra <code>.json files merged over the packaged ones
    NO_FALLBACKS: bool = False
    VERBOSE_LOCALIZATION: bool = False
    LOG_MISSING_TRANSLATIONS: bool = False
    DEBUG: bool = False

    @field_validator("OWNER_IDS", mode="before")
    @classmethod
    def parse_owner_ids(cls, v):  # type: ignore
        if v in (None, "", []):
            v = os.getenv("OWNER_IDS", "")
        if not v:
            return []
        if isinstance(v, int):
            return [v]
        if isinstance(v, list):
            return [int(x) for x in v]
        if isinstance(v, str):
            return [int(x.strip()) for x in v.split(",") if x.strip()]
        return []

    @field_validator("FALLBACK_LOCALE", "LOCALES_DIR", mode="before")
    @classmethod
    def empty_as_none(cls, v):  # type: ignore
        return None if v == "" else v

    @field_validator("DEFAULT_LOCALE")
    @classmethod
    def normalize_locale(cls, v: str) -> str:
        return v.strip() or "en"

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_NAME,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
