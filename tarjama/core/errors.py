from __future__ import annotations


class I18nError(Exception):
    """Base class for translation runtime errors."""


class LocaleLoadError(I18nError):
    def __init__(self, locale: str, reason: str) -> None:
        super().__init__(f"Could not load locale {locale!r}: {reason}")
        self.locale = locale
        self.reason = reason


class MessageFormatError(I18nError):
    pass


class UnknownTimezoneError(I18nError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown timezone: {name}")
        self.name = name
