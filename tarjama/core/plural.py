"""Plural-category rules per locale.

A rule maps a non-negative count to a category name, or to a list of
candidate names tried in order (English zero falls back through
``zero``, ``none`` and ``other``).
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Union

Category = Union[str, List[str]]
Rule = Callable[[float], Category]

CATEGORIES = ("zero", "one", "two", "few", "many", "other", "none")


def _is_int(n: float) -> bool:
    return float(n).is_integer()


def _en(n: float) -> Category:
    if n == 0:
        return ["zero", "none", "other"]
    return "one" if n == 1 else "other"


def _ar(n: float) -> Category:
    if n == 0:
        return "zero"
    if n == 1:
        return "one"
    if n == 2:
        return "two"
    if 3 <= n % 100 <= 10:
        return "few"
    if 11 <= n % 100 <= 99:
        return "many"
    return "other"


def _one_other(n: float) -> Category:
    return "one" if n == 1 else "other"


def _fr(n: float) -> Category:
    return "one" if 0 <= n < 2 else "other"


def _tr(n: float) -> Category:
    return "one" if n == 1 else "other"


def _east_slavic(n: float) -> Category:
    if not _is_int(n):
        return "other"
    mod10, mod100 = n % 10, n % 100
    if mod10 == 1 and mod100 != 11:
        return "one"
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return "few"
    return "many"


def _pl(n: float) -> Category:
    if not _is_int(n):
        return "other"
    if n == 1:
        return "one"
    mod10, mod100 = n % 10, n % 100
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return "few"
    return "many"


def _cs(n: float) -> Category:
    if not _is_int(n):
        return "many"
    if n == 1:
        return "one"
    if 2 <= n <= 4:
        return "few"
    return "other"


def _he(n: float) -> Category:
    if n == 1:
        return "one"
    if n == 2:
        return "two"
    if _is_int(n) and n > 10 and n % 10 == 0:
        return "many"
    return "other"


def _other(n: float) -> Category:
    return "other"


RULES: Dict[str, Rule] = {
    "en": _en,
    "ar": _ar,
    "fr": _fr,
    "de": _one_other,
    "es": _one_other,
    "it": _one_other,
    "pt": _fr,
    "nl": _one_other,
    "tr": _tr,
    "ru": _east_slavic,
    "uk": _east_slavic,
    "pl": _pl,
    "cs": _cs,
    "he": _he,
    "ja": _other,
    "ko": _other,
    "zh": _other,
}


def base_language(locale: str) -> str:
    """``ar_EG`` / ``pt-BR`` -> ``ar`` / ``pt``."""
    return locale.replace("-", "_").split("_", 1)[0].lower()


def pluralizer(locale: str) -> Rule:
    rule = RULES.get(locale)
    if rule is None:
        rule = RULES.get(base_language(locale), RULES["en"])
    return rule


def categories(locale: str, count: float) -> List[str]:
    """Candidate categories for ``count``, most specific first."""
    key = pluralizer(locale)(abs(count))
    return list(key) if isinstance(key, list) else [key]


def is_plural_node(node: Any) -> bool:
    return isinstance(node, dict) and bool(node) and all(k in CATEGORIES for k in node)
