from __future__ import annotations

import re
from typing import Any, Dict, Iterable

GROUP_TYPES = {"group", "supergroup"}

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$")


def coerce_value(raw: str) -> Any:
    if _INT_RE.match(raw):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    return raw


def parse_options(tokens: Iterable[str]) -> Dict[str, Any]:
    """``["count=3", "name=Sara"]`` -> ``{"count": 3, "name": "Sara"}``.

    Tokens without ``=`` are ignored.
    """
    options: Dict[str, Any] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            continue
        options[key] = coerce_value(value)
    return options
