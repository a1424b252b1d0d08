"""Locale-aware date helpers.

Month/weekday names, long date formats, calendar phrases and relative
time come from ``locales/dates/<code>.json``. Date arithmetic and the
timezone database are the standard library's (``zoneinfo`` with the
``tzdata`` package as a fallback source).
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timedelta, timezone
from importlib import resources
from typing import Any, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from .errors import LocaleLoadError, UnknownTimezoneError
from .plural import base_language

log = logging.getLogger(__name__)

_DATA: Dict[str, Dict[str, Any]] = {}

_MACRO_RE = re.compile(r"(\[[^\]]*\])|(LTS|LT|LLLL|LLL|LL|L)")
_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|dd|HH|H|hh|h|mm|m|ss|s|A|a|Z"
)

# Thresholds for humanize(), same as moment's defaults
THRESHOLDS = {"ss": 44, "s": 45, "m": 45, "h": 22, "d": 26, "M": 11}


def load_date_data() -> List[str]:
    """(Re)load every packaged ``dates/<code>.json``; returns the codes."""
    _DATA.clear()
    folder = resources.files("tarjama.locales").joinpath("dates")
    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if not entry.name.endswith(".json"):
            continue
        code = entry.name[:-len(".json")]
        try:
            _DATA[code] = json.loads(entry.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("%s", LocaleLoadError(code, f"date data: {e}"))
    return sorted(_DATA)


def locale_data(locale: str) -> Dict[str, Any]:
    if not _DATA:
        load_date_data()
    for code in (locale, base_language(locale), "en"):
        if code in _DATA:
            return _DATA[code]
    raise LocaleLoadError(locale, "no date data available")


def months(locale: str) -> List[str]:
    return list(locale_data(locale)["months"])


def weekdays(locale: str) -> List[str]:
    """Weekday names, Sunday first."""
    return list(locale_data(locale)["weekdays"])


def weekdays_min(locale: str) -> List[str]:
    return list(locale_data(locale)["weekdays_min"])


def postformat(text: str, locale: str) -> str:
    data = locale_data(locale)
    digits = data.get("digits")
    if digits:
        text = re.sub(r"\d", lambda m: digits.get(m.group(0), m.group(0)), text)
    comma = data.get("comma")
    if comma:
        text = text.replace(",", comma)
    return text


def _expand_macros(fmt: str, long_formats: Mapping[str, str]) -> str:
    def _sub(m: re.Match) -> str:
        if m.group(1):
            return m.group(1)
        return long_formats.get(m.group(2), m.group(2))

    for _ in range(5):
        expanded = _MACRO_RE.sub(_sub, fmt)
        if expanded == fmt:
            break
        fmt = expanded
    return fmt


def _offset(dt: datetime) -> str:
    delta = dt.utcoffset() or timedelta(0)
    minutes = int(delta.total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def format_datetime(dt: datetime, fmt: str, locale: str) -> str:
    data = locale_data(locale)
    fmt = _expand_macros(fmt, data["long_date_format"])
    day = (dt.weekday() + 1) % 7
    hour12 = dt.hour % 12 or 12
    meridiem = data["meridiem"][0 if dt.hour < 12 else 1]

    values = {
        "YYYY": f"{dt.year:04d}",
        "YY": f"{dt.year % 100:02d}",
        "MMMM": data["months"][dt.month - 1],
        "MMM": data["months_short"][dt.month - 1],
        "MM": f"{dt.month:02d}",
        "M": str(dt.month),
        "DD": f"{dt.day:02d}",
        "D": str(dt.day),
        "dddd": data["weekdays"][day],
        "ddd": data["weekdays_short"][day],
        "dd": data["weekdays_min"][day],
        "HH": f"{dt.hour:02d}",
        "H": str(dt.hour),
        "hh": f"{hour12:02d}",
        "h": str(hour12),
        "mm": f"{dt.minute:02d}",
        "m": str(dt.minute),
        "ss": f"{dt.second:02d}",
        "s": str(dt.second),
        "A": meridiem,
        "a": meridiem.lower(),
    }

    def _sub(m: re.Match) -> str:
        token = m.group(0)
        if token.startswith("["):
            return token[1:-1]
        if token == "Z":
            return _offset(dt)
        return values[token]

    return postformat(_TOKEN_RE.sub(_sub, fmt), locale)


def _align(dt: datetime, reference: datetime) -> tuple[datetime, datetime]:
    # A naive side is read as wall time in the other side's zone
    if dt.tzinfo is None and reference.tzinfo is not None:
        return dt.replace(tzinfo=reference.tzinfo), reference
    if dt.tzinfo is not None and reference.tzinfo is None:
        return dt, reference.replace(tzinfo=dt.tzinfo)
    if dt.tzinfo is not None:
        return dt.astimezone(reference.tzinfo), reference
    return dt, reference


def calendar_key(dt: datetime, reference: datetime) -> str:
    dt, reference = _align(dt, reference)
    start_of_day = reference.replace(hour=0, minute=0, second=0, microsecond=0)
    diff = (dt - start_of_day).total_seconds() / 86400
    if diff < -6:
        return "sameElse"
    if diff < -1:
        return "lastWeek"
    if diff < 0:
        return "lastDay"
    if diff < 1:
        return "sameDay"
    if diff < 2:
        return "nextDay"
    if diff < 7:
        return "nextWeek"
    return "sameElse"


def calendar(
    dt: datetime,
    reference: datetime,
    locale: str,
    formats: Optional[Mapping[str, str]] = None,
) -> str:
    """Render ``dt`` relative to ``reference`` ("Today at 2:30 PM")."""
    dt, reference = _align(dt, reference)
    key = calendar_key(dt, reference)
    fmt = (formats or {}).get(key) or locale_data(locale)["calendar"][key]
    return format_datetime(dt, fmt, locale)


def _round(x: float) -> int:
    return int(math.floor(x + 0.5))


def _form_index(n: int) -> int:
    if n == 0:
        return 0
    if n == 1:
        return 1
    if n == 2:
        return 2
    if 3 <= n % 100 <= 10:
        return 3
    if n % 100 >= 11:
        return 4
    return 5


def _relative_unit(entry: Any, number: int, without_suffix: bool) -> str:
    if isinstance(entry, list):
        form = entry[_form_index(number)]
        if isinstance(form, list):
            form = form[0 if without_suffix else 1]
        entry = form
    return entry.replace("%d", str(number), 1)


def humanize(delta: timedelta, locale: str, with_suffix: bool = False) -> str:
    """Describe a duration ("3 hours", "in a day", "منذ ساعتين")."""
    total = abs(delta.total_seconds())
    seconds = _round(total)
    minutes = _round(total / 60)
    hours = _round(total / 3600)
    days_f = total / 86400
    days = _round(days_f)
    months_f = days_f * 4800 / 146097
    month_count = _round(months_f)
    years = _round(months_f / 12)

    if seconds <= THRESHOLDS["ss"]:
        key, number = "s", seconds
    elif seconds < THRESHOLDS["s"]:
        key, number = "ss", seconds
    elif minutes <= 1:
        key, number = "m", 1
    elif minutes < THRESHOLDS["m"]:
        key, number = "mm", minutes
    elif hours <= 1:
        key, number = "h", 1
    elif hours < THRESHOLDS["h"]:
        key, number = "hh", hours
    elif days <= 1:
        key, number = "d", 1
    elif days < THRESHOLDS["d"]:
        key, number = "dd", days
    elif month_count <= 1:
        key, number = "M", 1
    elif month_count < THRESHOLDS["M"]:
        key, number = "MM", month_count
    elif years <= 1:
        key, number = "y", 1
    else:
        key, number = "yy", years

    table = locale_data(locale)["relative_time"]
    entry = table.get(key) or table[key[0]]
    text = _relative_unit(entry, number, not with_suffix)
    if with_suffix:
        pattern = table["future"] if delta.total_seconds() > 0 else table["past"]
        text = pattern.replace("%s", text, 1)
    return postformat(text, locale)


def timezone_names() -> List[str]:
    return sorted(available_timezones())


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise UnknownTimezoneError(name) from None


def format_timezone(name: str) -> List[str]:
    return name.replace("_", " ", 1).replace("Etc/", "", 1).split("/")


def zone_without_prefix(name: str) -> str:
    parts = format_timezone(name)
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return parts[0]


def is_equal_zones(a: str, b: str, at: Optional[datetime] = None) -> bool:
    """Do both zones have the same UTC offset at ``at`` (default: now)?"""
    at = at or datetime.now(timezone.utc)
    if at.tzinfo is None:
        at = at.replace(tzinfo=timezone.utc)
    return at.astimezone(get_zone(a)).utcoffset() == at.astimezone(get_zone(b)).utcoffset()


def timezone_display_name(name: str, locale: str) -> str:
    names = locale_data(locale).get("timezones", {})
    return names.get(name) or zone_without_prefix(name)


def format_with_zone(dt: datetime, zone: str, fmt: str, locale: str) -> str:
    local = dt.astimezone(get_zone(zone))
    return f"{format_datetime(local, fmt, locale)} ({timezone_display_name(zone, locale)})"
