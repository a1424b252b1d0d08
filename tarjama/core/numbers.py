from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

STORAGE_UNITS = (None, "kb", "mb", "gb", "tb")


def to_number(
    number: float,
    precision: int = 3,
    separator: str = ".",
    delimiter: str = ",",
    strip_insignificant_zeros: bool = False,
) -> str:
    negative = number < 0
    quantum = Decimal(1).scaleb(-precision) if precision > 0 else Decimal(1)
    fixed = Decimal(str(abs(number))).quantize(quantum, rounding=ROUND_HALF_UP)
    integer, _, decimals = f"{fixed:f}".partition(".")

    groups = []
    while integer:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    formatted = delimiter.join(groups)

    if precision > 0:
        formatted += separator + decimals
    if negative and fixed != 0:
        formatted = "-" + formatted

    if strip_insignificant_zeros and precision > 0:
        formatted = re.sub(r"0+$", "", formatted)
        formatted = re.sub(re.escape(separator) + "$", "", formatted)

    return formatted


def to_human_size(
    number: float,
    unit_label: Callable[[Optional[str], float], str],
    fmt: str = "%n %u",
    separator: str = ".",
) -> str:
    """Render a byte count as ``1.5 MB``.

    ``unit_label(unit, size)`` names the unit; ``unit`` is ``None`` for plain
    bytes so the caller can pluralize it by ``size``.
    """
    kb = 1024
    size = float(number)
    iterations = 0
    while size >= kb and iterations < 4:
        size = size / kb
        iterations += 1

    if iterations == 0:
        precision = 0
    else:
        precision = 0 if size == int(size) else 1
    unit = unit_label(STORAGE_UNITS[iterations], size)

    rendered = to_number(size, precision=precision, separator=separator, delimiter="")
    return fmt.replace("%u", unit).replace("%n", rendered)
