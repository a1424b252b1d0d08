from __future__ import annotations

import re
from typing import Any, Callable, List, Mapping, Optional

# %{name} or {{name}}
PLACEHOLDER = re.compile(r"(?:\{\{|%\{)(.*?)(?:\}\}?)")


def placeholders(message: str) -> List[str]:
    return [m.group(1) for m in PLACEHOLDER.finditer(message)]


def interpolate(
    message: str,
    options: Mapping[str, Any],
    render: Optional[Callable[[str, Any], str]] = None,
) -> str:
    """Substitute placeholders in ``message`` from ``options``.

    Absent or ``None`` values become ``[missing %{name} value]``, quoting the
    placeholder as it was written. ``render(name, value)`` can override how a
    present value is turned into text.
    """
    if not PLACEHOLDER.search(message):
        return message

    def _sub(match: re.Match) -> str:
        name = match.group(1)
        value = options.get(name)
        if value is None:
            return f"[missing {match.group(0)} value]"
        if render is not None:
            return render(name, value)
        return str(value)

    # A function replacement keeps "$" and "\" in values literal
    return PLACEHOLDER.sub(_sub, message)
