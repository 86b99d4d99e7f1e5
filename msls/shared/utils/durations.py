"""Human-readable duration parsing ("15s", "1h30m", "168h", "250ms").

Accepts the unit suffixes ns, us (or µs), ms, s, m and h, concatenated in any
order with an optional leading sign. A bare number is read as seconds.
"""

import re
from datetime import timedelta

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_BARE_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Args:
        value: Text such as "15s", "5m", "1h30m" or "300".

    Returns:
        Parsed timedelta.

    Raises:
        ValueError: If value is empty or not a valid duration.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")
    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if _BARE_NUMBER_RE.fullmatch(text):
        return timedelta(seconds=sign * float(text))
    pos = 0
    total = 0.0
    while pos < len(text):
        match = _PART_RE.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        pos = match.end()
    if pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=sign * total)


def format_duration(value: timedelta) -> str:
    """Render a timedelta back into the short form (e.g. 5400s -> "1h30m")."""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{int(hours)}h")
    if minutes:
        parts.append(f"{int(minutes)}m")
    if seconds:
        parts.append(f"{seconds:g}s")
    return sign + "".join(parts)
