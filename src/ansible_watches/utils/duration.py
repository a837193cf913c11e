from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction

from ..errors import DurationParseError

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_SEGMENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?(ns|us|µs|μs|ms|s|m|h)")

_MAX_NANOSECONDS = 2**63 - 1


def parse_duration(value: str) -> timedelta:
    """Parse a duration string such as "300ms", "-1.5h" or "2h45m".

    Syntax: an optional sign followed by one or more decimal numbers,
    each with a unit suffix (ns, us, µs, ms, s, m, h).
    A bare "0" is also accepted. Sub-microsecond precision is truncated.
    """
    s = value
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]

    if s == "0":
        return timedelta(0)
    if not s:
        raise DurationParseError(value, f"invalid duration '{value}'")

    total = Fraction(0)
    pos = 0
    while pos < len(s):
        match = _SEGMENT.match(s, pos)
        if match is None:
            raise DurationParseError(value, f"invalid duration '{value}'")
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise DurationParseError(value, f"invalid duration '{value}'")
        scale = _UNIT_NANOSECONDS[unit]
        total += int(whole or 0) * scale
        if frac:
            total += Fraction(int(frac), 10 ** len(frac)) * scale
        pos = match.end()

    nanoseconds = int(total)
    if nanoseconds > _MAX_NANOSECONDS:
        raise DurationParseError(value, f"invalid duration '{value}': out of range")

    microseconds = nanoseconds // 1_000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way durations are written in watches.yaml ("1h30m0s")."""
    total_us = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    if total_us < 1_000_000:
        if total_us % 1_000 == 0:
            return f"{sign}{total_us // 1_000}ms"
        return f"{sign}{total_us}µs"

    hours, rem = divmod(total_us, 3600 * 1_000_000)
    minutes, rem = divmod(rem, 60 * 1_000_000)
    seconds, micros = divmod(rem, 1_000_000)

    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    if micros:
        out += f"{seconds}.{micros:06d}".rstrip("0") + "s"
    else:
        out += f"{seconds}s"
    return out
