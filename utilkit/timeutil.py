"""Time parsing helpers: RFC 3339, epoch values and durations with a day unit."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_OCTAL_DIGITS = re.compile(r"_?[0-7]+(?:_[0-7]+)*")
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"(?:[.,](\d+))?"
    r"(?:(Z)|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")


def _from_epoch(**delta: int) -> datetime:
    return (_EPOCH + timedelta(**delta)).astimezone()


def _to_int64(value: int) -> int:
    if _INT64_MIN <= value <= _INT64_MAX:
        return value
    if 0 <= value <= _UINT64_MAX:
        return value - 2**64
    raise OverflowError(f"value {value} does not fit in 64 bits")


def _parse_prefixed_int(text: str) -> int | None:
    """Parse an integer with an optional base prefix (0x, 0o, 0b, leading 0)."""
    sign = 1
    body = text
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if not body:
        return None
    if body[:2].lower() in ("0x", "0o", "0b"):
        try:
            number = int(body, 0)
        except ValueError:
            return None
    elif body.startswith("0") and len(body) > 1:
        digits = body[1:]
        if not _OCTAL_DIGITS.fullmatch(digits):
            return None
        number = int(digits.replace("_", ""), 8)
    elif re.fullmatch(r"[0-9]+", body):
        number = int(body)
    else:
        return None

    signed = sign * number
    if _INT64_MIN <= signed <= _INT64_MAX:
        return signed
    if text[:1] not in ("+", "-") and number <= _UINT64_MAX:
        return number - 2**64
    return None


def _atoi(text: str) -> int | None:
    if not _DECIMAL.fullmatch(text):
        return None
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        return None
    return number


def rfc3339_to_time(value: Any) -> datetime:
    """Parse the string form of ``value`` as an RFC 3339 timestamp; raises ValueError."""
    text = str(value)
    match = _RFC3339.fullmatch(text)
    if not match:
        raise ValueError(f'cannot parse "{text}" as RFC 3339 time')
    year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
    fraction = match.group(7) or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    if match.group(8):
        tz = timezone.utc
    else:
        offset_hours, offset_minutes = int(match.group(10)), int(match.group(11))
        if offset_hours >= 24 or offset_minutes >= 60:
            raise ValueError(f'time zone offset out of range in "{text}"')
        offset = timedelta(hours=offset_hours, minutes=offset_minutes)
        tz = timezone(-offset if match.group(9) == "-" else offset)
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)


def ms_to_time(value: Any) -> datetime:
    """Convert epoch milliseconds (int or numeric string) to a local datetime.

    Values of other types, and strings that are not integers, give the zero
    time (year 1, UTC).
    """
    if isinstance(value, str):
        parsed = _parse_prefixed_int(value)
        if parsed is None:
            return _ZERO_TIME
        value = parsed
    if isinstance(value, int) and not isinstance(value, bool):
        return _from_epoch(milliseconds=_to_int64(value))
    return _ZERO_TIME


def s_to_time(value: Any) -> datetime:
    """Convert epoch seconds (int or numeric string) to a local datetime.

    Values of other types, and strings that are not integers, give the
    current time.
    """
    if isinstance(value, str):
        parsed = _parse_prefixed_int(value)
        if parsed is None:
            return datetime.now().astimezone()
        value = parsed
    if isinstance(value, int) and not isinstance(value, bool):
        return _from_epoch(seconds=_to_int64(value))
    return datetime.now().astimezone()


def parse_unix_timestamp(s: str) -> datetime:
    """Parse decimal epoch seconds; raises ValueError on invalid input."""
    seconds = _atoi(s)
    if seconds is None:
        raise ValueError(f'parsing "{s}": invalid unix timestamp')
    return _from_epoch(seconds=seconds)


def _parse_go_duration(text: str) -> timedelta:
    original = text
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f'time: invalid duration "{original}"')

    total = 0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise ValueError(f'time: invalid duration "{original}"')
        if not unit:
            raise ValueError(f'time: missing unit in duration "{original}"')
        if unit not in _UNITS:
            raise ValueError(f'time: unknown unit "{unit}" in duration "{original}"')
        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _INT64_MAX + 1:
            raise ValueError(f'time: invalid duration "{original}"')
        position = match.end()

    if total > _INT64_MAX and not (negative and total == _INT64_MAX + 1):
        raise ValueError(f'time: invalid duration "{original}"')
    result = timedelta(microseconds=total // 1000)
    return -result if negative else result


def parse_duration(s: str) -> timedelta:
    """Parse a duration such as ``1h30m``; also accepts a ``d`` (day) unit.

    A bare integer means seconds. Raises ValueError on invalid input.
    """
    s = s.lower()
    if _atoi(s) is not None:
        s += "s"
    if s.endswith("d"):
        s = s[:-1]
        days = _atoi(s)
        if days is not None:
            s = f"{days * 24}h"
    return _parse_go_duration(s)