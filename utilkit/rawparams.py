"""Loosely parsed query parameters and burp-style URL encoding."""

from __future__ import annotations

import io
import re
from collections.abc import Iterable, Iterator, Mapping

# When true, ';' also separates parameters while decoding.
allow_legacy_separator = False

MUST_ESCAPE_CHARSET = ("?", "#", "@", ";", "&", ",", "[", "]", "^")
RFC_ESCAPE_CHARSET = (
    "!", "*", "'", "(", ")", ";", ":", "@", "&", "=",
    "+", "$", ",", "/", "?", "%", "#", "[", "]",
)


def _split_pairs(raw: str) -> Iterator[tuple[str, str]]:
    separators = "&;" if allow_legacy_separator else "&"
    segments = re.split(f"[{re.escape(separators)}]", raw)
    if segments and segments[-1] == "":
        segments.pop()
    for segment in segments:
        key, _, value = segment.partition("=")
        yield key, value


def _encode_pairs(pairs: Iterable[tuple[str, list[str]]]) -> str:
    buffer = io.StringIO()
    for key, values in pairs:
        escaped_key = param_encode(key)
        for value in values:
            if buffer.tell():
                buffer.write("&")
            buffer.write(escaped_key)
            escaped = param_encode(value)
            if escaped:
                buffer.write("=")
                buffer.write(escaped)
    return buffer.getvalue()


class Params(dict):
    """Query parameters mapping each key to its list of values; encodes sorted by key."""

    def add(self, key: str, *args: str) -> None:
        """Append values to ``key``, creating it if needed."""
        if key in self:
            self[key].extend(args)
        else:
            self[key] = list(args)

    def set(self, key: str, value: str) -> None:
        """Replace the values of ``key`` with a single value."""
        self[key] = [value]

    def get(self, key: str) -> str:  # type: ignore[override]
        """Return the first value of ``key``, or an empty string."""
        values = super().get(key)
        return values[0] if values else ""

    def has(self, key: str) -> bool:
        """Tell whether ``key`` is present."""
        return key in self

    def delete(self, key: str) -> None:
        """Remove ``key`` and its values if present."""
        self.pop(key, None)

    def merge(self, other: Mapping[str, list[str]] | None) -> None:
        """Append every value of ``other`` to this set."""
        if other is None:
            return
        for key, values in other.items():
            self.add(key, *values)

    def encode(self) -> str:
        """Encode as ``key=value`` pairs joined by ``&``, sorted by key."""
        return _encode_pairs((key, self[key]) for key in sorted(self))

    def decode(self, raw: str) -> None:
        """Loosely parse ``raw`` (``a=1&b``) and add its parameters."""
        if not raw:
            return
        for key, value in _split_pairs(raw):
            self.add(key, value)


def param_encode(data: str) -> str:
    """Encode whitespace, control and non-ASCII characters, leaving existing escapes alone."""
    return url_encode_with_escapes(data)


def _ascii_hex(char: str) -> str:
    return f"{ord(char):02X}"


def _utf8_hex(char: str) -> str:
    try:
        raw = char.encode("utf-8")
    except UnicodeEncodeError:
        raw = "\ufffd".encode("utf-8")
    return "%".join(f"{byte:02x}" for byte in raw)


def url_encode_with_escapes(data: str, *args: str) -> str:
    """URL-encode ``data``, also percent-encoding the printable ASCII characters given."""
    must_escape = set(args)
    out = io.StringIO()
    for char in data:
        code = ord(char)
        if code < 20:
            out.write("%" + _ascii_hex(char))
        elif char == " ":
            out.write("+")
        elif code < 127:
            out.write("%" + _ascii_hex(char) if char in must_escape else char)
        elif code == 127:
            out.write("%" + _ascii_hex(char))
        elif code > 128:
            out.write("%" + _utf8_hex(char))
    return out.getvalue()


def percent_encoding(data: str) -> str:
    """Percent-encode every character of ``data``."""
    return "".join(
        "%" + (_ascii_hex(char) if ord(char) <= 127 else _utf8_hex(char)) for char in data
    )


def get_params(query: Mapping[str, list[str]] | None) -> Params | None:
    """Build Params from a mapping of keys to value lists; None stays None."""
    if query is None:
        return None
    return Params({key: list(values) for key, values in query.items()})