"""String helpers: extraction, prefix and suffix checks, splitting and inspection."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any


def between(value: str, a: str, b: str) -> str:
    """Return the text between ``a`` and ``b``; raises ValueError if either is missing."""
    return before(after(value, a), b)


def before(value: str, a: str) -> str:
    """Return the text before the first ``a``; raises ValueError if it is missing."""
    position = value.find(a)
    if position == -1:
        raise ValueError(f"{a} not found in {value}")
    return value[:position]


def after(value: str, a: str) -> str:
    """Return the text after the first ``a``; raises ValueError if it is missing or ends the text."""
    position = value.find(a)
    if position == -1:
        raise ValueError(f"{a} not found in {value}")
    adjusted = position + len(a)
    if adjusted >= len(value):
        raise ValueError(f"After: {value} is not long enough to contain {a}")
    return value[adjusted:]


def has_prefix_any(s: str, *args: str) -> bool:
    """Tell whether ``s`` starts with any of the prefixes."""
    return any(s.startswith(prefix) for prefix in args)


def has_prefix_any_i(s: str, *args: str) -> bool:
    """Case-insensitive :func:`has_prefix_any`."""
    return any(has_prefix_i(s, prefix) for prefix in args)


def has_suffix_any(s: str, *args: str) -> bool:
    """Tell whether ``s`` ends with any of the suffixes."""
    return any(s.endswith(suffix) for suffix in args)


def trim_prefix_any(s: str, *args: str) -> str:
    """Remove each prefix in turn, in the order given."""
    for prefix in args:
        s = s.removeprefix(prefix)
    return s


def trim_suffix_any(s: str, *args: str) -> str:
    """Remove each suffix in turn, in the order given."""
    for suffix in args:
        s = s.removesuffix(suffix)
    return s


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def join(elems: Iterable[Any], sep: str) -> str:
    """Join values of any type with ``sep``."""
    return sep.join(_format_value(elem) for elem in elems)


def has_prefix_i(s: str, prefix: str) -> bool:
    """Case-insensitive prefix check."""
    return s.lower().startswith(prefix.lower())


def has_suffix_i(s: str, suffix: str) -> bool:
    """Case-insensitive suffix check."""
    return s.lower().endswith(suffix.lower())


def reverse(s: str) -> str:
    """Return the characters of ``s`` in reverse order."""
    return s[::-1]


def contains_any(s: str, *args: str) -> bool:
    """Tell whether ``s`` contains any of the substrings."""
    return any(sub in s for sub in args)


def contains_any_i(s: str, *args: str) -> bool:
    """Case-insensitive :func:`contains_any`."""
    lowered = s.lower()
    return any(sub.lower() in lowered for sub in args)


def equal_fold_any(s: str, *args: str) -> bool:
    """Tell whether ``s`` equals any candidate, ignoring case."""
    folded = s.casefold()
    return any(folded == candidate.casefold() for candidate in args)


def index_at(s: str, sep: str, n: int) -> int:
    """Return the index of ``sep`` searching from position ``n``, or -1."""
    if not 0 <= n <= len(s):
        raise IndexError(f"start position {n} out of range for string of length {len(s)}")
    return s.find(sep, n)


def split_any(s: str, *args: str) -> list[str]:
    """Split on any character found in the separators, dropping empty fields."""
    characters = "".join(args)
    if not characters:
        return [s] if s else []
    pattern = "[" + "".join(re.escape(ch) for ch in characters) + "]"
    return [field for field in re.split(pattern, s) if field]


def slide_with_length(s: str, length: int) -> Iterator[str]:
    """Yield every window of ``length`` characters; the final short tail is yielded too."""
    if len(s) < length:
        yield s
        return
    for start in range(len(s)):
        if start + length <= len(s):
            yield s[start : start + length]
        else:
            yield s[start:]
            return


def replace_all(s: str, new: str, *args: str) -> str:
    """Replace every occurrence of each old string in turn with ``new``."""
    for old in args:
        s = s.replace(old, new)
    return s


@dataclass(frozen=True)
class LongestSequence:
    """A repeated sequence and how many times it occurs."""

    sequence: str
    count: int


def longest_repeating_sequence(s: str) -> LongestSequence:
    """Find the longest repeating non-overlapping sequence in ``s``."""
    n = len(s)
    best_length = 0
    end = 0
    previous = [0] * (n + 1)
    for i in range(1, n + 1):
        current = [0] * (n + 1)
        for j in range(i + 1, n + 1):
            if s[i - 1] == s[j - 1] and previous[j - 1] < j - i:
                current[j] = previous[j - 1] + 1
                if current[j] > best_length:
                    best_length = current[j]
                    end = max(end, i)
        previous = current
    sequence = s[end - best_length : end] if best_length > 0 else ""
    count = s.count(sequence) if sequence else 0
    return LongestSequence(sequence=sequence, count=count)


def is_printable(s: str) -> bool:
    """Tell whether ``s`` consists only of printable characters."""
    return s.isprintable()


def is_ctrl_c(s: str) -> bool:
    """Tell whether ``s`` is the single CTRL+C character."""
    return s == "\x03"


def truncate(data: str, max_size: int) -> str:
    """Cut ``data`` to ``max_size`` characters; a negative size leaves it unchanged."""
    if 0 <= max_size < len(data):
        return data[:max_size]
    return data


def index_any(s: str, *args: str) -> tuple[int, str]:
    """Return the index and separator of the first separator (in argument order) found in ``s``."""
    for sep in args:
        position = s.find(sep)
        if position >= 0:
            return position, sep
    return -1, ""