"""Query parameters that keep their insertion order."""

from __future__ import annotations

from collections.abc import Iterator

from utilkit.rawparams import _encode_pairs, _split_pairs


class OrderedParams:
    """Query parameters like :class:`~utilkit.rawparams.Params`, but encoded in insertion order."""

    def __init__(self) -> None:
        self._params: dict[str, list[str]] = {}

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedParams):
            return NotImplemented
        return list(self._params.items()) == list(other._params.items())

    def __repr__(self) -> str:
        return f"OrderedParams({self._params!r})"

    def is_empty(self) -> bool:
        """Tell whether there are no parameters."""
        return not self._params

    def update(self, key: str, values: list[str]) -> None:
        """Replace the values of ``key`` with a list of values."""
        self._params[key] = list(values)

    def items(self) -> Iterator[tuple[str, list[str]]]:
        """Yield ``(key, values)`` pairs in insertion order."""
        for key, values in list(self._params.items()):
            yield key, list(values)

    def add(self, key: str, *args: str) -> None:
        """Append values to ``key``, creating it at the end if needed."""
        existing = self._params.get(key)
        if existing:
            if args:
                self._params[key] = existing + list(args)
        else:
            self._params[key] = list(args)

    def set(self, key: str, value: str) -> None:
        """Replace the values of ``key`` with a single value."""
        self._params[key] = [value]

    def get(self, key: str) -> str:
        """Return the first value of ``key``, or an empty string."""
        values = self._params.get(key)
        return values[0] if values else ""

    def get_all(self, key: str) -> list[str]:
        """Return all values of ``key``, or an empty list."""
        return list(self._params.get(key) or [])

    def has(self, key: str) -> bool:
        """Tell whether ``key`` is present."""
        return key in self._params

    def delete(self, key: str) -> None:
        """Remove ``key`` and its values if present."""
        self._params.pop(key, None)

    def merge(self, raw: str) -> None:
        """Decode ``raw`` and add its parameters to these."""
        self.decode(raw)

    def encode(self) -> str:
        """Encode as ``key=value`` pairs joined by ``&``, in insertion order."""
        return _encode_pairs(self._params.items())

    def decode(self, raw: str) -> None:
        """Loosely parse ``raw`` (``a=1&b``) and add its parameters."""
        for key, value in _split_pairs(raw):
            self.add(key, value)

    def clone(self) -> OrderedParams:
        """Return an independent copy; keys without values get one empty value."""
        copy = OrderedParams()
        for key, values in self._params.items():
            if values:
                copy.add(key, *values)
            else:
                copy.add(key, "")
        return copy