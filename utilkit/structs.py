"""Walking the fields of dataclass instances."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

FieldCallback = Callable[[Any, dataclasses.Field], Any]


def _is_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def walk(obj: Any, callback: FieldCallback) -> None:
    """Call ``callback(owner, field)`` for every public leaf field of a dataclass instance.

    Fields whose value is itself a dataclass instance are descended into
    rather than reported. Fields whose names start with an underscore are
    skipped. The callback receives the instance that owns the field, so it
    can read or replace the value with ``getattr``/``setattr``. Anything that
    is not a dataclass instance is ignored.
    """
    if not _is_instance(obj):
        return
    for field in dataclasses.fields(obj):
        if field.name.startswith("_"):
            continue
        value = getattr(obj, field.name)
        if _is_instance(value):
            walk(value, callback)
        else:
            callback(obj, field)