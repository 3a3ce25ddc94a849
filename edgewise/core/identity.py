"""Identity — normalize an item reference into a positive integer ID."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Attribute / key names probed on structured items, in order.
ID_FIELDS = ("ID", "id", "term_id")


@runtime_checkable
class IdentityResolver(Protocol):
    """Turns an arbitrary item into an identifier.

    Must be total: unresolvable input yields 0, never an exception.
    """

    def __call__(self, item: Any) -> int: ...


def _positive_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else 0
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return int(value)
    return 0


def parse_object_id(item: Any) -> int:
    """Resolve ``item`` to an ID, or 0.

    Accepts a raw positive number (or numeric string), a mapping or object
    carrying one of ``ID_FIELDS``, or a wrapper exposing ``get_id()``.
    """
    if item is None:
        return 0

    raw = _positive_int(item)
    if raw:
        return raw

    if isinstance(item, Mapping):
        for key in ID_FIELDS:
            found = _positive_int(item.get(key))
            if found:
                return found
        return 0

    for attr in ID_FIELDS:
        found = _positive_int(getattr(item, attr, None))
        if found:
            return found

    getter = getattr(item, "get_id", None)
    if callable(getter):
        try:
            return _positive_int(getter())
        except Exception as e:
            logger.debug("get_id() on %r failed: %s", item, e)
            return 0

    return 0


def parse_id_list(ids: Any) -> tuple[int, ...]:
    """Normalize a scalar, a comma separated string or an iterable to IDs.

    Values are made non-negative and de-duplicated, first occurrence wins.
    """
    if ids is None:
        return ()
    if isinstance(ids, str):
        items: list[Any] = [part for part in ids.replace(" ", ",").split(",") if part]
    elif isinstance(ids, (int, float, Mapping)) or not hasattr(ids, "__iter__"):
        items = [ids]
    else:
        items = list(ids)

    seen: dict[int, None] = {}
    for value in items:
        if isinstance(value, str):
            value = value.strip().lstrip("-")
            number = int(value) if value.isdigit() else 0
        elif isinstance(value, bool):
            number = int(value)
        elif isinstance(value, (int, float)):
            number = abs(int(value))
        else:
            number = parse_object_id(value)
        seen.setdefault(number, None)
    return tuple(seen)
