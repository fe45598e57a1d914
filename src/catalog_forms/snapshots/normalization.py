"""Value normalization rules used for dirty-state comparison.

Every function here is total: a value of an unexpected shape is returned
unchanged instead of raising, so a schema drift never breaks the dirty
check of a live form.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_EMPTY_MARKUP = re.compile(
    r"^(?:<p>(?:\s|&nbsp;|<br\s*/?>)*</p>)+$",
    re.IGNORECASE,
)


def read_field(entity: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an attribute object; missing is ``None``."""

    if entity is None:
        return None
    if isinstance(entity, Mapping):
        return entity.get(name)
    return getattr(entity, name, None)


def normalize_string(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_rich_text(value: Any) -> Any:
    """Trim and collapse visually empty editor markup such as ``<p><br></p>``."""

    normalized = normalize_string(value)
    if isinstance(normalized, str) and _EMPTY_MARKUP.match(normalized):
        return ""
    return normalized


def normalize_string_list(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        return value
    items = [normalize_string(item) for item in value]
    return tuple(sorted(items, key=_sort_key))


def normalize_boolean(value: Any) -> bool:
    return bool(value)


def _sort_key(value: Any) -> tuple[str, str]:
    return (type(value).__name__, str(value))


__all__ = [
    "normalize_boolean",
    "normalize_rich_text",
    "normalize_string",
    "normalize_string_list",
    "read_field",
]
