"""Comparison projections and the immutable snapshots they produce."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Iterator, Mapping, Union

from .normalization import (
    normalize_boolean,
    normalize_rich_text,
    normalize_string,
    normalize_string_list,
    read_field,
)


class FieldKind(StrEnum):
    """How a declared field is normalized before comparison."""

    STRING = "string"
    RICH_TEXT = "rich_text"
    STRING_LIST = "string_list"
    BOOLEAN = "boolean"
    COLLECTION = "collection"
    PASSTHROUGH = "passthrough"


_SCALAR_RULES = {
    FieldKind.STRING: normalize_string,
    FieldKind.RICH_TEXT: normalize_rich_text,
    FieldKind.STRING_LIST: normalize_string_list,
    FieldKind.BOOLEAN: normalize_boolean,
}


@dataclass(slots=True, frozen=True)
class FormSnapshot:
    """Normalized, comparison-only projection of a form entity."""

    values: tuple[tuple[str, Any], ...]

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.values:
            if key == name:
                return value
        return default

    def as_dict(self) -> dict[str, Any]:
        return dict(self.values)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.values)


@dataclass(slots=True, frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    items: "Projection | None" = None


@dataclass(slots=True, frozen=True)
class Projection:
    """Ordered set of declared fields that participate in dirty checks.

    Fields of an entity that are not declared here are ignored. A nested
    :class:`Projection` declares a collection of sub-entities whose order is
    significant.
    """

    fields: tuple[FieldSpec, ...]

    @classmethod
    def of(cls, **declared: Union[FieldKind, "Projection"]) -> "Projection":
        specs = []
        for name, kind in declared.items():
            if isinstance(kind, Projection):
                specs.append(FieldSpec(name, FieldKind.COLLECTION, kind))
            else:
                specs.append(FieldSpec(name, FieldKind(kind)))
        return cls(tuple(specs))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def normalize(self, entity: Any) -> FormSnapshot:
        return FormSnapshot(
            tuple((spec.name, _normalize_field(spec, read_field(entity, spec.name))) for spec in self.fields)
        )


def _normalize_field(spec: FieldSpec, value: Any) -> Any:
    if spec.kind is FieldKind.COLLECTION and spec.items is not None:
        return _normalize_collection(spec.items, value)
    rule = _SCALAR_RULES.get(spec.kind)
    if rule is None:
        return value
    return rule(value)


def _normalize_collection(items: Projection, value: Any) -> Any:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        return value
    return tuple(
        items.normalize(item) if _is_entity(item) else item
        for item in value
    )


def _is_entity(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return hasattr(value, "__dict__") or hasattr(value, "__slots__")


__all__ = ["FieldKind", "FieldSpec", "FormSnapshot", "Projection"]
