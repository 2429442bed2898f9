"""Typed values.

An Entity pairs a TypeTag with a native payload and a read-only attribute
mapping. Soft failures are Entities too: kind Error, payload the message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from wat.types.closure import Closure
from wat.types.nil import NilType
from wat.types.type_tags import TypeTag, STRING_TYPES


@dataclass(frozen=True, eq=False)
class Entity:
    kind: TypeTag
    payload: Any
    attrs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Own a private copy so the caller's dict can't change us later
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return (
            self.kind is other.kind
            and type(self.payload) is type(other.payload)
            and self.payload == other.payload
            and dict(self.attrs) == dict(other.attrs)
        )

    __hash__ = None

    @property
    def is_error(self) -> bool:
        return self.kind is TypeTag.Error

    @property
    def message(self) -> Optional[str]:
        """The failure message of an Error entity, None for any other kind."""
        return self.payload if self.is_error else None

    def __repr__(self) -> str:
        if self.attrs:
            return f"<{self.kind} {self.payload!r} {dict(self.attrs)!r}>"
        return f"<{self.kind} {self.payload!r}>"


class EntityList(tuple):
    """Result of the `list` form: an ordered sequence of entities."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"EntityList({list(self)!r})"


def error_entity(message: str) -> Entity:
    return Entity(TypeTag.Error, message)


def native_type_name(value: Any) -> str:
    """Name of a payload's native shape, as used in error messages."""
    if isinstance(value, NilType):
        return "nil"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Entity):
        return f"{value.kind} entity"
    return type(value).__name__


def expected_shape(kind: TypeTag) -> Optional[str]:
    """Native shape a payload of `kind` must have; None for kinds with no payload."""
    if kind in STRING_TYPES:
        return "string"
    if kind is TypeTag.Integer:
        return "integer"
    if kind is TypeTag.Float:
        return "float"
    if kind is TypeTag.Boolean:
        return "boolean"
    return None


def payload_matches(kind: TypeTag, payload: Any) -> bool:
    shape = expected_shape(kind)
    if shape is None:
        return False
    return native_type_name(payload) == shape


def make_entity(kind_name: Any, payload: Any, attrs: Mapping[str, Any] | None = None) -> Entity:
    """Validate and build an entity; never raises, returns an Error entity instead.

    `kind_name` may be a TypeTag or anything whose str() names one.
    """
    kind = kind_name if isinstance(kind_name, TypeTag) else TypeTag.from_name(kind_name)
    if kind is None:
        return error_entity(f"Unknown type: {kind_name}")
    shape = expected_shape(kind)
    if shape is None:
        return error_entity(f"Cannot construct a {kind} entity")
    if not payload_matches(kind, payload):
        return error_entity(
            f"Invalid value for {kind}: expected {shape}, got {native_type_name(payload)}"
        )
    return Entity(kind, payload, attrs or {})


def coerce_native(kind: TypeTag, value: Any) -> Any:
    """Wrap a raw native value as an entity of `kind` when the shapes allow it.

    int -> Integer, int/float -> Float (ints promoted), bool -> Boolean,
    str -> String. Anything else is returned unchanged.
    """
    if isinstance(value, bool):
        return Entity(TypeTag.Boolean, value) if kind is TypeTag.Boolean else value
    if kind is TypeTag.Integer and isinstance(value, int):
        return Entity(TypeTag.Integer, value)
    if kind is TypeTag.Float and isinstance(value, (int, float)):
        return Entity(TypeTag.Float, float(value))
    if kind is TypeTag.String and isinstance(value, str):
        return Entity(TypeTag.String, value)
    return value


TRUE = Entity(TypeTag.Boolean, True)
FALSE = Entity(TypeTag.Boolean, False)


def describe(value: Any) -> str:
    """Short description of any runtime value for error messages."""
    if isinstance(value, Entity):
        if value.is_error:
            return f"Error ({value.payload})"
        return str(value.kind)
    if isinstance(value, Closure):
        return "Lambda"
    if isinstance(value, EntityList):
        return "list"
    return native_type_name(value)
