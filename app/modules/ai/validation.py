"""Schema contracts for flow inputs and outputs.

Flow records are pydantic models. Python code uses snake_case attribute
names; the wire format (HTTP bodies, model JSON) uses the camelCase aliases.
``describe`` publishes a model's fields; ``validate`` gates candidate values.
"""

from __future__ import annotations

import enum
import types
from typing import Any, Literal, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from app.modules.ai.errors import SchemaMismatch

T = TypeVar("T", bound=BaseModel)


class FlowRecord(BaseModel):
    """Immutable record exchanged with a flow."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class FieldKind(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"


class FieldSpec(BaseModel):
    name: str
    alias: str
    kind: FieldKind
    required: bool
    description: str | None = None


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def field_kind(annotation: Any) -> FieldKind:
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)
    if origin is Literal:
        return FieldKind.ENUM
    if origin in (list, tuple, set, frozenset):
        return FieldKind.ARRAY
    if origin is dict:
        return FieldKind.OBJECT
    if isinstance(annotation, type):
        if issubclass(annotation, enum.Enum):
            return FieldKind.ENUM
        if issubclass(annotation, bool):
            return FieldKind.BOOLEAN
        if issubclass(annotation, (int, float)):
            return FieldKind.NUMBER
        if issubclass(annotation, (list, tuple)):
            return FieldKind.ARRAY
        if issubclass(annotation, (BaseModel, dict)):
            return FieldKind.OBJECT
    # str, UUID, URLs and anything else serialised as text
    return FieldKind.STRING


def describe(schema: type[BaseModel]) -> list[FieldSpec]:
    """List the fields of ``schema`` in declaration order."""
    specs: list[FieldSpec] = []
    for name, info in schema.model_fields.items():
        specs.append(
            FieldSpec(
                name=name,
                alias=info.alias or name,
                kind=field_kind(info.annotation),
                required=info.is_required(),
                description=info.description,
            )
        )
    return specs


def validate(schema: type[T], value: Any) -> T:
    """Return ``value`` as a ``schema`` instance or raise ``SchemaMismatch``."""
    if isinstance(value, schema):
        return value
    try:
        return schema.model_validate(value)
    except ValidationError as e:
        fields = sorted(
            {".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors()}
        )
        raise SchemaMismatch(
            f"{schema.__name__} is missing or has invalid field(s): {', '.join(fields)}",
            fields=fields,
        ) from e
