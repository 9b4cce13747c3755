"""Stand-ins for the two schema dialects.

Definition-tree values are objects carrying a ``_def`` record and a ``parse``
method; description-object values expose ``describe()``. The builders below
mirror the shapes those libraries produce so converters can be tested
without either library installed.

Example
-------
>>> from tests.helpers.dialects import definition
>>> schema = definition.object_({"id": definition.string(definition.check("uuid"))})
>>> schema._def["typeName"]
'ZodObject'
"""

from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = [
    "DefinitionSchema",
    "DescribedSchema",
    "definition",
    "description",
]


class DefinitionSchema:
    """Definition-tree value: ``_def`` record plus a ``parse`` method."""

    def __init__(self, type_name: str, **members: object) -> None:
        self._def: dict[str, object] = {"typeName": type_name, **members}

    def parse(self, value: object) -> object:
        return value

    def describe(self, text: str) -> DefinitionSchema:
        """Return a copy carrying ``text`` as its description."""
        clone = DefinitionSchema.__new__(DefinitionSchema)
        clone._def = {**self._def, "description": text}
        return clone


class AttributeDefinitionSchema:
    """Definition-tree value whose ``_def`` is an attribute object."""

    def __init__(self, type_name: str, **members: object) -> None:
        self._def = SimpleNamespace(typeName=type_name, **members)

    def parse(self, value: object) -> object:
        return value


class DescribedSchema:
    """Description-object value returning a fresh copy of its description."""

    def __init__(self, description: Mapping[str, object]) -> None:
        self._description = dict(description)
        self.describe_calls = 0

    def describe(self) -> dict[str, object]:
        self.describe_calls += 1
        return copy.deepcopy(self._description)


class _DefinitionBuilders:
    """Builders named after the definition-tree library's constructors."""

    attribute_backed = staticmethod(AttributeDefinitionSchema)

    @staticmethod
    def check(kind: str, value: object = None, **extra: object) -> dict[str, object]:
        record: dict[str, object] = {"kind": kind, **extra}
        if value is not None:
            record["value"] = value
        return record

    @staticmethod
    def primitive(type_name: str) -> DefinitionSchema:
        return DefinitionSchema(type_name)

    @staticmethod
    def string(*checks: Mapping[str, object]) -> DefinitionSchema:
        return DefinitionSchema("ZodString", checks=list(checks))

    @staticmethod
    def number(*checks: Mapping[str, object]) -> DefinitionSchema:
        return DefinitionSchema("ZodNumber", checks=list(checks))

    @staticmethod
    def boolean() -> DefinitionSchema:
        return DefinitionSchema("ZodBoolean")

    @staticmethod
    def literal(value: object) -> DefinitionSchema:
        return DefinitionSchema("ZodLiteral", value=value)

    @staticmethod
    def enum(values: Sequence[str]) -> DefinitionSchema:
        return DefinitionSchema("ZodEnum", values=list(values))

    @staticmethod
    def native_enum(values: object) -> DefinitionSchema:
        return DefinitionSchema("ZodNativeEnum", values=values)

    @staticmethod
    def object_(
        shape: Mapping[str, object],
        *,
        unknown_keys: str = "strip",
        catchall: object = None,
    ) -> DefinitionSchema:
        fields = dict(shape)
        return DefinitionSchema(
            "ZodObject",
            shape=lambda: fields,
            unknownKeys=unknown_keys,
            catchall=catchall if catchall is not None else DefinitionSchema("ZodNever"),
        )

    @staticmethod
    def array(
        item: object,
        *,
        min_length: int | None = None,
        max_length: int | None = None,
        exact_length: int | None = None,
    ) -> DefinitionSchema:
        def bound(value: int | None) -> dict[str, int] | None:
            return None if value is None else {"value": value}

        return DefinitionSchema(
            "ZodArray",
            type=item,
            minLength=bound(min_length),
            maxLength=bound(max_length),
            exactLength=bound(exact_length),
        )

    @staticmethod
    def tuple_(items: Sequence[object], rest: object = None) -> DefinitionSchema:
        return DefinitionSchema("ZodTuple", items=list(items), rest=rest)

    @staticmethod
    def union(*options: object) -> DefinitionSchema:
        return DefinitionSchema("ZodUnion", options=list(options))

    @staticmethod
    def discriminated_union(discriminator: str, *options: object) -> DefinitionSchema:
        return DefinitionSchema(
            "ZodDiscriminatedUnion", discriminator=discriminator, options=list(options)
        )

    @staticmethod
    def intersection(left: object, right: object) -> DefinitionSchema:
        return DefinitionSchema("ZodIntersection", left=left, right=right)

    @staticmethod
    def record(value_type: object = None) -> DefinitionSchema:
        return DefinitionSchema(
            "ZodRecord", keyType=DefinitionSchema("ZodString"), valueType=value_type
        )

    @staticmethod
    def set_(value_type: object) -> DefinitionSchema:
        return DefinitionSchema("ZodSet", valueType=value_type)

    @staticmethod
    def optional(inner: object) -> DefinitionSchema:
        return DefinitionSchema("ZodOptional", innerType=inner)

    @staticmethod
    def nullable(inner: object) -> DefinitionSchema:
        return DefinitionSchema("ZodNullable", innerType=inner)

    @staticmethod
    def default(inner: object, value: object) -> DefinitionSchema:
        return DefinitionSchema("ZodDefault", innerType=inner, defaultValue=lambda: value)

    @staticmethod
    def readonly(inner: object) -> DefinitionSchema:
        return DefinitionSchema("ZodReadonly", innerType=inner)

    @staticmethod
    def catch(inner: object) -> DefinitionSchema:
        return DefinitionSchema("ZodCatch", innerType=inner, catchValue=lambda: None)

    @staticmethod
    def branded(inner: object) -> DefinitionSchema:
        return DefinitionSchema("ZodBranded", type=inner)

    @staticmethod
    def pipeline(source: object, target: object) -> DefinitionSchema:
        return DefinitionSchema("ZodPipeline", **{"in": source, "out": target})

    @staticmethod
    def effects(inner: object) -> DefinitionSchema:
        return DefinitionSchema(
            "ZodEffects", schema=inner, effect={"type": "transform", "transform": str}
        )


class _DescriptionBuilders:
    """Builders for ``describe()`` output records."""

    @staticmethod
    def rule(name: str, **args: object) -> dict[str, object]:
        record: dict[str, object] = {"name": name}
        if args:
            record["args"] = args
        return record

    @staticmethod
    def node(
        type_: str,
        *rules: Mapping[str, object],
        flags: Mapping[str, object] | None = None,
        **members: object,
    ) -> dict[str, object]:
        record: dict[str, object] = {"type": type_}
        if flags:
            record["flags"] = dict(flags)
        if rules:
            record["rules"] = list(rules)
        record.update(members)
        return record

    @staticmethod
    def required(record: Mapping[str, object]) -> dict[str, object]:
        flags = dict(record.get("flags") or {})  # type: ignore[call-overload]
        flags["presence"] = "required"
        return {**record, "flags": flags}

    schema = staticmethod(DescribedSchema)


definition = _DefinitionBuilders()
description = _DescriptionBuilders()
