"""
Field type definitions for the intent AST.

This module contains the closed field-type algebra:
primitives, enums, entity references and the Array/List/Optional wrappers.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class StringType(BaseModel):
    kind: Literal["string"] = "string"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "string"


class NumberType(BaseModel):
    kind: Literal["number"] = "number"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "number"


class BooleanType(BaseModel):
    kind: Literal["boolean"] = "boolean"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "boolean"


class DateTimeType(BaseModel):
    kind: Literal["datetime"] = "datetime"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "datetime"


class UuidType(BaseModel):
    kind: Literal["uuid"] = "uuid"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "uuid"


class EmailType(BaseModel):
    kind: Literal["email"] = "email"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "email"


class EnumType(BaseModel):
    """
    Inline enumeration: ``status: active | inactive | suspended``.

    Values keep declaration order. Emptiness and uniqueness are checked by
    the validator, not here, so the parser can report them with a location.
    """

    kind: Literal["enum"] = "enum"
    values: list[str]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return " | ".join(self.values)


class ReferenceType(BaseModel):
    """Bare capitalized identifier: ``author: User``."""

    kind: Literal["reference"] = "reference"
    entity: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.entity


class RefType(BaseModel):
    """Explicit reference: ``author: ref<User>``."""

    kind: Literal["ref"] = "ref"
    entity: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"ref<{self.entity}>"


class ArrayType(BaseModel):
    """Bracketed array: ``tags: [string]``."""

    kind: Literal["array"] = "array"
    element: FieldType

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.element}]"


class ListType(BaseModel):
    """Generic list: ``items: list<OrderItem>``."""

    kind: Literal["list"] = "list"
    element: FieldType

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"list<{self.element}>"


class OptionalType(BaseModel):
    """Trailing question mark: ``nickname: string?``."""

    kind: Literal["optional"] = "optional"
    inner: FieldType

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.inner}?"


FieldType = Annotated[
    StringType
    | NumberType
    | BooleanType
    | DateTimeType
    | UuidType
    | EmailType
    | EnumType
    | ReferenceType
    | RefType
    | ArrayType
    | ListType
    | OptionalType,
    Field(discriminator="kind"),
]

PRIMITIVE_TYPES: dict[str, type[BaseModel]] = {
    "string": StringType,
    "number": NumberType,
    "boolean": BooleanType,
    "datetime": DateTimeType,
    "uuid": UuidType,
    "email": EmailType,
}


ArrayType.model_rebuild()
ListType.model_rebuild()
OptionalType.model_rebuild()
