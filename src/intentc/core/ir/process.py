"""
Process model types for the intent AST.

An action's ``process:`` section is an ordered list of steps:

    derive user = select User where email == input.email
    derive valid = compute verify_hash(input.password, user.password_hash)
    mutate User where id == input.id:
        name = input.name
    delete Session where user_id == user.id

A ``mutate`` without a predicate creates a record; with one it updates.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .expressions import LiteralValue, format_literal
from .location import SourceLocation


class CompareOp(str, Enum):
    """Operators allowed in a ``where`` predicate."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS = "<"
    GREATER = ">"


# =============================================================================
# Field references (predicate operands)
# =============================================================================


class InputFieldRef(BaseModel):
    """``input.email``, or a bare column name such as ``email``."""

    kind: Literal["input_field"] = "input_field"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"input.{self.name}"


class DerivedFieldRef(BaseModel):
    """A field of a derived value: ``user.id``."""

    kind: Literal["derived_field"] = "derived_field"
    name: str
    field: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}.{self.field}"


class LiteralRef(BaseModel):
    kind: Literal["literal"] = "literal"
    value: LiteralValue

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return format_literal(self.value)


FieldReference = Annotated[
    InputFieldRef | DerivedFieldRef | LiteralRef,
    Field(discriminator="kind"),
]


class Predicate(BaseModel):
    """``<field> <op> <value>`` as used by select, mutate and delete."""

    field: FieldReference
    operator: CompareOp
    value: FieldReference

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.field} {self.operator.value} {self.value}"


# =============================================================================
# Derive values
# =============================================================================


class DeriveLiteral(BaseModel):
    kind: Literal["literal"] = "literal"
    value: LiteralValue

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return format_literal(self.value)


class DeriveFieldAccess(BaseModel):
    """Dotted path: ``input.password`` or ``user.email``."""

    kind: Literal["field_access"] = "field_access"
    path: list[str]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return ".".join(self.path)


class DeriveIdentifier(BaseModel):
    kind: Literal["identifier"] = "identifier"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


FunctionArg = Annotated[
    DeriveLiteral | DeriveFieldAccess | DeriveIdentifier,
    Field(discriminator="kind"),
]


class ComputeCall(BaseModel):
    """``compute hash(input.password)``."""

    kind: Literal["compute"] = "compute"
    function: str
    args: list[FunctionArg] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.args)
        return f"compute {self.function}({args})"


class SelectQuery(BaseModel):
    """``select User where email == input.email``."""

    kind: Literal["select"] = "select"
    entity: str
    predicate: Predicate

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"select {self.entity} where {self.predicate}"


class SystemCall(BaseModel):
    """``system jwt.create(user.email)``."""

    kind: Literal["system"] = "system"
    namespace: str
    capability: str
    args: list[FunctionArg] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.args)
        return f"system {self.namespace}.{self.capability}({args})"


DeriveValue = Annotated[
    DeriveLiteral | DeriveFieldAccess | DeriveIdentifier | ComputeCall | SelectQuery | SystemCall,
    Field(discriminator="kind"),
]


# =============================================================================
# Steps
# =============================================================================


class DeriveStep(BaseModel):
    """``derive <name> = <value>``."""

    kind: Literal["derive"] = "derive"
    name: str
    value: DeriveValue
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)


class MutateSetter(BaseModel):
    field: str
    value: DeriveValue
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)


class MutateStep(BaseModel):
    """
    ``mutate Entity [where <predicate>]: field = value, ...``.

    Attributes:
        entity: Target entity name
        predicate: Row selector; ``None`` means create
        setters: Ordered field assignments
    """

    kind: Literal["mutate"] = "mutate"
    entity: str
    predicate: Predicate | None = None
    setters: list[MutateSetter] = Field(default_factory=list)
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)

    @property
    def is_create(self) -> bool:
        return self.predicate is None


class DeleteStep(BaseModel):
    """``delete Entity where <predicate>``."""

    kind: Literal["delete"] = "delete"
    entity: str
    predicate: Predicate
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)


ProcessStep = Annotated[
    DeriveStep | MutateStep | DeleteStep,
    Field(discriminator="kind"),
]
