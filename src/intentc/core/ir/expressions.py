"""
Expression types for the intent AST.

Rule conditions and policy ``require`` clauses share one expression tree:

- Comparison: ==, !=, <, >, <=, >=
- Logic: and, or, not
- Field access: User.age, subject.role
- Literals: "text", 18, true
- Identifiers: bare names such as enum members
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

LiteralValue = bool | float | str

# Entity name that resolves against the declared auth entity
SUBJECT = "subject"


class BinaryOperator(str, Enum):
    """Comparison operators."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="


class LogicalOperator(str, Enum):
    """Logical operators for combining conditions."""

    AND = "and"
    OR = "or"


def format_literal(value: LiteralValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if value == int(value):
        return str(int(value))
    return str(value)


class BinaryExpr(BaseModel):
    """A comparison between two operands: ``User.age >= 18``."""

    kind: Literal["binary"] = "binary"
    left: Expression
    operator: BinaryOperator
    right: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


class LogicalExpr(BaseModel):
    """Two conditions joined by ``and``/``or``."""

    kind: Literal["logical"] = "logical"
    left: Expression
    operator: LogicalOperator
    right: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


class NotExpr(BaseModel):
    """Negation: ``not User.active``."""

    kind: Literal["not"] = "not"
    operand: Expression

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"not {self.operand}"


class FieldAccessExpr(BaseModel):
    """
    ``Entity.field``.

    ``entity == "subject"`` resolves against the auth entity's fields.
    """

    kind: Literal["field_access"] = "field_access"
    entity: str
    field: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_subject(self) -> bool:
        return self.entity == SUBJECT

    def __str__(self) -> str:
        return f"{self.entity}.{self.field}"


class LiteralExpr(BaseModel):
    kind: Literal["literal"] = "literal"
    value: LiteralValue

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return format_literal(self.value)


class IdentifierExpr(BaseModel):
    kind: Literal["identifier"] = "identifier"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


Expression = Annotated[
    BinaryExpr | LogicalExpr | NotExpr | FieldAccessExpr | LiteralExpr | IdentifierExpr,
    Field(discriminator="kind"),
]


BinaryExpr.model_rebuild()
LogicalExpr.model_rebuild()
NotExpr.model_rebuild()
