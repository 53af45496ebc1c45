"""
Intent AST types.

The AST is a tree of frozen pydantic models produced by the parser, extended
by the preprocessor and read by the validator. Closed variant sets (field
types, decorators, expressions, derive values, process steps, field
references) are discriminated unions on a ``kind`` literal.

All types are re-exported from this package.
"""

# Actions
from .actions import (
    Action,
    ActionParam,
    InputSection,
    OutputSection,
    ProcessSection,
)

# Decorators
from .decorators import (
    FLAG_DECORATORS,
    ApiDecorator,
    AuthDecorator,
    AutoDecorator,
    Decorator,
    DefaultDecorator,
    HttpMethod,
    IndexDecorator,
    MapDecorator,
    MapTransform,
    OptionalDecorator,
    PolicyDecorator,
    PrimaryDecorator,
    UniqueDecorator,
    ValidateDecorator,
)

# Domain
from .domain import (
    Entity,
    Field,
    IntentFile,
)

# Expressions
from .expressions import (
    SUBJECT,
    BinaryExpr,
    BinaryOperator,
    Expression,
    FieldAccessExpr,
    IdentifierExpr,
    LiteralExpr,
    LiteralValue,
    LogicalExpr,
    LogicalOperator,
    NotExpr,
)

# Field types
from .fields import (
    PRIMITIVE_TYPES,
    ArrayType,
    BooleanType,
    DateTimeType,
    EmailType,
    EnumType,
    FieldType,
    ListType,
    NumberType,
    OptionalType,
    ReferenceType,
    RefType,
    StringType,
    UuidType,
)

# Locations
from .location import SourceLocation

# Process
from .process import (
    CompareOp,
    ComputeCall,
    DeleteStep,
    DeriveFieldAccess,
    DeriveIdentifier,
    DeriveLiteral,
    DeriveStep,
    DeriveValue,
    DerivedFieldRef,
    FieldReference,
    FunctionArg,
    InputFieldRef,
    LiteralRef,
    MutateSetter,
    MutateStep,
    Predicate,
    ProcessStep,
    SelectQuery,
    SystemCall,
)

# Rules and policies
from .rules import (
    AUTH_SUBJECT,
    ActionCallConsequence,
    LogConsequence,
    Policy,
    RejectConsequence,
    Rule,
    RuleConsequence,
)

__all__ = [
    # Actions
    "Action",
    "ActionParam",
    "InputSection",
    "OutputSection",
    "ProcessSection",
    # Decorators
    "FLAG_DECORATORS",
    "ApiDecorator",
    "AuthDecorator",
    "AutoDecorator",
    "Decorator",
    "DefaultDecorator",
    "HttpMethod",
    "IndexDecorator",
    "MapDecorator",
    "MapTransform",
    "OptionalDecorator",
    "PolicyDecorator",
    "PrimaryDecorator",
    "UniqueDecorator",
    "ValidateDecorator",
    # Domain
    "Entity",
    "Field",
    "IntentFile",
    # Expressions
    "SUBJECT",
    "BinaryExpr",
    "BinaryOperator",
    "Expression",
    "FieldAccessExpr",
    "IdentifierExpr",
    "LiteralExpr",
    "LiteralValue",
    "LogicalExpr",
    "LogicalOperator",
    "NotExpr",
    # Field types
    "PRIMITIVE_TYPES",
    "ArrayType",
    "BooleanType",
    "DateTimeType",
    "EmailType",
    "EnumType",
    "FieldType",
    "ListType",
    "NumberType",
    "OptionalType",
    "ReferenceType",
    "RefType",
    "StringType",
    "UuidType",
    # Locations
    "SourceLocation",
    # Process
    "CompareOp",
    "ComputeCall",
    "DeleteStep",
    "DeriveFieldAccess",
    "DeriveIdentifier",
    "DeriveLiteral",
    "DeriveStep",
    "DeriveValue",
    "DerivedFieldRef",
    "FieldReference",
    "FunctionArg",
    "InputFieldRef",
    "LiteralRef",
    "MutateSetter",
    "MutateStep",
    "Predicate",
    "ProcessStep",
    "SelectQuery",
    "SystemCall",
    # Rules and policies
    "AUTH_SUBJECT",
    "ActionCallConsequence",
    "LogConsequence",
    "Policy",
    "RejectConsequence",
    "Rule",
    "RuleConsequence",
]
