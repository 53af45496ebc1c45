"""
Decorator types for the intent AST.

Decorators annotate fields (``@primary``, ``@default(...)``) and actions
(``@api``, ``@auth``, ``@policy``). The set is closed; consumers dispatch on
the concrete class.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, Enum):
    """HTTP methods accepted by ``@api``."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class MapTransform(str, Enum):
    """Transform applied by ``@map(target, transform)``."""

    NONE = "none"
    HASH = "hash"


class PrimaryDecorator(BaseModel):
    kind: Literal["primary"] = "primary"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "@primary"


class UniqueDecorator(BaseModel):
    kind: Literal["unique"] = "unique"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "@unique"


class OptionalDecorator(BaseModel):
    kind: Literal["optional"] = "optional"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "@optional"


class AutoDecorator(BaseModel):
    kind: Literal["auto"] = "auto"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "@auto"


class IndexDecorator(BaseModel):
    kind: Literal["index"] = "index"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "@index"


class DefaultDecorator(BaseModel):
    """``@default(value)``; the value keeps its source text, quotes stripped."""

    kind: Literal["default"] = "default"
    value: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"@default({self.value})"


class ValidateDecorator(BaseModel):
    """
    ``@validate(min: 1, max: 80, pattern: "^[a-z]+$", required: true)``.

    Every argument is optional.
    """

    kind: Literal["validate"] = "validate"
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    required: bool | None = None

    model_config = ConfigDict(frozen=True)


class ApiDecorator(BaseModel):
    """``@api METHOD /path/{param}``."""

    kind: Literal["api"] = "api"
    method: HttpMethod
    path: str

    model_config = ConfigDict(frozen=True)

    @property
    def path_params(self) -> list[str]:
        """Placeholder names in the path, e.g. ``["id"]`` for ``/users/{id}``."""
        return [
            segment[1:-1]
            for segment in self.path.split("/")
            if segment.startswith("{") and segment.endswith("}")
        ]

    def __str__(self) -> str:
        return f"@api {self.method.value} {self.path}"


class AuthDecorator(BaseModel):
    """
    ``@auth``, ``@auth(Name)`` or ``@auth(name(arg, ...))``.

    A capitalized name refers to an entity, otherwise to an action.
    """

    kind: Literal["auth"] = "auth"
    name: str | None = None
    args: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.name is None:
            return "@auth"
        if self.args:
            return f"@auth({self.name}({', '.join(self.args)}))"
        return f"@auth({self.name})"


class MapDecorator(BaseModel):
    """``@map(target)`` or ``@map(target, hash)``."""

    kind: Literal["map"] = "map"
    target: str
    transform: MapTransform = MapTransform.NONE

    model_config = ConfigDict(frozen=True)


class PolicyDecorator(BaseModel):
    """``@policy(Name)`` or ``@policy(Entity.Name)``."""

    kind: Literal["policy"] = "policy"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"@policy({self.name})"


Decorator = Annotated[
    PrimaryDecorator
    | UniqueDecorator
    | OptionalDecorator
    | AutoDecorator
    | IndexDecorator
    | DefaultDecorator
    | ValidateDecorator
    | ApiDecorator
    | AuthDecorator
    | MapDecorator
    | PolicyDecorator,
    Field(discriminator="kind"),
]

FLAG_DECORATORS: dict[str, type[BaseModel]] = {
    "primary": PrimaryDecorator,
    "unique": UniqueDecorator,
    "optional": OptionalDecorator,
    "auto": AutoDecorator,
    "index": IndexDecorator,
}
