"""
Action types for the intent AST.

An action is an operation exposed by the generated backend:

    @api POST /users/{id}/activate
    @auth
    action activate_user:
        input:
            id: uuid
        process:
            mutate User where id == input.id:
                status = active
        output: User(id, status)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .decorators import ApiDecorator, AuthDecorator, Decorator, PolicyDecorator
from .fields import FieldType
from .location import SourceLocation
from .process import ProcessStep


class ActionParam(BaseModel):
    """A named, typed input parameter."""

    name: str
    param_type: FieldType
    decorators: list[Decorator] = Field(default_factory=list)
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)


class InputSection(BaseModel):
    fields: list[ActionParam] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def names(self) -> list[str]:
        return [param.name for param in self.fields]


class ProcessSection(BaseModel):
    steps: list[ProcessStep] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class OutputSection(BaseModel):
    """Projection of an entity: ``output: User(id, email)``."""

    entity: str
    fields: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Action(BaseModel):
    """
    A declared operation.

    Attributes:
        name: Action name
        decorators: Decorators written before ``action`` (@api, @auth, @policy)
        input: Input parameters
        process: Ordered process steps
        output: Output projection
        location: Where the action was declared
    """

    name: str
    decorators: list[Decorator] = Field(default_factory=list)
    input: InputSection | None = None
    process: ProcessSection | None = None
    output: OutputSection | None = None
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)

    @property
    def params(self) -> list[ActionParam]:
        return self.input.fields if self.input else []

    @property
    def steps(self) -> list[ProcessStep]:
        return self.process.steps if self.process else []

    @property
    def api(self) -> ApiDecorator | None:
        """The first ``@api`` decorator, if any."""
        for decorator in self.decorators:
            if isinstance(decorator, ApiDecorator):
                return decorator
        return None

    @property
    def requires_auth(self) -> bool:
        return any(isinstance(d, AuthDecorator) for d in self.decorators)

    @property
    def policy_names(self) -> list[str]:
        return [d.name for d in self.decorators if isinstance(d, PolicyDecorator)]
