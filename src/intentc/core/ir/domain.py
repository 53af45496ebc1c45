"""
Domain model types for the intent AST.

This module contains fields, entities and the ``IntentFile`` root.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from .actions import Action
from .decorators import AutoDecorator, Decorator, DefaultDecorator, OptionalDecorator, PrimaryDecorator
from .fields import FieldType
from .location import SourceLocation
from .rules import Policy, Rule


class Field(BaseModel):
    """
    A named, typed entity field.

    Attributes:
        name: Field name
        field_type: Field type
        decorators: Decorators in source order
        location: Where the field was declared
    """

    name: str
    field_type: FieldType
    decorators: list[Decorator] = PydanticField(default_factory=list)
    location: SourceLocation = PydanticField(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)

    def has_decorator(self, decorator_type: type[BaseModel]) -> bool:
        return any(isinstance(d, decorator_type) for d in self.decorators)

    @property
    def is_primary(self) -> bool:
        return self.has_decorator(PrimaryDecorator)

    @property
    def is_optional(self) -> bool:
        return self.has_decorator(OptionalDecorator)

    @property
    def is_auto(self) -> bool:
        return self.has_decorator(AutoDecorator)

    @property
    def default(self) -> str | None:
        for decorator in self.decorators:
            if isinstance(decorator, DefaultDecorator):
                return decorator.value
        return None


class Entity(BaseModel):
    """
    A declared data model.

    Attributes:
        name: Entity name
        fields: Fields in declaration order
        policies: Policies nested in the entity body
        is_auth: True for ``auth entity`` declarations
        location: Where the entity was declared
    """

    name: str
    fields: list[Field] = PydanticField(default_factory=list)
    policies: list[Policy] = PydanticField(default_factory=list)
    is_auth: bool = False
    location: SourceLocation = PydanticField(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)

    def get_field(self, name: str) -> Field | None:
        """Get field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None

    @property
    def primary_fields(self) -> list[Field]:
        return [f for f in self.fields if f.is_primary]


class IntentFile(BaseModel):
    """
    Root of the intent AST: everything declared in one source file.

    ``auth_entity`` names the entity that acts as the authenticated principal.
    The parser records the first ``auth entity`` it sees; uniqueness is
    checked by the validator.
    """

    entities: list[Entity] = PydanticField(default_factory=list)
    actions: list[Action] = PydanticField(default_factory=list)
    rules: list[Rule] = PydanticField(default_factory=list)
    policies: list[Policy] = PydanticField(default_factory=list)
    auth_entity: str | None = None
    source_path: Path | None = None

    model_config = ConfigDict(frozen=True)

    def find_entity(self, name: str) -> Entity | None:
        """Get entity by name."""
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def find_action(self, name: str) -> Action | None:
        """Get action by name."""
        for action in self.actions:
            if action.name == name:
                return action
        return None

    @property
    def entity_names(self) -> list[str]:
        return [e.name for e in self.entities]

    @property
    def action_names(self) -> list[str]:
        return [a.name for a in self.actions]

    def all_policies(self) -> dict[str, Policy]:
        """
        All policies keyed the way ``@policy(...)`` addresses them.

        Global policies are keyed by bare name, nested ones as ``Entity.Name``.
        The first declaration wins when names collide.
        """
        table: dict[str, Policy] = {}
        for policy in self.policies:
            table.setdefault(policy.name, policy)
        for entity in self.entities:
            for policy in entity.policies:
                table.setdefault(f"{entity.name}.{policy.name}", policy)
        return table
