"""
Rule and policy types for the intent AST.

Rules react to conditions:

    rule AdultsOnly:
        when User.age < 18
        then reject("Must be an adult")

Policies are named authorization checks, global or nested in an entity:

    policy IsAdmin:
        subject: @auth
        require subject.role == admin
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .expressions import Expression
from .location import SourceLocation

# Policy subject meaning "the authenticated principal"
AUTH_SUBJECT = "@auth"


class ActionCallConsequence(BaseModel):
    """``then notify_admin(User.email)``."""

    kind: Literal["action_call"] = "action_call"
    action: str
    args: list[Expression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class RejectConsequence(BaseModel):
    kind: Literal["reject"] = "reject"
    message: str

    model_config = ConfigDict(frozen=True)


class LogConsequence(BaseModel):
    kind: Literal["log"] = "log"
    message: str

    model_config = ConfigDict(frozen=True)


RuleConsequence = Annotated[
    ActionCallConsequence | RejectConsequence | LogConsequence,
    Field(discriminator="kind"),
]


class Rule(BaseModel):
    name: str
    condition: Expression
    consequence: RuleConsequence
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)


class Policy(BaseModel):
    """
    Named authorization requirement.

    Attributes:
        name: Policy name (nested policies are addressed as ``Entity.Name``)
        subject: ``"@auth"`` or a declared entity name
        require: Boolean expression that must hold
        location: Where the policy was declared
    """

    name: str
    subject: str
    require: Expression
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = ConfigDict(frozen=True)

    @property
    def is_auth_subject(self) -> bool:
        return self.subject == AUTH_SUBJECT
