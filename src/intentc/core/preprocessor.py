"""
AST preprocessor for the Intent DSL.

Synthesizes the standard session-management actions for the file's auth
entity so authors do not have to write them by hand:

    signup, login, get_me, logout, refresh_token, forgot_password, reset_password

Actions the author already declared are never replaced. Synthesized nodes
carry an empty SourceLocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from . import ir

logger = logging.getLogger(__name__)

AUTH_ACTION_NAMES = (
    "signup",
    "login",
    "get_me",
    "logout",
    "refresh_token",
    "forgot_password",
    "reset_password",
)

DEFAULT_PASSWORD_FIELD = "password_hash"
FALLBACK_PASSWORD_FIELD = "password"
REFRESH_TOKEN_PLACEHOLDER = "new_token_placeholder"


def inject_auth_actions(intent_file: ir.IntentFile) -> ir.IntentFile:
    """
    Return a copy of ``intent_file`` with the default auth actions appended.

    A no-op when the file has no auth entity. When ``auth_entity`` is unset
    but exactly one entity is declared with ``auth entity``, that entity is
    adopted first. Running this twice yields the same result as running it
    once.

    Args:
        intent_file: Parsed intent file (not modified)

    Returns:
        New IntentFile with the synthesized actions
    """
    auth_name = intent_file.auth_entity
    if auth_name is None:
        flagged = [e.name for e in intent_file.entities if e.is_auth]
        if len(flagged) != 1:
            return intent_file
        auth_name = flagged[0]

    builder = _AuthActionBuilder(auth_name, intent_file.find_entity(auth_name))
    existing = set(intent_file.action_names)
    synthesized = []

    for name in AUTH_ACTION_NAMES:
        if name in existing:
            logger.debug(f"Keeping user-defined auth action '{name}'")
            continue
        synthesized.append(builder.build(name))

    if synthesized:
        logger.info(
            f"Synthesized {len(synthesized)} auth actions for '{auth_name}': "
            f"{', '.join(a.name for a in synthesized)}"
        )

    return intent_file.model_copy(
        update={
            "actions": list(intent_file.actions) + synthesized,
            "auth_entity": auth_name,
        }
    )


def resolve_password_field(entity: ir.Entity | None) -> str:
    """Field that stores the password hash: ``password_hash`` if present, else ``password``."""
    if entity is None or entity.has_field(DEFAULT_PASSWORD_FIELD):
        return DEFAULT_PASSWORD_FIELD
    return FALLBACK_PASSWORD_FIELD


def _path(*parts: str) -> ir.DeriveFieldAccess:
    return ir.DeriveFieldAccess(path=list(parts))


def _param(name: str, param_type: ir.FieldType) -> ir.ActionParam:
    return ir.ActionParam(name=name, param_type=param_type)


class _AuthActionBuilder:
    """Builds the canonical auth actions for one auth entity."""

    def __init__(self, entity_name: str, entity: ir.Entity | None):
        self.entity_name = entity_name
        self.entity = entity
        self.password_field = resolve_password_field(entity)
        self.prefix = f"/{entity_name.lower()}s"

    def build(self, name: str) -> ir.Action:
        builders: dict[str, Callable[[], ir.Action]] = {
            "signup": self.signup,
            "login": self.login,
            "get_me": self.get_me,
            "logout": self.logout,
            "refresh_token": self.refresh_token,
            "forgot_password": self.forgot_password,
            "reset_password": self.reset_password,
        }
        return builders[name]()

    def _api(self, method: ir.HttpMethod, suffix: str) -> ir.ApiDecorator:
        return ir.ApiDecorator(method=method, path=f"{self.prefix}/{suffix}")

    def _output(self, *fields: str) -> ir.OutputSection:
        return ir.OutputSection(entity=self.entity_name, fields=list(fields))

    def _extra_signup_fields(self) -> list[ir.Field]:
        """Auth entity fields the caller must supply beyond email and password."""
        if self.entity is None:
            return []
        return [
            f
            for f in self.entity.fields
            if f.name not in ("email", self.password_field) and not f.is_primary and not f.is_auto
        ]

    def signup(self) -> ir.Action:
        params = [_param("email", ir.EmailType()), _param("password", ir.StringType())]
        setters = [
            ir.MutateSetter(field="email", value=_path("input", "email")),
            ir.MutateSetter(
                field=self.password_field,
                value=ir.ComputeCall(function="hash", args=[_path("input", "password")]),
            ),
        ]

        for field in self._extra_signup_fields():
            param_type = field.field_type
            if field.default is not None:
                param_type = ir.OptionalType(inner=param_type)
            params.append(
                ir.ActionParam(name=field.name, param_type=param_type, decorators=field.decorators)
            )
            setters.append(ir.MutateSetter(field=field.name, value=_path("input", field.name)))

        return ir.Action(
            name="signup",
            decorators=[self._api(ir.HttpMethod.POST, "signup")],
            input=ir.InputSection(fields=params),
            process=ir.ProcessSection(
                steps=[ir.MutateStep(entity=self.entity_name, setters=setters)]
            ),
            output=self._output("id", "email"),
        )

    def login(self) -> ir.Action:
        lookup = ir.SelectQuery(
            entity=self.entity_name,
            predicate=ir.Predicate(
                field=ir.InputFieldRef(name="email"),
                operator=ir.CompareOp.EQUAL,
                value=ir.InputFieldRef(name="email"),
            ),
        )
        verify = ir.ComputeCall(
            function="verify_hash",
            args=[_path("input", "password"), _path("user", self.password_field)],
        )
        token = ir.SystemCall(namespace="jwt", capability="create", args=[_path("user", "email")])

        return ir.Action(
            name="login",
            decorators=[self._api(ir.HttpMethod.POST, "login")],
            input=ir.InputSection(
                fields=[_param("email", ir.EmailType()), _param("password", ir.StringType())]
            ),
            process=ir.ProcessSection(
                steps=[
                    ir.DeriveStep(name="user", value=lookup),
                    ir.DeriveStep(name="valid", value=verify),
                    ir.DeriveStep(name="token", value=token),
                ]
            ),
            output=self._output("id", "token"),
        )

    def get_me(self) -> ir.Action:
        return ir.Action(
            name="get_me",
            decorators=[self._api(ir.HttpMethod.GET, "me"), ir.AuthDecorator()],
            output=self._output("id", "email", "role"),
        )

    def logout(self) -> ir.Action:
        return ir.Action(
            name="logout",
            decorators=[self._api(ir.HttpMethod.POST, "logout"), ir.AuthDecorator()],
            process=ir.ProcessSection(),
            output=self._output(),
        )

    def refresh_token(self) -> ir.Action:
        # Placeholder: token rotation happens in the generated runtime
        return ir.Action(
            name="refresh_token",
            decorators=[self._api(ir.HttpMethod.POST, "token/refresh")],
            input=ir.InputSection(fields=[_param("refresh_token", ir.StringType())]),
            process=ir.ProcessSection(
                steps=[
                    ir.DeriveStep(
                        name="token", value=ir.DeriveLiteral(value=REFRESH_TOKEN_PLACEHOLDER)
                    )
                ]
            ),
            output=self._output("token"),
        )

    def forgot_password(self) -> ir.Action:
        return ir.Action(
            name="forgot_password",
            decorators=[self._api(ir.HttpMethod.POST, "forgot-password")],
            input=ir.InputSection(fields=[_param("email", ir.EmailType())]),
            process=ir.ProcessSection(),
            output=self._output(),
        )

    def reset_password(self) -> ir.Action:
        return ir.Action(
            name="reset_password",
            decorators=[self._api(ir.HttpMethod.POST, "reset-password")],
            input=ir.InputSection(
                fields=[
                    _param("token", ir.StringType()),
                    _param("new_password", ir.StringType()),
                ]
            ),
            process=ir.ProcessSection(),
            output=self._output(),
        )
