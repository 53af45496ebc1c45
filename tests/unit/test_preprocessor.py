"""Tests for auth action synthesis."""

from intentc.core import ir
from intentc.core.dsl_parser_impl import parse_intent
from intentc.core.preprocessor import (
    AUTH_ACTION_NAMES,
    REFRESH_TOKEN_PLACEHOLDER,
    inject_auth_actions,
    resolve_password_field,
)

AUTH_USER = """\
auth entity User:
    id: uuid @primary
    email: email @unique
    password_hash: string
"""


def preprocess(source: str) -> ir.IntentFile:
    return inject_auth_actions(parse_intent(source))


def setter_map(action: ir.Action) -> dict[str, ir.DeriveValue]:
    (step,) = action.steps
    return {s.field: s.value for s in step.setters}


class TestInjection:
    """Which actions are added, and when."""

    def test_adds_seven_canonical_actions(self):
        result = preprocess(AUTH_USER)
        assert result.action_names == list(AUTH_ACTION_NAMES)

    def test_signup_hashes_password(self):
        signup = preprocess(AUTH_USER).find_action("signup")
        setters = setter_map(signup)

        assert setters["password_hash"] == ir.ComputeCall(
            function="hash", args=[ir.DeriveFieldAccess(path=["input", "password"])]
        )
        assert setters["email"] == ir.DeriveFieldAccess(path=["input", "email"])
        assert signup.steps[0].is_create

    def test_no_auth_entity_is_noop(self):
        parsed = parse_intent("entity Post:\n    id: uuid @primary\n")
        assert inject_auth_actions(parsed) is parsed

    def test_user_defined_action_is_kept(self):
        source = AUTH_USER + "\n@api POST /custom/login\naction login:\n    output: User(id)\n"
        result = preprocess(source)

        logins = [a for a in result.actions if a.name == "login"]
        assert len(logins) == 1
        assert logins[0].api.path == "/custom/login"
        assert len(result.actions) == 7

    def test_synthesized_actions_follow_declared_ones(self, shop_source):
        result = preprocess(shop_source)
        assert result.action_names == ["pay_order", *AUTH_ACTION_NAMES]

    def test_running_twice_changes_nothing(self, shop_source):
        once = preprocess(shop_source)
        twice = inject_auth_actions(once)
        assert twice == once

    def test_input_is_not_mutated(self):
        parsed = parse_intent(AUTH_USER)
        result = inject_auth_actions(parsed)

        assert parsed.actions == []
        assert len(result.actions) == 7

    def test_flagged_entity_is_adopted(self):
        parsed = parse_intent(AUTH_USER).model_copy(update={"auth_entity": None})
        result = inject_auth_actions(parsed)

        assert result.auth_entity == "User"
        assert len(result.actions) == 7

    def test_synthesized_nodes_have_no_location(self):
        for action in preprocess(AUTH_USER).actions:
            assert action.location.is_synthesized


class TestActionShapes:
    """Routes, parameters and outputs of the synthesized actions."""

    def test_routes_use_pluralized_entity(self):
        routes = {a.name: (a.api.method, a.api.path) for a in preprocess(AUTH_USER).actions}
        assert routes == {
            "signup": (ir.HttpMethod.POST, "/users/signup"),
            "login": (ir.HttpMethod.POST, "/users/login"),
            "get_me": (ir.HttpMethod.GET, "/users/me"),
            "logout": (ir.HttpMethod.POST, "/users/logout"),
            "refresh_token": (ir.HttpMethod.POST, "/users/token/refresh"),
            "forgot_password": (ir.HttpMethod.POST, "/users/forgot-password"),
            "reset_password": (ir.HttpMethod.POST, "/users/reset-password"),
        }

    def test_route_prefix_for_other_entity_name(self):
        source = "auth entity Member:\n    id: uuid @primary\n    email: email\n"
        signup = preprocess(source).find_action("signup")
        assert signup.api.path == "/members/signup"

    def test_only_session_actions_require_auth(self):
        result = preprocess(AUTH_USER)
        protected = [a.name for a in result.actions if a.requires_auth]
        assert protected == ["get_me", "logout"]

    def test_login_steps(self):
        login = preprocess(AUTH_USER).find_action("login")
        names = [step.name for step in login.steps]

        assert names == ["user", "valid", "token"]
        assert isinstance(login.steps[0].value, ir.SelectQuery)
        assert login.steps[1].value == ir.ComputeCall(
            function="verify_hash",
            args=[
                ir.DeriveFieldAccess(path=["input", "password"]),
                ir.DeriveFieldAccess(path=["user", "password_hash"]),
            ],
        )
        assert login.steps[2].value == ir.SystemCall(
            namespace="jwt",
            capability="create",
            args=[ir.DeriveFieldAccess(path=["user", "email"])],
        )
        assert login.output == ir.OutputSection(entity="User", fields=["id", "token"])

    def test_get_me_outputs_profile(self):
        get_me = preprocess(AUTH_USER).find_action("get_me")
        assert get_me.input is None
        assert get_me.output.fields == ["id", "email", "role"]

    def test_refresh_token_placeholder(self):
        refresh = preprocess(AUTH_USER).find_action("refresh_token")
        assert refresh.params[0].name == "refresh_token"
        assert refresh.steps[0].value == ir.DeriveLiteral(value=REFRESH_TOKEN_PLACEHOLDER)

    def test_password_stubs_have_empty_process(self):
        result = preprocess(AUTH_USER)
        forgot = result.find_action("forgot_password")
        reset = result.find_action("reset_password")

        assert forgot.input.names == ["email"]
        assert forgot.steps == []
        assert reset.input.names == ["token", "new_password"]
        assert reset.steps == []


class TestSignupFields:
    """Signup parameters derived from the auth entity."""

    def test_extra_fields_become_parameters(self, shop_source):
        signup = preprocess(shop_source).find_action("signup")

        # id is primary and created_at is @auto, so neither is a parameter
        assert signup.input.names == ["email", "password", "role"]
        role = signup.params[2]
        assert role.param_type == ir.OptionalType(
            inner=ir.EnumType(values=["admin", "customer"])
        )
        assert role.decorators == [ir.DefaultDecorator(value="customer")]
        assert setter_map(signup)["role"] == ir.DeriveFieldAccess(path=["input", "role"])

    def test_required_extra_field_keeps_type(self):
        source = AUTH_USER + "    name: string\n"
        signup = preprocess(source).find_action("signup")
        assert signup.params[2] == ir.ActionParam(name="name", param_type=ir.StringType())

    def test_password_field_fallback(self):
        source = "auth entity User:\n    id: uuid @primary\n    email: email\n    password: string\n"
        result = preprocess(source)

        signup = result.find_action("signup")
        assert "password" in setter_map(signup)
        assert signup.input.names == ["email", "password"]

        login = result.find_action("login")
        assert login.steps[1].value.args[1] == ir.DeriveFieldAccess(path=["user", "password"])

    def test_resolve_password_field(self):
        with_hash = parse_intent(AUTH_USER).entities[0]
        without = parse_intent("auth entity U:\n    id: uuid\n").entities[0]

        assert resolve_password_field(with_hash) == "password_hash"
        assert resolve_password_field(without) == "password"
        assert resolve_password_field(None) == "password_hash"
