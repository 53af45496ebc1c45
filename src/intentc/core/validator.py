"""
Semantic validation for the Intent DSL.

Builds symbol tables for an IntentFile and checks every cross reference in
five passes:

1. Symbol collection (entities, actions, policies, auth entity)
2. Entity structure (fields, primary keys, field types)
3. Actions (parameters, output, @api/@auth/@policy, process steps)
4. Rules (conditions and consequences)
5. Policies (subjects and require expressions)

Validation never stops at the first problem: every error found in one run is
raised together.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from . import ir
from .errors import ValidationError, ValidationWarning, collect_errors

logger = logging.getLogger(__name__)


@dataclass
class ValidationContext:
    """
    Result of a successful validation.

    Attributes:
        entities: Entity symbol table
        actions: Action symbol table
        policies: Policy symbol table (global by name, nested as ``Entity.Name``)
        auth_entity: Name of the auth entity, if any
        warnings: Non-fatal diagnostics
    """

    entities: dict[str, ir.Entity] = field(default_factory=dict)
    actions: dict[str, ir.Action] = field(default_factory=dict)
    policies: dict[str, ir.Policy] = field(default_factory=dict)
    auth_entity: str | None = None
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def auth_entity_spec(self) -> ir.Entity | None:
        if self.auth_entity is None:
            return None
        return self.entities.get(self.auth_entity)


def validate(intent_file: ir.IntentFile) -> ValidationContext:
    """
    Validate an IntentFile.

    Args:
        intent_file: Parsed (and usually preprocessed) intent file

    Returns:
        ValidationContext with symbol tables and warnings

    Raises:
        ValidationError: If exactly one problem was found
        MultipleErrors: If several problems were found
    """
    validator = SemanticValidator(intent_file)
    return validator.validate()


def _names(names) -> str:
    return ", ".join(sorted(names)) or "(none)"


class SemanticValidator:
    """Runs the validation passes over one IntentFile and collects errors."""

    def __init__(self, intent_file: ir.IntentFile):
        self.file = intent_file
        self.ctx = ValidationContext()
        self.errors: list[ValidationError] = []
        # Entity named by the policy currently being validated, if any
        self.policy_subject: ir.Entity | None = None

    def error(
        self,
        message: str,
        location: ir.SourceLocation | None = None,
        hint: str | None = None,
    ) -> None:
        self.errors.append(
            ValidationError(message, location=location, hint=hint, file=self.file.source_path)
        )

    def warn(self, message: str, location: ir.SourceLocation, hint: str | None = None) -> None:
        self.ctx.warnings.append(ValidationWarning(message, location, hint))

    def validate(self) -> ValidationContext:
        self.collect_symbols()

        for entity in self.file.entities:
            self.validate_entity(entity)
        for action in self.file.actions:
            self.validate_action(action)
        for rule in self.file.rules:
            self.validate_rule(rule)
        for policy in self.file.policies:
            self.validate_policy(policy)
        for entity in self.file.entities:
            for policy in entity.policies:
                self.validate_policy(policy)

        if self.errors:
            logger.debug(f"Validation failed with {len(self.errors)} error(s)")
            raise collect_errors(self.errors)

        logger.debug(
            f"Validated {len(self.ctx.entities)} entities, {len(self.ctx.actions)} actions, "
            f"{len(self.ctx.policies)} policies ({len(self.ctx.warnings)} warnings)"
        )
        return self.ctx

    # =========================================================================
    # Pass 1: symbols
    # =========================================================================

    def collect_symbols(self) -> None:
        ctx = self.ctx

        for entity in self.file.entities:
            if entity.name in ctx.entities:
                self.error(f"Duplicate entity name: {entity.name}", entity.location)
            else:
                ctx.entities[entity.name] = entity

            if entity.is_auth:
                if ctx.auth_entity is not None:
                    self.error(
                        f"Multiple auth entities defined: '{ctx.auth_entity}' and "
                        f"'{entity.name}'. Only one auth entity is allowed.",
                        entity.location,
                    )
                else:
                    ctx.auth_entity = entity.name

        declared_auth = self.file.auth_entity
        if declared_auth is not None and declared_auth != ctx.auth_entity:
            if declared_auth not in ctx.entities:
                self.error(
                    f"Auth entity '{declared_auth}' is not a declared entity",
                    hint=f"Available entities: {_names(ctx.entities)}",
                )
            elif not ctx.entities[declared_auth].is_auth:
                self.error(
                    f"Entity '{declared_auth}' is used as the auth entity but is not "
                    f"declared with 'auth entity'",
                    ctx.entities[declared_auth].location,
                )

        for action in self.file.actions:
            if action.name in ctx.actions:
                self.error(f"Duplicate action name: {action.name}", action.location)
            else:
                ctx.actions[action.name] = action

        for policy in self.file.policies:
            self._add_policy(policy.name, policy)
        for entity in self.file.entities:
            for policy in entity.policies:
                self._add_policy(f"{entity.name}.{policy.name}", policy)

    def _add_policy(self, key: str, policy: ir.Policy) -> None:
        if key in self.ctx.policies:
            self.error(f"Duplicate policy name: {key}", policy.location)
        else:
            self.ctx.policies[key] = policy

    # =========================================================================
    # Pass 2: entities
    # =========================================================================

    def validate_entity(self, entity: ir.Entity) -> None:
        primary_fields = entity.primary_fields
        if len(primary_fields) > 1:
            self.error(
                f"Entity '{entity.name}' has multiple @primary fields",
                primary_fields[1].location,
                hint=f"Found: {', '.join(f.name for f in primary_fields)}",
            )

        seen: set[str] = set()
        for fld in entity.fields:
            if fld.name in seen:
                self.error(
                    f"Duplicate field name '{fld.name}' in entity '{entity.name}'",
                    fld.location,
                )
            seen.add(fld.name)

            self.validate_field_type(fld.field_type, fld.location)
            self.validate_field_decorators(fld)

        if not primary_fields:
            self.warn(
                f"Entity '{entity.name}' has no @primary field",
                entity.location,
                hint="Consider adding @primary to an id field",
            )

    def validate_field_type(self, field_type: ir.FieldType, location: ir.SourceLocation) -> None:
        """Check a field type recursively through Array/List/Optional wrappers."""
        if isinstance(field_type, (ir.ReferenceType, ir.RefType)):
            if field_type.entity not in self.ctx.entities:
                self.error(
                    f"Unknown entity reference: {field_type.entity}",
                    location,
                    hint=f"Available entities: {_names(self.ctx.entities)}",
                )
        elif isinstance(field_type, (ir.ArrayType, ir.ListType)):
            self.validate_field_type(field_type.element, location)
        elif isinstance(field_type, ir.OptionalType):
            self.validate_field_type(field_type.inner, location)
        elif isinstance(field_type, ir.EnumType):
            if not field_type.values:
                self.error("Enum type must have at least one value", location)
            duplicates = [v for v, n in Counter(field_type.values).items() if n > 1]
            if duplicates:
                self.error(
                    f"Enum type has duplicate values: {', '.join(duplicates)}",
                    location,
                )

    def validate_field_decorators(self, fld: ir.Field) -> None:
        if fld.is_primary and fld.is_optional:
            self.error(
                "Field cannot be both @primary and @optional",
                fld.location,
                hint=f"Remove @optional from '{fld.name}'",
            )

    # =========================================================================
    # Pass 3: actions
    # =========================================================================

    def validate_action(self, action: ir.Action) -> None:
        param_names: set[str] = set()
        for param in action.params:
            if param.name in param_names:
                self.error(
                    f"Duplicate parameter '{param.name}' in action '{action.name}'",
                    param.location,
                )
            param_names.add(param.name)
            self.validate_field_type(param.param_type, param.location)

        if action.output and action.output.entity not in self.ctx.entities:
            self.error(
                f"Unknown output type: {action.output.entity}",
                action.location,
                hint="Output type must be a defined entity",
            )

        for decorator in action.decorators:
            if isinstance(decorator, ir.ApiDecorator):
                self._validate_api_path(action, decorator, param_names)
            elif isinstance(decorator, ir.AuthDecorator):
                self._validate_auth_decorator(action, decorator, param_names)
            elif isinstance(decorator, ir.PolicyDecorator):
                if decorator.name not in self.ctx.policies:
                    self.error(
                        f"Unknown policy: {decorator.name}",
                        action.location,
                        hint=f"Available policies: {_names(self.ctx.policies)}",
                    )

        for step in action.steps:
            self.validate_process_step(step)

    def _validate_api_path(
        self, action: ir.Action, api: ir.ApiDecorator, param_names: set[str]
    ) -> None:
        for path_param in api.path_params:
            if path_param not in param_names:
                self.error(
                    f"Path parameter '{{{path_param}}}' not found in action parameters",
                    action.location,
                    hint=f"Add '{path_param}' to the input section of '{action.name}'",
                )

    def _validate_auth_decorator(
        self, action: ir.Action, auth: ir.AuthDecorator, param_names: set[str]
    ) -> None:
        if auth.name is None:
            if self.ctx.auth_entity is None:
                self.error(
                    "@auth decorator used without arguments, but no auth entity is defined",
                    action.location,
                    hint="Declare one entity with 'auth entity Name:'",
                )
            return

        # Capitalized names refer to entities, everything else to actions
        if auth.name[0].isupper():
            if auth.name not in self.ctx.entities:
                self.error(
                    f"Unknown entity in @auth: {auth.name}",
                    action.location,
                    hint=f"Available entities: {_names(self.ctx.entities)}",
                )
        elif auth.name not in self.ctx.actions:
            self.error(
                f"Unknown action in @auth: {auth.name}",
                action.location,
                hint=f"Available actions: {_names(self.ctx.actions)}",
            )

        for arg in auth.args:
            if arg not in param_names:
                self.error(
                    f"Unknown argument '{arg}' in @auth",
                    action.location,
                    hint=f"Arguments must be input parameters of '{action.name}'",
                )

    def validate_process_step(self, step: ir.ProcessStep) -> None:
        entity = None
        if isinstance(step, (ir.MutateStep, ir.DeleteStep)):
            entity = step.entity
        elif isinstance(step, ir.DeriveStep) and isinstance(step.value, ir.SelectQuery):
            entity = step.value.entity

        if entity is not None and entity not in self.ctx.entities:
            self.error(
                f"Unknown entity in process step: {entity}",
                step.location,
                hint=f"Available entities: {_names(self.ctx.entities)}",
            )

    # =========================================================================
    # Pass 4: rules
    # =========================================================================

    def validate_rule(self, rule: ir.Rule) -> None:
        self.validate_expression(rule.condition, rule.location)

        consequence = rule.consequence
        if isinstance(consequence, ir.ActionCallConsequence):
            if consequence.action not in self.ctx.actions:
                self.error(
                    f"Unknown action: {consequence.action}",
                    rule.location,
                    hint=f"Available actions: {_names(self.ctx.actions)}",
                )
            for arg in consequence.args:
                self.validate_expression(arg, rule.location)
        elif isinstance(consequence, (ir.RejectConsequence, ir.LogConsequence)):
            if not consequence.message:
                self.error("Empty message in reject/log", rule.location)

    def validate_expression(
        self,
        expr: ir.Expression,
        location: ir.SourceLocation,
        in_policy: bool = False,
    ) -> None:
        """
        Check field accesses in an expression against entity schemas.

        In policies a bare identifier names an auth entity field when it stands
        alone or is the left operand of a comparison.
        """
        if isinstance(expr, ir.BinaryExpr):
            if in_policy and isinstance(expr.left, ir.IdentifierExpr):
                self._check_subject_field(expr.left.name, expr.left.name, location)
            else:
                self.validate_expression(expr.left, location, in_policy)
            if not isinstance(expr.right, ir.IdentifierExpr):
                self.validate_expression(expr.right, location, in_policy)
        elif isinstance(expr, ir.LogicalExpr):
            self.validate_expression(expr.left, location, in_policy)
            self.validate_expression(expr.right, location, in_policy)
        elif isinstance(expr, ir.NotExpr):
            self.validate_expression(expr.operand, location, in_policy)
        elif isinstance(expr, ir.FieldAccessExpr):
            self._validate_field_access(expr, location)
        elif isinstance(expr, ir.IdentifierExpr):
            if in_policy:
                self._check_subject_field(expr.name, expr.name, location)

    def _validate_field_access(self, expr: ir.FieldAccessExpr, location: ir.SourceLocation) -> None:
        if expr.is_subject:
            self._check_subject_field(expr.field, ir.SUBJECT, location)
            return

        entity = self.ctx.entities.get(expr.entity)
        if entity is None:
            self.error(
                f"Unknown entity: {expr.entity}",
                location,
                hint=f"Available entities: {_names(self.ctx.entities)}",
            )
        elif not entity.has_field(expr.field):
            self.error(
                f"Field '{expr.field}' not found in entity '{expr.entity}'",
                location,
                hint=f"Available fields: {', '.join(f.name for f in entity.fields)}",
            )

    def _check_subject_field(self, name: str, via: str, location: ir.SourceLocation) -> None:
        """
        Resolve a subject field against the auth entity.

        Without an auth entity, a policy naming an entity subject resolves
        against that entity instead; anywhere else the access is accepted.
        """
        auth_entity = self.ctx.auth_entity_spec
        if auth_entity is not None:
            entity, label = auth_entity, "auth entity"
        elif self.policy_subject is not None:
            entity, label = self.policy_subject, "subject entity"
        else:
            return

        if not entity.has_field(name):
            self.error(
                f"Field '{name}' not found in {label} '{entity.name}' (referenced via '{via}')",
                location,
                hint=f"Available fields: {', '.join(f.name for f in entity.fields)}",
            )

    # =========================================================================
    # Pass 5: policies
    # =========================================================================

    def validate_policy(self, policy: ir.Policy) -> None:
        if not policy.is_auth_subject and policy.subject not in self.ctx.entities:
            self.error(
                f"Unknown subject in policy '{policy.name}': {policy.subject}",
                policy.location,
                hint=(
                    f"Subject must be '@auth' or a defined entity name. "
                    f"Available entities: {_names(self.ctx.entities)}"
                ),
            )
        if not policy.is_auth_subject:
            self.policy_subject = self.ctx.entities.get(policy.subject)
        try:
            self.validate_expression(policy.require, policy.location, in_policy=True)
        finally:
            self.policy_subject = None
