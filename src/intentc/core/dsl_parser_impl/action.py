"""
Action parsing for the Intent DSL.

Handles decorated ``action`` declarations with their input, process and
output sections, including process steps and ``where`` predicates.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from .base import describe_token
from .conditions import LITERAL_START_TYPES

PREDICATE_OPERATORS = {
    TokenType.DOUBLE_EQUALS: ir.CompareOp.EQUAL,
    TokenType.NOT_EQUALS: ir.CompareOp.NOT_EQUAL,
    TokenType.LESS_THAN: ir.CompareOp.LESS,
    TokenType.GREATER_THAN: ir.CompareOp.GREATER,
}

ACTION_SECTIONS = ("input", "process", "output")


class ActionParserMixin:
    """
    Mixin providing action parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        peek_token: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        expect_newline: Any
        skip_newlines: Any
        open_block: Any
        at_block_end: Any
        close_block: Any
        error: Any
        location: Any
        parse_type: Any
        parse_decorator: Any
        parse_decorators: Any
        _parse_literal_value: Any

    def parse_action(self) -> ir.Action:
        """
        Parse an action with its leading decorators.

        Syntax:
            @api POST /users/{id}
            @auth
            action name:
                input:
                    param: type @decorator ...
                process:
                    <step>
                output: Entity(field, ...)
        """
        start = self.current_token()
        decorators: list[ir.Decorator] = []
        while self.match(TokenType.AT):
            decorators.append(self.parse_decorator())
            self.skip_newlines()

        action_token = self.expect(TokenType.ACTION)
        if not decorators:
            start = action_token
        name = self.expect_identifier_or_keyword().value

        sections: dict[str, Any] = {}
        if self.open_block():
            while not self.at_block_end():
                token = self.expect_identifier_or_keyword()
                section = token.value
                if section not in ACTION_SECTIONS:
                    raise self.error(
                        f"Unknown section '{section}' in action '{name}'. "
                        f"Expected input, process or output",
                        token,
                    )
                if section in sections:
                    raise self.error(f"Duplicate '{section}' section in action '{name}'", token)

                if section == "input":
                    sections[section] = self._parse_input_section()
                elif section == "process":
                    sections[section] = self._parse_process_section()
                else:
                    sections[section] = self._parse_output_section()
            self.close_block()

        return ir.Action(
            name=name,
            decorators=decorators,
            input=sections.get("input"),
            process=sections.get("process"),
            output=sections.get("output"),
            location=self.location(start),
        )

    def _parse_input_section(self) -> ir.InputSection:
        params: list[ir.ActionParam] = []
        if self.open_block():
            while not self.at_block_end():
                start = self.current_token()
                name = self.expect_identifier_or_keyword().value
                self.expect(TokenType.COLON)
                param_type = self.parse_type()
                decorators = self.parse_decorators()
                self.expect_newline()
                params.append(
                    ir.ActionParam(
                        name=name,
                        param_type=param_type,
                        decorators=decorators,
                        location=self.location(start),
                    )
                )
            self.close_block()
        return ir.InputSection(fields=params)

    def _parse_output_section(self) -> ir.OutputSection:
        """Parse ``: Entity(field, ...)``; the field list is optional."""
        self.expect(TokenType.COLON)
        entity = self.expect(TokenType.IDENTIFIER).value
        fields: list[str] = []

        if self.match(TokenType.LPAREN):
            self.advance()
            while not self.match(TokenType.RPAREN):
                fields.append(self.expect_identifier_or_keyword().value)
                if not self.match(TokenType.RPAREN):
                    self.expect(TokenType.COMMA)
            self.expect(TokenType.RPAREN)

        self.expect_newline()
        return ir.OutputSection(entity=entity, fields=fields)

    # =========================================================================
    # Process steps
    # =========================================================================

    def _parse_process_section(self) -> ir.ProcessSection:
        steps: list[ir.ProcessStep] = []
        if self.open_block():
            while not self.at_block_end():
                steps.append(self.parse_process_step())
            self.close_block()
        return ir.ProcessSection(steps=steps)

    def parse_process_step(self) -> ir.ProcessStep:
        token = self.current_token()

        if token.type == TokenType.DERIVE:
            self.advance()
            name = self.expect_identifier_or_keyword().value
            self.expect(TokenType.EQUALS)
            value = self.parse_derive_value()
            self.expect_newline()
            return ir.DeriveStep(name=name, value=value, location=self.location(token))

        if token.type == TokenType.MUTATE:
            return self._parse_mutate_step()

        if token.type == TokenType.DELETE:
            self.advance()
            entity = self.expect(TokenType.IDENTIFIER).value
            self.expect(TokenType.WHERE)
            predicate = self.parse_predicate()
            self.expect_newline()
            return ir.DeleteStep(entity=entity, predicate=predicate, location=self.location(token))

        raise self.error(
            f"Expected derive, mutate or delete step, got {describe_token(token)}", token
        )

    def _parse_mutate_step(self) -> ir.MutateStep:
        """
        Parse a mutate step.

        Setters may follow the colon inline or sit on indented lines:
            mutate User: name = input.name, age = 30
            mutate User where id == input.id:
                name = input.name
        """
        start = self.expect(TokenType.MUTATE)
        entity = self.expect(TokenType.IDENTIFIER).value
        predicate = None
        if self.match(TokenType.WHERE):
            self.advance()
            predicate = self.parse_predicate()

        setters: list[ir.MutateSetter] = []
        if self.match(TokenType.COLON) and self.peek_token().type != TokenType.NEWLINE:
            self.advance()
            setters.extend(self._parse_setter_line())
        elif self.open_block():
            while not self.at_block_end():
                setters.extend(self._parse_setter_line())
            self.close_block()

        return ir.MutateStep(
            entity=entity,
            predicate=predicate,
            setters=setters,
            location=self.location(start),
        )

    def _parse_setter_line(self) -> list[ir.MutateSetter]:
        setters = [self._parse_setter()]
        while self.match(TokenType.COMMA):
            self.advance()
            setters.append(self._parse_setter())
        self.expect_newline()
        return setters

    def _parse_setter(self) -> ir.MutateSetter:
        start = self.current_token()
        field = self.expect_identifier_or_keyword().value
        self.expect(TokenType.EQUALS)
        value = self.parse_derive_value()
        return ir.MutateSetter(field=field, value=value, location=self.location(start))

    def parse_derive_value(self) -> ir.DeriveValue:
        """
        Parse the right-hand side of a derive or setter.

        One of: literal, dotted path, identifier, ``compute fn(args)``,
        ``select Entity where <predicate>``, ``system ns.capability(args)``.
        """
        if self.match(TokenType.COMPUTE):
            self.advance()
            function = self.expect_identifier_or_keyword().value
            return ir.ComputeCall(function=function, args=self._parse_call_args())

        if self.match(TokenType.SELECT):
            self.advance()
            entity = self.expect(TokenType.IDENTIFIER).value
            self.expect(TokenType.WHERE)
            return ir.SelectQuery(entity=entity, predicate=self.parse_predicate())

        if self.match(TokenType.SYSTEM):
            self.advance()
            namespace = self.expect_identifier_or_keyword().value
            self.expect(TokenType.DOT)
            capability = self.expect_identifier_or_keyword().value
            return ir.SystemCall(
                namespace=namespace,
                capability=capability,
                args=self._parse_call_args(),
            )

        return self._parse_function_arg()

    def _parse_call_args(self) -> list[ir.FunctionArg]:
        self.expect(TokenType.LPAREN)
        args: list[ir.FunctionArg] = []
        while not self.match(TokenType.RPAREN):
            args.append(self._parse_function_arg())
            if not self.match(TokenType.RPAREN):
                self.expect(TokenType.COMMA)
        self.expect(TokenType.RPAREN)
        return args

    def _parse_function_arg(self) -> ir.FunctionArg:
        if self.match(*LITERAL_START_TYPES):
            return ir.DeriveLiteral(value=self._parse_literal_value())

        path = [self.expect_identifier_or_keyword().value]
        while self.match(TokenType.DOT):
            self.advance()
            path.append(self.expect_identifier_or_keyword().value)

        if len(path) == 1:
            return ir.DeriveIdentifier(name=path[0])
        return ir.DeriveFieldAccess(path=path)

    # =========================================================================
    # Predicates
    # =========================================================================

    def parse_predicate(self) -> ir.Predicate:
        """Parse ``<ref> (==|!=|<|>) <ref>``."""
        field = self._parse_field_reference()

        token = self.current_token()
        operator = PREDICATE_OPERATORS.get(token.type)
        if operator is None:
            raise self.error(
                f"Expected comparison operator (==, !=, <, >), got {describe_token(token)}",
                token,
            )
        self.advance()

        value = self._parse_field_reference()
        return ir.Predicate(field=field, operator=operator, value=value)

    def _parse_field_reference(self) -> ir.FieldReference:
        if self.match(*LITERAL_START_TYPES):
            return ir.LiteralRef(value=self._parse_literal_value())

        name = self.expect_identifier_or_keyword().value
        if not self.match(TokenType.DOT):
            # Bare column name
            return ir.InputFieldRef(name=name)

        self.advance()
        field = self.expect_identifier_or_keyword().value
        if name == "input":
            return ir.InputFieldRef(name=field)
        return ir.DerivedFieldRef(name=name, field=field)
