"""
Type and decorator parsing for the Intent DSL.

Handles field types (primitives, enums, references, arrays, lists, optionals)
and every ``@decorator`` form used on fields, parameters and actions.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import KEYWORDS, TokenType

# Tokens that may appear inside an @api path
PATH_TOKEN_TYPES = (
    TokenType.SLASH,
    TokenType.IDENTIFIER,
    TokenType.NUMBER,
    TokenType.MINUS,
    TokenType.LBRACE,
    TokenType.RBRACE,
    TokenType.DOT,
)


class TypeParserMixin:
    """
    Mixin providing field type and decorator parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        peek_token: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        error: Any
        source: str
        _parse_literal_value: Any

    def parse_type(self) -> ir.FieldType:
        """
        Parse a field type.

        Grammar:
            type      := base_type ['?']
            base_type := '[' type ']'
                       | 'ref' '<' Name '>'
                       | 'list' '<' type '>'
                       | value ('|' value)+
                       | primitive | Name
        """
        field_type = self._parse_base_type()

        if self.match(TokenType.QUESTION):
            self.advance()
            return ir.OptionalType(inner=field_type)

        return field_type

    def _parse_base_type(self) -> ir.FieldType:
        if self.match(TokenType.LBRACKET):
            self.advance()
            element = self.parse_type()
            self.expect(TokenType.RBRACKET)
            return ir.ArrayType(element=element)

        token = self.expect_identifier_or_keyword()
        name = token.value

        # Enum: active | inactive | suspended
        if self.match(TokenType.PIPE):
            values = [name]
            while self.match(TokenType.PIPE):
                self.advance()
                values.append(self.expect_identifier_or_keyword().value)
            return ir.EnumType(values=values)

        if name == "ref" and self.match(TokenType.LESS_THAN):
            self.advance()
            entity = self.expect(TokenType.IDENTIFIER).value
            self.expect(TokenType.GREATER_THAN)
            return ir.RefType(entity=entity)

        if name == "list" and self.match(TokenType.LESS_THAN):
            self.advance()
            element = self.parse_type()
            self.expect(TokenType.GREATER_THAN)
            return ir.ListType(element=element)

        if name in ir.PRIMITIVE_TYPES:
            return ir.PRIMITIVE_TYPES[name]()

        if name[0].isupper():
            return ir.ReferenceType(entity=name)

        primitives = ", ".join(ir.PRIMITIVE_TYPES)
        raise self.error(
            f"Unknown type '{name}'. Expected one of {primitives}, an entity name, "
            f"an enum (a | b), ref<Entity>, list<T> or [T]",
            token,
        )

    # =========================================================================
    # Decorators
    # =========================================================================

    def parse_decorators(self) -> list[ir.Decorator]:
        """Parse decorators following a field or parameter type on the same line."""
        decorators = []
        while self.match(TokenType.AT):
            decorators.append(self.parse_decorator())
        return decorators

    def parse_decorator(self) -> ir.Decorator:
        """Parse one ``@name[...]`` decorator."""
        self.expect(TokenType.AT)
        token = self.expect_identifier_or_keyword()
        name = token.value

        if name in ir.FLAG_DECORATORS:
            return ir.FLAG_DECORATORS[name]()  # type: ignore[return-value]
        if name == "default":
            return self._parse_default_decorator()
        if name == "validate":
            return self._parse_validate_decorator()
        if name == "api":
            return self._parse_api_decorator()
        if name == "auth":
            return self._parse_auth_decorator()
        if name == "map":
            return self._parse_map_decorator()
        if name == "policy":
            return self._parse_policy_decorator()

        raise self.error(f"Unknown decorator '@{name}'", token)

    def _parse_default_decorator(self) -> ir.DefaultDecorator:
        """Parse ``@default(value)``, keeping the raw value text."""
        lparen = self.expect(TokenType.LPAREN)
        depth = 0
        while True:
            token = self.current_token()
            if token.type in (TokenType.NEWLINE, TokenType.EOF):
                raise self.error("Unclosed @default(...)", lparen)
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                if depth == 0:
                    break
                depth -= 1
            self.advance()
        rparen = self.advance()

        value = self.source[lparen.offset + 1 : rparen.offset].strip()
        if len(value) >= 2 and value[0] in "\"'" and value[-1] == value[0]:
            value = value[1:-1]
        elif not value:
            raise self.error("@default requires a value", lparen)

        return ir.DefaultDecorator(value=value)

    def _parse_validate_decorator(self) -> ir.ValidateDecorator:
        """Parse ``@validate(min: 1, max: 10, pattern: "...", required: true)``."""
        self.expect(TokenType.LPAREN)
        args: dict[str, Any] = {}

        while not self.match(TokenType.RPAREN):
            key_token = self.expect_identifier_or_keyword()
            key = key_token.value
            self.expect(TokenType.COLON)

            if key in ("min", "max"):
                value = self._parse_literal_value()
                if not isinstance(value, float):
                    raise self.error(f"@validate {key} must be a number", key_token)
                args[key] = value
            elif key == "pattern":
                args[key] = self.expect(TokenType.STRING).value
            elif key == "required":
                value = self._parse_literal_value()
                if not isinstance(value, bool):
                    raise self.error("@validate required must be true or false", key_token)
                args[key] = value
            else:
                raise self.error(
                    f"Unknown @validate argument '{key}'. Expected min, max, pattern or required",
                    key_token,
                )

            if not self.match(TokenType.RPAREN):
                self.expect(TokenType.COMMA)

        self.expect(TokenType.RPAREN)
        return ir.ValidateDecorator(**args)

    def _parse_api_decorator(self) -> ir.ApiDecorator:
        """Parse ``@api METHOD /path/{param}``."""
        method_token = self.expect_identifier_or_keyword()
        try:
            method = ir.HttpMethod(method_token.value)
        except ValueError:
            methods = ", ".join(m.value for m in ir.HttpMethod)
            raise self.error(
                f"Unknown HTTP method '{method_token.value}'. Expected one of {methods}",
                method_token,
            ) from None

        return ir.ApiDecorator(method=method, path=self._parse_api_path())

    def _parse_api_path(self) -> str:
        """Read a whitespace-free path starting with '/'."""
        start = self.expect(TokenType.SLASH)
        end = start.offset + 1

        while True:
            token = self.current_token()
            adjacent = token.offset == end
            if not adjacent:
                break
            if token.type in PATH_TOKEN_TYPES or token.type.value in KEYWORDS:
                self.advance()
                end = token.offset + len(token.value)
            else:
                break

        return self.source[start.offset : end]

    def _parse_auth_decorator(self) -> ir.AuthDecorator:
        """Parse ``@auth``, ``@auth(Name)`` or ``@auth(name(arg, ...))``."""
        if not self.match(TokenType.LPAREN):
            return ir.AuthDecorator()

        self.advance()
        name = self.expect_identifier_or_keyword().value
        args: list[str] = []

        if self.match(TokenType.LPAREN):
            self.advance()
            while not self.match(TokenType.RPAREN):
                args.append(self.expect_identifier_or_keyword().value)
                if not self.match(TokenType.RPAREN):
                    self.expect(TokenType.COMMA)
            self.expect(TokenType.RPAREN)

        self.expect(TokenType.RPAREN)
        return ir.AuthDecorator(name=name, args=args)

    def _parse_map_decorator(self) -> ir.MapDecorator:
        """Parse ``@map(target)`` or ``@map(target, hash)``."""
        self.expect(TokenType.LPAREN)
        target = self.expect_identifier_or_keyword().value
        transform = ir.MapTransform.NONE

        if self.match(TokenType.COMMA):
            self.advance()
            token = self.expect_identifier_or_keyword()
            if token.value != ir.MapTransform.HASH.value:
                raise self.error(
                    f"Unknown @map transform '{token.value}'. Expected 'hash'", token
                )
            transform = ir.MapTransform.HASH

        self.expect(TokenType.RPAREN)
        return ir.MapDecorator(target=target, transform=transform)

    def _parse_policy_decorator(self) -> ir.PolicyDecorator:
        """Parse ``@policy(Name)`` or ``@policy(Entity.Name)``."""
        self.expect(TokenType.LPAREN)
        parts = [self.expect_identifier_or_keyword().value]
        if self.match(TokenType.DOT):
            self.advance()
            parts.append(self.expect_identifier_or_keyword().value)
        self.expect(TokenType.RPAREN)
        return ir.PolicyDecorator(name=".".join(parts))


