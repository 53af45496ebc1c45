"""
Entity and policy parsing for the Intent DSL.

Handles ``entity``/``auth entity`` declarations with their fields and nested
policies, and global ``policy`` blocks.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from .base import describe_token


class EntityParserMixin:
    """
    Mixin providing entity and policy parsing.

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
        open_block: Any
        at_block_end: Any
        close_block: Any
        error: Any
        location: Any
        parse_type: Any
        parse_decorators: Any
        parse_expression: Any

    def parse_entity(self) -> ir.Entity:
        """
        Parse an entity declaration.

        Syntax:
            [auth] entity Name:
                field: type @decorator ...
                policy Name:
                    subject: @auth
                    require <expr>
        """
        start = self.current_token()
        is_auth = False
        if self.match(TokenType.AUTH):
            self.advance()
            is_auth = True
        self.expect(TokenType.ENTITY)

        name = self.expect(TokenType.IDENTIFIER).value
        fields: list[ir.Field] = []
        policies: list[ir.Policy] = []

        if self.open_block():
            while not self.at_block_end():
                # "policy Name:" opens a nested policy; "policy: type" is a field
                if self.match(TokenType.POLICY) and self.peek_token().type != TokenType.COLON:
                    policies.append(self.parse_policy())
                else:
                    fields.append(self.parse_field())
            self.close_block()

        return ir.Entity(
            name=name,
            fields=fields,
            policies=policies,
            is_auth=is_auth,
            location=self.location(start),
        )

    def parse_field(self) -> ir.Field:
        """Parse ``name: type @decorator ...`` on one line."""
        start = self.current_token()
        name = self.expect_identifier_or_keyword().value
        self.expect(TokenType.COLON)
        field_type = self.parse_type()
        decorators = self.parse_decorators()
        self.expect_newline()

        return ir.Field(
            name=name,
            field_type=field_type,
            decorators=decorators,
            location=self.location(start),
        )

    def parse_policy(self) -> ir.Policy:
        """
        Parse a policy block.

        Syntax:
            policy Name:
                subject: @auth | EntityName
                require <expr>

        The two lines may appear in either order.
        """
        start = self.expect(TokenType.POLICY)
        name = self.expect_identifier_or_keyword().value
        subject: str | None = None
        require: ir.Expression | None = None

        if self.open_block():
            while not self.at_block_end():
                token = self.current_token()
                if token.value == "subject" and self.peek_token().type == TokenType.COLON:
                    self.advance()
                    self.advance()
                    subject = self._parse_policy_subject()
                    self.expect_newline()
                elif token.type == TokenType.REQUIRE:
                    self.advance()
                    require = self.parse_expression()
                    self.expect_newline()
                else:
                    raise self.error(
                        f"Expected 'subject:' or 'require' in policy '{name}', "
                        f"got {describe_token(token)}",
                        token,
                    )
            self.close_block()

        if subject is None:
            raise self.error(f"Policy '{name}' is missing 'subject:'", start)
        if require is None:
            raise self.error(f"Policy '{name}' is missing 'require'", start)

        return ir.Policy(
            name=name,
            subject=subject,
            require=require,
            location=self.location(start),
        )

    def _parse_policy_subject(self) -> str:
        if self.match(TokenType.AT):
            self.advance()
            token = self.expect_identifier_or_keyword()
            if token.value != "auth":
                raise self.error(
                    f"Policy subject must be @auth or an entity name, got '@{token.value}'",
                    token,
                )
            return ir.AUTH_SUBJECT
        return self.expect_identifier_or_keyword().value
