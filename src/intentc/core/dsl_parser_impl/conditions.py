"""
Expression parsing for the Intent DSL.

Handles the boolean expressions shared by rule conditions and policy
``require`` clauses, plus literal values.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from .base import describe_token

COMPARISON_OPERATORS = {
    TokenType.DOUBLE_EQUALS: ir.BinaryOperator.EQUAL,
    TokenType.NOT_EQUALS: ir.BinaryOperator.NOT_EQUAL,
    TokenType.GREATER_THAN: ir.BinaryOperator.GREATER_THAN,
    TokenType.LESS_THAN: ir.BinaryOperator.LESS_THAN,
    TokenType.GREATER_EQUAL: ir.BinaryOperator.GREATER_EQUAL,
    TokenType.LESS_EQUAL: ir.BinaryOperator.LESS_EQUAL,
}

# Keywords that end an expression and can never start an operand
EXPRESSION_STOP_TYPES = (
    TokenType.AND,
    TokenType.OR,
    TokenType.NOT,
    TokenType.WHEN,
    TokenType.THEN,
    TokenType.REQUIRE,
)

LITERAL_START_TYPES = (
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.MINUS,
    TokenType.TRUE,
    TokenType.FALSE,
)


class ConditionParserMixin:
    """
    Mixin providing expression parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        error: Any

    def parse_expression(self) -> ir.Expression:
        """
        Parse a boolean expression.

        Precedence, lowest first:
            or_expr    := and_expr ('or' and_expr)*
            and_expr   := not_expr ('and' not_expr)*
            not_expr   := ['not'] comparison
            comparison := primary [op primary]
            primary    := '(' or_expr ')' | Entity.field | literal | identifier
        """
        return self._parse_or_expr()

    def _parse_or_expr(self) -> ir.Expression:
        """Parse OR expression (lowest precedence)."""
        left = self._parse_and_expr()

        while self.match(TokenType.OR):
            self.advance()
            right = self._parse_and_expr()
            left = ir.LogicalExpr(left=left, operator=ir.LogicalOperator.OR, right=right)

        return left

    def _parse_and_expr(self) -> ir.Expression:
        """Parse AND expression."""
        left = self._parse_not_expr()

        while self.match(TokenType.AND):
            self.advance()
            right = self._parse_not_expr()
            left = ir.LogicalExpr(left=left, operator=ir.LogicalOperator.AND, right=right)

        return left

    def _parse_not_expr(self) -> ir.Expression:
        if self.match(TokenType.NOT):
            self.advance()
            return ir.NotExpr(operand=self._parse_comparison())
        return self._parse_comparison()

    def _parse_comparison(self) -> ir.Expression:
        left = self._parse_primary()

        operator = COMPARISON_OPERATORS.get(self.current_token().type)
        if operator is None:
            return left

        self.advance()
        right = self._parse_primary()
        return ir.BinaryExpr(left=left, operator=operator, right=right)

    def _parse_primary(self) -> ir.Expression:
        if self.match(TokenType.LPAREN):
            self.advance()
            expr = self._parse_or_expr()
            self.expect(TokenType.RPAREN)
            return expr

        if self.match(*LITERAL_START_TYPES):
            return ir.LiteralExpr(value=self._parse_literal_value())

        if self.match(*EXPRESSION_STOP_TYPES):
            token = self.current_token()
            raise self.error(f"Expected expression, got {describe_token(token)}", token)

        name = self.expect_identifier_or_keyword().value
        if self.match(TokenType.DOT):
            self.advance()
            field = self.expect_identifier_or_keyword().value
            return ir.FieldAccessExpr(entity=name, field=field)

        return ir.IdentifierExpr(name=name)

    def _parse_literal_value(self) -> ir.LiteralValue:
        """Parse a string, number (optionally negative) or boolean literal."""
        token = self.current_token()

        if token.type == TokenType.STRING:
            self.advance()
            return token.value
        if token.type == TokenType.TRUE:
            self.advance()
            return True
        if token.type == TokenType.FALSE:
            self.advance()
            return False
        if token.type == TokenType.MINUS:
            self.advance()
            return -float(self.expect(TokenType.NUMBER).value)
        if token.type == TokenType.NUMBER:
            self.advance()
            return float(token.value)

        raise self.error(f"Expected literal value, got {describe_token(token)}", token)
