"""
Rule parsing for the Intent DSL.

Handles ``rule Name: when <expr> then <consequence>`` declarations, written
either on the header line or as an indented block.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

MESSAGE_CONSEQUENCES = {
    "reject": ir.RejectConsequence,
    "log": ir.LogConsequence,
}


class RuleParserMixin:
    """
    Mixin providing rule parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        expect_newline: Any
        skip_newlines: Any
        close_block: Any
        error: Any
        location: Any
        parse_expression: Any

    def parse_rule(self) -> ir.Rule:
        """
        Parse a rule.

        Syntax:
            rule Name:
                when <expr>
                then reject("message") | log("message") | action(arg, ...)

            rule Name: when <expr> then <consequence>

            rule Name: when <expr>
                then <consequence>
        """
        start = self.expect(TokenType.RULE)
        name = self.expect_identifier_or_keyword().value
        self.expect(TokenType.COLON)

        block = False
        if self.match(TokenType.NEWLINE):
            self.skip_newlines()
            self.expect(TokenType.INDENT)
            block = True

        self.expect(TokenType.WHEN)
        condition = self.parse_expression()
        if self.match(TokenType.NEWLINE):
            self.skip_newlines()
            # ``then`` continued on an indented line below a one-line ``when``
            if not block and self.match(TokenType.INDENT):
                self.advance()
                block = True
        self.expect(TokenType.THEN)
        consequence = self._parse_consequence()
        self.expect_newline()

        if block:
            if not self.match(TokenType.DEDENT):
                raise self.error(f"Unexpected content after 'then' in rule '{name}'")
            self.close_block()

        return ir.Rule(
            name=name,
            condition=condition,
            consequence=consequence,
            location=self.location(start),
        )

    def _parse_consequence(self) -> ir.RuleConsequence:
        name = self.expect_identifier_or_keyword().value
        self.expect(TokenType.LPAREN)

        consequence_type = MESSAGE_CONSEQUENCES.get(name)
        if consequence_type is not None:
            message = self.expect(TokenType.STRING).value
            self.expect(TokenType.RPAREN)
            return consequence_type(message=message)

        args: list[ir.Expression] = []
        while not self.match(TokenType.RPAREN):
            args.append(self.parse_expression())
            if not self.match(TokenType.RPAREN):
                self.expect(TokenType.COMMA)
        self.expect(TokenType.RPAREN)
        return ir.ActionCallConsequence(action=name, args=args)
