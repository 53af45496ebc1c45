"""
Intent DSL Parser Package.

This package provides a recursive-descent parser for the Intent DSL.
The parser is built using mixins to separate parsing logic by construct type.

The main exports are:
- Parser: The complete parser class
- parse_intent: Convenience function to parse IDL source text

Usage:
    from intentc.core.dsl_parser_impl import parse_intent

    intent_file = parse_intent(text, file)
"""

from pathlib import Path

from .. import ir
from ..lexer import TokenType, tokenize
from .action import ActionParserMixin
from .base import BaseParser, describe_token
from .conditions import ConditionParserMixin
from .entity import EntityParserMixin
from .rule import RuleParserMixin
from .types import TypeParserMixin


class Parser(
    BaseParser,
    TypeParserMixin,
    ConditionParserMixin,
    EntityParserMixin,
    ActionParserMixin,
    RuleParserMixin,
):
    """
    Complete Intent DSL Parser.

    This class composes all parser mixins to provide full DSL parsing capability.
    Each mixin provides parsing for a specific construct type:

    - TypeParserMixin: Field types and decorators
    - ConditionParserMixin: Expressions for rules and policies
    - EntityParserMixin: Entities, auth entities and policies
    - ActionParserMixin: Actions, process steps and predicates
    - RuleParserMixin: Rules and their consequences
    """

    def parse(self) -> ir.IntentFile:
        """
        Parse the whole token stream.

        Top-level definitions may appear in any order and are kept in source
        order within each kind.

        Returns:
            IntentFile with all parsed declarations
        """
        entities: list[ir.Entity] = []
        actions: list[ir.Action] = []
        rules: list[ir.Rule] = []
        policies: list[ir.Policy] = []
        auth_entity: str | None = None

        self.skip_newlines()

        while not self.match(TokenType.EOF):
            if self.match(TokenType.ENTITY) or (
                self.match(TokenType.AUTH) and self.peek_token().type == TokenType.ENTITY
            ):
                entity = self.parse_entity()
                entities.append(entity)
                if entity.is_auth and auth_entity is None:
                    auth_entity = entity.name

            elif self.match(TokenType.AT, TokenType.ACTION):
                actions.append(self.parse_action())

            elif self.match(TokenType.RULE):
                rules.append(self.parse_rule())

            elif self.match(TokenType.POLICY):
                policies.append(self.parse_policy())

            else:
                token = self.current_token()
                raise self.error(
                    f"Unexpected {describe_token(token)} at top level. "
                    f"Expected entity, auth entity, action, rule or policy",
                    token,
                )

            self.skip_newlines()

        return ir.IntentFile(
            entities=entities,
            actions=actions,
            rules=rules,
            policies=policies,
            auth_entity=auth_entity,
            source_path=self.file,
        )


def parse_intent(text: str, file: Path | None = None) -> ir.IntentFile:
    """
    Parse IDL source text into an IntentFile.

    Args:
        text: Source text
        file: Optional source file path (recorded on the result and in errors)

    Returns:
        Parsed IntentFile

    Raises:
        ParseError: On the first lexical or grammar error
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, text)
    try:
        return parser.parse()
    except RecursionError:
        raise parser.error("Expression or type is nested too deeply") from None


__all__ = [
    "Parser",
    "parse_intent",
]
