"""
Base parser class for the Intent DSL.

Holds the token cursor shared by every parser mixin, plus block helpers for
the ``header:`` NEWLINE INDENT ... DEDENT layout and error construction.
"""

from pathlib import Path

from ..errors import ParseError, make_parse_error
from ..ir.location import SourceLocation
from ..lexer import KEYWORDS, Token, TokenType

# Human readable names for structural tokens in error messages
TOKEN_DESCRIPTIONS = {
    TokenType.IDENTIFIER: "identifier",
    TokenType.STRING: "string",
    TokenType.NUMBER: "number",
    TokenType.NEWLINE: "end of line",
    TokenType.INDENT: "indented block",
    TokenType.DEDENT: "end of block",
    TokenType.EOF: "end of file",
}

# Every reserved word may also be used as a name
KEYWORD_AS_IDENTIFIER_TYPES = tuple(TokenType(keyword) for keyword in sorted(KEYWORDS))


def describe_token_type(token_type: TokenType) -> str:
    return TOKEN_DESCRIPTIONS.get(token_type, f"'{token_type.value}'")


def describe_token(token: Token) -> str:
    if token.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
        return f"'{token.value}'"
    if token.type == TokenType.STRING:
        return f'string "{token.value}"'
    return describe_token_type(token.type)


class BaseParser:
    """
    Token cursor for recursive descent.

    The token list always ends with EOF; reading past the end keeps returning
    it, so lookahead never needs bounds checks.
    """

    def __init__(self, tokens: list[Token], file: Path | None = None, source: str = ""):
        """
        Args:
            tokens: Output of the lexer, ending with EOF
            file: Source file path, used in errors
            source: Source text, used for snippets and raw decorator values
        """
        self.tokens = tokens
        self.file = file
        self.source = source
        self.lines = source.split("\n")
        self.pos = 0

    # =========================================================================
    # Cursor
    # =========================================================================

    def peek_token(self, offset: int = 1) -> Token:
        """Token ``offset`` places after the cursor."""
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def current_token(self) -> Token:
        return self.peek_token(0)

    def advance(self) -> Token:
        """Consume the token under the cursor. EOF is never consumed."""
        token = self.current_token()
        if token.type is not TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        return self.current_token().type in token_types

    def skip_newlines(self) -> None:
        while self.current_token().type is TokenType.NEWLINE:
            self.pos += 1

    def expect(self, token_type: TokenType) -> Token:
        """
        Consume a token of ``token_type``.

        Raises:
            ParseError: "Expected X, got Y" when the cursor is elsewhere
        """
        token = self.current_token()
        if token.type is not token_type:
            raise self.error(
                f"Expected {describe_token_type(token_type)}, got {describe_token(token)}",
                token,
            )
        return self.advance()

    def expect_identifier_or_keyword(self) -> Token:
        """Consume a name. Reserved words are accepted as field, parameter and value names."""
        token = self.current_token()
        if token.type is TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES:
            return self.advance()
        raise self.error(f"Expected identifier, got {describe_token(token)}", token)

    def expect_newline(self) -> None:
        """End the current line. End of block and end of file also count."""
        if self.match(TokenType.NEWLINE):
            self.skip_newlines()
        elif not self.match(TokenType.EOF, TokenType.DEDENT):
            token = self.current_token()
            raise self.error(f"Expected end of line, got {describe_token(token)}", token)

    # =========================================================================
    # Blocks
    # =========================================================================

    def open_block(self) -> bool:
        """
        Consume ``:`` NEWLINE INDENT after a block header.

        Returns False when the header has no indented body.
        """
        self.expect(TokenType.COLON)
        self.expect_newline()
        if self.match(TokenType.INDENT):
            self.advance()
            return True
        return False

    def at_block_end(self) -> bool:
        self.skip_newlines()
        return self.match(TokenType.DEDENT, TokenType.EOF)

    def close_block(self) -> None:
        if self.match(TokenType.DEDENT):
            self.advance()
        self.skip_newlines()

    # =========================================================================
    # Positions
    # =========================================================================

    def location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            line=token.line,
            column=token.column,
            span=(token.offset, token.offset + len(token.value)),
        )

    def error(self, message: str, token: Token | None = None) -> ParseError:
        """Build a ParseError at ``token`` (default: the cursor) quoting its source line."""
        token = token or self.current_token()
        line = min(token.line, len(self.lines))
        snippet = self.lines[line - 1].rstrip("\r") if line > 0 else None
        column = token.column if line == token.line else 1
        return make_parse_error(message, line, column, snippet=snippet, file=self.file)
