"""Tests for the indentation-aware lexer."""

import pytest

from intentc.core.errors import ParseError
from intentc.core.lexer import TokenType, tokenize


def types_of(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


class TestIndentation:
    """INDENT/DEDENT/NEWLINE generation."""

    def test_block_emits_indent_and_dedent(self):
        types = types_of("entity User:\n    id: uuid\n")
        assert types == [
            TokenType.ENTITY,
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.NEWLINE,
            TokenType.INDENT,
            TokenType.IDENTIFIER,
            TokenType.COLON,
            TokenType.IDENTIFIER,
            TokenType.NEWLINE,
            TokenType.DEDENT,
            TokenType.EOF,
        ]

    def test_missing_trailing_newline_is_added(self):
        types = types_of("entity User:\n    id: uuid")
        assert types[-3:] == [TokenType.NEWLINE, TokenType.DEDENT, TokenType.EOF]

    def test_nested_blocks_close_together(self):
        text = "entity A:\n    policy P:\n        require x\n"
        types = types_of(text)
        assert types.count(TokenType.INDENT) == 2
        assert types.count(TokenType.DEDENT) == 2
        assert types[-3:] == [TokenType.DEDENT, TokenType.DEDENT, TokenType.EOF]

    def test_tab_counts_as_four_spaces(self):
        text = "entity A:\n\tx: string\n    y: string\n"
        types = types_of(text)
        assert types.count(TokenType.INDENT) == 1

    def test_inconsistent_dedent_is_error(self):
        text = "entity A:\n    x: string\n  y: string\n"
        with pytest.raises(ParseError, match="Inconsistent indentation") as exc_info:
            tokenize(text)
        assert exc_info.value.line == 3

    def test_blank_and_comment_lines_are_skipped(self):
        text = "# header\n\nentity A:\n\n    # inside\n    x: string  # trailing\n"
        types = types_of(text)
        assert TokenType.INDENT in types
        assert types.count(TokenType.NEWLINE) == 2


class TestTokens:
    """Literals, keywords and operators."""

    def test_keywords_are_recognized(self):
        tokens = tokenize("auth entity action rule policy where require")
        assert [t.type for t in tokens[:7]] == [
            TokenType.AUTH,
            TokenType.ENTITY,
            TokenType.ACTION,
            TokenType.RULE,
            TokenType.POLICY,
            TokenType.WHERE,
            TokenType.REQUIRE,
        ]

    def test_comparison_operators(self):
        tokens = tokenize("a == b != c <= d >= e < f > g = h")
        ops = [t.type for t in tokens if t.type not in (TokenType.IDENTIFIER,)]
        assert ops[:8] == [
            TokenType.DOUBLE_EQUALS,
            TokenType.NOT_EQUALS,
            TokenType.LESS_EQUAL,
            TokenType.GREATER_EQUAL,
            TokenType.LESS_THAN,
            TokenType.GREATER_THAN,
            TokenType.EQUALS,
            TokenType.NEWLINE,
        ]

    def test_string_escapes(self):
        token = tokenize(r'"say \"hi\"\n"')[0]
        assert token.type == TokenType.STRING
        assert token.value == 'say "hi"\n'

    def test_single_quoted_string(self):
        assert tokenize("'ok'")[0].value == "ok"

    def test_decimal_number(self):
        tokens = tokenize("3.14 user.email")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "3.14"

    def test_number_followed_by_dot_path(self):
        tokens = tokenize("1.x")
        assert [t.type for t in tokens[:3]] == [
            TokenType.NUMBER,
            TokenType.DOT,
            TokenType.IDENTIFIER,
        ]

    def test_number_takes_one_decimal_point(self):
        tokens = tokenize("1.2.3")
        assert [(t.type, t.value) for t in tokens[:3]] == [
            (TokenType.NUMBER, "1.2"),
            (TokenType.DOT, "."),
            (TokenType.NUMBER, "3"),
        ]

    def test_crlf_line_endings(self):
        types = types_of("entity A:\r\n    x: string\r\n")
        assert types.count(TokenType.INDENT) == 1
        assert TokenType.NEWLINE in types

    def test_positions_are_one_based(self):
        tokens = tokenize("entity User:\n    id: uuid\n")
        user = tokens[1]
        assert (user.line, user.column) == (1, 8)
        field = next(t for t in tokens if t.value == "id")
        assert (field.line, field.column) == (2, 5)
        assert field.offset == len("entity User:\n    ")


class TestLexerErrors:
    """Lexical errors carry a snippet of the offending line."""

    def test_unterminated_string(self):
        with pytest.raises(ParseError, match="Unterminated string") as exc_info:
            tokenize('x: "oops\n')
        assert exc_info.value.snippet == 'x: "oops'

    def test_unexpected_character(self):
        with pytest.raises(ParseError, match="Unexpected character") as exc_info:
            tokenize("entity A:\n    x: $tring\n")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 8

    def test_lone_bang_is_error(self):
        with pytest.raises(ParseError):
            tokenize("a ! b")
