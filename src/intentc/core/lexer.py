"""
Lexer/Tokenizer for the Intent Definition Language.

Converts raw IDL text into a stream of tokens with source location tracking.
Handles indentation-based blocks (Python-style) with INDENT/DEDENT tokens.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in the Intent DSL."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Definition keywords
    ENTITY = "entity"
    AUTH = "auth"
    ACTION = "action"
    RULE = "rule"
    POLICY = "policy"

    # Process keywords
    DERIVE = "derive"
    MUTATE = "mutate"
    DELETE = "delete"
    COMPUTE = "compute"
    SELECT = "select"
    SYSTEM = "system"
    WHERE = "where"

    # Rule and policy keywords
    WHEN = "when"
    THEN = "then"
    REQUIRE = "require"

    # Expression keywords
    AND = "and"
    OR = "or"
    NOT = "not"
    TRUE = "true"
    FALSE = "false"

    # Comparison operators
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="

    # Punctuation
    COLON = ":"
    COMMA = ","
    DOT = "."
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    AT = "@"
    QUESTION = "?"
    PIPE = "|"
    EQUALS = "="
    SLASH = "/"
    MINUS = "-"

    # Special
    NEWLINE = "NEWLINE"
    INDENT = "INDENT"
    DEDENT = "DEDENT"
    EOF = "EOF"


# Keywords mapping
KEYWORDS = {
    "entity",
    "auth",
    "action",
    "rule",
    "policy",
    "derive",
    "mutate",
    "delete",
    "compute",
    "select",
    "system",
    "where",
    "when",
    "then",
    "require",
    "and",
    "or",
    "not",
    "true",
    "false",
}

DIGITS = frozenset("0123456789")

TWO_CHAR_TOKENS = {
    "==": TokenType.DOUBLE_EQUALS,
    "!=": TokenType.NOT_EQUALS,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
}

SINGLE_CHAR_TOKENS = {
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "@": TokenType.AT,
    "?": TokenType.QUESTION,
    "|": TokenType.PIPE,
    "=": TokenType.EQUALS,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "/": TokenType.SLASH,
    "-": TokenType.MINUS,
}

STRING_ESCAPES = {"n": "\n", "t": "\t"}

TAB_WIDTH = 4


@dataclass
class Token:
    """
    A single token in the IDL.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset of the first character in the source
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


def measure_indent(line: str) -> tuple[int, int]:
    """Return (indent width, index of first non-indent character); tabs count as 4."""
    width = 0
    for index, ch in enumerate(line):
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += TAB_WIDTH
        else:
            return width, index
    return width, len(line)


class Lexer:
    """
    Lexer for the Intent DSL.

    Works one physical line at a time: the indentation of each non-blank
    line is compared with the enclosing blocks, then the rest of the line is
    scanned into tokens and closed with a NEWLINE.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Optional source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.lines = text.split("\n")
        self.tokens: list[Token] = []
        self.indent_stack = [0]

        # Line being scanned
        self.line = 0
        self.line_start = 0
        self.source_line = ""

    def error(self, message: str, line: int, column: int):
        """Build a ParseError pointing at the given position."""
        snippet = self.lines[line - 1].rstrip("\r") if 0 < line <= len(self.lines) else ""
        return make_parse_error(message, line, column, snippet=snippet, file=self.file)

    def emit(self, token_type: TokenType, value: str, column: int) -> None:
        offset = self.line_start + column - 1
        self.tokens.append(Token(token_type, value, self.line, column, offset))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens including INDENT/DEDENT and EOF

        Raises:
            ParseError: If an invalid character or malformed literal is found
        """
        offset = 0
        for number, source_line in enumerate(self.lines, start=1):
            self.line = number
            self.line_start = offset
            self.source_line = source_line
            offset += len(source_line) + 1

            content = source_line.strip(" \t\r")
            if not content or content.startswith("#"):
                continue

            indent, start = measure_indent(source_line)
            self.handle_indentation(indent)
            self.scan_line(start)
            self.emit(TokenType.NEWLINE, "\\n", len(source_line) + 1)

        # Close every block still open at end of input
        end_column = len(self.source_line) + 1
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self.emit(TokenType.DEDENT, "", end_column)

        self.emit(TokenType.EOF, "", end_column)
        return self.tokens

    def handle_indentation(self, indent: int) -> None:
        """Emit INDENT or DEDENT tokens for a change in indentation."""
        if indent > self.indent_stack[-1]:
            self.indent_stack.append(indent)
            self.emit(TokenType.INDENT, "", 1)
            return

        while indent < self.indent_stack[-1]:
            self.indent_stack.pop()
            self.emit(TokenType.DEDENT, "", 1)

        if indent != self.indent_stack[-1]:
            raise self.error(
                f"Inconsistent indentation (expected {self.indent_stack[-1]} spaces, "
                f"got {indent})",
                self.line,
                1,
            )

    def scan_line(self, index: int) -> None:
        """Tokenize the current line from ``index`` up to its end or a comment."""
        text = self.source_line

        while index < len(text):
            ch = text[index]
            column = index + 1

            if ch in " \t\r":
                index += 1

            elif ch == "#":
                break

            elif ch in ('"', "'"):
                value, index = self.read_string(index)
                self.emit(TokenType.STRING, value, column)

            elif ch in DIGITS:
                end = self.number_end(index)
                self.emit(TokenType.NUMBER, text[index:end], column)
                index = end

            elif ch.isalpha() or ch == "_":
                end = index + 1
                while end < len(text) and (text[end].isalnum() or text[end] == "_"):
                    end += 1
                word = text[index:end]
                token_type = TokenType(word) if word in KEYWORDS else TokenType.IDENTIFIER
                self.emit(token_type, word, column)
                index = end

            elif text[index : index + 2] in TWO_CHAR_TOKENS:
                pair = text[index : index + 2]
                self.emit(TWO_CHAR_TOKENS[pair], pair, column)
                index += 2

            elif ch in SINGLE_CHAR_TOKENS:
                self.emit(SINGLE_CHAR_TOKENS[ch], ch, column)
                index += 1

            else:
                raise self.error(f"Unexpected character: {ch!r}", self.line, column)

    def read_string(self, index: int) -> tuple[str, int]:
        """
        Read a quoted string starting at ``index``.

        Strings end on the line they start on; ``\\n`` and ``\\t`` are the
        only named escapes, any other escaped character stands for itself.

        Returns:
            The unescaped value and the index just past the closing quote
        """
        text = self.source_line
        quote = text[index]
        chars = []
        pos = index + 1

        while pos < len(text) and text[pos] != quote:
            if text[pos] == "\\" and pos + 1 < len(text):
                pos += 1
                chars.append(STRING_ESCAPES.get(text[pos], text[pos]))
            else:
                chars.append(text[pos])
            pos += 1

        if pos >= len(text):
            raise self.error("Unterminated string literal", self.line, index + 1)

        return "".join(chars), pos + 1

    def number_end(self, index: int) -> int:
        """Index just past an integer or decimal literal (at most one '.')."""
        text = self.source_line
        end = index
        while end < len(text) and text[end] in DIGITS:
            end += 1

        if text[end : end + 1] == "." and text[end + 1 : end + 2] in DIGITS:
            end += 1
            while end < len(text) and text[end] in DIGITS:
                end += 1

        return end


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to tokenize IDL text.

    Args:
        text: Source text
        file: Optional source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
