"""
Error types for Intent DSL parsing and validation.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .ir.location import SourceLocation


class IntentError(Exception):
    """Base exception for all intent compiler errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message

    @property
    def line(self) -> int | None:
        return self.context.line if self.context else None

    @property
    def column(self) -> int | None:
        return self.context.column if self.context else None


class ParseError(IntentError):
    """
    Raised when source text does not match the grammar.

    Examples:
    - Unexpected tokens
    - Malformed decorators or types
    - Indentation errors
    - Unterminated strings

    Parsing is fail-fast: exactly one ParseError is raised per source.
    """

    @property
    def snippet(self) -> str | None:
        return self.context.snippet if self.context else None


class ValidationError(IntentError):
    """
    Raised when an AST violates a semantic rule.

    Examples:
    - Duplicate entity, action or policy names
    - Reference to an undeclared entity
    - @api path placeholder without a matching input parameter
    - Unknown policy in @policy(...)
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation | None = None,
        hint: str | None = None,
        file: Path | None = None,
    ):
        self.location = location or SourceLocation()
        self.hint = hint
        context = None
        if self.location.line:
            context = ErrorContext(
                line=self.location.line,
                column=self.location.column,
                file=file,
                hint=hint,
            )
        super().__init__(message, context)

    def _format_message(self) -> str:
        text = super()._format_message()
        if self.hint and not self.context:
            text += f"\n  hint: {self.hint}"
        return text


class MultipleErrors(IntentError):
    """
    Aggregate of several validation errors reported together.

    Iterating yields the individual errors in the order they were found.
    """

    def __init__(self, errors: list[IntentError]):
        self.errors = list(errors)
        body = "\n".join(str(e) for e in self.errors)
        super().__init__(f"{body}\n{len(self.errors)} errors generated")

    def __iter__(self) -> Iterator[IntentError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


@dataclass(frozen=True)
class ValidationWarning:
    """
    Advisory diagnostic. Never blocks a successful validation.

    Attributes:
        message: Warning description
        location: Where the offending construct was declared
        hint: Optional suggestion for fixing it
    """

    message: str
    location: SourceLocation = field(default_factory=SourceLocation)
    hint: str | None = None

    def __str__(self) -> str:
        text = f"warning: {self.message}"
        if self.location.line:
            text += f" ({self.location})"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        file: Optional path to the source file
        snippet: Optional offending source line
        hint: Optional suggestion shown under the location
    """

    line: int
    column: int
    file: Path | None = None
    snippet: str | None = None
    hint: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "app.intent:10:5"
        """
        location = f"{self.line}:{self.column}"
        if self.file:
            location = f"{self.file}:{location}"

        parts = [location]
        if self.snippet is not None:
            parts.append(self._format_snippet())
        if self.hint:
            parts.append(f"  hint: {self.hint}")
        return "\n".join(parts)

    def _format_snippet(self) -> str:
        """Format the offending line with its number and an error marker."""
        prefix = f"{self.line:4d} | "
        marker_pos = len(prefix) + self.column - 1
        return f"{prefix}{self.snippet}\n" + " " * marker_pos + "^"


def make_parse_error(
    message: str,
    line: int,
    column: int,
    snippet: str | None = None,
    file: Path | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional offending source line
        file: Optional source file path

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(line=line, column=column, file=file, snippet=snippet)
    return ParseError(message, context)


def collect_errors(errors: list[ValidationError]) -> IntentError:
    """
    Fold a non-empty error list into the exception to raise.

    A single error is returned unwrapped; several are returned as MultipleErrors.
    """
    if not errors:
        raise ValueError("collect_errors() needs at least one error")
    if len(errors) == 1:
        return errors[0]
    return MultipleErrors(list(errors))


def format_diagnostic(diagnostic: IntentError | ValidationWarning) -> list[str]:
    """
    Render an error or warning as terminal lines.

    A MultipleErrors expands to one entry per contained error.
    """
    if isinstance(diagnostic, MultipleErrors):
        return [line for error in diagnostic for line in format_diagnostic(error)]
    if isinstance(diagnostic, ValidationWarning):
        return [str(diagnostic)]
    return [f"error: {diagnostic}"]


def format_vscode(diagnostic: IntentError | ValidationWarning, file: Path | str) -> list[str]:
    """Render diagnostics as ``file:line:col: severity: message`` lines."""
    if isinstance(diagnostic, MultipleErrors):
        return [line for error in diagnostic for line in format_vscode(error, file)]
    if isinstance(diagnostic, ValidationWarning):
        location = diagnostic.location
        return [f"{file}:{location.line or 1}:{location.column or 1}: warning: {diagnostic.message}"]
    return [f"{file}:{diagnostic.line or 1}:{diagnostic.column or 1}: error: {diagnostic.message}"]
