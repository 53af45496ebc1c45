"""Tests for error types and diagnostic formatting."""

from pathlib import Path

import pytest

from intentc.core.errors import (
    ErrorContext,
    MultipleErrors,
    ParseError,
    ValidationError,
    ValidationWarning,
    collect_errors,
    format_diagnostic,
    format_vscode,
    make_parse_error,
)
from intentc.core.ir import SourceLocation


class TestErrorContext:
    def test_location_only(self):
        assert ErrorContext(line=3, column=7).format() == "3:7"

    def test_with_file(self):
        context = ErrorContext(line=3, column=7, file=Path("app.intent"))
        assert context.format() == "app.intent:3:7"

    def test_snippet_marker(self):
        context = ErrorContext(line=12, column=5, snippet="    id uuid")
        lines = context.format().splitlines()
        assert lines[1] == "  12 |     id uuid"
        assert lines[2] == " " * 11 + "^"


class TestParseError:
    def test_fields(self):
        error = make_parse_error("Expected ':'", 2, 8, snippet="    id uuid")
        assert isinstance(error, ParseError)
        assert (error.line, error.column, error.snippet) == (2, 8, "    id uuid")
        assert error.message == "Expected ':'"
        assert str(error).endswith("Expected ':'")


class TestValidationError:
    def test_without_location(self):
        error = ValidationError("Unknown thing", hint="Try another")
        assert error.line is None
        assert str(error) == "Unknown thing\n  hint: Try another"

    def test_with_location(self):
        error = ValidationError("Bad", location=SourceLocation(line=4, column=2), hint="Fix it")
        assert error.line == 4
        assert str(error) == "4:2\n  hint: Fix it\nBad"


class TestMultipleErrors:
    def test_iteration_and_count(self):
        errors = [ValidationError("one"), ValidationError("two")]
        multiple = MultipleErrors(errors)

        assert len(multiple) == 2
        assert list(multiple) == errors
        assert str(multiple) == "one\ntwo\n2 errors generated"

    def test_collect_single(self):
        error = ValidationError("only")
        assert collect_errors([error]) is error

    def test_collect_several(self):
        collected = collect_errors([ValidationError("a"), ValidationError("b")])
        assert isinstance(collected, MultipleErrors)

    def test_collect_empty(self):
        with pytest.raises(ValueError):
            collect_errors([])


class TestFormatting:
    def test_warning_str(self):
        warning = ValidationWarning(
            "Entity 'Log' has no @primary field", SourceLocation(line=1, column=1), "Add one"
        )
        assert str(warning) == "warning: Entity 'Log' has no @primary field (1:1)\n  hint: Add one"

    def test_format_diagnostic_expands_multiple(self):
        multiple = MultipleErrors([ValidationError("a"), ValidationError("b")])
        assert format_diagnostic(multiple) == ["error: a", "error: b"]

    def test_format_diagnostic_warning(self):
        assert format_diagnostic(ValidationWarning("careful")) == ["warning: careful"]

    def test_format_vscode(self):
        multiple = MultipleErrors(
            [
                ValidationError("a", location=SourceLocation(line=3, column=5)),
                ValidationError("b"),
            ]
        )
        assert format_vscode(multiple, "app.intent") == [
            "app.intent:3:5: error: a",
            "app.intent:1:1: error: b",
        ]

    def test_format_vscode_warning(self):
        warning = ValidationWarning("careful", SourceLocation(line=9, column=1))
        assert format_vscode(warning, "app.intent") == ["app.intent:9:1: warning: careful"]
