"""
Front-end pipeline: parse, preprocess, validate.

    source text -> parse_intent -> inject_auth_actions -> validate

Each stage is a pure function of its input; this module only wires them
together and reports progress through logging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from . import ir
from .dsl_parser_impl import parse_intent
from .preprocessor import inject_auth_actions
from .validator import ValidationContext, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    """Validated AST plus the validator's symbol tables and warnings."""

    intent_file: ir.IntentFile
    context: ValidationContext

    @property
    def warnings(self):
        return self.context.warnings


def compile_source(source: str, file: Path | None = None) -> CompileResult:
    """
    Compile IDL source text.

    Args:
        source: IDL source text
        file: Optional path, used in diagnostics

    Returns:
        CompileResult for the preprocessed, validated file

    Raises:
        ParseError: On a syntax error (nothing after parsing runs)
        ValidationError: On a single semantic error
        MultipleErrors: On several semantic errors
    """
    label = file or "<source>"

    intent_file = parse_intent(source, file)
    logger.debug(
        f"Parsed {label}: {len(intent_file.entities)} entities, "
        f"{len(intent_file.actions)} actions, {len(intent_file.rules)} rules, "
        f"{len(intent_file.policies)} policies"
    )

    intent_file = inject_auth_actions(intent_file)
    context = validate(intent_file)

    logger.info(f"Compiled {label} ({len(context.warnings)} warnings)")
    return CompileResult(intent_file=intent_file, context=context)


def compile_file(path: Path) -> CompileResult:
    """Read a UTF-8 .intent file and compile it."""
    source = path.read_text(encoding="utf-8")
    return compile_source(source, path)
