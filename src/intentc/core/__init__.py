"""Core intentc functionality: lexer, AST, parser, preprocessor, validator, compiler pipeline."""

from . import ir
from .compiler import CompileResult, compile_file, compile_source
from .dsl_parser_impl import parse_intent
from .errors import (
    ErrorContext,
    IntentError,
    MultipleErrors,
    ParseError,
    ValidationError,
    ValidationWarning,
)
from .manifest import ProjectManifest, find_manifest, load_manifest
from .preprocessor import inject_auth_actions
from .validator import ValidationContext, validate

__all__ = [
    "ir",
    "IntentError",
    "ParseError",
    "ValidationError",
    "MultipleErrors",
    "ValidationWarning",
    "ErrorContext",
    "parse_intent",
    "inject_auth_actions",
    "validate",
    "ValidationContext",
    "compile_source",
    "compile_file",
    "CompileResult",
    "load_manifest",
    "find_manifest",
    "ProjectManifest",
]
