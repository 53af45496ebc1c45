"""
intentc - compiler front end for the Intent Definition Language.

Parses .intent source into a typed AST, synthesizes the standard auth
actions and validates every cross reference.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

# Re-export commonly used types for convenience
from .core import ir
from .core.compiler import CompileResult, compile_file, compile_source
from .core.errors import IntentError, MultipleErrors, ParseError, ValidationError


def _get_version() -> str:
    try:
        return _metadata_version("intentc")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "CompileResult",
    "compile_file",
    "compile_source",
    "IntentError",
    "MultipleErrors",
    "ParseError",
    "ValidationError",
]
