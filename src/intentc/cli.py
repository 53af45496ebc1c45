"""
intentc command line.

Commands:
  check   Parse, preprocess and validate an .intent file
  parse   Print the AST of an .intent file as JSON
"""

import logging
import platform
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.style import Style
from rich.text import Text

from intentc import __version__
from intentc.core.compiler import compile_file
from intentc.core.dsl_parser_impl import parse_intent
from intentc.core.errors import IntentError, ParseError, format_diagnostic, format_vscode
from intentc.core.manifest import ProjectManifest, find_manifest, load_manifest
from intentc.core.preprocessor import inject_auth_actions

console = Console(highlight=False, soft_wrap=True)

STYLES = {
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "muted": Style(color="bright_black"),
}

app = typer.Typer(
    help="intentc - compiler front end for the Intent Definition Language",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"intentc {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """intentc CLI main callback for global options."""
    pass


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )


def _load_project(start: Path) -> ProjectManifest | None:
    manifest_path = find_manifest(start)
    if manifest_path is None:
        return None
    return load_manifest(manifest_path)


def _unreadable(file: Path, e: UnicodeDecodeError) -> NoReturn:
    typer.echo(f"Error: {file} is not valid UTF-8 (byte {e.start}: {e.reason})", err=True)
    raise typer.Exit(code=1)


def _print_lines(lines: list[str], style: str) -> None:
    for line in lines:
        console.print(Text(line, style=STYLES[style]))


@app.command()
def check(
    file: Path | None = typer.Argument(
        None, help="Source file (defaults to the entry in intent.toml)"
    ),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
    format: str = typer.Option(
        "human", "--format", "-f", help="Output format: 'human' or 'vscode'"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log pipeline progress"),
) -> None:
    """
    Parse, preprocess and validate an .intent file.

    Exits with status 1 when errors are found (or warnings, with --strict).
    """
    _configure_logging(verbose)

    project = _load_project(file.parent if file else Path.cwd())
    if file is None:
        if project is None:
            typer.echo("Error: no FILE given and no intent.toml found", err=True)
            raise typer.Exit(code=2)
        file = project.entry_path
    if project is not None:
        strict = strict or project.validation.warnings_as_errors

    if not file.is_file():
        typer.echo(f"Error: file not found: {file}", err=True)
        raise typer.Exit(code=1)

    try:
        result = compile_file(file)
    except IntentError as e:
        if format == "vscode":
            for line in format_vscode(e, file):
                typer.echo(line)
        else:
            label = "Parse error" if isinstance(e, ParseError) else "Validation failed"
            console.print(Text(f"{label}: {file}", style=STYLES["error"]))
            _print_lines(format_diagnostic(e), "error")
        raise typer.Exit(code=1)
    except UnicodeDecodeError as e:
        _unreadable(file, e)

    for warning in result.warnings:
        if format == "vscode":
            for line in format_vscode(warning, file):
                typer.echo(line)
        else:
            _print_lines(format_diagnostic(warning), "warning")

    if strict and result.warnings:
        console.print(
            Text(f"{len(result.warnings)} warning(s) treated as errors", style=STYLES["error"])
        )
        raise typer.Exit(code=1)

    if format != "vscode":
        intent_file = result.intent_file
        console.print(
            Text(
                f"OK: {file} is valid ({len(intent_file.entities)} entities, "
                f"{len(intent_file.actions)} actions, {len(intent_file.rules)} rules)",
                style=STYLES["success"],
            )
        )


@app.command()
def parse(
    file: Path = typer.Argument(..., help="Source file"),
    preprocess: bool = typer.Option(
        False, "--preprocess", help="Add the synthesized auth actions before printing"
    ),
) -> None:
    """Print the AST of an .intent file as JSON."""
    if not file.is_file():
        typer.echo(f"Error: file not found: {file}", err=True)
        raise typer.Exit(code=1)

    try:
        intent_file = parse_intent(file.read_text(encoding="utf-8"), file)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)
    except UnicodeDecodeError as e:
        _unreadable(file, e)

    if preprocess:
        intent_file = inject_auth_actions(intent_file)

    typer.echo(intent_file.model_dump_json(indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
