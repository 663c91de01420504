"""Validate command for checking workspace files.

This module provides the `validate` command that checks a JSON workspace
file for errors and warnings, including stock advisories.
"""

from pathlib import Path
from typing import Annotated

import typer

from stockcut.application.config import (
    ConfigError,
    ValidationResult,
    load_workspace,
    validate_workspace,
)


def validate_command(
    workspace_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON workspace file to validate"),
    ],
) -> None:
    """Validate a workspace file.

    Checks the workspace file for:
    - JSON syntax errors
    - Schema validation errors (missing fields, unknown materials, etc.)
    - Stock advisories (cuts longer than any standard length, orphan batches)

    Exit codes:
        0 - Workspace is valid with no warnings
        1 - Workspace has errors (cannot be used)
        2 - Workspace is valid but has warnings

    Example:
        stockcut validate workshop.json
    """
    typer.echo(f"Validating {workspace_file}...")
    typer.echo()

    try:
        workspace = load_workspace(workspace_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_workspace(workspace)
    _display_validation_result(result)
    raise typer.Exit(code=result.exit_code)


def display_load_error(error: ConfigError) -> None:
    """Display a file loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            value = detail.get("value")
            typer.echo(f"  {path}: {message}", err=True)
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


def _display_validation_result(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.path}: {error.message}", err=True)
            if error.value is not None:
                typer.echo(f"    Value: {error.value!r}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    if result.errors:
        typer.echo(
            f"Validation failed: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)",
            err=True,
        )
    elif result.warnings:
        typer.echo(f"Validation passed with {len(result.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Workspace is valid.")
