"""Typer CLI for cutting plan optimization."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

import typer

from stockcut.application import ServiceFactory
from stockcut.application.config import (
    ConfigError,
    StockCutConfiguration,
    load_config,
    load_workspace,
    workspace_from_domain,
    workspace_to_domain,
)
from stockcut.cli.commands import display_load_error, validate_command
from stockcut.domain.exceptions import StockCutError
from stockcut.domain.services import calculate_consumption, select_width
from stockcut.domain.value_objects import LengthUnit
from stockcut.infrastructure import (
    commit_to_json,
    plan_to_json,
    roll_assignment_to_text,
    width_selection_to_text,
)

CLI_USER = "cli"

app = typer.Typer(
    name="stockcut",
    help="Plan cuts of standard-length pipe and mesh stock and commit them to inventory.",
)

# Register validate command
app.command(name="validate")(validate_command)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_settings(config_file: Path | None) -> StockCutConfiguration:
    if config_file is None:
        return StockCutConfiguration()
    try:
        return load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def _save_workspace(path: Path, factory: ServiceFactory, schema_version: str) -> None:
    workspace = workspace_from_domain(
        factory.get_inventory_store().list_materials(),
        factory.get_order_repository().list_orders(),
        schema_version=schema_version,
    )
    path.write_text(workspace.model_dump_json(indent=2), encoding="utf-8")
    typer.echo(f"Workspace saved: {path}", err=True)


def _parse_decimal(value: str, option: str) -> Decimal:
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        typer.echo(f"Error: {option} must be a number, got {value!r}", err=True)
        raise typer.Exit(code=1)
    if not parsed.is_finite() or parsed <= 0:
        typer.echo(f"Error: {option} must be a positive number", err=True)
        raise typer.Exit(code=1)
    return parsed


@app.command()
def optimize(
    workspace_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON workspace with materials and orders"),
    ],
    order_id: Annotated[
        str,
        typer.Option("--order", "-o", help="Order to optimize"),
    ],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON settings file"),
    ] = None,
    commit: Annotated[
        bool,
        typer.Option("--commit", help="Commit the plan to inventory after generating it"),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
    save: Annotated[
        bool,
        typer.Option("--save", help="Write order and stock changes back to the workspace"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log optimizer progress to stderr"),
    ] = False,
) -> None:
    """Generate a cutting plan for an order, optionally committing it.

    Example:
        stockcut optimize workshop.json --order SO-1001 --commit --save
    """
    if output_format not in ("text", "json"):
        typer.echo(f"Unknown format: {output_format}. Use text or json.", err=True)
        raise typer.Exit(code=1)

    _configure_logging(verbose)
    settings = _load_settings(config_file)
    try:
        workspace = load_workspace(workspace_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    materials, orders = workspace_to_domain(workspace)
    factory = ServiceFactory.from_domain(materials, orders, settings)

    try:
        plan = factory.get_orchestrator().optimize(order_id, CLI_USER).cutting_plan
        transactions = (
            list(factory.get_commit_coordinator().commit(order_id, CLI_USER).transactions)
            if commit
            else []
        )
    except StockCutError as e:
        typer.echo(f"Error: {e}", err=True)
        if save:
            _save_workspace(workspace_file, factory, workspace.schema_version)
        raise typer.Exit(code=1)

    if output_format == "json":
        typer.echo(commit_to_json(plan, transactions) if commit else plan_to_json(plan))
    else:
        typer.echo(factory.get_plan_formatter().format(plan))
        if commit:
            typer.echo()
            typer.echo(factory.get_commit_formatter().format(transactions))
            order = factory.get_order_repository().get(order_id)
            typer.echo()
            typer.echo(f"Order {order.label} is now in stage: {order.status}")

    if save:
        _save_workspace(workspace_file, factory, workspace.schema_version)


@app.command(name="select-width")
def select_width_command(
    required: Annotated[
        str,
        typer.Option("--required", "-r", help="Required panel width"),
    ],
    widths: Annotated[
        str,
        typer.Option("--widths", "-w", help="Comma-separated standard roll widths, e.g. 3,4,5"),
    ],
    length: Annotated[
        str | None,
        typer.Option("--length", "-l", help="Panel length; allows turning the panel to fit"),
    ] = None,
    unit: Annotated[
        str,
        typer.Option("--unit", "-u", help="Unit of all sizes: inches, ft, mm, cm or m"),
    ] = "ft",
) -> None:
    """Pick the narrowest standard roll width for a wire mesh panel.

    Example:
        stockcut select-width --required 3.5 --widths 3,4,5
    """
    try:
        length_unit = LengthUnit.parse(unit)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    required_width = _parse_decimal(required, "--required")
    standard_widths = [
        _parse_decimal(w, "--widths") for w in widths.split(",") if w.strip()
    ]

    try:
        if length is None or not standard_widths:
            selection = select_width(required_width, standard_widths, length_unit)
            typer.echo(width_selection_to_text(selection))
        else:
            roll = calculate_consumption(
                required_width,
                _parse_decimal(length, "--length"),
                standard_widths,
                length_unit,
            )
            typer.echo(roll_assignment_to_text(roll))
    except StockCutError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
