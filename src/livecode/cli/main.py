"""CLI entrypoints for livecode."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from livecode.app import AppError, build_registry, load_app_config, run_code
from livecode.config import config_to_dict
from livecode.util.logging import configure_logging

app = typer.Typer(help="Run presentation code blocks through execution drivers.")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
    ),
) -> None:
    """Configure CLI-level options."""

    configure_logging(log_level)


@app.command("run")
def run_command(
    driver: str = typer.Argument(..., help="Driver name (shell, sqlite, mysql, postgres, ...)."),
    source: Path | None = typer.Argument(
        None, help="File holding the code to execute. Reads stdin when omitted."
    ),
    connection: str | None = typer.Option(
        None, "--connection", "-c", help="Named connection from the driver configuration."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Presentation or configuration file declaring drivers."
    ),
    workdir: Path | None = typer.Option(
        None, "--workdir", "-w", help="Working directory for the driver."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
) -> None:
    """Execute code with a driver and print its output."""

    code = source.read_text(encoding="utf-8") if source is not None else sys.stdin.read()
    try:
        result = run_code(
            driver=driver,
            code=code,
            connection=connection,
            config_path=config_path,
            workdir=workdir,
        )
    except AppError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        if result.output:
            typer.echo(result.output)
        if result.error:
            typer.echo(f"Error: {result.error}", err=True)
    if not result.success:
        raise typer.Exit(code=1)


@app.command("drivers")
def drivers_command(
    config_path: Path | None = typer.Option(
        None, "--config", help="Presentation or configuration file declaring drivers."
    ),
) -> None:
    """List the drivers available for code blocks."""

    try:
        registry = build_registry(load_app_config(config_path))
    except AppError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for name in registry.list():
        typer.echo(name)


@app.command("config")
def config_command(
    config_path: Path | None = typer.Option(
        None, "--config", help="Presentation or configuration file declaring drivers."
    ),
) -> None:
    """Print the resolved driver configuration with passwords redacted."""

    try:
        config = load_app_config(config_path)
    except AppError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(config_to_dict(config), indent=2))
