from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv

from . import main
from .cli_formatter import format_outcome, format_recent_analyses, format_status
from .config import AppConfig
from .formatters import get_formatter
from ..core.domain.exceptions import AuthenticationError, MythXVerifyError, ValidationError
from ..core.domain.models import UnitOutcome

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _load_config(command: str, log_level: str | None = None) -> AppConfig:
    """Load config from env and switch on per-run console and file logging."""
    config = AppConfig()
    config.runtime.run_id = f"{command}-{datetime.now():%Y%m%d-%H%M%S}"
    config.logging.console_output = True
    if log_level:
        config.logging.level = log_level.upper()
    return config


def _fail(e: MythXVerifyError) -> typer.Exit:
    typer.echo(f"Error: {e}", err=True)
    code = 2 if isinstance(e, (AuthenticationError, ValidationError)) else 1
    return typer.Exit(code=code)


@app.command()
def analyze(
    output: Path = typer.Argument(..., help="solc standard-JSON output file"),
    contracts: list[str] | None = typer.Argument(None, help="Contract names to analyze (default: all)"),
    input_path: Path | None = typer.Option(None, "--input", "-s", help="solc standard-JSON input file"),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Analysis mode: quick, standard, deep"),
    output_format: str | None = typer.Option(None, "--format", "-o", help="Report format"),
    no_cache_lookup: bool = typer.Option(False, "--no-cache-lookup", "-c", help="Deactivate MythX cache lookups"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Log request bodies"),
    limit: int | None = typer.Option(None, "--limit", "-l", help="Maximum number of concurrent analyses"),
    timeout: float | None = typer.Option(None, "--timeout", "-t", help="Seconds to wait for each analysis"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
):
    """Submit compiled contracts to MythX and report the findings."""
    config = _load_config("analyze", "DEBUG" if debug else log_level)

    try:
        render = get_formatter(output_format or config.analysis.output_format)
    except ValidationError as e:
        raise _fail(e)

    typer.echo(f"Mode: {mode or config.analysis.mode}")
    typer.echo(f"Log file: {config.directories.logs_dir / (config.runtime.run_id + '.jsonl')}")

    def on_outcome(outcome: UnitOutcome) -> None:
        typer.echo(format_outcome(outcome, render))

    try:
        outcomes = main.analyze(
            output,
            input_path=input_path,
            contracts=contracts,
            mode=mode,
            output_format=output_format,
            limit=limit,
            timeout=timeout,
            no_cache_lookup=no_cache_lookup or None,
            debug=debug,
            on_outcome=on_outcome,
            config=config,
        )
    except MythXVerifyError as e:
        raise _fail(e)

    if any(not o.ok for o in outcomes):
        raise typer.Exit(code=1)


@app.command()
def status(
    uuid: str = typer.Argument(..., help="Analysis UUID"),
):
    """Show the status of a submitted analysis."""
    config = _load_config("status")
    try:
        handle = main.status(uuid, config=config)
    except MythXVerifyError as e:
        raise _fail(e)
    typer.echo(format_status(handle))


@app.command()
def report(
    uuid: str = typer.Argument(..., help="Analysis UUID"),
    output_format: str | None = typer.Option(None, "--format", "-o", help="Report format"),
    compilation: Path | None = typer.Option(None, "--compilation", help="solc standard-JSON output used to locate findings"),
    input_path: Path | None = typer.Option(None, "--input", "-s", help="solc standard-JSON input file"),
):
    """Fetch and render the report of a past analysis."""
    config = _load_config("report")
    try:
        render = get_formatter(output_format or config.analysis.output_format)
        diagnostics = main.report(uuid, output_path=compilation, input_path=input_path, config=config)
    except MythXVerifyError as e:
        raise _fail(e)

    if not any(d.messages for d in diagnostics):
        typer.echo(f"✔ No errors/warnings found for analysis: {uuid.lower()}")
        return
    typer.echo(render(diagnostics))


@app.command(name="list")
def list_command():
    """List recently submitted analyses."""
    config = _load_config("list")
    try:
        analyses = main.list_analyses(config=config)
    except MythXVerifyError as e:
        raise _fail(e)
    typer.echo(format_recent_analyses(analyses))


if __name__ == "__main__":
    app()
