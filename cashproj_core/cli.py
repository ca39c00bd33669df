from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from cashproj_core.domain.errors import ConfigurationError, InputError
from cashproj_core.domain.models import CashEvent, ProjectionConfig
from cashproj_core.io import config as config_io
from cashproj_core.io import events as events_io
from cashproj_core.io import report
from cashproj_core.services import pipeline

app = typer.Typer(help="Project future cash balances from one-off and recurring cash events.")

DEFAULT_EVENTS = Path("data/cash_events.csv")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - [%(levelname)s] - %(name)s - %(message)s",
        force=True,
    )


def _fail(console: Console, exc: Exception, code: int) -> NoReturn:
    console.print(f"[red]{escape(str(exc))}[/red]")
    raise typer.Exit(code=code)


def _load_events(console: Console, path: Path, skip_invalid: bool) -> List[CashEvent]:
    try:
        return events_io.load_events(path, skip_invalid=skip_invalid)
    except FileNotFoundError:
        _fail(console, InputError(f"Events file not found: {path}"), 1)
    except InputError as exc:
        _fail(console, exc, 1)


def _resolve_config(
    config: Optional[Path],
    months: Optional[int],
    start: Optional[str],
    tax_rate: Optional[float],
) -> ProjectionConfig:
    """Command-line values win over the config file; unset values fall back to it, then to defaults."""
    base = config_io.load_projection_config(config) if config else ProjectionConfig()
    return config_io.build_projection_config(
        start_month=start if start is not None else base.start_month,
        months=months if months is not None else base.months,
        tax_rate=repr(tax_rate) if tax_rate is not None else base.tax_rate,
    )


@app.command()
def project(
    events: Path = typer.Option(DEFAULT_EVENTS, "--events", "-c", help="CSV with label,amount,recurrence[,start_month,kind,taxable]"),
    months: Optional[int] = typer.Option(None, "--months", "-m", help="Months to project (default 12)"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="First month YYYY-MM (default: current month)"),
    tax_rate: Optional[float] = typer.Option(None, "--tax-rate", "-t", help="Tax rate applied to taxable events (default 0)"),
    config: Optional[Path] = typer.Option(None, help="JSON config with start_month, months, tax_rate"),
    skip_invalid: bool = typer.Option(False, help="Skip malformed event rows instead of failing"),
    table: bool = typer.Option(False, help="Render a table instead of plain lines"),
    out: Optional[Path] = typer.Option(None, help="Output path for projection JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and loaded event listing"),
):
    """Project monthly and cumulative cash totals."""
    _setup_logging(verbose)
    console = Console()

    try:
        projection_config = _resolve_config(config, months, start, tax_rate)
    except ConfigurationError as exc:
        _fail(console, exc, 2)

    cash_events = _load_events(console, events, skip_invalid)
    if verbose:
        report.render_events(cash_events, console)

    try:
        result = pipeline.project_cash(cash_events, projection_config)
    except ConfigurationError as exc:
        _fail(console, exc, 2)

    if table:
        report.render_table(result, console)
    else:
        for line in report.format_rows(result.rows):
            typer.echo(line)

    if out:
        report.save_json(out, report.result_to_json(result))
        typer.echo(f"Projection written to {out}")


@app.command(name="events")
def list_events(
    events: Path = typer.Option(DEFAULT_EVENTS, "--events", "-c", help="CSV with label,amount,recurrence[,start_month,kind,taxable]"),
    skip_invalid: bool = typer.Option(False, help="Skip malformed event rows instead of failing"),
):
    """Show the cash events as loaded."""
    _setup_logging(False)
    console = Console()
    cash_events = _load_events(console, events, skip_invalid)
    report.render_events(cash_events, console)


if __name__ == "__main__":
    app()
