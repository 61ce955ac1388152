"""CLI entrypoints for token spend vs. savings reporting."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from .economics.export import ExportError, render_csv, render_json
from .economics.render import render_period_table, render_summary
from .economics.schemas import Granularity
from .economics.service import EconomicsService
from .ledgers.errors import LedgerError
from .ledgers.savings import SavingsRepository
from .ledgers.spend import SpendLedgerReader
from .paths import get_default_savings_db_path, get_default_spend_json_paths

LOGGER = logging.getLogger(__name__)

TYPER_APP = typer.Typer(help="Token spend vs. savings economics.")


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    CSV = "csv"


@TYPER_APP.callback()
def main() -> None:
    """Root CLI callback."""


@TYPER_APP.command("report")
def report_command(
    daily: bool = typer.Option(False, "--daily", help="Show per-day economics."),
    weekly: bool = typer.Option(False, "--weekly", help="Show per-week economics (ISO weeks starting Monday)."),
    monthly: bool = typer.Option(False, "--monthly", help="Show per-month economics."),
    all_periods: bool = typer.Option(False, "--all", help="Show daily, weekly and monthly economics."),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        "-f",
        help="Output format.",
        case_sensitive=False,
    ),
    savings_db: Path | None = typer.Option(
        None,
        "--savings-db",
        "-s",
        help="Savings history SQLite database. Defaults to $RTK_DB_PATH or the XDG data directory.",
    ),
    spend_json: list[Path] = typer.Option(
        None,
        "--spend-json",
        "-j",
        help="ccusage JSON export (daily/weekly/monthly). Repeatable. Defaults to $TOKEN_ECONOMICS_SPEND_JSON.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable info-level logging."),
) -> None:
    """Compare token spend with token savings per period."""
    _configure_logging(verbose)
    granularities = _selected_granularities(daily=daily, weekly=weekly, monthly=monthly, all_periods=all_periods)
    database_path = savings_db if savings_db is not None else get_default_savings_db_path()
    spend_paths = spend_json if spend_json else get_default_spend_json_paths()
    if not spend_paths:
        LOGGER.info("No spend exports supplied; spend columns stay empty.")

    console = Console()
    repository: SavingsRepository | None = None
    try:
        repository = SavingsRepository(database_path)
        service = EconomicsService(
            savings_repository=repository,
            spend_reader=SpendLedgerReader(spend_paths) if spend_paths else None,
        )

        if output_format is OutputFormat.TEXT:
            if not granularities:
                periods, totals = service.collect_summary()
                render_summary(periods, totals, console)
                return
            for granularity in granularities:
                render_period_table(granularity, service.collect_periods(granularity), console)
            return

        report = service.build_report(granularities or [Granularity.MONTHLY])
        output = render_json(report) if output_format is OutputFormat.JSON else render_csv(report)
    except LedgerError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except ExportError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    finally:
        if repository is not None:
            repository.close()

    typer.echo(output, nl=output_format is OutputFormat.JSON)


def _selected_granularities(daily: bool, weekly: bool, monthly: bool, all_periods: bool) -> list[Granularity]:
    """Return requested granularities in daily, weekly, monthly order."""
    selected: list[Granularity] = []
    if all_periods or daily:
        selected.append(Granularity.DAILY)
    if all_periods or weekly:
        selected.append(Granularity.WEEKLY)
    if all_periods or monthly:
        selected.append(Granularity.MONTHLY)
    return selected


def _configure_logging(verbose: bool) -> None:
    """Initialize default logging for CLI usage."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(asctime)s][%(levelname)s][%(name)s] %(message)s",
    )


def module_cli_entry_point() -> None:
    TYPER_APP()
