"""Rich rendering helpers for economics reports."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .schemas import EconomicsTotals, Granularity, PeriodEconomics

TABLE_ROW_STYLES = ["white", "yellow"]
MISSING_VALUE = "—"
GRANULARITY_TITLES: dict[Granularity, str] = {
    Granularity.DAILY: "Daily Economics",
    Granularity.WEEKLY: "Weekly Economics",
    Granularity.MONTHLY: "Monthly Economics",
}


def format_usd(amount: float) -> str:
    """Format a dollar amount, keeping sub-cent values readable."""
    if abs(amount) >= 0.01 or amount == 0:
        return f"${amount:,.2f}"
    return f"${amount:.4f}"


def format_tokens(tokens: int) -> str:
    """Format a token count with K/M/B suffixes."""
    if tokens >= 1_000_000_000:
        return f"{tokens / 1_000_000_000:.1f}B"
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


def render_period_table(granularity: Granularity, periods: list[PeriodEconomics], console: Console) -> None:
    """Render one granularity's merged periods."""
    table = Table(title=GRANULARITY_TITLES[granularity], title_justify="left")
    table.add_column("Period", justify="left")
    table.add_column("Spent", justify="right")
    table.add_column("Saved", justify="right")
    table.add_column("Active $", justify="right")
    table.add_column("Blended $", justify="right")
    table.add_column("Commands", justify="right")

    for index, period in enumerate(periods):
        table.add_row(
            period.label,
            _usd_or_missing(period.spend_cost),
            format_tokens(period.savings_tokens) if period.savings_tokens is not None else MISSING_VALUE,
            _usd_or_missing(period.savings_value_active),
            _usd_or_missing(period.savings_value_blended),
            str(period.savings_commands) if period.savings_commands is not None else MISSING_VALUE,
            style=TABLE_ROW_STYLES[index % len(TABLE_ROW_STYLES)],
        )

    console.print(table)
    console.print()


def render_summary(periods: list[PeriodEconomics], totals: EconomicsTotals, console: Console) -> None:
    """Render the all-time summary built from monthly periods."""
    if not periods:
        console.print("No data available. Run some commands through the savings proxy to start tracking.")
        return

    overview = Table(title="Token Economics", show_header=False, title_justify="left", box=None)
    overview.add_column("Metric", justify="left")
    overview.add_column("Value", justify="right")
    overview.add_row("Spent", format_usd(totals.spend_cost))
    overview.add_row("Active tokens (in+out)", format_tokens(totals.spend_active_tokens))
    overview.add_row("Total tokens (incl. cache)", format_tokens(totals.spend_total_tokens))
    overview.add_row("Commands", str(totals.savings_commands))
    overview.add_row("Tokens saved", format_tokens(totals.savings_tokens))
    overview.add_row("Average savings", f"{totals.avg_savings_pct:.1f}%")
    console.print(overview)
    console.print()

    savings = Table(title="Estimated Savings", title_justify="left")
    savings.add_column("Pricing", justify="left")
    savings.add_column("Savings", justify="right")
    savings.add_column("Share of spend", justify="right")
    savings.add_column("", justify="left")
    savings.add_row(
        "Active token pricing",
        _usd_or_missing(totals.savings_value_active),
        _share_of_spend(totals.savings_value_active, totals.spend_cost, precision=1),
        "most representative",
    )
    savings.add_row(
        "Blended pricing",
        _usd_or_missing(totals.savings_value_blended),
        _share_of_spend(totals.savings_value_blended, totals.spend_cost, precision=2),
        "",
    )
    console.print(savings)
    console.print()

    cache_tokens = max(totals.spend_total_tokens - totals.spend_active_tokens, 0)
    console.print("Why two numbers?")
    console.print("Saved tokens never enter the model context, so they would have been fresh input tokens.")
    console.print('"Active" uses cost/(input+output) and reflects what fresh tokens actually cost.')
    console.print(f'"Blended" uses cost/all_tokens and is diluted by {format_tokens(cache_tokens)} cheap cache tokens.')


def _usd_or_missing(amount: float | None) -> str:
    return format_usd(amount) if amount is not None else MISSING_VALUE


def _share_of_spend(savings: float | None, spend_cost: float, precision: int) -> str:
    if savings is None:
        return MISSING_VALUE
    share = savings / spend_cost * 100.0 if spend_cost > 0 else 0.0
    return f"{share:.{precision}f}%"
