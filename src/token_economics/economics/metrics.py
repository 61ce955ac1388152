"""Dual cost-per-token metrics and multi-period totals."""

from __future__ import annotations

from collections.abc import Iterable

from .schemas import EconomicsTotals, MonthSavings, PeriodEconomics


def cost_per_token(cost: float | None, tokens: int | None) -> float | None:
    """Return `cost / tokens`, or `None` when either is missing or tokens is not positive."""
    if cost is None or tokens is None or tokens <= 0:
        return None
    return cost / tokens


def apply_dual_metrics(period: PeriodEconomics) -> None:
    """Fill blended and active rates plus the savings they imply.

    Blended pricing divides cost by every billed token, cache reads included.
    Active pricing divides by fresh input plus output only, which is the kind
    of token a saved token would have been. Both need spend cost and saved
    tokens; each rate is set together with its savings value or not at all.
    """
    if period.spend_cost is None or period.savings_tokens is None:
        return

    blended = cost_per_token(period.spend_cost, period.spend_total_tokens)
    if blended is not None:
        period.blended_cost_per_token = blended
        period.savings_value_blended = period.savings_tokens * blended

    active = cost_per_token(period.spend_cost, period.spend_active_tokens)
    if active is not None:
        period.active_cost_per_token = active
        period.savings_value_active = period.savings_tokens * active


def month_savings_pct(stats: MonthSavings) -> float:
    """Share of tokens avoided out of tokens that would otherwise have been sent."""
    denominator = stats.saved_tokens + stats.input_tokens + stats.output_tokens
    if denominator <= 0:
        return 0.0
    return stats.saved_tokens / denominator * 100.0


def compute_totals(periods: Iterable[PeriodEconomics]) -> EconomicsTotals:
    """Sum periods and recompute dual metrics from the summed cost and tokens.

    Rates come from the sums so that high-volume periods weigh more; they are
    never averaged from per-period rates. `avg_savings_pct` is the plain mean
    over periods that reported a percentage.
    """
    spend_cost = 0.0
    spend_total_tokens = 0
    spend_active_tokens = 0
    savings_commands = 0
    savings_tokens = 0
    pct_sum = 0.0
    pct_count = 0

    for period in periods:
        if period.spend_cost is not None:
            spend_cost += period.spend_cost
        if period.spend_total_tokens is not None:
            spend_total_tokens += period.spend_total_tokens
        if period.spend_active_tokens is not None:
            spend_active_tokens += period.spend_active_tokens
        if period.savings_commands is not None:
            savings_commands += period.savings_commands
        if period.savings_tokens is not None:
            savings_tokens += period.savings_tokens
        if period.savings_pct is not None:
            pct_sum += period.savings_pct
            pct_count += 1

    blended = cost_per_token(spend_cost, spend_total_tokens)
    active = cost_per_token(spend_cost, spend_active_tokens)

    return EconomicsTotals(
        spend_cost=spend_cost,
        spend_total_tokens=spend_total_tokens,
        spend_active_tokens=spend_active_tokens,
        savings_commands=savings_commands,
        savings_tokens=savings_tokens,
        avg_savings_pct=pct_sum / pct_count if pct_count else 0.0,
        blended_cost_per_token=blended,
        active_cost_per_token=active,
        savings_value_blended=savings_tokens * blended if blended is not None else None,
        savings_value_active=savings_tokens * active if active is not None else None,
    )
