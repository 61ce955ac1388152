"""Typed schemas used by the economics reconciliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Granularity(str, Enum):
    """Reporting period size."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class SpendMetrics:
    """Billed token counts and cost for one spend-ledger period."""

    input_tokens: int
    output_tokens: int
    cache_creation_tokens: int
    cache_read_tokens: int
    total_tokens: int
    total_cost: float

    @property
    def active_tokens(self) -> int:
        """Fresh input plus output tokens, excluding cache traffic."""
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class SpendPeriod:
    """One spend-ledger entry keyed by its period (day, ISO Monday, or month)."""

    key: str
    metrics: SpendMetrics


@dataclass(frozen=True)
class DaySavings:
    """Savings-ledger totals for one calendar day."""

    date: str
    commands: int
    input_tokens: int
    output_tokens: int
    saved_tokens: int
    savings_pct: float


@dataclass(frozen=True)
class WeekSavings:
    """Savings-ledger totals for one week starting on a Saturday."""

    week_start: str
    week_end: str
    commands: int
    input_tokens: int
    output_tokens: int
    saved_tokens: int
    savings_pct: float


@dataclass(frozen=True)
class MonthSavings:
    """Savings-ledger totals for one calendar month."""

    month: str
    commands: int
    input_tokens: int
    output_tokens: int
    saved_tokens: int


@dataclass
class PeriodEconomics:
    """Merged spend and savings figures for one reporting period.

    Every optional field stays `None` unless its source contributed data for
    `label`. Derived rates and savings values are filled by
    `metrics.apply_dual_metrics`.
    """

    label: str
    spend_cost: float | None = None
    spend_total_tokens: int | None = None
    spend_active_tokens: int | None = None
    savings_commands: int | None = None
    savings_tokens: int | None = None
    savings_pct: float | None = None
    blended_cost_per_token: float | None = None
    active_cost_per_token: float | None = None
    savings_value_blended: float | None = None
    savings_value_active: float | None = None

    def set_spend(self, metrics: SpendMetrics) -> None:
        """Populate the spend-side fields from one spend-ledger entry."""
        self.spend_cost = metrics.total_cost
        self.spend_total_tokens = metrics.total_tokens
        self.spend_active_tokens = metrics.active_tokens

    def set_savings(self, commands: int, saved_tokens: int, savings_pct: float) -> None:
        """Populate the savings-side fields from one savings-ledger entry."""
        self.savings_commands = commands
        self.savings_tokens = saved_tokens
        self.savings_pct = savings_pct


@dataclass(frozen=True)
class EconomicsTotals:
    """Aggregate of several periods, with rates recomputed from the sums."""

    spend_cost: float
    spend_total_tokens: int
    spend_active_tokens: int
    savings_commands: int
    savings_tokens: int
    avg_savings_pct: float
    blended_cost_per_token: float | None = None
    active_cost_per_token: float | None = None
    savings_value_blended: float | None = None
    savings_value_active: float | None = None


@dataclass(frozen=True)
class EconomicsReport:
    """Merged periods per requested granularity plus optional totals."""

    daily: list[PeriodEconomics] | None = None
    weekly: list[PeriodEconomics] | None = None
    monthly: list[PeriodEconomics] | None = None
    totals: EconomicsTotals | None = None
