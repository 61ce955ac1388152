"""Merge spend and savings ledgers into per-period economics."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..ledgers.savings import SavingsRepository
from ..ledgers.spend import SpendLedgerReader
from .metrics import apply_dual_metrics, compute_totals, month_savings_pct
from .periods import normalize_savings_key
from .schemas import (
    DaySavings,
    EconomicsReport,
    EconomicsTotals,
    Granularity,
    MonthSavings,
    PeriodEconomics,
    SpendPeriod,
    WeekSavings,
)

LOGGER = logging.getLogger(__name__)


class EconomicsService:
    """Build economics reports from a savings ledger and an optional spend ledger."""

    def __init__(
        self,
        savings_repository: SavingsRepository,
        spend_reader: SpendLedgerReader | None = None,
    ) -> None:
        self._savings_repository = savings_repository
        self._spend_reader = spend_reader

    def collect_periods(self, granularity: Granularity) -> list[PeriodEconomics]:
        """Merge both ledgers for one granularity."""
        spend = self._fetch_spend(granularity)
        if granularity is Granularity.DAILY:
            return merge_daily(spend, self._savings_repository.fetch_daily())
        if granularity is Granularity.WEEKLY:
            return merge_weekly(spend, self._savings_repository.fetch_weekly())
        return merge_monthly(spend, self._savings_repository.fetch_monthly())

    def build_report(self, granularities: Iterable[Granularity]) -> EconomicsReport:
        """Merge every requested granularity; totals follow the monthly periods."""
        requested = set(granularities)
        daily = self.collect_periods(Granularity.DAILY) if Granularity.DAILY in requested else None
        weekly = self.collect_periods(Granularity.WEEKLY) if Granularity.WEEKLY in requested else None
        monthly = self.collect_periods(Granularity.MONTHLY) if Granularity.MONTHLY in requested else None
        return EconomicsReport(
            daily=daily,
            weekly=weekly,
            monthly=monthly,
            totals=compute_totals(monthly) if monthly is not None else None,
        )

    def collect_summary(self) -> tuple[list[PeriodEconomics], EconomicsTotals]:
        """Return monthly periods together with their totals."""
        periods = self.collect_periods(Granularity.MONTHLY)
        return periods, compute_totals(periods)

    def _fetch_spend(self, granularity: Granularity) -> list[SpendPeriod] | None:
        if self._spend_reader is None:
            return None
        spend = self._spend_reader.fetch(granularity)
        if spend is None:
            LOGGER.info("No %s spend data available; spend columns stay empty.", granularity.value)
        return spend


@dataclass(frozen=True)
class _SavingsContribution:
    """Savings-side fields keyed by the ledger's own period key."""

    key: str
    commands: int
    saved_tokens: int
    savings_pct: float


def merge_daily(spend: list[SpendPeriod] | None, savings: list[DaySavings]) -> list[PeriodEconomics]:
    """Join daily spend and savings on the calendar date."""
    contributions = [
        _SavingsContribution(
            key=entry.date,
            commands=entry.commands,
            saved_tokens=entry.saved_tokens,
            savings_pct=entry.savings_pct,
        )
        for entry in savings
    ]
    return _merge_periods(Granularity.DAILY, spend, contributions)


def merge_weekly(spend: list[SpendPeriod] | None, savings: list[WeekSavings]) -> list[PeriodEconomics]:
    """Join ISO-Monday spend weeks with Saturday-start savings weeks."""
    contributions = [
        _SavingsContribution(
            key=entry.week_start,
            commands=entry.commands,
            saved_tokens=entry.saved_tokens,
            savings_pct=entry.savings_pct,
        )
        for entry in savings
    ]
    return _merge_periods(Granularity.WEEKLY, spend, contributions)


def merge_monthly(spend: list[SpendPeriod] | None, savings: list[MonthSavings]) -> list[PeriodEconomics]:
    """Join monthly spend and savings on `YYYY-MM`."""
    contributions = [
        _SavingsContribution(
            key=entry.month,
            commands=entry.commands,
            saved_tokens=entry.saved_tokens,
            savings_pct=month_savings_pct(entry),
        )
        for entry in savings
    ]
    return _merge_periods(Granularity.MONTHLY, spend, contributions)


def _merge_periods(
    granularity: Granularity,
    spend: list[SpendPeriod] | None,
    savings: list[_SavingsContribution],
) -> list[PeriodEconomics]:
    """Get-or-create one record per canonical key, then derive metrics and sort."""
    periods: dict[str, PeriodEconomics] = {}

    for entry in spend or []:
        _get_or_create(periods, entry.key).set_spend(entry.metrics)

    for contribution in savings:
        key = normalize_savings_key(granularity, contribution.key)
        if key is None:
            LOGGER.warning("Invalid %s savings period key %r; skipping record.", granularity.value, contribution.key)
            continue
        _get_or_create(periods, key).set_savings(
            commands=contribution.commands,
            saved_tokens=contribution.saved_tokens,
            savings_pct=contribution.savings_pct,
        )

    result = list(periods.values())
    for period in result:
        apply_dual_metrics(period)
    result.sort(key=lambda period: period.label)
    return result


def _get_or_create(periods: dict[str, PeriodEconomics], key: str) -> PeriodEconomics:
    period = periods.get(key)
    if period is None:
        period = PeriodEconomics(label=key)
        periods[key] = period
    return period
