"""Spend and savings reconciliation engine."""

from .schemas import EconomicsReport, EconomicsTotals, Granularity, PeriodEconomics

__all__ = ["EconomicsReport", "EconomicsTotals", "Granularity", "PeriodEconomics"]
