"""JSON and CSV exporters for economics reports."""

from __future__ import annotations

import csv
import io
from typing import Any

import orjson

from .schemas import EconomicsReport, EconomicsTotals, PeriodEconomics

CSV_HEADER = [
    "period",
    "spent",
    "active_tokens",
    "total_tokens",
    "saved_tokens",
    "active_savings",
    "blended_savings",
    "rtk_commands",
]
MONEY_DECIMALS = 4


class ExportError(RuntimeError):
    """Raised when a report cannot be serialized."""


def render_json(report: EconomicsReport) -> str:
    """Serialize a report as indented JSON with `daily`/`weekly`/`monthly`/`totals` keys."""
    payload = {
        "daily": _periods_payload(report.daily),
        "weekly": _periods_payload(report.weekly),
        "monthly": _periods_payload(report.monthly),
        "totals": _totals_payload(report.totals) if report.totals is not None else None,
    }
    try:
        return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8")
    except (TypeError, orjson.JSONEncodeError) as exc:
        raise ExportError(f"Failed to serialize economics report to JSON: {exc}") from exc


def render_csv(report: EconomicsReport) -> str:
    """Serialize daily, weekly, then monthly periods under one CSV header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    try:
        writer.writerow(CSV_HEADER)
        for periods in (report.daily, report.weekly, report.monthly):
            for period in periods or []:
                writer.writerow(_csv_row(period))
    except csv.Error as exc:
        raise ExportError(f"Failed to serialize economics report to CSV: {exc}") from exc
    return buffer.getvalue()


def _periods_payload(periods: list[PeriodEconomics] | None) -> list[dict[str, Any]] | None:
    if periods is None:
        return None
    return [_period_payload(period) for period in periods]


def _period_payload(period: PeriodEconomics) -> dict[str, Any]:
    return {
        "label": period.label,
        "spend_cost": _round_money(period.spend_cost),
        "spend_total_tokens": period.spend_total_tokens,
        "spend_active_tokens": period.spend_active_tokens,
        "savings_commands": period.savings_commands,
        "savings_tokens": period.savings_tokens,
        "savings_pct": period.savings_pct,
        "blended_cost_per_token": period.blended_cost_per_token,
        "active_cost_per_token": period.active_cost_per_token,
        "savings_value_blended": _round_money(period.savings_value_blended),
        "savings_value_active": _round_money(period.savings_value_active),
    }


def _totals_payload(totals: EconomicsTotals) -> dict[str, Any]:
    return {
        "spend_cost": _round_money(totals.spend_cost),
        "spend_total_tokens": totals.spend_total_tokens,
        "spend_active_tokens": totals.spend_active_tokens,
        "savings_commands": totals.savings_commands,
        "savings_tokens": totals.savings_tokens,
        "avg_savings_pct": totals.avg_savings_pct,
        "blended_cost_per_token": totals.blended_cost_per_token,
        "active_cost_per_token": totals.active_cost_per_token,
        "savings_value_blended": _round_money(totals.savings_value_blended),
        "savings_value_active": _round_money(totals.savings_value_active),
    }


def _csv_row(period: PeriodEconomics) -> list[str]:
    return [
        period.label,
        _format_money(period.spend_cost),
        _format_count(period.spend_active_tokens),
        _format_count(period.spend_total_tokens),
        _format_count(period.savings_tokens),
        _format_money(period.savings_value_active),
        _format_money(period.savings_value_blended),
        _format_count(period.savings_commands),
    ]


def _round_money(amount: float | None) -> float | None:
    return round(amount, MONEY_DECIMALS) if amount is not None else None


def _format_money(amount: float | None) -> str:
    return f"{amount:.{MONEY_DECIMALS}f}" if amount is not None else ""


def _format_count(value: int | None) -> str:
    return str(value) if value is not None else ""
