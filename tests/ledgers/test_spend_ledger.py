"""Unit tests for reading ccusage spend exports."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import pytest

from token_economics.economics.schemas import Granularity
from token_economics.ledgers.errors import SpendLedgerError
from token_economics.ledgers.spend import SpendLedgerReader


def test_fetch_parses_camel_case_metrics(tmp_path: Path) -> None:
    """Spend entries should map ccusage camelCase fields to typed metrics."""
    export_path = _write_export(
        tmp_path / "monthly.json",
        {"monthly": [_entry("month", "2026-01", total_cost=12.34)], "totals": {"totalCost": 12.34}},
    )

    entries = SpendLedgerReader([export_path]).fetch(Granularity.MONTHLY)

    assert entries is not None
    assert len(entries) == 1
    assert entries[0].key == "2026-01"
    assert entries[0].metrics.total_cost == 12.34
    assert entries[0].metrics.total_tokens == 1800
    assert entries[0].metrics.active_tokens == 1500


def test_fetch_returns_none_for_granularity_without_export(tmp_path: Path) -> None:
    """A granularity no export supplies is unavailable rather than empty."""
    export_path = _write_export(tmp_path / "daily.json", {"daily": [_entry("date", "2026-01-05")]})

    reader = SpendLedgerReader([export_path])

    assert reader.fetch(Granularity.WEEKLY) is None
    assert reader.fetch(Granularity.DAILY) is not None


def test_fetch_combines_multiple_exports(tmp_path: Path) -> None:
    """Several exports can each contribute one granularity."""
    daily_path = _write_export(tmp_path / "daily.json", {"daily": [_entry("date", "2026-01-05")]})
    weekly_path = _write_export(tmp_path / "weekly.json", {"weekly": [_entry("week", "2026-01-19")]})

    reader = SpendLedgerReader([daily_path, weekly_path])

    weekly = reader.fetch(Granularity.WEEKLY)
    assert weekly is not None
    assert [entry.key for entry in weekly] == ["2026-01-19"]


def test_fetch_skips_missing_files(tmp_path: Path) -> None:
    """A missing export file is treated as an unavailable source."""
    reader = SpendLedgerReader([tmp_path / "does-not-exist.json"])

    assert reader.fetch(Granularity.MONTHLY) is None


def test_fetch_skips_entries_without_period_key(tmp_path: Path) -> None:
    """Entries lacking their period key are dropped; bad numbers count as zero."""
    bad_entry = _entry("month", "2026-02")
    bad_entry["inputTokens"] = "lots"
    export_path = _write_export(
        tmp_path / "monthly.json",
        {"monthly": [{"totalCost": 1.0}, bad_entry, "not-an-object"]},
    )

    entries = SpendLedgerReader([export_path]).fetch(Granularity.MONTHLY)

    assert entries is not None
    assert len(entries) == 1
    assert entries[0].metrics.input_tokens == 0
    assert entries[0].metrics.active_tokens == 500


def test_fetch_raises_on_malformed_json(tmp_path: Path) -> None:
    """Undecodable exports are a hard error."""
    export_path = tmp_path / "broken.json"
    export_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SpendLedgerError):
        SpendLedgerReader([export_path]).fetch(Granularity.DAILY)


def test_fetch_raises_when_section_is_not_a_list(tmp_path: Path) -> None:
    """A granularity section must hold a list of entries."""
    export_path = _write_export(tmp_path / "odd.json", {"daily": {"date": "2026-01-05"}})

    with pytest.raises(SpendLedgerError):
        SpendLedgerReader([export_path]).fetch(Granularity.DAILY)


def _entry(key_field: str, key: str, total_cost: float = 1.5) -> dict[str, Any]:
    return {
        key_field: key,
        "inputTokens": 1000,
        "outputTokens": 500,
        "cacheCreationTokens": 100,
        "cacheReadTokens": 200,
        "totalTokens": 1800,
        "totalCost": total_cost,
        "modelsUsed": ["claude-sonnet-4"],
    }


def _write_export(path: Path, payload: dict[str, Any]) -> Path:
    path.write_bytes(orjson.dumps(payload))
    return path
