"""Unit tests for the read-only savings history repository."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from token_economics.ledgers.errors import SavingsLedgerError
from token_economics.ledgers.savings import SavingsRepository


def test_fetch_daily_groups_commands_by_date(tmp_path: Path) -> None:
    """Daily rows should aggregate counts and compute percentages from input."""
    database_path = _create_history_database(
        tmp_path / "history.db",
        [
            ("2026-01-20T09:00:00+00:00", 1000, 100, 600),
            ("2026-01-20T18:30:00+00:00", 1000, 100, 400),
            ("2026-01-21T08:00:00+00:00", 0, 0, 0),
        ],
    )
    repository = SavingsRepository(database_path)
    try:
        days = repository.fetch_daily()
    finally:
        repository.close()

    assert [day.date for day in days] == ["2026-01-20", "2026-01-21"]
    assert days[0].commands == 2
    assert days[0].input_tokens == 2000
    assert days[0].saved_tokens == 1000
    assert days[0].savings_pct == pytest.approx(50.0)
    assert days[1].savings_pct == 0.0


def test_fetch_weekly_starts_weeks_on_saturday(tmp_path: Path) -> None:
    """Weeks should be keyed by the Saturday on or before each command."""
    database_path = _create_history_database(
        tmp_path / "history.db",
        [
            ("2026-01-17T12:00:00+00:00", 100, 10, 50),  # Saturday
            ("2026-01-23T12:00:00+00:00", 100, 10, 50),  # Friday, same week
            ("2026-01-24T12:00:00+00:00", 100, 10, 50),  # next Saturday
        ],
    )
    repository = SavingsRepository(database_path)
    try:
        weeks = repository.fetch_weekly()
    finally:
        repository.close()

    assert [(week.week_start, week.week_end) for week in weeks] == [
        ("2026-01-17", "2026-01-23"),
        ("2026-01-24", "2026-01-30"),
    ]
    assert weeks[0].commands == 2


def test_fetch_monthly_groups_by_month(tmp_path: Path) -> None:
    """Monthly rows should be keyed by `YYYY-MM`."""
    database_path = _create_history_database(
        tmp_path / "history.db",
        [
            ("2026-01-31T23:00:00+00:00", 100, 10, 50),
            ("2026-02-01T01:00:00+00:00", 200, 20, 70),
            ("2026-02-14T01:00:00+00:00", 300, 30, 80),
        ],
    )
    repository = SavingsRepository(database_path)
    try:
        months = repository.fetch_monthly()
    finally:
        repository.close()

    assert [month.month for month in months] == ["2026-01", "2026-02"]
    assert months[1].commands == 2
    assert months[1].input_tokens == 500
    assert months[1].output_tokens == 50
    assert months[1].saved_tokens == 150


def test_missing_database_raises(tmp_path: Path) -> None:
    """A missing database file should raise a ledger error."""
    with pytest.raises(SavingsLedgerError, match="not found"):
        SavingsRepository(tmp_path / "missing.db")


def test_opens_database_under_uri_special_characters(tmp_path: Path) -> None:
    """Paths containing `#` or `%` should still open the intended file."""
    database_dir = tmp_path / "a#b" / "c%20d"
    database_dir.mkdir(parents=True)
    database_path = _create_history_database(
        database_dir / "history.db",
        [("2026-01-20T09:00:00+00:00", 1000, 100, 600)],
    )
    repository = SavingsRepository(database_path)
    try:
        days = repository.fetch_daily()
    finally:
        repository.close()

    assert [day.date for day in days] == ["2026-01-20"]
    assert days[0].saved_tokens == 600


def test_expands_home_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A literal `~` path should resolve against the home directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    _create_history_database(
        tmp_path / "history.db",
        [("2026-01-20T09:00:00+00:00", 1000, 100, 600)],
    )
    repository = SavingsRepository(Path("~/history.db"))
    try:
        days = repository.fetch_daily()
    finally:
        repository.close()

    assert [day.date for day in days] == ["2026-01-20"]


def test_missing_commands_table_raises(tmp_path: Path) -> None:
    """A database without the history table is rejected."""
    database_path = tmp_path / "empty.db"
    connection = sqlite3.connect(database_path)
    connection.execute("CREATE TABLE unrelated (id INTEGER)")
    connection.commit()
    connection.close()

    with pytest.raises(SavingsLedgerError, match="commands"):
        SavingsRepository(database_path)


def _create_history_database(database_path: Path, rows: list[tuple[str, int, int, int]]) -> Path:
    """Create a savings history database with a `commands` table."""
    connection = sqlite3.connect(database_path)
    try:
        connection.execute(
            """
CREATE TABLE commands (
    id INTEGER PRIMARY KEY,
    timestamp TEXT NOT NULL,
    original_cmd TEXT NOT NULL,
    rtk_cmd TEXT NOT NULL,
    input_tokens INTEGER NOT NULL,
    output_tokens INTEGER NOT NULL,
    saved_tokens INTEGER NOT NULL,
    savings_pct REAL NOT NULL,
    exec_time_ms INTEGER DEFAULT 0
)
            """
        )
        connection.executemany(
            """
INSERT INTO commands (timestamp, original_cmd, rtk_cmd, input_tokens, output_tokens, saved_tokens, savings_pct)
VALUES (?, 'git status', 'rtk git status', ?, ?, ?, 0.0)
            """,
            rows,
        )
        connection.commit()
    finally:
        connection.close()
    return database_path
