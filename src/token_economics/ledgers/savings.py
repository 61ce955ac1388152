"""SQLite reader for the command savings history database."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from ..economics.schemas import DaySavings, MonthSavings, WeekSavings
from .errors import SavingsLedgerError

REQUIRED_TABLE = "commands"

DAILY_QUERY = """
SELECT
    DATE(timestamp) AS day,
    COUNT(*) AS commands,
    COALESCE(SUM(input_tokens), 0) AS input_tokens,
    COALESCE(SUM(output_tokens), 0) AS output_tokens,
    COALESCE(SUM(saved_tokens), 0) AS saved_tokens
FROM commands
WHERE DATE(timestamp) IS NOT NULL
GROUP BY day
ORDER BY day
"""

# Weeks start on the Saturday on or before each command's day.
WEEKLY_QUERY = """
SELECT
    DATE(timestamp, '-6 days', 'weekday 6') AS week_start,
    DATE(timestamp, '-6 days', 'weekday 6', '+6 days') AS week_end,
    COUNT(*) AS commands,
    COALESCE(SUM(input_tokens), 0) AS input_tokens,
    COALESCE(SUM(output_tokens), 0) AS output_tokens,
    COALESCE(SUM(saved_tokens), 0) AS saved_tokens
FROM commands
WHERE DATE(timestamp) IS NOT NULL
GROUP BY week_start
ORDER BY week_start
"""

MONTHLY_QUERY = """
SELECT
    STRFTIME('%Y-%m', timestamp) AS month,
    COUNT(*) AS commands,
    COALESCE(SUM(input_tokens), 0) AS input_tokens,
    COALESCE(SUM(output_tokens), 0) AS output_tokens,
    COALESCE(SUM(saved_tokens), 0) AS saved_tokens
FROM commands
WHERE DATE(timestamp) IS NOT NULL
GROUP BY month
ORDER BY month
"""


class SavingsRepository:
    """Read-only per-period savings totals from the history database."""

    def __init__(self, database_path: Path) -> None:
        self._database_path = database_path.expanduser()
        self._connection = _connect_read_only(self._database_path)
        try:
            self.ensure_schema()
        except SavingsLedgerError:
            self._connection.close()
            raise

    def close(self) -> None:
        """Close SQLite connection."""
        self._connection.close()

    def ensure_schema(self) -> None:
        """Validate that the command history table exists."""
        try:
            row = self._connection.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                [REQUIRED_TABLE],
            ).fetchone()
        except sqlite3.Error as exc:
            raise SavingsLedgerError(f"Failed to read savings database {self._database_path}: {exc}") from exc
        if row is None:
            raise SavingsLedgerError(
                f"Missing required table `{REQUIRED_TABLE}` in savings database {self._database_path}."
            )

    def fetch_daily(self) -> list[DaySavings]:
        """Return savings grouped by calendar day."""
        return [
            DaySavings(
                date=str(row[0]),
                commands=int(row[1]),
                input_tokens=int(row[2]),
                output_tokens=int(row[3]),
                saved_tokens=int(row[4]),
                savings_pct=_input_savings_pct(int(row[4]), int(row[2])),
            )
            for row in self._query(DAILY_QUERY)
        ]

    def fetch_weekly(self) -> list[WeekSavings]:
        """Return savings grouped by Saturday-start week."""
        return [
            WeekSavings(
                week_start=str(row[0]),
                week_end=str(row[1]),
                commands=int(row[2]),
                input_tokens=int(row[3]),
                output_tokens=int(row[4]),
                saved_tokens=int(row[5]),
                savings_pct=_input_savings_pct(int(row[5]), int(row[3])),
            )
            for row in self._query(WEEKLY_QUERY)
        ]

    def fetch_monthly(self) -> list[MonthSavings]:
        """Return savings grouped by `YYYY-MM` month."""
        return [
            MonthSavings(
                month=str(row[0]),
                commands=int(row[1]),
                input_tokens=int(row[2]),
                output_tokens=int(row[3]),
                saved_tokens=int(row[4]),
            )
            for row in self._query(MONTHLY_QUERY)
        ]

    def _query(self, sql: str) -> list[Any]:
        try:
            return self._connection.execute(sql).fetchall()
        except sqlite3.Error as exc:
            raise SavingsLedgerError(f"Failed to query savings database {self._database_path}: {exc}") from exc


def _input_savings_pct(saved_tokens: int, input_tokens: int) -> float:
    """Saved tokens as a percentage of the command input they were filtered from."""
    if input_tokens <= 0:
        return 0.0
    return saved_tokens / input_tokens * 100.0


def _connect_read_only(database_path: Path) -> sqlite3.Connection:
    database_path = database_path.expanduser()
    if not database_path.exists():
        raise SavingsLedgerError(f"Savings database not found: {database_path}")

    # `as_uri` percent-encodes characters such as `#`, `?` and `%`.
    uri = f"{database_path.resolve().as_uri()}?mode=ro"
    try:
        connection = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as exc:
        raise SavingsLedgerError(f"Failed to open savings database {database_path}: {exc}") from exc
    return connection
