"""Reader for spend-ledger JSON exports produced by `ccusage --json`."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import orjson

from ..economics.schemas import Granularity, SpendMetrics, SpendPeriod
from .errors import SpendLedgerError

LOGGER = logging.getLogger(__name__)

# Entry field holding the period key, per export section.
PERIOD_KEY_FIELDS: dict[Granularity, str] = {
    Granularity.DAILY: "date",
    Granularity.WEEKLY: "week",
    Granularity.MONTHLY: "month",
}


class SpendLedgerReader:
    """Load per-period spend from one or more ccusage JSON exports.

    Each export is an object with a `daily`, `weekly` or `monthly` array. A
    granularity no file supplies is reported as unavailable (`None`), never as
    an empty ledger.
    """

    def __init__(self, paths: Sequence[Path]) -> None:
        self._paths = list(paths)
        self._documents: list[dict[str, Any]] | None = None

    def fetch(self, granularity: Granularity) -> list[SpendPeriod] | None:
        """Return spend entries for `granularity`, or `None` when no export has them."""
        section = granularity.value
        key_field = PERIOD_KEY_FIELDS[granularity]
        entries: list[SpendPeriod] | None = None

        for document in self._load_documents():
            raw_entries = document.get(section)
            if raw_entries is None:
                continue
            if not isinstance(raw_entries, list):
                raise SpendLedgerError(f"Expected `{section}` to be a list in spend export.")
            if entries is None:
                entries = []
            for raw_entry in raw_entries:
                entry = _parse_spend_entry(raw_entry, key_field)
                if entry is not None:
                    entries.append(entry)

        return entries

    def _load_documents(self) -> list[dict[str, Any]]:
        """Decode every export once and reuse it across granularities."""
        if self._documents is None:
            documents: list[dict[str, Any]] = []
            for path in self._paths:
                document = _read_export(path)
                if document is not None:
                    documents.append(document)
            self._documents = documents
        return self._documents


def _read_export(path: Path) -> dict[str, Any] | None:
    """Decode one export file; a missing file means that source is unavailable."""
    if not path.exists():
        LOGGER.warning("Spend export not found: %s; treating it as unavailable.", path)
        return None
    try:
        with path.open("rb") as handle:
            document = orjson.loads(handle.read())
    except orjson.JSONDecodeError as exc:
        raise SpendLedgerError(f"Failed to decode spend export {path}: {exc}") from exc
    except OSError as exc:
        raise SpendLedgerError(f"Failed to read spend export {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise SpendLedgerError(f"Spend export {path} must contain a JSON object.")
    return document


def _parse_spend_entry(raw_entry: Any, key_field: str) -> SpendPeriod | None:
    """Parse one ccusage period entry into a typed spend record."""
    if not isinstance(raw_entry, dict):
        LOGGER.warning("Skipping spend entry that is not a JSON object.")
        return None
    key = raw_entry.get(key_field)
    if not isinstance(key, str) or not key:
        LOGGER.warning("Skipping spend entry without `%s`.", key_field)
        return None

    return SpendPeriod(
        key=key,
        metrics=SpendMetrics(
            input_tokens=_parse_int(raw_entry.get("inputTokens")),
            output_tokens=_parse_int(raw_entry.get("outputTokens")),
            cache_creation_tokens=_parse_int(raw_entry.get("cacheCreationTokens")),
            cache_read_tokens=_parse_int(raw_entry.get("cacheReadTokens")),
            total_tokens=_parse_int(raw_entry.get("totalTokens")),
            total_cost=_parse_float(raw_entry.get("totalCost")),
        ),
    )


def _parse_int(raw_value: Any) -> int:
    """Parse a token count value as an integer, defaulting to zero."""
    if raw_value is None:
        return 0
    try:
        return int(raw_value)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid token value: %s", raw_value)
        return 0


def _parse_float(raw_value: Any) -> float:
    """Parse a USD amount, defaulting to zero."""
    if raw_value is None:
        return 0.0
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        LOGGER.warning("Invalid cost value: %s", raw_value)
        return 0.0
    if not math.isfinite(value):
        LOGGER.warning("Invalid cost value: %s", raw_value)
        return 0.0
    return value
