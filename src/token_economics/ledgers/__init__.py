"""Readers for the spend and savings ledgers."""

from .errors import LedgerError, SavingsLedgerError, SpendLedgerError
from .savings import SavingsRepository
from .spend import SpendLedgerReader

__all__ = ["LedgerError", "SavingsLedgerError", "SavingsRepository", "SpendLedgerError", "SpendLedgerReader"]
