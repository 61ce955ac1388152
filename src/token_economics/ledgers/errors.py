"""Custom exceptions for ledger loading failures."""


class LedgerError(Exception):
    """Base exception for spend and savings ledger errors."""


class SpendLedgerError(LedgerError):
    """Raised when a spend-ledger export cannot be read or decoded."""


class SavingsLedgerError(LedgerError):
    """Raised when the savings database cannot be opened or queried."""
