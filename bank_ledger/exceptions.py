"""
Ledger Exceptions Module

Domain-specific errors raised by the transaction and savings managers.
Every error derives from ValueError so callers catching ValueError keep working.
"""

from typing import Optional


class LedgerError(ValueError):
    """Base class for all ledger rule violations"""
    pass


class AccountNotFoundError(LedgerError):
    """Raised when a referenced account is not in the registry"""

    def __init__(self, account_id: Optional[str] = None, message: Optional[str] = None):
        self.account_id = account_id
        if message is None:
            message = (
                f"Account {account_id} does not exist" if account_id
                else "Specified account does not exist"
            )
        super().__init__(message)


class InvalidOperationError(LedgerError):
    """
    Raised for operations the ledger never allows: same-account transfers,
    transfers out of savings accounts and negative amounts.
    """
    pass


class InsufficientFundsError(LedgerError):
    """Raised when an operation would leave a balance negative"""
    pass


class LimitExceededError(LedgerError):
    """Raised when a card daily transaction or withdrawal limit would be exceeded"""

    def __init__(self, message: str, limit_name: Optional[str] = None):
        self.limit_name = limit_name
        super().__init__(message)


class CurrencyConversionError(LedgerError):
    """Raised when no exchange rate is registered for a currency pair"""
    pass
