"""
Account Model Module

Checking and savings accounts modelled as a tagged union: a common Account
record carrying the balance and transaction history, plus variant-specific
payload. Managers dispatch on ``account_type`` rather than on runtime casts.
"""

from decimal import Decimal
from datetime import date, datetime, timezone
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, TYPE_CHECKING
from enum import Enum

from .currency import Money, Currency

if TYPE_CHECKING:
    from .transactions import Transaction


class AccountType(Enum):
    """Account variants"""
    CHECKING = "checking"
    SAVINGS = "savings"


class CapitalizationFrequency(Enum):
    """How often savings interest is compounded"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


@dataclass
class Card:
    """Payment card attached to a checking account"""
    daily_transaction_limit: Money
    daily_withdrawal_limit: Money
    active: bool = True

    def __post_init__(self):
        if self.daily_transaction_limit.currency != self.daily_withdrawal_limit.currency:
            raise ValueError("Card limits must use the same currency")
        if self.daily_transaction_limit.is_negative() or self.daily_withdrawal_limit.is_negative():
            raise ValueError("Card limits must not be negative")

    @property
    def currency(self) -> Currency:
        return self.daily_transaction_limit.currency


@dataclass
class Account:
    """
    Common account record. Use CheckingAccount or SavingsAccount;
    the variant fixes ``account_type``.
    """
    id: str
    balance: Money
    name: str = ""
    transactions: List['Transaction'] = field(default_factory=list)

    ACCOUNT_TYPE: ClassVar[Optional[AccountType]] = None

    def __post_init__(self):
        if self.ACCOUNT_TYPE is None:
            raise TypeError("Account is abstract; use CheckingAccount or SavingsAccount")
        if self.balance.is_negative():
            raise ValueError("Account balance must not be negative")

    @property
    def account_type(self) -> AccountType:
        return self.ACCOUNT_TYPE

    @property
    def currency(self) -> Currency:
        return self.balance.currency

    @property
    def is_checking(self) -> bool:
        return self.account_type == AccountType.CHECKING

    @property
    def is_savings(self) -> bool:
        return self.account_type == AccountType.SAVINGS

    def credit(self, amount: Money) -> None:
        """Increase balance by an amount in the account currency"""
        self.balance = self.balance + amount

    def debit(self, amount: Money) -> None:
        """Decrease balance by an amount in the account currency"""
        self.balance = self.balance - amount

    def record(self, transaction: 'Transaction') -> None:
        """Append a transaction to the history"""
        self.transactions = [*self.transactions, transaction]


@dataclass
class CheckingAccount(Account):
    """Checking account, optionally card-linked"""
    card: Optional[Card] = None

    ACCOUNT_TYPE: ClassVar[Optional[AccountType]] = AccountType.CHECKING

    def __post_init__(self):
        super().__post_init__()
        if self.card and self.card.currency != self.currency:
            raise ValueError("Card limit currency must match account currency")

    @property
    def has_active_card(self) -> bool:
        return self.card is not None and self.card.active


@dataclass
class SavingsAccount(Account):
    """Savings account earning interest once per capitalization period"""
    interest_rate: Decimal = Decimal('0')  # Fraction per period, 0.01 = 1%
    interest_frequency: CapitalizationFrequency = CapitalizationFrequency.MONTHLY
    last_interest_applied_date: date = field(default_factory=lambda: datetime.now(timezone.utc).date())

    ACCOUNT_TYPE: ClassVar[Optional[AccountType]] = AccountType.SAVINGS

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.interest_rate, Decimal):
            self.interest_rate = Decimal(str(self.interest_rate))
        if self.interest_rate < Decimal('0') or self.interest_rate > Decimal('1'):
            raise ValueError("Interest rate must be between 0 and 1 (0-100%)")
