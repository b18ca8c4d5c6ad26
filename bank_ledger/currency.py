"""
Multi-Currency Support Module

Handles ISO 4217 currency codes, exchange rates, and proper Decimal precision
for ledger calculations. NEVER uses float for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
from enum import Enum

from .exceptions import CurrencyConversionError

# Set global decimal context for financial precision
getcontext().prec = 28


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    USD = ("USD", 2)  # US Dollar, 2 decimal places
    EUR = ("EUR", 2)  # Euro, 2 decimal places
    GBP = ("GBP", 2)  # British Pound, 2 decimal places
    JPY = ("JPY", 0)  # Japanese Yen, 0 decimal places
    CAD = ("CAD", 2)  # Canadian Dollar, 2 decimal places
    CHF = ("CHF", 2)  # Swiss Franc, 2 decimal places
    PLN = ("PLN", 2)  # Polish Zloty, 2 decimal places

    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision

    @classmethod
    def from_code(cls, code: str) -> 'Currency':
        """Look up a currency by its ISO code"""
        try:
            return cls[code.upper()]
        except KeyError:
            raise ValueError(f"Unsupported currency code: {code}")


@dataclass(frozen=True)
class Money:
    """
    Immutable money representation with currency and proper precision.
    Amounts are rounded half-up to the currency precision on construction.
    """
    amount: Decimal
    currency: Currency

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        rounded = self.amount.quantize(
            Decimal('0.1') ** self.currency.precision,
            rounding=ROUND_HALF_UP
        )
        object.__setattr__(self, 'amount', rounded)

    @classmethod
    def zero(cls, currency: Currency) -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot add {self.currency.code} and {other.currency.code}")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        if self.currency != other.currency:
            raise ValueError(f"Cannot subtract {other.currency.code} from {self.currency.code}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return Money(self.amount * multiplier, self.currency)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Money):
            return False
        return self.amount == other.amount and self.currency == other.currency

    def __hash__(self) -> int:
        return hash((self.amount, self.currency))

    def __lt__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount <= other.amount

    def __gt__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount > other.amount

    def __ge__(self, other: 'Money') -> bool:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency.code} and {other.currency.code}")
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.amount == Decimal('0')

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def is_negative(self) -> bool:
        """Check if amount is negative"""
        return self.amount < Decimal('0')

    def to_string(self) -> str:
        """Format for display"""
        if self.currency.precision == 0:
            return f"{self.currency.code} {self.amount:,.0f}"
        else:
            return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"


@dataclass
class ExchangeRate:
    """Exchange rate for a currency pair (units of to_currency per from_currency)"""
    from_currency: Currency
    to_currency: Currency
    rate: Decimal
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not isinstance(self.rate, Decimal):
            self.rate = Decimal(str(self.rate))
        if self.rate <= Decimal('0'):
            raise ValueError("Exchange rate must be positive")


class CurrencyConverter:
    """
    Converts money between currencies using caller-registered rates.
    Rate sourcing is out of scope; rates are set explicitly.
    """

    def __init__(self):
        self._rates: Dict[Tuple[Currency, Currency], ExchangeRate] = {}

    def set_rate(self, rate: ExchangeRate) -> None:
        """Set exchange rate for currency pair, along with its reciprocal"""
        self._rates[(rate.from_currency, rate.to_currency)] = rate
        self._rates[(rate.to_currency, rate.from_currency)] = ExchangeRate(
            from_currency=rate.to_currency,
            to_currency=rate.from_currency,
            rate=Decimal('1') / rate.rate,
            timestamp=rate.timestamp
        )

    def get_rate(self, from_currency: Currency, to_currency: Currency) -> Optional[ExchangeRate]:
        """Get exchange rate for currency pair"""
        if from_currency == to_currency:
            return ExchangeRate(
                from_currency=from_currency,
                to_currency=to_currency,
                rate=Decimal('1')
            )
        return self._rates.get((from_currency, to_currency))

    def convert(self, money: Money, to_currency: Currency) -> Money:
        """
        Convert money from one currency to another

        Args:
            money: Money to convert
            to_currency: Target currency

        Returns:
            Converted Money object

        Raises:
            CurrencyConversionError: If no exchange rate available
        """
        if money.currency == to_currency:
            return money

        rate = self.get_rate(money.currency, to_currency)
        if not rate:
            raise CurrencyConversionError(
                f"No exchange rate available for {money.currency.code} -> {to_currency.code}"
            )

        return Money(money.amount * rate.rate, to_currency)
