"""
Demo data and simulation runner

Seeds a registry with a small set of checking and savings accounts and runs
transfers, a withdrawal and a number of simulated months of interest.

Run with: python run.py
"""

from decimal import Decimal
from datetime import date
from typing import Dict, List, Optional

from .currency import Money, Currency
from .accounts import (
    Account, CheckingAccount, SavingsAccount, Card, CapitalizationFrequency
)
from .registry import AccountRegistryInterface, InMemoryAccountRegistry
from .clock import Clock, SystemClock
from .config import get_config
from .transactions import TransactionManager
from .savings import SavingsManager
from .logging_config import get_logger

logger = get_logger("bank_ledger.seed")

CHECKING_MAIN = "CHK-001"
CHECKING_CARD = "CHK-002"
SAVINGS_MONTHLY = "SAV-001"
SAVINGS_QUARTERLY = "SAV-002"


def seed_demo_accounts(
    registry: AccountRegistryInterface,
    today: date,
    currency: Optional[Currency] = None
) -> List[Account]:
    """Register the demo accounts and return them"""
    currency = currency or Currency.from_code(get_config().base_currency)

    accounts = [
        CheckingAccount(
            id=CHECKING_MAIN,
            name="Everyday Checking",
            balance=Money(Decimal('2500.00'), currency)
        ),
        CheckingAccount(
            id=CHECKING_CARD,
            name="Card Checking",
            balance=Money(Decimal('800.00'), currency),
            card=Card(
                daily_transaction_limit=Money(Decimal('500.00'), currency),
                daily_withdrawal_limit=Money(Decimal('200.00'), currency)
            )
        ),
        SavingsAccount(
            id=SAVINGS_MONTHLY,
            name="Monthly Saver",
            balance=Money(Decimal('1000.00'), currency),
            interest_rate=Decimal('0.005'),
            interest_frequency=CapitalizationFrequency.MONTHLY,
            last_interest_applied_date=today
        ),
        SavingsAccount(
            id=SAVINGS_QUARTERLY,
            name="Quarterly Saver",
            balance=Money(Decimal('5000.00'), currency),
            interest_rate=Decimal('0.015'),
            interest_frequency=CapitalizationFrequency.QUARTERLY,
            last_interest_applied_date=today
        ),
    ]

    for account in accounts:
        registry.add(account)

    logger.info(f"Seeded {len(accounts)} demo accounts")
    return accounts


def run_demo(months: Optional[int] = None, clock: Optional[Clock] = None) -> Dict[str, Money]:
    """
    Seed a fresh registry, move some money and simulate months of interest.

    Returns:
        Final balance per account id
    """
    if months is None:
        months = get_config().demo_months
    clock = clock or SystemClock()

    registry = InMemoryAccountRegistry()
    accounts = seed_demo_accounts(registry, clock.today())
    currency = accounts[0].currency

    transaction_manager = TransactionManager(registry, clock=clock)
    savings_manager = SavingsManager(registry, clock=clock)

    transaction_manager.transfer(CHECKING_MAIN, SAVINGS_MONTHLY, Money(Decimal('500.00'), currency))
    transaction_manager.transfer(CHECKING_CARD, SAVINGS_QUARTERLY, Money(Decimal('250.00'), currency))
    transaction_manager.withdraw(CHECKING_CARD, Money(Decimal('150.00'), currency))

    system_date = savings_manager.initial_system_date()
    for _ in range(months):
        system_date = savings_manager.pass_time(system_date).system_date

    return {account.id: account.balance for account in registry.get_all()}
