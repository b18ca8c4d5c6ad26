"""
Test suite for accounts module

Tests the checking/savings account variants, card validation and the
in-memory account registry.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime, timezone

from bank_ledger.currency import Money, Currency
from bank_ledger.accounts import (
    Account, AccountType, CheckingAccount, SavingsAccount, Card, CapitalizationFrequency
)
from bank_ledger.registry import InMemoryAccountRegistry
from bank_ledger.transactions import Transaction


def usd(amount: str) -> Money:
    return Money(Decimal(amount), Currency.USD)


class TestAccount:
    """Test account variants"""

    def test_checking_account(self):
        """Test creating a checking account without a card"""
        account = CheckingAccount(id="CHK001", balance=usd('100.00'), name="Main")

        assert account.account_type == AccountType.CHECKING
        assert account.is_checking
        assert not account.is_savings
        assert account.currency == Currency.USD
        assert account.transactions == []
        assert not account.has_active_card

    def test_checking_account_with_card(self):
        """Test card-linked checking account"""
        card = Card(daily_transaction_limit=usd('100.00'), daily_withdrawal_limit=usd('50.00'))
        account = CheckingAccount(id="CHK002", balance=usd('0.00'), card=card)

        assert account.has_active_card

        card.active = False
        assert not account.has_active_card

    def test_card_currency_must_match_account(self):
        """Test that card limits use the account currency"""
        card = Card(
            daily_transaction_limit=Money(Decimal('100'), Currency.EUR),
            daily_withdrawal_limit=Money(Decimal('50'), Currency.EUR)
        )

        with pytest.raises(ValueError, match="Card limit currency must match"):
            CheckingAccount(id="CHK003", balance=usd('0.00'), card=card)

    def test_card_limits_must_share_currency(self):
        """Test that both card limits use one currency"""
        with pytest.raises(ValueError, match="same currency"):
            Card(
                daily_transaction_limit=usd('100.00'),
                daily_withdrawal_limit=Money(Decimal('50'), Currency.EUR)
            )

    def test_savings_account(self):
        """Test creating a savings account"""
        account = SavingsAccount(
            id="SAV001",
            balance=usd('100.00'),
            interest_rate=Decimal('0.05'),
            interest_frequency=CapitalizationFrequency.QUARTERLY,
            last_interest_applied_date=date(2024, 1, 15)
        )

        assert account.account_type == AccountType.SAVINGS
        assert account.is_savings
        assert account.interest_rate == Decimal('0.05')
        assert account.interest_frequency == CapitalizationFrequency.QUARTERLY

    def test_savings_rate_coerced_and_validated(self):
        """Test interest rate coercion and bounds"""
        account = SavingsAccount(id="SAV002", balance=usd('0.00'), interest_rate="0.01")
        assert account.interest_rate == Decimal('0.01')
        assert account.interest_frequency == CapitalizationFrequency.MONTHLY

        with pytest.raises(ValueError, match="must be between 0 and 1"):
            SavingsAccount(id="SAV003", balance=usd('0.00'), interest_rate=Decimal('-0.01'))

        with pytest.raises(ValueError, match="must be between 0 and 1"):
            SavingsAccount(id="SAV004", balance=usd('0.00'), interest_rate=Decimal('1.5'))

    def test_savings_default_applied_date_is_utc_today(self):
        """Test that the default last-applied date is the UTC calendar date"""
        before = datetime.now(timezone.utc).date()
        account = SavingsAccount(id="SAV005", balance=usd('0.00'))
        after = datetime.now(timezone.utc).date()

        assert before <= account.last_interest_applied_date <= after

    def test_negative_opening_balance_rejected(self):
        """Test that accounts cannot start overdrawn"""
        with pytest.raises(ValueError, match="must not be negative"):
            CheckingAccount(id="CHK004", balance=usd('-1.00'))

    def test_base_account_is_abstract(self):
        """Test that the common record cannot be instantiated directly"""
        with pytest.raises(TypeError):
            Account(id="ACC001", balance=usd('0.00'))

    def test_record_keeps_previous_history_list(self):
        """Test that recording a transaction replaces the history list"""
        account = CheckingAccount(id="CHK005", balance=usd('10.00'))
        history = account.transactions
        transaction = Transaction(
            id="TXN001",
            from_account_id="CHK005",
            to_account_id="CHK005",
            amount=usd('1.00'),
            timestamp=datetime.now(timezone.utc)
        )

        account.record(transaction)

        assert history == []
        assert account.transactions == [transaction]
        assert transaction.debit_amount == usd('1.00')

    def test_credit_and_debit(self):
        """Test balance mutation helpers"""
        account = CheckingAccount(id="CHK006", balance=usd('10.00'))

        account.credit(usd('5.50'))
        assert account.balance == usd('15.50')

        account.debit(usd('15.50'))
        assert account.balance.is_zero()


class TestInMemoryAccountRegistry:
    """Test the in-memory registry"""

    def setup_method(self):
        """Set up test fixtures"""
        self.checking = CheckingAccount(id="CHK001", balance=usd('100.00'))
        self.savings = SavingsAccount(id="SAV001", balance=usd('50.00'), interest_rate=Decimal('0.01'))
        self.registry = InMemoryAccountRegistry([self.checking, self.savings])

    def test_get_returns_live_account(self):
        """Test that get returns the registered instance"""
        assert self.registry.get("CHK001") is self.checking
        assert self.registry.get("MISSING") is None

    def test_exists_and_count(self):
        """Test exists and count"""
        assert self.registry.exists("SAV001")
        assert not self.registry.exists("MISSING")
        assert self.registry.count() == 2

    def test_get_all_and_find_by_type(self):
        """Test listing accounts"""
        assert {account.id for account in self.registry.get_all()} == {"CHK001", "SAV001"}
        assert self.registry.find_by_type(AccountType.SAVINGS) == [self.savings]
        assert self.registry.find_by_type(AccountType.CHECKING) == [self.checking]

    def test_duplicate_id_rejected(self):
        """Test that an id can only be registered once"""
        with pytest.raises(ValueError, match="already registered"):
            self.registry.add(CheckingAccount(id="CHK001", balance=usd('0.00')))

    def test_remove_and_clear(self):
        """Test removing accounts"""
        assert self.registry.remove("CHK001")
        assert not self.registry.remove("CHK001")
        assert self.registry.count() == 1

        self.registry.clear()
        assert self.registry.get_all() == []
