"""
Transaction Processing Module

Validates and executes transfers and withdrawals between accounts held in
the registry. Every rule is checked before any balance moves, so a call
either applies completely or raises without side effects.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import uuid

from .currency import Money, CurrencyConverter
from .accounts import Account, AccountType
from .registry import AccountRegistryInterface
from .clock import Clock, SystemClock
from .config import get_config
from .events import EventDispatcher, EventPayload, DomainEvent, create_transaction_event
from .exceptions import (
    LedgerError, AccountNotFoundError, InvalidOperationError,
    InsufficientFundsError, LimitExceededError
)
from .logging_config import get_logger, log_action


@dataclass(frozen=True)
class Transaction:
    """
    Immutable record of money moving between accounts.
    A withdrawal references the same account on both sides.

    ``amount`` is what the destination received, in its currency.
    ``debit_amount`` is what left the source, in the source currency; it
    defaults to ``amount`` when both sides share a currency.
    """
    id: str
    from_account_id: str
    to_account_id: str
    amount: Money
    timestamp: datetime
    debit_amount: Optional[Money] = None

    def __post_init__(self):
        if self.debit_amount is None:
            object.__setattr__(self, 'debit_amount', self.amount)

    @property
    def is_withdrawal(self) -> bool:
        return self.from_account_id == self.to_account_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount": str(self.amount.amount),
            "currency": self.amount.currency.code,
            "debit_amount": str(self.debit_amount.amount),
            "debit_currency": self.debit_amount.currency.code,
            "timestamp": self.timestamp.isoformat()
        }


def _new_transaction_id() -> str:
    return str(uuid.uuid4())


class TransactionManager:
    """
    Executes transfers and withdrawals, enforcing balance and card
    daily-limit rules
    """

    def __init__(
        self,
        registry: AccountRegistryInterface,
        converter: Optional[CurrencyConverter] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        enforce_card_limits: Optional[bool] = None
    ):
        self.registry = registry
        self.converter = converter or CurrencyConverter()
        self.clock = clock or SystemClock()
        self.id_factory = id_factory or _new_transaction_id
        self.logger = get_logger("bank_ledger.transactions")
        self._event_dispatcher = event_dispatcher

        if enforce_card_limits is None:
            enforce_card_limits = get_config().enforce_card_limits
        self.enforce_card_limits = enforce_card_limits

    def transfer(self, from_account_id: str, to_account_id: str, amount: Money) -> Transaction:
        """
        Transfer money between two accounts

        Args:
            from_account_id: Account to debit
            to_account_id: Account to credit
            amount: Amount to move, in any convertible currency

        Returns:
            The recorded Transaction, with its amount in the destination currency

        Raises:
            InvalidOperationError: Same account, transfer out of savings, or negative amount
            AccountNotFoundError: Either account is missing
            InsufficientFundsError: Source balance would go negative
            LimitExceededError: Card daily transaction limit would be exceeded
        """
        try:
            from_account, to_account, debit_amount, credit_amount = self._validate_transfer(
                from_account_id, to_account_id, amount
            )
        except LedgerError as e:
            self._reject("transfer", from_account_id, e, {
                "from_account": from_account_id,
                "to_account": to_account_id,
                "amount": amount.to_string()
            })
            raise

        transaction = Transaction(
            id=self.id_factory(),
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=credit_amount,
            timestamp=self.clock.now(),
            debit_amount=debit_amount
        )

        from_account.debit(debit_amount)
        from_account.record(transaction)
        to_account.credit(credit_amount)
        to_account.record(transaction)

        self._complete("transfer", transaction, {
            "debited": debit_amount.to_string(),
            "credited": credit_amount.to_string(),
            "from_balance": from_account.balance.to_string(),
            "to_balance": to_account.balance.to_string()
        })
        return transaction

    def withdraw(self, account_id: str, amount: Money) -> Transaction:
        """
        Withdraw money from an account

        Args:
            account_id: Account to debit
            amount: Amount to withdraw, in any convertible currency

        Returns:
            Self-referencing Transaction in the account currency

        Raises:
            AccountNotFoundError: Account is missing
            InvalidOperationError: Negative amount
            InsufficientFundsError: Balance would go negative
            LimitExceededError: Card daily transaction or withdrawal limit would be exceeded
        """
        try:
            account, debit_amount = self._validate_withdrawal(account_id, amount)
        except LedgerError as e:
            self._reject("withdraw", account_id, e, {
                "account": account_id,
                "amount": amount.to_string()
            })
            raise

        transaction = Transaction(
            id=self.id_factory(),
            from_account_id=account_id,
            to_account_id=account_id,
            amount=debit_amount,
            timestamp=self.clock.now()
        )

        account.debit(debit_amount)
        account.record(transaction)

        self._complete("withdraw", transaction, {
            "balance": account.balance.to_string()
        })
        return transaction

    def check_funds(self, account_id: str) -> Money:
        """Get the current balance of an account"""
        return self._require_account(account_id).balance

    def retrieve_transactions(self, account_id: str) -> List[Transaction]:
        """Get the transaction history of an account, oldest first"""
        return list(self._require_account(account_id).transactions)

    def _validate_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Money
    ) -> Tuple[Account, Account, Money, Money]:
        if from_account_id == to_account_id:
            raise InvalidOperationError("Cannot perform a transfer between the same accounts")

        from_account = self.registry.get(from_account_id)
        to_account = self.registry.get(to_account_id)
        if not from_account:
            raise AccountNotFoundError(from_account_id)
        if not to_account:
            raise AccountNotFoundError(to_account_id)

        # Savings accounts only receive money
        if from_account.account_type == AccountType.SAVINGS:
            raise InvalidOperationError(
                f"Cannot perform a transfer from a {from_account.account_type.value} account "
                f"to a {to_account.account_type.value} account"
            )

        if amount.is_negative():
            raise InvalidOperationError("Transaction amount must not be negative")

        credit_amount = self.converter.convert(amount, to_account.currency)
        debit_amount = self.converter.convert(amount, from_account.currency)

        if (from_account.balance - debit_amount).is_negative():
            raise InsufficientFundsError(
                f"The result of a transaction must not lead to negative account balance: "
                f"available {from_account.balance.to_string()}, requested {debit_amount.to_string()}"
            )

        self._check_card_limits(from_account, debit_amount, is_withdrawal=False)

        return from_account, to_account, debit_amount, credit_amount

    def _validate_withdrawal(self, account_id: str, amount: Money) -> Tuple[Account, Money]:
        account = self.registry.get(account_id)
        if not account:
            raise AccountNotFoundError(account_id)

        if amount.is_negative():
            raise InvalidOperationError("Withdrawal amount must not be negative")

        debit_amount = self.converter.convert(amount, account.currency)

        if (account.balance - debit_amount).is_negative():
            raise InsufficientFundsError(
                f"The result of a withdrawal must not lead to negative account balance: "
                f"available {account.balance.to_string()}, requested {debit_amount.to_string()}"
            )

        self._check_card_limits(account, debit_amount, is_withdrawal=True)

        return account, debit_amount

    def _check_card_limits(self, account: Account, amount: Money, is_withdrawal: bool) -> None:
        """Enforce card daily limits for card-linked checking accounts"""
        if not self.enforce_card_limits or account.account_type != AccountType.CHECKING:
            return
        if not account.has_active_card:
            return

        card = account.card
        if card.currency != account.currency:
            raise InvalidOperationError(
                f"Card limit currency {card.currency.code} does not match "
                f"account currency {account.currency.code}"
            )
        outgoing_today, withdrawn_today = self._daily_totals(account)

        if outgoing_today + amount > card.daily_transaction_limit:
            raise LimitExceededError(
                f"Daily transaction limit of {card.daily_transaction_limit.to_string()} exceeded: "
                f"{outgoing_today.to_string()} already spent today",
                limit_name="daily_transaction_limit"
            )

        if is_withdrawal and withdrawn_today + amount > card.daily_withdrawal_limit:
            raise LimitExceededError(
                f"Daily withdrawal limit of {card.daily_withdrawal_limit.to_string()} exceeded: "
                f"{withdrawn_today.to_string()} already withdrawn today",
                limit_name="daily_withdrawal_limit"
            )

    def _daily_totals(self, account: Account) -> Tuple[Money, Money]:
        """
        Sum today's outgoing debits and today's withdrawals for an account,
        in the account currency. "Today" is the real clock's UTC date.
        """
        today = self.clock.today()
        outgoing = Money.zero(account.currency)
        withdrawn = Money.zero(account.currency)

        for transaction in account.transactions:
            if transaction.from_account_id != account.id:
                continue
            if transaction.timestamp.date() != today:
                continue
            outgoing = outgoing + transaction.debit_amount
            if transaction.is_withdrawal:
                withdrawn = withdrawn + transaction.debit_amount

        return outgoing, withdrawn

    def _require_account(self, account_id: str) -> Account:
        account = self.registry.get(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    def _complete(self, operation: str, transaction: Transaction, extra: Dict[str, Any]) -> None:
        log_action(
            self.logger, "info", f"Transaction completed: {operation}",
            action=operation, resource=f"transaction:{transaction.id}",
            extra={**transaction.to_dict(), **extra}
        )
        if self._event_dispatcher:
            self._event_dispatcher.publish(
                create_transaction_event(DomainEvent.TRANSACTION_COMPLETED, transaction)
            )

    def _reject(self, operation: str, account_id: str, error: LedgerError, extra: Dict[str, Any]) -> None:
        log_action(
            self.logger, "warning", f"Transaction rejected: {operation}: {error}",
            action=operation, resource=f"account:{account_id}",
            extra={**extra, "error": type(error).__name__}
        )
        if self._event_dispatcher:
            self._event_dispatcher.publish(EventPayload(
                event_type=DomainEvent.TRANSACTION_REJECTED,
                entity_type="account",
                entity_id=account_id,
                data={**extra, "operation": operation, "error": type(error).__name__, "reason": str(error)}
            ))
