"""
Savings Interest Module

Advances a simulated calendar one month at a time and capitalizes interest
on savings accounts whose monthly or quarterly period has come due.

The simulated date is threaded through ``pass_time`` by the caller instead
of being held by the manager. Eligibility compares the advanced date with
the account's next due period exactly, so an account whose window is
stepped over (e.g. a skipped call) misses that period for good; there is
no catch-up.
"""

from datetime import date
from dataclasses import dataclass, field
from typing import List, Optional

from .currency import Money
from .accounts import AccountType, CapitalizationFrequency, SavingsAccount
from .registry import AccountRegistryInterface
from .clock import Clock, SystemClock, add_months, same_month, same_quarter
from .events import EventDispatcher, EventPayload, DomainEvent
from .logging_config import get_logger, log_action


@dataclass(frozen=True)
class InterestPosting:
    """Interest credited to one account during a pass_time step"""
    account_id: str
    interest: Money
    new_balance: Money
    applied_date: date


@dataclass
class InterestRunResult:
    """Outcome of one pass_time step"""
    previous_date: date
    system_date: date
    postings: List[InterestPosting] = field(default_factory=list)

    @property
    def quarter_crossed(self) -> bool:
        return not same_quarter(self.previous_date, self.system_date)

    @property
    def credited_account_ids(self) -> List[str]:
        return [posting.account_id for posting in self.postings]


class SavingsManager:
    """Applies periodic interest to savings accounts on a simulated calendar"""

    def __init__(
        self,
        registry: AccountRegistryInterface,
        clock: Optional[Clock] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.registry = registry
        self.clock = clock or SystemClock()
        self.logger = get_logger("bank_ledger.savings")
        self._event_dispatcher = event_dispatcher

    def initial_system_date(self) -> date:
        """Starting simulated date: today on the real clock"""
        return self.clock.today()

    def pass_time(self, system_date: date) -> InterestRunResult:
        """
        Advance the simulated date by one month and apply due interest

        Args:
            system_date: Current simulated date

        Returns:
            InterestRunResult whose ``system_date`` is the new simulated date,
            to be passed to the next call
        """
        next_date = add_months(system_date, 1)
        result = InterestRunResult(previous_date=system_date, system_date=next_date)

        for account in self.registry.find_by_type(AccountType.SAVINGS):
            posting = None
            if account.interest_frequency == CapitalizationFrequency.MONTHLY:
                posting = self._apply_monthly_interest(account, next_date)
            elif account.interest_frequency == CapitalizationFrequency.QUARTERLY and result.quarter_crossed:
                posting = self._apply_quarterly_interest(account, next_date)

            if posting:
                result.postings.append(posting)

        log_action(
            self.logger, "info", f"Simulated date advanced to {next_date.isoformat()}",
            action="pass_time", resource="system_date",
            extra={
                "previous_date": system_date.isoformat(),
                "system_date": next_date.isoformat(),
                "accounts_credited": len(result.postings)
            }
        )
        self._publish(EventPayload(
            event_type=DomainEvent.SYSTEM_DATE_ADVANCED,
            entity_type="system_date",
            entity_id=next_date.isoformat(),
            data={
                "previous_date": system_date.isoformat(),
                "credited_account_ids": result.credited_account_ids
            }
        ))

        return result

    def _apply_monthly_interest(self, account: SavingsAccount, interest_date: date) -> Optional[InterestPosting]:
        due_date = add_months(account.last_interest_applied_date, 1)
        if not same_month(interest_date, due_date):
            self.logger.debug(
                f"Monthly interest not due for {account.id}: next due {due_date.isoformat()}"
            )
            return None
        return self._add_interest(account, interest_date)

    def _apply_quarterly_interest(self, account: SavingsAccount, interest_date: date) -> Optional[InterestPosting]:
        due_date = add_months(account.last_interest_applied_date, 3)
        if not same_quarter(interest_date, due_date):
            self.logger.debug(
                f"Quarterly interest not due for {account.id}: next due {due_date.isoformat()}"
            )
            return None
        return self._add_interest(account, interest_date)

    def _add_interest(self, account: SavingsAccount, interest_date: date) -> InterestPosting:
        interest = account.balance * account.interest_rate
        account.credit(interest)
        account.last_interest_applied_date = interest_date

        posting = InterestPosting(
            account_id=account.id,
            interest=interest,
            new_balance=account.balance,
            applied_date=interest_date
        )

        log_action(
            self.logger, "info", f"Interest applied: {interest.to_string()}",
            action="apply_interest", resource=f"account:{account.id}",
            extra={
                "interest": interest.to_string(),
                "rate": str(account.interest_rate),
                "frequency": account.interest_frequency.value,
                "new_balance": account.balance.to_string(),
                "applied_date": interest_date.isoformat()
            }
        )
        self._publish(EventPayload(
            event_type=DomainEvent.INTEREST_APPLIED,
            entity_type="account",
            entity_id=account.id,
            data={
                "interest": str(interest.amount),
                "currency": interest.currency.code,
                "new_balance": str(account.balance.amount),
                "applied_date": interest_date.isoformat()
            }
        ))
        return posting

    def _publish(self, event: EventPayload) -> None:
        if self._event_dispatcher:
            self._event_dispatcher.publish(event)
