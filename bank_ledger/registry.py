"""
Account Registry Module

Provides the abstract account registry interface and an in-memory
implementation. The registry is an explicitly owned object handed by
reference to the transaction and savings managers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
import threading

from .accounts import Account, AccountType


class AccountRegistryInterface(ABC):
    """Abstract interface for account registries"""

    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]:
        """Get an account by id, or None"""
        pass

    @abstractmethod
    def get_all(self) -> List[Account]:
        """Get all registered accounts"""
        pass

    @abstractmethod
    def exists(self, account_id: str) -> bool:
        """Check if an account is registered"""
        pass

    @abstractmethod
    def add(self, account: Account) -> None:
        """Register an account"""
        pass

    @abstractmethod
    def remove(self, account_id: str) -> bool:
        """Unregister an account"""
        pass

    def count(self) -> int:
        """Count registered accounts"""
        return len(self.get_all())

    def find_by_type(self, account_type: AccountType) -> List[Account]:
        """Get all accounts of one variant"""
        return [account for account in self.get_all() if account.account_type == account_type]


class InMemoryAccountRegistry(AccountRegistryInterface):
    """
    In-memory registry holding live account objects.
    Accounts returned by get() are the registered instances, so managers
    mutate them in place.
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        self._accounts: Dict[str, Account] = {}
        self._lock = threading.RLock()
        for account in accounts or []:
            self.add(account)

    def get(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def get_all(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def exists(self, account_id: str) -> bool:
        with self._lock:
            return account_id in self._accounts

    def add(self, account: Account) -> None:
        with self._lock:
            if account.id in self._accounts:
                raise ValueError(f"Account {account.id} already registered")
            self._accounts[account.id] = account

    def remove(self, account_id: str) -> bool:
        with self._lock:
            if account_id in self._accounts:
                del self._accounts[account_id]
                return True
            return False

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def clear(self) -> None:
        """Remove all accounts"""
        with self._lock:
            self._accounts = {}
