"""In-memory account store.

Accounts live in another bounded context; this adapter only records the
ids that are known to exist.
"""

from typing import Iterable, Optional, Set


class InMemoryAccountStore:
    """In-memory implementation of IAccountStore port."""

    def __init__(self, account_ids: Optional[Iterable[str]] = None) -> None:
        self._accounts: Set[str] = set(account_ids or ())

    def add(self, account_id: str) -> None:
        self._accounts.add(account_id)

    async def account_exists(self, account_id: str) -> bool:
        return account_id in self._accounts

    def clear(self) -> None:
        self._accounts.clear()
