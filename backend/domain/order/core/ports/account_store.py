"""Account store port (interface).

Accounts are owned by another bounded context; ordering only needs to
know whether one exists.
"""

from typing import Protocol


class IAccountStore(Protocol):
    async def account_exists(self, account_id: str) -> bool:
        """Return True if the account is known."""
        ...
