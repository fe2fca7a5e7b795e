"""MongoDB account lookup.

Reads the accounts collection owned by the account service; ordering
never writes to it.
"""

from typing import Any, Dict

from infrastructure.persistence.mongodb.base import MongoBaseRepository


class MongoAccountStore(MongoBaseRepository[str]):
    """MongoDB implementation of IAccountStore (existence checks only)."""

    @property
    def collection_name(self) -> str:
        return "accounts"

    def to_document(self, entity: str) -> Dict[str, Any]:
        return {"_id": entity}

    def from_document(self, doc: Dict[str, Any]) -> str:
        return str(doc["_id"])

    async def account_exists(self, account_id: str) -> bool:
        return await self._count({"_id": account_id}) > 0
