"""
Persistence Gateway contract.

The document store is consumed as an opaque service exposing two calls:
insert a document into a collection, and query a collection with equality
filters, a descending sort on one field, and a result limit.

Collection names used by HopeHub live here too.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional


REQUESTS_COLLECTION = "hopehub_requests"
DONATIONS_COLLECTION = "hopehub_donations"
CAMPAIGNS_COLLECTION = "hopehub_campaigns"


class _ServerTimestamp:
    """Placeholder replaced by the gateway's clock at write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    def __copy__(self) -> "_ServerTimestamp":
        return self

    def __deepcopy__(self, memo) -> "_ServerTimestamp":
        return self


SERVER_TIMESTAMP = _ServerTimestamp()


def resolve_server_timestamps(fields: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Return a copy of fields with every SERVER_TIMESTAMP replaced by now."""
    return {
        key: (now if value is SERVER_TIMESTAMP else value)
        for key, value in fields.items()
    }


class PersistenceGateway:
    """
    Base class for document store gateways.

    Implementations must:
    - return documents as plain dicts carrying the store id under "id"
    - raise PersistError on write failure, QueryError on read failure
    - resolve SERVER_TIMESTAMP values on insert
    """

    async def insert_document(self, collection: str, fields: Dict[str, Any]) -> str:
        """
        Insert a document.

        Args:
            collection: Collection name
            fields: Document fields (may contain SERVER_TIMESTAMP)

        Returns:
            Store-assigned document id
        """
        raise NotImplementedError

    async def query_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Query a collection.

        Args:
            collection: Collection name
            filters: Field -> value equality filters, ANDed
            order_by: Field to sort by, descending
            limit: Maximum number of documents

        Returns:
            List of documents, each with an "id" key
        """
        raise NotImplementedError
