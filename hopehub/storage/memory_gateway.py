"""
In-memory document store.

Used for local development and tests. Supports the same query surface as the
MongoDB gateway and can be told to fail specific calls.
"""

import copy
import itertools
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from hopehub.core.errors import PersistError, QueryError
from hopehub.core.time_utils import now_utc
from .gateway import PersistenceGateway, resolve_server_timestamps


logger = logging.getLogger(__name__)

# (operation, collection, filters) -> True to make the call fail
FailurePredicate = Callable[[str, str, Dict[str, Any]], bool]


class InMemoryGateway(PersistenceGateway):
    """
    Dict-backed persistence gateway.

    Usage:
        gateway = InMemoryGateway()
        doc_id = await gateway.insert_document("hopehub_requests", {...})
        docs = await gateway.query_documents("hopehub_requests", order_by="createdAt")

    Every call is recorded in `calls` as (operation, collection, filters).
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = now_utc,
        fail_when: Optional[FailurePredicate] = None,
    ):
        """
        Initialize an empty store.

        Args:
            clock: Source of server timestamps
            fail_when: Optional predicate selecting calls that should fail
        """
        self.clock = clock
        self.fail_when = fail_when
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._ids = itertools.count(1)

    def _should_fail(self, operation: str, collection: str, filters: Dict[str, Any]) -> bool:
        return bool(self.fail_when and self.fail_when(operation, collection, filters))

    async def insert_document(self, collection: str, fields: Dict[str, Any]) -> str:
        self.calls.append(("insert", collection, {}))
        if self._should_fail("insert", collection, {}):
            raise PersistError(f"insert into {collection} rejected")

        doc_id = f"{collection}-{next(self._ids)}"
        doc = copy.deepcopy(resolve_server_timestamps(fields, self.clock()))
        doc["id"] = doc_id
        self.collections.setdefault(collection, []).append(doc)

        logger.debug(f"Inserted {doc_id}")
        return doc_id

    async def query_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        filters = dict(filters or {})
        self.calls.append(("query", collection, filters))
        if self._should_fail("query", collection, filters):
            raise QueryError(f"query on {collection} rejected")

        docs = [
            doc for doc in self.collections.get(collection, [])
            if all(doc.get(k) == v for k, v in filters.items())
        ]

        if order_by:
            # Missing values sort last, as in MongoDB descending order
            present = [d for d in docs if d.get(order_by) is not None]
            missing = [d for d in docs if d.get(order_by) is None]
            try:
                present.sort(key=lambda d: d[order_by], reverse=True)
            except TypeError as e:
                raise QueryError(f"cannot order {collection} by {order_by}: {e}") from e
            docs = present + missing

        if limit is not None:
            docs = docs[:limit]

        return [copy.deepcopy(d) for d in docs]
