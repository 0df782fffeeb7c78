"""
Filtering, search and summary stats over the loaded request list.

Everything here is a pure function of the in-memory list. Results keep the
input order, which is the store's newest-first order.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from hopehub.core.domain_models import ALL_DISTRICTS, Request

OTHER_REQUESTS_LIMIT = 5


@dataclass(frozen=True)
class DirectoryStats:
    total_requests: int
    active_requests: int
    total_donations: int


def matches_query(request: Request, query: str) -> bool:
    """
    Case-insensitive substring match on name, city/town, or any single item.

    Args:
        request: Request to test
        query: Already lower-cased search text, matched as typed
    """
    if query in (request.name or "").lower():
        return True
    if query in (request.city_town or "").lower():
        return True
    return any(query in item.lower() for item in request.items or [])


def filter_requests(
    requests: Sequence[Request],
    query: str = "",
    district: str = ALL_DISTRICTS,
) -> List[Request]:
    """
    Filter requests by district and free-text search.

    Args:
        requests: Loaded requests
        query: Search text; ignored when blank
        district: Exact district name, or "all"

    Returns:
        Matching requests, input order preserved
    """
    q = (query or "").lower()
    results = []
    for r in requests:
        if district != ALL_DISTRICTS and r.district != district:
            continue
        if q.strip() and not matches_query(r, q):
            continue
        results.append(r)
    return results


def compute_stats(requests: Sequence[Request]) -> DirectoryStats:
    """Headline counts for the directory, recomputed from scratch."""
    return DirectoryStats(
        total_requests=len(requests),
        active_requests=sum(1 for r in requests if r.is_active),
        total_donations=sum(r.donation_count or 0 for r in requests),
    )


def other_requests(
    filtered: Sequence[Request],
    exclude_id: Optional[str] = None,
    limit: int = OTHER_REQUESTS_LIMIT,
) -> List[Request]:
    """The first few filtered requests, minus the one currently being viewed."""
    return [r for r in filtered if r.id != exclude_id][:limit]
