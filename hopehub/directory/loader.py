"""
Initial load of the request directory.

Loads requests newest first, attaches a pledge count to each, then loads
campaigns. Failures are logged and whatever was obtained is still returned,
so the directory stays browsable when auxiliary data is unavailable.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import List

from hopehub.core.domain_models import Campaign, Request
from hopehub.core.errors import DocumentError
from hopehub.storage.gateway import CAMPAIGNS_COLLECTION, REQUESTS_COLLECTION, PersistenceGateway
from hopehub.workflows.pledges import count_donations

logger = logging.getLogger(__name__)

# One count query per request; beyond this many the fan-out gets expensive
COUNT_FANOUT_WARNING = 100


@dataclass
class DirectoryState:
    requests: List[Request] = field(default_factory=list)
    campaigns: List[Campaign] = field(default_factory=list)


async def load_requests(gateway: PersistenceGateway) -> List[Request]:
    """Requests newest first, malformed documents skipped. [] on failure."""
    try:
        docs = await gateway.query_documents(REQUESTS_COLLECTION, order_by="createdAt")
    except Exception as e:
        logger.error(f"Error loading requests: {e}")
        return []

    requests = []
    for doc in docs:
        try:
            requests.append(Request.from_document(doc))
        except DocumentError as e:
            logger.warning(f"Skipping malformed request: {e}")
    return requests


async def load_campaigns(gateway: PersistenceGateway) -> List[Campaign]:
    """Campaigns newest first. [] on failure."""
    try:
        docs = await gateway.query_documents(CAMPAIGNS_COLLECTION, order_by="createdAt")
    except Exception as e:
        logger.error(f"Error loading campaigns: {e}")
        return []

    campaigns = []
    for doc in docs:
        try:
            campaigns.append(Campaign.from_document(doc))
        except DocumentError as e:
            logger.warning(f"Skipping malformed campaign: {e}")
    return campaigns


async def attach_donation_counts(gateway: PersistenceGateway,
                                 requests: List[Request]) -> List[Request]:
    """Count pledges for every request concurrently. A failed count is 0."""
    if len(requests) > COUNT_FANOUT_WARNING:
        logger.warning(
            f"Counting donations for {len(requests)} requests "
            f"(one query each); consider a grouped count"
        )

    counts = await asyncio.gather(*(count_donations(gateway, r.id) for r in requests))
    return [replace(r, donation_count=c) for r, c in zip(requests, counts)]


async def load_directory(gateway: PersistenceGateway) -> DirectoryState:
    """
    Load everything the directory view needs.

    Args:
        gateway: Document store

    Returns:
        DirectoryState with requests (counts attached) and campaigns
    """
    requests = await load_requests(gateway)
    requests = await attach_donation_counts(gateway, requests)
    campaigns = await load_campaigns(gateway)

    logger.info(f"Directory loaded: {len(requests)} requests, {len(campaigns)} campaigns")
    return DirectoryState(requests=requests, campaigns=campaigns)
