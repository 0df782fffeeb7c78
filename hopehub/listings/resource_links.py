"""
Read-only listings of shared learning resources.

Education sites, uploaded files, cloud-drive links and chat-group links are
stored in separate collections with the same shape: a url, a creation time,
and some descriptive fields. One listing class serves all of them.

Reads never raise: a failed list returns [] and a failed duplicate check
returns False.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from hopehub.config import Settings
from hopehub.core.domain_models import ResourceLink
from hopehub.core.errors import DocumentError
from hopehub.storage.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


class ResourceType(str, Enum):
    EDUCATION_SITE = "education-site"
    FILE_UPLOAD = "file-upload"
    CLOUD_DRIVE_LINK = "cloud-drive-link"
    CHAT_GROUP_LINK = "chat-group-link"


@dataclass(frozen=True)
class ResourceKind:
    """Where a resource type is stored and how its urls are compared."""
    resource_type: ResourceType
    collection: str
    trim_urls: bool = True


RESOURCE_KINDS: Dict[ResourceType, ResourceKind] = {
    ResourceType.EDUCATION_SITE: ResourceKind(ResourceType.EDUCATION_SITE, "educationWebsites"),
    ResourceType.FILE_UPLOAD: ResourceKind(ResourceType.FILE_UPLOAD, "fileUploads"),
    ResourceType.CLOUD_DRIVE_LINK: ResourceKind(ResourceType.CLOUD_DRIVE_LINK, "oneDriveLinks"),
    ResourceType.CHAT_GROUP_LINK: ResourceKind(ResourceType.CHAT_GROUP_LINK, "whatsappGroups"),
}


class ResourceLinkListing:
    """
    Listing and duplicate detection for one resource collection.

    Usage:
        listing = listing_for(ResourceType.EDUCATION_SITE, gateway)
        sites = await listing.list()
        if await listing.is_duplicate(url): ...
    """

    def __init__(self, gateway: PersistenceGateway, kind: ResourceKind,
                 limit: int = DEFAULT_LIMIT):
        self.gateway = gateway
        self.kind = kind
        self.limit = limit

    @property
    def collection(self) -> str:
        return self.kind.collection

    def _decode(self, docs: List[dict]) -> List[ResourceLink]:
        links = []
        for doc in docs:
            try:
                links.append(ResourceLink.from_document(doc, self.kind.resource_type.value))
            except DocumentError as e:
                logger.warning(f"Skipping malformed {self.collection} record: {e}")
        return links

    async def list(self) -> List[ResourceLink]:
        """
        Newest records first, capped at the listing limit.

        If ordering fails (e.g. a missing index), retries once in store
        order. Returns [] if that fails too.
        """
        try:
            docs = await self.gateway.query_documents(
                self.collection, order_by="createdAt", limit=self.limit
            )
            return self._decode(docs)
        except Exception as e:
            logger.error(f"Error fetching {self.collection}: {e}")

        try:
            docs = await self.gateway.query_documents(self.collection, limit=self.limit)
        except Exception as e:
            logger.error(f"Error fetching {self.collection} (without ordering): {e}")
            return []

        logger.warning(f"Fetched {len(docs)} {self.collection} records without ordering")
        return self._decode(docs)

    def normalize_url(self, url: str) -> str:
        return url.strip() if self.kind.trim_urls else url

    async def is_duplicate(self, url: str) -> bool:
        """True iff a record with exactly this url exists. False on error."""
        try:
            docs = await self.gateway.query_documents(
                self.collection, {"url": self.normalize_url(url)}, limit=1
            )
        except Exception as e:
            logger.error(f"Error checking duplicate {self.collection} link: {e}")
            return False
        return bool(docs)


def listing_for(resource_type: ResourceType, gateway: PersistenceGateway,
                limit: int = DEFAULT_LIMIT) -> ResourceLinkListing:
    return ResourceLinkListing(gateway, RESOURCE_KINDS[ResourceType(resource_type)], limit)


def all_listings(gateway: PersistenceGateway,
                 settings: Optional[Settings] = None) -> Dict[ResourceType, ResourceLinkListing]:
    """One listing per resource type, using the configured listing limit."""
    limit = settings.listing_limit if settings else DEFAULT_LIMIT
    return {t: listing_for(t, gateway, limit) for t in ResourceType}


def education_labels(link: ResourceLink) -> List[str]:
    """
    Display chips for an education site.

    University sites show the university name and year; school sites
    show the grade. The teaching medium is shown unless it is "all".
    """
    details = link.details
    labels = []
    if details.get("level") == "university":
        if details.get("universityName"):
            labels.append(str(details["universityName"]))
        if details.get("year"):
            labels.append(f"Year {details['year']}")
    elif details.get("grade"):
        labels.append(f"Grade {details['grade']}")

    medium: Optional[str] = details.get("medium")
    if medium and medium != "all":
        labels.append(f"Medium: {medium}")
    return labels
