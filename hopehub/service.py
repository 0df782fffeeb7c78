"""
HopeHub service: one object wiring the gateways to the workflows.

Usage:
    hub = HopeHub.from_settings(Settings.from_env())
    state = await hub.load_directory()
    result = await hub.submit_request(form, files)
    await hub.close()
"""

import logging
from typing import Dict, List, Optional, Sequence

from hopehub.config import Settings
from hopehub.core.domain_models import Donation, Request
from hopehub.directory.loader import DirectoryState, load_directory
from hopehub.listings.resource_links import ResourceLinkListing, ResourceType, all_listings
from hopehub.media.uploader import CloudinaryUploader, MediaUploader, UploadFile
from hopehub.storage.gateway import PersistenceGateway
from hopehub.storage.mongo_gateway import MongoGateway
from hopehub.workflows.pledges import DonationForm, list_donations, load_donations_for, submit_donation
from hopehub.workflows.result import WorkflowResult
from hopehub.workflows.submission import FileProgressCallback, RequestForm, StatusCallback, submit_request

logger = logging.getLogger(__name__)


class HopeHub:
    """Stateless facade; callers own their loaded lists and form state."""

    def __init__(self, gateway: PersistenceGateway, uploader: MediaUploader,
                 settings: Optional[Settings] = None):
        self.gateway = gateway
        self.uploader = uploader
        self.settings = settings or Settings()
        self.listings: Dict[ResourceType, ResourceLinkListing] = all_listings(gateway, self.settings)

    @classmethod
    def from_settings(cls, settings: Settings) -> "HopeHub":
        return cls(
            gateway=MongoGateway.from_settings(settings),
            uploader=CloudinaryUploader.from_settings(settings),
            settings=settings,
        )

    async def close(self) -> None:
        close = getattr(self.gateway, "close", None)
        if close:
            await close()

    async def load_directory(self) -> DirectoryState:
        return await load_directory(self.gateway)

    async def submit_request(
        self,
        form: RequestForm,
        files: Sequence[UploadFile],
        on_progress: Optional[FileProgressCallback] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> WorkflowResult[Request]:
        return await submit_request(form, files, self.gateway, self.uploader, on_progress, on_status)

    async def submit_donation(self, request: Request, form: DonationForm) -> WorkflowResult[Donation]:
        return await submit_donation(request, form, self.gateway)

    async def donations_for(self, request: Request) -> List[Donation]:
        return await list_donations(self.gateway, request.id)

    async def donations_for_many(self, requests: Sequence[Request]) -> Dict[str, List[Donation]]:
        return await load_donations_for(self.gateway, requests)

    def listing(self, resource_type: ResourceType) -> ResourceLinkListing:
        return self.listings[ResourceType(resource_type)]
