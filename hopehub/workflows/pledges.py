"""
Donation Pledge Workflow.

Records a donor's pledge against a request and aggregates pledges per request.

Pledge write failures are logged with full detail but reported to the donor
only as a generic retry message. Pledge reads fail open: a request whose
pledges cannot be loaded shows none.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Sequence

from hopehub.core.domain_models import Donation, DonationStatus, Request
from hopehub.core.errors import DocumentError, PersistError, ValidationError
from hopehub.core.time_utils import newest_first_key
from hopehub.core.utils import clean, clean_or_none, is_blank
from hopehub.storage.gateway import DONATIONS_COLLECTION, SERVER_TIMESTAMP, PersistenceGateway
from .result import GENERIC_FAILURE_MESSAGE, WorkflowResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you! Your donation offer has been submitted. The requester will contact you soon."
MISSING_FIELDS_MESSAGE = "Please fill in your name, contact, and what you want to donate."
UNKNOWN_REQUEST_MESSAGE = "This request could not be found. Please reload and try again."
CONFIRMATION_SECONDS = 3.0


@dataclass
class DonationForm:
    """Raw form input for a pledge."""
    donor_name: str = ""
    donor_contact: str = ""
    donation_items: str = ""
    donor_location: str = ""
    message: str = ""


def validate_donation_form(form: DonationForm) -> None:
    """Raise ValidationError unless name, contact and items are filled in."""
    for name in ("donor_name", "donor_contact", "donation_items"):
        if is_blank(getattr(form, name)):
            raise ValidationError(MISSING_FIELDS_MESSAGE, field=name)


async def submit_donation(
    request: Request,
    form: DonationForm,
    gateway: PersistenceGateway,
) -> WorkflowResult[Donation]:
    """
    Pledge items against a request.

    Args:
        request: The request being donated to (as loaded from the store)
        form: Donor's form input
        gateway: Document store

    Returns:
        WorkflowResult carrying the stored Donation on success. The caller
        should put it at the front of its pledge list for this request.
    """
    try:
        if is_blank(request.id):
            raise ValidationError(UNKNOWN_REQUEST_MESSAGE, field="request_id")
        validate_donation_form(form)
    except ValidationError as e:
        return WorkflowResult.failure(e)

    donation = Donation(
        id="",
        request_id=request.id,
        request_name=clean(request.name),
        request_type=request.request_type,
        donor_name=clean(form.donor_name),
        donor_contact=clean(form.donor_contact),
        donor_location=clean_or_none(form.donor_location),
        donation_items=clean(form.donation_items),
        message=clean_or_none(form.message),
        status=DonationStatus.PENDING,
    )
    payload = donation.to_document()
    payload["createdAt"] = SERVER_TIMESTAMP

    try:
        doc_id = await gateway.insert_document(DONATIONS_COLLECTION, payload)
    except Exception as e:
        logger.error(f"Error submitting donation for request {request.id}: {e}")
        error = e if isinstance(e, PersistError) else PersistError(str(e))
        return WorkflowResult.failure(error, GENERIC_FAILURE_MESSAGE)

    logger.info(f"Donation {doc_id} pledged to request {request.id}")
    return WorkflowResult.success(
        replace(donation, id=doc_id),
        SUCCESS_MESSAGE,
        dismiss_after=CONFIRMATION_SECONDS,
    )


def sort_donations(donations: Iterable[Donation]) -> List[Donation]:
    """
    Newest first. Pledges without a timestamp go last; ties keep store order.
    """
    return sorted(donations, key=lambda d: newest_first_key(d.created_at), reverse=True)


def decode_donations(docs: Iterable[dict]) -> List[Donation]:
    """Decode donation documents, skipping malformed ones."""
    donations = []
    for doc in docs:
        try:
            donations.append(Donation.from_document(doc))
        except DocumentError as e:
            logger.warning(f"Skipping malformed donation: {e}")
    return donations


async def list_donations(gateway: PersistenceGateway, request_id: str) -> List[Donation]:
    """
    All pledges for one request, newest first.

    The store is queried without ordering and sorted here, so no composite
    index is needed. Returns [] if the query fails.
    """
    try:
        docs = await gateway.query_documents(DONATIONS_COLLECTION, {"requestId": request_id})
    except Exception as e:
        logger.error(f"Error loading donations for request {request_id}: {e}")
        return []

    return sort_donations(decode_donations(docs))


async def count_donations(gateway: PersistenceGateway, request_id: str) -> int:
    """Number of pledges for a request (0 if the query fails)."""
    try:
        docs = await gateway.query_documents(DONATIONS_COLLECTION, {"requestId": request_id})
    except Exception as e:
        logger.error(f"Error counting donations for request {request_id}: {e}")
        return 0
    return len(docs)


async def load_donations_for(
    gateway: PersistenceGateway,
    requests: Sequence[Request],
) -> Dict[str, List[Donation]]:
    """
    Load pledges for several requests concurrently.

    Each load fails independently: a request whose query fails maps to [],
    the rest of the batch still resolves.

    Returns:
        request id -> donations (newest first)
    """
    results = await asyncio.gather(*(list_donations(gateway, r.id) for r in requests))
    return {r.id: donations for r, donations in zip(requests, results)}
