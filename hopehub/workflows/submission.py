"""
Request Submission Workflow.

Validates a new aid request, uploads its proof files one at a time, then
persists the request document.

Preconditions are checked in order and the first failure wins:
1. required text fields present (and district / request type recognised)
2. at least one item needed
3. at least one proof file
4. every proof file acceptable for the request type

Nothing touches the network until all of them pass. If an upload fails the
submission stops there; files uploaded before it stay on the media host.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

from hopehub.core.domain_models import DISTRICTS, Request, RequestStatus, RequestType
from hopehub.core.errors import PersistError, UploadError, ValidationError
from hopehub.core.utils import clean, clean_items, clean_or_none, is_blank
from hopehub.media.uploader import MediaUploader, UploadFile
from hopehub.media.validation import validate_proof_file
from hopehub.storage.gateway import REQUESTS_COLLECTION, SERVER_TIMESTAMP, PersistenceGateway
from .result import GENERIC_FAILURE_MESSAGE, WorkflowResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Your request has been submitted successfully! Thank you for reaching out."
MISSING_FIELDS_MESSAGE = "Please fill in all required fields."
UNKNOWN_DISTRICT_MESSAGE = "Please choose a district from the list."
UNKNOWN_TYPE_MESSAGE = "Please choose whether this is a student, school, or library request."
NO_ITEMS_MESSAGE = "Please add at least one item needed."
NO_PROOF_MESSAGE = "Proof of disaster is required."

# (file index, percent) -> None
FileProgressCallback = Callable[[int, int], None]
StatusCallback = Callable[[str], None]


@dataclass
class RequestForm:
    """Raw form input for a new aid request."""
    name: str = ""
    contact: str = ""
    district: str = ""
    city: str = ""
    description: str = ""
    map_link: str = ""
    request_type: str = RequestType.STUDENT.value
    items: List[str] = field(default_factory=list)


def validate_request_form(form: RequestForm,
                          files: Sequence[UploadFile]) -> Tuple[RequestType, List[str]]:
    """
    Check a submission before anything is uploaded.

    Args:
        form: Form input
        files: Selected proof files

    Returns:
        (request type, cleaned items)

    Raises:
        ValidationError: first failed precondition, with a user-facing message
    """
    required = [
        ("name", form.name),
        ("contact", form.contact),
        ("district", form.district),
        ("city", form.city),
        ("description", form.description),
    ]
    for name, value in required:
        if is_blank(value):
            raise ValidationError(MISSING_FIELDS_MESSAGE, field=name)

    if clean(form.district) not in DISTRICTS:
        raise ValidationError(UNKNOWN_DISTRICT_MESSAGE, field="district")

    try:
        request_type = RequestType(clean(form.request_type).lower())
    except ValueError:
        raise ValidationError(UNKNOWN_TYPE_MESSAGE, field="request_type") from None

    items = clean_items(form.items)
    if not items:
        raise ValidationError(NO_ITEMS_MESSAGE, field="items")

    if not files:
        raise ValidationError(NO_PROOF_MESSAGE, field="proof_files")

    for file in files:
        problem = validate_proof_file(file, request_type)
        if problem:
            raise ValidationError(problem, field="proof_files")

    return request_type, items


async def upload_proofs(
    files: Sequence[UploadFile],
    uploader: MediaUploader,
    on_progress: Optional[FileProgressCallback] = None,
    on_status: Optional[StatusCallback] = None,
) -> List[str]:
    """
    Upload proof files strictly in order.

    Upload N+1 starts only after upload N has finished.

    Returns:
        URLs in the same order as files

    Raises:
        UploadError: naming the first file that failed
    """
    urls = []
    for i, file in enumerate(files):
        if on_status:
            on_status(f"Uploading file {i + 1} of {len(files)}...")

        def report(percent: int, index: int = i) -> None:
            if on_progress:
                on_progress(index, percent)

        try:
            result = await uploader.upload(file, on_progress=report)
        except Exception as e:
            logger.error(f"Error uploading file {i + 1} ({file.name}): {e}")
            raise UploadError(f'Failed to upload file "{file.name}": {e}', file_name=file.name) from e

        urls.append(result.url)
        report(100)

    return urls


async def submit_request(
    form: RequestForm,
    files: Sequence[UploadFile],
    gateway: PersistenceGateway,
    uploader: MediaUploader,
    on_progress: Optional[FileProgressCallback] = None,
    on_status: Optional[StatusCallback] = None,
) -> WorkflowResult[Request]:
    """
    Submit a new aid request.

    Args:
        form: Form input
        files: Proof files, uploaded in order
        gateway: Document store
        uploader: Media host
        on_progress: Per-file progress, called as (index, percent)
        on_status: Human-readable status line updates

    Returns:
        WorkflowResult carrying the stored Request (with its new id) on success
    """
    try:
        request_type, items = validate_request_form(form, files)
    except ValidationError as e:
        logger.debug(f"Request submission rejected: {e} ({e.field})")
        return WorkflowResult.failure(e)

    try:
        proof_urls = await upload_proofs(files, uploader, on_progress, on_status)
    except UploadError as e:
        return WorkflowResult.failure(e)

    if on_status:
        on_status("Saving request...")

    request = Request(
        id="",
        request_type=request_type,
        name=clean(form.name),
        contact_number=clean(form.contact),
        district=clean(form.district),
        city_town=clean(form.city),
        description=clean(form.description),
        map_link=clean_or_none(form.map_link),
        items=items,
        proof_files=proof_urls,
        status=RequestStatus.OPEN,
    )
    payload = request.to_document()
    payload["createdAt"] = SERVER_TIMESTAMP

    try:
        doc_id = await gateway.insert_document(REQUESTS_COLLECTION, payload)
    except Exception as e:
        logger.error(f"Error submitting request for {request.name}: {e}")
        error = e if isinstance(e, PersistError) else PersistError(str(e))
        return WorkflowResult.failure(error, str(e) or GENERIC_FAILURE_MESSAGE)

    logger.info(f"Request {doc_id} submitted with {len(proof_urls)} proof file(s)")
    return WorkflowResult.success(replace(request, id=doc_id), SUCCESS_MESSAGE)
