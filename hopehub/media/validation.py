"""
Static validation tables for proof uploads.

The media host accepts a fixed set of document and image types up to 10MB.
Each request type narrows that further: students prove need with photos,
schools and libraries with letters or reports.
"""

from typing import Iterable, Optional

from hopehub.core.domain_models import RequestType

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB

PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPT = "application/vnd.ms-powerpoint"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
JPEG = "image/jpeg"
JPG = "image/jpg"
PNG = "image/png"

ALLOWED_UPLOAD_TYPES = frozenset({PDF, DOC, DOCX, PPT, PPTX, JPEG, PNG, JPG})

PROOF_TYPES_BY_REQUEST_TYPE = {
    RequestType.STUDENT: frozenset({JPEG, PNG, JPG}),
    RequestType.SCHOOL: frozenset({PDF, DOCX}),
    RequestType.LIBRARY: frozenset({PDF, DOCX}),
}

PROOF_TYPE_MESSAGES = {
    RequestType.STUDENT: "Please upload only JPG, PNG, or JPEG images for student requests.",
    RequestType.SCHOOL: "Please upload only PDF or DOCX files for school/library requests.",
    RequestType.LIBRARY: "Please upload only PDF or DOCX files for school/library requests.",
}

SIZE_MESSAGE = "File size exceeds 10MB limit. Please upload a smaller file."
TYPE_MESSAGE = "Invalid file type. Allowed: PDF, DOC, DOCX, PPT, PPTX, JPG, PNG"


def validate_file(file, allowed_types: Optional[Iterable[str]] = None) -> Optional[str]:
    """
    Check a file against the upload limits.

    Args:
        file: UploadFile (anything with size and content_type)
        allowed_types: Optional narrower allow-list

    Returns:
        Error message, or None if the file is acceptable
    """
    if file is None:
        return "Please select a file"

    if file.size > MAX_UPLOAD_BYTES:
        return SIZE_MESSAGE

    allowed = ALLOWED_UPLOAD_TYPES if allowed_types is None else frozenset(allowed_types)
    if file.content_type not in allowed:
        return TYPE_MESSAGE

    return None


def validate_proof_file(file, request_type: RequestType) -> Optional[str]:
    """Validate a proof file for a given request type."""
    if file is not None and file.content_type not in PROOF_TYPES_BY_REQUEST_TYPE[request_type]:
        return PROOF_TYPE_MESSAGES[request_type]
    return validate_file(file)
