"""
Error taxonomy for HopeHub workflows and gateways.

ValidationError  - local, raised before any network call
UploadError      - media upload failed (earlier uploads are not rolled back)
PersistError     - document store write failed
QueryError       - document store read failed
DocumentError    - a stored document is missing required fields
"""

from typing import Optional


class HopeHubError(Exception):
    """Base class for all HopeHub errors."""


class ValidationError(HopeHubError):
    """User input failed a precondition. No side effects have happened."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UploadError(HopeHubError):
    """A proof file could not be uploaded to the media host."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.file_name = file_name


class PersistError(HopeHubError):
    """Writing a document to the store failed."""


class QueryError(HopeHubError):
    """Reading documents from the store failed."""


class DocumentError(QueryError):
    """A stored document could not be decoded into a domain record."""
