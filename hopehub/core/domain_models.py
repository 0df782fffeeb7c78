"""
Canonical domain models for HopeHub.

These records are the decoded form of documents held in the remote store.
Document field names are camelCase (the wire format shared with the web app);
attributes are snake_case. Decoding validates that required fields are present
and raises DocumentError instead of letting missing values propagate.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from hopehub.core.errors import DocumentError
from hopehub.core.time_utils import coerce_timestamp
from hopehub.core.utils import clean


# Administrative districts a request can be filed under
DISTRICTS = (
    "Colombo",
    "Gampaha",
    "Kalutara",
    "Kandy",
    "Matale",
    "Nuwara Eliya",
    "Galle",
    "Matara",
    "Hambantota",
    "Jaffna",
    "Kilinochchi",
    "Mannar",
    "Vavuniya",
    "Mullaitivu",
    "Batticaloa",
    "Ampara",
    "Trincomalee",
    "Kurunegala",
    "Puttalam",
    "Anuradhapura",
    "Polonnaruwa",
    "Badulla",
    "Monaragala",
    "Ratnapura",
    "Kegalle",
)

ALL_DISTRICTS = "all"


class RequestType(str, Enum):
    """Who is asking for aid."""
    STUDENT = "student"
    SCHOOL = "school"
    LIBRARY = "library"


class RequestStatus(str, Enum):
    OPEN = "open"
    FULFILLED = "fulfilled"


class DonationStatus(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"


def _require(doc: Mapping[str, Any], key: str, kind: str) -> Any:
    value = doc.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise DocumentError(f"{kind} document {doc.get('id')!r} is missing '{key}'")
    return value


def _parse_enum(enum_cls, value: Any, kind: str, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise DocumentError(f"{kind} document has unknown {key}: {value!r}") from None


def _string_list(doc: Mapping[str, Any], key: str, kind: str) -> List[str]:
    value = doc.get(key) or []
    if not isinstance(value, (list, tuple)):
        raise DocumentError(f"{kind} document {doc.get('id')!r} has non-list '{key}'")
    return [str(v) for v in value]


@dataclass
class Request:
    """
    Aid request submitted by a student, school, or library.

    donation_count is derived from the donations collection and never stored.
    """
    # Required fields
    id: str
    request_type: RequestType
    name: str
    contact_number: str
    district: str
    city_town: str
    description: str = ""

    items: List[str] = field(default_factory=list)
    proof_files: List[str] = field(default_factory=list)
    map_link: Optional[str] = None
    status: RequestStatus = RequestStatus.OPEN
    created_at: Optional[datetime] = None

    # Derived
    donation_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.status != RequestStatus.FULFILLED

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Request":
        """
        Decode a stored request document.

        Args:
            doc: Document as returned by the persistence gateway (with "id")

        Returns:
            Request

        Raises:
            DocumentError: if a required field is missing or malformed
        """
        kind = "Request"
        return cls(
            id=str(_require(doc, "id", kind)),
            request_type=_parse_enum(RequestType, _require(doc, "requestType", kind), kind, "requestType"),
            name=str(_require(doc, "name", kind)),
            contact_number=str(_require(doc, "contactNumber", kind)),
            district=str(_require(doc, "district", kind)),
            city_town=str(_require(doc, "cityTown", kind)),
            description=clean(doc.get("description")),
            items=_string_list(doc, "items", kind),
            proof_files=_string_list(doc, "proofFiles", kind),
            map_link=doc.get("mapLink") or None,
            status=_parse_enum(RequestStatus, doc.get("status") or "open", kind, "status"),
            created_at=coerce_timestamp(doc.get("createdAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        """Stored fields (no id, no derived donation_count)."""
        return {
            "requestType": self.request_type.value,
            "name": self.name,
            "contactNumber": self.contact_number,
            "district": self.district,
            "cityTown": self.city_town,
            "mapLink": self.map_link,
            "items": list(self.items),
            "description": self.description,
            "proofFiles": list(self.proof_files),
            "status": self.status.value,
            "createdAt": self.created_at,
        }


@dataclass
class Donation:
    """
    A donor's pledge against a Request.

    request_name and request_type are copies taken at pledge time.
    """
    id: str
    request_id: str
    donor_name: str
    donor_contact: str
    donation_items: str

    request_name: Optional[str] = None
    request_type: Optional[RequestType] = None
    donor_location: Optional[str] = None
    message: Optional[str] = None
    status: DonationStatus = DonationStatus.PENDING
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Donation":
        kind = "Donation"
        request_type = doc.get("requestType")
        return cls(
            id=str(_require(doc, "id", kind)),
            request_id=str(_require(doc, "requestId", kind)),
            donor_name=str(_require(doc, "donorName", kind)),
            donor_contact=str(_require(doc, "donorContact", kind)),
            donation_items=str(_require(doc, "donationItems", kind)),
            request_name=doc.get("requestName"),
            request_type=_parse_enum(RequestType, request_type, kind, "requestType") if request_type else None,
            donor_location=doc.get("donorLocation") or None,
            message=doc.get("message") or None,
            status=_parse_enum(DonationStatus, doc.get("status") or "pending", kind, "status"),
            created_at=coerce_timestamp(doc.get("createdAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "requestId": self.request_id,
            "requestName": self.request_name,
            "requestType": self.request_type.value if self.request_type else None,
            "donorName": self.donor_name,
            "donorContact": self.donor_contact,
            "donorLocation": self.donor_location,
            "donationItems": self.donation_items,
            "message": self.message,
            "status": self.status.value,
            "createdAt": self.created_at,
        }


@dataclass
class Campaign:
    """Fundraising campaign shown alongside the request directory (read-only)."""
    id: str
    title: str
    organizer: str = ""
    contact: str = ""
    district: str = ""
    city: str = ""
    goal: str = ""
    link: Optional[str] = None
    description: str = ""
    poster_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Campaign":
        kind = "Campaign"
        return cls(
            id=str(_require(doc, "id", kind)),
            title=str(_require(doc, "title", kind)),
            organizer=clean(doc.get("organizer")),
            contact=clean(doc.get("contact")),
            district=clean(doc.get("district")),
            city=clean(doc.get("city")),
            goal=clean(doc.get("goal")),
            link=doc.get("link") or None,
            description=clean(doc.get("description")),
            poster_url=doc.get("posterUrl") or None,
            created_at=coerce_timestamp(doc.get("createdAt")),
        )


@dataclass
class ResourceLink:
    """
    Shared learning resource: education site, uploaded file, cloud-drive
    link, or chat-group link.

    details keeps the kind-specific descriptive fields (subject, level,
    grade, year, ...) exactly as stored.
    """
    id: str
    kind: str
    url: str
    created_at: Optional[datetime] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], kind: str) -> "ResourceLink":
        record_kind = f"ResourceLink[{kind}]"
        details = {
            k: v for k, v in doc.items()
            if k not in ("id", "_id", "url", "createdAt")
        }
        return cls(
            id=str(_require(doc, "id", record_kind)),
            kind=kind,
            url=str(_require(doc, "url", record_kind)),
            created_at=coerce_timestamp(doc.get("createdAt")),
            details=details,
        )
