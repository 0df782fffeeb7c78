"""
Media Upload Gateway.

Uploads proof files to Cloudinary with per-file progress reporting.

The HTTP transfer itself is a blocking requests call. It runs off the event
loop, and progress notifications are handed back to the loop thread so the
caller's callback only ever runs on the loop.
"""

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests
from urllib3.filepost import encode_multipart_formdata

from hopehub.config import Settings
from hopehub.core.errors import UploadError
from hopehub.core.utils import format_file_size
from .validation import validate_file

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/upload"

# percent (0-100) -> None
ProgressCallback = Callable[[int], None]


@dataclass
class UploadFile:
    """A file selected for upload, held in memory."""
    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path, content_type: Optional[str] = None) -> "UploadFile":
        """Load a file from disk, guessing its MIME type from the extension."""
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, content_type=content_type, data=path.read_bytes())


@dataclass
class UploadResult:
    """Where an uploaded file ended up, plus what the host reported about it."""
    url: str
    public_id: Optional[str] = None
    format: Optional[str] = None
    byte_size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    resource_type: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "UploadResult":
        return cls(
            url=payload["secure_url"],
            public_id=payload.get("public_id"),
            format=payload.get("format"),
            byte_size=payload.get("bytes"),
            width=payload.get("width"),
            height=payload.get("height"),
            resource_type=payload.get("resource_type"),
            created_at=payload.get("created_at"),
        )


class MediaUploader:
    """Base class for media upload gateways."""

    async def upload(self, file: UploadFile,
                     on_progress: Optional[ProgressCallback] = None) -> UploadResult:
        """
        Upload one file.

        Args:
            file: File to upload
            on_progress: Called with integer percentages (0-100) as bytes are sent

        Returns:
            UploadResult with the public URL

        Raises:
            UploadError: on bad credentials, invalid file, network or host failure
        """
        raise NotImplementedError


class _ProgressReader:
    """
    File-like request body that reports how much of itself has been read.

    requests streams any object with read() and __len__ with a fixed
    Content-Length, so every read() maps to bytes handed to the socket.
    """

    def __init__(self, body: bytes, report: Callable[[int], None], chunk_size: int = 64 * 1024):
        self.body = body
        self.report = report
        self.chunk_size = chunk_size
        self.sent = 0
        self.last_percent = -1

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self):
        while True:
            chunk = self.read(self.chunk_size)
            if not chunk:
                break
            yield chunk

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = len(self.body) - self.sent
        chunk = self.body[self.sent:self.sent + size]
        self.sent += len(chunk)

        total = len(self.body)
        percent = round(self.sent / total * 100) if total else 100
        if percent != self.last_percent:
            self.last_percent = percent
            self.report(percent)
        return chunk


class CloudinaryUploader(MediaUploader):
    """
    Unsigned uploads to Cloudinary.

    Usage:
        uploader = CloudinaryUploader.from_settings(Settings.from_env())
        result = await uploader.upload(UploadFile.from_path("proof.jpg"), print)
        print(result.url)
    """

    def __init__(
        self,
        cloud_name: Optional[str],
        upload_preset: Optional[str],
        folder: str = "hopenotes/files",
        session: Optional[requests.Session] = None,
    ):
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset
        self.folder = folder
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryUploader":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            upload_preset=settings.cloudinary_upload_preset,
            folder=settings.cloudinary_folder,
        )

    @property
    def upload_url(self) -> str:
        return CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)

    def _check_credentials(self) -> None:
        if self.cloud_name and self.upload_preset:
            return
        cloud = "Set" if self.cloud_name else "Missing"
        preset = "Set" if self.upload_preset else "Missing"
        message = (
            f"Cloudinary credentials not configured (Cloud Name: {cloud}, "
            f"Upload Preset: {preset}). Please set CLOUDINARY_CLOUD_NAME and "
            f"CLOUDINARY_UPLOAD_PRESET in your .env file."
        )
        logger.error(message)
        raise UploadError(message)

    async def upload(self, file: UploadFile,
                     on_progress: Optional[ProgressCallback] = None) -> UploadResult:
        self._check_credentials()

        if file is None:
            raise UploadError("No file provided")

        problem = validate_file(file)
        if problem:
            raise UploadError(problem, file_name=file.name)

        loop = asyncio.get_running_loop()

        def report(percent: int) -> None:
            if on_progress:
                loop.call_soon_threadsafe(on_progress, percent)

        result = await asyncio.to_thread(self._post, file, report)
        logger.info(f"Uploaded {file.name} ({format_file_size(file.size)}) -> {result.url}")
        return result

    def _post(self, file: UploadFile, report: Callable[[int], None]) -> UploadResult:
        """Blocking multipart POST to the upload endpoint."""
        body, content_type = encode_multipart_formdata({
            "file": (file.name, file.data, file.content_type),
            "upload_preset": self.upload_preset,
            "folder": self.folder,
            "resource_type": "auto",
        })

        try:
            response = self.session.post(
                self.upload_url,
                data=_ProgressReader(body, report),
                headers={"Content-Type": content_type},
            )
        except requests.RequestException as e:
            logger.error(f"Network error uploading {file.name}: {e}")
            raise UploadError("Network error during upload", file_name=file.name) from e

        if response.status_code == 200:
            try:
                return UploadResult.from_response(response.json())
            except (ValueError, KeyError, TypeError) as e:
                logger.error(f"Error parsing upload response for {file.name}: {e}")
                raise UploadError("Failed to parse upload response", file_name=file.name) from e

        raise UploadError(self._error_message(response), file_name=file.name)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return f"Upload failed with status {response.status_code}: {response.text}"
        logger.error(f"Upload error response: {message}")
        return message or f"Upload failed with status {response.status_code}"
