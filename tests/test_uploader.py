from unittest.mock import Mock

import pytest
import requests

from conftest import image, run
from hopehub.config import Settings
from hopehub.core.errors import UploadError
from hopehub.core.utils import format_file_size
from hopehub.media.uploader import CloudinaryUploader, UploadFile
from hopehub.media.validation import MAX_UPLOAD_BYTES, validate_file, validate_proof_file
from hopehub.core.domain_models import RequestType

CLOUDINARY_OK = {
    "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/hopenotes/files/proof.jpg",
    "public_id": "hopenotes/files/proof",
    "format": "jpg",
    "bytes": 204800,
    "width": 800,
    "height": 600,
    "resource_type": "image",
    "created_at": "2024-06-01T09:00:00Z",
}


def response(status_code=200, payload=None, text=""):
    resp = Mock(status_code=status_code, text=text)
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


def session_returning(resp):
    """Session whose post() drains the streamed body like a real transfer."""
    session = Mock()
    sent = {}

    def post(url, data=None, headers=None):
        sent["url"] = url
        sent["headers"] = headers
        sent["body"] = b"".join(iter(lambda: data.read(8192), b""))
        return resp

    session.post.side_effect = post
    session.sent = sent
    return session


def uploader_with(session, cloud_name="demo", preset="unsigned"):
    return CloudinaryUploader(cloud_name, preset, folder="hopenotes/files", session=session)


def test_successful_upload_reports_progress_and_metadata():
    session = session_returning(response(payload=CLOUDINARY_OK))
    progress = []

    result = run(uploader_with(session).upload(image(size=300 * 1024), progress.append))

    assert result.url == CLOUDINARY_OK["secure_url"]
    assert result.byte_size == 204800
    assert (result.width, result.height) == (800, 600)
    assert progress == sorted(progress)
    assert progress[-1] == 100
    assert len(progress) > 1

    assert session.sent["url"] == "https://api.cloudinary.com/v1_1/demo/upload"
    assert session.sent["headers"]["Content-Type"].startswith("multipart/form-data")
    body = session.sent["body"]
    assert b'name="upload_preset"' in body
    assert b"hopenotes/files" in body
    assert b'filename="proof.jpg"' in body


@pytest.mark.parametrize("cloud_name,preset", [(None, "unsigned"), ("demo", None), (None, None)])
def test_missing_credentials(cloud_name, preset):
    session = Mock()

    with pytest.raises(UploadError, match="credentials not configured"):
        run(uploader_with(session, cloud_name, preset).upload(image()))

    session.post.assert_not_called()


def test_oversized_file_is_rejected_locally():
    session = Mock()
    big = UploadFile("scan.pdf", "application/pdf", b"0" * (MAX_UPLOAD_BYTES + 1))

    with pytest.raises(UploadError, match="10MB"):
        run(uploader_with(session).upload(big))

    session.post.assert_not_called()


def test_disallowed_type_is_rejected_locally():
    session = Mock()

    with pytest.raises(UploadError, match="Invalid file type"):
        run(uploader_with(session).upload(UploadFile("run.exe", "application/x-msdownload", b"MZ")))

    session.post.assert_not_called()


def test_host_error_message_is_used():
    resp = response(400, payload={"error": {"message": "Upload preset not found"}})

    with pytest.raises(UploadError, match="Upload preset not found") as exc:
        run(uploader_with(session_returning(resp)).upload(image()))

    assert exc.value.file_name == "proof.jpg"


def test_host_error_without_json_body():
    resp = response(502, text="Bad Gateway")

    with pytest.raises(UploadError, match="Upload failed with status 502"):
        run(uploader_with(session_returning(resp)).upload(image()))


def test_malformed_success_body():
    with pytest.raises(UploadError, match="Failed to parse upload response"):
        run(uploader_with(session_returning(response(200, payload={"public_id": "x"}))).upload(image()))


def test_network_error():
    session = Mock()
    session.post.side_effect = requests.ConnectionError("connection reset")

    with pytest.raises(UploadError, match="Network error during upload"):
        run(uploader_with(session).upload(image()))


def test_from_settings():
    settings = Settings(cloudinary_cloud_name="demo", cloudinary_upload_preset="p",
                        cloudinary_folder="proofs")

    uploader = CloudinaryUploader.from_settings(settings)

    assert uploader.upload_url == "https://api.cloudinary.com/v1_1/demo/upload"
    assert uploader.folder == "proofs"


def test_validate_file():
    assert validate_file(None) == "Please select a file"
    assert validate_file(image()) is None
    assert validate_file(image(), allowed_types=["application/pdf"]).startswith("Invalid file type")


def test_validate_proof_file_by_request_type():
    docx = UploadFile(
        "report.docx",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        b"PK",
    )
    pptx = UploadFile(
        "slides.pptx",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        b"PK",
    )

    assert validate_proof_file(image(), RequestType.STUDENT) is None
    assert validate_proof_file(docx, RequestType.LIBRARY) is None
    assert validate_proof_file(docx, RequestType.STUDENT) is not None
    assert validate_proof_file(pptx, RequestType.SCHOOL) is not None


def test_from_path(tmp_path):
    path = tmp_path / "proof.png"
    path.write_bytes(b"\x89PNG")

    file = UploadFile.from_path(path)

    assert file.name == "proof.png"
    assert file.content_type == "image/png"
    assert file.size == 4


@pytest.mark.parametrize("num_bytes,expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (2621440, "2.5 MB"),
    (10 * 1024 ** 3, "10 GB"),
])
def test_format_file_size(num_bytes, expected):
    assert format_file_size(num_bytes) == expected
