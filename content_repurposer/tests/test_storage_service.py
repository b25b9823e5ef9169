"""Object storage: MIME allow-list, size limit, key layout."""
import uuid

import pytest

from repurposer.config import Settings
from repurposer.services.storage_service import (
    IncomingFile,
    file_extension,
    file_type_from_mime,
    validate_upload,
)


def test_file_type_from_mime() -> None:
    assert file_type_from_mime("image/png") == "image"
    assert file_type_from_mime("video/mp4") == "video"
    assert file_type_from_mime("audio/mpeg") == "audio"
    assert file_type_from_mime("application/pdf") == "document"
    assert file_type_from_mime("text/plain") == "document"


def test_file_extension() -> None:
    assert file_extension("report.final.pdf") == "pdf"
    assert file_extension("README") == "README"


def test_validate_upload_rejects_unsupported_type() -> None:
    with pytest.raises(ValueError, match="unsupported_file_type"):
        validate_upload("application/x-msdownload", 10, Settings())


def test_validate_upload_rejects_large_file() -> None:
    settings = Settings(MAX_UPLOAD_MB=1)
    validate_upload("image/png", 1024 * 1024, settings)
    with pytest.raises(ValueError, match="file_too_large"):
        validate_upload("image/png", 1024 * 1024 + 1, settings)


@pytest.mark.asyncio
async def test_upload_writes_object_under_user_and_project(storage) -> None:
    user_id, project_id = uuid.uuid4(), uuid.uuid4()
    key = await storage.upload(user_id, project_id, "chart.png", b"\x89PNG")
    assert key.startswith(f"{user_id}/{project_id}/")
    assert key.endswith(".png")
    assert storage.path_for(key).read_bytes() == b"\x89PNG"


@pytest.mark.asyncio
async def test_upload_never_overwrites(storage) -> None:
    user_id, project_id = uuid.uuid4(), uuid.uuid4()
    first = await storage.upload(user_id, project_id, "a.txt", b"one")
    second = await storage.upload(user_id, project_id, "b.txt", b"two")
    assert first != second
    assert storage.path_for(first).read_bytes() == b"one"
    assert storage.path_for(second).read_bytes() == b"two"


def test_incoming_file_properties() -> None:
    f = IncomingFile(file_name="a.png", mime_type="image/png", data=b"1234")
    assert f.size == 4
    assert f.file_type == "image"
