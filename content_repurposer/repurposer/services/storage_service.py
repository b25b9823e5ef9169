"""
Object storage for project attachments.
- validate_upload: MIME allow-list + size limit (MAX_UPLOAD_MB).
- LocalObjectStorage: bucket directory under STORAGE_DIR; object key <userId>/<projectId>/<timestamp_ms>.<ext>.
"""
import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import UUID

from repurposer.config import Settings, get_settings
from repurposer.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_MIME_TYPES = {
    "text/plain",
    "text/markdown",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/mov",
    "video/avi",
}

FILE_TYPE_IMAGE = "image"
FILE_TYPE_VIDEO = "video"
FILE_TYPE_AUDIO = "audio"
FILE_TYPE_DOCUMENT = "document"


def file_type_from_mime(mime_type: str) -> str:
    """image/* -> image, video/* -> video, audio/* -> audio, everything else -> document."""
    mime_type = (mime_type or "").lower()
    if mime_type.startswith("image/"):
        return FILE_TYPE_IMAGE
    if mime_type.startswith("video/"):
        return FILE_TYPE_VIDEO
    if mime_type.startswith("audio/"):
        return FILE_TYPE_AUDIO
    return FILE_TYPE_DOCUMENT


def file_extension(file_name: str) -> str:
    """Text after the last dot; the whole name when there is no dot."""
    return file_name.rsplit(".", 1)[-1]


def validate_upload(mime_type: str, size_bytes: int, settings: Optional[Settings] = None) -> None:
    """Raise ValueError("unsupported_file_type") or ValueError("file_too_large")."""
    settings = settings or get_settings()
    if (mime_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise ValueError("unsupported_file_type")
    if size_bytes > settings.max_upload_mb * 1024 * 1024:
        raise ValueError("file_too_large")


class LocalObjectStorage:
    """Bucket-on-disk object store."""

    def __init__(self, root_dir: str, bucket: str) -> None:
        self.root = Path(root_dir) / bucket
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LocalObjectStorage":
        settings = settings or get_settings()
        return cls(settings.storage_dir, settings.storage_bucket)

    def object_key(self, user_id: UUID, project_id: UUID, file_name: str) -> str:
        timestamp_ms = int(time.time() * 1000)
        return f"{user_id}/{project_id}/{timestamp_ms}.{file_extension(file_name)}"

    def path_for(self, key: str) -> Path:
        return self.root / key

    def _write(self, key: str, data: bytes) -> None:
        dest = self.path_for(key)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)

    async def upload(self, user_id: UUID, project_id: UUID, file_name: str, data: bytes) -> str:
        """Store data and return its object key. Keys never overwrite: a clash bumps the timestamp."""
        key = self.object_key(user_id, project_id, file_name)
        while self.path_for(key).exists():
            await asyncio.sleep(0.001)
            key = self.object_key(user_id, project_id, file_name)
        await asyncio.to_thread(self._write, key, data)
        logger.info("storage.uploaded", key=key, bucket=self.bucket, size_bytes=len(data))
        return key


@dataclass(frozen=True)
class IncomingFile:
    """An upload already read into memory by the HTTP layer."""

    file_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def file_type(self) -> str:
        return file_type_from_mime(self.mime_type)
