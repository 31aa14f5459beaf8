"""Core models shared by the request pipeline."""

from collections.abc import AsyncIterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Self


class ContentType(StrEnum):
    """Content types emitted by the server itself."""

    HTML = "text/html"
    TEXT = "text/plain"
    BINARY = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Immutable configuration handed to the request router."""

    public_root: Path
    upload_root: Path
    index_document: str = "index.html"
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_extensions: frozenset[str] = frozenset({".png", ".jpg", ".jpeg", ".gif", ".pdf", ".txt"})
    upload_field: str = "file"

    @classmethod
    def from_settings(cls, settings) -> Self:
        return cls(
            public_root=Path(settings.PUBLIC_DIR).absolute(),
            upload_root=Path(settings.upload_path).absolute(),
            index_document=settings.INDEX_DOCUMENT,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
            allowed_extensions=frozenset(ext.lower() for ext in settings.ALLOWED_EXTENSIONS),
            upload_field=settings.UPLOAD_FIELD,
        )


@dataclass(slots=True)
class RequestView:
    """Transport-neutral view of an inbound request."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: AsyncIterable[bytes]


@dataclass(frozen=True, slots=True)
class MultipartPart:
    """One segment of a multipart body."""

    headers: str
    body: bytes


@dataclass(frozen=True, slots=True)
class Disposition:
    """Field name and optional filename from a Content-Disposition header."""

    name: str
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class StoredFile:
    """An accepted upload and where it lives on disk."""

    name: str
    path: Path
    size: int


@dataclass(slots=True)
class HttpResult:
    """Status, content type and body produced for one exchange."""

    status_code: int
    content_type: str
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    close_connection: bool = False

    @classmethod
    def text(cls, status_code: int, message: str, content_type: str = ContentType.TEXT) -> Self:
        return cls(status_code=status_code, content_type=content_type, body=message.encode("utf-8"))
