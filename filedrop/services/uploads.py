"""Upload policy: body size guard, filename sanitizing and persistence."""

import asyncio
import re
import time
from collections.abc import AsyncIterable, Callable
from pathlib import Path, PurePosixPath

from filedrop.core.errors import PolicyViolation, SizeLimitError, UnexpectedIOError
from filedrop.core.logger import LogIcon, logger
from filedrop.models.core import ServerConfig, StoredFile


class ByteCountGuard:
    """Counts body bytes as they arrive and trips once the limit is crossed."""

    __slots__ = ("limit", "seen")

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.seen = 0

    def feed(self, chunk: bytes) -> None:
        self.seen += len(chunk)
        if self.seen > self.limit:
            raise SizeLimitError(limit=self.limit, seen=self.seen)

    def check_declared(self, content_length: str | None) -> None:
        """Reject up front when Content-Length already exceeds the limit."""
        if content_length and content_length.strip().isdigit() and int(content_length) > self.limit:
            raise SizeLimitError(limit=self.limit, seen=int(content_length))


async def read_body(chunks: AsyncIterable[bytes], guard: ByteCountGuard) -> bytes:
    """Buffer a streamed body, checking the guard after every chunk."""
    buffer = bytearray()
    async for chunk in chunks:
        guard.feed(chunk)
        buffer += chunk
    return bytes(buffer)


def sanitize_filename(raw_filename: str) -> str:
    """Keep only the final path component of a client-supplied filename."""
    return re.split(r"[\\/]", raw_filename)[-1]


def millis() -> int:
    return time.time_ns() // 1_000_000


class UploadValidator:
    """Applies extension policy and names accepted uploads.

    Stored names are ``{epoch millis}-{basename}``. Two uploads of the same
    name inside one millisecond map to the same file.
    """

    def __init__(self, config: ServerConfig, clock: Callable[[], int] = millis) -> None:
        self.config = config
        self.clock = clock

    def validate(self, raw_filename: str, body: bytes) -> StoredFile:
        safe_name = sanitize_filename(raw_filename)
        extension = PurePosixPath(safe_name).suffix.lower()

        if "\x00" in safe_name or extension not in self.config.allowed_extensions:
            logger.warning("Upload rejected", icon=LogIcon.FORBIDDEN, filename=safe_name, extension=extension)
            raise PolicyViolation()

        stored_name = f"{self.clock()}-{safe_name}"
        return StoredFile(name=stored_name, path=self.config.upload_root / stored_name, size=len(body))


def _write_bytes(path: Path, data: bytes) -> None:
    with path.open("wb") as file_handle:
        file_handle.write(data)


async def store_upload(stored: StoredFile, body: bytes) -> StoredFile:
    """Write the part body verbatim into the upload directory."""
    try:
        await asyncio.to_thread(_write_bytes, stored.path, body)
    except OSError as ex:
        logger.error("Upload write failed", icon=LogIcon.ERROR, path=str(stored.path), error=str(ex))
        raise UnexpectedIOError(ex) from ex

    logger.info("Upload stored", icon=LogIcon.UPLOAD, name=stored.name, size=stored.size)
    return stored
