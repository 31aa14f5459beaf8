"""Request routing for static files and uploads."""

from collections.abc import AsyncIterable, Mapping
from http import HTTPStatus
from pathlib import Path
from urllib.parse import quote

from filedrop.core.errors import ClientInputError, FileServerError, PathEscapeError, SizeLimitError
from filedrop.core.logger import LogIcon, logger
from filedrop.models.core import ContentType, HttpResult, ServerConfig
from filedrop.services.multipart import find_file_part, is_multipart, parse_boundary, split_parts
from filedrop.services.paths import resolve_path, strip_query
from filedrop.services.responder import serve_file
from filedrop.services.uploads import ByteCountGuard, UploadValidator, read_body, store_upload

READ_METHODS = frozenset({"GET", "HEAD"})
UPLOAD_ENDPOINT = "/upload"
UPLOADS_PREFIX = "/uploads/"
INDEX_PATHS = frozenset({"/", "/index.html"})
LINK_SAFE_CHARS = "!*'()"


def upload_link(stored_name: str) -> str:
    return f"{UPLOADS_PREFIX}{quote(stored_name, safe=LINK_SAFE_CHARS)}"


def error_result(error: FileServerError) -> HttpResult:
    return HttpResult.text(int(error.status_code), error.message, content_type=error.content_type)


class RequestRouter:
    """Dispatches one request by method and path.

    Every branch returns an ``HttpResult``; rejections raised as
    ``FileServerError`` are converted here and never reach the transport.
    """

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.validator = UploadValidator(config)

    async def handle(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: AsyncIterable[bytes],
    ) -> HttpResult:
        method = method.upper()
        path = strip_query(url)
        try:
            if method == "POST" and path == UPLOAD_ENDPOINT:
                return await self.handle_upload(headers, body)

            if method not in READ_METHODS:
                return HttpResult(
                    status_code=HTTPStatus.METHOD_NOT_ALLOWED,
                    content_type=ContentType.TEXT,
                    body=b"Method Not Allowed",
                    headers={"allow": "GET, HEAD"},
                )

            head = method == "HEAD"
            if path in INDEX_PATHS:
                return await serve_file(self.config.public_root / self.config.index_document, head=head)

            if path.startswith(UPLOADS_PREFIX):
                return await self.serve_from(self.config.upload_root, url.removeprefix(UPLOADS_PREFIX), head)

            return await self.serve_from(self.config.public_root, url, head)

        except SizeLimitError as ex:
            logger.warning("Upload too large", icon=LogIcon.FORBIDDEN, limit=ex.limit, seen=ex.seen)
            result = error_result(ex)
            result.close_connection = True
            return result

        except FileServerError as ex:
            return error_result(ex)

    async def serve_from(self, root: Path, raw_path: str, head: bool) -> HttpResult:
        resolved = resolve_path(root, raw_path)
        if resolved is None:
            logger.warning("Path escapes root", icon=LogIcon.SECURITY, path=raw_path)
            raise PathEscapeError()
        return await serve_file(resolved, head=head)

    async def handle_upload(self, headers: Mapping[str, str], body: AsyncIterable[bytes]) -> HttpResult:
        content_type = headers.get("content-type", "")
        if not is_multipart(content_type):
            raise ClientInputError("Invalid form encoding")

        boundary = parse_boundary(content_type)
        if not boundary:
            raise ClientInputError("Missing boundary")

        guard = ByteCountGuard(self.config.max_upload_bytes)
        guard.check_declared(headers.get("content-length"))
        buffer = await read_body(body, guard)

        candidate = find_file_part(split_parts(buffer, boundary), self.config.upload_field)
        if candidate is None:
            logger.info("No file in upload", icon=LogIcon.VALIDATION, size=guard.seen)
            raise ClientInputError("No file uploaded")

        disposition, data = candidate
        stored = await store_upload(self.validator.validate(disposition.filename, data), data)

        link = upload_link(stored.name)
        return HttpResult.text(
            HTTPStatus.OK,
            f'<h1>Upload complete</h1><p><a href="{link}">View file</a></p>',
            content_type=ContentType.HTML,
        )

