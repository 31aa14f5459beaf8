"""Serve files from disk with an inferred content type."""

import asyncio
import mimetypes
from http import HTTPStatus
from pathlib import Path

from filedrop.core.errors import NotFoundError, UnexpectedIOError
from filedrop.core.logger import LogIcon, logger
from filedrop.models.core import ContentType, HttpResult


def guess_content_type(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or ContentType.BINARY


async def serve_file(path: Path, head: bool = False) -> HttpResult:
    """Read ``path`` and wrap it in a 200 response.

    Raises NotFoundError for missing files and UnexpectedIOError for any other
    read failure, directories included.
    """
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except FileNotFoundError as ex:
        raise NotFoundError() from ex
    except OSError as ex:
        logger.error("File read failed", icon=LogIcon.ERROR, path=str(path), error=str(ex))
        raise UnexpectedIOError(ex) from ex

    logger.debug("Serving file", icon=LogIcon.DOWNLOAD, path=str(path), size=len(content))
    return HttpResult(
        status_code=HTTPStatus.OK,
        content_type=guess_content_type(path),
        body=b"" if head else content,
    )
