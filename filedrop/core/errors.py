"""Error taxonomy mapped onto HTTP status codes."""

import errno
from http import HTTPStatus

from filedrop.models.core import ContentType


class FileServerError(Exception):
    """Base error for a request that ends with a well-defined rejection."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Server Error"
    content_type: str = ContentType.TEXT

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ClientInputError(FileServerError):
    """Malformed form, missing boundary or no file field."""

    status_code = HTTPStatus.BAD_REQUEST
    message = "Bad Request"


class PathEscapeError(FileServerError):
    """Requested path resolves outside its root."""

    status_code = HTTPStatus.FORBIDDEN
    message = "Forbidden"


class NotFoundError(FileServerError):
    status_code = HTTPStatus.NOT_FOUND
    message = "<h1>404 - File Not Found</h1>"
    content_type = ContentType.HTML


class SizeLimitError(FileServerError):
    """Request body grew past the configured maximum."""

    status_code = HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    message = "File too large"

    def __init__(self, limit: int, seen: int) -> None:
        super().__init__()
        self.limit = limit
        self.seen = seen


class PolicyViolation(FileServerError):
    """Upload refused by the extension allow-list."""

    status_code = HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    message = "File type not allowed"


class UnexpectedIOError(FileServerError):
    """Filesystem failure other than a missing file."""

    def __init__(self, error: OSError) -> None:
        self.code = errno.errorcode.get(error.errno, "EIO") if error.errno else "EIO"
        super().__init__(f"Server Error: {self.code}")
