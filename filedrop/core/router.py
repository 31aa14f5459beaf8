"""ASGI glue between Starlette and the request pipeline."""

from collections.abc import Callable
from urllib.parse import quote

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from filedrop.models.core import HttpResult, RequestView

FORWARDED_HEADERS = ("content-type", "content-length")

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "CONNECT")


def raw_target(request: Request) -> str:
    """Request path exactly as sent, still percent-encoded.

    Servers that omit ``raw_path`` only hand over the decoded path, which is
    re-encoded so it is decoded once downstream.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").partition("?")[0]
    return quote(request.scope["path"], safe="/")


def to_request_view(request: Request) -> RequestView:
    """Build a transport-neutral request whose body streams as it arrives."""
    headers = {name: request.headers[name] for name in FORWARDED_HEADERS if name in request.headers}
    return RequestView(
        method=request.method.upper(),
        url=raw_target(request),
        headers=headers,
        body=request.stream(),
    )


def parse_response(result: HttpResult) -> Response:
    """Convert an HttpResult to a Starlette Response."""
    headers = dict(result.headers)
    if result.close_connection:
        headers["connection"] = "close"
    return Response(
        content=result.body,
        status_code=int(result.status_code),
        headers=headers,
        media_type=str(result.content_type),
    )


def file_routes(endpoint: Callable) -> list[Route]:
    """One catch-all route sending every method and path to ``endpoint``."""
    return [Route("/{path:path}", endpoint, methods=list(HTTP_METHODS))]
