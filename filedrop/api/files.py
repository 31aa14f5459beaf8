"""Static file and upload endpoints."""

from starlette.requests import Request
from starlette.responses import Response

from filedrop.core.logger import LogIcon, logger
from filedrop.core.router import file_routes, parse_response, to_request_view
from filedrop.services.dispatch import RequestRouter


async def handle_files(request: Request) -> Response:
    """Hand the request to the RequestRouter published by the storage event."""
    file_router: RequestRouter = request.state.file_router
    view = to_request_view(request)
    result = await file_router.handle(view.method, view.url, view.headers, view.body)
    logger.info(
        "Request handled",
        icon=LogIcon.NETWORK,
        method=view.method,
        path=view.url,
        status=int(result.status_code),
    )
    return parse_response(result)


routes = file_routes(handle_files)
