"""filedrop - static file server with single-file uploads, served by Starlette on uvicorn."""

import uvicorn
from asgi_correlation_id import CorrelationIdMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from filedrop.api.files import routes
from filedrop.core.lifespan import Lifespan
from filedrop.core.logger import logger
from filedrop.core.settings import settings as st
from filedrop.events.storage import StorageEvent
from filedrop.models.core import ServerConfig


def create_app(config: ServerConfig | None = None) -> Starlette:
    """Build the ASGI app; ``config`` defaults to the environment settings."""
    lifespan = Lifespan().register(StorageEvent, config=config)
    return Starlette(
        debug=st.DEBUG,
        routes=routes,
        middleware=[Middleware(CorrelationIdMiddleware, header_name="X-Request-ID")],
        lifespan=lifespan,
    )


app = create_app()


def main() -> None:
    logger.info("🚀 STARTING %s | HOST=%s | PORT=%s", st.API_NAME, st.HOST, st.PORT)
    uvicorn.run(app, host=st.HOST, port=st.PORT, access_log=False)


if __name__ == "__main__":
    main()
