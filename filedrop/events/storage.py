"""Storage lifespan event: prepares the upload directory and the request router."""

from filedrop.core.lifespan import BaseEvent
from filedrop.core.logger import LogIcon, logger
from filedrop.core.settings import settings as st
from filedrop.models.core import ServerConfig
from filedrop.services.dispatch import RequestRouter


def prepare_storage(config: ServerConfig) -> ServerConfig:
    """Create the upload directory, parents included."""
    config.upload_root.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory ready", icon=LogIcon.STORAGE, path=str(config.upload_root))
    return config


class StorageEvent(BaseEvent[RequestRouter]):
    """Builds the RequestRouter once the upload directory exists."""

    name = "file_router"

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config = config or ServerConfig.from_settings(st)

    async def startup(self) -> RequestRouter:
        return RequestRouter(prepare_storage(self.config))
