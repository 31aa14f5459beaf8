"""Unified settings for filedrop."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict."""
    if not pyproject_path.exists():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    try:
        import git

        repo = git.Repo(base_dir, search_parent_directories=True)
        latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
        return str(latest_tag) if latest_tag else "0.0.0"
    except Exception:
        try:
            import importlib.metadata

            return importlib.metadata.version("filedrop")
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the filedrop service."""

    DEBUG: bool = True
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "filedrop")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get("description", "Static file server")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Set by the Render platform; uploads go to its writable /tmp
    RENDER: bool = False

    # Paths
    PUBLIC_DIR: Path = BASE_DIR / "public"
    UPLOAD_DIR: Path | None = None
    INDEX_DOCUMENT: str = "index.html"

    # Upload policy
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".png", ".jpg", ".jpeg", ".gif", ".pdf", ".txt"})
    UPLOAD_FIELD: str = "file"

    @property
    def upload_path(self) -> Path:
        if self.UPLOAD_DIR is not None:
            return self.UPLOAD_DIR
        if self.RENDER:
            return Path("/tmp") / "uploads"
        return self.BASE_DIR / "uploads"

    @property
    def api_url(self) -> str:
        return f"http://{self.HOST}:{self.PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
