"""Tests for settings and the derived server config."""

from pathlib import Path

from filedrop.core.errors import ClientInputError, NotFoundError, UnexpectedIOError
from filedrop.core.settings import Settings
from filedrop.models.core import ServerConfig


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch) -> None:
        for name in ("PORT", "UPLOAD_DIR", "RENDER", "MAX_UPLOAD_BYTES"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.PORT == 3000
        assert settings.MAX_UPLOAD_BYTES == 10 * 1024 * 1024
        assert settings.ALLOWED_EXTENSIONS == frozenset({".png", ".jpg", ".jpeg", ".gif", ".pdf", ".txt"})
        assert settings.upload_path == Settings.BASE_DIR / "uploads"

    def test_env_overrides(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "store"))

        settings = Settings(_env_file=None)

        assert settings.PORT == 8080
        assert settings.upload_path == tmp_path / "store"

    def test_render_uses_tmp(self, monkeypatch) -> None:
        monkeypatch.delenv("UPLOAD_DIR", raising=False)
        monkeypatch.setenv("RENDER", "true")
        assert Settings(_env_file=None).upload_path == Path("/tmp/uploads")


def test_server_config_from_settings(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "up"))
    monkeypatch.setenv("PUBLIC_DIR", str(tmp_path / "pub"))
    monkeypatch.setenv("ALLOWED_EXTENSIONS", '[".TXT"]')

    config = ServerConfig.from_settings(Settings(_env_file=None))

    assert config.upload_root == tmp_path / "up"
    assert config.public_root == tmp_path / "pub"
    assert config.allowed_extensions == frozenset({".txt"})
    assert config.upload_field == "file"


def test_error_status_codes() -> None:
    assert ClientInputError("Missing boundary").status_code == 400
    assert ClientInputError("Missing boundary").message == "Missing boundary"
    assert NotFoundError().content_type == "text/html"
    assert UnexpectedIOError(OSError(28, "No space left on device")).message == "Server Error: ENOSPC"
