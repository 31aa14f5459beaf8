"""Test fixtures for filedrop unit tests."""

from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from urllib.parse import unquote

import pytest
from starlette.requests import Request
from starlette.testclient import TestClient

from filedrop.main import create_app
from filedrop.models.core import ServerConfig
from filedrop.services.dispatch import RequestRouter

INDEX_HTML = b"<!DOCTYPE html><html><body><h1>filedrop</h1></body></html>"


# -----------------------------------------------------------------------------
# Multipart helpers
# -----------------------------------------------------------------------------


def multipart_body(parts: Iterable[tuple[str, bytes]], boundary: str = "XYZ") -> bytes:
    """Frame ``(header block, payload)`` pairs as a multipart body."""
    chunks = []
    for headers, payload in parts:
        chunks.append(f"--{boundary}\r\n{headers}\r\n\r\n".encode() + payload + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


def file_part(filename: str, payload: bytes, field_name: str = "file") -> tuple[str, bytes]:
    return (
        f'Content-Disposition: form-data; name="{field_name}"; filename="{filename}"\r\n'
        "Content-Type: application/octet-stream",
        payload,
    )


async def stream(data: bytes, chunk_size: int = 1024) -> AsyncIterator[bytes]:
    for offset in range(0, len(data), chunk_size):
        yield data[offset : offset + chunk_size]


# -----------------------------------------------------------------------------
# Config fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def server_config(tmp_path: Path) -> ServerConfig:
    """Config rooted in a temporary public and upload directory."""
    public_root = tmp_path / "public"
    upload_root = tmp_path / "uploads"
    public_root.mkdir()
    upload_root.mkdir()
    (public_root / "index.html").write_bytes(INDEX_HTML)
    return ServerConfig(public_root=public_root, upload_root=upload_root)


@pytest.fixture
def request_router(server_config: ServerConfig) -> RequestRouter:
    return RequestRouter(server_config)



@pytest.fixture
def build_multipart():
    return multipart_body


@pytest.fixture
def build_file_part():
    return file_part


@pytest.fixture
def chunked():
    return stream


# -----------------------------------------------------------------------------
# ASGI fixtures
# -----------------------------------------------------------------------------


def http_scope(
    method: str = "GET",
    raw_path: bytes = b"/",
    headers: dict[str, str] | None = None,
    state: dict | None = None,
) -> dict:
    """Minimal ASGI HTTP scope as uvicorn builds it."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": unquote(raw_path.decode("latin-1")),
        "raw_path": raw_path,
        "query_string": b"",
        "root_path": "",
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "state": state if state is not None else {},
    }


@pytest.fixture
def make_request():
    """Factory fixture for Starlette requests fed from a list of body chunks."""

    def _make(method: str = "GET", raw_path: bytes = b"/", body_chunks: Iterable[bytes] = (), headers=None) -> Request:
        messages = [{"type": "http.request", "body": chunk, "more_body": True} for chunk in body_chunks]
        messages.append({"type": "http.request", "body": b"", "more_body": False})

        async def receive() -> dict:
            return messages.pop(0)

        return Request(http_scope(method, raw_path, headers), receive)

    return _make


@pytest.fixture
def client(server_config: ServerConfig):
    """TestClient over the full app, lifespan included."""
    with TestClient(create_app(server_config)) as test_client:
        yield test_client


@pytest.fixture
def build_scope():
    return http_scope
