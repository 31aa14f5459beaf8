"""Tests for the file responder."""

from pathlib import Path

import pytest

from filedrop.core.errors import NotFoundError, UnexpectedIOError
from filedrop.services.responder import guess_content_type, serve_file


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("report.pdf", "application/pdf"),
        ("index.html", "text/html"),
        ("notes.txt", "text/plain"),
        ("photo.png", "image/png"),
        ("mystery.unknownext", "application/octet-stream"),
        ("no_extension", "application/octet-stream"),
    ],
)
def test_guess_content_type(name: str, expected: str) -> None:
    assert guess_content_type(Path(name)) == expected


async def test_serves_file_bytes(tmp_path: Path) -> None:
    target = tmp_path / "report.pdf"
    target.write_bytes(b"%PDF-1.4 body")

    result = await serve_file(target)

    assert result.status_code == 200
    assert result.content_type == "application/pdf"
    assert result.body == b"%PDF-1.4 body"


async def test_head_has_empty_body(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_bytes(b"hello")

    result = await serve_file(target, head=True)

    assert result.status_code == 200
    assert result.content_type == "text/plain"
    assert result.body == b""


async def test_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        await serve_file(tmp_path / "nope.html")
    assert exc_info.value.status_code == 404
    assert "404" in exc_info.value.message


async def test_directory_is_server_error(tmp_path: Path) -> None:
    with pytest.raises(UnexpectedIOError) as exc_info:
        await serve_file(tmp_path)
    assert exc_info.value.message == "Server Error: EISDIR"


async def test_file_used_as_directory_is_server_error(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_bytes(b"x")
    with pytest.raises(UnexpectedIOError) as exc_info:
        await serve_file(tmp_path / "a.txt" / "b.txt")
    assert exc_info.value.code == "ENOTDIR"


async def test_other_os_error_is_unexpected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "locked.txt"
    target.write_bytes(b"secret")

    def deny(self) -> bytes:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "read_bytes", deny)

    with pytest.raises(UnexpectedIOError) as exc_info:
        await serve_file(target)

    assert exc_info.value.code == "EACCES"
    assert exc_info.value.message == "Server Error: EACCES"
