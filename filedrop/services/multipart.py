"""Binary-safe multipart/form-data parsing."""

import re
from collections.abc import Iterator, Sequence

from beartype import beartype

from filedrop.models.core import Disposition, MultipartPart

CRLF = b"\r\n"
HEADER_SEPARATOR = b"\r\n\r\n"

_BOUNDARY_RE = re.compile(r'boundary=(?:"([^"]+)"|([^;\s]+))', re.IGNORECASE)
_DISPOSITION_RE = re.compile(r"^content-disposition:(.*)$", re.IGNORECASE | re.MULTILINE)
_PARAM_RE = re.compile(r'(?:^|;)\s*([\w*-]+)="([^"]*)"')


def is_multipart(content_type: str) -> bool:
    return "multipart/form-data" in content_type.lower()


def parse_boundary(content_type: str) -> str | None:
    """Extract the boundary token from a Content-Type header value."""
    match = _BOUNDARY_RE.search(content_type)
    if not match:
        return None
    return match.group(1) or match.group(2)


def iter_fragment_ranges(body: bytes, delimiter: bytes) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` ranges of ``body`` between exact delimiter matches."""
    start = 0
    while (index := body.find(delimiter, start)) != -1:
        yield start, index
        start = index + len(delimiter)
    yield start, len(body)


@beartype
def split_parts(body: bytes, boundary: str) -> list[MultipartPart]:
    """Split a raw multipart body into parts.

    Each fragment between delimiters loses the CRLF framing on both ends.
    The preamble and the closing ``--`` epilogue end up empty and are dropped,
    as are fragments with no header/body separator. Part bodies are kept as
    raw bytes.
    """
    delimiter = b"--" + boundary.encode("utf-8")
    parts: list[MultipartPart] = []

    for start, end in iter_fragment_ranges(body, delimiter):
        start, end = start + len(CRLF), end - len(CRLF)
        if end <= start:
            continue

        header_end = body.find(HEADER_SEPARATOR, start, end)
        if header_end == -1:
            continue

        parts.append(
            MultipartPart(
                headers=body[start:header_end].decode("utf-8", errors="replace"),
                body=body[header_end + len(HEADER_SEPARATOR) : end],
            )
        )
    return parts


def parse_disposition(headers: str) -> Disposition | None:
    """Read the field name and filename from a part's Content-Disposition."""
    match = _DISPOSITION_RE.search(headers)
    if not match:
        return None

    params = {key.lower(): value for key, value in _PARAM_RE.findall(match.group(1).strip())}
    if "name" not in params:
        return None
    return Disposition(name=params["name"], filename=params.get("filename") or None)


def find_file_part(parts: Sequence[MultipartPart], field_name: str) -> tuple[Disposition, bytes] | None:
    """Return the first part that carries a file for ``field_name``."""
    for part in parts:
        disposition = parse_disposition(part.headers)
        match disposition:
            case Disposition(name=name, filename=str()) if name == field_name:
                return disposition, part.body
            case _:
                continue
    return None
