"""Confine request paths to a root directory."""

import os
from pathlib import Path
from urllib.parse import unquote

from beartype import beartype


def strip_query(raw_url_path: str) -> str:
    """Drop the query string and fragment from a raw request target."""
    return raw_url_path.partition("?")[0].partition("#")[0]


@beartype
def resolve_path(root: Path, raw_url_path: str) -> Path | None:
    """Map a raw URL path onto a file under ``root``.

    The path is percent-decoded after the query and fragment are removed, so
    encoded separators and ``%2e%2e`` segments are canonicalized like literal
    ones. Returns ``None`` when the result would escape ``root``; the root
    itself is accepted.
    """
    decoded = unquote(strip_query(raw_url_path))
    if "\x00" in decoded:
        return None

    base = os.path.normpath(os.path.abspath(root))
    relative = decoded.lstrip("/")
    candidate = os.path.normpath(os.path.join(base, relative))

    # separator appended on both sides so "/srv/public2" never matches "/srv/public"
    if not (candidate + os.sep).startswith(base.rstrip(os.sep) + os.sep):
        return None
    return Path(candidate)
