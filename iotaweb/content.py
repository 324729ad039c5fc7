"""Request path normalisation, content types and access levels for served files."""

from __future__ import annotations

from enum import IntEnum

from iotaweb.constants import CONFIG_PATH  # noqa: F401  (kept for callers' convenience)

DEFAULT_TYPE = "text/plain"
SOURCE_SUFFIX = ".src"

_PAGE_ALIASES = frozenset({"/edit", "/graph", "/graph2"})

_CONTENT_TYPES = (
    (".htm", "text/html"),
    (".css", "text/css"),
    (".js", "application/javascript"),
    (".png", "image/png"),
    (".gif", "image/gif"),
    (".jpg", "image/jpeg"),
    (".ico", "image/x-icon"),
    (".xml", "text/xml"),
    (".pdf", "application/pdf"),
    (".zip", "application/zip"),
)


class AuthLevel(IntEnum):
    """Access level a request must hold; a higher level includes the lower."""

    USER = 1
    ADMIN = 2


def normalize_path(path: str) -> str:
    """Make ``path`` absolute, add ``index.htm`` to directories and ``.htm`` to page aliases."""
    if not path.startswith("/"):
        path = "/" + path
    if path.endswith("/"):
        path += "index.htm"
    if path in _PAGE_ALIASES:
        path += ".htm"
    return path


def content_type(path: str) -> str:
    """Return the MIME type served for ``path``, judged by its suffix."""
    for suffix, mime in _CONTENT_TYPES:
        if path.endswith(suffix):
            return mime
    return DEFAULT_TYPE


def resolve_request_path(path: str) -> tuple[str, str]:
    """Return the file path and MIME type a request for ``path`` is served from.

    A ``.src`` suffix is dropped and the file is then served as plain text,
    so that page sources can be viewed rather than rendered.
    """
    path = normalize_path(path)
    if path.endswith(SOURCE_SUFFIX):
        return path[: path.rindex(".")], DEFAULT_TYPE
    return path, content_type(path)


def required_auth_level(path: str) -> AuthLevel:
    """Return the level needed to read ``path``.

    Root files and the user and graphs directories are open to users,
    except configuration files; everything else needs admin access.
    """
    if not path.startswith("/config") and (
        path.startswith("/user/")
        or path.startswith("/graphs/")
        or "/" not in path[1:]
    ):
        return AuthLevel.USER
    return AuthLevel.ADMIN