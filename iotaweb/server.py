"""Request routing, access checks and file serving for the device web server."""

from __future__ import annotations

import base64
import hashlib
import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from iotaweb.constants import AUTH_PATH
from iotaweb.content import AuthLevel, required_auth_level, resolve_request_path
from iotaweb.sdfiles import FileStore, FileStoreError

TEXT_PLAIN = "text/plain"
APP_JSON = "application/json"
TEXT_JSON = "text/json"
OCTET_STREAM = "application/octet-stream"
SPIFFS_PREFIX = "/esp_spiffs"
CONFIG_HASH_HEADER = "X-configSHA256"
MAX_CHUNK = 0xFFFF

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class HttpMethod(str, Enum):
    """HTTP request methods the server distinguishes."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class Request:
    """An incoming request: method, URI, query arguments in order, headers and body."""

    method: HttpMethod
    uri: str
    args: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def has_arg(self, name: str) -> bool:
        return name in self.args

    def arg(self, name: str, default: str = "") -> str:
        return self.args.get(name, default)

    def first_arg(self) -> Optional[str]:
        """Return the value of the first argument, or None without arguments."""
        return next(iter(self.args.values()), None)


@dataclass
class Response:
    """An outgoing response."""

    status: int
    content_type: str = TEXT_PLAIN
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def text(cls, status: int, text: str, content_type: str = TEXT_PLAIN) -> "Response":
        return cls(status, content_type, text.encode())

    @classmethod
    def ok(cls) -> "Response":
        return cls(200, TEXT_PLAIN, b"")

    @classmethod
    def fail(cls, message: str, status: int = 500) -> "Response":
        return cls.text(status, message + "\r\n")

    @property
    def text_body(self) -> str:
        return self.body.decode()


Handler = Callable[[Request], Response]
Authorizer = Callable[[Request, AuthLevel], bool]


def _to_int(text: str) -> int:
    """Read a leading integer from ``text``; 0 when there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def frame_chunk(body: bytes) -> bytes:
    """Frame ``body`` as one HTTP chunk: four hex digits of length, CRLF, body, CRLF."""
    if len(body) > MAX_CHUNK:
        raise ValueError(f"chunk too long: {len(body)} bytes")
    return b"%04x\r\n" % len(body) + body + b"\r\n"


class WebServer:
    """Routes requests to handlers and serves files from a FileStore."""

    def __init__(self, store: FileStore, authorizer: Optional[Authorizer] = None) -> None:
        self.store = store
        self.authorizer: Authorizer = authorizer or (lambda request, level: True)
        self._routes: list[tuple[str, HttpMethod, AuthLevel, Handler]] = []
        self.on(AuthLevel.USER, "/list", HttpMethod.GET, self.handle_list)
        self.on(AuthLevel.ADMIN, "/edit", HttpMethod.DELETE, self.handle_delete)
        self.on(AuthLevel.ADMIN, "/edit", HttpMethod.PUT, self.handle_create)
        self.on(AuthLevel.USER, "/nullreq", HttpMethod.GET, lambda request: Response.ok())

    def on(self, level: AuthLevel, uri: str, method: HttpMethod, handler: Handler) -> None:
        """Register ``handler`` for ``method`` requests to exactly ``uri``."""
        self._routes.append((uri, HttpMethod(method), AuthLevel(level), handler))

    def _find(self, uri: str, method: HttpMethod) -> Optional[tuple[AuthLevel, Handler]]:
        for route_uri, route_method, level, handler in self._routes:
            if route_uri == uri and route_method == method:
                return level, handler
        return None

    def _unauthorized(self) -> Response:
        return Response(401, TEXT_PLAIN, b"Unauthorized", {"WWW-Authenticate": "Digest"})

    def _authorized(self, request: Request, level: AuthLevel) -> bool:
        return bool(self.authorizer(request, level))

    def handle(self, request: Request) -> Response:
        """Answer a request through a registered route, a stored file, or 404."""
        route = self._find(request.uri, request.method)
        if route is not None:
            level, handler = route
            if not self._authorized(request, level):
                return self._unauthorized()
            return handler(request)
        response = self.load_file(request)
        if response is not None:
            return response
        verb = "GET" if request.method == HttpMethod.GET else "POST"
        return Response.text(404, f"Not found: {verb}, URI: {request.uri}")

    def _local(self, path: str) -> Optional[Path]:
        parts = [part for part in path.split("/") if part and part != "."]
        if ".." in parts:
            return None
        return Path(self.store.root).joinpath(*parts)

    def load_file(self, request: Request) -> Optional[Response]:
        """Serve the file a request names; None when there is no such file."""
        path, data_type = resolve_request_path(request.uri)

        if path.startswith(SPIFFS_PREFIX + "/"):
            local = self._local(path)
            if local is None or not local.is_file():
                return Response.text(404, "Not Found")
            return Response(200, data_type, local.read_bytes())

        if path == AUTH_PATH:
            return Response.fail("Protected", 403)

        local = self._local(path)
        if local is not None and local.is_dir():
            path += "/index.htm"
            data_type = "text/html"
            local = self._local(path)

        if not self._authorized(request, required_auth_level(path)):
            return self._unauthorized()

        if request.has_arg("download"):
            download = request.arg("download")
            if download == "true":
                data_type = OCTET_STREAM
            elif download == "yes":
                query = self._find("/query", HttpMethod.GET)
                if query is not None:
                    return query[1](request)

        if local is None or not local.is_file():
            return None

        if request.has_arg("textpos"):
            body = self.store.read_from(path, _to_int(request.arg("textpos")))
            return Response(200, TEXT_PLAIN, body)

        body = local.read_bytes()
        headers: dict[str, str] = {}
        if path.lower() == "/config.txt":
            digest = hashlib.sha256(body).digest()
            headers[CONFIG_HASH_HEADER] = base64.b64encode(digest).decode()
        return Response(200, data_type, body, headers)

    def handle_delete(self, request: Request) -> Response:
        """Delete the file or directory named by the first argument."""
        path = request.first_arg()
        if path is None:
            return Response.fail("BAD ARGS")
        if path.startswith(SPIFFS_PREFIX):
            self.store.delete_recursive(path)
            return Response.ok()
        try:
            self.store.delete(path)
        except FileStoreError as error:
            return Response.fail(error.message, error.status)
        return Response.ok()

    def handle_create(self, request: Request) -> Response:
        """Create the empty file or directory named by the first argument."""
        path = request.first_arg()
        if path is None:
            return Response.fail("BAD ARGS")
        if path.startswith(SPIFFS_PREFIX):
            local = self._local(path)
            if local is None or local.exists():
                return Response.fail("BAD PATH")
            local.parent.mkdir(parents=True, exist_ok=True)
            local.touch()
            return Response.ok()
        try:
            self.store.create(path)
        except FileStoreError as error:
            return Response.fail(error.message, error.status)
        return Response.ok()

    def handle_list(self, request: Request) -> Response:
        """List the directory named by the ``dir`` argument as a JSON array."""
        if not request.has_arg("dir"):
            return Response.fail("BAD ARGS")
        try:
            listing = self.store.list_directory(request.arg("dir"))
        except FileStoreError as error:
            return Response.fail(error.message, error.status)
        return Response.text(200, json.dumps(listing, separators=(",", ":")), APP_JSON)


def _as_path(root: Union[str, Path]) -> Path:
    return Path(root)