"""A small URL splitter that keeps each part with its delimiter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_METHOD = "http://"


@dataclass
class Url:
    """Parts of a URL, each holding its own delimiter.

    ``method`` ends with ``://``, ``auth`` ends with ``@``, ``port`` starts
    with ``:``, ``path`` starts with ``/`` and ``query`` keeps whatever text
    follows the path, usually starting with ``?``.
    """

    method: Optional[str] = None
    auth: Optional[str] = None
    domain: Optional[str] = None
    port: Optional[str] = None
    path: Optional[str] = None
    query: Optional[str] = None

    def _reset(self) -> None:
        self.method = self.auth = self.domain = None
        self.port = self.path = self.query = None

    def parse(self, url: Optional[str]) -> "Url":
        """Replace all parts with those of ``url``; raise ValueError if malformed."""
        self._reset()
        if url is None:
            raise ValueError("no URL given")

        rest = url
        scheme_end = rest.find("://")
        if scheme_end >= 0:
            self.method = rest[: scheme_end + 3]
            rest = rest[scheme_end + 3 :]
        else:
            self.method = DEFAULT_METHOD

        at = rest.find("@")
        if at >= 0:
            self.auth = rest[: at + 1]
            rest = rest[at + 1 :]

        end = len(rest)
        for stop in (":", "/"):
            found = rest.find(stop)
            if 0 <= found < end:
                end = found
        if end == 0:
            raise ValueError(f"missing domain in URL: {url!r}")
        self.domain = rest[:end]
        rest = rest[end:]

        if rest.startswith(":"):
            digits = 1
            while digits < len(rest) and "0" <= rest[digits] <= "9":
                digits += 1
            if digits == 1:
                raise ValueError(f"missing port number in URL: {url!r}")
            self.port = rest[:digits]
            rest = rest[digits:]

        if rest.startswith("/"):
            query_start = rest.find("?")
            if query_start < 0:
                query_start = len(rest)
            path = rest[:query_start]
            if len(path) > 1:
                self.path = path[:-1] if path.endswith("/") else path
            rest = rest[query_start:]

        if rest:
            self.query = rest
        return self

    def build(self) -> str:
        """Join the parts back into a URL; absent parts contribute nothing."""
        return "".join(
            part or ""
            for part in (self.method, self.auth, self.domain, self.port, self.path, self.query)
        )

    def __str__(self) -> str:
        return self.build()


def parse_url(url: Optional[str]) -> Url:
    """Return a new Url parsed from ``url``; raise ValueError if malformed."""
    return Url().parse(url)