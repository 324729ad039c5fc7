"""A file store rooted in a local directory, with the device's file rules."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Union

from iotaweb.constants import AUTH_PATH, CONFIG_PATH, CURRENT_LOG_PATH, HISTORY_LOG_PATH

RESTRICTED_PATHS = frozenset({CONFIG_PATH, CURRENT_LOG_PATH, HISTORY_LOG_PATH, AUTH_PATH})
SPIFFS_ENTRY = "esp_spiffs"
_HIDDEN_DIRECTORY = "system volume information"


class FileStoreError(Exception):
    """A file operation was refused; ``status`` is the HTTP code to answer with."""

    def __init__(self, message: str, status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class FileStore:
    """Files addressed by absolute device paths such as ``/user/page.htm``."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def _local(self, path: str) -> Path:
        parts = [part for part in path.split("/") if part and part != "."]
        if ".." in parts:
            raise FileStoreError("BAD PATH", 400)
        return self.root.joinpath(*parts)

    def exists(self, path: str) -> bool:
        """Return True if a file or directory exists at ``path``."""
        try:
            return self._local(path).exists()
        except FileStoreError:
            return False

    def delete(self, path: str) -> None:
        """Delete a file or directory tree, refusing the root and system files."""
        if path == "/" or not self.exists(path):
            raise FileStoreError("BAD PATH", 400)
        if path in RESTRICTED_PATHS:
            raise FileStoreError("Restricted File", 403)
        self.delete_recursive(path)

    def delete_recursive(self, path: str) -> None:
        """Remove ``path`` and everything below it; a missing path is ignored."""
        local = self._local(path)
        if local.is_dir():
            shutil.rmtree(local)
        elif local.exists():
            local.unlink()

    def create(self, path: str) -> None:
        """Create an empty file if the name has an extension, else a directory."""
        if path == "/" or self.exists(path):
            raise FileStoreError("BAD PATH", 400)
        local = self._local(path)
        if path.find(".") > 0:
            local.parent.mkdir(parents=True, exist_ok=True)
            local.touch()
        else:
            local.mkdir(parents=True)

    def list_directory(self, path: str) -> list[dict[str, str]]:
        """List a directory: subdirectories first, then files, each sorted by name."""
        if path != "/" and not self.exists(path):
            raise FileStoreError("BAD PATH")
        local = self._local(path)
        if not local.is_dir():
            raise FileStoreError("NOT DIR")
        entries = sorted(local.iterdir(), key=lambda entry: entry.name)
        listing: list[dict[str, str]] = []
        if path == "/":
            listing.append({"type": "dir", "name": SPIFFS_ENTRY})
        listing.extend(
            {"type": "dir", "name": entry.name}
            for entry in entries
            if entry.is_dir() and entry.name.lower() != _HIDDEN_DIRECTORY
        )
        listing.extend(
            {"type": "file", "name": entry.name} for entry in entries if entry.is_file()
        )
        return listing

    def read_from(self, path: str, relative_position: int) -> bytes:
        """Return the file's text from the first line start after a position.

        A negative position counts back from the end of the file. The line
        in which the position falls is skipped, so only whole lines follow.
        """
        local = self._local(path)
        if not local.is_file():
            raise FileStoreError("BAD PATH", 400)
        data = local.read_bytes()
        start = relative_position if relative_position >= 0 else len(data) + relative_position
        start = max(start, 0)
        newline = data.find(b"\n", start)
        if newline < 0:
            return b""
        return data[newline + 1 :]