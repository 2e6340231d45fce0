from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import BinaryIO, Protocol
from uuid import uuid4


@dataclass(frozen=True)
class UploadResult:
    """
    Location of an uploaded asset.

    :ivar url: Public URL of the stored asset.
    :ivar key: Store-specific identifier used to destroy it later.
    """

    url: str
    key: str


class MediaStore(Protocol):
    """
    External media storage (images for templates, trainings and profiles).

    Implementations talk to a third-party service; the service layer only
    calls them after the database transaction has committed.
    """

    def upload(self, scope_key: str, stream: BinaryIO) -> UploadResult:
        """Store ``stream`` under the folder ``scope_key`` and return its location."""

    def destroy(self, key: str) -> None:
        """Delete a previously uploaded asset. Unknown keys are ignored."""


class InMemoryMediaStore(MediaStore):
    """
    Process-local media store for development and tests.

    .. note::
       Uses a threading lock so concurrent uploads get distinct keys.
    """

    def __init__(self, *, base_url: str = "https://media.local/") -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.assets: dict[str, bytes] = {}
        self.destroyed: list[str] = []
        self._lock = threading.Lock()

    def upload(self, scope_key: str, stream: BinaryIO) -> UploadResult:
        data = stream.read()
        key = f"{scope_key.strip('/')}/{uuid4().hex}"
        with self._lock:
            self.assets[key] = data
        return UploadResult(url=f"{self.base_url}{key}", key=key)

    def destroy(self, key: str) -> None:
        with self._lock:
            self.assets.pop(key, None)
            self.destroyed.append(key)
