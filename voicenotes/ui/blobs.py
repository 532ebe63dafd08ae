"""
Local playback references for audio that has not been fetched from storage.

A freshly captured take is playable straight away through a ``blob:`` URL
held in memory.  Each reference is acquired on creation and must be
released once its list entry is replaced or the page goes away;
``retain_only`` and ``revoke_all`` do that release.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BLOB_SCHEME = "blob:"


@dataclass(frozen=True)
class LocalBlob:
    data: bytes
    mime: str


class LocalBlobRegistry:
    """In-memory store of ``blob:`` URLs and the bytes behind them."""

    def __init__(self) -> None:
        self._blobs: dict[str, LocalBlob] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, url: object) -> bool:
        return url in self._blobs

    @staticmethod
    def is_local(url: str | None) -> bool:
        return bool(url) and url.startswith(BLOB_SCHEME)

    def create(self, data: bytes, mime: str = "audio/wav") -> str:
        """Register *data* and return its new ``blob:`` URL."""
        url = f"{BLOB_SCHEME}{uuid.uuid4().hex}"
        self._blobs[url] = LocalBlob(data=data, mime=mime)
        return url

    def resolve(self, url: str) -> LocalBlob | None:
        return self._blobs.get(url)

    def revoke(self, url: str) -> bool:
        """Release one reference. Returns ``False`` if it was already gone."""
        return self._blobs.pop(url, None) is not None

    def retain_only(self, urls: Iterable[str | None]) -> int:
        """Revoke every blob not in *urls*; return how many were released."""
        keep = {u for u in urls if u}
        stale = [u for u in self._blobs if u not in keep]
        for url in stale:
            del self._blobs[url]
        if stale:
            logger.debug("Released %d stale playback references", len(stale))
        return len(stale)

    def revoke_all(self) -> None:
        self._blobs.clear()
