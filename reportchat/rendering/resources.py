"""In-process registry of binary report payloads behind opaque handles.

A handle plays the role of a browser object URL: it is allocated when a
binary report is resolved, served by the artifact endpoint while its
message exists, and released exactly once when that message is destroyed.
"""

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HANDLE_PREFIX = "blob-"


@dataclass(frozen=True)
class StoredResource:
    """Payload registered under a handle."""

    payload: bytes
    media_type: str
    file_name: str


class ResourceRegistry:
    """Allocates and releases resource handles for binary documents.

    Only live handles are kept; releasing drops the payload and its entry.
    """

    def __init__(self, url_prefix: str = "/artifacts") -> None:
        self._url_prefix = url_prefix.rstrip("/")
        self._resources: dict[str, StoredResource] = {}

    def __len__(self) -> int:
        return len(self._resources)

    def allocate(self, payload: bytes, media_type: str, file_name: str) -> str:
        """Register a payload and return its new handle."""
        handle = f"{HANDLE_PREFIX}{uuid.uuid4().hex}"
        self._resources[handle] = StoredResource(
            payload=payload, media_type=media_type, file_name=file_name
        )
        logger.debug(f"Allocated {handle} for {file_name} ({len(payload)} bytes)")
        return handle

    def get(self, handle: str) -> StoredResource | None:
        return self._resources.get(handle)

    def release(self, handle: str) -> bool:
        """Release a handle.

        Returns:
            True on the first release of a live handle, False if the handle
            is unknown or was already released.
        """
        if self._resources.pop(handle, None) is None:
            logger.warning(f"Release of unknown or already released handle {handle}")
            return False
        logger.debug(f"Released {handle}")
        return True

    def release_all(self) -> int:
        """Release every live handle. Returns how many were released."""
        handles = list(self._resources)
        for handle in handles:
            self.release(handle)
        if handles:
            logger.info(f"Released {len(handles)} outstanding resource handles")
        return len(handles)

    def url_for(self, handle: str, download: bool = False) -> str:
        """URL under which the artifact endpoint serves a handle."""
        url = f"{self._url_prefix}/{handle}"
        return f"{url}?download=true" if download else url
