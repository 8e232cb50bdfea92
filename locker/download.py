"""Transient download handles for stored file content."""

import uuid
from typing import Dict

from common.constants import DOWNLOAD_HANDLE_PREFIX
from common.logging_config import get_logger
from locker.exceptions import DownloadHandleError

logger = get_logger(__name__)


class DownloadHandleRegistry:
    """
    Session-scoped table of revocable references to record content.

    A handle points at the record's existing bytes object; nothing is copied
    and nothing is persisted.
    """

    def __init__(self):
        self._handles: Dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._handles)

    def create(self, record) -> str:
        """
        Create a handle for a record's content.

        Args:
            record: FileRecord whose content should be retrievable

        Returns:
            Handle URI (e.g., "blob:locker/<uuid>")
        """
        uri = f"{DOWNLOAD_HANDLE_PREFIX}{uuid.uuid4()}"
        self._handles[uri] = record.content
        logger.debug(f"Created download handle for file {record.id} [uri={uri}]")
        return uri

    def resolve(self, uri: str) -> bytes:
        """
        Return the content behind a live handle.

        Raises:
            DownloadHandleError: If the handle is unknown or revoked
        """
        try:
            return self._handles[uri]
        except KeyError:
            raise DownloadHandleError(f"Download handle is not valid: {uri}") from None

    def revoke(self, uri: str) -> None:
        self._handles.pop(uri, None)

    def revoke_all(self) -> None:
        count = len(self._handles)
        self._handles.clear()
        if count:
            logger.debug(f"Revoked {count} download handle(s)")
