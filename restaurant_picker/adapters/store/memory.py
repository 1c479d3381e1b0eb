"""In-memory document store with the same compare-and-swap contract.

Used for local development (``STORE_BACKEND=memory``) and tests. The
version tag is the SHA-1 of the serialized document, so two identical
documents share a tag just like identical git blobs do.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
from typing import Any

from restaurant_picker.adapters.store.base import AbstractDocumentStore, VersionedDocument
from restaurant_picker.core.errors import StoreAppError

logger = logging.getLogger(__name__)


def empty_document() -> dict[str, Any]:
    return {
        "profiles": [{"id": "all", "name": "All Restaurants"}],
        "restaurants": [],
    }


def document_version(document: dict[str, Any]) -> str:
    serialized = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
    return hashlib.sha1(serialized).hexdigest()


class InMemoryDocumentStore(AbstractDocumentStore):
    """Process-local versioned document.

    Attributes:
        history: Commit messages of every accepted write, oldest first.
    """

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = copy.deepcopy(document) if document is not None else empty_document()
        self._version = document_version(self._document)
        self.history: list[str] = []

    @property
    def version(self) -> str:
        return self._version

    @property
    def document(self) -> dict[str, Any]:
        """A copy of the current document."""
        return copy.deepcopy(self._document)

    async def fetch_document(self) -> VersionedDocument:
        return VersionedDocument(document=copy.deepcopy(self._document), version=self._version)

    async def write_document(self, document: dict[str, Any], version: str, message: str) -> dict[str, Any]:
        # No await between the check and the swap, so this is atomic per event loop.
        if version != self._version:
            logger.warning(
                "store.write_conflict",
                extra={"backend": "memory", "base_version": version, "current_version": self._version},
            )
            raise StoreAppError(
                code="store_conflict",
                message=f"Document update failed: 409 - version {version} does not match {self._version}",
                details={"http_status": 409},
            )

        self._document = copy.deepcopy(document)
        self._version = document_version(self._document)
        self.history.append(message)
        logger.info(
            "store.written",
            extra={"backend": "memory", "base_version": version, "version": self._version},
        )
        return {"commit": {"message": message}, "content": {"sha": self._version}}
