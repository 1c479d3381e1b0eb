"""Document store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class VersionedDocument:
    """A fetched document and the version tag it was read at.

    Attributes:
        document: Parsed JSON object (``profiles`` / ``restaurants``).
        version: Opaque tag; changes on every successful write.
    """

    document: dict[str, Any]
    version: str


class AbstractDocumentStore(ABC):
    """Interface for whole-document stores with compare-and-swap writes."""

    @abstractmethod
    async def fetch_document(self) -> VersionedDocument:
        """Read the current document and its version tag.

        Raises:
            StoreAppError: If the store cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    async def write_document(self, document: dict[str, Any], version: str, message: str) -> dict[str, Any]:
        """Replace the document if ``version`` is still current.

        Args:
            document: Full new document content.
            version: Tag returned by the fetch this write is based on.
            message: Short description of the change (commit message).

        Returns:
            Store-specific commit metadata.

        Raises:
            StoreAppError: On a version conflict or any other failure.
        """
        raise NotImplementedError
