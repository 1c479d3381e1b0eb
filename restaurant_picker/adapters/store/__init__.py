"""Versioned document store adapters.

The whole catalog lives in one JSON document. Stores hand out the document
together with an opaque version tag and accept a write only when the caller
presents the tag that is still current (compare-and-swap). No adapter
caches, retries or queues: a rejected write is reported to the caller.
"""

from restaurant_picker.adapters.store.base import AbstractDocumentStore, VersionedDocument
from restaurant_picker.adapters.store.factory import create_document_store
from restaurant_picker.adapters.store.github import GitHubContentsStore
from restaurant_picker.adapters.store.memory import InMemoryDocumentStore

__all__ = [
    "AbstractDocumentStore",
    "GitHubContentsStore",
    "InMemoryDocumentStore",
    "VersionedDocument",
    "create_document_store",
]
