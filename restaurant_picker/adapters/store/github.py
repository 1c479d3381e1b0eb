"""GitHub Contents API document store.

The document is a JSON file in a repository branch. The blob ``sha`` GitHub
returns with the file is the version tag, and GitHub rejects a PUT whose
``sha`` no longer matches the branch head's blob, which gives us the
compare-and-swap for free.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import httpx

from restaurant_picker.adapters.store.base import AbstractDocumentStore, VersionedDocument
from restaurant_picker.core.errors import StoreAppError

logger = logging.getLogger(__name__)

# GitHub answers a stale sha with 409, occasionally with 422
CONFLICT_STATUSES = frozenset({409, 422})


class GitHubContentsStore(AbstractDocumentStore):
    """Store the document as a file committed to a GitHub repository."""

    def __init__(
        self,
        *,
        token: str,
        repo: str,
        branch: str = "main",
        path: str = "restaurants.json",
        api_url: str = "https://api.github.com",
        timeout_seconds: float = 10.0,
        user_agent: str = "Restaurant-Picker-App",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            token: Personal access token.
            repo: Repository in ``owner/name`` form.
            branch: Branch to read from and commit to.
            path: File path of the document inside the repository.
            api_url: GitHub REST API base URL.
            timeout_seconds: Per-request timeout; requests never wait longer.
            user_agent: User-Agent header (required by GitHub).
            transport: Optional httpx transport (tests).
        """
        self._token = token
        self._repo = repo
        self._branch = branch
        self._path = path
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout_seconds
        self._user_agent = user_agent
        self._transport = transport

    @property
    def contents_url(self) -> str:
        return f"{self._api_url}/repos/{self._repo}/contents/{self._path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={
                "Authorization": f"token {self._token}",
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": self._user_agent,
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def fetch_document(self) -> VersionedDocument:
        try:
            async with self._client() as client:
                response = await client.get(self.contents_url, params={"ref": self._branch})
        except httpx.HTTPError as exc:
            logger.error(
                "store.fetch_unreachable",
                extra={"backend": "github", "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_unreachable",
                message=f"GitHub API unreachable: {type(exc).__name__}",
            ) from exc

        if not response.is_success:
            logger.error(
                "store.fetch_failed",
                extra={"backend": "github", "http_status": response.status_code},
            )
            raise StoreAppError(
                code="store_fetch_failed",
                message=f"GitHub API error: {response.status_code}",
                details={"http_status": response.status_code},
            )

        try:
            body = response.json()
            document = json.loads(base64.b64decode(body["content"]).decode("utf-8"))
            version = body["sha"]
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreAppError(
                code="store_invalid_document",
                message="GitHub returned an unreadable document",
            ) from exc

        if not isinstance(document, dict):
            raise StoreAppError(
                code="store_invalid_document",
                message="Stored document is not a JSON object",
            )

        logger.debug("store.fetched", extra={"backend": "github", "version": version})
        return VersionedDocument(document=document, version=version)

    async def write_document(self, document: dict[str, Any], version: str, message: str) -> dict[str, Any]:
        content = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
        body = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "sha": version,
            "branch": self._branch,
        }

        try:
            async with self._client() as client:
                response = await client.put(self.contents_url, json=body)
        except httpx.HTTPError as exc:
            logger.error(
                "store.write_unreachable",
                extra={"backend": "github", "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_unreachable",
                message=f"GitHub API unreachable: {type(exc).__name__}",
            ) from exc

        if not response.is_success:
            status_code = response.status_code
            conflict = status_code in CONFLICT_STATUSES
            logger.warning(
                "store.write_conflict" if conflict else "store.write_failed",
                extra={"backend": "github", "http_status": status_code, "base_version": version},
            )
            raise StoreAppError(
                code="store_conflict" if conflict else "store_write_failed",
                message=f"GitHub update failed: {status_code} - {response.text}",
                details={"http_status": status_code, "upstream_body": response.text},
            )

        result = response.json()
        logger.info(
            "store.written",
            extra={
                "backend": "github",
                "base_version": version,
                "version": (result.get("content") or {}).get("sha"),
            },
        )
        return result
