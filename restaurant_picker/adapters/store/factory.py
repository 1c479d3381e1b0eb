"""Factory for the configured document store."""

from __future__ import annotations

import json
from pathlib import Path

from restaurant_picker.adapters.store.base import AbstractDocumentStore
from restaurant_picker.adapters.store.github import GitHubContentsStore
from restaurant_picker.adapters.store.memory import InMemoryDocumentStore
from restaurant_picker.core.config import settings
from restaurant_picker.core.errors import ConfigurationAppError


def create_document_store() -> AbstractDocumentStore:
    """Instantiate the store selected by ``settings.store.backend``.

    Raises:
        ConfigurationAppError: If the backend is unknown or GitHub credentials are missing.
    """
    cfg = settings.store
    backend = cfg.backend.lower()

    if backend == "github":
        for setting_name, value in (("GITHUB_TOKEN", cfg.github_token), ("GITHUB_REPO", cfg.github_repo)):
            if not value:
                raise ConfigurationAppError(
                    code="store_not_configured",
                    message=f"Server configuration error: {setting_name} not set",
                    details={"missing_setting": setting_name},
                )
        return GitHubContentsStore(
            token=cfg.github_token,  # type: ignore[arg-type]
            repo=cfg.github_repo,  # type: ignore[arg-type]
            branch=cfg.github_branch,
            path=cfg.data_file,
            api_url=cfg.api_url,
            timeout_seconds=cfg.timeout_seconds,
            user_agent=cfg.user_agent,
        )

    if backend == "memory":
        seed = None
        if cfg.seed_file:
            seed = json.loads(Path(cfg.seed_file).read_text(encoding="utf-8"))
        return InMemoryDocumentStore(seed)

    raise ConfigurationAppError(
        code="store_unknown_backend",
        message=f"Unknown document store backend: '{backend}'. Supported backends: github, memory",
    )
