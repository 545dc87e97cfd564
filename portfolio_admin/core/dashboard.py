"""
Dashboard state object.

Builds the API client, the project store and the reorder coordinator from a
configuration dictionary and hands them to a front-end (the FastAPI service
or the CLI) as one explicitly constructed object. Persistence of the token
and the project list happens only in :meth:`Dashboard.open` and
:meth:`Dashboard.close`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from portfolio_admin.core.reorder import BatchProgress, ReorderCoordinator
from portfolio_admin.core.reorder.coordinator import Notifier
from portfolio_admin.core.store import OrderedCollectionStore
from portfolio_admin.services import (
    AuthApi,
    CvApi,
    MessagesApi,
    PortfolioApiClient,
    ProfileApi,
    ProjectRepository,
    ProjectsApi,
    SkillsApi,
    TokenStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    client: PortfolioApiClient
    tokens: TokenStore
    auth: AuthApi
    store: OrderedCollectionStore
    coordinator: ReorderCoordinator
    skills: SkillsApi
    messages: MessagesApi
    profile: ProfileApi
    cv: CvApi
    snapshot_path: Path | None = None

    def open(self) -> None:
        """Load the saved token and last-known project list."""
        self.tokens.load()
        if self.snapshot_path is not None:
            self.store.load_snapshot(self.snapshot_path)

    def close(self) -> None:
        """Save the last-known project list, then detach the store."""
        if self.snapshot_path is not None and not self.store.closed:
            try:
                self.store.save_snapshot(self.snapshot_path)
            except OSError as exc:
                logger.warning("Could not save project snapshot: %s", exc)
        self.store.close()
        self.client.close()


def build_dashboard(
    config: dict[str, Any],
    session: requests.Session | None = None,
    repository: ProjectRepository | None = None,
    progress: BatchProgress | None = None,
    notify: Notifier | None = None,
) -> Dashboard:
    """
    Wire every component from configuration.

    Args:
        config: Configuration as returned by ``load_config``
        session: Optional ``requests.Session`` (tests inject a mock)
        repository: Project backend; defaults to the REST ``ProjectsApi``
        progress: Batch progress indicator shared with the front-end
        notify: User-facing notification callback for finished batches
    """
    api_cfg = config.get("api", {})
    auth_cfg = config.get("auth", {})
    store_cfg = config.get("store", {})
    reorder_cfg = config.get("reorder", {})

    tokens = TokenStore(auth_cfg.get("token_file"))
    client = PortfolioApiClient(
        base_url=api_cfg.get("base_url", "http://localhost:5000"),
        token_provider=tokens,
        timeout=float(api_cfg.get("timeout", 10.0)),
        session=session,
    )
    store = OrderedCollectionStore(repository or ProjectsApi(client))
    coordinator = ReorderCoordinator(
        store,
        progress=progress,
        send_full_record=bool(reorder_cfg.get("send_full_record", False)),
        notify=notify,
    )
    snapshot_file = store_cfg.get("snapshot_file")

    return Dashboard(
        client=client,
        tokens=tokens,
        auth=AuthApi(client, tokens),
        store=store,
        coordinator=coordinator,
        skills=SkillsApi(client),
        messages=MessagesApi(client),
        profile=ProfileApi(client),
        cv=CvApi(client),
        snapshot_path=Path(snapshot_file).expanduser() if snapshot_file else None,
    )
