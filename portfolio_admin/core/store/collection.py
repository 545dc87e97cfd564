"""
Ordered Collection Store.

Holds the locally displayed list of projects together with the loading and
error flags, and owns every mutation of that list. State is replaced as a
whole on each transition (never mutated in place) and observers are notified
synchronously after every transition.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from portfolio_admin.schemas import Project, ProjectCreate, ProjectPatch
from portfolio_admin.services.client import ApiError
from portfolio_admin.services.projects import ProjectRepository

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class StoreState:
    """
    Immutable view of the store.

    Attributes:
        items: Projects in display order
        is_loading: True while a server call is in flight
        error: Message of the last failed call, cleared when a new call starts
    """

    items: tuple[Project, ...] = ()
    is_loading: bool = False
    error: str | None = None


Observer = Callable[[StoreState], None]


def _message(exc: Exception) -> str:
    return exc.message if isinstance(exc, ApiError) else str(exc)


class OrderedCollectionStore:
    """
    Local, authoritative-between-round-trips view of the owner's projects.

    Server calls go through ``repository`` on a worker thread. Failures never
    clear ``items``; they only set ``error`` and make the call return False.
    """

    def __init__(self, repository: ProjectRepository):
        self.repository = repository
        self._state = StoreState()
        self._observers: list[Observer] = []
        self._closed = False
        # Sequencing token: only the newest fetch may replace items.
        self._fetch_seq = 0

    # ── State access ────────────────────────────────────────────────────────

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def items(self) -> tuple[Project, ...]:
        return self._state.items

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; returns a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def close(self) -> None:
        """Detach the store; responses arriving afterwards are dropped."""
        self._closed = True
        self._observers.clear()

    def _set(self, **changes: Any) -> bool:
        if self._closed:
            logger.debug("Store closed, dropping state change %s", sorted(changes))
            return False
        self._state = replace(self._state, **changes)
        for observer in list(self._observers):
            observer(self._state)
        return True

    # ── Operations ──────────────────────────────────────────────────────────

    def apply_local(self, new_items: Iterable[Project]) -> None:
        """Replace ``items`` with a client-computed sequence (no server I/O)."""
        self._set(items=tuple(new_items))

    async def fetch_all(self) -> bool:
        """Reload every project from the server, keeping the server's order."""
        self._fetch_seq += 1
        seq = self._fetch_seq
        self._set(is_loading=True, error=None)
        try:
            projects = await asyncio.to_thread(self.repository.list_projects)
        except asyncio.CancelledError:
            if seq == self._fetch_seq:
                self._set(is_loading=False)
            raise
        except Exception as exc:
            if seq != self._fetch_seq:
                return False
            logger.warning("Projects fetch failed: %s", _message(exc))
            self._set(is_loading=False, error=f"Error fetching projects: {_message(exc)}")
            return False

        if seq != self._fetch_seq:
            logger.debug("Discarding stale project list (request %d, latest %d)", seq, self._fetch_seq)
            return False
        self._set(items=tuple(projects), is_loading=False)
        logger.debug("Fetched %d projects", len(projects))
        return True

    async def create(self, record: ProjectCreate) -> bool:
        """Insert ``record``; without an explicit order it goes to the end of the list."""
        if record.order is None:
            next_order = max((p.order for p in self.items), default=0) + 1
            record = record.model_copy(update={"order": next_order})

        self._set(is_loading=True, error=None)
        try:
            created = await asyncio.to_thread(self.repository.create_project, record)
        except Exception as exc:
            logger.warning("Project create failed: %s", _message(exc))
            self._set(is_loading=False, error=f"Error adding project: {_message(exc)}")
            return False

        self._set(items=self.items + (created,), is_loading=False)
        logger.info("Added project %s (%s)", created.id, created.title)
        return True

    async def update_one(self, project_id: str, patch: ProjectPatch | dict[str, Any]) -> bool:
        payload = patch.payload() if isinstance(patch, ProjectPatch) else dict(patch)

        self._set(is_loading=True, error=None)
        try:
            updated = await asyncio.to_thread(self.repository.update_project, project_id, payload)
        except Exception as exc:
            logger.warning("Project %s update failed: %s", project_id, _message(exc))
            self._set(is_loading=False, error=f"Error updating project: {_message(exc)}")
            return False

        items = tuple(updated if p.id == project_id else p for p in self.items)
        self._set(items=items, is_loading=False)
        return True

    async def delete_one(self, project_id: str) -> bool:
        self._set(is_loading=True, error=None)
        try:
            await asyncio.to_thread(self.repository.delete_project, project_id)
        except Exception as exc:
            logger.warning("Project %s delete failed: %s", project_id, _message(exc))
            self._set(is_loading=False, error=f"Error deleting project: {_message(exc)}")
            return False

        self._set(items=tuple(p for p in self.items if p.id != project_id), is_loading=False)
        logger.info("Deleted project %s", project_id)
        return True

    # ── Explicit persistence ────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "items": [p.model_dump() for p in self.items],
        }

    def restore(self, snapshot: dict[str, Any]) -> None:
        if snapshot.get("version") != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {snapshot.get('version')!r}")
        self.apply_local(Project.model_validate(item) for item in snapshot.get("items", []))

    def save_snapshot(self, path: str | Path) -> Path:
        """Write the last-known-good list to ``path`` as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.snapshot(), f, indent=2)
        logger.debug("Saved %d projects to %s", len(self.items), path)
        return path

    def load_snapshot(self, path: str | Path) -> bool:
        """Restore items from ``path``; returns False if there is nothing usable."""
        path = Path(path)
        if not path.exists():
            return False
        try:
            with open(path, encoding="utf-8") as f:
                self.restore(json.load(f))
        except (ValueError, OSError) as exc:
            logger.warning("Ignoring unreadable snapshot %s: %s", path, exc)
            return False
        logger.info("Restored %d projects from %s", len(self.items), path)
        return True
