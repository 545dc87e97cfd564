"""
Reorder Coordinator.

Turns one drag gesture (source index → destination index) into a persisted
new ordering of the project list:

1. Snapshot the current list for rollback
2. Move the dragged element (single-element move, not a swap)
3. Renumber every element ``1..N`` from its position
4. Apply the result to the store optimistically
5. Persist every changed ``order`` concurrently and wait for all calls
6. Reconcile with a fresh fetch; on any failure restore the snapshot first

Batches are serialized: a second gesture waits until the previous batch has
finished its reconciliation fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from portfolio_admin.core.reorder.ordering import (
    changed_orders,
    is_valid_move,
    move_item,
    normalize,
    renumber,
)
from portfolio_admin.core.reorder.progress import BatchProgress
from portfolio_admin.core.store import OrderedCollectionStore
from portfolio_admin.schemas import Project
from portfolio_admin.services.client import ApiError
from portfolio_admin.services.projects import ProjectRepository

logger = logging.getLogger(__name__)

Notifier = Callable[[str, bool], None]

SUCCESS_MESSAGE = "Project order updated"
FAILURE_MESSAGE = "Failed to update project order"


class ReorderStatus(str, Enum):
    NOOP = "noop"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ReorderOutcome:
    """Result of one reorder or normalization request."""

    status: ReorderStatus
    message: str = ""
    changed_ids: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is not ReorderStatus.FAILED


class ReorderCoordinator:
    """
    Drive optimistic reorders of the store's project list.

    Args:
        store: Store holding the displayed list
        repository: Backend used for the per-record order writes
            (defaults to the store's repository)
        progress: Indicator shown for the whole batch
        send_full_record: Send the complete record with its new order
            instead of only ``{order, updated_at}``
        notify: Called once per finished batch with a user-facing message
    """

    def __init__(
        self,
        store: OrderedCollectionStore,
        repository: ProjectRepository | None = None,
        progress: BatchProgress | None = None,
        send_full_record: bool = False,
        notify: Notifier | None = None,
    ):
        self.store = store
        self.repository = repository or store.repository
        self.progress = progress or BatchProgress()
        self.send_full_record = send_full_record
        self.notify = notify
        self._lock = asyncio.Lock()

    async def reorder(self, source_index: int | None, destination_index: int | None) -> ReorderOutcome:
        """Move the project at ``source_index`` to ``destination_index`` and persist it."""
        async with self._lock:
            snapshot = self.store.items
            if not is_valid_move(len(snapshot), source_index, destination_index):
                logger.debug(
                    "Ignoring reorder %s -> %s on %d items", source_index, destination_index, len(snapshot)
                )
                return ReorderOutcome(ReorderStatus.NOOP)

            optimistic = renumber(move_item(snapshot, source_index, destination_index))
            logger.info(
                "Moving project %s from %d to %d",
                snapshot[source_index].id,
                source_index,
                destination_index,
            )
            return await self._run_batch(snapshot, optimistic, "Updating project order...")

    async def normalize_orders(self) -> ReorderOutcome:
        """Sort by stored order and renumber ``1..N``, persisting whatever changed."""
        async with self._lock:
            snapshot = self.store.items
            target = normalize(snapshot)
            if not changed_orders(snapshot, target):
                if [p.id for p in target] != [p.id for p in snapshot]:
                    self.store.apply_local(target)
                return ReorderOutcome(ReorderStatus.NOOP)
            logger.info("Normalizing orders of %d projects", len(snapshot))
            return await self._run_batch(snapshot, target, "Normalizing project order...")

    # ── Batch ───────────────────────────────────────────────────────────────

    async def _run_batch(
        self,
        snapshot: Sequence[Project],
        optimistic: Sequence[Project],
        label: str,
    ) -> ReorderOutcome:
        changed = changed_orders(snapshot, optimistic)
        changed_ids = [p.id for p in changed]
        outcome: ReorderOutcome | None = None

        self.store.apply_local(optimistic)
        self.progress.start(label)
        try:
            try:
                failures = await self._persist_all(changed)
            except Exception as exc:
                logger.exception("Reorder batch aborted before all writes settled")
                failures = [str(exc)]

            if failures:
                self.store.apply_local(snapshot)
                outcome = ReorderOutcome(
                    ReorderStatus.FAILED,
                    f"{FAILURE_MESSAGE} ({len(failures)} of {len(changed)} updates failed)",
                    changed_ids,
                )
            else:
                outcome = ReorderOutcome(ReorderStatus.SUCCEEDED, SUCCESS_MESSAGE, changed_ids)

            if not self.store.closed:
                await self.store.fetch_all()
        finally:
            if outcome is None:
                # Cancelled mid-batch; restore the snapshot.
                self.store.apply_local(snapshot)
                self.progress.finish(False, f"{FAILURE_MESSAGE} (cancelled)")
            else:
                self.progress.finish(outcome.ok, outcome.message)
                if self.notify is not None:
                    self.notify(outcome.message, outcome.ok)
        return outcome

    async def _persist_all(self, changed: Sequence[Project]) -> list[str]:
        """Fan out one write per changed record; return the failure messages."""
        results = await asyncio.gather(
            *(asyncio.to_thread(self._persist, project) for project in changed),
            return_exceptions=True,
        )
        failures: list[str] = []
        for project, result in zip(changed, results, strict=True):
            if isinstance(result, BaseException):
                message = result.message if isinstance(result, ApiError) else repr(result)
                logger.warning("Order update for project %s failed: %s", project.id, message)
                failures.append(message)
        return failures

    def _persist(self, project: Project) -> Project:
        payload: dict[str, Any]
        now = datetime.now(timezone.utc).isoformat()
        if self.send_full_record:
            payload = project.model_dump(exclude={"id"})
            payload["updated_at"] = now
        else:
            payload = {"order": project.order, "updated_at": now}
        return self.repository.update_project(project.id, payload)
