"""Drag-reorder protocol for the project list."""

from __future__ import annotations

from portfolio_admin.core.reorder.coordinator import (
    ReorderCoordinator,
    ReorderOutcome,
    ReorderStatus,
)
from portfolio_admin.core.reorder.ordering import (
    changed_orders,
    is_contiguous,
    is_valid_move,
    move_item,
    normalize,
    renumber,
)
from portfolio_admin.core.reorder.progress import BatchProgress

__all__ = [
    "BatchProgress",
    "ReorderCoordinator",
    "ReorderOutcome",
    "ReorderStatus",
    "changed_orders",
    "is_contiguous",
    "is_valid_move",
    "move_item",
    "normalize",
    "renumber",
]
