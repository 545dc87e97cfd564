"""Ordered collection store for portfolio projects."""

from __future__ import annotations

from portfolio_admin.core.store.collection import Observer, OrderedCollectionStore, StoreState

__all__ = ["Observer", "OrderedCollectionStore", "StoreState"]
