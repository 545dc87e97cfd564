"""
Pure ordering helpers for the project list.

Display convention: ascending, top to bottom, numbered ``1..N``. Every
renumbering recomputes all ``order`` values from position, so the result is
always contiguous whatever the input looked like.
"""

from __future__ import annotations

from collections.abc import Sequence

from portfolio_admin.schemas import Project

ORDER_BASE = 1


def is_valid_move(length: int, source: int | None, destination: int | None) -> bool:
    """True when the move would actually relocate an element."""
    if source is None or destination is None:
        return False
    if not (0 <= source < length and 0 <= destination < length):
        return False
    return source != destination


def move_item(items: Sequence[Project], source: int, destination: int) -> list[Project]:
    """
    Remove the element at ``source`` and reinsert it at ``destination``.

    All other elements keep their relative order (a single-element move,
    not a swap).
    """
    result = list(items)
    moved = result.pop(source)
    result.insert(destination, moved)
    return result


def renumber(items: Sequence[Project]) -> list[Project]:
    """Assign ``order = ORDER_BASE + position`` to every element."""
    return [item.with_order(ORDER_BASE + i) for i, item in enumerate(items)]


def normalize(items: Sequence[Project]) -> list[Project]:
    """Sort by current ``order`` (stable) and renumber contiguously."""
    return renumber(sorted(items, key=lambda p: p.order))


def changed_orders(before: Sequence[Project], after: Sequence[Project]) -> list[Project]:
    """Elements of ``after`` whose ``order`` differs from their value in ``before``."""
    previous = {p.id: p.order for p in before}
    return [p for p in after if previous.get(p.id) != p.order]


def is_contiguous(items: Sequence[Project]) -> bool:
    orders = [p.order for p in items]
    return orders == list(range(ORDER_BASE, ORDER_BASE + len(orders)))
