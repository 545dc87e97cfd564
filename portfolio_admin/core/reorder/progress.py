"""Single in-progress indicator for a reorder batch."""

from __future__ import annotations

import logging
from collections.abc import Callable

from portfolio_admin.schemas import ProgressOut

logger = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressOut], None]


class BatchProgress:
    """
    Progress state for the batch currently in flight.

    ``start`` shows the indicator, ``finish`` dismisses it. Listeners (the
    CLI spinner, tests) are told about both transitions.
    """

    def __init__(self, listener: ProgressListener | None = None):
        self.listener = listener
        self.state = ProgressOut()

    @property
    def running(self) -> bool:
        return self.state.running

    def _emit(self) -> None:
        if self.listener is not None:
            self.listener(self.state)

    def start(self, message: str) -> None:
        self.state = ProgressOut(stage="running", message=message, running=True)
        self._emit()

    def finish(self, ok: bool, message: str) -> None:
        if not self.state.running:
            logger.debug("Progress already dismissed; ignoring %r", message)
            return
        self.state = ProgressOut(stage="done" if ok else "error", message=message, running=False)
        self._emit()
