"""Cooperative cancellation for composition requests."""
from __future__ import annotations

import threading
from typing import Optional

from .errors import CompositionCancelledError


class CancellationToken:
    """Set once by the caller, checked by the pipeline between stages.

    Example:
        token = CancellationToken()
        composer.compose_template(request, cancellation=token)
        # elsewhere: token.cancel("user aborted")
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str) -> None:
        if self._event.is_set():
            raise CompositionCancelledError(stage, self.reason)


__all__ = ["CancellationToken"]
