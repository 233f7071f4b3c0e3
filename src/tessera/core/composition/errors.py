"""Composition pipeline error classes."""
from __future__ import annotations

from typing import Optional, Sequence

from tessera.core.exceptions import TesseraError


class CompositionError(TesseraError):
    """Base class for dynamic composition failures."""


class NoBaseTemplatesAvailableError(CompositionError, LookupError):
    """Raised when neither the recommended nor the default base template exists."""

    def __init__(self, recommended: Optional[str], default: str, *, available: Sequence[str] = ()) -> None:
        self.recommended = recommended
        self.default = default
        super().__init__(
            f"No base templates available (recommended: {recommended!r}, default: {default!r})",
            context={"recommended": recommended, "default": default, "available": list(available)},
        )


class CompositionCancelledError(CompositionError):
    """Raised when a composition request is cancelled through its token."""

    def __init__(self, stage: str, reason: Optional[str] = None) -> None:
        self.stage = stage
        self.reason = reason
        suffix = f": {reason}" if reason else ""
        super().__init__(
            f"Composition cancelled at stage '{stage}'{suffix}",
            context={"stage": stage, "reason": reason},
        )


__all__ = [
    "CompositionError",
    "NoBaseTemplatesAvailableError",
    "CompositionCancelledError",
]
