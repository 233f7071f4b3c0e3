from __future__ import annotations

from typing import Any, Dict, Mapping


class TesseraError(Exception):
    """Base exception for Tessera."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Shallow copy so callers cannot mutate the error after raising.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(TesseraError, ValueError):
    """Raised when configuration cannot be loaded or is malformed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TesseraError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class SchemaValidationError(TesseraError, ValueError):
    """Raised when a structured document fails JSON Schema validation."""

    def __init__(
        self,
        message: str = "",
        *,
        errors: list[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        self.errors = list(errors or [])
        if self.errors:
            ctx["errors"] = self.errors
        TesseraError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


__all__ = [
    "TesseraError",
    "ConfigError",
    "SchemaValidationError",
]
