"""Template registry and resolution error classes."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from tessera.core.exceptions import TesseraError


class TemplateError(TesseraError):
    """Base class for template registry and resolution failures."""


class TemplateNotFoundError(TemplateError, LookupError):
    """Raised when a template name is not registered under any kind."""

    def __init__(self, name: str, *, kind: Optional[str] = None) -> None:
        self.name = name
        self.kind = kind
        label = f"{kind} template" if kind else "Template"
        super().__init__(f"{label} '{name}' not found", context={"template": name, "kind": kind})


class TemplateResourceNotFoundError(TemplateError, FileNotFoundError):
    """Raised when a template resource file cannot be found under the root."""

    def __init__(self, resource_path: str) -> None:
        self.resource_path = resource_path
        TemplateError.__init__(
            self,
            f"Template resource not found: {resource_path}",
            context={"resource": resource_path},
        )


class RegistryFormatError(TemplateError, ValueError):
    """Raised when a registry document is structurally invalid."""

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        TemplateError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InheritanceError(TemplateError):
    """Base class for inheritance hierarchy violations."""


class DanglingExtendsReferenceError(InheritanceError):
    """Raised when a child template extends a template that does not exist."""

    def __init__(self, template: str, parent: str) -> None:
        self.template = template
        self.parent = parent
        super().__init__(
            f"Child template '{template}' extends non-existent template '{parent}'",
            context={"template": template, "extends": parent},
        )


class CircularInheritanceError(InheritanceError):
    """Raised when following ``extends`` pointers revisits a template."""

    def __init__(self, template: str, chain: Sequence[str]) -> None:
        self.template = template
        self.chain = list(chain)
        super().__init__(
            f"Circular inheritance detected for template '{template}': {' -> '.join(self.chain)}",
            context={"template": template, "chain": self.chain},
        )


class SlotError(TemplateError):
    """Base class for slot resolution failures."""


class RequiredSlotMissingError(SlotError):
    """Raised when a required slot has neither supplied nor default content."""

    def __init__(self, slot: str, *, template: Optional[str] = None) -> None:
        self.slot = slot
        self.template = template
        where = f" for template '{template}'" if template else ""
        super().__init__(
            f"Required slot '{slot}' not provided{where}",
            context={"slot": slot, "template": template},
        )


class SlotValidationError(SlotError):
    """Raised when supplied slot content violates a validation rule."""

    def __init__(self, slot: str, rule: str, message: str) -> None:
        self.slot = slot
        self.rule = rule
        super().__init__(message, context={"slot": slot, "rule": rule})


class ConditionSyntaxError(TemplateError, ValueError):
    """Raised when a condition expression cannot be parsed."""

    def __init__(self, expression: str, message: str, *, position: Optional[int] = None) -> None:
        self.expression = expression
        self.position = position
        at = f" at position {position}" if position is not None else ""
        TemplateError.__init__(
            self,
            f"Invalid condition '{expression}'{at}: {message}",
            context={"expression": expression, "position": position},
        )
        ValueError.__init__(self, str(self))


class ConditionEvaluationError(TemplateError):
    """Raised when a parsed condition cannot be evaluated against a context."""

    def __init__(self, expression: str, message: str) -> None:
        self.expression = expression
        super().__init__(
            f"Failed to evaluate condition '{expression}': {message}",
            context={"expression": expression},
        )


__all__ = [
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateResourceNotFoundError",
    "RegistryFormatError",
    "InheritanceError",
    "DanglingExtendsReferenceError",
    "CircularInheritanceError",
    "SlotError",
    "RequiredSlotMissingError",
    "SlotValidationError",
    "ConditionSyntaxError",
    "ConditionEvaluationError",
]
