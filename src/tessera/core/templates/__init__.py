"""Template inheritance: registry, slot and condition handling, resolution.

Public API:
- TemplateRegistry: base/child/composite templates persisted to YAML
- TemplateRenderer: Jinja2-backed resource loading and rendering
- TemplateResolver: resolve any registered template to text
"""
from __future__ import annotations

from .conditions import ConditionEvaluator, parse_condition
from .errors import (
    CircularInheritanceError,
    ConditionEvaluationError,
    ConditionSyntaxError,
    DanglingExtendsReferenceError,
    InheritanceError,
    RegistryFormatError,
    RequiredSlotMissingError,
    SlotError,
    SlotValidationError,
    TemplateError,
    TemplateNotFoundError,
    TemplateResourceNotFoundError,
)
from .models import (
    CATEGORIES,
    BaseTemplate,
    ChildTemplate,
    CompositeComponent,
    CompositeTemplate,
    Partial,
    Slot,
    SlotValidation,
    TemplateCompliance,
    TemplateKind,
    TemplateMetadata,
    Variant,
    VariantCompliance,
)
from .registry import TemplateRegistry
from .renderer import TemplateRenderer
from .resolver import TemplateResolver
from .slots import resolve_slots, validate_slot_content

__all__ = [
    # registry / resolution
    "TemplateRegistry",
    "TemplateRenderer",
    "TemplateResolver",
    "ConditionEvaluator",
    "parse_condition",
    "resolve_slots",
    "validate_slot_content",
    # models
    "CATEGORIES",
    "TemplateKind",
    "Slot",
    "SlotValidation",
    "Variant",
    "VariantCompliance",
    "TemplateCompliance",
    "TemplateMetadata",
    "Partial",
    "BaseTemplate",
    "ChildTemplate",
    "CompositeComponent",
    "CompositeTemplate",
    # errors
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
