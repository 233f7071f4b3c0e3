"""Template registry data model.

Three template kinds live in the registry:
- BaseTemplate: a renderable resource declaring slots and variants
- ChildTemplate: extends a base (or another child) and overrides slots
- CompositeTemplate: places sub-templates into slots of a layout template

Registry documents use camelCase keys (``resourcePath``, ``defaultContent``);
the dataclasses use snake_case and convert in ``from_dict``/``to_dict``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import RegistryFormatError


class TemplateKind(str, Enum):
    BASE = "base"
    CHILD = "child"
    COMPOSITE = "composite"


CATEGORIES: Tuple[str, ...] = ("page", "component", "form", "dashboard", "layout")

DEFAULT_COMPONENT_SLOT = "content"


def _require(data: Mapping[str, Any], key: str, owner: str) -> Any:
    if key not in data or data[key] in (None, ""):
        raise RegistryFormatError(
            f"{owner} is missing required field '{key}'",
            context={"owner": owner, "field": key},
        )
    return data[key]


def _prune(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop empty optional fields so persisted documents stay compact."""
    return {k: v for k, v in data.items() if v not in (None, {}, [])}


@dataclass(frozen=True)
class SlotValidation:
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    _compiled: Optional[re.Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern:
            return
        try:
            object.__setattr__(self, "_compiled", re.compile(self.pattern))
        except re.error as exc:
            raise RegistryFormatError(
                f"Invalid slot validation pattern {self.pattern!r}: {exc}",
                context={"pattern": self.pattern},
            ) from exc

    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        return self._compiled

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SlotValidation":
        return cls(
            min_length=data.get("minLength"),
            max_length=data.get("maxLength"),
            pattern=data.get("pattern"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "pattern": self.pattern,
        })


@dataclass(frozen=True)
class Slot:
    """A named, independently fillable region of a base template."""

    name: str
    required: bool = False
    default_content: Optional[str] = None
    description: Optional[str] = None
    validation: Optional[SlotValidation] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Slot":
        validation = data.get("validation")
        return cls(
            name=_require(data, "name", "slot"),
            required=bool(data.get("required", False)),
            default_content=data.get("defaultContent"),
            description=data.get("description"),
            validation=SlotValidation.from_dict(validation) if validation else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "required": self.required}
        if self.default_content is not None:
            out["defaultContent"] = self.default_content
        if self.description:
            out["description"] = self.description
        if self.validation is not None and self.validation.to_dict():
            out["validation"] = self.validation.to_dict()
        return out


@dataclass(frozen=True)
class Partial:
    """A named sub-resource rendered alongside a base template."""

    name: str
    resource_path: str
    context: Dict[str, Any] = field(default_factory=dict)
    condition: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Partial":
        return cls(
            name=_require(data, "name", "partial"),
            resource_path=_require(data, "resourcePath", "partial"),
            context=dict(data.get("context") or {}),
            condition=data.get("condition"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "name": self.name,
            "resourcePath": self.resource_path,
            "context": dict(self.context),
            "condition": self.condition,
        })


@dataclass(frozen=True)
class VariantCompliance:
    dark_mode: Optional[bool] = None
    rtl: Optional[bool] = None
    high_contrast: Optional[bool] = None
    reduced_motion: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VariantCompliance":
        return cls(
            dark_mode=data.get("darkMode"),
            rtl=data.get("rtl"),
            high_contrast=data.get("highContrast"),
            reduced_motion=data.get("reducedMotion"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "darkMode": self.dark_mode,
            "rtl": self.rtl,
            "highContrast": self.high_contrast,
            "reducedMotion": self.reduced_motion,
        })


@dataclass(frozen=True)
class Variant:
    """A named override bundle applied on top of a base template's context."""

    name: str
    modifiers: Dict[str, Any] = field(default_factory=dict)
    description: Optional[str] = None
    compliance: Optional[VariantCompliance] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Variant":
        compliance = data.get("compliance")
        return cls(
            name=_require(data, "name", "variant"),
            modifiers=dict(data.get("modifiers") or {}),
            description=data.get("description"),
            compliance=VariantCompliance.from_dict(compliance) if compliance else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "name": self.name,
            "description": self.description,
            "modifiers": dict(self.modifiers),
            "compliance": self.compliance.to_dict() if self.compliance else None,
        })


@dataclass(frozen=True)
class TemplateCompliance:
    accessibility_level: Optional[str] = None
    classification: Optional[str] = None
    privacy_compliant: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateCompliance":
        return cls(
            accessibility_level=data.get("accessibilityLevel"),
            classification=data.get("classification"),
            privacy_compliant=data.get("privacyCompliant"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "accessibilityLevel": self.accessibility_level,
            "classification": self.classification,
            "privacyCompliant": self.privacy_compliant,
        })


@dataclass(frozen=True)
class TemplateMetadata:
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()
    compliance: Optional[TemplateCompliance] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateMetadata":
        compliance = data.get("compliance")
        return cls(
            description=data.get("description"),
            tags=tuple(data.get("tags") or ()),
            compliance=TemplateCompliance.from_dict(compliance) if compliance else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "description": self.description,
            "tags": list(self.tags),
            "compliance": self.compliance.to_dict() if self.compliance else None,
        })


@dataclass(frozen=True)
class BaseTemplate:
    """Root of an inheritance chain: a renderable resource with slots."""

    name: str
    resource_path: str
    category: str
    slots: Tuple[Slot, ...] = ()
    partials: Tuple[Partial, ...] = ()
    default_context: Dict[str, Any] = field(default_factory=dict)
    variants: Tuple[Variant, ...] = ()
    metadata: TemplateMetadata = field(default_factory=TemplateMetadata)

    kind = TemplateKind.BASE

    def get_variant(self, name: str) -> Optional[Variant]:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BaseTemplate":
        name = _require(data, "name", "base template")
        category = _require(data, "category", f"base template '{name}'")
        if category not in CATEGORIES:
            raise RegistryFormatError(
                f"Base template '{name}' has unknown category '{category}'",
                context={"template": name, "category": category},
            )
        return cls(
            name=name,
            resource_path=_require(data, "resourcePath", f"base template '{name}'"),
            category=category,
            slots=tuple(Slot.from_dict(s) for s in data.get("slots") or ()),
            partials=tuple(Partial.from_dict(p) for p in data.get("partials") or ()),
            default_context=dict(data.get("defaultContext") or {}),
            variants=tuple(Variant.from_dict(v) for v in data.get("variants") or ()),
            metadata=TemplateMetadata.from_dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "name": self.name,
            "resourcePath": self.resource_path,
            "category": self.category,
            "slots": [s.to_dict() for s in self.slots],
            "partials": [p.to_dict() for p in self.partials],
            "defaultContext": dict(self.default_context),
            "variants": [v.to_dict() for v in self.variants],
            "metadata": self.metadata.to_dict(),
        })


@dataclass(frozen=True)
class ChildTemplate:
    """A template extending another (base or child) with slot overrides."""

    name: str
    extends: str
    category: str = ""
    overrides: Dict[str, str] = field(default_factory=dict)
    additional_context: Dict[str, Any] = field(default_factory=dict)
    additional_slots: Tuple[Slot, ...] = ()
    remove_slots: Tuple[str, ...] = ()

    kind = TemplateKind.CHILD

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChildTemplate":
        name = _require(data, "name", "child template")
        return cls(
            name=name,
            extends=_require(data, "extends", f"child template '{name}'"),
            category=str(data.get("category") or ""),
            overrides={str(k): str(v) for k, v in (data.get("overrides") or {}).items()},
            additional_context=dict(data.get("additionalContext") or {}),
            additional_slots=tuple(Slot.from_dict(s) for s in data.get("additionalSlots") or ()),
            remove_slots=tuple(data.get("removeSlots") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "name": self.name,
            "extends": self.extends,
            "category": self.category or None,
            "overrides": dict(self.overrides),
            "additionalContext": dict(self.additional_context),
            "additionalSlots": [s.to_dict() for s in self.additional_slots],
            "removeSlots": list(self.remove_slots),
        })


@dataclass(frozen=True)
class CompositeComponent:
    template: str
    slot: str = DEFAULT_COMPONENT_SLOT
    context: Dict[str, Any] = field(default_factory=dict)
    condition: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositeComponent":
        return cls(
            template=_require(data, "template", "composite component"),
            slot=data.get("slot") or DEFAULT_COMPONENT_SLOT,
            context=dict(data.get("context") or {}),
            condition=data.get("condition"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _prune({
            "template": self.template,
            "slot": self.slot,
            "context": dict(self.context),
            "condition": self.condition,
        })


@dataclass(frozen=True)
class CompositeTemplate:
    """A layout filled with condition-gated sub-templates."""

    name: str
    layout: str
    components: Tuple[CompositeComponent, ...] = ()
    global_context: Dict[str, Any] = field(default_factory=dict)

    kind = TemplateKind.COMPOSITE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositeTemplate":
        name = _require(data, "name", "composite template")
        return cls(
            name=name,
            layout=_require(data, "layout", f"composite template '{name}'"),
            components=tuple(CompositeComponent.from_dict(c) for c in data.get("components") or ()),
            global_context=dict(data.get("globalContext") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = _prune({
            "name": self.name,
            "layout": self.layout,
            "globalContext": dict(self.global_context),
        })
        out["components"] = [c.to_dict() for c in self.components]
        return out


__all__ = [
    "TemplateKind",
    "CATEGORIES",
    "DEFAULT_COMPONENT_SLOT",
    "SlotValidation",
    "Slot",
    "Partial",
    "VariantCompliance",
    "Variant",
    "TemplateCompliance",
    "TemplateMetadata",
    "BaseTemplate",
    "ChildTemplate",
    "CompositeComponent",
    "CompositeTemplate",
]
