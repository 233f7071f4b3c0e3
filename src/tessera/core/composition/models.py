"""Data model for dynamic composition requests and results.

Requests are plain frozen dataclasses; ``CompositionRequest.from_dict``
builds one from a nested mapping (snake_case keys). Results are frozen too
because cached results are shared between callers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .classification import Classification

COMPLEXITY_LEVELS: Tuple[str, ...] = ("simple", "moderate", "complex", "advanced")


def _tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompositionRequirements:
    functionality: Tuple[str, ...] = ()
    complexity: str = "simple"
    platform: str = "react"
    design_system: str = "custom"
    accessibility_level: str = "AA"
    classification: Optional[Classification] = None
    privacy_compliance: bool = False
    international_support: bool = False
    responsive_design: bool = True
    dark_mode_support: bool = False
    performance_optimized: bool = False

    def __post_init__(self) -> None:
        # Accept level names as well as Classification members.
        object.__setattr__(self, "classification", Classification.parse(self.classification))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositionRequirements":
        complexity = str(data.get("complexity") or "simple")
        if complexity not in COMPLEXITY_LEVELS:
            raise ValueError(f"Unknown complexity '{complexity}' (expected one of: {', '.join(COMPLEXITY_LEVELS)})")
        return cls(
            functionality=_tuple(data.get("functionality")),
            complexity=complexity,
            platform=str(data.get("platform") or "react"),
            design_system=str(data.get("design_system") or "custom"),
            accessibility_level=str(data.get("accessibility_level") or "AA"),
            classification=Classification.parse(data.get("classification")),
            privacy_compliance=bool(data.get("privacy_compliance", False)),
            international_support=bool(data.get("international_support", False)),
            responsive_design=bool(data.get("responsive_design", True)),
            dark_mode_support=bool(data.get("dark_mode_support", False)),
            performance_optimized=bool(data.get("performance_optimized", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "functionality": list(self.functionality),
            "complexity": self.complexity,
            "platform": self.platform,
            "design_system": self.design_system,
            "accessibility_level": self.accessibility_level,
            "classification": self.classification.name if self.classification else None,
            "privacy_compliance": self.privacy_compliance,
            "international_support": self.international_support,
            "responsive_design": self.responsive_design,
            "dark_mode_support": self.dark_mode_support,
            "performance_optimized": self.performance_optimized,
        }


@dataclass(frozen=True)
class BusinessContext:
    industry: str = ""
    user_type: str = "citizen"
    data_types: Tuple[str, ...] = ()
    compliance_requirements: Tuple[str, ...] = ()
    integrations_needed: Tuple[str, ...] = ()
    expected_volume: str = "low"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BusinessContext":
        return cls(
            industry=str(data.get("industry") or ""),
            user_type=str(data.get("user_type") or "citizen"),
            data_types=_tuple(data.get("data_types")),
            compliance_requirements=_tuple(data.get("compliance_requirements")),
            integrations_needed=_tuple(data.get("integrations_needed")),
            expected_volume=str(data.get("expected_volume") or "low"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "user_type": self.user_type,
            "data_types": list(self.data_types),
            "compliance_requirements": list(self.compliance_requirements),
            "integrations_needed": list(self.integrations_needed),
            "expected_volume": self.expected_volume,
        }


@dataclass(frozen=True)
class CompositionRequest:
    """A free-form generation request plus structured requirements."""

    description: str
    requirements: CompositionRequirements = field(default_factory=CompositionRequirements)
    context: BusinessContext = field(default_factory=BusinessContext)
    preferences: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositionRequest":
        return cls(
            description=str(data.get("description") or ""),
            requirements=CompositionRequirements.from_dict(data.get("requirements") or {}),
            context=BusinessContext.from_dict(data.get("context") or {}),
            preferences=dict(data.get("preferences") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "requirements": self.requirements.to_dict(),
            "context": self.context.to_dict(),
            "preferences": dict(self.preferences),
        }


# ---------------------------------------------------------------------------
# Pipeline values
# ---------------------------------------------------------------------------


class CompositionStage(str, Enum):
    RECEIVED = "received"
    PATTERNS_ANALYZED = "patterns-analyzed"
    BASE_SELECTED = "base-selected"
    MIXINS_SELECTED = "mixins-selected"
    BUILT = "built"
    VALIDATED = "validated"
    SCORED = "scored"
    CACHED = "cached"


@dataclass(frozen=True)
class PatternMatch:
    pattern: str
    description: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"pattern": self.pattern, "description": self.description, "confidence": self.confidence}


@dataclass(frozen=True)
class Composition:
    """The resolved bundle for one request: base template, mixins, slots, context."""

    base_template: str
    mixins: Tuple[str, ...] = ()
    overrides: Dict[str, str] = field(default_factory=dict)
    slots: Dict[str, str] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_template": self.base_template,
            "mixins": list(self.mixins),
            "overrides": dict(self.overrides),
            "slots": dict(self.slots),
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class ComplianceValidation:
    accessibility_compliant: bool = False
    privacy_compliant: bool = False
    classification_compliant: bool = False
    jurisdiction_compliant: bool = False
    violations: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    security_requirements: Optional[Dict[str, Any]] = None

    @property
    def passed_checks(self) -> int:
        return sum(
            (
                self.accessibility_compliant,
                self.privacy_compliant,
                self.classification_compliant,
                self.jurisdiction_compliant,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accessibility_compliant": self.accessibility_compliant,
            "privacy_compliant": self.privacy_compliant,
            "classification_compliant": self.classification_compliant,
            "jurisdiction_compliant": self.jurisdiction_compliant,
            "violations": list(self.violations),
            "recommendations": list(self.recommendations),
            "security_requirements": self.security_requirements,
        }


@dataclass(frozen=True)
class PerformanceMetrics:
    bundle_size: str = "small"  # small | medium | large
    render_complexity: str = "low"  # low | medium | high
    memory_usage: str = "minimal"  # minimal | moderate | intensive
    load_time: str = "fast"  # fast | medium | slow

    def to_dict(self) -> Dict[str, str]:
        return {
            "bundle_size": self.bundle_size,
            "render_complexity": self.render_complexity,
            "memory_usage": self.memory_usage,
            "load_time": self.load_time,
        }


@dataclass(frozen=True)
class CompositionMetadata:
    selected_patterns: Tuple[PatternMatch, ...] = ()
    applied_templates: Tuple[str, ...] = ()
    mixins_used: Tuple[str, ...] = ()
    ai_recommendations: Tuple[str, ...] = ()
    compliance_validation: ComplianceValidation = field(default_factory=ComplianceValidation)
    performance_metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    diagnostics: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_patterns": [p.to_dict() for p in self.selected_patterns],
            "applied_templates": list(self.applied_templates),
            "mixins_used": list(self.mixins_used),
            "ai_recommendations": list(self.ai_recommendations),
            "compliance_validation": self.compliance_validation.to_dict(),
            "performance_metrics": self.performance_metrics.to_dict(),
            "diagnostics": list(self.diagnostics),
        }


@dataclass(frozen=True)
class AlternativeOption:
    description: str
    base_template: str
    mixins: Tuple[str, ...] = ()
    advantages: Tuple[str, ...] = ()
    tradeoffs: Tuple[str, ...] = ()
    complexity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "base_template": self.base_template,
            "mixins": list(self.mixins),
            "advantages": list(self.advantages),
            "tradeoffs": list(self.tradeoffs),
            "complexity": self.complexity,
        }


@dataclass(frozen=True)
class CompositionResult:
    success: bool
    composition: Composition
    metadata: CompositionMetadata = field(default_factory=CompositionMetadata)
    recommendations: Tuple[str, ...] = ()
    alternative_options: Tuple[AlternativeOption, ...] = ()
    estimated_complexity: int = 1
    estimated_tokens: int = 500
    compliance_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "composition": self.composition.to_dict(),
            "metadata": self.metadata.to_dict(),
            "recommendations": list(self.recommendations),
            "alternative_options": [a.to_dict() for a in self.alternative_options],
            "estimated_complexity": self.estimated_complexity,
            "estimated_tokens": self.estimated_tokens,
            "compliance_score": self.compliance_score,
        }


def pattern_names(patterns: List[PatternMatch]) -> List[str]:
    return [p.pattern for p in patterns]


__all__ = [
    "COMPLEXITY_LEVELS",
    "CompositionRequirements",
    "BusinessContext",
    "CompositionRequest",
    "CompositionStage",
    "PatternMatch",
    "Composition",
    "ComplianceValidation",
    "PerformanceMetrics",
    "CompositionMetadata",
    "AlternativeOption",
    "CompositionResult",
    "pattern_names",
]
