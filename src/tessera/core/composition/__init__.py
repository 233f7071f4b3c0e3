"""Dynamic composition: choose a template and mixins for a free-form request.

Pipeline stages (see ``composer``):
- patterns: keyword pattern matching, extended with external hints
- selector: base-template selection with default fallback
- mixins: ordered mixin rule table plus pattern mixins
- builder: component name, context and generated slots
- compliance: four-axis compliance validation and score
- alternatives: comparison entries for other base templates
- cache: LRU + TTL cache of results by request fingerprint
"""
from __future__ import annotations

from .alternatives import AlternativesGenerator, template_complexity
from .builder import CompositionBuilder, component_name
from .cache import CompositionCache, request_fingerprint
from .cancellation import CancellationToken
from .classification import Classification, ClassificationProvider, SecurityRequirements
from .compliance import ComplianceValidator, compliance_score
from .composer import DynamicComposer, estimate_complexity, estimate_tokens, performance_metrics
from .errors import CompositionCancelledError, CompositionError, NoBaseTemplatesAvailableError
from .hints import DEFAULT_AI_RECOMMENDATIONS, HintProvider, StaticHintProvider
from .mixins import MixinRule, MixinSelector
from .models import (
    AlternativeOption,
    BusinessContext,
    ComplianceValidation,
    Composition,
    CompositionMetadata,
    CompositionRequest,
    CompositionRequirements,
    CompositionResult,
    CompositionStage,
    PatternMatch,
    PerformanceMetrics,
)
from .patterns import PatternDefinition, PatternMatcher
from .selector import (
    CategorySelectionHeuristic,
    SelectionContext,
    SelectionHeuristic,
    SelectionRecommendation,
    TemplateSelector,
)

__all__ = [
    # pipeline
    "DynamicComposer",
    "PatternMatcher",
    "PatternDefinition",
    "TemplateSelector",
    "SelectionHeuristic",
    "CategorySelectionHeuristic",
    "SelectionContext",
    "SelectionRecommendation",
    "MixinSelector",
    "MixinRule",
    "CompositionBuilder",
    "ComplianceValidator",
    "AlternativesGenerator",
    "CompositionCache",
    "CancellationToken",
    "HintProvider",
    "StaticHintProvider",
    "ClassificationProvider",
    "Classification",
    "SecurityRequirements",
    # helpers
    "component_name",
    "compliance_score",
    "estimate_complexity",
    "estimate_tokens",
    "performance_metrics",
    "request_fingerprint",
    "template_complexity",
    "DEFAULT_AI_RECOMMENDATIONS",
    # models
    "CompositionRequest",
    "CompositionRequirements",
    "BusinessContext",
    "CompositionStage",
    "PatternMatch",
    "Composition",
    "ComplianceValidation",
    "PerformanceMetrics",
    "CompositionMetadata",
    "AlternativeOption",
    "CompositionResult",
    # errors
    "CompositionError",
    "NoBaseTemplatesAvailableError",
    "CompositionCancelledError",
]
