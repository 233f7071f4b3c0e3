"""Dynamic composition pipeline.

``DynamicComposer.compose_template(request)`` turns a free-form request into
a scored ``CompositionResult``::

    received -> patterns-analyzed -> base-selected -> mixins-selected
             -> built -> validated -> scored -> cached

Every collaborator is injected (pattern matcher, template selector, mixin
selector, builder, compliance validator, alternatives generator, hint
provider, cache) so each stage can be replaced in isolation.

Any unexpected failure short-circuits to a fallback composition with
``success=False`` instead of propagating; only cancellation propagates.
Fallback results are never cached.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from tessera.core.config import CompositionConfig
from tessera.core.templates import BaseTemplate, TemplateRegistry

from .alternatives import AlternativesGenerator
from .builder import CompositionBuilder, component_name
from .cache import CompositionCache
from .cancellation import CancellationToken
from .classification import ClassificationProvider
from .compliance import ComplianceValidator, compliance_score
from .errors import CompositionCancelledError
from .hints import DEFAULT_AI_RECOMMENDATIONS, HintProvider, StaticHintProvider
from .mixins import PRIVACY_COMPLIANCE_MIXIN, MixinSelector
from .models import (
    Composition,
    CompositionMetadata,
    CompositionRequest,
    CompositionResult,
    CompositionStage,
    PatternMatch,
    PerformanceMetrics,
)
from .patterns import PatternMatcher, merge_matches
from .selector import TemplateSelector

logger = logging.getLogger(__name__)

FALLBACK_RECOMMENDATION = "Consider simplifying requirements or contact support"
FALLBACK_TOKENS = 500

COMPLEXITY_BONUS: Dict[str, float] = {"complex": 2, "advanced": 3}
TOKEN_BONUS: Dict[str, int] = {"complex": 300, "advanced": 500}


# ---------------------------------------------------------------------------
# Estimates
# ---------------------------------------------------------------------------


def estimate_complexity(composition: Composition, request: CompositionRequest) -> int:
    """1-10: weighted count of functionality, mixins and compliance requirements."""
    raw = (
        1
        + 0.5 * len(request.requirements.functionality)
        + 0.3 * len(composition.mixins)
        + 0.2 * len(request.context.compliance_requirements)
        + COMPLEXITY_BONUS.get(request.requirements.complexity, 0)
    )
    # Half-up rounding; round() would round half to even.
    return max(1, min(10, math.floor(raw + 0.5)))


def estimate_tokens(composition: Composition, request: CompositionRequest) -> int:
    return (
        500
        + 100 * len(request.requirements.functionality)
        + 150 * len(composition.mixins)
        + 50 * len(composition.slots)
        + TOKEN_BONUS.get(request.requirements.complexity, 0)
    )


def performance_metrics(composition: Composition, request: CompositionRequest) -> PerformanceMetrics:
    mixin_count = len(composition.mixins)
    functionality_count = len(request.requirements.functionality)
    return PerformanceMetrics(
        bundle_size="large" if mixin_count > 5 else "medium" if mixin_count > 2 else "small",
        render_complexity="high" if functionality_count > 5 else "medium" if functionality_count > 2 else "low",
        memory_usage="intensive" if request.requirements.complexity == "advanced" else "moderate",
        load_time="fast" if request.requirements.performance_optimized else "medium",
    )


class DynamicComposer:
    """Select and assemble a composition for a generation request."""

    def __init__(
        self,
        registry: TemplateRegistry,
        *,
        config: Optional[CompositionConfig] = None,
        pattern_matcher: Optional[PatternMatcher] = None,
        selector: Optional[TemplateSelector] = None,
        mixin_selector: Optional[MixinSelector] = None,
        builder: Optional[CompositionBuilder] = None,
        validator: Optional[ComplianceValidator] = None,
        alternatives: Optional[AlternativesGenerator] = None,
        hint_provider: Optional[HintProvider] = None,
        cache: Optional[CompositionCache] = None,
        classifications: Optional[ClassificationProvider] = None,
    ) -> None:
        cfg = config or CompositionConfig()
        classifications = classifications or ClassificationProvider()
        self.registry = registry
        self.default_base_template = cfg.default_base_template
        self.pattern_matcher = pattern_matcher or PatternMatcher(limit=cfg.max_patterns)
        self.max_patterns = cfg.max_patterns
        self.selector = selector or TemplateSelector(registry, default_template=cfg.default_base_template)
        self.mixin_selector = mixin_selector or MixinSelector(max_pattern_mixins=cfg.max_pattern_mixins)
        self.builder = builder or CompositionBuilder(classifications)
        self.validator = validator or ComplianceValidator(
            accessibility_levels=cfg.accessibility_levels,
            jurisdiction_user_types=cfg.jurisdiction_user_types,
            classifications=classifications,
        )
        self.alternatives = alternatives or AlternativesGenerator(
            registry,
            self.mixin_selector,
            limit=cfg.max_alternatives,
            classifications=classifications,
        )
        self.hint_provider: HintProvider = hint_provider or StaticHintProvider()
        self.cache = cache or CompositionCache(
            max_entries=cfg.cache_max_entries,
            ttl_seconds=cfg.cache_ttl_seconds,
        )

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None, **overrides) -> "DynamicComposer":
        registry = TemplateRegistry.from_config(repo_root)
        return cls(registry, config=CompositionConfig(repo_root=repo_root), **overrides)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def compose_template(
        self,
        request: CompositionRequest,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> CompositionResult:
        """Compose a template for ``request``.

        Raises:
            CompositionCancelledError: ``cancellation`` was triggered; nothing is cached
        """
        token = cancellation or CancellationToken()
        stage = CompositionStage.RECEIVED
        logger.debug("Starting dynamic composition for: %s", request.description)

        try:
            key = self.cache.fingerprint(request)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Returning cached composition result")
                return cached

            diagnostics: List[str] = []
            token.raise_if_cancelled(stage.value)

            patterns = self.analyze_requirements(request, diagnostics, token)
            stage = CompositionStage.PATTERNS_ANALYZED
            token.raise_if_cancelled(stage.value)

            selection = self.selector.select(request, patterns)
            base = selection.template
            diagnostics.extend(selection.diagnostics)
            stage = CompositionStage.BASE_SELECTED
            token.raise_if_cancelled(stage.value)

            mixins = self.mixin_selector.select(request, patterns)
            stage = CompositionStage.MIXINS_SELECTED
            token.raise_if_cancelled(stage.value)

            ai_recommendations = self.ai_recommendations(request, base, mixins, diagnostics)
            token.raise_if_cancelled(stage.value)

            composition = self.builder.build(request, base, mixins, patterns)
            stage = CompositionStage.BUILT

            validation = self.validator.validate(composition, request)
            stage = CompositionStage.VALIDATED

            alternatives = self.alternatives.generate(request, base, patterns)
            score = compliance_score(validation)
            result = CompositionResult(
                success=True,
                composition=composition,
                metadata=CompositionMetadata(
                    selected_patterns=tuple(patterns),
                    applied_templates=(base.name,),
                    mixins_used=tuple(mixins),
                    ai_recommendations=tuple(ai_recommendations),
                    compliance_validation=validation,
                    performance_metrics=performance_metrics(composition, request),
                    diagnostics=tuple(diagnostics),
                ),
                recommendations=tuple(self.recommendations(request, composition, validation.recommendations)),
                alternative_options=tuple(alternatives),
                estimated_complexity=estimate_complexity(composition, request),
                estimated_tokens=estimate_tokens(composition, request),
                compliance_score=score,
            )
            stage = CompositionStage.SCORED
            token.raise_if_cancelled(stage.value)

            self.cache.set(key, result)
            stage = CompositionStage.CACHED
            logger.info(
                "Dynamic composition completed for '%s' with %d%% compliance score (stage: %s)",
                request.description,
                score,
                stage.value,
            )
            return result

        except CompositionCancelledError:
            logger.info("Dynamic composition cancelled for: %s", request.description)
            raise
        except Exception as exc:
            logger.error("Dynamic composition failed after stage '%s': %s", stage.value, exc, exc_info=True)
            return self.fallback_result(request, f"Composition failed after stage '{stage.value}': {exc}")

    def analyze_requirements(
        self,
        request: CompositionRequest,
        diagnostics: List[str],
        token: Optional[CancellationToken] = None,
    ) -> List[PatternMatch]:
        """Rank patterns for the request text, extended with external hints."""
        req = request.requirements
        biz = request.context
        text = "\n".join(
            (
                request.description,
                f"Functionality: {', '.join(req.functionality)}",
                f"Industry: {biz.industry}",
                f"User Type: {biz.user_type}",
                f"Data Types: {', '.join(biz.data_types)}",
                f"Complexity: {req.complexity}",
            )
        )
        patterns = self.pattern_matcher.match(text, biz.industry)

        hints = self._safe_hints(request.description, req.platform, diagnostics, purpose="pattern analysis")
        if token is not None:
            token.raise_if_cancelled(CompositionStage.RECEIVED.value)
        if hints:
            patterns = merge_matches(patterns, *(self.pattern_matcher.match(h) for h in hints))
        return patterns[: self.max_patterns]

    def ai_recommendations(
        self,
        request: CompositionRequest,
        base: BaseTemplate,
        mixins: Sequence[str],
        diagnostics: List[str],
    ) -> List[str]:
        context_text = "\n".join(
            (
                f"Component: {request.description}",
                f"Base Template: {base.name}",
                f"Mixins: {', '.join(mixins)}",
                f"Requirements: {request.requirements.to_dict()}",
                f"Business Context: {request.context.to_dict()}",
            )
        )
        try:
            return list(self.hint_provider.get_hints(context_text, request.requirements.platform))
        except Exception as exc:
            logger.warning("Hint provider failed for recommendations, using defaults: %s", exc)
            diagnostics.append(f"Hint provider failed for recommendations: {exc}")
            return list(DEFAULT_AI_RECOMMENDATIONS)

    def _safe_hints(self, text: str, platform: str, diagnostics: List[str], *, purpose: str) -> List[str]:
        try:
            return list(self.hint_provider.get_hints(text, platform))
        except Exception as exc:
            logger.warning("Hint provider failed during %s: %s", purpose, exc)
            diagnostics.append(f"Hint provider failed during {purpose}: {exc}")
            return []

    def recommendations(
        self,
        request: CompositionRequest,
        composition: Composition,
        compliance_recommendations: Sequence[str],
    ) -> List[str]:
        out = list(compliance_recommendations)
        if request.requirements.performance_optimized:
            out.append("Consider code splitting for better performance")
        if len(composition.mixins) > 3:
            out.append("Review mixin usage to avoid over-complexity")
        if request.requirements.accessibility_level == self.validator.max_accessibility_level:
            out.append("Implement comprehensive keyboard navigation")
            out.append("Add screen reader announcements for dynamic content")
        return out

    # ------------------------------------------------------------------
    # Fallback
    # ------------------------------------------------------------------
    def fallback_composition(self, request: CompositionRequest) -> Composition:
        classification = request.requirements.classification
        mixins: Tuple[str, ...] = (PRIVACY_COMPLIANCE_MIXIN,) if request.requirements.privacy_compliance else ()
        return Composition(
            base_template=self.default_base_template,
            mixins=mixins,
            overrides={},
            slots={},
            context={
                "componentName": component_name(request.description),
                "classification": getattr(classification, "name", classification),
            },
        )

    def fallback_result(self, request: CompositionRequest, reason: str) -> CompositionResult:
        return CompositionResult(
            success=False,
            composition=self.fallback_composition(request),
            metadata=CompositionMetadata(diagnostics=(reason,)),
            recommendations=(FALLBACK_RECOMMENDATION,),
            alternative_options=(),
            estimated_complexity=1,
            estimated_tokens=FALLBACK_TOKENS,
            compliance_score=0,
        )


__all__ = [
    "DynamicComposer",
    "estimate_complexity",
    "estimate_tokens",
    "performance_metrics",
    "FALLBACK_RECOMMENDATION",
]
