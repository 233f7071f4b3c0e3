"""Base-template selection.

``TemplateSelector`` builds a ``SelectionContext`` from the request and the
detected patterns, asks a ``SelectionHeuristic`` for a template id and
resolves it against the registry. An unknown id (or a failing heuristic)
falls back to the configured default base template; when that is missing
too, ``NoBaseTemplatesAvailableError`` is raised.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Set, Tuple, runtime_checkable

from tessera.core.templates import BaseTemplate, TemplateRegistry

from .errors import NoBaseTemplatesAvailableError
from .models import CompositionRequest, PatternMatch

logger = logging.getLogger(__name__)

# Registry category each pattern is best served by.
PATTERN_CATEGORIES: Mapping[str, str] = {
    "Form": "form",
    "Authentication": "form",
    "Dashboard": "dashboard",
    "Card": "component",
    "Table": "component",
    "Modal": "component",
    "Navigation": "layout",
}

CATEGORY_WEIGHT = 3.0
TAG_WEIGHT = 1.0


@dataclass(frozen=True)
class SelectionContext:
    input: str
    requirements: Tuple[str, ...] = ()
    platform: str = ""
    complexity: str = "simple"
    business_context: str = ""
    user_type: str = ""
    data_types: Tuple[str, ...] = ()
    compliance_requirements: Tuple[str, ...] = ()
    preferences: Dict[str, Any] = field(default_factory=dict)
    patterns: Tuple[PatternMatch, ...] = ()
    candidates: Tuple[BaseTemplate, ...] = ()


@dataclass(frozen=True)
class SelectionRecommendation:
    template_id: str
    confidence: float = 0.0
    reasoning: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SelectionOutcome:
    template: BaseTemplate
    recommendation: Optional[SelectionRecommendation]
    fell_back: bool = False
    diagnostics: Tuple[str, ...] = ()


@runtime_checkable
class SelectionHeuristic(Protocol):
    def select_template(self, context: SelectionContext) -> SelectionRecommendation:
        ...


def _words(text: str) -> Set[str]:
    return {w for w in re.split(r"[^a-z0-9]+", text.lower()) if w}


class CategorySelectionHeuristic:
    """Score candidates by pattern category and tag overlap.

    Each detected pattern adds ``confidence * 3`` to candidates of its
    category; each candidate tag found among the request words adds 1.
    Ties go to the earlier candidate.
    """

    def select_template(self, context: SelectionContext) -> SelectionRecommendation:
        if not context.candidates:
            return SelectionRecommendation(template_id="", reasoning=("no candidates",))

        words = _words(" ".join((context.input,) + context.requirements))
        words.update(p.pattern.lower() for p in context.patterns)

        best: BaseTemplate = context.candidates[0]
        best_score = -1.0
        best_reasons: List[str] = []
        for candidate in context.candidates:
            score = 0.0
            reasons: List[str] = []
            for match in context.patterns:
                if PATTERN_CATEGORIES.get(match.pattern) == candidate.category:
                    score += CATEGORY_WEIGHT * match.confidence
                    reasons.append(f"{match.pattern} pattern fits category '{candidate.category}'")
            overlap = [t for t in candidate.metadata.tags if t.lower() in words]
            if overlap:
                score += TAG_WEIGHT * len(overlap)
                reasons.append(f"tags matched: {', '.join(overlap)}")
            if score > best_score:
                best, best_score, best_reasons = candidate, score, reasons

        total = CATEGORY_WEIGHT * len(context.patterns) + TAG_WEIGHT * len(best.metadata.tags)
        confidence = round(min(1.0, best_score / total), 2) if total else 0.0
        return SelectionRecommendation(best.name, confidence, tuple(best_reasons))


class TemplateSelector:
    """Pick the base template for a request."""

    def __init__(
        self,
        registry: TemplateRegistry,
        heuristic: Optional[SelectionHeuristic] = None,
        *,
        default_template: str = "base-component",
    ) -> None:
        self.registry = registry
        self.heuristic = heuristic or CategorySelectionHeuristic()
        self.default_template = default_template

    def build_context(self, request: CompositionRequest, patterns: Sequence[PatternMatch]) -> SelectionContext:
        return SelectionContext(
            input=request.description,
            requirements=request.requirements.functionality,
            platform=request.requirements.platform,
            complexity=request.requirements.complexity,
            business_context=request.context.industry,
            user_type=request.context.user_type,
            data_types=request.context.data_types,
            compliance_requirements=request.context.compliance_requirements,
            preferences=dict(request.preferences),
            patterns=tuple(patterns),
            candidates=tuple(self.registry.list_base_templates()),
        )

    def select(self, request: CompositionRequest, patterns: Sequence[PatternMatch]) -> SelectionOutcome:
        """Resolve the heuristic's recommendation to a registered base template.

        Raises:
            NoBaseTemplatesAvailableError: recommendation and default both unknown
        """
        context = self.build_context(request, patterns)
        diagnostics: List[str] = []
        recommendation: Optional[SelectionRecommendation] = None
        try:
            recommendation = self.heuristic.select_template(context)
        except Exception as exc:
            logger.warning("Selection heuristic failed, using default template: %s", exc)
            diagnostics.append(f"Selection heuristic failed: {exc}")

        recommended = recommendation.template_id if recommendation else None
        if recommended:
            template = self.registry.get_base(recommended)
            if template is not None:
                return SelectionOutcome(template, recommendation)
            logger.warning(
                "Recommended template '%s' is not a registered base template, using '%s'",
                recommended,
                self.default_template,
            )
            diagnostics.append(
                f"Recommended template '{recommended}' not found; used default '{self.default_template}'"
            )

        fallback = self.registry.get_base(self.default_template)
        if fallback is None:
            raise NoBaseTemplatesAvailableError(
                recommended,
                self.default_template,
                available=[t.name for t in context.candidates],
            )
        if not recommended and not diagnostics:
            diagnostics.append(f"No template recommended; used default '{self.default_template}'")
        return SelectionOutcome(fallback, recommendation, fell_back=True, diagnostics=tuple(diagnostics))


__all__ = [
    "PATTERN_CATEGORIES",
    "SelectionContext",
    "SelectionRecommendation",
    "SelectionOutcome",
    "SelectionHeuristic",
    "CategorySelectionHeuristic",
    "TemplateSelector",
]
