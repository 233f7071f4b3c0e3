"""Alternative base templates for a composition.

For the first ``limit`` registered base templates other than the selected
one, mixins are recomputed and a lightweight comparison entry is produced.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from tessera.core.templates import BaseTemplate, TemplateRegistry

from .classification import ClassificationProvider
from .mixins import MixinSelector
from .models import AlternativeOption, CompositionRequest, PatternMatch

CATEGORY_ADVANTAGES = {
    "form": ("Built-in validation support", "Optimized for form interactions"),
    "layout": ("Responsive design patterns", "Navigation structure included"),
    "dashboard": ("Widget grid for data-heavy views", "Analytics region included"),
    "page": ("Complete page structure with header and footer",),
    "component": ("Small footprint and easy reuse",),
}

HIGH_TEMPLATE_COMPLEXITY = 6
MANY_REQUIRED_SLOTS = 2


def template_complexity(template: BaseTemplate) -> int:
    """1-10 estimate from the number of slots, variants and partials."""
    raw = 2 + len(template.slots) + len(template.variants) + len(template.partials)
    return max(1, min(10, raw))


class AlternativesGenerator:
    def __init__(
        self,
        registry: TemplateRegistry,
        mixin_selector: MixinSelector,
        *,
        limit: int = 3,
        classifications: Optional[ClassificationProvider] = None,
    ) -> None:
        self.registry = registry
        self.mixin_selector = mixin_selector
        self.limit = limit
        self.classifications = classifications or ClassificationProvider()

    def advantages(self, template: BaseTemplate, request: CompositionRequest) -> List[str]:
        out = list(CATEGORY_ADVANTAGES.get(template.category, ()))
        compliance = template.metadata.compliance
        if compliance is not None and compliance.accessibility_level == "AAA":
            out.append("Designed for the highest accessibility level")
        if compliance is not None and compliance.privacy_compliant and request.requirements.privacy_compliance:
            out.append("Privacy compliance already reviewed")
        return out

    def tradeoffs(self, template: BaseTemplate, request: CompositionRequest) -> List[str]:
        out: List[str] = []
        if template_complexity(template) >= HIGH_TEMPLATE_COMPLEXITY:
            out.append("Higher complexity may require more maintenance")
        required = [s.name for s in template.slots if s.required and not s.default_content]
        if len(required) >= MANY_REQUIRED_SLOTS:
            out.append(f"Requires content for {len(required)} slots: {', '.join(required)}")
        compliance = template.metadata.compliance
        template_level = compliance.classification if compliance is not None else None
        if self.classifications.exceeds(template_level, request.requirements.classification):
            requested = request.requirements.classification
            out.append(
                f"Classified {template_level}, above the requested {requested.name if requested else 'level'}"
            )
        return out

    def generate(
        self,
        request: CompositionRequest,
        selected: BaseTemplate,
        patterns: Sequence[PatternMatch],
    ) -> List[AlternativeOption]:
        candidates = [t for t in self.registry.list_base_templates() if t.name != selected.name]
        alternatives: List[AlternativeOption] = []
        for template in candidates[: self.limit]:
            alternatives.append(
                AlternativeOption(
                    description=f"Alternative using {template.name}",
                    base_template=template.name,
                    mixins=tuple(self.mixin_selector.select(request, patterns)),
                    advantages=tuple(self.advantages(template, request)),
                    tradeoffs=tuple(self.tradeoffs(template, request)),
                    complexity=template_complexity(template),
                )
            )
        return alternatives


__all__ = ["AlternativesGenerator", "template_complexity", "CATEGORY_ADVANTAGES"]
