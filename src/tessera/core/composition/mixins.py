"""Mixin selection.

Mixins are identifiers for cross-cutting behaviour bundles. Selection walks
a closed, ordered tuple of ``MixinRule`` records; every rule whose guard
holds for the request appends its id. Afterwards the top-ranked patterns
contribute ``<pattern>-mixin`` ids (lower-cased, spaces as hyphens) that are
not already present, up to ``max_pattern_mixins``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .models import CompositionRequest, PatternMatch

PRIVACY_COMPLIANCE_MIXIN = "privacy-compliance-mixin"
ACCESSIBILITY_AAA_MIXIN = "accessibility-aaa-mixin"
PERFORMANCE_MIXIN = "performance-optimization-mixin"
DARK_MODE_MIXIN = "dark-mode-mixin"
I18N_MIXIN = "i18n-mixin"

PATTERN_MIXIN_SUFFIX = "-mixin"


@dataclass(frozen=True)
class MixinRule:
    mixin_id: str
    guard: Callable[[CompositionRequest], bool]
    description: str = ""

    def applies(self, request: CompositionRequest) -> bool:
        return bool(self.guard(request))


DEFAULT_RULES: Tuple[MixinRule, ...] = (
    MixinRule(
        PRIVACY_COMPLIANCE_MIXIN,
        lambda r: r.requirements.privacy_compliance,
        "privacy and jurisdiction compliance requested",
    ),
    MixinRule(
        ACCESSIBILITY_AAA_MIXIN,
        lambda r: r.requirements.accessibility_level == "AAA",
        "highest accessibility level requested",
    ),
    MixinRule(
        PERFORMANCE_MIXIN,
        lambda r: r.requirements.performance_optimized,
        "performance optimisation requested",
    ),
    MixinRule(
        DARK_MODE_MIXIN,
        lambda r: r.requirements.dark_mode_support,
        "dark mode requested",
    ),
    MixinRule(
        I18N_MIXIN,
        lambda r: r.requirements.international_support,
        "internationalisation requested",
    ),
)


def pattern_mixin_id(pattern: str) -> str:
    return "-".join(pattern.lower().split()) + PATTERN_MIXIN_SUFFIX


class MixinSelector:
    """Turn requirement flags and top patterns into an ordered mixin list."""

    def __init__(self, rules: Sequence[MixinRule] = DEFAULT_RULES, *, max_pattern_mixins: int = 3) -> None:
        self.rules = tuple(rules)
        self.max_pattern_mixins = max_pattern_mixins

    def select(self, request: CompositionRequest, patterns: Sequence[PatternMatch]) -> List[str]:
        mixins: List[str] = [rule.mixin_id for rule in self.rules if rule.applies(request)]
        for match in patterns[: self.max_pattern_mixins]:
            mixin_id = pattern_mixin_id(match.pattern)
            if mixin_id not in mixins:
                mixins.append(mixin_id)
        return mixins


__all__ = [
    "MixinRule",
    "MixinSelector",
    "DEFAULT_RULES",
    "pattern_mixin_id",
    "PRIVACY_COMPLIANCE_MIXIN",
    "ACCESSIBILITY_AAA_MIXIN",
    "PERFORMANCE_MIXIN",
    "DARK_MODE_MIXIN",
    "I18N_MIXIN",
]
