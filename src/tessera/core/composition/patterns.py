"""Keyword-driven pattern matching.

Free text is matched against a fixed table of UI patterns. Each pattern
lists keywords (matched case-insensitively on word boundaries) and the
industries it is typical for. Confidence grows with the number of distinct
keywords found::

    confidence = min(1.0, 0.3 + 0.15 * hits) (+ 0.1 when the industry matches)

Patterns without any keyword hit are never reported.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import PatternMatch

BASE_CONFIDENCE = 0.3
CONFIDENCE_PER_HIT = 0.15
INDUSTRY_BOOST = 0.1


@dataclass(frozen=True)
class PatternDefinition:
    name: str
    description: str
    keywords: Tuple[str, ...]
    industries: Tuple[str, ...] = ()

    @cached_property
    def _keyword_res(self) -> Tuple[re.Pattern[str], ...]:
        return tuple(re.compile(rf"\b{re.escape(k)}\b", re.IGNORECASE) for k in self.keywords)

    def hits(self, text: str) -> int:
        return sum(1 for rx in self._keyword_res if rx.search(text))


PATTERN_TABLE: Tuple[PatternDefinition, ...] = (
    PatternDefinition(
        "Form",
        "Input fields with validation and a submit action",
        ("form", "login", "signup", "sign up", "register", "input", "submit", "email", "password",
         "contact", "checkout", "field"),
        ("government", "finance", "healthcare"),
    ),
    PatternDefinition(
        "Dashboard",
        "Grid of widgets summarising metrics",
        ("dashboard", "analytics", "metrics", "overview", "kpi", "report", "chart", "widget", "stats"),
        ("finance", "saas", "analytics"),
    ),
    PatternDefinition(
        "Card",
        "Self-contained card with a title and body",
        ("card", "profile", "product", "tile", "summary", "preview"),
        ("ecommerce", "retail", "social"),
    ),
    PatternDefinition(
        "Table",
        "Tabular data with sorting and pagination",
        ("table", "grid", "rows", "columns", "list", "pagination", "sort"),
        ("finance", "logistics"),
    ),
    PatternDefinition(
        "Navigation",
        "Menus, tabs and breadcrumbs for moving between views",
        ("navigation", "menu", "navbar", "sidebar", "breadcrumb", "tabs"),
    ),
    PatternDefinition(
        "Modal",
        "Dialog layered over the current view",
        ("modal", "dialog", "popup", "overlay", "confirm"),
    ),
    PatternDefinition(
        "Authentication",
        "Sign-in and session handling",
        ("login", "logout", "password", "sign in", "auth", "authentication", "2fa", "mfa"),
        ("finance", "government", "healthcare"),
    ),
)


def merge_matches(*groups: Iterable[PatternMatch]) -> List[PatternMatch]:
    """Combine match lists, keeping the highest confidence per pattern.

    The result is ranked by confidence, descending; ties keep first-seen order.
    """
    best: Dict[str, PatternMatch] = {}
    order: List[str] = []
    for group in groups:
        for match in group:
            current = best.get(match.pattern)
            if current is None:
                order.append(match.pattern)
                best[match.pattern] = match
            elif match.confidence > current.confidence:
                best[match.pattern] = match
    ranked = [best[name] for name in order]
    ranked.sort(key=lambda m: -m.confidence)
    return ranked


class PatternMatcher:
    """Map text to ranked ``PatternMatch`` values using a pattern table."""

    def __init__(self, table: Sequence[PatternDefinition] = PATTERN_TABLE, *, limit: int = 10) -> None:
        self.table = tuple(table)
        self.limit = limit

    def match(self, text: str, industry: Optional[str] = None) -> List[PatternMatch]:
        industry_key = (industry or "").strip().lower()
        matches: List[PatternMatch] = []
        for definition in self.table:
            hits = definition.hits(text)
            if not hits:
                continue
            confidence = min(1.0, BASE_CONFIDENCE + CONFIDENCE_PER_HIT * hits)
            if industry_key and industry_key in definition.industries:
                confidence = min(1.0, confidence + INDUSTRY_BOOST)
            matches.append(PatternMatch(definition.name, definition.description, round(confidence, 2)))
        return merge_matches(matches)[: self.limit]


__all__ = [
    "PatternDefinition",
    "PATTERN_TABLE",
    "PatternMatcher",
    "merge_matches",
]
