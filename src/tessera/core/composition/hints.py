"""Hint providers: external suggestions folded into composition.

A hint provider answers ``get_hints(context_text, platform)`` with short
free-text suggestions. The composer uses it twice: hints about the request
description feed the pattern matcher, and hints about the selected template
become ``ai_recommendations`` on the result metadata. Provider failures
never fail a composition.
"""
from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

DEFAULT_AI_RECOMMENDATIONS: Sequence[str] = (
    "Consider adding error boundaries for production use",
    "Implement proper loading states for better UX",
    "Add comprehensive TypeScript types for better maintainability",
)


@runtime_checkable
class HintProvider(Protocol):
    def get_hints(self, context_text: str, platform: str) -> List[str]:
        ...


class StaticHintProvider:
    """Returns the same hints for every request."""

    def __init__(self, hints: Sequence[str] = ()) -> None:
        self.hints = list(hints)

    def get_hints(self, context_text: str, platform: str) -> List[str]:
        return list(self.hints)


__all__ = ["HintProvider", "StaticHintProvider", "DEFAULT_AI_RECOMMENDATIONS"]
