"""Domain-specific configuration for the dynamic composition pipeline."""
from __future__ import annotations

from functools import cached_property
from typing import List, Optional

from ..base import BaseDomainConfig


class CompositionConfig(BaseDomainConfig):
    """Accessor for the ``composition`` section."""

    def _config_section(self) -> str:
        return "composition"

    @cached_property
    def default_base_template(self) -> str:
        return str(self.section.get("default_base_template", "base-component"))

    @cached_property
    def max_patterns(self) -> int:
        return int(self.section.get("max_patterns", 10))

    @cached_property
    def max_pattern_mixins(self) -> int:
        return int(self.section.get("max_pattern_mixins", 3))

    @cached_property
    def max_alternatives(self) -> int:
        return int(self.section.get("max_alternatives", 3))

    @cached_property
    def accessibility_levels(self) -> List[str]:
        """Ordered accessibility levels; the last one is the maximum."""
        levels = self.section.get("accessibility_levels") or ["A", "AA", "AAA"]
        return [str(level) for level in levels]

    @cached_property
    def jurisdiction_user_types(self) -> List[str]:
        """User types whose services require jurisdiction-specific compliance."""
        return [str(t) for t in (self.section.get("jurisdiction_user_types") or ["government"])]

    @cached_property
    def cache_max_entries(self) -> int:
        cache = self.section.get("cache") or {}
        return int(cache.get("max_entries", 256))

    @cached_property
    def cache_ttl_seconds(self) -> Optional[float]:
        """Entry lifetime in seconds; ``null`` keeps entries until evicted."""
        cache = self.section.get("cache") or {}
        ttl = cache.get("ttl_seconds", 3600)
        return None if ttl is None else float(ttl)


__all__ = ["CompositionConfig"]
