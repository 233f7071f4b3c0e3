"""Tests for mixin selection."""
from __future__ import annotations

from tessera.core.composition import CompositionRequest, CompositionRequirements, MixinRule, MixinSelector, PatternMatch
from tessera.core.composition.mixins import pattern_mixin_id


def _request(**requirements) -> CompositionRequest:
    return CompositionRequest(description="x", requirements=CompositionRequirements(**requirements))


def _patterns(*names: str) -> list:
    return [PatternMatch(name, "", 0.5) for name in names]


def test_rule_order_is_fixed() -> None:
    request = _request(
        privacy_compliance=True,
        accessibility_level="AAA",
        performance_optimized=True,
        dark_mode_support=True,
        international_support=True,
    )
    assert MixinSelector().select(request, []) == [
        "privacy-compliance-mixin",
        "accessibility-aaa-mixin",
        "performance-optimization-mixin",
        "dark-mode-mixin",
        "i18n-mixin",
    ]


def test_no_flags_no_rule_mixins() -> None:
    assert MixinSelector().select(_request(), []) == []


def test_login_scenario(login_request) -> None:
    mixins = MixinSelector().select(login_request, _patterns("Form", "Authentication"))
    assert mixins == [
        "privacy-compliance-mixin",
        "accessibility-aaa-mixin",
        "form-mixin",
        "authentication-mixin",
    ]


def test_pattern_mixins_are_capped() -> None:
    mixins = MixinSelector(max_pattern_mixins=2).select(_request(), _patterns("Form", "Card", "Modal"))
    assert mixins == ["form-mixin", "card-mixin"]


def test_pattern_mixins_are_not_duplicated() -> None:
    rules = (MixinRule("form-mixin", lambda r: True),)
    assert MixinSelector(rules).select(_request(), _patterns("Form")) == ["form-mixin"]


def test_pattern_mixin_id() -> None:
    assert pattern_mixin_id("Data Table") == "data-table-mixin"
