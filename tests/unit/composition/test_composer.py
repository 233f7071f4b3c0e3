"""End-to-end tests for the DynamicComposer pipeline."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tessera.core.composition import (
    DEFAULT_AI_RECOMMENDATIONS,
    CancellationToken,
    CompositionCache,
    CompositionCancelledError,
    CompositionRequest,
    CompositionRequirements,
    DynamicComposer,
    PatternMatcher,
    SelectionRecommendation,
    StaticHintProvider,
    TemplateSelector,
)
from tessera.core.composition.composer import FALLBACK_RECOMMENDATION
from tessera.core.config import CompositionConfig


class _ExplodingMatcher(PatternMatcher):
    def match(self, text, industry=None):
        raise RuntimeError("matcher exploded")


class _ExplodingMixins:
    def select(self, request, patterns):
        raise RuntimeError("mixins exploded")


class _FailingHints:
    def get_hints(self, context_text, platform):
        raise ConnectionError("hint service unreachable")


class _CancellingHints:
    def __init__(self, token: CancellationToken) -> None:
        self.token = token

    def get_hints(self, context_text, platform):
        self.token.cancel("caller gave up")
        return []


class _GhostHeuristic:
    def select_template(self, context):
        return SelectionRecommendation("ghost")


def _composer(registry, tmp_path: Path, **overrides) -> DynamicComposer:
    overrides.setdefault("cache", CompositionCache(max_entries=16, ttl_seconds=None))
    return DynamicComposer(registry, config=CompositionConfig(repo_root=tmp_path), **overrides)


class TestLoginScenario:
    def test_result(self, composer, login_request) -> None:
        result = composer.compose_template(login_request)

        assert result.success
        assert result.metadata.selected_patterns[0].pattern == "Form"
        assert result.composition.base_template == "base-form"
        assert result.metadata.applied_templates == ("base-form",)
        assert "accessibility-aaa-mixin" in result.composition.mixins
        assert "privacy-compliance-mixin" in result.composition.mixins
        assert result.metadata.mixins_used == result.composition.mixins
        assert result.compliance_score == 75
        assert result.composition.context["componentName"] == "UserLoginForm"

    def test_estimates(self, composer, login_request) -> None:
        result = composer.compose_template(login_request)
        # 1 + 0.5*2 functionality + 0.3*4 mixins = 3.2
        assert result.estimated_complexity == 3
        # 500 + 100*2 + 150*4 + 50*4 slots
        assert result.estimated_tokens == 1500
        assert result.metadata.performance_metrics.bundle_size == "medium"

    def test_recommendations(self, composer, login_request) -> None:
        recs = composer.compose_template(login_request).recommendations
        assert recs[0] == "Specify an appropriate security classification level"
        assert "Review mixin usage to avoid over-complexity" in recs
        assert "Implement comprehensive keyboard navigation" in recs
        assert "Consider code splitting for better performance" not in recs

    def test_classified_request_scores_full(self, composer, classified_login_request) -> None:
        result = composer.compose_template(classified_login_request)
        assert result.compliance_score == 100
        assert result.metadata.compliance_validation.security_requirements["classification"] == "RESTRICTED"

    def test_alternatives(self, composer, login_request) -> None:
        result = composer.compose_template(login_request)
        names = [o.base_template for o in result.alternative_options]
        assert len(names) == 3
        assert "base-form" not in names


class TestCaching:
    def test_identical_request_hits_cache(self, composer, login_request) -> None:
        first = composer.compose_template(login_request)
        second = composer.compose_template(CompositionRequest.from_dict(login_request.to_dict()))
        assert second is first

    def test_different_request_misses_cache(self, composer, login_request, classified_login_request) -> None:
        assert composer.compose_template(login_request) is not composer.compose_template(classified_login_request)

    def test_completion_is_logged_as_cached(self, composer, login_request, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="tessera.core.composition.composer"):
            composer.compose_template(login_request)
        assert "stage: cached" in caplog.text


class TestFallback:
    def test_matcher_failure(self, registry, tmp_path, login_request, caplog) -> None:
        composer = _composer(registry, tmp_path, pattern_matcher=_ExplodingMatcher())
        with caplog.at_level(logging.ERROR):
            result = composer.compose_template(login_request)

        assert not result.success
        assert result.recommendations == (FALLBACK_RECOMMENDATION,)
        assert result.composition.base_template == "base-component"
        assert result.composition.mixins == ("privacy-compliance-mixin",)
        assert result.composition.slots == {}
        assert result.composition.context["componentName"] == "UserLoginForm"
        assert result.estimated_complexity == 1
        assert result.estimated_tokens == 500
        assert result.compliance_score == 0
        assert "matcher exploded" in result.metadata.diagnostics[0]
        assert "matcher exploded" in caplog.text

    def test_mixin_failure(self, registry, tmp_path, login_request) -> None:
        result = _composer(registry, tmp_path, mixin_selector=_ExplodingMixins()).compose_template(login_request)
        assert not result.success
        assert result.recommendations
        assert "base-selected" in result.metadata.diagnostics[0]

    def test_no_base_templates(self, registry, tmp_path, login_request) -> None:
        selector = TemplateSelector(registry, _GhostHeuristic(), default_template="missing")
        result = _composer(registry, tmp_path, selector=selector).compose_template(login_request)
        assert not result.success
        assert result.recommendations

    def test_fallback_is_not_cached(self, registry, tmp_path, login_request) -> None:
        cache = CompositionCache(max_entries=4, ttl_seconds=None)
        composer = _composer(registry, tmp_path, pattern_matcher=_ExplodingMatcher(), cache=cache)
        composer.compose_template(login_request)
        assert len(cache) == 0

    def test_classification_given_by_name(self, registry, tmp_path, composer) -> None:
        request = CompositionRequest("user login form", CompositionRequirements(classification="RESTRICTED"))
        assert composer.compose_template(request).composition.context["classification"] == "RESTRICTED"

        failing = _composer(registry, tmp_path, pattern_matcher=_ExplodingMatcher())
        result = failing.compose_template(request)
        assert not result.success
        assert result.composition.context["classification"] == "RESTRICTED"

    def test_unknown_recommendation_still_succeeds(self, registry, tmp_path, login_request) -> None:
        selector = TemplateSelector(registry, _GhostHeuristic())
        result = _composer(registry, tmp_path, selector=selector).compose_template(login_request)
        assert result.success
        assert result.composition.base_template == "base-component"
        assert any("ghost" in d for d in result.metadata.diagnostics)


class TestHints:
    def test_provider_failure_uses_default_recommendations(self, registry, tmp_path, login_request) -> None:
        result = _composer(registry, tmp_path, hint_provider=_FailingHints()).compose_template(login_request)
        assert result.success
        assert result.metadata.ai_recommendations == tuple(DEFAULT_AI_RECOMMENDATIONS)
        assert any("unreachable" in d for d in result.metadata.diagnostics)

    def test_hints_extend_pattern_analysis(self, registry, tmp_path, login_request) -> None:
        hints = StaticHintProvider(["Show recent sign-ins in a sortable table"])
        result = _composer(registry, tmp_path, hint_provider=hints).compose_template(login_request)
        patterns = [p.pattern for p in result.metadata.selected_patterns]
        assert patterns[0] == "Form"
        assert "Table" in patterns
        assert result.metadata.ai_recommendations == ("Show recent sign-ins in a sortable table",)


class TestCancellation:
    def test_cancelled_before_start(self, composer, login_request) -> None:
        token = CancellationToken()
        token.cancel("not needed")
        with pytest.raises(CompositionCancelledError) as exc_info:
            composer.compose_template(login_request, cancellation=token)
        assert exc_info.value.stage == "received"
        assert exc_info.value.reason == "not needed"
        assert len(composer.cache) == 0

    def test_cancelled_mid_pipeline_is_not_cached(self, registry, tmp_path, login_request) -> None:
        token = CancellationToken()
        composer = _composer(registry, tmp_path, hint_provider=_CancellingHints(token))
        with pytest.raises(CompositionCancelledError):
            composer.compose_template(login_request, cancellation=token)
        assert len(composer.cache) == 0

    def test_uncancelled_token(self, composer, login_request) -> None:
        assert composer.compose_template(login_request, cancellation=CancellationToken()).success


def test_from_config_uses_project_registry(tmp_path: Path, login_request) -> None:
    composer = DynamicComposer.from_config(tmp_path)
    assert (tmp_path / ".tessera" / "template-registry.yaml").exists()
    assert composer.compose_template(login_request).success
