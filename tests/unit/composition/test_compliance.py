"""Tests for compliance validation and scoring."""
from __future__ import annotations

import pytest

from tessera.core.composition import (
    BusinessContext,
    ComplianceValidator,
    Composition,
    CompositionRequest,
    CompositionRequirements,
    compliance_score,
)


def _composition(classification=None) -> Composition:
    return Composition(base_template="base-form", context={"classification": classification})


@pytest.fixture
def validator() -> ComplianceValidator:
    return ComplianceValidator()


class TestScore:
    def test_nothing_passes(self, validator) -> None:
        request = CompositionRequest(
            description="x",
            requirements=CompositionRequirements(accessibility_level="A"),
            context=BusinessContext(user_type="government"),
        )
        validation = validator.validate(_composition(), request)
        assert validation.passed_checks == 0
        assert compliance_score(validation) == 0
        assert len(validation.violations) == 4
        assert len(validation.recommendations) == 4

    def test_half_passes(self, validator) -> None:
        request = CompositionRequest(description="x", requirements=CompositionRequirements(accessibility_level="AAA"))
        validation = validator.validate(_composition(), request)
        # accessibility and jurisdiction pass; privacy and classification fail
        assert validation.accessibility_compliant
        assert validation.jurisdiction_compliant
        assert compliance_score(validation) == 50

    def test_everything_passes(self, validator, classified_login_request) -> None:
        validation = validator.validate(_composition("RESTRICTED"), classified_login_request)
        assert compliance_score(validation) == 100
        assert validation.violations == ()
        assert validation.recommendations == ()
        assert validation.security_requirements["classification"] == "RESTRICTED"

    def test_login_without_classification(self, validator, login_request) -> None:
        validation = validator.validate(_composition(), login_request)
        assert compliance_score(validation) == 75
        assert validation.violations == ("Security classification not specified",)
        assert validation.security_requirements is None


class TestAxes:
    def test_privacy_needs_declared_data_types(self, validator) -> None:
        request = CompositionRequest(
            description="x",
            requirements=CompositionRequirements(privacy_compliance=True),
        )
        validation = validator.validate(_composition(), request)
        assert not validation.privacy_compliant
        assert "Declare the data types the component handles" in validation.recommendations

    def test_privacy_not_requested_with_data_types(self, validator) -> None:
        request = CompositionRequest(
            description="x",
            context=BusinessContext(data_types=("health",)),
        )
        validation = validator.validate(_composition(), request)
        assert not validation.privacy_compliant
        assert any("lawful basis" in r for r in validation.recommendations)

    def test_jurisdiction_user_types_configurable(self) -> None:
        validator = ComplianceValidator(jurisdiction_user_types=("citizen",))
        request = CompositionRequest(description="x")
        validation = validator.validate(_composition(), request)
        assert not validation.jurisdiction_compliant
        assert "Enable privacy compliance for citizen applications" in validation.recommendations

    def test_max_level_follows_configured_order(self) -> None:
        validator = ComplianceValidator(accessibility_levels=("A", "AA"))
        request = CompositionRequest(description="x", requirements=CompositionRequirements(accessibility_level="AA"))
        assert validator.max_accessibility_level == "AA"
        assert validator.validate(_composition(), request).accessibility_compliant

    def test_one_violation_per_failing_check(self, validator) -> None:
        request = CompositionRequest(description="x")
        validation = validator.validate(_composition(), request)
        failed = 4 - validation.passed_checks
        assert len(validation.violations) == failed
        assert len(validation.recommendations) == failed
