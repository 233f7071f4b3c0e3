"""Compliance validation and scoring.

Four independent checks, 25 points each:

1. accessibility: the requested level is the highest supported level
2. privacy: a lawful basis is addressable (privacy compliance requested
   and the request declares the data types it handles)
3. classification: the composition context carries a classification
4. jurisdiction: user types that require jurisdiction-specific compliance
   have privacy compliance enabled

Each failing check adds exactly one violation and one recommendation.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .classification import ClassificationProvider
from .models import ComplianceValidation, Composition, CompositionRequest

POINTS_PER_CHECK = 25


class ComplianceValidator:
    def __init__(
        self,
        *,
        accessibility_levels: Sequence[str] = ("A", "AA", "AAA"),
        jurisdiction_user_types: Sequence[str] = ("government",),
        classifications: Optional[ClassificationProvider] = None,
    ) -> None:
        self.accessibility_levels = tuple(accessibility_levels)
        self.jurisdiction_user_types = tuple(jurisdiction_user_types)
        self.classifications = classifications or ClassificationProvider()

    @property
    def max_accessibility_level(self) -> str:
        return self.accessibility_levels[-1]

    def validate(self, composition: Composition, request: CompositionRequest) -> ComplianceValidation:
        req = request.requirements
        biz = request.context
        violations: List[str] = []
        recommendations: List[str] = []

        accessibility = req.accessibility_level == self.max_accessibility_level
        if not accessibility:
            violations.append(
                f"Accessibility level {req.accessibility_level} is below {self.max_accessibility_level}"
            )
            recommendations.append(
                f"Upgrade accessibility level to {self.max_accessibility_level} for full compliance"
            )

        privacy = req.privacy_compliance and bool(biz.data_types)
        if not privacy:
            if biz.data_types:
                violations.append("Data privacy requirements not addressed for the declared data types")
                recommendations.append("Enable privacy compliance to establish a lawful basis for processing")
            else:
                violations.append("No data types declared; lawful basis for processing cannot be assessed")
                recommendations.append("Declare the data types the component handles")

        classification = composition.context.get("classification")
        classified = classification is not None
        if not classified:
            violations.append("Security classification not specified")
            recommendations.append("Specify an appropriate security classification level")

        requires_jurisdiction = biz.user_type in self.jurisdiction_user_types
        jurisdiction = req.privacy_compliance or not requires_jurisdiction
        if not jurisdiction:
            violations.append(f"Jurisdiction-specific compliance required for {biz.user_type} services")
            recommendations.append(f"Enable privacy compliance for {biz.user_type} applications")

        security = self.classifications.requirements_for(classification) if classified else None
        return ComplianceValidation(
            accessibility_compliant=accessibility,
            privacy_compliant=privacy,
            classification_compliant=classified,
            jurisdiction_compliant=jurisdiction,
            violations=tuple(violations),
            recommendations=tuple(recommendations),
            security_requirements=security.to_dict() if security is not None else None,
        )


def compliance_score(validation: ComplianceValidation) -> int:
    """0-100: 25 points per passed check."""
    return POINTS_PER_CHECK * validation.passed_checks


__all__ = ["ComplianceValidator", "compliance_score", "POINTS_PER_CHECK"]
