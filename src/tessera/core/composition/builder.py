"""Composition building: component name, context and generated slot content.

The main ``content`` slot is produced by the generator registered for the
highest-confidence pattern (``Form``, ``Dashboard``, ``Card``), falling
back to a generic layout. Three auxiliary slots are always produced from
the same request/pattern data:

- ``interface-props``: prop declarations per pattern and per requirement
- ``imports``: import statements the content relies on
- ``state``: local state declarations
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from tessera.core.templates import BaseTemplate

from .classification import ClassificationProvider
from .models import Composition, CompositionRequest, PatternMatch, pattern_names

CONTENT_SLOT = "content"
INTERFACE_PROPS_SLOT = "interface-props"
IMPORTS_SLOT = "imports"
STATE_SLOT = "state"


def component_name(description: str) -> str:
    """Title-cased alphanumeric tokens of ``description`` joined together.

    >>> component_name("user login form!")
    'UserLoginForm'
    """
    cleaned = re.sub(r"[^A-Za-z0-9\s]", "", description or "")
    return "".join(word[:1].upper() + word[1:].lower() for word in cleaned.split())


def _prop_name(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


# ---------------------------------------------------------------------------
# Content generators
# ---------------------------------------------------------------------------


def _form_content(request: CompositionRequest) -> str:
    submit_key = component_name(request.description).lower()
    lines = ['<Stack direction="vertical" gap="lg">']
    lines += [f'  <Input label="{func}" required />' for func in request.requirements.functionality]
    lines += [
        '  <Button type="submit" variant="primary">',
        f'    {{t("{submit_key}.submit", "Submit")}}',
        "  </Button>",
        "</Stack>",
    ]
    return "\n".join(lines)


def _dashboard_content(request: CompositionRequest) -> str:
    lines = ["<Grid cols={3} gap=\"lg\">"]
    for func in request.requirements.functionality:
        lines += [
            "  <Card>",
            "    <CardContent>",
            f'      <Text variant="h3">{func}</Text>',
            f"      <Text>Dashboard widget for {func}</Text>",
            "    </CardContent>",
            "  </Card>",
        ]
    lines.append("</Grid>")
    return "\n".join(lines)


def _card_content(request: CompositionRequest) -> str:
    lines = [
        "<Card>",
        "  <CardHeader>",
        "    <CardTitle>{props.title}</CardTitle>",
        "  </CardHeader>",
        "  <CardContent>",
        '    <Stack direction="vertical" gap="md">',
    ]
    lines += [f"      <Text>{func} functionality</Text>" for func in request.requirements.functionality]
    lines += ["    </Stack>", "  </CardContent>", "</Card>"]
    return "\n".join(lines)


def _generic_content(request: CompositionRequest) -> str:
    lines = [
        '<Stack direction="vertical" gap="md">',
        '  <Text variant="h2">{props.title}</Text>',
        "  <Text>{props.description}</Text>",
    ]
    lines += [f"  <div>{{/* {func} implementation */}}</div>" for func in request.requirements.functionality]
    lines.append("</Stack>")
    return "\n".join(lines)


ContentGenerator = Callable[[CompositionRequest], str]

CONTENT_GENERATORS: Mapping[str, ContentGenerator] = {
    "Form": _form_content,
    "Dashboard": _dashboard_content,
    "Card": _card_content,
}


# ---------------------------------------------------------------------------
# Auxiliary slots
# ---------------------------------------------------------------------------


def interface_props(request: CompositionRequest, patterns: Sequence[PatternMatch]) -> str:
    names = set(pattern_names(list(patterns)))
    props: List[str] = []
    if "Form" in names:
        props.append("readonly onSubmit?: (data: FormValues) => Promise<void>;")
        props.append("readonly validation?: ValidationConfig;")
    if "Dashboard" in names:
        props.append("readonly title?: string;")
        props.append("readonly subtitle?: string;")
        props.append("readonly data?: readonly unknown[];")
    if "Card" in names:
        props.append("readonly title?: string;")
    for func in request.requirements.functionality:
        props.append(f"readonly {_prop_name(func)}Enabled?: boolean;")
    if request.requirements.dark_mode_support:
        props.append("readonly theme?: 'light' | 'dark';")
    return "\n".join(dict.fromkeys(props))


def imports(request: CompositionRequest, patterns: Sequence[PatternMatch]) -> str:
    names = set(pattern_names(list(patterns)))
    lines: List[str] = []
    if "Form" in names:
        lines.append("import { useState, useCallback } from 'react';")
    elif "Dashboard" in names:
        lines.append("import { useState } from 'react';")
    if "Dashboard" in names:
        lines.append("import { Grid } from '@ui/layout';")
    if request.requirements.international_support:
        lines.append("import { useTranslation } from 'react-i18next';")
    return "\n".join(lines)


def state_declarations(request: CompositionRequest, patterns: Sequence[PatternMatch]) -> str:
    names = set(pattern_names(list(patterns)))
    lines: List[str] = []
    if "Form" in names:
        lines.append("const [formData, setFormData] = useState({});")
        lines.append("const [errors, setErrors] = useState({});")
    if "Dashboard" in names:
        lines.append("const [loading, setLoading] = useState(false);")
        lines.append("const [data, setData] = useState([]);")
    if request.requirements.international_support:
        lines.append("const { t } = useTranslation();")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class CompositionBuilder:
    """Merge request, base template, mixins and patterns into a ``Composition``."""

    def __init__(self, classifications: Optional[ClassificationProvider] = None) -> None:
        self.classifications = classifications or ClassificationProvider()

    def build_context(
        self,
        request: CompositionRequest,
        base: BaseTemplate,
        mixins: Sequence[str],
        patterns: Sequence[PatternMatch],
    ) -> Dict[str, Any]:
        req = request.requirements
        biz = request.context
        classification = req.classification
        security = self.classifications.requirements_for(classification)
        return {
            "componentName": component_name(request.description),
            "description": request.description,
            "baseTemplate": base.name,
            "classification": classification.name if classification is not None else None,
            "securityRequirements": security.to_dict() if security is not None else None,
            "accessibilityLevel": req.accessibility_level,
            "privacyCompliance": req.privacy_compliance,
            "industry": biz.industry,
            "userType": biz.user_type,
            "dataTypes": list(biz.data_types),
            "complianceRequirements": list(biz.compliance_requirements),
            "platform": req.platform,
            "designSystem": req.design_system,
            "codeStyle": request.preferences.get("code_style"),
            "complexity": req.complexity,
            "patterns": [p.pattern for p in patterns],
            "patternHints": [p.description for p in patterns],
            "patternSummary": ", ".join(p.pattern for p in patterns),
            "mixins": list(mixins),
            "darkModeSupport": req.dark_mode_support,
            "responsiveDesign": req.responsive_design,
            "internationalSupport": req.international_support,
            "performanceOptimized": req.performance_optimized,
        }

    def build_slots(self, request: CompositionRequest, patterns: Sequence[PatternMatch]) -> Dict[str, str]:
        top = patterns[0].pattern if patterns else None
        generator = CONTENT_GENERATORS.get(top or "", _generic_content)
        return {
            CONTENT_SLOT: generator(request),
            INTERFACE_PROPS_SLOT: interface_props(request, patterns),
            IMPORTS_SLOT: imports(request, patterns),
            STATE_SLOT: state_declarations(request, patterns),
        }

    def build(
        self,
        request: CompositionRequest,
        base: BaseTemplate,
        mixins: Sequence[str],
        patterns: Sequence[PatternMatch],
    ) -> Composition:
        return Composition(
            base_template=base.name,
            mixins=tuple(mixins),
            overrides={},
            slots=self.build_slots(request, patterns),
            context=self.build_context(request, base, mixins, patterns),
        )


__all__ = [
    "CompositionBuilder",
    "CONTENT_GENERATORS",
    "component_name",
    "interface_props",
    "imports",
    "state_declarations",
    "CONTENT_SLOT",
    "INTERFACE_PROPS_SLOT",
    "IMPORTS_SLOT",
    "STATE_SLOT",
]
