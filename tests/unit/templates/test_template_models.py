"""Tests for registry document <-> dataclass conversion."""
from __future__ import annotations

import pytest

from tessera.core.templates import (
    BaseTemplate,
    ChildTemplate,
    CompositeTemplate,
    RegistryFormatError,
    Slot,
)


def test_base_template_from_document() -> None:
    template = BaseTemplate.from_dict(
        {
            "name": "base-page",
            "resourcePath": "base/page.j2",
            "category": "page",
            "slots": [{"name": "content", "required": True, "validation": {"minLength": 1}}],
            "variants": [{"name": "dark", "modifiers": {"theme": "dark"}, "compliance": {"darkMode": True}}],
            "metadata": {"tags": ["page"], "compliance": {"accessibilityLevel": "AAA"}},
        }
    )
    assert template.slots[0].required is True
    assert template.slots[0].validation.min_length == 1
    assert template.get_variant("dark").compliance.dark_mode is True
    assert template.get_variant("light") is None
    assert template.metadata.tags == ("page",)
    assert template.metadata.compliance.accessibility_level == "AAA"


def test_base_template_document_is_stable() -> None:
    doc = {
        "name": "card",
        "resourcePath": "card.j2",
        "category": "component",
        "slots": [{"name": "body", "required": False, "defaultContent": "x"}],
        "defaultContext": {"tone": "calm"},
    }
    assert BaseTemplate.from_dict(doc).to_dict() == doc


def test_missing_required_field() -> None:
    with pytest.raises(RegistryFormatError, match="resourcePath"):
        BaseTemplate.from_dict({"name": "x", "category": "page"})


def test_child_template_defaults() -> None:
    child = ChildTemplate.from_dict({"name": "c", "extends": "p"})
    assert child.overrides == {}
    assert child.additional_slots == ()
    assert child.to_dict() == {"name": "c", "extends": "p"}


def test_composite_component_defaults_to_content_slot() -> None:
    composite = CompositeTemplate.from_dict(
        {"name": "shell", "layout": "base-layout", "components": [{"template": "nav-bar"}]}
    )
    assert composite.components[0].slot == "content"
    assert composite.to_dict()["components"] == [{"template": "nav-bar", "slot": "content"}]


def test_slot_to_dict_omits_empty_fields() -> None:
    assert Slot(name="footer").to_dict() == {"name": "footer", "required": False}
