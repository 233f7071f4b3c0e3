"""Tests for TemplateRegistry load/persist/register behaviour."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from tessera.core.templates import (
    CATEGORIES,
    BaseTemplate,
    ChildTemplate,
    CircularInheritanceError,
    CompositeComponent,
    CompositeTemplate,
    DanglingExtendsReferenceError,
    RegistryFormatError,
    Slot,
    TemplateKind,
    TemplateNotFoundError,
    TemplateRegistry,
)


class TestLoad:
    def test_creates_default_document_when_missing(self, registry_path: Path) -> None:
        assert not registry_path.exists()
        reg = TemplateRegistry(registry_path)
        reg.load()

        assert registry_path.exists()
        doc = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        assert doc["version"] == "1.0.0"
        assert {"baseTemplates", "childTemplates", "compositeTemplates"} <= set(doc)

    def test_default_set_covers_every_category(self, registry: TemplateRegistry) -> None:
        categories = {t.category for t in registry.list_base_templates()}
        assert categories == set(CATEGORIES)
        assert registry.child_templates
        assert registry.composite_templates

    def test_reload_reads_persisted_document(self, registry: TemplateRegistry, registry_path: Path) -> None:
        registry.register_base(BaseTemplate(name="extra", resource_path="x.j2", category="component"))
        fresh = TemplateRegistry(registry_path)
        fresh.load()
        assert fresh.get_base("extra") is not None

    def test_invalid_document_raises_format_error(self, registry_path: Path) -> None:
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(
            yaml.safe_dump({"version": "1.0.0", "baseTemplates": [{"name": "x", "category": "page"}]}),
            encoding="utf-8",
        )
        with pytest.raises(RegistryFormatError) as exc_info:
            TemplateRegistry(registry_path).load()
        assert exc_info.value.context["errors"]

    def test_unknown_category_rejected(self, registry_path: Path) -> None:
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(
            yaml.safe_dump(
                {
                    "version": "1.0.0",
                    "baseTemplates": [{"name": "x", "resourcePath": "x.j2", "category": "widget"}],
                }
            ),
            encoding="utf-8",
        )
        with pytest.raises(RegistryFormatError):
            TemplateRegistry(registry_path).load()

    def test_duplicate_names_rejected(self, registry_path: Path) -> None:
        entry = {"name": "x", "resourcePath": "x.j2", "category": "page"}
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(
            yaml.safe_dump({"version": "1.0.0", "baseTemplates": [entry, entry]}),
            encoding="utf-8",
        )
        with pytest.raises(RegistryFormatError, match="Duplicate"):
            TemplateRegistry(registry_path).load()

    def test_document_with_cycle_fails_to_load(self, registry_path: Path) -> None:
        registry_path.parent.mkdir(parents=True)
        registry_path.write_text(
            yaml.safe_dump(
                {
                    "version": "1.0.0",
                    "childTemplates": [{"name": "a", "extends": "b"}, {"name": "b", "extends": "a"}],
                }
            ),
            encoding="utf-8",
        )
        with pytest.raises(CircularInheritanceError):
            TemplateRegistry(registry_path).load()

    def test_in_memory_registry_uses_given_document(self) -> None:
        reg = TemplateRegistry(
            default_document={
                "baseTemplates": [{"name": "only", "resourcePath": "only.j2", "category": "component"}],
            }
        )
        reg.load()
        assert [t.name for t in reg.list_base_templates()] == ["only"]
        assert reg.version == "1.0.0"


class TestLookup:
    def test_get_by_kind(self, registry: TemplateRegistry) -> None:
        assert registry.get(TemplateKind.BASE, "base-page") is not None
        assert registry.get("child", "login-page") is not None
        assert registry.get("composite", "app-shell") is not None
        assert registry.get("base", "login-page") is None

    def test_find_unknown_raises(self, registry: TemplateRegistry) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            registry.find("nope")
        assert exc_info.value.name == "nope"

    def test_list_base_templates_by_category(self, registry: TemplateRegistry) -> None:
        forms = registry.list_base_templates("form")
        assert [t.name for t in forms] == ["base-form"]

    def test_all_templates_groups_by_kind(self, registry: TemplateRegistry) -> None:
        groups = registry.all_templates()
        assert set(groups) == {"base", "child", "composite"}
        assert "login-page" in [t.name for t in groups["child"]]

    def test_template_hierarchy(self, registry: TemplateRegistry) -> None:
        registry.register_child(ChildTemplate(name="login-page-v2", extends="login-page"))
        assert registry.get_template_hierarchy("login-page-v2") == ["login-page-v2", "login-page", "base-page"]
        assert registry.get_template_hierarchy("base-page") == ["base-page"]

    def test_template_hierarchy_unknown(self, registry: TemplateRegistry) -> None:
        with pytest.raises(TemplateNotFoundError):
            registry.get_template_hierarchy("nope")


class TestRegister:
    def test_register_child_persists(self, registry: TemplateRegistry, registry_path: Path) -> None:
        registry.register_child(
            ChildTemplate(
                name="signup-page",
                extends="base-page",
                overrides={"content": "auth/login-form.j2"},
                additional_slots=(Slot(name="terms", default_content="<p>Terms</p>"),),
            )
        )
        doc = yaml.safe_load(registry_path.read_text(encoding="utf-8"))
        saved = {c["name"]: c for c in doc["childTemplates"]}["signup-page"]
        assert saved["extends"] == "base-page"
        assert saved["additionalSlots"][0]["defaultContent"] == "<p>Terms</p>"

    def test_register_overwrites_by_name(self, registry: TemplateRegistry) -> None:
        registry.register_base(BaseTemplate(name="base-page", resource_path="other.j2", category="page"))
        assert registry.get_base("base-page").resource_path == "other.j2"

    def test_register_dispatches_on_type(self, registry: TemplateRegistry) -> None:
        composite = CompositeTemplate(
            name="two-up",
            layout="base-layout",
            components=(CompositeComponent(template="nav-bar"),),
        )
        registry.register(composite)
        assert registry.get_composite("two-up") == composite

    def test_dangling_child_rejected_and_not_persisted(
        self, registry: TemplateRegistry, registry_path: Path
    ) -> None:
        before = registry_path.read_text(encoding="utf-8")
        with pytest.raises(DanglingExtendsReferenceError) as exc_info:
            registry.register_child(ChildTemplate(name="orphan", extends="ghost"))
        assert "orphan" in str(exc_info.value)
        assert "ghost" in str(exc_info.value)
        assert registry.get_child("orphan") is None
        assert registry_path.read_text(encoding="utf-8") == before

    def test_cycle_rejected_and_registry_unchanged(self, registry: TemplateRegistry, registry_path: Path) -> None:
        registry.register_child(ChildTemplate(name="child-a", extends="base-page"))
        registry.register_child(ChildTemplate(name="child-b", extends="child-a"))
        before_doc = registry.to_document()
        before_file = registry_path.read_text(encoding="utf-8")

        with pytest.raises(CircularInheritanceError):
            registry.register_child(ChildTemplate(name="child-a", extends="child-b"))

        assert registry.get_child("child-a").extends == "base-page"
        assert registry.to_document() == before_doc
        assert registry_path.read_text(encoding="utf-8") == before_file

    def test_revalidation_covers_existing_templates(self, registry: TemplateRegistry) -> None:
        registry.register_child(ChildTemplate(name="mid", extends="base-page"))
        registry.register_child(ChildTemplate(name="leaf", extends="mid"))
        # Re-pointing "mid" at "leaf" closes a loop through an existing template.
        with pytest.raises(CircularInheritanceError):
            registry.register_child(ChildTemplate(name="mid", extends="leaf"))
        assert registry.get_template_hierarchy("leaf") == ["leaf", "mid", "base-page"]

    def test_register_unsupported_type(self, registry: TemplateRegistry) -> None:
        with pytest.raises(TypeError):
            registry.register("not a template")  # type: ignore[arg-type]

    def test_schema_violation_rejected_and_not_persisted(
        self, registry: TemplateRegistry, registry_path: Path
    ) -> None:
        before = registry_path.read_text(encoding="utf-8")
        with pytest.raises(RegistryFormatError) as exc_info:
            registry.register_base(BaseTemplate(name="gadget", resource_path="g.j2", category="widget"))
        assert any("category" in e for e in exc_info.value.context["errors"])
        assert registry.get_base("gadget") is None
        assert registry_path.read_text(encoding="utf-8") == before

        reloaded = TemplateRegistry(registry_path)
        reloaded.load()
        assert reloaded.get_base("base-page") is not None

    def test_name_shared_across_kinds_rejected(self, registry: TemplateRegistry, registry_path: Path) -> None:
        before = registry_path.read_text(encoding="utf-8")
        clash = CompositeTemplate(name="base-page", layout="base-layout", components=())
        with pytest.raises(RegistryFormatError, match="both base and composite"):
            registry.register(clash)
        assert registry.get_composite("base-page") is None
        assert isinstance(registry.find("base-page"), BaseTemplate)
        assert registry_path.read_text(encoding="utf-8") == before

    def test_document_with_shared_name_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "version": "1.0.0",
                    "baseTemplates": [{"name": "x", "resourcePath": "x.j2", "category": "page"}],
                    "childTemplates": [{"name": "x", "extends": "x"}],
                }
            ),
            encoding="utf-8",
        )
        with pytest.raises(RegistryFormatError, match="both base and child"):
            TemplateRegistry(path).load()
