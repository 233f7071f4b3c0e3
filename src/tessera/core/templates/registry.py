"""Template registry: base, child and composite templates by name.

The registry is backed by a single versioned YAML document::

    version: "1.0.0"
    baseTemplates: [...]
    childTemplates: [...]
    compositeTemplates: [...]

The document is read wholesale by ``load()`` and rewritten wholesale after
every successful ``register_*`` call. When the document does not exist the
bundled starter set is written first and then read back.

Mutations are serialized behind a lock. Each one is applied to a copy of the
current maps. The copy's document is checked against the schema, names
must be unique across kinds and the whole inheritance hierarchy is
re-validated. Only then is the copy persisted and swapped in for the live
maps. A failed mutation leaves both memory and disk untouched.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from tessera.core.config import TemplatesConfig
from tessera.core.exceptions import SchemaValidationError
from tessera.core.schemas import validate_payload
from tessera.core.utils.io import read_yaml, write_yaml
from tessera.data import read_yaml as read_bundled_yaml

from .errors import RegistryFormatError, TemplateNotFoundError
from .inheritance import hierarchy_names, validate_hierarchy
from .models import BaseTemplate, ChildTemplate, CompositeTemplate, TemplateKind

logger = logging.getLogger(__name__)

REGISTRY_SCHEMA = "template-registry"
DEFAULT_REGISTRY_FILE = "default-registry.yaml"

AnyTemplate = Union[BaseTemplate, ChildTemplate, CompositeTemplate]


@dataclass
class _RegistryMaps:
    base: Dict[str, BaseTemplate] = field(default_factory=dict)
    child: Dict[str, ChildTemplate] = field(default_factory=dict)
    composite: Dict[str, CompositeTemplate] = field(default_factory=dict)

    def copy(self) -> "_RegistryMaps":
        return _RegistryMaps(dict(self.base), dict(self.child), dict(self.composite))

    def validate(self) -> None:
        self._check_unique_names()
        validate_hierarchy(self.base, self.child)

    def _check_unique_names(self) -> None:
        """Reject a name registered under more than one kind."""
        seen: Dict[str, str] = {}
        for kind, table in (("base", self.base), ("child", self.child), ("composite", self.composite)):
            for name in table:
                if name in seen:
                    raise RegistryFormatError(
                        f"Template '{name}' is registered as both {seen[name]} and {kind}",
                        context={"template": name, "kinds": [seen[name], kind]},
                    )
                seen[name] = kind


def default_registry_document() -> Dict[str, Any]:
    """The bundled starter registry (one base per category, a child, a composite)."""
    return dict(read_bundled_yaml("registry", DEFAULT_REGISTRY_FILE))


def _index(items: List[Any], kind: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for item in items:
        if item.name in out:
            raise RegistryFormatError(
                f"Duplicate {kind} template '{item.name}'",
                context={"template": item.name, "kind": kind},
            )
        out[item.name] = item
    return out


def validate_registry_document(document: Any) -> None:
    """Check ``document`` against the registry JSON Schema.

    Raises:
        RegistryFormatError: listing every schema violation in ``context["errors"]``
    """
    try:
        validate_payload(document, REGISTRY_SCHEMA)
    except SchemaValidationError as exc:
        raise RegistryFormatError(
            f"Invalid template registry: {exc}",
            context={"errors": exc.errors},
        ) from exc


def parse_registry_document(document: Any) -> _RegistryMaps:
    """Validate a registry document and build the three template maps.

    Raises:
        RegistryFormatError: schema violations or duplicate names
        DanglingExtendsReferenceError, CircularInheritanceError: bad hierarchy
    """
    validate_registry_document(document)

    maps = _RegistryMaps(
        base=_index([BaseTemplate.from_dict(d) for d in document.get("baseTemplates") or ()], "base"),
        child=_index([ChildTemplate.from_dict(d) for d in document.get("childTemplates") or ()], "child"),
        composite=_index(
            [CompositeTemplate.from_dict(d) for d in document.get("compositeTemplates") or ()],
            "composite",
        ),
    )
    maps.validate()
    return maps


class TemplateRegistry:
    """Registry of templates persisted to a YAML document.

    Pass ``path=None`` for a purely in-memory registry (nothing is persisted).
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        *,
        version: str = "1.0.0",
        default_document: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.version = version
        self._default_document = default_document
        self._maps = _RegistryMaps()
        self._lock = threading.RLock()
        self._loaded = False

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "TemplateRegistry":
        """Build a registry at the configured location and load it."""
        cfg = TemplatesConfig(repo_root=repo_root)
        registry = cls(cfg.registry_path, version=cfg.registry_version)
        registry.load()
        return registry

    # ------------------------------------------------------------------
    # Loading / persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the document, creating the default starter set when absent."""
        with self._lock:
            if self.path is None:
                self._maps = parse_registry_document(self._starter_document())
                self._loaded = True
                return

            if not self.path.exists():
                logger.info("Template registry not found, creating default at %s", self.path)
                write_yaml(self.path, self._starter_document())

            document = read_yaml(self.path, raise_on_error=True)
            if not isinstance(document, dict):
                raise RegistryFormatError(
                    f"Template registry must be a mapping: {self.path}",
                    context={"path": str(self.path)},
                )
            self._maps = parse_registry_document(document)
            self.version = str(document.get("version", self.version))
            self._loaded = True
            logger.debug(
                "Loaded template registry %s (%d base, %d child, %d composite)",
                self.path,
                len(self._maps.base),
                len(self._maps.child),
                len(self._maps.composite),
            )

    def _starter_document(self) -> Dict[str, Any]:
        source = self._default_document
        document = dict(source) if source is not None else default_registry_document()
        document.setdefault("version", self.version)
        return document

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def to_document(self) -> Dict[str, Any]:
        return self._document_for(self._maps)

    def _document_for(self, maps: _RegistryMaps) -> Dict[str, Any]:
        return {
            "version": self.version,
            "baseTemplates": [t.to_dict() for t in maps.base.values()],
            "childTemplates": [t.to_dict() for t in maps.child.values()],
            "compositeTemplates": [t.to_dict() for t in maps.composite.values()],
        }

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get(self, kind: Union[TemplateKind, str], name: str) -> Optional[AnyTemplate]:
        """Return the template of ``kind`` called ``name``, or None."""
        self._ensure_loaded()
        kind = TemplateKind(kind)
        return getattr(self._maps, kind.value).get(name)

    def get_base(self, name: str) -> Optional[BaseTemplate]:
        return self.get(TemplateKind.BASE, name)  # type: ignore[return-value]

    def get_child(self, name: str) -> Optional[ChildTemplate]:
        return self.get(TemplateKind.CHILD, name)  # type: ignore[return-value]

    def get_composite(self, name: str) -> Optional[CompositeTemplate]:
        return self.get(TemplateKind.COMPOSITE, name)  # type: ignore[return-value]

    def find(self, name: str) -> AnyTemplate:
        """Look ``name`` up as composite, then child, then base.

        Raises:
            TemplateNotFoundError: not registered under any kind
        """
        self._ensure_loaded()
        maps = self._maps
        for table in (maps.composite, maps.child, maps.base):
            if name in table:
                return table[name]
        raise TemplateNotFoundError(name)

    def __contains__(self, name: object) -> bool:
        self._ensure_loaded()
        maps = self._maps
        return name in maps.base or name in maps.child or name in maps.composite

    @property
    def base_templates(self) -> Mapping[str, BaseTemplate]:
        self._ensure_loaded()
        return dict(self._maps.base)

    @property
    def child_templates(self) -> Mapping[str, ChildTemplate]:
        self._ensure_loaded()
        return dict(self._maps.child)

    @property
    def composite_templates(self) -> Mapping[str, CompositeTemplate]:
        self._ensure_loaded()
        return dict(self._maps.composite)

    def list_base_templates(self, category: Optional[str] = None) -> List[BaseTemplate]:
        """Base templates in registration order, optionally of one category."""
        self._ensure_loaded()
        return [t for t in self._maps.base.values() if category is None or t.category == category]

    def all_templates(self) -> Dict[str, List[AnyTemplate]]:
        self._ensure_loaded()
        maps = self._maps
        return {
            TemplateKind.BASE.value: list(maps.base.values()),
            TemplateKind.CHILD.value: list(maps.child.values()),
            TemplateKind.COMPOSITE.value: list(maps.composite.values()),
        }

    def get_template_hierarchy(self, name: str) -> List[str]:
        """Leaf-first names from ``name`` to its root template."""
        self._ensure_loaded()
        if name not in self:
            raise TemplateNotFoundError(name)
        return hierarchy_names(name, self._maps.child)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_base(self, template: BaseTemplate) -> None:
        def apply(maps: _RegistryMaps) -> None:
            maps.base[template.name] = template

        self._mutate(apply, template.name)

    def register_child(self, template: ChildTemplate) -> None:
        def apply(maps: _RegistryMaps) -> None:
            maps.child[template.name] = template

        self._mutate(apply, template.name)

    def register_composite(self, template: CompositeTemplate) -> None:
        def apply(maps: _RegistryMaps) -> None:
            maps.composite[template.name] = template

        self._mutate(apply, template.name)

    def register(self, template: AnyTemplate) -> None:
        """Dispatch to the ``register_*`` method for the template's kind."""
        if isinstance(template, BaseTemplate):
            self.register_base(template)
        elif isinstance(template, ChildTemplate):
            self.register_child(template)
        elif isinstance(template, CompositeTemplate):
            self.register_composite(template)
        else:
            raise TypeError(f"Unsupported template type: {type(template).__name__}")

    def _mutate(self, apply: Callable[[_RegistryMaps], None], name: str) -> None:
        with self._lock:
            self._ensure_loaded()
            snapshot = self._maps.copy()
            apply(snapshot)
            document = self._document_for(snapshot)
            validate_registry_document(document)
            snapshot.validate()
            if self.path is not None:
                write_yaml(self.path, document)
            self._maps = snapshot
            logger.debug("Registered template '%s'", name)


__all__ = [
    "TemplateRegistry",
    "default_registry_document",
    "parse_registry_document",
    "validate_registry_document",
    "REGISTRY_SCHEMA",
]
