"""Template-text renderer backed by Jinja2.

The renderer is the low-level collaborator the resolver delegates to: it
turns a resource path (relative to a template root) plus a context into
text. Compiled templates are cached per resource and recompiled when the
file's modification time or size changes.

Every resource can call these helpers:
- ``slot(name)``: resolved slot content ('' when absent)
- ``has_slot(name)``: whether a slot resolved to non-empty content
- ``variant_is(name)``: whether the active variant is ``name``
- ``compliance(flag)``: a flag from the active variant's compliance bundle

Helper names are reserved: context keys that would shadow them are dropped.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jinja2 import ChainableUndefined, Environment, FileSystemLoader, Template, pass_context
from jinja2.runtime import Context

from tessera.core.utils.io import read_text, write_text

from .errors import TemplateError, TemplateResourceNotFoundError

logger = logging.getLogger(__name__)

COMPLIANCE_FLAGS_KEY = "complianceFlags"


@pass_context
def _slot(ctx: Context, name: str) -> str:
    slots = ctx.get("slots") or {}
    value = slots.get(name, "") if isinstance(slots, Mapping) else ""
    return "" if value is None else str(value)


@pass_context
def _has_slot(ctx: Context, name: str) -> bool:
    return bool(_slot(ctx, name))


@pass_context
def _variant_is(ctx: Context, name: str) -> bool:
    return ctx.get("variant") == name


@pass_context
def _compliance(ctx: Context, flag: str) -> bool:
    compliance = ctx.get(COMPLIANCE_FLAGS_KEY) or {}
    return bool(compliance.get(flag, False)) if isinstance(compliance, Mapping) else False


HELPERS: Dict[str, Any] = {
    "slot": _slot,
    "has_slot": _has_slot,
    "variant_is": _variant_is,
    "compliance": _compliance,
}


def create_environment(root: Path) -> Environment:
    """Build the Jinja2 environment shared by all resources under ``root``."""
    env = Environment(
        loader=FileSystemLoader(str(root)),
        undefined=ChainableUndefined,
        # Block tags on their own lines must not leave blank lines behind.
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.globals.update(HELPERS)
    return env


@dataclass
class _CacheEntry:
    mtime_ns: int
    size: int
    template: Template


class TemplateRenderer:
    """Load, render, read and save template resources under one root."""

    def __init__(self, root: Path, *, environment: Optional[Environment] = None) -> None:
        self.root = Path(root)
        self.environment = environment or create_environment(self.root)
        self._cache: Dict[str, _CacheEntry] = {}
        self._lock = threading.RLock()

    def resource_file(self, resource_path: str) -> Path:
        """Absolute file for ``resource_path``; must stay inside the root."""
        root = self.root.resolve()
        candidate = (root / resource_path).resolve()
        try:
            candidate.relative_to(root)
        except ValueError as exc:
            raise TemplateError(
                f"Template resource escapes template root: {resource_path}",
                context={"resource": resource_path, "root": str(root)},
            ) from exc
        return candidate

    def load_template(self, resource_path: str) -> Template:
        """Return the compiled template, reusing the cache while the file is unchanged."""
        path = self.resource_file(resource_path)
        try:
            st = path.stat()
        except FileNotFoundError as exc:
            raise TemplateResourceNotFoundError(resource_path) from exc

        with self._lock:
            cached = self._cache.get(resource_path)
            if cached is not None and cached.mtime_ns == st.st_mtime_ns and cached.size == st.st_size:
                return cached.template

            template = self.environment.from_string(read_text(path))
            self._cache[resource_path] = _CacheEntry(st.st_mtime_ns, st.st_size, template)
            logger.debug("Loaded template resource %s", resource_path)
            return template

    def render_template(self, resource_path: str, context: Mapping[str, Any]) -> str:
        values = dict(context)
        for name in sorted(HELPERS.keys() & values.keys()):
            logger.warning("Context key '%s' shadows a template helper; ignoring it", name)
            del values[name]
        return self.load_template(resource_path).render(**values)

    def get_template_content(self, resource_path: str) -> str:
        path = self.resource_file(resource_path)
        if not path.exists():
            raise TemplateResourceNotFoundError(resource_path)
        return read_text(path)

    def save_template(self, resource_path: str, text: str) -> None:
        """Atomically write a resource and drop its compiled cache entry."""
        write_text(self.resource_file(resource_path), text)
        self.invalidate(resource_path)

    def invalidate(self, resource_path: Optional[str] = None) -> None:
        """Forget one compiled resource, or all of them."""
        with self._lock:
            if resource_path is None:
                self._cache.clear()
            else:
                self._cache.pop(resource_path, None)

    def is_cached(self, resource_path: str) -> bool:
        return resource_path in self._cache


__all__ = ["COMPLIANCE_FLAGS_KEY", "HELPERS", "TemplateRenderer", "create_environment"]
