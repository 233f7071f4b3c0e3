"""Domain-specific configuration for the template registry and renderer."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from tessera.data import get_data_path

from ..base import BaseDomainConfig
from ..manager import get_project_config_dir


class TemplatesConfig(BaseDomainConfig):
    """Accessor for the ``templates`` section."""

    def _config_section(self) -> str:
        return "templates"

    @cached_property
    def root(self) -> Path:
        """Template resource root; the bundled starter templates when unset."""
        raw = str(self.section.get("root") or "").strip()
        if not raw:
            return get_data_path("templates")
        path = Path(raw).expanduser()
        return path if path.is_absolute() else self.repo_root / path

    @cached_property
    def registry_path(self) -> Path:
        raw = str(self.section.get("registry_file") or "template-registry.yaml")
        path = Path(raw).expanduser()
        if path.is_absolute():
            return path
        return get_project_config_dir(self.repo_root) / path

    @cached_property
    def registry_version(self) -> str:
        return str(self.section.get("registry_version", "1.0.0"))


__all__ = ["TemplatesConfig"]
