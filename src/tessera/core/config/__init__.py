"""Tessera configuration package."""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .domains import CompositionConfig, TemplatesConfig
from .manager import ConfigManager, get_project_config_dir

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "CompositionConfig",
    "TemplatesConfig",
    "clear_all_caches",
    "get_cached_config",
    "get_project_config_dir",
]
