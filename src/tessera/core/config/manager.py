"""
Tessera configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from tessera.core.exceptions import ConfigError
from tessera.core.utils.io import iter_yaml_files, read_yaml
from tessera.core.utils.merge import deep_merge
from tessera.data import get_data_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_DIRNAME = ".tessera"
ENV_PREFIX = "TESSERA_"


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.tessera`` (not created)."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


class ConfigManager:
    """Load and merge Tessera configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TESSERA_<SECTION>__<KEY>
    2. Project config: <repo_root>/.tessera/config/*.yaml (alphabetical order)
    3. Bundled defaults: tessera.data/config/defaults.yaml
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else Path.cwd()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: a broken config file must never be silently ignored.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigError(f"Invalid config file: {path}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}", context={"path": str(path)})
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            logger.debug("Merging config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ------------------------------------------------------------------
    # Environment overrides
    # ------------------------------------------------------------------

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if low in {"null", "none"}:
            return None
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            segments = [seg.lower() for seg in raw.split("__")]
            if not raw or any(seg == "" for seg in segments):
                logger.warning("Ignoring malformed config override %s", key)
                continue
            yield segments, self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_config_uncached(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)
        return cfg

    def load_config(self) -> Dict[str, Any]:
        """Return the merged configuration (through the shared cache)."""
        from .cache import get_cached_config

        return get_cached_config(repo_root=self.repo_root)


__all__ = ["ConfigManager", "get_project_config_dir", "PROJECT_CONFIG_DIRNAME"]
