"""YAML I/O with atomic writes and shared read locks."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, List

import yaml

from .core import PathLike, atomic_write


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multi-line strings (template snippets) as literal blocks."""
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


yaml.add_representer(str, _str_representer, Dumper=yaml.SafeDumper)


def read_yaml(path: PathLike, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns ``default`` when the file is missing or invalid, unless
    ``raise_on_error`` is set.

    Examples:
        >>> doc = read_yaml(Path("template-registry.yaml"), default={})
        >>> assert isinstance(doc, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def write_yaml(path: PathLike, data: Any, *, sort_keys: bool = False) -> None:
    """Atomically write ``data`` as YAML to ``path``."""

    def _writer(f) -> None:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=sort_keys,
            allow_unicode=True,
        )

    atomic_write(Path(path), _writer)


def dump_yaml_string(data: Any, sort_keys: bool = False) -> str:
    """Dump ``data`` to a YAML string."""
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def iter_yaml_files(dir_path: Path) -> List[Path]:
    """Return ``*.yaml`` and ``*.yml`` files in ``dir_path`` in name order."""
    if not dir_path.is_dir():
        return []
    files = [p for p in dir_path.iterdir() if p.suffix in {".yaml", ".yml"} and p.is_file()]
    return sorted(files, key=lambda p: p.name)


__all__ = [
    "read_yaml",
    "write_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
