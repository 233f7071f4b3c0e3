"""I/O utilities for Tessera.

- Core: atomic writes, text read/write
- YAML: read/write with locking
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .yaml import (
    dump_yaml_string,
    iter_yaml_files,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text",
    "write_text",
    # yaml
    "read_yaml",
    "write_yaml",
    "dump_yaml_string",
    "iter_yaml_files",
]
