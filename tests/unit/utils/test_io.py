"""Tests for atomic text and YAML I/O helpers."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from tessera.core.utils.io import (
    atomic_write,
    dump_yaml_string,
    iter_yaml_files,
    read_text,
    read_yaml,
    write_text,
    write_yaml,
)


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "out.txt"
    write_text(target, "hello")
    assert read_text(target) == "hello"


def test_read_text_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_text(tmp_path / "missing.txt")


def test_atomic_write_leaves_original_on_failure(tmp_path: Path) -> None:
    target = tmp_path / "doc.txt"
    target.write_text("original", encoding="utf-8")

    def _boom(f) -> None:
        f.write("partial")
        raise RuntimeError("disk full")

    with pytest.raises(RuntimeError):
        atomic_write(target, _boom)
    assert target.read_text(encoding="utf-8") == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["doc.txt"]


class TestYaml:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yaml"
        write_yaml(path, {"b": 1, "a": [1, 2]})
        assert read_yaml(path) == {"b": 1, "a": [1, 2]}
        # insertion order is kept
        assert path.read_text(encoding="utf-8").startswith("b: 1")

    def test_multiline_strings_use_literal_blocks(self) -> None:
        text = dump_yaml_string({"snippet": "<div>\n  x\n</div>"})
        assert "snippet: |" in text
        assert yaml.safe_load(text) == {"snippet": "<div>\n  x\n</div>"}

    def test_missing_file_returns_default(self, tmp_path: Path) -> None:
        assert read_yaml(tmp_path / "nope.yaml", default={}) == {}
        with pytest.raises(FileNotFoundError):
            read_yaml(tmp_path / "nope.yaml", raise_on_error=True)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: [1\n", encoding="utf-8")
        assert read_yaml(path, default="fallback") == "fallback"
        with pytest.raises(yaml.YAMLError):
            read_yaml(path, raise_on_error=True)

    def test_empty_file_returns_default(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert read_yaml(path, default={}) == {}


def test_iter_yaml_files(tmp_path: Path) -> None:
    for name in ("b.yml", "a.yaml", "notes.txt"):
        (tmp_path / name).write_text("x: 1\n", encoding="utf-8")
    (tmp_path / "dir.yaml").mkdir()
    assert [p.name for p in iter_yaml_files(tmp_path)] == ["a.yaml", "b.yml"]
    assert iter_yaml_files(tmp_path / "missing") == []
