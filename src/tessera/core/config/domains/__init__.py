"""Typed accessors for each configuration section."""
from __future__ import annotations

from .composition import CompositionConfig
from .templates import TemplatesConfig

__all__ = ["CompositionConfig", "TemplatesConfig"]
