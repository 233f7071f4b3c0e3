"""
Tessera - template inheritance and dynamic composition engine.

Tessera resolves layered templates (base -> child -> composite) into
rendered text and turns free-form generation requests into scored
composition plans.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
