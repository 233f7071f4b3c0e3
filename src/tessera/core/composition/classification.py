"""Security classification levels and their requirement descriptors.

Four ordinal levels, lowest to highest::

    OPEN < RESTRICTED < CONFIDENTIAL < SECRET

Each level carries a ``SecurityRequirements`` descriptor. The composition
builder copies the descriptor for the requested level into the composition
context and the compliance validator reports it alongside its checks.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class Classification(IntEnum):
    OPEN = 1
    RESTRICTED = 2
    CONFIDENTIAL = 3
    SECRET = 4

    @classmethod
    def parse(cls, value: Union["Classification", str, None]) -> Optional["Classification"]:
        """Accept a level, its name (any case) or None.

        Raises:
            ValueError: unknown level name
        """
        if value is None or isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if not text:
            return None
        try:
            return cls[text]
        except KeyError as exc:
            names = ", ".join(level.name for level in cls)
            raise ValueError(f"Unknown classification '{value}' (expected one of: {names})") from exc


@dataclass(frozen=True)
class SecurityRequirements:
    classification: Classification
    encryption_at_rest: bool
    audit_logging: bool
    access_control: str
    data_retention_days: Optional[int]
    marking_required: bool
    controls: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classification": self.classification.name,
            "encryption_at_rest": self.encryption_at_rest,
            "audit_logging": self.audit_logging,
            "access_control": self.access_control,
            "data_retention_days": self.data_retention_days,
            "marking_required": self.marking_required,
            "controls": list(self.controls),
        }


_BASE_CONTROLS: Tuple[str, ...] = ("input-validation", "output-encoding")

DEFAULT_REQUIREMENTS: Mapping[Classification, SecurityRequirements] = {
    Classification.OPEN: SecurityRequirements(
        classification=Classification.OPEN,
        encryption_at_rest=False,
        audit_logging=False,
        access_control="public",
        data_retention_days=None,
        marking_required=False,
        controls=_BASE_CONTROLS,
    ),
    Classification.RESTRICTED: SecurityRequirements(
        classification=Classification.RESTRICTED,
        encryption_at_rest=False,
        audit_logging=True,
        access_control="authenticated",
        data_retention_days=365,
        marking_required=True,
        controls=_BASE_CONTROLS + ("session-timeout",),
    ),
    Classification.CONFIDENTIAL: SecurityRequirements(
        classification=Classification.CONFIDENTIAL,
        encryption_at_rest=True,
        audit_logging=True,
        access_control="role-based",
        data_retention_days=180,
        marking_required=True,
        controls=_BASE_CONTROLS + ("session-timeout", "field-masking"),
    ),
    Classification.SECRET: SecurityRequirements(
        classification=Classification.SECRET,
        encryption_at_rest=True,
        audit_logging=True,
        access_control="need-to-know",
        data_retention_days=90,
        marking_required=True,
        controls=_BASE_CONTROLS + ("session-timeout", "field-masking", "screen-capture-protection"),
    ),
}


class ClassificationProvider:
    """Read-only lookup of classification levels and their requirements."""

    def __init__(self, requirements: Optional[Mapping[Classification, SecurityRequirements]] = None) -> None:
        self._requirements = dict(requirements or DEFAULT_REQUIREMENTS)

    def levels(self) -> List[Classification]:
        return sorted(self._requirements)

    def requirements_for(self, level: Union[Classification, str, None]) -> Optional[SecurityRequirements]:
        parsed = Classification.parse(level)
        return self._requirements.get(parsed) if parsed is not None else None

    def exceeds(self, level: Union[Classification, str, None], ceiling: Union[Classification, str, None]) -> bool:
        """Whether ``level`` is strictly above ``ceiling`` (False when either is unset)."""
        lhs = Classification.parse(level)
        rhs = Classification.parse(ceiling)
        return lhs is not None and rhs is not None and lhs > rhs


__all__ = [
    "Classification",
    "SecurityRequirements",
    "DEFAULT_REQUIREMENTS",
    "ClassificationProvider",
]
