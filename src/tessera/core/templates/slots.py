"""Slot resolution and validation.

Precedence for each declared slot: supplied content (validated) > default
content > empty text. A required slot that ends up empty is an error.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import RequiredSlotMissingError, SlotValidationError
from .models import Slot


def validate_slot_content(slot: Slot, content: str) -> None:
    """Check ``content`` against the slot's validation rules.

    Raises:
        SlotValidationError: ``rule`` is one of min_length, max_length, pattern
    """
    rules = slot.validation
    if rules is None:
        return
    if rules.min_length is not None and len(content) < rules.min_length:
        raise SlotValidationError(
            slot.name,
            "min_length",
            f"Slot '{slot.name}' content is too short (min: {rules.min_length})",
        )
    if rules.max_length is not None and len(content) > rules.max_length:
        raise SlotValidationError(
            slot.name,
            "max_length",
            f"Slot '{slot.name}' content is too long (max: {rules.max_length})",
        )
    pattern = rules.compiled_pattern()
    if pattern is not None and not pattern.search(content):
        raise SlotValidationError(
            slot.name,
            "pattern",
            f"Slot '{slot.name}' content does not match required pattern {rules.pattern!r}",
        )


def resolve_slots(
    declared: Iterable[Slot],
    supplied: Optional[Mapping[str, str]] = None,
    *,
    template: Optional[str] = None,
) -> Dict[str, str]:
    """Produce a complete slot map for ``declared`` slots.

    Supplied values for undeclared slots are carried through untouched so
    templates can still read them.

    Raises:
        RequiredSlotMissingError: required slot with no supplied value and no default
        SlotValidationError: supplied content violates a validation rule
    """
    supplied = dict(supplied or {})
    resolved: Dict[str, str] = {}

    for slot in declared:
        value = supplied.pop(slot.name, None)
        if value:
            value = str(value)
            validate_slot_content(slot, value)
            resolved[slot.name] = value
        elif slot.default_content:
            resolved[slot.name] = slot.default_content
        elif slot.required:
            raise RequiredSlotMissingError(slot.name, template=template)
        else:
            resolved[slot.name] = ""

    for name, value in supplied.items():
        resolved[name] = "" if value is None else str(value)
    return resolved


def effective_slots(
    base_slots: Sequence[Slot],
    *,
    removed: Iterable[str] = (),
    additional: Iterable[Slot] = (),
) -> List[Slot]:
    """Apply child ``remove_slots``/``additional_slots`` to a base declaration.

    Additional slots replace a same-named declaration in place; new names
    are appended in order.
    """
    removed_names = set(removed)
    slots = [s for s in base_slots if s.name not in removed_names]
    for extra in additional:
        for i, existing in enumerate(slots):
            if existing.name == extra.name:
                slots[i] = extra
                break
        else:
            slots.append(extra)
    return slots


def missing_required_slots(declared: Iterable[Slot]) -> List[str]:
    """Names of required slots that have no default content."""
    return [s.name for s in declared if s.required and not s.default_content]


__all__ = [
    "validate_slot_content",
    "resolve_slots",
    "effective_slots",
    "missing_required_slots",
]
