"""Inheritance hierarchy validation and chain resolution.

Child templates point at their parent through ``extends``. The hierarchy is
valid when every parent exists and no chain of ``extends`` pointers loops.
Validation always covers the whole hierarchy: adding one child can close a
cycle through templates that were registered earlier.
"""
from __future__ import annotations

from typing import Collection, List, Mapping, Tuple

from .errors import CircularInheritanceError, DanglingExtendsReferenceError, TemplateNotFoundError
from .models import BaseTemplate, ChildTemplate


def validate_hierarchy(
    base_templates: Collection[str],
    child_templates: Mapping[str, ChildTemplate],
) -> None:
    """Validate every child's ``extends`` chain.

    Raises:
        DanglingExtendsReferenceError: a child extends an unknown template
        CircularInheritanceError: following ``extends`` revisits a template
    """
    for name, child in child_templates.items():
        if child.extends not in base_templates and child.extends not in child_templates:
            raise DanglingExtendsReferenceError(name, child.extends)

    for name, child in child_templates.items():
        visited = {name}
        chain = [name]
        current = child.extends
        while current in child_templates:
            chain.append(current)
            if current in visited:
                raise CircularInheritanceError(name, chain)
            visited.add(current)
            current = child_templates[current].extends


def inheritance_chain(
    name: str,
    base_templates: Mapping[str, BaseTemplate],
    child_templates: Mapping[str, ChildTemplate],
) -> Tuple[List[ChildTemplate], BaseTemplate]:
    """Walk from child ``name`` up to its ultimate base template.

    Returns the children leaf-first and the base template at the root.

    Raises:
        TemplateNotFoundError: ``name`` is not a child template
        DanglingExtendsReferenceError: a parent along the chain is unknown
        CircularInheritanceError: the chain loops
    """
    if name not in child_templates:
        raise TemplateNotFoundError(name, kind="child")

    children: List[ChildTemplate] = []
    seen = set()
    current = name
    while current in child_templates:
        if current in seen:
            raise CircularInheritanceError(name, [c.name for c in children] + [current])
        seen.add(current)
        child = child_templates[current]
        children.append(child)
        current = child.extends

    base = base_templates.get(current)
    if base is None:
        raise DanglingExtendsReferenceError(children[-1].name, current)
    return children, base


def hierarchy_names(name: str, child_templates: Mapping[str, ChildTemplate]) -> List[str]:
    """Leaf-first list of names from ``name`` up to its root.

    The root is the first name that is not a child template; it is included
    even if it does not exist. Stops before revisiting a name.
    """
    names = [name]
    current = child_templates.get(name)
    while current is not None and current.extends not in names:
        names.append(current.extends)
        current = child_templates.get(current.extends)
    return names


__all__ = [
    "validate_hierarchy",
    "inheritance_chain",
    "hierarchy_names",
]
