"""Resolve registered templates into rendered text.

``resolve_template(name, context)`` looks the name up (composite, then
child, then base) and dispatches:

- base: merge ``default_context`` with the caller context, apply the
  requested variant, resolve slots, render partials, render the resource
- child: walk ``extends`` to the ultimate base; ancestors contribute
  ``additional_context`` (root first) and slot overrides (leaf wins); the
  caller's own context and slots win over both
- composite: evaluate each component's condition, render the ones that pass
  into their target slot in declaration order, then resolve the layout with
  the accumulated slots

Supplied slot content travels in the context under the ``slots`` key.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from tessera.core.config import TemplatesConfig
from tessera.core.utils.io import write_text

from .conditions import ConditionEvaluator
from .errors import ConditionEvaluationError, ConditionSyntaxError, TemplateError
from .inheritance import inheritance_chain
from .models import BaseTemplate, ChildTemplate, CompositeTemplate, Slot
from .registry import TemplateRegistry
from .renderer import COMPLIANCE_FLAGS_KEY, TemplateRenderer
from .slots import effective_slots, resolve_slots

logger = logging.getLogger(__name__)

SLOTS_KEY = "slots"
PARTIALS_KEY = "partials"
VARIANT_KEY = "variant"
COMPLIANCE_KEY = COMPLIANCE_FLAGS_KEY


def _without_slots(context: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in context.items() if k != SLOTS_KEY}


def _supplied_slots(context: Mapping[str, Any]) -> Dict[str, str]:
    slots = context.get(SLOTS_KEY) or {}
    if not isinstance(slots, Mapping):
        raise TemplateError(
            f"Context '{SLOTS_KEY}' must be a mapping of slot name to content",
            context={"type": type(slots).__name__},
        )
    return dict(slots)


class TemplateResolver:
    """Resolve base, child and composite templates through a renderer."""

    def __init__(
        self,
        registry: TemplateRegistry,
        renderer: TemplateRenderer,
        *,
        evaluator: Optional[ConditionEvaluator] = None,
    ) -> None:
        self.registry = registry
        self.renderer = renderer
        self.evaluator = evaluator or ConditionEvaluator()

    @classmethod
    def from_config(cls, repo_root: Optional[Path] = None) -> "TemplateResolver":
        cfg = TemplatesConfig(repo_root=repo_root)
        return cls(TemplateRegistry.from_config(repo_root), TemplateRenderer(cfg.root))

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def resolve_template(self, name: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """Render template ``name`` with ``context``.

        Raises:
            TemplateNotFoundError: ``name`` (or a referenced template) is unknown
            RequiredSlotMissingError, SlotValidationError: slot contract broken
            InheritanceError: broken ``extends`` chain
        """
        return self._resolve(name, dict(context or {}), ())

    def generate_from_template(
        self,
        name: str,
        output_path: Path,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Path:
        """Resolve ``name`` and atomically write the result to ``output_path``."""
        text = self.resolve_template(name, context)
        output_path = Path(output_path)
        write_text(output_path, text)
        logger.info("Generated %s from template '%s'", output_path, name)
        return output_path

    def _resolve(self, name: str, context: Dict[str, Any], stack: Tuple[str, ...]) -> str:
        if name in stack:
            chain = " -> ".join(stack + (name,))
            raise TemplateError(
                f"Template '{name}' includes itself: {chain}",
                context={"template": name, "chain": list(stack + (name,))},
            )
        stack = stack + (name,)

        template = self.registry.find(name)
        if isinstance(template, CompositeTemplate):
            return self._resolve_composite(template, context, stack)
        if isinstance(template, ChildTemplate):
            return self.resolve_child(template, context)
        return self.resolve_base(template, context)

    # ------------------------------------------------------------------
    # Base templates
    # ------------------------------------------------------------------
    def resolve_base(
        self,
        template: BaseTemplate,
        context: Mapping[str, Any],
        *,
        declared: Optional[Sequence[Slot]] = None,
        owner: Optional[str] = None,
    ) -> str:
        """Render a base template.

        ``declared`` replaces the template's own slot declarations (children
        add and remove slots); ``owner`` names the template in slot errors.
        """
        supplied = _supplied_slots(context)
        merged: Dict[str, Any] = dict(template.default_context)
        merged.update(_without_slots(context))
        self._apply_variant(template, merged)

        slots = template.slots if declared is None else declared
        merged[SLOTS_KEY] = resolve_slots(slots, supplied, template=owner or template.name)
        merged[PARTIALS_KEY] = self._render_partials(template, merged)
        return self.renderer.render_template(template.resource_path, merged)

    def _apply_variant(self, template: BaseTemplate, merged: Dict[str, Any]) -> None:
        name = merged.get(VARIANT_KEY)
        if not name:
            return
        variant = template.get_variant(str(name))
        if variant is None:
            logger.debug("Template '%s' has no variant '%s'", template.name, name)
            return
        merged.update(variant.modifiers)
        if variant.compliance is not None:
            flags = {k: v for k, v in asdict(variant.compliance).items() if v is not None}
            current = merged.get(COMPLIANCE_KEY)
            merged[COMPLIANCE_KEY] = {**(current if isinstance(current, Mapping) else {}), **flags}
        logger.debug("Applied variant '%s' to template '%s'", name, template.name)

    def _render_partials(self, template: BaseTemplate, merged: Mapping[str, Any]) -> Dict[str, str]:
        rendered: Dict[str, str] = {}
        for partial in template.partials:
            if partial.condition and not self._condition_passes(partial.condition, merged, template.name):
                continue
            rendered[partial.name] = self.renderer.render_template(
                partial.resource_path, {**merged, **partial.context}
            )
        return rendered

    # ------------------------------------------------------------------
    # Child templates
    # ------------------------------------------------------------------
    def resolve_child(self, template: ChildTemplate, context: Mapping[str, Any]) -> str:
        children, base = inheritance_chain(
            template.name,
            self.registry.base_templates,
            self.registry.child_templates,
        )
        root_first: List[ChildTemplate] = list(reversed(children))

        inherited: Dict[str, Any] = {}
        declared: Sequence[Slot] = base.slots
        override_paths: Dict[str, str] = {}
        for child in root_first:
            inherited.update(child.additional_context)
            declared = effective_slots(declared, removed=child.remove_slots, additional=child.additional_slots)
            override_paths.update(child.overrides)

        merged: Dict[str, Any] = {**base.default_context, **inherited, **_without_slots(context)}
        supplied = _supplied_slots(context)

        slots: Dict[str, str] = {}
        for slot_name, resource_path in override_paths.items():
            if supplied.get(slot_name):
                continue
            slots[slot_name] = self.renderer.render_template(resource_path, merged)
        slots.update(supplied)

        return self.resolve_base(
            base,
            {**inherited, **_without_slots(context), SLOTS_KEY: slots},
            declared=declared,
            owner=template.name,
        )

    # ------------------------------------------------------------------
    # Composite templates
    # ------------------------------------------------------------------
    def resolve_composite(self, template: CompositeTemplate, context: Mapping[str, Any]) -> str:
        return self._resolve_composite(template, dict(context), (template.name,))

    def _resolve_composite(
        self,
        template: CompositeTemplate,
        context: Dict[str, Any],
        stack: Tuple[str, ...],
    ) -> str:
        merged: Dict[str, Any] = {**template.global_context, **_without_slots(context)}
        accumulated: Dict[str, str] = {}

        for component in template.components:
            if component.condition and not self._condition_passes(component.condition, merged, template.name):
                continue
            text = self._resolve(component.template, {**merged, **component.context}, stack)
            accumulated[component.slot] = accumulated.get(component.slot, "") + text

        slots = {**_supplied_slots(context), **accumulated}
        return self._resolve(template.layout, {**merged, SLOTS_KEY: slots}, stack)

    def _condition_passes(self, expression: str, context: Mapping[str, Any], owner: str) -> bool:
        try:
            return self.evaluator.evaluate(expression, context)
        except (ConditionSyntaxError, ConditionEvaluationError) as exc:
            logger.warning("Condition in template '%s' treated as false: %s", owner, exc)
            return False


__all__ = ["TemplateResolver"]
