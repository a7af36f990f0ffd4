"""Normalization of chained card effects into executable instructions.

Cards describe their behaviour as a chain of effects. Each link may carry
metadata consumed by the targeting and selection pipeline (``targeting``,
``conditionals``, ``prompt`` and ``destination``) and may reference the
outcome of an earlier link through ``{"ref": index, "field": name}`` markers.
Before a link is handed to the effect router it is stripped of that metadata
and every reference is resolved to a concrete value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence  # noqa: TC003
from typing import Any

logger = logging.getLogger(__name__)

CHAIN_ONLY_FIELDS: frozenset[str] = frozenset(
    {"targeting", "conditionals", "prompt", "destination"}
)

_RESULT_FIELDS: Mapping[str, str] = {
    "target": "target",
    "sourceLane": "sourceLane",
    "destinationLane": "destinationLane",
}

_SELECTION_FIELDS: Mapping[str, str] = {
    "target": "target",
    "sourceLane": "lane",
    "destinationLane": "destination",
}


def strip_chain_fields(chain_effect: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *chain_effect* without chain-only metadata keys."""
    return {
        key: value
        for key, value in chain_effect.items()
        if key not in CHAIN_ONLY_FIELDS
    }


def is_reference(value: Any) -> bool:
    """Return ``True`` when *value* is a ``{"ref": ...}`` marker."""
    return isinstance(value, Mapping) and "ref" in value


def _entry_at(entries: Sequence[Any] | Mapping[int, Any], index: Any) -> Any:
    if isinstance(entries, Mapping):
        return entries.get(index)
    if isinstance(index, int) and 0 <= index < len(entries):
        return entries[index]
    return None


def _read(entry: Any, key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, key, None)


def _card_cost(target: Any) -> Any:
    cost = _read(target, "cost") if target is not None else None
    return 0 if cost is None else cost


def resolve_ref(
    ref_obj: Any, effect_results: Sequence[Any] | Mapping[int, Any]
) -> Any:
    """Resolve *ref_obj* against the results of earlier effects in the chain.

    Non-reference values are returned unchanged. Missing results and unknown
    fields resolve to ``None``; ``cardCost`` resolves to ``0`` when absent.
    """
    if not is_reference(ref_obj):
        return ref_obj
    result = _entry_at(effect_results, ref_obj["ref"])
    field = ref_obj.get("field")
    if result is None:
        logger.debug("Unresolved effect reference %s", ref_obj)
        return None
    if field == "cardCost":
        card_cost = _read(result, "cardCost")
        return 0 if card_cost is None else card_cost
    key = _RESULT_FIELDS.get(field)
    return _read(result, key) if key is not None else None


def resolve_ref_from_selections(
    ref_obj: Any, selections: Sequence[Any] | Mapping[int, Any]
) -> Any:
    """Resolve *ref_obj* against player selections made earlier in the chain."""
    if not is_reference(ref_obj):
        return ref_obj
    selection = _entry_at(selections, ref_obj["ref"])
    field = ref_obj.get("field")
    if selection is None:
        return None
    if field == "cardCost":
        return _card_cost(_read(selection, "target"))
    key = _SELECTION_FIELDS.get(field)
    return _read(selection, key) if key is not None else None


def resolve_effect_values(
    effect: Mapping[str, Any], effect_results: Sequence[Any] | Mapping[int, Any]
) -> dict[str, Any]:
    """Return a copy of *effect* with its ``mod.value`` reference resolved."""
    resolved = dict(effect)
    mod = resolved.get("mod")
    if isinstance(mod, Mapping) and "value" in mod:
        resolved["mod"] = {**mod, "value": resolve_ref(mod["value"], effect_results)}
    return resolved


def prepare_chain_effect(
    chain_effect: Mapping[str, Any],
    effect_results: Sequence[Any] | Mapping[int, Any] = (),
) -> dict[str, Any]:
    """Strip chain metadata and resolve value references for execution."""
    return resolve_effect_values(strip_chain_fields(chain_effect), effect_results)


__all__ = [
    "CHAIN_ONLY_FIELDS",
    "is_reference",
    "prepare_chain_effect",
    "resolve_effect_values",
    "resolve_ref",
    "resolve_ref_from_selections",
    "strip_chain_fields",
]
