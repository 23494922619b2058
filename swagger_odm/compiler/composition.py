"""Flattening of ``allOf`` compositions."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

logger = logging.getLogger(__name__)

COMPOSITION_KEY = "allOf"


def is_composed(node: Any) -> bool:
    """Check if a definition or property declares a composition."""
    return isinstance(node, Mapping) and bool(node.get(COMPOSITION_KEY))


def merge_composition(
    node: Mapping[str, Any],
    lookup: Callable[[str], Mapping[str, Any]],
    resolve_name: Callable[[str], str],
) -> Dict[str, Any]:
    """
    Merge the members of ``allOf`` into one ``properties`` mapping.

    Fragments are folded in order, so a later fragment wins when two declare
    the same field. Required names are unioned, keeping first-seen order. The
    input node is left untouched.

    Args:
        node: Definition or property carrying ``allOf``
        lookup: Returns the (already normalized) definition for a name
        resolve_name: Extracts the definition name from a ``$ref`` string

    Returns:
        A copy of ``node`` with merged ``properties``/``required`` and no
        ``allOf``
    """
    merged_properties: Dict[str, Any] = {}
    merged_required: Dict[str, None] = {}

    for fragment in node.get(COMPOSITION_KEY) or []:
        if "$ref" in fragment:
            source = lookup(resolve_name(fragment["$ref"]))
        else:
            source = fragment

        merged_properties.update(source.get("properties") or {})
        required = source.get("required")
        if isinstance(required, (list, tuple)):
            for name in required:
                merged_required.setdefault(name, None)

    result = {key: value for key, value in node.items() if key != COMPOSITION_KEY}
    if merged_properties:
        result["properties"] = merged_properties
    if merged_required:
        result["required"] = list(merged_required)

    logger.debug(
        f"Merged composition: {len(merged_properties)} properties, "
        f"{len(merged_required)} required"
    )
    return result
