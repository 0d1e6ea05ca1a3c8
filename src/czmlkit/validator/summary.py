"""Cheap inspection helpers that do not run the full validator."""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..document import CZMLSummary, entity_types_of


def _truthy(value: Any) -> bool:
    """Truthiness as the document format's JavaScript consumers see it.

    Empty objects and arrays count as present; only null, false, 0, NaN and
    the empty string do not.
    """

    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    return True


def is_likely_czml(data: Any) -> bool:
    """Quick pre-filter: a non-empty array whose first element has an ``id``."""

    if not isinstance(data, list) or not data:
        return False
    first = data[0]
    return isinstance(first, dict) and "id" in first


def get_czml_summary(czml: Sequence[Any]) -> CZMLSummary:
    """Summarise a document array, reading element 0 as its document packet.

    Element 0 is taken as the document packet without checking its ``id``; run
    :func:`validate_czml` first when that matters.
    """

    doc = czml[0] if czml and isinstance(czml[0], dict) else {}
    clock = doc.get("clock")

    entity_types: Dict[str, int] = {}
    for packet in czml[1:]:
        if not isinstance(packet, dict):
            continue
        for entity_type in entity_types_of(packet):
            entity_types[entity_type] = entity_types.get(entity_type, 0) + 1

    interval = clock.get("interval") if isinstance(clock, dict) else None

    return CZMLSummary(
        name=doc["name"] if _truthy(doc.get("name")) else "Untitled",
        version=doc["version"] if _truthy(doc.get("version")) else "unknown",
        entity_count=len(czml) - 1,
        has_clock=_truthy(clock),
        time_interval=interval,
        entity_types=entity_types,
    )
