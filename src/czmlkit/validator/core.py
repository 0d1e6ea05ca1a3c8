from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from ..document import (
    DOCUMENT_ID,
    Severity,
    ValidationIssue,
    ValidationResult,
    entity_types_of,
    is_document_packet,
    is_packet,
)
from .rules import check_document_packet, check_entity_packet, error, warning

logger = logging.getLogger(__name__)


def _fatal(message: str) -> ValidationResult:
    return ValidationResult(valid=False, errors=[error("", message)])


def _split(
    issues: Iterable[ValidationIssue],
    errors: List[ValidationIssue],
    warnings: List[ValidationIssue],
) -> None:
    for issue in issues:
        (errors if issue.severity is Severity.ERROR else warnings).append(issue)


def validate_czml(czml: Any) -> ValidationResult:
    """Check a CZML document array and report every problem found.

    Never raises. A non-array or empty array is reported on its own; otherwise
    all packets are scanned and their issues accumulated.
    """

    if not isinstance(czml, list):
        return _fatal("CZML must be an array")
    if not czml:
        return _fatal("CZML array is empty")

    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    entity_types: Dict[str, None] = {}
    has_document = False
    has_clock = False
    packet_count = 0

    first = czml[0]
    if not is_document_packet(first):
        errors.append(
            error("[0]", 'First packet must be document packet with id "document"')
        )
    else:
        has_document = True
        _split(check_document_packet(first, "[0]"), errors, warnings)
        has_clock = "clock" in first

    seen_ids: set[str] = set()
    for index, packet in enumerate(czml):
        path = f"[{index}]"

        if not is_packet(packet):
            errors.append(error(path, "Invalid packet structure"))
            continue

        packet_count += 1
        packet_id = packet["id"]
        if packet_id in seen_ids:
            warnings.append(warning(path, f'Duplicate packet ID: "{packet_id}"'))
        seen_ids.add(packet_id)

        if packet_id == DOCUMENT_ID:
            continue

        _split(check_entity_packet(packet, path), errors, warnings)
        for entity_type in entity_types_of(packet):
            entity_types.setdefault(entity_type)

    logger.debug(
        "Validated %d packets: %d errors, %d warnings",
        packet_count,
        len(errors),
        len(warnings),
    )

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        packet_count=packet_count,
        has_document=has_document,
        has_clock=has_clock,
        entity_types=list(entity_types),
    )
