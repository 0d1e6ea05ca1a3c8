"""Packet and result types exchanged by the czmlkit loader and validator."""

from .models import (
    ClockRange,
    CZMLSummary,
    DocumentArray,
    LoadResult,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from .packets import (
    CZML_VERSION,
    DOCUMENT_ID,
    ENTITY_PROPERTIES,
    POSITION_KEYS,
    POSITION_REQUIRED_PROPERTIES,
    CartesianPosition,
    CartographicPosition,
    Clock,
    Packet,
    Position,
    ReferencePosition,
    entity_types_of,
    is_document_packet,
    is_number,
    is_packet,
    parse_packet,
    parse_packets,
    parse_position,
)

__all__ = [
    "ClockRange",
    "CZMLSummary",
    "DocumentArray",
    "LoadResult",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "CZML_VERSION",
    "DOCUMENT_ID",
    "ENTITY_PROPERTIES",
    "POSITION_KEYS",
    "POSITION_REQUIRED_PROPERTIES",
    "CartesianPosition",
    "CartographicPosition",
    "Clock",
    "Packet",
    "Position",
    "ReferencePosition",
    "entity_types_of",
    "is_document_packet",
    "is_number",
    "is_packet",
    "parse_packet",
    "parse_packets",
    "parse_position",
]
