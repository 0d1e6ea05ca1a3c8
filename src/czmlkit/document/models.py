"""Result and diagnostic records shared by the loader and the validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, cast

from ..errors import CZMLLoadError

DocumentArray = List[Any]


class Severity(str, Enum):
    """How a validation finding affects overall validity."""

    ERROR = "error"
    WARNING = "warning"


class ClockRange(str, Enum):
    """Behaviour of the simulation clock when it reaches the interval bounds."""

    UNBOUNDED = "UNBOUNDED"
    CLAMPED = "CLAMPED"
    LOOP_STOP = "LOOP_STOP"


@dataclass(frozen=True)
class ValidationIssue:
    """A single error or warning located by a JSON-pointer-like path."""

    path: str
    message: str
    severity: Severity

    def as_dict(self) -> Dict[str, str]:
        return {
            "path": self.path,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass
class ValidationResult:
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    packet_count: int = 0
    has_document: bool = False
    has_clock: bool = False
    entity_types: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [issue.as_dict() for issue in self.errors],
            "warnings": [issue.as_dict() for issue in self.warnings],
            "packetCount": self.packet_count,
            "hasDocument": self.has_document,
            "hasClock": self.has_clock,
            "entityTypes": list(self.entity_types),
        }


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load: parsed ``data`` on success, ``error`` otherwise."""

    success: bool
    source: str
    data: Optional[DocumentArray] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.success and self.data is None:
            raise ValueError("successful LoadResult requires data")
        if not self.success and self.data is not None:
            raise ValueError("failed LoadResult must not carry data")

    @classmethod
    def ok(cls, data: DocumentArray, source: str) -> "LoadResult":
        return cls(success=True, source=source, data=data)

    @classmethod
    def fail(cls, error: str, source: str) -> "LoadResult":
        return cls(success=False, source=source, error=error)

    def raise_for_error(self) -> DocumentArray:
        """Return ``data`` or raise :class:`CZMLLoadError` for a failed load."""

        if not self.success:
            raise CZMLLoadError(self.error or "", self.source)
        return cast(DocumentArray, self.data)

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "source": self.source}
        if self.success:
            out["data"] = self.data
        else:
            out["error"] = self.error
        return out


@dataclass
class CZMLSummary:
    name: str
    version: str
    entity_count: int
    has_clock: bool
    time_interval: Optional[str] = None
    entity_types: Dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "entityCount": self.entity_count,
            "hasClock": self.has_clock,
            "entityTypes": dict(self.entity_types),
        }
        if self.time_interval is not None:
            out["timeInterval"] = self.time_interval
        return out
