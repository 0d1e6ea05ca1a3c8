"""Typed, permissive view over raw CZML packets.

The loader and validator work on the raw JSON values (lists of dicts) so that
nothing is lost or reinterpreted. These pydantic models give callers typed
access to the handful of fields czmlkit understands while keeping every other
key (``box``, ``model``, ``availability`` ...) as an extra field.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from ..errors import PacketError
from .models import ClockRange

DOCUMENT_ID = "document"
CZML_VERSION = "1.0"

ENTITY_PROPERTIES = (
    "point",
    "label",
    "billboard",
    "polyline",
    "polygon",
    "ellipse",
    "box",
    "cylinder",
    "corridor",
    "ellipsoid",
    "model",
    "path",
    "rectangle",
    "wall",
    "tileset",
)

# Graphics that are drawn at the packet's position and make no sense without one.
POSITION_REQUIRED_PROPERTIES = ("point", "label", "billboard", "ellipse", "model")

POSITION_KEYS = ("cartographicDegrees", "cartesian", "reference")

Number = Union[StrictInt, StrictFloat]


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_packet(value: Any) -> bool:
    """True for an object carrying a string ``id``."""

    return isinstance(value, dict) and isinstance(value.get("id"), str)


def is_document_packet(value: Any) -> bool:
    return is_packet(value) and value["id"] == DOCUMENT_ID


def entity_types_of(packet: Dict[str, Any]) -> List[str]:
    """Return the known graphics properties present on ``packet``."""

    return [prop for prop in ENTITY_PROPERTIES if prop in packet]


class Clock(BaseModel):
    model_config = ConfigDict(extra="allow")

    interval: Optional[StrictStr] = None
    multiplier: Optional[Number] = None
    range: Optional[ClockRange] = None

    @field_validator("interval")
    @classmethod
    def _interval_has_separator(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "/" not in value:
            raise ValueError('Clock interval must be a string in format "start/end"')
        return value

    @property
    def start(self) -> Optional[str]:
        return self.interval.split("/", 1)[0] if self.interval else None

    @property
    def stop(self) -> Optional[str]:
        return self.interval.split("/", 1)[1] if self.interval else None


class CartographicPosition(BaseModel):
    model_config = ConfigDict(extra="allow")

    cartographicDegrees: List[Union[Number, StrictStr]]

    @property
    def kind(self) -> str:
        return "cartographicDegrees"


class CartesianPosition(BaseModel):
    model_config = ConfigDict(extra="allow")

    cartesian: List[Union[Number, StrictStr]]

    @property
    def kind(self) -> str:
        return "cartesian"


class ReferencePosition(BaseModel):
    model_config = ConfigDict(extra="allow")

    reference: StrictStr

    @property
    def kind(self) -> str:
        return "reference"


Position = Union[CartographicPosition, CartesianPosition, ReferencePosition]

_POSITION_VARIANTS = {
    "cartographicDegrees": CartographicPosition,
    "cartesian": CartesianPosition,
    "reference": ReferencePosition,
}


def parse_position(raw: Any, path: str = "position") -> Position:
    """Build the position variant for ``raw``; exactly one encoding must be used."""

    if isinstance(
        raw, (CartographicPosition, CartesianPosition, ReferencePosition)
    ):
        return raw
    if not isinstance(raw, dict):
        raise PacketError("Position must be an object", path)
    present = [key for key in POSITION_KEYS if key in raw]
    if not present:
        raise PacketError(
            "Position must have cartographicDegrees, cartesian, or reference", path
        )
    if len(present) > 1:
        raise PacketError(
            f"Position must have only one of cartographicDegrees, cartesian, "
            f"or reference (found {', '.join(present)})",
            path,
        )
    model = _POSITION_VARIANTS[present[0]]
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise PacketError(_first_error(exc), f"{path}.{present[0]}") from exc


class Packet(BaseModel):
    """A CZML packet with typed access to the properties czmlkit validates."""

    model_config = ConfigDict(extra="allow")

    id: StrictStr
    name: Optional[str] = None
    version: Optional[str] = None
    clock: Optional[Clock] = None
    position: Optional[Position] = None
    point: Optional[Dict[str, Any]] = None
    polyline: Optional[Dict[str, Any]] = None
    polygon: Optional[Dict[str, Any]] = None
    ellipse: Optional[Dict[str, Any]] = None

    @field_validator("position", mode="before")
    @classmethod
    def _single_position_encoding(cls, value: Any) -> Any:
        if value is None:
            return None
        return parse_position(value)

    @property
    def is_document(self) -> bool:
        return self.id == DOCUMENT_ID

    @property
    def extensions(self) -> Dict[str, Any]:
        """Keys preserved verbatim but not modelled (``box``, ``model`` ...)."""

        return dict(self.model_extra or {})

    @property
    def entity_types(self) -> List[str]:
        return entity_types_of(self.to_raw())

    def to_raw(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    return f"{loc}: {message}" if loc else message


def parse_packet(raw: Any, path: str = "") -> Packet:
    """Return the typed view of ``raw`` or raise :class:`PacketError`."""

    if not isinstance(raw, dict):
        raise PacketError("Invalid packet structure", path)
    try:
        return Packet.model_validate(raw)
    except ValidationError as exc:
        raise PacketError(_first_error(exc), path) from exc


def parse_packets(data: Any) -> List[Packet]:
    if not isinstance(data, list):
        raise PacketError("CZML must be an array")
    return [parse_packet(raw, f"[{index}]") for index, raw in enumerate(data)]
