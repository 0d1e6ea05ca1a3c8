"""Per-property checks used by :func:`czmlkit.validator.validate_czml`.

Each check takes the raw value and its path and returns the issues found; none
of them raise or mutate their input.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..document import (
    CZML_VERSION,
    POSITION_KEYS,
    POSITION_REQUIRED_PROPERTIES,
    ClockRange,
    Severity,
    ValidationIssue,
    is_number,
)

Issues = List[ValidationIssue]

_CLOCK_RANGES = [member.value for member in ClockRange]


def error(path: str, message: str) -> ValidationIssue:
    return ValidationIssue(path, message, Severity.ERROR)


def warning(path: str, message: str) -> ValidationIssue:
    return ValidationIssue(path, message, Severity.WARNING)


def check_document_packet(doc: Dict[str, Any], path: str) -> Issues:
    issues: Issues = []

    if "name" not in doc:
        issues.append(warning(f"{path}.name", "Document should have a name"))

    if "version" not in doc:
        issues.append(warning(f"{path}.version", "Document should have a version"))
    elif doc["version"] != CZML_VERSION:
        issues.append(
            warning(f"{path}.version", f"Unknown CZML version: {doc['version']}")
        )

    if "clock" in doc:
        issues.extend(check_clock(doc["clock"], f"{path}.clock"))

    return issues


def check_clock(clock: Any, path: str) -> Issues:
    if not isinstance(clock, dict):
        return [error(path, "Clock must be an object")]

    issues: Issues = []

    if "interval" in clock:
        interval = clock["interval"]
        if not isinstance(interval, str) or "/" not in interval:
            issues.append(
                error(
                    f"{path}.interval",
                    'Clock interval must be a string in format "start/end"',
                )
            )

    if "multiplier" in clock and not is_number(clock["multiplier"]):
        issues.append(error(f"{path}.multiplier", "Clock multiplier must be a number"))

    if "range" in clock and clock["range"] not in _CLOCK_RANGES:
        issues.append(
            warning(
                f"{path}.range",
                f"Clock range must be one of: {', '.join(_CLOCK_RANGES)}",
            )
        )

    return issues


def check_position(position: Any, path: str) -> Issues:
    if not isinstance(position, dict):
        return [error(path, "Position must be an object")]

    present = [key for key in POSITION_KEYS if key in position]
    if not present:
        return [
            error(
                path, "Position must have cartographicDegrees, cartesian, or reference"
            )
        ]
    if len(present) > 1:
        return [
            error(
                path,
                "Position must have only one of cartographicDegrees, cartesian, "
                f"or reference (found {', '.join(present)})",
            )
        ]

    key = present[0]
    if key == "cartographicDegrees":
        return _check_cartographic(position[key], f"{path}.cartographicDegrees")
    if key == "cartesian" and not isinstance(position[key], list):
        return [error(f"{path}.cartesian", "Cartesian position must be an array")]
    # reference positions point at another packet and are not checked here
    return []


def _check_cartographic(coords: Any, path: str) -> Issues:
    if not isinstance(coords, list):
        return [error(path, "cartographicDegrees must be an array")]

    # Only a plain [lon, lat, height, ...] array can be range checked; time-tagged
    # samples start with a time value and are left alone.
    if len(coords) < 3 or not (is_number(coords[0]) and is_number(coords[1])):
        return []

    issues: Issues = []
    lon, lat = coords[0], coords[1]
    if lon < -180 or lon > 180:
        # longitude wraps in the renderer, so this is only unusual
        issues.append(
            warning(f"{path}[0]", f"Longitude {lon} is out of range [-180, 180]")
        )
    if lat < -90 or lat > 90:
        issues.append(error(f"{path}[1]", f"Latitude {lat} is out of range [-90, 90]"))
    return issues


def check_point(point: Any, path: str) -> Issues:
    if not isinstance(point, dict):
        return [error(path, "Point must be an object")]

    issues: Issues = []
    size = point.get("pixelSize")
    if is_number(size):
        if size <= 0:
            issues.append(
                error(f"{path}.pixelSize", "Point pixelSize must be positive")
            )
        elif size > 100:
            issues.append(
                warning(
                    f"{path}.pixelSize", "Point pixelSize is unusually large (> 100)"
                )
            )
    return issues


def check_polyline(polyline: Any, path: str) -> Issues:
    if not isinstance(polyline, dict):
        return [error(path, "Polyline must be an object")]

    issues: Issues = []
    if "positions" not in polyline:
        issues.append(error(path, "Polyline requires positions"))

    width = polyline.get("width")
    if is_number(width) and width <= 0:
        issues.append(error(f"{path}.width", "Polyline width must be positive"))
    return issues


def check_polygon(polygon: Any, path: str) -> Issues:
    if not isinstance(polygon, dict):
        return [error(path, "Polygon must be an object")]

    issues: Issues = []
    if "positions" not in polygon:
        issues.append(error(path, "Polygon requires positions"))

    extruded = polygon.get("extrudedHeight")
    height = polygon.get("height")
    if is_number(extruded) and is_number(height) and extruded < height:
        issues.append(
            warning(
                f"{path}.extrudedHeight",
                "extrudedHeight should be greater than height",
            )
        )
    return issues


def check_ellipse(ellipse: Any, path: str) -> Issues:
    if not isinstance(ellipse, dict):
        return [error(path, "Ellipse must be an object")]

    issues: Issues = []
    if "semiMajorAxis" not in ellipse or "semiMinorAxis" not in ellipse:
        issues.append(error(path, "Ellipse requires semiMajorAxis and semiMinorAxis"))

    major = ellipse.get("semiMajorAxis")
    minor = ellipse.get("semiMinorAxis")
    if is_number(major) and is_number(minor) and major < minor:
        issues.append(warning(path, "semiMajorAxis should be >= semiMinorAxis"))
    return issues


_GRAPHICS_CHECKS = (
    ("point", check_point),
    ("polyline", check_polyline),
    ("polygon", check_polygon),
    ("ellipse", check_ellipse),
)


def check_entity_packet(packet: Dict[str, Any], path: str) -> Issues:
    issues: Issues = []

    if "position" in packet:
        issues.extend(check_position(packet["position"], f"{path}.position"))

    for prop, check in _GRAPHICS_CHECKS:
        if prop in packet:
            issues.extend(check(packet[prop], f"{path}.{prop}"))

    if "position" not in packet and any(
        prop in packet for prop in POSITION_REQUIRED_PROPERTIES
    ):
        issues.append(
            error(
                path,
                "Entity with point/label/billboard/ellipse/model requires a position",
            )
        )

    return issues
