from __future__ import annotations

from typing import Optional


class CZMLLoadError(RuntimeError):
    """Raised when a failed load result is unwrapped."""

    def __init__(self, message: str, source: str):
        super().__init__(f"{source}: {message}")
        self.message = message
        self.source = source


class PacketError(ValueError):
    """Raised when a raw packet cannot be turned into the typed packet view."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(f"{path}: {message}" if path else message)
        self.message = message
        self.path = path


NOT_AN_ARRAY = "CZML data must be an array"
UNKNOWN_LOAD_ERROR = "Unknown error loading CZML"
NOT_TEXT = "Failed to read file as text"


def err_http_status(status_code: int, reason: Optional[str]) -> str:
    return f"HTTP error: {status_code} {reason or ''}".rstrip()


def err_content_type(content_type: str) -> str:
    return f"Unexpected content type: {content_type}"


def err_read_failed(exc: BaseException) -> str:
    detail = str(exc)
    return f"Error reading file: {detail}" if detail else "Error reading file"


def err_unknown_example(name: str) -> str:
    return f"Unknown example CZML: {name}"


def err_all_sources_failed(failures: list[str]) -> str:
    return "All sources failed: " + "; ".join(failures)


__all__ = [
    "CZMLLoadError",
    "PacketError",
    "NOT_AN_ARRAY",
    "UNKNOWN_LOAD_ERROR",
    "NOT_TEXT",
    "err_http_status",
    "err_content_type",
    "err_read_failed",
    "err_unknown_example",
    "err_all_sources_failed",
]
