"""Structural and semantic validation of CZML document arrays."""

from .core import validate_czml
from .summary import get_czml_summary, is_likely_czml

__all__ = ["validate_czml", "get_czml_summary", "is_likely_czml"]
