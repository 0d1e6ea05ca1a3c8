"""Load CZML document arrays from URLs, strings and files, and merge them."""

from .client import (
    load_and_merge,
    load_from_file,
    load_from_string,
    load_from_url,
    merge_results,
)
from .config import LoaderConfig
from .config_loader import get_loader_config, load_loader_config, set_loader_config
from .examples import (
    EXAMPLE_CZML_FILES,
    available_examples,
    example_url,
    load_example,
)

__all__ = [
    "load_and_merge",
    "load_from_file",
    "load_from_string",
    "load_from_url",
    "merge_results",
    "LoaderConfig",
    "get_loader_config",
    "load_loader_config",
    "set_loader_config",
    "EXAMPLE_CZML_FILES",
    "available_examples",
    "example_url",
    "load_example",
]
