"""Registry of the example CZML documents shipped with the viewer."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

import httpx

from ..document import LoadResult
from ..errors import err_unknown_example
from .client import _failure, load_from_url
from .config import LoaderConfig
from .config_loader import get_loader_config

EXAMPLE_CZML_FILES: Dict[str, str] = {
    "satellite-orbit": "/czml-examples/satellite-orbit.czml",
    "flight-path": "/czml-examples/flight-path.czml",
    "buildings-3d": "/czml-examples/buildings-3d.czml",
    "weather-radar": "/czml-examples/weather-radar.czml",
    "time-series": "/czml-examples/time-series.czml",
    "multi-vehicle": "/czml-examples/multi-vehicle.czml",
}


def available_examples() -> List[Tuple[str, str]]:
    return list(EXAMPLE_CZML_FILES.items())


def example_url(name: str, base_url: Optional[str] = None) -> str:
    """Absolute URL of a registered example; ``KeyError`` for unknown names."""

    path = EXAMPLE_CZML_FILES[name]
    base = base_url if base_url is not None else get_loader_config().examples_base_url
    return urljoin(base.rstrip("/") + "/", path.lstrip("/"))


async def load_example(
    name: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[LoaderConfig] = None,
) -> LoadResult:
    if name not in EXAMPLE_CZML_FILES:
        return _failure(err_unknown_example(name), name)
    base_url = config.examples_base_url if config else None
    return await load_from_url(
        example_url(name, base_url), client=client, config=config
    )
