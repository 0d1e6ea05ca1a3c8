from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

CZMLKIT_VERSION = "0.1.0"


@dataclass
class LoaderConfig:
    # Root that the built-in example paths (/czml-examples/...) are served from
    examples_base_url: str = "http://localhost:5173"
    request_timeout_s: float = 30.0
    user_agent: str = f"czmlkit/{CZMLKIT_VERSION}"
    accept: str = "application/json, text/plain, */*"
    config_file_path: Optional[str] = None

    @classmethod
    def load(cls) -> "LoaderConfig":
        from .config_loader import load_loader_config

        return load_loader_config()

    def build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.request_timeout_s,
            headers={"User-Agent": self.user_agent, "Accept": self.accept},
            follow_redirects=True,
        )
