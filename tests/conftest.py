import logging
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from czmlkit.loader import config_loader  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_czmlkit_env(tmp_path, monkeypatch):
    """Keep tests away from real config files, log dirs and CZMLKIT_* settings."""

    for key in list(config_loader.list_env_overrides()):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv(config_loader.CONFIG_FILE_ENV, str(tmp_path / "czmlkit.toml"))
    monkeypatch.setenv("CZMLKIT_LOG_DIR", str(tmp_path / "logs"))
    config_loader.set_loader_config(None)
    yield
    config_loader.set_loader_config(None)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_czmlkit_handler", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def mock_client():
    """Build an AsyncClient whose requests are answered by ``routes``.

    ``routes`` maps a URL to an ``httpx.Response`` or to an exception instance,
    which is raised as if the transport had failed.
    """

    def _build(routes):
        def handler(request: httpx.Request) -> httpx.Response:
            outcome = routes.get(str(request.url))
            if outcome is None:
                return httpx.Response(404)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build
