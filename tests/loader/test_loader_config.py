import asyncio

from czmlkit.loader import LoaderConfig, config_loader


def test_defaults_without_config_file(tmp_path):
    cfg = config_loader.load_loader_config()
    assert cfg.examples_base_url == "http://localhost:5173"
    assert cfg.request_timeout_s == 30.0
    assert cfg.config_file_path == str(tmp_path / "czmlkit.toml")
    assert not (tmp_path / "czmlkit.toml").exists()


def test_write_then_read_config_file(tmp_path):
    path = tmp_path / "czmlkit.toml"
    config_loader.write_config(
        LoaderConfig(examples_base_url="https://viewer.test/", request_timeout_s=5),
        path,
    )

    text = path.read_text()
    assert "[examples]" in text and "[http]" in text

    file_cfg = config_loader.load_file_config()
    assert file_cfg["examples_base_url"] == "https://viewer.test"
    assert file_cfg["request_timeout_s"] == 5.0


def test_env_overrides_take_precedence(tmp_path, monkeypatch):
    config_loader.write_config(
        LoaderConfig(request_timeout_s=12.5), tmp_path / "czmlkit.toml"
    )
    monkeypatch.setenv("CZMLKIT_REQUEST_TIMEOUT_S", "3")
    monkeypatch.setenv("CZMLKIT_USER_AGENT", "viewer-bot/2")

    cfg = config_loader.load_loader_config()

    assert config_loader.load_file_config()["request_timeout_s"] == 12.5
    assert cfg.request_timeout_s == 3.0
    assert cfg.user_agent == "viewer-bot/2"
    assert config_loader.list_env_overrides()["CZMLKIT_REQUEST_TIMEOUT_S"] == "3"


def test_invalid_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("CZMLKIT_REQUEST_TIMEOUT_S", "soon")
    assert config_loader.load_loader_config().request_timeout_s == 30.0

    monkeypatch.setenv("CZMLKIT_REQUEST_TIMEOUT_S", "-1")
    assert config_loader.load_loader_config().request_timeout_s == 30.0


def test_get_loader_config_is_cached_until_reset(monkeypatch):
    first = config_loader.get_loader_config()
    monkeypatch.setenv("CZMLKIT_EXAMPLES_BASE_URL", "https://other.test")
    assert config_loader.get_loader_config() is first

    config_loader.set_loader_config(None)
    assert config_loader.get_loader_config().examples_base_url == "https://other.test"


def test_build_client_applies_timeout_and_headers():
    client = LoaderConfig(request_timeout_s=7, user_agent="ua/1").build_client()
    try:
        assert client.timeout.read == 7
        assert client.headers["User-Agent"] == "ua/1"
    finally:
        asyncio.run(client.aclose())
