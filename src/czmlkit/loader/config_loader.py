from __future__ import annotations

import os
import tempfile
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Callable, Optional, get_type_hints

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

from .config import LoaderConfig

CONFIG_FILE_ENV = "CZMLKIT_CONFIG_FILE"
ENV_PREFIX = "CZMLKIT_"
DEFAULT_CONFIG_PATH = Path("configs/czmlkit.toml")

_SECTION_MAP: dict[str, list[str]] = {
    "examples": ["examples_base_url"],
    "http": ["request_timeout_s", "user_agent", "accept"],
}

_config_instance: Optional[LoaderConfig] = None


def _field_types() -> dict[str, Any]:
    hints = get_type_hints(LoaderConfig)
    return {f.name: hints.get(f.name) for f in fields(LoaderConfig)}


def _coerce_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, (int, float)):
        return float(value)
    return float(str(value))


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_CASTERS: dict[Any, Callable[[Any], Any]] = {
    float: _coerce_float,
    str: _coerce_str,
}


def _config_path() -> Path:
    return Path(os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_PATH)).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        data = tomllib.load(fh)

    out: dict[str, Any] = {}
    for section, keys in _SECTION_MAP.items():
        section_values = data.get(section, {})
        if not isinstance(section_values, dict):
            continue
        for key in keys:
            if key in section_values:
                out[key] = section_values[key]
    return out


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    env = os.environ
    for key in config:
        if key == "config_file_path":
            continue
        value = env.get(f"{ENV_PREFIX}{key.upper()}")
        if value is not None:
            config[key] = value
    return config


def _default_config_dict() -> dict[str, Any]:
    data = asdict(LoaderConfig())
    data.pop("config_file_path", None)
    return data


def _normalize(config: dict[str, Any]) -> dict[str, Any]:
    field_types = _field_types()
    normalized = {}
    for key, default_value in _default_config_dict().items():
        value = config.get(key, default_value)
        caster = _CASTERS.get(field_types.get(key))
        try:
            normalized[key] = caster(value) if caster else value
        except (TypeError, ValueError):
            normalized[key] = default_value
    if normalized["request_timeout_s"] <= 0:
        normalized["request_timeout_s"] = _default_config_dict()["request_timeout_s"]
    normalized["examples_base_url"] = normalized["examples_base_url"].rstrip("/")
    return normalized


def load_file_config() -> dict[str, Any]:
    base = _default_config_dict()
    base.update(_read_config_file(_config_path()))
    return _normalize(base)


def load_loader_config() -> LoaderConfig:
    """File values, then ``CZMLKIT_*`` environment overrides, over the defaults."""

    path = _config_path()
    merged = _default_config_dict()
    merged.update(_read_config_file(path))
    merged = _normalize(_apply_env_overrides(merged))
    cfg = LoaderConfig(**merged)
    cfg.config_file_path = str(path)
    return cfg


def get_loader_config() -> LoaderConfig:
    """Return the process-wide configuration, loading it on first use."""

    global _config_instance
    if _config_instance is None:
        _config_instance = load_loader_config()
    return _config_instance


def set_loader_config(config: Optional[LoaderConfig]) -> None:
    """Replace (or with ``None`` reset) the process-wide configuration."""

    global _config_instance
    _config_instance = config


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return '""'
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_config(config: LoaderConfig, path: Path | None = None) -> Path:
    path = Path(path).expanduser() if path else _config_path()
    config_dict = asdict(config)
    lines: list[str] = [
        "# czmlkit loader configuration.",
        "# Environment variables prefixed CZMLKIT_ override these values.",
    ]
    for section, keys in _SECTION_MAP.items():
        lines.append("")
        lines.append(f"[{section}]")
        for key in keys:
            lines.append(f"{key} = {_format_value(config_dict[key])}")

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(
        prefix="czmlkit_config_", suffix=".toml", dir=path.parent
    )
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as handle:
            handle.write("\n".join(lines) + "\n")
        Path(tmp_path).replace(path)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
    return path


def list_env_overrides() -> dict[str, str]:
    return {
        key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)
    }
