"""Configuration for the People filter builder.

Settings come from a YAML file, validated by Pydantic. The first file found
wins:
1. the --config <path> option
2. ./people-filter.yaml or ./people-filter.yml
3. ~/.people-filter/config.yaml or config.yml

String values may reference the environment as ${VAR} or ${VAR:-default}.
Variables named PEOPLEFILTER_<SECTION>_<KEY> override file values, e.g.
PEOPLEFILTER_CONNECTION_API_KEY.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "PEOPLEFILTER_"
DEFAULT_BASE_URL = "https://api.infobip.com"

CONFIG_FILE_NAMES = ("people-filter.yaml", "people-filter.yml")
USER_CONFIG_DIR = ".people-filter"

# ${NAME} or ${NAME:-fallback}
_ENV_REF = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def resolve_env_vars(value: str) -> str:
    """Expand ${VAR} and ${VAR:-default} references from the environment.

    Unset variables without a default expand to an empty string.
    """
    return _ENV_REF.sub(
        lambda m: os.environ.get(m.group("name"), m.group("default") or ""),
        value,
    )


def _expand(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand(item) for key, item in data.items()}
    if isinstance(data, list):
        return [_expand(item) for item in data]
    return data


class ConnectionConfig(BaseModel):
    """People API connection settings."""

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout_seconds: float = 30.0
    page_limit: int = 1000

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Store the base URL without trailing slashes."""
        return value.strip().rstrip("/")

    @property
    def masked_api_key(self) -> str:
        """API key safe for display."""
        key = self.api_key.strip()
        if not key:
            return "(not set)"
        return "***" + key[-4:] if len(key) > 4 else "***"


class ServerConfig(BaseModel):
    """HTTP service settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"


class FilterBuilderConfig(BaseModel):
    """Top-level configuration for the People filter builder."""

    connection: ConnectionConfig = ConnectionConfig()
    server: ServerConfig = ServerConfig()


def config_search_paths() -> list[Path]:
    """Candidate config files in priority order."""
    user_dir = Path.home() / USER_CONFIG_DIR
    return [Path.cwd() / name for name in CONFIG_FILE_NAMES] + [
        user_dir / "config.yaml",
        user_dir / "config.yml",
    ]


def _env_overrides() -> dict[str, dict[str, str]]:
    """Collect PEOPLEFILTER_<SECTION>_<KEY> variables by section.

    Only known sections and fields are picked up; values stay strings and
    are coerced by the section models.
    """
    overrides: dict[str, dict[str, str]] = {}
    for section, info in FilterBuilderConfig.model_fields.items():
        section_model = info.annotation
        for field_name in section_model.model_fields:
            env_name = f"{ENV_PREFIX}{section}_{field_name}".upper()
            if env_name in os.environ:
                overrides.setdefault(section, {})[field_name] = os.environ[env_name]
    return overrides


def load_config(config_path: str | None = None) -> FilterBuilderConfig:
    """Load and validate configuration.

    Args:
        config_path: Explicit config file. When None the standard locations
            are searched; with no file found, defaults apply.

    Returns:
        FilterBuilderConfig with environment overrides applied.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
        pydantic.ValidationError: If a value has the wrong type.
    """
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = next((p for p in config_search_paths() if p.exists()), None)

    data: dict[str, Any] = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        data = _expand(yaml.safe_load(path.read_text(encoding="utf-8")) or {})

    for section, values in _env_overrides().items():
        current = data.get(section)
        data[section] = {**(current if isinstance(current, dict) else {}), **values}

    return FilterBuilderConfig.model_validate(data)
