"""
Panel configuration.

Settings come from a ``config.json`` document (camelCase keys, the same
file the admin page loads) and can be overridden by ``SITESMITH_*``
environment variables.
"""

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from sitesmith.exceptions import ConfigurationError
from sitesmith.logging import get_logger

logger = get_logger("config")

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_FILE_PATH = "FAKE/values.js"
DEFAULT_EVENT_TYPE = "update-data"


def default_credentials_path() -> Path:
    """Location of the saved token, honoring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "sitesmith" / "credentials.json"


@dataclass
class PanelConfig:
    """Configuration for the provisioning panel."""

    owner: str | None = None
    template_owner: str | None = None
    template_repo: str | None = None
    file_path: str = DEFAULT_FILE_PATH
    default_branches: list[str] = field(default_factory=lambda: ["main", "master"])
    pat: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    dispatch_event_type: str = DEFAULT_EVENT_TYPE
    credentials_path: Path = field(default_factory=default_credentials_path)

    # config.json key -> attribute
    _JSON_KEYS = {
        "owner": "owner",
        "templateOwner": "template_owner",
        "templateRepo": "template_repo",
        "filePath": "file_path",
        "defaultBranches": "default_branches",
        "pat": "pat",
        "apiBaseUrl": "api_base_url",
        "dispatchEventType": "dispatch_event_type",
        "credentialsPath": "credentials_path",
    }

    # environment variable -> attribute
    _ENV_KEYS = {
        "SITESMITH_OWNER": "owner",
        "SITESMITH_TEMPLATE_OWNER": "template_owner",
        "SITESMITH_TEMPLATE_REPO": "template_repo",
        "SITESMITH_FILE_PATH": "file_path",
        "SITESMITH_TOKEN": "pat",
        "SITESMITH_API_BASE_URL": "api_base_url",
        "SITESMITH_EVENT_TYPE": "dispatch_event_type",
        "SITESMITH_CREDENTIALS_PATH": "credentials_path",
    }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PanelConfig":
        """
        Build a configuration from a parsed config.json document.

        Unknown keys are ignored; null values keep the default.

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        values: dict[str, Any] = {}
        for key, attr in cls._JSON_KEYS.items():
            value = data.get(key)
            if value is None:
                continue
            if attr == "default_branches":
                if not isinstance(value, list) or not all(isinstance(b, str) for b in value):
                    raise ConfigurationError("defaultBranches must be a list of strings")
            elif not isinstance(value, str):
                raise ConfigurationError(f"{key} must be a string")
            elif attr == "credentials_path":
                value = Path(value).expanduser()
            values[attr] = value
        return cls(**values)

    def with_env(self, environ: dict[str, str] | None = None) -> "PanelConfig":
        """
        Return a copy with ``SITESMITH_*`` environment overrides applied.

        Args:
            environ: Mapping to read from (default: os.environ)
        """
        environ = dict(os.environ) if environ is None else environ
        overrides: dict[str, Any] = {}
        for var, attr in self._ENV_KEYS.items():
            value = environ.get(var)
            if value:
                overrides[attr] = Path(value).expanduser() if attr == "credentials_path" else value
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "PanelConfig":
        """Defaults overlaid with environment variables."""
        return cls().with_env(environ)

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to config.json keys, omitting the token."""
        by_attr = {attr: key for key, attr in self._JSON_KEYS.items()}
        result: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "pat":
                continue
            value = getattr(self, f.name)
            result[by_attr[f.name]] = str(value) if isinstance(value, Path) else value
        return result


def load_config(path: str | Path | None, environ: dict[str, str] | None = None) -> PanelConfig:
    """
    Load configuration from a JSON file, then apply environment overrides.

    A missing file is not an error: defaults are used and a warning is
    logged.

    Args:
        path: Path to config.json, or None to skip the file
        environ: Environment mapping (default: os.environ)

    Returns:
        PanelConfig

    Raises:
        ConfigurationError: If the file is not valid JSON or has bad values
    """
    config = PanelConfig()
    if path is not None:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Config file %s not found, using defaults", path)
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"{path} must contain a JSON object")
            config = PanelConfig.from_dict(data)
            logger.info("Loaded configuration from %s", path)
    return config.with_env(environ)
