"""Settings discovery and loading.

The config file is JSON. Lookup order for its location:

1. ``$JIRA_CONFIG_FILE``
2. ``$XDG_CONFIG_HOME/jiractl/config.json``
3. ``~/.config/jiractl/config.json``

The API token is never read from or written to the file; it only comes
from ``$JIRA_API_TOKEN``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jiractl.types.core import AuthType, CustomFieldConfig, Installation, SettingsDict

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "jiractl"
CONFIG_FILENAME = "config.json"
DEFAULT_TIMEOUT = 15.0

VALID_INSTALLATIONS: frozenset[str] = frozenset({"cloud", "local"})
VALID_AUTH_TYPES: frozenset[str] = frozenset({"basic", "bearer"})

# Environment variable -> settings key
_ENV_OVERRIDES = {
    "JIRA_SERVER": "server",
    "JIRA_LOGIN": "login",
    "JIRA_PROJECT": "project",
    "JIRA_AUTH_TYPE": "auth_type",
}


@dataclass
class Settings:
    server: str = ""
    login: str = ""
    project: str = ""
    installation: Installation = "cloud"
    auth_type: AuthType = "basic"
    timeout: float = DEFAULT_TIMEOUT
    custom_fields: list[CustomFieldConfig] = field(default_factory=list)
    api_token: str = field(default="", repr=False)
    config_path: Path | None = None

    def to_dict(self) -> SettingsDict:
        """Serializable form, without the token."""
        return SettingsDict(
            server=self.server,
            login=self.login,
            project=self.project,
            installation=self.installation,
            auth_type=self.auth_type,
            timeout=self.timeout,
            custom_fields=list(self.custom_fields),
        )


def get_config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def find_config_file(explicit: str | Path | None = None) -> Path:
    """Return the config file path to use. The file itself may not exist."""
    if explicit:
        return Path(explicit).expanduser()
    env_path = os.environ.get("JIRA_CONFIG_FILE")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_home() / CONFIG_DIR_NAME / CONFIG_FILENAME


def read_config(config_path: Path) -> SettingsDict:
    """Read the config file. Returns an empty mapping if missing or corrupt."""
    if not config_path.exists():
        return SettingsDict()
    try:
        data = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return SettingsDict()
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top-level value must be an object", config_path)
        return SettingsDict()
    result: SettingsDict = data  # type: ignore[assignment]
    return result


def write_config(config_path: Path, config: SettingsDict | dict[str, Any]) -> None:
    """Write the config file, creating its directory if needed."""
    data = {k: v for k, v in dict(config).items() if k != "api_token"}
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(data, indent=2) + "\n")


def load_settings(config_file: str | Path | None = None, *, project: str | None = None) -> Settings:
    """Merge file config, environment overrides, and an explicit project override."""
    path = find_config_file(config_file)
    raw: dict[str, Any] = dict(read_config(path))
    for env_name, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            raw[key] = value
    if project:
        raw["project"] = project

    installation = str(raw.get("installation", "cloud")).lower()
    if installation not in VALID_INSTALLATIONS:
        logger.warning("Unknown installation '%s' in config, falling back to 'cloud'", installation)
        installation = "cloud"
    auth_type = str(raw.get("auth_type", "basic")).lower()
    if auth_type not in VALID_AUTH_TYPES:
        logger.warning("Unknown auth_type '%s' in config, falling back to 'basic'", auth_type)
        auth_type = "basic"
    try:
        timeout = float(raw.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning("Invalid timeout %r in config, using %s", raw.get("timeout"), DEFAULT_TIMEOUT)
        timeout = DEFAULT_TIMEOUT
    custom_fields = raw.get("custom_fields") or []
    if not isinstance(custom_fields, list):
        logger.warning("Ignoring custom_fields in %s: expected a list", path)
        custom_fields = []

    return Settings(
        server=str(raw.get("server", "")).rstrip("/"),
        login=str(raw.get("login", "")),
        project=str(raw.get("project", "")).upper(),
        installation=installation,  # type: ignore[arg-type]
        auth_type=auth_type,  # type: ignore[arg-type]
        timeout=timeout,
        custom_fields=[f for f in custom_fields if isinstance(f, dict)],
        api_token=os.environ.get("JIRA_API_TOKEN", ""),
        config_path=path,
    )
