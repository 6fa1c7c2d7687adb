"""Configuration management for the system properties services.

This module centralizes environment-driven configuration for every component
in the repository (the System properties service, the Inventory client and
the contract tooling). It builds on ``pydantic_settings.BaseSettings`` so
configuration can be provided via environment variables, ``.env`` files, or
defaults.

Highlights
- Strongly-typed settings with sensible defaults
- Field names double as environment variable names (``sp_log_level`` is
  read from ``SP_LOG_LEVEL``)
- Small component-specific subclasses to keep concerns clear

Usage
- Inject the appropriate config in your service entrypoint:
  ``config = SystemConfig()``
- Or select dynamically: ``config = get_config("system")``
"""

import os
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class for all components.

    Notes
    - Add new shared settings here so downstream components inherit them.
    - Prefer a typed field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    sp_env: str = Field(default="local", description="Deployment environment name")

    # Logging
    sp_log_level: str = Field(default="INFO", description="Root log level")
    sp_log_format: str = Field(default="json", description="json or console")

    # Observability
    sp_metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics")


class SystemConfig(BaseConfig):
    """Configuration for the System properties service.

    The server name and default-directory flag seed the property table the
    same way the application server would populate them at boot.
    """

    sp_system_host: str = Field(default="0.0.0.0")
    sp_system_port: int = Field(default=9080)
    sp_system_root_path: str = Field(default="", description="Prefix for the properties routes, e.g. /system")
    sp_server_name: str = Field(default="defaultServer")
    sp_user_dir_is_default: bool = Field(default=True)
    sp_properties_file: Optional[str] = Field(default=None, description="Optional key=value file merged into the table")


class InventoryConfig(BaseConfig):
    """Configuration for the Inventory client."""

    sp_system_service_url: str = Field(default="http://localhost:9080")
    sp_http_timeout: float = Field(default=10.0)


class ContractConfig(BaseConfig):
    """Configuration for contract tests and the stand-in server.

    Keeps participant names and pact output location together.
    """

    sp_pact_consumer: str = Field(default="Inventory")
    sp_pact_provider: str = Field(default="System")
    sp_pact_dir: str = Field(default="target/pacts")
    sp_mock_host: str = Field(default="127.0.0.1")
    sp_mock_startup_timeout: float = Field(default=10.0)


def get_config(component: str) -> BaseConfig:
    """Get configuration for a specific component.

    Parameters
    - component: Literal name: ``system``, ``inventory`` or ``contract``.

    Returns
    - A concrete ``BaseConfig`` subclass pre-wired to read the right env vars.
    """
    config_map = {
        "system": SystemConfig,
        "inventory": InventoryConfig,
        "contract": ContractConfig,
    }

    # Unknown names fall back to the shared settings.
    config_class = config_map.get(component, BaseConfig)
    return config_class()


def load_properties_file(properties_file: str) -> Dict[str, str]:
    """Load entries from a properties file.

    Accepts ``key=value`` and ``key: value`` lines, ignoring blank lines and
    lines starting with ``#`` or ``!``. Values keep inner whitespace; keys and
    values are stripped at the edges. A missing file yields an empty dict.

    Parameters
    - properties_file: Path to the file

    Returns
    - Dict of parsed key/value pairs in file order.
    """
    entries: Dict[str, str] = {}
    if not os.path.exists(properties_file):
        return entries

    with open(properties_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line[0] in "#!":
                continue
            separators = [pos for pos in (line.find("="), line.find(":")) if pos > 0]
            if not separators:
                continue
            split_at = min(separators)
            entries[line[:split_at].strip()] = line[split_at + 1:].strip()
    return entries
