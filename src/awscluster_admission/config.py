"""Runtime settings for the admission engine.

Settings load from environment variables prefixed ``AWSCLUSTER_ADMISSION_``
and optionally from a YAML file. Environment variables take precedence
over YAML values.

Example:
    >>> settings = get_settings()
    >>> settings.default_cni_plugin
    'calico'
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from awscluster_admission.ingress import CNI_INGRESS_RULES, DEFAULT_CNI_PLUGIN

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class AdmissionSettings(BaseSettings):
    """Configuration for the AWSCluster admission engine.

    Environment Variables:
        AWSCLUSTER_ADMISSION_DEFAULT_CNI_PLUGIN: CNI plugin whose rules are defaulted
        AWSCLUSTER_ADMISSION_LOG_LEVEL: Minimum log level
        AWSCLUSTER_ADMISSION_JSON_LOGS: Emit JSON logs instead of console output
    """

    model_config = SettingsConfigDict(
        env_prefix="AWSCLUSTER_ADMISSION_",
        extra="ignore",
    )

    default_cni_plugin: str = Field(
        default=DEFAULT_CNI_PLUGIN,
        description="CNI plugin selector used when defaulting ingress rules",
    )
    log_level: LogLevel = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Give environment variables precedence over YAML-supplied values."""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @field_validator("default_cni_plugin", mode="after")
    @classmethod
    def validate_default_cni_plugin(cls, v: str) -> str:
        """Ensure the plugin has a canonical rule set."""
        if v not in CNI_INGRESS_RULES:
            supported = ", ".join(sorted(CNI_INGRESS_RULES))
            msg = f"Unsupported CNI plugin {v!r} (supported: {supported})"
            raise ValueError(msg)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Dictionary of settings, or empty dict if the file doesn't exist.
    """
    if not config_path.exists():
        return {}

    with config_path.open() as f:
        data = yaml.safe_load(f)
        return data if data else {}


def get_settings(config_path: Path | None = None) -> AdmissionSettings:
    """Load settings from environment and optionally a YAML file.

    Args:
        config_path: Optional path to a YAML settings file.

    Returns:
        Validated AdmissionSettings instance.

    Raises:
        pydantic.ValidationError: If a setting is invalid.
    """
    yaml_config = load_yaml_config(config_path) if config_path is not None else {}
    return AdmissionSettings(**yaml_config)


__all__ = ["AdmissionSettings", "LogLevel", "get_settings", "load_yaml_config"]
