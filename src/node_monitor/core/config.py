"""Configuration management for the node monitor."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from node_monitor.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config.yaml"
CONFIG_PATH_ENV = "CONFIG_PATH"


def resolve_config_path(path: str | Path | None = None) -> str | Path:
    """Pick the configuration file to load.

    A non-empty CONFIG_PATH environment variable wins over the given path.

    Args:
        path: Path requested on the command line (optional)

    Returns:
        Path of the configuration file
    """
    return os.environ.get(CONFIG_PATH_ENV) or path or DEFAULT_CONFIG_PATH


def blank_to_empty(value: Any) -> Any:
    """Read a key present without a value (YAML null) as an empty string."""
    return "" if value is None else value


class ProxmoxConfig(BaseModel):
    """Proxmox VE API configuration.

    Token credentials take precedence over username/password when both are set.
    """

    model_config = ConfigDict(populate_by_name=True)

    api_url: str = Field("", alias="apiUrl")
    username: str = ""
    password: str = ""
    token_id: str = Field("", alias="tokenId")
    token_secret: str = Field("", alias="tokenSecret")
    verify_tls: bool = Field(False, alias="verifyTls")
    timeout_seconds: float = Field(30.0, alias="timeoutSeconds", gt=0)

    @field_validator(
        "api_url", "username", "password", "token_id", "token_secret", mode="before"
    )
    @classmethod
    def blank_strings(cls, v: Any) -> Any:
        """Read keys present without a value as empty strings."""
        return blank_to_empty(v)

    @property
    def uses_token(self) -> bool:
        """Whether API token authentication is configured."""
        return bool(self.token_id and self.token_secret)


class DiscordConfig(BaseModel):
    """Discord webhook configuration."""

    model_config = ConfigDict(populate_by_name=True)

    webhook_url: str = Field("", alias="webhookUrl")
    enabled: bool = False
    timeout_seconds: float = Field(30.0, alias="timeoutSeconds", gt=0)

    @field_validator("webhook_url", mode="before")
    @classmethod
    def blank_webhook_url(cls, v: Any) -> Any:
        """Read a webhook_url key without a value as an empty string."""
        return blank_to_empty(v)


class KubernetesConfig(BaseModel):
    """Kubernetes client configuration."""

    model_config = ConfigDict(populate_by_name=True)

    kubeconfig_path: str | None = Field(None, alias="kubeconfigPath")
    context: str | None = None


class RemediationConfig(BaseModel):
    """Remediation policy configuration."""

    model_config = ConfigDict(populate_by_name=True)

    grace_period_seconds: float = Field(60.0, alias="gracePeriodSeconds", ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    output: str = "stderr"


class NodeMapping(BaseModel):
    """Kubernetes node name to Proxmox VM mapping."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kubernetes_node_name: str = Field(..., alias="kubernetesNodeName", min_length=1)
    proxmox_node: str = Field(..., alias="proxmoxNode", min_length=1)
    vmid: int = Field(..., gt=0)

    @property
    def resource_info(self) -> str:
        """Human-readable description of the backing VM."""
        return f"Proxmox Node: {self.proxmox_node}, VM ID: {self.vmid}"


class MonitorConfig(BaseModel):
    """Main node monitor configuration."""

    proxmox: ProxmoxConfig = Field(default_factory=ProxmoxConfig)
    discord: DiscordConfig = Field(default_factory=DiscordConfig)
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    remediation: RemediationConfig = Field(default_factory=RemediationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    nodes: list[NodeMapping] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_node_names(self) -> "MonitorConfig":
        """Reject mappings that name the same Kubernetes node twice.

        Returns:
            Self if validation passes

        Raises:
            ValueError: If a node name appears more than once
        """
        seen: set[str] = set()
        duplicates: list[str] = []
        for mapping in self.nodes:
            name = mapping.kubernetes_node_name
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)

        if duplicates:
            raise ValueError(f"Duplicate node mappings for: {', '.join(duplicates)}")

        return self

    @classmethod
    def from_file(cls, path: str | Path) -> "MonitorConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            MonitorConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration: expected a mapping, got {type(data).__name__}"
            )

        try:
            return cls(**data)
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

