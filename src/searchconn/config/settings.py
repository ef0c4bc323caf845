"""Settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (SEARCHCONN_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from searchconn.exceptions import ConfigError


class ClientConfig(BaseModel):
    """Configuration for a single named client."""

    backend: str = Field(default="elasticsearch", description="Backend name: elasticsearch, opensearch")
    endpoint: str = Field(default="", description="Backend URL, e.g. http://127.0.0.1:9200")
    username: str = Field(default="", description="Basic-auth username; leave empty for no auth")
    password: str = Field(default="", description="Basic-auth password; leave empty for no auth")
    timeout_ms: int = Field(default=3000, description="Per-request timeout in milliseconds")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates for https endpoints")
    extra: dict[str, Any] = Field(default_factory=dict, description="Backend-specific client options")

    @field_validator("timeout_ms")
    @classmethod
    def _positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeout_ms must be positive")
        return v

    @field_validator("endpoint", mode="before")
    @classmethod
    def _strip_endpoint(cls, v: Any) -> str:
        return str(v or "").strip()


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the SEARCHCONN_ prefix.
    Nested settings use double underscores.

    Example:
        SEARCHCONN_CLIENTS__USERS__ENDPOINT=http://127.0.0.1:9200
        SEARCHCONN_CLIENTS__USERS__TIMEOUT_MS=5000
        SEARCHCONN_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "SEARCHCONN_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    clients: dict[str, ClientConfig] = Field(default_factory=dict, description="Client configurations by name")
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def client_config(self, name: str) -> ClientConfig:
        """Look up the configuration for a named client.

        Raises:
            ConfigError: If no client is configured under *name*.
        """
        try:
            return self.clients[name]
        except KeyError:
            raise ConfigError(
                f"No client configured under '{name}'. Configured clients: {list(self.clients.keys())}"
            ) from None

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
