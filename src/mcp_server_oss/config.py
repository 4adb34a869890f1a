"""
OSS MCP Server Configuration

Handles environment variables, store credentials, and server settings.
All sensitive values are sourced from environment variables or the CLI.
"""
from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_CONFIG_NAME = "default"


class TransportType(str, Enum):
    """MCP transport types."""
    STDIO = "stdio"
    STREAMABLE_HTTP = "streamable_http"
    SSE = "sse"


class StoreConfig(BaseModel):
    """Credentials and bucket for one object store."""
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )

    region: str = Field(..., min_length=1, description="Store region (e.g. 'oss-cn-hangzhou')")
    access_key_id: str = Field(..., min_length=1, repr=False)
    access_key_secret: str = Field(..., min_length=1, repr=False)
    bucket: str = Field(..., min_length=1, description="Bucket name")
    endpoint: str | None = Field(default=None, description="Service endpoint")

    @property
    def endpoint_url(self) -> str:
        """Endpoint with scheme, derived from the region when not configured."""
        endpoint = self.endpoint or f"{self.region}.aliyuncs.com"
        if "://" not in endpoint:
            endpoint = f"https://{endpoint}"
        return endpoint.rstrip("/")


class ServerConfig(BaseModel):
    """MCP Server configuration."""
    name: str = Field(default="oss-mcp", description="Server name")
    version: str = Field(default="1.0.0", description="Server version")
    transport: TransportType = Field(
        default=TransportType.STDIO,
        description="Transport: stdio, streamable_http or sse"
    )
    host: str = Field(default="127.0.0.1", description="Bind host for HTTP transports")
    port: int = Field(default=8000, description="HTTP port for HTTP transports")
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")
    allow_mutations: bool = Field(default=True, description="Allow upload and rename")
    default_config: str = Field(
        default=DEFAULT_CONFIG_NAME,
        description="Store configuration used when a tool call names none"
    )
    download_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Wall-clock limit for a single download, in seconds"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


def parse_store_configs(raw: str | Mapping[str, Any]) -> dict[str, StoreConfig]:
    """Parse a name -> store config mapping from JSON text or a dict.

    Raises:
        ValueError: if the payload is not a JSON object of objects
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Store configuration is not valid JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise ValueError("Store configuration must be a JSON object keyed by config name")

    return {str(name): StoreConfig.model_validate(value) for name, value in raw.items()}


def _store_configs_from_env(env: Mapping[str, str]) -> dict[str, StoreConfig]:
    configs: dict[str, StoreConfig] = {}

    # Single config from flat variables becomes "default"
    if env.get("OSS_BUCKET") and env.get("OSS_ACCESS_KEY_ID"):
        configs[DEFAULT_CONFIG_NAME] = StoreConfig(
            region=env.get("OSS_REGION", ""),
            access_key_id=env["OSS_ACCESS_KEY_ID"],
            access_key_secret=env.get("OSS_ACCESS_KEY_SECRET", ""),
            bucket=env["OSS_BUCKET"],
            endpoint=env.get("OSS_ENDPOINT") or None,
        )

    raw = env.get("OSS_CONFIGS")
    if raw:
        configs.update(parse_store_configs(raw))

    return configs


def _env_flag(env: Mapping[str, str], name: str, default: str) -> bool:
    return env.get(name, default).lower() == "true"


@dataclass
class AppConfig:
    """Server settings plus the named store configurations."""
    server: ServerConfig = field(default_factory=ServerConfig)
    stores: dict[str, StoreConfig] = field(default_factory=dict)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AppConfig:
        """Load configuration from environment variables (and a .env file).

        Environment variables referenced:
        - OSS_MCP_NAME, OSS_MCP_TRANSPORT, OSS_MCP_HOST, OSS_MCP_PORT
        - OSS_MCP_LOG_LEVEL, OSS_MCP_JSON_LOGS
        - OSS_MCP_DEFAULT_CONFIG, OSS_MCP_DOWNLOAD_TIMEOUT
        - ALLOW_MUTATIONS
        - OSS_CONFIGS (JSON object: name -> {region, accessKeyId, ...})
        - OSS_REGION, OSS_ACCESS_KEY_ID, OSS_ACCESS_KEY_SECRET,
          OSS_BUCKET, OSS_ENDPOINT (single "default" config)
        """
        if env is None:
            load_dotenv()
            env = os.environ

        return cls(
            server=ServerConfig(
                name=env.get("OSS_MCP_NAME", "oss-mcp"),
                transport=TransportType(env.get("OSS_MCP_TRANSPORT", "stdio")),
                host=env.get("OSS_MCP_HOST", "127.0.0.1"),
                port=int(env.get("OSS_MCP_PORT", "8000")),
                log_level=env.get("OSS_MCP_LOG_LEVEL", "INFO"),
                json_logs=_env_flag(env, "OSS_MCP_JSON_LOGS", "false"),
                allow_mutations=_env_flag(env, "ALLOW_MUTATIONS", "true"),
                default_config=env.get("OSS_MCP_DEFAULT_CONFIG", DEFAULT_CONFIG_NAME),
                download_timeout=float(env.get("OSS_MCP_DOWNLOAD_TIMEOUT", "60")),
            ),
            stores=_store_configs_from_env(env),
        )

    def validate_required(self) -> list[str]:
        """Problems that leave the server without a usable default store."""
        missing = []

        if not self.stores:
            missing.append(
                "No store configuration found. Set OSS_CONFIGS or "
                "OSS_REGION/OSS_ACCESS_KEY_ID/OSS_ACCESS_KEY_SECRET/OSS_BUCKET."
            )
        elif self.server.default_config not in self.stores:
            missing.append(
                f"Default store configuration '{self.server.default_config}' is not defined"
            )

        return missing


# Process-wide configuration, loaded on first use
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Configuration for this process, read from the environment once."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Replace the global configuration (CLI overrides)."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the loaded configuration so the next get_config() re-reads it."""
    global _config
    _config = None
