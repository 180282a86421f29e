"""
openaci Configuration System

Loads configuration from:
1. User config (~/.openaci/config.yaml)
2. Project config (./config/openaci.yaml)
3. Environment variables (OPENACI_ prefix)

Uses Pydantic for validation and type coercion.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def expand_path(path: str | Path | None) -> Path | None:
    """Expand ~ and environment variables in paths."""
    if path is None:
        return None
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(expanded)


class AppMeta(BaseModel):
    """Core application metadata."""

    name: str = "openaci"
    version: str = "0.1.0"


class LogConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: Path | None = None

    @field_validator("file", mode="before")
    @classmethod
    def expand_file_path(cls, v: Any) -> Path | None:
        return expand_path(v)


class LLMConfig(BaseModel):
    """LLM configuration."""

    provider: str = "openai"  # openai or claude
    model: str = "gpt-4o-mini"
    api_key: str | None = None  # None lets the SDK read OPENAI_API_KEY / ANTHROPIC_API_KEY
    base_url: str | None = None
    temperature: float = 0.0
    seed: int = 0
    max_tokens: int | None = None
    image_model: str = "dall-e-3"
    speech_model: str = "tts-1"
    speech_voice: str = "nova"


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080


class AciConfig(BaseSettings):
    """
    Main openaci configuration.

    Loads from YAML files and environment variables.
    Environment variables use OPENACI_ prefix and __ for nesting.
    Example: OPENACI_LLM__MODEL=gpt-4o
    """

    model_config = SettingsConfigDict(
        env_prefix="OPENACI_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppMeta = Field(default_factory=AppMeta)
    log: LogConfig = Field(default_factory=LogConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def find_config_file() -> Path | None:
    """
    Find the configuration file.

    Search order:
    1. ~/.openaci/config.yaml (user config)
    2. ./config/openaci.yaml (project config)
    """
    user_config = Path.home() / ".openaci" / "config.yaml"
    if user_config.exists():
        return user_config

    project_config = Path.cwd() / "config" / "openaci.yaml"
    if project_config.exists():
        return project_config

    return None


def load_yaml_config(path: Path | None) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if path is None or not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f)

    return data if data else {}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(path: Path | None = None) -> AciConfig:
    """
    Load complete configuration.

    Merges:
    1. Pydantic defaults
    2. YAML file configuration
    3. Environment variables (highest priority)
    """
    yaml_config = load_yaml_config(path or find_config_file())

    # Init kwargs outrank env vars in pydantic-settings, so fold env values back over the YAML
    env_config = AciConfig().model_dump(exclude_defaults=True)
    return AciConfig(**deep_merge(yaml_config, env_config))


# Global config instance (lazy-loaded)
_config: AciConfig | None = None


def get_config() -> AciConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
