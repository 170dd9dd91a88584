"""
Configuration management with reload capability.

Uses Pydantic Settings for environment variable handling and validation.
A YAML config file provides defaults; environment variables override it.
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.policy import MaskingPolicy, PrivacyLevel


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for config.yaml in common locations
        possible_paths = [
            "config.yaml",  # Current directory
            "../../config.yaml",  # Project root from src/tracemask
            "../../../config.yaml",
        ]

        for path in possible_paths:
            if os.path.exists(path):
                config_path = path
                break
        else:
            return {}

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
            return config_data
    return {}


class MaskingSettings(BaseSettings):
    """Default masking policy."""

    level: PrivacyLevel = Field(
        default=PrivacyLevel.PRIVATE,
        description="Privacy level (none, private, sensitive)"
    )
    mask_query_literals: bool = Field(
        default=True,
        description="Mask string and numeric literals in GraphQL arguments"
    )
    exempt_headers: List[str] = Field(
        default=["Content-Type", "Accept"],
        description="Header keys left unmasked at the private level"
    )
    exempt_queries: List[str] = Field(
        default_factory=list,
        description="URL query keys left unmasked at the private level"
    )
    exempt_body_fields: List[str] = Field(
        default_factory=list,
        description="Body/variable field names left unmasked at the private level"
    )

    @field_validator("level", mode="before")
    def parse_level(cls, v: Any) -> Any:
        """Accept any casing for the privacy level."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_policy(self) -> MaskingPolicy:
        """Build the masking policy described by these settings."""
        return MaskingPolicy(
            level=self.level,
            mask_query_literals=self.mask_query_literals,
            exempt_headers=self.exempt_headers,
            exempt_queries=self.exempt_queries,
            exempt_body_fields=self.exempt_body_fields,
        )

    model_config = SettingsConfigDict(env_prefix="TRACEMASK_MASKING_")


class ValidationSettings(BaseSettings):
    """Request validation configuration."""

    body_bytes_max: int = Field(default=1048576, description="Maximum decoded body size (1MB)")
    batch_entries_max: int = Field(default=500, description="Maximum entries per mask request")

    model_config = SettingsConfigDict(env_prefix="TRACEMASK_VALIDATION_")


class Settings(BaseSettings):
    """Main application settings."""

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Component settings
    masking: MaskingSettings = Field(default_factory=MaskingSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)

    model_config = SettingsConfigDict(env_prefix="TRACEMASK_", case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance with config file and env support."""

    # Load config file data
    config_data = load_config_file()

    # Config file provides defaults, env vars override
    if config_data:
        _set_env_from_config(config_data)

    settings = Settings()
    return settings


def _set_env_from_config(config_data: Dict[str, Any]) -> None:
    """Set environment variables from config file if not already set."""
    mappings = {
        ("server", "host"): "TRACEMASK_HOST",
        ("server", "port"): "TRACEMASK_PORT",
        ("server", "debug"): "TRACEMASK_DEBUG",
        ("server", "log_level"): "TRACEMASK_LOG_LEVEL",
        ("masking", "level"): "TRACEMASK_MASKING_LEVEL",
        ("masking", "mask_query_literals"): "TRACEMASK_MASKING_MASK_QUERY_LITERALS",
        ("validation", "body_bytes_max"): "TRACEMASK_VALIDATION_BODY_BYTES_MAX",
        ("validation", "batch_entries_max"): "TRACEMASK_VALIDATION_BATCH_ENTRIES_MAX",
    }

    for (section, key), env_var in mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value is not None:
                os.environ[env_var] = str(value)

    # List settings are passed as JSON strings
    list_mappings = {
        "exempt_headers": "TRACEMASK_MASKING_EXEMPT_HEADERS",
        "exempt_queries": "TRACEMASK_MASKING_EXEMPT_QUERIES",
        "exempt_body_fields": "TRACEMASK_MASKING_EXEMPT_BODY_FIELDS",
    }

    for key, env_var in list_mappings.items():
        if env_var not in os.environ:
            value = (config_data.get("masking") or {}).get(key)
            if value is not None:
                os.environ[env_var] = json.dumps(list(value))


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
