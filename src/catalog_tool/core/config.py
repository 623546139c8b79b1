"""Configuration management for Catalog Tool.

Handles TOML config files, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--url, --timeout)
2. Environment variables (CATALOG_API_URL, CATALOG_TIMEOUT)
3. Named profile (--profile or CATALOG_PROFILE env var)
4. Config file defaults
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

from catalog_tool.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "catalog-tool" / "config.toml"
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_FORMAT = "table"
FORMATS = ("table", "json", "csv")

_ENV_VARS: dict[str, str] = {
    "CATALOG_API_URL": "base_url",
    "CATALOG_TIMEOUT": "timeout",
}


def normalize_base_url(url: str) -> str:
    """Validate an http(s) base URL and strip trailing slashes."""
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        msg = f"Invalid base URL scheme: '{parsed.scheme}'. Expected 'http' or 'https'"
        raise ConfigError(msg)
    if not parsed.netloc:
        msg = f"Invalid base URL: '{url}'. Missing host"
        raise ConfigError(msg)
    if parsed.query or parsed.fragment:
        msg = f"Invalid base URL: '{url}'. Query strings and fragments are not allowed"
        raise ConfigError(msg)
    return url.strip().rstrip("/")


def _validate_timeout(v: float) -> float:
    if v <= 0:
        msg = f"Invalid timeout: {v}. Must be greater than 0"
        raise ValueError(msg)
    return v


class ApiProfile(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        try:
            return normalize_base_url(v)
        except ConfigError as e:
            raise ValueError(e.message) from e

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        return _validate_timeout(v)


class AppConfig(BaseModel):
    default_timeout: float = DEFAULT_TIMEOUT
    default_format: str = DEFAULT_FORMAT
    default_profile: str | None = None
    profiles: dict[str, ApiProfile] = {}

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        if v not in FORMATS:
            choices = ", ".join(FORMATS)
            msg = f"Invalid default_format {v!r}. Expected one of: {choices}"
            raise ValueError(msg)
        return v


class ResolvedConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    default_format: str = DEFAULT_FORMAT
    active_profile: str | None = None
    sources: dict[str, str] = {}


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > config defaults > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {
        "base_url": DEFAULT_BASE_URL,
        "timeout": DEFAULT_TIMEOUT,
        "default_format": DEFAULT_FORMAT,
    }
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Config file global defaults
    if config.default_timeout != DEFAULT_TIMEOUT:
        resolved["timeout"] = config.default_timeout
        sources["timeout"] = "config"
    if "default_format" in config.model_fields_set:
        resolved["default_format"] = config.default_format
        sources["default_format"] = "config"

    # Layer 3: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get("CATALOG_PROFILE")
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            resolved[key] = getattr(profile, key)
            sources[key] = f"profile: {effective_profile}"

    # Layer 4: Environment variables
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if field_name == "timeout":
            try:
                resolved[field_name] = _validate_timeout(float(value))
            except ValueError:
                msg = f"Invalid {env_var} value: '{value}'. Must be a positive number"
                raise ConfigError(msg) from None
        else:
            resolved[field_name] = normalize_base_url(value)
        sources[field_name] = f"env: {env_var}"

    # Layer 5: CLI flags (highest priority)
    cli_to_field = {
        "url": "base_url",
        "timeout": "timeout",
    }
    for cli_name, field_name in cli_to_field.items():
        value = cli_overrides.get(cli_name)
        if value is None:
            continue
        if field_name == "base_url":
            value = normalize_base_url(value)
        elif field_name == "timeout":
            try:
                value = _validate_timeout(float(value))
            except ValueError:
                msg = f"Invalid --{cli_name} value: '{value}'. Must be a positive number"
                raise ConfigError(msg) from None
        resolved[field_name] = value
        sources[field_name] = f"cli: --{cli_name}"

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    return ResolvedConfig(**resolved)
