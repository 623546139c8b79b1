"""Tests for configuration loading and precedence."""

import pytest

from catalog_tool.core.config import (
    DEFAULT_BASE_URL,
    ApiProfile,
    AppConfig,
    ResolvedConfig,
    load_config,
    normalize_base_url,
    resolve_config,
)
from catalog_tool.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("CATALOG_API_URL", "CATALOG_TIMEOUT", "CATALOG_PROFILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestNormalizeBaseUrl:
    def test_strips_trailing_slash(self):
        assert normalize_base_url("http://api.local:3000/") == "http://api.local:3000"

    def test_keeps_path_prefix(self):
        assert normalize_base_url("https://example.com/api/") == "https://example.com/api"

    def test_invalid_scheme(self):
        with pytest.raises(ConfigError, match="Invalid base URL scheme"):
            normalize_base_url("ftp://example.com")

    def test_missing_host(self):
        with pytest.raises(ConfigError, match="Missing host"):
            normalize_base_url("http://")

    def test_query_not_allowed(self):
        with pytest.raises(ConfigError, match="Query strings"):
            normalize_base_url("http://example.com?x=1")


@pytest.mark.unit
class TestApiProfile:
    def test_defaults(self):
        profile = ApiProfile()
        assert profile.base_url == DEFAULT_BASE_URL
        assert profile.timeout == 30.0

    def test_base_url_normalized(self):
        assert ApiProfile(base_url="http://db:3000/").base_url == "http://db:3000"

    def test_invalid_base_url(self):
        with pytest.raises(ValueError, match="Invalid base URL scheme"):
            ApiProfile(base_url="postgres://db")

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="Invalid timeout"):
            ApiProfile(timeout=0)


@pytest.mark.unit
class TestLoadConfig:
    def test_missing_file_returns_defaults(self, temp_dir):
        config = load_config(temp_dir / "missing.toml")
        assert config == AppConfig()

    def test_loads_profiles(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text(
            'default_profile = "staging"\n'
            "\n"
            "[profiles.staging]\n"
            'base_url = "https://staging.example.com/"\n'
            "timeout = 5\n"
        )
        config = load_config(path)
        assert config.default_profile == "staging"
        assert config.profiles["staging"].base_url == "https://staging.example.com"
        assert config.profiles["staging"].timeout == 5.0

    def test_malformed_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[profiles\n")
        with pytest.raises(ConfigError, match="Malformed TOML"):
            load_config(path)

    def test_invalid_values(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text('[profiles.bad]\nbase_url = "ftp://x"\n')
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


@pytest.mark.unit
class TestResolveConfig:
    def test_builtin_defaults(self):
        resolved = resolve_config(AppConfig())
        assert isinstance(resolved, ResolvedConfig)
        assert resolved.base_url == "http://localhost:3000"
        assert resolved.timeout == 30.0
        assert resolved.sources["base_url"] == "default"
        assert resolved.active_profile is None

    def test_config_defaults(self):
        resolved = resolve_config(AppConfig(default_timeout=12.0, default_format="json"))
        assert resolved.timeout == 12.0
        assert resolved.sources["timeout"] == "config"
        assert resolved.default_format == "json"
        assert resolved.sources["default_format"] == "config"

    def test_explicit_table_format_counts_as_configured(self):
        resolved = resolve_config(AppConfig(default_format="table"))
        assert resolved.sources["default_format"] == "config"
        assert resolve_config(AppConfig()).sources["default_format"] == "default"

    def test_unknown_default_format_rejected(self):
        with pytest.raises(ValueError, match="default_format"):
            AppConfig(default_format="xml")

    def test_profile(self):
        config = AppConfig(profiles={"prod": ApiProfile(base_url="https://prod.example")})
        resolved = resolve_config(config, profile_name="prod")
        assert resolved.base_url == "https://prod.example"
        assert resolved.sources["base_url"] == "profile: prod"
        assert resolved.sources["timeout"] == "default"
        assert resolved.active_profile == "prod"

    def test_default_profile_used(self):
        config = AppConfig(
            default_profile="dev",
            profiles={"dev": ApiProfile(base_url="http://dev:3000")},
        )
        assert resolve_config(config).base_url == "http://dev:3000"

    def test_profile_from_env(self, monkeypatch):
        monkeypatch.setenv("CATALOG_PROFILE", "dev")
        config = AppConfig(profiles={"dev": ApiProfile(base_url="http://dev:3000")})
        assert resolve_config(config).active_profile == "dev"

    def test_unknown_profile(self):
        config = AppConfig(profiles={"dev": ApiProfile()})
        with pytest.raises(ConfigError, match="Unknown profile: 'nope'. Available profiles: dev"):
            resolve_config(config, profile_name="nope")

    def test_env_overrides_profile(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "http://env-host:3001/")
        config = AppConfig(profiles={"dev": ApiProfile(base_url="http://dev:3000")})
        resolved = resolve_config(config, profile_name="dev")
        assert resolved.base_url == "http://env-host:3001"
        assert resolved.sources["base_url"] == "env: CATALOG_API_URL"

    def test_env_timeout(self, monkeypatch):
        monkeypatch.setenv("CATALOG_TIMEOUT", "2.5")
        assert resolve_config(AppConfig()).timeout == 2.5

    def test_invalid_env_timeout(self, monkeypatch):
        monkeypatch.setenv("CATALOG_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="Invalid CATALOG_TIMEOUT value"):
            resolve_config(AppConfig())

    def test_invalid_env_url(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "localhost:3000")
        with pytest.raises(ConfigError):
            resolve_config(AppConfig())

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("CATALOG_API_URL", "http://env-host:3001")
        resolved = resolve_config(AppConfig(), url="http://cli-host:3002", timeout=1.0)
        assert resolved.base_url == "http://cli-host:3002"
        assert resolved.sources["base_url"] == "cli: --url"
        assert resolved.timeout == 1.0
        assert resolved.sources["timeout"] == "cli: --timeout"

    def test_none_cli_values_ignored(self):
        resolved = resolve_config(AppConfig(), url=None, timeout=None)
        assert resolved.sources["base_url"] == "default"
