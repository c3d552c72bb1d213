"""Tests for CLI configuration loading and validation."""

import pytest
import yaml

from src.cli.config import (
    DEFAULT_BASE_URL,
    ConnectionConfig,
    FilterBuilderConfig,
    ServerConfig,
    load_config,
    resolve_env_vars,
)


class TestConnectionConfig:
    """Tests for ConnectionConfig defaults and validation."""

    def test_defaults(self):
        """Defaults point at the public API with no key."""
        cfg = ConnectionConfig()
        assert cfg.base_url == DEFAULT_BASE_URL
        assert cfg.api_key == ""
        assert cfg.timeout_seconds == 30.0
        assert cfg.page_limit == 1000

    def test_trailing_slashes_removed(self):
        """Base URLs are stored without trailing slashes."""
        assert ConnectionConfig(base_url=" https://x.example.com// ").base_url == (
            "https://x.example.com"
        )

    @pytest.mark.parametrize(
        "key, masked",
        [("", "(not set)"), ("abc", "***"), ("abcdef1234", "***1234")],
    )
    def test_masked_api_key(self, key, masked):
        """Only the last four characters are shown."""
        assert ConnectionConfig(api_key=key).masked_api_key == masked


class TestServerConfig:
    """Tests for ServerConfig defaults."""

    def test_defaults(self):
        """Loopback bind on port 8000."""
        cfg = ServerConfig()
        assert (cfg.host, cfg.port, cfg.log_level) == ("127.0.0.1", 8000, "info")


class TestResolveEnvVars:
    """Tests for ${VAR} resolution."""

    def test_resolves_known_var(self, monkeypatch):
        """Known variables are substituted."""
        monkeypatch.setenv("PF_TEST_KEY", "abc")
        assert resolve_env_vars("key-${PF_TEST_KEY}") == "key-abc"

    def test_missing_var_is_empty(self, monkeypatch):
        """Unknown variables resolve to an empty string."""
        monkeypatch.delenv("PF_TEST_MISSING", raising=False)
        assert resolve_env_vars("${PF_TEST_MISSING}") == ""

    def test_default_used_when_unset(self, monkeypatch):
        """${VAR:-default} falls back when the variable is unset."""
        monkeypatch.delenv("PF_TEST_MISSING", raising=False)
        monkeypatch.setenv("PF_TEST_KEY", "set")
        assert resolve_env_vars("${PF_TEST_MISSING:-https://eu.example.com}") == (
            "https://eu.example.com"
        )
        assert resolve_env_vars("${PF_TEST_KEY:-unused}") == "set"


class TestLoadConfig:
    """Tests for load_config search order and overrides."""

    def test_defaults_without_file(self):
        """No file yields defaults."""
        cfg = load_config()
        assert cfg == FilterBuilderConfig()

    def test_explicit_path(self, tmp_path, monkeypatch):
        """An explicit file is parsed with ${VAR} resolution."""
        monkeypatch.setenv("PF_TEST_KEY", "from-env")
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.dump({
            "connection": {"base_url": "https://x.example.com/", "api_key": "${PF_TEST_KEY}"},
            "server": {"port": 9000},
        }))

        cfg = load_config(str(path))
        assert cfg.connection.base_url == "https://x.example.com"
        assert cfg.connection.api_key == "from-env"
        assert cfg.server.port == 9000

    def test_missing_explicit_path(self, tmp_path):
        """A missing explicit file is an error."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_working_directory_file(self, tmp_path):
        """./people-filter.yaml is found automatically."""
        (tmp_path / "people-filter.yaml").write_text("connection:\n  page_limit: 10\n")
        assert load_config().connection.page_limit == 10

    def test_home_directory_file(self, tmp_path):
        """~/.people-filter/config.yaml is the last fallback."""
        config_dir = tmp_path / "home" / ".people-filter"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("server:\n  host: 0.0.0.0\n")
        assert load_config().server.host == "0.0.0.0"

    def test_env_overrides(self, tmp_path, monkeypatch):
        """PEOPLEFILTER_<SECTION>_<KEY> beats the file."""
        (tmp_path / "people-filter.yaml").write_text("connection:\n  api_key: file-key\n")
        monkeypatch.setenv("PEOPLEFILTER_CONNECTION_API_KEY", "env-key")
        monkeypatch.setenv("PEOPLEFILTER_CONNECTION_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("PEOPLEFILTER_SERVER_PORT", "8123")

        cfg = load_config()
        assert cfg.connection.api_key == "env-key"
        assert cfg.connection.timeout_seconds == 5.0
        assert cfg.server.port == 8123

    def test_invalid_value(self, tmp_path):
        """Wrongly typed values fail validation."""
        (tmp_path / "people-filter.yaml").write_text("server:\n  port: not-a-port\n")
        with pytest.raises(ValueError):
            load_config()
