"""Tests for shiptrack.config - YAML loading, env substitution and validation"""

import pytest

from shiptrack.config import (
    DEFAULT_PROVIDER_URL,
    DEFAULT_RULES_PATH,
    ConfigError,
    ShipTrackConfig,
    load_config,
)
from shiptrack.models import DEFAULT_RULE_PRIORITY


# =========================================================================
# load_config - env var substitution
# =========================================================================


class TestLoadConfig:

    def test_substitutes_env_vars(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEST_SHIP24_KEY", "secret-key")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider:\n  api_key: ${TEST_SHIP24_KEY}\n")
        cfg = load_config(str(config_file))
        assert cfg.provider.api_key == "secret-key"

    def test_inline_substitution(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHIP24_HOST", "sandbox.ship24.com")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider:\n  base_url: https://${SHIP24_HOST}/public/v1\n")
        cfg = load_config(str(config_file))
        assert cfg.provider.base_url == "https://sandbox.ship24.com/public/v1"

    def test_missing_env_var_raises(self, monkeypatch, tmp_path):
        monkeypatch.delenv("NONEXISTENT_VAR_12345", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider:\n  api_key: ${NONEXISTENT_VAR_12345}\n")
        with pytest.raises(ValueError, match="NONEXISTENT_VAR_12345"):
            load_config(str(config_file))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        cfg = load_config(str(config_file))
        assert cfg == ShipTrackConfig()

    def test_full_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "provider:\n"
            "  api_key: abc\n"
            "  timeout: 5\n"
            "eta:\n"
            "  rules_path: /tmp/rules.csv\n"
            "  default_priority: 100\n"
            "  preload_rules: true\n"
            "log_level: debug\n"
            "unused_section: {}\n"
        )
        cfg = load_config(str(config_file))

        assert cfg.provider.timeout == 5.0
        assert cfg.eta.rules_path == "/tmp/rules.csv"
        assert cfg.eta.default_priority == 100
        assert cfg.eta.preload_rules is True
        assert cfg.log_level == "DEBUG"

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(str(config_file))

    def test_non_mapping_root(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(config_file))


# =========================================================================
# ShipTrackConfig
# =========================================================================


class TestShipTrackConfig:

    def test_defaults(self):
        cfg = ShipTrackConfig.from_dict(None)
        assert cfg.provider.api_key == ""
        assert cfg.provider.base_url == DEFAULT_PROVIDER_URL
        assert cfg.eta.rules_path == str(DEFAULT_RULES_PATH)
        assert cfg.eta.default_priority == DEFAULT_RULE_PRIORITY
        assert cfg.eta.preload_rules is False
        assert cfg.log_level == "INFO"

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError, match="log level"):
            ShipTrackConfig.from_dict({"log_level": "chatty"})

    def test_wrong_type(self):
        with pytest.raises(ConfigError):
            ShipTrackConfig.from_dict({"eta": {"default_priority": "high"}})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
