"""Tests for ConfigManager and LifecycleSettings."""

import pytest

from ec2_bridge.core.constants import DEFAULT_BRIDGE_PORT, DEFAULT_LAUNCH_TIMEOUT
from ec2_bridge.core.orchestrator import LifecycleSettings
from ec2_bridge.utils.config import ConfigManager

SETTINGS = """
aws:
  region: eu-west-1
  profile: ops
  assume_role:
    account_id: 123456789012
    role: bridge
launch:
  poll_interval: 2
  timeout: 30
teardown:
  settle_seconds: 5
bridge:
  port: 30000
logging:
  level: debug
"""


@pytest.fixture
def config(tmp_path):
    (tmp_path / "settings.yaml").write_text(SETTINGS, encoding="utf-8")
    return ConfigManager(tmp_path)


@pytest.fixture
def empty_config(tmp_path):
    return ConfigManager(tmp_path)


class TestConfigManager:
    def test_values_from_file(self, config, monkeypatch):
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.delenv("AWS_PROFILE", raising=False)
        assert config.get_aws_region() == "eu-west-1"
        assert config.get_aws_profile() == "ops"
        assert config.get_value("launch.timeout") == 30

    def test_yml_extension(self, tmp_path):
        (tmp_path / "settings.yml").write_text("bridge:\n  host: 0.0.0.0\n", encoding="utf-8")
        assert ConfigManager(tmp_path).get_bridge_host() == "0.0.0.0"

    def test_environment_overrides(self, config, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-east-1")
        monkeypatch.setenv("EC2_BRIDGE_PORT", "40000")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert config.get_aws_region() == "us-east-1"
        assert config.get_bridge_port() == 40000
        assert config.get_logging_level() == "WARNING"

    def test_assume_role_account_is_a_string(self, config):
        role = config.get_assume_role()
        assert role == {"account_id": "123456789012", "role": "bridge", "session_name": "ec2-bridge"}

    def test_defaults_without_file(self, empty_config, monkeypatch):
        monkeypatch.delenv("EC2_BRIDGE_PORT", raising=False)
        monkeypatch.delenv("AWS_PROFILE", raising=False)
        assert empty_config.load_settings() == {}
        assert empty_config.get_bridge_port() == DEFAULT_BRIDGE_PORT
        assert empty_config.get_aws_profile() is None
        assert empty_config.get_assume_role()["role"] == ""
        assert empty_config.get_launch_config()["timeout"] == DEFAULT_LAUNCH_TIMEOUT

    def test_invalid_number_falls_back(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("launch:\n  timeout: soon\n", encoding="utf-8")
        assert ConfigManager(tmp_path).get_launch_config()["timeout"] == DEFAULT_LAUNCH_TIMEOUT

    def test_broken_yaml_is_treated_as_empty(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("aws: [unclosed\n", encoding="utf-8")
        assert ConfigManager(tmp_path).load_settings() == {}

    def test_reload(self, tmp_path):
        settings = tmp_path / "settings.yaml"
        settings.write_text("bridge:\n  host: a\n", encoding="utf-8")
        config = ConfigManager(tmp_path)
        assert config.get_bridge_host() == "a"
        settings.write_text("bridge:\n  host: b\n", encoding="utf-8")
        assert config.get_bridge_host() == "a"
        config.reload_config()
        assert config.get_bridge_host() == "b"


class TestLifecycleSettings:
    def test_from_config(self, config):
        settings = LifecycleSettings.from_config(config)
        assert settings.poll_interval == 2
        assert settings.launch_timeout == 30
        assert settings.settle_seconds == 5
        assert settings.secondary_interface_description == "api-network"

    def test_defaults(self):
        settings = LifecycleSettings()
        assert (settings.poll_interval, settings.launch_timeout, settings.settle_seconds) == (10, 180, 20)
