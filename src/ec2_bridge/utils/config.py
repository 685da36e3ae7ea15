#!/usr/bin/env python3
"""
utils/config.py

Simple configuration management utilities.
Provides centralized configuration loading.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from ec2_bridge.core.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_BRIDGE_HOST,
    DEFAULT_BRIDGE_PORT,
    DEFAULT_LAUNCH_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SECONDARY_INTERFACE_DESCRIPTION,
    DEFAULT_SETTLE_SECONDS,
)
from ec2_bridge.utils.logger import setup_logger

logger = setup_logger(__name__, "config.log")


class ConfigManager:
    """
    Simple configuration manager.

    Features:
    - YAML configuration loading
    - Environment variable override support
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Custom config directory path (defaults to
                EC2_BRIDGE_CONFIG_DIR, then PROJECT_ROOT/configs)
        """
        self.project_root = Path(__file__).parent.parent.parent.parent
        env_dir = os.environ.get("EC2_BRIDGE_CONFIG_DIR")
        self.config_dir = Path(config_dir or env_dir or (self.project_root / "configs"))

        # Try both .yml and .yaml extensions
        yml_file = self.config_dir / "settings.yml"
        yaml_file = self.config_dir / "settings.yaml"

        if yml_file.exists():
            self.settings_file = yml_file
        else:
            self.settings_file = yaml_file  # Default to .yaml for error messages

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file safely.
        """
        if not file_path.exists():
            logger.warning(f"Config file not found: {file_path}")
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                return content or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {file_path}: {e}")
            return {}

    def load_settings(self) -> Dict[str, Any]:
        """
        Load application settings.
        """
        return self._load_yaml_file(self.settings_file)

    def get_value(
        self, key_path: str, default: Any = None, env_var: Optional[str] = None
    ) -> Any:
        """
        Get configuration value with dot notation support and environment variable override.
        """
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        keys = key_path.split(".")
        current = self.config

        try:
            for key in keys:
                current = current[key]
        except (KeyError, TypeError):
            return default
        return default if current is None else current

    def _get_number(self, key_path: str, default: float, env_var: Optional[str] = None) -> float:
        value = self.get_value(key_path, default, env_var=env_var)
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid number for {key_path}: {value!r}, using {default}")
            return default

    def get_aws_region(self) -> str:
        """Get AWS region with environment variable override support."""
        return self.get_value("aws.region", DEFAULT_AWS_REGION, env_var="AWS_REGION")

    def get_aws_profile(self) -> Optional[str]:
        """Get the named credential profile, or None for the default chain."""
        return self.get_value("aws.profile", None, env_var="AWS_PROFILE") or None

    def get_assume_role(self) -> Dict[str, str]:
        """Get optional role assumption settings (account_id, role)."""
        role = self.get_value("aws.assume_role", {}) or {}
        return {
            "account_id": str(role.get("account_id") or ""),
            "role": str(role.get("role") or ""),
            "session_name": str(role.get("session_name") or "ec2-bridge"),
        }

    def get_launch_config(self) -> Dict[str, Any]:
        """Get launch polling configuration."""
        return {
            "poll_interval": self._get_number("launch.poll_interval", DEFAULT_POLL_INTERVAL),
            "timeout": self._get_number("launch.timeout", DEFAULT_LAUNCH_TIMEOUT),
            "secondary_interface_description": self.get_value(
                "launch.secondary_interface_description",
                DEFAULT_SECONDARY_INTERFACE_DESCRIPTION,
            ),
        }

    def get_teardown_config(self) -> Dict[str, Any]:
        """Get teardown configuration."""
        return {
            "settle_seconds": self._get_number("teardown.settle_seconds", DEFAULT_SETTLE_SECONDS),
        }

    def get_bridge_host(self) -> str:
        """Get the address the call bridge binds to."""
        return self.get_value("bridge.host", DEFAULT_BRIDGE_HOST)

    def get_bridge_port(self) -> int:
        """Get the call bridge port."""
        return int(self._get_number("bridge.port", DEFAULT_BRIDGE_PORT, env_var="EC2_BRIDGE_PORT"))

    def get_logging_level(self) -> str:
        """Get logging level."""
        return self.get_value("logging.level", "INFO", env_var="LOG_LEVEL")

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration as a cached property."""
        if not hasattr(self, "_cached_config"):
            self._cached_config = self.load_settings()
        return self._cached_config

    def reload_config(self) -> None:
        """Force reload of configuration from file."""
        if hasattr(self, "_cached_config"):
            delattr(self, "_cached_config")
