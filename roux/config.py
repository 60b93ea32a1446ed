"""
Configuration management for roux.

Loads and validates the config.yaml file from the roux home directory
($ROUX_HOME, default ~/.roux).

Example config.yaml:
    recipes_dir: ~/.roux/recipes
    logging:
      level: INFO
      format: pretty          # or "structured" (JSON lines)
      console: true
      output: logs/roux-{date}.log
    execution:
      max_steps: 100000
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


CONFIG_FILENAME = "config.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "recipes_dir": "recipes",
    "logging": {
        "level": "INFO",
        "format": "pretty",
        "console": True,
    },
    "execution": {
        "max_steps": None,
    },
}


class ConfigError(Exception):
    """Configuration validation error."""
    pass


def get_roux_home() -> Path:
    """Return the roux home directory ($ROUX_HOME or ~/.roux)."""
    home = os.environ.get("ROUX_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".roux"


class RouxConfig:
    """Complete roux configuration."""

    def __init__(self, config_path: Optional[Path] = None, raw_config: Optional[Dict[str, Any]] = None):
        self.config_path = config_path
        if raw_config is None:
            if config_path is None:
                raise ConfigError("Either config_path or raw_config is required")
            raw_config = self._load_yaml()
        self.raw_config = raw_config

        recipes_dir = Path(self.raw_config.get("recipes_dir", DEFAULT_CONFIG["recipes_dir"])).expanduser()
        if not recipes_dir.is_absolute():
            base = config_path.parent if config_path is not None else get_roux_home()
            recipes_dir = base / recipes_dir
        self.recipes_dir = recipes_dir

        # Logging
        self.logging = self.raw_config.get("logging") or {}

        # Execution limits
        self.execution = self.raw_config.get("execution") or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RouxConfig":
        """Build a config from an in-memory dictionary (no file)."""
        return cls(raw_config=dict(data))

    @classmethod
    def default(cls) -> "RouxConfig":
        """Config with every setting at its default."""
        return cls.from_dict(DEFAULT_CONFIG)

    def _load_yaml(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f)
                if not config:
                    raise ConfigError("Configuration file is empty")
                if not isinstance(config, dict):
                    raise ConfigError("Configuration file must contain a mapping")
                return config
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {e}")

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path with date interpolation, or None for console-only logging."""
        log_output = self.logging.get("output")
        if not log_output:
            return None
        log_output = log_output.replace("{date}", datetime.now().strftime("%Y-%m-%d"))
        path = Path(log_output).expanduser()
        if not path.is_absolute() and self.config_path is not None:
            path = self.config_path.parent / path
        return path

    def get_log_level(self) -> str:
        """Get logging level."""
        return str(self.logging.get("level", "INFO")).upper()

    def get_log_format(self) -> str:
        """Get log format (structured or pretty)."""
        return self.logging.get("format", "pretty")

    def should_log_to_console(self) -> bool:
        """Check if console logging is enabled."""
        return self.logging.get("console", True)

    def get_max_steps(self) -> Optional[int]:
        """Get the per-run step limit, or None for no limit."""
        return self.execution.get("max_steps")

    def validate(self) -> None:
        """Validate entire configuration."""
        if self.get_log_level() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Invalid logging level: {self.get_log_level()}")

        if self.get_log_format() not in ("structured", "pretty"):
            raise ConfigError(f"Invalid logging format: {self.get_log_format()}")

        max_steps = self.get_max_steps()
        if max_steps is not None and (not isinstance(max_steps, int) or max_steps < 1):
            raise ConfigError(f"execution.max_steps must be a positive integer, got {max_steps!r}")

        # Validate log directory
        log_file = self.get_log_file_path()
        if log_file is not None and not log_file.parent.exists():
            log_file.parent.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"RouxConfig(recipes_dir={self.recipes_dir}, max_steps={self.get_max_steps()})"


def load_config(config_path: Optional[Path] = None) -> RouxConfig:
    """
    Load roux configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to <roux home>/config.yaml

    Returns:
        RouxConfig instance

    Raises:
        ConfigError: If config is invalid or missing
    """
    if config_path is None:
        config_path = get_roux_home() / CONFIG_FILENAME

    config = RouxConfig(Path(config_path))
    config.validate()
    return config
