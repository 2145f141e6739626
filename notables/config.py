import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "server": {
            "host": "0.0.0.0",
            "port": 8080,
            "debug": False,
        },
        "storage": {
            "backend": "memory",
            "sqlite_path": "./data/logs.db",
        },
        "aggregation": {
            "top_n": 10,
            "window_hours": 24,
            "fallback_enabled": True,
        },
        "timeline": {
            "align_to_hour": True,
        },
        "search": {
            "default_limit": 100,
            "max_limit": 1000,
        },
        "categorizer": {
            "urgency_rules": {},
        },
        "simulator": {
            "max_count": 1000,
        },
        "logging": {
            "level": "INFO",
        },
    }

    def __init__(self, config_path=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
            except FileNotFoundError:
                logger.info("No config file at %s, using defaults", config_path)
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

    @classmethod
    def from_env(cls):
        """Load the file named by CONFIG_PATH (default ``config.yaml``)."""
        return cls(os.environ.get("CONFIG_PATH", "config.yaml"))

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def get(self, key, default=None):
        """Get a top-level config key."""
        return self._config.get(key, default)

    def __getitem__(self, key):
        return self._config[key]

    def __contains__(self, key):
        return key in self._config
