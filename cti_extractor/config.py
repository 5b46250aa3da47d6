"""Configuration management for the extractor."""

import os
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    'CTI_EXTRACT_MODEL': ('model', 'name', str),
    'CTI_EXTRACT_ENDPOINT': ('model', 'endpoint', str),
    'CTI_EXTRACT_TIMEOUT': ('model', 'timeout', float),
    'CTI_EXTRACT_LOG_LEVEL': ('logging', 'level', str),
}

logger = logging.getLogger(__name__)


class Config:
    """Manages configuration loading and access."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, only packaged defaults
                and local overrides are used.
        """
        self.config_dir = Path(__file__).parent / "data"

        with open(self.config_dir / "default.yaml", 'r') as f:
            self.config = yaml.safe_load(f) or {}

        # Override with local config if it exists
        local_config_path = self.config_dir / "local.yaml"
        if local_config_path.exists():
            self._load_override(local_config_path)

        if config_path and os.path.exists(config_path):
            self._load_override(config_path)

        self._apply_env_overrides()

    def _load_override(self, path):
        with open(path, 'r') as f:
            override = yaml.safe_load(f)
        if isinstance(override, dict):
            self._merge_configs(self.config, override)

    def _merge_configs(self, base: Dict, override: Dict):
        """Recursively merge override config into base config."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self):
        for env_var, (section, key, convert) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if not value:
                continue
            try:
                self.config.setdefault(section, {})[key] = convert(value)
            except ValueError:
                logger.warning(f"Ignoring invalid {env_var}={value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'model.name')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_model_settings(self) -> Dict[str, Any]:
        """Get the model section used to build the extractor."""
        return dict(self.config.get('model') or {})

    def get_log_level(self) -> str:
        level = str(self.get('logging.level', 'WARNING')).upper()
        if not isinstance(logging.getLevelName(level), int):
            logger.warning(f"Unknown log level {level!r}, using WARNING")
            return 'WARNING'
        return level

    def defang_by_default(self) -> bool:
        return bool(self.get('display.defang', True))


_config = None

def get_config(config_path: Optional[str] = None) -> Config:
    """Get the cached config instance, loading it on first use or for a new path."""
    global _config
    if _config is None or config_path:
        _config = Config(config_path)
    return _config
