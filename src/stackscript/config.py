"""
Configuration management for the script interpreter.

Settings are read from a configuration file, environment variables, or
built-in defaults.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".stackscript"


class InterpreterConfig:
    """Interpreter configuration manager"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.stackscript/stackscript.conf)
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_DIR / "stackscript.conf"

        self.config_path = Path(config_path)
        self.config = configparser.ConfigParser()

        self.defaults = {
            'strict_stubs': '1',
            'strict_templates': '1',
            'push_small_ints': '0',
            'debug': '0',
            'logtimestamps': '1',
        }

        if self.config_path.exists():
            try:
                self.config.read(self.config_path)
            except configparser.Error as e:
                logger.warning(f"Error reading config file {self.config_path}: {e}")

    def get(self, key: str, section: str = 'DEFAULT') -> Optional[str]:
        """
        Get config value.

        Priority order:
        1. Environment variable (STACKSCRIPT_<KEY>)
        2. Config file value (given section, then any section)
        3. Default value

        Args:
            key: Config key
            section: Config section (default: 'DEFAULT')

        Returns:
            Config value or default
        """
        env_value = os.environ.get(f"STACKSCRIPT_{key.upper()}")
        if env_value:
            return env_value

        if self.config.has_option(section, key):
            return self.config.get(section, key)
        for name in self.config.sections():
            if self.config.has_option(name, key):
                return self.config.get(name, key)

        return self.defaults.get(key)

    def getboolean(self, key: str, section: str = 'DEFAULT') -> bool:
        """Get config value as boolean"""
        value = self.get(key, section)
        if value is None:
            return False
        return value.lower() in ('1', 'true', 'yes', 'on')

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert config to dictionary.

        Returns:
            Dictionary with all configuration values
        """
        return {
            'strict_stubs': self.getboolean('strict_stubs'),
            'strict_templates': self.getboolean('strict_templates'),
            'push_small_ints': self.getboolean('push_small_ints'),
            'debug': self.getboolean('debug'),
            'log_timestamps': self.getboolean('logtimestamps'),
        }
