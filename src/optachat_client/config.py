"""
Client configuration storage.

Keeps the settings in a JSON file in the user's home directory.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from optachat_client.models import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 60.0


class ConfigManager:
    """Client configuration manager."""

    CONFIG_DIR_NAME = ".optachat"
    CONFIG_FILE_NAME = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Configuration directory. Defaults to ~/.optachat/
        """
        if config_dir is None:
            self.config_dir = Path.home() / self.CONFIG_DIR_NAME
        else:
            self.config_dir = Path(config_dir)

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: Optional[ClientConfig] = None

    def _default_config(self) -> ClientConfig:
        return ClientConfig(server_url=DEFAULT_SERVER_URL, timeout=DEFAULT_TIMEOUT)

    def load(self) -> ClientConfig:
        """
        Load the configuration from disk.

        A missing or corrupt file yields the defaults.

        Returns:
            Client configuration
        """
        if self._config is not None:
            return self._config

        if not self.config_file.exists():
            self._config = self._default_config()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = ClientConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring corrupt config file {self.config_file}: {e}")
            self._config = self._default_config()

        return self._config

    def save(self, config: Optional[ClientConfig] = None) -> None:
        """
        Write the configuration to disk.

        Args:
            config: Configuration to store. Current one if omitted.
        """
        if config is not None:
            self._config = config

        if self._config is None:
            return

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config.model_dump(), f, indent=2, ensure_ascii=False)

    def get_config(self) -> ClientConfig:
        """Current configuration."""
        if self._config is None:
            return self.load()
        return self._config

    def set_server_url(self, url: str) -> None:
        """
        Persist the backend URL.

        Args:
            url: Server URL (e.g. http://localhost:5000)
        """
        config = self.get_config()
        config.server_url = url.rstrip("/")
        self.save(config)
        logger.info(f"Server URL set to {config.server_url}")

    def set_timeout(self, timeout: float) -> None:
        """Persist the HTTP timeout in seconds."""
        config = self.get_config()
        config.timeout = timeout
        self.save(config)


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """
    Global configuration manager.

    Args:
        config_dir: Configuration directory; a new manager is created when given

    Returns:
        ConfigManager
    """
    global _config_manager

    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)

    return _config_manager
