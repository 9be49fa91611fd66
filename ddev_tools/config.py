"""Configuration management for ddev-tools."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .utils import ConfigError


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable, rejecting non-numeric values."""
    value = os.getenv(name, str(default))
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got '{value}'") from e


class Config:
    """Configuration class for managing environment variables and paths."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env_file: Optional path to .env file (for advanced use cases only).
        """
        self.global_dir = Path.home() / ".ddev"

        # Load environment variables only if explicitly provided
        if env_file:
            load_dotenv(env_file)

    @property
    def docker_bin(self) -> str:
        """Docker executable used for all runtime calls."""
        return os.getenv("DDEV_DOCKER_BIN", "docker")

    @property
    def stop_timeout(self) -> int:
        """Grace period in seconds before a stopping container is killed."""
        return _int_env("DDEV_STOP_TIMEOUT", 60)

    @property
    def command_timeout(self) -> int:
        """Timeout in seconds for a single docker CLI call."""
        return _int_env("DDEV_COMMAND_TIMEOUT", 120)

    @property
    def domain(self) -> str:
        """Domain suffix for application URLs."""
        return os.getenv("DDEV_DOMAIN", "ddev.local")

    @property
    def router_port(self) -> int:
        """Router HTTP port."""
        return _int_env("DDEV_ROUTER_PORT", 80)

    @property
    def router_url(self) -> str:
        """Router URL (from host)."""
        return f"http://127.0.0.1:{self.router_port}/"

    @property
    def router_compose_file(self) -> Path:
        """Compose file the router was started from."""
        default = self.global_dir / "router-compose.yaml"
        return Path(os.getenv("DDEV_ROUTER_COMPOSE", str(default))).expanduser()


# Global config instance
_config: Optional[Config] = None


def get_config(env_file: Optional[str] = None) -> Config:
    """
    Get or create the global configuration instance.

    Args:
        env_file: Optional path to .env file

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config(env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
