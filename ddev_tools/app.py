"""
Applications: the logical development environments behind ddev containers.

An application lives in a directory holding .ddev/config.yaml. Its
containers and volumes carry labels pointing back at that directory and at
the site name, so an application whose config has been deleted can still be
recovered from the labels alone.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

from . import docker
from .config import get_config
from .utils import AppInitError, ConfigNotFoundError, file_exists

CONFIG_DIR = ".ddev"
CONFIG_FILE = "config.yaml"

# Container and volume labels
PLATFORM_LABEL = "com.ddev.platform"
PLATFORM_VALUE = "ddev"
SERVICE_LABEL = "com.docker.compose.service"
SITE_NAME_LABEL = "com.ddev.site-name"
APP_ROOT_LABEL = "com.ddev.approot"
APP_TYPE_LABEL = "com.ddev.app-type"
PROJECT_LABEL = "com.docker.compose.project"

# Site statuses
SITE_RUNNING = "running"
SITE_STOPPED = "stopped"
SITE_NOT_FOUND = "not found"
SITE_DIR_MISSING = "app directory missing"
SITE_CONFIG_MISSING = ".ddev/config.yaml missing"

STATUS_SERVICES = ("web", "db")


class AppState(Enum):
    """How an application was constructed."""
    INITIALIZED = "initialized"  # loaded from .ddev/config.yaml
    DEGRADED = "degraded"        # recovered from container labels


@dataclass
class AppConfig:
    """Configuration read from an application's .ddev/config.yaml."""
    name: str
    app_type: str = "php"

    @classmethod
    def load(cls, app_root: str | Path) -> "AppConfig":
        """
        Parse the config file of the application rooted at app_root.

        Raises:
            AppInitError: If the file is missing, unreadable or lacks a name
        """
        config_path = Path(app_root) / CONFIG_DIR / CONFIG_FILE
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise AppInitError(f"Could not read {config_path}: {e}") from e
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise AppInitError(f"Could not parse {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise AppInitError(f"{config_path} does not contain a mapping")
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise AppInitError(f"{config_path} has no application name")

        return cls(
            name=name,
            app_type=str(data.get("type") or "php"),
        )


class LocalApp:
    """A ddev application backed by local docker containers."""

    def __init__(self):
        self.root: str = ""
        self.config: Optional[AppConfig] = None
        self.state: Optional[AppState] = None

    def init(self, app_root: str | Path) -> None:
        """
        Initialize the app from the config file under app_root.

        Raises:
            AppInitError: If the config cannot be loaded
        """
        self.root = str(app_root)
        self.config = AppConfig.load(app_root)
        self.state = AppState.INITIALIZED

    @classmethod
    def from_labels(cls, app_root: str | Path, labels: dict[str, str]) -> "LocalApp":
        """
        Build a degraded app from the labels of one of its containers.

        Raises:
            AppInitError: If the labels carry no site name
        """
        name = labels.get(SITE_NAME_LABEL)
        if not name:
            raise AppInitError(f"no {SITE_NAME_LABEL} label to recover the app at {app_root}")
        app = cls()
        app.root = str(app_root)
        app.config = AppConfig(
            name=name,
            app_type=labels.get(APP_TYPE_LABEL, ""),
        )
        app.state = AppState.DEGRADED
        return app

    @property
    def name(self) -> str:
        return self.config.name if self.config else ""

    @property
    def app_type(self) -> str:
        return self.config.app_type if self.config else ""

    @property
    def app_root(self) -> str:
        return self.root

    @property
    def url(self) -> str:
        return f"http://{self.name}.{get_config().domain}"

    @property
    def is_degraded(self) -> bool:
        return self.state == AppState.DEGRADED

    def find_container_by_type(self, service: str) -> Optional[docker.Container]:
        """Find this app's container for a compose service (web, db, ...)."""
        return docker.find_container_by_labels({
            SITE_NAME_LABEL: self.name,
            SERVICE_LABEL: service,
        })

    def site_status(self) -> str:
        """
        Describe the state of the app's directory, config and containers.

        Returns one of the SITE_* statuses, or "<service> service <status>"
        when the web and db containers disagree.
        """
        if not file_exists(self.app_root):
            return f"{SITE_DIR_MISSING}: {self.app_root}"

        try:
            check_for_conf(self.app_root)
        except ConfigNotFoundError:
            return SITE_CONFIG_MISSING

        services = {}
        for service in STATUS_SERVICES:
            container = self.find_container_by_type(service)
            if container is None:
                services[service] = SITE_NOT_FOUND
                continue
            health = docker.get_container_health(container)
            if health == "exited":
                services[service] = SITE_STOPPED
            elif health == "healthy":
                services[service] = SITE_RUNNING
            else:
                services[service] = health

        web, db = services["web"], services["db"]
        if web == db:
            return web
        if web != SITE_RUNNING:
            return f"web service {web}"
        return f"db service {db}"

    def __repr__(self) -> str:
        return f"LocalApp(name={self.name!r}, type={self.app_type!r}, root={self.root!r}, state={self.state})"


def check_for_conf(conf_path: str | Path) -> str:
    """
    Find the nearest directory holding .ddev/config.yaml.

    Checks conf_path itself, then each parent up to the filesystem root.

    Args:
        conf_path: Directory to start from (made absolute first)

    Returns:
        The application root directory

    Raises:
        ConfigNotFoundError: If no directory up to the root has the file
    """
    conf_path = os.path.abspath(conf_path)
    marker = os.path.join(CONFIG_DIR, CONFIG_FILE)

    if file_exists(os.path.join(conf_path, marker)):
        return conf_path

    # One step per path segment always reaches the root
    for _ in conf_path.split(os.sep):
        conf_path = os.path.dirname(conf_path)
        if file_exists(os.path.join(conf_path, marker)):
            return conf_path

    raise ConfigNotFoundError(
        f"no {marker} file was found in this directory or any parent"
    )
