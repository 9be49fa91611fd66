"""Discovery of ddev applications from their labeled web containers."""

import logging
import os
from typing import Callable, Optional

from . import docker
from .app import (
    APP_ROOT_LABEL,
    PLATFORM_LABEL,
    PLATFORM_VALUE,
    SERVICE_LABEL,
    LocalApp,
    check_for_conf,
)
from .utils import AppInitError, AppNotFoundError, DockerError

logger = logging.getLogger(__name__)

# Application kinds and the constructor for each. Callers may pass their own
# table to get_apps() to add kinds.
DEFAULT_KINDS: dict[str, Callable[[], LocalApp]] = {
    "local": LocalApp,
}

WEB_CONTAINER_LABELS = {
    PLATFORM_LABEL: PLATFORM_VALUE,
    SERVICE_LABEL: "web",
}


def get_apps(kinds: Optional[dict[str, Callable[[], LocalApp]]] = None) -> dict[str, list[LocalApp]]:
    """
    Discover ddev applications, keyed by application kind.

    Every web container with the ddev label becomes one application. An app
    whose config can't be loaded is still listed, with its name and type
    recovered from the container labels. Containers without an approot
    label, and unloadable ones without a site-name label, are skipped. A
    docker failure drops only the kind being queried.

    Args:
        kinds: Mapping of kind name to app constructor (default: DEFAULT_KINDS)

    Returns:
        Mapping of kind to apps, in docker's container order
    """
    if kinds is None:
        kinds = DEFAULT_KINDS

    apps: dict[str, list[LocalApp]] = {}
    for kind, factory in kinds.items():
        try:
            containers = docker.find_containers_by_labels(WEB_CONTAINER_LABELS)
        except DockerError as e:
            logger.warning("Could not list %s applications: %s", kind, e)
            continue

        for container in containers:
            app_root = container.labels.get(APP_ROOT_LABEL)
            if not app_root:
                logger.debug("Skipping container %s: no %s label", container.name, APP_ROOT_LABEL)
                continue

            app = factory()
            try:
                app.init(app_root)
            except AppInitError as e:
                logger.debug("Recovering %s from container labels: %s", container.name, e)
                try:
                    app = type(app).from_labels(app_root, container.labels)
                except AppInitError as label_error:
                    logger.warning("Skipping container %s: %s", container.name, label_error)
                    continue
            apps.setdefault(kind, []).append(app)

    return apps


def get_active_app(name: str = "", kinds: Optional[dict[str, Callable[[], LocalApp]]] = None) -> LocalApp:
    """
    Get the app to act on: the named one, or the one containing the cwd.

    Args:
        name: Application name; empty means "the app in the current directory"
        kinds: Mapping of kind name to app constructor (default: DEFAULT_KINDS)

    Raises:
        ConfigNotFoundError: If name is empty and no config is found from the cwd
        AppInitError: If the config found from the cwd can't be loaded
        AppNotFoundError: If no discovered app has the given name
    """
    if not name:
        app_root = check_for_conf(os.getcwd())
        app = LocalApp()
        app.init(app_root)
        return app

    for apps in get_apps(kinds).values():
        for app in apps:
            if app.name == name:
                return app

    raise AppNotFoundError(f"could not find an application named '{name}'")
