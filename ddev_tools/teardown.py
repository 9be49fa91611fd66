"""Teardown of a ddev application's containers and volumes."""

import logging
from typing import Callable, Optional

from . import docker
from .app import PROJECT_LABEL, SITE_NAME_LABEL, LocalApp
from .config import get_config
from .router import stop_router
from .utils import DockerError, TeardownError

logger = logging.getLogger(__name__)


def volume_project_name(app_name: str) -> str:
    """Compose project name that owns an app's volumes."""
    return "ddev" + app_name.lower()


def cleanup(app: LocalApp, router_signal: Optional[Callable[[], None]] = None) -> None:
    """
    Clean up a ddev app, even if its config file has been deleted.

    Steps, in order, each stopping the teardown on failure:
    1. Find every container labeled with the app's site name
    2. Stop the ones that are running, restarting or paused
    3. Force-remove all of them, with their anonymous volumes
    4. Remove the volumes of the app's compose project
    5. Signal the router to reconcile (default: stop_router)

    Args:
        app: The application to tear down
        router_signal: Called last, with no arguments

    Raises:
        DockerError: If a container or volume listing fails
        TeardownError: If a container or volume can't be stopped or removed
    """
    if router_signal is None:
        router_signal = stop_router
    timeout = get_config().stop_timeout

    containers = docker.find_containers_by_labels({SITE_NAME_LABEL: app.name})

    for container in containers:
        if container.is_active:
            print(f"Stopping container: {container.name}")
            try:
                docker.stop_container(container.id, timeout)
            except DockerError as e:
                raise TeardownError("stop", "container", container.name, str(e)) from e

    for container in containers:
        print(f"Removing container: {container.name}")
        try:
            docker.remove_container(container.id, remove_volumes=True, force=True)
        except DockerError as e:
            raise TeardownError("remove", "container", container.name, str(e)) from e

    project = volume_project_name(app.name)
    for volume in docker.list_volumes():
        if volume.labels.get(PROJECT_LABEL) != project:
            continue
        print(f"Removing volume: {volume.name}")
        try:
            docker.remove_volume(volume.name)
        except DockerError as e:
            raise TeardownError("remove", "volume", volume.name, str(e)) from e

    logger.debug("Removed %d containers for %s; reconciling router", len(containers), app.name)
    router_signal()
