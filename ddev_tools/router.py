"""The shared ddev router: liveness of managed containers and router lifecycle."""

import logging

from . import docker
from .app import PLATFORM_LABEL, SERVICE_LABEL, SITE_NOT_FOUND, SITE_RUNNING, SITE_STOPPED
from .config import get_config
from .utils import file_exists, http_reachable

logger = logging.getLogger(__name__)

ROUTER_PROJECT_NAME = "ddev-router"
ROUTER_SERVICE = "ddevrouter"


def ddev_containers_running() -> bool:
    """
    Determine if any ddev-controlled containers are currently running.

    Only the presence of the ddev platform label is checked; docker's
    default listing supplies the running containers.

    Raises:
        DockerError: If docker can't be queried
    """
    for container in docker.list_containers():
        if PLATFORM_LABEL in container.labels:
            return True
    return False


def stop_router() -> None:
    """
    Stop the router if no ddev containers are left running.

    Raises:
        DockerError: If the liveness check or docker compose fails
    """
    if ddev_containers_running():
        logger.debug("ddev containers still running; leaving the router up")
        return

    compose_file = get_config().router_compose_file
    if not file_exists(compose_file):
        logger.debug("No router compose file at %s; nothing to stop", compose_file)
        return

    print("Stopping ddev router")
    docker.compose_cmd([compose_file], "-p", ROUTER_PROJECT_NAME, "down", "-v")


def router_status() -> str:
    """
    Describe the router's state for display.

    Returns:
        "DDEV ROUTER STATUS: <status>" with status one of running, stopped,
        not found, starting, or docker's own health/state string
    """
    container = docker.find_container_by_labels({SERVICE_LABEL: ROUTER_SERVICE})
    if container is None:
        status = SITE_NOT_FOUND
    else:
        status = docker.get_container_health(container)
        if status == "exited":
            status = SITE_STOPPED
        elif status == "healthy":
            status = SITE_RUNNING
        elif status == "running" and container.health is None:
            # No healthcheck, so ask the router itself
            status = SITE_RUNNING if http_reachable(get_config().router_url) else "starting"

    return f"DDEV ROUTER STATUS: {status}"
