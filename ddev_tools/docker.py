"""Docker runtime access: label queries, container and volume lifecycle commands."""

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import get_config
from .utils import DockerError, run_command

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """A container as reported by `docker inspect`."""
    id: str
    name: str
    state: str  # running, restarting, paused, exited, created, dead
    labels: dict[str, str] = field(default_factory=dict)
    health: Optional[str] = None  # healthy, unhealthy, starting; None without a healthcheck

    @classmethod
    def from_inspect(cls, data: dict) -> "Container":
        state = data.get("State") or {}
        health = state.get("Health") or {}
        return cls(
            id=data.get("Id", ""),
            name=data.get("Name", "").lstrip("/"),
            state=state.get("Status", "unknown"),
            labels=(data.get("Config") or {}).get("Labels") or {},
            health=health.get("Status"),
        )

    @property
    def is_active(self) -> bool:
        """True while the container must be stopped before it can be removed."""
        return self.state in ("running", "restarting", "paused")


@dataclass
class Volume:
    """A volume as reported by `docker volume inspect`."""
    name: str
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_inspect(cls, data: dict) -> "Volume":
        return cls(name=data.get("Name", ""), labels=data.get("Labels") or {})


def _docker(*args: str) -> subprocess.CompletedProcess:
    """Run a docker CLI command, translating every failure into DockerError."""
    config = get_config()
    cmd = [config.docker_bin, *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return run_command(cmd, timeout=config.command_timeout)
    except subprocess.CalledProcessError as e:
        raise DockerError(f"'{' '.join(cmd)}' failed: {(e.stderr or '').strip()}") from e
    except subprocess.TimeoutExpired as e:
        raise DockerError(f"'{' '.join(cmd)}' timed out after {e.timeout}s") from e
    except FileNotFoundError as e:
        raise DockerError(f"Docker executable not found: {config.docker_bin}") from e


def _inspect(kind_args: list[str], names: list[str]) -> list[dict]:
    if not names:
        return []
    result = _docker(*kind_args, *names)
    try:
        data = json.loads(result.stdout or "[]")
    except json.JSONDecodeError as e:
        raise DockerError(f"Could not parse docker inspect output: {e}") from e
    if not isinstance(data, list):
        raise DockerError("Unexpected docker inspect output: expected a list")
    return data


def _split_lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def list_containers(all_containers: bool = False, labels: Optional[dict[str, str]] = None) -> list[Container]:
    """
    List containers known to the docker daemon.

    Args:
        all_containers: Include stopped containers (docker ps -a)
        labels: Only containers carrying every key=value pair

    Returns:
        List of Container objects, in the order docker reports them

    Raises:
        DockerError: If the docker query fails
    """
    args = ["ps", "--no-trunc", "--format", "{{.ID}}"]
    if all_containers:
        args.append("-a")
    for key, value in (labels or {}).items():
        args.extend(["--filter", f"label={key}={value}"])

    ids = _split_lines(_docker(*args).stdout)
    return [Container.from_inspect(item) for item in _inspect(["inspect"], ids)]


def find_containers_by_labels(labels: dict[str, str]) -> list[Container]:
    """
    Find all containers, running or not, matching every given label.

    Raises:
        DockerError: If the docker query fails
    """
    return list_containers(all_containers=True, labels=labels)


def find_container_by_labels(labels: dict[str, str]) -> Optional[Container]:
    """Return the first container matching the labels, or None when there is none."""
    containers = find_containers_by_labels(labels)
    if not containers:
        return None
    return containers[0]


def get_container_health(container: Container) -> str:
    """Health status of a running container with a healthcheck, otherwise its state."""
    if container.state == "running" and container.health:
        return container.health
    return container.state


def list_volumes() -> list[Volume]:
    """
    List every volume with its labels.

    Raises:
        DockerError: If the docker query fails
    """
    names = _split_lines(_docker("volume", "ls", "--format", "{{.Name}}").stdout)
    return [Volume.from_inspect(item) for item in _inspect(["volume", "inspect"], names)]


def stop_container(container_id: str, timeout: int) -> None:
    """Stop a container, killing it after `timeout` seconds."""
    _docker("stop", "--time", str(timeout), container_id)


def remove_container(container_id: str, remove_volumes: bool = True, force: bool = True) -> None:
    """Remove a container, optionally with its anonymous volumes."""
    args = ["rm"]
    if force:
        args.append("--force")
    if remove_volumes:
        args.append("--volumes")
    _docker(*args, container_id)


def remove_volume(name: str) -> None:
    """Remove a named volume."""
    _docker("volume", "rm", name)


def compose_cmd(compose_files: list[Path], *args: str) -> None:
    """
    Run a docker compose command against one or more compose files.

    Raises:
        DockerError: If docker compose fails
    """
    cmd = ["compose"]
    for compose_file in compose_files:
        cmd.extend(["-f", str(compose_file)])
    _docker(*cmd, *args)
