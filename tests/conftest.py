"""Shared fixtures: a clean configuration and an in-memory docker runtime."""

import os

import pytest

from ddev_tools import docker
from ddev_tools.app import (
    APP_ROOT_LABEL,
    APP_TYPE_LABEL,
    PLATFORM_LABEL,
    SERVICE_LABEL,
    SITE_NAME_LABEL,
)
from ddev_tools.config import reset_config
from ddev_tools.docker import Container, Volume
from ddev_tools.utils import DockerError

CONFIG_VARS = (
    "DDEV_DOCKER_BIN",
    "DDEV_STOP_TIMEOUT",
    "DDEV_COMMAND_TIMEOUT",
    "DDEV_DOMAIN",
    "DDEV_ROUTER_PORT",
    "DDEV_ROUTER_COMPOSE",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    # .env files loaded during a test must not leak into the next one
    saved_environ = os.environ.copy()
    for var in CONFIG_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()
    os.environ.clear()
    os.environ.update(saved_environ)


class FakeDocker:
    """Stands in for the docker module; records every runtime call in order."""

    def __init__(self):
        self.containers: list[Container] = []
        self.volumes: list[Volume] = []
        self.calls: list[tuple] = []
        self.failures: set[tuple] = set()
        self.query_error = False
        self.failing_queries: set[str] = set()

    def add_container(self, name, state="running", labels=None, health=None, cid=None):
        container = Container(
            id=cid or f"id-{name}",
            name=name,
            state=state,
            labels=dict(labels or {}),
            health=health,
        )
        self.containers.append(container)
        return container

    def add_site_container(self, site, service, approot="/srv/site", state="running", app_type="drupal8", health=None):
        labels = {
            PLATFORM_LABEL: "ddev",
            SERVICE_LABEL: service,
            SITE_NAME_LABEL: site,
            APP_TYPE_LABEL: app_type,
        }
        if approot is not None:
            labels[APP_ROOT_LABEL] = str(approot)
        return self.add_container(f"ddev-{site}-{service}", state=state, labels=labels, health=health)

    def add_volume(self, name, project=None):
        labels = {"com.docker.compose.project": project} if project else {}
        volume = Volume(name=name, labels=labels)
        self.volumes.append(volume)
        return volume

    def _check(self, call):
        self.calls.append(call)
        if call[0] in ("find", "list_containers", "list_volumes"):
            if self.query_error or call[0] in self.failing_queries:
                raise DockerError("Cannot connect to the Docker daemon")
            return
        if any(call[:2] == failure for failure in self.failures):
            raise DockerError(f"{call[0]} {call[1]} failed")

    def find_containers_by_labels(self, labels):
        self._check(("find", dict(labels)))
        return [
            c for c in self.containers
            if all(c.labels.get(k) == v for k, v in labels.items())
        ]

    def find_container_by_labels(self, labels):
        found = self.find_containers_by_labels(labels)
        return found[0] if found else None

    def list_containers(self, all_containers=False, labels=None):
        self._check(("list_containers", all_containers))
        return [c for c in self.containers if all_containers or c.state == "running"]

    def list_volumes(self):
        self._check(("list_volumes",))
        return list(self.volumes)

    def stop_container(self, container_id, timeout):
        self._check(("stop", container_id, timeout))

    def remove_container(self, container_id, remove_volumes=True, force=True):
        self._check(("remove", container_id, remove_volumes, force))

    def remove_volume(self, name):
        self._check(("remove_volume", name))

    def compose_cmd(self, compose_files, *args):
        self._check(("compose", [str(f) for f in compose_files], *args))


@pytest.fixture
def fake_docker(monkeypatch):
    fake = FakeDocker()
    for name in (
        "find_containers_by_labels",
        "find_container_by_labels",
        "list_containers",
        "list_volumes",
        "stop_container",
        "remove_container",
        "remove_volume",
        "compose_cmd",
    ):
        monkeypatch.setattr(docker, name, getattr(fake, name))
    return fake


@pytest.fixture
def make_app_root(tmp_path):
    """Create a directory with .ddev/config.yaml and return its path."""

    def _make(dirname, name=None, app_type="drupal8"):
        root = tmp_path / dirname
        (root / ".ddev").mkdir(parents=True)
        content = f"name: {name or dirname}\ntype: {app_type}\n"
        (root / ".ddev" / "config.yaml").write_text(content)
        return root

    return _make
