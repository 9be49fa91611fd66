"""ddev-tools - Python library for discovering and cleaning up local ddev environments."""

__version__ = "0.1.0"

from . import app, config, docker, registry, render, router, teardown, utils

__all__ = ["app", "config", "docker", "registry", "render", "router", "teardown", "utils"]
