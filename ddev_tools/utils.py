"""Utility functions for running docker commands, HTTP reachability checks, and common helpers."""

import subprocess
from pathlib import Path
from typing import Optional

import requests


class DdevError(Exception):
    """Base exception for ddev-tools errors."""
    pass


class DockerError(DdevError):
    """Exception raised when a docker command fails or returns unusable output."""
    pass


class ConfigNotFoundError(DdevError):
    """Exception raised when no .ddev/config.yaml exists in a directory or its parents."""
    pass


class AppInitError(DdevError):
    """Exception raised when an application's configuration cannot be loaded."""
    pass


class AppNotFoundError(DdevError):
    """Exception raised when a named application is not among the discovered apps."""
    pass


class ConfigError(DdevError):
    """Exception raised when a configuration setting has an invalid value."""
    pass


class TeardownError(DdevError):
    """
    Exception raised when a teardown step fails on a specific container or volume.

    Attributes:
        action: The step that failed ("stop" or "remove")
        object_kind: "container" or "volume"
        object_name: Name of the offending container or volume
    """

    def __init__(self, action: str, object_kind: str, object_name: str, reason: str):
        self.action = action
        self.object_kind = object_kind
        self.object_name = object_name
        super().__init__(f"could not {action} {object_kind} {object_name}: {reason}")


def run_command(command: list[str], timeout: Optional[int] = None) -> subprocess.CompletedProcess:
    """
    Run a command, capturing its output.

    Args:
        command: Command and arguments as list
        timeout: Optional timeout in seconds

    Returns:
        CompletedProcess instance

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero
        subprocess.TimeoutExpired: If the timeout passes first
    """
    return subprocess.run(command, capture_output=True, text=True, check=True, timeout=timeout)


def http_reachable(url: str, timeout: int = 5) -> bool:
    """
    Check whether anything answers HTTP at a URL.

    Any HTTP response counts, including error statuses; only a network
    failure makes the endpoint unreachable.

    Args:
        url: The URL to check
        timeout: Request timeout in seconds (default: 5)

    Returns:
        True if the endpoint answered, False otherwise
    """
    try:
        requests.get(url, timeout=timeout, allow_redirects=False)
        return True
    except requests.exceptions.RequestException:
        return False


def file_exists(path: str | Path) -> bool:
    """Return True if path exists on disk."""
    return Path(path).exists()


def format_plural(count: int, single: str, plural: str) -> str:
    """Pick the singular or plural form of a word for a count."""
    if count == 1:
        return single
    return plural
