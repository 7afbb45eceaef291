"""
Pytest configuration and shared fixtures for boxconf tests.

This module provides reusable fixtures and test doubles used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from boxconf.host import ConfigRunner, reset_runner
from boxconf.logging import SilentLogger, set_global_logger
from boxconf.store import ConfigStore, reset_store


class RecordingHost:
    """Host that only records commit callback registrations."""

    def __init__(self) -> None:
        self.callbacks: list[Any] = []

    def register_commit_callback(self, callback) -> None:
        self.callbacks.append(callback)


class RecordingProvisioner:
    """Provisioner double that logs every call in order."""

    def __init__(self, setters: tuple[str, ...] = ()) -> None:
        self.setters = setters
        self.calls: list[tuple[Any, ...]] = []
        self.params: dict[str, Any] = {}

    def has_setter(self, name: str) -> bool:
        return name in self.setters

    def invoke_setter(self, name: str, value: Any) -> None:
        self.calls.append(("set", name, value))

    def invoke_generic(self, name: str, *args: Any) -> None:
        self.calls.append(("generic", name, args))

    def activate(self) -> None:
        self.calls.append(("activate",))

    def merge_params(self, params: dict[str, Any]) -> None:
        self.params.update(params)
        self.calls.append(("merge", dict(params)))

    def register_unit(self, name: str) -> None:
        self.calls.append(("unit", name))


class RecordingTarget:
    """Machine target double that logs every call in order."""

    def __init__(
        self,
        setters: tuple[str, ...] = ("box", "box_url"),
        provisioner_setters: tuple[str, ...] = ("log_level", "cookbooks_path"),
    ) -> None:
        self.setters = setters
        self.calls: list[tuple[Any, ...]] = []
        self._provisioner = RecordingProvisioner(provisioner_setters)

    @property
    def provisioner(self) -> RecordingProvisioner:
        return self._provisioner

    def has_setter(self, name: str) -> bool:
        return name in self.setters

    def invoke_setter(self, name: str, value: Any) -> None:
        self.calls.append(("set", name, value))

    def invoke_generic(self, name: str, *args: Any) -> None:
        self.calls.append(("generic", name, args))


@pytest.fixture(autouse=True)
def _reset_globals(monkeypatch):
    """Give every test a fresh process-wide store, runner and logger."""
    for key in ("BOXCONF_PLATFORM", "BOXCONF_NETWORK_IP", "BOXCONF_PROVISION_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_store()
    reset_runner()
    yield
    reset_store()
    reset_runner()
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def recording_host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def recording_target() -> RecordingTarget:
    return RecordingTarget()


@pytest.fixture
def make_store():
    """
    Factory fixture for stores with a fixed platform.

    Usage:
        store = make_store(host, platform="darwin")
    """

    def _create(host=None, platform: str = "linux", **kwargs: Any) -> ConfigStore:
        if host is None:
            host = ConfigRunner()
        return ConfigStore(host, platform_source=lambda: platform, **kwargs)

    return _create


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("Boxfile.yaml", {"box": "lucid32"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _create


@pytest.fixture
def sample_box_data() -> dict[str, Any]:
    """Provide a box file covering every top-level key."""
    return {
        "box": {"name": "lucid32", "url": "http://files.vagrantup.com/lucid32.box"},
        "fields": {"host_name": "dev.local"},
        "forward_ports": [["web", 80, 8080], {"label": "ssl", "guest": 443, "host": 8443}],
        "shared_folders": [
            {"label": "app", "guest_path": "/srv/app", "host_path": "app"},
        ],
        "provision": {
            "recipes": {"apache2": {"apache": {"listen_ports": [80]}}},
        },
    }
