# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Deferred configuration store.

Many box files write into one ConfigStore while they load. The store keeps
three insertion-ordered maps:

- fields: machine fields (name -> list of values)
- provision_fields: chef-solo fields (name -> list of values)
- recipes: recipe name -> parameter dict

Commit Trigger
--------------
The first set_field() call on an empty store registers the commit callback
with the host, then appends. The host runs the callback later, during its
own configuration-resolution phase, and the callback reads the maps at
that point. Registration happens at most once per store.

NFS Resolution
--------------
The first share_folder() call resolves whether NFS is on by looking for
"darwin" in the platform identifier. When it resolves to True, a single
host-only network directive is registered. Every shared folder after that
gets {"nfs": True} merged into a copy of its options.

Example:
    Basic usage:

        from boxconf.host import ConfigRunner
        from boxconf.store import ConfigStore
        from boxconf.targets import MachineConfig

        runner = ConfigRunner()
        store = ConfigStore(runner)
        store.set_box("lucid32", "http://files.vagrantup.com/lucid32.box")
        store.forward_port("web", 80, 8080)
        store.add_recipe("apache2", {"apache": {"listen_ports": [80]}})

        machine = MachineConfig()
        runner.run(machine)

"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import sys
import threading
from typing import Any

from boxconf.exceptions import CommitError, InvalidArgument
from boxconf.logging import COMMIT, STORE, Logger, format_assignment, get_global_logger
from boxconf.settings import DEFAULT_NETWORK_IP, DEFAULT_PROVISION_LOG_LEVEL
from boxconf.store.dispatch import dispatch_field
from boxconf.targets.base import CommitHost, MachineTarget

__all__ = ["ConfigStore", "NFS_PLATFORM"]

NFS_PLATFORM = "darwin"


def _default_platform() -> str:
    return sys.platform


class ConfigStore:
    """Aggregates directives and applies them in a single commit pass.

    Attributes:
        host: Object the commit callback is registered with.
        network_ip: Host-only IP registered when NFS is enabled.
        provisioner_log_level: Log level set on the provisioner after
            activation, or None to leave it alone.

    """

    def __init__(
        self,
        host: CommitHost,
        *,
        platform_source: Callable[[], str] | None = None,
        network_ip: str = DEFAULT_NETWORK_IP,
        provisioner_log_level: str | None = DEFAULT_PROVISION_LOG_LEVEL,
        logger: Logger | None = None,
    ) -> None:
        self.host = host
        self.network_ip = network_ip
        self.provisioner_log_level = provisioner_log_level
        self._platform_source = platform_source or _default_platform
        self._logger = logger
        self._lock = threading.RLock()

        self._fields: dict[str, list[Any]] = {}
        self._provision_fields: dict[str, list[Any]] = {}
        self._recipes: dict[str, dict[str, Any]] = {}
        self._nfs_on: bool | None = None
        self._commit_registered = False
        self._committed = False

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    # -------------------------------
    # Read accessors
    # -------------------------------

    @property
    def fields(self) -> dict[str, list[Any]]:
        """Copy of the machine field map."""
        with self._lock:
            return {k: list(v) for k, v in self._fields.items()}

    @property
    def provision_fields(self) -> dict[str, list[Any]]:
        """Copy of the provisioner field map."""
        with self._lock:
            return {k: list(v) for k, v in self._provision_fields.items()}

    @property
    def recipes(self) -> dict[str, dict[str, Any]]:
        """Copy of the recipe table."""
        with self._lock:
            return {k: dict(v) for k, v in self._recipes.items()}

    @property
    def nfs_enabled(self) -> bool | None:
        """Platform flag: None until the first share_folder() call."""
        return self._nfs_on

    @property
    def commit_registered(self) -> bool:
        return self._commit_registered

    @property
    def committed(self) -> bool:
        return self._committed

    # -------------------------------
    # Machine fields
    # -------------------------------

    def set_field(self, name: str, value: Any) -> None:
        """Append value to the machine field name.

        The first call on an empty store registers the commit callback with
        the host before appending.
        """
        with self._lock:
            if not self._fields and not self._commit_registered:
                self._commit_registered = True
                self.host.register_commit_callback(self.commit)
                self.logger.verbose(STORE, "Registered commit callback with host")

            self._fields.setdefault(name, []).append(value)
            self.logger.debug(STORE, f"field {format_assignment(name, value)}")

    def forward_port(self, label: str, guest_port: int, host_port: int) -> None:
        """Forward guest_port on the machine to host_port on the host."""
        self.set_field("forward_port", [label, guest_port, host_port])

    def set_box(self, name: str, url: str = "") -> None:
        """Set the base box and the URL it can be fetched from."""
        self.set_field("box", name)
        self.set_field("box_url", url)

    def share_folder(
        self,
        label: str,
        guest_path: str,
        host_path: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Share host_path with the machine at guest_path.

        On the first call the NFS flag is resolved from the platform; if it
        comes out True the host-only network directive is registered once.
        While NFS is on, the registered options are a new dict with
        "nfs": True merged in. The caller's dict is left untouched.

        Args:
            label: Name of the share.
            guest_path: Path on the machine.
            host_path: Path on the host.
            options: Extra share options.

        """
        with self._lock:
            if self._nfs_on is None:
                platform = self._platform_source()
                self._nfs_on = NFS_PLATFORM in platform
                self.logger.verbose(
                    STORE,
                    f"Platform {platform!r}: NFS {'enabled' if self._nfs_on else 'disabled'}",
                )
                if self._nfs_on:
                    self.set_field("network", self.network_ip)

            share_options = dict(options or {})
            if self._nfs_on:
                share_options = {**share_options, "nfs": True}

            self.set_field("share_folder", [label, guest_path, host_path, share_options])

    # -------------------------------
    # Provisioner fields and recipes
    # -------------------------------

    def set_provision_field(self, name: str, value: Any) -> None:
        """Append value to the provisioner field name.

        Provisioner fields only reach a target when at least one recipe has
        been added by commit time.
        """
        with self._lock:
            self._provision_fields.setdefault(name, []).append(value)
            self.logger.debug(STORE, f"provision {format_assignment(name, value)}")

    def add_cookbook_path(self, path: str | Path) -> None:
        """Add a local cookbook directory to the provisioner.

        Raises:
            InvalidArgument: If path is empty or not an existing directory.
                Nothing is registered in that case.

        """
        if not str(path).strip():
            raise InvalidArgument("cookbook path must not be empty")
        if not Path(path).is_dir():
            raise InvalidArgument(f"cookbook path does not exist: {path}")
        self.set_provision_field("cookbooks_path", str(path))

    def add_recipe(self, name: str, params: dict[str, Any] | None = None) -> None:
        """Add a recipe, merging params into an existing entry of the same name."""
        params = params or {}
        with self._lock:
            if name in self._recipes:
                self._recipes[name].update(params)
            else:
                self._recipes[name] = dict(params)
            self.logger.debug(STORE, f"recipe {format_assignment(name, self._recipes[name])}")

    # -------------------------------
    # Commit
    # -------------------------------

    def commit(self, target: MachineTarget) -> None:
        """Apply every registered directive to target.

        Runs the machine field pass, then the provisioner pass if at least
        one recipe was added. Target failures propagate unchanged.

        The store is marked committed before the first directive is
        dispatched, so a commit that fails partway cannot be retried into
        duplicate directives on the same target.

        Raises:
            CommitError: If this store has already committed.

        """
        with self._lock:
            if self._committed:
                raise CommitError("store has already been committed")
            self._committed = True

            self.logger.verbose(COMMIT, f"Applying {len(self._fields)} machine field(s)")
            for name, values in self._fields.items():
                dispatch_field(target, name, values, self.logger)

            self._commit_provisioner(target)

    def _commit_provisioner(self, target: MachineTarget) -> None:
        if not self._recipes:
            return

        provisioner = target.provisioner
        provisioner.activate()
        self.logger.verbose(
            COMMIT,
            f"Provisioner active with {len(self._recipes)} recipe(s)",
        )

        if self.provisioner_log_level is not None:
            dispatch_field(provisioner, "log_level", [self.provisioner_log_level], self.logger)

        for name, values in self._provision_fields.items():
            dispatch_field(provisioner, name, values, self.logger)

        for recipe, params in self._recipes.items():
            provisioner.merge_params(params)
            provisioner.register_unit(recipe)
