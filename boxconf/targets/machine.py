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

"""In-memory machine and provisioner targets.

These targets record what a commit pass applies to them so the result can
be printed, serialized or asserted on. They mirror the shape of a Vagrant
v1 ``config.vm`` object and its chef_solo provisioner:

- Single-value settings (box, box_url, host_name, ...) have dedicated
  setters; the last value wins.
- Directives (forward_port, share_folder, network, customize) are
  generic calls that accumulate in order.

Each target declares its setters and directives in explicit tables, which
is what has_setter() answers from.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from boxconf.exceptions import ConfigError

__all__ = ["MachineConfig", "ChefSoloProvisioner"]


class ChefSoloProvisioner:
    """Recording chef-solo provisioner.

    Path settings (cookbooks_path, roles_path, data_bags_path) accumulate
    because several box files may each contribute a cookbook directory.
    Everything else is last-wins.

    Attributes:
        active: True once activate() has been called.
        settings: Single-value settings by name.
        paths: Accumulated path settings by name.
        json: Merged recipe parameters.
        run_list: Recipes in registration order, as "recipe[name]".
    """

    SETTERS = ("log_level", "node_name", "recipe_url")
    PATH_SETTERS = ("cookbooks_path", "roles_path", "data_bags_path")

    def __init__(self) -> None:
        self.active = False
        self.settings: dict[str, Any] = {}
        self.paths: dict[str, list[str]] = {}
        self.json: dict[str, Any] = {}
        self.run_list: list[str] = []

    def _require_active(self, what: str) -> None:
        if not self.active:
            raise ConfigError(f"chef_solo provisioner is not active; cannot apply {what!r}")

    def activate(self) -> None:
        self.active = True

    def has_setter(self, name: str) -> bool:
        return name in self.SETTERS or name in self.PATH_SETTERS

    def invoke_setter(self, name: str, value: Any) -> None:
        self._require_active(name)
        if name in self.PATH_SETTERS:
            self.paths.setdefault(name, []).append(str(value))
        elif name in self.SETTERS:
            self.settings[name] = value
        else:
            raise ConfigError(f"chef_solo has no setting named {name!r}")

    def invoke_generic(self, name: str, *args: Any) -> None:
        if name == "add_role":
            self._require_active(name)
            for role in args:
                self.run_list.append(f"role[{role}]")
            return
        raise ConfigError(f"Unknown chef_solo directive: {name!r}")

    def merge_params(self, params: dict[str, Any]) -> None:
        self._require_active("json")
        self.json.update(params)

    def register_unit(self, name: str) -> None:
        self._require_active(name)
        self.run_list.append(f"recipe[{name}]")

    def to_dict(self) -> dict[str, Any]:
        """Return the recorded provisioner state as plain data."""
        return {
            **self.settings,
            **{name: list(values) for name, values in self.paths.items()},
            "json": dict(self.json),
            "run_list": list(self.run_list),
        }


class MachineConfig:
    """Recording machine configuration target.

    Attributes:
        settings: Single-value settings by name.
        forwarded_ports: Recorded forward_port directives.
        shared_folders: Recorded share_folder directives.
        networks: Recorded network directives.
        customizations: Recorded customize commands.
    """

    SETTERS = ("box", "box_url", "host_name", "base_mac", "boot_mode", "guest")

    def __init__(self) -> None:
        self.settings: dict[str, Any] = {}
        self.forwarded_ports: list[dict[str, Any]] = []
        self.shared_folders: list[dict[str, Any]] = []
        self.networks: list[dict[str, Any]] = []
        self.customizations: list[Any] = []
        self._provisioner = ChefSoloProvisioner()
        self._directives: dict[str, Callable[..., None]] = {
            "forward_port": self.forward_port,
            "share_folder": self.share_folder,
            "network": self.network,
            "customize": self.customize,
        }

    @property
    def provisioner(self) -> ChefSoloProvisioner:
        return self._provisioner

    def has_setter(self, name: str) -> bool:
        return name in self.SETTERS

    def invoke_setter(self, name: str, value: Any) -> None:
        if name not in self.SETTERS:
            raise ConfigError(f"Machine has no setting named {name!r}")
        self.settings[name] = value

    def invoke_generic(self, name: str, *args: Any) -> None:
        directive = self._directives.get(name)
        if directive is None:
            available = ", ".join(sorted(self._directives))
            raise ConfigError(f"Unknown machine directive: {name!r}. Available: {available}")
        try:
            directive(*args)
        except TypeError as err:
            raise ConfigError(f"Invalid arguments for {name!r}: {args!r}") from err

    # -------------------------------
    # Directives
    # -------------------------------

    def forward_port(self, label: str, guest_port: int, host_port: int) -> None:
        self.forwarded_ports.append(
            {"label": label, "guest": guest_port, "host": host_port}
        )

    def share_folder(
        self,
        label: str,
        guest_path: str,
        host_path: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.shared_folders.append(
            {
                "label": label,
                "guest_path": guest_path,
                "host_path": host_path,
                "options": dict(options or {}),
            }
        )

    def network(self, ip: str, options: dict[str, Any] | None = None) -> None:
        self.networks.append({"ip": ip, "options": dict(options or {})})

    def customize(self, command: Any) -> None:
        self.customizations.append(command)

    def to_dict(self) -> dict[str, Any]:
        """Return the recorded machine configuration as plain data.

        The provisioner section is only present when it was activated.
        """
        data: dict[str, Any] = dict(self.settings)
        if self.forwarded_ports:
            data["forwarded_ports"] = [dict(p) for p in self.forwarded_ports]
        if self.shared_folders:
            data["shared_folders"] = [dict(f) for f in self.shared_folders]
        if self.networks:
            data["networks"] = [dict(n) for n in self.networks]
        if self.customizations:
            data["customizations"] = list(self.customizations)
        if self._provisioner.active:
            data["chef_solo"] = self._provisioner.to_dict()
        return data
