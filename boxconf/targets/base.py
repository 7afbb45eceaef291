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

"""Target protocols for the commit pass.

This module defines the interfaces a store talks to when it applies its
directives. The store never inspects a target's attributes; each target
answers an explicit capability question instead:

- FieldTarget: has_setter() decides between a dedicated single-value
  setter and a generic named directive
- MachineTarget: the primary configuration object, exposing its
  provisioner
- ProvisionerTarget: the secondary (recipe) subsystem, only touched when
  at least one recipe was added
- CommitHost: whatever runs the configuration-resolution phase and owns
  the commit callbacks

Design Philosophy:
    - Targets are Protocol classes (structural subtyping, not inheritance)
    - Capability checks are method calls, not hasattr() probes
    - Hosts own the timing; the store only hands over one callback

Example:
    Implementing a minimal target:
        ```python
        class PrintTarget:
            def has_setter(self, name: str) -> bool:
                return name == "box"

            def invoke_setter(self, name: str, value: Any) -> None:
                print(f"{name} = {value!r}")

            def invoke_generic(self, name: str, *args: Any) -> None:
                print(f"{name}({', '.join(map(repr, args))})")
        ```

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol


class FieldTarget(Protocol):
    """Protocol for objects that accept dispatched fields."""

    def has_setter(self, name: str) -> bool:
        """Return True if the target has a dedicated setter for name.

        Args:
            name: Field name (e.g., "box", "forward_port").

        """
        ...

    def invoke_setter(self, name: str, value: Any) -> None:
        """Assign a single value through the dedicated setter for name."""
        ...

    def invoke_generic(self, name: str, *args: Any) -> None:
        """Apply the named directive with positional arguments.

        Raises:
            ConfigError: If the target does not know the directive.

        """
        ...


class ProvisionerTarget(FieldTarget, Protocol):
    """Protocol for the recipe provisioning subsystem."""

    def activate(self) -> None:
        """Turn the provisioner on. Called once, before any dispatch."""
        ...

    def merge_params(self, params: dict[str, Any]) -> None:
        """Merge recipe parameters into the accumulated parameter object.

        Conflicting keys take the new value.
        """
        ...

    def register_unit(self, name: str) -> None:
        """Add a recipe to the run list."""
        ...


class MachineTarget(FieldTarget, Protocol):
    """Protocol for the primary machine configuration object."""

    @property
    def provisioner(self) -> ProvisionerTarget:
        """The secondary target. Accessing it must not activate it."""
        ...


CommitCallback = Callable[[MachineTarget], None]


class CommitHost(Protocol):
    """Protocol for the host that runs the configuration-resolution phase."""

    def register_commit_callback(self, callback: CommitCallback) -> None:
        """Register a callback to run with the target during resolution."""
        ...
