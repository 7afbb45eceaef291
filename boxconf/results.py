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

"""Public API return types for boxconf.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Internal types
    (like LoadedDeclaration) remain co-located with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ResolveResult:
    """Result from resolving box files into a machine configuration.

    Attributes:
        machine: Applied machine configuration as plain data (see
            MachineConfig.to_dict()).
        provisioned: True if the chef-solo provisioner was activated.
        recipes: Recipe names in run order.
        nfs_enabled: Resolved NFS flag, or None if no folder was shared.
        sources: Box files applied, defaults first.
    """

    machine: dict[str, Any]
    provisioned: bool
    recipes: list[str]
    nfs_enabled: bool | None
    sources: list[Path]


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a box file.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        directive_count: Number of directives the file would register.
        path: String path to the validated box file.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    directive_count: int
    path: str
