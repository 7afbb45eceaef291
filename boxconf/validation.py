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

"""Box file validation module.

This module checks a box file's syntax and shape without registering
anything in a store. It is useful for quick feedback while editing box
files and as a CI pre-check.

Validation Checks:

- YAML syntax is valid and the document is a mapping
- Only known top-level keys are used
- box is a string or a mapping with a name
- forward_ports entries are [label, guest, host] with valid port numbers
- shared_folders entries have label, guest_path and host_path
- provision section uses known keys; recipe lists hold names and recipe
  mappings have mapping parameters

Cookbook paths that do not exist produce warnings, not errors, since the
directory may be created before the box file is actually loaded.

Example:
    Validate a box file and handle results:
        ```python
        from pathlib import Path
        from boxconf.validation import validate_declaration

        result = validate_declaration(Path("Boxfile.yaml"))
        if result.status == "valid":
            print(f"{result.directive_count} directive(s)")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from boxconf.config.loader import KNOWN_KEYS, PROVISION_KEYS
from boxconf.results import ValidationResult

__all__ = ["validate_declaration"]


def _is_port(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 65535


def _count_values(mapping: dict[str, Any]) -> int:
    return sum(len(v) if isinstance(v, list) else 1 for v in mapping.values())


def _check_forward_ports(ports: Any, errors: list[str]) -> int:
    if not isinstance(ports, list):
        errors.append("Field 'forward_ports' must be a list")
        return 0
    for idx, entry in enumerate(ports):
        prefix = f"forward_ports[{idx}]"
        if isinstance(entry, dict):
            missing = [k for k in ("label", "guest", "host") if k not in entry]
            if missing:
                errors.append(f"{prefix}: Missing required field(s): {', '.join(missing)}")
                continue
            entry = [entry["label"], entry["guest"], entry["host"]]
        if not isinstance(entry, list) or len(entry) != 3:
            errors.append(f"{prefix}: Must be [label, guest, host]")
            continue
        for name, port in (("guest", entry[1]), ("host", entry[2])):
            if not _is_port(port):
                errors.append(f"{prefix}: {name} port must be an integer 1-65535, got {port!r}")
    return len(ports)


def _check_shared_folders(folders: Any, errors: list[str]) -> int:
    if not isinstance(folders, list):
        errors.append("Field 'shared_folders' must be a list")
        return 0
    for idx, entry in enumerate(folders):
        prefix = f"shared_folders[{idx}]"
        if not isinstance(entry, dict):
            errors.append(f"{prefix}: Must be a dictionary")
            continue
        for field in ("label", "guest_path", "host_path"):
            if field not in entry:
                errors.append(f"{prefix}: Missing required field: {field}")
        options = entry.get("options")
        if options is not None and not isinstance(options, dict):
            errors.append(f"{prefix}.options: Must be a dictionary")
    return len(folders)


def _check_provision(
    provision: Any, base_dir: Path, errors: list[str], warnings: list[str]
) -> int:
    if not isinstance(provision, dict):
        errors.append("Field 'provision' must be a dictionary")
        return 0

    for key in provision:
        if key not in PROVISION_KEYS:
            errors.append(f"provision: Unknown field: {key}")

    count = 0
    paths = provision.get("cookbook_paths") or []
    if not isinstance(paths, list):
        errors.append("provision.cookbook_paths: Must be a list")
    else:
        for idx, raw in enumerate(paths):
            if not raw or not str(raw).strip():
                errors.append(f"provision.cookbook_paths[{idx}]: Must not be empty")
                continue
            p = Path(str(raw)).expanduser()
            if not p.is_absolute():
                p = base_dir / p
            if not p.is_dir():
                warnings.append(f"provision.cookbook_paths: Directory not found: {p}")
            count += 1

    fields = provision.get("fields") or {}
    if not isinstance(fields, dict):
        errors.append("provision.fields: Must be a dictionary")
    else:
        count += _count_values(fields)

    recipes = provision.get("recipes") or {}
    if isinstance(recipes, list):
        for idx, name in enumerate(recipes):
            if not isinstance(name, str):
                errors.append(f"provision.recipes[{idx}]: Must be a recipe name, got {name!r}")
        count += len(recipes)
    elif isinstance(recipes, dict):
        for name, params in recipes.items():
            if params is not None and not isinstance(params, dict):
                errors.append(f"provision.recipes.{name}: Parameters must be a dictionary")
        count += len(recipes)
    else:
        errors.append("provision.recipes: Must be a dictionary or list")
    return count


def validate_declaration(path: Path, verbose: bool = False) -> ValidationResult:
    """Validate a box file without loading it into a store.

    Args:
        path: Path to the box file to validate.
        verbose: If True, print validation progress.
            Default is False.

    Returns:
        A ValidationResult. status is "valid" when errors is empty.

    """
    errors: list[str] = []
    warnings: list[str] = []
    count = 0

    def _result() -> ValidationResult:
        return ValidationResult(
            status="valid" if not errors else "invalid",
            errors=errors,
            warnings=warnings,
            directive_count=count if not errors else 0,
            path=str(path),
        )

    if verbose:
        print(f"Validating box file: {path}")

    if not path.exists():
        errors.append(f"Box file not found: {path}")
        return _result()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        errors.append(f"Invalid YAML syntax: {err}")
        return _result()
    except OSError as err:
        errors.append(f"Failed to read box file: {err}")
        return _result()

    if verbose:
        print("  [OK] YAML syntax is valid")

    if not isinstance(data, dict):
        errors.append("Box file must be a YAML dictionary/mapping")
        return _result()

    for key in data:
        if key not in KNOWN_KEYS:
            errors.append(f"Unknown field: {key}")

    if "box" in data:
        box = data["box"]
        if isinstance(box, str) or (isinstance(box, dict) and isinstance(box.get("name"), str)):
            count += 2
            if isinstance(box, dict) and not isinstance(box.get("url") or "", str):
                errors.append("box.url: Must be a string")
        else:
            errors.append("Field 'box' must be a string or a dictionary with 'name'")

    if "fields" in data:
        if isinstance(data["fields"], dict):
            count += _count_values(data["fields"])
        else:
            errors.append("Field 'fields' must be a dictionary")

    if "forward_ports" in data:
        count += _check_forward_ports(data["forward_ports"], errors)

    if "shared_folders" in data:
        count += _check_shared_folders(data["shared_folders"], errors)

    if "provision" in data:
        count += _check_provision(data["provision"], path.parent, errors, warnings)

    if verbose:
        if errors:
            print(f"  [ERROR] Box file has {len(errors)} error(s)")
        else:
            print(f"  [OK] {count} directive(s)")

    return _result()
