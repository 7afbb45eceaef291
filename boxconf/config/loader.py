"""
Box file loading for boxconf.

This module turns YAML box files into ConfigStore registrations. Several box
files can describe one machine; each is applied to the same store in order,
so later files add to (or, for single-value settings, override) what earlier
ones registered.

Layers
------
1. **Defaults** (defaults/base.yaml)
   - Found by walking upward from the first box file's directory
   - Applied before any box file
   - Optional

2. **Box files** (given on the command line, in order)
   - Each one is a YAML mapping of directives

Box File Format
---------------
    box:                          # string, or {name, url}
      name: lucid32
      url: http://files.vagrantup.com/lucid32.box
    fields:                       # any machine field; lists register each item
      host_name: dev.local
    forward_ports:                # [label, guest, host] or {label, guest, host}
      - [web, 80, 8080]
    shared_folders:
      - label: app
        guest_path: /srv/app
        host_path: ./app          # relative to this file
        options: {owner: www-data}
    provision:
      cookbook_paths: [cookbooks] # relative to this file; must exist
      fields:
        roles_path: roles
      recipes:
        apache2: {apache: {listen_ports: [80]}}

Environment Expansion
---------------------
``${VAR}`` inside any string value is replaced with the environment variable
VAR. Unknown variables are left in place.

Error Handling
--------------
- ConfigError: missing files, YAML parse errors, empty or non-mapping
  documents, unknown keys, malformed directives
- InvalidArgument: a cookbook path that is empty or not a directory (from the store)
- All errors are chained with "from err" for better debugging
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Any

import yaml

from boxconf.exceptions import ConfigError
from boxconf.logging import CONFIG, Logger, get_global_logger
from boxconf.store import ConfigStore

KNOWN_KEYS = ("box", "fields", "forward_ports", "shared_folders", "provision")
PROVISION_KEYS = ("cookbook_paths", "fields", "recipes")

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class LoadedDeclaration:
    """
    Record of one box file applied to a store.
    Useful for debugging and for reporting which files contributed.
    """

    path: Path
    directives: int
    is_defaults: bool = False


# -------------------------------
# YAML helpers
# -------------------------------


def load_yaml_file(p: Path) -> dict[str, Any]:
    """
    Load a box file and return its top-level mapping.

    Raises:
      ConfigError - missing file, invalid YAML, empty file or non-mapping document
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


def expand_env(value: Any) -> Any:
    """Recursively replace ${VAR} references in strings with environment values."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    if isinstance(value, list):
        return [expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: expand_env(v) for k, v in value.items()}
    return value


# -------------------------------
# Defaults discovery
# -------------------------------


def find_defaults_file(start_dir: Path) -> Path | None:
    """
    Walk upward from 'start_dir' looking for 'defaults/base.yaml'.
    Returns the file path or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "base.yaml"
        if candidate.exists():
            return candidate
    return None


# -------------------------------
# Path resolution
# -------------------------------


def _resolve_path(raw: Any, base_dir: Path) -> str:
    p = Path(str(raw)).expanduser()
    if not p.is_absolute():
        p = (base_dir / p).resolve()
    return str(p)


# -------------------------------
# Directive application
# -------------------------------


def _apply_box(store: ConfigStore, box: Any, source: Path) -> int:
    if isinstance(box, str):
        store.set_box(box)
    elif isinstance(box, dict) and isinstance(box.get("name"), str):
        url = box.get("url") or ""
        if not isinstance(url, str):
            raise ConfigError(f"{source}: 'box.url' must be a string, got {url!r}")
        store.set_box(box["name"], url)
    else:
        raise ConfigError(f"{source}: 'box' must be a string or a mapping with 'name'")
    return 2


def _apply_fields(store: ConfigStore, fields: Any, source: Path) -> int:
    if not isinstance(fields, dict):
        raise ConfigError(f"{source}: 'fields' must be a mapping")
    count = 0
    for name, value in fields.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            store.set_field(str(name), v)
            count += 1
    return count


def _port_triple(entry: Any, source: Path) -> tuple[str, int, int]:
    if isinstance(entry, dict):
        try:
            entry = [entry["label"], entry["guest"], entry["host"]]
        except KeyError as err:
            raise ConfigError(f"{source}: forward_ports entry missing {err}") from err
    if not isinstance(entry, list) or len(entry) != 3:
        raise ConfigError(
            f"{source}: forward_ports entries must be [label, guest, host], got {entry!r}"
        )
    label, guest, host = entry
    return str(label), guest, host


def _apply_forward_ports(store: ConfigStore, ports: Any, source: Path) -> int:
    if not isinstance(ports, list):
        raise ConfigError(f"{source}: 'forward_ports' must be a list")
    for entry in ports:
        store.forward_port(*_port_triple(entry, source))
    return len(ports)


def _apply_shared_folders(store: ConfigStore, folders: Any, source: Path) -> int:
    if not isinstance(folders, list):
        raise ConfigError(f"{source}: 'shared_folders' must be a list")
    for entry in folders:
        if not isinstance(entry, dict):
            raise ConfigError(f"{source}: shared_folders entries must be mappings")
        try:
            label = entry["label"]
            guest_path = entry["guest_path"]
            host_path = entry["host_path"]
        except KeyError as err:
            raise ConfigError(f"{source}: shared_folders entry missing {err}") from err
        options = entry.get("options") or {}
        if not isinstance(options, dict):
            raise ConfigError(f"{source}: shared folder {label!r} options must be a mapping")
        store.share_folder(
            str(label), str(guest_path), _resolve_path(host_path, source.parent), options
        )
    return len(folders)


def _apply_provision(store: ConfigStore, provision: Any, source: Path) -> int:
    if not isinstance(provision, dict):
        raise ConfigError(f"{source}: 'provision' must be a mapping")
    unknown = [k for k in provision if k not in PROVISION_KEYS]
    if unknown:
        raise ConfigError(f"{source}: unknown provision key(s): {', '.join(map(str, unknown))}")

    count = 0
    for raw in provision.get("cookbook_paths") or []:
        # blank entries reach the store unresolved so it can reject them
        store.add_cookbook_path(_resolve_path(raw, source.parent) if raw else "")
        count += 1

    fields = provision.get("fields") or {}
    if not isinstance(fields, dict):
        raise ConfigError(f"{source}: 'provision.fields' must be a mapping")
    for name, value in fields.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            store.set_provision_field(str(name), v)
            count += 1

    recipes = provision.get("recipes") or {}
    if isinstance(recipes, list):
        bad = [name for name in recipes if not isinstance(name, str)]
        if bad:
            raise ConfigError(
                f"{source}: provision.recipes list entries must be recipe names, got {bad[0]!r}"
            )
        recipes = {name: {} for name in recipes}
    if not isinstance(recipes, dict):
        raise ConfigError(f"{source}: 'provision.recipes' must be a mapping or list")
    for name, params in recipes.items():
        if params is not None and not isinstance(params, dict):
            raise ConfigError(f"{source}: recipe {name!r} parameters must be a mapping")
        store.add_recipe(str(name), params or {})
        count += 1
    return count


def apply_declaration(store: ConfigStore, data: dict[str, Any], source: Path) -> int:
    """
    Apply one parsed box file to store.

    Keys are applied in a fixed order (box, fields, forward_ports,
    shared_folders, provision) regardless of their order in the file.

    Returns
      Number of directives registered.
    """
    unknown = [k for k in data if k not in KNOWN_KEYS]
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(map(str, unknown))}")

    data = expand_env(data)
    count = 0
    if "box" in data:
        count += _apply_box(store, data["box"], source)
    if "fields" in data:
        count += _apply_fields(store, data["fields"], source)
    if "forward_ports" in data:
        count += _apply_forward_ports(store, data["forward_ports"], source)
    if "shared_folders" in data:
        count += _apply_shared_folders(store, data["shared_folders"], source)
    if "provision" in data:
        count += _apply_provision(store, data["provision"], source)
    return count


# -------------------------------
# Public API
# -------------------------------


def load_declarations(
    paths: list[Path],
    store: ConfigStore,
    *,
    defaults_file: Path | None = None,
    use_defaults: bool = True,
    logger: Logger | None = None,
) -> list[LoadedDeclaration]:
    """
    Load box files into store, defaults first.

    Steps
      1) Locate defaults/base.yaml upward from the first box file (unless
         'defaults_file' is given or 'use_defaults' is False).
      2) Apply the defaults file.
      3) Apply each box file in the given order.

    Returns
      One LoadedDeclaration per applied file, in application order.

    Raises
      ConfigError for unreadable or malformed files,
      InvalidArgument for cookbook paths that are not directories.
    """
    if logger is None:
        logger = get_global_logger()

    resolved = [p.resolve() for p in paths]
    if not resolved:
        raise ConfigError("no box files given")

    layers: list[tuple[Path, bool]] = []
    if use_defaults:
        if defaults_file is None:
            defaults_file = find_defaults_file(resolved[0].parent)
        if defaults_file is not None:
            defaults_file = defaults_file.resolve()
            logger.verbose(CONFIG, f"Found defaults: {defaults_file}")
            layers.append((defaults_file, True))
    layers.extend((p, False) for p in resolved if p not in {d for d, _ in layers})

    loaded: list[LoadedDeclaration] = []
    for path, is_defaults in layers:
        logger.verbose(CONFIG, f"Loading: {path}")
        data = load_yaml_file(path)
        count = apply_declaration(store, data, path)
        logger.debug(CONFIG, f"{path.name}: {count} directive(s)")
        loaded.append(LoadedDeclaration(path=path, directives=count, is_defaults=is_defaults))

    logger.verbose(CONFIG, f"Loaded {len(loaded)} file(s)")
    return loaded
