"""
boxconf - Deferred machine configuration from shared box files

boxconf lets several box files contribute to one virtual machine definition.
Every file registers directives into a shared store; the store applies them
to the machine configuration exactly once, after all files are loaded.

boxconf provides:
  - A configuration store with multi-valued fields and merged recipe tables
  - A one-shot commit trigger registered on the very first directive
  - Automatic NFS shared folders (and a host-only network) on macOS hosts
  - Chef-solo provisioning that only activates when a recipe is added
  - Declarative YAML box files with shared defaults
  - A CLI to validate and resolve box files

Quick Start
-----------
Validate box files:

    $ boxconf validate Boxfile.yaml

Resolve the machine configuration:

    $ boxconf resolve Boxfile.yaml app/Boxfile.yaml

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level orchestration functions.
store : package
    The deferred configuration store and field dispatch.
targets : package
    Target protocols and in-memory machine/provisioner targets.
host : module
    Configuration-resolution host that runs commit callbacks.
config : package
    YAML box file loading.

Public API
----------
    from boxconf.core import resolve_machine
    from boxconf.store import ConfigStore, get_store
    from boxconf.validation import validate_declaration

Project Information
-------------------
License: Apache-2.0
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "boxconf - deferred machine configuration from shared box files"

# Re-export commonly used names for convenience
from boxconf.core import resolve_machine
from boxconf.exceptions import BoxconfError, CommitError, ConfigError, InvalidArgument
from boxconf.results import ResolveResult, ValidationResult
from boxconf.store import ConfigStore, get_store, reset_store
from boxconf.validation import validate_declaration

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "resolve_machine",
    "validate_declaration",
    "ConfigStore",
    "get_store",
    "reset_store",
    "ResolveResult",
    "ValidationResult",
    "BoxconfError",
    "ConfigError",
    "InvalidArgument",
    "CommitError",
]
