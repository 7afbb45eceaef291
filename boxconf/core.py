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

"""Core orchestration for boxconf.

This module ties the pieces together for a complete resolution pass:

1. Build a runner (the configuration-resolution host) and a store
2. Load defaults and box files into the store
3. Run the commit callback against a fresh MachineConfig
4. Return a ResolveResult

Example:
    Resolve two box files:
        ```python
        from pathlib import Path
        from boxconf.core import resolve_machine

        result = resolve_machine(
            [Path("base/Boxfile.yaml"), Path("app/Boxfile.yaml")],
            platform="linux",
        )
        print(result.machine["box"])
        ```

"""

from __future__ import annotations

from pathlib import Path

from boxconf.config import load_declarations
from boxconf.host import ConfigRunner
from boxconf.logging import COMMIT, CONFIG, get_logger
from boxconf.results import ResolveResult
from boxconf.settings import Settings
from boxconf.store import ConfigStore
from boxconf.targets import MachineConfig

__all__ = ["resolve_machine"]


def resolve_machine(
    paths: list[Path],
    *,
    platform: str | None = None,
    settings: Settings | None = None,
    use_defaults: bool = True,
    verbose: bool = False,
    debug: bool = False,
) -> ResolveResult:
    """Load box files and apply them to a fresh machine configuration.

    Args:
        paths: Box files, applied in order after any defaults file.
        platform: Platform identifier for the NFS decision. Overrides
            settings.platform; sys.platform is used when both are unset.
        settings: Environment settings. Read from the environment when None.
        use_defaults: If False, skip the defaults/base.yaml lookup.
        verbose: Show progress output.
        debug: Show every registered and applied directive.

    Returns:
        ResolveResult describing the applied configuration.

    Raises:
        ConfigError: On unreadable or malformed box files, or directives the
            machine does not support.
        InvalidArgument: On cookbook paths that are not directories.

    """
    logger = get_logger(verbose=verbose, debug=debug)
    if settings is None:
        settings = Settings.from_env()

    platform = platform or settings.platform
    runner = ConfigRunner(logger=logger)
    store = ConfigStore(
        runner,
        platform_source=(lambda: platform) if platform else None,
        network_ip=settings.network_ip,
        provisioner_log_level=settings.provision_log_level,
        logger=logger,
    )

    logger.verbose(CONFIG, f"Loading {len(paths)} box file(s)")
    loaded = load_declarations(paths, store, use_defaults=use_defaults, logger=logger)

    logger.verbose(COMMIT, "Applying configuration to a new machine")
    machine = MachineConfig()
    runner.run(machine)

    return ResolveResult(
        machine=machine.to_dict(),
        provisioned=machine.provisioner.active,
        recipes=list(store.recipes),
        nfs_enabled=store.nfs_enabled,
        sources=[d.path for d in loaded],
    )
