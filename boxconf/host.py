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

"""Configuration-resolution host.

ConfigRunner plays the part of the external tool: box files register
directives while they load, and only once all of them are loaded does the
runner hand the target to every registered commit callback. This is the
window that lets a store register its callback on the first directive and
still see every later directive when the callback finally runs.
"""

from __future__ import annotations

from boxconf.logging import COMMIT, Logger, get_global_logger
from boxconf.targets.base import CommitCallback, MachineTarget

__all__ = ["ConfigRunner", "get_runner", "reset_runner"]


class ConfigRunner:
    """Collects commit callbacks and runs them once against a target.

    Example:
        ```python
        runner = ConfigRunner()
        store = ConfigStore(runner)
        # ... load box files ...
        machine = MachineConfig()
        runner.run(machine)
        ```

    """

    def __init__(self, logger: Logger | None = None) -> None:
        self._callbacks: list[CommitCallback] = []
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger if self._logger is not None else get_global_logger()

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for run()."""
        return len(self._callbacks)

    def register_commit_callback(self, callback: CommitCallback) -> None:
        self._callbacks.append(callback)
        self.logger.debug(COMMIT, f"Commit callback registered ({len(self._callbacks)} pending)")

    def run(self, target: MachineTarget) -> int:
        """Run every pending callback against target, in registration order.

        Callbacks are consumed; a second run() only sees callbacks registered
        after the first one. Exceptions from a callback propagate and leave
        the remaining callbacks pending.

        Returns:
            Number of callbacks that ran.
        """
        ran = 0
        while self._callbacks:
            callback = self._callbacks.pop(0)
            callback(target)
            ran += 1
        self.logger.verbose(COMMIT, f"Ran {ran} commit callback(s)")
        return ran


_global_runner: ConfigRunner | None = None


def get_runner() -> ConfigRunner:
    """Return the process-wide runner, creating it on first use."""
    global _global_runner
    if _global_runner is None:
        _global_runner = ConfigRunner()
    return _global_runner


def reset_runner() -> None:
    """Discard the process-wide runner and any pending callbacks."""
    global _global_runner
    _global_runner = None
