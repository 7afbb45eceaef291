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

"""Diagnostic output for boxconf.

The store, the loader and the commit runner report what they register and
apply through a small Logger interface. Every message is tagged with the
phase it belongs to:

- STORE: a directive registered while box files load
- CONFIG: box file discovery and loading
- COMMIT: the one-shot apply pass against a machine

Directives are described in one shared form in both STORE and COMMIT
messages: ``name = value`` for a setter field and ``name(arg, ...)`` for a
generic directive. A debug trace therefore shows every directive once when
it is registered and once when it is applied.

ConsoleLogger writes to stderr unless given a stream, so log lines never mix
with a resolved configuration printed on stdout.

Example:
    Trace a resolve on stderr:
        ```python
        from boxconf.logging import get_logger, set_global_logger

        set_global_logger(get_logger(debug=True))
        ```

Note:
    The global logger is silent until configured. The CLI installs a
    ConsoleLogger for each command.
"""

from __future__ import annotations

from collections.abc import Sequence
import sys
from typing import Any, Protocol, TextIO

STORE = "STORE"
CONFIG = "CONFIG"
COMMIT = "COMMIT"


def format_assignment(name: str, value: Any) -> str:
    """Render a setter directive, e.g. ``box = 'lucid32'``."""
    return f"{name} = {value!r}"


def format_call(name: str, args: Sequence[Any]) -> str:
    """Render a generic directive, e.g. ``forward_port('web', 80, 8080)``."""
    return f"{name}({', '.join(repr(a) for a in args)})"


class Logger(Protocol):
    """Protocol for logger implementations."""

    def verbose(self, phase: str, message: str) -> None:
        """Report progress within a phase."""
        ...

    def debug(self, phase: str, message: str) -> None:
        """Report a single registered or applied directive."""
        ...


class ConsoleLogger:
    """Logger that writes ``[PHASE] message`` lines to a text stream.

    Args:
        verbose: Show phase progress.
        debug: Show every directive (implies verbose).
        stream: Destination. sys.stderr at write time when None, so a
            redirected stderr is honoured.
    """

    def __init__(
        self, verbose: bool = False, debug: bool = False, stream: TextIO | None = None
    ) -> None:
        self._verbose = verbose or debug
        self._debug = debug
        self._stream = stream

    def _write(self, phase: str, message: str) -> None:
        print(f"[{phase}] {message}", file=self._stream or sys.stderr)

    def verbose(self, phase: str, message: str) -> None:
        if self._verbose:
            self._write(phase, message)

    def debug(self, phase: str, message: str) -> None:
        if self._debug:
            self._write(phase, message)


class SilentLogger:
    """Logger that discards everything."""

    def verbose(self, phase: str, message: str) -> None:
        pass

    def debug(self, phase: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False, stream: TextIO | None = None) -> Logger:
    """Build a ConsoleLogger, or a SilentLogger when both flags are off."""
    if not (verbose or debug):
        return SilentLogger()
    return ConsoleLogger(verbose=verbose, debug=debug, stream=stream)


def get_global_logger() -> Logger:
    """Logger used by stores, loaders and runners created without one."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Replace the logger returned by get_global_logger()."""
    global _global_logger
    _global_logger = logger
