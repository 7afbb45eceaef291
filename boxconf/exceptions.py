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

"""Exception hierarchy for boxconf.

This module defines a small exception hierarchy that allows library users
to distinguish between the different ways a configuration pass can fail:

- ConfigError: Declaration file errors (YAML parse, unknown keys, unknown
  directives on a target)
- InvalidArgument: A registration call received an argument it cannot accept
- CommitError: The one-shot commit pass was invoked more than once

All exceptions inherit from BoxconfError, allowing users to catch all
boxconf errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from boxconf.core import resolve_machine
        from boxconf.exceptions import ConfigError, InvalidArgument

        try:
            result = resolve_machine([Path("Boxfile.yaml")])
        except InvalidArgument as e:
            print(f"Bad argument: {e}")
        except ConfigError as e:
            print(f"Config error: {e}")
        ```

    Catching all boxconf errors:
        ```python
        from boxconf.exceptions import BoxconfError

        try:
            result = resolve_machine([Path("Boxfile.yaml")])
        except BoxconfError as e:
            print(f"boxconf error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "BoxconfError",
    "ConfigError",
    "InvalidArgument",
    "CommitError",
]


class BoxconfError(Exception):
    """Base exception for all boxconf errors.

    All boxconf-specific exceptions inherit from this class, allowing users
    to catch all boxconf errors with a single except clause if needed.
    """

    pass


class ConfigError(BoxconfError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, empty files, non-mapping documents)
    - Unknown top-level keys in a box file
    - Malformed directives (wrong forward_port arity, missing folder paths)
    - A target rejecting a directive it does not know

    Example:
        Catching configuration errors:
            ```python
            from boxconf.exceptions import ConfigError

            try:
                load_declarations([Path("Boxfile.yaml")], store)
            except ConfigError as e:
                print(f"Config error: {e}")
            ```
    """

    pass


class InvalidArgument(BoxconfError, ValueError):
    """Raised when a registration call receives an unusable argument.

    Currently raised by ConfigStore.add_cookbook_path() when the path is
    not an existing directory. Nothing is registered when this is raised.

    Subclasses ValueError so callers that only know the standard library
    can still catch it.
    """

    pass


class CommitError(BoxconfError):
    """Raised when the commit pass is invoked a second time.

    A store applies its directives exactly once; a host that runs the
    commit callback twice is misbehaving.
    """

    pass
