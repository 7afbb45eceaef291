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

"""Field-to-target dispatch.

Shared by both commit passes. For a field with values v1..vn the target is
asked once whether it has a dedicated setter:

- yes: invoke_setter(name, v) for each value, in order
- no: invoke_generic(name, *components) for each value, in order, where a
  list or tuple value is spread into positional arguments and anything
  else is passed as the only argument
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from boxconf.logging import COMMIT, Logger, format_assignment, format_call
from boxconf.targets.base import FieldTarget


def value_components(value: Any) -> tuple[Any, ...]:
    """Split a field value into positional arguments for a generic call."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def dispatch_field(
    target: FieldTarget,
    name: str,
    values: Iterable[Any],
    logger: Logger | None = None,
) -> int:
    """Apply every value of one field to target.

    Args:
        target: Object implementing the FieldTarget protocol.
        name: Field name.
        values: Values in registration order.
        logger: Optional logger for debug output.

    Returns:
        Number of target invocations made.

    Raises:
        Whatever the target raises; failures are not swallowed.

    """
    count = 0
    if target.has_setter(name):
        for value in values:
            if logger is not None:
                logger.debug(COMMIT, format_assignment(name, value))
            target.invoke_setter(name, value)
            count += 1
    else:
        for value in values:
            args = value_components(value)
            if logger is not None:
                logger.debug(COMMIT, format_call(name, args))
            target.invoke_generic(name, *args)
            count += 1
    return count
