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

"""Box file loading for boxconf.

This module loads YAML box files into a ConfigStore with a layered approach:

  - Shared defaults (defaults/base.yaml, found by walking upward)
  - Box files, in the order given

Machine fields accumulate across files; single-value settings end up with
the last value registered. Relative paths are resolved against the box file
that declares them.

Public API:

- load_declarations: Load box files into a store
- LoadedDeclaration: Record of one applied file

Example:
    Basic usage:

        from pathlib import Path
        from boxconf.config import load_declarations
        from boxconf.host import ConfigRunner
        from boxconf.store import ConfigStore

        store = ConfigStore(ConfigRunner())
        loaded = load_declarations([Path("Boxfile.yaml")], store)
        print([d.path.name for d in loaded])

"""

from .loader import LoadedDeclaration, load_declarations

__all__ = ["LoadedDeclaration", "load_declarations"]
