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

"""Commit targets for boxconf.

Public API:

- FieldTarget, MachineTarget, ProvisionerTarget, CommitHost: protocols the
  store relies on during the commit pass
- MachineConfig, ChefSoloProvisioner: in-memory recording implementations

Example:
    Applying a store to a recording target:

        from boxconf.host import ConfigRunner
        from boxconf.store import ConfigStore
        from boxconf.targets import MachineConfig

        runner = ConfigRunner()
        store = ConfigStore(runner)
        store.set_box("lucid32")
        machine = MachineConfig()
        runner.run(machine)
        print(machine.to_dict())  # {'box': 'lucid32', 'box_url': ''}

"""

from .base import CommitHost, FieldTarget, MachineTarget, ProvisionerTarget
from .machine import ChefSoloProvisioner, MachineConfig

__all__ = [
    "CommitHost",
    "FieldTarget",
    "MachineTarget",
    "ProvisionerTarget",
    "ChefSoloProvisioner",
    "MachineConfig",
]
