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

"""Deferred configuration store for boxconf.

Box files share one store per loading phase. Hosts that construct their own
store pass it around explicitly; code that cannot be handed a store (a box
file evaluated by a third-party loader, for instance) uses get_store().

Public API:

- ConfigStore: The aggregation engine
- get_store: Lazily create and return the process-wide store
- reset_store: Discard the process-wide store
- dispatch_field: Apply one field's values to a target

Example:
    Sharing a store between box files:

        from boxconf.store import get_store

        store = get_store()  # created on first call, reused afterwards
        store.set_box("lucid32")
        store.share_folder("app", "/srv/app", "./app")

"""

from __future__ import annotations

from typing import Any

from boxconf.host import get_runner
from boxconf.settings import Settings
from boxconf.targets.base import CommitHost

from .config_store import NFS_PLATFORM, ConfigStore
from .dispatch import dispatch_field

__all__ = ["ConfigStore", "NFS_PLATFORM", "dispatch_field", "get_store", "reset_store"]

_global_store: ConfigStore | None = None


def get_store(host: CommitHost | None = None, **kwargs: Any) -> ConfigStore:
    """Return the process-wide store, creating it on first call.

    Arguments only take effect on the call that creates the store; later
    calls return the existing instance unchanged.

    Args:
        host: Host to register the commit callback with. Defaults to the
            process-wide ConfigRunner.
        **kwargs: Passed to ConfigStore(). Unset platform, network IP and
            provisioner log level are filled in from Settings.from_env().

    """
    global _global_store
    if _global_store is None:
        settings = Settings.from_env()
        if settings.platform is not None:
            platform = settings.platform
            kwargs.setdefault("platform_source", lambda: platform)
        kwargs.setdefault("network_ip", settings.network_ip)
        kwargs.setdefault("provisioner_log_level", settings.provision_log_level)
        _global_store = ConfigStore(host if host is not None else get_runner(), **kwargs)
    return _global_store


def reset_store() -> None:
    """Discard the process-wide store so the next get_store() starts fresh."""
    global _global_store
    _global_store = None
