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

"""Environment-driven settings for boxconf.

Loads BOXCONF_* environment variables (optionally from a .env file) that
tune how a store behaves without touching any box file:

- BOXCONF_PLATFORM: platform identifier used instead of sys.platform when
  deciding whether shared folders use NFS
- BOXCONF_NETWORK_IP: host-only IP registered when NFS is turned on
- BOXCONF_PROVISION_LOG_LEVEL: log level applied to the provisioner after
  activation ("none" disables it)
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import find_dotenv, load_dotenv

DEFAULT_NETWORK_IP = "33.33.33.10"
DEFAULT_PROVISION_LOG_LEVEL = "debug"


@dataclass(frozen=True)
class Settings:
    """Resolved environment settings.

    Attributes:
        platform: Platform identifier override, or None to use sys.platform.
        network_ip: Host-only IP assigned when NFS sharing is enabled.
        provision_log_level: Provisioner log level, or None to leave unset.
    """

    platform: str | None = None
    network_ip: str = DEFAULT_NETWORK_IP
    provision_log_level: str | None = DEFAULT_PROVISION_LOG_LEVEL

    @classmethod
    def from_env(cls, env_prefix: str = "BOXCONF_", load_env_file: bool = True) -> Settings:
        """Build settings from the environment.

        Args:
            env_prefix: Prefix used for environment variables.
            load_env_file: If True, read a .env file first. Variables that
                are already set in the environment take precedence.

        Returns:
            Settings with unset variables falling back to defaults.
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        def _env(key: str) -> str | None:
            value = os.getenv(f"{env_prefix}{key}")
            if value is None or not value.strip():
                return None
            return value.strip()

        log_level = _env("PROVISION_LOG_LEVEL")
        if log_level is None:
            log_level = DEFAULT_PROVISION_LOG_LEVEL
        elif log_level.lower() == "none":
            log_level = None

        return cls(
            platform=_env("PLATFORM"),
            network_ip=_env("NETWORK_IP") or DEFAULT_NETWORK_IP,
            provision_log_level=log_level,
        )
