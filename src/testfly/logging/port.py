# Copyright 2026 Firefly Software Solutions Inc.
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
"""LoggingPort — how TestFly obtains and configures its loggers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from testfly.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Logging backend selected by the pytest plugin at configure time.

    The plugin configures one port per session from the ``testfly.logging``
    section and exposes it through the ``testfly_logging`` fixture.
    """

    def configure(self, config: Config) -> None:
        """Apply levels and output format from *config*."""
        ...

    def get_logger(self, name: str) -> Any:
        """Return a logger that accepts ``logger.info(event, **kwargs)``."""
        ...

    def set_level(self, name: str, level: str) -> None:
        """Set the level of one logger by name."""
        ...
