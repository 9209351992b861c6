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
"""StructlogAdapter — default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from testfly.core.config import Config


class StructlogAdapter:
    """Default logging adapter backed by structlog.

    Reads ``testfly.logging.level.root``, per-module levels under
    ``testfly.logging.level`` and ``testfly.logging.format`` (``console`` or
    ``json``). Log records go to stderr so they do not interleave with test
    output captured on stdout.
    """

    def __init__(self) -> None:
        self._root_level: str = "WARNING"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Configure structlog from the logging section of config."""
        level_section = dict(config.get_section("testfly.logging.level"))
        self._root_level = str(level_section.pop("root", "WARNING")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("testfly.logging.format", "console")).lower()

        self._setup_structlog()
        self._apply_levels()

    def get_logger(self, name: str) -> Any:
        """Get a structlog BoundLogger by name."""
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        log_level = getattr(logging, level.upper(), logging.INFO)
        logging.getLogger(name).setLevel(log_level)

    def _setup_structlog(self) -> None:
        """Configure structlog and route the ``testfly`` stdlib loggers through it.

        Records from ``logging.getLogger(__name__)`` in library modules pass
        through the same processor chain as structlog loggers, so the
        ``console``/``json`` format applies to every line the library emits.
        """
        log_level = getattr(logging, self._root_level.upper(), logging.WARNING)

        shared: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

        renderer: list[structlog.types.Processor]
        if self._format == "json":
            renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            renderer = [structlog.dev.ConsoleRenderer(colors=False)]

        structlog.configure(
            processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
        )

        # Only the library's own logger tree; the host's root logger is left alone.
        root = logging.getLogger("testfly")
        handler = next((h for h in root.handlers if getattr(h, "_testfly_handler", False)), None)
        if handler is None:
            handler = logging.StreamHandler(sys.stderr)
            handler._testfly_handler = True  # type: ignore[attr-defined]
            root.addHandler(handler)
        handler.setFormatter(formatter)
        root.setLevel(log_level)

    def _apply_levels(self) -> None:
        """Apply per-module log levels."""
        for module, level in self._module_levels.items():
            self.set_level(module, level)
