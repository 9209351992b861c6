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
"""TestResourceManager — starts, injects, and stops declared test resources."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Any

from testfly.core.config import Config
from testfly.kernel.exceptions import ResourceStartException, TestFlyException
from testfly.resources.decorators import TestResourceSpec
from testfly.resources.injector import FieldInjector
from testfly.resources.lifecycle import ManagedResource

logger = logging.getLogger(__name__)


class TestResourceManager:
    """Owns the test resources of one session.

    Each distinct ``TestResourceSpec`` is instantiated, initialized and
    started once; later requests for the same spec reuse it. Resources
    stop in reverse start order.
    """

    __test__ = False

    def __init__(self, config: Config | None = None) -> None:
        self._config = config if config is not None else Config()
        self._resources: dict[TestResourceSpec, ManagedResource] = {}
        self._started: list[TestResourceSpec] = []

    @property
    def config(self) -> Config:
        """Configuration with the overrides of all started resources merged in."""
        return self._config

    @property
    def started_specs(self) -> list[TestResourceSpec]:
        return list(self._started)

    def resource_for(self, spec: TestResourceSpec) -> Any:
        """Return the resource instance started for *spec*."""
        return self._resources[spec].resource

    def start(self, specs: Iterable[TestResourceSpec]) -> None:
        """Initialize and start every spec not started yet.

        ``init`` failures propagate unchanged. If a ``start`` fails, the
        resources started by this call are stopped and a
        ``ResourceStartException`` is raised.
        """
        pending: list[tuple[TestResourceSpec, ManagedResource]] = []
        for spec in specs:
            if spec in self._resources or any(spec == p for p, _ in pending):
                continue
            managed = ManagedResource(spec.resource_class())
            managed.init(spec.args)
            pending.append((spec, managed))

        # Stable sort: equal orders keep declaration order.
        pending.sort(key=lambda item: item[1].resource.order())

        started_now: list[TestResourceSpec] = []
        for spec, managed in pending:
            self._resources[spec] = managed
            try:
                overrides = managed.start()
            except TestFlyException:
                self._rollback(started_now, failed=spec)
                raise
            except Exception as exc:
                self._rollback(started_now, failed=spec)
                raise ResourceStartException(spec.name, str(exc)) from exc
            self._started.append(spec)
            started_now.append(spec)
            if overrides:
                self._config.merge_properties(overrides)
            logger.info("Test resource %s started", spec.name)

    def inject(self, test_instance: Any, specs: Iterable[TestResourceSpec] | None = None) -> None:
        """Let started resources populate fields of *test_instance*."""
        if specs is None:
            selected = list(self._started)
        else:
            wanted = set(specs)
            selected = [s for s in self._started if s in wanted]
        injector = FieldInjector(test_instance)
        for spec in selected:
            self._resources[spec].inject(injector)

    def stop(self) -> None:
        """Stop all started resources in reverse order.

        Best-effort: a failing ``stop`` is logged and the remaining
        resources are still stopped.
        """
        while self._started:
            spec = self._started.pop()
            managed = self._resources.pop(spec)
            try:
                managed.stop()
            except Exception:
                logger.exception("Failed to stop test resource %s", spec.name)
        self._resources.clear()

    def _rollback(self, started_now: list[TestResourceSpec], failed: TestResourceSpec) -> None:
        self._resources.pop(failed, None)
        for spec in reversed(started_now):
            self._started.remove(spec)
            managed = self._resources.pop(spec)
            try:
                managed.stop()
            except Exception:
                logger.exception("Failed to stop test resource %s after start failure", spec.name)

    def __enter__(self) -> TestResourceManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
