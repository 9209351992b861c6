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
"""Test resource lifecycle contract.

Analogous to Spring's Lifecycle, scoped to a test session. The host
calls, per resource instance and never concurrently:

    init(init_args) -> start() -> inject(injector)* -> stop()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum, auto

from testfly.kernel.exceptions import LifecycleStateException
from testfly.resources.injector import TestInjector

logger = logging.getLogger(__name__)


class TestResourceLifecycleManager(ABC):
    """A pluggable external dependency started before and stopped after tests.

    Subclasses own one resource (a database, a broker, a fake server). They
    receive ``init_args`` from the ``@test_resource`` declaration, may
    contribute configuration overrides from ``start()``, and may push
    values into test fields from ``inject()``.
    """

    __test__ = False

    def init(self, init_args: Mapping[str, str]) -> None:
        """Receive the declared arguments before ``start()``."""

    @abstractmethod
    def start(self) -> dict[str, str]:
        """Acquire the resource.

        Returns:
            Dotted-key configuration overrides merged into the test config.
        """

    @abstractmethod
    def stop(self) -> None:
        """Release the resource."""

    def inject(self, injector: TestInjector) -> None:
        """Populate fields of a test instance through *injector*."""

    def order(self) -> int:
        """Start priority; lower values start first and stop last."""
        return 0


class ResourceState(Enum):
    """Lifecycle state of a managed test resource."""

    NEW = auto()
    INITIALIZED = auto()
    STARTED = auto()
    STOPPED = auto()


class ManagedResource:
    """Wraps one resource and rejects lifecycle calls made out of order."""

    def __init__(self, resource: TestResourceLifecycleManager) -> None:
        self.resource = resource
        self.state = ResourceState.NEW

    @property
    def name(self) -> str:
        return type(self.resource).__name__

    def init(self, init_args: Mapping[str, str]) -> None:
        self._require(ResourceState.NEW)
        self.resource.init(init_args)
        self.state = ResourceState.INITIALIZED

    def start(self) -> dict[str, str]:
        self._require(ResourceState.INITIALIZED)
        overrides = self.resource.start() or {}
        self.state = ResourceState.STARTED
        logger.debug("Started test resource %s (%d overrides)", self.name, len(overrides))
        return dict(overrides)

    def inject(self, injector: TestInjector) -> None:
        self._require(ResourceState.STARTED)
        self.resource.inject(injector)

    def stop(self) -> None:
        """Stop the resource if it was started; repeated calls are no-ops."""
        if self.state is ResourceState.STOPPED:
            return
        was_started = self.state is ResourceState.STARTED
        self.state = ResourceState.STOPPED
        if was_started:
            self.resource.stop()
            logger.debug("Stopped test resource %s", self.name)

    def _require(self, expected: ResourceState) -> None:
        if self.state is not expected:
            raise LifecycleStateException(self.name, self.state.name, expected.name)

    def __repr__(self) -> str:
        return f"ManagedResource({self.name}, state={self.state.name})"
