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
"""SharedResource — a test resource shared by every test class that declares it."""

from __future__ import annotations

import sys
from collections.abc import Mapping

from testfly.kernel.exceptions import MissingConfigurationException
from testfly.resources.injector import FieldMarker, HasMarkerAndMatchesType, TestInjector
from testfly.resources.lifecycle import TestResourceLifecycleManager

RESOURCE_ARG = "resource.arg"


class SharedResourceAnnotation(FieldMarker):
    """Marks a ``str`` test field to receive the shared resource argument.

    Usage::

        class TestOrders:
            arg: Annotated[str, SharedResourceAnnotation]
    """

    __slots__ = ()


class SharedResource(TestResourceLifecycleManager):
    """Captures ``resource.arg`` and hands it to marked test fields.

    Holds no real resource; ``start`` and ``stop`` only report on stderr.
    """

    def __init__(self) -> None:
        self.argument: str | None = None

    def init(self, init_args: Mapping[str, str]) -> None:
        argument = init_args.get(RESOURCE_ARG)
        if argument is None:
            raise MissingConfigurationException(RESOURCE_ARG, owner=type(self).__name__)
        self.argument = argument

    def start(self) -> dict[str, str]:
        print(f"{type(self).__name__} start with arg '{self.argument}'", file=sys.stderr)
        return {}

    def stop(self) -> None:
        print(f"{type(self).__name__} stop", file=sys.stderr)

    def inject(self, injector: TestInjector) -> None:
        injector.inject_into_fields(self.argument, HasMarkerAndMatchesType(SharedResourceAnnotation, str))
