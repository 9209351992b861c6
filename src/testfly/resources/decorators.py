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
"""@test_resource decorator for declaring resources on test classes."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from testfly.resources.lifecycle import TestResourceLifecycleManager

T = TypeVar("T", bound=type)

_RESOURCES_MARKER = "__testfly_test_resources__"


@dataclass(frozen=True)
class TestResourceSpec:
    """One resource declaration.

    Specs with the same class and arguments denote the same shared resource.
    """

    __test__ = False

    resource_class: type[TestResourceLifecycleManager]
    init_args: tuple[tuple[str, str], ...] = ()
    restrict_to_annotated_class: bool = False

    @classmethod
    def of(
        cls,
        resource_class: type[TestResourceLifecycleManager],
        init_args: Mapping[str, str] | None = None,
        restrict_to_annotated_class: bool = False,
    ) -> TestResourceSpec:
        return cls(
            resource_class=resource_class,
            init_args=tuple(sorted((init_args or {}).items())),
            restrict_to_annotated_class=restrict_to_annotated_class,
        )

    @property
    def args(self) -> dict[str, str]:
        return dict(self.init_args)

    @property
    def name(self) -> str:
        return self.resource_class.__name__


def test_resource(
    resource_class: type[TestResourceLifecycleManager],
    *,
    init_args: Mapping[str, str] | None = None,
    restrict_to_annotated_class: bool = False,
) -> Callable[[T], T]:
    """Declare a test resource on a test class.

    Repeatable; declarations accumulate in order and are inherited.

    Usage::

        @test_resource(SharedResource, init_args={"resource.arg": "db-1"})
        class TestOrders:
            arg: Annotated[str, SharedResourceAnnotation]

    Args:
        resource_class: The ``TestResourceLifecycleManager`` to start.
        init_args: Arguments passed to the resource's ``init``.
        restrict_to_annotated_class: If ``True``, only this class (and its
            subclasses) get the resource injected; otherwise it is shared
            with every test class in the session.
    """
    if not (isinstance(resource_class, type) and issubclass(resource_class, TestResourceLifecycleManager)):
        raise TypeError(f"{resource_class!r} is not a TestResourceLifecycleManager subclass")

    spec = TestResourceSpec.of(resource_class, init_args, restrict_to_annotated_class)

    def decorator(cls: T) -> T:
        # Decorators apply bottom-up; prepend to keep source order.
        own = list(cls.__dict__.get(_RESOURCES_MARKER, ()))
        setattr(cls, _RESOURCES_MARKER, (spec, *own))
        return cls

    return decorator


test_resource.__test__ = False  # type: ignore[attr-defined]


def get_test_resources(cls: type) -> list[TestResourceSpec]:
    """Get the resource specs declared on a class and its bases, base-first."""
    specs: list[TestResourceSpec] = []
    for klass in reversed(cls.__mro__):
        for spec in klass.__dict__.get(_RESOURCES_MARKER, ()):
            if spec not in specs:
                specs.append(spec)
    return specs
