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
"""Selector-based field injection into test instances.

Test classes declare injectable fields with ``typing.Annotated``::

    class TestOrders:
        db_name: Annotated[str, SharedResourceAnnotation]

A resource asks a ``TestInjector`` to assign a value to every field that a
predicate accepts. The predicate sees each field as a ``FieldInfo``: its
name, its declared type with ``Annotated`` stripped, and the ``Annotated``
metadata.
"""

from __future__ import annotations

import inspect
import logging
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Protocol, get_args, get_origin, runtime_checkable

from testfly.kernel.exceptions import InjectionException

logger = logging.getLogger(__name__)


class FieldMarker:
    """Base class for zero-data marker types applied to test fields.

    A marker may appear in ``Annotated`` metadata as the class itself or as
    an instance; both select the field.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


@dataclass(frozen=True)
class FieldInfo:
    """A declared field of a test class, as seen by injection predicates."""

    name: str
    declared_type: Any
    metadata: tuple[Any, ...] = ()
    owner: type | None = None

    def has_marker(self, marker: type) -> bool:
        return any(item is marker or isinstance(item, marker) for item in self.metadata)


FieldPredicate = Callable[[FieldInfo], bool]


class HasMarker:
    """Selects fields carrying the given marker."""

    __slots__ = ("marker",)

    def __init__(self, marker: type) -> None:
        self.marker = marker

    def __call__(self, field: FieldInfo) -> bool:
        return field.has_marker(self.marker)

    def __repr__(self) -> str:
        return f"HasMarker({self.marker.__name__})"


class MatchesType:
    """Selects fields whose declared type is exactly ``expected``."""

    __slots__ = ("expected",)

    def __init__(self, expected: type) -> None:
        self.expected = expected

    def __call__(self, field: FieldInfo) -> bool:
        return field.declared_type is self.expected

    def __repr__(self) -> str:
        return f"MatchesType({self.expected.__name__})"


class HasMarkerAndMatchesType:
    """Selects fields carrying ``marker`` and declared exactly as ``expected``."""

    __slots__ = ("marker", "expected")

    def __init__(self, marker: type, expected: type) -> None:
        self.marker = marker
        self.expected = expected

    def __call__(self, field: FieldInfo) -> bool:
        return field.has_marker(self.marker) and field.declared_type is self.expected

    def __repr__(self) -> str:
        return f"HasMarkerAndMatchesType({self.marker.__name__}, {self.expected.__name__})"


@runtime_checkable
class TestInjector(Protocol):
    """Host capability that assigns a value into selected test fields."""

    def inject_into_fields(self, value: Any, predicate: FieldPredicate) -> Any: ...


class FieldInjector:
    """Default ``TestInjector`` that assigns fields on one test instance.

    Fields are discovered from the annotations of each class in the MRO,
    resolved field by field. Unresolvable fields without a marker and
    ``ClassVar`` annotations are never considered.
    """

    __test__ = False

    def __init__(self, test_instance: Any) -> None:
        self._instance = test_instance
        self._fields: list[FieldInfo] | None = None

    @property
    def test_instance(self) -> Any:
        return self._instance

    def fields(self) -> list[FieldInfo]:
        """Return the annotated fields of the test instance's class."""
        if self._fields is None:
            self._fields = _collect_fields(type(self._instance))
        return list(self._fields)

    def inject_into_fields(self, value: Any, predicate: FieldPredicate) -> list[str]:
        """Assign *value* to every field accepted by *predicate*.

        Returns:
            Names of the fields that were assigned, in declaration order.
        """
        injected: list[str] = []
        for field in self.fields():
            if predicate(field):
                setattr(self._instance, field.name, value)
                injected.append(field.name)
        return injected


def _collect_fields(cls: type) -> list[FieldInfo]:
    """Resolve the annotated fields of *cls*, one field at a time.

    A field whose annotation cannot be evaluated is skipped, unless its
    annotation text names a ``FieldMarker`` subclass: a marked field that
    silently misses injection raises ``InjectionException`` instead.
    """
    collected: dict[str, FieldInfo] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        try:
            annotations = inspect.get_annotations(klass)
        except Exception:
            logger.debug("Skipping unreadable annotations of %s", klass.__qualname__, exc_info=True)
            continue

        module = sys.modules.get(klass.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        localns = dict(vars(klass))
        for name, hint in annotations.items():
            try:
                if isinstance(hint, str):
                    hint = eval(hint, globalns, localns)  # noqa: S307
            except Exception as exc:
                if _names_marker(str(hint)):
                    raise InjectionException(
                        f"Cannot resolve marked field {cls.__qualname__}.{name}: {exc}",
                        code="INJECTION_ANNOTATIONS",
                        context={"class": cls.__qualname__, "field": name},
                    ) from exc
                logger.debug("Skipping unresolvable field %s.%s: %s", klass.__qualname__, name, exc)
                collected.pop(name, None)
                continue

            declared, metadata = hint, ()
            if get_origin(hint) is Annotated:
                declared, *extras = get_args(hint)
                metadata = tuple(extras)
            if declared is ClassVar or get_origin(declared) is ClassVar:
                collected.pop(name, None)
                continue
            collected[name] = FieldInfo(name=name, declared_type=declared, metadata=metadata, owner=klass)
    return list(collected.values())


def _names_marker(annotation: str) -> bool:
    pending = list(FieldMarker.__subclasses__())
    while pending:
        marker = pending.pop()
        if re.search(rf"\b{re.escape(marker.__name__)}\b", annotation):
            return True
        pending.extend(marker.__subclasses__())
    return False
