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
"""Tests for selector-based field injection."""

from typing import Annotated, ClassVar, Optional

import pytest

from testfly.kernel.exceptions import InjectionException
from testfly.resources import injector as injector_module
from testfly.resources.injector import (
    FieldInfo,
    FieldInjector,
    FieldMarker,
    HasMarker,
    HasMarkerAndMatchesType,
    MatchesType,
)


class DbName(FieldMarker):
    __slots__ = ()


class BrokerUrl(FieldMarker):
    __slots__ = ()


class Text(str):
    pass


class BaseSuite:
    inherited: Annotated[str, DbName]


class Suite(BaseSuite):
    by_class: Annotated[str, DbName]
    by_instance: Annotated[str, DbName()]
    other_marker: Annotated[str, BrokerUrl]
    wrong_type: Annotated[int, DbName]
    subclass_type: Annotated[Text, DbName]
    optional: Annotated[Optional[str], DbName]
    plain: str
    shared: ClassVar[Annotated[str, DbName]] = "class-level"


class TestFieldInfo:
    def test_has_marker_by_class_and_instance(self):
        assert FieldInfo("a", str, (DbName,)).has_marker(DbName)
        assert FieldInfo("a", str, (DbName(),)).has_marker(DbName)
        assert not FieldInfo("a", str, (BrokerUrl,)).has_marker(DbName)
        assert not FieldInfo("a", str).has_marker(DbName)


class TestPredicates:
    def test_has_marker(self):
        assert HasMarker(DbName)(FieldInfo("a", int, (DbName,)))
        assert not HasMarker(DbName)(FieldInfo("a", str))

    def test_matches_type_is_exact(self):
        assert MatchesType(str)(FieldInfo("a", str))
        assert not MatchesType(str)(FieldInfo("a", Text))
        assert not MatchesType(str)(FieldInfo("a", Optional[str]))

    def test_marker_and_type(self):
        predicate = HasMarkerAndMatchesType(DbName, str)
        assert predicate(FieldInfo("a", str, (DbName,)))
        assert not predicate(FieldInfo("a", int, (DbName,)))
        assert not predicate(FieldInfo("a", str, (BrokerUrl,)))

    def test_repr(self):
        assert repr(HasMarkerAndMatchesType(DbName, str)) == "HasMarkerAndMatchesType(DbName, str)"
        assert repr(DbName()) == "DbName()"


class TestFieldInjector:
    def test_is_test_injector(self):
        assert isinstance(FieldInjector(Suite()), injector_module.TestInjector)

    def test_collects_fields_across_hierarchy(self):
        fields = {f.name: f for f in FieldInjector(Suite()).fields()}
        assert fields["inherited"].owner is BaseSuite
        assert fields["by_class"].owner is Suite
        assert fields["by_class"].declared_type is str
        assert fields["plain"].metadata == ()

    def test_skips_class_vars(self):
        names = [f.name for f in FieldInjector(Suite()).fields()]
        assert "shared" not in names

    def test_injects_marked_string_fields_only(self):
        suite = Suite()
        injected = FieldInjector(suite).inject_into_fields("db-1", HasMarkerAndMatchesType(DbName, str))

        assert sorted(injected) == ["by_class", "by_instance", "inherited"]
        assert suite.by_class == "db-1"
        assert suite.by_instance == "db-1"
        assert suite.inherited == "db-1"
        for name in ("other_marker", "wrong_type", "subclass_type", "optional", "plain"):
            assert name not in vars(suite)
        assert Suite.shared == "class-level"

    def test_assigns_on_instance_not_class(self):
        first, second = Suite(), Suite()
        FieldInjector(first).inject_into_fields("x", HasMarker(BrokerUrl))
        assert first.other_marker == "x"
        assert not hasattr(second, "other_marker")

    def test_no_matches(self):
        assert FieldInjector(Suite()).inject_into_fields("x", lambda field: False) == []

    def test_unresolvable_unmarked_field_skipped(self):
        class PartlyTyped:
            amount: "Decimal"  # noqa: F821
            name: Annotated[str, DbName]

        suite = PartlyTyped()
        injected = FieldInjector(suite).inject_into_fields("db-1", HasMarkerAndMatchesType(DbName, str))

        assert injected == ["name"]
        assert [f.name for f in FieldInjector(suite).fields()] == ["name"]

    def test_unresolvable_marked_field_raises(self):
        class Broken:
            field: "Annotated[Missing, DbName]"  # noqa: F821

        with pytest.raises(InjectionException, match="Broken.field"):
            FieldInjector(Broken()).fields()

    def test_subclass_annotation_overrides_base(self):
        class Base:
            value: Annotated[str, DbName]

        class Child(Base):
            value: int

        fields = {f.name: f for f in FieldInjector(Child()).fields()}
        assert fields["value"].declared_type is int
        assert fields["value"].owner is Child
