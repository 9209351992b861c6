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
"""Tests for the test resource lifecycle contract and ordering guard."""

import pytest

from testfly.kernel.exceptions import LifecycleStateException
from testfly.resources.lifecycle import ManagedResource, ResourceState, TestResourceLifecycleManager


class RecordingResource(TestResourceLifecycleManager):
    def __init__(self) -> None:
        self.calls: list[str] = []

    def init(self, init_args):
        self.calls.append("init")

    def start(self):
        self.calls.append("start")
        return {"db.url": "mem://"}

    def stop(self):
        self.calls.append("stop")

    def inject(self, injector):
        self.calls.append("inject")


class MinimalResource(TestResourceLifecycleManager):
    def start(self):
        return {}

    def stop(self):
        pass


class TestContractDefaults:
    def test_start_and_stop_are_abstract(self):
        with pytest.raises(TypeError):
            TestResourceLifecycleManager()  # type: ignore[abstract]

    def test_defaults(self):
        resource = MinimalResource()
        assert resource.init({"any": "thing"}) is None
        assert resource.inject(object()) is None
        assert resource.order() == 0


class TestManagedResource:
    def test_success_path(self):
        resource = RecordingResource()
        managed = ManagedResource(resource)
        assert managed.state is ResourceState.NEW

        managed.init({})
        assert managed.state is ResourceState.INITIALIZED
        assert managed.start() == {"db.url": "mem://"}
        assert managed.state is ResourceState.STARTED
        managed.inject(object())
        managed.inject(object())
        managed.stop()

        assert managed.state is ResourceState.STOPPED
        assert resource.calls == ["init", "start", "inject", "inject", "stop"]

    def test_start_before_init_rejected(self):
        managed = ManagedResource(RecordingResource())
        with pytest.raises(LifecycleStateException, match="expected INITIALIZED"):
            managed.start()

    def test_double_init_rejected(self):
        managed = ManagedResource(RecordingResource())
        managed.init({})
        with pytest.raises(LifecycleStateException):
            managed.init({})

    def test_inject_before_start_rejected(self):
        managed = ManagedResource(RecordingResource())
        managed.init({})
        with pytest.raises(LifecycleStateException, match="expected STARTED"):
            managed.inject(object())

    def test_inject_after_stop_rejected(self):
        managed = ManagedResource(RecordingResource())
        managed.init({})
        managed.start()
        managed.stop()
        with pytest.raises(LifecycleStateException, match="state is STOPPED"):
            managed.inject(object())

    def test_stop_is_idempotent(self):
        resource = RecordingResource()
        managed = ManagedResource(resource)
        managed.init({})
        managed.start()
        managed.stop()
        managed.stop()
        assert resource.calls.count("stop") == 1

    def test_stop_without_start_skips_resource(self):
        resource = RecordingResource()
        managed = ManagedResource(resource)
        managed.init({})
        managed.stop()
        assert managed.state is ResourceState.STOPPED
        assert resource.calls == ["init"]

    def test_none_from_start_treated_as_empty(self):
        class NoneResource(MinimalResource):
            def start(self):
                return None

        managed = ManagedResource(NoneResource())
        managed.init({})
        assert managed.start() == {}

    def test_name_and_repr(self):
        managed = ManagedResource(RecordingResource())
        assert managed.name == "RecordingResource"
        assert repr(managed) == "ManagedResource(RecordingResource, state=NEW)"
