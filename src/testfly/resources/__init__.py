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
"""TestFly Resources — test resource lifecycle, registration, and field injection."""

from testfly.resources.decorators import TestResourceSpec, get_test_resources, test_resource
from testfly.resources.injector import (
    FieldInfo,
    FieldInjector,
    FieldMarker,
    HasMarker,
    HasMarkerAndMatchesType,
    MatchesType,
    TestInjector,
)
from testfly.resources.lifecycle import ManagedResource, ResourceState, TestResourceLifecycleManager
from testfly.resources.manager import TestResourceManager
from testfly.resources.shared import SharedResource, SharedResourceAnnotation

__all__ = [
    "FieldInfo",
    "FieldInjector",
    "FieldMarker",
    "HasMarker",
    "HasMarkerAndMatchesType",
    "ManagedResource",
    "MatchesType",
    "ResourceState",
    "SharedResource",
    "SharedResourceAnnotation",
    "TestInjector",
    "TestResourceLifecycleManager",
    "TestResourceManager",
    "TestResourceSpec",
    "get_test_resources",
    "test_resource",
]
