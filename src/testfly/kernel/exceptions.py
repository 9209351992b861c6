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
"""Unified exception hierarchy for TestFly.

All library exceptions inherit from TestFlyException, so a test host can
catch one type to handle every resource failure, or catch specific
subclasses for targeted handling.

Categories:
- ConfigurationException: Missing or invalid resource configuration
- LifecycleStateException: Lifecycle calls made out of order
- InjectionException: Test fields that cannot be inspected or assigned
- ResourceStartException: A resource failed while starting
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class TestFlyException(Exception):
    """Base exception for all TestFly errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_MISSING").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    __test__ = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(TestFlyException):
    """Resource configuration is missing or invalid."""


class MissingConfigurationException(ConfigurationException, LookupError):
    """A required configuration key is absent or has no value.

    Fatal to test-suite startup: the host aborts the affected run.
    """

    def __init__(self, key: str, owner: str | None = None) -> None:
        self.key = key
        self.owner = owner
        message = f"Missing required configuration '{key}'"
        if owner:
            message = f"{message} for {owner}"
        super().__init__(message, code="CONFIG_MISSING", context={"key": key})


# =============================================================================
# Lifecycle Exceptions
# =============================================================================


class LifecycleStateException(TestFlyException):
    """A lifecycle method was called while the resource was in the wrong state."""

    def __init__(self, resource: str, state: str, expected: str) -> None:
        self.resource = resource
        self.state = state
        self.expected = expected
        super().__init__(
            f"Cannot transition {resource}: state is {state}, expected {expected}",
            code="LIFECYCLE_STATE",
            context={"resource": resource, "state": state, "expected": expected},
        )


class ResourceStartException(TestFlyException):
    """A test resource failed while starting.

    The test session cannot continue with this resource.
    """

    def __init__(self, resource: str, reason: str) -> None:
        self.resource = resource
        self.reason = reason
        super().__init__(
            f"Failed to start test resource '{resource}': {reason}",
            code="RESOURCE_START",
            context={"resource": resource},
        )


# =============================================================================
# Injection Exceptions
# =============================================================================


class InjectionException(TestFlyException):
    """Fields of a test instance could not be inspected or assigned."""
