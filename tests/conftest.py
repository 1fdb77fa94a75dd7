"""
Pytest configuration and fixtures for metamorphosis tests.
"""

import pytest

from metamorphosis.schema import SchemaRegistry, SchemaValidator


@pytest.fixture
def registry() -> SchemaRegistry:
    """Fresh registry per test; schemas never leak between tests."""
    return SchemaRegistry()


@pytest.fixture
def validator(registry: SchemaRegistry) -> SchemaValidator:
    return SchemaValidator(registry)


@pytest.fixture
def user_schema(registry: SchemaRegistry) -> str:
    """Register the basic user schema and return its id."""
    return registry.register("user", {"user_id": int, "name": str, "email": str})
