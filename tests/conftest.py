"""
Root conftest.py — Shared fixtures for all tests.
"""

import pytest

from dynamic_credentials.models import RequestDescriptor
from dynamic_credentials.parameters import MISSING, ItemParameterStore


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests with no network access")


# ---------------------------------------------------------------------------
# Parameter stores
# ---------------------------------------------------------------------------

@pytest.fixture
def store_factory():
    """Factory that builds an ItemParameterStore from node and per-item values."""

    def _make(node_parameters=None, *item_parameters):
        return ItemParameterStore(node_parameters or {}, list(item_parameters))

    return _make


class RaisingParameterStore(ItemParameterStore):
    """ItemParameterStore whose reads of selected names raise a given exception."""

    def __init__(self, failures, node_parameters=None):
        super().__init__(node_parameters)
        self.failures = dict(failures)

    def get_parameter(self, name, item_index=0, default=MISSING):
        if name in self.failures:
            raise self.failures[name]
        return super().get_parameter(name, item_index, default)


@pytest.fixture
def raising_store_factory():
    """Factory for a store that raises ``failures[name]`` when ``name`` is read."""

    def _make(failures, node_parameters=None):
        return RaisingParameterStore(failures, node_parameters)

    return _make


@pytest.fixture
def oauth2_store(store_factory):
    """Dynamic OAuth2 credentials for item 0."""
    return store_factory(
        {"useDynamicCredentials": True, "credentialType": "oauth2"},
        {"credentialPath": "tok-123"},
    )


# ---------------------------------------------------------------------------
# Request descriptors
# ---------------------------------------------------------------------------

@pytest.fixture
def descriptor():
    """A GET descriptor with one existing header and query parameter."""
    return RequestDescriptor(
        method="GET",
        uri="https://api.example.com/v1/items",
        headers={"Accept": "application/json"},
        query={"page": "1"},
    )


@pytest.fixture
def empty_descriptor():
    """A descriptor with no headers or query parameters."""
    return RequestDescriptor(method="GET", uri="https://api.example.com/v1/items")
