"""
Shared fixtures for Fakepoint tests.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from fakepoint.registry import EndpointRegistry
from fakepoint.server import FakepointServer, ServerConfig


@pytest.fixture
def clock():
    """Clock that advances one second on every call."""
    start = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def registry(clock):
    """Empty registry with a deterministic clock."""
    return EndpointRegistry(clock=clock)


@pytest.fixture
def server(registry):
    """Server wired to the test registry."""
    return FakepointServer(config=ServerConfig(), registry=registry)


@pytest.fixture
def client(server):
    """HTTP test client for the server app."""
    return TestClient(server.app)


@pytest.fixture
def users_request():
    """Create request for a GET /users endpoint."""
    return {
        'name': 'Get Users',
        'method': 'GET',
        'path': '/users',
        'response': {
            'status': 200,
            'body': {'id': 1, 'name': 'John'}
        }
    }
