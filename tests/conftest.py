"""Pytest configuration and shared fixtures for pirsch-client tests."""

import pytest

from pirsch_client.config import ClientConfig, ServerClientConfig
from pirsch_client.testing import ACCESS_TOKEN, CLIENT_ID, CLIENT_SECRET, RecordingTransport


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear PIRSCH_* environment variables around each test.

    This prevents test pollution when testing configuration loading,
    including variables set by .env files during the test.
    """
    import os

    for key in list(os.environ.keys()):
        if key.startswith("PIRSCH_"):
            monkeypatch.delenv(key, raising=False)

    yield

    for key in list(os.environ.keys()):
        if key.startswith("PIRSCH_"):
            del os.environ[key]


@pytest.fixture
def transport():
    """In-memory transport recording every call."""
    return RecordingTransport()


@pytest.fixture
def oauth_config():
    return ClientConfig(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)


@pytest.fixture
def token_config():
    return ClientConfig(access_token=ACCESS_TOKEN)


@pytest.fixture
def server_config():
    return ServerClientConfig(hostname="example.com", client_id=CLIENT_ID, client_secret=CLIENT_SECRET)
