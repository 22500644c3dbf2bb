"""
Shared pytest fixtures.

The client state machines are exercised against a MagicMock shaped like
SustainaViewClient, so no test opens a socket. Server routes run through
FastAPI's TestClient with auth and services replaced by dependency overrides.
"""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from beanie import PydanticObjectId

from sustainaview.client.api import SustainaViewClient
from sustainaview.client.config import ClientSettings


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(
        server_url="http://testserver",
        request_timeout=1,
        listing_timeout=1,
        generation_timeout=1,
    )


@pytest.fixture
def api(client_settings):
    """A SustainaViewClient stand-in; every coroutine method is an AsyncMock."""
    fake = MagicMock(spec=SustainaViewClient)
    fake.settings = client_settings
    return fake


@pytest.fixture
def user():
    return SimpleNamespace(id=PydanticObjectId(), is_active=True)
