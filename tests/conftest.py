"""
Shared fixtures: settings, a fake search gateway and an app wired to it.
"""
import random
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from config import ThriftSettings
from result_cache import ResultCache
from services.app_factory import create_app
from services.app_state import AppState
from services.ebay_auth import EbayTokenProvider
from services.fashion_filter import FashionClassifier
from tests.factories import FakeGateway


@pytest.fixture
def settings():
    return ThriftSettings(static_token="static-token", app_id="app-id", use_categories=False)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def app_state(settings, fake_gateway):
    http_client = MagicMock()
    return AppState(
        settings=settings,
        http_client=http_client,
        token_provider=EbayTokenProvider(http_client, settings.token_url, static_token="static-token"),
        cache=ResultCache(),
        gateway=fake_gateway,
        classifier=FashionClassifier(use_categories=False),
        rng=random.Random(1234),
    )


@pytest.fixture
def client(app_state):
    app = create_app(app_state)
    return TestClient(app, raise_server_exceptions=False)
