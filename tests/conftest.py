"""
Module: conftest.py
Description: Shared pytest fixtures for gmail-subscriber tests.

Provides test settings, sample Pub/Sub envelopes and fake Firebase
collaborators so that no test talks to Firestore or FCM.
"""

import base64
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from gmail_subscriber.config.settings import Settings
from gmail_subscriber.delivery.fcm import FcmDeliveryClient
from gmail_subscriber.delivery.gateway import DeliveryGateway
from gmail_subscriber.handlers.dependencies import get_delivery_client, get_gateway, get_token_store
from gmail_subscriber.main import app
from gmail_subscriber.models.notification import FanoutOutcome
from gmail_subscriber.storage.firestore import TokenStore


def encode(text: str) -> str:
    """Base64 encode text the way Pub/Sub does."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading for predictable tests.
    """
    return Settings(
        _env_file=None,
        app_version="0.1.0-test",
        stage="test",
        log_level="DEBUG",
        fcm_test_token=None
    )


@pytest.fixture
def gmail_notification():
    """Decoded payload of a Gmail watch notification."""
    return {"emailAddress": "tenders@example.com", "historyId": "42"}


@pytest.fixture
def sample_envelope(gmail_notification):
    """
    Provide a complete Pub/Sub push envelope.

    Mirrors what a push subscription posts for a Gmail watch.
    """
    return {
        "message": {
            "data": encode(json.dumps(gmail_notification)),
            "messageId": "2070443601311540",
            "publishTime": "2024-01-15T10:30:00.123Z",
            "attributes": {"origin": "gmail"}
        },
        "subscription": "projects/tender-extractor/subscriptions/gmail-push"
    }


@pytest.fixture
def fake_notifier():
    """FCM client double whose sends succeed."""
    notifier = MagicMock(spec=FcmDeliveryClient)
    notifier.send = AsyncMock(
        return_value=FanoutOutcome(target="token", success_count=1, message_ids=["projects/p/messages/1"])
    )
    notifier.send_multicast = AsyncMock(
        return_value=FanoutOutcome(target="multicast", success_count=2, message_ids=["m1", "m2"])
    )
    return notifier


@pytest.fixture
def fake_token_store():
    """Token store double holding two registered devices."""
    store = MagicMock(spec=TokenStore)
    store.list_tokens = AsyncMock(return_value=["token-device-a", "token-device-b"])
    store.upsert_token = AsyncMock(return_value=None)
    return store


@pytest.fixture
def gateway(fake_notifier, fake_token_store):
    """DeliveryGateway wired to fake collaborators, broadcasting to stored tokens."""
    return DeliveryGateway(notifier=fake_notifier, recipients=fake_token_store)


@pytest.fixture
def test_client(fake_notifier, fake_token_store):
    """
    Create FastAPI test client with Firebase collaborators replaced.

    The client is not used as a context manager, so the startup hook
    (Firebase initialization) does not run.
    """
    app.dependency_overrides[get_delivery_client] = lambda: fake_notifier
    app.dependency_overrides[get_token_store] = lambda: fake_token_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


@pytest.fixture
def override_gateway():
    """Install a specific DeliveryGateway for the duration of a test."""
    def _override(gw: DeliveryGateway) -> None:
        app.dependency_overrides[get_gateway] = lambda: gw
    yield _override
    app.dependency_overrides.pop(get_gateway, None)
