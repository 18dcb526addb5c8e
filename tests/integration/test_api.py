"""
Module: test_api.py
Description: Integration tests for the gmail-subscriber API.

Exercises the assembled FastAPI application: registering devices, then
receiving Pub/Sub pushes that fan out to them. Firebase is replaced by
an in-memory token store and a recording notifier.
"""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from gmail_subscriber.delivery.gateway import DeliveryGateway
from gmail_subscriber.handlers.dependencies import get_delivery_client, get_gateway, get_token_store
from gmail_subscriber.config.settings import settings
from gmail_subscriber.main import app
from gmail_subscriber.models.notification import FanoutOutcome, NotificationPayload
from tests.conftest import encode


class InMemoryTokenStore:
    """Dict-backed stand-in for the Firestore token store."""

    def __init__(self):
        self.documents: Dict[str, Dict[str, Optional[str]]] = {}

    async def upsert_token(self, token: str, uid: Optional[str] = None) -> None:
        self.documents[token] = {"uid": uid}

    async def list_tokens(self) -> List[str]:
        return list(self.documents)


class RecordingNotifier:
    """Notifier that records every send."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, payload: NotificationPayload, token: str) -> FanoutOutcome:
        self.sent.append((payload, [token]))
        if self.fail:
            raise ConnectionError("fcm unreachable")
        return FanoutOutcome(target="token", success_count=1, message_ids=["m"])

    async def send_multicast(self, payload: NotificationPayload, tokens: List[str]) -> FanoutOutcome:
        self.sent.append((payload, list(tokens)))
        if self.fail:
            raise ConnectionError("fcm unreachable")
        return FanoutOutcome(target="multicast", success_count=len(tokens))


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def api_client(token_store, notifier):
    """Create FastAPI test client with in-memory collaborators."""
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_delivery_client] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


class TestApiIntegration:
    """Integration tests for API endpoints."""

    def test_health_endpoint(self, api_client):
        response = api_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "gmail-subscriber is healthy" in data["message"]
        assert "version" in data
        assert "environment" in data

    def test_liveness_endpoint(self, api_client):
        response = api_client.get("/")

        assert response.status_code == 200
        assert response.text == "ok"

    def test_register_then_push(self, api_client, token_store, notifier):
        """Test registered devices receive the Gmail notification."""
        assert api_client.post("/register-token", json={"token": "device-1", "uid": "u1"}).status_code == 200
        assert api_client.post("/register-token", json={"token": "device-2"}).status_code == 200
        assert api_client.post("/register-token", json={"token": "device-1", "uid": "u3"}).status_code == 200

        assert token_store.documents == {"device-1": {"uid": "u3"}, "device-2": {"uid": None}}

        response = api_client.post("/", json={
            "message": {
                "data": encode('{"emailAddress":"tenders@example.com","historyId":"987"}'),
                "messageId": "1",
                "publishTime": "2024-01-15T10:30:00Z"
            },
            "subscription": "projects/p/subscriptions/gmail-push"
        })

        assert response.status_code == 204
        assert len(notifier.sent) == 1
        payload, tokens = notifier.sent[0]
        assert sorted(tokens) == ["device-1", "device-2"]
        assert payload.data == {"source": "gmail-subscriber", "historyId": "987"}

    def test_push_without_registered_devices(self, api_client, notifier, sample_envelope):
        response = api_client.post("/", json=sample_envelope)

        assert response.status_code == 204
        assert notifier.sent == []

    def test_push_when_fcm_unreachable(self, api_client, token_store, sample_envelope):
        """Test delivery is acknowledged even when every send fails."""
        failing = RecordingNotifier(fail=True)
        app.dependency_overrides[get_delivery_client] = lambda: failing
        api_client.post("/register-token", json={"token": "device-1"})

        response = api_client.post("/", json=sample_envelope)

        assert response.status_code == 204
        assert len(failing.sent) == 1

    def test_push_with_fixed_recipient(self, api_client, token_store, notifier, sample_envelope):
        api_client.post("/register-token", json={"token": "device-1"})
        app.dependency_overrides[get_gateway] = lambda: DeliveryGateway(
            notifier=notifier,
            recipients=token_store,
            fixed_token="test-device"
        )

        response = api_client.post("/", json=sample_envelope)

        assert response.status_code == 204
        assert [tokens for _, tokens in notifier.sent] == [["test-device"]]

    @pytest.mark.parametrize("body", [None, {}, {"message": None}])
    def test_malformed_push_never_fans_out(self, api_client, notifier, body):
        response = api_client.post("/", json=body)

        assert response.status_code == 204
        assert notifier.sent == []

    def test_app_title_comes_from_settings(self):
        assert app.title == settings.app_name

    def test_unknown_route(self, api_client):
        """Test routing errors use the structured error body."""
        response = api_client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": 404, "message": "Not Found", "type": "http_exception"}
        }

    def test_wrong_method(self, api_client):
        response = api_client.put("/register-token", json={"token": "device-1"})

        assert response.status_code == 405
        error = response.json()["error"]
        assert error["code"] == 405
        assert error["message"] == "Method Not Allowed"
        assert error["type"] == "http_exception"
