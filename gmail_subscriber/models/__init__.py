"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by gmail-subscriber:
- PushEnvelope, PubSubMessage: Pub/Sub push delivery envelope
- NotificationPayload, FanoutOutcome: FCM notification content and results
- RegisterTokenRequest: API request model for token registration
- RegisterTokenResponse, ErrorResponse, HealthResponse: API response models

All models are exported here for convenient importing.
"""

from .envelope import PubSubMessage, PushEnvelope
from .notification import FanoutOutcome, NotificationPayload
from .request import RegisterTokenRequest
from .response import ErrorResponse, HealthResponse, RegisterTokenResponse

__all__ = [
    "PubSubMessage",
    "PushEnvelope",
    "FanoutOutcome",
    "NotificationPayload",
    "RegisterTokenRequest",
    "ErrorResponse",
    "HealthResponse",
    "RegisterTokenResponse",
]
