"""
Module: envelope.py
Description: Pub/Sub push delivery envelope models.

Pub/Sub wraps every pushed message in an envelope of the form:

    {
        "message": {
            "data": "<base64>",
            "messageId": "...",
            "publishTime": "...",
            "attributes": {"key": "value"}
        },
        "subscription": "projects/.../subscriptions/..."
    }

Parsing is deliberately lenient: every field is optional and unknown
fields are ignored, because a malformed delivery must still be
acknowledged rather than rejected.

Key Components:
- PubSubMessage: The inner message with its base64 payload
- PushEnvelope: The outer wrapper posted by Pub/Sub
- PubSubMessage.decode_data(): Tolerant base64 decoding

Dependencies: pydantic, base64, binascii, typing
"""

import base64
import binascii
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# URL-safe alphabet folded onto the standard one before decoding
_URLSAFE_ALPHABET = str.maketrans("-_", "+/")


class PubSubMessage(BaseModel):
    """
    A single Pub/Sub message as delivered by a push subscription.

    Attributes:
        data: Base64 encoded payload (absent for attribute-only messages)
        message_id: Server assigned message id
        publish_time: RFC 3339 publish timestamp
        attributes: String key/value attributes
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: Optional[str] = Field(default=None, description="Base64 encoded payload")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    publish_time: Optional[str] = Field(default=None, alias="publishTime")
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator('data', 'message_id', 'publish_time', mode='before')
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        """Keep strings, stringify scalars, drop anything else."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return None

    @field_validator('attributes', mode='before')
    @classmethod
    def coerce_attributes(cls, v: Any) -> Dict[str, str]:
        if not isinstance(v, dict):
            return {}
        return {str(k): str(val) for k, val in v.items()}

    def decode_data(self) -> Optional[str]:
        """
        Decode the base64 payload into text.

        Decoding is tolerant of what publishers commonly send: whitespace
        and line breaks are ignored, missing "=" padding is restored and
        the URL-safe alphabet ("-", "_") is accepted.

        Returns:
            The decoded text, or None when there is no payload or it is
            not base64 at all. Invalid UTF-8 sequences are replaced.
        """
        if not self.data:
            return None

        text = "".join(self.data.split()).translate(_URLSAFE_ALPHABET).rstrip("=")
        if not text or len(text) % 4 == 1:
            return None
        text += "=" * (-len(text) % 4)

        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError):
            return None
        return raw.decode("utf-8", errors="replace")


class PushEnvelope(BaseModel):
    """Outer wrapper Pub/Sub posts to a push endpoint."""

    model_config = ConfigDict(extra="ignore")

    message: PubSubMessage
    subscription: Optional[str] = None

    @classmethod
    def from_body(cls, body: Any) -> Optional["PushEnvelope"]:
        """
        Build an envelope from an already parsed JSON body.

        Args:
            body: Any JSON value (or None for an empty/unparseable body)

        Returns:
            The envelope, or None when the body carries no usable message
        """
        if not isinstance(body, dict):
            return None
        message = body.get("message")
        if not isinstance(message, dict):
            return None
        try:
            return cls.model_validate(body)
        except ValidationError:
            return None
