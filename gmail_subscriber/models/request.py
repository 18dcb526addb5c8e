"""
Module: request.py
Description: API request models for gmail-subscriber.

Key Components:
- RegisterTokenRequest: Model for POST /register-token requests

Dependencies: pydantic, typing
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterTokenRequest(BaseModel):
    """
    Request model for registering an FCM device token.

    The token is optional at the model level so that a missing token is
    reported by the handler as a 400 with the service's own error body.

    Attributes:
        token: FCM registration token of the device
        uid: Optional id of the user owning the device
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore"
    )

    token: Optional[str] = Field(default=None, description="FCM registration token")
    uid: Optional[str] = Field(default=None, description="Owning user id")

    @field_validator('token', 'uid', mode='before')
    @classmethod
    def empty_to_none(cls, v: Any) -> Optional[str]:
        """Normalize empty strings and non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v
