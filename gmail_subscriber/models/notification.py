"""
Module: notification.py
Description: FCM notification payload models.

Defines the notification sent for every Gmail push delivery and the
outcome record produced by the fanout client.

Key Components:
- NotificationPayload: Title/body plus string-only data map
- NotificationPayload.from_decoded(): Builds the payload from decoded Pub/Sub data
- extract_history_id(): Pulls the Gmail historyId out of the decoded payload
- FanoutOutcome: Per-send result used for logging

Dependencies: pydantic, json, typing
"""

import json
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


def extract_history_id(decoded: Optional[str]) -> str:
    """
    Extract the Gmail historyId from a decoded notification payload.

    Gmail watch notifications carry {"emailAddress": ..., "historyId": ...}.

    Args:
        decoded: Decoded Pub/Sub message data, possibly None

    Returns:
        historyId as a string, or "" when it cannot be determined
    """
    try:
        parsed = json.loads(decoded or "{}")
    except (TypeError, ValueError):
        return ""
    if not isinstance(parsed, dict):
        return ""
    history_id = parsed.get("historyId")
    if history_id is None:
        return ""
    return str(history_id)


class NotificationPayload(BaseModel):
    """
    Notification content shared by single and multicast sends.

    FCM only accepts string values in the data map.
    """

    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")
    data: Dict[str, str] = Field(default_factory=dict, description="Data message fields")
    decoded: Optional[str] = Field(
        default=None,
        exclude=True,
        description="Decoded Pub/Sub payload this notification was built from"
    )

    @classmethod
    def from_decoded(
        cls,
        decoded: Optional[str],
        title: str,
        body: str,
        source: str
    ) -> "NotificationPayload":
        """Build the notification for a decoded Pub/Sub payload."""
        return cls(
            title=title,
            body=body,
            data={
                "source": source,
                "historyId": extract_history_id(decoded),
            },
            decoded=decoded,
        )

    @property
    def history_id(self) -> str:
        return self.data.get("historyId", "")


class FanoutOutcome(BaseModel):
    """Result of one logical fanout call."""

    target: str = Field(..., pattern=r"^(token|multicast)$")
    success_count: int = Field(default=0, ge=0)
    failure_count: int = Field(default=0, ge=0)
    message_ids: List[str] = Field(default_factory=list)

    @property
    def sent(self) -> bool:
        return self.success_count > 0
