"""
Module: gateway.py
Description: Acknowledgment gateway for Pub/Sub push deliveries.

Pub/Sub redelivers a pushed message until the endpoint answers with a
2xx status. Notifications are best effort, so the gateway always
acknowledges: a malformed envelope, an undecodable payload, a failed
token lookup or a failed FCM send are logged and then acknowledged all
the same. Only the logs show that something went wrong.

Key Components:
- DeliveryGateway: Decodes a delivery and fans it out to FCM
- handle_delivery(): Returns the acknowledgment status for a parsed body
- ACK_STATUS: Status code used for every acknowledgment
"""

from typing import Any, List, Optional, Protocol

from fastapi import status as status_codes

from gmail_subscriber.models.envelope import PushEnvelope
from gmail_subscriber.models.notification import FanoutOutcome, NotificationPayload
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)

ACK_STATUS = status_codes.HTTP_204_NO_CONTENT


class Notifier(Protocol):
    async def send(self, payload: NotificationPayload, token: str) -> FanoutOutcome: ...

    async def send_multicast(self, payload: NotificationPayload, tokens: List[str]) -> FanoutOutcome: ...


class RecipientDirectory(Protocol):
    async def list_tokens(self) -> List[str]: ...


class DeliveryGateway:
    """
    Turns Pub/Sub push deliveries into FCM notifications.

    Attributes:
        notifier: Fanout collaborator (FcmDeliveryClient in production)
        recipients: Token lookup collaborator (TokenStore in production)
        fixed_token: When set, every notification goes only to this token
    """

    def __init__(
        self,
        notifier: Notifier,
        recipients: RecipientDirectory,
        fixed_token: Optional[str] = None,
        title: str = "Tender Extractor",
        body: str = "New Gmail activity received",
        source: str = "gmail-subscriber",
        preview_length: int = 300
    ):
        self.notifier = notifier
        self.recipients = recipients
        self.fixed_token = fixed_token
        self.title = title
        self.body = body
        self.source = source
        self.preview_length = preview_length

    async def handle_delivery(self, body: Any) -> int:
        """
        Process one push delivery and choose its acknowledgment status.

        Args:
            body: Parsed JSON request body, or None when it was empty or not JSON

        Returns:
            ACK_STATUS, whatever happened downstream
        """
        envelope = PushEnvelope.from_body(body)
        if envelope is None:
            logger.error(
                "Missing Pub/Sub message envelope",
                body_type=type(body).__name__,
                body=str(body)[:self.preview_length]
            )
            return ACK_STATUS

        message = envelope.message
        decoded = message.decode_data()

        if message.data and decoded is None:
            logger.warning(
                "Pub/Sub message data is not valid base64",
                message_id=message.message_id
            )

        logger.info(
            "Pub/Sub push received",
            message_id=message.message_id,
            publish_time=message.publish_time,
            subscription=envelope.subscription,
            attributes=message.attributes,
            data_preview=decoded[:self.preview_length] if decoded else None
        )

        payload = NotificationPayload.from_decoded(
            decoded,
            title=self.title,
            body=self.body,
            source=self.source
        )

        try:
            await self.fanout(payload)
        except Exception as e:
            logger.error(
                "Notification fanout failed",
                message_id=message.message_id,
                history_id=payload.history_id,
                error=str(e),
                error_type=type(e).__name__
            )

        return ACK_STATUS

    async def fanout(self, payload: NotificationPayload) -> Optional[FanoutOutcome]:
        """
        Send the notification to the override token or to every stored token.

        Returns:
            The fanout outcome, or None when there was nobody to notify

        Raises:
            Exception: Whatever the lookup or send collaborator raises
        """
        if self.fixed_token:
            outcome = await self.notifier.send(payload, self.fixed_token)
            logger.info(
                "Notification sent to override token",
                history_id=payload.history_id,
                message_ids=outcome.message_ids
            )
            return outcome

        tokens = await self.recipients.list_tokens()
        if not tokens:
            logger.warning("No FCM_TEST_TOKEN and no tokens in Firestore; skipping send")
            return None

        outcome = await self.notifier.send_multicast(payload, tokens)
        logger.info(
            "Notification fanout complete",
            history_id=payload.history_id,
            success_count=outcome.success_count,
            failure_count=outcome.failure_count
        )
        return outcome
