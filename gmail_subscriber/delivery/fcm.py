"""
Module: fcm.py
Description: Push notification fanout through Firebase Cloud Messaging.

Sends a notification either to one device token or, as multicast, to a
list of tokens. Multicast requests are split into batches because FCM
accepts at most 500 tokens per call.
"""

import asyncio
from typing import List, Optional

import firebase_admin
from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError

from gmail_subscriber.models.notification import FanoutOutcome, NotificationPayload
from gmail_subscriber.storage.firestore import token_preview
from gmail_subscriber.utils.firebase import get_firebase_app
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)

MAX_MULTICAST_TOKENS = 500


class FcmDeliveryClient:
    """
    FCM client for notification fanout.

    Failures are logged and re-raised; deciding whether a failed send
    matters is left to the caller.
    """

    def __init__(self, app: Optional[firebase_admin.App] = None, batch_size: int = MAX_MULTICAST_TOKENS):
        """
        Initialize FCM delivery client.

        Args:
            app: Firebase app to send through (default app when None)
            batch_size: Maximum tokens per multicast request

        Raises:
            ValueError: If batch_size is outside 1..500
        """
        if not 1 <= batch_size <= MAX_MULTICAST_TOKENS:
            raise ValueError(f"batch_size must be between 1 and {MAX_MULTICAST_TOKENS}")

        self.app = app
        self.batch_size = batch_size

    @property
    def firebase_app(self) -> firebase_admin.App:
        return self.app or get_firebase_app()

    def _notification(self, payload: NotificationPayload) -> messaging.Notification:
        return messaging.Notification(title=payload.title, body=payload.body)

    async def send(self, payload: NotificationPayload, token: str) -> FanoutOutcome:
        """
        Send a notification to a single device.

        Args:
            payload: Notification content
            token: Target device token

        Returns:
            FanoutOutcome with the FCM message id

        Raises:
            ValueError: If token is empty
            FirebaseError: If FCM rejects the message
        """
        if not token:
            raise ValueError("token must be a non-empty string")

        message = messaging.Message(
            token=token,
            notification=self._notification(payload),
            data=payload.data,
        )

        try:
            message_id = await asyncio.to_thread(messaging.send, message, app=self.firebase_app)
        except FirebaseError as e:
            logger.warning(
                "FCM send failed",
                target="token",
                code=e.code,
                error=str(e)
            )
            raise

        logger.info("FCM send success", target="token", message_id=message_id)

        return FanoutOutcome(target="token", success_count=1, message_ids=[message_id])

    async def send_multicast(self, payload: NotificationPayload, tokens: List[str]) -> FanoutOutcome:
        """
        Send a notification to many devices.

        Args:
            payload: Notification content
            tokens: Target device tokens

        Returns:
            FanoutOutcome aggregated over all batches

        Raises:
            ValueError: If tokens is empty
            FirebaseError: If a whole batch is rejected
        """
        if not tokens:
            raise ValueError("tokens must be a non-empty list")

        outcome = FanoutOutcome(target="multicast")

        for start in range(0, len(tokens), self.batch_size):
            batch = tokens[start:start + self.batch_size]
            message = messaging.MulticastMessage(
                tokens=batch,
                notification=self._notification(payload),
                data=payload.data,
            )

            try:
                response = await asyncio.to_thread(
                    messaging.send_each_for_multicast, message, app=self.firebase_app
                )
            except FirebaseError as e:
                logger.warning(
                    "FCM multicast batch failed",
                    batch_start=start,
                    batch_size=len(batch),
                    code=e.code,
                    error=str(e)
                )
                raise

            outcome.success_count += response.success_count
            outcome.failure_count += response.failure_count

            for token, result in zip(batch, response.responses):
                if result.success:
                    outcome.message_ids.append(result.message_id)
                else:
                    # Stale tokens are reported, never pruned
                    logger.debug(
                        "FCM token rejected",
                        token=token_preview(token),
                        code=getattr(result.exception, "code", None)
                    )

        logger.info(
            "FCM multicast result",
            tokens=len(tokens),
            success_count=outcome.success_count,
            failure_count=outcome.failure_count
        )

        return outcome
