"""
Module: dependencies.py
Description: FastAPI dependencies shared by the route handlers.

None of these touch Firebase when they are resolved; the collaborators
attach to the process-wide Firebase app on first use. Tests swap any of
them out through app.dependency_overrides.
"""

import json
from typing import Any

from fastapi import Depends, Request

from gmail_subscriber.config.settings import settings
from gmail_subscriber.delivery.fcm import FcmDeliveryClient
from gmail_subscriber.delivery.gateway import DeliveryGateway
from gmail_subscriber.storage.firestore import TokenStore


async def get_json_body(request: Request) -> Any:
    """
    Dependency returning the parsed JSON body.

    Returns:
        The decoded JSON value, or None when the body is empty or not JSON
    """
    raw = await request.body()
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def get_token_store() -> TokenStore:
    """
    Dependency to get the Firestore token store.

    Returns:
        TokenStore bound to the configured token collection
    """
    return TokenStore(collection_name=settings.fcm_tokens_collection)


def get_delivery_client() -> FcmDeliveryClient:
    """
    Dependency to get the FCM fanout client.

    Returns:
        FcmDeliveryClient using the configured multicast batch size
    """
    return FcmDeliveryClient(batch_size=settings.fcm_batch_size)


def get_gateway(
    notifier: FcmDeliveryClient = Depends(get_delivery_client),
    recipients: TokenStore = Depends(get_token_store)
) -> DeliveryGateway:
    """
    Dependency to get the delivery gateway.

    Returns:
        DeliveryGateway wired to FCM and Firestore
    """
    return DeliveryGateway(
        notifier=notifier,
        recipients=recipients,
        fixed_token=settings.fcm_test_token,
        title=settings.notification_title,
        body=settings.notification_body,
        source=settings.notification_source,
        preview_length=settings.data_preview_length
    )
