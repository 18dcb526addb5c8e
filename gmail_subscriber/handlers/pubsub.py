"""
Module: pubsub.py
Description: Pub/Sub push endpoint and liveness probe.

Implements the root routes of the service:
- GET /: Liveness probe for Cloud Run
- POST /: Pub/Sub push subscription endpoint

POST / only ever answers 204. Pub/Sub retries any delivery that does
not get a 2xx, so errors anywhere in the route, its dependencies
included, are logged and acknowledged by AcknowledgingRoute.

Key Components:
- receive_push(): Pub/Sub push handler
- liveness(): Plain text health check
- AcknowledgingRoute: Route class that converts errors into acknowledgments

Dependencies: FastAPI, typing
"""

from typing import Any, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.routing import APIRoute

from gmail_subscriber.delivery.gateway import ACK_STATUS, DeliveryGateway
from gmail_subscriber.handlers.dependencies import get_gateway, get_json_body
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)


class AcknowledgingRoute(APIRoute):
    """APIRoute whose unexpected errors become an acknowledgment."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def acknowledging_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except Exception as e:
                logger.error(
                    "Handler error",
                    error=str(e),
                    error_type=type(e).__name__,
                    path=request.url.path,
                    method=request.method
                )
                return Response(status_code=ACK_STATUS)

        return acknowledging_route_handler


router = APIRouter(tags=["pubsub"], route_class=AcknowledgingRoute)


@router.get("/", response_class=PlainTextResponse)
async def liveness() -> str:
    """Liveness probe."""
    return "ok"


@router.post("/", status_code=ACK_STATUS, response_class=Response)
async def receive_push(
    body: Any = Depends(get_json_body),
    gateway: DeliveryGateway = Depends(get_gateway)
) -> Response:
    """
    Receive a Pub/Sub push delivery and fan it out to FCM.

    Args:
        body: Parsed JSON envelope (None when empty or not JSON)
        gateway: Delivery gateway (injected via dependency)

    Returns:
        An empty 204 response, whatever happened while processing

    Example:
        POST /
        {
            "message": {
                "data": "eyJoaXN0b3J5SWQiOiI0MiJ9",
                "messageId": "1234567890",
                "publishTime": "2024-01-15T10:30:00Z",
                "attributes": {}
            },
            "subscription": "projects/my-project/subscriptions/gmail-push"
        }

        Response (204 No Content)
    """
    logger.debug("Notification received from Pub/Sub")

    status_code = await gateway.handle_delivery(body)
    return Response(status_code=status_code)
