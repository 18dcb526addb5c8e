"""
Module: tokens.py
Description: Device token registration endpoint.

Web and mobile clients register their FCM token here so that Gmail
activity can be broadcast to them.

Key Components:
- register_token(): POST /register-token handler

Dependencies: FastAPI, typing
"""

from typing import Any, Union

from fastapi import APIRouter, Depends
from fastapi import status as status_codes
from fastapi.responses import JSONResponse

from gmail_subscriber.handlers.dependencies import get_json_body, get_token_store
from gmail_subscriber.models.request import RegisterTokenRequest
from gmail_subscriber.models.response import ErrorResponse, RegisterTokenResponse
from gmail_subscriber.storage.firestore import TokenStore
from gmail_subscriber.utils.logger import get_logger

router = APIRouter(tags=["tokens"])
logger = get_logger(__name__)


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        content=ErrorResponse(error=error).model_dump(),
        status_code=status_code
    )


@router.post(
    "/register-token",
    response_model=RegisterTokenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Token missing"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    }
)
async def register_token(
    body: Any = Depends(get_json_body),
    store: TokenStore = Depends(get_token_store)
) -> Union[RegisterTokenResponse, JSONResponse]:
    """
    Register (or re-register) an FCM device token.

    Args:
        body: Parsed JSON body, expected {"token": "...", "uid": "..."}
        store: Firestore token store (injected via dependency)

    Returns:
        RegisterTokenResponse on success

    Example:
        POST /register-token
        {"token": "dXyZ...", "uid": "user-1"}

        Response (200):
        {"ok": true}

        Response (400):
        {"error": "missing token"}
    """
    request = RegisterTokenRequest.model_validate(body if isinstance(body, dict) else {})

    if not request.token:
        logger.warning("Token registration without token", body_type=type(body).__name__)
        return _error(status_codes.HTTP_400_BAD_REQUEST, "missing token")

    try:
        await store.upsert_token(request.token, uid=request.uid)
    except Exception as e:
        logger.error(
            "register-token error",
            error=str(e),
            error_type=type(e).__name__
        )
        return _error(status_codes.HTTP_500_INTERNAL_SERVER_ERROR, "internal")

    return RegisterTokenResponse(ok=True)
