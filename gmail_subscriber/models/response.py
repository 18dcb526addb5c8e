"""
Module: response.py
Description: API response models for gmail-subscriber.

Key Components:
- RegisterTokenResponse: Body of a successful token registration
- ErrorResponse: Body of a failed token registration
- HealthResponse: Body of GET /health

Dependencies: pydantic
"""

from pydantic import BaseModel, Field


class RegisterTokenResponse(BaseModel):
    """Response returned after a token was stored."""

    ok: bool = Field(default=True)


class ErrorResponse(BaseModel):
    """Flat error body used by the registration endpoint."""

    error: str = Field(..., description="Short error code")


class HealthResponse(BaseModel):
    """Health document with build and environment information."""

    status: str
    message: str
    version: str
    environment: str
