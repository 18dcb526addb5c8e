"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Configures all application settings from environment variables with
validation and defaults. Supports .env files for local development.
On Cloud Run the PORT variable is injected by the platform.
"""

import json
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="gmail-subscriber", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    log_level: str = Field(default="INFO", description="Logging level")
    stage: str = Field(default="dev", description="Deployment stage")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Interface to bind to")
    port: int = Field(default=8080, ge=1, le=65535, description="Listening port")

    # Firebase settings
    firebase_secret: Optional[str] = Field(
        default=None,
        description="Service account JSON; Application Default Credentials are used when unset"
    )
    firebase_project_id: Optional[str] = Field(
        default=None,
        description="Optional Firebase/GCP project id override"
    )

    # FCM settings
    fcm_test_token: Optional[str] = Field(
        default=None,
        description="Fixed recipient token; when set, every notification goes only to it"
    )
    fcm_tokens_collection: str = Field(
        default="fcmTokens",
        min_length=1,
        description="Firestore collection holding registered device tokens"
    )
    fcm_batch_size: int = Field(
        default=500,
        ge=1,
        le=500,
        description="Maximum tokens per multicast request (FCM caps this at 500)"
    )

    # Notification content
    notification_title: str = Field(default="Tender Extractor", description="Notification title")
    notification_body: str = Field(
        default="New Gmail activity received",
        description="Notification body"
    )
    notification_source: str = Field(
        default="gmail-subscriber",
        description="Value of the 'source' data field on every notification"
    )

    # Delivery logging
    data_preview_length: int = Field(
        default=300,
        ge=0,
        description="Number of decoded payload characters included in delivery logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator('fcm_test_token')
    @classmethod
    def blank_token_is_unset(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty FCM_TEST_TOKEN the same as an unset one."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator('firebase_secret')
    @classmethod
    def validate_firebase_secret(cls, v: Optional[str]) -> Optional[str]:
        """Ensure the service account secret, when provided, is JSON."""
        if v is None or not v.strip():
            return None
        try:
            json.loads(v)
        except json.JSONDecodeError:
            raise ValueError("firebase_secret must be a JSON document")
        return v


# Global settings instance
settings = Settings()
