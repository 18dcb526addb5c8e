"""
Module: firebase.py
Description: Process-wide Firebase Admin app.

The Firebase app is created once per process and shared by the token
store and the fanout client. On Cloud Run the app authenticates with
Application Default Credentials; elsewhere a service account JSON can
be supplied through FIREBASE_SECRET.

Key Components:
- get_firebase_app(): Return the default app, initializing it on first use

Dependencies: firebase_admin, json, threading
"""

import json
import threading
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from gmail_subscriber.config.settings import Settings, settings as default_settings
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)

_init_lock = threading.Lock()


def _load_credential(secret: Optional[str]) -> Optional[credentials.Base]:
    if not secret:
        return None
    cert = json.loads(secret)
    # Secrets stored as a JSON string literal come back double encoded
    if isinstance(cert, str):
        cert = json.loads(cert)
    return credentials.Certificate(cert)


def get_firebase_app(settings: Optional[Settings] = None) -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it if needed.

    Args:
        settings: Settings to initialize from (defaults to global settings)

    Returns:
        The default firebase_admin.App

    Raises:
        ValueError: If the configured credentials are invalid
        google.auth.exceptions.DefaultCredentialsError: If ADC is unavailable
    """
    settings = settings or default_settings

    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        options = {}
        if settings.firebase_project_id:
            options["projectId"] = settings.firebase_project_id

        credential = _load_credential(settings.firebase_secret)
        app = firebase_admin.initialize_app(credential=credential, options=options or None)

        logger.info(
            "Firebase Admin initialized",
            app_name=app.name,
            project_id=settings.firebase_project_id,
            credentials="service_account" if credential else "application_default"
        )
        return app
