"""
Module: firestore.py
Description: Firestore client for FCM device token storage.

Stores one document per device token in a single collection, keyed by
the token value itself, so registering a token twice simply overwrites
its metadata. Tokens are never deleted here.

Key Components:
- TokenStore: Main client class for token operations
- upsert_token(): Idempotent token registration
- list_tokens(): All registered tokens for broadcast fanout

Dependencies: firebase_admin (firestore), google.api_core, typing
"""

import asyncio
from typing import List, Optional

import firebase_admin
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from gmail_subscriber.utils.firebase import get_firebase_app
from gmail_subscriber.utils.logger import get_logger

logger = get_logger(__name__)


def token_preview(token: str) -> str:
    """Shorten a token for logging."""
    return token[:12] + "…"


class TokenStore:
    """
    Firestore client for device token operations.

    The Firestore client is created on first use, so constructing a
    store never touches the network or the Firebase app.

    Attributes:
        collection_name: Name of the Firestore collection holding tokens
        app: Firebase app (the process-wide default app when None)

    Example:
        >>> store = TokenStore(collection_name="fcmTokens")
        >>> await store.upsert_token("dxyz...", uid="user-1")
        >>> tokens = await store.list_tokens()
    """

    def __init__(
        self,
        app: Optional[firebase_admin.App] = None,
        collection_name: str = "fcmTokens",
        db=None
    ):
        """
        Initialize the token store.

        Args:
            app: Firebase app to use (default app when None)
            collection_name: Firestore collection holding tokens
            db: Optional pre-built Firestore client

        Raises:
            ValueError: If collection_name is empty or invalid
        """
        if not collection_name or not isinstance(collection_name, str):
            raise ValueError("collection_name must be a non-empty string")

        self.collection_name = collection_name
        self.app = app
        self._db = db

    @property
    def db(self):
        if self._db is None:
            self._db = firestore.client(self.app or get_firebase_app())
        return self._db

    @property
    def collection(self):
        return self.db.collection(self.collection_name)

    def _stream_token_ids(self) -> List[str]:
        return [snapshot.id for snapshot in self.collection.stream()]

    async def upsert_token(self, token: str, uid: Optional[str] = None) -> None:
        """
        Store a device token, overwriting any existing registration.

        Args:
            token: FCM registration token (also the document id)
            uid: Optional id of the owning user

        Raises:
            ValueError: If token is empty
            GoogleAPIError: If the Firestore write fails
        """
        if not token or not isinstance(token, str):
            raise ValueError("token must be a non-empty string")

        try:
            await asyncio.to_thread(
                self.collection.document(token).set,
                {"uid": uid or None, "createdAt": firestore.SERVER_TIMESTAMP},
            )

            logger.info(
                "Stored FCM token",
                token=token_preview(token),
                uid=uid,
                collection=self.collection_name
            )

        except GoogleAPIError as e:
            logger.error(
                "Failed to store FCM token in Firestore",
                token=token_preview(token),
                collection=self.collection_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise

        except Exception as e:
            logger.error(
                "Unexpected error storing FCM token",
                token=token_preview(token),
                collection=self.collection_name,
                error=str(e)
            )
            raise

    async def list_tokens(self) -> List[str]:
        """
        Return every registered token.

        Returns:
            Document ids of the token collection (possibly empty)

        Raises:
            GoogleAPIError: If the Firestore read fails
        """
        try:
            tokens = await asyncio.to_thread(self._stream_token_ids)

            logger.debug(
                "Listed FCM tokens",
                count=len(tokens),
                collection=self.collection_name
            )

            return tokens

        except Exception as e:
            logger.error(
                "Failed to list FCM tokens from Firestore",
                collection=self.collection_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise
