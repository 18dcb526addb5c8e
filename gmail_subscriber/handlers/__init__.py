"""
Module: handlers
Description: Package initialization for API endpoint handlers.

This package contains FastAPI route handlers for gmail-subscriber:
- pubsub: Pub/Sub push endpoint and liveness probe
- tokens: Device token registration

All handlers use dependency injection for Firebase-backed
collaborators, defined in handlers.dependencies.
"""

__all__ = []
