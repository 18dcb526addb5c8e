"""
Module: storage
Description: Package initialization for data persistence layer.

This package contains data storage implementations for gmail-subscriber:
- firestore: Firestore store for FCM device tokens
"""

__all__ = []
