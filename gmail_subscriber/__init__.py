"""
gmail-subscriber: relays Gmail Pub/Sub push notifications to Firebase
Cloud Messaging and keeps the registry of device tokens to notify.
"""

__version__ = "0.1.0"
