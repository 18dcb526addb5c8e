"""
Package: delivery
Description: Notification delivery for gmail-subscriber.

Provides the Pub/Sub acknowledgment gateway and FCM fanout.
"""
