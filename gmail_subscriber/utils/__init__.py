"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and helpers
- firebase: Process-wide Firebase Admin app
"""

__all__ = []
