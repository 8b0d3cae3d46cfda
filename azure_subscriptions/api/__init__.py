"""
API Module Package

Modules:
    subscriptions: subscription listing and health endpoints
"""

__all__ = [
    "subscriptions",
]
