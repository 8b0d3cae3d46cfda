"""
Azure Subscriptions service: lists the subscriptions under a management group
"""

__version__ = "1.0.0"
