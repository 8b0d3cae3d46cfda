"""
Tests package for the Azure Subscriptions service
"""
