"""
Configuration management for Fossil Store.

Contains the Pydantic settings for the S3 connection, the worker pool size and
the transfer rate limits.
"""

from fossil_store.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
