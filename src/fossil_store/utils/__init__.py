"""Shared helpers for transfers: throttling and operation logging."""
