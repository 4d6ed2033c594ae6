"""Logging helpers."""

__all__ = []
