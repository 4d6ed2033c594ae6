"""Shared utilities package."""

__all__ = []
