"""Command-line and UI adapters."""

__all__ = []
