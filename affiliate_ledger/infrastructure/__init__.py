"""Infrastructure layer: persistence, settings, logging and wiring."""

__all__ = []
