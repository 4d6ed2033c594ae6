"""Period bookkeeping engine for an affiliate-marketing operation."""

__version__ = "0.1.0"

__all__ = ["__version__"]
