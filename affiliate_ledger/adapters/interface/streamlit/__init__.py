"""Streamlit dashboard."""

__all__ = []
