"""Rendering utilities for drawing tables with Streamlit."""

from .bridge import clear_component_cache, render_table

__all__ = [
    "render_table",
    "clear_component_cache",
]
