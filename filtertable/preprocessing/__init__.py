"""Preprocessing utilities for row normalisation and display."""

from .rows import (
    build_display_frame,
    compute_rows_hash,
    make_filter_cache_key,
    to_rows,
)

__all__ = [
    "to_rows",
    "compute_rows_hash",
    "make_filter_cache_key",
    "build_display_frame",
]
