"""
filtertable - Filterable, paginated tables for Streamlit.

This package provides a table component with per-column filters (select,
text input, toggle), a global search box and pagination. The filtering and
pagination engine is plain Python and can be used without Streamlit.
"""

import logging

from .components.table import Table
from .core.columns import ColumnDefinition, display_value, get_row_key, is_visible
from .core.errors import FilterTableError, InvalidPageConfiguration
from .core.filters import (
    GLOBAL_SEARCH_KEY,
    FilterDefinition,
    FilterEngine,
    FilterState,
    FilterType,
)
from .core.pagination import PageConfig, PageCountPolicy, Paginator
from .core.state import StateManager, TableState
from .rendering.bridge import clear_component_cache

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for filtertable.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import filtertable
        >>> filtertable.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("filtertable").setLevel(level)


__all__ = [
    # Engine
    "FilterEngine",
    "FilterDefinition",
    "FilterState",
    "FilterType",
    "GLOBAL_SEARCH_KEY",
    "Paginator",
    "PageConfig",
    "PageCountPolicy",
    # Columns
    "ColumnDefinition",
    "is_visible",
    "display_value",
    "get_row_key",
    # Component
    "Table",
    "StateManager",
    "TableState",
    # Errors
    "FilterTableError",
    "InvalidPageConfiguration",
    # Utilities
    "clear_component_cache",
    "configure_logging",
]
