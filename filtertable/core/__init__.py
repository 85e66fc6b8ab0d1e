"""Core filtering, pagination and column logic for filtertable."""

from .columns import ColumnDefinition, display_value, get_row_key, is_visible
from .errors import FilterTableError, InvalidPageConfiguration
from .filters import (
    GLOBAL_SEARCH_KEY,
    FilterDefinition,
    FilterEngine,
    FilterState,
    FilterType,
)
from .pagination import PageConfig, PageCountPolicy, Paginator
from .registry import get_matcher, register_matcher
from .state import StateManager, TableState

__all__ = [
    "FilterEngine",
    "FilterDefinition",
    "FilterState",
    "FilterType",
    "GLOBAL_SEARCH_KEY",
    "Paginator",
    "PageConfig",
    "PageCountPolicy",
    "ColumnDefinition",
    "is_visible",
    "display_value",
    "get_row_key",
    "StateManager",
    "TableState",
    "register_matcher",
    "get_matcher",
    "FilterTableError",
    "InvalidPageConfiguration",
]
