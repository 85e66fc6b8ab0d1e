"""Per-session table state kept in Streamlit's session_state."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .filters import FilterState
from .pagination import DEFAULT_CURRENT_PAGE

# Module-level default state manager
_default_state_manager: Optional["StateManager"] = None


def get_default_state_manager() -> "StateManager":
    """
    Get or create the default shared StateManager.

    Returns:
        The default StateManager instance
    """
    global _default_state_manager
    if _default_state_manager is None:
        _default_state_manager = StateManager()
    return _default_state_manager


def reset_default_state_manager() -> None:
    """Reset the default state manager (useful for testing)."""
    global _default_state_manager
    _default_state_manager = None


@dataclass
class TableState:
    """
    Mutable state owned by one rendered table.

    Attributes:
        filters: Applied filters and filter widget values
        current_page: 1-based page number
    """

    filters: FilterState = field(default_factory=FilterState)
    current_page: int = DEFAULT_CURRENT_PAGE


class StateManager:
    """
    Keeps TableState objects alive across Streamlit reruns.

    Streamlit re-executes the script on every interaction, so the state a
    table's FilterEngine and Paginator operate on is stored in
    ``st.session_state`` under ``session_key`` and handed back by
    reference on the next run. State lives only as long as the browser
    session.

    Features:
        - One TableState per table key
        - Session ID for multi-tab/session safety
        - Change counter bumped on every recorded change
    """

    def __init__(self, session_key: str = "filtertable_state"):
        """
        Initialize the StateManager.

        Args:
            session_key: Key to use in Streamlit session_state for storing
                state. Use different keys for independent table groups.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        """Ensure session state is initialized."""
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "id": float(np.random.random()),
                "tables": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        """Get the internal state dict from session_state."""
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def session_id(self) -> float:
        """Get the unique session ID."""
        return self._state["id"]

    @property
    def counter(self) -> int:
        """Get the current state counter."""
        return self._state["counter"]

    def get_table_state(
        self, table_key: str, current_page: int = DEFAULT_CURRENT_PAGE
    ) -> TableState:
        """
        Get the state for a table, creating it on first use.

        Args:
            table_key: Unique key of the table
            current_page: Initial page for a newly created state

        Returns:
            The TableState stored for the key (same object on every call)
        """
        tables = self._state["tables"]
        if table_key not in tables:
            tables[table_key] = TableState(current_page=current_page)
        return tables[table_key]

    def has_table_state(self, table_key: str) -> bool:
        return table_key in self._state["tables"]

    def mark_changed(self) -> int:
        """
        Record that some table state changed.

        Returns:
            The new counter value
        """
        self._state["counter"] += 1
        return self._state["counter"]

    def reset_table(self, table_key: str) -> bool:
        """
        Drop the state of one table.

        Args:
            table_key: Unique key of the table

        Returns:
            True if state was dropped, False if none existed
        """
        if table_key in self._state["tables"]:
            del self._state["tables"][table_key]
            self._state["counter"] += 1
            return True
        return False

    def clear(self) -> None:
        """Drop all table state and reset counter."""
        self._state["tables"] = {}
        self._state["counter"] = 0

    def __repr__(self) -> str:
        return (
            f"StateManager(session_key='{self._session_key}', "
            f"counter={self.counter}, "
            f"tables={list(self._state['tables'].keys())})"
        )
