"""Pytest configuration and shared fixtures for filtertable tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import pytest


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing components.

    This fixture patches st.session_state to allow testing components
    without running a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """Create sample rows covering every filter type."""
    return [
        {"key": "r1", "id": 1, "name": "Anna", "status": "active", "active": True, "team": "red"},
        {"key": "r2", "id": 2, "name": "banana", "status": "Active", "active": 1, "team": "blue"},
        {"key": "r3", "id": 3, "name": "Bo", "status": "inactive", "active": False, "team": "red"},
        {"key": "r4", "id": 4, "name": "Cleo", "status": "active", "active": 0, "team": "green"},
        {"key": "r5", "id": 5, "name": "Dan", "status": "active", "active": "yes", "team": "blue"},
    ]


@pytest.fixture
def sample_columns() -> List[Dict[str, Any]]:
    """Create column definitions with one hidden column."""
    return [
        {"key": "id", "title": "ID", "dataIndex": "id"},
        {"key": "name", "title": "Name", "dataIndex": "name"},
        {"key": "status", "title": "Status", "dataIndex": "status"},
        {"key": "active", "title": "Active", "dataIndex": "active"},
        {"key": "team", "title": "Team", "dataIndex": "team", "visible": False},
    ]


@pytest.fixture
def sample_filters() -> List[Dict[str, Any]]:
    """Create one filter definition of each type."""
    return [
        {
            "type": "select",
            "dataIndex": "status",
            "placeholder": "Pick a status",
            "data": ["active", "inactive"],
        },
        {"type": "input", "dataIndex": "name", "label": "Name"},
        {"type": "toggle", "dataIndex": "active", "label": "Active only"},
    ]


@pytest.fixture
def numbered_rows() -> List[Dict[str, Any]]:
    """Create 125 rows for pagination testing."""
    return [{"id": i, "name": f"row_{i}"} for i in range(125)]
