"""Tests for Streamlit rendering in bridge.py with mocked widgets."""

from typing import Any, Dict
from unittest.mock import MagicMock, patch

import pytest

from filtertable import GLOBAL_SEARCH_KEY, StateManager, Table, TableState
from filtertable.rendering.bridge import (
    _COMPONENT_DATA_CACHE_KEY,
    CLEAR_FILTERS_LABEL,
    LOADING_MESSAGE,
    clear_component_cache,
    filter_rows_cached,
    render_table,
)


class MockWidgets:
    """Streamlit widget doubles returning values keyed by widget key."""

    def __init__(self):
        self.values: Dict[str, Any] = {}
        self.st = {
            "columns": MagicMock(side_effect=lambda n: [MagicMock() for _ in range(n)]),
            "selectbox": MagicMock(side_effect=self._widget(None)),
            "text_input": MagicMock(side_effect=self._widget("")),
            "checkbox": MagicMock(side_effect=self._widget(False)),
            "button": MagicMock(side_effect=self._widget(False)),
            "dataframe": MagicMock(),
            "write": MagicMock(),
            "rerun": MagicMock(),
        }

    def _widget(self, default):
        def widget(*args, key=None, **kwargs):
            return self.values.get(key, default)

        return widget


@pytest.fixture
def widgets(mock_streamlit):
    """Patch Streamlit widgets used by the bridge."""
    mock = MockWidgets()
    with patch.multiple("filtertable.rendering.bridge.st", **mock.st):
        yield mock


@pytest.fixture
def state_manager(mock_streamlit) -> StateManager:
    return StateManager(session_key="test_bridge_state")


@pytest.fixture
def people_table(sample_rows, sample_columns, sample_filters) -> Table:
    return Table(
        data=sample_rows,
        columns=sample_columns,
        filters=sample_filters,
        show_global_search=True,
        pagination={"pageLength": 2},
    )


class TestRenderTable:
    """Tests for the full render pass."""

    def test_untouched_widgets_apply_nothing(self, widgets, state_manager, people_table):
        view = render_table(people_table, state_manager, key="people")

        assert view["filtered_count"] == 5
        assert state_manager.get_table_state("people").filters.applied == {}
        widgets.st["dataframe"].assert_called_once()
        assert widgets.st["rerun"].call_count == 0

    def test_widgets_drawn_per_filter(self, widgets, state_manager, people_table):
        render_table(people_table, state_manager, key="people")

        # 3 filters + global search + clear button
        widgets.st["columns"].assert_any_call(5)
        assert widgets.st["selectbox"].call_args.kwargs["placeholder"] == "Pick a status"
        assert widgets.st["selectbox"].call_args.kwargs["options"] == ["active", "inactive"]
        labels = [c.args[0] for c in widgets.st["text_input"].call_args_list]
        assert labels == ["Name", "Global Search"]

    def test_text_input_applies_filter(self, widgets, state_manager, people_table):
        widgets.values["people:filter:name"] = "an"

        view = render_table(people_table, state_manager, key="people")

        assert view["filtered_count"] == 3
        state = state_manager.get_table_state("people")
        assert state.filters.applied == {"name": "an"}
        assert state_manager.counter == 1

    def test_checkbox_and_select_combine(self, widgets, state_manager, people_table):
        widgets.values["people:filter:active"] = True
        widgets.values["people:filter:status"] = "active"

        view = render_table(people_table, state_manager, key="people")

        assert [row["id"] for row in view["rows"]] == [1, 5]

    def test_global_search_box(self, widgets, state_manager, people_table):
        widgets.values[f"people:filter:{GLOBAL_SEARCH_KEY}"] = "green"

        view = render_table(people_table, state_manager, key="people")

        assert [row["id"] for row in view["rows"]] == [4]

    def test_unchanged_value_not_reapplied(self, widgets, state_manager, people_table):
        widgets.values["people:filter:name"] = "an"
        render_table(people_table, state_manager, key="people")
        render_table(people_table, state_manager, key="people")

        assert state_manager.counter == 1

    def test_cleared_select_drops_filter(self, widgets, state_manager, people_table):
        widgets.values["people:filter:status"] = "inactive"
        assert render_table(people_table, state_manager, key="people")["filtered_count"] == 1

        widgets.values["people:filter:status"] = None
        view = render_table(people_table, state_manager, key="people")

        state = state_manager.get_table_state("people")
        assert state.filters.applied == {}
        assert state.filters.values == {}
        assert state_manager.counter == 2
        assert view["filtered_count"] == 5

    def test_clear_button(self, widgets, state_manager, people_table, mock_streamlit):
        widgets.values["people:filter:name"] = "an"
        render_table(people_table, state_manager, key="people")

        mock_streamlit["people:filter:name"] = "an"
        widgets.values["people:clear"] = True
        view = render_table(people_table, state_manager, key="people")

        assert widgets.st["button"].call_args_list[0].args[0] == CLEAR_FILTERS_LABEL
        assert state_manager.get_table_state("people").filters.applied == {}
        assert "people:filter:name" not in mock_streamlit
        widgets.st["rerun"].assert_called_once()
        assert view["filtered_count"] == 5

    def test_page_link_moves_page(self, widgets, state_manager, people_table):
        widgets.values["people:page:2"] = True

        render_table(people_table, state_manager, key="people")

        assert state_manager.get_table_state("people").current_page == 2
        assert state_manager.counter == 1
        widgets.st["rerun"].assert_called_once()

    def test_no_page_links_when_rows_fit(self, widgets, state_manager, sample_rows, sample_columns):
        table = Table(data=sample_rows, columns=sample_columns)

        view = render_table(table, state_manager, key="small")

        assert view["show_pagination"] is False
        widgets.st["button"].assert_not_called()

    def test_loading_placeholder(self, widgets, state_manager, sample_rows, sample_columns):
        table = Table(data=sample_rows, columns=sample_columns, loading=True)

        assert render_table(table, state_manager, key="loading") == {}
        widgets.st["write"].assert_called_once_with(LOADING_MESSAGE)
        widgets.st["dataframe"].assert_not_called()

    def test_call_uses_default_state_manager(self, widgets, people_table):
        from filtertable.core.state import reset_default_state_manager

        reset_default_state_manager()
        try:
            view = people_table(key="people")
        finally:
            reset_default_state_manager()

        assert view["filtered_count"] == 5


class TestFilterCache:
    """Tests for the per-component filtered-row cache."""

    def test_cache_hit_skips_filtering(self, mock_streamlit, people_table):
        state = people_table.state
        with patch.object(people_table, "filter_rows", wraps=people_table.filter_rows) as spy:
            first = filter_rows_cached(people_table, "table:people", state)
            second = filter_rows_cached(people_table, "table:people", state)

        assert spy.call_count == 1
        assert first is second

    def test_filter_change_recomputes(self, mock_streamlit, people_table):
        state = people_table.state
        filter_rows_cached(people_table, "table:people", state)

        people_table.handle_filter_change("status", "inactive")
        rows = filter_rows_cached(people_table, "table:people", state)

        assert [row["id"] for row in rows] == [3]

    def test_toggle_values_do_not_collide(self, mock_streamlit, people_table):
        """Toggle True and an empty string are different cache keys."""
        state = people_table.state
        people_table.handle_filter_change("active", True)
        as_bool = filter_rows_cached(people_table, "table:people", state)

        people_table.handle_filter_change("active", "")
        as_empty = filter_rows_cached(people_table, "table:people", state)

        assert [row["id"] for row in as_bool] == [1, 2, 5]
        assert [row["id"] for row in as_empty] == [3, 4]

    def test_global_search_scope_change_recomputes(
        self, mock_streamlit, sample_rows, sample_columns
    ):
        """A table rebuilt with visible-only search does not reuse old rows."""
        state = TableState()
        all_fields = Table(data=sample_rows, columns=sample_columns, show_global_search=True)
        visible_only = Table(
            data=sample_rows,
            columns=sample_columns,
            show_global_search=True,
            global_search_visible_only=True,
        )
        all_fields.handle_filter_change(GLOBAL_SEARCH_KEY, "green", state)

        assert [row["id"] for row in filter_rows_cached(all_fields, "table:people", state)] == [4]
        assert filter_rows_cached(visible_only, "table:people", state) == []

    def test_filter_type_change_recomputes(self, mock_streamlit, sample_rows, sample_columns):
        """The same applied value is matched by the new definition's type."""
        state = TableState()
        as_input = Table(
            data=sample_rows,
            columns=sample_columns,
            filters=[{"type": "input", "dataIndex": "status"}],
        )
        as_select = Table(
            data=sample_rows,
            columns=sample_columns,
            filters=[{"type": "select", "dataIndex": "status"}],
        )
        as_input.handle_filter_change("status", "active", state)

        assert len(filter_rows_cached(as_input, "table:people", state)) == 5
        rows = filter_rows_cached(as_select, "table:people", state)
        assert [row["id"] for row in rows] == [1, 4, 5]

    def test_one_entry_per_component(self, mock_streamlit, people_table):
        filter_rows_cached(people_table, "table:people", people_table.state)
        people_table.handle_filter_change("name", "a")
        filter_rows_cached(people_table, "table:people", people_table.state)

        assert len(mock_streamlit[_COMPONENT_DATA_CACHE_KEY]) == 1

    def test_clear_component_cache(self, mock_streamlit, people_table):
        filter_rows_cached(people_table, "table:people", people_table.state)

        clear_component_cache()

        assert mock_streamlit[_COMPONENT_DATA_CACHE_KEY] == {}
