"""Bridge between Table components and Streamlit widgets."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

import streamlit as st

from ..core.filters import FilterType

if TYPE_CHECKING:
    from ..components.table import Table
    from ..core.state import StateManager, TableState

logger = logging.getLogger(__name__)

# Session state key for per-component filtered-row cache
# Each component stores exactly one entry (current rows + filter state)
_COMPONENT_DATA_CACHE_KEY = "_filtertable_component_data_cache"

LOADING_MESSAGE = "Loading please wait..."
GLOBAL_SEARCH_LABEL = "Global Search"
CLEAR_FILTERS_LABEL = "Clear Filters"
DEFAULT_SELECT_PLACEHOLDER = "Select an option"


def _get_component_cache() -> Dict[str, Any]:
    """Get per-component data cache from session state."""
    if _COMPONENT_DATA_CACHE_KEY not in st.session_state:
        st.session_state[_COMPONENT_DATA_CACHE_KEY] = {}
    return st.session_state[_COMPONENT_DATA_CACHE_KEY]


def clear_component_cache() -> None:
    """
    Clear all per-component cached data.

    Call this when source rows are replaced in place and the content hash
    cannot see the change.
    """
    if _COMPONENT_DATA_CACHE_KEY in st.session_state:
        st.session_state[_COMPONENT_DATA_CACHE_KEY].clear()


def _get_cached_rows(
    component_id: str, cache_key: Tuple[Any, ...]
) -> Optional[List[Mapping[str, Any]]]:
    """
    Get cached filtered rows for a component if rows and filters match.

    Args:
        component_id: Unique identifier for this component
        cache_key: (rows hash, filter configuration, applied-filter snapshot)

    Returns:
        The cached filtered rows on a hit, None otherwise
    """
    cache = _get_component_cache()
    if component_id in cache:
        cached_key, rows = cache[component_id]
        if cached_key == cache_key:
            return rows
    return None


def _set_cached_rows(
    component_id: str,
    cache_key: Tuple[Any, ...],
    rows: List[Mapping[str, Any]],
) -> None:
    """Cache filtered rows for a component, replacing any previous entry."""
    _get_component_cache()[component_id] = (cache_key, rows)


def filter_rows_cached(
    table: "Table", component_id: str, state: "TableState"
) -> List[Mapping[str, Any]]:
    """
    Filter a table's rows, reusing the last result when nothing changed.

    The result is recomputed in full whenever the source rows, the filter
    configuration or the applied filters differ from the cached entry.

    Args:
        table: The table to filter
        component_id: Unique identifier for this component
        state: TableState holding the applied filters

    Returns:
        Filtered rows
    """
    cache_key = (
        table.get_data_hash(),
        table.get_config_cache_key(),
        table.get_filter_cache_key(state),
    )
    cached = _get_cached_rows(component_id, cache_key)
    if cached is not None:
        logger.debug("Filter cache hit for %s", component_id)
        return cached

    logger.debug("Filter cache miss for %s", component_id)
    rows = table.filter_rows(state)
    _set_cached_rows(component_id, cache_key, rows)
    return rows


def _widget_key(key: str, data_index: str) -> str:
    return f"{key}:filter:{data_index}"


def _render_filter_widget(spec: Dict[str, Any], widget_key: str) -> Any:
    """
    Draw one filter widget.

    Args:
        spec: Filter description from ``Table.get_component_args()``
        widget_key: Streamlit widget key

    Returns:
        The widget's current value (None for a select with no choice yet)
    """
    label = spec.get("label") or ""
    filter_type = FilterType(spec["type"])

    if filter_type is FilterType.SELECT:
        return st.selectbox(
            label,
            options=spec.get("data") or [],
            index=None,
            placeholder=spec.get("placeholder") or DEFAULT_SELECT_PLACEHOLDER,
            key=widget_key,
        )
    if filter_type is FilterType.TOGGLE:
        return st.checkbox(label, key=widget_key)
    return st.text_input(label, key=widget_key)


def _empty_value(filter_type: str) -> Any:
    if filter_type == FilterType.TOGGLE.value:
        return False
    if filter_type == FilterType.SELECT.value:
        return None
    return ""


def _render_filters(
    table: "Table",
    state: "TableState",
    state_manager: "StateManager",
    key: str,
) -> None:
    """
    Draw the filter bar and route widget changes into the table state.

    A widget whose value differs from the recorded filter value triggers
    ``Table.handle_filter_change``. Untouched widgets (empty text, unchecked
    box, no selection) are not applied. A select cleared back to no
    selection drops its filter via ``Table.remove_filter``.
    """
    args = table.get_component_args()
    specs = list(args["filters"])
    if args["showGlobalSearch"]:
        specs.append(
            {
                "type": FilterType.INPUT.value,
                "dataIndex": args["globalSearchKey"],
                "label": GLOBAL_SEARCH_LABEL,
            }
        )
    show_clear = args["showClearFilters"]

    slots = len(specs) + (1 if show_clear else 0)
    if slots == 0:
        return
    columns = st.columns(slots)

    for column, spec in zip(columns, specs):
        data_index = spec["dataIndex"]
        with column:
            value = _render_filter_widget(spec, _widget_key(key, data_index))
        current = state.filters.values.get(data_index, _empty_value(spec["type"]))
        if value == current:
            continue
        if value is None:
            # select cleared back to its placeholder
            table.remove_filter(data_index, state)
        else:
            table.handle_filter_change(data_index, value, state)
        state_manager.mark_changed()

    if show_clear:
        with columns[-1]:
            clicked = st.button(CLEAR_FILTERS_LABEL, key=f"{key}:clear")
        if clicked:
            table.clear_filters(state)
            for spec in specs:
                st.session_state.pop(_widget_key(key, spec["dataIndex"]), None)
            state_manager.mark_changed()
            st.rerun()


def _render_pagination(
    table: "Table",
    state: "TableState",
    state_manager: "StateManager",
    key: str,
    page_count: int,
) -> None:
    """Draw page links 1..page_count and move pages on click."""
    if page_count < 1:
        return
    columns = st.columns(page_count)
    for page_number, column in enumerate(columns, start=1):
        with column:
            clicked = st.button(
                str(page_number),
                key=f"{key}:page:{page_number}",
                disabled=page_number == state.current_page,
            )
        if clicked:
            table.set_page(page_number, state)
            state_manager.mark_changed()
            st.rerun()


def render_table(
    table: "Table",
    state_manager: "StateManager",
    key: str,
) -> Dict[str, Any]:
    """
    Render a table in Streamlit.

    This function:
    1. Gets the table's persisted TableState from the StateManager
    2. Draws the filter bar and applies any widget changes
    3. Filters rows (cached per component, recomputed on any change)
    4. Slices the current page and draws the table body
    5. Draws page links when rows overflow one page

    Args:
        table: The table to render
        state_manager: StateManager holding per-session table state
        key: Unique key for this table's widgets and state

    Returns:
        The view payload from ``Table.prepare_view``, or an empty dict while
        loading
    """
    if table.loading:
        st.write(LOADING_MESSAGE)
        return {}

    state = state_manager.get_table_state(key, current_page=table.state.current_page)

    _render_filters(table, state, state_manager, key)

    component_id = f"{table._component_type}:{key}"
    filtered_rows = filter_rows_cached(table, component_id, state)
    view = table.prepare_view(state, filtered_rows=filtered_rows)

    st.dataframe(view["table"], hide_index=True)

    if view["show_pagination"]:
        _render_pagination(table, state, state_manager, key, view["page_count"])

    return view
