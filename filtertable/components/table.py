"""Filterable, paginated table component."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.columns import (
    ColumnLike,
    column_title,
    get_row_key,
    is_visible,
    to_column_definitions,
)
from ..core.filters import GLOBAL_SEARCH_KEY, FilterEngine, FilterLike
from ..core.pagination import PageConfig, PageConfigLike, PageCountPolicy, Paginator
from ..core.state import StateManager, TableState
from ..preprocessing.rows import (
    TableData,
    build_display_frame,
    compute_rows_hash,
    make_filter_cache_key,
    to_rows,
)

logger = logging.getLogger(__name__)


class Table:
    """
    Table with per-column filters, a global search and pagination.

    Features:
    - select, input and toggle filters, combined with AND
    - Optional "Global Search" box matching any field of a row
    - Column visibility and custom cell renderers
    - Pagination with page links when rows overflow one page
    - Optional per-filter ``on_filter_change`` override

    The table keeps no rendering state of its own: filter values and the
    current page live in a TableState. When rendered through ``__call__``
    that state is kept in Streamlit's session_state so it survives reruns;
    used directly, the table falls back to its own TableState.

    Example:
        table = Table(
            data=[{"id": 1, "name": "Al", "active": True}],
            columns=[{"key": "name", "title": "Name", "dataIndex": "name"}],
            filters=[{"type": "toggle", "dataIndex": "active", "label": "Active"}],
            show_global_search=True,
            pagination={"currentPage": 1, "pageLength": 25},
        )
        table(key="people")
    """

    _component_type: str = "table"

    def __init__(
        self,
        data: TableData,
        columns: Iterable[ColumnLike],
        filters: Optional[Iterable[FilterLike]] = None,
        row_key: Optional[str] = None,
        loading: bool = False,
        show_global_search: bool = False,
        show_clear_filters: bool = True,
        pagination: Union[PageConfigLike, bool, None] = None,
        page_count_policy: Union[PageCountPolicy, str, None] = None,
        global_search_visible_only: bool = False,
        key: Optional[str] = None,
    ):
        """
        Initialize the Table component.

        Args:
            data: Rows as a list of dicts, a polars DataFrame/LazyFrame or a
                pandas DataFrame
            columns: Column definitions (ColumnDefinition or dicts with
                key, title, dataIndex, visible, render)
            filters: Filter definitions (FilterDefinition or dicts with
                type, dataIndex, label, placeholder, data, onFilterChange)
            row_key: Field holding each row's identity. Falls back to the
                row's "key" field.
            loading: Show a loading placeholder instead of the table
            show_global_search: Show the "Global Search" box
            show_clear_filters: Show the "Clear Filters" button (only when
                there are filters or a global search box)
            pagination: PageConfig or dict with currentPage/pageLength and
                optional onChange. Defaults to page 1 of 50 rows. False
                shows every row on a single page.
            page_count_policy: "floor" (default) or "ceil". None reads
                FILTERTABLE_PAGE_COUNT_POLICY.
            global_search_visible_only: Limit global search to the fields of
                visible columns. By default every field of a row is searched.
            key: Default Streamlit key used by ``__call__``

        Raises:
            InvalidPageConfiguration: If the page configuration is invalid
        """
        self._rows = to_rows(data)
        self._data_hash: Optional[str] = None
        self._columns = to_column_definitions(columns)
        self._filter_definitions = FilterEngine(filters).definitions
        self._row_key = row_key
        self._loading = loading
        self._show_global_search = show_global_search
        self._show_clear_filters = show_clear_filters
        self._key = key

        self._pagination_enabled = pagination is not False
        if pagination is None or pagination is False or pagination is True:
            self._page_config = PageConfig()
        elif isinstance(pagination, PageConfig):
            self._page_config = pagination
        else:
            self._page_config = PageConfig.from_dict(pagination)
        self._page_count_policy = PageCountPolicy.resolve(page_count_policy)

        self._global_search_fields = (
            [c.data_index for c in self._columns if is_visible(c)]
            if global_search_visible_only
            else None
        )

        self._state = TableState(current_page=self._page_config.current_page)
        logger.debug(
            "Table with %d rows, %d columns, %d filters, page length %d",
            len(self._rows),
            len(self._columns),
            len(self._filter_definitions),
            self._page_config.page_length,
        )

    @property
    def rows(self) -> List[Mapping[str, Any]]:
        return self._rows

    @property
    def columns(self):
        return list(self._columns)

    @property
    def filter_definitions(self):
        return list(self._filter_definitions)

    @property
    def state(self) -> TableState:
        """The table's own state, used when no state is passed in."""
        return self._state

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def show_clear_filters(self) -> bool:
        """Clear button is offered only when there is something to clear."""
        return self._show_clear_filters and bool(
            self._filter_definitions or self._show_global_search
        )

    def _resolve_state(self, state: Optional[TableState]) -> TableState:
        return self._state if state is None else state

    def get_engine(self, state: Optional[TableState] = None) -> FilterEngine:
        """Build a FilterEngine operating on ``state``'s filter state."""
        state = self._resolve_state(state)
        return FilterEngine(
            self._filter_definitions,
            state=state.filters,
            restrict_global_search_to=self._global_search_fields,
        )

    def get_paginator(self, state: Optional[TableState] = None) -> Paginator:
        """Build a Paginator positioned at ``state``'s current page."""
        state = self._resolve_state(state)
        paginator = Paginator(self._page_config, policy=self._page_count_policy)
        paginator.restore_page(state.current_page)
        return paginator

    def handle_filter_change(
        self, key: str, value: Any, state: Optional[TableState] = None
    ) -> None:
        """
        Apply a filter widget change.

        Args:
            key: Filter data index, or "globalSearch"
            value: New widget value
            state: TableState to update (defaults to the table's own)
        """
        self.get_engine(state).handle_filter_change(key, value)

    def remove_filter(self, key: str, state: Optional[TableState] = None) -> None:
        """Drop one filter and its widget value."""
        self.get_engine(state).remove_filter(key)

    def clear_filters(self, state: Optional[TableState] = None) -> None:
        """Reset applied filters and filter widget values."""
        self.get_engine(state).clear()

    def set_page(self, page: int, state: Optional[TableState] = None) -> None:
        """
        Move to ``page``.

        Calls the configured onChange callback. The page is not checked
        against the page count.
        """
        state = self._resolve_state(state)
        paginator = self.get_paginator(state)
        paginator.set_page(page)
        state.current_page = paginator.current_page

    def filter_rows(self, state: Optional[TableState] = None) -> List[Mapping[str, Any]]:
        """Rows matching every applied filter, in source order."""
        return self.get_engine(state).apply(self._rows)

    def get_data_hash(self) -> str:
        """Content hash of the source rows."""
        if self._data_hash is None:
            self._data_hash = compute_rows_hash(self._rows)
        return self._data_hash

    def get_config_cache_key(self) -> Tuple[Any, ...]:
        """
        Hashable snapshot of the filter configuration.

        Covers each definition's type and data index and the global search
        scope, so a table rebuilt with other filters never reuses rows
        filtered under the old configuration.
        """
        definitions = tuple((d.type.value, d.data_index) for d in self._filter_definitions)
        search_fields = (
            None if self._global_search_fields is None else tuple(self._global_search_fields)
        )
        return (definitions, search_fields)

    def get_filter_cache_key(self, state: Optional[TableState] = None):
        """Hashable snapshot of the applied filters."""
        state = self._resolve_state(state)
        return make_filter_cache_key(state.filters.applied)

    def prepare_view(
        self,
        state: Optional[TableState] = None,
        filtered_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Prepare everything the renderer needs for one pass.

        Args:
            state: TableState to read (defaults to the table's own)
            filtered_rows: Precomputed result of ``filter_rows(state)``;
                computed when omitted

        Returns:
            Dict with:
                rows: Rows on the current page
                filtered_count: Number of rows matching the filters
                page_count: Number of page links
                show_pagination: Whether page links are shown
                current_page: Current page number
                columns: Headers of visible columns
                table: pandas DataFrame of display values
                row_keys: Identity of each row on the page
                _hash: Content hash of the source rows
        """
        state = self._resolve_state(state)
        if filtered_rows is None:
            filtered_rows = self.filter_rows(state)

        paginator = self.get_paginator(state)
        if self._pagination_enabled:
            page_rows = paginator.slice(filtered_rows)
            page_count = paginator.page_count(filtered_rows)
            show_pagination = paginator.should_paginate(filtered_rows)
        else:
            page_rows = list(filtered_rows)
            page_count = 1
            show_pagination = False

        return {
            "rows": list(page_rows),
            "filtered_count": len(filtered_rows),
            "page_count": page_count,
            "show_pagination": show_pagination,
            "current_page": state.current_page,
            "columns": [column_title(c) for c in self._columns if is_visible(c)],
            "table": build_display_frame(page_rows, self._columns, self._row_key),
            "row_keys": [get_row_key(row, self._row_key) for row in page_rows],
            "_hash": self.get_data_hash(),
        }

    def get_component_args(self) -> Dict[str, Any]:
        """
        Get the configuration the renderer draws widgets from.

        Returns:
            Dict with filter widget descriptions and display flags
        """
        filters = [
            {
                "type": d.type.value,
                "dataIndex": d.data_index,
                "label": d.label,
                "placeholder": d.placeholder,
                "data": list(d.data),
            }
            for d in self._filter_definitions
        ]
        args: Dict[str, Any] = {
            "componentType": self._component_type,
            "filters": filters,
            "showGlobalSearch": self._show_global_search,
            "globalSearchKey": GLOBAL_SEARCH_KEY,
            "showClearFilters": self.show_clear_filters,
            "loading": self._loading,
            "pagination": self._pagination_enabled,
            "pageLength": self._page_config.page_length,
            "pageCountPolicy": self._page_count_policy.value,
        }
        return args

    def __call__(
        self,
        key: Optional[str] = None,
        state_manager: Optional[StateManager] = None,
    ) -> Dict[str, Any]:
        """
        Render the table in Streamlit.

        Args:
            key: Unique key for this table's widgets and state. Defaults to
                the key given at construction, then "filtertable".
            state_manager: Optional StateManager. If not provided, uses the
                default shared StateManager.

        Returns:
            The view payload that was rendered (see ``prepare_view``)
        """
        from ..core.state import get_default_state_manager
        from ..rendering.bridge import render_table

        if state_manager is None:
            state_manager = get_default_state_manager()

        return render_table(
            table=self,
            state_manager=state_manager,
            key=key or self._key or "filtertable",
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"rows={len(self._rows)}, "
            f"columns={[c.key for c in self._columns]}, "
            f"filters={[d.data_index for d in self._filter_definitions]}, "
            f"page_length={self._page_config.page_length})"
        )
