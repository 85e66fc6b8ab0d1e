"""Filter definitions, applied-filter state and the filtering engine."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .registry import get_matcher, register_matcher

logger = logging.getLogger(__name__)

# Reserved key used by the "Global Search" box. It never matches a filter
# definition, so it always resolves to the global search matcher.
GLOBAL_SEARCH_KEY = "globalSearch"


class FilterType(str, Enum):
    """Matching rule of a filter."""

    SELECT = "select"
    INPUT = "input"
    TOGGLE = "toggle"
    GLOBAL_SEARCH = "globalSearch"


# Types a FilterDefinition may declare. GLOBAL_SEARCH is only ever a fallback.
DEFINABLE_TYPES = (FilterType.SELECT, FilterType.INPUT, FilterType.TOGGLE)


@dataclass
class FilterDefinition:
    """
    Describes how one field can be filtered.

    Attributes:
        type: One of select, input, toggle
        data_index: Row field the filter applies to. Also the key of the
            filter in the applied-filters mapping.
        label: Label shown next to the filter widget
        placeholder: Placeholder shown by select widgets
        data: Options offered by select widgets
        on_filter_change: Optional callback ``(value, key, filter_values)``.
            When present it replaces the default merge into the applied
            filters for this key.
    """

    type: FilterType
    data_index: str
    label: Optional[str] = None
    placeholder: Optional[str] = None
    data: List[Any] = field(default_factory=list)
    on_filter_change: Optional[Callable[[Any, str, Dict[str, Any]], Any]] = None

    def __post_init__(self) -> None:
        try:
            self.type = FilterType(self.type)
        except ValueError:
            raise ValueError(
                f"Unknown filter type '{self.type}' for '{self.data_index}'. "
                f"Expected one of: {[t.value for t in DEFINABLE_TYPES]}"
            ) from None
        if self.type not in DEFINABLE_TYPES:
            raise ValueError(
                f"Filter type '{self.type.value}' cannot be declared; "
                f"expected one of: {[t.value for t in DEFINABLE_TYPES]}"
            )
        self.data = list(self.data or [])

    @property
    def has_change_handler(self) -> bool:
        """True if this filter overrides the default change behaviour."""
        return callable(self.on_filter_change)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterDefinition":
        """
        Create from a plain dict.

        Accepts both ``data_index``/``on_filter_change`` and the camelCase
        ``dataIndex``/``onFilterChange`` spellings.
        """
        return cls(
            type=data["type"],
            data_index=data.get("data_index", data.get("dataIndex")),
            label=data.get("label"),
            placeholder=data.get("placeholder"),
            data=data.get("data") or [],
            on_filter_change=data.get(
                "on_filter_change", data.get("onFilterChange")
            ),
        )


FilterLike = Union[FilterDefinition, Mapping[str, Any]]


@dataclass
class FilterState:
    """
    Mutable filter state owned by a single FilterEngine.

    Attributes:
        applied: Filter key -> value used for matching
        values: Filter key -> value shown in the filter widget. Diverges
            from ``applied`` when an ``on_filter_change`` override handles
            a key.
    """

    applied: Dict[str, Any] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Check if no filter is applied (all rows pass)."""
        return not self.applied

    def reset(self) -> None:
        self.applied.clear()
        self.values.clear()


# =============================================================================
# Matchers
# =============================================================================


@register_matcher(FilterType.SELECT)
def match_select(row: Mapping[str, Any], key: str, value: Any) -> bool:
    """Exact, case-sensitive string equality."""
    return str(row.get(key)) == str(value)


@register_matcher(FilterType.INPUT)
def match_input(row: Mapping[str, Any], key: str, value: Any) -> bool:
    """Case-insensitive substring test."""
    return str(value).lower() in str(row.get(key)).lower()


@register_matcher(FilterType.TOGGLE)
def match_toggle(row: Mapping[str, Any], key: str, value: Any) -> bool:
    """Truthiness of the field equals truthiness of the applied value."""
    return bool(row.get(key)) == bool(value)


@register_matcher(FilterType.GLOBAL_SEARCH)
def match_global_search(row: Mapping[str, Any], key: str, value: Any) -> bool:
    """Case-insensitive substring test against every field of the row."""
    needle = str(value).lower()
    return any(needle in str(field_value).lower() for field_value in row.values())


# =============================================================================
# Engine
# =============================================================================


class FilterEngine:
    """
    Applies the current filter values to a row set.

    The engine owns a FilterState and reads the filter definitions it was
    built with. ``apply`` is a pure function of those two and the rows
    passed in: every call recomputes the full filtered set, combining all
    applied filters with AND.

    Keys with no matching definition (including the reserved
    ``"globalSearch"`` key) are matched with the global search rule, which
    scans every field of the row, including fields of hidden columns.
    Pass ``restrict_global_search_to`` to scan only the given fields.

    Example:
        engine = FilterEngine([{"type": "select", "dataIndex": "status"}])
        engine.set_filter_value("status", "active")
        active_rows = engine.apply(rows)
    """

    def __init__(
        self,
        definitions: Optional[Iterable[FilterLike]] = None,
        state: Optional[FilterState] = None,
        restrict_global_search_to: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the FilterEngine.

        Args:
            definitions: FilterDefinition objects or plain dicts
            state: State object to operate on. A fresh one is created when
                omitted; pass one in to keep state across reruns.
            restrict_global_search_to: Optional field names global search is
                limited to. None (default) scans every field.
        """
        self._definitions: List[FilterDefinition] = [
            d if isinstance(d, FilterDefinition) else FilterDefinition.from_dict(d)
            for d in (definitions or [])
        ]
        # First definition wins when two share a data_index
        self._by_key: Dict[str, FilterDefinition] = {}
        for definition in self._definitions:
            self._by_key.setdefault(definition.data_index, definition)

        self._state = state if state is not None else FilterState()
        self._global_search_fields = (
            frozenset(restrict_global_search_to)
            if restrict_global_search_to is not None
            else None
        )

    @property
    def definitions(self) -> List[FilterDefinition]:
        return list(self._definitions)

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def applied_filters(self) -> Dict[str, Any]:
        """Snapshot of the applied filters."""
        return dict(self._state.applied)

    @property
    def filter_values(self) -> Dict[str, Any]:
        """Snapshot of the values shown in filter widgets."""
        return dict(self._state.values)

    def get_definition(self, key: str) -> Optional[FilterDefinition]:
        """Return the definition for a filter key, or None."""
        return self._by_key.get(key)

    def resolve_type(self, key: str) -> FilterType:
        """Return the matching rule used for a filter key."""
        definition = self._by_key.get(key)
        if definition is None:
            return FilterType.GLOBAL_SEARCH
        return definition.type

    def set_filter_value(self, key: str, value: Any) -> None:
        """
        Merge ``{key: value}`` into the applied filters.

        Other keys are left untouched. The value is not validated against
        the filter's declared type.
        """
        self._state.applied[key] = value

    def handle_filter_change(self, key: str, value: Any) -> None:
        """
        Route a filter widget change.

        The widget value is always recorded. If the filter definition has an
        ``on_filter_change`` callback, it is called with
        ``(value, key, filter_values)`` and the applied filters are left
        alone; otherwise the value is merged via ``set_filter_value``.

        Args:
            key: Filter key (a data index or ``"globalSearch"``)
            value: New widget value
        """
        self._state.values[key] = value

        definition = self._by_key.get(key)
        if definition is not None and definition.has_change_handler:
            definition.on_filter_change(value, key, dict(self._state.values))
            return

        self.set_filter_value(key, value)

    def remove_filter(self, key: str) -> None:
        """
        Drop a single filter, e.g. when a select widget is cleared.

        The widget value is removed. With an ``on_filter_change`` callback
        the callback is called with ``None`` and the applied filters are
        left alone; otherwise ``key`` is removed from the applied filters.
        """
        self._state.values.pop(key, None)

        definition = self._by_key.get(key)
        if definition is not None and definition.has_change_handler:
            definition.on_filter_change(None, key, dict(self._state.values))
            return

        self._state.applied.pop(key, None)

    def clear(self) -> None:
        """Reset applied filters and widget values. Definitions are kept."""
        self._state.reset()

    def matches(self, row: Mapping[str, Any]) -> bool:
        """Check a single row against every applied filter."""
        return all(
            matcher(self._row_view(row, filter_type), key, value)
            for key, value, filter_type, matcher in self._resolve_applied()
        )

    def apply(self, rows: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        """
        Filter rows by the applied filters.

        Args:
            rows: Source rows. Not mutated.

        Returns:
            New list with the rows that match every applied filter, in
            their original order. All rows when no filter is applied.
        """
        resolved = self._resolve_applied()
        if not resolved:
            return list(rows)

        result = [
            row
            for row in rows
            if all(
                matcher(self._row_view(row, filter_type), key, value)
                for key, value, filter_type, matcher in resolved
            )
        ]
        logger.debug(
            "Filtered %d rows down to %d with %d filter(s)",
            len(rows),
            len(result),
            len(resolved),
        )
        return result

    def _resolve_applied(self) -> List[tuple]:
        resolved = []
        for key, value in self._state.applied.items():
            filter_type = self.resolve_type(key)
            if filter_type is FilterType.GLOBAL_SEARCH and key != GLOBAL_SEARCH_KEY:
                logger.debug(
                    "No filter definition for '%s', using global search", key
                )
            resolved.append((key, value, filter_type, get_matcher(filter_type)))
        return resolved

    def _row_view(
        self, row: Mapping[str, Any], filter_type: FilterType
    ) -> Mapping[str, Any]:
        if (
            filter_type is FilterType.GLOBAL_SEARCH
            and self._global_search_fields is not None
        ):
            return {k: v for k, v in row.items() if k in self._global_search_fields}
        return row

    def __repr__(self) -> str:
        return (
            f"FilterEngine(definitions={[d.data_index for d in self._definitions]}, "
            f"applied={self._state.applied})"
        )
