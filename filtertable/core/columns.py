"""Column definitions, visibility and cell display helpers."""

import numbers
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

# Values of ``visible`` that hide a column. Anything else, including a
# missing attribute, None and the empty string, keeps the column visible.
HIDDEN_VALUES = (False, "0", "false", 0)

_UNSET = object()


@dataclass
class ColumnDefinition:
    """
    Describes how one row field is labelled, shown and hidden.

    Attributes:
        key: Unique column identifier
        data_index: Row field shown in this column
        title: Header text. Falls back to data_index when empty.
        visible: Any value; hidden only for values in HIDDEN_VALUES
        render: Optional ``render(value, row)`` producing the cell content
    """

    key: str
    data_index: str
    title: Optional[str] = None
    visible: Any = True
    render: Optional[Callable[[Any, Mapping[str, Any]], Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColumnDefinition":
        """
        Create from a plain dict.

        Accepts ``data_index`` or ``dataIndex``. ``key`` defaults to the
        data index. An absent ``visible`` counts as visible.
        """
        data_index = data.get("data_index", data.get("dataIndex"))
        if data_index is None:
            raise ValueError(f"Column definition needs a data index: {dict(data)}")
        return cls(
            key=data.get("key", data_index),
            data_index=data_index,
            title=data.get("title"),
            visible=data.get("visible", True),
            render=data.get("render"),
        )


ColumnLike = Union[ColumnDefinition, Mapping[str, Any]]


def to_column_definitions(columns: Iterable[ColumnLike]) -> List[ColumnDefinition]:
    """Normalise dicts and ColumnDefinitions to a list of ColumnDefinitions."""
    return [
        c if isinstance(c, ColumnDefinition) else ColumnDefinition.from_dict(c)
        for c in columns
    ]


def _get(column: ColumnLike, attribute: str, camel: Optional[str] = None) -> Any:
    if isinstance(column, ColumnDefinition):
        return getattr(column, attribute)
    value = column.get(attribute, _UNSET)
    if value is _UNSET and camel is not None:
        value = column.get(camel, _UNSET)
    return None if value is _UNSET else value


def is_visible(column: ColumnLike) -> bool:
    """
    Check whether a column should be rendered.

    A column is hidden iff its ``visible`` value is one of
    ``False``, ``"0"``, ``"false"`` or ``0``. This is not generic
    truthiness: ``""``, ``None`` and a missing attribute are all visible.

    Args:
        column: ColumnDefinition or dict

    Returns:
        True if the column is visible
    """
    if isinstance(column, ColumnDefinition):
        visible = column.visible
    elif "visible" not in column:
        return True
    else:
        visible = column["visible"]
    return not _is_hidden_value(visible)


def _is_hidden_value(visible: Any) -> bool:
    if isinstance(visible, str):
        return visible in HIDDEN_VALUES
    if isinstance(visible, bool):
        return visible is False
    # 0 and 0.0 hide; True == 1 never reaches here
    if isinstance(visible, numbers.Number):
        return visible == 0
    return False


def visible_columns(columns: Iterable[ColumnLike]) -> List[ColumnLike]:
    """Return the visible columns, in order."""
    return [c for c in columns if is_visible(c)]


def column_title(column: ColumnLike) -> str:
    """Header text: the title, or the data index when the title is empty."""
    return _get(column, "title") or _get(column, "data_index", "dataIndex")


def format_value(value: Any) -> str:
    """
    Convert a cell value to text.

    Booleans render as ``"True"``/``"False"``; everything else uses ``str``.
    """
    if isinstance(value, bool):
        return "True" if value else "False"
    return str(value)


def display_value(column: ColumnLike, row: Mapping[str, Any]) -> Any:
    """
    Cell content for ``column`` in ``row``.

    Args:
        column: ColumnDefinition or dict
        row: The row being rendered

    Returns:
        ``render(value, row)`` when the column has a callable renderer,
        else the formatted value
    """
    data_index = _get(column, "data_index", "dataIndex")
    value = row.get(data_index)
    render = _get(column, "render")
    if callable(render):
        return render(value, row)
    return format_value(value)


def get_row_key(row: Mapping[str, Any], row_key: Optional[str] = None) -> Any:
    """
    Identity of a row for the renderer.

    Returns ``row[row_key]`` when ``row_key`` is set and present, else
    ``row["key"]`` when present, else None. Uniqueness is the caller's
    responsibility.
    """
    if row_key and row_key in row:
        return row[row_key]
    if "key" in row:
        return row["key"]
    return None
