"""Row normalisation, hashing and display-frame construction."""

import hashlib
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd
import polars as pl

from ..core.columns import ColumnLike, column_title, display_value, get_row_key, visible_columns

TableData = Union[
    Sequence[Mapping[str, Any]], pl.DataFrame, pl.LazyFrame, pd.DataFrame, None
]


def to_rows(data: TableData) -> List[Mapping[str, Any]]:
    """
    Normalise table data to a list of row mappings.

    Polars and pandas frames are converted to one dict per row. pandas
    columns keep their Python objects, so mixed-type columns are allowed,
    and missing values become None. Sequences of mappings are returned as
    a new list holding the same row objects.

    Args:
        data: Rows, a polars DataFrame/LazyFrame, a pandas DataFrame, or None

    Returns:
        List of rows
    """
    if data is None:
        return []
    if isinstance(data, pl.LazyFrame):
        return data.collect().to_dicts()
    if isinstance(data, pl.DataFrame):
        return data.to_dicts()
    if isinstance(data, pd.DataFrame):
        frame = data.astype(object)
        return frame.where(frame.notna(), None).to_dict("records")
    return list(data)


def compute_rows_hash(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Compute a content hash for a row set.

    Every row contributes, so any change to any row produces a different
    hash and invalidates cached filter results.

    Args:
        rows: Rows to hash

    Returns:
        SHA256 hash string
    """
    hasher = hashlib.sha256()
    hasher.update(str(len(rows)).encode())
    for row in rows:
        hasher.update(b"|")
        hasher.update(repr(tuple(row.items())).encode())
    return hasher.hexdigest()


def make_filter_cache_key(applied: Dict[str, Any]) -> Tuple[Tuple[str, str], ...]:
    """
    Create a hashable cache key from applied filters.

    Values are stored by type and repr so that ``True``, ``1`` and ``"1"``
    give different keys.

    Args:
        applied: Filter key -> applied value

    Returns:
        Sorted tuple of (key, value representation) pairs
    """
    return tuple(
        sorted((key, f"{type(value).__name__}:{value!r}") for key, value in applied.items())
    )


def build_display_frame(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[ColumnLike],
    row_key: Optional[str] = None,
) -> pd.DataFrame:
    """
    Build the frame handed to the table renderer.

    Only visible columns are included. Headers use the column title (or
    data index), cells use the column renderer or the default formatting.
    The index holds ``"{row key}-{position}"`` labels.

    Args:
        rows: Rows on the current page
        columns: Column definitions
        row_key: Optional field holding each row's identity

    Returns:
        pandas DataFrame of display values
    """
    shown = visible_columns(columns)
    headers = [column_title(c) for c in shown]
    records = [[display_value(c, row) for c in shown] for row in rows]
    index = [f"{get_row_key(row, row_key)}-{i}" for i, row in enumerate(rows)]

    frame = pd.DataFrame(records, columns=headers, index=index)
    return frame
