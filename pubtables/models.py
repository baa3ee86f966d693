"""
Value types that make up a table object.

All types are frozen dataclasses; operations on a table build new instances with
dataclasses.replace() instead of mutating, so a table can be reused as the
starting point of several pipelines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Tuple

import pandas as pd

ROLES = ('data', 'stub', 'group')

DEFAULT_OPTIONS = {
    'row_group_as_column': False,
    'column_labels_hidden': False,
    'table_width': None,
    'table_font_size': None,
}


@dataclass(frozen=True)
class ColumnInfo:
    """One boxhead entry: a source column and how it is displayed."""
    var: Hashable
    label: str
    visible: bool = True
    align: str = 'left'
    width: Optional[str] = None
    role: str = 'data'


@dataclass(frozen=True)
class Spanner:
    """A label over a set of columns; level 0 sits directly above the column labels."""
    id: str
    label: str
    vars: Tuple[Hashable, ...]
    level: int = 0
    spanner_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ColumnMerge:
    """
    A merge of several columns into the first one.

    kind is 'merge' (pattern with {1}, {2}...), 'range' (begin, end) or
    'uncert' (value, uncertainty) / (value, lower, upper).
    """
    kind: str
    vars: Tuple[Hashable, ...]
    pattern: str = ''
    sep: str = ''
    rows: Optional[Tuple[int, ...]] = None


@dataclass(frozen=True)
class FormatSpec:
    vars: Tuple[Hashable, ...]
    rows: Optional[Tuple[int, ...]]
    fn: Callable[[Any], str]


@dataclass(frozen=True)
class MissingSub:
    vars: Tuple[Hashable, ...]
    rows: Optional[Tuple[int, ...]]
    text: str


@dataclass(frozen=True)
class StubInfo:
    rowname_col: Optional[Hashable] = None
    groupname_cols: Tuple[Hashable, ...] = ()
    use_index: bool = False
    row_group_sep: str = " - "


@dataclass(frozen=True)
class Heading:
    title: Optional[str] = None
    subtitle: Optional[str] = None


def auto_align_for(series: pd.Series) -> str:
    """Numbers and datetimes align right, booleans center, everything else left."""
    if pd.api.types.is_bool_dtype(series):
        return 'center'
    if pd.api.types.is_numeric_dtype(series):
        return 'right'
    if pd.api.types.is_datetime64_any_dtype(series) or pd.api.types.is_timedelta64_dtype(series):
        return 'right'
    return 'left'


__all__ = [
    'ROLES',
    'DEFAULT_OPTIONS',
    'ColumnInfo',
    'Spanner',
    'ColumnMerge',
    'FormatSpec',
    'MissingSub',
    'StubInfo',
    'Heading',
    'auto_align_for',
]
