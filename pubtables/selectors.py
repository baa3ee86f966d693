"""
Column and row selection helpers.

Every operation that takes ``columns=`` or ``rows=`` resolves them here, so the
accepted forms stay identical across cols_*, tab_* and fmt_* calls.

Columns may be given as:
- a column name (exact match, any role including stub/group columns)
- an integer position in the current column order
- a selector from this module (starts_with, ends_with, contains, matches,
  everything, one_of); selectors only see ordinary data columns
- a list mixing any of the above

Rows may be given as None (all rows), integer positions, stub labels, a list of
those, or a callable taking the DataFrame and returning a boolean mask.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Hashable, List, Sequence

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from .core import GT


class ColumnSelector:
    """A named predicate over column names, resolved against the current column order."""

    def __init__(self, description: str, predicate: Callable[[str], bool]):
        self.description = description
        self._predicate = predicate

    def __call__(self, names: Sequence[Hashable]) -> List[Hashable]:
        return [n for n in names if self._predicate(str(n))]

    def __repr__(self) -> str:
        return f"{self.description}"


def starts_with(prefix: str, ignore_case: bool = False) -> ColumnSelector:
    if ignore_case:
        return ColumnSelector(f"starts_with({prefix!r})", lambda n: n.lower().startswith(prefix.lower()))
    return ColumnSelector(f"starts_with({prefix!r})", lambda n: n.startswith(prefix))


def ends_with(suffix: str, ignore_case: bool = False) -> ColumnSelector:
    if ignore_case:
        return ColumnSelector(f"ends_with({suffix!r})", lambda n: n.lower().endswith(suffix.lower()))
    return ColumnSelector(f"ends_with({suffix!r})", lambda n: n.endswith(suffix))


def contains(text: str, ignore_case: bool = False) -> ColumnSelector:
    if ignore_case:
        return ColumnSelector(f"contains({text!r})", lambda n: text.lower() in n.lower())
    return ColumnSelector(f"contains({text!r})", lambda n: text in n)


def matches(pattern: str) -> ColumnSelector:
    """Select columns whose name matches a regular expression (re.search)."""
    rx = re.compile(pattern)
    return ColumnSelector(f"matches({pattern!r})", lambda n: rx.search(n) is not None)


def everything() -> ColumnSelector:
    return ColumnSelector("everything()", lambda n: True)


def one_of(*names: str) -> ColumnSelector:
    """Select any of the given names that exist; unknown names are ignored."""
    wanted = {str(n) for n in names}
    return ColumnSelector(f"one_of{tuple(names)!r}", lambda n: n in wanted)


def resolve_columns(data: "GT", columns, *, none_means_all: bool = True) -> List[Hashable]:
    """
    Resolve a columns specification to an ordered, de-duplicated list of column names.

    Parameters
    ----------
    data : GT
        Table whose boxhead defines the column universe and order
    columns : str, int, ColumnSelector, callable, list, or None
        Column specification (see module docstring)
    none_means_all : bool, default=True
        If True, None resolves to all data columns; otherwise to an empty list

    Raises
    ------
    KeyError
        If a column name does not exist
    TypeError
        If an element has an unsupported type
    ValueError
        If an integer position is out of range
    """
    all_vars = [c.var for c in data._boxhead]
    data_vars = [c.var for c in data._boxhead if c.role == 'data']

    if columns is None:
        return list(data_vars) if none_means_all else []

    items = list(columns) if isinstance(columns, (list, tuple)) else [columns]

    resolved: List[Hashable] = []
    for item in items:
        if isinstance(item, (bool, np.bool_)):
            raise TypeError(f"Unsupported column specification: {item!r}")
        if isinstance(item, (int, np.integer)):
            pos = int(item)
            if not -len(all_vars) <= pos < len(all_vars):
                raise ValueError(f"Column position {pos} out of range for {len(all_vars)} columns")
            found = [all_vars[pos]]
        elif callable(item):
            found = list(item(data_vars))
        elif isinstance(item, Hashable):
            if item not in all_vars:
                raise KeyError(f"Column '{item}' does not exist. Available columns: {all_vars}")
            found = [item]
        else:
            raise TypeError(f"Unsupported column specification: {item!r}")
        for name in found:
            if name not in resolved:
                resolved.append(name)
    return resolved


def resolve_rows(data: "GT", rows) -> List[int]:
    """
    Resolve a rows specification to a sorted list of 0-based row positions.

    String entries are matched against the stub labels, so they require a
    table with a stub (rowname_col or rownames_to_stub).
    """
    n = len(data._data)
    if rows is None:
        return list(range(n))

    if callable(rows):
        mask = rows(data._data)
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (n,):
            raise ValueError(f"Row predicate must return {n} booleans, got shape {mask.shape}")
        return [int(i) for i in np.flatnonzero(mask)]

    items = list(rows) if isinstance(rows, (list, tuple, range, pd.Index, np.ndarray)) else [rows]
    stub_labels = None
    positions = set()
    for item in items:
        if isinstance(item, (bool, np.bool_)):
            raise TypeError(f"Unsupported row specification: {item!r}")
        if isinstance(item, (int, np.integer)):
            pos = int(item)
            if not -n <= pos < n:
                raise ValueError(f"Row position {pos} out of range for {n} rows")
            positions.add(pos % n)
        elif isinstance(item, str):
            if stub_labels is None:
                stub_labels = data._stub_labels()
                if stub_labels is None:
                    raise KeyError(f"Row label '{item}' given but the table has no stub")
            hits = [i for i, lab in enumerate(stub_labels) if lab == item]
            if not hits:
                raise KeyError(f"Row label '{item}' does not exist in the stub")
            positions.update(hits)
        else:
            raise TypeError(f"Unsupported row specification: {item!r}")
    return sorted(positions)


__all__ = [
    'ColumnSelector',
    'starts_with',
    'ends_with',
    'contains',
    'matches',
    'everything',
    'one_of',
    'resolve_columns',
    'resolve_rows',
]
