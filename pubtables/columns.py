"""
Column operations: alignment, labels, widths, ordering, visibility and merges.

Every function takes a table object and returns a new one; the input is never
modified. The same functions are available as GT methods, so both styles work:

>>> cols_hide(cols_align(tbl, 'center'), 'row')
>>> tbl.cols_align('center').cols_hide('row')
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional

from .constants import CONFIG
from .models import ColumnMerge, auto_align_for
from .selectors import resolve_columns, resolve_rows

if TYPE_CHECKING:
    from .core import GT

ALIGNMENTS = ('auto', 'left', 'center', 'right')

_WIDTH_RX = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*(px|%)\s*$')
_PLACEHOLDER_RX = re.compile(r'\{(\d+)\}')


# ============================================================================
# Widths
# ============================================================================

def px(value) -> str:
    """Width in pixels, e.g. px(150) -> '150px'."""
    return parse_width(value)


def pct(value) -> str:
    """Width as a percentage of the table width, e.g. pct(20) -> '20%'."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"pct() expects a number, got {value!r}")
    return parse_width(f"{value}%")


def parse_width(width) -> str:
    """
    Normalize a width to 'Npx' or 'N%'.

    Accepts positive numbers (pixels), 'Npx' and 'N%' strings.
    """
    if isinstance(width, bool):
        raise ValueError(f"Invalid width: {width!r}")
    if isinstance(width, (int, float)):
        if width <= 0:
            raise ValueError(f"Width must be positive, got {width!r}")
        return f"{_trim_number(width)}px"
    if isinstance(width, str):
        m = _WIDTH_RX.match(width)
        if not m:
            raise ValueError(f"Invalid width {width!r}; use a number, 'Npx' or 'N%'")
        value = float(m.group(1))
        if value <= 0:
            raise ValueError(f"Width must be positive, got {width!r}")
        return f"{_trim_number(value)}{m.group(2)}"
    raise ValueError(f"Invalid width: {width!r}")


def split_width(width: str):
    """Split a normalized width into (value, unit)."""
    m = _WIDTH_RX.match(width)
    return float(m.group(1)), m.group(2)


def _trim_number(value) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"


# ============================================================================
# Alignment, labels, widths
# ============================================================================

def cols_align(data: "GT", align: str = 'left', columns=None) -> "GT":
    """
    Set the horizontal alignment of columns.

    Parameters
    ----------
    align : {'auto', 'left', 'center', 'right'}
        'auto' derives the alignment from each column's dtype
    columns : column specification, optional
        Defaults to every data column
    """
    if align not in ALIGNMENTS:
        raise ValueError(f"align must be one of {ALIGNMENTS}, got {align!r}")
    names = set(resolve_columns(data, columns))
    boxhead = []
    for col in data._boxhead:
        if col.var in names:
            new_align = auto_align_for(data._data[col.var]) if align == 'auto' else align
            col = replace(col, align=new_align)
        boxhead.append(col)
    return data._replace(_boxhead=boxhead)


def cols_label(data: "GT", labels: Optional[Dict[Hashable, str]] = None, **kwargs) -> "GT":
    """Relabel columns: cols_label(tbl, {'num': 'Number'}) or cols_label(tbl, num='Number')."""
    new_labels = dict(labels or {})
    new_labels.update(kwargs)
    for name in new_labels:
        resolve_columns(data, [name])
    boxhead = [
        replace(col, label=str(new_labels[col.var])) if col.var in new_labels else col
        for col in data._boxhead
    ]
    return data._replace(_boxhead=boxhead)


def cols_width(data: "GT", widths=None, **kwargs) -> "GT":
    """
    Set column widths.

    ``widths`` maps a column name or selector to a width; keyword arguments add
    more name entries. The first entry matching a column wins, so a trailing
    ``everything()`` entry acts as the default for the remaining columns.

    Example
    -------
    >>> cols_width(tbl, {'num': px(150), ends_with('r'): 100, everything(): '60px'})
    """
    items = list((widths or {}).items()) + list(kwargs.items())
    assigned: Dict[Hashable, str] = {}
    for key, width in items:
        width = parse_width(width)
        for name in resolve_columns(data, key):
            assigned.setdefault(name, width)
    boxhead = [
        replace(col, width=assigned[col.var]) if col.var in assigned else col
        for col in data._boxhead
    ]
    return data._replace(_boxhead=boxhead)


# ============================================================================
# Ordering and visibility
# ============================================================================

def _reorder(data: "GT", moving: List[Hashable], anchor: str, target: Optional[Hashable] = None) -> "GT":
    by_var = {c.var: c for c in data._boxhead}
    rest = [c for c in data._boxhead if c.var not in moving]
    moved = [by_var[v] for v in moving]
    if anchor == 'start':
        boxhead = moved + rest
    elif anchor == 'end':
        boxhead = rest + moved
    else:
        idx = next(i for i, c in enumerate(rest) if c.var == target)
        boxhead = rest[:idx + 1] + moved + rest[idx + 1:]
    return data._replace(_boxhead=boxhead)


def cols_move(data: "GT", columns, after) -> "GT":
    """Move columns (in the given order) to sit directly after the ``after`` column."""
    moving = resolve_columns(data, columns, none_means_all=False)
    if not moving:
        raise ValueError("cols_move() requires at least one column to move")
    targets = resolve_columns(data, after, none_means_all=False)
    if len(targets) != 1:
        raise ValueError(f"'after' must resolve to exactly one column, got {targets}")
    target = targets[0]
    if target in moving:
        raise ValueError(f"Column '{target}' cannot be both moved and used as 'after'")
    return _reorder(data, moving, 'after', target)


def cols_move_to_start(data: "GT", columns) -> "GT":
    moving = resolve_columns(data, columns, none_means_all=False)
    if not moving:
        raise ValueError("cols_move_to_start() requires at least one column to move")
    return _reorder(data, moving, 'start')


def cols_move_to_end(data: "GT", columns) -> "GT":
    moving = resolve_columns(data, columns, none_means_all=False)
    if not moving:
        raise ValueError("cols_move_to_end() requires at least one column to move")
    return _reorder(data, moving, 'end')


def _set_visible(data: "GT", names, visible: bool) -> "GT":
    names = set(names)
    boxhead = [
        replace(col, visible=visible) if col.var in names else col
        for col in data._boxhead
    ]
    return data._replace(_boxhead=boxhead)


def cols_hide(data: "GT", columns) -> "GT":
    """Hide columns from the output; their values remain available to merges."""
    return _set_visible(data, resolve_columns(data, columns, none_means_all=False), False)


def cols_unhide(data: "GT", columns) -> "GT":
    return _set_visible(data, resolve_columns(data, columns, none_means_all=False), True)


# ============================================================================
# Merges
# ============================================================================

def _single_column(data: "GT", spec, arg_name: str) -> Hashable:
    names = resolve_columns(data, spec, none_means_all=False)
    if len(names) != 1:
        raise ValueError(f"'{arg_name}' must resolve to exactly one column, got {names}")
    return names[0]


def _rows_tuple(data: "GT", rows):
    return None if rows is None else tuple(resolve_rows(data, rows))


def _add_merge(data: "GT", merge: ColumnMerge, hide) -> "GT":
    new = data._replace(_merges=list(data._merges) + [merge])
    if hide:
        new = _set_visible(new, hide, False)
    return new


def cols_merge_range(
    data: "GT",
    col_begin,
    col_end,
    sep: Optional[str] = None,
    rows=None,
    autohide: bool = True,
) -> "GT":
    """
    Merge two columns into a range shown in ``col_begin`` as 'begin–end'.

    A missing end value shows the begin value alone; a missing begin value
    makes the whole cell missing.
    """
    begin = _single_column(data, col_begin, 'col_begin')
    end = _single_column(data, col_end, 'col_end')
    if begin == end:
        raise ValueError("col_begin and col_end must be different columns")
    merge = ColumnMerge(
        kind='range',
        vars=(begin, end),
        sep=CONFIG['RANGE_SEP'] if sep is None else sep,
        rows=_rows_tuple(data, rows),
    )
    return _add_merge(data, merge, [end] if autohide else [])


def cols_merge_uncert(
    data: "GT",
    col_val,
    col_uncert,
    sep: Optional[str] = None,
    rows=None,
    autohide: bool = True,
) -> "GT":
    """
    Merge a value column with its uncertainty, shown in ``col_val`` as 'value ± uncert'.

    ``col_uncert`` may be one column or two columns ``[lower, upper]``. Unequal
    bounds render as 'value(+upper/-lower)'. A missing uncertainty shows the
    value alone.
    """
    val = _single_column(data, col_val, 'col_val')
    uncert_specs = list(col_uncert) if isinstance(col_uncert, (list, tuple)) else [col_uncert]
    if len(uncert_specs) not in (1, 2):
        raise ValueError("col_uncert must be one column or a [lower, upper] pair")
    uncert = [_single_column(data, spec, 'col_uncert') for spec in uncert_specs]
    if val in uncert:
        raise ValueError("col_val cannot also be an uncertainty column")
    merge = ColumnMerge(
        kind='uncert',
        vars=(val, *uncert),
        sep=CONFIG['UNCERT_SEP'] if sep is None else sep,
        rows=_rows_tuple(data, rows),
    )
    return _add_merge(data, merge, uncert if autohide else [])


def cols_merge(
    data: "GT",
    columns,
    hide_columns=None,
    rows=None,
    pattern: Optional[str] = None,
) -> "GT":
    """
    Merge several columns into the first one using a pattern.

    The pattern references columns as {1}, {2}, ... in the order given. Text
    wrapped in << >> is dropped for rows where any value it references is
    missing, e.g. ``"{1}<< ({2})>>"``.

    Parameters
    ----------
    hide_columns : column specification or False, optional
        Columns to hide afterwards; defaults to all but the first merged column.
        Pass False (or an empty list) to keep them visible.
    """
    names = resolve_columns(data, columns, none_means_all=False)
    if not names:
        raise ValueError("cols_merge() requires at least one column")
    if pattern is None:
        pattern = " ".join(f"{{{i}}}" for i in range(1, len(names) + 1))
    refs = [int(i) for i in _PLACEHOLDER_RX.findall(pattern)]
    if not refs:
        raise ValueError(f"Pattern {pattern!r} does not reference any column")
    bad = [i for i in refs if not 1 <= i <= len(names)]
    if bad:
        raise ValueError(f"Pattern {pattern!r} references {bad} but only {len(names)} columns were given")
    if pattern.count('<<') != pattern.count('>>'):
        raise ValueError(f"Unbalanced '<<' / '>>' in pattern {pattern!r}")

    if hide_columns is None:
        hide = names[1:]
    elif hide_columns is False:
        hide = []
    else:
        hide = resolve_columns(data, hide_columns, none_means_all=False)

    merge = ColumnMerge(kind='merge', vars=tuple(names), pattern=pattern, rows=_rows_tuple(data, rows))
    return _add_merge(data, merge, hide)


__all__ = [
    'ALIGNMENTS',
    'px',
    'pct',
    'parse_width',
    'split_width',
    'cols_align',
    'cols_label',
    'cols_width',
    'cols_move',
    'cols_move_to_start',
    'cols_move_to_end',
    'cols_hide',
    'cols_unhide',
    'cols_merge_range',
    'cols_merge_uncert',
    'cols_merge',
]
