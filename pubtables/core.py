"""
The table object and its constructors.

A GT wraps a pandas DataFrame together with presentation metadata (boxhead,
stub, row groups, spanners, formats, merges). Operations never mutate a GT;
each returns a new one, so tables are built as pipelines:

>>> from pubtables import gt, exibble
>>> tbl = (
...     gt(exibble(), rowname_col='row', groupname_col='group')
...     .cols_hide(['fctr', 'time'])
...     .cols_align('center', columns='char')
...     .cols_label(num='Number', char='Fruit')
... )
>>> tbl.gtsave('exibble.html')
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Hashable, List, Optional, Sequence

import pandas as pd

from .columns import (
    cols_align,
    cols_hide,
    cols_label,
    cols_merge,
    cols_merge_range,
    cols_merge_uncert,
    cols_move,
    cols_move_to_end,
    cols_move_to_start,
    cols_unhide,
    cols_width,
)
from .constants import CONFIG
from .fmt import fmt, fmt_integer, fmt_number, fmt_percent, sub_missing
from .formatters import format_value, is_missing
from .models import (
    DEFAULT_OPTIONS,
    ColumnInfo,
    ColumnMerge,
    FormatSpec,
    Heading,
    MissingSub,
    Spanner,
    StubInfo,
    auto_align_for,
)
from .report_utils import as_data_frame, as_latex, as_raw_html, as_rtf, gtsave, render_figure
from .tabs import (
    row_group_order,
    tab_caption,
    tab_header,
    tab_options,
    tab_source_note,
    tab_spanner,
    tab_spanner_delim,
    tab_stubhead,
)


@dataclass(repr=False)
class GT:
    """A table object; create with gt() or gt_preview()."""
    _data: pd.DataFrame
    _boxhead: List[ColumnInfo]
    _stub: StubInfo = field(default_factory=StubInfo)
    _heading: Heading = field(default_factory=Heading)
    _spanners: List[Spanner] = field(default_factory=list)
    _formats: List[FormatSpec] = field(default_factory=list)
    _missing_subs: List[MissingSub] = field(default_factory=list)
    _merges: List[ColumnMerge] = field(default_factory=list)
    _row_group_order: List[str] = field(default_factory=list)
    _source_notes: List[str] = field(default_factory=list)
    _stubhead: Optional[str] = None
    _caption: Optional[str] = None
    _options: Dict = field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    _id: Optional[str] = None

    def _replace(self, **changes) -> "GT":
        return replace(self, **changes)

    # ------------------------------------------------------------------
    # Stub and row groups
    # ------------------------------------------------------------------
    def _stub_labels(self) -> Optional[List[str]]:
        """Default-formatted stub labels, or None when the table has no stub."""
        if self._stub.use_index:
            return [format_value(v) for v in self._data.index]
        if self._stub.rowname_col is not None:
            return [format_value(v) for v in self._data[self._stub.rowname_col]]
        return None

    def _group_keys(self) -> Optional[List[Optional[str]]]:
        """Group label per row (None for a missing key), or None without row groups."""
        cols = self._stub.groupname_cols
        if not cols:
            return None
        keys: List[Optional[str]] = []
        for values in zip(*(self._data[c] for c in cols)):
            if any(is_missing(v) for v in values):
                keys.append(None)
            else:
                keys.append(self._stub.row_group_sep.join(format_value(v) for v in values))
        return keys

    def _group_keys_ordered(self) -> List[Optional[str]]:
        """Group keys in display order; None (missing key) comes last when present."""
        keys = self._group_keys()
        if keys is None:
            return []
        seen: List[str] = []
        has_missing = False
        for key in keys:
            if key is None:
                has_missing = True
            elif key not in seen:
                seen.append(key)
        ordered: List[Optional[str]] = list(self._row_group_order) + [g for g in seen if g not in self._row_group_order]
        if has_missing:
            ordered.append(None)
        return ordered

    def _group_labels_ordered(self) -> List[str]:
        """Group labels in display order; the missing-key group comes last."""
        na_label = CONFIG['ROW_GROUP_NA_LABEL']
        return [na_label if key is None else key for key in self._group_keys_ordered()]

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------
    def pipe(self, fn, *args, **kwargs):
        """Call fn(self, *args, **kwargs); keeps user functions in a method chain."""
        return fn(self, *args, **kwargs)

    def __repr__(self) -> str:
        n_rows, n_cols = self._data.shape
        return f"<GT {n_rows} rows x {n_cols} columns>"

    def _repr_html_(self) -> str:
        return as_raw_html(self)

    # Column operations
    cols_align = cols_align
    cols_label = cols_label
    cols_width = cols_width
    cols_move = cols_move
    cols_move_to_start = cols_move_to_start
    cols_move_to_end = cols_move_to_end
    cols_hide = cols_hide
    cols_unhide = cols_unhide
    cols_merge = cols_merge
    cols_merge_range = cols_merge_range
    cols_merge_uncert = cols_merge_uncert

    # Table parts
    tab_header = tab_header
    tab_stubhead = tab_stubhead
    tab_source_note = tab_source_note
    tab_caption = tab_caption
    tab_spanner = tab_spanner
    tab_spanner_delim = tab_spanner_delim
    tab_options = tab_options
    row_group_order = row_group_order

    # Formatting
    fmt = fmt
    fmt_number = fmt_number
    fmt_integer = fmt_integer
    fmt_percent = fmt_percent
    sub_missing = sub_missing

    # Export
    as_raw_html = as_raw_html
    as_latex = as_latex
    as_rtf = as_rtf
    as_data_frame = as_data_frame
    render_figure = render_figure
    gtsave = gtsave


def gt(
    data: pd.DataFrame,
    rowname_col: Optional[Hashable] = "rowname",
    groupname_col=None,
    caption: Optional[str] = None,
    rownames_to_stub: bool = False,
    row_group_sep: Optional[str] = None,
    auto_align: bool = True,
    id: Optional[str] = None,
) -> GT:
    """
    Create a table object from a DataFrame.

    Parameters
    ----------
    data : pd.DataFrame
        Tabular input; it is not copied or modified
    rowname_col : column name, optional
        Column used as the stub (row labels). The default 'rowname' only
        applies when such a column exists.
    groupname_col : column name or list of column names, optional
        Column(s) defining row groups; several columns are joined with
        row_group_sep into one group label
    caption : str, optional
        Table caption (used by LaTeX and HTML output)
    rownames_to_stub : bool, default=False
        Use the DataFrame index as the stub (takes precedence over rowname_col)
    row_group_sep : str, optional
        Separator for multi-column group labels (default CONFIG['ROW_GROUP_SEP'])
    auto_align : bool, default=True
        Align numbers/dates right, booleans center and everything else left;
        if False all columns align left
    id : str, optional
        Table id used for the HTML element id and the LaTeX label

    Returns
    -------
    GT

    Raises
    ------
    TypeError
        If data is not a DataFrame
    KeyError
        If an explicitly named stub or group column does not exist
    ValueError
        If column names are duplicated or a column is both stub and group
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"gt() expects a pandas.DataFrame, got {type(data).__name__}")
    if data.columns.has_duplicates:
        dupes = data.columns[data.columns.duplicated()].tolist()
        raise ValueError(f"Column names must be unique; duplicated: {dupes}")

    columns = list(data.columns)
    if rownames_to_stub:
        rowname_col = None
    elif rowname_col is not None and rowname_col not in columns:
        if rowname_col != "rowname":
            raise KeyError(f"rowname_col '{rowname_col}' does not exist. Available columns: {columns}")
        rowname_col = None

    if groupname_col is None:
        group_cols: tuple = ()
    elif isinstance(groupname_col, (list, tuple)):
        group_cols = tuple(groupname_col)
    else:
        group_cols = (groupname_col,)
    missing = [c for c in group_cols if c not in columns]
    if missing:
        raise KeyError(f"groupname_col {missing} do not exist. Available columns: {columns}")
    if rowname_col is not None and rowname_col in group_cols:
        raise ValueError(f"Column '{rowname_col}' cannot be both the stub and a group column")

    boxhead = []
    for var in columns:
        if var == rowname_col:
            role = 'stub'
        elif var in group_cols:
            role = 'group'
        else:
            role = 'data'
        boxhead.append(ColumnInfo(
            var=var,
            label=str(var),
            align=auto_align_for(data[var]) if auto_align and role == 'data' else 'left',
            role=role,
        ))

    return GT(
        _data=data,
        _boxhead=boxhead,
        _stub=StubInfo(
            rowname_col=rowname_col,
            groupname_cols=group_cols,
            use_index=bool(rownames_to_stub),
            row_group_sep=CONFIG['ROW_GROUP_SEP'] if row_group_sep is None else row_group_sep,
        ),
        _caption=caption,
        _id=id,
    )


def gt_preview(
    data: pd.DataFrame,
    top_n: Optional[int] = None,
    bottom_n: Optional[int] = None,
    incl_rownums: bool = True,
) -> GT:
    """
    Preview the first and last rows of a DataFrame as a table.

    The first ``top_n`` and last ``bottom_n`` rows are shown, separated by an
    ellipsis row whose stub reads 'first..last' (1-based numbers of the omitted
    rows) and whose cells are empty. Small frames are shown in full.

    Parameters
    ----------
    top_n, bottom_n : int, optional
        Defaults CONFIG['PREVIEW_TOP_N'] and CONFIG['PREVIEW_BOTTOM_N']
    incl_rownums : bool, default=True
        Show 1-based row numbers in the stub
    """
    if not isinstance(data, pd.DataFrame):
        raise TypeError(f"gt_preview() expects a pandas.DataFrame, got {type(data).__name__}")
    top_n = CONFIG['PREVIEW_TOP_N'] if top_n is None else int(top_n)
    bottom_n = CONFIG['PREVIEW_BOTTOM_N'] if bottom_n is None else int(bottom_n)
    if top_n < 0 or bottom_n < 0:
        raise ValueError("top_n and bottom_n must be >= 0")

    n = len(data)
    positions: Sequence[int] = list(range(n))
    ellipsis_at: Optional[int] = None
    if n > top_n + bottom_n:
        positions = list(range(top_n)) + list(range(n - bottom_n, n))
        ellipsis_at = top_n

    labels = [str(p + 1) for p in positions]
    preview = data.iloc[positions].reset_index(drop=True)
    if ellipsis_at is not None:
        first_omitted, last_omitted = top_n + 1, n - bottom_n
        # Reindexing with an absent label inserts an all-missing row and
        # upcasts each column the way pandas does natively (int -> float, NaT)
        order = list(range(ellipsis_at)) + [-1] + list(range(ellipsis_at, len(preview)))
        preview = preview.reindex(order).reset_index(drop=True)
        labels.insert(ellipsis_at, f"{first_omitted}..{last_omitted}")

    if incl_rownums:
        preview.index = pd.Index(labels)
        tbl = gt(preview, rowname_col=None, rownames_to_stub=True)
    else:
        tbl = gt(preview, rowname_col=None)

    if ellipsis_at is not None:
        tbl = sub_missing(tbl, rows=[ellipsis_at], missing_text="")
    return tbl


__all__ = ['GT', 'gt', 'gt_preview']
