"""
Resolve a table object into a render-ready BuiltTable.

Resolution order for cell text:
1. default formatting of every raw value (formatters.format_value)
2. fmt_*() formats, in the order they were added, on non-missing cells
3. sub_missing() substitutions on missing cells
4. column merges, in the order they were added

Renderers (HTML, LaTeX, RTF, figure, data frame) only walk the BuiltTable and
escape its plain text for their output format.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional

from .constants import CONFIG
from .formatters import format_value, is_missing
from .logging_utils import log_table_summary
from .models import ColumnMerge

if TYPE_CHECKING:
    from .core import GT

_PLACEHOLDER_RX = re.compile(r'\{(\d+)\}')
_CONDITIONAL_RX = re.compile(r'<<(.*?)>>', re.S)

logger = logging.getLogger(__name__)


@dataclass
class BuiltColumn:
    var: Hashable
    label: str
    align: str
    width: Optional[str] = None


@dataclass
class SpannerCell:
    """One cell of a spanner row; label None marks an unspanned gap."""
    label: Optional[str]
    start: int
    span: int = 1


@dataclass
class BuiltRow:
    index: int
    stub: Optional[str]
    cells: List[str]


@dataclass
class BuiltGroup:
    label: Optional[str]
    rows: List[BuiltRow] = field(default_factory=list)


@dataclass
class BuiltTable:
    columns: List[BuiltColumn]
    groups: List[BuiltGroup]
    spanner_rows: List[List[SpannerCell]]
    title: Optional[str] = None
    subtitle: Optional[str] = None
    caption: Optional[str] = None
    has_stub: bool = False
    stubhead: Optional[str] = None
    stub_width: Optional[str] = None
    has_groups: bool = False
    source_notes: List[str] = field(default_factory=list)
    options: Dict = field(default_factory=dict)
    table_id: Optional[str] = None

    @property
    def group_as_column(self) -> bool:
        return self.has_groups and bool(self.options.get('row_group_as_column'))

    @property
    def n_lead(self) -> int:
        """Number of leading label columns (group column and/or stub)."""
        return int(self.group_as_column) + int(self.has_stub)

    @property
    def n_total(self) -> int:
        return self.n_lead + len(self.columns)

    def all_rows(self) -> List[BuiltRow]:
        return [row for group in self.groups for row in group.rows]


def render_merge_pattern(pattern: str, texts: List[str], missing: List[bool]) -> str:
    """
    Fill a merge pattern; << >> sections referencing a missing value are dropped.

    >>> render_merge_pattern('{1}<< ({2})>>', ['5', 'NA'], [False, True])
    '5'
    """
    def _conditional(m):
        section = m.group(1)
        refs = [int(i) for i in _PLACEHOLDER_RX.findall(section)]
        if any(missing[i - 1] for i in refs):
            return ''
        return section

    filled = _CONDITIONAL_RX.sub(_conditional, pattern)
    return _PLACEHOLDER_RX.sub(lambda m: texts[int(m.group(1)) - 1], filled)


def _apply_merge(merge: ColumnMerge, text: Dict, missing: Dict, n_rows: int) -> None:
    rows = range(n_rows) if merge.rows is None else merge.rows
    target = merge.vars[0]
    for i in rows:
        vals = [text[v][i] for v in merge.vars]
        miss = [missing[v][i] for v in merge.vars]
        if merge.kind == 'merge':
            text[target][i] = render_merge_pattern(merge.pattern, vals, miss)
            missing[target][i] = all(miss)
        elif merge.kind == 'range':
            if miss[0] or miss[1]:
                continue
            text[target][i] = f"{vals[0]}{merge.sep}{vals[1]}"
        elif merge.kind == 'uncert':
            if miss[0]:
                continue
            if len(vals) == 2:
                if not miss[1]:
                    text[target][i] = f"{vals[0]}{merge.sep}{vals[1]}"
            else:
                lower, upper = vals[1], vals[2]
                if miss[1] or miss[2]:
                    continue
                if lower == upper:
                    text[target][i] = f"{vals[0]}{merge.sep}{upper}"
                else:
                    text[target][i] = f"{vals[0]}(+{upper}/-{lower})"
        else:
            raise ValueError(f"Unknown merge kind: {merge.kind!r}")


def _cell_text(data: "GT"):
    raw = data._data
    n_rows = len(raw)
    missing_text = CONFIG['MISSING_TEXT']
    text: Dict[Hashable, List[str]] = {}
    missing: Dict[Hashable, List[bool]] = {}
    for col in data._boxhead:
        values = raw[col.var].tolist()
        missing[col.var] = [is_missing(v) for v in values]
        text[col.var] = [format_value(v, missing_text) for v in values]

    for spec in data._formats:
        rows = range(n_rows) if spec.rows is None else spec.rows
        for var in spec.vars:
            values = raw[var]
            for i in rows:
                if not missing[var][i]:
                    text[var][i] = spec.fn(values.iat[i])

    for sub in data._missing_subs:
        rows = range(n_rows) if sub.rows is None else sub.rows
        for var in sub.vars:
            for i in rows:
                if missing[var][i]:
                    text[var][i] = sub.text

    for merge in data._merges:
        _apply_merge(merge, text, missing, n_rows)

    return text


def _spanner_rows(data: "GT", visible: List[Hashable]) -> List[List[SpannerCell]]:
    """Lay out spanners per level as runs of adjacent visible columns (top level first)."""
    position = {v: i for i, v in enumerate(visible)}
    rows = []
    for level in sorted({s.level for s in data._spanners}, reverse=True):
        owner: List[Optional[str]] = [None] * len(visible)
        for sp in data._spanners:
            if sp.level != level:
                continue
            for v in sp.vars:
                if v in position:
                    owner[position[v]] = sp.id
        if all(o is None for o in owner):
            continue
        labels = {sp.id: sp.label for sp in data._spanners}
        cells: List[SpannerCell] = []
        i = 0
        while i < len(owner):
            if owner[i] is None:
                cells.append(SpannerCell(label=None, start=i))
                i += 1
                continue
            j = i
            while j + 1 < len(owner) and owner[j + 1] == owner[i]:
                j += 1
            cells.append(SpannerCell(label=labels[owner[i]], start=i, span=j - i + 1))
            i = j + 1
        rows.append(cells)
    return rows


def build_table(data: "GT") -> BuiltTable:
    """Resolve formats, merges, groups and spanners into a BuiltTable."""
    text = _cell_text(data)
    n_rows = len(data._data)

    visible = [c for c in data._boxhead if c.role == 'data' and c.visible]
    columns = [BuiltColumn(var=c.var, label=c.label, align=c.align, width=c.width) for c in visible]

    if data._stub.use_index:
        stub = [format_value(v) for v in data._data.index]
    elif data._stub.rowname_col is not None:
        stub = text[data._stub.rowname_col]
    else:
        stub = None

    stub_width = None
    if data._stub.rowname_col is not None:
        stub_col = next(c for c in data._boxhead if c.var == data._stub.rowname_col)
        stub_width = stub_col.width

    rows = [
        BuiltRow(
            index=i,
            stub=None if stub is None else stub[i],
            cells=[text[c.var][i] for c in visible],
        )
        for i in range(n_rows)
    ]

    keys = data._group_keys()
    if keys is None:
        groups = [BuiltGroup(label=None, rows=rows)]
    else:
        na_label = CONFIG['ROW_GROUP_NA_LABEL']
        # None keys the missing-key group so it never folds into a real "NA" group
        by_key: Dict[Optional[str], BuiltGroup] = {}
        for key in data._group_keys_ordered():
            by_key[key] = BuiltGroup(label=na_label if key is None else key)
        for row, key in zip(rows, keys):
            by_key[key].rows.append(row)
        groups = [g for g in by_key.values() if g.rows]

    built = BuiltTable(
        columns=columns,
        groups=groups,
        spanner_rows=_spanner_rows(data, [c.var for c in visible]),
        title=data._heading.title,
        subtitle=data._heading.subtitle,
        caption=data._caption,
        has_stub=stub is not None,
        stubhead=data._stubhead,
        stub_width=stub_width,
        has_groups=keys is not None,
        source_notes=list(data._source_notes),
        options=dict(data._options),
        table_id=data._id,
    )
    log_table_summary(logger, built, formats=len(data._formats), merges=len(data._merges))
    return built


__all__ = [
    'BuiltColumn',
    'SpannerCell',
    'BuiltRow',
    'BuiltGroup',
    'BuiltTable',
    'render_merge_pattern',
    'build_table',
]
