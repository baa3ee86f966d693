"""
Table parts: heading, spanners, stubhead, source notes, caption, row-group order
and options.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional, Tuple

from .columns import parse_width
from .models import DEFAULT_OPTIONS, Heading, Spanner
from .selectors import resolve_columns

if TYPE_CHECKING:
    from .core import GT


def tab_header(data: "GT", title: str, subtitle: Optional[str] = None) -> "GT":
    return data._replace(_heading=Heading(title=str(title), subtitle=None if subtitle is None else str(subtitle)))


def tab_stubhead(data: "GT", label: str) -> "GT":
    return data._replace(_stubhead=str(label))


def tab_source_note(data: "GT", source_note: str) -> "GT":
    return data._replace(_source_notes=list(data._source_notes) + [str(source_note)])


def tab_caption(data: "GT", caption: str) -> "GT":
    return data._replace(_caption=str(caption))


# ============================================================================
# Spanners
# ============================================================================

def _levels_in_use(spanners: List[Spanner], covered) -> set:
    covered = set(covered)
    return {s.level for s in spanners if covered & set(s.vars)}


def _gather(data: "GT", covered: List[Hashable]) -> "GT":
    """Move covered columns next to each other, starting at the first one."""
    order = [c.var for c in data._boxhead]
    positions = sorted(order.index(v) for v in covered)
    first = positions[0]
    in_order = [order[p] for p in positions]
    by_var = {c.var: c for c in data._boxhead}
    before = [v for v in order[:first] if v not in covered]
    after = [v for v in order[first:] if v not in covered]
    new_order = before + in_order + after
    return data._replace(_boxhead=[by_var[v] for v in new_order])


def tab_spanner(
    data: "GT",
    label: str,
    columns=None,
    spanners=None,
    level: Optional[int] = None,
    id: Optional[str] = None,
    gather: bool = True,
) -> "GT":
    """
    Add a spanner label over columns and/or existing spanners.

    Parameters
    ----------
    label : str
        Text shown in the spanner
    columns : column specification, optional
        Columns directly covered by the spanner
    spanners : str or list of str, optional
        Ids of existing spanners to place this one above
    level : int, optional
        Explicit level (0 sits on top of the column labels). By default the
        lowest free level for the covered columns is used, or one above the
        highest child spanner.
    id : str, optional
        Spanner id (defaults to the label); must be unique
    gather : bool, default=True
        Move the covered columns so they sit side by side
    """
    existing = {s.id: s for s in data._spanners}
    child_ids = [spanners] if isinstance(spanners, str) else list(spanners or [])
    for sid in child_ids:
        if sid not in existing:
            raise KeyError(f"Spanner '{sid}' does not exist. Available spanners: {list(existing)}")

    vars_ = resolve_columns(data, columns, none_means_all=False)
    covered = list(vars_)
    for sid in child_ids:
        for v in existing[sid].vars:
            if v not in covered:
                covered.append(v)
    if not covered:
        raise ValueError("tab_spanner() needs at least one column or spanner")

    spanner_id = str(label) if id is None else str(id)
    if spanner_id in existing:
        raise ValueError(f"A spanner with id '{spanner_id}' already exists")

    used = _levels_in_use(data._spanners, covered)
    if level is None:
        level = max((existing[s].level for s in child_ids), default=-1) + 1
        while level in used:
            level += 1
    else:
        if level < 0:
            raise ValueError(f"level must be >= 0, got {level}")
        if level in used:
            raise ValueError(f"Spanner '{spanner_id}' overlaps an existing spanner at level {level}")

    spanner = Spanner(
        id=spanner_id,
        label=str(label),
        vars=tuple(covered),
        level=level,
        spanner_ids=tuple(child_ids),
    )
    new = data._replace(_spanners=list(data._spanners) + [spanner])
    if gather:
        new = _gather(new, covered)
    return new


def _split_name(name: str, delim: str, split: str, limit: Optional[int]) -> List[str]:
    maxsplit = -1 if limit is None else limit
    if split == 'first':
        return name.split(delim, maxsplit)
    return name.rsplit(delim, maxsplit)


def tab_spanner_delim(
    data: "GT",
    delim: str = "_",
    columns=None,
    split: str = "last",
    limit: Optional[int] = None,
) -> "GT":
    """
    Build spanners from delimited column names.

    The last part of each split name becomes the column label and the leading
    parts become spanners, the innermost one directly above the label. Adjacent
    columns sharing a prefix share a spanner.

    Example
    -------
    Columns ['item', 'mean_Experts', 'sd_Experts'] with delim='_' and
    split='first' give a spanner 'mean' over one column and 'sd' over another;
    with names like 'Experts_mean', 'Experts_sd' one 'Experts' spanner covers both.
    """
    if not delim:
        raise ValueError("delim must be a non-empty string")
    if split not in ('first', 'last'):
        raise ValueError(f"split must be 'first' or 'last', got {split!r}")
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    selected = set(resolve_columns(data, columns))
    parts_by_var: Dict[Hashable, List[str]] = {}
    for col in data._boxhead:
        if col.var in selected and delim in str(col.var):
            parts_by_var[col.var] = _split_name(str(col.var), delim, split, limit)
    if not parts_by_var:
        return data

    boxhead = [
        replace(col, label=parts_by_var[col.var][-1]) if col.var in parts_by_var else col
        for col in data._boxhead
    ]

    # (level, prefix) for every column/level it participates in
    keys_by_var: Dict[Hashable, Dict[int, Tuple[str, ...]]] = {}
    for var, parts in parts_by_var.items():
        n_prefix = len(parts) - 1
        keys_by_var[var] = {n_prefix - k: tuple(parts[:k]) for k in range(1, n_prefix + 1)}
    max_level = max(level for keys in keys_by_var.values() for level in keys)

    # Stack new spanners above any existing ones over the same columns
    offset = max(_levels_in_use(data._spanners, parts_by_var), default=-1) + 1

    taken_ids = {s.id for s in data._spanners}
    new_spanners: List[Spanner] = []
    order = [c.var for c in boxhead]
    for level in range(max_level + 1):
        run_prefix = None
        run_vars: List[Hashable] = []
        for var in order + [None]:
            prefix = keys_by_var.get(var, {}).get(level) if var is not None else None
            if prefix is not None and prefix == run_prefix:
                run_vars.append(var)
                continue
            if run_prefix is not None:
                sid = delim.join(run_prefix)
                base, n = sid, 2
                while sid in taken_ids:
                    sid = f"{base}-{n}"
                    n += 1
                taken_ids.add(sid)
                new_spanners.append(Spanner(
                    id=sid,
                    label=run_prefix[-1],
                    vars=tuple(run_vars),
                    level=level + offset,
                ))
            run_prefix, run_vars = prefix, ([var] if prefix is not None else [])

    return data._replace(_boxhead=boxhead, _spanners=list(data._spanners) + new_spanners)


# ============================================================================
# Row groups and options
# ============================================================================

def row_group_order(data: "GT", groups) -> "GT":
    """Put the listed row groups first (in the given order); the rest keep their order."""
    groups = [groups] if isinstance(groups, str) else list(groups)
    known = data._group_labels_ordered()
    unknown = [g for g in groups if g not in known]
    if unknown:
        raise KeyError(f"Row groups {unknown} do not exist. Available groups: {known}")
    return data._replace(_row_group_order=groups)


def tab_options(data: "GT", **options) -> "GT":
    """
    Set table options.

    Supported: row_group_as_column (bool), column_labels_hidden (bool),
    table_width (width), table_font_size (px number or 'Npx').
    """
    unknown = [k for k in options if k not in DEFAULT_OPTIONS]
    if unknown:
        raise KeyError(f"Unknown options {unknown}. Supported options: {list(DEFAULT_OPTIONS)}")
    new_options = dict(data._options)
    for key, value in options.items():
        if key in ('table_width', 'table_font_size') and value is not None:
            value = parse_width(value)
            if key == 'table_font_size' and value.endswith('%'):
                raise ValueError("table_font_size must be given in pixels")
        elif key in ('row_group_as_column', 'column_labels_hidden'):
            value = bool(value)
        new_options[key] = value
    return data._replace(_options=new_options)


__all__ = [
    'tab_header',
    'tab_stubhead',
    'tab_source_note',
    'tab_caption',
    'tab_spanner',
    'tab_spanner_delim',
    'row_group_order',
    'tab_options',
]
