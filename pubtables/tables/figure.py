"""
Matplotlib rendering of a BuiltTable for PNG and PDF export.

The table is drawn as text on an axes measured in inches (y grows downwards),
with booktabs-like rules: heavy rules above the column labels and below the
body, light rules under spanners, column labels and group headings. Column
widths come from cols_width() when set (96 px per inch), otherwise from the
longest text in the column. Fonts and PDF font embedding come from
FIGURE_RC (sans-serif, TrueType), applied only while the figure is drawn.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import matplotlib
from matplotlib.figure import Figure

from ..build import BuiltTable
from ..columns import split_width
from ..constants import CONFIG
from .style import FIGURE_COLORS, FIGURE_RC, FIGURE_RULES

_PX_PER_INCH = 96.0


def _mpl_text(text: str) -> str:
    """Escape '$' so matplotlib does not switch to mathtext."""
    return text.replace('$', r'\$')


def _column_widths(built: BuiltTable) -> List[float]:
    """Width in inches of every column (lead columns first)."""
    char_w = CONFIG['FIGURE_CHAR_WIDTH_IN']
    columns_text: List[List[str]] = []
    explicit: List[Optional[str]] = []

    if built.group_as_column:
        columns_text.append([g.label or "" for g in built.groups])
        explicit.append(None)
    if built.has_stub:
        columns_text.append([built.stubhead or ""] + [r.stub or "" for r in built.all_rows()])
        explicit.append(built.stub_width)
    for j, col in enumerate(built.columns):
        columns_text.append([col.label] + [r.cells[j] for r in built.all_rows()])
        explicit.append(col.width)

    widths = [(max((len(t) for t in texts), default=0) + 2) * char_w for texts in columns_text]

    # Pixel widths first; percentages then share the resulting total
    pct_cols = []
    for i, width in enumerate(explicit):
        if width is None:
            continue
        value, unit = split_width(width)
        if unit == 'px':
            widths[i] = value / _PX_PER_INCH
        else:
            pct_cols.append((i, value))
    if pct_cols:
        pct_idx = {i for i, _ in pct_cols}
        fixed = sum(w for i, w in enumerate(widths) if i not in pct_idx)
        # Percentages above 99 in total are capped so the fixed columns keep some room
        share = min(sum(v for _, v in pct_cols), 99)
        total = fixed / (1 - share / 100) if fixed > 0 else sum(widths)
        for i, value in pct_cols:
            widths[i] = total * value / 100
    return widths


def render_figure(built: BuiltTable) -> Figure:
    """Draw a BuiltTable onto a new matplotlib Figure."""
    row_h = CONFIG['FIGURE_ROW_HEIGHT_IN']
    pad = CONFIG['FIGURE_PAD_IN']
    font_size = CONFIG['FIGURE_FONT_SIZE']
    table_font = built.options.get('table_font_size')
    if table_font:
        # px -> pt
        font_size = split_width(table_font)[0] * 0.75

    widths = _column_widths(built)
    edges = [pad]
    for w in widths:
        edges.append(edges[-1] + w)
    total_w = edges[-1] + pad
    n_lead = built.n_lead
    n_total = built.n_total

    # Each line: (kind, [(text, start, span, align)])
    Line = Tuple[str, List[Tuple[str, int, int, str]]]
    lines: List[Line] = []
    if built.title:
        lines.append(('title', [(built.title, 0, n_total, 'center')]))
    if built.subtitle:
        lines.append(('subtitle', [(built.subtitle, 0, n_total, 'center')]))
    if built.caption and not built.title:
        lines.append(('subtitle', [(built.caption, 0, n_total, 'center')]))
    lines.append(('toprule', []))
    if not built.options.get('column_labels_hidden'):
        for cells in built.spanner_rows:
            lines.append(('spanner', [
                (c.label, n_lead + c.start, c.span, 'center') for c in cells if c.label is not None
            ]))
        label_cells = []
        if n_lead:
            label_cells.append((built.stubhead or "", 0, n_lead, 'left'))
        label_cells.extend((c.label, n_lead + j, 1, c.align) for j, c in enumerate(built.columns))
        lines.append(('labels', label_cells))
    for group in built.groups:
        if built.has_groups and not built.group_as_column:
            lines.append(('group', [(group.label or "", 0, n_total, 'left')]))
        for i, brow in enumerate(group.rows):
            cells = []
            if built.group_as_column and i == 0:
                cells.append((group.label or "", 0, 1, 'left'))
            if built.has_stub:
                cells.append((brow.stub or "", n_lead - 1, 1, 'left'))
            cells.extend((t, n_lead + j, 1, c.align) for j, (t, c) in enumerate(zip(brow.cells, built.columns)))
            lines.append(('body', cells))
    lines.append(('bottomrule', []))
    for note in built.source_notes:
        lines.append(('note', [(note, 0, n_total, 'left')]))

    n_text_lines = sum(1 for kind, _ in lines if not kind.endswith('rule'))
    total_h = n_text_lines * row_h + 2 * pad

    with matplotlib.rc_context(FIGURE_RC):
        fig = Figure(figsize=(total_w, total_h), facecolor=FIGURE_COLORS['background'])
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, total_w)
        ax.set_ylim(total_h, 0)
        ax.axis('off')

        sizes = {'title': font_size * 1.25, 'subtitle': font_size * 0.9, 'note': font_size * 0.85}
        cell_pad = CONFIG['FIGURE_CHAR_WIDTH_IN']
        y = pad
        for kind, cells in lines:
            if kind in ('toprule', 'bottomrule'):
                ax.hlines(y, edges[0], edges[-1], colors=FIGURE_COLORS['rule'], linewidth=FIGURE_RULES['heavy'])
                continue
            y_mid = y + row_h / 2
            for text, start, span, align in cells:
                x0, x1 = edges[start], edges[start + span]
                if align == 'right':
                    x, ha = x1 - cell_pad, 'right'
                elif align == 'center':
                    x, ha = (x0 + x1) / 2, 'center'
                else:
                    x, ha = x0 + cell_pad, 'left'
                ax.text(
                    x, y_mid, _mpl_text(text),
                    ha=ha, va='center',
                    fontsize=sizes.get(kind, font_size),
                    color=FIGURE_COLORS['text'],
                )
                if kind == 'spanner':
                    ax.hlines(
                        y + row_h, x0 + cell_pad / 2, x1 - cell_pad / 2,
                        colors=FIGURE_COLORS['light_rule'], linewidth=FIGURE_RULES['light'],
                    )
            y += row_h
            if kind in ('labels', 'group'):
                ax.hlines(y, edges[0], edges[-1], colors=FIGURE_COLORS['light_rule'], linewidth=FIGURE_RULES['light'])

    return fig


__all__ = ['render_figure']
