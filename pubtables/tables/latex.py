"""
LaTeX rendering of a BuiltTable.

The tabular itself is written by pandas (DataFrame.to_latex over a frame of
escaped cell text, with column_format, caption and label). The output is then
post-processed:
- heading in \\caption* ({\\large title} \\\\ {\\small subtitle})
- spanners as \\multicolumn rows followed by \\cmidrule(lr){a-b}, inserted
  after \\toprule
- row groups as full-width \\multicolumn rows, or \\multirow cells when the
  group is shown as a column
- source notes in a footnotesize minipage below the tabular
"""

from __future__ import annotations

from typing import List

import pandas as pd

from ..build import BuiltTable
from ..constants import CONFIG
from ..formatters import escape_latex
from .style import build_latex_colspec


def _row(cells: List[str]) -> str:
    return " & ".join(cells) + r" \\"


def _cell(text) -> str:
    # Blank lines end a paragraph, which is illegal inside a tabular cell
    return escape_latex(text or "").replace('\n', ' ')


def _wrap_tabular_with_resizebox(latex_table: str) -> str:
    """Wrap the tabular environment with a resizebox to match page width."""
    lines = latex_table.split('\n')
    begin_idx = next((i for i, ln in enumerate(lines) if ln.strip().startswith('\\begin{tabular}')), None)
    end_idx = next((i for i, ln in enumerate(lines) if ln.strip().startswith('\\end{tabular}')), None)
    if begin_idx is None or end_idx is None:
        return latex_table
    lines.insert(begin_idx, r"\resizebox{\linewidth}{!}{%")
    lines.insert(end_idx + 2, r"}")
    return '\n'.join(lines)


def _display_frame(built: BuiltTable) -> pd.DataFrame:
    """Escaped cell text, one frame row per body row, lead columns first."""
    body: List[List[str]] = []
    for group in built.groups:
        for i, brow in enumerate(group.rows):
            cells: List[str] = []
            if built.group_as_column:
                if i == 0:
                    cells.append(rf"\multirow{{{len(group.rows)}}}{{*}}{{{_cell(group.label)}}}")
                else:
                    cells.append("")
            if built.has_stub:
                cells.append(_cell(brow.stub))
            cells.extend(_cell(text) for text in brow.cells)
            body.append(cells)
    # Positional column names keep duplicate labels legal; labels go in via header=
    return pd.DataFrame(body, columns=range(built.n_total), dtype=object)


def _header_labels(built: BuiltTable) -> List[str]:
    labels = [""] * built.n_lead
    if built.n_lead and built.stubhead:
        labels[-1] = _cell(built.stubhead)
    return labels + [_cell(c.label) for c in built.columns]


def _add_spanner_headers(lines: List[str], built: BuiltTable) -> List[str]:
    """Insert spanner rows and their \\cmidrule lines after \\toprule."""
    toprule_idx = next((i for i, ln in enumerate(lines) if ln.strip() == r'\toprule'), None)
    if toprule_idx is None:
        return lines

    n_lead = built.n_lead
    if n_lead > 1:
        # The stubhead spans the group column and the stub
        header = [rf"\multicolumn{{{n_lead}}}{{l}}{{{_cell(built.stubhead)}}}"]
        header.extend(_cell(c.label) for c in built.columns)
        lines[toprule_idx + 1] = _row(header)

    spanner_lines: List[str] = []
    for cells in built.spanner_rows:
        parts = [""] * n_lead
        rules = []
        for cell in cells:
            if cell.label is None:
                parts.append("")
                continue
            parts.append(rf"\multicolumn{{{cell.span}}}{{c}}{{{_cell(cell.label)}}}")
            first = n_lead + cell.start + 1
            last = first + cell.span - 1
            rules.append(rf"\cmidrule(lr){{{first}-{last}}}")
        spanner_lines.append(_row(parts))
        spanner_lines.append(" ".join(rules))
    return lines[:toprule_idx + 1] + spanner_lines + lines[toprule_idx + 1:]


def _add_group_rows(lines: List[str], built: BuiltTable) -> List[str]:
    """Insert group heading rows (or separating rules) between body rows."""
    bottom_idx = next(i for i, ln in enumerate(lines) if ln.strip() == r'\bottomrule')
    n_rows = len(built.all_rows())
    body_start = bottom_idx - n_rows
    body = lines[body_start:bottom_idx]

    out: List[str] = []
    pos = 0
    for g_idx, group in enumerate(built.groups):
        if built.has_groups and not built.group_as_column:
            if g_idx > 0:
                out.append(r"\midrule")
            out.append(_row([rf"\multicolumn{{{built.n_total}}}{{l}}{{{_cell(group.label)}}}"]))
            out.append(r"\midrule")
        elif built.group_as_column and g_idx > 0:
            out.append(r"\midrule")
        out.extend(body[pos:pos + len(group.rows)])
        pos += len(group.rows)
    return lines[:body_start] + out + lines[bottom_idx:]


def render_latex(
    built: BuiltTable,
    wrap_with_resizebox: bool = False,
    insert_bar_between_groups: bool = False,
) -> str:
    """
    Render a BuiltTable to a LaTeX table environment.

    Raises
    ------
    ValueError
        If the table has no visible columns (nothing to put in a tabular)
    """
    if built.n_total == 0:
        raise ValueError("Cannot render LaTeX: the table has no visible columns (all columns are hidden)")

    colspec = build_latex_colspec(built, insert_bar_between_groups=insert_bar_between_groups)
    labels_hidden = bool(built.options.get('column_labels_hidden'))

    latex_table = _display_frame(built).to_latex(
        index=False,
        header=False if labels_hidden else _header_labels(built),
        caption=_cell(built.caption) if built.caption else None,
        label=f"tab:{built.table_id}" if built.table_id else None,
        position='!t',
        escape=False,
        column_format=colspec,
        na_rep=CONFIG['MISSING_TEXT'],
        multicolumn=True,
        multicolumn_format='c',
        bold_rows=False,
        longtable=False,
    )
    lines = latex_table.rstrip('\n').split('\n')

    if not labels_hidden:
        lines = _add_spanner_headers(lines, built)
    lines = _add_group_rows(lines, built)

    # Heading goes first in the float; \centering right before the tabular
    if built.title:
        heading = [r"\caption*{", rf"{{\large {_cell(built.title)}}}"]
        if built.subtitle:
            heading[-1] += r" \\"
            heading.append(rf"{{\small {_cell(built.subtitle)}}}")
        heading.append("}")
        lines[1:1] = heading
    if not any(ln.strip() == r'\centering' for ln in lines):
        tabular_idx = next(i for i, ln in enumerate(lines) if ln.startswith(r'\begin{tabular}'))
        lines.insert(tabular_idx, r"\centering")

    if built.source_notes:
        end_idx = next(i for i, ln in enumerate(lines) if ln.startswith(r'\end{tabular}'))
        notes = [
            r"\begin{minipage}{\linewidth}",
            r"\vspace{.05em}",
            " \\\\\n".join(rf"\footnotesize {_cell(note)}" for note in built.source_notes),
            r"\end{minipage}",
        ]
        lines[end_idx + 1:end_idx + 1] = notes

    latex_table = "\n".join(lines)
    if wrap_with_resizebox:
        latex_table = _wrap_tabular_with_resizebox(latex_table)
    return latex_table


__all__ = ['render_latex']
