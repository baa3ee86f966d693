"""
RTF rendering of a BuiltTable.

Writes a single RTF 1 document: centered heading paragraphs, one table built
from \\trowd/\\cellx rows (spanners use horizontally merged cells), and source
notes as trailing paragraphs. Column widths come from cols_width() (pixels
scaled to twips, percentages of a 6.5 inch text width) or a 1 inch default.
"""

from __future__ import annotations

from typing import List, Optional

from ..build import BuiltTable
from ..columns import split_width
from ..constants import CONFIG
from ..formatters import escape_rtf

_TEXT_WIDTH_TWIPS = 9360  # 6.5 inches
_RTF_ALIGN = {'left': r'\ql', 'center': r'\qc', 'right': r'\qr'}
_BORDER_TOP = r'\clbrdrt\brdrs\brdrw15'
_BORDER_BOTTOM = r'\clbrdrb\brdrs\brdrw15'
_BORDER_BOTTOM_LIGHT = r'\clbrdrb\brdrs\brdrw5'


def _twips(width: Optional[str]) -> int:
    if width is None:
        return CONFIG['RTF_DEFAULT_COL_TWIPS']
    value, unit = split_width(width)
    if unit == '%':
        return int(round(_TEXT_WIDTH_TWIPS * value / 100))
    return int(round(value * CONFIG['RTF_TWIPS_PER_PX']))


def _column_edges(built: BuiltTable) -> List[int]:
    """Right edge (cumulative twips) of every column, lead columns first."""
    widths = []
    if built.group_as_column:
        widths.append(_twips(None))
    if built.has_stub:
        widths.append(_twips(built.stub_width))
    widths.extend(_twips(c.width) for c in built.columns)
    edges, total = [], 0
    for w in widths:
        total += w
        edges.append(total)
    return edges


def _table_row(
    cells: List[str],
    edges: List[int],
    aligns: List[str],
    borders: List[str],
    merge_flags: Optional[List[str]] = None,
    header: bool = False,
    bold: bool = False,
) -> str:
    """One \\trowd ... \\row block; merge_flags hold '', '\\clmgf' or '\\clmrg' per cell."""
    merge_flags = merge_flags or [''] * len(cells)
    out = [r"\trowd\trgaph108\trleft0" + (r"\trhdr" if header else "")]
    for edge, border, flag in zip(edges, borders, merge_flags):
        out.append(f"{flag}{border}\\cellx{edge}")
    body = []
    for text, align in zip(cells, aligns):
        content = escape_rtf(text)
        if bold and content:
            content = r"{\b " + content + "}"
        body.append(rf"\pard\intbl{_RTF_ALIGN.get(align, _RTF_ALIGN['left'])} {content}\cell")
    out.append("".join(body))
    out.append(r"\row")
    return "\n".join(out)


def render_rtf(built: BuiltTable) -> str:
    """Render a BuiltTable to an RTF document string."""
    edges = _column_edges(built)
    n_total = built.n_total
    n_lead = built.n_lead
    fs = CONFIG['RTF_FONT_SIZE_HALF_PT']

    out: List[str] = [
        r"{\rtf1\ansi\ansicpg1252\deff0",
        r"{\fonttbl{\f0\fswiss " + escape_rtf(CONFIG['RTF_FONT']) + ";}}",
        rf"\f0\fs{fs}",
    ]
    if built.title:
        out.append(rf"{{\pard\qc\fs{fs + 8} " + escape_rtf(built.title) + r"\par}")
    if built.subtitle:
        out.append(rf"{{\pard\qc\fs{fs - 2} " + escape_rtf(built.subtitle) + r"\par}")
    if built.caption:
        out.append(r"{\pard\qc\i " + escape_rtf(built.caption) + r"\par}")

    first_row = True

    def top_border() -> str:
        nonlocal first_row
        if first_row:
            first_row = False
            return _BORDER_TOP
        return ""

    if not built.options.get('column_labels_hidden'):
        for cells in built.spanner_rows:
            texts, flags, borders, aligns = [], [], [], []
            tb = top_border()
            for _ in range(n_lead):
                texts.append("")
                flags.append("")
                borders.append(tb)
                aligns.append('left')
            for cell in cells:
                for k in range(cell.span):
                    texts.append(cell.label if (cell.label is not None and k == 0) else "")
                    if cell.span > 1:
                        flags.append(r"\clmgf" if k == 0 else r"\clmrg")
                    else:
                        flags.append("")
                    borders.append(tb + (_BORDER_BOTTOM_LIGHT if cell.label is not None else ""))
                    aligns.append('center')
            out.append(_table_row(texts, edges, aligns, borders, flags, header=True))

        tb = top_border()
        texts = [""] * n_lead
        if n_lead:
            texts[-1] = built.stubhead or ""
        texts += [c.label for c in built.columns]
        aligns = ['left'] * n_lead + [c.align for c in built.columns]
        borders = [tb + _BORDER_BOTTOM] * n_total
        out.append(_table_row(texts, edges, aligns, borders, header=True))

    all_rows = built.all_rows()
    last_index = all_rows[-1].index if all_rows else None
    for group in built.groups:
        if built.has_groups and not built.group_as_column:
            tb = top_border()
            texts = [group.label or ""] + [""] * (n_total - 1)
            flags = ([r"\clmgf"] + [r"\clmrg"] * (n_total - 1)) if n_total > 1 else [""]
            borders = [tb + _BORDER_BOTTOM_LIGHT] * n_total
            out.append(_table_row(texts, edges, ['left'] * n_total, borders, flags, bold=True))
        for i, brow in enumerate(group.rows):
            tb = top_border()
            bottom = _BORDER_BOTTOM if brow.index == last_index else ""
            texts = []
            if built.group_as_column:
                texts.append((group.label or "") if i == 0 else "")
            if built.has_stub:
                texts.append(brow.stub or "")
            texts.extend(brow.cells)
            aligns = ['left'] * n_lead + [c.align for c in built.columns]
            out.append(_table_row(texts, edges, aligns, [tb + bottom] * n_total))

    out.append(r"\pard\par")
    for note in built.source_notes:
        out.append(rf"{{\pard\ql\fs{fs - 2} " + escape_rtf(note) + r"\par}")
    out.append("}")
    return "\n".join(out)


__all__ = ['render_rtf']
