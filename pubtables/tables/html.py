"""
HTML rendering of a BuiltTable.

Produces a <div> wrapping a scoped <style> block and a <table>; with
inline_css=True the class declarations are written into style= attributes
instead, which suits e-mail clients and other HTML without stylesheets.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from ..build import BuiltTable
from ..formatters import escape_html
from .style import html_css, html_inline_style


class _Attrs:
    """Emit class= or style= attributes depending on the CSS mode."""

    def __init__(self, inline_css: bool, font_size: Optional[str]):
        self.inline_css = inline_css
        self.font_size = font_size

    def __call__(self, classes: List[str], style: Optional[str] = None, **extra) -> str:
        parts = []
        for key, value in extra.items():
            if value is None:
                continue
            parts.append(f'{key.rstrip("_")}="{escape_html(str(value))}"')
        if self.inline_css:
            decl = html_inline_style(classes, self.font_size)
            if style:
                decl = f"{decl} {style}".strip()
            if decl:
                parts.append(f'style="{decl}"')
        else:
            parts.append(f'class="{" ".join(classes)}"')
            if style:
                parts.append(f'style="{style}"')
        return " " + " ".join(parts)


def render_html(built: BuiltTable, inline_css: bool = False) -> str:
    """Render a BuiltTable to an HTML fragment."""
    table_id = built.table_id or f"pt_{uuid.uuid4().hex[:10]}"
    font_size = built.options.get('table_font_size')
    attrs = _Attrs(inline_css, font_size)
    n_total = built.n_total
    n_lead = built.n_lead

    out: List[str] = [f'<div id="{escape_html(table_id)}" style="overflow-x: auto; overflow-y: auto;">']
    if not inline_css:
        out.append("<style>")
        out.append(html_css(table_id, font_size))
        out.append("</style>")

    table_style = None
    if built.options.get('table_width'):
        table_style = f"width: {built.options['table_width']};"
    out.append(f"<table{attrs(['pt_table'], table_style)}>")

    if built.caption:
        out.append(f"<caption{attrs(['pt_caption'])}>{escape_html(built.caption)}</caption>")

    # Column widths
    lead_widths = ([None] if built.group_as_column else []) + ([built.stub_width] if built.has_stub else [])
    widths = lead_widths + [c.width for c in built.columns]
    if any(w is not None for w in widths):
        out.append("<colgroup>")
        for w in widths:
            out.append(f'<col style="width: {w};"/>' if w else "<col/>")
        out.append("</colgroup>")

    out.append("<thead>")
    if built.title:
        title_classes = ['pt_heading', 'pt_title']
        if not built.subtitle:
            title_classes.append('pt_bottom_border')
        out.append(
            f'<tr><td colspan="{n_total}"{attrs(title_classes)}>'
            f"{escape_html(built.title)}</td></tr>"
        )
    if built.subtitle:
        out.append(
            f'<tr><td colspan="{n_total}"{attrs(["pt_heading", "pt_subtitle", "pt_bottom_border"])}>'
            f"{escape_html(built.subtitle)}</td></tr>"
        )

    if not built.options.get('column_labels_hidden'):
        for cells in built.spanner_rows:
            row = ["<tr>"]
            for _ in range(n_lead):
                row.append(f"<th{attrs(['pt_col_heading', 'pt_empty'])}></th>")
            for cell in cells:
                if cell.label is None:
                    row.append(f"<th{attrs(['pt_col_heading', 'pt_empty'])}></th>")
                else:
                    row.append(
                        f'<th colspan="{cell.span}" scope="colgroup"'
                        f"{attrs(['pt_center', 'pt_column_spanner_outer'])}>"
                        f"<span{attrs(['pt_column_spanner'])}>{escape_html(cell.label)}</span></th>"
                    )
            row.append("</tr>")
            out.append("".join(row))

        row = [f"<tr{attrs(['pt_col_headings'])}>"]
        if n_lead:
            stubhead = escape_html(built.stubhead) if built.stubhead else ""
            colspan = f' colspan="{n_lead}"' if n_lead > 1 else ""
            row.append(f'<th scope="col"{colspan}{attrs(["pt_col_heading", "pt_left"])}>{stubhead}</th>')
        for col in built.columns:
            row.append(
                f'<th scope="col"{attrs(["pt_col_heading", f"pt_{col.align}"])}>'
                f"{escape_html(col.label)}</th>"
            )
        row.append("</tr>")
        out.append("".join(row))
    out.append("</thead>")

    out.append("<tbody>")
    for group in built.groups:
        if built.has_groups and not built.group_as_column:
            out.append(
                f'<tr><th colspan="{n_total}" scope="colgroup"{attrs(["pt_group_heading"])}>'
                f"{escape_html(group.label or '')}</th></tr>"
            )
        for i, brow in enumerate(group.rows):
            row = ["<tr>"]
            if built.group_as_column and i == 0:
                row.append(
                    f'<th rowspan="{len(group.rows)}" scope="rowgroup"'
                    f"{attrs(['pt_row', 'pt_stub_row_group'])}>{escape_html(group.label or '')}</th>"
                )
            if built.has_stub:
                row.append(f'<th scope="row"{attrs(["pt_row", "pt_stub"])}>{escape_html(brow.stub or "")}</th>')
            for col, text in zip(built.columns, brow.cells):
                row.append(f"<td{attrs(['pt_row', f'pt_{col.align}'])}>{escape_html(text)}</td>")
            row.append("</tr>")
            out.append("".join(row))
    out.append("</tbody>")

    if built.source_notes:
        out.append("<tfoot>")
        for note in built.source_notes:
            out.append(f'<tr><td colspan="{n_total}"{attrs(["pt_sourcenote"])}>{escape_html(note)}</td></tr>')
        out.append("</tfoot>")

    out.append("</table>")
    out.append("</div>")
    return "\n".join(out)


def html_document(fragment: str, title: Optional[str] = None) -> str:
    """Wrap an HTML fragment in a minimal standalone document."""
    head_title = f"<title>{escape_html(title)}</title>" if title else ""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        f'<head>\n<meta charset="utf-8"/>\n{head_title}\n</head>\n'
        f"<body>\n{fragment}\n</body>\n"
        "</html>\n"
    )


__all__ = ['render_html', 'html_document']
