"""
Styling primitives shared by the renderers.

Keeps the HTML class styles, the LaTeX column specification rules (booktabs +
array p-columns) and the figure rules, colors and rcParams in one place.
"""

from __future__ import annotations

from typing import List, Optional

from ..build import BuiltTable
from ..columns import split_width
from ..constants import CONFIG

# ============================================================================
# HTML
# ============================================================================

HTML_FONT_STACK = (
    "system-ui, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
)

HTML_CLASS_STYLES = {
    'pt_table': (
        "display: table; border-collapse: collapse; margin-left: auto; margin-right: auto; "
        f"color: #333333; font-size: 16px; font-family: {HTML_FONT_STACK}; "
        "background-color: #FFFFFF; border-top: 2px solid #A8A8A8; border-bottom: 2px solid #A8A8A8;"
    ),
    'pt_caption': "padding-top: 4px; padding-bottom: 4px;",
    'pt_heading': "background-color: #FFFFFF; text-align: center; border-bottom-color: #FFFFFF;",
    'pt_title': "color: #333333; font-size: 125%; padding-top: 4px; padding-bottom: 4px;",
    'pt_subtitle': "color: #333333; font-size: 85%; padding-top: 0; padding-bottom: 6px;",
    'pt_bottom_border': "border-bottom: 2px solid #D3D3D3;",
    'pt_col_headings': "border-top: 2px solid #D3D3D3; border-bottom: 2px solid #D3D3D3;",
    'pt_col_heading': (
        "color: #333333; font-weight: normal; text-transform: inherit; vertical-align: bottom; "
        "padding: 5px; overflow-x: hidden;"
    ),
    'pt_column_spanner_outer': "font-weight: normal; padding: 0 4px;",
    'pt_column_spanner': (
        "border-bottom: 2px solid #D3D3D3; vertical-align: bottom; padding: 5px 0; "
        "overflow-x: hidden; display: inline-block; width: 100%;"
    ),
    'pt_group_heading': (
        "padding: 8px 5px; color: #333333; font-weight: initial; text-align: left; "
        "border-top: 2px solid #D3D3D3; border-bottom: 2px solid #D3D3D3; vertical-align: middle;"
    ),
    'pt_row': "padding: 8px 5px; margin: 10px; border-top: 1px solid #D3D3D3; vertical-align: middle;",
    'pt_stub': "color: #333333; font-weight: initial; text-align: left; border-right: 2px solid #D3D3D3; padding-left: 5px; padding-right: 5px;",
    'pt_stub_row_group': "color: #333333; text-align: left; border-right: 2px solid #D3D3D3; vertical-align: top;",
    'pt_empty': "",
    'pt_sourcenote': "font-size: 90%; padding: 4px 5px;",
    'pt_left': "text-align: left;",
    'pt_center': "text-align: center;",
    'pt_right': "text-align: right; font-variant-numeric: tabular-nums;",
}


def html_css(table_id: str, font_size: Optional[str] = None) -> str:
    """Stylesheet scoped to one table id."""
    lines = []
    for cls, decl in HTML_CLASS_STYLES.items():
        if not decl:
            continue
        if cls == 'pt_table' and font_size:
            decl = decl.replace("font-size: 16px;", f"font-size: {font_size};")
        lines.append(f"#{table_id} .{cls} {{ {decl} }}")
    return "\n".join(lines)


def html_inline_style(classes: List[str], font_size: Optional[str] = None) -> str:
    """Concatenate the declarations of several classes for a style= attribute."""
    decls = []
    for cls in classes:
        decl = HTML_CLASS_STYLES.get(cls, "")
        if cls == 'pt_table' and font_size:
            decl = decl.replace("font-size: 16px;", f"font-size: {font_size};")
        if decl:
            decls.append(decl)
    return " ".join(decls)


# ============================================================================
# LaTeX
# ============================================================================

_LATEX_ALIGN = {'left': 'l', 'center': 'c', 'right': 'r'}
_LATEX_RAGGED = {
    'left': r'\raggedright',
    'center': r'\centering',
    'right': r'\raggedleft',
}


def latex_width(width: str) -> str:
    """Convert a normalized width ('150px' / '20%') to a LaTeX length."""
    value, unit = split_width(width)
    if unit == '%':
        return f"{value / 100:.3g}\\linewidth"
    return f"{value * CONFIG['LATEX_PT_PER_PX']:g}pt"


def latex_column_token(align: str, width: Optional[str] = None) -> str:
    """Column token for one column: l/c/r, or an aligned p-column when a width is set."""
    if width is None:
        return _LATEX_ALIGN.get(align, 'l')
    return f">{{{_LATEX_RAGGED.get(align, _LATEX_RAGGED['left'])}\\arraybackslash}}p{{{latex_width(width)}}}"


def build_latex_colspec(built: BuiltTable, insert_bar_between_groups: bool = False) -> str:
    """
    Build the tabular column specification for a BuiltTable.

    - Group column (row_group_as_column) and stub are left-aligned
    - Data columns use their alignment, or p{} when a width is set
    - With insert_bar_between_groups=True a '|' separates the label columns from
      the data columns and adjacent top-level spanners from each other

    Examples
    --------
    - stub + 3 right-aligned columns => 'lrrr'
    - with bars and two spanners of 2 => 'l|rr|rr'
    """
    tokens: List[str] = []
    if built.group_as_column:
        tokens.append('l')
    if built.has_stub:
        tokens.append(latex_column_token('left', built.stub_width))

    data_tokens = [latex_column_token(c.align, c.width) for c in built.columns]
    if insert_bar_between_groups and built.spanner_rows:
        top = built.spanner_rows[0]
        parts: List[str] = []
        for cell in top:
            chunk = ''.join(data_tokens[cell.start:cell.start + cell.span])
            if cell.label is not None and parts and not parts[-1].endswith('|'):
                parts.append('|')
            parts.append(chunk)
            if cell.label is not None:
                parts.append('|')
        spec = ''.join(parts).rstrip('|')
    else:
        spec = ''.join(data_tokens)

    lead = ''.join(tokens)
    if insert_bar_between_groups and lead and spec:
        return f"{lead}|{spec}"
    return lead + spec


# ============================================================================
# Figure (PNG / PDF)
# ============================================================================

FIGURE_RULES = {
    'heavy': 1.2,   # top and bottom rules
    'light': 0.6,   # below headings, spanners and groups
}
FIGURE_COLORS = {
    'text': '#333333',
    'rule': '#333333',
    'light_rule': '#A8A8A8',
    'background': 'white',
}
# Applied with matplotlib.rc_context while drawing and saving, never globally
FIGURE_RC = {
    'font.family': 'sans-serif',
    'font.sans-serif': ['Arial', 'Helvetica', 'DejaVu Sans'],
    'mathtext.fontset': 'dejavusans',
    'mathtext.default': 'regular',
    'savefig.transparent': False,
    # Font embedding (editable text)
    'pdf.fonttype': 42,
    'ps.fonttype': 42,
    'svg.fonttype': 'none',
}


__all__ = [
    'HTML_CLASS_STYLES',
    'html_css',
    'html_inline_style',
    'latex_width',
    'latex_column_token',
    'build_latex_colspec',
    'FIGURE_RULES',
    'FIGURE_COLORS',
    'FIGURE_RC',
]
