"""
Renderers for built tables (HTML, LaTeX, RTF, matplotlib figure).

Central place for the output formats written by gtsave(); styling primitives
live in tables.style.
"""

from .figure import render_figure
from .html import html_document, render_html
from .latex import render_latex
from .rtf import render_rtf
from .style import build_latex_colspec

__all__ = [
    'render_html',
    'html_document',
    'render_latex',
    'render_rtf',
    'render_figure',
    'build_latex_colspec',
]
