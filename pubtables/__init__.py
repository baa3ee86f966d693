"""
Publication-quality display tables from pandas DataFrames.

This package provides:
- core: the GT table object, gt() and gt_preview()
- columns / tabs / fmt: column operations, table parts and cell formatting
- selectors: column selection helpers (starts_with, contains, ...)
- report_utils: export to HTML, LaTeX, RTF, PNG, PDF and CSV (gtsave)
- datasets: small example frames (exibble, gtcars)
- logging_utils / script_utils: logging and example-script setup

Example Usage
-------------
>>> from pubtables import gt, exibble, starts_with
>>> tbl = gt(exibble(), rowname_col='row', groupname_col='group')
>>> tbl = tbl.cols_hide(starts_with('date')).fmt_number('num', decimals=1)
>>> tbl.gtsave('exibble.tex')
"""

__version__ = "0.1.0"

# Configuration
from .constants import CONFIG

# Table object
from .core import GT, gt, gt_preview

# Operations (also bound as GT methods)
from .columns import (
    px,
    pct,
    cols_align,
    cols_label,
    cols_width,
    cols_move,
    cols_move_to_start,
    cols_move_to_end,
    cols_hide,
    cols_unhide,
    cols_merge,
    cols_merge_range,
    cols_merge_uncert,
)
from .tabs import (
    tab_header,
    tab_stubhead,
    tab_source_note,
    tab_caption,
    tab_spanner,
    tab_spanner_delim,
    tab_options,
    row_group_order,
)
from .fmt import fmt, fmt_number, fmt_integer, fmt_percent, sub_missing

# Selectors
from .selectors import starts_with, ends_with, contains, matches, everything, one_of

# Export
from .report_utils import (
    as_raw_html,
    as_latex,
    as_rtf,
    as_data_frame,
    render_figure,
    gtsave,
    validate_latex_table,
    compile_latex_table,
    create_output_summary,
)

# Datasets
from .datasets import exibble, gtcars

# Logging and setup
from .logging_utils import setup_logging, log_script_start, log_script_end, log_table_summary
from .script_utils import setup_script

__all__ = [
    # Configuration
    'CONFIG',
    # Table object
    'GT',
    'gt',
    'gt_preview',
    # Columns
    'px',
    'pct',
    'cols_align',
    'cols_label',
    'cols_width',
    'cols_move',
    'cols_move_to_start',
    'cols_move_to_end',
    'cols_hide',
    'cols_unhide',
    'cols_merge',
    'cols_merge_range',
    'cols_merge_uncert',
    # Table parts
    'tab_header',
    'tab_stubhead',
    'tab_source_note',
    'tab_caption',
    'tab_spanner',
    'tab_spanner_delim',
    'tab_options',
    'row_group_order',
    # Formatting
    'fmt',
    'fmt_number',
    'fmt_integer',
    'fmt_percent',
    'sub_missing',
    # Selectors
    'starts_with',
    'ends_with',
    'contains',
    'matches',
    'everything',
    'one_of',
    # Export
    'as_raw_html',
    'as_latex',
    'as_rtf',
    'as_data_frame',
    'render_figure',
    'gtsave',
    'validate_latex_table',
    'compile_latex_table',
    'create_output_summary',
    # Datasets
    'exibble',
    'gtcars',
    # Logging and setup
    'setup_logging',
    'log_script_start',
    'log_script_end',
    'log_table_summary',
    'setup_script',
]
