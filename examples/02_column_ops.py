#!/usr/bin/env python3
"""
Column Operations — Example Tables
==================================

This script builds display tables that exercise the column operations:
alignment, labels, widths, moving, hiding, spanners (explicit, nested and from
delimited column names) and the three kinds of column merges (range,
uncertainty and pattern merges with conditional sections).

Inputs
------
- pubtables.datasets.exibble()
- pubtables.datasets.gtcars()
- a small summary frame built in this script (means and SDs per group)

Outputs
-------
- results/02_column_ops/<table>.{html,tex,rtf,csv,png,pdf}
- results/02_column_ops/output_summary.txt

Usage
-----
python examples/02_column_ops.py
"""

import os
import sys

import pandas as pd

# Ensure repo root is on sys.path for 'pubtables' imports
_cur = os.path.dirname(__file__)
for _up in (os.path.join(_cur, '..'), os.path.join(_cur, '..', '..')):
    _cand = os.path.abspath(_up)
    if os.path.isdir(os.path.join(_cand, 'pubtables')) and _cand not in sys.path:
        sys.path.insert(0, _cand)
        break

from pubtables import (
    CONFIG,
    create_output_summary,
    ends_with,
    everything,
    exibble,
    gt,
    gtcars,
    log_script_end,
    px,
    setup_script,
    starts_with,
)

# ============================================================================
# Configuration & Setup
# ============================================================================

results_dir, logger, dirs = setup_script(
    __file__,
    output_subdirs=['02_column_ops'],
    results_dir=CONFIG['EXAMPLES_RESULTS_DIR'],
)
out_dir = dirs['02_column_ops']
EXTENSIONS = ['.html', '.tex', '.rtf', '.csv', '.png', '.pdf']


def save_all(tbl, name):
    for ext in EXTENSIONS:
        tbl.gtsave(f"{name}{ext}", path=out_dir, logger=logger)


# ============================================================================
# Alignment, labels, widths and moves
# ============================================================================

logger.info("Building exibble table with relabelled, resized and moved columns...")

layout = (
    gt(exibble(), rowname_col='row')
    .cols_hide(['group', 'fctr'])
    .cols_move_to_start(['char'])
    .cols_move('currency', after='num')
    .cols_align('center', columns=starts_with('date'))
    .cols_label(num='Number', char='Fruit', currency='Price')
    .cols_width({'char': px(110), ends_with('time'): 90, everything(): '80px'})
    .fmt_number('num', decimals=1)
    .fmt_number('currency', decimals=2, pattern="${x}")
    .tab_header(title="Column layout")
)
save_all(layout, 'exibble_layout')

# ============================================================================
# Spanners
# ============================================================================

logger.info("Building gtcars table with nested spanners...")

cars = gtcars()
spanned = (
    gt(cars, rowname_col='model')
    .cols_hide(['mfr', 'ctry_origin'])
    .tab_spanner("Power", columns=['hp', 'hp_rpm'], id='power')
    .tab_spanner("Torque", columns=['trq', 'trq_rpm'], id='torque')
    .tab_spanner("Performance", spanners=['power', 'torque'])
    .cols_label(hp='HP', hp_rpm='RPM', trq='lb-ft', trq_rpm='RPM', msrp='MSRP', year='Year')
    .fmt_integer('msrp', pattern="${x}")
    .tab_stubhead("Model")
)
save_all(spanned, 'gtcars_spanners')

logger.info("Building summary table with spanners from delimited names...")

summary = pd.DataFrame({
    'measure': ['Reaction time (ms)', 'Accuracy', 'Confidence'],
    'Experts_mean': [612.4, 0.91, 4.2],
    'Experts_sd': [88.1, 0.05, 0.6],
    'Novices_mean': [745.9, 0.72, 3.1],
    'Novices_sd': [120.3, 0.11, 0.9],
})
delim = (
    gt(summary, rowname_col='measure')
    .tab_spanner_delim("_")
    .fmt_number(ends_with('mean'), decimals=2)
    .fmt_number(ends_with('sd'), decimals=2)
    .tab_source_note("Values are group means and standard deviations.")
)
save_all(delim, 'summary_spanner_delim')

# ============================================================================
# Merges
# ============================================================================

logger.info("Building merged-column tables...")

ranges = (
    gt(cars, rowname_col='model')
    .cols_hide(['mfr', 'ctry_origin', 'msrp'])
    .cols_merge_range('hp', 'trq')
    .cols_label(hp='HP–Torque')
    .cols_merge(['hp_rpm', 'trq_rpm'], pattern="{1}<< / {2}>> rpm")
    .cols_label(hp_rpm='Peak RPM')
)
save_all(ranges, 'gtcars_merge_range')

uncert = (
    gt(summary, rowname_col='measure')
    .fmt_number(['Experts_mean', 'Experts_sd', 'Novices_mean', 'Novices_sd'], decimals=2)
    .cols_merge_uncert('Experts_mean', 'Experts_sd')
    .cols_merge_uncert('Novices_mean', 'Novices_sd')
    .cols_label(Experts_mean='Experts', Novices_mean='Novices')
    .tab_caption("Group means ± SD")
)
save_all(uncert, 'summary_merge_uncert')

# ============================================================================
# Finish
# ============================================================================

create_output_summary(out_dir, title="Column operations", logger=logger)
log_script_end(logger)
logger.info(f"Tables written to: {out_dir}")
