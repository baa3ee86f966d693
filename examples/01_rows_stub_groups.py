#!/usr/bin/env python3
"""
Rows, Stub and Row Groups — Example Tables
==========================================

This script builds display tables from the bundled example data and shows the
row-oriented features: a stub of row labels, row groups (as heading rows and
as a leading column), custom group order, a stubhead label, previews of
longer frames, and missing-value substitution.

Every table is written in every export format so the outputs can be compared
side by side.

Inputs
------
- pubtables.datasets.exibble(): 8 rows with one column per common dtype
- pubtables.datasets.gtcars(): sports cars with power and torque figures

Outputs
-------
- results/01_rows_stub_groups/<table>.{html,tex,rtf,csv,png,pdf}
- results/01_rows_stub_groups/output_summary.txt

Usage
-----
python examples/01_rows_stub_groups.py
PUBTABLES_LOG_LEVEL=DEBUG python examples/01_rows_stub_groups.py
"""

import os
import sys

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
    exibble,
    gt,
    gt_preview,
    gtcars,
    log_script_end,
    setup_script,
)

# ============================================================================
# Configuration & Setup
# ============================================================================

results_dir, logger, dirs = setup_script(
    __file__,
    output_subdirs=['01_rows_stub_groups'],
    results_dir=CONFIG['EXAMPLES_RESULTS_DIR'],
)
out_dir = dirs['01_rows_stub_groups']
EXTENSIONS = ['.html', '.tex', '.rtf', '.csv', '.png', '.pdf']


def save_all(tbl, name):
    for ext in EXTENSIONS:
        tbl.gtsave(f"{name}{ext}", path=out_dir, logger=logger)


# ============================================================================
# Stub from a column, groups as heading rows
# ============================================================================

logger.info("Building exibble table with a stub and row groups...")

stub_groups = (
    gt(exibble(), rowname_col='row', groupname_col='group')
    .tab_header(title="Example data", subtitle="Stub from 'row', groups from 'group'")
    .tab_stubhead("Row")
    .cols_hide(['fctr', 'datetime'])
    .sub_missing(columns=['num', 'char', 'date', 'time', 'currency'])
    .tab_source_note("Missing values are shown as an em dash.")
)
save_all(stub_groups, 'exibble_stub_groups')

# ============================================================================
# Groups as a column, custom group order
# ============================================================================

logger.info("Building exibble table with row groups as a column...")

groups_as_column = (
    stub_groups
    .row_group_order(['grp_b', 'grp_a'])
    .tab_options(row_group_as_column=True)
    .tab_header(title="Example data", subtitle="Groups shown as a leading column, grp_b first")
)
save_all(groups_as_column, 'exibble_groups_as_column')

# ============================================================================
# Multi-column row groups
# ============================================================================

logger.info("Building gtcars table grouped by country and manufacturer...")

cars = gtcars().sort_values(['ctry_origin', 'mfr'], kind='stable').reset_index(drop=True)
grouped_cars = (
    gt(cars, rowname_col='model', groupname_col=['ctry_origin', 'mfr'], row_group_sep=': ')
    .cols_hide(['hp_rpm', 'trq_rpm'])
    .cols_label(year='Year', hp='HP', trq='Torque', msrp='MSRP')
    .fmt_integer('msrp', pattern="${x}")
    .tab_caption("Cars grouped by country of origin and manufacturer")
)
save_all(grouped_cars, 'gtcars_grouped')

# ============================================================================
# Previews
# ============================================================================

logger.info("Building previews of gtcars...")

save_all(gt_preview(gtcars()), 'gtcars_preview')
save_all(gt_preview(gtcars(), top_n=3, bottom_n=2, incl_rownums=False), 'gtcars_preview_no_rownums')

# ============================================================================
# Index as stub
# ============================================================================

indexed = exibble().set_index('row')[['num', 'char', 'currency']]
save_all(gt(indexed, rownames_to_stub=True).fmt_number('num', decimals=1), 'exibble_index_stub')

# ============================================================================
# Finish
# ============================================================================

create_output_summary(out_dir, title="Rows, stub and row groups", logger=logger)
log_script_end(logger)
logger.info(f"Tables written to: {out_dir}")
