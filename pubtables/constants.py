"""
Central repository for shared defaults used when building and exporting tables.

All constants are exported via the CONFIG dictionary, which is the single source
of truth for configuration values used across the package.

Usage
-----
>>> from pubtables import CONFIG
>>> print(CONFIG['MISSING_TEXT'])
NA
>>> print(CONFIG['RANGE_SEP'])
–
"""

from pathlib import Path

# ============================================================================
# Repository Paths (computed first for use in CONFIG)
# ============================================================================
_REPO_ROOT = Path(__file__).parent.parent  # Root of this git repository
_EXAMPLES_DIR = _REPO_ROOT / "examples"

# ============================================================================
# CONFIG Dictionary - All Constants in One Place
# ============================================================================

CONFIG = {
    # ========================================================================
    # Repository Structure
    # ========================================================================
    'REPO_ROOT': _REPO_ROOT,
    'EXAMPLES_DIR': _EXAMPLES_DIR,
    'EXAMPLES_RESULTS_DIR': _EXAMPLES_DIR / "results",

    # ========================================================================
    # Cell Text
    # ========================================================================
    'MISSING_TEXT': "NA",              # Shown for missing values without sub_missing()
    'SUB_MISSING_TEXT': "—",      # Default replacement used by sub_missing()
    'ROW_GROUP_SEP': " - ",            # Joins multiple group columns into one label
    'ROW_GROUP_NA_LABEL': "NA",        # Label of the trailing group for missing keys
    'FLOAT_SIG_DIGITS': 15,            # Default float rendering precision

    # ========================================================================
    # Formatting Defaults
    # ========================================================================
    'DEFAULT_DECIMALS': 2,
    'PERCENT_DECIMALS': 1,
    'SEP_MARK': ",",
    'DEC_MARK': ".",

    # ========================================================================
    # Column Merges
    # ========================================================================
    'RANGE_SEP': "–",             # En dash between range begin and end
    'UNCERT_SEP': " ± ",          # Plus-minus between value and uncertainty

    # ========================================================================
    # Preview
    # ========================================================================
    'PREVIEW_TOP_N': 5,
    'PREVIEW_BOTTOM_N': 1,

    # ========================================================================
    # Export
    # ========================================================================
    'EXPORT_EXTENSIONS': {
        '.html': 'html',
        '.htm': 'html',
        '.tex': 'latex',
        '.ltx': 'latex',
        '.rnw': 'latex',
        '.rtf': 'rtf',
        '.png': 'png',
        '.pdf': 'pdf',
        '.csv': 'csv',
    },
    'FIGURE_DPI': 200,                 # Raster resolution for PNG export
    'FIGURE_FONT_SIZE': 9,             # Points
    'FIGURE_ROW_HEIGHT_IN': 0.28,      # Inches per rendered row
    'FIGURE_CHAR_WIDTH_IN': 0.085,     # Inches per character when estimating widths
    'FIGURE_PAD_IN': 0.15,             # Whitespace around the table
    'RTF_FONT': "Helvetica",
    'RTF_FONT_SIZE_HALF_PT': 20,       # RTF font sizes are given in half points
    'RTF_TWIPS_PER_PX': 15,
    'RTF_DEFAULT_COL_TWIPS': 1440,
    'LATEX_ENGINE': "pdflatex",
    'LATEX_PT_PER_PX': 0.75,
    'LATEX_PREAMBLE_PACKAGES': [
        'booktabs',
        'multirow',
        'array',
        'caption',
        'amsmath',
        'graphicx',
    ],
}
