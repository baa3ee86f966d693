"""Pytest configuration and shared fixtures."""

import shutil

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from pubtables import exibble, gt, gtcars


@pytest.fixture
def exibble_df() -> pd.DataFrame:
    """The 8-row example frame."""
    return exibble()


@pytest.fixture
def gtcars_df() -> pd.DataFrame:
    """The sports-car frame."""
    return gtcars()


@pytest.fixture
def small_df() -> pd.DataFrame:
    """Three rows with a label column, two groups and one missing value."""
    return pd.DataFrame({
        'name': ['a', 'b', 'c'],
        'grp': ['g1', 'g1', 'g2'],
        'x': [1.5, np.nan, 3.25],
        'y': [10, 20, 30],
    })


@pytest.fixture
def small_tbl(small_df):
    """Table over small_df with a stub and row groups."""
    return gt(small_df, rowname_col='name', groupname_col='grp')


@pytest.fixture
def stats_df() -> pd.DataFrame:
    """Summary statistics with delimited column names."""
    return pd.DataFrame({
        'measure': ['RT', 'ACC'],
        'Experts_mean': [612.4, 0.91],
        'Experts_sd': [88.1, 0.05],
        'Novices_mean': [745.9, 0.72],
        'Novices_sd': [120.3, 0.11],
    })


@pytest.fixture
def latex_engine():
    """Name of an available LaTeX engine; skips the test when none is installed."""
    if shutil.which("pdflatex") is None:
        pytest.skip("pdflatex not available")
    return "pdflatex"
