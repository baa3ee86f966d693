"""Tests for cell formatting, missing-value substitution and default value text."""

import datetime as dt

import numpy as np
import pandas as pd
import pytest

from pubtables import gt
from pubtables.build import build_table
from pubtables.formatters import (
    escape_html,
    escape_latex,
    escape_rtf,
    format_number,
    format_percent,
    format_value,
    is_missing,
)


def _cells(tbl, var):
    built = build_table(tbl)
    j = [c.var for c in built.columns].index(var)
    return [row.cells[j] for row in built.all_rows()]


class TestFormatValue:
    """Test the default value-to-text policy."""

    @pytest.mark.parametrize('value, expected', [
        (None, 'NA'),
        (np.nan, 'NA'),
        (pd.NaT, 'NA'),
        (pd.NA, 'NA'),
        (True, 'TRUE'),
        (np.bool_(False), 'FALSE'),
        (np.int64(42), '42'),
        (777000.0, '777000'),
        (0.1111, '0.1111'),
        (float('inf'), 'Inf'),
        (float('-inf'), '-Inf'),
        (pd.Timestamp('2015-01-15'), '2015-01-15'),
        (pd.Timestamp('2018-01-01 02:22'), '2018-01-01 02:22'),
        (pd.Timestamp('2018-01-01 02:22:05'), '2018-01-01 02:22:05'),
        (dt.date(2020, 2, 29), '2020-02-29'),
        (dt.time(13, 35), '13:35'),
        ('apricot', 'apricot'),
    ])
    def test_values(self, value, expected):
        assert format_value(value) == expected

    def test_custom_missing_text(self):
        assert format_value(np.nan, missing_text='') == ''

    def test_is_missing_non_scalar(self):
        assert not is_missing([1, 2])
        assert is_missing(float('nan'))


class TestNumberFormatters:
    """Test format_number and format_percent."""

    def test_grouping_and_decimals(self):
        assert format_number(1325.81, decimals=1) == '1,325.8'
        assert format_number(8880000, decimals=0) == '8,880,000'
        assert format_number(8880000, decimals=0, use_seps=False) == '8880000'

    def test_drop_trailing_zeros(self):
        assert format_number(5.5, decimals=3, drop_trailing_zeros=True) == '5.5'
        assert format_number(5.0, decimals=2, drop_trailing_zeros=True) == '5'

    def test_swapped_marks(self):
        assert format_number(1234.5, decimals=2, sep_mark='.', dec_mark=',') == '1.234,50'

    def test_negative_zero(self):
        assert format_number(-0.001, decimals=2) == '0.00'
        assert format_number(-1.5, decimals=1) == '-1.5'

    def test_negative_decimals(self):
        with pytest.raises(ValueError):
            format_number(1.0, decimals=-1)

    def test_non_numeric_falls_back(self):
        assert format_number('text') == 'text'

    def test_percent(self):
        assert format_percent(0.256) == '25.6%'
        assert format_percent(25.6, scale_values=False, decimals=0) == '26%'


class TestEscaping:
    """Test output-format escaping."""

    def test_html(self):
        assert escape_html('<a & "b">') == '&lt;a &amp; &quot;b&quot;&gt;'

    def test_latex(self):
        assert escape_latex('95% CI_1 & $5') == r'95\% CI\_1 \& \$5'
        assert escape_latex('1–2 ± 0.5') == r'1--2 $\pm$ 0.5'
        assert escape_latex('a\\b') == r'a\textbackslash{}b'

    def test_rtf(self):
        assert escape_rtf('{x}\\') == r'\{x\}\\'
        assert escape_rtf('±') == r'\u177?'
        assert escape_rtf('—') == r'\u8212?'
        assert escape_rtf('￠') == r'\u-32?'
        assert escape_rtf('😀') == r'\u-10179?\u-8704?'
        assert escape_rtf('a\nb') == r'a\line b'


class TestFmt:
    """Test fmt(), fmt_* and sub_missing on tables."""

    def test_fmt_number_on_subset_of_rows(self, exibble_df):
        tbl = gt(exibble_df).fmt_number('num', rows=[0, 1], decimals=1)
        assert _cells(tbl, 'num')[:3] == ['0.1', '2.2', '33.33']

    def test_missing_cells_untouched(self, exibble_df):
        tbl = gt(exibble_df).fmt_number('num', decimals=1)
        assert _cells(tbl, 'num')[5] == 'NA'

    def test_fmt_integer_with_pattern(self, gtcars_df):
        tbl = gt(gtcars_df).fmt_integer('msrp', pattern='${x}')
        assert _cells(tbl, 'msrp')[0] == '$447,000'

    def test_pattern_requires_placeholder(self, exibble_df):
        with pytest.raises(ValueError):
            gt(exibble_df).fmt_number('num', pattern='no placeholder')

    def test_fmt_percent(self):
        tbl = gt(pd.DataFrame({'p': [0.5, 0.25]})).fmt_percent('p', decimals=0)
        assert _cells(tbl, 'p') == ['50%', '25%']

    def test_custom_fmt(self, exibble_df):
        tbl = gt(exibble_df).fmt('char', fns=lambda s: s.upper())
        assert _cells(tbl, 'char')[:2] == ['APRICOT', 'BANANA']
        assert _cells(tbl, 'char')[4] == 'NA'

    def test_fmt_requires_callable(self, exibble_df):
        with pytest.raises(TypeError):
            gt(exibble_df).fmt('char', fns='upper')

    def test_last_format_wins(self, exibble_df):
        tbl = gt(exibble_df).fmt_number('num', decimals=1).fmt_number('num', decimals=3)
        assert _cells(tbl, 'num')[0] == '0.111'

    def test_sub_missing_default(self, exibble_df):
        tbl = gt(exibble_df).sub_missing()
        assert _cells(tbl, 'num')[5] == '—'
        assert _cells(tbl, 'char')[4] == '—'

    def test_sub_missing_subset(self, exibble_df):
        tbl = gt(exibble_df).sub_missing('num', missing_text='missing')
        assert _cells(tbl, 'num')[5] == 'missing'
        assert _cells(tbl, 'char')[4] == 'NA'

    def test_default_datetime_text(self, exibble_df):
        tbl = gt(exibble_df)
        assert _cells(tbl, 'date')[0] == '2015-01-15'
        assert _cells(tbl, 'datetime')[0] == '2018-01-01 02:22'
        assert _cells(tbl, 'fctr')[0] == 'one'
