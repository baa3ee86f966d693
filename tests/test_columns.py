"""Tests for column operations (alignment, labels, widths, moves, visibility)."""

import pytest

from pubtables import ends_with, everything, gt, pct, px, starts_with
from pubtables.build import build_table
from pubtables.columns import parse_width


def _order(tbl):
    return [c.var for c in tbl._boxhead]


def _col(tbl, var):
    return next(c for c in tbl._boxhead if c.var == var)


@pytest.fixture
def tbl(exibble_df):
    return gt(exibble_df, rowname_col='row', groupname_col='group')


class TestAlignLabel:
    """Test cols_align and cols_label."""

    def test_align_subset(self, tbl):
        new = tbl.cols_align('center', columns=['num', 'char'])
        assert _col(new, 'num').align == 'center'
        assert _col(new, 'char').align == 'center'
        assert _col(new, 'currency').align == 'right'

    def test_align_all_by_default(self, tbl):
        new = tbl.cols_align('right')
        assert {c.align for c in new._boxhead if c.role == 'data'} == {'right'}

    def test_align_auto_restores_dtype_alignment(self, tbl):
        new = tbl.cols_align('left').cols_align('auto', columns='num')
        assert _col(new, 'num').align == 'right'

    def test_invalid_alignment(self, tbl):
        with pytest.raises(ValueError):
            tbl.cols_align('justify')

    def test_labels_dict_and_kwargs(self, tbl):
        new = tbl.cols_label({'num': 'Number'}, char='Fruit')
        assert _col(new, 'num').label == 'Number'
        assert _col(new, 'char').label == 'Fruit'
        assert _col(new, 'num').var == 'num'

    def test_label_unknown_column(self, tbl):
        with pytest.raises(KeyError):
            tbl.cols_label(nope='X')


class TestWidths:
    """Test width helpers and cols_width."""

    def test_px_and_pct(self):
        assert px(150) == '150px'
        assert pct(20) == '20%'
        assert pct(12.5) == '12.5%'

    def test_parse_width(self):
        assert parse_width(100) == '100px'
        assert parse_width(' 80 px') == '80px'
        assert parse_width('33.0%') == '33%'

    @pytest.mark.parametrize('bad', ['wide', 0, -5, '10em', True, None])
    def test_parse_width_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_width(bad)

    def test_first_match_wins(self, tbl):
        new = tbl.cols_width({'num': px(150), ends_with('time'): 90, everything(): '60px'})
        assert _col(new, 'num').width == '150px'
        assert _col(new, 'time').width == '90px'
        assert _col(new, 'datetime').width == '90px'
        assert _col(new, 'char').width == '60px'

    def test_stub_width(self, tbl):
        new = tbl.cols_width(row=120)
        assert build_table(new).stub_width == '120px'

    def test_invalid_width(self, tbl):
        with pytest.raises(ValueError):
            tbl.cols_width(num='big')


class TestMoves:
    """Test cols_move, cols_move_to_start and cols_move_to_end."""

    def test_move_after(self, tbl):
        new = tbl.cols_move(['currency', 'char'], after='num')
        assert _order(new)[:4] == ['num', 'currency', 'char', 'fctr']

    def test_move_to_start(self, tbl):
        new = tbl.cols_move_to_start(starts_with('date'))
        assert _order(new)[:2] == ['date', 'datetime']

    def test_move_to_end(self, tbl):
        new = tbl.cols_move_to_end('num')
        assert _order(new)[-1] == 'num'

    def test_move_target_inside_moved_set(self, tbl):
        with pytest.raises(ValueError):
            tbl.cols_move(['num', 'char'], after='num')

    def test_move_nothing(self, tbl):
        with pytest.raises(ValueError):
            tbl.cols_move([], after='num')

    def test_move_unknown(self, tbl):
        with pytest.raises(KeyError):
            tbl.cols_move_to_start('nope')

    def test_built_column_order(self, tbl):
        new = tbl.cols_move_to_end('num')
        assert [c.var for c in build_table(new).columns][-1] == 'num'


class TestVisibility:
    """Test cols_hide and cols_unhide."""

    def test_hide(self, tbl):
        new = tbl.cols_hide(['fctr', 'time'])
        built = build_table(new)
        assert 'fctr' not in [c.var for c in built.columns]
        assert len(built.columns) == 5

    def test_unhide(self, tbl):
        new = tbl.cols_hide(['fctr', 'time']).cols_unhide('time')
        assert _col(new, 'time').visible
        assert not _col(new, 'fctr').visible

    def test_hide_none_is_noop(self, tbl):
        assert tbl.cols_hide(None)._boxhead == tbl._boxhead
