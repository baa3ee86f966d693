"""Tests for table parts: heading, spanners, stubhead, notes and options."""

import pandas as pd
import pytest

from pubtables import gt
from pubtables.build import build_table


def _labels(cells):
    return [(c.label, c.start, c.span) for c in cells]


@pytest.fixture
def cars_tbl(gtcars_df):
    return gt(gtcars_df, rowname_col='model').cols_hide(['mfr', 'ctry_origin'])


class TestHeadingAndNotes:
    """Test tab_header, tab_stubhead, tab_source_note and tab_caption."""

    def test_header(self, small_tbl):
        built = build_table(small_tbl.tab_header("Title", subtitle="Sub"))
        assert (built.title, built.subtitle) == ("Title", "Sub")

    def test_source_notes_accumulate(self, small_tbl):
        built = build_table(small_tbl.tab_source_note("one").tab_source_note("two"))
        assert built.source_notes == ["one", "two"]

    def test_stubhead_and_caption(self, small_tbl):
        built = build_table(small_tbl.tab_stubhead("Name").tab_caption("Cap"))
        assert built.stubhead == "Name"
        assert built.caption == "Cap"

    def test_caption_from_gt(self, small_df):
        assert build_table(gt(small_df, caption="From gt")).caption == "From gt"


class TestSpanner:
    """Test tab_spanner."""

    def test_single_spanner(self, cars_tbl):
        built = build_table(cars_tbl.tab_spanner("Power", columns=['hp', 'hp_rpm']))
        assert len(built.spanner_rows) == 1
        cols = [c.var for c in built.columns]
        start = cols.index('hp')
        assert ("Power", start, 2) in _labels(built.spanner_rows[0])

    def test_gather_moves_columns_together(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("Horse", columns=['hp', 'msrp'])
        cols = [c.var for c in build_table(tbl).columns]
        assert cols.index('msrp') == cols.index('hp') + 1

    def test_no_gather_keeps_order(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("Horse", columns=['hp', 'msrp'], gather=False)
        cols = [c.var for c in build_table(tbl).columns]
        assert cols == ['year', 'hp', 'hp_rpm', 'trq', 'trq_rpm', 'msrp']
        labels = [c.label for c in build_table(tbl).spanner_rows[0]]
        assert labels.count("Horse") == 2

    def test_nested_spanners(self, cars_tbl):
        tbl = (
            cars_tbl
            .tab_spanner("Power", columns=['hp', 'hp_rpm'], id='power')
            .tab_spanner("Torque", columns=['trq', 'trq_rpm'], id='torque')
            .tab_spanner("Performance", spanners=['power', 'torque'])
        )
        assert {s.id: s.level for s in tbl._spanners} == {'power': 0, 'torque': 0, 'Performance': 1}
        built = build_table(tbl)
        assert len(built.spanner_rows) == 2
        top = [c for c in built.spanner_rows[0] if c.label is not None]
        assert [(c.label, c.span) for c in top] == [("Performance", 4)]

    def test_auto_level_stacks_over_overlap(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("A", columns=['hp']).tab_spanner("B", columns=['hp', 'trq'])
        assert {s.id: s.level for s in tbl._spanners} == {'A': 0, 'B': 1}

    def test_explicit_level_conflict(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("A", columns=['hp'])
        with pytest.raises(ValueError):
            tbl.tab_spanner("B", columns=['hp'], level=0)

    def test_duplicate_id(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("A", columns=['hp'])
        with pytest.raises(ValueError):
            tbl.tab_spanner("A", columns=['trq'])

    def test_unknown_child_spanner(self, cars_tbl):
        with pytest.raises(KeyError):
            cars_tbl.tab_spanner("Top", spanners=['missing'])

    def test_empty_spanner(self, cars_tbl):
        with pytest.raises(ValueError):
            cars_tbl.tab_spanner("Empty")

    def test_hidden_columns_drop_out(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("Power", columns=['hp', 'hp_rpm']).cols_hide(['hp', 'hp_rpm'])
        assert build_table(tbl).spanner_rows == []

    def test_empty_levels_compressed(self, cars_tbl):
        tbl = cars_tbl.tab_spanner("High", columns=['hp'], level=3)
        built = build_table(tbl)
        assert len(built.spanner_rows) == 1


class TestSpannerDelim:
    """Test tab_spanner_delim."""

    def test_split_last(self, stats_df):
        tbl = gt(stats_df, rowname_col='measure').tab_spanner_delim("_")
        built = build_table(tbl)
        assert [c.label for c in built.columns] == ['mean', 'sd', 'mean', 'sd']
        assert _labels(built.spanner_rows[0]) == [("Experts", 0, 2), ("Novices", 2, 2)]

    def test_split_first_with_limit(self):
        df = pd.DataFrame({'a_b_c': [1], 'a_b_d': [2], 'x': [3]})
        tbl = gt(df).tab_spanner_delim("_", split='first', limit=1)
        built = build_table(tbl)
        assert [c.label for c in built.columns] == ['b_c', 'b_d', 'x']
        assert _labels(built.spanner_rows[0]) == [("a", 0, 2), (None, 2, 1)]

    def test_multi_level(self):
        df = pd.DataFrame({'a_b_c': [1], 'a_b_d': [2], 'a_e_f': [3]})
        tbl = gt(df).tab_spanner_delim("_")
        built = build_table(tbl)
        assert [c.label for c in built.columns] == ['c', 'd', 'f']
        assert _labels(built.spanner_rows[0]) == [("a", 0, 3)]
        assert _labels(built.spanner_rows[1]) == [("b", 0, 2), ("e", 2, 1)]

    def test_non_adjacent_prefix_gets_unique_ids(self):
        df = pd.DataFrame({'g_x': [1], 'h_y': [2], 'g_z': [3]})
        tbl = gt(df).tab_spanner_delim("_")
        assert sorted(s.id for s in tbl._spanners) == ['g', 'g-2', 'h']

    def test_columns_subset(self, stats_df):
        tbl = gt(stats_df, rowname_col='measure').tab_spanner_delim("_", columns=['Experts_mean', 'Experts_sd'])
        built = build_table(tbl)
        assert [c.label for c in built.columns] == ['mean', 'sd', 'Novices_mean', 'Novices_sd']

    def test_no_delimiter_is_noop(self, small_tbl):
        assert small_tbl.tab_spanner_delim("|") is small_tbl

    def test_stacks_above_existing(self, stats_df):
        tbl = (
            gt(stats_df, rowname_col='measure')
            .tab_spanner("Stats", columns=['Experts_mean', 'Experts_sd'])
            .tab_spanner_delim("_")
        )
        levels = {s.label: s.level for s in tbl._spanners}
        assert levels['Stats'] == 0
        assert levels['Experts'] == 1

    @pytest.mark.parametrize('kwargs', [{'delim': ''}, {'split': 'middle'}, {'limit': 0}])
    def test_invalid_arguments(self, stats_df, kwargs):
        with pytest.raises(ValueError):
            gt(stats_df).tab_spanner_delim(**kwargs)


class TestOptions:
    """Test tab_options."""

    def test_defaults(self, small_tbl):
        assert small_tbl._options == {
            'row_group_as_column': False,
            'column_labels_hidden': False,
            'table_width': None,
            'table_font_size': None,
        }

    def test_set_options(self, small_tbl):
        tbl = small_tbl.tab_options(row_group_as_column=True, table_width=600, table_font_size='12px')
        assert tbl._options['row_group_as_column'] is True
        assert tbl._options['table_width'] == '600px'
        assert tbl._options['table_font_size'] == '12px'
        assert small_tbl._options['row_group_as_column'] is False

    def test_unknown_option(self, small_tbl):
        with pytest.raises(KeyError):
            small_tbl.tab_options(heading_color='red')

    def test_font_size_percentage_rejected(self, small_tbl):
        with pytest.raises(ValueError):
            small_tbl.tab_options(table_font_size='50%')

    def test_group_as_column_in_build(self, small_tbl):
        built = build_table(small_tbl.tab_options(row_group_as_column=True))
        assert built.group_as_column
        assert built.n_lead == 2
        assert built.n_total == 4
