"""Tests for rendering and saving tables (HTML, LaTeX, RTF, figure, CSV)."""

import logging
from pathlib import Path

import matplotlib
import pandas as pd
import pytest
from matplotlib.figure import Figure

from pubtables import gt, gtsave
from pubtables.report_utils import (
    as_data_frame,
    compile_latex_table,
    create_output_summary,
    parse_colspec,
    save_table_text,
    validate_latex_table,
)


@pytest.fixture
def full_tbl(exibble_df):
    """Table using most features: heading, stub, groups, spanner and notes."""
    return (
        gt(exibble_df, rowname_col='row', groupname_col='group', id='exi')
        .tab_header("Example & data", subtitle="Subtitle <b>")
        .tab_stubhead("Row")
        .cols_hide(['fctr', 'datetime'])
        .tab_spanner("Dates", columns=['date', 'time'])
        .cols_label(num='Number', currency='Price ($)')
        .fmt_number('currency', decimals=2)
        .sub_missing()
        .tab_source_note("Source: 100% made up")
        .tab_caption("Example caption")
    )


class TestHtml:
    """Test as_raw_html."""

    def test_structure(self, full_tbl):
        html = full_tbl.as_raw_html()
        assert html.startswith('<div id="exi"')
        assert '<style>' in html
        assert '#exi .pt_table' in html
        assert '<caption class="pt_caption">Example caption</caption>' in html
        assert 'Example &amp; data' in html
        assert 'Subtitle &lt;b&gt;' in html
        assert '<th colspan="2" scope="colgroup"' in html
        assert '>Dates</span>' in html
        assert '<th scope="row" class="pt_row pt_stub">row_1</th>' in html
        assert '>grp_a</th>' in html
        assert '<tfoot>' in html and 'Source: 100% made up' in html
        assert html.count('<tr>') >= 8

    def test_inline_css(self, full_tbl):
        html = full_tbl.as_raw_html(inline_css=True)
        assert '<style>' not in html
        assert 'class=' not in html
        assert 'style="display: table;' in html

    def test_widths_in_colgroup(self, small_tbl):
        html = small_tbl.cols_width(x=120).as_raw_html()
        assert '<colgroup>' in html
        assert '<col style="width: 120px;"/>' in html

    def test_group_as_column(self, small_tbl):
        html = small_tbl.tab_options(row_group_as_column=True).as_raw_html()
        assert '<th rowspan="2" scope="rowgroup"' in html

    def test_column_labels_hidden(self, small_tbl):
        html = small_tbl.tab_options(column_labels_hidden=True).as_raw_html()
        assert 'scope="col"' not in html

    def test_table_width_and_font_size(self, small_tbl):
        html = small_tbl.tab_options(table_width='80%', table_font_size=12).as_raw_html()
        assert 'width: 80%;' in html
        assert 'font-size: 12px;' in html

    def test_generated_id_without_table_id(self, small_tbl):
        assert small_tbl.as_raw_html().startswith('<div id="pt_')


class TestLatex:
    """Test as_latex and LaTeX validation."""

    def test_structure(self, full_tbl):
        latex = full_tbl.as_latex()
        assert latex.startswith(r'\begin{table}[!t]')
        assert r'{\large Example \& data}' in latex
        assert r'\caption{Example caption}' in latex
        assert r'\label{tab:exi}' in latex
        assert r'\toprule' in latex and r'\bottomrule' in latex
        assert r'\multicolumn{2}{c}{Dates}' in latex
        assert r'\cmidrule(lr){4-5}' in latex
        assert r'\multicolumn{6}{l}{grp\_a}' in latex
        assert r'Price (\$)' in latex
        assert r'Source: 100\% made up' in latex
        assert '---' in latex
        assert validate_latex_table(latex) == []

    def test_colspec(self, full_tbl):
        latex = full_tbl.as_latex()
        assert r'\begin{tabular}{lrlrlr}' in latex

    def test_width_gives_p_column(self, small_tbl):
        latex = small_tbl.cols_width(x=100).as_latex()
        assert r'>{\raggedleft\arraybackslash}p{75pt}' in latex

    def test_group_as_column_uses_multirow(self, small_tbl):
        latex = small_tbl.tab_options(row_group_as_column=True).as_latex()
        assert r'\multirow{2}{*}{g1}' in latex
        assert r'\multicolumn{2}{l}{}' in latex

    def test_tabular_written_by_pandas(self, small_tbl, monkeypatch):
        calls = []
        original = pd.DataFrame.to_latex

        def recording_to_latex(frame, *args, **kwargs):
            calls.append(kwargs)
            return original(frame, *args, **kwargs)

        monkeypatch.setattr(pd.DataFrame, 'to_latex', recording_to_latex)
        small_tbl.tab_spanner("S", columns=['x', 'y']).as_latex()
        assert len(calls) == 1
        assert calls[0]['index'] is False
        assert calls[0]['column_format'] == 'lrr'

    def test_group_rows_precede_their_body_rows(self, small_tbl):
        lines = small_tbl.as_latex().split('\n')
        g1 = lines.index(r'\multicolumn{3}{l}{g1} \\')
        g2 = lines.index(r'\multicolumn{3}{l}{g2} \\')
        row_a = next(i for i, ln in enumerate(lines) if ln.startswith('a & '))
        row_c = next(i for i, ln in enumerate(lines) if ln.startswith('c & '))
        assert g1 < row_a < g2 < row_c

    def test_all_columns_hidden(self):
        tbl = gt(pd.DataFrame({'a': [1], 'b': [2]})).cols_hide(['a', 'b'])
        with pytest.raises(ValueError, match='no visible columns'):
            tbl.as_latex()
        assert '<table' in tbl.as_raw_html()

    def test_resizebox(self, small_tbl):
        latex = small_tbl.as_latex(wrap_with_resizebox=True)
        assert r'\resizebox{\linewidth}{!}{%' in latex
        assert validate_latex_table(latex) == []

    def test_bars_between_groups(self, stats_df):
        tbl = gt(stats_df, rowname_col='measure').tab_spanner_delim('_')
        latex = tbl.as_latex(insert_bar_between_groups=True)
        assert r'\begin{tabular}{l|rr|rr}' in latex

    def test_parse_colspec(self):
        assert parse_colspec(r'l|>{\raggedleft\arraybackslash}p{75pt}c') == ['l', 'p{75pt}', 'c']
        assert parse_colspec('@{}lr@{}') == ['l', 'r']

    def test_validate_detects_column_mismatch(self):
        bad = "\n".join([
            r"\begin{tabular}{lr}",
            r"a & b & c \\",
            r"\end{tabular}",
        ])
        errors = validate_latex_table(bad)
        assert len(errors) == 1
        assert 'defines 2' in errors[0]

    def test_validate_detects_unescaped_percent(self):
        bad = "\n".join([r"\begin{tabular}{l}", r"50% \\", r"\end{tabular}"])
        assert any('Unescaped %' in e for e in validate_latex_table(bad))

    def test_validate_ignores_escaped_ampersand(self):
        ok = "\n".join([r"\begin{tabular}{lr}", r"A \& B & 1 \\", r"\end{tabular}"])
        assert validate_latex_table(ok) == []

    def test_validate_missing_tabular(self):
        assert validate_latex_table("no table here") == ["Missing or malformed tabular environment"]

    def test_compile_reports_missing_engine(self, small_tbl):
        ok, log = compile_latex_table(small_tbl.as_latex(), engine='no-such-latex-engine')
        assert not ok
        assert 'not found' in log

    def test_compile(self, small_tbl, latex_engine, tmp_path):
        pdf = tmp_path / 'table.pdf'
        ok, log = compile_latex_table(small_tbl.as_latex(), engine=latex_engine, pdf_out=pdf)
        assert ok, log
        assert pdf.exists()


class TestRtf:
    """Test as_rtf."""

    def test_structure(self, full_tbl):
        rtf = full_tbl.as_rtf()
        assert rtf.startswith(r'{\rtf1\ansi')
        assert rtf.rstrip().endswith('}')
        assert r'\trowd' in rtf and r'\cellx' in rtf
        assert r'\clmgf' in rtf and r'\clmrg' in rtf
        assert 'Example & data' in rtf
        assert r'\u8212?' in rtf
        assert rtf.count(r'\row') >= 11

    def test_balanced_braces(self, full_tbl):
        rtf = full_tbl.as_rtf()
        depth = 0
        i = 0
        while i < len(rtf):
            ch = rtf[i]
            if ch == '\\':
                i += 2
                continue
            if ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
                assert depth >= 0
            i += 1
        assert depth == 0

    def test_widths_in_twips(self, small_tbl):
        rtf = small_tbl.cols_width(x=100).as_rtf()
        # stub 1440 + x 1500
        assert r'\cellx2940' in rtf


class TestDataFrameAndFigure:
    """Test as_data_frame and render_figure."""

    def test_data_frame(self, small_tbl):
        df = as_data_frame(small_tbl.cols_label(x='X').sub_missing(missing_text='-'))
        assert list(df.columns) == ['groupname', 'name', 'X', 'y']
        assert df.iloc[1].tolist() == ['g1', 'b', '-', '20']

    def test_data_frame_without_stub(self, small_df):
        df = gt(small_df).as_data_frame()
        assert list(df.columns) == ['name', 'grp', 'x', 'y']
        assert len(df) == 3

    def test_render_figure(self, full_tbl):
        fig = full_tbl.render_figure()
        assert isinstance(fig, Figure)
        width, height = fig.get_size_inches()
        assert width > 1 and height > 1

    def test_render_figure_keeps_global_rcparams(self, small_tbl):
        before = matplotlib.rcParams['pdf.fonttype']
        fig = small_tbl.render_figure()
        assert matplotlib.rcParams['pdf.fonttype'] == before
        assert {tuple(t.get_fontfamily()) for t in fig.axes[0].texts} == {('sans-serif',)}


class TestGtsave:
    """Test gtsave dispatch and the save helpers."""

    @pytest.mark.parametrize('ext', ['.html', '.htm', '.tex', '.ltx', '.rnw', '.rtf', '.csv', '.png', '.pdf'])
    def test_every_extension(self, full_tbl, tmp_path, ext):
        out = gtsave(full_tbl, f"table{ext}", path=tmp_path / 'nested')
        assert out == tmp_path / 'nested' / f"table{ext}"
        assert out.exists() and out.stat().st_size > 0

    def test_html_document(self, full_tbl, tmp_path):
        out = full_tbl.gtsave(tmp_path / 't.html')
        text = out.read_text(encoding='utf-8')
        assert text.startswith('<!DOCTYPE html>')
        assert '<title>Example &amp; data</title>' in text

    def test_png_header(self, small_tbl, tmp_path):
        out = small_tbl.gtsave('t.png', path=tmp_path, dpi=50)
        assert out.read_bytes()[:8] == b'\x89PNG\r\n\x1a\n'

    def test_pdf_header(self, small_tbl, tmp_path):
        out = small_tbl.gtsave('t.pdf', path=tmp_path)
        assert out.read_bytes()[:5] == b'%PDF-'

    def test_pdf_embeds_truetype_fonts(self, small_tbl, tmp_path):
        out = small_tbl.gtsave('t.pdf', path=tmp_path)
        assert b'/TrueType' in out.read_bytes()

    def test_csv_round_trip(self, small_tbl, tmp_path):
        out = small_tbl.gtsave('t.csv', path=tmp_path)
        df = pd.read_csv(out)
        assert list(df.columns) == ['groupname', 'name', 'x', 'y']

    @pytest.mark.parametrize('name', ['table', 'table.docx'])
    def test_bad_extension(self, small_tbl, tmp_path, name):
        with pytest.raises(ValueError):
            small_tbl.gtsave(name, path=tmp_path)

    def test_pdf_with_missing_engine_raises(self, small_tbl, tmp_path):
        with pytest.raises(RuntimeError):
            small_tbl.gtsave('t.pdf', path=tmp_path, latex_engine='no-such-latex-engine')

    def test_pdf_with_engine(self, small_tbl, tmp_path, latex_engine):
        out = small_tbl.gtsave('t.pdf', path=tmp_path, latex_engine=latex_engine)
        assert out.read_bytes()[:5] == b'%PDF-'

    def test_copy_dir_and_logger(self, small_tbl, tmp_path, caplog):
        logger = logging.getLogger('pubtables_test')
        with caplog.at_level(logging.INFO, logger='pubtables_test'):
            small_tbl.gtsave('t.tex', path=tmp_path / 'a', copy_dir=tmp_path / 'b', logger=logger)
        assert (tmp_path / 'b' / 't.tex').exists()
        assert any('Table saved to' in r.message for r in caplog.records)

    def test_save_table_text_validates_latex(self, tmp_path):
        with pytest.raises(ValueError):
            save_table_text("\\begin{tabular}{l}\na & b \\\\\n\\end{tabular}", tmp_path / 'bad.tex')
        assert not (tmp_path / 'bad.tex').exists()

    def test_output_summary(self, small_tbl, tmp_path):
        small_tbl.gtsave('t.html', path=tmp_path)
        small_tbl.gtsave('t.rtf', path=tmp_path)
        summary = create_output_summary(tmp_path, title="Test")
        text = Path(summary).read_text(encoding='utf-8')
        assert 'Total files: 2' in text
        assert '  - t.rtf' in text
