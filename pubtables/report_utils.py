"""
Export utilities: table objects to HTML, LaTeX, RTF, CSV, PNG and PDF.

Primary API for output. Prefer using functions in this module for:
- as_raw_html / as_latex / as_rtf / as_data_frame: in-memory renderings
- gtsave: write a table to disk, choosing the format from the file extension
- validate_latex_table / compile_latex_table: LaTeX checks before and after saving
- create_output_summary: list the tables written into an output directory

Strict behavior: unsupported extensions, invalid LaTeX and failed compilations
raise explicit errors. No silent fallbacks.
"""

import logging
import re
import shutil
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

import matplotlib
import pandas as pd

from .build import build_table
from .constants import CONFIG
from .tables import html_document, render_html, render_latex, render_rtf
from .tables import render_figure as _render_figure
from .tables.style import FIGURE_RC

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from .core import GT


# ============================================================================
# In-memory renderings
# ============================================================================

def as_raw_html(data: "GT", inline_css: bool = False) -> str:
    """
    Render a table as an HTML fragment.

    Parameters
    ----------
    inline_css : bool, default=False
        Write styles into style= attributes instead of a scoped <style> block
    """
    return render_html(build_table(data), inline_css=inline_css)


def as_latex(data: "GT", wrap_with_resizebox: bool = False, insert_bar_between_groups: bool = False) -> str:
    """
    Render a table as a LaTeX table environment (booktabs style).

    The result is validated with validate_latex_table(); problems raise ValueError.
    A table whose columns are all hidden and which has no stub also raises
    ValueError, since a tabular needs at least one column.
    """
    latex_table = render_latex(
        build_table(data),
        wrap_with_resizebox=wrap_with_resizebox,
        insert_bar_between_groups=insert_bar_between_groups,
    )
    errors = validate_latex_table(latex_table)
    if errors:
        raise ValueError("LaTeX table validation failed:\n- " + "\n- ".join(errors))
    return latex_table


def as_rtf(data: "GT") -> str:
    """Render a table as a standalone RTF document."""
    return render_rtf(build_table(data))


def as_data_frame(data: "GT") -> pd.DataFrame:
    """
    Return the displayed table as a DataFrame of strings.

    Leading columns hold the row group label (when grouped) and the stub (when
    present); the remaining columns are the visible columns under their labels.
    """
    built = build_table(data)
    records = []
    stub_name = built.stubhead or (
        str(data._stub.rowname_col) if data._stub.rowname_col is not None else 'rowname'
    )
    for group in built.groups:
        for row in group.rows:
            values = []
            if built.has_groups:
                values.append(group.label)
            if built.has_stub:
                values.append(row.stub)
            values.extend(row.cells)
            records.append(values)
    header = (['groupname'] if built.has_groups else []) + ([stub_name] if built.has_stub else [])
    header += [c.label for c in built.columns]
    return pd.DataFrame.from_records(records, columns=header) if records else pd.DataFrame(columns=header)


def render_figure(data: "GT") -> "Figure":
    """Draw a table onto a matplotlib Figure (used for PNG and PDF export)."""
    return _render_figure(build_table(data))


# ============================================================================
# Saving
# ============================================================================

def save_table_text(
    content: str,
    output_path: Path,
    copy_dir: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Save rendered table text and optionally copy it to a second directory.

    LaTeX content (.tex/.ltx/.rnw) is validated before anything is written.

    Parameters
    ----------
    content : str
        Rendered table (HTML, LaTeX or RTF)
    output_path : Path
        Primary save location; parent directories are created
    copy_dir : Path, optional
        Directory receiving a copy under the same file name (e.g. a manuscript's
        tables folder)
    logger : logging.Logger, optional
        Logger instance for logging progress
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if CONFIG['EXPORT_EXTENSIONS'].get(output_path.suffix.lower()) == 'latex':
        errors = validate_latex_table(content)
        if errors:
            msg = "LaTeX table validation failed:\n- " + "\n- ".join(errors)
            if logger:
                logger.error(msg)
            raise ValueError(msg)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(content)
    if logger:
        logger.info(f"Table saved to: {output_path}")

    if copy_dir is not None:
        copy_dir = Path(copy_dir)
        copy_dir.mkdir(parents=True, exist_ok=True)
        copy_path = copy_dir / output_path.name
        with open(copy_path, 'w', encoding='utf-8') as f:
            f.write(content)
        if logger:
            logger.info(f"Table copied to: {copy_path}")

    return output_path


def gtsave(
    data: "GT",
    filename,
    path=None,
    *,
    inline_css: bool = False,
    dpi: Optional[int] = None,
    latex_engine: Optional[str] = None,
    copy_dir: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Save a table to disk; the format is chosen from the file extension.

    Supported extensions: .html/.htm (HTML document), .tex/.ltx/.rnw (LaTeX
    table), .rtf, .png, .pdf and .csv (displayed values).

    Parameters
    ----------
    data : GT
        Table to save
    filename : str or Path
        Output file name (with extension)
    path : str or Path, optional
        Directory to prepend to filename
    inline_css : bool, default=False
        HTML only: inline the styles into each element
    dpi : int, optional
        PNG only: raster resolution (default CONFIG['FIGURE_DPI'])
    latex_engine : str, optional
        PDF only: compile the LaTeX rendering with this engine (e.g. 'pdflatex')
        instead of drawing the table with matplotlib
    copy_dir : Path, optional
        Text formats only: also write a copy into this directory
    logger : logging.Logger, optional
        Logger instance for logging progress

    Returns
    -------
    Path
        Path of the written file

    Raises
    ------
    ValueError
        If the extension is missing or unsupported, or LaTeX validation fails
    RuntimeError
        If LaTeX compilation fails

    Example
    -------
    >>> gtsave(tbl, 'exibble.rtf', path='tables', logger=logger)
    PosixPath('tables/exibble.rtf')
    """
    output_path = Path(path) / Path(filename) if path is not None else Path(filename)
    ext = output_path.suffix.lower()
    if not ext:
        raise ValueError(f"Cannot infer the output format of '{output_path}': the file name has no extension")
    kind = CONFIG['EXPORT_EXTENSIONS'].get(ext)
    if kind is None:
        supported = ", ".join(sorted(CONFIG['EXPORT_EXTENSIONS']))
        raise ValueError(f"File extension '{ext}' is not supported. Supported extensions: {supported}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if logger:
        logger.debug(f"Saving table as {kind}: {output_path}")

    if kind == 'html':
        content = html_document(as_raw_html(data, inline_css=inline_css), title=data._heading.title)
        return save_table_text(content, output_path, copy_dir=copy_dir, logger=logger)
    if kind == 'latex':
        return save_table_text(as_latex(data), output_path, copy_dir=copy_dir, logger=logger)
    if kind == 'rtf':
        return save_table_text(as_rtf(data), output_path, copy_dir=copy_dir, logger=logger)
    if kind == 'csv':
        as_data_frame(data).to_csv(output_path, index=False)
        if logger:
            logger.info(f"CSV saved: {output_path}")
        return output_path

    if kind == 'pdf' and latex_engine is not None:
        ok, log = compile_latex_table(as_latex(data), engine=latex_engine, pdf_out=output_path)
        if not ok:
            msg = f"LaTeX compilation with '{latex_engine}' failed:\n{log[-2000:]}"
            if logger:
                logger.error(msg)
            raise RuntimeError(msg)
        if logger:
            logger.info(f"PDF saved: {output_path}")
        return output_path

    fig = render_figure(data)
    save_kwargs = {'facecolor': 'white'}
    if kind == 'png':
        save_kwargs['dpi'] = CONFIG['FIGURE_DPI'] if dpi is None else dpi
    with matplotlib.rc_context(FIGURE_RC):
        fig.savefig(output_path, format=kind, **save_kwargs)
    if logger:
        logger.info(f"{kind.upper()} saved: {output_path}")
    return output_path


# ============================================================================
# LaTeX checks
# ============================================================================

def _braced(text: str, start: int) -> Tuple[str, int]:
    """Return the content of the brace group opening at text[start] and the index after it."""
    if start >= len(text) or text[start] != '{':
        raise ValueError("Expected '{'")
    depth = 0
    for i in range(start, len(text)):
        if text[i] == '{':
            depth += 1
        elif text[i] == '}':
            depth -= 1
            if depth == 0:
                return text[start + 1:i], i + 1
    raise ValueError("Unbalanced braces")


def parse_colspec(colspec: str) -> List[str]:
    """
    Split a tabular column specification into column tokens.

    Handles l/c/r/S, p{..}/m{..}/b{..}, >{..}/<{..} decorations, @{..}/!{..}
    separators and '|'; decorations and separators are not counted as columns.

    >>> parse_colspec(r'l|>{\\raggedleft\\arraybackslash}p{75pt}c')
    ['l', 'p{75pt}', 'c']
    """
    tokens: List[str] = []
    i = 0
    while i < len(colspec):
        ch = colspec[i]
        if ch.isspace() or ch == '|':
            i += 1
        elif ch in '<>@!':
            _, i = _braced(colspec, i + 1)
        elif ch in 'pmb':
            arg, i = _braced(colspec, i + 1)
            tokens.append(f"{ch}{{{arg}}}")
        else:
            tokens.append(ch)
            i += 1
    return tokens


_UNESCAPED_AMP_RX = re.compile(r'(?<!\\)&')


def validate_latex_table(latex_table: str) -> List[str]:
    """
    Validate a LaTeX table string for common issues that break compilation.

    Checks:
    - Presence of a tabular environment with a parsable column spec
    - Column count consistency (rows have the expected number of & separators)
    - No unescaped % characters inside the tabular

    Returns a list of error strings (empty if valid).
    """
    errors: List[str] = []
    lines = latex_table.split('\n')
    begin_idx = next((i for i, ln in enumerate(lines) if '\\begin{tabular}' in ln), None)
    end_idx = next((i for i, ln in enumerate(lines) if '\\end{tabular}' in ln), None)
    if begin_idx is None or end_idx is None or end_idx <= begin_idx:
        errors.append("Missing or malformed tabular environment")
        return errors

    begin_line = lines[begin_idx]
    spec_start = begin_line.index('\\begin{tabular}') + len('\\begin{tabular}')
    try:
        colspec, _ = _braced(begin_line, spec_start)
        ncols = len(parse_colspec(colspec))
    except ValueError:
        errors.append("Could not parse tabular column specification")
        return errors
    if ncols == 0:
        errors.append("Tabular column specification defines no columns")
        return errors

    structural = ('\\toprule', '\\midrule', '\\bottomrule', '\\cmidrule')
    for ln in lines[begin_idx + 1:end_idx]:
        s = ln.strip()
        if not s:
            continue
        for j, ch in enumerate(ln):
            if ch == '%' and (j == 0 or ln[j - 1] != '\\'):
                errors.append("Unescaped % in tabular content: '" + s + "'")
                break
        if any(tag in s for tag in structural) or not s.endswith('\\\\'):
            continue
        # Skip column count check for multicolumn rows
        if '\\multicolumn' in s:
            continue
        ampersands = len(_UNESCAPED_AMP_RX.findall(s))
        if ampersands != ncols - 1:
            errors.append(
                f"Row has {ampersands + 1} columns but tabular spec defines {ncols}: '{s}'"
            )
    return errors


def compile_latex_table(
    latex_table: str,
    *,
    engine: Optional[str] = None,
    work_dir: Optional[Path] = None,
    timeout_s: int = 20,
    pdf_out: Optional[Path] = None,
) -> Tuple[bool, str]:
    """
    Attempt to compile a LaTeX table into a PDF using a minimal document.

    Parameters
    ----------
    latex_table : str
        The LaTeX table code (including the table environment) to compile.
    engine : str, optional
        LaTeX engine to use (default CONFIG['LATEX_ENGINE']).
    work_dir : Path, optional
        Directory to write temporary files; if None, uses a temp directory.
    timeout_s : int, default 20
        Maximum seconds to allow the compilation process to run.
    pdf_out : Path, optional
        If given and compilation succeeds, the PDF is copied here.

    Returns
    -------
    (ok, log) : Tuple[bool, str]
        ok is True when compilation succeeds (exit code 0), False otherwise.
        log contains stdout/stderr or diagnostic message if engine not found.
    """
    engine = CONFIG['LATEX_ENGINE'] if engine is None else engine
    if shutil.which(engine) is None:
        return False, f"LaTeX engine '{engine}' not found in PATH"

    packages = "".join(f"\\usepackage{{{pkg}}}\n" for pkg in CONFIG['LATEX_PREAMBLE_PACKAGES'])
    doc = (
        "\\documentclass{article}\n"
        "\\usepackage[utf8]{inputenc}\n"
        + packages +
        "\\pagestyle{empty}\n"
        "\\begin{document}\n"
        + latex_table +
        "\n\\end{document}\n"
    )

    with tempfile.TemporaryDirectory() as tmp:
        wd = Path(tmp) if work_dir is None else Path(work_dir)
        wd.mkdir(parents=True, exist_ok=True)
        tex_path = wd / 'table_doc.tex'
        tex_path.write_text(doc, encoding='utf-8')

        cmd = [engine, '-interaction=nonstopmode', '-halt-on-error', tex_path.name]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(wd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout_s,
                check=False,
                text=True,
            )
            ok = (proc.returncode == 0)
            log = proc.stdout
        except subprocess.TimeoutExpired as e:
            ok = False
            log = f"LaTeX compilation timed out after {timeout_s}s\n{e}"

        if ok and pdf_out is not None:
            pdf_out = Path(pdf_out)
            pdf_out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(wd / 'table_doc.pdf', pdf_out)

    return ok, log


# ============================================================================
# Summaries
# ============================================================================

def create_output_summary(
    output_dir: Path,
    title: str = "Tables",
    logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Create a text summary of all exported tables in a directory.

    Lists every file with a supported export extension, grouped by format, and
    writes output_dir/output_summary.txt.
    """
    output_dir = Path(output_dir)
    files = sorted(
        p for p in output_dir.iterdir()
        if p.is_file() and p.suffix.lower() in CONFIG['EXPORT_EXTENSIONS']
    ) if output_dir.exists() else []

    summary_text = f"""
{title.upper()} - EXPORTED TABLES
{'=' * 80}

Output directory: {output_dir.name}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

Total files: {len(files)}

"""
    by_kind = {}
    for p in files:
        by_kind.setdefault(CONFIG['EXPORT_EXTENSIONS'][p.suffix.lower()], []).append(p)
    if by_kind:
        for kind in sorted(by_kind):
            summary_text += f"{kind.upper()}:\n"
            for p in by_kind[kind]:
                summary_text += f"  - {p.name}\n"
    else:
        summary_text += "No tables found.\n"

    output_dir.mkdir(parents=True, exist_ok=True)
    summary_path = output_dir / "output_summary.txt"
    with open(summary_path, 'w', encoding='utf-8') as f:
        f.write(summary_text)

    if logger:
        logger.info(f"\n{summary_text}")
        logger.info(f"Summary saved to: {summary_path}")

    return summary_path


__all__ = [
    'as_raw_html',
    'as_latex',
    'as_rtf',
    'as_data_frame',
    'render_figure',
    'save_table_text',
    'gtsave',
    'parse_colspec',
    'validate_latex_table',
    'compile_latex_table',
    'create_output_summary',
]
