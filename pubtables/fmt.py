"""
Cell value formatting and missing-value substitution.

Formats apply to non-missing values only; when several formats cover a cell
the one added last wins.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from .constants import CONFIG
from .formatters import format_number, format_percent
from .models import FormatSpec, MissingSub
from .selectors import resolve_columns, resolve_rows

if TYPE_CHECKING:
    from .core import GT


def fmt(data: "GT", columns=None, rows=None, fns: Optional[Callable] = None) -> "GT":
    """Format cells with a custom callable taking the raw value and returning text."""
    if fns is None or not callable(fns):
        raise TypeError("fmt() requires a callable in 'fns'")
    spec = FormatSpec(
        vars=tuple(resolve_columns(data, columns)),
        rows=None if rows is None else tuple(resolve_rows(data, rows)),
        fn=lambda value: str(fns(value)),
    )
    return data._replace(_formats=list(data._formats) + [spec])


def _with_pattern(pattern: str):
    if '{x}' not in pattern:
        raise ValueError(f"pattern must contain '{{x}}', got {pattern!r}")
    return lambda text: pattern.replace('{x}', text)


def fmt_number(
    data: "GT",
    columns=None,
    rows=None,
    decimals: Optional[int] = None,
    drop_trailing_zeros: bool = False,
    use_seps: bool = True,
    sep_mark: Optional[str] = None,
    dec_mark: Optional[str] = None,
    pattern: str = "{x}",
) -> "GT":
    """
    Format numeric values with fixed decimals and digit grouping.

    Example
    -------
    >>> fmt_number(tbl, columns='num', decimals=1)
    """
    decimals = CONFIG['DEFAULT_DECIMALS'] if decimals is None else decimals
    sep_mark = CONFIG['SEP_MARK'] if sep_mark is None else sep_mark
    dec_mark = CONFIG['DEC_MARK'] if dec_mark is None else dec_mark
    wrap = _with_pattern(pattern)
    return fmt(
        data,
        columns=columns,
        rows=rows,
        fns=lambda v: wrap(format_number(
            v,
            decimals=decimals,
            drop_trailing_zeros=drop_trailing_zeros,
            use_seps=use_seps,
            sep_mark=sep_mark,
            dec_mark=dec_mark,
        )),
    )


def fmt_integer(
    data: "GT",
    columns=None,
    rows=None,
    use_seps: bool = True,
    sep_mark: Optional[str] = None,
    pattern: str = "{x}",
) -> "GT":
    """Format numeric values rounded to integers."""
    return fmt_number(
        data,
        columns=columns,
        rows=rows,
        decimals=0,
        use_seps=use_seps,
        sep_mark=sep_mark,
        pattern=pattern,
    )


def fmt_percent(
    data: "GT",
    columns=None,
    rows=None,
    decimals: Optional[int] = None,
    drop_trailing_zeros: bool = False,
    scale_values: bool = True,
    use_seps: bool = True,
    sep_mark: Optional[str] = None,
    dec_mark: Optional[str] = None,
    pattern: str = "{x}",
) -> "GT":
    """Format values as percentages; fractions are scaled by 100 unless scale_values=False."""
    decimals = CONFIG['PERCENT_DECIMALS'] if decimals is None else decimals
    sep_mark = CONFIG['SEP_MARK'] if sep_mark is None else sep_mark
    dec_mark = CONFIG['DEC_MARK'] if dec_mark is None else dec_mark
    wrap = _with_pattern(pattern)
    return fmt(
        data,
        columns=columns,
        rows=rows,
        fns=lambda v: wrap(format_percent(
            v,
            decimals=decimals,
            scale_values=scale_values,
            drop_trailing_zeros=drop_trailing_zeros,
            use_seps=use_seps,
            sep_mark=sep_mark,
            dec_mark=dec_mark,
        )),
    )


def sub_missing(data: "GT", columns=None, rows=None, missing_text: Optional[str] = None) -> "GT":
    """Replace the text of missing cells (default: an em dash)."""
    sub = MissingSub(
        vars=tuple(resolve_columns(data, columns)),
        rows=None if rows is None else tuple(resolve_rows(data, rows)),
        text=CONFIG['SUB_MISSING_TEXT'] if missing_text is None else str(missing_text),
    )
    return data._replace(_missing_subs=list(data._missing_subs) + [sub])


__all__ = [
    'fmt',
    'fmt_number',
    'fmt_integer',
    'fmt_percent',
    'sub_missing',
]
