"""
Cell formatting helpers shared across building and rendering.

Contains the default value-to-text policy plus the number formatters behind
fmt_number()/fmt_integer()/fmt_percent(), and the escaping routines that each
output format applies to plain cell text.

Policies kept consistent package-wide:
- Missing values render as CONFIG['MISSING_TEXT'] unless sub_missing() is used
- Integral floats lose the trailing ".0"; other floats use 15 significant digits
- Timestamps render as a date, adding the time only when it is non-zero
"""

from __future__ import annotations

import datetime as _dt
import math
from typing import Optional

import numpy as np
import pandas as pd

from .constants import CONFIG


def is_missing(value) -> bool:
    """Return True for None, NaN, NaT and pd.NA scalars."""
    if value is None:
        return True
    if not pd.api.types.is_scalar(value):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def format_value(value, missing_text: Optional[str] = None) -> str:
    """
    Render a raw cell value as plain text using the default policy.

    Examples
    --------
    >>> format_value(777000.0)
    '777000'
    >>> format_value(0.1111)
    '0.1111'
    >>> format_value(pd.Timestamp('2015-01-15'))
    '2015-01-15'
    """
    if missing_text is None:
        missing_text = CONFIG['MISSING_TEXT']
    if is_missing(value):
        return missing_text

    # bool must be checked before numbers (bool is an int subclass)
    if isinstance(value, (bool, np.bool_)):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if math.isinf(value):
            return "Inf" if value > 0 else "-Inf"
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return format(value, f".{CONFIG['FLOAT_SIG_DIGITS']}g")
    if isinstance(value, pd.Timestamp):
        if value == value.normalize():
            return value.strftime('%Y-%m-%d')
        if value.second == 0 and value.microsecond == 0:
            return value.strftime('%Y-%m-%d %H:%M')
        return value.strftime('%Y-%m-%d %H:%M:%S')
    if isinstance(value, _dt.datetime):
        return format_value(pd.Timestamp(value), missing_text)
    if isinstance(value, _dt.date):
        return value.isoformat()
    if isinstance(value, _dt.time):
        return value.strftime('%H:%M') if value.second == 0 else value.strftime('%H:%M:%S')
    if isinstance(value, pd.Timedelta):
        return str(value)
    return str(value)


def _is_number(value) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, (bool, np.bool_))


def format_number(
    value,
    decimals: int = 2,
    drop_trailing_zeros: bool = False,
    use_seps: bool = True,
    sep_mark: str = ",",
    dec_mark: str = ".",
) -> str:
    """
    Format a number with fixed decimals and optional digit grouping.

    Non-numeric values fall back to format_value().

    Examples
    --------
    >>> format_number(1325.81, decimals=1)
    '1,325.8'
    >>> format_number(5.5, decimals=3, drop_trailing_zeros=True)
    '5.5'
    """
    if not _is_number(value):
        return format_value(value)
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    text = f"{float(value):,.{decimals}f}" if use_seps else f"{float(value):.{decimals}f}"
    if drop_trailing_zeros and '.' in text:
        text = text.rstrip('0').rstrip('.')
    # Swap marks through a placeholder so ',' -> '.' and '.' -> ',' both work
    text = text.replace(',', '\x00').replace('.', dec_mark).replace('\x00', sep_mark)
    if text.startswith('-'):
        stripped = text.lstrip('-')
        if stripped.replace(sep_mark, '').replace(dec_mark, '').strip('0') == '':
            # Negative zero after rounding
            text = stripped
    return text


def format_percent(
    value,
    decimals: int = 1,
    scale_values: bool = True,
    drop_trailing_zeros: bool = False,
    use_seps: bool = True,
    sep_mark: str = ",",
    dec_mark: str = ".",
) -> str:
    """Format a fraction (or an already-scaled value) as a percentage."""
    if not _is_number(value):
        return format_value(value)
    scaled = float(value) * 100 if scale_values else float(value)
    return format_number(
        scaled,
        decimals=decimals,
        drop_trailing_zeros=drop_trailing_zeros,
        use_seps=use_seps,
        sep_mark=sep_mark,
        dec_mark=dec_mark,
    ) + "%"


# ============================================================================
# Escaping
# ============================================================================

_HTML_ESCAPES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
}

_LATEX_ESCAPES = {
    '\\': r'\textbackslash{}',
    '&': r'\&',
    '%': r'\%',
    '$': r'\$',
    '#': r'\#',
    '_': r'\_',
    '{': r'\{',
    '}': r'\}',
    '~': r'\textasciitilde{}',
    '^': r'\textasciicircum{}',
}

# Unicode that breaks pdflatex with the default inputenc setup
_LATEX_UNICODE = {
    '−': '$-$',      # minus sign
    '–': '--',       # en dash
    '—': '---',      # em dash
    '±': r'$\pm$',   # plus-minus
    '…': r'\ldots{}',
}


def escape_html(text: str) -> str:
    """Escape text for HTML element content and attribute values."""
    return ''.join(_HTML_ESCAPES.get(ch, ch) for ch in text)


def escape_latex(text: str) -> str:
    """
    Escape LaTeX special characters and map known unicode to LaTeX equivalents.

    Examples
    --------
    >>> escape_latex('95% CI')
    '95\\\\% CI'
    >>> escape_latex('1–2')
    '1--2'
    """
    out = []
    for ch in text:
        if ch in _LATEX_ESCAPES:
            out.append(_LATEX_ESCAPES[ch])
        elif ch in _LATEX_UNICODE:
            out.append(_LATEX_UNICODE[ch])
        else:
            out.append(ch)
    return ''.join(out)


def escape_rtf(text: str) -> str:
    """Escape RTF control characters; non-ASCII becomes \\uN? (signed 16-bit)."""
    out = []
    for ch in text:
        code = ord(ch)
        if ch in ('\\', '{', '}'):
            out.append('\\' + ch)
        elif ch == '\n':
            out.append('\\line ')
        elif code < 128:
            out.append(ch)
        elif code <= 0xFFFF:
            signed = code if code < 32768 else code - 65536
            out.append(f"\\u{signed}?")
        else:
            # Astral characters are written as a UTF-16 surrogate pair
            code -= 0x10000
            for unit in (0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)):
                out.append(f"\\u{unit - 65536}?")
    return ''.join(out)


__all__ = [
    'is_missing',
    'format_value',
    'format_number',
    'format_percent',
    'escape_html',
    'escape_latex',
    'escape_rtf',
]
