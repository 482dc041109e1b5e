"""Converts numeric and textual values into gnuplot's literal syntax.

All functions in this module are pure: they only transform their arguments
into strings and never perform I/O.
"""

import math
import os
from typing import Any, Optional, Tuple, Union

import matplotlib as mpl
import matplotlib.colors
import numpy as np

from ._cfg import get_config

POINTS_PER_INCH: float = 72.0
"""Number of points in an inch; gnuplot's print terminals use inches"""

SIZE_UNITS: Tuple[str] = ("point", "inch")
"""Supported units for :py:func:`.format_size`"""

_SCIENTIFIC_BELOW: float = 1e-4
_SCIENTIFIC_ABOVE: float = 1e16

# -----------------------------------------------------------------------------
# Numbers


def format_number(value: Union[int, float, np.number, bool]) -> str:
    """Formats a number in the shortest representation that preserves its
    value, the way gnuplot parses it back.

    Integral values are written without a decimal point, other floats with
    the shortest digit string that round-trips. Very small or very large
    magnitudes switch to scientific notation. Non-finite values are written
    as ``NaN``, ``Inf``, and ``-Inf``.
    """
    if isinstance(value, (bool, np.bool_)):
        return "1" if value else "0"

    if isinstance(value, (int, np.integer)):
        return str(int(value))

    value = float(value)

    if math.isnan(value):
        return "NaN"
    elif math.isinf(value):
        return "Inf" if value > 0 else "-Inf"
    elif value == 0.0:
        return "0"

    magnitude = abs(value)
    if _SCIENTIFIC_BELOW <= magnitude < _SCIENTIFIC_ABOVE:
        return np.format_float_positional(value, trim="-")
    return np.format_float_scientific(value, trim="-", exp_digits=2)


def format_value(value: Any) -> str:
    """Formats a single data value: numbers via :py:func:`.format_number`,
    everything else as a double-quoted string.

    Inner double quotes cannot be escaped in gnuplot data files and are
    replaced by single quotes.
    """
    if isinstance(value, (bytes, np.bytes_)):
        value = value.decode("utf8")

    if isinstance(value, (int, float, np.number, np.bool_)):
        return format_number(value)

    text = str(value).replace('"', "'")
    return f'"{text}"'


def format_range(vmin: Optional[float], vmax: Optional[float]) -> str:
    """Formats a range as ``[min:max]``; an end that is None is written as
    ``*``, meaning gnuplot autoscales that end."""
    lower = "*" if vmin is None else format_number(vmin)
    upper = "*" if vmax is None else format_number(vmax)
    return f"[{lower}:{upper}]"


def format_size(
    width: Optional[float],
    height: Optional[float],
    *,
    unit: str = "point",
    default_size: Tuple[float, float] = None,
) -> str:
    """Formats a terminal size specification.

    Args:
        width (float, optional): Width in points; 0 or None selects the
            default width from the configuration
        height (float, optional): Height in points; 0 or None selects the
            default height from the configuration
        unit (str, optional): Either ``point`` (``size W,H``) or ``inch``
            (``size Xin,Yin``, converted from points), the latter being what
            print-oriented terminals like ``pdfcairo`` expect.
        default_size (Tuple[float, float], optional): The (width, height) to
            use for zero dimensions; if not given, these are taken from the
            ``figure`` section of the current configuration

    Raises:
        ValueError: On invalid ``unit``
    """
    if unit not in SIZE_UNITS:
        raise ValueError(
            f"Invalid size unit '{unit}'! Choose from: {', '.join(SIZE_UNITS)}"
        )

    if default_size is None:
        fig_cfg = get_config()["figure"]
        default_size = (fig_cfg["width"], fig_cfg["height"])

    width = width if width else default_size[0]
    height = height if height else default_size[1]

    if unit == "inch":
        return "size {}in,{}in".format(
            format_number(width / POINTS_PER_INCH),
            format_number(height / POINTS_PER_INCH),
        )
    return f"size {format_number(width)},{format_number(height)}"


# -----------------------------------------------------------------------------
# Strings


def quoted(text: str) -> str:
    """Returns a single-quoted gnuplot string literal.

    Within single quotes, gnuplot does not interpret backslash escapes; a
    single quote is escaped by doubling it.
    """
    return "'" + str(text).replace("'", "''") + "'"


def clean_path(path: Union[str, os.PathLike]) -> str:
    """Rewrites a file path such that it can be safely placed inside a quoted
    gnuplot string: backslashes are turned into forward slashes (which
    gnuplot accepts on all platforms) and quote characters are removed."""
    path = os.fspath(path)
    return path.replace("\\", "/").replace("'", "").replace('"', "")


def option_value(option: str, value: Any) -> str:
    """Returns ``"<option> <value>"`` or an empty string if ``value`` is None
    or empty"""
    if value is None or value == "":
        return ""
    return f"{option} {value}"


def command_value(command: str, value: Any) -> str:
    """Returns ``"<command> <value>\\n"`` or an empty string if ``value`` is
    None or empty"""
    if value is None or value == "":
        return ""
    return f"{command} {value}\n"


def join_options(*parts: str) -> str:
    """Joins the non-empty option strings by a single space"""
    return " ".join(p for p in parts if p)


def format_color(color: Any) -> str:
    """Returns a gnuplot color specification for the given color.

    Everything matplotlib can interpret as a color (names, hex strings, RGB
    tuples, ``C0``-style cycle references) is converted to
    ``rgb '#rrggbb'``. Other strings are assumed to be gnuplot color names
    and are passed through.
    """
    try:
        return "rgb " + quoted(mpl.colors.to_hex(color))

    except ValueError:
        if isinstance(color, str):
            return "rgb " + quoted(color)
        raise


def format_font(name: Optional[str], size: Optional[float]) -> str:
    """Returns ``font '<name>,<size>'`` or an empty string if neither is
    given"""
    if not name and not size:
        return ""
    return "font " + quoted(
        f"{name or ''},{format_number(size) if size else ''}"
    )
