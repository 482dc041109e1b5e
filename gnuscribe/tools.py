"""This module implements tools that are generally useful in gnuscribe"""

import collections
import logging
from datetime import timedelta as _timedelta
from shutil import get_terminal_size as _get_terminal_size
from typing import List, Union

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Import private yaml module, where everything is configured

from ._yaml import load_yml, write_yml, yaml

# -----------------------------------------------------------------------------
# Dictionary operations


def recursive_update(d: dict, u: dict) -> dict:
    """Recursively updates the Mapping-like object ``d`` with the Mapping-like
    object ``u`` and returns it. Note that this does *not* create a copy of
    ``d``, but changes it mutably!

    Args:
        d (dict): The mapping to update
        u (dict): The mapping whose values are used to update ``d``

    Returns:
        dict: The updated dict ``d``
    """
    for k, v in u.items():
        if isinstance(d, collections.abc.Mapping):
            if isinstance(v, collections.abc.Mapping):
                # Continue recursion; creates a mapping if the key is missing
                d[k] = recursive_update(d.get(k, {}), v)
            else:
                # At leaf -> update value
                d[k] = v

        else:
            # Not a mapping -> create one
            d = {k: u[k]}
    return d


# -----------------------------------------------------------------------------
# Terminal messaging


def make_columns(
    items: List[str],
    *,
    wrap_width: int = None,
    fstr: str = "  {item:<{width:}s}  ",
) -> str:
    """Given a sequence of string items, returns a string with these items
    spread out over several columns. Iteration is first within the row and
    then into the next row.

    The number of columns is determined automatically from the wrap width, the
    length of the longest item in the items list, and the length of the
    evaluated format string.

    Args:
        items (List[str]): The string items to represent in columns.
        wrap_width (int, optional): The maximum width of each full row. If not
            given will determine it from the terminal size
        fstr (str, optional): The format string to use. Needs to accept the
            keys ``item`` and ``width``, the latter of which will be used for
            padding.
    """
    if not items:
        return ""

    if not wrap_width:
        wrap_width = _get_terminal_size().columns

    max_item_width = max(len(item) for item in items)
    item_str_width = len(
        fstr.format(item=" " * max_item_width, width=max_item_width)
    )
    num_cols = max(1, wrap_width // item_str_width)

    rows = []
    for i, item in enumerate(items):
        item_str = fstr.format(item=item, width=max_item_width)

        # New row or new column?
        if i % num_cols == 0:
            rows.append(item_str)
        else:
            rows[-1] += item_str

    return "\n".join(rows) + "\n"


def format_time(
    duration: Union[float, _timedelta],
    *,
    ms_precision: int = 0,
) -> str:
    """Given a duration (in seconds), formats it into a string.

    The formatting divisors are: days, hours, minutes, seconds

    If ``ms_precision`` > 0 and ``duration`` < 60, decimal places will be shown
    for the seconds.

    Args:
        duration (Union[float, datetime.timedelta]): The duration in seconds
            to format into a duration string; it can also be a timedelta
            object.
        ms_precision (int, optional): The precision of the seconds slot

    Returns:
        str: The formatted duration string
    """
    if isinstance(duration, _timedelta):
        duration = duration.total_seconds()

    divisors = (24 * 60 * 60, 60 * 60, 60, 1)
    letters = ("d", "h", "m", "s")
    remaining = float(abs(duration))
    parts = []

    for divisor, letter in zip(divisors, letters):
        time_to_represent = int(remaining / divisor)
        remaining -= time_to_represent * divisor

        if time_to_represent > 0:
            if ms_precision <= 0 or abs(duration) >= 60:
                s = f"{time_to_represent:d}{letter}"

            else:
                s = "{val:.{prec:d}f}s".format(
                    val=(time_to_represent + remaining),
                    prec=int(ms_precision),
                )

            parts.append(s)

    # If nothing was added so far, the time was below one second
    if not parts:
        if duration == 0:
            return "0s"

        elif ms_precision == 0:
            return "< 1s" if duration > 0 else "> -1s"

        parts.append(
            "{val:{tot}.{prec}f}s".format(
                val=remaining,
                tot=int(ms_precision) + 2,
                prec=int(ms_precision),
            )
        )

    if duration < 0:
        parts = ["-"] + parts

    return " ".join(parts)
