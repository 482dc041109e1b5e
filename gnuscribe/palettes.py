"""Generates gnuplot palette commands from matplotlib colormaps.

A palette defines both the numbered line styles, which plot entries refer to
via their default ``linestyle``, and gnuplot's color palette used for
color-mapped plots. Palettes are looked up by (case-insensitive) colormap
name, e.g. ``dark2``, ``Set1``, ``viridis``, or given as a sequence of colors.
"""

import logging
from difflib import get_close_matches as _get_close_matches
from typing import List, Sequence, Union

import matplotlib as mpl
import matplotlib.colors
import numpy as np

from ._cfg import get_config
from .exceptions import PaletteError
from .formatting import quoted
from .tools import make_columns

log = logging.getLogger(__name__)

MAX_QUALITATIVE_COLORS: int = 20
"""Listed colormaps with at most this many colors are used color by color;
all other colormaps are sampled evenly"""

# -----------------------------------------------------------------------------


def resolve_colormap(name: str) -> mpl.colors.Colormap:
    """Looks up a registered matplotlib colormap, ignoring the case of the
    name.

    Raises:
        PaletteError: If no colormap of that name exists
    """
    names = {n.lower(): n for n in mpl.colormaps}
    try:
        return mpl.colormaps[names[name.lower()]]

    except KeyError as err:
        matches = _get_close_matches(name.lower(), names.keys(), n=5)
        _dym = ""
        if matches:
            _dym = f"Did you mean: {', '.join(names[m] for m in matches)} ?\n"

        raise PaletteError(
            f"No palette named '{name}' available! {_dym}Available palettes "
            "are the registered matplotlib colormaps:\n"
            f"{make_columns(sorted(names.values()))}"
        ) from err


def palette_colors(
    palette: Union[str, Sequence], *, num_colors: int = None
) -> List[str]:
    """Returns the palette as a list of hex color strings.

    Args:
        palette (Union[str, Sequence]): Name of a matplotlib colormap or a
            sequence of matplotlib-compatible colors
        num_colors (int, optional): How many colors to sample from continuous
            colormaps; defaults to the ``palettes.num_colors`` config entry
    """
    if not isinstance(palette, str):
        return [mpl.colors.to_hex(c) for c in palette]

    cmap = resolve_colormap(palette)

    if (
        isinstance(cmap, mpl.colors.ListedColormap)
        and cmap.N <= MAX_QUALITATIVE_COLORS
    ):
        return [mpl.colors.to_hex(c) for c in cmap(np.arange(cmap.N))]

    if num_colors is None:
        num_colors = get_config()["palettes"]["num_colors"]

    return [
        mpl.colors.to_hex(c) for c in cmap(np.linspace(0.0, 1.0, num_colors))
    ]


def palette_commands(palette: Union[str, Sequence]) -> str:
    """Returns the gnuplot commands defining line styles and the color
    palette for the given palette name or color sequence.

    Raises:
        PaletteError: On an unknown palette name or an empty color sequence
    """
    colors = palette_colors(palette)
    if not colors:
        raise PaletteError("A palette needs at least one color!")

    label = palette if isinstance(palette, str) else "custom"
    log.trace("Using palette '%s' with %d colors.", label, len(colors))

    banner = "#" + 78 * "="
    lines = [banner, f"# PALETTE ({label})", banner]
    lines += [
        f"set style line {i} linetype 1 linecolor rgb {quoted(c)}"
        for i, c in enumerate(colors, start=1)
    ]
    lines.append(f"set palette maxcolors {len(colors)}")
    lines.append(
        "set palette defined ("
        + ", ".join(f"{i} {quoted(c)}" for i, c in enumerate(colors))
        + ")"
    )
    return "\n".join(lines) + "\n"
