"""Implements the :py:class:`.Figure`, which collects settings, data sets, and
plot entries and turns them into a gnuplot script and data file.

Example:

.. code-block:: python

    import numpy as np
    from gnuscribe import Figure

    x = np.linspace(0, 5, 100)

    fig = Figure()
    fig.xlabel("x")
    fig.ylabel("y")
    fig.xrange(0, 5)
    fig.draw("lines", x, np.sin(x)).title("sin(x)").line_width(2)
    fig.draw("cos(x)", "linespoints")
    fig.save("example.pdf")
"""

import logging
import os
from difflib import get_close_matches as _get_close_matches
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ._cfg import get_config
from .dataset import write_dataset
from .exceptions import SpecError, UnknownDrawKind
from .formatting import (
    clean_path,
    command_value,
    format_number,
    format_range,
    format_size,
    join_options,
    quoted,
)
from .palettes import palette_commands
from .renderer import ArtifactFiles, RenderResult, next_figure_id, run_script
from .specs import (
    AxisLabelSpecs,
    BorderSpecs,
    FillStyleSpecs,
    GridSpecs,
    HistogramStyleSpecs,
    LegendSpecs,
    PlotSpecs,
    TicsSpecs,
    TicsSpecsMajor,
    TicsSpecsMinor,
)

log = logging.getLogger(__name__)

BANNER: str = "#" + 78 * "="

DRAW_KINDS: Dict[str, str] = {
    "curve": "lines",
    "curve_with_points": "linespoints",
    "curve_with_error_bars_x": "xerrorlines",
    "curve_with_error_bars_y": "yerrorlines",
    "curve_with_error_bars_xy": "xyerrorlines",
    "boxes": "boxes",
    "boxes_with_error_bars_y": "boxerrorbars",
    "error_bars_x": "xerrorbars",
    "error_bars_y": "yerrorbars",
    "error_bars_xy": "xyerrorbars",
    "steps": "steps",
    "steps_change_first_x": "steps",
    "steps_change_first_y": "fsteps",
    "steps_histogram": "histeps",
    "steps_filled": "fillsteps",
    "dots": "dots",
    "points": "points",
    "impulses": "impulses",
    "histogram": "",
}
"""Maps semantic drawing kinds to gnuplot style keywords. The ``histogram``
kind has no ``with`` clause; it relies on ``set style data histogram``."""

BOX_WIDTH_MODES: Tuple[str] = ("absolute", "relative")

# -----------------------------------------------------------------------------


class Figure:
    """A figure: global settings, an ordered sequence of plot entries, and
    the data sets they refer to.

    Settings are only stored when set; nothing is written to disk before
    :py:meth:`.show` or :py:meth:`.save` is called. Each figure owns a script
    and a data file whose names are derived from a process-wide unique id.
    """

    def __init__(
        self,
        *,
        out_dir: str = None,
        autoclean: bool = None,
        raise_exc: bool = None,
    ):
        """Sets up a figure with the default settings from the configuration.

        Args:
            out_dir (str, optional): Directory for the script and data files;
                defaults to the ``artifacts.directory`` config entry or, if
                that is not set, the current working directory.
            autoclean (bool, optional): Whether to remove the script and data
                files after a successful render; defaults to the
                ``artifacts.autoclean`` config entry.
            raise_exc (bool, optional): Whether renderer failures raise; if
                None, the ``renderer.raise_exc`` config entry decides.
        """
        cfg = get_config()
        self._cfg = cfg

        self._id = next_figure_id()
        self._files = ArtifactFiles(self._id, directory=out_dir)
        self._autoclean = (
            cfg["artifacts"]["autoclean"] if autoclean is None else autoclean
        )
        self.raise_exc = raise_exc

        self._palette: Union[str, Sequence, None] = None
        self._width: float = 0
        self._height: float = 0
        self._xrange: Optional[str] = None
        self._yrange: Optional[str] = None
        self._box_width: Optional[str] = None
        self._samples: Optional[str] = None

        self._data: str = ""
        self._num_datasets: int = 0
        self._plot_specs: List[PlotSpecs] = []
        self._custom_cmds: List[str] = []

        self._xlabel = AxisLabelSpecs("x")
        self._ylabel = AxisLabelSpecs("y")
        self._zlabel = AxisLabelSpecs("z")
        self._rlabel = AxisLabelSpecs("r")
        self._border = BorderSpecs()
        self._grid = GridSpecs()
        self._style_fill = FillStyleSpecs()
        self._style_histogram = HistogramStyleSpecs()
        self._tics = TicsSpecs()
        self._xtics_major_bottom = TicsSpecsMajor("x")
        self._xtics_major_top = TicsSpecsMajor("x2")
        self._xtics_minor_bottom = TicsSpecsMinor("x")
        self._xtics_minor_top = TicsSpecsMinor("x2")
        self._ytics_major_left = TicsSpecsMajor("y")
        self._ytics_major_right = TicsSpecsMajor("y2")
        self._ytics_minor_left = TicsSpecsMinor("y")
        self._ytics_minor_right = TicsSpecsMinor("y2")
        self._ztics_major = TicsSpecsMajor("z")
        self._ztics_minor = TicsSpecsMinor("z")
        self._rtics_major = TicsSpecsMajor("r")
        self._rtics_minor = TicsSpecsMinor("r")
        self._legend = LegendSpecs()

        self._apply_defaults()
        log.debug("Set up %s.", self.logstr)

    def _apply_defaults(self):
        """Applies the default look of a figure"""
        style = self._cfg["style"]

        for label in (self._xlabel, self._ylabel, self._zlabel, self._rlabel):
            label._apply_text_defaults(style)

        self._border.show().clear().left().bottom().front()
        self._border.line_type(1).line_color(style["border_color"])
        self._border.line_width(style["border_line_width"])

        self._grid.line_type(1).line_color(style["grid_color"])
        self._grid.line_width(style["grid_line_width"])
        if style.get("grid_dash_type") is not None:
            self._grid.dash_type(style["grid_dash_type"])

        self._tics.show().along_border().mirror(False).outside()
        self._tics.scale(style["tics_scale"])._apply_text_defaults(style)

        # Only bottom and left tics are shown by default
        self._xtics_major_bottom.show()
        self._xtics_minor_bottom.show()
        self._ytics_major_left.show()
        self._ytics_minor_left.show()

        for tics in (
            self._xtics_major_top,
            self._xtics_minor_top,
            self._ytics_major_right,
            self._ytics_minor_right,
            self._ztics_major,
            self._ztics_minor,
            self._rtics_major,
            self._rtics_minor,
        ):
            tics.hide()

        self._legend.show().inside().at("top", "right").vertical_layout()
        self._legend.opaque(False).box(False)
        self._legend.sample_length(style["legend_samplen"])
        self._legend.spacing(style["legend_spacing"])
        self._legend._apply_text_defaults(style)

        self._style_fill.solid().border_hide()
        self._style_histogram.data_style(True)

        self.box_width_relative(self._cfg["figure"]["box_width_relative"])

    # .. Properties ...........................................................

    @property
    def id(self) -> int:
        """The process-wide unique id of this figure"""
        return self._id

    @property
    def logstr(self) -> str:
        return f"Figure {self._id}"

    @property
    def script_path(self) -> str:
        return self._files.script_path

    @property
    def data_path(self) -> str:
        return self._files.data_path

    @property
    def data(self) -> str:
        """The accumulated text of all data sets"""
        return self._data

    @property
    def num_datasets(self) -> int:
        return self._num_datasets

    @property
    def plot_specs(self) -> Tuple[PlotSpecs]:
        """The plot entries, in drawing order"""
        return tuple(self._plot_specs)

    @property
    def custom_commands(self) -> Tuple[str]:
        return tuple(self._custom_cmds)

    @property
    def is_autoclean(self) -> bool:
        return self._autoclean

    # .. Global settings ......................................................

    def palette(self, palette: Union[str, Sequence]) -> None:
        """Sets the palette, either by name of a matplotlib colormap (e.g.
        ``dark2``, ``set1``, ``viridis``) or as a sequence of colors. The
        palette is resolved when the figure is rendered."""
        self._palette = palette

    def size(self, width: float, height: float) -> None:
        """Sets the figure size in points (1 inch = 72 points); 0 selects the
        default size"""
        self._width = width
        self._height = height

    def xrange(self, vmin: Optional[float], vmax: Optional[float]) -> None:
        """Sets the x-range; None for one end lets gnuplot autoscale it"""
        self._xrange = format_range(vmin, vmax)

    def yrange(self, vmin: Optional[float], vmax: Optional[float]) -> None:
        """Sets the y-range; None for one end lets gnuplot autoscale it"""
        self._yrange = format_range(vmin, vmax)

    def box_width(self, value: float, mode: str = "relative") -> None:
        """Sets the default width of boxes.

        Args:
            value (float): The box width
            mode (str, optional): In ``absolute`` mode, a width of one spans
                one unit along the x-axis; in ``relative`` mode, a width of
                one places the boxes side by side.
        """
        if mode not in BOX_WIDTH_MODES:
            raise SpecError(
                f"Invalid box width mode '{mode}'! Choose from: "
                f"{', '.join(BOX_WIDTH_MODES)}"
            )
        self._box_width = f"{format_number(value)} {mode}"

    def box_width_absolute(self, value: float) -> None:
        self.box_width(value, "absolute")

    def box_width_relative(self, value: float) -> None:
        self.box_width(value, "relative")

    def samples(self, value: int) -> None:
        """Sets the number of sample points for expressions"""
        self._samples = str(int(value))

    def gnuplot(self, command: str) -> None:
        """Adds a custom gnuplot command. Custom commands are placed after all
        other settings and before the plot command, in the order added."""
        self._custom_cmds.append(command)

    add_custom_command = gnuplot

    # .. Spec accessors .......................................................

    def xlabel(self, text: str) -> AxisLabelSpecs:
        return self._xlabel.text(text)

    def ylabel(self, text: str) -> AxisLabelSpecs:
        return self._ylabel.text(text)

    def zlabel(self, text: str) -> AxisLabelSpecs:
        return self._zlabel.text(text)

    def rlabel(self, text: str) -> AxisLabelSpecs:
        return self._rlabel.text(text)

    def border(self) -> BorderSpecs:
        return self._border

    def grid(self) -> GridSpecs:
        return self._grid

    def style_fill(self) -> FillStyleSpecs:
        return self._style_fill

    def style_histogram(self) -> HistogramStyleSpecs:
        return self._style_histogram

    def legend(self) -> LegendSpecs:
        return self._legend

    def tics(self) -> TicsSpecs:
        return self._tics

    def xtics(self) -> TicsSpecsMajor:
        return self._xtics_major_bottom

    def ytics(self) -> TicsSpecsMajor:
        return self._ytics_major_left

    def ztics(self) -> TicsSpecsMajor:
        return self._ztics_major

    def rtics(self) -> TicsSpecsMajor:
        return self._rtics_major

    def xtics_major_bottom(self) -> TicsSpecsMajor:
        return self._xtics_major_bottom

    def xtics_major_top(self) -> TicsSpecsMajor:
        return self._xtics_major_top

    def xtics_minor_bottom(self) -> TicsSpecsMinor:
        return self._xtics_minor_bottom

    def xtics_minor_top(self) -> TicsSpecsMinor:
        return self._xtics_minor_top

    def ytics_major_left(self) -> TicsSpecsMajor:
        return self._ytics_major_left

    def ytics_major_right(self) -> TicsSpecsMajor:
        return self._ytics_major_right

    def ytics_minor_left(self) -> TicsSpecsMinor:
        return self._ytics_minor_left

    def ytics_minor_right(self) -> TicsSpecsMinor:
        return self._ytics_minor_right

    def ztics_major(self) -> TicsSpecsMajor:
        return self._ztics_major

    def ztics_minor(self) -> TicsSpecsMinor:
        return self._ztics_minor

    def rtics_major(self) -> TicsSpecsMajor:
        return self._rtics_major

    def rtics_minor(self) -> TicsSpecsMinor:
        return self._rtics_minor

    # .. Drawing ..............................................................

    def draw(self, *args) -> PlotSpecs:
        """Draws either data or an expression.

        - ``draw(style, *sequences)`` writes the sequences as a new data set
          and draws it with the given style, e.g.
          ``fig.draw("lines", x, y)``. See :py:meth:`.draw_data`.
        - ``draw(expression, style)`` draws a mathematical expression, e.g.
          ``fig.draw("sin(x)", "lines")``. This form is selected if exactly
          two strings are passed. See :py:meth:`.draw_function`.

        Returns:
            PlotSpecs: The new plot entry, for further customization
        """
        if len(args) == 2 and all(isinstance(a, str) for a in args):
            return self.draw_function(*args)

        elif len(args) < 2:
            raise TypeError(
                "draw() needs a style and at least one sequence, or an "
                f"expression and a style, but got {len(args)} argument(s)!"
            )

        with_, *sequences = args
        return self.draw_data(with_, *sequences)

    def draw_data(self, with_: str, *sequences: Iterable) -> PlotSpecs:
        """Writes the sequences as a new data set and adds a plot entry that
        refers to it by its index.

        Sequences should all have the same length; see
        :py:func:`~gnuscribe.dataset.write_dataset` for what happens if not.
        """
        index = self._num_datasets
        self._data += write_dataset(index, *sequences)
        self._num_datasets += 1

        what = f"{quoted(self.data_path)} index {index}"
        return self._append(PlotSpecs(what, with_))

    def draw_function(self, expression: str, with_: str) -> PlotSpecs:
        """Adds a plot entry for a mathematical expression like ``sin(x)``"""
        return self._append(PlotSpecs(expression, with_))

    def draw_as(self, kind: str, *sequences: Iterable) -> PlotSpecs:
        """Draws data using a semantic drawing kind from :py:data:`.DRAW_KINDS`,
        e.g. ``fig.draw_as("error_bars_y", x, y, dy)``.

        Raises:
            UnknownDrawKind: If there is no such drawing kind
        """
        try:
            with_ = DRAW_KINDS[kind]

        except KeyError as err:
            matches = _get_close_matches(kind, DRAW_KINDS.keys(), n=3)
            _dym = f" Did you mean: {', '.join(matches)} ?" if matches else ""
            raise UnknownDrawKind(
                f"No drawing kind '{kind}' available!{_dym} Available kinds: "
                f"{', '.join(DRAW_KINDS)}"
            ) from err

        return self.draw_data(with_, *sequences)

    def _append(self, specs: PlotSpecs) -> PlotSpecs:
        self._plot_specs.append(specs)
        specs.line_style(len(self._plot_specs))
        log.debug(
            "%s: added plot entry #%d:  %s",
            self.logstr,
            len(self._plot_specs),
            specs.what,
        )
        return specs

    # .. Rendering ............................................................

    def _settings(self) -> List[str]:
        """The rendered settings, in the order they appear in the script.
        Unset settings are empty strings."""
        return [
            command_value("set xrange", self._xrange),
            command_value("set yrange", self._yrange),
            self._xlabel.render(),
            self._ylabel.render(),
            self._zlabel.render(),
            self._rlabel.render(),
            self._border.render(),
            self._grid.render(),
            self._style_fill.render(),
            self._style_histogram.render(),
            self._tics.render(),
            self._xtics_major_bottom.render(),
            self._xtics_major_top.render(),
            self._xtics_minor_bottom.render(),
            self._xtics_minor_top.render(),
            self._ytics_major_left.render(),
            self._ytics_major_right.render(),
            self._ytics_minor_left.render(),
            self._ytics_minor_right.render(),
            self._ztics_major.render(),
            self._ztics_minor.render(),
            self._rtics_major.render(),
            self._rtics_minor.render(),
            self._legend.render(),
            command_value("set boxwidth", self._box_width),
            command_value("set samples", self._samples),
        ]

    def _render_palette(self) -> str:
        palette = self._palette
        if palette is None:
            palette = self._cfg["figure"]["palette"]
        return palette_commands(palette)

    def _render_body(self) -> str:
        lines = [BANNER, "# SETUP COMMANDS", BANNER]
        lines += [s.rstrip("\n") for s in self._settings() if s]

        if self._custom_cmds:
            lines += [BANNER, "# CUSTOM EXPLICIT GNUPLOT COMMANDS", BANNER]
            lines += self._custom_cmds

        if self._plot_specs:
            lines += [BANNER, "# PLOT COMMANDS", BANNER]
            lines.append(
                "plot " + ", ".join(s.render() for s in self._plot_specs)
            )

        return "\n".join(lines) + "\n"

    def render(self) -> str:
        """Renders the figure as gnuplot commands: the palette, the settings,
        the custom commands, and the plot command.

        This has no side effects; calling it repeatedly without changing the
        figure yields identical text.
        """
        return self._render_palette() + self._render_body()

    repr = render

    def __str__(self) -> str:
        return self.render()

    def _script(self, *, terminal: str, footer: str = "") -> str:
        """Assembles a complete script with the given terminal commands
        placed between the palette and the settings"""
        return (
            self._render_palette()
            + terminal
            + self._render_body()
            + footer
            + "\n"
        )

    # .. Output ...............................................................

    def _format_size(self, *, unit: str) -> str:
        fig_cfg = self._cfg["figure"]
        return format_size(
            self._width,
            self._height,
            unit=unit,
            default_size=(fig_cfg["width"], fig_cfg["height"]),
        )

    def show_terminal_command(self) -> str:
        """The terminal command for interactive display"""
        term = self._cfg["terminals"]["interactive"]
        size = self._format_size(unit="point")
        return join_options("set terminal", term["name"], size, term["options"])

    def save_terminal_command(self, extension: str) -> str:
        """The terminal command for saving to a file with the given
        extension; unknown extensions are used as the terminal name

        Raises:
            SpecError: If the extension is empty
        """
        if not extension:
            raise SpecError(
                f"Cannot determine the output format of {self.logstr} without "
                "a file extension! Use a path ending in e.g. .pdf or .svg."
            )

        fmt = self._cfg["formats"].get(extension.lower())
        if fmt is None:
            log.caution(
                "Unknown output format '%s'; passing it on to the renderer "
                "as terminal name.",
                extension,
            )
            fmt = dict(terminal=extension, unit="point")

        size = self._format_size(unit=fmt["unit"])
        return join_options(
            "set terminal", fmt["terminal"], size, fmt.get("options")
        )

    def show(self) -> bool:
        """Shows the figure in a window.

        Writes the script and data files, runs the renderer, and, if
        auto-clean is enabled and rendering succeeded, removes the files.

        Returns:
            bool: Whether rendering succeeded
        """
        script = self._script(terminal=self.show_terminal_command() + "\n")
        return self._render_with(script, persistent=True)

    def save(self, path: Union[str, os.PathLike]) -> bool:
        """Saves the figure to a file, the extension of which determines the
        output format, e.g. ``pdf``, ``svg``, ``png``, ``eps``, or ``jpeg``.

        Returns:
            bool: Whether rendering succeeded
        """
        path = clean_path(path)
        extension = os.path.splitext(path)[1][1:]

        terminal = (
            self.save_terminal_command(extension)
            + "\n"
            + f"set output {quoted(path)}\n"
        )
        script = self._script(terminal=terminal, footer="set output\n")

        log.note("Saving %s to %s ...", self.logstr, path)
        return self._render_with(script, persistent=False)

    def _render_with(self, script: str, *, persistent: bool) -> bool:
        if not self._plot_specs:
            log.caution("%s has nothing to plot.", self.logstr)

        self._files.write_script(script)
        self.save_plot_data()

        result: RenderResult = run_script(
            self.script_path, persistent=persistent, raise_exc=self.raise_exc
        )

        if not result.success:
            log.caution(
                "Keeping script and data files for inspection:  %s, %s",
                self.script_path,
                self.data_path,
            )
            return False

        if self._autoclean:
            self.cleanup()
        return True

    def save_plot_data(self) -> bool:
        """Writes the data sets to the data file; does nothing if there are
        no data sets.

        Returns:
            bool: Whether the file was written
        """
        return self._files.write_data(self._data)

    def autoclean(self, enable: bool = True) -> None:
        """Toggles removal of the script and data files after rendering"""
        self._autoclean = enable

    def cleanup(self) -> None:
        """Removes the script and data files; missing files are ignored"""
        self._files.cleanup()
