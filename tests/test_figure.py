"""Tests the Figure, which assembles scripts and data files"""

import logging
import os
import pathlib

import numpy as np
import pytest

import gnuscribe
from gnuscribe import DRAW_KINDS, Figure, PlotSpecs
from gnuscribe.exceptions import (
    PaletteError,
    RendererError,
    RendererNotFoundError,
    SpecError,
    UnknownDrawKind,
)

from ._fixtures import *

# -----------------------------------------------------------------------------


@pytest.fixture
def fig(out_dir) -> Figure:
    return Figure(out_dir=out_dir, autoclean=False)


def plot_line(script: str) -> str:
    """Returns the single line of the script holding the plot command"""
    lines = [l for l in script.splitlines() if l.startswith("plot ")]
    assert len(lines) == 1
    return lines[0]


# -----------------------------------------------------------------------------


def test_init(out_dir):
    fig1 = Figure(out_dir=out_dir)
    fig2 = Figure(out_dir=out_dir)

    assert fig1.id != fig2.id
    assert fig1.script_path != fig2.script_path
    assert fig1.data_path != fig2.data_path
    assert fig1.script_path == os.path.join(out_dir, f"show{fig1.id}.plt")
    assert fig1.data_path == os.path.join(out_dir, f"plot{fig1.id}.dat")
    assert fig1.logstr == f"Figure {fig1.id}"

    assert fig1.is_autoclean
    assert fig1.num_datasets == 0
    assert fig1.data == ""
    assert fig1.plot_specs == ()
    assert fig1.custom_commands == ()

    # Nothing is written upon construction
    assert os.listdir(out_dir) == []

    # Auto-clean default from the configuration
    gnuscribe.update_config(artifacts=dict(autoclean=False))
    assert not Figure(out_dir=out_dir).is_autoclean
    assert Figure(out_dir=out_dir, autoclean=True).is_autoclean


def test_defaults(fig):
    """A new figure has the default look"""
    script = fig.render()

    assert script.startswith("#" + 78 * "=" + "\n# PALETTE (dark2)\n")
    assert "set style line 1 linetype 1 linecolor rgb '#1b9e77'" in script
    assert "# SETUP COMMANDS" in script

    assert (
        "set border 3 front linetype 1 linewidth 2 linecolor rgb '#404040'"
        in script
    )
    assert "set tics border nomirror out scale 0.5" in script
    assert "set xtics" in script
    assert "set mxtics" in script
    assert "set ytics" in script
    assert "set mytics" in script
    for tics in ("x2", "y2", "z", "r"):
        assert f"unset {tics}tics" in script
        assert f"unset m{tics}tics" in script

    assert "set key inside right top vertical noopaque samplen 2" in script
    assert "nobox" in script
    assert "set style fill solid noborder" in script
    assert "set style data histogram" in script
    assert "set boxwidth 0.9 relative" in script

    # Not set by default
    assert "set grid" not in script
    assert "label" not in script
    assert "range" not in script
    assert "set samples" not in script

    # An empty figure has no plot command and no custom section
    assert "plot " not in script
    assert "# PLOT COMMANDS" not in script
    assert "# CUSTOM" not in script

    # No terminal or output commands
    assert "set terminal" not in script
    assert "set output" not in script


def test_render_idempotent(fig):
    x = np.linspace(0, 1, 11)
    fig.draw("lines", x, x ** 2).title("square")
    fig.draw("sin(x)", "lines")
    fig.xlabel("x")

    assert fig.render() == fig.render()
    assert fig.repr() == fig.render()
    assert str(fig) == fig.render()

    # Rendering does not write anything
    assert fig.num_datasets == 1
    assert not os.path.exists(fig.script_path)
    assert not os.path.exists(fig.data_path)


def test_settings(fig):
    fig.xlabel("Time").font_size(14)
    fig.ylabel("Amplitude").rotate_parallel()
    fig.xrange(0, 10)
    fig.xrange(-1, 1)
    fig.yrange(None, 5)
    fig.samples(500)
    fig.box_width_absolute(0.5)
    fig.grid().show().line_width(1)
    fig.legend().outside().at("bottom", "center")
    fig.border().clear().left()

    script = fig.render()
    assert "set xlabel 'Time' textcolor rgb '#404040' font 'Georgia,14'" in (
        script
    )
    assert "set ylabel 'Amplitude'" in script
    assert "rotate parallel" in script

    # The last value wins; each range appears once
    assert script.count("set xrange") == 1
    assert "set xrange [-1:1]" in script
    assert "set yrange [*:5]" in script

    assert "set samples 500" in script
    assert "set boxwidth 0.5 absolute" in script
    assert "set boxwidth 0.9 relative" not in script
    assert "set grid xtics ytics linetype 1 linewidth 1" in script
    assert "set key outside center bottom" in script
    assert "set border 2 front" in script

    # Settings appear in a fixed order
    for before, after in (
        ("set xrange", "set yrange"),
        ("set yrange", "set xlabel"),
        ("set xlabel", "set border"),
        ("set border", "set grid"),
        ("set tics", "set xtics"),
        ("set xtics", "set key"),
        ("set key", "set boxwidth"),
        ("set boxwidth", "set samples"),
    ):
        assert script.index(before) < script.index(after)

    with pytest.raises(SpecError, match="Invalid box width mode 'wide'"):
        fig.box_width(1, "wide")


def test_spec_accessors(fig):
    """Accessors return the same objects every time"""
    assert fig.xtics() is fig.xtics_major_bottom()
    assert fig.ytics() is fig.ytics_major_left()
    assert fig.ztics() is fig.ztics_major()
    assert fig.rtics() is fig.rtics_major()
    assert fig.legend() is fig.legend()
    assert fig.style_fill() is fig.style_fill()
    assert fig.style_histogram() is fig.style_histogram()
    assert fig.tics() is fig.tics()

    fig.xtics_major_top().show().mirror(False)
    fig.ytics_minor_right().show().frequency(2)
    fig.style_histogram().clustered(gap=1)
    fig.xtics().increment(2)

    script = fig.render()
    assert "set x2tics nomirror" in script
    assert "unset x2tics" not in script
    assert "set my2tics 2" in script
    assert "set style histogram clustered gap 1" in script
    assert "set xtics 2" in script


def test_draw_data(fig):
    x = [1, 2, 3]
    specs = fig.draw("lines", x, [1, 4, 9])

    assert isinstance(specs, PlotSpecs)
    assert fig.num_datasets == 1
    assert fig.plot_specs == (specs,)
    assert specs.what == f"'{fig.data_path}' index 0"
    assert specs.line_style_index == 1

    specs2 = fig.draw("points", x, [3, 2, 1], [0.1, 0.2, 0.3])
    assert fig.num_datasets == 2
    assert specs2.what == f"'{fig.data_path}' index 1"
    assert specs2.line_style_index == 2

    # Both data sets are in the data text, in order
    assert fig.data.index("# DATASET #0") < fig.data.index("# DATASET #1")
    assert "1 1\n2 4\n3 9\n" in fig.data
    assert "1 3 0.1\n2 2 0.2\n3 1 0.3\n" in fig.data

    # Plot entries are joined in a single plot command
    assert plot_line(fig.render()) == (
        f"plot '{fig.data_path}' index 0 with lines linestyle 1, "
        f"'{fig.data_path}' index 1 with points linestyle 2"
    )


def test_draw_function(fig):
    fig.draw("sin(x)", "lines").title("sine")
    fig.draw_function("cos(x)", "linespoints").line_width(2)

    assert fig.num_datasets == 0
    assert fig.data == ""
    assert plot_line(fig.render()) == (
        "plot sin(x) title 'sine' with lines linestyle 1, "
        "cos(x) with linespoints linestyle 2 linewidth 2"
    )

    # Mixed entries share the style numbering
    fig.draw("boxes", [1, 2], [3, 4])
    assert fig.plot_specs[-1].line_style_index == 3
    assert fig.plot_specs[-1].what.endswith("index 0")


def test_draw_argument_errors(fig):
    with pytest.raises(TypeError, match="got 1 argument"):
        fig.draw("lines")

    with pytest.raises(TypeError, match="got 0 argument"):
        fig.draw()

    with pytest.raises(ValueError, match="at least one sequence"):
        fig.draw_data("lines")

    assert fig.plot_specs == ()


def test_draw_as(fig):
    x = [1, 2]
    assert "with yerrorbars" in fig.draw_as("error_bars_y", x, x, x).render()
    specs = fig.draw_as("curve_with_points", x, x)
    assert "with linespoints" in specs.render()
    assert "with fsteps" in fig.draw_as("steps_change_first_y", x, x).render()

    # Histograms rely on the data style
    hist = fig.draw_as("histogram", [3, 1, 2])
    assert " with " not in hist.render()
    assert hist.render().endswith("index 3 linestyle 4")

    with pytest.raises(UnknownDrawKind, match="Did you mean: curve"):
        fig.draw_as("curv", x, x)

    with pytest.raises(SpecError, match="No drawing kind 'foo'"):
        fig.draw_as("foo", x, x)

    assert fig.num_datasets == 4

    assert DRAW_KINDS["curve"] == "lines"
    assert DRAW_KINDS["histogram"] == ""


def test_palette(fig):
    fig.palette("set1")
    assert "# PALETTE (set1)" in fig.render()
    assert "set style line 9 " in fig.render()

    fig.palette(["red", "blue"])
    script = fig.render()
    assert "# PALETTE (custom)" in script
    assert "set style line 2 linetype 1 linecolor rgb '#0000ff'" in script
    assert "set style line 3 " not in script

    # Errors show up upon rendering
    fig.palette("no such palette")
    with pytest.raises(PaletteError, match="no such palette"):
        fig.render()

    # Default from the configuration
    gnuscribe.update_config(figure=dict(palette="tab10"))
    assert "# PALETTE (tab10)" in Figure().render()


def test_custom_commands(fig):
    fig.draw("x", "lines")
    fig.gnuplot("set label 1 'A' at 0,0")
    fig.add_custom_command("set arrow from 0,0 to 1,1")

    assert fig.custom_commands == (
        "set label 1 'A' at 0,0",
        "set arrow from 0,0 to 1,1",
    )

    script = fig.render()
    idx_setup = script.index("# SETUP COMMANDS")
    idx_custom = script.index("# CUSTOM EXPLICIT GNUPLOT COMMANDS")
    idx_label = script.index("set label 1")
    idx_arrow = script.index("set arrow")
    idx_plot = script.index("\nplot ")

    assert idx_setup < idx_custom < idx_label < idx_arrow < idx_plot


def test_terminal_commands(fig):
    assert fig.show_terminal_command() == (
        "set terminal qt size 360,200 enhanced font 'Georgia,12'"
    )

    fig.size(432, 288)
    assert fig.show_terminal_command().startswith(
        "set terminal qt size 432,288"
    )
    assert fig.save_terminal_command("svg") == (
        "set terminal svg size 432,288 enhanced rounded font 'Georgia,12'"
    )
    assert fig.save_terminal_command("PDF").startswith(
        "set terminal pdfcairo size 6in,4in"
    )
    assert fig.save_terminal_command("png").startswith(
        "set terminal pngcairo size 432,288"
    )
    assert fig.save_terminal_command("eps").startswith(
        "set terminal epscairo size"
    )
    assert fig.save_terminal_command("jpg").startswith("set terminal jpeg")

    # Unknown extensions are used as terminal name
    assert fig.save_terminal_command("tikz") == (
        "set terminal tikz size 432,288"
    )

    # Zero size selects the default
    fig.size(0, 0)
    assert "size 5in," in fig.save_terminal_command("pdf")


def test_save(fig, fake_renderer, out_dir):
    x = np.arange(5)
    fig.draw("lines", x, x ** 2)

    out_path = os.path.join(out_dir, "out.pdf")
    assert fig.save(out_path)

    assert fake_renderer.calls == [["gnuplot", fig.script_path]]
    script = fake_renderer.scripts[0]

    assert f"set output '{out_path}'\n" in script
    assert script.endswith("set output\n\n")
    assert "set terminal pdfcairo size 5in," in script

    # Order of the sections
    assert (
        script.index("# PALETTE")
        < script.index("set terminal")
        < script.index("set output '")
        < script.index("# SETUP COMMANDS")
        < script.index("# PLOT COMMANDS")
    )

    # Script and data are kept on disk, as autoclean is disabled
    assert read(fig.script_path) == script
    assert read(fig.data_path) == fig.data
    assert fake_renderer.data == [fig.data]


def test_save_formats(fig, fake_renderer, out_dir):
    """Different formats lead to different terminal commands"""
    fig.draw("x**2", "lines")

    assert fig.save(os.path.join(out_dir, "out.svg"))
    assert fig.save(os.path.join(out_dir, "out.pdf"))
    svg_script, pdf_script = fake_renderer.scripts

    assert "set terminal svg size 360,200" in svg_script
    assert "pdfcairo" not in svg_script
    assert "set terminal pdfcairo" in pdf_script

    # Everything apart from terminal and output is identical
    skip = ("set terminal", "set output")
    strip = lambda s: [l for l in s.splitlines() if not l.startswith(skip)]
    assert strip(svg_script) == strip(pdf_script)


def test_save_paths(fig, fake_renderer, out_dir):
    fig.draw("x", "lines")

    # Quotes are removed, backslashes converted
    path = os.path.join(out_dir, "it's.png")
    assert fig.save(path)
    assert f"set output '{os.path.join(out_dir, 'its.png')}'" in (
        fake_renderer.scripts[-1]
    )

    # Path-like objects
    assert fig.save(pathlib.Path(out_dir) / "fig.svg")
    assert "set terminal svg" in fake_renderer.scripts[-1]


def test_show(fig, fake_renderer):
    fig.draw("sin(x)", "lines")
    assert fig.show()

    assert fake_renderer.calls == [["gnuplot", "-persist", fig.script_path]]
    script = fake_renderer.scripts[0]
    assert "set terminal qt size 360,200" in script
    assert "set output" not in script

    # No data, so no data file
    assert not os.path.exists(fig.data_path)
    assert fake_renderer.data == []


def test_autoclean(out_dir, fake_renderer):
    fig = Figure(out_dir=out_dir)
    fig.draw("lines", [1, 2], [3, 4])

    assert fig.save(os.path.join(out_dir, "a.png"))
    assert not os.path.exists(fig.script_path)
    assert not os.path.exists(fig.data_path)

    # The renderer did see both files
    assert fake_renderer.data == [fig.data]

    # Disabling it keeps the files
    fig.autoclean(False)
    assert not fig.is_autoclean
    assert fig.show()
    assert os.path.exists(fig.script_path)
    assert os.path.exists(fig.data_path)

    # Explicit cleanup; doing it twice is fine
    fig.cleanup()
    assert not os.path.exists(fig.script_path)
    assert not os.path.exists(fig.data_path)
    fig.cleanup()

    # Data can also be written explicitly
    assert fig.save_plot_data()
    assert read(fig.data_path) == fig.data
    assert not Figure(out_dir=out_dir).save_plot_data()


def test_render_failure(out_dir, fake_renderer, caplog):
    """Failures are logged, and the files are kept for inspection"""
    fake_renderer.returncode = 1
    fake_renderer.stderr = "line 12: undefined variable: foo"

    fig = Figure(out_dir=out_dir)
    fig.draw("foo(x)", "lines")

    with caplog.at_level(logging.DEBUG, logger="gnuscribe"):
        assert not fig.save(os.path.join(out_dir, "out.pdf"))

    assert "undefined variable" in caplog.text
    assert os.path.exists(fig.script_path)

    # Raising, either via the figure or the configuration
    fig = Figure(out_dir=out_dir, raise_exc=True)
    fig.draw("foo(x)", "lines")
    with pytest.raises(RendererError, match="undefined variable"):
        fig.show()
    assert os.path.exists(fig.script_path)

    gnuscribe.update_config(renderer=dict(raise_exc=True))
    with pytest.raises(RendererError, match="exited with status 1"):
        Figure(out_dir=out_dir).save(os.path.join(out_dir, "out.svg"))


def test_renderer_not_found(fig, monkeypatch, out_dir):
    def raise_not_found(args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", args[0])

    monkeypatch.setattr(gnuscribe.renderer.subprocess, "run", raise_not_found)

    fig.draw("x", "lines")
    assert not fig.save(os.path.join(out_dir, "out.pdf"))
    assert os.path.exists(fig.script_path)

    fig.raise_exc = True
    with pytest.raises(RendererNotFoundError, match="Make sure gnuplot"):
        fig.show()


def test_empty_figure(fig, fake_renderer, out_dir, caplog):
    with caplog.at_level(logging.DEBUG, logger="gnuscribe"):
        assert fig.save(os.path.join(out_dir, "empty.svg"))

    assert "nothing to plot" in caplog.text
    assert "plot " not in fake_renderer.scripts[0]
    assert not os.path.exists(fig.data_path)


def test_two_data_draws(fig):
    """Each data draw adds one block, referenced by its index"""
    fig.draw("lines", [1, 2, 3], [4, 5, 6])
    fig.draw("points", [7, 8], [9, 10])

    blocks = fig.data.split("# DATASET #")[1:]
    assert len(blocks) == 2
    assert blocks[0].startswith("0\n")
    assert blocks[1].startswith("1\n")

    is_row = lambda line: line and not line.startswith("#")
    rows = lambda block: [l for l in block.splitlines()[1:] if is_row(l)]
    assert rows(blocks[0]) == ["1 4", "2 5", "3 6"]
    assert rows(blocks[1]) == ["7 9", "8 10"]

    assert ", " in plot_line(fig.render())
    assert "index 0 with lines" in plot_line(fig.render())
    assert "index 1 with points" in plot_line(fig.render())


def test_data_path_with_special_characters(tmp_path, fake_renderer):
    """The plot clause refers to the data file that was actually written"""
    out_dir = str(tmp_path / "it's data")
    fig = Figure(out_dir=out_dir, autoclean=False)
    specs = fig.draw("lines", [1, 2], [3, 4])

    assert specs.what == (
        "'" + fig.data_path.replace("'", "''") + "' index 0"
    )
    assert "it''s data" in specs.what

    assert fig.show()
    assert os.path.isfile(fig.data_path)
    assert fake_renderer.data == [fig.data]
    assert f"plot {specs.what} with lines" in fake_renderer.scripts[0]


def test_save_without_extension(fig, fake_renderer, out_dir):
    fig.draw("x", "lines")

    with pytest.raises(SpecError, match="without a file extension"):
        fig.save(os.path.join(out_dir, "figure"))

    with pytest.raises(SpecError, match="without a file extension"):
        fig.save_terminal_command("")

    # Nothing was rendered
    assert fake_renderer.calls == []
    assert not os.path.exists(fig.script_path)


def test_size_defaults_from_construction(fig):
    """Configuration changes after construction do not affect the figure"""
    gnuscribe.update_config(
        figure=dict(width=720, height=144),
        terminals=dict(interactive=dict(name="wxt")),
    )

    assert fig.show_terminal_command().startswith(
        "set terminal qt size 360,200 "
    )
    assert fig.save_terminal_command("pdf").startswith(
        "set terminal pdfcairo size 5in,"
    )

    # New figures use the updated configuration
    assert Figure().show_terminal_command().startswith(
        "set terminal wxt size 720,144 "
    )
