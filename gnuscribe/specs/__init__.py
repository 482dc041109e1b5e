"""Specification objects that collect style options and render them as
gnuplot commands or command clauses"""

from .grid import GridSpecs
from .legend import LegendSpecs
from .plot import SMOOTH_MODES, PlotSpecs
from .style import BorderSpecs, FillStyleSpecs, HistogramStyleSpecs
from .text import AxisLabelSpecs
from .tics import TicsSpecs, TicsSpecsMajor, TicsSpecsMinor
