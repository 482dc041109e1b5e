""":py:mod:`gnuscribe` assembles gnuplot scripts and data files from numeric
data and style settings, and runs gnuplot on them to show or save figures.

The central class is the :py:class:`~gnuscribe.figure.Figure`: configure it,
draw data or expressions into it, then call ``show()`` or ``save(path)``.
"""

__version__ = "0.3.0"
"""Package version"""

# Set up the root logger such that the logging configuration is applied
from .logging import getLogger as _getLogger

_log = _getLogger(__name__)

# -- Most important gnuscribe classes and functions ---------------------------
from ._cfg import get_config, reset_config, update_config
from .figure import DRAW_KINDS, Figure
from .specs import PlotSpecs
