"""Custom gnuscribe exception classes."""

from typing import Callable, List, Tuple

# -----------------------------------------------------------------------------


def raise_improved_exception(
    exc: Exception,
    *,
    hints: List[Tuple[Callable, str]] = [],
) -> None:
    """Improves the given exception by appending one or multiple hint messages.

    The ``hints`` argument should be a list of 2-tuples, consisting of a unary
    matching function, expecting the exception as only argument, and a hint
    that is part of the new error message. Attributes of the given exception
    are carried over to the improved one.
    """
    matching_hints = []
    for match_func, hint in hints:
        if match_func(exc):
            matching_hints.append(hint)

    if matching_hints:
        _hints = "\n".join(f"  - {h}" for h in matching_hints)
        improved = type(exc)(
            str(exc) + f"\n\nHint(s) how to resolve this:\n{_hints}"
        )
        improved.__dict__.update(exc.__dict__)
        raise improved from exc

    # Re-raise the active exception
    raise


# -----------------------------------------------------------------------------


class GnuscribeError(Exception):
    """Base class for all gnuscribe-related errors"""


# Configuration ...............................................................


class ConfigError(GnuscribeError, ValueError):
    """Raised upon a bad package or user configuration"""


# Figure specification ........................................................


class SpecError(GnuscribeError, ValueError):
    """Raised upon invalid arguments to a figure or plot specification"""


class PaletteError(SpecError):
    """Raised if a palette could not be resolved"""


class UnknownDrawKind(SpecError):
    """Raised upon a drawing kind that is not part of the draw kind table"""


# Rendering ...................................................................


class RendererError(GnuscribeError, RuntimeError):
    """Raised if the external renderer exited with a non-zero status"""

    def __init__(self, msg: str, *, returncode: int = None, stderr: str = ""):
        super().__init__(msg)
        self.returncode = returncode
        self.stderr = stderr


class RendererNotFoundError(RendererError):
    """Raised if the renderer executable could not be found"""
