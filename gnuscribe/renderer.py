"""Manages the script and data files of a figure and invokes the renderer,
gnuplot, on them.

The renderer is run as a blocking subprocess. Failures, i.e. a missing
executable or a non-zero exit status, are either raised as
:py:class:`~gnuscribe.exceptions.RendererError` or logged, depending on the
``raise_exc`` argument or the ``renderer.raise_exc`` configuration entry.
"""

import itertools
import logging
import os
import subprocess
import threading
import time
from typing import NamedTuple, Optional

from ._cfg import get_config
from .exceptions import RendererError, RendererNotFoundError
from .exceptions import raise_improved_exception as _raise_improved_exception
from .tools import format_time as _format_time

log = logging.getLogger(__name__)

_fmt_time = lambda t: _format_time(t, ms_precision=1)

_FIGURE_IDS = itertools.count()
_FIGURE_IDS_LOCK = threading.Lock()

# -----------------------------------------------------------------------------


def next_figure_id() -> int:
    """Returns the next process-wide unique figure id, starting at zero.

    Ids are handed out under a lock such that figures created concurrently
    from several threads never share artifact file names.
    """
    with _FIGURE_IDS_LOCK:
        return next(_FIGURE_IDS)


# -----------------------------------------------------------------------------


class ArtifactFiles:
    """The script and data files belonging to one figure"""

    def __init__(
        self,
        fig_id: int,
        *,
        directory: str = None,
        script_fstr: str = None,
        data_fstr: str = None,
    ):
        """Determines the artifact file paths for the figure with the given
        id; no files are created here.

        Args:
            fig_id (int): The figure id
            directory (str, optional): Directory to place the files in. If
                not given, uses the ``artifacts.directory`` config entry; if
                that is not set either, paths are relative to the current
                working directory.
            script_fstr (str, optional): Format string for the script file
                name, receiving the ``id`` key
            data_fstr (str, optional): Format string for the data file name,
                receiving the ``id`` key
        """
        cfg = get_config()["artifacts"]
        directory = directory if directory is not None else cfg["directory"]
        script_fstr = script_fstr if script_fstr else cfg["script_fstr"]
        data_fstr = data_fstr if data_fstr else cfg["data_fstr"]

        self._directory = os.path.expanduser(directory) if directory else ""
        self._script_path = os.path.join(
            self._directory, script_fstr.format(id=fig_id)
        )
        self._data_path = os.path.join(
            self._directory, data_fstr.format(id=fig_id)
        )

    @property
    def script_path(self) -> str:
        return self._script_path

    @property
    def data_path(self) -> str:
        return self._data_path

    def write_script(self, text: str) -> None:
        """Writes (and truncates) the script file"""
        self._write(self._script_path, text)
        log.remark("Wrote script to %s .", self._script_path)

    def write_data(self, text: str) -> bool:
        """Writes (and truncates) the data file, unless there is no data.

        Returns:
            bool: Whether a file was written
        """
        if not text:
            log.debug("No data to write; not creating %s .", self._data_path)
            return False

        self._write(self._data_path, text)
        log.remark("Wrote data to %s .", self._data_path)
        return True

    def cleanup(self) -> None:
        """Removes both files. Missing files and removal errors are ignored."""
        for path in (self._script_path, self._data_path):
            try:
                os.remove(path)

            except FileNotFoundError:
                pass

            except OSError as exc:
                log.debug(
                    "Failed to remove %s!  %s: %s",
                    path,
                    type(exc).__name__,
                    exc,
                )

            else:
                log.debug("Removed %s .", path)

    def _write(self, path: str, text: str) -> None:
        if self._directory:
            os.makedirs(self._directory, exist_ok=True)

        with open(path, "w") as f:
            f.write(text)


# -----------------------------------------------------------------------------


class RenderResult(NamedTuple):
    """The outcome of a renderer invocation"""

    returncode: Optional[int]
    """Exit status of the renderer; None if it could not be started"""

    stderr: str
    """Captured error output of the renderer"""

    duration: float
    """Wall time of the invocation in seconds"""

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_script(
    script_path: str,
    *,
    persistent: bool,
    executable: str = None,
    raise_exc: bool = None,
) -> RenderResult:
    """Runs the renderer on the given script and blocks until it exits.

    Args:
        script_path (str): Path of the script to run
        persistent (bool): Whether the renderer should keep its window open
            after the script was processed (for interactive display)
        executable (str, optional): The renderer executable; defaults to the
            ``renderer.executable`` config entry. It is resolved from
            ``PATH`` at invocation time.
        raise_exc (bool, optional): Whether to raise upon failure. If None,
            uses the ``renderer.raise_exc`` config entry. If not raising,
            failures are logged as errors.

    Returns:
        RenderResult: The outcome of the invocation

    Raises:
        RendererNotFoundError: If the executable was not found
        RendererError: If the renderer exited with a non-zero status
    """
    cfg = get_config()["renderer"]
    executable = executable if executable else cfg["executable"]
    raise_exc = raise_exc if raise_exc is not None else cfg["raise_exc"]

    args = [executable]
    if persistent and cfg.get("persist_flag"):
        args.append(cfg["persist_flag"])
    args.append(script_path)

    log.progress("Invoking renderer:  %s", " ".join(args))
    t0 = time.time()

    try:
        # A persisting window process inherits the standard streams; capturing
        # them would block until that window is closed.
        capture = None if persistent else subprocess.PIPE
        proc = subprocess.run(args, stdout=capture, stderr=capture, text=True)

    except FileNotFoundError as err:
        result = RenderResult(None, str(err), time.time() - t0)
        if not raise_exc:
            log.error(
                "Renderer executable '%s' not found; figure was not "
                "rendered!",
                executable,
            )
            return result

        try:
            raise RendererNotFoundError(
                f"Could not invoke renderer '{executable}'! {err}",
                stderr=str(err),
            ) from err

        except RendererNotFoundError as exc:
            _raise_improved_exception(
                exc,
                hints=[
                    (
                        lambda _: True,
                        "Make sure gnuplot is installed and available on "
                        "the PATH, or set the `renderer.executable` config "
                        "entry to the full path of the executable.",
                    )
                ],
            )

    result = RenderResult(
        proc.returncode, proc.stderr or "", time.time() - t0
    )

    if result.success:
        log.success(
            "Rendered %s in %s.", script_path, _fmt_time(result.duration)
        )
        if result.stderr:
            log.caution("Renderer output:\n%s", result.stderr.strip())
        return result

    msg = (
        f"Renderer exited with status {result.returncode} while processing "
        f"{script_path}!"
    )
    if result.stderr:
        msg += f" Its error output was:\n{result.stderr.strip()}"

    if raise_exc:
        raise RendererError(
            msg, returncode=result.returncode, stderr=result.stderr
        )

    log.error(msg)
    return result
