"""Serializes parallel sequences into indexed blocks of a gnuplot data file"""

import logging
from typing import Iterable, List

import numpy as np

from .formatting import format_value

log = logging.getLogger(__name__)

BANNER: str = "#" + 78 * "="
"""Comment line framing the block headers"""

BLOCK_SEPARATOR: str = "\n\n"
"""Two blank lines; this is what makes gnuplot treat a block as a separately
indexable data set"""

# -----------------------------------------------------------------------------


def to_columns(*sequences: Iterable) -> List[np.ndarray]:
    """Converts the given sequences into one-dimensional arrays.

    Scalars become length-one columns; multi-dimensional input is flattened.
    """
    return [np.ravel(np.asarray(seq)) for seq in sequences]


def block_header(index: int) -> str:
    """Returns the comment header that marks the start of a data block"""
    return f"{BANNER}\n# DATASET #{index}\n{BANNER}\n"


def write_dataset(index: int, *sequences: Iterable) -> str:
    """Writes the given sequences as a data block with the given index.

    Each row contains the values of all sequences at that position, in the
    order in which the sequences were passed. If the sequences differ in
    length, only as many rows as the shortest sequence has are written and
    a warning is logged; the data is not padded.

    Args:
        index (int): The index of this block within the data file; only used
            for the block header
        *sequences (Iterable): The columns; the first is conventionally the
            independent variable

    Returns:
        str: The data block text, ending with the block separator

    Raises:
        ValueError: If no sequence was given
    """
    if not sequences:
        raise ValueError("Need at least one sequence to write a data set!")

    columns = to_columns(*sequences)
    lengths = [len(c) for c in columns]
    num_rows = min(lengths)

    if len(set(lengths)) > 1:
        log.caution(
            "Data set #%d got sequences of unequal lengths %s; only the "
            "first %d rows are written.",
            index,
            lengths,
            num_rows,
        )

    rows = (
        " ".join(format_value(col[i]) for col in columns)
        for i in range(num_rows)
    )
    body = "".join(row + "\n" for row in rows)

    log.trace("Wrote data set #%d with %d rows.", index, num_rows)
    return block_header(index) + body + BLOCK_SEPARATOR
