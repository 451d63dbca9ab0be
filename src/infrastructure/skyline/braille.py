"""Braille Pattern encoder for WindowMatrix.

Each glyph covers a 2x4 block of the matrix (2 columns, 4 band rows):

    1 4      0x01 0x08
    2 5  ->  0x02 0x10
    3 6      0x04 0x20
    7 8      0x40 0x80

Blocks past the matrix edge are padded with zeros. An empty block is the
blank pattern U+2800, so every line has the same number of glyphs.
"""

from __future__ import annotations

import numpy as np

from domain.skyline.value_objects import WindowMatrix

BRAILLE_BASE = 0x2800
BLOCK_ROWS = 4
BLOCK_COLUMNS = 2

DOT_WEIGHTS = np.array(
    [
        [0x01, 0x08],
        [0x02, 0x10],
        [0x04, 0x20],
        [0x40, 0x80],
    ],
    dtype=np.int64,
)


def encode_braille(matrix: WindowMatrix) -> str:
    """Return the matrix as lines of Braille glyphs joined by newlines."""
    bits = matrix.to_array().astype(np.int64)
    height, width = bits.shape
    padded_height = -(-height // BLOCK_ROWS) * BLOCK_ROWS
    padded_width = -(-width // BLOCK_COLUMNS) * BLOCK_COLUMNS

    padded = np.zeros((padded_height, padded_width), dtype=np.int64)
    padded[:height, :width] = bits

    blocks = padded.reshape(
        padded_height // BLOCK_ROWS,
        BLOCK_ROWS,
        padded_width // BLOCK_COLUMNS,
        BLOCK_COLUMNS,
    )
    masks = (blocks * DOT_WEIGHTS[np.newaxis, :, np.newaxis, :]).sum(axis=(1, 3))

    return "\n".join(
        "".join(chr(BRAILLE_BASE + int(mask)) for mask in line) for line in masks
    )
