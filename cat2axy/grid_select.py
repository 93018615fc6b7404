from __future__ import annotations

import logging
import math

import numpy as np

from .config import DEFAULT_CONFIG, SelectionConfig

logger = logging.getLogger(__name__)

# below this many cells the grid adds nothing and every candidate is kept
MIN_GRID_CELLS = 4


def grid_shape(width: int, height: int, cell_size: int) -> tuple[int, int]:
    """Return ``(cols, rows)`` of the cell grid covering a ``width x height`` image."""
    cols = int(math.ceil(int(width) / float(cell_size)))
    rows = int(math.ceil(int(height) / float(cell_size)))
    return cols, rows


def grid_origin(width: int, height: int, cell_size: int) -> tuple[float, float]:
    """Offset that centres the grid on the image instead of pixel (0, 0)."""
    return (int(width) % cell_size) / 2.0, (int(height) % cell_size) / 2.0


def cell_indices(
    x: np.ndarray,
    y: np.ndarray,
    width: int,
    height: int,
    cell_size: int,
) -> np.ndarray:
    """Linear cell index ``i + j * cols`` for each position, ``-1`` when off-grid.

    Margins left of or above the centred grid fall into column / row 0; only
    indices at or past ``cols`` / ``rows`` are off-grid.
    """
    cols, rows = grid_shape(width, height, cell_size)
    x0, y0 = grid_origin(width, height, cell_size)
    i = np.trunc((np.asarray(x, dtype=np.float64) - x0) / cell_size).astype(np.int64)
    j = np.trunc((np.asarray(y, dtype=np.float64) - y0) / cell_size).astype(np.int64)
    i = np.maximum(i, 0)
    j = np.maximum(j, 0)
    inside = (i < cols) & (j < rows)
    return np.where(inside, i + j * cols, -1)


def select_reference_stars(
    candidates: np.ndarray,
    width: int,
    height: int,
    config: SelectionConfig | None = None,
) -> np.ndarray:
    """Pick a spatially spread subset of *candidates* (brightest first).

    Each grid cell accepts stars while its counter is ``<= per_cell_cap``,
    so a dense cell contributes at most ``per_cell_cap + 1`` stars. Stars
    whose cell falls outside the grid are dropped. Input order is kept.
    """
    cfg = config or DEFAULT_CONFIG
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    cols, rows = grid_shape(width, height, cfg.cell_size)
    if cols * rows < MIN_GRID_CELLS:
        logger.debug("grid %dx%d too small, keeping all %d candidate(s)", cols, rows, len(candidates))
        return candidates
    if len(candidates) == 0:
        return candidates

    cells = cell_indices(candidates["x"], candidates["y"], width, height, cfg.cell_size)
    counts = np.zeros(cols * rows, dtype=np.int32)
    keep = np.zeros(len(candidates), dtype=bool)
    clipped = 0
    for pos, cell in enumerate(cells):
        if cell < 0:
            clipped += 1
            continue
        if counts[cell] <= cfg.per_cell_cap:
            counts[cell] += 1
            keep[pos] = True
    selected = candidates[keep]
    logger.info(
        "grid %dx%d (cell=%d px): %d of %d candidate(s) selected, %d off-grid",
        cols,
        rows,
        cfg.cell_size,
        selected.size,
        len(candidates),
        clipped,
    )
    return selected
